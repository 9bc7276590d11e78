"""Selection session endpoints.

Each session wraps a ``SelectionManager`` held in ``app.state.selections``.
Handlers are async so the auto-exit grace timer lands on the server loop.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, HTTPException, Request, status

from ...schemas.selection import SelectAllRequest, SelectionCreateRequest, SelectionState, ToggleRequest
from ...services.selection import SelectionManager

router = APIRouter(prefix="/selections", tags=["selections"])


def _sessions(request: Request) -> dict[str, SelectionManager[str]]:
    return request.app.state.selections


def _get(request: Request, session_id: str) -> SelectionManager[str]:
    manager = _sessions(request).get(session_id)
    if manager is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Selection session '{session_id}' not found")
    return manager


def _state(session_id: str, manager: SelectionManager[str], accepted: bool = True) -> SelectionState:
    return SelectionState(
        session_id=session_id,
        mode=manager.mode.value,
        selected_ids=list(manager.selected_ids),
        selection_count=manager.selection_count,
        max_selections=manager.max_selections,
        accepted=accepted,
    )


@router.post("", response_model=SelectionState, status_code=status.HTTP_201_CREATED)
async def create_selection(payload: SelectionCreateRequest, request: Request) -> SelectionState:
    session_id = uuid.uuid4().hex
    sessions = _sessions(request)
    manager: SelectionManager[str] = SelectionManager(max_selections=payload.max_selections)

    def _drop_when_inactive(_selected: tuple[str, ...]) -> None:
        # covers the grace-period auto-exit as well as DELETE
        if not manager.is_active:
            sessions.pop(session_id, None)

    manager.on_change = _drop_when_inactive
    manager.enter_mode()
    sessions[session_id] = manager
    return _state(session_id, manager)


@router.get("/{session_id}", response_model=SelectionState)
async def get_selection(session_id: str, request: Request) -> SelectionState:
    return _state(session_id, _get(request, session_id))


@router.post("/{session_id}/toggle", response_model=SelectionState)
async def toggle(session_id: str, payload: ToggleRequest, request: Request) -> SelectionState:
    manager = _get(request, session_id)
    accepted = manager.toggle(payload.id)
    return _state(session_id, manager, accepted=accepted)


@router.post("/{session_id}/select-all", response_model=SelectionState)
async def select_all(session_id: str, payload: SelectAllRequest, request: Request) -> SelectionState:
    manager = _get(request, session_id)
    manager.select_all(payload.ids)
    return _state(session_id, manager)


@router.post("/{session_id}/clear", response_model=SelectionState)
async def clear(session_id: str, request: Request) -> SelectionState:
    manager = _get(request, session_id)
    manager.clear()
    return _state(session_id, manager)


@router.delete("/{session_id}", response_model=SelectionState)
async def exit_selection(session_id: str, request: Request) -> SelectionState:
    manager = _get(request, session_id)
    manager.exit_mode()
    _sessions(request).pop(session_id, None)
    return _state(session_id, manager)
