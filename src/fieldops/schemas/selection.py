"""Selection session schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class SelectionCreateRequest(BaseModel):
    max_selections: Optional[int] = Field(default=None, ge=1)


class ToggleRequest(BaseModel):
    id: str


class SelectAllRequest(BaseModel):
    ids: List[str]


class SelectionState(BaseModel):
    session_id: str
    mode: str
    selected_ids: List[str]
    selection_count: int
    max_selections: int
    accepted: bool = True
