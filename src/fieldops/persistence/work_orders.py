"""Record store access for work orders."""

from __future__ import annotations

import logging
from typing import Any, Hashable, Protocol, Sequence

import httpx
from supabase import AsyncClient, PostgrestAPIError

from ..config import settings
from ..db.supabase import get_async_supabase_client
from ..models.domain import UpdateOutcome

logger = logging.getLogger(__name__)


class WorkOrderStore(Protocol):
    async def update_by_id(self, work_order_id: Hashable, fields: dict[str, Any]) -> UpdateOutcome:
        ...

    async def fetch_by_ids(self, work_order_ids: Sequence[Hashable], select: str = "*") -> list[dict]:
        ...


class SupabaseWorkOrderStore:
    """Work order store backed by the Supabase ``work_orders`` table.

    Update failures reported by PostgREST or the HTTP layer come back as failed
    outcomes so the batch executor can record them per item.
    """

    def __init__(self, client: AsyncClient, table: str | None = None) -> None:
        self.client = client
        self.table = table or settings.work_orders_table

    async def update_by_id(self, work_order_id: Hashable, fields: dict[str, Any]) -> UpdateOutcome:
        try:
            await self.client.table(self.table).update(fields).eq("id", work_order_id).execute()
        except PostgrestAPIError as exc:
            logger.warning(f"Update of work order {work_order_id} rejected: {exc.message}")
            return UpdateOutcome(success=False, error=exc.message or str(exc))
        except httpx.HTTPError as exc:
            logger.warning(f"Update of work order {work_order_id} failed: {exc}")
            return UpdateOutcome(success=False, error=str(exc) or "Network error")
        return UpdateOutcome(success=True)

    async def fetch_by_ids(self, work_order_ids: Sequence[Hashable], select: str = "*") -> list[dict]:
        if not work_order_ids:
            return []
        response = await self.client.table(self.table).select(select).in_("id", list(work_order_ids)).execute()
        return list(response.data or [])


async def get_work_order_store() -> WorkOrderStore:
    client = await get_async_supabase_client()
    if client is None:
        raise RuntimeError("Supabase is not configured. Set FIELDOPS_SUPABASE_URL and FIELDOPS_SUPABASE_KEY.")
    return SupabaseWorkOrderStore(client)
