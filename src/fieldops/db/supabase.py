"""Supabase clients for the Python backend."""

import logging
from functools import lru_cache

from supabase import AsyncClient, Client, acreate_client, create_client

from ..config import settings

logger = logging.getLogger(__name__)

_async_client: AsyncClient | None = None


def _credentials_configured() -> bool:
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase credentials not configured (missing URL or key)")
        return False
    return True


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not _credentials_configured():
        return None
    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None


async def get_async_supabase_client() -> AsyncClient | None:
    """Get the shared async Supabase client, creating it on first use."""
    global _async_client
    if _async_client is not None:
        return _async_client
    if not _credentials_configured():
        return None
    try:
        _async_client = await acreate_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create async Supabase client: {e}")
        return None
    return _async_client
