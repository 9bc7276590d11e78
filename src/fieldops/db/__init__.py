"""Database clients and utilities."""

from .supabase import get_async_supabase_client, get_supabase_client

__all__ = ["get_supabase_client", "get_async_supabase_client"]
