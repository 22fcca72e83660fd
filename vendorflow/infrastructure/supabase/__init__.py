"""Supabase (PostgREST) storage backend."""

from vendorflow.infrastructure.supabase._rest_client import PostgrestClient
from vendorflow.infrastructure.supabase.store import SupabaseRecordStore

__all__ = ["PostgrestClient", "SupabaseRecordStore"]
