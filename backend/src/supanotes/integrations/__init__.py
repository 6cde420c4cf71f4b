"""Clients for external services."""

from .supabase import (
    AuthProviderError,
    SupabaseAuthClient,
    get_supabase_admin,
    get_supabase_client,
)

__all__ = [
    "AuthProviderError",
    "SupabaseAuthClient",
    "get_supabase_admin",
    "get_supabase_client",
]
