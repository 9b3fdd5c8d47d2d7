"""
Database client configuration.
Uses Supabase (PostgreSQL) for the processed-orders ledger.
"""

from functools import lru_cache

from supabase import Client, ClientOptions, create_client

from app.config import get_settings


@lru_cache(maxsize=1)
def get_supabase_admin() -> Client:
    """
    Return the service-role Supabase client, creating it on first use.

    The service key bypasses RLS; the processed_orders table is only ever
    touched by this backend.

    Raises:
        ValueError: if SUPABASE_URL or SUPABASE_SERVICE_KEY is not set.
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError(
            "SUPABASE_URL and SUPABASE_SERVICE_KEY must be set in environment variables"
        )

    return create_client(
        settings.supabase_url,
        settings.supabase_service_key,
        options=ClientOptions(
            postgrest_client_timeout=settings.supabase_timeout_seconds,
        ),
    )
