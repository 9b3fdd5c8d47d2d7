"""
Runtime configuration.

Values come from the process environment, with a .env file in the working
directory loaded first via python-dotenv. Nothing is validated at import time:
each collaborator checks the settings it needs when it is constructed, so the
app (and its health endpoints) can start with a partial configuration.

Environment variables
---------------------
SQSPACE_API_KEY           Bearer token for the Squarespace Commerce API.
SQSPACE_ORDERS_URL        Orders endpoint (default: Squarespace 1.0 orders).
SQSPACE_TIMEOUT_SECONDS   Timeout for the orders fetch (default: 20).
SENDER_EMAIL              From address, also the SMTP username.
SENDER_PASSWORD           SMTP password.
SMTP_SERVER               SMTP host name.
SMTP_PORT                 SMTP port (default: 587).
SMTP_TIMEOUT_SECONDS      Timeout for one SMTP session (default: 20).
IN_ED_RECP                Comma-separated recipients for in-Edmonton appraisals.
OUTSIDE_ED_RECP           Comma-separated recipients for outside-Edmonton appraisals.
SUPABASE_URL              Supabase project URL.
SUPABASE_SERVICE_KEY      Supabase service-role key.
PROCESSED_ORDERS_TABLE    Table holding processed order ids (default: processed_orders).
SUPABASE_TIMEOUT_SECONDS  Timeout for store reads/writes (default: 10).
PORT                      Port uvicorn listens on (default: 3000).
"""

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel

DEFAULT_ORDERS_URL = "https://api.squarespace.com/1.0/commerce/orders/"


def _split_addresses(raw: str) -> list[str]:
    """Split a comma-separated address list, dropping blanks."""
    return [a.strip() for a in raw.split(",") if a.strip()]


class Settings(BaseModel):
    """Process configuration, one instance per process."""

    model_config = {"frozen": True}

    sqspace_api_key: str = ""
    sqspace_orders_url: str = DEFAULT_ORDERS_URL
    sqspace_timeout_seconds: float = 20.0

    sender_email: str = ""
    sender_password: str = ""
    smtp_server: str = ""
    smtp_port: int = 587
    smtp_timeout_seconds: float = 20.0

    in_edmonton_recipients: list[str] = []
    outside_edmonton_recipients: list[str] = []

    supabase_url: str = ""
    supabase_service_key: str = ""
    processed_orders_table: str = "processed_orders"
    supabase_timeout_seconds: float = 10.0

    port: int = 3000


def load_settings() -> Settings:
    """Build Settings from the environment (and .env, if present)."""
    load_dotenv()

    return Settings(
        sqspace_api_key=os.getenv("SQSPACE_API_KEY", ""),
        sqspace_orders_url=os.getenv("SQSPACE_ORDERS_URL") or DEFAULT_ORDERS_URL,
        sqspace_timeout_seconds=float(os.getenv("SQSPACE_TIMEOUT_SECONDS", "20")),
        sender_email=os.getenv("SENDER_EMAIL", ""),
        sender_password=os.getenv("SENDER_PASSWORD", ""),
        smtp_server=os.getenv("SMTP_SERVER", ""),
        smtp_port=int(os.getenv("SMTP_PORT", "587")),
        smtp_timeout_seconds=float(os.getenv("SMTP_TIMEOUT_SECONDS", "20")),
        in_edmonton_recipients=_split_addresses(os.getenv("IN_ED_RECP", "")),
        outside_edmonton_recipients=_split_addresses(os.getenv("OUTSIDE_ED_RECP", "")),
        supabase_url=os.getenv("SUPABASE_URL", ""),
        supabase_service_key=os.getenv("SUPABASE_SERVICE_KEY", ""),
        processed_orders_table=os.getenv("PROCESSED_ORDERS_TABLE") or "processed_orders",
        supabase_timeout_seconds=float(os.getenv("SUPABASE_TIMEOUT_SECONDS", "10")),
        port=int(os.getenv("PORT", "3000")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide Settings, loading them on first use."""
    return load_settings()
