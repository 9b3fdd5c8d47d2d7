"""
Processed-orders ledger backed by a Supabase table.

An order id present in the table means its recipients have been notified and
the order must not be processed again. Rows are only ever inserted. The table
has a UNIQUE constraint on order_id (see supabase/migrations), so two requests
racing past is_processed() cannot both record the same order.
"""

import logging
from typing import Callable

from supabase import Client

from app.db import get_supabase_admin
from app.errors import StoreError

logger = logging.getLogger(__name__)

# Postgres unique_violation
_UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: Exception) -> bool:
    """True when a PostgREST error reports a duplicate key."""
    return str(getattr(exc, "code", "")) == _UNIQUE_VIOLATION


class ProcessedOrderStore:
    """Reads and writes the processed-orders table."""

    def __init__(
        self,
        table: str = "processed_orders",
        client_factory: Callable[[], Client] = get_supabase_admin,
    ):
        self.table = table
        self._client_factory = client_factory

    def _table(self):
        try:
            client = self._client_factory()
        except ValueError as exc:
            raise StoreError(str(exc)) from exc
        return client.table(self.table)

    def is_processed(self, order_id: str) -> bool:
        """
        Return True if ``order_id`` has been marked processed.

        Raises:
            StoreError: the table could not be read.
        """
        try:
            result = (
                self._table()
                .select("order_id")
                .eq("order_id", order_id)
                .limit(1)
                .execute()
            )
        except StoreError:
            raise
        except Exception as exc:
            logger.error(f"Failed to look up processed order {order_id!r}: {exc}")
            raise StoreError("Error validating order") from exc

        return bool(result.data)

    def mark_processed(self, order_id: str) -> None:
        """
        Record ``order_id`` as processed.

        A duplicate-key rejection means another request already recorded the
        order; that is logged and treated as success.

        Raises:
            StoreError: the row could not be written for any other reason.
        """
        try:
            self._table().insert({"order_id": order_id}).execute()
        except StoreError:
            raise
        except Exception as exc:
            if _is_unique_violation(exc):
                logger.warning(f"Order {order_id!r} was already recorded as processed")
                return
            logger.error(f"Failed to record processed order {order_id!r}: {exc}")
            raise StoreError("Could not log order") from exc

    def ping(self) -> None:
        """Run a lightweight select; raises StoreError if the table is unreachable."""
        try:
            self._table().select("order_id").limit(1).execute()
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"Database connection failed: {exc}") from exc
