"""
Unit tests for the processed-orders store.
Supabase is fully mocked; no real DB calls.
"""

from unittest.mock import MagicMock, Mock

import pytest

from app.errors import StoreError
from app.services.dedup_store import ProcessedOrderStore


# ---------------------------------------------------------------------------
# Supabase chain mock helper
# ---------------------------------------------------------------------------

def _make_supabase_chain(*results):
    """
    Build a MagicMock that returns results[i] from the i-th .execute() call,
    regardless of which chaining methods (.eq, .select, .insert, etc.) were called.
    """
    mock = MagicMock()
    mock.select.return_value = mock
    mock.eq.return_value = mock
    mock.insert.return_value = mock
    mock.limit.return_value = mock
    mock.execute.side_effect = [Mock(data=r) for r in results]
    return mock


def _make_store(chain) -> tuple[ProcessedOrderStore, MagicMock]:
    client = MagicMock()
    client.table.return_value = chain
    return ProcessedOrderStore(table="processed_orders", client_factory=lambda: client), client


class FakeAPIError(Exception):
    """Shape of postgrest's APIError: carries the Postgres error code."""

    def __init__(self, code: str, message: str = "error"):
        super().__init__(message)
        self.code = code


class TestIsProcessed:

    def test_returns_true_when_row_exists(self):
        store, client = _make_store(_make_supabase_chain([{"order_id": "id-1"}]))

        assert store.is_processed("id-1") is True
        client.table.assert_called_with("processed_orders")

    def test_returns_false_when_no_row(self):
        store, _ = _make_store(_make_supabase_chain([]))
        assert store.is_processed("id-1") is False

    def test_filters_on_order_id(self):
        chain = _make_supabase_chain([])
        store, _ = _make_store(chain)

        store.is_processed("id-42")

        chain.eq.assert_called_once_with("order_id", "id-42")

    def test_read_failure_raises_store_error(self):
        chain = _make_supabase_chain()
        chain.execute.side_effect = RuntimeError("connection reset")
        store, _ = _make_store(chain)

        with pytest.raises(StoreError):
            store.is_processed("id-1")

    def test_unconfigured_client_raises_store_error(self):
        def factory():
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")

        store = ProcessedOrderStore(client_factory=factory)
        with pytest.raises(StoreError, match="SUPABASE_URL"):
            store.is_processed("id-1")


class TestMarkProcessed:

    def test_inserts_order_id(self):
        chain = _make_supabase_chain([{"order_id": "id-1"}])
        store, _ = _make_store(chain)

        store.mark_processed("id-1")

        chain.insert.assert_called_once_with({"order_id": "id-1"})

    def test_never_upserts(self):
        chain = _make_supabase_chain([{"order_id": "id-1"}])
        store, _ = _make_store(chain)

        store.mark_processed("id-1")

        chain.upsert.assert_not_called()

    def test_duplicate_key_is_treated_as_recorded(self):
        chain = _make_supabase_chain()
        chain.execute.side_effect = FakeAPIError("23505", "duplicate key value")
        store, _ = _make_store(chain)

        store.mark_processed("id-1")  # does not raise

    def test_other_write_failure_raises_store_error(self):
        chain = _make_supabase_chain()
        chain.execute.side_effect = FakeAPIError("42P01", "relation does not exist")
        store, _ = _make_store(chain)

        with pytest.raises(StoreError):
            store.mark_processed("id-1")

    def test_network_failure_raises_store_error(self):
        chain = _make_supabase_chain()
        chain.execute.side_effect = TimeoutError("timed out")
        store, _ = _make_store(chain)

        with pytest.raises(StoreError):
            store.mark_processed("id-1")


class TestPing:

    def test_ping_succeeds(self):
        store, _ = _make_store(_make_supabase_chain([]))
        store.ping()

    def test_ping_failure_raises_store_error(self):
        chain = _make_supabase_chain()
        chain.execute.side_effect = RuntimeError("unreachable")
        store, _ = _make_store(chain)

        with pytest.raises(StoreError, match="unreachable"):
            store.ping()
