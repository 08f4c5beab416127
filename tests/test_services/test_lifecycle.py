"""Tests for the order status lifecycle."""

from datetime import datetime, timedelta, timezone

import pytest

from parts_admin.errors import (
    InvalidStatusError,
    InvalidTransitionError,
    OrderNotFoundError,
    OrderStoreError,
    StatusUpdateFailedError,
)
from parts_admin.models.order import Order, OrderStatus
from parts_admin.services.lifecycle import OrderLifecycle, parse_status
from parts_admin.store.memory import InMemoryOrderStore


class CountingStore(InMemoryOrderStore):
    """In-memory store that counts reads and writes."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reads = 0
        self.writes = 0

    async def get_order(self, order_id: str) -> Order | None:
        self.reads += 1
        return await super().get_order(order_id)

    async def update_status(self, *args, **kwargs) -> None:
        self.writes += 1
        await super().update_status(*args, **kwargs)


def test_parse_status() -> None:
    """Test status parsing."""
    assert parse_status("SHIPPED") == OrderStatus.SHIPPED
    assert parse_status(OrderStatus.PENDING) == OrderStatus.PENDING

    with pytest.raises(InvalidStatusError):
        parse_status("shipped")
    with pytest.raises(InvalidStatusError):
        parse_status(None)


@pytest.mark.asyncio
async def test_update_status_appends_history(memory_store: InMemoryOrderStore) -> None:
    """Test a valid change updates the status and records one history entry."""
    lifecycle = OrderLifecycle(memory_store)
    before = await memory_store.get_order("2")

    updated = await lifecycle.update_status("2", "CONFIRMED", "Paiement reçu", actor="leila")

    assert updated.status == OrderStatus.CONFIRMED
    assert len(updated.order_history) == len(before.order_history) + 1

    entry = updated.order_history[-1]
    assert entry.status == OrderStatus.CONFIRMED
    assert entry.notes == "Paiement reçu"
    assert entry.created_by == "leila"

    stored = await memory_store.get_order("2")
    assert stored.status == OrderStatus.CONFIRMED
    assert stored.order_history == updated.order_history


@pytest.mark.asyncio
async def test_update_status_empty_notes_stored_as_none(memory_store: InMemoryOrderStore) -> None:
    """Test blank notes are not recorded as text."""
    lifecycle = OrderLifecycle(memory_store)

    updated = await lifecycle.update_status("2", OrderStatus.CANCELLED, "")

    assert updated.order_history[-1].notes is None
    assert updated.order_history[-1].created_by == "admin"


@pytest.mark.asyncio
async def test_update_status_rereads_order(sample_orders: list[Order]) -> None:
    """Test the returned order is read back from the store after the write."""
    store = CountingStore(sample_orders)
    lifecycle = OrderLifecycle(store)

    await lifecycle.update_status("5", "PROCESSING")

    assert store.writes == 1
    assert store.reads == 2


@pytest.mark.asyncio
async def test_same_status_is_a_no_op(sample_orders: list[Order]) -> None:
    """Test selecting the current status does not write or add history."""
    store = CountingStore(sample_orders)
    lifecycle = OrderLifecycle(store)

    order = await lifecycle.update_status("3", "SHIPPED", "again")

    assert store.writes == 0
    assert order.status == OrderStatus.SHIPPED
    assert len(order.order_history) == 1


@pytest.mark.asyncio
async def test_unknown_status_rejected(memory_store: InMemoryOrderStore) -> None:
    """Test values outside the enum are refused before touching the store."""
    lifecycle = OrderLifecycle(memory_store)

    with pytest.raises(InvalidStatusError):
        await lifecycle.update_status("2", "LOST")

    order = await memory_store.get_order("2")
    assert order.status == OrderStatus.PENDING


@pytest.mark.asyncio
async def test_invalid_transition_rejected(memory_store: InMemoryOrderStore) -> None:
    """Test skipping steps is refused and nothing is written."""
    lifecycle = OrderLifecycle(memory_store)

    with pytest.raises(InvalidTransitionError) as exc_info:
        await lifecycle.update_status("2", "DELIVERED")

    assert exc_info.value.from_status == "PENDING"
    assert exc_info.value.to_status == "DELIVERED"

    order = await memory_store.get_order("2")
    assert order.status == OrderStatus.PENDING
    assert len(order.order_history) == 1


@pytest.mark.asyncio
async def test_terminal_order_cannot_change(memory_store: InMemoryOrderStore) -> None:
    """Test delivered orders stay delivered."""
    lifecycle = OrderLifecycle(memory_store)

    with pytest.raises(InvalidTransitionError):
        await lifecycle.update_status("1", "CANCELLED")


@pytest.mark.asyncio
async def test_missing_order(memory_store: InMemoryOrderStore) -> None:
    """Test updating an unknown order."""
    lifecycle = OrderLifecycle(memory_store)

    with pytest.raises(OrderNotFoundError):
        await lifecycle.update_status("999", "CONFIRMED")


@pytest.mark.asyncio
async def test_failed_write_leaves_order_unchanged(
    memory_store: InMemoryOrderStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test status and history are never half written."""

    def fail_commit(order: Order) -> None:
        raise OrderStoreError("write failed")

    monkeypatch.setattr(memory_store, "_commit", fail_commit)
    lifecycle = OrderLifecycle(memory_store)

    with pytest.raises(StatusUpdateFailedError) as exc_info:
        await lifecycle.update_status("2", "CONFIRMED", "Paiement reçu")

    assert exc_info.value.order_id == "2"

    order = await memory_store.get_order("2")
    assert order.status == OrderStatus.PENDING
    assert len(order.order_history) == 1


@pytest.mark.asyncio
async def test_successive_updates_append_in_order(memory_store: InMemoryOrderStore) -> None:
    """Test the history log keeps insertion order."""
    lifecycle = OrderLifecycle(memory_store)

    await lifecycle.update_status("2", "CONFIRMED")
    order = await lifecycle.update_status("2", "PROCESSING")

    assert [e.status for e in order.order_history] == [
        OrderStatus.PENDING,
        OrderStatus.CONFIRMED,
        OrderStatus.PROCESSING,
    ]


def test_history_displayed_newest_first(make_order) -> None:
    """Test the display order of the history, leaving the log untouched."""
    created = datetime(2026, 10, 1, 8, tzinfo=timezone.utc)
    order = make_order(created_at=created)
    order = order.with_status(OrderStatus.CONFIRMED, None, "admin", at=created + timedelta(hours=2))
    order = order.with_status(OrderStatus.PROCESSING, None, "admin", at=created + timedelta(days=1))

    assert [e.status for e in order.order_history] == [
        OrderStatus.PENDING,
        OrderStatus.CONFIRMED,
        OrderStatus.PROCESSING,
    ]
    assert [e.status for e in order.history_for_display()] == [
        OrderStatus.PROCESSING,
        OrderStatus.CONFIRMED,
        OrderStatus.PENDING,
    ]


def test_with_status_leaves_source_order_alone(make_order) -> None:
    """Test staging a change leaves the source order alone."""
    order = make_order()
    at = datetime(2026, 10, 17, 9, tzinfo=timezone.utc)

    staged = order.with_status(OrderStatus.CONFIRMED, "ok", "admin", at=at)

    assert order.status == OrderStatus.PENDING
    assert len(order.order_history) == 1
    assert staged.order_history[0] == order.order_history[0]
    assert staged.order_history[-1].created_at == at


@pytest.mark.asyncio
async def test_allowed_transitions(memory_store: InMemoryOrderStore) -> None:
    """Test the next statuses offered for an order."""
    lifecycle = OrderLifecycle(memory_store)

    pending = await memory_store.get_order("2")
    delivered = await memory_store.get_order("1")

    assert lifecycle.allowed_transitions(pending) == [OrderStatus.CONFIRMED, OrderStatus.CANCELLED]
    assert lifecycle.allowed_transitions(delivered) == []


class RacingStore(InMemoryOrderStore):
    """In-memory store where another admin cancels the order just before each write."""

    async def update_status(self, order_id, status, notes, actor, expected_status=None) -> None:
        await super().update_status(order_id, OrderStatus.CANCELLED, None, "other-admin")
        await super().update_status(order_id, status, notes, actor, expected_status=expected_status)


@pytest.mark.asyncio
async def test_concurrent_change_is_not_overwritten(sample_orders: list[Order]) -> None:
    """Test a change checked against a stale read does not touch a terminal order."""
    store = RacingStore(sample_orders)
    lifecycle = OrderLifecycle(store)

    with pytest.raises(InvalidTransitionError) as exc_info:
        await lifecycle.update_status("2", "CONFIRMED", actor="leila")

    assert exc_info.value.from_status == "CANCELLED"
    assert exc_info.value.to_status == "CONFIRMED"

    order = await store.get_order("2")
    assert order.status == OrderStatus.CANCELLED
    assert [e.status for e in order.order_history] == [
        OrderStatus.PENDING,
        OrderStatus.CANCELLED,
    ]
