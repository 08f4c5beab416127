"""Tests for the order status state machine."""

import pytest

from parts_admin.models.order import OPEN_STATUSES, OrderStatus
from parts_admin.state.workflow import StatusTransitions


def test_every_status_has_transitions() -> None:
    """Test the table covers the whole status enum."""
    assert set(StatusTransitions.TRANSITIONS) == set(OrderStatus)


@pytest.mark.parametrize(
    ("from_state", "to_state"),
    [
        (OrderStatus.PENDING, OrderStatus.CONFIRMED),
        (OrderStatus.CONFIRMED, OrderStatus.PROCESSING),
        (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
        (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
    ],
)
def test_forward_steps_allowed(from_state: OrderStatus, to_state: OrderStatus) -> None:
    """Test orders move one step forward."""
    assert StatusTransitions.can_transition(from_state, to_state)


@pytest.mark.parametrize("from_state", sorted(OPEN_STATUSES, key=lambda s: s.value))
def test_open_orders_can_be_cancelled(from_state: OrderStatus) -> None:
    """Test cancellation from any non-terminal status."""
    assert StatusTransitions.can_transition(from_state, OrderStatus.CANCELLED)


@pytest.mark.parametrize(
    ("from_state", "to_state"),
    [
        (OrderStatus.PENDING, OrderStatus.SHIPPED),
        (OrderStatus.PENDING, OrderStatus.DELIVERED),
        (OrderStatus.SHIPPED, OrderStatus.PENDING),
        (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
        (OrderStatus.CANCELLED, OrderStatus.PENDING),
    ],
)
def test_invalid_transitions(from_state: OrderStatus, to_state: OrderStatus) -> None:
    """Test skips, rollbacks and moves out of terminal states are refused."""
    assert not StatusTransitions.can_transition(from_state, to_state)


def test_terminal_statuses() -> None:
    """Test delivered and cancelled orders are final."""
    assert StatusTransitions.is_terminal(OrderStatus.DELIVERED)
    assert StatusTransitions.is_terminal(OrderStatus.CANCELLED)
    assert not StatusTransitions.is_terminal(OrderStatus.PENDING)
    assert StatusTransitions.allowed_from(OrderStatus.DELIVERED) == []


def test_allowed_from_returns_a_copy() -> None:
    """Test callers cannot alter the table through the returned list."""
    allowed = StatusTransitions.allowed_from(OrderStatus.PENDING)
    allowed.append(OrderStatus.DELIVERED)

    assert StatusTransitions.allowed_from(OrderStatus.PENDING) == [
        OrderStatus.CONFIRMED,
        OrderStatus.CANCELLED,
    ]


def test_status_labels() -> None:
    """Test the French labels."""
    assert OrderStatus.PENDING.label == "En attente"
    assert OrderStatus.SHIPPED.label == "Expédiée"
    assert OrderStatus.CANCELLED.label == "Annulée"
