"""Order status state machine."""

from parts_admin.models.order import OrderStatus


class StatusTransitions:
    """Valid order status transitions.

    Orders move one step forward at a time; any order that has not reached
    a terminal state can be cancelled.
    """

    TRANSITIONS = {
        OrderStatus.PENDING: [
            OrderStatus.CONFIRMED,
            OrderStatus.CANCELLED,
        ],
        OrderStatus.CONFIRMED: [
            OrderStatus.PROCESSING,
            OrderStatus.CANCELLED,
        ],
        OrderStatus.PROCESSING: [
            OrderStatus.SHIPPED,
            OrderStatus.CANCELLED,
        ],
        OrderStatus.SHIPPED: [
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        ],
        OrderStatus.DELIVERED: [],
        OrderStatus.CANCELLED: [],
    }

    @classmethod
    def can_transition(cls, from_state: OrderStatus, to_state: OrderStatus) -> bool:
        """Check if a state transition is valid."""
        return to_state in cls.TRANSITIONS.get(from_state, [])

    @classmethod
    def allowed_from(cls, state: OrderStatus) -> list[OrderStatus]:
        """Statuses an order in ``state`` may move to."""
        return list(cls.TRANSITIONS.get(state, []))

    @classmethod
    def is_terminal(cls, state: OrderStatus) -> bool:
        return not cls.TRANSITIONS.get(state)
