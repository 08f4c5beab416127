"""Exceptions raised by the back-office service."""


class PartsAdminError(Exception):
    """Base class for all service errors."""


class OrderStoreError(PartsAdminError):
    """The Order Store rejected a request or returned an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class OrderStoreUnavailableError(OrderStoreError):
    """The Order Store could not be reached or failed server-side."""


class StatusConflictError(OrderStoreError):
    """The order changed status after it was read; nothing was written."""

    def __init__(self, order_id: str, expected: str, actual: str | None = None):
        super().__init__(
            f"Order {order_id} is no longer {expected}",
            status_code=409,
        )
        self.order_id = order_id
        self.expected = expected
        self.actual = actual


class OrderNotFoundError(PartsAdminError):
    """No order exists with the requested id."""

    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class InvalidStatusError(PartsAdminError):
    """A status value outside the order status enum."""

    def __init__(self, value: object):
        super().__init__(f"Unknown order status: {value!r}")
        self.value = value


class InvalidTransitionError(PartsAdminError):
    """A status change not allowed by the transition table."""

    def __init__(self, order_id: str, from_status: str, to_status: str):
        super().__init__(
            f"Order {order_id} cannot move from {from_status} to {to_status}"
        )
        self.order_id = order_id
        self.from_status = from_status
        self.to_status = to_status


class StatusUpdateFailedError(PartsAdminError):
    """Persisting a status change failed; the stored order is unchanged."""

    def __init__(self, order_id: str, reason: str):
        super().__init__(f"Status update for order {order_id} failed: {reason}")
        self.order_id = order_id
        self.reason = reason
