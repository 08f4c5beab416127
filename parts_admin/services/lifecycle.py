"""Order status lifecycle: validated, recorded status changes."""

from typing import Any

from parts_admin.errors import (
    InvalidStatusError,
    InvalidTransitionError,
    OrderNotFoundError,
    OrderStoreError,
    StatusConflictError,
    StatusUpdateFailedError,
)
from parts_admin.models.order import Order, OrderStatus
from parts_admin.state.workflow import StatusTransitions
from parts_admin.store.base import OrderStore
from parts_admin.utils.logging import AuditLogger


def parse_status(value: Any) -> OrderStatus:
    """Coerce ``value`` to an OrderStatus or raise InvalidStatusError."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError as e:
        raise InvalidStatusError(value) from e


class OrderLifecycle:
    """
    Applies status changes through the Order Store.

    Responsibilities:
    - Reject values outside the status enum
    - Enforce the transition table, against the status the write applies to
    - Skip writes that would not change the status
    - Re-read the order after a successful write instead of patching it locally
    """

    def __init__(self, store: OrderStore):
        self.store = store
        self.logger = AuditLogger("order_lifecycle")

    async def update_status(
        self,
        order_id: str,
        new_status: OrderStatus | str,
        notes: str | None = None,
        actor: str = "admin",
    ) -> Order:
        """
        Move an order to ``new_status`` and record it in the history.

        Args:
            order_id: Order to update
            new_status: Target status
            notes: Optional free text stored with the history entry
            actor: Who made the change

        Returns:
            The order as persisted after the change

        Raises:
            InvalidStatusError: ``new_status`` is not a known status
            OrderNotFoundError: No such order
            InvalidTransitionError: The transition table forbids the change
            StatusUpdateFailedError: The store did not apply the change
        """
        target = parse_status(new_status)

        order = await self._load(order_id)

        if order.status == target:
            self.logger.logger.info(
                "status_update_skipped",
                order_id=order_id,
                status=target.value,
                actor=actor,
            )
            return order

        if not StatusTransitions.can_transition(order.status, target):
            self.logger.log_rejected_change(
                order_id=order_id,
                to_status=target.value,
                actor=actor,
                reason=f"not allowed from {order.status.value}",
            )
            raise InvalidTransitionError(order_id, order.status.value, target.value)

        try:
            await self.store.update_status(
                order_id, target, notes or None, actor, expected_status=order.status
            )
        except StatusConflictError as e:
            # Another change landed between the read and the write
            current = await self._load(order_id)
            self.logger.log_rejected_change(
                order_id=order_id,
                to_status=target.value,
                actor=actor,
                reason=f"status changed concurrently to {current.status.value}",
            )
            raise InvalidTransitionError(order_id, current.status.value, target.value) from e
        except OrderStoreError as e:
            self.logger.log_error(str(e), "update_status", order_id=order_id)
            raise StatusUpdateFailedError(order_id, str(e)) from e

        self.logger.log_status_change(
            order_id=order_id,
            from_status=order.status.value,
            to_status=target.value,
            actor=actor,
            has_notes=bool(notes),
        )

        return await self._load(order_id)

    def allowed_transitions(self, order: Order) -> list[OrderStatus]:
        """Statuses the order may move to next."""
        return StatusTransitions.allowed_from(order.status)

    async def _load(self, order_id: str) -> Order:
        order = await self.store.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order
