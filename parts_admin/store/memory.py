"""In-process Order Store for development and tests."""

import asyncio
from collections.abc import Iterable
from datetime import tzinfo
from pathlib import Path

from parts_admin.analytics.filters import OrderQuery
from parts_admin.config import get_settings
from parts_admin.errors import OrderStoreError, StatusConflictError
from parts_admin.models.order import Order, OrderStatus
from parts_admin.models.stats import OrderPage, Pagination
from parts_admin.store.base import OrderStore
from parts_admin.utils.formatting import total_pages
from parts_admin.utils.logging import get_logger

logger = get_logger(__name__)


class InMemoryOrderStore(OrderStore):
    """Keeps orders in a dict, with the same contract as the REST store."""

    def __init__(self, orders: Iterable[Order] = (), tz: tzinfo | None = None):
        self._orders: dict[str, Order] = {order.id: order for order in orders}
        self._lock = asyncio.Lock()
        self.tz = tz or get_settings().tzinfo

    @classmethod
    def from_file(cls, path: str | Path, tz: tzinfo | None = None) -> "InMemoryOrderStore":
        """Load orders from a JSON file shaped like a list response."""
        page = OrderPage.model_validate_json(Path(path).read_text(encoding="utf-8"))
        logger.info("order_store_seeded", path=str(path), orders=len(page.orders))
        return cls(page.orders, tz=tz)

    async def list_orders(self, query: OrderQuery) -> OrderPage:
        matching = sorted(
            (order for order in self._orders.values() if query.matches(order, self.tz)),
            key=lambda order: (order.created_at, order.id),
            reverse=True,
        )
        total = len(matching)
        start = (query.page - 1) * query.limit

        return OrderPage(
            orders=[order.model_copy(deep=True) for order in matching[start : start + query.limit]],
            pagination=Pagination(
                total=total,
                total_pages=total_pages(total, query.limit),
                page=query.page,
                limit=query.limit,
            ),
        )

    async def get_order(self, order_id: str) -> Order | None:
        order = self._orders.get(order_id)
        return order.model_copy(deep=True) if order else None

    async def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        notes: str | None,
        actor: str,
        expected_status: OrderStatus | None = None,
    ) -> None:
        async with self._lock:
            current = self._orders.get(order_id)
            if current is None:
                raise OrderStoreError(f"Order {order_id} not found", status_code=404)
            if expected_status is not None and current.status != expected_status:
                raise StatusConflictError(order_id, expected_status.value, current.status.value)

            # Status and history change together on a staged copy
            staged = current.with_status(status, notes, actor)
            self._commit(staged)

        logger.debug("order_status_stored", order_id=order_id, status=status.value)

    def _commit(self, order: Order) -> None:
        """Publish a staged order; the previous version stays until this succeeds."""
        self._orders[order.id] = order
