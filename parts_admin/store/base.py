"""Contract of the Order Store the back-office reads from and writes to."""

from abc import ABC, abstractmethod

from parts_admin.analytics.filters import OrderQuery
from parts_admin.models.order import Order, OrderStatus
from parts_admin.models.stats import OrderPage
from parts_admin.utils.logging import get_logger

logger = get_logger(__name__)


class OrderStore(ABC):
    """Persists orders, their items, addresses and status history."""

    @abstractmethod
    async def list_orders(self, query: OrderQuery) -> OrderPage:
        """Return one filtered page of orders, newest first."""
        pass

    @abstractmethod
    async def get_order(self, order_id: str) -> Order | None:
        """Return the full order, or None when it does not exist."""
        pass

    @abstractmethod
    async def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        notes: str | None,
        actor: str,
        expected_status: OrderStatus | None = None,
    ) -> None:
        """
        Overwrite the order status and append one history entry.

        Both writes happen atomically: on any error neither is visible.
        When ``expected_status`` is given the write only applies if the
        order still has that status.

        Raises:
            StatusConflictError: The order no longer has ``expected_status``
            OrderStoreError: The update was not applied
        """
        pass

    async def close(self) -> None:
        """Release connections held by the store."""
        return None


async def fetch_all_orders(store: OrderStore, limit: int) -> list[Order]:
    """
    Bulk fetch used by the aggregation views.

    Only the first ``limit`` orders are returned; a warning is logged when
    the store holds more than that.
    """
    page = await store.list_orders(OrderQuery(page=1, limit=limit))

    if page.pagination.total > len(page.orders):
        logger.warning(
            "aggregation_truncated",
            fetched=len(page.orders),
            total=page.pagination.total,
            limit=limit,
        )

    return page.orders
