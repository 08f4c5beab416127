"""Ordering of overlapping list requests.

Filter and page changes can fire several fetches before the first one
returns. Each fetch takes a ticket and only the holder of the latest ticket
may publish its result, so a slow, older response never overwrites a newer
one.
"""

from parts_admin.analytics.filters import OrderQuery
from parts_admin.errors import OrderStoreError
from parts_admin.models.order import Order
from parts_admin.models.stats import Pagination
from parts_admin.store.base import OrderStore
from parts_admin.utils.formatting import page_label, page_range_text
from parts_admin.utils.logging import get_logger

logger = get_logger(__name__)


class RequestSequencer:
    """Hands out monotonically increasing request tickets."""

    def __init__(self) -> None:
        self._latest = 0

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest

    @property
    def latest(self) -> int:
        return self._latest


class OrderListView:
    """State of the paginated order list screen."""

    def __init__(self, store: OrderStore, page_size: int = 12):
        self.store = store
        self.query = OrderQuery(limit=page_size)
        self.orders: list[Order] = []
        self.pagination = Pagination(limit=page_size)
        self.loading = False
        self.error: str | None = None
        self._sequencer = RequestSequencer()

    async def refresh(self) -> bool:
        """
        Fetch the page described by the current query.

        Returns:
            True if the response was applied, False if it failed or was
            superseded by a newer request
        """
        ticket = self._sequencer.issue()
        query = self.query
        self.loading = True

        try:
            page = await self.store.list_orders(query)
        except OrderStoreError as e:
            logger.warning("orders_fetch_failed", ticket=ticket, error=str(e))
            if self._sequencer.is_current(ticket):
                # Keep the previously shown orders
                self.error = str(e)
                self.loading = False
            return False

        if not self._sequencer.is_current(ticket):
            logger.info(
                "stale_response_discarded",
                ticket=ticket,
                latest=self._sequencer.latest,
            )
            return False

        self.orders = page.orders
        self.pagination = page.pagination
        self.error = None
        self.loading = False

        logger.debug("orders_fetched", ticket=ticket, count=len(page.orders))
        return True

    async def apply_filters(self, **filters: object) -> bool:
        """Change status/search/date filters and reload from page 1."""
        self.query = self.query.with_filters(**filters)
        return await self.refresh()

    async def go_to_page(self, page: int) -> bool:
        """Load ``page``, clamped to the known page range."""
        page = max(1, min(page, max(self.pagination.total_pages, 1)))
        self.query = self.query.with_filters(page=page)
        return await self.refresh()

    @property
    def range_text(self) -> str:
        return page_range_text(self.query.page, self.query.limit, self.pagination.total)

    @property
    def page_text(self) -> str:
        return page_label(self.query.page, self.pagination.total_pages)
