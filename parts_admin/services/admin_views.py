"""Data behind the back-office screens."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from parts_admin.analytics.aggregation import (
    RosterSort,
    compute_customer_roster,
    compute_dashboard_stats,
    order_integrity_issues,
    recent_orders,
    summarize_roster,
)
from parts_admin.analytics.filters import OrderQuery, filter_customers
from parts_admin.config import Settings, get_settings
from parts_admin.errors import OrderNotFoundError
from parts_admin.models.customer import CustomerStatus, DerivedCustomer, RosterSummary
from parts_admin.models.order import Order, OrderStatus
from parts_admin.models.stats import DashboardStats, OrderPage
from parts_admin.services.lifecycle import OrderLifecycle
from parts_admin.store.base import OrderStore, fetch_all_orders
from parts_admin.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class DashboardData:
    """Overview screen contents."""

    stats: DashboardStats
    recent_orders: list[Order]
    top_customers: list[DerivedCustomer]
    generated_at: datetime


@dataclass
class CustomersData:
    """Customers screen contents."""

    customers: list[DerivedCustomer]
    summary: RosterSummary


@dataclass
class OrderDetailData:
    """Order detail screen contents."""

    order: Order
    allowed_statuses: list[OrderStatus] = field(default_factory=list)
    integrity_issues: list[str] = field(default_factory=list)


class AdminViewService:
    """Fetches orders from the store and shapes them for each screen."""

    def __init__(self, store: OrderStore, settings: Settings | None = None):
        self.store = store
        self.settings = settings or get_settings()
        self.lifecycle = OrderLifecycle(store)

    async def dashboard(self, now: datetime | None = None) -> DashboardData:
        """Stats, latest orders and best customers over the bulk order set."""
        now = now or datetime.now(timezone.utc)
        orders = await fetch_all_orders(self.store, self.settings.bulk_fetch_limit)
        size = self.settings.dashboard_list_size

        roster = self._roster(orders, "spent", now)

        logger.info("dashboard_computed", orders=len(orders), customers=len(roster))

        return DashboardData(
            stats=compute_dashboard_stats(
                orders,
                now=now,
                tz=self.settings.tzinfo,
                normalize_emails=self.settings.normalize_customer_emails,
            ),
            recent_orders=recent_orders(orders, size),
            top_customers=roster[:size],
            generated_at=now,
        )

    async def customers(
        self,
        search: str = "",
        status: CustomerStatus | None = None,
        sort_by: RosterSort = "spent",
        now: datetime | None = None,
    ) -> CustomersData:
        """
        Customer roster derived from the bulk order set.

        The summary covers every customer; the list honours the filters.
        """
        orders = await fetch_all_orders(self.store, self.settings.bulk_fetch_limit)
        roster = self._roster(orders, sort_by, now)

        return CustomersData(
            customers=filter_customers(roster, search=search, status=status),
            summary=summarize_roster(roster),
        )

    async def orders_page(self, query: OrderQuery) -> OrderPage:
        return await self.store.list_orders(query)

    async def order_detail(self, order_id: str) -> OrderDetailData:
        order = await self.store.get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return self._detail(order)

    async def update_status(
        self,
        order_id: str,
        status: OrderStatus | str,
        notes: str | None,
        actor: str,
    ) -> OrderDetailData:
        order = await self.lifecycle.update_status(order_id, status, notes, actor)
        return self._detail(order)

    def _detail(self, order: Order) -> OrderDetailData:
        issues = order_integrity_issues(order)
        if issues:
            logger.warning("order_integrity_issues", order_id=order.id, issues=issues)

        return OrderDetailData(
            order=order,
            allowed_statuses=self.lifecycle.allowed_transitions(order),
            integrity_issues=issues,
        )

    def _roster(
        self,
        orders: list[Order],
        sort_by: RosterSort,
        now: datetime | None,
    ) -> list[DerivedCustomer]:
        return compute_customer_roster(
            orders,
            sort_by=sort_by,
            now=now,
            normalize_emails=self.settings.normalize_customer_emails,
            vip_threshold=self.settings.vip_threshold,
            inactive_after_days=self.settings.inactive_after_days,
        )
