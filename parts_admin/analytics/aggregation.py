"""Aggregation of raw order records into dashboard figures and customers.

Every function here is a pure function of its input orders (plus the
reference time ``now``), so results can be recomputed on every fetch.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

from parts_admin.config import get_settings
from parts_admin.models.customer import CustomerStatus, DerivedCustomer, RosterSummary
from parts_admin.models.order import OPEN_STATUSES, Order, OrderStatus
from parts_admin.models.stats import DashboardStats
from parts_admin.utils.numbers import ZERO, to_decimal

RosterSort = Literal["spent", "orders", "name", "recent"]

DEFAULT_VIP_THRESHOLD = Decimal("1000")
DEFAULT_INACTIVE_AFTER_DAYS = 90
CENT = Decimal("0.01")


def _resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def customer_key(email: str, normalize: bool = True) -> str:
    """Identity used to group orders into customers."""
    return email.strip().lower() if normalize else email


def month_starts(now: datetime, tz: tzinfo) -> tuple[datetime, datetime]:
    """
    First instant of the current and of the previous calendar month.

    Args:
        now: Reference time
        tz: Timezone whose calendar defines the months

    Returns:
        (start of this month, start of last month), both timezone-aware
    """
    local = _resolve_now(now).astimezone(tz)
    this_month = local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if this_month.month == 1:
        last_month = this_month.replace(year=this_month.year - 1, month=12)
    else:
        last_month = this_month.replace(month=this_month.month - 1)
    return this_month, last_month


def growth_percentage(current: Decimal | int | float, previous: Decimal | int | float) -> float:
    """
    Relative change from ``previous`` to ``current`` in percent.

    Zero when both are zero and 100 when growing from nothing. Declines are
    negative.
    """
    current = to_decimal(current)
    previous = to_decimal(previous)

    if previous == 0:
        return 100.0 if current > 0 else 0.0

    return float((current - previous) / previous * 100)


def compute_dashboard_stats(
    orders: Iterable[Order],
    now: datetime | None = None,
    tz: tzinfo | None = None,
    normalize_emails: bool = True,
) -> DashboardStats:
    """
    Compute the overview figures in a single pass over ``orders``.

    Args:
        orders: Orders to aggregate
        now: Reference time for the month comparison, defaults to the current time
        tz: Timezone for calendar months, defaults to the configured one
        normalize_emails: Count customers by normalised email

    Returns:
        DashboardStats, identical for any permutation of ``orders``
    """
    now = _resolve_now(now)
    this_month_start, last_month_start = month_starts(now, tz or get_settings().tzinfo)

    total_orders = 0
    pending_orders = 0
    completed_orders = 0
    this_month_orders = 0
    last_month_orders = 0
    total_revenue = ZERO
    this_month_revenue = ZERO
    last_month_revenue = ZERO
    emails: set[str] = set()

    for order in orders:
        amount = order.total_amount
        total_orders += 1
        total_revenue += amount

        if order.status in OPEN_STATUSES:
            pending_orders += 1
        elif order.status == OrderStatus.DELIVERED:
            completed_orders += 1

        emails.add(customer_key(order.customer_email, normalize_emails))

        if order.created_at >= this_month_start:
            this_month_orders += 1
            this_month_revenue += amount
        elif order.created_at >= last_month_start:
            last_month_orders += 1
            last_month_revenue += amount

    return DashboardStats(
        total_orders=total_orders,
        pending_orders=pending_orders,
        completed_orders=completed_orders,
        total_revenue=total_revenue,
        total_customers=len(emails),
        average_order_value=total_revenue / total_orders if total_orders else ZERO,
        this_month_orders=this_month_orders,
        last_month_orders=last_month_orders,
        this_month_revenue=this_month_revenue,
        last_month_revenue=last_month_revenue,
        orders_growth=growth_percentage(this_month_orders, last_month_orders),
        revenue_growth=growth_percentage(this_month_revenue, last_month_revenue),
    )


def classify_customer(
    total_spent: Decimal,
    last_order_date: datetime,
    now: datetime | None = None,
    vip_threshold: Decimal = DEFAULT_VIP_THRESHOLD,
    inactive_after_days: int = DEFAULT_INACTIVE_AFTER_DAYS,
) -> CustomerStatus:
    """Derive the customer segment; spending beats recency."""
    if total_spent > vip_threshold:
        return CustomerStatus.VIP

    days_since_last_order = (_resolve_now(now) - last_order_date).days
    if days_since_last_order > inactive_after_days:
        return CustomerStatus.INACTIVE

    return CustomerStatus.ACTIVE


@dataclass
class _CustomerTotals:
    """Running totals for one customer while scanning orders."""

    latest: Order
    first_order_date: datetime
    last_order_date: datetime
    total_orders: int = 0
    total_spent: Decimal = ZERO

    def add(self, order: Order) -> None:
        self.total_orders += 1
        self.total_spent += order.total_amount
        self.first_order_date = min(self.first_order_date, order.created_at)
        self.last_order_date = max(self.last_order_date, order.created_at)
        # Contact details come from the newest order, ties broken by id
        if (order.created_at, order.id) > (self.latest.created_at, self.latest.id):
            self.latest = order


def sort_roster(
    customers: Iterable[DerivedCustomer],
    sort_by: RosterSort = "spent",
) -> list[DerivedCustomer]:
    """Sort customers by the selected key; equal keys keep email order."""
    by_email = sorted(customers, key=lambda customer: customer.email.casefold())

    if sort_by == "spent":
        return sorted(by_email, key=lambda customer: customer.total_spent, reverse=True)
    if sort_by == "orders":
        return sorted(by_email, key=lambda customer: customer.total_orders, reverse=True)
    if sort_by == "name":
        return sorted(by_email, key=lambda customer: customer.full_name.casefold())
    if sort_by == "recent":
        return sorted(by_email, key=lambda customer: customer.last_order_date, reverse=True)

    raise ValueError(f"Unknown roster sort key: {sort_by!r}")


def compute_customer_roster(
    orders: Iterable[Order],
    sort_by: RosterSort = "spent",
    now: datetime | None = None,
    normalize_emails: bool = True,
    vip_threshold: Decimal = DEFAULT_VIP_THRESHOLD,
    inactive_after_days: int = DEFAULT_INACTIVE_AFTER_DAYS,
) -> list[DerivedCustomer]:
    """
    Group orders by customer email and derive one summary per customer.

    Args:
        orders: Orders to group
        sort_by: "spent" (default), "orders", "name" or "recent"
        now: Reference time for the inactivity rule
        normalize_emails: Trim and lower-case emails before grouping
        vip_threshold: Total spent above which a customer is VIP
        inactive_after_days: Days since the last order before a customer is inactive

    Returns:
        Sorted list of DerivedCustomer
    """
    now = _resolve_now(now)
    totals: dict[str, _CustomerTotals] = {}

    for order in orders:
        key = customer_key(order.customer_email, normalize_emails)
        if key not in totals:
            totals[key] = _CustomerTotals(
                latest=order,
                first_order_date=order.created_at,
                last_order_date=order.created_at,
            )
        totals[key].add(order)

    customers = []
    for entry in totals.values():
        latest = entry.latest
        address = latest.shipping_address
        customers.append(
            DerivedCustomer(
                # Shown as the customer typed it on their latest order
                email=latest.customer_email,
                first_name=latest.customer_first_name,
                last_name=latest.customer_last_name,
                phone=latest.customer_phone,
                city=address.city if address else "",
                country=address.country if address else "",
                total_orders=entry.total_orders,
                total_spent=entry.total_spent,
                average_order_value=entry.total_spent / entry.total_orders,
                last_order_date=entry.last_order_date,
                first_order_date=entry.first_order_date,
                status=classify_customer(
                    entry.total_spent,
                    entry.last_order_date,
                    now,
                    vip_threshold=vip_threshold,
                    inactive_after_days=inactive_after_days,
                ),
            )
        )

    return sort_roster(customers, sort_by)


def top_customers(
    orders: Iterable[Order],
    n: int,
    now: datetime | None = None,
    normalize_emails: bool = True,
    vip_threshold: Decimal = DEFAULT_VIP_THRESHOLD,
    inactive_after_days: int = DEFAULT_INACTIVE_AFTER_DAYS,
) -> list[DerivedCustomer]:
    """The ``n`` customers with the highest total spent."""
    roster = compute_customer_roster(
        orders,
        sort_by="spent",
        now=now,
        normalize_emails=normalize_emails,
        vip_threshold=vip_threshold,
        inactive_after_days=inactive_after_days,
    )
    return roster[: max(n, 0)]


def recent_orders(orders: Iterable[Order], n: int) -> list[Order]:
    """The ``n`` most recently created orders, newest first."""
    ordered = sorted(orders, key=lambda order: (order.created_at, order.id), reverse=True)
    return ordered[: max(n, 0)]


def summarize_roster(customers: Sequence[DerivedCustomer]) -> RosterSummary:
    """Headline counts for a customer roster."""
    if not customers:
        return RosterSummary()

    counts = {status: 0 for status in CustomerStatus}
    for customer in customers:
        counts[customer.status] += 1

    return RosterSummary(
        total_customers=len(customers),
        vip_customers=counts[CustomerStatus.VIP],
        active_customers=counts[CustomerStatus.ACTIVE],
        inactive_customers=counts[CustomerStatus.INACTIVE],
        total_orders=sum(customer.total_orders for customer in customers),
        average_order_value=sum(
            (customer.average_order_value for customer in customers), ZERO
        )
        / len(customers),
    )


def order_integrity_issues(order: Order, tolerance: Decimal = CENT) -> list[str]:
    """
    Check an order against the amount invariants.

    The store is authoritative, so violations are reported rather than
    rejected.

    Returns:
        Human readable descriptions of every violated rule, empty when the
        order is consistent
    """
    issues = []

    if not order.order_items:
        issues.append("order has no items")
    if order.shipping_cost < 0:
        issues.append(f"shipping cost {order.shipping_cost} is negative")
    if order.total_amount < order.shipping_cost:
        issues.append(
            f"total amount {order.total_amount} is below shipping cost {order.shipping_cost}"
        )

    for item in order.order_items:
        if item.quantity < 1:
            issues.append(f"item {item.id or item.name} has quantity {item.quantity}")

    if order.order_items:
        items_total = sum((item.line_total for item in order.order_items), ZERO).quantize(
            CENT, rounding=ROUND_HALF_UP
        )
        if abs(items_total - order.subtotal) > tolerance:
            issues.append(
                f"items total {items_total} does not match subtotal {order.subtotal}"
            )

    return issues
