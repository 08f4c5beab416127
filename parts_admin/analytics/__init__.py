"""Order aggregation and filtering."""

from parts_admin.analytics.aggregation import (
    classify_customer,
    compute_customer_roster,
    compute_dashboard_stats,
    growth_percentage,
    order_integrity_issues,
    recent_orders,
    summarize_roster,
    top_customers,
)
from parts_admin.analytics.filters import OrderQuery, filter_customers

__all__ = [
    "OrderQuery",
    "classify_customer",
    "compute_customer_roster",
    "compute_dashboard_stats",
    "filter_customers",
    "growth_percentage",
    "order_integrity_issues",
    "recent_orders",
    "summarize_roster",
    "top_customers",
]
