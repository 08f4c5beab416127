"""Dashboard statistics and pagination models."""

from decimal import Decimal

from pydantic import Field

from parts_admin.models.base import Money, WireModel
from parts_admin.models.order import Order


class DashboardStats(WireModel):
    """Aggregate figures for the back-office overview."""

    total_orders: int = 0
    pending_orders: int = 0
    completed_orders: int = 0
    total_revenue: Money = Decimal("0")
    total_customers: int = 0
    average_order_value: Money = Decimal("0")
    this_month_orders: int = 0
    last_month_orders: int = 0
    this_month_revenue: Money = Decimal("0")
    last_month_revenue: Money = Decimal("0")
    orders_growth: float = 0.0
    revenue_growth: float = 0.0


class Pagination(WireModel):
    """Pagination block of an order list response."""

    total: int = Field(default=0, ge=0)
    total_pages: int = Field(default=1, ge=0)
    page: int = Field(default=1, ge=1)
    limit: int | None = None


class OrderPage(WireModel):
    """One page of orders as returned by the list endpoint."""

    orders: list[Order] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
