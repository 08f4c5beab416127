"""Data models for the back-office service."""

from parts_admin.models.customer import CustomerStatus, DerivedCustomer, RosterSummary
from parts_admin.models.order import (
    OPEN_STATUSES,
    Address,
    Order,
    OrderItem,
    OrderStatus,
    StatusHistoryEntry,
)
from parts_admin.models.stats import DashboardStats, OrderPage, Pagination

__all__ = [
    # Customer
    "CustomerStatus",
    "DerivedCustomer",
    "RosterSummary",
    # Order
    "Address",
    "Order",
    "OrderItem",
    "OrderStatus",
    "StatusHistoryEntry",
    "OPEN_STATUSES",
    # Stats
    "DashboardStats",
    "OrderPage",
    "Pagination",
]
