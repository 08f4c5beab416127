"""Customer-related models.

Customers are not stored anywhere: they are derived from the order list on
every request and must not be cached as persisted fields.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from parts_admin.models.base import Money, WireModel


class CustomerStatus(str, Enum):
    """Derived customer segment."""

    VIP = "vip"
    ACTIVE = "active"
    INACTIVE = "inactive"

    @property
    def label(self) -> str:
        return {"vip": "VIP", "active": "Actif", "inactive": "Inactif"}[self.value]


class DerivedCustomer(WireModel):
    """Customer summary computed from their orders."""

    email: str
    first_name: str
    last_name: str
    phone: str = ""
    city: str = ""
    country: str = ""
    total_orders: int
    total_spent: Money
    average_order_value: Money
    last_order_date: datetime
    first_order_date: datetime
    status: CustomerStatus

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()


class RosterSummary(WireModel):
    """Headline figures of the customers screen."""

    total_customers: int = 0
    vip_customers: int = 0
    active_customers: int = 0
    inactive_customers: int = 0
    total_orders: int = 0
    average_order_value: Money = Decimal("0")
