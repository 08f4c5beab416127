"""Order-related data models."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import ConfigDict, Field

from parts_admin.models.base import Money, Quantity, Text, Timestamp, WireModel


class OrderStatus(str, Enum):
    """Order status progression."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def label(self) -> str:
        """French label shown in the back-office."""
        return STATUS_LABELS[self]


STATUS_LABELS = {
    OrderStatus.PENDING: "En attente",
    OrderStatus.CONFIRMED: "Confirmée",
    OrderStatus.PROCESSING: "En traitement",
    OrderStatus.SHIPPED: "Expédiée",
    OrderStatus.DELIVERED: "Livrée",
    OrderStatus.CANCELLED: "Annulée",
}

# Orders still moving through fulfilment
OPEN_STATUSES = frozenset(
    {
        OrderStatus.PENDING,
        OrderStatus.CONFIRMED,
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
    }
)


class OrderItem(WireModel):
    """Individual item in an order."""

    model_config = ConfigDict(frozen=True)

    id: Text = ""
    name: Text = ""
    quantity: Quantity = 0
    price: Money = Decimal("0")
    supplier: Text = ""
    article_no: Text = ""

    @property
    def line_total(self) -> Decimal:
        """Price times quantity for this line."""
        return self.price * Decimal(self.quantity)


class Address(WireModel):
    """Postal address attached to an order."""

    id: str | None = None
    address_line1: Text = ""
    address_line2: str | None = None
    city: Text = ""
    postal_code: Text = ""
    country: Text = ""
    phone: str | None = None


class StatusHistoryEntry(WireModel):
    """One recorded status change."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    status: OrderStatus
    notes: str | None = None
    created_by: Text = ""
    created_at: Timestamp


class Order(WireModel):
    """Complete order details."""

    id: str
    order_number: str

    # Customer
    customer_first_name: Text = ""
    customer_last_name: Text = ""
    customer_email: Text = ""
    customer_phone: Text = ""

    status: OrderStatus

    # Pricing
    total_amount: Money = Decimal("0")
    shipping_cost: Money = Decimal("0")

    created_at: Timestamp

    # Items
    order_items: list[OrderItem] = Field(default_factory=list)

    # Addresses are omitted from some list payloads
    shipping_address: Address | None = None
    billing_address: Address | None = None

    # Append-only, insertion ordered
    order_history: list[StatusHistoryEntry] = Field(default_factory=list)

    @property
    def subtotal(self) -> Decimal:
        """Amount before shipping."""
        return self.total_amount - self.shipping_cost

    @property
    def items_count(self) -> int:
        """Number of articles across all lines."""
        return sum(item.quantity for item in self.order_items)

    @property
    def customer_name(self) -> str:
        return f"{self.customer_first_name} {self.customer_last_name}".strip()

    @property
    def customer_initials(self) -> str:
        return f"{self.customer_first_name[:1]}{self.customer_last_name[:1]}".upper()

    def history_for_display(self) -> list[StatusHistoryEntry]:
        """History newest first; the underlying log is left untouched."""
        return sorted(self.order_history, key=lambda entry: entry.created_at, reverse=True)

    def with_status(
        self,
        status: OrderStatus,
        notes: str | None,
        actor: str,
        at: datetime | None = None,
    ) -> "Order":
        """
        Return a copy carrying the new status and one more history entry.

        The receiver is not modified, so a caller can stage the change and
        only publish the copy once it is safely persisted.
        """
        entry = StatusHistoryEntry(
            status=status,
            notes=notes or None,
            created_by=actor,
            created_at=at or datetime.now(timezone.utc),
        )
        return self.model_copy(
            update={
                "status": status,
                "order_history": [*self.order_history, entry],
            }
        )
