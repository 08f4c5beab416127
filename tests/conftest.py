"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator, Callable
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from parts_admin.main import app
from parts_admin.models.order import Address, Order, OrderItem, OrderStatus
from parts_admin.store.memory import InMemoryOrderStore

TUNIS = ZoneInfo("Africa/Tunis")

# Fixed reference time for date-dependent rules
NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def build_order(
    order_id: str = "1",
    email: str = "amine.bensalah@example.tn",
    first_name: str = "Amine",
    last_name: str = "Ben Salah",
    phone: str = "+216 20 123 456",
    city: str = "Tunis",
    status: OrderStatus = OrderStatus.PENDING,
    total: str = "107.00",
    shipping: str = "7.00",
    created_at: datetime = NOW - timedelta(days=5),
    items: list[OrderItem] | None = None,
) -> Order:
    """Build a consistent order: one item priced at total minus shipping."""
    if items is None:
        items = [
            OrderItem(
                id=f"{order_id}-1",
                name="Plaquettes de frein avant",
                quantity=1,
                price=Decimal(total) - Decimal(shipping),
                supplier="Bosch",
                article_no="0986494524",
            )
        ]

    address = Address(
        address_line1="12 avenue Habib Bourguiba",
        city=city,
        postal_code="1000",
        country="Tunisie",
    )

    order = Order(
        id=order_id,
        order_number=f"ZCP-2026-{int(order_id):05d}" if order_id.isdigit() else order_id,
        customer_first_name=first_name,
        customer_last_name=last_name,
        customer_email=email,
        customer_phone=phone,
        status=OrderStatus.PENDING,
        total_amount=Decimal(total),
        shipping_cost=Decimal(shipping),
        created_at=created_at,
        order_items=items,
        shipping_address=address,
        billing_address=address.model_copy(),
    )
    order = order.with_status(OrderStatus.PENDING, None, "checkout", at=created_at)
    if status != OrderStatus.PENDING:
        order = order.model_copy(update={"status": status})
    return order


@pytest.fixture
def now() -> datetime:
    """Reference time used by the tests."""
    return NOW


@pytest.fixture
def make_order() -> Callable[..., Order]:
    """Factory for consistent orders."""
    return build_order


@pytest.fixture
def sample_orders() -> list[Order]:
    """A small mixed set of orders from three customers."""
    return [
        build_order("1", status=OrderStatus.DELIVERED, total="1207.00", created_at=NOW - timedelta(days=40)),
        build_order("2", status=OrderStatus.PENDING, total="57.00", created_at=NOW - timedelta(days=2)),
        build_order(
            "3",
            email="sarra.trabelsi@example.tn",
            first_name="Sarra",
            last_name="Trabelsi",
            phone="+216 22 987 654",
            city="Sfax",
            status=OrderStatus.SHIPPED,
            total="307.00",
            created_at=NOW - timedelta(days=10),
        ),
        build_order(
            "4",
            email="y.gharbi@example.tn",
            first_name="Youssef",
            last_name="Gharbi",
            phone="+216 55 444 333",
            city="Sousse",
            status=OrderStatus.CANCELLED,
            total="87.00",
            created_at=NOW - timedelta(days=120),
        ),
        build_order(
            "5",
            email="sarra.trabelsi@example.tn",
            first_name="Sarra",
            last_name="Trabelsi",
            phone="+216 22 987 654",
            city="Sfax",
            status=OrderStatus.CONFIRMED,
            total="127.00",
            created_at=NOW - timedelta(days=1),
        ),
    ]


@pytest.fixture
def many_orders() -> list[Order]:
    """25 orders, one per day, for pagination."""
    return [
        build_order(str(index), created_at=NOW - timedelta(days=index))
        for index in range(1, 26)
    ]


@pytest.fixture
def memory_store(sample_orders: list[Order]) -> InMemoryOrderStore:
    """In-memory store seeded with the sample orders."""
    return InMemoryOrderStore(sample_orders, tz=TUNIS)


@pytest_asyncio.fixture
async def test_client(memory_store: InMemoryOrderStore) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app, backed by the in-memory store."""
    app.state.order_store = memory_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.state.order_store = None
