"""Generate sample orders for the in-memory Order Store.

Usage:
    python -m scripts.seed_data [output.json] [count]

Then start the service with ORDER_STORE_BACKEND=memory and SEED_FILE pointing
at the generated file.
"""

import random
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

from parts_admin.models.order import Address, Order, OrderItem, OrderStatus
from parts_admin.models.stats import OrderPage, Pagination
from parts_admin.state.workflow import StatusTransitions

CATALOG = [
    ("Plaquettes de frein avant", "Bosch", "0986494524", Decimal("89.90")),
    ("Disque de frein ventilé", "Brembo", "09.A820.11", Decimal("124.50")),
    ("Filtre à huile", "Mann-Filter", "W712/95", Decimal("18.40")),
    ("Filtre à air", "Mann-Filter", "C27009", Decimal("32.00")),
    ("Kit de distribution", "Gates", "K015603XS", Decimal("389.00")),
    ("Amortisseur arrière", "Monroe", "G1160", Decimal("156.75")),
    ("Bougie d'allumage", "NGK", "BKR6E", Decimal("12.30")),
    ("Batterie 70Ah", "Varta", "E39", Decimal("265.00")),
    ("Courroie d'accessoire", "Continental", "6PK1070", Decimal("41.20")),
    ("Rotule de direction", "TRW", "JTE1075", Decimal("58.60")),
]

CUSTOMERS = [
    ("Amine", "Ben Salah", "amine.bensalah@example.tn", "+216 20 123 456", "Tunis"),
    ("Sarra", "Trabelsi", "sarra.trabelsi@example.tn", "+216 22 987 654", "Sfax"),
    ("Youssef", "Gharbi", "y.gharbi@example.tn", "+216 55 444 333", "Sousse"),
    ("Ines", "Mansour", "ines.mansour@example.tn", "+216 98 111 222", "Nabeul"),
    ("Karim", "Jaziri", "karim.jaziri@example.tn", "+216 29 765 432", "Bizerte"),
    ("Leila", "Hammami", "leila.hammami@example.tn", "+216 50 246 810", "Monastir"),
]

FINAL_STATUSES = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.DELIVERED,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
]

SHIPPING_COST = Decimal("7.00")


def _walk_to(final: OrderStatus, start: datetime, rng: random.Random) -> list[tuple[OrderStatus, datetime]]:
    """Legal path from PENDING to ``final`` with increasing timestamps."""
    path = [(OrderStatus.PENDING, start)]
    current = OrderStatus.PENDING
    at = start

    while current != final:
        next_steps = StatusTransitions.allowed_from(current)
        if final in next_steps:
            current = final
        else:
            current = next(step for step in next_steps if step != OrderStatus.CANCELLED)
        at = at + timedelta(hours=rng.randint(2, 48))
        path.append((current, at))

    return path


def build_orders(count: int, now: datetime, seed: int = 42) -> list[Order]:
    """Build ``count`` consistent orders spread over the last six months."""
    rng = random.Random(seed)
    orders = []

    for index in range(count):
        first, last, email, phone, city = rng.choice(CUSTOMERS)
        created_at = now - timedelta(days=rng.randint(0, 180), minutes=rng.randint(0, 1440))

        items = []
        for product_name, supplier, article_no, price in rng.sample(CATALOG, rng.randint(1, 3)):
            items.append(
                OrderItem(
                    id=uuid4().hex,
                    name=product_name,
                    quantity=rng.randint(1, 4),
                    price=price,
                    supplier=supplier,
                    article_no=article_no,
                )
            )

        subtotal = sum((item.line_total for item in items), Decimal("0"))
        address = Address(
            address_line1=f"{rng.randint(1, 200)} avenue Habib Bourguiba",
            city=city,
            postal_code=str(rng.randint(1000, 9999)),
            country="Tunisie",
            phone=phone,
        )

        order = Order(
            id=uuid4().hex,
            order_number=f"ZCP-{now.year}-{index + 1:05d}",
            customer_first_name=first,
            customer_last_name=last,
            customer_email=email,
            customer_phone=phone,
            status=OrderStatus.PENDING,
            total_amount=subtotal + SHIPPING_COST,
            shipping_cost=SHIPPING_COST,
            created_at=created_at,
            order_items=items,
            shipping_address=address,
            billing_address=address.model_copy(),
        )

        for step_status, at in _walk_to(rng.choice(FINAL_STATUSES), created_at, rng):
            if step_status == OrderStatus.PENDING:
                order = order.with_status(step_status, "Commande reçue", "checkout", at=at)
            else:
                order = order.with_status(step_status, None, "admin", at=at)

        orders.append(order)

    return orders


def main() -> None:
    """Write the sample orders to disk."""
    output = Path(sys.argv[1] if len(sys.argv) > 1 else "seed_orders.json")
    count = int(sys.argv[2]) if len(sys.argv) > 2 else 60

    print("\n" + "=" * 50)
    print("  Seeding Back-Office Orders")
    print("=" * 50 + "\n")

    orders = build_orders(count, datetime.now(timezone.utc))
    page = OrderPage(orders=orders, pagination=Pagination(total=len(orders)))
    output.write_text(page.model_dump_json(by_alias=True, indent=2), encoding="utf-8")

    for status in OrderStatus:
        matching = sum(1 for order in orders if order.status == status)
        print(f"  ✓ {matching:3d} {status.label}")

    print(f"\n✓ {len(orders)} orders written to {output}\n")


if __name__ == "__main__":
    main()
