"""Order Store implementations."""

from parts_admin.config import Settings
from parts_admin.store.base import OrderStore, fetch_all_orders
from parts_admin.store.http import HttpOrderStore
from parts_admin.store.memory import InMemoryOrderStore


def create_order_store(settings: Settings) -> OrderStore:
    """Build the store selected by ``order_store_backend``."""
    if settings.order_store_backend == "memory":
        if settings.seed_file:
            return InMemoryOrderStore.from_file(settings.seed_file, tz=settings.tzinfo)
        return InMemoryOrderStore(tz=settings.tzinfo)

    return HttpOrderStore(
        settings.order_api_base_url,
        timeout=settings.order_api_timeout,
    )


__all__ = [
    "HttpOrderStore",
    "InMemoryOrderStore",
    "OrderStore",
    "create_order_store",
    "fetch_all_orders",
]
