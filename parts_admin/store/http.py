"""Order Store client for the external admin REST API."""

from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from parts_admin.analytics.filters import OrderQuery
from parts_admin.errors import OrderStoreError, OrderStoreUnavailableError, StatusConflictError
from parts_admin.models.order import Order, OrderStatus
from parts_admin.models.stats import OrderPage, Pagination
from parts_admin.store.base import OrderStore
from parts_admin.utils.logging import AuditLogger
from parts_admin.utils.tracing import OperationTracer

ORDERS_PATH = "/api/admin/orders"


class HttpOrderStore(OrderStore):
    """
    Reads and patches orders through ``/api/admin/orders``.

    Transport failures and 5xx answers raise OrderStoreUnavailableError;
    other unexpected answers raise OrderStoreError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.tracer = OperationTracer("order_store")
        self.logger = AuditLogger("order_store")

    async def list_orders(self, query: OrderQuery) -> OrderPage:
        """Fetch one page of orders."""
        response = await self._request(
            "list_orders", "GET", ORDERS_PATH, params=query.to_params()
        )
        self._raise_for_status("list_orders", response)
        data = self._json("list_orders", response)

        try:
            orders = [Order.model_validate(item) for item in data.get("orders") or []]
        except ValidationError as e:
            self.logger.log_error(str(e), "list_orders")
            raise OrderStoreError(f"Malformed order in list response: {e}") from e

        pagination = data.get("pagination") or {}
        return OrderPage(
            orders=orders,
            pagination=Pagination(
                total=pagination.get("total") or len(orders),
                total_pages=pagination.get("totalPages") or 1,
                page=query.page,
                limit=query.limit,
            ),
        )

    async def get_order(self, order_id: str) -> Order | None:
        """Fetch a single order with items, addresses and history."""
        response = await self._request("get_order", "GET", self._order_path(order_id))

        if response.status_code == httpx.codes.NOT_FOUND:
            return None

        self._raise_for_status("get_order", response)
        data = self._json("get_order", response)

        if not data.get("order"):
            return None

        try:
            return Order.model_validate(data["order"])
        except ValidationError as e:
            self.logger.log_error(str(e), "get_order", order_id=order_id)
            raise OrderStoreError(f"Malformed order {order_id}: {e}") from e

    async def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        notes: str | None,
        actor: str,
        expected_status: OrderStatus | None = None,
    ) -> None:
        """Send the status change; the store appends the history entry."""
        body = {"status": status.value, "notes": notes or ""}
        if expected_status is not None:
            body["expectedStatus"] = expected_status.value

        response = await self._request(
            "update_status",
            "PATCH",
            self._order_path(order_id),
            json=body,
            headers={"X-Admin-Actor": actor},
        )

        if response.status_code == httpx.codes.CONFLICT and expected_status is not None:
            raise StatusConflictError(order_id, expected_status.value)
        self._raise_for_status("update_status", response)

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def _order_path(self, order_id: str) -> str:
        return f"{ORDERS_PATH}/{quote(order_id, safe='')}"

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            with self.tracer.trace_operation(operation):
                try:
                    response = await self.client.request(method, url, **kwargs)
                except httpx.HTTPError as e:
                    raise OrderStoreUnavailableError(f"Order Store unreachable: {e}") from e

                if response.status_code >= 500:
                    raise OrderStoreUnavailableError(
                        f"Order Store answered {response.status_code}",
                        status_code=response.status_code,
                    )
        except OrderStoreError as e:
            self.logger.log_error(str(e), operation, url=url)
            raise

        # The event for this call was just recorded by trace_operation
        event = self.tracer.events[-1]
        self.logger.log_store_call(
            operation,
            duration_ms=event.duration_ms,
            success=response.is_success,
            status_code=response.status_code,
        )
        return response

    def _raise_for_status(self, operation: str, response: httpx.Response) -> None:
        if response.is_success:
            return

        self.logger.log_error(
            f"unexpected status {response.status_code}",
            operation,
            url=str(response.request.url),
        )
        raise OrderStoreError(
            f"Order Store rejected {operation} with {response.status_code}",
            status_code=response.status_code,
        )

    def _json(self, operation: str, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            self.logger.log_error("invalid JSON body", operation)
            raise OrderStoreError(f"Order Store sent invalid JSON for {operation}") from e

        if not isinstance(data, dict):
            raise OrderStoreError(f"Order Store sent an unexpected body for {operation}")
        return data
