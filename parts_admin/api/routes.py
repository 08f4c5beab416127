"""API routes for the back-office screens."""

import csv
import io
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from fastapi.responses import Response
from pydantic import Field

from parts_admin.analytics.aggregation import RosterSort
from parts_admin.analytics.filters import OrderQuery
from parts_admin.config import Settings, get_settings
from parts_admin.errors import (
    InvalidStatusError,
    InvalidTransitionError,
    OrderNotFoundError,
    OrderStoreError,
    OrderStoreUnavailableError,
    StatusUpdateFailedError,
)
from parts_admin.models.base import Money, WireModel
from parts_admin.models.customer import CustomerStatus, DerivedCustomer, RosterSummary
from parts_admin.models.order import Order, OrderItem, OrderStatus, StatusHistoryEntry
from parts_admin.models.stats import DashboardStats, Pagination
from parts_admin.services.admin_views import AdminViewService, OrderDetailData
from parts_admin.store.base import OrderStore
from parts_admin.utils.formatting import (
    format_date,
    format_date_day,
    format_date_long,
    format_date_short,
    format_growth,
    format_price,
    page_label,
    page_range_text,
)
from parts_admin.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

ORDER_NOT_FOUND = "Commande non trouvée"
STORE_UNAVAILABLE = "Le service des commandes est indisponible, réessayez plus tard"


# Request/Response Models


class StatusOption(WireModel):
    """Status value with its display label."""

    value: OrderStatus
    label: str

    @classmethod
    def of(cls, order_status: OrderStatus) -> "StatusOption":
        return cls(value=order_status, label=order_status.label)


class OrderSummaryResponse(WireModel):
    """Order as shown in lists and on the dashboard."""

    id: str
    order_number: str
    customer_name: str
    customer_initials: str
    customer_email: str
    customer_phone: str
    status: OrderStatus
    status_label: str
    total_amount: Money
    total_amount_display: str
    items_count: int
    created_at: datetime
    created_at_display: str
    created_at_short: str

    @classmethod
    def from_order(cls, order: Order, settings: Settings) -> "OrderSummaryResponse":
        return cls(
            id=order.id,
            order_number=order.order_number,
            customer_name=order.customer_name,
            customer_initials=order.customer_initials,
            customer_email=order.customer_email,
            customer_phone=order.customer_phone,
            status=order.status,
            status_label=order.status.label,
            total_amount=order.total_amount,
            total_amount_display=format_price(order.total_amount, settings.currency),
            items_count=order.items_count,
            created_at=order.created_at,
            created_at_display=format_date(order.created_at, settings.tzinfo),
            created_at_short=format_date_short(order.created_at, settings.tzinfo),
        )


class CustomerResponse(WireModel):
    """Derived customer with display fields."""

    customer: DerivedCustomer
    initials: str
    status_label: str
    total_spent_display: str
    average_order_value_display: str
    first_order_display: str
    last_order_display: str

    @classmethod
    def from_customer(cls, customer: DerivedCustomer, settings: Settings) -> "CustomerResponse":
        return cls(
            customer=customer,
            initials=customer.initials,
            status_label=customer.status.label,
            total_spent_display=format_price(customer.total_spent, settings.currency),
            average_order_value_display=format_price(
                customer.average_order_value, settings.currency
            ),
            first_order_display=format_date_day(customer.first_order_date, settings.tzinfo),
            last_order_display=format_date_day(customer.last_order_date, settings.tzinfo),
        )


class DashboardResponse(WireModel):
    """Overview screen."""

    date_label: str
    stats: DashboardStats
    total_revenue_display: str
    average_order_value_display: str
    this_month_revenue_display: str
    orders_growth_display: str
    revenue_growth_display: str
    recent_orders: list[OrderSummaryResponse]
    top_customers: list[CustomerResponse]


class CustomersResponse(WireModel):
    """Customers screen."""

    customers: list[CustomerResponse]
    summary: RosterSummary
    average_order_value_display: str


class OrdersResponse(WireModel):
    """Paginated order list."""

    orders: list[OrderSummaryResponse]
    pagination: Pagination
    page_label: str
    range_text: str


class OrderItemResponse(WireModel):
    item: OrderItem
    price_display: str
    line_total_display: str


class HistoryEntryResponse(WireModel):
    entry: StatusHistoryEntry
    status_label: str
    created_at_display: str


class OrderDetailResponse(WireModel):
    """Order detail screen."""

    order: Order
    status_label: str
    subtotal: Money
    subtotal_display: str
    shipping_cost_display: str
    total_amount_display: str
    created_at_display: str
    items: list[OrderItemResponse]
    history: list[HistoryEntryResponse]
    allowed_statuses: list[StatusOption]
    integrity_issues: list[str]

    @classmethod
    def from_detail(cls, detail: OrderDetailData, settings: Settings) -> "OrderDetailResponse":
        order = detail.order
        currency = settings.currency
        return cls(
            order=order,
            status_label=order.status.label,
            subtotal=order.subtotal,
            subtotal_display=format_price(order.subtotal, currency),
            shipping_cost_display=format_price(order.shipping_cost, currency),
            total_amount_display=format_price(order.total_amount, currency),
            created_at_display=format_date(order.created_at, settings.tzinfo),
            items=[
                OrderItemResponse(
                    item=item,
                    price_display=format_price(item.price, currency),
                    line_total_display=format_price(item.line_total, currency),
                )
                for item in order.order_items
            ],
            history=[
                HistoryEntryResponse(
                    entry=entry,
                    status_label=entry.status.label,
                    created_at_display=format_date(entry.created_at, settings.tzinfo),
                )
                for entry in order.history_for_display()
            ],
            allowed_statuses=[StatusOption.of(s) for s in detail.allowed_statuses],
            integrity_issues=detail.integrity_issues,
        )


class StatusUpdateRequest(WireModel):
    """Request to change an order status."""

    status: str
    notes: str | None = Field(default=None, max_length=2000)


# Dependencies


def get_order_store(request: Request) -> OrderStore:
    """Order Store created at application startup."""
    return request.app.state.order_store


def get_view_service(
    store: OrderStore = Depends(get_order_store),
    settings: Settings = Depends(get_settings),
) -> AdminViewService:
    """Get view service instance."""
    return AdminViewService(store, settings)


def _unavailable(operation: str, error: OrderStoreError) -> HTTPException:
    logger.error("store_unavailable", operation=operation, error=str(error))
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=STORE_UNAVAILABLE,
    )


def _customer_status(value: str | None) -> CustomerStatus | None:
    if value in (None, "", "all"):
        return None
    try:
        return CustomerStatus(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown customer status: {value}",
        )


# Routes


@router.get("/admin/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    service: AdminViewService = Depends(get_view_service),
    settings: Settings = Depends(get_settings),
) -> DashboardResponse:
    """
    Overview of all orders.

    Stats with month-over-month growth, the latest orders and the best
    customers.
    """
    try:
        data = await service.dashboard()
    except OrderStoreError as e:
        raise _unavailable("dashboard", e)

    stats = data.stats
    currency = settings.currency

    return DashboardResponse(
        date_label=format_date_long(data.generated_at, settings.tzinfo),
        stats=stats,
        total_revenue_display=format_price(stats.total_revenue, currency),
        average_order_value_display=format_price(stats.average_order_value, currency),
        this_month_revenue_display=format_price(stats.this_month_revenue, currency),
        orders_growth_display=format_growth(stats.orders_growth),
        revenue_growth_display=format_growth(stats.revenue_growth),
        recent_orders=[
            OrderSummaryResponse.from_order(order, settings) for order in data.recent_orders
        ],
        top_customers=[
            CustomerResponse.from_customer(customer, settings)
            for customer in data.top_customers
        ],
    )


@router.get("/admin/customers", response_model=CustomersResponse)
async def list_customers(
    search: str = "",
    customer_status: str | None = Query(default=None, alias="status"),
    sort_by: RosterSort = Query(default="spent", alias="sortBy"),
    service: AdminViewService = Depends(get_view_service),
    settings: Settings = Depends(get_settings),
) -> CustomersResponse:
    """Customers derived from orders, filtered and sorted."""
    wanted_status = _customer_status(customer_status)

    try:
        data = await service.customers(search=search, status=wanted_status, sort_by=sort_by)
    except OrderStoreError as e:
        raise _unavailable("customers", e)

    return CustomersResponse(
        customers=[
            CustomerResponse.from_customer(customer, settings) for customer in data.customers
        ],
        summary=data.summary,
        average_order_value_display=format_price(
            data.summary.average_order_value, settings.currency
        ),
    )


@router.get("/admin/customers/export")
async def export_customers(
    search: str = "",
    customer_status: str | None = Query(default=None, alias="status"),
    sort_by: RosterSort = Query(default="spent", alias="sortBy"),
    service: AdminViewService = Depends(get_view_service),
) -> Response:
    """Download the filtered customer list as CSV."""
    wanted_status = _customer_status(customer_status)

    try:
        data = await service.customers(search=search, status=wanted_status, sort_by=sort_by)
    except OrderStoreError as e:
        raise _unavailable("customers_export", e)

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(
        [
            "email",
            "firstName",
            "lastName",
            "phone",
            "city",
            "country",
            "totalOrders",
            "totalSpent",
            "averageOrderValue",
            "firstOrderDate",
            "lastOrderDate",
            "status",
        ]
    )
    for customer in data.customers:
        writer.writerow(
            [
                customer.email,
                customer.first_name,
                customer.last_name,
                customer.phone,
                customer.city,
                customer.country,
                customer.total_orders,
                _amount(customer.total_spent),
                _amount(customer.average_order_value),
                customer.first_order_date.isoformat(),
                customer.last_order_date.isoformat(),
                customer.status.value,
            ]
        )

    logger.info("customers_exported", count=len(data.customers))

    return Response(
        content=buffer.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="clients.csv"'},
    )


@router.get("/admin/orders", response_model=OrdersResponse)
async def list_orders(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1, le=1000),
    order_status: str | None = Query(default=None, alias="status"),
    search: str = "",
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    service: AdminViewService = Depends(get_view_service),
    settings: Settings = Depends(get_settings),
) -> OrdersResponse:
    """One page of orders matching the filters."""
    if order_status not in (None, "", "all") and order_status not in OrderStatus.__members__:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown order status: {order_status}",
        )

    query = OrderQuery(
        page=page,
        limit=limit or settings.page_size,
        status=order_status,
        search=search,
        start_date=start_date,
        end_date=end_date,
    )

    try:
        result = await service.orders_page(query)
    except OrderStoreError as e:
        raise _unavailable("orders", e)

    pagination = result.pagination
    return OrdersResponse(
        orders=[OrderSummaryResponse.from_order(order, settings) for order in result.orders],
        pagination=pagination,
        page_label=page_label(query.page, pagination.total_pages),
        range_text=page_range_text(query.page, query.limit, pagination.total),
    )


@router.get("/admin/orders/{order_id}", response_model=OrderDetailResponse)
async def get_order_detail(
    order_id: str,
    service: AdminViewService = Depends(get_view_service),
    settings: Settings = Depends(get_settings),
) -> OrderDetailResponse:
    """Full order with items, addresses and status history."""
    try:
        detail = await service.order_detail(order_id)
    except OrderNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ORDER_NOT_FOUND,
        )
    except OrderStoreError as e:
        raise _unavailable("order_detail", e)

    return OrderDetailResponse.from_detail(detail, settings)


@router.patch("/admin/orders/{order_id}/status", response_model=OrderDetailResponse)
async def update_order_status(
    order_id: str,
    request: StatusUpdateRequest,
    x_admin_actor: str | None = Header(default=None),
    service: AdminViewService = Depends(get_view_service),
    settings: Settings = Depends(get_settings),
) -> OrderDetailResponse:
    """
    Change the status of an order.

    The change is recorded in the order history. The response is the order
    as re-read from the store after the update.
    """
    actor = x_admin_actor or settings.default_actor

    try:
        detail = await service.update_status(order_id, request.status, request.notes, actor)
    except InvalidStatusError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except OrderNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=ORDER_NOT_FOUND,
        )
    except InvalidTransitionError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    except (StatusUpdateFailedError, OrderStoreUnavailableError) as e:
        logger.error("status_update_failed", order_id=order_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="La mise à jour du statut a échoué, rechargez la commande",
        )
    except OrderStoreError as e:
        raise _unavailable("update_status", e)

    return OrderDetailResponse.from_detail(detail, settings)


# Admin endpoints


@router.get("/admin/statuses", response_model=list[StatusOption])
async def list_statuses() -> list[StatusOption]:
    """All order statuses with their labels."""
    return [StatusOption.of(s) for s in OrderStatus]


@router.get("/admin/metrics")
async def get_metrics(store: OrderStore = Depends(get_order_store)) -> dict[str, Any]:
    """Order Store call timings."""
    tracer = getattr(store, "tracer", None)
    if tracer is None:
        return {"component": "order_store", "total_events": 0, "operations": {}}
    return tracer.get_trace_summary()


def _amount(value: Decimal) -> str:
    return f"{value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):.2f}"
