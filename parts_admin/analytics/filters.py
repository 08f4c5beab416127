"""Filters for the customers and orders screens."""

from collections.abc import Iterable
from datetime import date, tzinfo
from typing import Any

from pydantic import Field, field_validator

from parts_admin.models.base import WireModel
from parts_admin.models.customer import CustomerStatus, DerivedCustomer
from parts_admin.models.order import Order, OrderStatus


def customer_matches(
    customer: DerivedCustomer,
    search: str = "",
    status: CustomerStatus | None = None,
) -> bool:
    """Search text and status filter must both hold."""
    if status is not None and customer.status != status:
        return False

    if not search:
        return True

    needle = search.lower()
    return (
        needle in customer.first_name.lower()
        or needle in customer.last_name.lower()
        or needle in customer.email.lower()
        or search in customer.phone
    )


def filter_customers(
    customers: Iterable[DerivedCustomer],
    search: str = "",
    status: CustomerStatus | str | None = None,
) -> list[DerivedCustomer]:
    """
    Keep customers matching a free-text search and an optional status.

    Names and email match case-insensitively, phone numbers literally.
    A status of ``None`` or ``"all"`` disables the status filter.
    """
    if status == "all":
        status = None
    elif status is not None:
        status = CustomerStatus(status)

    return [customer for customer in customers if customer_matches(customer, search, status)]


class OrderQuery(WireModel):
    """Parameters of the order list endpoint."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=12, ge=1)
    status: OrderStatus | None = None
    search: str = ""
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("status", mode="before")
    @classmethod
    def drop_all_status(cls, v: Any) -> Any:
        """The UI sends "all" (or nothing) when no status is selected."""
        if v in ("", "all"):
            return None
        return v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def drop_empty_date(cls, v: Any) -> Any:
        return None if v == "" else v

    def to_params(self) -> dict[str, str]:
        """Query string parameters, empty filters omitted."""
        params = {"page": str(self.page), "limit": str(self.limit)}
        if self.status is not None:
            params["status"] = self.status.value
        if self.search:
            params["search"] = self.search
        if self.start_date is not None:
            params["startDate"] = self.start_date.isoformat()
        if self.end_date is not None:
            params["endDate"] = self.end_date.isoformat()
        return params

    def with_filters(self, **changes: Any) -> "OrderQuery":
        """Copy with new filters; changing a filter goes back to page 1."""
        filters_changed = any(key != "page" for key in changes)
        data = self.model_dump()
        data.update(changes)
        if filters_changed and "page" not in changes:
            data["page"] = 1
        return OrderQuery.model_validate(data)

    def matches(self, order: Order, tz: tzinfo) -> bool:
        """Whether ``order`` passes the status, search and date filters."""
        if self.status is not None and order.status != self.status:
            return False

        if self.search:
            needle = self.search.lower()
            haystack = (
                order.order_number,
                order.customer_first_name,
                order.customer_last_name,
                order.customer_email,
            )
            if not any(needle in value.lower() for value in haystack):
                return False

        created_on = order.created_at.astimezone(tz).date()
        if self.start_date is not None and created_on < self.start_date:
            return False
        if self.end_date is not None and created_on > self.end_date:
            return False

        return True
