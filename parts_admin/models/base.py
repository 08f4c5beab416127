"""Shared field types for wire models."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from parts_admin.utils.numbers import to_decimal, to_int


def _assume_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _none_to_empty(value: Any) -> Any:
    return "" if value is None else value


# Currency amount: numbers and numeric strings accepted, garbage becomes 0
Money = Annotated[
    Decimal,
    BeforeValidator(to_decimal),
    PlainSerializer(float, return_type=float, when_used="json"),
]

# Item counts: same leniency as Money, truncated to a whole number
Quantity = Annotated[int, BeforeValidator(to_int)]

# Timestamps without an offset are read as UTC
Timestamp = Annotated[datetime, AfterValidator(_assume_utc)]

# Optional text that the store may send as null
Text = Annotated[str, BeforeValidator(_none_to_empty)]


class WireModel(BaseModel):
    """Model whose JSON keys are camelCase, as served by the Order Store."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )
