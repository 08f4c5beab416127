"""Display formatting for amounts, dates and pagination."""

from datetime import datetime, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from math import ceil
from typing import Any

from parts_admin.config import get_settings
from parts_admin.utils.numbers import ZERO, to_decimal

CENT = Decimal("0.01")

FRENCH_DAYS = ["lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"]
FRENCH_MONTHS = [
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
]


def format_price(value: Any, currency: str | None = None) -> str:
    """
    Render an amount with two decimals and the currency suffix.

    Numeric strings are accepted; anything unparsable renders as zero.
    """
    currency = currency or get_settings().currency
    amount = to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    if amount == 0:
        amount = ZERO.quantize(CENT)
    return f"{amount:.2f} {currency}"


def _local(value: datetime, tz: tzinfo | None) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz or get_settings().tzinfo)


def format_date(value: datetime, tz: tzinfo | None = None) -> str:
    """dd/MM/yyyy HH:mm in local time."""
    return _local(value, tz).strftime("%d/%m/%Y %H:%M")


def format_date_short(value: datetime, tz: tzinfo | None = None) -> str:
    """dd/MM/yy in local time."""
    return _local(value, tz).strftime("%d/%m/%y")


def format_date_day(value: datetime, tz: tzinfo | None = None) -> str:
    """dd/MM/yyyy in local time."""
    return _local(value, tz).strftime("%d/%m/%Y")


def format_date_long(value: datetime, tz: tzinfo | None = None) -> str:
    """Spelled out in French, e.g. ``samedi 17 octobre 2026``."""
    local = _local(value, tz)
    day_name = FRENCH_DAYS[local.weekday()]
    month_name = FRENCH_MONTHS[local.month - 1]
    return f"{day_name} {local.day:02d} {month_name} {local.year}"


def format_growth(percentage: float) -> str:
    """Signed percentage with one decimal."""
    return f"{percentage:+.1f}%"


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed for ``total`` items; never less than one."""
    if limit <= 0:
        raise ValueError("limit must be positive")
    return max(1, ceil(total / limit))


def page_range_text(page: int, limit: int, total: int) -> str:
    """Items shown on ``page``, e.g. ``13-24 sur 25``."""
    first = min((page - 1) * limit + 1, total)
    last = min(page * limit, total)
    return f"{first}-{last} sur {total}"


def page_label(page: int, pages: int) -> str:
    return f"Page {page} sur {pages}"
