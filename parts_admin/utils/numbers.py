"""Lenient numeric coercion for values coming off the wire."""

from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a number or numeric string to a finite Decimal.

    Anything that does not parse (None, empty or garbage strings, NaN,
    infinities) becomes ``Decimal("0")``.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        return Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not result.is_finite():
        return ZERO
    return result


def to_int(value: Any) -> int:
    """
    Coerce a count to an int, truncating fractions.

    Uses the same rules as to_decimal, so unparsable values become ``0``.
    """
    return int(to_decimal(value))
