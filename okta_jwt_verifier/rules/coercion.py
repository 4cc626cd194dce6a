"""
Type checks and timestamp decoding for claim values.
"""

import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Tuple, Type, Union

from ..shared.errors import ClaimTypeMismatchError, ClaimValueMismatchError
from .models import ClaimValue, NumericMode


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

ExpectedType = Union[Type, Tuple[Type, ...]]


def type_name(value_or_type: Any) -> str:
    """Name of a claim value's type, or of a type, for error messages."""
    if isinstance(value_or_type, tuple):
        return " or ".join(type_name(t) for t in value_or_type)
    if isinstance(value_or_type, type):
        return value_or_type.__name__
    return type(value_or_type).__name__


def with_article(name: str) -> str:
    return f"an {name}" if name[:1].lower() in "aeiou" else f"a {name}"


def is_instance(value: ClaimValue, value_type: ExpectedType) -> bool:
    """``isinstance`` that never lets a bool pass for a number."""
    allowed = value_type if isinstance(value_type, tuple) else (value_type,)
    if isinstance(value, bool) and bool not in allowed:
        return False
    return isinstance(value, allowed)


def expect_type(value: ClaimValue, value_type: ExpectedType) -> Any:
    """Return ``value`` if it is a ``value_type``, else raise a type mismatch."""
    if not is_instance(value, value_type):
        raise ClaimTypeMismatchError(
            f"expected {with_article(type_name(value_type))} but got {with_article(type_name(value))}",
            details={"expected": type_name(value_type), "actual": type_name(value)},
        )
    return value


def parse_timestamp(value: ClaimValue, numeric_mode: NumericMode) -> datetime:
    """Decode a NumericDate claim into a UTC datetime with whole seconds.

    In ``FLOAT`` mode the payload decoder produces floats for every number,
    so the value must be a float and is truncated. In ``FIXED_PRECISION``
    mode integers arrive as ``int`` and anything fractional as ``Decimal``;
    only integral values are accepted.
    """
    if numeric_mode == NumericMode.FIXED_PRECISION:
        seconds = _fixed_precision_seconds(value)
    else:
        number = expect_type(value, float)
        if not math.isfinite(number):
            raise ClaimValueMismatchError(f"timestamp '{value}' is out of range")
        seconds = int(number)

    try:
        return EPOCH + timedelta(seconds=seconds)
    except OverflowError as exc:
        raise ClaimValueMismatchError(f"timestamp '{value}' is out of range") from exc


def _fixed_precision_seconds(value: ClaimValue) -> int:
    number = expect_type(value, (int, Decimal))
    if isinstance(number, int):
        return number

    if not number.is_finite() or number != number.to_integral_value():
        raise ClaimTypeMismatchError(f"expected an integer timestamp but got '{number}'")
    return int(number)


def as_utc(moment: datetime) -> datetime:
    """Normalize ``moment`` to an aware UTC datetime; naive values are UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
