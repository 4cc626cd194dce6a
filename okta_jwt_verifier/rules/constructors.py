"""
Factories for common claim rules.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, List, Optional, Type, Union

from ..shared.errors import ClaimTypeMismatchError, ClaimValueMismatchError
from .coercion import as_utc, expect_type, is_instance, parse_timestamp, type_name, with_article
from .models import ClaimRule, ClaimValue, NumericMode, TimestampDirection


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def exact_match_rule(claim: str, want_value: Any, value_type: Optional[Type] = None) -> ClaimRule:
    """Require the claim to equal ``want_value`` exactly.

    ``value_type`` defaults to the type of ``want_value``; a claim of any
    other type fails with a type mismatch before values are compared.
    """
    expected_type = value_type or type(want_value)

    def predicate(value: ClaimValue) -> None:
        got = expect_type(value, expected_type)
        if got != want_value:
            raise ClaimValueMismatchError(f"expected '{want_value}' but got '{got}'")

    return ClaimRule(key=claim, predicate=predicate)


def contains_rule(claim: str, want_values: Iterable[Any], value_type: Optional[Type] = None) -> ClaimRule:
    """Require the claim to be a list holding every one of ``want_values``.

    All missing values are reported together, once each, in the order they
    were wanted. Every wanted value must be of the element type, which
    defaults to the type of the first wanted value.
    """
    want_values = list(want_values)

    if value_type is not None:
        element_type = value_type
    elif want_values:
        element_type = type(want_values[0])
    else:
        element_type = str

    for want_value in want_values:
        if not is_instance(want_value, element_type):
            raise ValueError(
                f"wanted value '{want_value}' is not {with_article(type_name(element_type))}"
            )

    wanted = _distinct(want_values)

    def predicate(value: ClaimValue) -> None:
        items = expect_type(value, list)

        for item in items:
            if not is_instance(item, element_type):
                raise ClaimTypeMismatchError(
                    f"value of array element is not {with_article(type_name(element_type))}",
                    details={"expected": type_name(element_type), "actual": type_name(item)},
                )

        got_values = _distinct(items)
        missing = [want_value for want_value in wanted if want_value not in got_values]
        if missing:
            raise ClaimValueMismatchError(
                "missing value(s): " + ", ".join(f"'{want_value}'" for want_value in missing),
                details={"missing": missing},
            )

    return ClaimRule(key=claim, predicate=predicate)


def _distinct(values: List[Any]) -> List[Any]:
    # Equality scan; list and object claim values are not hashable.
    distinct: List[Any] = []
    for value in values:
        if value not in distinct:
            distinct.append(value)
    return distinct


def timestamp_rule(
    claim: str,
    leeway: Union[int, float] = 0,
    direction: TimestampDirection = TimestampDirection.EXPIRATION,
    now: Optional[Clock] = None,
    numeric_mode: NumericMode = NumericMode.FLOAT,
) -> ClaimRule:
    """Require a NumericDate claim to sit within ``leeway`` seconds of now.

    ``EXPIRATION`` fails once ``now - timestamp`` exceeds the leeway,
    ``ISSUED_AT`` once ``timestamp - now`` does. A difference equal to the
    leeway passes.
    """
    if leeway < 0:
        raise ValueError("leeway must not be negative")

    tolerance = timedelta(seconds=leeway)
    clock = now or utc_now

    def predicate(value: ClaimValue) -> None:
        timestamp = parse_timestamp(value, numeric_mode)
        current = as_utc(clock())

        if direction == TimestampDirection.EXPIRATION:
            if current - timestamp > tolerance:
                raise ClaimValueMismatchError("token is expired")
        elif timestamp - current > tolerance:
            raise ClaimValueMismatchError("token was issued in the future")

    return ClaimRule(key=claim, predicate=predicate)


def audience_rule(want_aud: str) -> ClaimRule:
    """Require the ``aud`` claim to equal ``want_aud``."""
    return exact_match_rule("aud", want_aud)


def client_id_rule(want_cid: str) -> ClaimRule:
    """Require the ``cid`` claim to equal ``want_cid``."""
    return exact_match_rule("cid", want_cid)


def issuer_rule(want_iss: str) -> ClaimRule:
    """Require the ``iss`` claim to equal ``want_iss``."""
    return exact_match_rule("iss", want_iss)


def expiration_rule(
    leeway: Union[int, float] = 0,
    now: Optional[Clock] = None,
    numeric_mode: NumericMode = NumericMode.FLOAT,
) -> ClaimRule:
    """Reject tokens whose ``exp`` is more than ``leeway`` seconds in the past."""
    return timestamp_rule("exp", leeway, TimestampDirection.EXPIRATION, now, numeric_mode)


def issued_at_rule(
    leeway: Union[int, float] = 0,
    now: Optional[Clock] = None,
    numeric_mode: NumericMode = NumericMode.FLOAT,
) -> ClaimRule:
    """Reject tokens whose ``iat`` is more than ``leeway`` seconds in the future."""
    return timestamp_rule("iat", leeway, TimestampDirection.ISSUED_AT, now, numeric_mode)
