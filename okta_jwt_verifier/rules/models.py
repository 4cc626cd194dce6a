"""
Claim rule data models.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union


# A value decoded from the token payload JSON. ``Decimal`` only appears when
# numbers are decoded in fixed-precision mode.
ClaimValue = Union[str, int, float, Decimal, bool, None, List[Any], Dict[str, Any]]

ClaimPredicate = Callable[[ClaimValue], None]


class NumericMode(str, Enum):
    """How JSON numbers in the token payload are decoded."""
    FIXED_PRECISION = "fixed_precision"
    FLOAT = "float"


class TimestampDirection(str, Enum):
    """Which side of "now" a timestamp claim may not stray to."""
    EXPIRATION = "expiration"
    ISSUED_AT = "issued_at"


class FailureKind(str, Enum):
    """Why a claim did not pass its rule."""
    TYPE_MISMATCH = "type_mismatch"
    VALUE_MISMATCH = "value_mismatch"
    NOT_FOUND = "not_found"
    INVALID = "invalid"


@dataclass(frozen=True)
class ClaimRule:
    """A claim key and the predicate its value must satisfy.

    The predicate receives the decoded claim value and raises
    ``InvalidClaimError`` when the value is not acceptable. A rule without a
    predicate only requires the claim to be present.
    """
    key: str
    predicate: Optional[ClaimPredicate] = None

    def __post_init__(self):
        if not self.key:
            raise ValueError("claim rule key must not be empty")


@dataclass(frozen=True)
class ClaimFailure:
    """A single failed rule."""
    key: str
    kind: FailureKind
    reason: Optional[str] = None

    @property
    def message(self) -> str:
        if self.kind == FailureKind.NOT_FOUND:
            return f"claim '{self.key}' not found"
        return f"claim '{self.key}' is invalid: {self.reason}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "claim": self.key,
            "kind": self.kind.value,
            "reason": self.reason,
        }


@dataclass
class VerificationOutcome:
    """Result of evaluating a rule list against a claim mapping."""
    failures: List[ClaimFailure] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.failures

    @property
    def message(self) -> str:
        return "; ".join(failure.message for failure in self.failures)
