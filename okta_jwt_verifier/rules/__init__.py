"""
Claim rules package.

Defines the claim rule model, the factories for common rules and the
engine that evaluates an ordered rule list against a decoded claim set.
Every rule is evaluated, and all failures are reported together as a
single error so callers see the complete picture in one round trip.

Modules of interest:
- models: ClaimRule, failures, outcomes and the numeric/timestamp enums.
- constructors: exact-match, contains-all and timestamp-window factories.
- coercion: type checks and NumericDate decoding shared by the factories.
- engine: Evaluation and aggregation.
"""

from .constructors import (
    audience_rule,
    client_id_rule,
    contains_rule,
    exact_match_rule,
    expiration_rule,
    issued_at_rule,
    issuer_rule,
    timestamp_rule,
)
from .engine import RuleEngine, verify_claims
from .models import (
    ClaimFailure,
    ClaimRule,
    ClaimValue,
    FailureKind,
    NumericMode,
    TimestampDirection,
    VerificationOutcome,
)

__all__ = [
    "ClaimFailure",
    "ClaimRule",
    "ClaimValue",
    "FailureKind",
    "NumericMode",
    "RuleEngine",
    "TimestampDirection",
    "VerificationOutcome",
    "audience_rule",
    "client_id_rule",
    "contains_rule",
    "exact_match_rule",
    "expiration_rule",
    "issued_at_rule",
    "issuer_rule",
    "timestamp_rule",
    "verify_claims",
]
