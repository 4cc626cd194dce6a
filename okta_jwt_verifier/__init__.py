"""
okta-jwt-verifier

Resolves an OIDC issuer's signing keys, parses bearer tokens and checks
their claims against caller-supplied rules, reporting every failed rule in
one aggregated error.
"""

__version__ = "0.1.0"

from .jwks import Cache, MemoryCache, NopCache
from .rules import (
    ClaimFailure,
    ClaimRule,
    FailureKind,
    NumericMode,
    RuleEngine,
    TimestampDirection,
    VerificationOutcome,
    audience_rule,
    client_id_rule,
    contains_rule,
    exact_match_rule,
    expiration_rule,
    issued_at_rule,
    issuer_rule,
    timestamp_rule,
    verify_claims,
)
from .shared.config import VerifierSettings
from .shared.errors import (
    ClaimsValidationError,
    ClaimTypeMismatchError,
    ClaimValueMismatchError,
    DiscoveryError,
    InvalidClaimError,
    JWKSError,
    TokenParseError,
    VerifierException,
)
from .shared.logging import configure_logging
from .validation import JWT, Verifier

__all__ = [
    "Cache",
    "ClaimFailure",
    "ClaimRule",
    "ClaimTypeMismatchError",
    "ClaimValueMismatchError",
    "ClaimsValidationError",
    "DiscoveryError",
    "FailureKind",
    "InvalidClaimError",
    "JWKSError",
    "JWT",
    "MemoryCache",
    "NopCache",
    "NumericMode",
    "RuleEngine",
    "TimestampDirection",
    "TokenParseError",
    "VerificationOutcome",
    "Verifier",
    "VerifierException",
    "VerifierSettings",
    "audience_rule",
    "client_id_rule",
    "configure_logging",
    "contains_rule",
    "exact_match_rule",
    "expiration_rule",
    "issued_at_rule",
    "issuer_rule",
    "timestamp_rule",
    "verify_claims",
]
