"""
Error hierarchy for okta-jwt-verifier.
"""

from typing import Dict, Any, List, Optional, TYPE_CHECKING
from pydantic import BaseModel

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..rules.models import ClaimFailure


class ErrorResponse(BaseModel):
    """Serializable error payload for callers that report verifier failures."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class VerifierException(Exception):
    """Base exception for the verifier."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class InvalidClaimError(VerifierException):
    """A claim value was rejected by a rule predicate."""


class ClaimTypeMismatchError(InvalidClaimError):
    """The claim value does not have the shape the rule expects."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("CLAIM_TYPE_MISMATCH", message, details)


class ClaimValueMismatchError(InvalidClaimError):
    """The claim value has the right shape but the wrong content."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("CLAIM_VALUE_MISMATCH", message, details)


class ClaimsValidationError(VerifierException):
    """One or more claim rules failed; carries every failure of the call."""

    def __init__(self, failures: List["ClaimFailure"]):
        self.failures = list(failures)
        super().__init__(
            "CLAIMS_VALIDATION_ERROR",
            "; ".join(failure.message for failure in self.failures),
            {"failures": [failure.to_dict() for failure in self.failures]},
        )


class UnexpectedStatusError(VerifierException):
    """An issuer endpoint answered with a status other than 200."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        if body is None:
            message = f"expected status code 200 but got status code {status_code}"
        else:
            message = f"expected status code 200 but got status code {status_code} with data: {body}"
        super().__init__("UNEXPECTED_STATUS", message, {"status_code": status_code})


class FetchError(VerifierException):
    """Transport or decoding failure while talking to the issuer."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("FETCH_ERROR", message, details)


class DiscoveryError(VerifierException):
    """The OIDC discovery document could not be retrieved."""

    def __init__(self, cause: Exception, details: Optional[Dict[str, Any]] = None):
        super().__init__("DISCOVERY_ERROR", f"getting jwks uri: {cause}", details)


class JWKSError(VerifierException):
    """The JWKS document could not be retrieved or used as a key set."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("JWKS_ERROR", message, details)


class TokenParseError(VerifierException):
    """The token is malformed or its signature does not verify."""

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("TOKEN_PARSE_ERROR", f"parsing jwt: {reason}", details)
