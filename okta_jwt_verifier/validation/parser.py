"""
Token parsing: signature verification and payload decoding.
"""

import json
from decimal import Decimal
from typing import Any, Dict, Iterable, Tuple

from jose import jws
from jose.exceptions import JOSEError

from ..jwks.client import find_keys
from ..rules.models import NumericMode
from ..shared.errors import TokenParseError


class UnknownSigningKeyError(TokenParseError):
    """No key in the key set matches the token's ``kid``."""

    def __init__(self, kid: str):
        self.kid = kid
        super().__init__("signing key not found", details={"kid": kid})


def strip_bearer_prefix(token: str) -> str:
    """Remove a leading ``Bearer`` scheme from an Authorization header value."""
    if token[:7].lower() == "bearer ":
        return token[7:].strip()
    return token


def decoder_options(numeric_mode: NumericMode) -> Dict[str, Any]:
    """``json.loads`` keyword arguments for the numeric decoding mode."""
    if numeric_mode == NumericMode.FIXED_PRECISION:
        return {"parse_float": Decimal}
    return {"parse_int": float}


def parse_token(
    token: str,
    key_set: Dict[str, Any],
    algorithms: Iterable[str],
    numeric_mode: NumericMode = NumericMode.FLOAT,
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Verify the token signature against ``key_set`` and decode its claims.

    Registered claims such as ``exp`` are not validated here; that is left
    to the claim rules. Returns ``(header, claims)``.
    """
    try:
        header = jws.get_unverified_header(token)
    except JOSEError as exc:
        raise TokenParseError(f"token is malformed: {exc}") from exc

    kid = header.get("kid")
    candidates = find_keys(key_set, kid)
    if not candidates:
        raise UnknownSigningKeyError(kid)

    try:
        payload = jws.verify(token, {"keys": candidates}, list(algorithms))
    except JOSEError as exc:
        raise TokenParseError(f"token signature is invalid: {exc}", details={"kid": kid}) from exc

    try:
        claims = json.loads(payload.decode("utf-8"), **decoder_options(numeric_mode))
    except ValueError as exc:
        raise TokenParseError(f"could not JSON decode claims: {exc}") from exc

    if not isinstance(claims, dict):
        raise TokenParseError("claims are not a JSON object")

    return header, claims
