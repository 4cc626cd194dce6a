"""
Token validation: parsing plus claim verification behind one facade.
"""

from .parser import UnknownSigningKeyError, parse_token, strip_bearer_prefix
from .verifier import JWT, Verifier

__all__ = [
    "JWT",
    "UnknownSigningKeyError",
    "Verifier",
    "parse_token",
    "strip_bearer_prefix",
]
