"""
Key resolution for an OIDC issuer: discovery, JWKS download and caching.
"""

from .cache import Cache, MemoryCache, NopCache
from .client import DiscoveryDocument, JWKSClient, find_keys, key_set_from_document

__all__ = [
    "Cache",
    "DiscoveryDocument",
    "JWKSClient",
    "MemoryCache",
    "NopCache",
    "find_keys",
    "key_set_from_document",
]
