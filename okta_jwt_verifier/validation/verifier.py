"""
Verifier facade: key resolution, token parsing and claim verification.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional

import httpx

from ..jwks.cache import Cache, MemoryCache
from ..jwks.client import JWKSClient, key_set_from_document
from ..rules.constructors import Clock, expiration_rule, issued_at_rule, issuer_rule, utc_now
from ..rules.engine import RuleEngine
from ..rules.models import ClaimRule, NumericMode
from ..shared.config import (
    DEFAULT_ALGORITHMS, DEFAULT_MIN_REFRESH_INTERVAL, DEFAULT_WELL_KNOWN_ENDPOINT, VerifierSettings
)
from ..shared.logging import get_logger
from .parser import UnknownSigningKeyError, parse_token, strip_bearer_prefix


CACHE_KEY_KEY_SET = "jwks"


@dataclass(frozen=True)
class JWT:
    """A token whose signature verified and whose claims passed the rules."""

    claims: Dict[str, Any]
    header: Dict[str, Any] = field(default_factory=dict)


class Verifier:
    """Parses and verifies JWTs issued by an OIDC issuer such as Okta."""

    def __init__(
        self,
        issuer: str,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        cache: Optional[Cache] = None,
        well_known_endpoint: str = DEFAULT_WELL_KNOWN_ENDPOINT,
        numeric_mode: NumericMode = NumericMode.FLOAT,
        algorithms: Optional[Iterable[str]] = None,
        http_timeout: float = 10.0,
        now: Optional[Clock] = None,
        rule_engine: Optional[RuleEngine] = None,
        min_refresh_interval: float = DEFAULT_MIN_REFRESH_INTERVAL,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.issuer = issuer
        self.numeric_mode = numeric_mode
        self.algorithms = list(algorithms or DEFAULT_ALGORITHMS)
        self.cache = cache if cache is not None else MemoryCache()
        self.now = now or utc_now
        self.rule_engine = rule_engine or RuleEngine()
        self.logger = get_logger("verifier.validation")

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=http_timeout)
        self.jwks_client = JWKSClient(issuer, self._client, well_known_endpoint=well_known_endpoint)
        self.min_refresh_interval = min_refresh_interval
        self._timer = timer
        self._last_refresh: Optional[float] = None
        self._lock: Optional[asyncio.Lock] = None

    @classmethod
    def from_settings(
        cls,
        settings: VerifierSettings,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        cache: Optional[Cache] = None,
    ) -> "Verifier":
        """Build a verifier from ``VerifierSettings``."""
        if cache is None:
            cache = MemoryCache(ttl_seconds=settings.cache_ttl_seconds, max_size=settings.cache_max_size)

        return cls(
            settings.issuer,
            http_client=http_client,
            cache=cache,
            well_known_endpoint=settings.well_known_endpoint,
            numeric_mode=settings.numeric_mode,
            algorithms=settings.algorithms,
            http_timeout=settings.http_timeout,
            min_refresh_interval=settings.min_refresh_interval_seconds,
        )

    async def close(self) -> None:
        """Close the HTTP client if the verifier created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "Verifier":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def with_issuer_rule(self) -> ClaimRule:
        """Require ``iss`` to equal the issuer this verifier was built with."""
        return issuer_rule(self.issuer)

    def with_expiration_rule(self, leeway: int = 0) -> ClaimRule:
        """Reject tokens whose ``exp`` is more than ``leeway`` seconds old."""
        return expiration_rule(leeway, now=self.now, numeric_mode=self.numeric_mode)

    def with_issued_at_rule(self, leeway: int = 0) -> ClaimRule:
        """Reject tokens whose ``iat`` is more than ``leeway`` seconds ahead."""
        return issued_at_rule(leeway, now=self.now, numeric_mode=self.numeric_mode)

    async def parse_and_verify(self, token: str, *rules: ClaimRule) -> JWT:
        """Parse the token, verify its signature and check it against ``rules``.

        Only the given rules are checked; with no rules, no claims are
        verified at all. Key resolution and parse errors are raised before
        any rule runs; rule failures are raised together as one
        ``ClaimsValidationError``.
        """
        token = strip_bearer_prefix(token)

        key_set = await self.get_key_set()
        try:
            header, claims = parse_token(token, key_set, self.algorithms, self.numeric_mode)
        except UnknownSigningKeyError as exc:
            refreshed = await self._refresh_key_set(key_set, exc.kid)
            if refreshed is None:
                raise
            header, claims = parse_token(token, refreshed, self.algorithms, self.numeric_mode)

        self.rule_engine.verify(claims, rules)

        return JWT(claims=claims, header=header)

    async def get_key_set(self) -> Dict[str, Any]:
        """Return the issuer's key set from the cache or the network."""
        key_set, found = self.cache.get(CACHE_KEY_KEY_SET)
        if found:
            return key_set

        async with self._get_lock():
            key_set, found = self.cache.get(CACHE_KEY_KEY_SET)
            if found:
                return key_set

            return await self._fetch_key_set()

    async def _refresh_key_set(self, stale: Dict[str, Any], kid: Optional[str]) -> Optional[Dict[str, Any]]:
        """Refetch the key set after a kid miss, at most once per refresh interval.

        Returns ``None`` when no newer key set is available.
        """
        async with self._get_lock():
            current, found = self.cache.get(CACHE_KEY_KEY_SET)
            if found and current is not stale:
                return current

            now = self._timer()
            if self._last_refresh is not None and now - self._last_refresh < self.min_refresh_interval:
                self.logger.debug("Skipping key set refresh", kid=kid)
                return None

            # Key might be rotated; refresh once more eagerly.
            self.logger.info("Signing key not in key set, refreshing", kid=kid)
            self._last_refresh = now
            return await self._fetch_key_set()

    async def _fetch_key_set(self) -> Dict[str, Any]:
        jwks_uri = await self.jwks_client.get_jwks_uri()
        document = await self.jwks_client.get_jwks(jwks_uri)
        key_set = key_set_from_document(document)

        self.cache.set(CACHE_KEY_KEY_SET, key_set)
        self.logger.info(
            "JWKS refreshed successfully",
            issuer=self.issuer,
            keys_count=len(key_set["keys"])
        )

        return key_set

    def _get_lock(self) -> asyncio.Lock:
        # Created on first use so it binds to the running loop.
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock
