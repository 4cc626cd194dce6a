"""
OIDC discovery and JWKS retrieval for an issuer.
"""

from __future__ import annotations

import json
import posixpath
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from ..shared.config import DEFAULT_WELL_KNOWN_ENDPOINT
from ..shared.errors import DiscoveryError, FetchError, JWKSError, UnexpectedStatusError
from ..shared.logging import get_logger


class DiscoveryDocument(BaseModel):
    """The part of the OIDC discovery document the verifier relies on."""

    model_config = ConfigDict(extra="allow")

    jwks_uri: StrictStr


def join_url_path(*parts: str) -> str:
    """Join URL path segments into one clean absolute path."""
    segments = [part.strip("/") for part in parts if part and part.strip("/")]
    return posixpath.normpath("/" + "/".join(segments))


class JWKSClient:
    """Fetches an issuer's discovery document and JSON Web Key Set."""

    def __init__(
        self,
        issuer: str,
        http_client: httpx.AsyncClient,
        *,
        well_known_endpoint: str = DEFAULT_WELL_KNOWN_ENDPOINT,
    ) -> None:
        self.issuer = issuer
        self.well_known_endpoint = well_known_endpoint
        self.logger = get_logger("verifier.jwks")
        self._client = http_client

    @property
    def discovery_url(self) -> str:
        url = httpx.URL(self.issuer)
        return str(url.copy_with(path=join_url_path(url.path, self.well_known_endpoint)))

    async def get_jwks_uri(self) -> str:
        """Look up ``jwks_uri`` in the issuer's discovery document."""
        try:
            response = await self._get(self.discovery_url)
            try:
                document = DiscoveryDocument.model_validate_json(response.content)
            except ValidationError as exc:
                raise FetchError(
                    f"json-decoding response body: {_first_error(exc)}",
                    details={"url": self.discovery_url},
                ) from exc
        except (UnexpectedStatusError, FetchError) as exc:
            self.logger.error("OIDC discovery failed", issuer=self.issuer, error=str(exc))
            raise DiscoveryError(exc, details=exc.details) from exc

        self.logger.info("Resolved JWKS URI", issuer=self.issuer, jwks_uri=document.jwks_uri)
        return document.jwks_uri

    async def get_jwks(self, jwks_uri: str) -> Dict[str, Any]:
        """Download the JWKS document at ``jwks_uri``."""
        try:
            response = await self._get(jwks_uri)
            try:
                payload = json.loads(response.content)
            except ValueError as exc:
                raise FetchError(f"json-decoding response body: {exc}", details={"url": jwks_uri}) from exc
        except (UnexpectedStatusError, FetchError) as exc:
            self.logger.error("JWKS download failed", jwks_uri=jwks_uri, error=str(exc))
            raise JWKSError(f"getting jwks: {exc}", details=exc.details) from exc

        if not isinstance(payload, dict):
            raise JWKSError("getting jwks: JWKS document is not a JSON object", details={"url": jwks_uri})

        return payload

    async def _get(self, url: str) -> httpx.Response:
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(f"making http request: {exc}", details={"url": url}) from exc

        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError(response.status_code, response.text)

        return response


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    if location:
        return f"{location}: {error['msg']}"
    return error["msg"]


def key_set_from_document(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a JWKS document and return it as a usable key set."""
    keys = payload.get("keys")
    if not isinstance(keys, list):
        raise JWKSError("creating key set: JWKS response missing 'keys' array")

    usable = [key for key in keys if isinstance(key, dict) and key.get("kty")]
    if not usable:
        raise JWKSError("creating key set: JWKS contains no usable keys")

    return {"keys": usable}


def find_keys(key_set: Dict[str, Any], kid: Optional[str]) -> list:
    """Keys from ``key_set`` that may have signed a token with ``kid``."""
    keys = key_set.get("keys", [])
    if kid is None:
        return list(keys)
    return [key for key in keys if key.get("kid") == kid]
