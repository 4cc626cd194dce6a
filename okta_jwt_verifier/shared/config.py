"""
Settings for okta-jwt-verifier.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..rules.models import NumericMode


DEFAULT_WELL_KNOWN_ENDPOINT = "/.well-known/openid-configuration"
DEFAULT_MIN_REFRESH_INTERVAL = 30.0
DEFAULT_ALGORITHMS = ["RS256", "RS384", "RS512", "ES256", "ES384", "ES512"]


class VerifierSettings(BaseSettings):
    """Verifier settings, read from ``OKTA_VERIFIER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="OKTA_VERIFIER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Issuer
    issuer: str = ""
    well_known_endpoint: str = DEFAULT_WELL_KNOWN_ENDPOINT
    http_timeout: float = Field(default=10.0, gt=0)

    # Key set cache
    cache_ttl_seconds: int = Field(default=300, ge=0)
    cache_max_size: int = Field(default=16, ge=1)
    min_refresh_interval_seconds: float = Field(default=DEFAULT_MIN_REFRESH_INTERVAL, ge=0)

    # Token parsing
    use_json_number: bool = False
    algorithms: List[str] = Field(default_factory=lambda: list(DEFAULT_ALGORITHMS))

    log_level: str = "info"

    @property
    def numeric_mode(self) -> NumericMode:
        """Numeric decoding mode implied by ``use_json_number``."""
        return NumericMode.FIXED_PRECISION if self.use_json_number else NumericMode.FLOAT
