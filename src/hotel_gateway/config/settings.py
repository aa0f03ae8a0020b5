"""Runtime configuration for the hotel gateway.

Relies on pydantic-settings so that environment variables (prefixed with ``AMADEUS_``)
can override defaults. See `.env.example` for common values.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Iterable, Literal, Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from hotel_gateway.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

PRODUCTION_BASE_URL = "https://api.amadeus.com"
TEST_BASE_URL = "https://test.travel.api.amadeus.com"
TOKEN_PATH = "/v1/security/oauth2/token"

MAX_BATCH_SIZE = 20


class Settings(BaseSettings):
    """Captures runtime configuration for the gateway."""

    client_id: Optional[str] = Field(default=None, description="OAuth client identifier")
    client_secret: Optional[str] = Field(default=None, description="OAuth client secret")
    guest_office_id: Optional[str] = Field(
        default=None,
        description="Office/PCC identifier sent with the token request (required by Enterprise UAT)",
    )
    env: Literal["production", "test"] = Field(
        default="production",
        description="Selects the production or test endpoint base",
    )
    base_url: Optional[str] = Field(
        default=None,
        description="Explicit API base URL; overrides the host implied by `env`",
    )

    rate_codes: Annotated[Tuple[str, ...], NoDecode] = Field(
        default=(),
        description="Rate codes injected into every offer search; comma-separated when provided via env",
    )
    max_rate_codes: Optional[int] = Field(
        default=None,
        ge=1,
        description="Upper bound on rate codes sent per pricing request",
    )
    payment_policy: Literal["NONE", "GUARANTEE", "DEPOSIT"] = Field(
        default="NONE",
        description="Default payment-policy filter for offer searches",
    )

    batch_size: int = Field(default=MAX_BATCH_SIZE, ge=1, le=MAX_BATCH_SIZE)
    batch_delay_s: float = Field(default=0.1, ge=0.0, description="Pause between pricing batches")
    request_timeout_s: float = Field(default=20.0, gt=0.0)
    token_safety_margin_s: float = Field(
        default=30.0,
        ge=0.0,
        description="Refresh the bearer token when less than this many seconds remain",
    )

    log_level: str = Field(default="INFO")
    log_dir: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_prefix="AMADEUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("env", mode="before")
    def _normalise_env(cls, value: object) -> object:
        if value in (None, ""):
            return "production"
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("payment_policy", mode="before")
    def _normalise_payment_policy(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("client_id", "client_secret", "guest_office_id", "base_url", mode="before")
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_dir", mode="before")
    def _expand_log_dir(cls, value: str | Path | None) -> Optional[Path]:
        if value in (None, ""):
            return None
        return Path(value).expanduser()

    @field_validator("rate_codes", mode="before")
    def _parse_rate_codes(cls, value: object) -> Tuple[str, ...]:
        if value is None or value == "":
            return ()
        if isinstance(value, str):
            parts: Iterable[str] = (part.strip() for part in value.split(","))
        elif isinstance(value, (list, tuple)):
            parts = (str(item).strip() for item in value)
        else:
            raise TypeError("rate_codes must be provided as a comma-separated string or list")
        seen: dict[str, None] = {}
        for part in parts:
            if part:
                seen.setdefault(part, None)
        return tuple(seen)

    @property
    def api_base_url(self) -> str:
        if self.base_url:
            return self.base_url.rstrip("/")
        return TEST_BASE_URL if self.env == "test" else PRODUCTION_BASE_URL

    @property
    def token_url(self) -> str:
        return f"{self.api_base_url}{TOKEN_PATH}"

    def environment_label(self) -> str:
        host = self.api_base_url.split("://", 1)[-1]
        name = "UAT" if self.env == "test" else "Production"
        return f"{name} ({host})"

    def require_credentials(self) -> Tuple[str, str]:
        """Fail fast when the client-credentials pair is incomplete; returns ``(client_id, client_secret)``."""
        client_id, client_secret = self.client_id, self.client_secret
        if not client_id or not client_secret:
            missing = [
                name
                for name, value in (("AMADEUS_CLIENT_ID", client_id), ("AMADEUS_CLIENT_SECRET", client_secret))
                if not value
            ]
            raise ConfigurationError(f"{' and '.join(missing)} environment variables are required")
        if self.env == "test" and not self.guest_office_id:
            logger.warning("AMADEUS_ENV=test without AMADEUS_GUEST_OFFICE_ID; UAT token requests may be rejected")
        return client_id, client_secret
