"""
Runtime settings for the seeder Lambda.

The only secret is the HubSpot private-app token. It comes from
HUBSPOT_API_KEY, or from Secrets Manager when the stack passes
HUBSPOT_SECRET_ARN instead.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Dict, Optional

import boto3

from crm_seeder.utils.error_handling import ConfigurationError
from crm_seeder.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_API_BASE_URL = "https://api.hubapi.com"

# Resolved secrets survive warm Lambda invocations.
_secret_cache: Dict[str, Optional[str]] = {}


def _read_secret(secret_arn: str) -> Optional[str]:
    """Fetch the token from Secrets Manager (plain string or JSON object)."""
    if secret_arn in _secret_cache:
        return _secret_cache[secret_arn]

    token: Optional[str] = None
    try:
        sm = boto3.client("secretsmanager")
        secret_value = sm.get_secret_value(SecretId=secret_arn)["SecretString"]
        try:
            parsed = json.loads(secret_value)
        except json.JSONDecodeError:
            parsed = secret_value
        if isinstance(parsed, dict):
            token = parsed.get("apiKey") or parsed.get("HUBSPOT_API_KEY")
        else:
            token = str(parsed).strip() or None
    except Exception as exc:
        logger.warning("Failed to load HubSpot secret", extra={"error": str(exc)})
        return None

    _secret_cache[secret_arn] = token
    return token


def _optional_float(name: str) -> Optional[float]:
    raw = os.environ.get(name)
    return float(raw) if raw else None


@dataclass
class AppSettings:
    """Settings resolved from the Lambda environment."""

    environment: str = "dev"
    hubspot_api_key: Optional[str] = None
    hubspot_secret_arn: Optional[str] = None
    api_base_url: str = DEFAULT_API_BASE_URL

    # None keeps the HTTP transport's own default.
    request_timeout_seconds: Optional[float] = None

    # HubSpot needs a moment before freshly created records can be linked.
    contact_link_delay_seconds: float = 10.0
    ticket_link_delay_seconds: float = 5.0

    fetch_page_limit: int = 100
    fetch_max_pages: int = 10

    @classmethod
    def from_environment(cls) -> "AppSettings":
        """Load settings from environment variables."""
        return cls(
            environment=os.environ.get("ENVIRONMENT", "dev"),
            hubspot_api_key=os.environ.get("HUBSPOT_API_KEY") or None,
            hubspot_secret_arn=os.environ.get("HUBSPOT_SECRET_ARN") or None,
            api_base_url=os.environ.get("HUBSPOT_API_BASE_URL", DEFAULT_API_BASE_URL),
            request_timeout_seconds=_optional_float("HUBSPOT_TIMEOUT_SECONDS"),
            contact_link_delay_seconds=float(
                os.environ.get("CONTACT_LINK_DELAY_SECONDS", "10")
            ),
            ticket_link_delay_seconds=float(
                os.environ.get("TICKET_LINK_DELAY_SECONDS", "5")
            ),
        )

    def resolve_api_key(self) -> Optional[str]:
        if self.hubspot_api_key:
            return self.hubspot_api_key
        if self.hubspot_secret_arn:
            return _read_secret(self.hubspot_secret_arn)
        return None

    @property
    def is_configured(self) -> bool:
        return bool(self.resolve_api_key())

    def require_api_key(self) -> str:
        """Return the token or fail before any HubSpot call is made."""
        token = self.resolve_api_key()
        if not token:
            raise ConfigurationError()
        return token


def get_settings() -> AppSettings:
    """Settings are cheap to build, so re-read the environment per request."""
    return AppSettings.from_environment()
