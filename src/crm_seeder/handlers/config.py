"""GET /api/hubspot/config: report whether a HubSpot token is available."""

from crm_seeder.config.settings import get_settings
from crm_seeder.utils.error_handling import ConfigurationError, json_response
from crm_seeder.utils.logging_config import get_logger

logger = get_logger(__name__)


def lambda_handler(event, context):
    """Never makes a HubSpot call; only checks the credential is resolvable."""
    settings = get_settings()
    if settings.is_configured:
        return json_response(
            200,
            {"configured": True, "message": "HubSpot API key is configured"},
        )

    logger.warning("HubSpot API key missing", extra={"environment": settings.environment})
    body = ConfigurationError().to_body()
    body.pop("success", None)
    return json_response(500, body)
