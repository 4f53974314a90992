"""
Shared plumbing for the HTTP handlers.

Every workflow handler follows the same contract: check the HubSpot token
before anything else, run the workflow against a fresh EventLog, and turn
whatever happened into a JSON proxy response that carries the log lines.
"""

from __future__ import annotations

import uuid
from typing import Callable, Dict, Optional, Tuple

from crm_seeder.config.settings import AppSettings, get_settings
from crm_seeder.models.results import WorkflowResult
from crm_seeder.utils.error_handling import (
    AppError,
    ConfigurationError,
    ValidationError,
    error_response,
    internal_error_response,
    json_response,
)
from crm_seeder.utils.event_log import EventLog
from crm_seeder.utils.logging_config import get_logger

logger = get_logger(__name__)

Workflow = Callable[[Dict, AppSettings, EventLog], WorkflowResult]

# Lazy-loaded client, reused while the token and base URL stay the same
_client = None
_client_key: Optional[Tuple[str, str]] = None


def get_client(settings: AppSettings):
    """Lazy-load the HubSpot client for the current credential."""
    global _client, _client_key
    token = settings.require_api_key()
    key = (token, settings.api_base_url)
    if _client is None or _client_key != key:
        from crm_seeder.services.hubspot_client import build_client

        if _client is not None:
            _client.close()
        _client = build_client(settings)
        _client_key = key
    return _client


def run_workflow(event: Dict, workflow: Workflow, name: str) -> Dict:
    """Run ``workflow`` under the shared credential check and error mapping."""
    correlation_id = str(uuid.uuid4())
    log = EventLog(logger, correlation_id=correlation_id)

    try:
        settings = get_settings()
        if not settings.is_configured:
            log.failure("HubSpot API key not configured")
            raise ConfigurationError()

        result = workflow(event, settings, log)
        result.logs = log.lines()

        logger.info(
            f"{name} completed",
            extra={"correlation_id": correlation_id, "summary": result.summary},
        )
        return json_response(200, result.to_json_dict())

    except AppError as exc:
        if isinstance(exc, ValidationError):
            log.failure(str(exc))
        logger.warning(
            f"{name} rejected",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return error_response(exc, log.lines())
    except Exception as exc:
        logger.exception(f"{name} failed", extra={"correlation_id": correlation_id})
        log.exception(f"General error: {exc}")
        return internal_error_response(exc, log.lines())
