"""
POST /api/generate/{kind}: build sample records locally.

Nothing is sent to HubSpot, so no token is required. ``count`` (1-100,
default 10) and an optional integer ``seed`` come from the query string.
"""

from __future__ import annotations

import uuid
from typing import Dict, Optional

from crm_seeder.models.results import WorkflowResult
from crm_seeder.services.entity_generator import EntityGenerator
from crm_seeder.utils.error_handling import (
    ValidationError,
    error_response,
    internal_error_response,
    json_response,
)
from crm_seeder.utils.logging_config import get_logger

logger = get_logger(__name__)

KINDS = ("contacts", "companies", "tickets")
DEFAULT_COUNT = 10
MAX_COUNT = 100


def _kind(event: Dict) -> str:
    kind = (event.get("pathParameters") or {}).get("kind")
    if not kind:
        path = event.get("requestContext", {}).get("http", {}).get("path", "")
        kind = path.rstrip("/").rsplit("/", 1)[-1]
    if kind not in KINDS:
        raise ValidationError(f"Unknown entity kind: {kind}. Expected one of {', '.join(KINDS)}")
    return kind


def _int_param(params: Dict, name: str) -> Optional[int]:
    raw = params.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name} must be an integer") from exc


def lambda_handler(event, context):
    correlation_id = str(uuid.uuid4())
    try:
        kind = _kind(event)
        params = event.get("queryStringParameters") or {}
        count = _int_param(params, "count")
        count = DEFAULT_COUNT if count is None else count
        if not 1 <= count <= MAX_COUNT:
            raise ValidationError(f"count must be between 1 and {MAX_COUNT}")
        seed = _int_param(params, "seed")

        records = EntityGenerator(seed=seed).generate(kind, count)
        logger.info(
            "Sample records generated",
            extra={"correlation_id": correlation_id, "kind": kind, "count": count},
        )
        result = WorkflowResult(
            message=f"Generated {count} {kind}",
            records=[r.model_dump(mode="json", exclude_none=True) for r in records],
            summary={"count": count},
        )
        return json_response(200, result.to_json_dict())

    except ValidationError as exc:
        return error_response(exc)
    except Exception as exc:
        logger.exception("Sample generation failed", extra={"correlation_id": correlation_id})
        return internal_error_response(exc)
