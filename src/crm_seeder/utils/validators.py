"""Lightweight validation helpers for inbound payloads."""

import base64
import json
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from crm_seeder.utils.error_handling import ValidationError

M = TypeVar("M", bound=BaseModel)


def parse_json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the API Gateway body; an absent body is an empty object."""
    raw = event.get("body")
    if not raw:
        return {}
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw).decode("utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Request body is not valid JSON: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def require_array(payload: Dict[str, Any], field: str) -> List[Any]:
    """Return payload[field] when it is a list, otherwise reject the request."""
    value = payload.get(field)
    if not isinstance(value, list):
        raise ValidationError(f"{field.capitalize()} array is required")
    return value


def parse_items(model: Type[M], items: List[Any], field: str) -> List[M]:
    """Validate each array element against ``model``; report the first bad one."""
    parsed: List[M] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError(f"{field}[{index}] must be an object")
        try:
            parsed.append(model.model_validate(item))
        except PydanticValidationError as exc:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise ValidationError(f"Invalid {field}[{index}]: {details}") from exc
    return parsed
