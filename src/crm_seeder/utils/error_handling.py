"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict, List, Optional


JSON_HEADERS = {"Content-Type": "application/json"}


class AppError(Exception):
    """Base class for errors that abort a whole request."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "error": str(self)}


class ConfigurationError(AppError):
    """Raised when the HubSpot credential is missing."""

    def __init__(
        self,
        message: str = (
            "HubSpot API key not configured. "
            "Please set HUBSPOT_API_KEY environment variable."
        ),
    ):
        super().__init__(message, status_code=500)

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        body["configured"] = False
        return body


class ValidationError(AppError):
    """Raised when the request body is missing or malformed."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=400)


class PreconditionFetchError(AppError):
    """Raised when a read that a workflow depends on fails."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, status_code=500)
        self.upstream_status = status


class MissingCrmDataError(AppError):
    """Raised when a create-then-link workflow finds nothing to link to."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


def json_response(status: int, body: Dict[str, Any]) -> Dict[str, Any]:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": JSON_HEADERS,
        "body": json.dumps(body, default=str),
    }


def error_response(error: AppError, logs: Optional[List[str]] = None) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    body = error.to_body()
    body["logs"] = logs or []
    return json_response(error.status_code, body)


def internal_error_response(
    exc: Exception, logs: Optional[List[str]] = None
) -> Dict[str, Any]:
    """Response for anything that escaped the workflow."""
    return json_response(
        500,
        {
            "success": False,
            "error": "Internal server error",
            "details": str(exc) or exc.__class__.__name__,
            "logs": logs or [],
        },
    )
