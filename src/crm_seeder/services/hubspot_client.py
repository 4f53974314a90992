"""
Thin synchronous wrapper around the HubSpot CRM object APIs.

Methods return the raw ``httpx.Response`` and leave status interpretation to
the caller, because callers treat failures differently: per-item failures are
recorded and skipped, failed precondition reads abort the workflow. Transport
problems surface as one of ``REQUEST_ERRORS``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

import httpx

from crm_seeder.config.settings import DEFAULT_API_BASE_URL
from crm_seeder.models.crm import AssociationType, ObjectKind
from crm_seeder.utils.error_handling import ConfigurationError
from crm_seeder.utils.logging_config import get_logger

logger = get_logger(__name__)

# InvalidURL comes from building the request (e.g. a control character in an
# id) and is not an HTTPError subclass.
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


class HubSpotClient:
    """Authenticated HubSpot client; one instance per warm Lambda."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not api_key:
            raise ConfigurationError()
        client_kwargs: Dict[str, Any] = {
            "base_url": base_url,
            "headers": {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport
        self._http = httpx.Client(**client_kwargs)

    def __enter__(self) -> "HubSpotClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def create_object(self, kind: ObjectKind, properties: Dict[str, Any]) -> httpx.Response:
        """POST a single record to the v3 object endpoint."""
        return self._http.post(
            f"/crm/v3/objects/{kind.value}", json={"properties": properties}
        )

    def list_objects(
        self,
        kind: ObjectKind,
        properties: Iterable[str],
        limit: int = 100,
        after: Optional[str] = None,
    ) -> httpx.Response:
        """GET one page of records."""
        params: Dict[str, Any] = {"limit": limit, "properties": ",".join(properties)}
        if after:
            params["after"] = after
        return self._http.get(f"/crm/v3/objects/{kind.value}", params=params)

    def iter_pages(
        self,
        kind: ObjectKind,
        properties: Iterable[str],
        limit: int = 100,
        max_pages: int = 10,
    ) -> Iterator[Tuple[int, httpx.Response]]:
        """
        Follow ``paging.next.after`` cursors.

        Stops after ``max_pages``, on the first non-2xx page (which is still
        yielded so the caller can report it), or on an empty page.
        """
        properties = list(properties)
        after: Optional[str] = None
        for page_no in range(1, max_pages + 1):
            response = self.list_objects(kind, properties, limit=limit, after=after)
            yield page_no, response
            if not response.is_success:
                return
            data = response.json()
            if not isinstance(data, dict) or not data.get("results"):
                return
            after = data.get("paging", {}).get("next", {}).get("after")
            if not after:
                return

    def create_association(
        self, association_type: AssociationType, from_id: str, to_id: str
    ) -> httpx.Response:
        """Labelled v4 association: PUT with a list of association types."""
        path = (
            f"/crm/v4/objects/{association_type.from_kind.value}/{from_id}"
            f"/associations/{association_type.to_kind.value}/{to_id}"
        )
        body = [
            {
                "associationCategory": "HUBSPOT_DEFINED",
                "associationTypeId": association_type.type_id,
            }
        ]
        return self._http.put(path, json=body)

    def create_legacy_association(
        self, association_type: AssociationType, from_id: str, to_id: str
    ) -> httpx.Response:
        """Older v3 shape, addressed by association type name in the path."""
        path = (
            f"/crm/v3/objects/{association_type.from_kind.value}/{from_id}"
            f"/associations/{association_type.to_kind.value}/{to_id}"
            f"/{association_type.legacy_name}"
        )
        return self._http.put(path)


def build_client(settings) -> HubSpotClient:
    """Create a client from AppSettings, failing fast when the token is missing."""
    api_key = settings.require_api_key()
    logger.info("HubSpot client created", extra={"base_url": settings.api_base_url})
    return HubSpotClient(
        api_key=api_key,
        base_url=settings.api_base_url,
        timeout=settings.request_timeout_seconds,
    )
