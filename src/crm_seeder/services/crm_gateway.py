"""
CRM Gateway.

Pushes locally generated records into HubSpot one at a time and reads
existing records back. A failed create is recorded against the record's local
id and the batch moves on; nothing is retried.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from crm_seeder.models.crm import CrmRecord, ObjectKind
from crm_seeder.models.entities import Company, Contact, Entity, Ticket
from crm_seeder.models.results import BatchResult, CreateError, CreateResult
from crm_seeder.services.hubspot_client import REQUEST_ERRORS
from crm_seeder.utils.error_handling import PreconditionFetchError
from crm_seeder.utils.event_log import EventLog

CONTACT_FETCH_PROPERTIES = ("email", "firstname", "lastname")
COMPANY_FETCH_PROPERTIES = ("name", "domain", "website", "industry")
TICKET_FETCH_PROPERTIES = (
    "subject",
    "content",
    "hs_ticket_priority",
    "hs_ticket_category",
)

MISSING_ID_ERROR = "HubSpot response missing id"

# ValueError covers undecodable bodies and records that fail validation.
CALL_ERRORS = (*REQUEST_ERRORS, ValueError)


def describe(kind: ObjectKind, entity: Entity) -> str:
    """Short human label used in narrative lines."""
    if isinstance(entity, Contact):
        return entity.full_name
    if isinstance(entity, Company):
        return entity.name
    if isinstance(entity, Ticket):
        return entity.subject
    return f"{kind.singular} {entity.id}"


def _records(response) -> List[CrmRecord]:
    body = response.json()
    if not isinstance(body, dict):
        raise ValueError("Unexpected HubSpot list response")
    return [CrmRecord.model_validate(r) for r in body.get("results") or []]

class CrmGateway:
    """Create and read HubSpot objects, collecting per-item outcomes."""

    def __init__(self, client, log: EventLog):
        self.client = client
        self.log = log

    def create_one(
        self, kind: ObjectKind, entity: Entity, properties: Optional[dict] = None
    ) -> Tuple[Optional[str], Optional[str]]:
        """Return ``(remote_id, None)`` on success or ``(None, error)``."""
        label = describe(kind, entity)
        try:
            response = self.client.create_object(kind, properties or entity.to_properties())
            if not response.is_success:
                error_text = response.text
                self.log.failure(
                    f"Failed to create {kind.singular} {label}: "
                    f"Status {response.status_code} - {error_text}"
                )
                return None, error_text
            body = response.json()
        except CALL_ERRORS as exc:
            message = str(exc) or exc.__class__.__name__
            self.log.exception(f"Exception creating {kind.singular} {label}: {message}")
            return None, message

        remote_id = body.get("id") if isinstance(body, dict) else None
        if remote_id in (None, ""):
            self.log.failure(f"HubSpot response missing id for {kind.singular} {label}")
            return None, MISSING_ID_ERROR

        remote_id = str(remote_id)
        self.log.success(
            f"{kind.singular.capitalize()} created successfully: {label} -> HubSpot ID: {remote_id}"
        )
        return remote_id, None

    def create_many(self, kind: ObjectKind, entities: Sequence[Entity]) -> BatchResult:
        """Submit each record independently; failures never stop the batch."""
        batch = BatchResult()
        self.log.info(f"Starting to process {len(entities)} {kind.value}...", marker="🚀")
        for entity in entities:
            self.log.info(f"Sending {kind.singular}: {describe(kind, entity)}", marker="📤")
            remote_id, error = self.create_one(kind, entity)
            if remote_id is not None:
                batch.results.append(CreateResult(local_id=entity.id, remote_id=remote_id))
            else:
                batch.errors.append(CreateError(local_id=entity.id, error=error or ""))
        self.log.info(
            f"{kind.singular.capitalize()} processing complete: "
            f"{len(batch.results)} successful, {len(batch.errors)} failed",
            marker="📊",
        )
        return batch

    def create_contacts(self, contacts: Sequence[Contact]) -> BatchResult:
        return self.create_many(ObjectKind.CONTACTS, contacts)

    def create_companies(self, companies: Sequence[Company]) -> BatchResult:
        return self.create_many(ObjectKind.COMPANIES, companies)

    def create_tickets(self, tickets: Sequence[Ticket]) -> BatchResult:
        return self.create_many(ObjectKind.TICKETS, tickets)

    def fetch_recent(
        self, kind: ObjectKind, properties: Iterable[str], limit: int = 100
    ) -> List[CrmRecord]:
        """
        Read one page of existing records that a workflow depends on.

        Any failure here is fatal for the caller, unlike per-item failures.
        """
        self.log.info(f"Fetching latest {limit} {kind.value} from HubSpot...")
        try:
            response = self.client.list_objects(kind, properties, limit=limit)
            if response.is_success:
                records = _records(response)
        except CALL_ERRORS as exc:
            message = str(exc) or exc.__class__.__name__
            self.log.exception(f"Exception fetching {kind.value}: {message}")
            raise PreconditionFetchError(
                f"Failed to fetch {kind.value} from HubSpot: {message}"
            ) from exc

        if not response.is_success:
            self.log.failure(
                f"Failed to fetch {kind.value}: Status {response.status_code} - {response.text}"
            )
            raise PreconditionFetchError(
                f"Failed to fetch {kind.value} from HubSpot", status=response.status_code
            )

        self.log.success(f"Fetched {len(records)} {kind.value} from HubSpot")
        return records

    def fetch_all(
        self,
        kind: ObjectKind,
        properties: Iterable[str],
        limit: int = 100,
        max_pages: int = 10,
    ) -> Tuple[List[CrmRecord], int]:
        """Walk pages until exhausted or capped; a failed page ends the scan."""
        records: List[CrmRecord] = []
        pages = 0
        self.log.info(f"Fetching {kind.value} from HubSpot...", marker="🚀")
        try:
            for page_no, response in self.client.iter_pages(
                kind, properties, limit=limit, max_pages=max_pages
            ):
                pages = page_no
                self.log.info(f"Fetching page {page_no}...", marker="📄")
                if not response.is_success:
                    self.log.failure(
                        f"Failed to fetch {kind.value}: Status {response.status_code} - {response.text}"
                    )
                    break
                page = _records(response)
                if page:
                    records.extend(page)
                    self.log.success(f"Fetched {len(page)} {kind.value} from page {page_no}")
        except CALL_ERRORS as exc:
            self.log.exception(f"Exception fetching {kind.value}: {exc}")

        self.log.info(
            f"{kind.singular.capitalize()} fetch complete: {len(records)} {kind.value} retrieved",
            marker="📊",
        )
        return records, pages
