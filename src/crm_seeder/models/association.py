"""Association pairs, computed matches, and link attempt states."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import Field, field_validator

from crm_seeder.models.base import CamelModel


class AttemptState(str, Enum):
    """Lifecycle of one link attempt; SUCCEEDED and FAILED are terminal."""

    PENDING = "pending"
    PRIMARY_FAILED = "primary_failed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (AttemptState.SUCCEEDED, AttemptState.FAILED)


class AssociationPair(CamelModel):
    """
    Caller-supplied contact/company pair.

    Both ids must already be HubSpot record ids. Only presence is checked here;
    a local id simply fails at HubSpot and is reported as a per-pair error.
    """

    contact_id: Optional[str] = None
    company_id: Optional[str] = None

    @field_validator("contact_id", "company_id", mode="before")
    @classmethod
    def coerce_id(cls, value: Union[str, int, None]) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @property
    def is_complete(self) -> bool:
        return bool(self.contact_id and self.company_id)


class _Match(CamelModel):
    contact_id: str
    contact_email: str

    def outcome(self, success: bool, error: Optional[str] = None) -> Dict[str, Any]:
        payload = self.to_json_dict()
        payload["success"] = success
        if error is not None:
            payload["error"] = error
        return payload


class ContactCompanyMatch(_Match):
    company_id: str
    company_name: Optional[str] = None
    domain: str


class ContactTicketMatch(_Match):
    ticket_id: str
    ticket_subject: Optional[str] = None
    priority: str
    category: str = "general"
    fallback: bool = Field(default=False, exclude=True)


class QueuedAssociation(CamelModel):
    """A link queued by a create-then-link workflow."""

    from_id: str = Field(exclude=True)
    to_id: str = Field(exclude=True)
    contact_id: Optional[str] = None
    company_id: Optional[str] = None
    ticket_id: Optional[str] = None
