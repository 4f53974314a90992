"""Records as HubSpot returns them and the association type catalogue."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class ObjectKind(str, Enum):
    """HubSpot object types, spelled as they appear in API paths."""

    CONTACTS = "contacts"
    COMPANIES = "companies"
    TICKETS = "tickets"

    @property
    def singular(self) -> str:
        return {"contacts": "contact", "companies": "company", "tickets": "ticket"}[
            self.value
        ]


class AssociationType(Enum):
    """
    HubSpot-defined association types.

    Each member is (from kind, to kind, numeric type id, v3 type name). The ids
    are fixed by HubSpot's schema; look them up here instead of inlining them.
    """

    CONTACT_TO_COMPANY = (ObjectKind.CONTACTS, ObjectKind.COMPANIES, 1, "contact_to_company")
    COMPANY_TO_CONTACT = (ObjectKind.COMPANIES, ObjectKind.CONTACTS, 2, "company_to_contact")
    CONTACT_TO_TICKET = (ObjectKind.CONTACTS, ObjectKind.TICKETS, 15, "contact_to_ticket")
    TICKET_TO_CONTACT = (ObjectKind.TICKETS, ObjectKind.CONTACTS, 16, "ticket_to_contact")
    COMPANY_TO_TICKET = (ObjectKind.COMPANIES, ObjectKind.TICKETS, 25, "company_to_ticket")
    TICKET_TO_COMPANY = (ObjectKind.TICKETS, ObjectKind.COMPANIES, 26, "ticket_to_company")

    @property
    def from_kind(self) -> ObjectKind:
        return self.value[0]

    @property
    def to_kind(self) -> ObjectKind:
        return self.value[1]

    @property
    def type_id(self) -> int:
        return self.value[2]

    @property
    def legacy_name(self) -> str:
        return self.value[3]

    @classmethod
    def for_pair(cls, from_kind: ObjectKind, to_kind: ObjectKind) -> "AssociationType":
        for member in cls:
            if member.from_kind == from_kind and member.to_kind == to_kind:
                return member
        raise KeyError(f"No association type for {from_kind.value} -> {to_kind.value}")


class CrmRecord(BaseModel):
    """One object from a HubSpot list response."""

    id: str
    properties: Dict[str, Optional[Any]] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("properties", mode="before")
    @classmethod
    def default_properties(cls, value: Any) -> Any:
        return value or {}

    def prop(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = self.properties.get(name)
        return default if value in (None, "") else value
