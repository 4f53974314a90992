"""Pydantic models for the demo records pushed into HubSpot."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


def _new_local_id() -> str:
    return str(uuid.uuid4())


class Industry(str, Enum):
    """Industries a generated company can belong to."""

    TECHNOLOGY = "technology"
    HEALTHCARE = "healthcare"
    FINANCE = "finance"
    EDUCATION = "education"
    RETAIL = "retail"
    MANUFACTURING = "manufacturing"
    CONSULTING = "consulting"
    REAL_ESTATE = "real_estate"


class TicketPriority(str, Enum):
    """HubSpot's internal values for hs_ticket_priority."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class TicketCategory(str, Enum):
    GENERAL = "general"
    TECHNICAL = "technical"
    BILLING = "billing"
    FEATURE_REQUEST = "feature_request"
    BUG_REPORT = "bug_report"


class Entity(BaseModel, ABC):
    """Locally generated record; ``id`` is never sent to HubSpot."""

    id: str = Field(default_factory=_new_local_id)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @abstractmethod
    def to_properties(self) -> Dict[str, Any]:
        """HubSpot property map for the create request."""

    @staticmethod
    def _compact(properties: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in properties.items() if v not in (None, "")}


class Contact(Entity):
    email: str = ""
    firstname: str
    lastname: str
    phone: str = ""
    company: str = ""
    jobtitle: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""
    website: str = ""

    @field_validator("firstname", "lastname")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Names feed email synthesis, so they cannot be blank."""
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("firstname and lastname must be provided")
        return cleaned

    def to_properties(self) -> Dict[str, Any]:
        return self._compact(
            {
                "email": self.email,
                "firstname": self.firstname,
                "lastname": self.lastname,
                "phone": self.phone,
                "company": self.company,
                "jobtitle": self.jobtitle,
                "address": self.address,
                "city": self.city,
                "state": self.state,
                "zip": self.zip,
                "country": self.country,
                "website": self.website,
            }
        )

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}"


class Company(Entity):
    name: str
    domain: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""
    website: str = ""
    industry: Optional[Industry] = None
    description: str = ""
    numberofemployees: Optional[int] = None
    annualrevenue: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("name must be provided")
        return cleaned

    def to_properties(self) -> Dict[str, Any]:
        return self._compact(
            {
                "name": self.name,
                "domain": self.domain,
                "phone": self.phone,
                "address": self.address,
                "city": self.city,
                "state": self.state,
                "zip": self.zip,
                "country": self.country,
                "website": self.website,
                "industry": self.industry.value if self.industry else None,
                "description": self.description,
                "numberofemployees": self.numberofemployees,
                "annualrevenue": self.annualrevenue,
            }
        )


class Ticket(Entity):
    subject: str
    content: str = ""
    hs_ticket_priority: TicketPriority = TicketPriority.MEDIUM
    hs_ticket_category: Optional[TicketCategory] = None
    hs_ticket_owner_id: str = ""
    hs_pipeline: str = "0"
    hs_pipeline_stage: str = "1"
    hs_ticket_source: str = ""
    hs_ticket_type: str = ""

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("subject must be provided")
        return cleaned

    @field_validator("hs_ticket_priority", mode="before")
    @classmethod
    def normalize_priority(cls, value: Any) -> Any:
        """Accept the lowercase spellings used by older payloads."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def to_properties(self) -> Dict[str, Any]:
        return self._compact(
            {
                "subject": self.subject,
                "content": self.content,
                "hs_ticket_priority": self.hs_ticket_priority.value,
                "hs_ticket_category": (
                    self.hs_ticket_category.value if self.hs_ticket_category else None
                ),
                "hs_ticket_owner_id": self.hs_ticket_owner_id,
                "hs_pipeline": self.hs_pipeline,
                "hs_pipeline_stage": self.hs_pipeline_stage,
                "hs_ticket_source": self.hs_ticket_source,
            }
        )
