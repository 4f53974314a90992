"""Pydantic models for API payloads and HubSpot records."""

from crm_seeder.models.association import (  # noqa: F401
    AssociationPair,
    AttemptState,
    ContactCompanyMatch,
    ContactTicketMatch,
    QueuedAssociation,
)
from crm_seeder.models.crm import AssociationType, CrmRecord, ObjectKind  # noqa: F401
from crm_seeder.models.entities import (  # noqa: F401
    Company,
    Contact,
    Industry,
    Ticket,
    TicketCategory,
    TicketPriority,
)
from crm_seeder.models.results import (  # noqa: F401
    BatchResult,
    CreateError,
    CreateResult,
    WorkflowResult,
)
