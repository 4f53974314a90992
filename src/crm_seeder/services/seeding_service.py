"""
Create-then-link workflows.

New contacts are attached to a random existing company (their email is built
on that company's domain) and new tickets to a random existing contact. After
the whole batch is created the workflow waits for HubSpot to make the new
records linkable, then links each one with the v4 -> v3 fallback.
"""

from __future__ import annotations

import random
import time
from typing import Callable, List, Optional, Sequence, Tuple

from crm_seeder.config.settings import AppSettings
from crm_seeder.models.association import AttemptState, QueuedAssociation
from crm_seeder.models.crm import AssociationType, ObjectKind
from crm_seeder.models.entities import Contact, Ticket
from crm_seeder.models.results import BatchResult, CreateError, CreateResult, WorkflowResult
from crm_seeder.services.association_engine import AssociationEngine, company_match_domain
from crm_seeder.services.crm_gateway import (
    COMPANY_FETCH_PROPERTIES,
    CONTACT_FETCH_PROPERTIES,
    CrmGateway,
)
from crm_seeder.utils.domains import build_email
from crm_seeder.utils.error_handling import MissingCrmDataError
from crm_seeder.utils.event_log import EventLog


class SeedingService:
    """Push generated records and link them to records already in HubSpot."""

    def __init__(
        self,
        client,
        log: EventLog,
        settings: Optional[AppSettings] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.log = log
        self.settings = settings or AppSettings()
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.gateway = CrmGateway(client, log)
        self.engine = AssociationEngine(client, log, gateway=self.gateway)

    def create_contacts_with_companies(self, contacts: Sequence[Contact]) -> WorkflowResult:
        """Create contacts on random existing companies' domains and link them."""
        self.log.info(f"Starting to process {len(contacts)} contacts...", marker="🚀")
        companies = self.gateway.fetch_recent(
            ObjectKind.COMPANIES, COMPANY_FETCH_PROPERTIES, limit=self.settings.fetch_page_limit
        )
        if not companies:
            self.log.failure("No existing companies found in HubSpot")
            raise MissingCrmDataError(
                "No existing companies found in HubSpot. Please create some companies first."
            )

        batch = BatchResult()
        queued: List[QueuedAssociation] = []
        for contact in contacts:
            company = self.rng.choice(companies)
            domain = company_match_domain(company)
            if not domain:
                self.log.failure(f"No domain found for company: {company.prop('name')}")
                batch.errors.append(
                    CreateError(local_id=contact.id, error="No domain found for selected company")
                )
                continue

            self.log.info(f"Selected company: {company.prop('name')} ({domain})", marker="🏢")
            prepared = contact.model_copy(
                update={
                    "email": build_email(contact.firstname, contact.lastname, domain, self.rng),
                    "website": f"https://www.{domain}",
                }
            )
            self.log.info(
                f"Sending contact: {prepared.full_name} ({prepared.email})", marker="📤"
            )
            remote_id, error = self.gateway.create_one(ObjectKind.CONTACTS, prepared)
            if remote_id is None:
                batch.errors.append(CreateError(local_id=contact.id, error=error or ""))
                continue

            batch.results.append(CreateResult(local_id=contact.id, remote_id=remote_id))
            queued.append(
                QueuedAssociation(
                    from_id=remote_id,
                    to_id=company.id,
                    contact_id=remote_id,
                    company_id=company.id,
                )
            )
            self.log.info(
                f"Queued association: Contact {remote_id} → Company {company.id}", marker="🔗"
            )

        linked, failed = self._link_queued(
            queued,
            AssociationType.CONTACT_TO_COMPANY,
            self.settings.contact_link_delay_seconds,
            "contact",
        )
        return self._result("Contact", batch, queued, linked, failed, len(contacts))

    def create_tickets_with_contacts(self, tickets: Sequence[Ticket]) -> WorkflowResult:
        """Create tickets, each assigned to a random existing contact, and link them."""
        self.log.info(f"Starting to process {len(tickets)} tickets...", marker="🚀")
        contacts = self.gateway.fetch_recent(
            ObjectKind.CONTACTS, CONTACT_FETCH_PROPERTIES, limit=self.settings.fetch_page_limit
        )
        if not contacts:
            self.log.failure("No existing contacts found in HubSpot")
            raise MissingCrmDataError(
                "No existing contacts found in HubSpot. Please create some contacts first."
            )

        batch = BatchResult()
        queued: List[QueuedAssociation] = []
        for ticket in tickets:
            contact = self.rng.choice(contacts)
            self.log.info(
                f"Sending ticket: {ticket.subject} ({ticket.hs_ticket_priority.value} priority)"
                f" - Assigned to: {contact.prop('firstname', '')} {contact.prop('lastname', '')}"
                f" ({contact.prop('email', 'no email')})",
                marker="📤",
            )
            remote_id, error = self.gateway.create_one(ObjectKind.TICKETS, ticket)
            if remote_id is None:
                batch.errors.append(CreateError(local_id=ticket.id, error=error or ""))
                continue

            batch.results.append(CreateResult(local_id=ticket.id, remote_id=remote_id))
            queued.append(
                QueuedAssociation(
                    from_id=remote_id,
                    to_id=contact.id,
                    ticket_id=remote_id,
                    contact_id=contact.id,
                )
            )
            self.log.info(
                f"Queued association: Ticket {remote_id} → Contact {contact.id}", marker="🔗"
            )

        linked, failed = self._link_queued(
            queued,
            AssociationType.TICKET_TO_CONTACT,
            self.settings.ticket_link_delay_seconds,
            "ticket",
        )
        return self._result("Ticket", batch, queued, linked, failed, len(tickets))

    def _link_queued(
        self,
        queued: Sequence[QueuedAssociation],
        association_type: AssociationType,
        delay_seconds: float,
        noun: str,
    ) -> Tuple[int, int]:
        if not queued:
            return 0, 0

        self.log.info(
            f"Creating {len(queued)} {association_type.legacy_name.replace('_to_', '-')} associations...",
            marker="🔗",
        )
        self.log.info(
            f"Waiting {delay_seconds:g} seconds for HubSpot to process {noun} records "
            "before creating associations...",
            marker="⏳",
        )
        self.sleep(delay_seconds)
        self.log.success("Delay complete, proceeding with association creation...")

        linked = failed = 0
        for item in queued:
            state = self.engine.link_with_fallback(association_type, item.from_id, item.to_id)
            if state is AttemptState.SUCCEEDED:
                linked += 1
            else:
                failed += 1

        self.log.info(f"Association summary: {linked} successful, {failed} failed", marker="📊")
        return linked, failed

    def _result(
        self,
        noun: str,
        batch: BatchResult,
        queued: Sequence[QueuedAssociation],
        linked: int,
        failed: int,
        total: int,
    ) -> WorkflowResult:
        self.log.info(
            f"{noun} processing complete: {len(batch.results)} successful, "
            f"{len(batch.errors)} failed, {len(queued)} associations attempted",
            marker="📊",
        )
        return WorkflowResult(
            results=[r.to_json_dict() for r in batch.results],
            errors=[e.to_json_dict() for e in batch.errors],
            associations=[q.to_json_dict() for q in queued],
            summary={
                "total": total,
                "successful": len(batch.results),
                "failed": len(batch.errors),
                "associationsAttempted": len(queued),
                "associationsCreated": linked,
                "associationsFailed": failed,
            },
            logs=self.log.lines(),
        )
