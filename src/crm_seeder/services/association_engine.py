"""
Association Engine.

Links HubSpot records to each other. Pairs come either straight from the
caller or from matching freshly fetched contacts against companies (email
domain) or tickets (priority bucket, then a fallback pass). Links are issued
one at a time; a failed link is recorded and the run continues.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

import httpx

from crm_seeder.models.association import (
    AssociationPair,
    AttemptState,
    ContactCompanyMatch,
    ContactTicketMatch,
)
from crm_seeder.models.crm import AssociationType, CrmRecord, ObjectKind
from crm_seeder.models.entities import TicketPriority
from crm_seeder.models.results import WorkflowResult
from crm_seeder.services.crm_gateway import (
    COMPANY_FETCH_PROPERTIES,
    CONTACT_FETCH_PROPERTIES,
    TICKET_FETCH_PROPERTIES,
    CrmGateway,
)
from crm_seeder.services.hubspot_client import REQUEST_ERRORS
from crm_seeder.utils.domains import domain_from_website, email_domain
from crm_seeder.utils.event_log import EventLog

HIGH_PRIORITY_HINTS = ("exec", "ceo", "president")
MEDIUM_PRIORITY_HINTS = ("manager", "director")
DEFAULT_TICKET_PRIORITY = TicketPriority.MEDIUM.value
DEFAULT_TICKET_CATEGORY = "general"


def company_match_domain(company: CrmRecord) -> str:
    """Explicit ``domain`` property, else the host of ``website``."""
    explicit = company.prop("domain")
    if explicit:
        return explicit.strip().lower()
    return domain_from_website(company.prop("website")).lower()


def contact_priority_bucket(domain: str) -> str:
    """Guess how senior a contact is from their email domain."""
    if any(hint in domain for hint in HIGH_PRIORITY_HINTS):
        return TicketPriority.HIGH.value
    if any(hint in domain for hint in MEDIUM_PRIORITY_HINTS):
        return TicketPriority.MEDIUM.value
    return TicketPriority.LOW.value


def _ticket_priority(ticket: CrmRecord) -> str:
    """Upper-cased ``hs_ticket_priority``; missing counts as MEDIUM."""
    return str(ticket.prop("hs_ticket_priority", DEFAULT_TICKET_PRIORITY)).strip().upper()


def _contact_domain(contact: CrmRecord, log: EventLog) -> Tuple[Optional[str], str]:
    """Return ``(email, domain)``; domain is "" when the contact must be skipped."""
    email = contact.prop("email")
    if not email:
        log.warning(f"Contact {contact.id} has no email address, skipping")
        return None, ""
    domain = email_domain(email)
    if not domain:
        log.warning(f"Contact {contact.id} has invalid email domain, skipping")
    return email, domain


def match_contacts_to_companies(
    contacts: Sequence[CrmRecord], companies: Sequence[CrmRecord], log: EventLog
) -> List[ContactCompanyMatch]:
    """Pair each contact with the first company sharing its email domain."""
    log.info("Searching for domain matches between contacts and companies...", marker="🔍")
    company_domains = [(company, company_match_domain(company)) for company in companies]
    matches: List[ContactCompanyMatch] = []

    for contact in contacts:
        email, domain = _contact_domain(contact, log)
        if not domain:
            continue
        for company, company_domain in company_domains:
            if company_domain and company_domain == domain:
                log.success(
                    f"Domain match found: Contact {contact.id} ({email}) → "
                    f"Company {company.id} ({company.prop('name')}) - Domain: {domain}"
                )
                matches.append(
                    ContactCompanyMatch(
                        contact_id=contact.id,
                        contact_email=email,
                        company_id=company.id,
                        company_name=company.prop("name"),
                        domain=domain,
                    )
                )
                break

    log.info(
        f"Found {len(matches)} domain matches out of {len(contacts)} contacts", marker="📊"
    )
    return matches


def match_contacts_to_tickets(
    contacts: Sequence[CrmRecord], tickets: Sequence[CrmRecord], log: EventLog
) -> List[ContactTicketMatch]:
    """
    Pair contacts with tickets of the same priority bucket.

    Contacts left without a priority match then take the first ticket, in fetch
    order, that no other contact holds yet. Fallback matches are recorded as
    MEDIUM whatever the contact's bucket was.
    """
    log.info(
        "Searching for contact-ticket associations based on priority and category...",
        marker="🔍",
    )
    matches: List[ContactTicketMatch] = []
    unmatched: List[Tuple[CrmRecord, str]] = []

    for contact in contacts:
        email, domain = _contact_domain(contact, log)
        if not domain:
            continue
        log.info(
            f"Checking contact {contact.id} ({email}) with domain: {domain}", marker="🔍"
        )
        bucket = contact_priority_bucket(domain)
        for ticket in tickets:
            if _ticket_priority(ticket) == bucket:
                log.success(
                    f"Priority match found: Contact {contact.id} ({email}) → "
                    f"Ticket {ticket.id} ({ticket.prop('subject')}) - Priority: {bucket}"
                )
                matches.append(_ticket_match(contact.id, email, ticket, bucket))
                break
        else:
            unmatched.append((contact, email))

    assigned: Set[str] = {m.ticket_id for m in matches}
    for contact, email in unmatched:
        available = next((t for t in tickets if t.id not in assigned), None)
        if available is None:
            log.warning(f"No unassigned ticket left for contact {contact.id}")
            continue
        assigned.add(available.id)
        log.success(
            f"Fallback match: Contact {contact.id} ({email}) → "
            f"Ticket {available.id} ({available.prop('subject')})"
        )
        matches.append(
            _ticket_match(contact.id, email, available, DEFAULT_TICKET_PRIORITY, fallback=True)
        )

    log.info(
        f"Found {len(matches)} contact-ticket matches out of {len(contacts)} contacts",
        marker="📊",
    )
    return matches


def _ticket_match(
    contact_id: str, email: str, ticket: CrmRecord, priority: str, fallback: bool = False
) -> ContactTicketMatch:
    return ContactTicketMatch(
        contact_id=contact_id,
        contact_email=email,
        ticket_id=ticket.id,
        ticket_subject=ticket.prop("subject"),
        priority=priority,
        category=ticket.prop("hs_ticket_category", DEFAULT_TICKET_CATEGORY),
        fallback=fallback,
    )


class AssociationEngine:
    """Create HubSpot associations and report per-link outcomes."""

    def __init__(self, client, log: EventLog, gateway: Optional[CrmGateway] = None):
        self.client = client
        self.log = log
        self.gateway = gateway or CrmGateway(client, log)

    # -- single links -------------------------------------------------------

    def _attempt(
        self, send: Callable[[], httpx.Response], tier: str
    ) -> Tuple[bool, Optional[str]]:
        try:
            response = send()
        except REQUEST_ERRORS as exc:
            message = str(exc) or exc.__class__.__name__
            self.log.exception(f"Exception creating association ({tier}): {message}")
            return False, message
        self.log.info(f"{tier} API Response Status: {response.status_code}", marker="📥")
        if response.is_success:
            return True, None
        return False, f"Status {response.status_code} - {response.text}"

    def link(
        self, association_type: AssociationType, from_id: str, to_id: str
    ) -> Tuple[bool, Optional[str]]:
        """One labelled request, no retry."""
        label = self._label(association_type, from_id, to_id)
        self.log.info(f"Creating association: {label}", marker="🔗")
        ok, error = self._attempt(
            lambda: self.client.create_association(association_type, from_id, to_id), "v4"
        )
        if ok:
            self.log.success(f"Association created successfully: {label}")
        else:
            self.log.failure(f"Failed to create association {label}: {error}")
        return ok, error

    def link_with_fallback(
        self, association_type: AssociationType, from_id: str, to_id: str
    ) -> AttemptState:
        """
        Try the v4 endpoint, then once more with the older v3 endpoint.

        PENDING -> SUCCEEDED | PRIMARY_FAILED; PRIMARY_FAILED -> SUCCEEDED | FAILED.
        """
        label = self._label(association_type, from_id, to_id)
        self.log.info(f"Creating association: {label}", marker="🔗")

        ok, _ = self._attempt(
            lambda: self.client.create_association(association_type, from_id, to_id), "v4"
        )
        state = AttemptState.SUCCEEDED if ok else AttemptState.PRIMARY_FAILED
        if state is AttemptState.SUCCEEDED:
            self.log.success(f"Association created successfully with v4 API: {label}")
            return state

        self.log.failure("v4 API failed, trying v3 API")
        ok, _ = self._attempt(
            lambda: self.client.create_legacy_association(association_type, from_id, to_id),
            "v3",
        )
        state = AttemptState.SUCCEEDED if ok else AttemptState.FAILED
        if state is AttemptState.SUCCEEDED:
            self.log.success(f"Association created with v3 API: {label}")
        else:
            self.log.failure(f"Both v4 and v3 APIs failed for association {label}")
        return state

    @staticmethod
    def _label(association_type: AssociationType, from_id: str, to_id: str) -> str:
        return (
            f"{association_type.from_kind.singular.capitalize()} {from_id} → "
            f"{association_type.to_kind.singular.capitalize()} {to_id}"
        )

    # -- workflows ------------------------------------------------------------

    def associate_pairs(self, pairs: Sequence[AssociationPair]) -> WorkflowResult:
        """Link caller-supplied contact/company pairs."""
        self.log.info(
            f"Starting to create {len(pairs)} contact-company associations...", marker="🚀"
        )
        results: List[Dict] = []
        errors: List[Dict] = []

        for pair in pairs:
            ids = {"contactId": pair.contact_id, "companyId": pair.company_id}
            if not pair.is_complete:
                self.log.failure(
                    f"Invalid association data: contactId={pair.contact_id}, "
                    f"companyId={pair.company_id}"
                )
                errors.append({**ids, "error": "Missing contactId or companyId", "success": False})
                continue
            ok, error = self.link(
                AssociationType.CONTACT_TO_COMPANY, pair.contact_id, pair.company_id
            )
            if ok:
                results.append({**ids, "success": True})
            else:
                errors.append({**ids, "error": error, "success": False})

        self.log.info(
            f"Association processing complete: {len(results)} successful, {len(errors)} failed",
            marker="📊",
        )
        return WorkflowResult(
            results=results,
            errors=errors,
            summary={"total": len(pairs), "successful": len(results), "failed": len(errors)},
            logs=self.log.lines(),
        )

    def associate_contacts_to_companies(self, limit: int = 100) -> WorkflowResult:
        """Link recent contacts to the first company whose domain matches their email."""
        self.log.info("Starting domain-based contact-company association process...", marker="🚀")
        companies = self.gateway.fetch_recent(
            ObjectKind.COMPANIES, COMPANY_FETCH_PROPERTIES, limit=limit
        )
        contacts = self.gateway.fetch_recent(
            ObjectKind.CONTACTS, CONTACT_FETCH_PROPERTIES, limit=limit
        )
        counts = {"totalContacts": len(contacts), "totalCompanies": len(companies)}

        empty = self._no_data(contacts=contacts, companies=companies)
        if empty:
            return self._empty_result(empty, counts)

        matches = match_contacts_to_companies(contacts, companies, self.log)
        if not matches:
            return self._empty_result("No contact-company matches found", counts)

        return self._link_matches(
            matches, AssociationType.CONTACT_TO_COMPANY, lambda m: m.company_id, counts
        )

    def associate_contacts_to_tickets(self, limit: int = 100) -> WorkflowResult:
        """Link recent contacts to tickets by priority bucket, with a fallback pass."""
        self.log.info("Starting contact-ticket association process...", marker="🚀")
        tickets = self.gateway.fetch_recent(
            ObjectKind.TICKETS, TICKET_FETCH_PROPERTIES, limit=limit
        )
        contacts = self.gateway.fetch_recent(
            ObjectKind.CONTACTS, CONTACT_FETCH_PROPERTIES, limit=limit
        )
        counts = {"totalContacts": len(contacts), "totalTickets": len(tickets)}

        empty = self._no_data(contacts=contacts, tickets=tickets)
        if empty:
            return self._empty_result(empty, counts)

        matches = match_contacts_to_tickets(contacts, tickets, self.log)
        if not matches:
            return self._empty_result("No contact-ticket matches found", counts)

        return self._link_matches(
            matches, AssociationType.CONTACT_TO_TICKET, lambda m: m.ticket_id, counts
        )

    def _no_data(self, **fetched: Sequence[CrmRecord]) -> Optional[str]:
        for kind, records in fetched.items():
            if not records:
                self.log.failure(f"No {kind} found in HubSpot")
                return f"No {kind} found in HubSpot. Please create some {kind} first."
        return None

    def _empty_result(self, message: str, counts: Dict[str, int]) -> WorkflowResult:
        return WorkflowResult(
            message=message,
            matches=[],
            summary={
                **counts,
                "matchesFound": 0,
                "associationsCreated": 0,
                "associationsFailed": 0,
            },
            logs=self.log.lines(),
        )

    def _link_matches(self, matches, association_type, target_id, counts) -> WorkflowResult:
        self.log.info(
            f"Creating {association_type.legacy_name.replace('_', ' ')} associations "
            f"for {len(matches)} matches...",
            marker="🔗",
        )
        results: List[Dict] = []
        errors: List[Dict] = []
        for match in matches:
            ok, error = self.link(association_type, match.contact_id, target_id(match))
            if ok:
                results.append(match.outcome(True))
            else:
                errors.append(match.outcome(False, error))

        self.log.info(
            f"Association processing complete: {len(results)} successful, {len(errors)} failed",
            marker="📊",
        )
        return WorkflowResult(
            matches=[m.to_json_dict() for m in matches],
            results=results,
            errors=errors,
            summary={
                **counts,
                "matchesFound": len(matches),
                "associationsCreated": len(results),
                "associationsFailed": len(errors),
            },
            logs=self.log.lines(),
        )
