"""
Contact matching tests: domain matching against companies and priority
matching against tickets.

Run with: pytest tests/unit/test_association_matching.py -v
"""

from unittest.mock import MagicMock

import pytest

from crm_seeder.models.crm import CrmRecord
from crm_seeder.services.association_engine import (
    company_match_domain,
    contact_priority_bucket,
    match_contacts_to_companies,
    match_contacts_to_tickets,
)
from crm_seeder.utils.event_log import EventLog, Severity


def contact(contact_id, email):
    return CrmRecord(id=contact_id, properties={"email": email})


def company(company_id, name=None, domain=None, website=None):
    return CrmRecord(
        id=company_id, properties={"name": name, "domain": domain, "website": website}
    )


def ticket(ticket_id, priority=None, subject="Issue", category=None):
    return CrmRecord(
        id=ticket_id,
        properties={
            "subject": subject,
            "hs_ticket_priority": priority,
            "hs_ticket_category": category,
        },
    )


@pytest.fixture
def log():
    return EventLog(MagicMock())


class TestCompanyDomain:
    def test_explicit_domain_wins(self):
        assert company_match_domain(company("1", domain="Acme.com", website="https://other.io")) == "acme.com"

    def test_falls_back_to_website(self):
        assert company_match_domain(company("1", website="https://www.widgets.io")) == "widgets.io"

    def test_no_domain(self):
        assert company_match_domain(company("1", name="Nameless")) == ""


class TestPriorityBucket:
    @pytest.mark.parametrize(
        "domain,bucket",
        [
            ("execpartners.com", "HIGH"),
            ("ceoadvisory.io", "HIGH"),
            ("presidentcapital.net", "HIGH"),
            ("managertools.com", "MEDIUM"),
            ("directorlabs.co", "MEDIUM"),
            ("acme.com", "LOW"),
        ],
    )
    def test_buckets(self, domain, bucket):
        assert contact_priority_bucket(domain) == bucket


class TestContactCompanyMatching:
    def test_domain_match(self, log):
        matches = match_contacts_to_companies(
            [contact("c1", "bob@acme.com")],
            [company("k1", name="Acme", domain="acme.com")],
            log,
        )

        assert len(matches) == 1
        assert matches[0].contact_id == "c1"
        assert matches[0].company_id == "k1"
        assert matches[0].domain == "acme.com"

    def test_first_company_wins_on_duplicate_domains(self, log):
        matches = match_contacts_to_companies(
            [contact("c1", "bob@acme.com")],
            [company("k1", domain="acme.com"), company("k2", domain="acme.com")],
            log,
        )

        assert [m.company_id for m in matches] == ["k1"]

    def test_match_through_website(self, log):
        matches = match_contacts_to_companies(
            [contact("c1", "amy@widgets.io")],
            [company("k9", website="https://www.widgets.io")],
            log,
        )

        assert matches[0].company_id == "k9"

    def test_contacts_without_usable_email_are_skipped(self, log):
        matches = match_contacts_to_companies(
            [contact("c1", None), contact("c2", "broken-address")],
            [company("k1", domain="acme.com")],
            log,
        )

        assert matches == []
        assert len(log.events(Severity.WARNING)) == 2

    def test_no_contacts(self, log):
        assert match_contacts_to_companies([], [company("k1", domain="acme.com")], log) == []

    def test_companies_can_match_many_contacts(self, log):
        matches = match_contacts_to_companies(
            [contact("c1", "a@acme.com"), contact("c2", "b@acme.com")],
            [company("k1", domain="acme.com")],
            log,
        )

        assert [m.company_id for m in matches] == ["k1", "k1"]


class TestContactTicketMatching:
    def test_priority_match(self, log):
        matches = match_contacts_to_tickets(
            [contact("c1", "ann@execpartners.com")],
            [ticket("t1", "LOW"), ticket("t2", "HIGH")],
            log,
        )

        assert matches[0].ticket_id == "t2"
        assert matches[0].priority == "HIGH"
        assert not matches[0].fallback

    def test_fallback_takes_first_unassigned_ticket(self, log):
        matches = match_contacts_to_tickets(
            [contact("c1", "ann@execpartners.com")],
            [ticket("t1", "LOW"), ticket("t2", "URGENT")],
            log,
        )

        assert matches[0].ticket_id == "t1"
        assert matches[0].priority == "MEDIUM"
        assert matches[0].fallback

    def test_fetched_priority_is_case_insensitive(self, log):
        matches = match_contacts_to_tickets(
            [contact("c1", "ann@execpartners.com")],
            [ticket("t1", "high")],
            log,
        )

        assert matches[0].ticket_id == "t1"
        assert not matches[0].fallback

    def test_missing_priority_counts_as_medium(self, log):
        matches = match_contacts_to_tickets(
            [contact("c1", "max@managertools.com")],
            [ticket("t1", None)],
            log,
        )

        assert matches[0].ticket_id == "t1"
        assert not matches[0].fallback

    def test_fallback_never_reuses_a_ticket(self, log):
        contacts = [
            contact("c1", "a@acme.com"),
            contact("c2", "b@execpartners.com"),
            contact("c3", "c@ceoadvisory.io"),
            contact("c4", "d@globex.com"),
        ]
        tickets = [ticket("t1", "LOW"), ticket("t2", "URGENT"), ticket("t3", "URGENT")]

        matches = match_contacts_to_tickets(contacts, tickets, log)

        by_contact = {m.contact_id: m for m in matches}
        # c1 and c4 both match t1 by priority; c2 and c3 fall back to t2 and t3.
        assert by_contact["c1"].ticket_id == "t1"
        assert by_contact["c4"].ticket_id == "t1"
        assert by_contact["c2"].ticket_id == "t2"
        assert by_contact["c3"].ticket_id == "t3"
        fallback_ids = [m.ticket_id for m in matches if m.fallback]
        assert len(fallback_ids) == len(set(fallback_ids))

    def test_fallback_runs_out_of_tickets(self, log):
        matches = match_contacts_to_tickets(
            [contact("c1", "a@execpartners.com"), contact("c2", "b@ceoadvisory.io")],
            [ticket("t1", "LOW")],
            log,
        )

        assert [m.contact_id for m in matches] == ["c1"]
        assert log.events(Severity.WARNING)

    def test_category_defaults_to_general(self, log):
        matches = match_contacts_to_tickets(
            [contact("c1", "a@acme.com")], [ticket("t1", "LOW", category=None)], log
        )
        assert matches[0].category == "general"
