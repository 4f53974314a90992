"""
Entity Generator.

Builds plausible demo contacts, companies and tickets in memory. Names and
addresses come from Faker; company names come from a fixed pool so that
generated contacts and companies share domains often enough for domain
matching to find pairs. Pass ``seed`` (or your own ``rng``/``faker``) for
reproducible output.
"""

from __future__ import annotations

import random
from typing import List, Optional

from faker import Faker

from crm_seeder.models.entities import (
    Company,
    Contact,
    Industry,
    Ticket,
    TicketCategory,
    TicketPriority,
)
from crm_seeder.utils.domains import build_email, derive_domain

COMPANY_NAME_POOL = (
    "Acme Corporation",
    "Globex Inc",
    "Initech LLC",
    "Umbrella Holdings",
    "Stark Industries",
    "Wayne Enterprises",
    "Wonka Industries",
    "Cyberdyne Systems",
    "Soylent Corp",
    "Hooli",
    "Pied Piper",
    "Vandelay Industries",
    "Massive Dynamic",
    "Aperture Science",
    "Tyrell Corporation",
    "Gringotts Group",
    "Oscorp Ltd",
    "Dunder Mifflin",
    "Blue Sun Co",
    "Monarch Solutions",
    "Northwind Traders",
    "Contoso Ltd",
    "Fabrikam Inc",
    "Wingtip Toys",
    "Exec Partners",
    "CEO Advisory Group",
    "President Capital",
    "Manager Tools Inc",
    "Director Labs",
    "AB Co",
)

TICKET_PIPELINE = "0"
TICKET_PIPELINE_STAGES = ("1", "2", "3", "4")
TICKET_SOURCES = ("email", "chat", "phone", "web_form", "social_media")
TICKET_TYPES = ("question", "bug", "feature_request", "complaint", "compliment")


class EntityGenerator:
    """Generate fresh demo records; every call returns new random values."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        faker: Optional[Faker] = None,
        seed: Optional[int] = None,
    ):
        self.rng = rng or random.Random(seed)
        self.faker = faker or Faker()
        if seed is not None:
            self.faker.seed_instance(seed)

    def generate_contact(self) -> Contact:
        company = self.rng.choice(COMPANY_NAME_POOL)
        domain = derive_domain(company, self.rng)
        first_name = self.faker.first_name()
        last_name = self.faker.last_name()
        return Contact(
            id=self.faker.uuid4(),
            email=build_email(first_name, last_name, domain, self.rng),
            firstname=first_name,
            lastname=last_name,
            phone=self.faker.phone_number(),
            company=company,
            jobtitle=self.faker.job(),
            address=self.faker.street_address(),
            city=self.faker.city(),
            state=self.faker.state(),
            zip=self.faker.postcode(),
            country=self.faker.country(),
            website=f"https://www.{domain}",
        )

    def generate_company(self) -> Company:
        name = self.rng.choice(COMPANY_NAME_POOL)
        domain = derive_domain(name, self.rng)
        return Company(
            id=self.faker.uuid4(),
            name=name,
            domain=domain,
            phone=self.faker.phone_number(),
            address=self.faker.street_address(),
            city=self.faker.city(),
            state=self.faker.state(),
            zip=self.faker.postcode(),
            country=self.faker.country(),
            website=f"https://www.{domain}",
            industry=self.rng.choice(list(Industry)),
            description=self.faker.catch_phrase(),
            numberofemployees=self.rng.randint(1, 10_000),
            annualrevenue=self.rng.randint(10_000, 1_000_000_000),
        )

    def generate_ticket(self) -> Ticket:
        return Ticket(
            id=self.faker.uuid4(),
            subject=self.faker.sentence(),
            content="\n\n".join(self.faker.paragraphs(nb=2)),
            hs_ticket_priority=self.rng.choice(list(TicketPriority)),
            hs_ticket_category=self.rng.choice(list(TicketCategory)),
            hs_ticket_owner_id=self.faker.numerify("######"),
            hs_pipeline=TICKET_PIPELINE,
            hs_pipeline_stage=self.rng.choice(TICKET_PIPELINE_STAGES),
            hs_ticket_source=self.rng.choice(TICKET_SOURCES),
            hs_ticket_type=self.rng.choice(TICKET_TYPES),
        )

    def generate_contacts(self, count: int) -> List[Contact]:
        return [self.generate_contact() for _ in range(count)]

    def generate_companies(self, count: int) -> List[Company]:
        return [self.generate_company() for _ in range(count)]

    def generate_tickets(self, count: int) -> List[Ticket]:
        return [self.generate_ticket() for _ in range(count)]

    def generate(self, kind: str, count: int) -> List:
        """Dispatch on ``contacts``/``companies``/``tickets``."""
        generators = {
            "contacts": self.generate_contacts,
            "companies": self.generate_companies,
            "tickets": self.generate_tickets,
        }
        if kind not in generators:
            raise ValueError(f"Unknown entity kind: {kind}")
        return generators[kind](count)
