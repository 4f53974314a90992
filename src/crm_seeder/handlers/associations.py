"""
Association endpoints.

POST /api/hubspot/associations links explicit contact/company pairs.
POST /api/hubspot/contact-company-associations matches by email domain.
POST /api/hubspot/contact-ticket-associations matches by priority bucket.
"""

from crm_seeder.handlers import common
from crm_seeder.models.association import AssociationPair
from crm_seeder.services.association_engine import AssociationEngine
from crm_seeder.utils.validators import parse_json_body, require_array


def _pairs(items):
    # Malformed entries become empty pairs so they are reported per item.
    return [
        AssociationPair.model_validate(item) if isinstance(item, dict) else AssociationPair()
        for item in items
    ]


def _link_pairs(event, settings, log):
    payload = parse_json_body(event)
    pairs = _pairs(require_array(payload, "associations"))
    return AssociationEngine(common.get_client(settings), log).associate_pairs(pairs)


def _match_companies(event, settings, log):
    engine = AssociationEngine(common.get_client(settings), log)
    return engine.associate_contacts_to_companies(limit=settings.fetch_page_limit)


def _match_tickets(event, settings, log):
    engine = AssociationEngine(common.get_client(settings), log)
    return engine.associate_contacts_to_tickets(limit=settings.fetch_page_limit)


def lambda_handler(event, context):
    return common.run_workflow(event, _link_pairs, "Association creation")


def contact_company_handler(event, context):
    return common.run_workflow(event, _match_companies, "Contact-company association")


def contact_ticket_handler(event, context):
    return common.run_workflow(event, _match_tickets, "Contact-ticket association")
