"""POST /api/hubspot/contacts: create contacts on existing companies and link them."""

from crm_seeder.handlers import common
from crm_seeder.models.entities import Contact
from crm_seeder.utils.validators import parse_items, parse_json_body, require_array


def _create_contacts(event, settings, log):
    from crm_seeder.services.seeding_service import SeedingService

    payload = parse_json_body(event)
    contacts = parse_items(Contact, require_array(payload, "contacts"), "contacts")
    service = SeedingService(common.get_client(settings), log, settings=settings)
    return service.create_contacts_with_companies(contacts)


def lambda_handler(event, context):
    return common.run_workflow(event, _create_contacts, "Contact creation")
