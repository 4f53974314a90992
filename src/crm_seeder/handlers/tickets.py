"""POST /api/hubspot/tickets: create tickets and attach each to an existing contact."""

from crm_seeder.handlers import common
from crm_seeder.models.entities import Ticket
from crm_seeder.utils.validators import parse_items, parse_json_body, require_array


def _create_tickets(event, settings, log):
    from crm_seeder.services.seeding_service import SeedingService

    payload = parse_json_body(event)
    tickets = parse_items(Ticket, require_array(payload, "tickets"), "tickets")
    service = SeedingService(common.get_client(settings), log, settings=settings)
    return service.create_tickets_with_contacts(tickets)


def lambda_handler(event, context):
    return common.run_workflow(event, _create_tickets, "Ticket creation")
