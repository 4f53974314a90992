"""
Single entrypoint Lambda that routes HTTP API requests to the handler modules.

One function keeps the HubSpot client warm across routes while each workflow
stays in its own module.
"""

from typing import Callable, Tuple

from crm_seeder.handlers import associations, companies, config, contacts, generate, tickets
from crm_seeder.utils.error_handling import json_response

# Ordered: more specific prefixes first, since matching uses startswith.
ROUTE_TABLE: Tuple[Tuple[str, Callable], ...] = (
    ("GET /api/hubspot/config", config.lambda_handler),
    ("GET /api/hubspot/companies/fetch", companies.fetch_handler),
    ("POST /api/hubspot/contacts", contacts.lambda_handler),
    ("POST /api/hubspot/companies", companies.lambda_handler),
    ("POST /api/hubspot/tickets", tickets.lambda_handler),
    ("POST /api/hubspot/associations", associations.lambda_handler),
    ("POST /api/hubspot/contact-company-associations", associations.contact_company_handler),
    ("POST /api/hubspot/contact-ticket-associations", associations.contact_ticket_handler),
    ("POST /api/generate/", generate.lambda_handler),
)


def lambda_handler(event, context):
    """Entry point invoked by API Gateway HTTP API."""
    http = event.get("requestContext", {}).get("http", {})
    route_key = f"{http.get('method', '').upper()} {http.get('path', '')}"

    for prefix, handler in ROUTE_TABLE:
        if route_key.startswith(prefix):
            return handler(event, context)

    return json_response(404, {"message": "Route not found", "route": route_key})
