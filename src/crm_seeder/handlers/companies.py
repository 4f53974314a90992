"""
Company endpoints.

POST /api/hubspot/companies pushes a batch of companies with no linking.
GET /api/hubspot/companies/fetch pages through what is already in HubSpot.
"""

from crm_seeder.handlers import common
from crm_seeder.models.crm import ObjectKind
from crm_seeder.models.entities import Company
from crm_seeder.models.results import WorkflowResult
from crm_seeder.services.crm_gateway import COMPANY_FETCH_PROPERTIES, CrmGateway
from crm_seeder.utils.validators import parse_items, parse_json_body, require_array


def _create_companies(event, settings, log):
    payload = parse_json_body(event)
    companies = parse_items(Company, require_array(payload, "companies"), "companies")

    batch = CrmGateway(common.get_client(settings), log).create_companies(companies)
    return WorkflowResult(
        success=True,
        results=[r.to_json_dict() for r in batch.results],
        errors=[e.to_json_dict() for e in batch.errors],
        summary=batch.summary(),
    )


def _fetch_companies(event, settings, log):
    gateway = CrmGateway(common.get_client(settings), log)
    records, pages = gateway.fetch_all(
        ObjectKind.COMPANIES,
        COMPANY_FETCH_PROPERTIES,
        limit=settings.fetch_page_limit,
        max_pages=settings.fetch_max_pages,
    )
    return WorkflowResult(
        success=True,
        companies=[record.model_dump(mode="json") for record in records],
        summary={"total": len(records), "pages": pages},
    )


def lambda_handler(event, context):
    return common.run_workflow(event, _create_companies, "Company creation")


def fetch_handler(event, context):
    return common.run_workflow(event, _fetch_companies, "Company fetch")
