"""
Local handler tests using a fake HubSpot transport.

The shared client factory is patched so no request leaves the process.

Run with: pytest tests/unit/test_handlers_local.py -v
"""

import base64
import json

import pytest

from crm_seeder.handlers import common


def http_event(method, path, body=None, query=None, path_params=None):
    event = {"requestContext": {"http": {"method": method, "path": path}}}
    if body is not None:
        event["body"] = body if isinstance(body, str) else json.dumps(body)
    if query is not None:
        event["queryStringParameters"] = query
    if path_params is not None:
        event["pathParameters"] = path_params
    return event


def parse(response):
    return response["statusCode"], json.loads(response["body"])


@pytest.fixture
def hubspot(fake_hubspot, monkeypatch):
    """Route every handler's client to the fake transport."""
    monkeypatch.setattr(common, "get_client", lambda settings: fake_hubspot.client())
    return fake_hubspot


@pytest.fixture
def no_token(monkeypatch):
    monkeypatch.delenv("HUBSPOT_API_KEY", raising=False)
    monkeypatch.delenv("HUBSPOT_SECRET_ARN", raising=False)


class TestConfigHandler:
    def test_configured(self):
        from crm_seeder.handlers.config import lambda_handler

        status, body = parse(lambda_handler(http_event("GET", "/api/hubspot/config"), None))

        assert status == 200
        assert body["configured"] is True

    def test_not_configured(self, no_token):
        from crm_seeder.handlers.config import lambda_handler

        status, body = parse(lambda_handler(http_event("GET", "/api/hubspot/config"), None))

        assert status == 500
        assert body["configured"] is False
        assert "HUBSPOT_API_KEY" in body["error"]


class TestMissingCredential:
    @pytest.mark.parametrize(
        "module_name,handler_name,body",
        [
            ("contacts", "lambda_handler", {"contacts": []}),
            ("companies", "lambda_handler", {"companies": []}),
            ("companies", "fetch_handler", None),
            ("tickets", "lambda_handler", {"tickets": []}),
            ("associations", "lambda_handler", {"associations": []}),
            ("associations", "contact_company_handler", None),
            ("associations", "contact_ticket_handler", None),
        ],
    )
    def test_fails_before_any_call(self, hubspot, no_token, module_name, handler_name, body):
        import importlib

        module = importlib.import_module(f"crm_seeder.handlers.{module_name}")
        handler = getattr(module, handler_name)

        status, payload = parse(handler(http_event("POST", "/x", body=body), None))

        assert status == 500
        assert payload["success"] is False
        assert payload["configured"] is False
        assert "❌ HubSpot API key not configured" in payload["logs"]
        assert hubspot.requests == []


class TestContactsHandler:
    def test_missing_array(self, hubspot):
        from crm_seeder.handlers.contacts import lambda_handler

        status, body = parse(lambda_handler(http_event("POST", "/api/hubspot/contacts", {}), None))

        assert status == 400
        assert body == {
            "success": False,
            "error": "Contacts array is required",
            "logs": ["❌ Contacts array is required"],
        }
        assert hubspot.requests == []

    def test_invalid_json(self, hubspot):
        from crm_seeder.handlers.contacts import lambda_handler

        status, body = parse(
            lambda_handler(http_event("POST", "/api/hubspot/contacts", "{not json"), None)
        )

        assert status == 400
        assert body["success"] is False

    def test_invalid_contact(self, hubspot):
        from crm_seeder.handlers.contacts import lambda_handler

        event = http_event("POST", "/api/hubspot/contacts", {"contacts": [{"firstname": "A"}]})
        status, body = parse(lambda_handler(event, None))

        assert status == 400
        assert "contacts[0]" in body["error"]

    def test_creates_and_links(self, hubspot, created_ids):
        from crm_seeder.handlers.contacts import lambda_handler

        hubspot.on(
            "GET",
            "/crm/v3/objects/companies",
            json_body={"results": [{"id": "k1", "properties": {"name": "Acme", "domain": "acme.com"}}]},
        )
        hubspot.on("POST", "/crm/v3/objects/contacts", handler=created_ids())
        hubspot.on("PUT", "/crm/v4/objects/*")
        event = http_event(
            "POST",
            "/api/hubspot/contacts",
            {"contacts": [{"id": "local-1", "firstname": "Bob", "lastname": "Smith"}]},
        )

        status, body = parse(lambda_handler(event, None))

        assert status == 200
        assert body["success"] is True
        assert body["results"] == [{"localId": "local-1", "remoteId": "1000", "success": True}]
        assert body["associations"] == [{"contactId": "1000", "companyId": "k1"}]
        assert body["summary"]["associationsCreated"] == 1
        assert any("Waiting 0 seconds" in line for line in body["logs"])

    def test_no_companies_is_400(self, hubspot):
        from crm_seeder.handlers.contacts import lambda_handler

        hubspot.on("GET", "/crm/v3/objects/companies", json_body={"results": []})
        event = http_event(
            "POST", "/api/hubspot/contacts", {"contacts": [{"firstname": "Bob", "lastname": "Smith"}]}
        )

        status, body = parse(lambda_handler(event, None))

        assert status == 400
        assert "No existing companies" in body["error"]
        assert body["logs"]


class TestCompaniesHandler:
    def test_base64_body(self, hubspot):
        from crm_seeder.handlers.companies import lambda_handler

        hubspot.on("POST", "/crm/v3/objects/companies", status=201, json_body={"id": "55"})
        raw = json.dumps({"companies": [{"id": "l1", "name": "Acme"}]}).encode()
        event = http_event("POST", "/api/hubspot/companies", base64.b64encode(raw).decode())
        event["isBase64Encoded"] = True

        status, body = parse(lambda_handler(event, None))

        assert status == 200
        assert body["summary"] == {"total": 1, "successful": 1, "failed": 0}

    def test_fetch(self, hubspot):
        from crm_seeder.handlers.companies import fetch_handler

        hubspot.on(
            "GET",
            "/crm/v3/objects/companies",
            json_body={"results": [{"id": "k1", "properties": {"name": "Acme"}}]},
        )

        status, body = parse(fetch_handler(http_event("GET", "/api/hubspot/companies/fetch"), None))

        assert status == 200
        assert body["companies"] == [{"id": "k1", "properties": {"name": "Acme"}}]
        assert body["summary"] == {"total": 1, "pages": 1}


class TestAssociationHandlers:
    def test_explicit_pairs(self, hubspot):
        from crm_seeder.handlers.associations import lambda_handler

        hubspot.on("PUT", "/crm/v4/objects/*")
        event = http_event(
            "POST",
            "/api/hubspot/associations",
            {"associations": [{"contactId": "1", "companyId": "2"}, "garbage"]},
        )

        status, body = parse(lambda_handler(event, None))

        assert status == 200
        assert body["summary"] == {"total": 2, "successful": 1, "failed": 1}

    def test_missing_associations_array(self, hubspot):
        from crm_seeder.handlers.associations import lambda_handler

        status, body = parse(
            lambda_handler(http_event("POST", "/api/hubspot/associations", {"pairs": []}), None)
        )

        assert status == 400
        assert body["error"] == "Associations array is required"

    def test_fetch_failure_is_500(self, hubspot):
        from crm_seeder.handlers.associations import contact_company_handler

        hubspot.on("GET", "/crm/v3/objects/companies", status=401, json_body={"message": "expired"})

        status, body = parse(
            contact_company_handler(
                http_event("POST", "/api/hubspot/contact-company-associations"), None
            )
        )

        assert status == 500
        assert body["success"] is False
        assert "Failed to fetch companies" in body["error"]

    def test_unexpected_error_is_500_with_details(self, hubspot, monkeypatch):
        from crm_seeder.handlers import associations

        def explode(*args, **kwargs):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(
            associations.AssociationEngine, "associate_contacts_to_tickets", explode
        )

        status, body = parse(
            associations.contact_ticket_handler(
                http_event("POST", "/api/hubspot/contact-ticket-associations"), None
            )
        )

        assert status == 500
        assert body["error"] == "Internal server error"
        assert body["details"] == "kaboom"
        assert "💥 General error: kaboom" in body["logs"]


class TestGenerateHandler:
    def test_generates_without_token(self, no_token):
        from crm_seeder.handlers.generate import lambda_handler

        event = http_event(
            "POST",
            "/api/generate/companies",
            query={"count": "3", "seed": "9"},
            path_params={"kind": "companies"},
        )

        status, body = parse(lambda_handler(event, None))

        assert status == 200
        assert len(body["records"]) == 3
        assert body["summary"] == {"count": 3}

    def test_kind_from_path(self):
        from crm_seeder.handlers.generate import lambda_handler

        status, body = parse(lambda_handler(http_event("POST", "/api/generate/tickets"), None))

        assert status == 200
        assert len(body["records"]) == 10

    @pytest.mark.parametrize(
        "path,query",
        [
            ("/api/generate/deals", None),
            ("/api/generate/contacts", {"count": "0"}),
            ("/api/generate/contacts", {"count": "101"}),
            ("/api/generate/contacts", {"count": "ten"}),
        ],
    )
    def test_rejects_bad_input(self, path, query):
        from crm_seeder.handlers.generate import lambda_handler

        status, body = parse(lambda_handler(http_event("POST", path, query=query), None))

        assert status == 400
        assert body["success"] is False


class TestMainRouter:
    def test_unknown_route(self):
        from crm_seeder.handlers.main import lambda_handler

        status, body = parse(lambda_handler(http_event("GET", "/unknown/path"), None))

        assert status == 404
        assert body["message"] == "Route not found"

    @pytest.mark.parametrize(
        "method,path,target",
        [
            ("GET", "/api/hubspot/config", "crm_seeder.handlers.config.lambda_handler"),
            ("GET", "/api/hubspot/companies/fetch", "crm_seeder.handlers.companies.fetch_handler"),
            ("POST", "/api/hubspot/companies", "crm_seeder.handlers.companies.lambda_handler"),
            ("POST", "/api/hubspot/contacts", "crm_seeder.handlers.contacts.lambda_handler"),
            ("POST", "/api/hubspot/tickets", "crm_seeder.handlers.tickets.lambda_handler"),
            ("POST", "/api/hubspot/associations", "crm_seeder.handlers.associations.lambda_handler"),
            (
                "POST",
                "/api/hubspot/contact-company-associations",
                "crm_seeder.handlers.associations.contact_company_handler",
            ),
            (
                "POST",
                "/api/hubspot/contact-ticket-associations",
                "crm_seeder.handlers.associations.contact_ticket_handler",
            ),
            ("POST", "/api/generate/contacts", "crm_seeder.handlers.generate.lambda_handler"),
        ],
    )
    def test_routes(self, monkeypatch, method, path, target):
        from crm_seeder.handlers import main

        calls = []
        sentinel = {"statusCode": 299}

        def fake(event, context):
            calls.append(event)
            return sentinel

        routes = tuple(
            (prefix, fake if f"{h.__module__}.{h.__name__}" == target else h)
            for prefix, h in main.ROUTE_TABLE
        )
        monkeypatch.setattr(main, "ROUTE_TABLE", routes)

        assert main.lambda_handler(http_event(method, path), None) is sentinel
        assert len(calls) == 1

    def test_get_on_post_route_is_404(self):
        from crm_seeder.handlers.main import lambda_handler

        status, _ = parse(lambda_handler(http_event("GET", "/api/hubspot/contacts"), None))

        assert status == 404
