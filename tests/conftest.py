"""
Pytest configuration to ensure paths are set up correctly for tests.

src/ is added to sys.path to simulate the Lambda package root, and the repo
root so that ``infrastructure.*`` imports resolve.
"""

import json
import os
import sys
from pathlib import Path

import boto3
import httpx
import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add repository root AND src/ to sys.path if missing."""
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"

    root_str = str(repo_root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)

    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Ensure boto3 has offline-friendly defaults so tests do not require AWS access.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("AWS_SESSION_TOKEN", "test")
os.environ.setdefault("ENVIRONMENT", "dev")

# Lambda environment variables used by handlers
os.environ.setdefault("HUBSPOT_API_KEY", "test-token")
os.environ.setdefault("CONTACT_LINK_DELAY_SECONDS", "0")
os.environ.setdefault("TICKET_LINK_DELAY_SECONDS", "0")

boto3.setup_default_session(region_name="eu-west-2")

from crm_seeder.services.hubspot_client import HubSpotClient  # noqa: E402


class FakeHubSpot:
    """
    httpx.MockTransport handler that records every request.

    Routes are ``(method, path)`` pairs; a path ending in ``*`` matches by
    prefix. A route's response is either a fixed ``(status, json)`` or a
    callable taking the request. Unrouted requests get a 404.
    """

    def __init__(self):
        self.requests = []
        self._routes = []

    def on(self, method, path, status=200, json_body=None, handler=None):
        self._routes.append((method.upper(), path, status, json_body, handler))
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for method, path, status, json_body, handler in self._routes:
            if request.method != method:
                continue
            if path.endswith("*"):
                matched = request.url.path.startswith(path[:-1])
            else:
                matched = request.url.path == path
            if matched:
                if handler is not None:
                    return handler(request)
                return httpx.Response(status, json=json_body if json_body is not None else {})
        return httpx.Response(404, json={"message": "not found"})

    def calls(self, method=None, prefix=""):
        return [
            r
            for r in self.requests
            if (method is None or r.method == method) and r.url.path.startswith(prefix)
        ]

    def client(self) -> HubSpotClient:
        return HubSpotClient(
            "test-token", base_url="https://hubspot.test", transport=httpx.MockTransport(self)
        )


@pytest.fixture
def fake_hubspot():
    return FakeHubSpot()


@pytest.fixture
def created_ids():
    """Handler answering object creates with sequential HubSpot ids."""

    def factory(start=1000):
        counter = iter(range(start, start + 10_000))

        def handler(request):
            body = json.loads(request.content)
            return httpx.Response(201, json={"id": str(next(counter)), "properties": body["properties"]})

        return handler

    return factory
