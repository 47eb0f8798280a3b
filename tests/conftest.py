"""Shared fixtures: a fresh SQLite database per test and API helpers."""

import asyncio
import os
import tempfile
from datetime import date, timedelta

_DB_DIR = tempfile.mkdtemp(prefix="bizops-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/bizops_test.db"
os.environ["APP_ENV"] = "test"
os.environ["AUDIT_ENABLED"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["CACHE_TTL_SECONDS"] = "30"
os.environ.pop("API_TOKEN", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from bizops.core.cache import invalidate  # noqa: E402
from bizops.db.base import create_all, drop_all  # noqa: E402
from bizops.main import app  # noqa: E402


async def _reset_database() -> None:
    await drop_all()
    await create_all()


@pytest.fixture()
def client():
    asyncio.run(_reset_database())
    invalidate()
    with TestClient(app) as test_client:
        yield test_client


class Api:
    """Thin helpers that create rows through the HTTP API and return the JSON data."""

    def __init__(self, client: TestClient):
        self.client = client

    def _create(self, path: str, body: dict) -> dict:
        response = self.client.post(f"/api/v1/{path}", json=body)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    def organization(self, name: str = "Acme GmbH", **extra) -> dict:
        return self._create("organizations", {"name": name, **extra})

    def contact(self, name: str = "Jane Roe", **extra) -> dict:
        return self._create("contacts", {"name": name, **extra})

    def project(self, title: str = "Website relaunch", **extra) -> dict:
        return self._create("projects", {"title": title, **extra})

    def service(self, name: str = "Discovery Workshop", price: float = 1000, **extra) -> dict:
        body = {
            "name": name,
            "summary": f"{name} summary",
            "description": f"{name} long description",
            "price": price,
            **extra,
        }
        return self._create("services", body)

    def payment_term(self, title: str = "30 days net", **extra) -> dict:
        return self._create("payment-terms", {"title": title, "description": f"{title} text", **extra})

    def delivery_condition(self, title: str = "Remote delivery", **extra) -> dict:
        return self._create(
            "delivery-conditions", {"title": title, "description": f"{title} text", **extra}
        )

    def offer_link(self, title: str = "Case studies", **extra) -> dict:
        return self._create("offer-links", {"title": title, "url": "https://example.com/cases", **extra})

    def corporate_entity(self, name: str = "BizOps Ltd", **extra) -> dict:
        return self._create("corporate-entities", {"name": name, **extra})

    def offer(self, organization_id: str, services: list | None = None, **extra) -> dict:
        body = {
            "organizationId": organization_id,
            "validUntil": (date.today() + timedelta(days=30)).isoformat(),
            "services": services or [],
            **extra,
        }
        return self._create("offers", body)


@pytest.fixture()
def api(client):
    return Api(client)
