import uuid

from fastapi.testclient import TestClient

from bizops import main
from bizops.core.config import settings


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_shutdown_disposes_the_engine(monkeypatch):
    disposed = []

    class RecordingEngine:
        async def dispose(self):
            disposed.append(True)

    monkeypatch.setattr(main, "engine", RecordingEngine())
    with TestClient(main.create_app()) as test_client:
        assert test_client.get("/health").status_code == 200
        assert disposed == []
    assert disposed == [True]


def test_organization_crud(client, api):
    created = api.organization("Acme GmbH", country="DE", website="")
    assert created["name"] == "Acme GmbH"
    assert created["website"] is None
    assert created["isAgency"] is False
    assert "createdAt" in created

    org_id = created["id"]
    response = client.put(f"/api/v1/organizations/{org_id}", json={"legalName": "Acme Holding GmbH"})
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["legalName"] == "Acme Holding GmbH"
    assert updated["name"] == "Acme GmbH"

    assert client.get(f"/api/v1/organizations/{org_id}").json()["data"]["country"] == "DE"

    assert client.delete(f"/api/v1/organizations/{org_id}").status_code == 204
    response = client.get(f"/api/v1/organizations/{org_id}")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_placeholder_values_are_treated_as_empty(api):
    created = api.organization("Blank Co", country="none", industry="__placeholder__", legalName="")
    assert created["country"] is None
    assert created["industry"] is None
    assert created["legalName"] is None


def test_request_validation_uses_error_envelope(client):
    response = client.post("/api/v1/organizations", json={"name": "A"})
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_delete_with_related_records_conflicts(client, api):
    org = api.organization()
    api.contact(organizationId=org["id"])

    response = client.delete(f"/api/v1/organizations/{org['id']}")
    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "HAS_RELATED_RECORDS"
    assert error["message"] == "Cannot delete this organization because it has related records."
    assert client.get(f"/api/v1/organizations/{org['id']}").status_code == 200


def test_delete_missing_row_is_404(client):
    response = client.delete(f"/api/v1/projects/{uuid.uuid4()}")
    assert response.status_code == 404


def test_contact_with_unknown_organization_is_rejected(client):
    response = client.post(
        "/api/v1/contacts", json={"name": "Jane Roe", "organizationId": str(uuid.uuid4())}
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BAD_REQUEST"


def test_contacts_and_projects_filter_by_organization(client, api):
    acme = api.organization("Acme GmbH")
    other = api.organization("Other AG")
    api.contact("Jane Roe", organizationId=acme["id"])
    api.contact("John Doe", organizationId=other["id"])
    api.project("Relaunch", organizationId=acme["id"])

    contacts = client.get("/api/v1/contacts", params={"organization_id": acme["id"]}).json()
    assert [c["name"] for c in contacts["data"]] == ["Jane Roe"]
    assert contacts["data"][0]["organization"]["name"] == "Acme GmbH"

    linked = client.get(f"/api/v1/organizations/{acme['id']}/contacts").json()["data"]
    assert [c["name"] for c in linked] == ["Jane Roe"]
    projects = client.get(f"/api/v1/organizations/{acme['id']}/projects").json()["data"]
    assert [p["title"] for p in projects] == ["Relaunch"]
    assert client.get(f"/api/v1/organizations/{uuid.uuid4()}/offers").status_code == 404


def test_project_status_defaults_to_active(api):
    assert api.project("Relaunch", status="")["status"] == "Active"


def test_list_search_filter_sort_and_paginate(client, api):
    api.organization("Acme GmbH", country="DE", industry="Technology")
    api.organization("Globex Inc", country="US", industry="Finance")
    api.organization("Initech AG", country="DE", industry="Finance")

    page = client.get("/api/v1/organizations", params={"limit": 2}).json()
    assert page["meta"] == {"total": 3, "page": 1, "limit": 2, "pages": 2}
    assert [o["name"] for o in page["data"]] == ["Acme GmbH", "Globex Inc"]

    found = client.get("/api/v1/organizations", params={"q": "GLOBEX"}).json()
    assert [o["name"] for o in found["data"]] == ["Globex Inc"]

    filtered = client.get(
        "/api/v1/organizations",
        params=[("filter", "country:equals:DE"), ("filter", "industry:Finance")],
    ).json()
    assert [o["name"] for o in filtered["data"]] == ["Initech AG"]

    ordered = client.get("/api/v1/organizations", params={"sort": "name", "order": "desc"}).json()
    assert [o["name"] for o in ordered["data"]] == ["Initech AG", "Globex Inc", "Acme GmbH"]


def test_list_rejects_unknown_filter_and_sort_keys(client):
    assert client.get("/api/v1/organizations", params={"filter": "password:equals:x"}).status_code == 400
    assert client.get("/api/v1/organizations", params={"filter": "name:between:x"}).status_code == 400
    assert client.get("/api/v1/organizations", params={"sort": "secret"}).status_code == 400


def test_service_in_use_cannot_be_deleted(client, api):
    org = api.organization()
    service = api.service()
    api.offer(org["id"], services=[{"serviceId": service["id"]}])

    response = client.delete(f"/api/v1/services/{service['id']}")
    assert response.status_code == 409
    assert response.json()["error"]["message"] == "Cannot delete this service because it has related records."


def test_settings_default_flag_is_exclusive(client, api):
    first = api.payment_term("30 days net", isDefault=True)
    second = api.payment_term("Prepaid", isDefault=True)

    assert client.get(f"/api/v1/payment-terms/{first['id']}").json()["data"]["isDefault"] is False
    assert client.get(f"/api/v1/payment-terms/{second['id']}").json()["data"]["isDefault"] is True

    client.put(f"/api/v1/payment-terms/{first['id']}", json={"isDefault": True})
    assert client.get(f"/api/v1/payment-terms/{second['id']}").json()["data"]["isDefault"] is False


def test_default_flags_are_per_kind(client, api):
    term = api.payment_term(isDefault=True)
    api.delivery_condition(isDefault=True)
    assert client.get(f"/api/v1/payment-terms/{term['id']}").json()["data"]["isDefault"] is True


def test_settings_crud_for_every_kind(client, api):
    entity = api.corporate_entity("BizOps Ltd", vatId="GB123")
    link = api.offer_link("Portfolio")
    condition = api.delivery_condition("On site")

    assert client.get("/api/v1/corporate-entities").json()["data"][0]["vatId"] == "GB123"
    assert client.put(f"/api/v1/offer-links/{link['id']}", json={"isActive": False}).json()["data"]["isActive"] is False
    assert client.delete(f"/api/v1/delivery-conditions/{condition['id']}").status_code == 204
    assert client.delete(f"/api/v1/corporate-entities/{entity['id']}").status_code == 204


def test_member_email_is_unique_case_insensitively(client):
    response = client.post("/api/v1/members", json={"email": "Ada@Example.com", "fullName": "Ada"})
    assert response.status_code == 201
    assert response.json()["data"]["email"] == "ada@example.com"
    assert response.json()["data"]["role"] == "member"

    duplicate = client.post("/api/v1/members", json={"email": "ADA@example.com"})
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "CONFLICT"


def test_member_update_to_taken_email_conflicts(client):
    client.post("/api/v1/members", json={"email": "ada@example.com"})
    other = client.post("/api/v1/members", json={"email": "bob@example.com"}).json()["data"]

    response = client.put(f"/api/v1/members/{other['id']}", json={"email": "Ada@example.com"})
    assert response.status_code == 409
    same = client.put(f"/api/v1/members/{other['id']}", json={"email": "BOB@example.com", "role": "admin"})
    assert same.status_code == 200
    assert same.json()["data"]["role"] == "admin"


def test_table_config_resolves_filter_options(client, api):
    api.organization("Acme GmbH")
    data = client.get("/api/v1/tables/contacts").json()["data"]
    assert data["entity"] == "contacts"
    assert "name" in data["searchFields"]
    assert "not_in" in data["operators"]
    organization_filter = next(f for f in data["filters"] if f["key"] == "organization_id")
    assert [o["label"] for o in organization_filter["options"]] == ["Acme GmbH"]

    assert client.get("/api/v1/tables/unknown").status_code == 404


def test_dashboard_requires_token_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "api_token", "s3cret")

    assert client.get("/api/v1/organizations").status_code == 401
    assert client.get("/api/v1/organizations", headers={"Authorization": "Bearer nope"}).status_code == 401
    ok = client.get("/api/v1/organizations", headers={"Authorization": "Bearer s3cret"})
    assert ok.status_code == 200
    # Public pages stay open
    assert client.get(f"/api/v1/public/offers/{uuid.uuid4()}").status_code == 404
