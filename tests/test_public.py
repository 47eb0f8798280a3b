import uuid
from datetime import date, timedelta

from bizops.services.offers import default_title
from bizops.services.public import group_deliverables


def _offer_with_catalog(api, **extra):
    org = api.organization("Acme GmbH", country="DE")
    base = api.service("Discovery Workshop", 1000, groupType="Base", isRecurring=True, recurringInterval="year")
    plain = api.service("Hosting", 200)
    offer = api.offer(
        org["id"],
        services=[
            {"serviceId": base["id"]},
            {"serviceId": plain["id"]},
            {"isCustom": True, "customTitle": "Extra support", "customDescription": "On demand", "price": 300},
        ],
        **extra,
    )
    return org, offer


def test_view_offer_shapes_public_page(client, api):
    active = api.offer_link("Case studies")
    inactive = api.offer_link("Old brochure")
    client.put(f"/api/v1/offer-links/{inactive['id']}", json={"isActive": False})
    entity = api.corporate_entity("BizOps Ltd")
    _, offer = _offer_with_catalog(
        api, offerSelectedLinkIds=[active["id"], inactive["id"]], corporateEntityId=entity["id"]
    )

    response = client.get(f"/api/v1/public/offers/{offer['id']}")
    assert response.status_code == 200
    view = response.json()["data"]

    assert view["organization"]["name"] == "Acme GmbH"
    assert view["corporateEntity"]["name"] == "BizOps Ltd"
    assert view["isExpired"] is False
    assert [line["groupType"] for line in view["lines"]] == ["Base", "Other", "Custom"]
    assert view["lines"][0]["isRecurring"] is True
    assert view["lines"][2]["serviceName"] == "Extra support"
    assert view["lines"][2]["description"] == "On demand"
    assert [link["title"] for link in view["links"]] == ["Case studies"]
    assert view["pricing"]["grandTotal"] == 1500

    created_on = offer["createdAt"][:10]
    assert view["agreementDate"] == created_on
    assert view["agreementStartDate"] == created_on
    assert view["agreementEndDate"] == offer["validUntil"]
    assert view["agreementIncludeAnnex"] is True


def test_view_offer_rejects_bad_ids(client):
    assert client.get("/api/v1/public/offers/not-a-uuid").status_code == 400
    assert client.get(f"/api/v1/public/offers/{uuid.uuid4()}").status_code == 404


def test_view_with_email_logs_forwarded_ip(client, api):
    _, offer = _offer_with_catalog(api)
    client.get(
        f"/api/v1/public/offers/{offer['id']}",
        params={"email": "viewer@example.com"},
        headers={"X-Forwarded-For": "203.0.113.5, 10.0.0.1", "User-Agent": "pytest-agent"},
    )
    logs = client.get(f"/api/v1/offers/{offer['id']}/access-logs").json()["data"]["logs"]
    assert len(logs) == 1
    assert logs[0]["accessedEmail"] == "viewer@example.com"
    assert logs[0]["ipAddress"] == "203.0.113.5"
    assert logs[0]["userAgent"] == "pytest-agent"


def test_public_accept(client, api):
    _, offer = _offer_with_catalog(api)
    url = f"/api/v1/public/offers/{offer['id']}/accept"

    assert client.post(url, json={"email": "jane@example.com"}).status_code == 400
    assert client.post(url, json={"name": "Jane Roe"}).status_code == 400

    response = client.post(
        url,
        json={"name": "Jane Roe", "emailForAccess": "jane@example.com", "metadata": {"signature": "JR"}},
        headers={"X-Real-IP": "198.51.100.7"},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["isAccepted"] is True
    assert data["acceptedByEmail"] == "jane@example.com"

    stored = client.get(f"/api/v1/offers/{offer['id']}").json()["data"]
    assert stored["acceptedIp"] == "198.51.100.7"
    assert stored["acceptedMetadata"]["accepted_source"] == "public"
    assert stored["acceptedMetadata"]["signature"] == "JR"

    again = client.post(url, json={"name": "Jane Roe", "email": "jane@example.com"})
    assert again.status_code == 409


def test_expired_offer_cannot_be_accepted(client, api):
    _, offer = _offer_with_catalog(api, validUntil=(date.today() - timedelta(days=3)).isoformat())
    response = client.post(
        f"/api/v1/public/offers/{offer['id']}/accept", json={"name": "Jane Roe", "email": "jane@example.com"}
    )
    assert response.status_code == 409


def test_view_project_lists_sent_offers_with_grouped_deliverables(client, api):
    org = api.organization("Acme GmbH")
    project = api.project("Relaunch", organizationId=org["id"])
    research = api.service("Research Report", 500, groupType="Research")
    base = api.service("Discovery Workshop", 1000, groupType="Base")
    license_ = api.service("Platform License", 2000, groupType="License")
    api.offer(
        org["id"],
        status="sent",
        title="Sent offer",
        services=[
            {"serviceId": license_["id"]},
            {"serviceId": research["id"]},
            {"isCustom": True, "customTitle": "Extra", "price": 10},
            {"serviceId": base["id"]},
        ],
    )
    api.offer(org["id"], title="Draft offer", services=[{"serviceId": base["id"]}])

    view = client.get(f"/api/v1/public/projects/{project['id']}").json()["data"]
    assert view["title"] == "Relaunch"
    assert view["organization"]["name"] == "Acme GmbH"
    assert [o["title"] for o in view["offers"]] == ["Sent offer"]
    groups = view["offers"][0]["deliverables"]
    assert [g["groupType"] for g in groups] == ["Base", "Research", "Custom", "License"]

    assert client.get("/api/v1/public/projects/nope").status_code == 400
    assert client.get(f"/api/v1/public/projects/{uuid.uuid4()}").status_code == 404


def test_group_deliverables_puts_unknown_groups_last():
    lines = [{"group_type": "Other"}, {"group_type": "Optional"}, {"group_type": "Zeta"}, {"group_type": "Base"}]
    assert [g["group_type"] for g in group_deliverables(lines)] == ["Base", "Optional", "Other", "Zeta"]


def test_default_title():
    assert default_title("Acme GmbH", 2025) == "Acme GmbH 2025"
    assert default_title(None, 2025) == "Offer 2025"
