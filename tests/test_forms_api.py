import uuid


def test_render_create_form(client):
    response = client.get("/api/v1/forms/organization")
    assert response.status_code == 200
    form = response.json()["data"]

    assert form["entity"] == "organization"
    assert form["mode"] == "create"
    assert form["apiEndpoint"] == "/api/v1/organizations"
    assert form["backLink"] == "/dashboard/organizations"
    assert [s["name"] for s in form["sections"]] == ["basic_info", "online_presence"]

    controls = {c["name"]: c for s in form["sections"] for c in s["controls"]}
    assert controls["name"]["required"] is True
    assert controls["name"]["validation"] == {"min_length": 2, "max_length": 100}
    assert controls["country"]["control"] == "combobox"
    assert {"value": "DE", "label": "Germany"} in controls["country"]["options"]
    assert controls["is_agency"]["control"] == "switch"
    assert form["values"] == {"is_agency": False}


def test_offer_form_prefills_defaults(client, api):
    entity = api.corporate_entity("BizOps Ltd", isDefault=True)
    term = api.payment_term(isDefault=True)
    link = api.offer_link("Case studies", isDefault=True)
    api.offer_link("Other link")

    form = client.get("/api/v1/forms/offer").json()["data"]
    values = form["values"]
    assert values["corporate_entity_id"] == entity["id"]
    assert values["payment_term_id"] == term["id"]
    assert values["delivery_condition_id"] is None
    assert values["offer_selected_link_ids"] == [link["id"]]
    assert values["currency"] == "EUR"

    hidden = [s["name"] for s in form["sections"] if s["hidden"]]
    assert hidden == ["offer_links_section"]


def test_create_form_accepts_allowed_prefill_only(client):
    values = client.get("/api/v1/forms/contact", params={"name": "Jane", "headline": "CTO"}).json()["data"]["values"]
    assert values == {"name": "Jane"}


def test_render_edit_form_loads_record(client, api):
    org = api.organization("Acme GmbH")
    contact = api.contact("Jane Roe", organizationId=org["id"], email="jane@example.com")

    form = client.get("/api/v1/forms/contact", params={"mode": "edit", "id": contact["id"]}).json()["data"]
    assert form["recordId"] == contact["id"]
    assert form["values"]["name"] == "Jane Roe"
    assert form["values"]["organization_id"] == org["id"]
    organization_control = next(
        c for s in form["sections"] for c in s["controls"] if c["name"] == "organization_id"
    )
    assert organization_control["options"] == [{"value": org["id"], "label": "Acme GmbH"}]


def test_edit_offer_form_includes_links(client, api):
    org = api.organization()
    link = api.offer_link()
    offer = api.offer(org["id"], offerSelectedLinkIds=[link["id"]], createdAt="2024-02-03")

    values = client.get("/api/v1/forms/offer", params={"mode": "edit", "id": offer["id"]}).json()["data"]["values"]
    assert values["offer_selected_link_ids"] == [link["id"]]
    assert values["created_at"] == "2024-02-03"


def test_render_errors(client):
    assert client.get("/api/v1/forms/invoice").status_code == 404
    assert client.get("/api/v1/forms/contact", params={"mode": "edit"}).status_code == 400
    assert client.get("/api/v1/forms/contact", params={"mode": "edit", "id": str(uuid.uuid4())}).status_code == 404
    assert client.get("/api/v1/forms/contact", params={"mode": "view"}).status_code == 422


def test_lookup_options_refresh_after_writes(client, api):
    api.organization("Acme GmbH")

    def organization_labels():
        form = client.get("/api/v1/forms/project").json()["data"]
        control = next(c for s in form["sections"] for c in s["controls"] if c["name"] == "organization_id")
        return [o["label"] for o in control["options"]]

    assert organization_labels() == ["Acme GmbH"]
    api.organization("Zeta AG")
    assert organization_labels() == ["Acme GmbH", "Zeta AG"]


def test_validate_form_encoded_submission(client):
    response = client.post(
        "/api/v1/forms/organization/validate",
        data={"name": "Acme GmbH", "country": "none", "is_agency": "on"},
    )
    assert response.status_code == 200
    result = response.json()["data"]
    assert result["valid"] is True
    assert result["data"]["name"] == "Acme GmbH"
    assert result["data"]["country"] is None
    assert result["data"]["is_agency"] is True


def test_validate_json_submission_reports_errors(client):
    result = client.post("/api/v1/forms/contact/validate", json={"name": "", "email": "not-an-email"}).json()["data"]
    assert result["valid"] is False
    assert result["errors"]["name"] == "Name is required"
    assert "email" in result["errors"]


def test_validate_edit_mode_is_partial(client):
    result = client.post(
        "/api/v1/forms/project/validate", params={"mode": "edit"}, json={"status": "Paused"}
    ).json()["data"]
    assert result["valid"] is True
    assert result["data"] == {"status": "Paused"}
