from bizops.services.forms import (
    CONTACT_FORM,
    FORM_CONFIGS,
    OFFER_FORM,
    ORGANIZATION_FORM,
    SERVICE_FORM,
    FieldType,
    FormConfig,
    FormField,
    check_field_rules,
    control_for,
    group_sections,
    normalize_submission,
    validate_submission,
)
from bizops.schemas.organization import OrganizationCreate, OrganizationUpdate

ORG_ID = "6f1c1c9e-2a4b-4f57-9d0e-9a7c1f1b2c3d"


def test_normalize_coerces_form_strings():
    data = normalize_submission(
        [("name", "Acme"), ("country", "none"), ("legal_name", ""), ("is_agency", "on"), ("flag", "false")]
    )
    assert data == {"name": "Acme", "country": None, "legal_name": None, "is_agency": True, "flag": False}


def test_normalize_only_coerces_exact_markers():
    data = normalize_submission(
        [("headline", "None"), ("company_role", "ON"), ("location", "True"), ("name", " false ")]
    )
    assert data == {"headline": "None", "company_role": "ON", "location": "True", "name": " false "}


def test_normalize_collects_lists():
    data = normalize_submission([("tags[]", "a"), ("tags[]", "b"), ("ids", "1"), ("ids", "2"), ("one[]", "x")])
    assert data["tags"] == ["a", "b"]
    assert data["ids"] == ["1", "2"]
    assert data["one"] == ["x"]


def test_normalize_unchecked_toggles_become_false():
    data = normalize_submission({"name": "Acme"}, ORGANIZATION_FORM)
    assert data["is_agency"] is False


def test_normalize_keeps_json_values():
    data = normalize_submission({"price": 12.5, "is_public": True, "ids": ["1", "none"]})
    assert data == {"price": 12.5, "is_public": True, "ids": ["1", None]}


def test_controls_dispatch_by_type():
    assert control_for(FormField("a", "A"))["control"] == "input"
    assert control_for(FormField("a", "A", FieldType.EMAIL))["input_type"] == "email"
    assert control_for(FormField("a", "A", FieldType.TEXTAREA, rows=6))["rows"] == 6
    assert control_for(FormField("a", "A", FieldType.DATE))["control"] == "date_picker"
    assert control_for(FormField("a", "A", FieldType.TOGGLE))["control"] == "switch"
    custom = control_for(FormField("a", "A", FieldType.CUSTOM, widget="country"))
    assert custom["control"] == "combobox"
    assert custom["widget"] == "country"


def test_sections_keep_declaration_order():
    names = [section["name"] for section in group_sections(CONTACT_FORM)]
    assert names == ["basic_info", "professional_info", "online_presence"]


def test_fields_without_section_go_to_general_group():
    config = FormConfig(
        entity="org",
        entity_name="Org",
        plural="orgs",
        create_schema=OrganizationCreate,
        update_schema=OrganizationUpdate,
        fields=(
            FormField("name", "Name"),
            FormField("basic", "Basic", FieldType.SECTION),
            FormField("country", "Country", section="basic"),
        ),
    )
    sections = group_sections(config)
    assert [s["name"] for s in sections] == ["general", "basic"]
    assert [c["name"] for c in sections[0]["controls"]] == ["name"]


def test_every_form_points_at_its_api():
    for entity, config in FORM_CONFIGS.items():
        assert config.api_endpoint == f"/api/v1/{config.plural}"
        assert config.back_link == f"/dashboard/{config.plural}"
        assert config.entity == entity


def test_required_and_length_rules():
    errors = check_field_rules(ORGANIZATION_FORM, {"name": "A"})
    assert "name" in errors
    errors = check_field_rules(ORGANIZATION_FORM, {})
    assert errors["name"] == "Organization Name is required"


def test_edit_mode_does_not_require_absent_fields():
    assert check_field_rules(ORGANIZATION_FORM, {}, mode="edit") == {}


def test_validate_submission_success():
    result = validate_submission(ORGANIZATION_FORM, [("name", "Acme GmbH"), ("country", "DE"), ("is_agency", "on")])
    assert result["valid"] is True
    assert result["data"]["name"] == "Acme GmbH"
    assert result["data"]["is_agency"] is True


def test_validate_submission_reports_schema_errors_by_field():
    result = validate_submission(
        SERVICE_FORM,
        {"name": "Audit", "summary": "Short", "description": "too short", "price": "-5",
         "is_recurring": "false", "allow_multiple": "false"},
    )
    assert result["valid"] is False
    assert "description" in result["errors"]
    assert "price" in result["errors"]


def test_validate_offer_submission_with_json_lines():
    result = validate_submission(
        OFFER_FORM,
        {
            "organization_id": ORG_ID,
            "valid_until": "2030-01-31",
            "currency": "usd",
            "services": '[{"is_custom": true, "custom_title": "Support", "price": 100}]',
            "offer_selected_link_ids": "not json",
        },
    )
    assert result["valid"] is True, result["errors"]
    assert result["data"]["currency"] == "USD"
    assert result["data"]["offer_selected_link_ids"] == []
    assert result["data"]["services"][0]["custom_title"] == "Support"
