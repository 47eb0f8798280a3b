"""Metadata-driven entity forms.

Each entity form is a flat list of :class:`FormField` descriptors. Section
descriptors (``type="section"``) open a group; other fields point at their
group with ``section``. :func:`render_form` turns a config into control
descriptions grouped by section with options and values filled in, and
:func:`validate_submission` runs a raw submission through the descriptor
rules and then the entity's create/update schema.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.config import settings
from bizops.core.exceptions import BadRequestError, NotFoundError
from bizops.repositories.settings import (
    CorporateEntityRepository,
    DeliveryConditionRepository,
    OfferLinkRepository,
    PaymentTermRepository,
)
from bizops.schemas.offer import OfferCreate, OfferUpdate
from bizops.schemas.organization import (
    ContactCreate,
    ContactUpdate,
    OrganizationCreate,
    OrganizationUpdate,
)
from bizops.schemas.project import ProjectCreate, ProjectUpdate
from bizops.schemas.service import ServiceCreate, ServiceUpdate
from bizops.services.catalog import CatalogService
from bizops.services.lookups import LookupService
from bizops.services.offers import OfferService
from bizops.services.organizations import ContactService, OrganizationService
from bizops.services.projects import ProjectService

logger = logging.getLogger(__name__)

MODE_CREATE = "create"
MODE_EDIT = "edit"
GENERAL_SECTION = "general"


class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    TEXTAREA = "textarea"
    SELECT = "select"
    NUMBER = "number"
    DATE = "date"
    TOGGLE = "toggle"
    SECTION = "section"
    CUSTOM = "custom"


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    type: FieldType = FieldType.TEXT
    required: bool = False
    placeholder: Optional[str] = None
    options: tuple[tuple[str, str], ...] = ()
    rows: Optional[int] = None
    section: Optional[str] = None
    hidden: bool = False
    col_span: Optional[int] = None
    # Lookup-backed widget for custom fields (see services/lookups.py)
    widget: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None


@dataclass(frozen=True)
class FormConfig:
    entity: str
    entity_name: str
    plural: str
    fields: tuple[FormField, ...]
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]
    defaults: Mapping[str, Any] = field(default_factory=dict)
    # Query parameters allowed to pre-fill a create form
    prefill_keys: tuple[str, ...] = ()

    @property
    def api_endpoint(self) -> str:
        return f"/api/v1/{self.plural}"

    @property
    def back_link(self) -> str:
        return f"/dashboard/{self.plural}"

    @property
    def inputs(self) -> list[FormField]:
        return [f for f in self.fields if f.type is not FieldType.SECTION]

    def schema_for(self, mode: str) -> type[BaseModel]:
        return self.update_schema if mode == MODE_EDIT else self.create_schema


def _section(name: str, label: str, hidden: bool = False) -> FormField:
    return FormField(name=name, label=label, type=FieldType.SECTION, hidden=hidden)


# ---------------------------------------------------------------------------
# Entity form configs
# ---------------------------------------------------------------------------

ORGANIZATION_FORM = FormConfig(
    entity="organization",
    entity_name="Organization",
    plural="organizations",
    create_schema=OrganizationCreate,
    update_schema=OrganizationUpdate,
    defaults={"is_agency": False},
    fields=(
        _section("basic_info", "Basic Information"),
        FormField("name", "Organization Name", required=True, placeholder="Enter organization name",
                  section="basic_info", min_length=2, max_length=100),
        FormField("legal_name", "Legal Name", placeholder="Legal business name (if different)",
                  section="basic_info", max_length=200),
        FormField("country", "Country", FieldType.CUSTOM, placeholder="Select country",
                  section="basic_info", widget="country"),
        FormField("industry", "Industry", FieldType.CUSTOM, placeholder="Select industry",
                  section="basic_info", widget="industry"),
        FormField("is_agency", "Is Agency", FieldType.TOGGLE, section="basic_info"),
        _section("online_presence", "Online Presence"),
        FormField("website", "Website", placeholder="https://example.com", section="online_presence"),
        FormField("linkedin_url", "LinkedIn URL", placeholder="https://linkedin.com/company/...",
                  section="online_presence"),
        FormField("profile_image_url", "Profile Image URL",
                  placeholder="Enter image URL (e.g., company logo)", section="online_presence"),
    ),
)

CONTACT_FORM = FormConfig(
    entity="contact",
    entity_name="Contact",
    plural="contacts",
    create_schema=ContactCreate,
    update_schema=ContactUpdate,
    prefill_keys=("name", "email", "organization_id", "country", "linkedin_url"),
    fields=(
        _section("basic_info", "Basic Information"),
        FormField("name", "Name", required=True, placeholder="Enter contact name",
                  section="basic_info", min_length=2, max_length=100),
        FormField("email", "Email", FieldType.EMAIL, placeholder="Enter email address", section="basic_info"),
        FormField("organization_id", "Organization", FieldType.CUSTOM, placeholder="Select organization",
                  section="basic_info", widget="organization"),
        FormField("country", "Country", FieldType.CUSTOM, placeholder="Select country",
                  section="basic_info", widget="country"),
        _section("professional_info", "Professional Information"),
        FormField("corporate_email", "Work Email", FieldType.EMAIL, placeholder="Work email address",
                  section="professional_info"),
        FormField("company_role", "Role at Company", placeholder="Enter job title or role",
                  section="professional_info", max_length=200),
        FormField("headline", "Headline", placeholder="Professional headline",
                  section="professional_info", max_length=200),
        FormField("location", "Location", placeholder="City, Country", section="professional_info"),
        _section("online_presence", "Online Presence"),
        FormField("linkedin_url", "LinkedIn URL", placeholder="https://linkedin.com/in/...",
                  section="online_presence"),
        FormField("profile_image_url", "Profile Image URL", placeholder="Enter image URL",
                  section="online_presence"),
    ),
)

SERVICE_FORM = FormConfig(
    entity="service",
    entity_name="Service",
    plural="services",
    create_schema=ServiceCreate,
    update_schema=ServiceUpdate,
    defaults={"is_recurring": False, "allow_multiple": False},
    prefill_keys=("name", "group_type", "price", "is_recurring"),
    fields=(
        _section("basic_info", "Basic Information"),
        FormField("name", "Service Name", required=True, placeholder="Enter service name",
                  section="basic_info", min_length=2, max_length=200),
        FormField("summary", "Summary", required=True, placeholder="Brief summary of the service",
                  section="basic_info", max_length=200),
        FormField("description", "Description", FieldType.TEXTAREA, required=True, rows=10,
                  placeholder="Detailed description of the service", section="basic_info",
                  min_length=10, max_length=2000),
        FormField("group_type", "Service Group", FieldType.SELECT, section="basic_info",
                  options=(("Base", "Base"), ("Research", "Research"),
                           ("Optional", "Optional"), ("License", "License"))),
        FormField("category", "Category", FieldType.SELECT, placeholder="Select category",
                  section="basic_info", hidden=True,
                  options=(("none", "No category"), ("visualization", "Visualization"),
                           ("architecture", "Architecture"), ("signals", "Signals"))),
        FormField("icon", "Icon", placeholder="e.g. Package, Briefcase", section="basic_info"),
        _section("service_details", "Service Details"),
        FormField("price", "Price", FieldType.NUMBER, required=True, placeholder="0",
                  section="service_details"),
        FormField("is_recurring", "Billing Type", FieldType.SELECT, required=True,
                  section="service_details",
                  options=(("false", "One-time"), ("true", "Recurring (Yearly)"))),
        FormField("allow_multiple", "Multiple Selection", FieldType.SELECT, required=True,
                  section="service_details",
                  options=(("false", "Single selection only"), ("true", "Allow multiple selections"))),
        _section("additional_info", "Additional Information"),
        FormField("url", "Service URL", placeholder="https://example.com/service", section="additional_info"),
    ),
)

PROJECT_FORM = FormConfig(
    entity="project",
    entity_name="Project",
    plural="projects",
    create_schema=ProjectCreate,
    update_schema=ProjectUpdate,
    defaults={"status": "Active"},
    prefill_keys=("title", "organization_id", "status", "start_date", "end_date"),
    fields=(
        _section("basic_info", "Basic Information"),
        FormField("title", "Project Title", required=True, placeholder="Enter project title",
                  section="basic_info", max_length=200),
        FormField("description", "Description", FieldType.TEXTAREA, rows=4,
                  placeholder="Project description", section="basic_info"),
        FormField("url", "Project URL", placeholder="https://example.com/project", section="basic_info"),
        _section("project_details", "Project Details"),
        FormField("organization_id", "Organization", FieldType.CUSTOM, placeholder="Select organization",
                  section="project_details", widget="organization"),
        _section("timeline", "Timeline"),
        FormField("start_date", "Start Date", FieldType.DATE, placeholder="Select start date", section="timeline"),
        FormField("end_date", "End Date", FieldType.DATE, placeholder="Select end date", section="timeline"),
        FormField("status", "Status", FieldType.SELECT, section="timeline",
                  options=(("Active", "Active"), ("Paused", "Paused"), ("Archived", "Archived"))),
    ),
)

OFFER_FORM = FormConfig(
    entity="offer",
    entity_name="Offer",
    plural="offers",
    create_schema=OfferCreate,
    update_schema=OfferUpdate,
    defaults={
        "status": "draft",
        "discount_type": "global",
        "global_discount_percentage": 0,
        "is_accepted": False,
    },
    prefill_keys=("corporate_entity_id", "currency", "discount_type", "global_discount_percentage"),
    fields=(
        _section("basic_info", "Basic Information"),
        FormField("title", "Title", placeholder="Offer title (e.g. project or deal name)",
                  hidden=True, section="basic_info", max_length=200),
        FormField("corporate_entity_id", "Corporate Entity", FieldType.CUSTOM,
                  placeholder="Select corporate entity", col_span=1, section="basic_info",
                  widget="corporate_entity"),
        FormField("organization_id", "Organization", FieldType.CUSTOM, required=True,
                  placeholder="Select organization", col_span=1, section="basic_info",
                  widget="organization"),
        _section("pricing", "Pricing"),
        FormField("currency", "Currency", FieldType.CUSTOM, col_span=1, section="pricing",
                  widget="currency", pattern=r"^[A-Za-z]{3}$"),
        FormField("global_discount_percentage", "Global Discount %", FieldType.NUMBER,
                  placeholder="Enter discount percentage", col_span=1, section="pricing"),
        FormField("discount_reason", "Discount Reason", placeholder="Enter reason for discount (optional)",
                  col_span=1, section="pricing"),
        _section("pricing_tax", "Tax"),
        FormField("tax_percentage", "Tax %", FieldType.NUMBER, placeholder="0", section="pricing_tax"),
        FormField("tax_reason", "Tax explanation (optional)", placeholder="e.g., VAT, local tax, etc.",
                  section="pricing_tax"),
        _section("offer_status", "Offer Status"),
        FormField("created_at", "Created On", FieldType.DATE, placeholder="Select created date",
                  section="offer_status"),
        FormField("valid_until", "Valid Until", FieldType.DATE, required=True,
                  placeholder="Select validity date", section="offer_status"),
        FormField("status", "Status", FieldType.SELECT, hidden=True, section="offer_status",
                  options=(("draft", "Draft"), ("sent", "Sent"))),
        FormField("is_accepted", "Offer Accepted", FieldType.TOGGLE, section="offer_status"),
        _section("terms", "Terms"),
        FormField("payment_term_id", "Payment Terms", FieldType.CUSTOM, section="terms",
                  widget="payment_terms"),
        FormField("delivery_condition_id", "Delivery Conditions", FieldType.CUSTOM, section="terms",
                  widget="delivery_conditions"),
        _section("offer_links_section", "Offer Links", hidden=True),
        FormField("offer_selected_link_ids", "Links", FieldType.CUSTOM, col_span=2, hidden=True,
                  section="offer_links_section", widget="offer_links"),
    ),
)

FORM_CONFIGS: dict[str, FormConfig] = {
    config.entity: config
    for config in (ORGANIZATION_FORM, CONTACT_FORM, SERVICE_FORM, PROJECT_FORM, OFFER_FORM)
}


def get_form_config(entity: str) -> FormConfig:
    config = FORM_CONFIGS.get(entity)
    if config is None:
        raise NotFoundError("Form", entity)
    return config


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

_INPUT_TYPES = {
    FieldType.TEXT: "text",
    FieldType.EMAIL: "email",
    FieldType.NUMBER: "number",
}


def control_for(form_field: FormField) -> dict[str, Any]:
    """Describe the control a field renders as (no options resolved yet)."""
    control: dict[str, Any] = {
        "name": form_field.name,
        "label": form_field.label,
        "type": form_field.type.value,
        "required": form_field.required,
        "placeholder": form_field.placeholder,
        "col_span": form_field.col_span,
        "hidden": form_field.hidden,
        "validation": field_rules(form_field),
        "options": [{"value": value, "label": label} for value, label in form_field.options],
    }
    if form_field.type in _INPUT_TYPES:
        control.update(control="input", input_type=_INPUT_TYPES[form_field.type])
    elif form_field.type is FieldType.TEXTAREA:
        control.update(control="textarea", rows=form_field.rows or 4)
    elif form_field.type is FieldType.SELECT:
        control["control"] = "select"
    elif form_field.type is FieldType.DATE:
        control["control"] = "date_picker"
    elif form_field.type is FieldType.TOGGLE:
        control["control"] = "switch"
    elif form_field.type is FieldType.CUSTOM:
        control.update(
            control="multi_select" if form_field.widget == "offer_links" else "combobox",
            widget=form_field.widget,
        )
    else:
        raise ValueError(f"Field '{form_field.name}' of type {form_field.type.value} has no control")
    return control


def field_rules(form_field: FormField) -> dict[str, Any]:
    rules: dict[str, Any] = {}
    if form_field.min_length is not None:
        rules["min_length"] = form_field.min_length
    if form_field.max_length is not None:
        rules["max_length"] = form_field.max_length
    if form_field.pattern is not None:
        rules["pattern"] = form_field.pattern
    return rules


def group_sections(config: FormConfig) -> list[dict[str, Any]]:
    """Controls grouped under their section, in declaration order.

    Fields without a section (or pointing at an undeclared one) land in a
    leading "general" group.
    """
    sections: dict[str, dict[str, Any]] = {}
    declared = {f.name: f for f in config.fields if f.type is FieldType.SECTION}
    general: list[dict[str, Any]] = []
    for form_field in config.fields:
        if form_field.type is FieldType.SECTION:
            sections[form_field.name] = {
                "name": form_field.name,
                "label": form_field.label,
                "hidden": form_field.hidden,
                "controls": [],
            }
        elif form_field.section in declared:
            sections[form_field.section]["controls"].append(control_for(form_field))
        else:
            general.append(control_for(form_field))

    grouped = [section for section in sections.values() if section["controls"]]
    if general:
        grouped.insert(0, {"name": GENERAL_SECTION, "label": "General", "hidden": False, "controls": general})
    return grouped


class FormService:
    """Render entity forms and validate their submissions."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._lookups = LookupService(session)

    async def render(
        self,
        entity: str,
        mode: str = MODE_CREATE,
        record_id: Optional[str] = None,
        prefill: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        config = get_form_config(entity)
        if mode not in (MODE_CREATE, MODE_EDIT):
            raise BadRequestError(f"Unknown form mode '{mode}'")
        if mode == MODE_EDIT and not record_id:
            raise BadRequestError("An id is required to edit a record")

        sections = group_sections(config)
        for section in sections:
            for control in section["controls"]:
                if control.get("widget"):
                    control["options"] = await self._lookups.options(control["widget"])

        if mode == MODE_EDIT:
            values = await self._record_values(config, record_id)
        else:
            values = await self._create_values(config, prefill or {})

        return {
            "entity": config.entity,
            "entity_name": config.entity_name,
            "mode": mode,
            "record_id": record_id if mode == MODE_EDIT else None,
            "api_endpoint": config.api_endpoint,
            "back_link": config.back_link,
            "sections": sections,
            "values": jsonable_encoder(values),
        }

    async def _create_values(self, config: FormConfig, prefill: Mapping[str, Any]) -> dict[str, Any]:
        values = dict(config.defaults)
        if config.entity == "offer":
            values.update(await self._offer_defaults())
        for key in config.prefill_keys:
            if prefill.get(key) not in (None, ""):
                values[key] = prefill[key]
        return values

    async def _offer_defaults(self) -> dict[str, Any]:
        entity = await CorporateEntityRepository(self._session).get_default()
        term = await PaymentTermRepository(self._session).get_default()
        condition = await DeliveryConditionRepository(self._session).get_default()
        links = await OfferLinkRepository(self._session).list_active()
        return {
            "currency": settings.default_currency,
            "corporate_entity_id": entity.id if entity else None,
            "payment_term_id": term.id if term else None,
            "delivery_condition_id": condition.id if condition else None,
            "offer_selected_link_ids": [link.id for link in links if link.is_default],
        }

    async def _record_values(self, config: FormConfig, record_id: str) -> dict[str, Any]:
        if config.entity == "offer":
            record = await OfferService(self._session).get_offer(record_id)
        else:
            record = await _entity_service(config.entity, self._session).get(record_id)

        values = {f.name: getattr(record, f.name, None) for f in config.inputs}
        if config.entity == "offer":
            values["created_at"] = record.created_at.date()
            values["offer_selected_link_ids"] = [link.link_id for link in record.selected_links]
            values["discount_type"] = record.discount_type
        return values

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def validate(self, entity: str, raw: Any, mode: str = MODE_CREATE) -> dict[str, Any]:
        config = get_form_config(entity)
        if mode not in (MODE_CREATE, MODE_EDIT):
            raise BadRequestError(f"Unknown form mode '{mode}'")
        return validate_submission(config, raw, mode)


def _entity_service(entity: str, session: AsyncSession):
    services = {
        "organization": OrganizationService,
        "contact": ContactService,
        "project": ProjectService,
        "service": CatalogService,
    }
    return services[entity](session)


# ---------------------------------------------------------------------------
# Submission normalization and validation
# ---------------------------------------------------------------------------

def _coerce(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    # Exact markers only; "None" or "ON" typed into a text field stay text
    if value in ("", "none"):
        return None
    if value in ("true", "on"):
        return True
    if value == "false":
        return False
    return value


def normalize_submission(
    raw: Union[Mapping[str, Any], Iterable[tuple[str, Any]]],
    config: Optional[FormConfig] = None,
) -> dict[str, Any]:
    """Turn posted form values into plain Python values.

    ``"none"`` and ``""`` become None, ``"true"``/``"on"`` True, ``"false"``
    False. ``key[]`` and repeated keys collect into lists. With a config,
    toggles missing from the submission (unchecked checkboxes) become False.
    """
    pairs = raw.items() if isinstance(raw, Mapping) else raw
    data: dict[str, Any] = {}
    list_keys: set[str] = set()
    for key, value in pairs:
        as_list = key.endswith("[]")
        name = key[:-2] if as_list else key
        if isinstance(value, list):
            value = [_coerce(item) for item in value]
            as_list = True
        else:
            value = _coerce(value)

        if as_list or name in data:
            current = data.get(name)
            if name not in data:
                current = []
            elif name not in list_keys:
                current = [current]
            list_keys.add(name)
            data[name] = current + (value if isinstance(value, list) else [value])
        else:
            data[name] = value

    if config is not None:
        for form_field in config.inputs:
            if form_field.type is FieldType.TOGGLE and form_field.name not in data:
                data[form_field.name] = False
    return data


def check_field_rules(config: FormConfig, data: Mapping[str, Any], mode: str = MODE_CREATE) -> dict[str, str]:
    """Apply descriptor-level rules; returns ``{field: message}``."""
    errors: dict[str, str] = {}
    for form_field in config.inputs:
        value = data.get(form_field.name)
        if value is None or value == "" or value == []:
            # Edit submissions may leave fields out entirely
            if form_field.required and (mode == MODE_CREATE or form_field.name in data):
                errors[form_field.name] = f"{form_field.label} is required"
            continue
        if not isinstance(value, str):
            continue
        if form_field.min_length is not None and len(value.strip()) < form_field.min_length:
            errors[form_field.name] = (
                f"{form_field.label} must be at least {form_field.min_length} characters"
            )
        elif form_field.max_length is not None and len(value) > form_field.max_length:
            errors[form_field.name] = (
                f"{form_field.label} must be at most {form_field.max_length} characters"
            )
        elif form_field.pattern is not None and not re.match(form_field.pattern, value):
            errors[form_field.name] = f"{form_field.label} has an invalid format"
    return errors


def _schema_errors(schema: type[BaseModel], exc: SchemaValidationError) -> dict[str, str]:
    by_alias = {info.alias: name for name, info in schema.model_fields.items() if info.alias}
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        key = str(loc[0]) if loc else "__root__"
        key = by_alias.get(key, key)
        errors.setdefault(key, err.get("msg", "Invalid value"))
    return errors


def validate_submission(config: FormConfig, raw: Any, mode: str = MODE_CREATE) -> dict[str, Any]:
    data = normalize_submission(raw, config)
    errors = check_field_rules(config, data, mode)
    schema = config.schema_for(mode)
    payload = {key: value for key, value in data.items() if value is not None or mode == MODE_EDIT}
    try:
        validated = schema.model_validate(payload)
    except SchemaValidationError as exc:
        for key, message in _schema_errors(schema, exc).items():
            errors.setdefault(key, message)
        validated = None

    if errors:
        logger.debug("%s form rejected: %s", config.entity_name, sorted(errors))
        return {"valid": False, "data": jsonable_encoder(data), "errors": errors}
    return {
        "valid": True,
        "data": validated.model_dump(mode="json", exclude_unset=mode == MODE_EDIT),
        "errors": {},
    }
