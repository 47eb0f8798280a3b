"""Generic search -> filter -> sort pipeline over already-fetched records.

Every list endpoint loads its rows, dumps them to plain dicts, and runs them
through :func:`query_table`. The pipeline is pure and synchronous:

1. search: case-insensitive substring over the entity's search fields,
   OR across fields, ``None`` never matches, an empty query keeps everything;
2. filters: each ``FilterSpec`` applied in turn (logical AND);
3. sort: stable, typed comparison on one column, nulls always last.

Rule: No SQLAlchemy / no FastAPI here.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

Record = Mapping[str, Any]


class FilterOperator(str, Enum):
    EQUALS = "equals"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    IN = "in"
    NOT_IN = "not_in"


_LIST_OPERATORS = {FilterOperator.IN, FilterOperator.NOT_IN}


@dataclass(frozen=True)
class FilterSpec:
    key: str
    value: Any
    operator: FilterOperator = FilterOperator.EQUALS


@dataclass(frozen=True)
class FilterOption:
    key: str
    label: str
    operator: FilterOperator = FilterOperator.EQUALS
    options: tuple[tuple[str, str], ...] = ()
    # Name of a lookup (e.g. "organization") whose options are loaded at request time
    lookup: Optional[str] = None


@dataclass(frozen=True)
class TableConfig:
    entity: str
    search_fields: tuple[str, ...]
    default_sort: str = "created_at"
    default_order: str = "desc"
    filters: tuple[FilterOption, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_filter_param(raw: str) -> FilterSpec:
    """Parse ``key:operator:value``; ``in``/``not_in`` values are comma-separated.

    A bare ``key:value`` means equals. The value may itself contain colons.
    """
    key, sep, rest = raw.partition(":")
    if not sep or not key.strip():
        raise ValueError(f"Invalid filter '{raw}', expected key:operator:value")
    maybe_op, sep, value = rest.partition(":")
    try:
        operator = FilterOperator(maybe_op.strip().lower()) if sep else FilterOperator.EQUALS
    except ValueError as exc:
        raise ValueError(f"Unknown filter operator '{maybe_op}'") from exc
    if not sep:
        value = rest

    parsed: Any = value
    if operator in _LIST_OPERATORS:
        parsed = [part.strip() for part in value.split(",") if part.strip()]
    elif value.strip().lower() in ("null", "none"):
        parsed = None
    return FilterSpec(key=key.strip(), value=parsed, operator=operator)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

def search_records(records: Iterable[Record], query: str, fields: Sequence[str]) -> list[Record]:
    needle = (query or "").strip().casefold()
    if not needle:
        return list(records)
    matched = []
    for record in records:
        for name in fields:
            value = record.get(name)
            if value is not None and needle in str(value).casefold():
                matched.append(record)
                break
    return matched


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _as_number(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str) and value.strip():
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
        return number if number.is_finite() else None
    return None


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_as_text(item) for item in value]
    return [_as_text(value)]


def matches(record_value: Any, spec: FilterSpec) -> bool:
    op = spec.operator
    target = spec.value

    if record_value is None:
        return op == FilterOperator.EQUALS and target is None
    if op in _LIST_OPERATORS:
        member = _as_text(record_value) in _as_list(target)
        return member if op == FilterOperator.IN else not member
    if target is None:
        return False

    if op in (FilterOperator.GREATER_THAN, FilterOperator.LESS_THAN):
        left, right = _as_number(record_value), _as_number(target)
        if left is None or right is None:
            return False
        return left > right if op == FilterOperator.GREATER_THAN else left < right

    left_text = _as_text(record_value).casefold()
    right_text = _as_text(target).casefold()
    if op == FilterOperator.EQUALS:
        # Numeric columns compare by value; text columns ("01234") stay text
        if isinstance(record_value, (int, float, Decimal)) and not isinstance(record_value, bool):
            right_num = _as_number(target)
            if right_num is not None:
                return _as_number(record_value) == right_num
        return left_text == right_text
    if op == FilterOperator.CONTAINS:
        return right_text in left_text
    if op == FilterOperator.STARTS_WITH:
        return left_text.startswith(right_text)
    return left_text.endswith(right_text)


def apply_filters(records: Iterable[Record], filters: Sequence[FilterSpec]) -> list[Record]:
    result = list(records)
    for spec in filters:
        result = [r for r in result if matches(r.get(spec.key), spec)]
    return result


# ---------------------------------------------------------------------------
# Sort
# ---------------------------------------------------------------------------

def _sort_key(value: Any) -> tuple[int, Any]:
    # (type rank, comparable value) so mixed columns never compare across types
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float, Decimal)):
        return (0, value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (1, value.timestamp())
    if isinstance(value, date):
        return (1, datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp())
    return (2, str(value).casefold())


def sort_records(records: Iterable[Record], key: Optional[str], order: str = "asc") -> list[Record]:
    """Stable sort on ``key``; records whose value is None stay at the end."""
    rows = list(records)
    if not key:
        return rows
    present = [r for r in rows if r.get(key) is not None]
    missing = [r for r in rows if r.get(key) is None]
    present.sort(key=lambda r: _sort_key(r[key]), reverse=(order or "asc").lower() == "desc")
    return present + missing


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def query_table(
    records: Iterable[Record],
    config: TableConfig,
    *,
    query: str = "",
    filters: Sequence[FilterSpec] = (),
    sort: Optional[str] = None,
    order: Optional[str] = None,
) -> list[Record]:
    rows = search_records(records, query, config.search_fields)
    rows = apply_filters(rows, filters)
    return sort_records(rows, sort or config.default_sort, order or config.default_order)


# ---------------------------------------------------------------------------
# Per-entity configuration
# ---------------------------------------------------------------------------

PROJECT_STATUS_OPTIONS = (("Active", "Active"), ("Paused", "Paused"), ("Archived", "Archived"))
OFFER_STATUS_OPTIONS = (("draft", "Draft"), ("sent", "Sent"))
SERVICE_GROUP_OPTIONS = (
    ("Base", "Base"),
    ("Research", "Research"),
    ("Optional", "Optional"),
    ("License", "License"),
)
YES_NO_OPTIONS = (("true", "Yes"), ("false", "No"))

TABLE_CONFIGS: dict[str, TableConfig] = {
    "organizations": TableConfig(
        entity="organizations",
        search_fields=("name", "legal_name", "city", "country", "industry", "website"),
        default_sort="name",
        default_order="asc",
        filters=(
            FilterOption("industry", "Industry", lookup="industry"),
            FilterOption("country", "Country", lookup="country"),
            FilterOption("is_agency", "Agency", options=YES_NO_OPTIONS),
        ),
    ),
    "contacts": TableConfig(
        entity="contacts",
        search_fields=("name", "email", "company_role", "headline", "location", "corporate_email"),
        default_sort="name",
        default_order="asc",
        filters=(
            FilterOption("organization_id", "Organization", lookup="organization"),
            FilterOption("country", "Country", lookup="country"),
        ),
    ),
    "projects": TableConfig(
        entity="projects",
        search_fields=("title", "description", "url"),
        filters=(
            FilterOption("status", "Status", options=PROJECT_STATUS_OPTIONS),
            FilterOption("organization_id", "Organization", lookup="organization"),
        ),
    ),
    "services": TableConfig(
        entity="services",
        search_fields=("name", "summary", "description", "category"),
        default_sort="name",
        default_order="asc",
        filters=(
            FilterOption("group_type", "Group", operator=FilterOperator.IN, options=SERVICE_GROUP_OPTIONS),
            FilterOption("is_public", "Public", options=YES_NO_OPTIONS),
        ),
    ),
    "offers": TableConfig(
        entity="offers",
        search_fields=("title", "status", "currency", "comments"),
        filters=(
            FilterOption("status", "Status", options=OFFER_STATUS_OPTIONS),
            FilterOption("currency", "Currency", lookup="currency"),
        ),
    ),
    "corporate-entities": TableConfig(
        entity="corporate-entities",
        search_fields=("name", "legal_name", "city", "country", "vat_id"),
        default_sort="name",
        default_order="asc",
    ),
    "payment-terms": TableConfig(
        entity="payment-terms",
        search_fields=("title", "description"),
        default_sort="title",
        default_order="asc",
        filters=(FilterOption("is_active", "Active", options=YES_NO_OPTIONS),),
    ),
    "delivery-conditions": TableConfig(
        entity="delivery-conditions",
        search_fields=("title", "description"),
        default_sort="title",
        default_order="asc",
        filters=(FilterOption("is_active", "Active", options=YES_NO_OPTIONS),),
    ),
    "offer-links": TableConfig(
        entity="offer-links",
        search_fields=("title", "url"),
        default_sort="title",
        default_order="asc",
        filters=(FilterOption("is_active", "Active", options=YES_NO_OPTIONS),),
    ),
    "members": TableConfig(
        entity="members",
        search_fields=("email", "full_name"),
        default_sort="email",
        default_order="asc",
        filters=(
            FilterOption("role", "Role", options=(("admin", "Admin"), ("member", "Member"))),
            FilterOption("is_active", "Active", options=YES_NO_OPTIONS),
        ),
    ),
}
