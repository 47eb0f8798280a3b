from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from bizops.services.table import (
    TABLE_CONFIGS,
    FilterOperator,
    FilterSpec,
    TableConfig,
    apply_filters,
    matches,
    parse_filter_param,
    query_table,
    search_records,
    sort_records,
)

RECORDS = [
    {"id": "1", "name": "Acme", "country": "DE", "employees": 120, "is_agency": False, "founded": date(2001, 5, 1)},
    {"id": "2", "name": "Globex", "country": "US", "employees": 40, "is_agency": True, "founded": None},
    {"id": "3", "name": "acme labs", "country": None, "employees": None, "is_agency": False, "founded": date(1999, 1, 1)},
    {"id": "4", "name": "Initech", "country": "DE", "employees": 9, "is_agency": True, "founded": date(2010, 2, 2)},
]

CONFIG = TableConfig(entity="orgs", search_fields=("name", "country"), default_sort="name", default_order="asc")


def ids(records):
    return [r["id"] for r in records]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def test_parse_full_filter():
    spec = parse_filter_param("status:equals:draft")
    assert spec == FilterSpec(key="status", value="draft", operator=FilterOperator.EQUALS)


def test_parse_bare_key_value_means_equals():
    spec = parse_filter_param("country:DE")
    assert spec.operator is FilterOperator.EQUALS
    assert spec.value == "DE"


def test_parse_list_operators_split_on_commas():
    spec = parse_filter_param("group_type:in:Base, License,")
    assert spec.value == ["Base", "License"]


def test_parse_value_may_contain_colons():
    spec = parse_filter_param("url:starts_with:https://example")
    assert spec.value == "https://example"


def test_parse_null_value():
    assert parse_filter_param("country:equals:null").value is None


@pytest.mark.parametrize("raw", ["nocolon", ":equals:x", "name:between:1"])
def test_parse_rejects_bad_filters(raw):
    with pytest.raises(ValueError):
        parse_filter_param(raw)


# ---------------------------------------------------------------------------
# Search / filter / sort
# ---------------------------------------------------------------------------

def test_search_is_case_insensitive_and_ors_fields():
    assert ids(search_records(RECORDS, "ACME", ("name",))) == ["1", "3"]
    assert ids(search_records(RECORDS, "us", ("name", "country"))) == ["2"]


def test_empty_search_keeps_everything():
    assert ids(search_records(RECORDS, "  ", ("name",))) == ["1", "2", "3", "4"]


def test_search_never_matches_missing_values():
    assert search_records([{"id": "x", "name": None}], "none", ("name",)) == []


def test_equals_is_case_insensitive_text():
    assert ids(apply_filters(RECORDS, [FilterSpec("name", "ACME")])) == ["1"]


def test_equals_compares_numbers_numerically():
    assert ids(apply_filters(RECORDS, [FilterSpec("employees", "40.0")])) == ["2"]


def test_equals_keeps_text_columns_as_text():
    rows = [{"id": "a", "postcode": "01234"}, {"id": "b", "postcode": "1e3"}]
    assert apply_filters(rows, [FilterSpec("postcode", "1234")]) == []
    assert apply_filters(rows, [FilterSpec("postcode", "1000")]) == []
    assert ids(apply_filters(rows, [FilterSpec("postcode", "01234")])) == ["a"]


def test_equals_on_booleans():
    assert ids(apply_filters(RECORDS, [FilterSpec("is_agency", "true")])) == ["2", "4"]


def test_missing_value_only_matches_equals_null():
    assert ids(apply_filters(RECORDS, [FilterSpec("country", None)])) == ["3"]
    assert not matches(None, FilterSpec("country", "DE", FilterOperator.NOT_IN))


def test_text_operators():
    assert ids(apply_filters(RECORDS, [FilterSpec("name", "CME", FilterOperator.CONTAINS)])) == ["1", "3"]
    assert ids(apply_filters(RECORDS, [FilterSpec("name", "ini", FilterOperator.STARTS_WITH)])) == ["4"]
    assert ids(apply_filters(RECORDS, [FilterSpec("name", "LABS", FilterOperator.ENDS_WITH)])) == ["3"]


def test_comparison_operators_are_numeric():
    assert ids(apply_filters(RECORDS, [FilterSpec("employees", "40", FilterOperator.GREATER_THAN)])) == ["1"]
    assert ids(apply_filters(RECORDS, [FilterSpec("employees", "40", FilterOperator.LESS_THAN)])) == ["4"]
    assert apply_filters(RECORDS, [FilterSpec("name", "a", FilterOperator.GREATER_THAN)]) == []


def test_in_and_not_in():
    assert ids(apply_filters(RECORDS, [FilterSpec("country", ["DE"], FilterOperator.IN)])) == ["1", "4"]
    assert ids(apply_filters(RECORDS, [FilterSpec("country", ["DE"], FilterOperator.NOT_IN)])) == ["2"]


def test_filters_combine_with_and():
    specs = [FilterSpec("country", "DE"), FilterSpec("is_agency", "false")]
    assert ids(apply_filters(RECORDS, specs)) == ["1"]


def test_sort_text_case_insensitive_with_nulls_last():
    assert ids(sort_records(RECORDS, "name")) == ["1", "3", "2", "4"]
    assert ids(sort_records(RECORDS, "employees", "desc")) == ["1", "2", "4", "3"]
    assert ids(sort_records(RECORDS, "employees", "asc")) == ["4", "2", "1", "3"]


def test_sort_dates_and_mixed_timezones():
    assert ids(sort_records(RECORDS, "founded")) == ["3", "1", "4", "2"]
    rows = [
        {"id": "a", "at": datetime(2024, 1, 2, tzinfo=timezone.utc)},
        {"id": "b", "at": datetime(2024, 1, 1)},
    ]
    assert ids(sort_records(rows, "at")) == ["b", "a"]


def test_sort_is_stable():
    rows = [{"id": str(i), "group": "x"} for i in range(5)]
    assert ids(sort_records(rows, "group", "desc")) == ["0", "1", "2", "3", "4"]


def test_sort_decimals():
    rows = [{"id": "a", "price": Decimal("10.5")}, {"id": "b", "price": Decimal("9")}]
    assert ids(sort_records(rows, "price")) == ["b", "a"]


def test_query_table_runs_search_filter_sort():
    rows = query_table(
        RECORDS,
        CONFIG,
        query="e",
        filters=[FilterSpec("country", "DE")],
        sort="employees",
        order="asc",
    )
    assert ids(rows) == ["4", "1"]


def test_query_table_uses_default_sort():
    assert ids(query_table(RECORDS, CONFIG)) == ["1", "3", "2", "4"]


def test_every_list_has_a_table_config():
    for entity in (
        "organizations", "contacts", "projects", "services", "offers",
        "corporate-entities", "payment-terms", "delivery-conditions", "offer-links", "members",
    ):
        assert TABLE_CONFIGS[entity].search_fields


# ---------------------------------------------------------------------------
# Properties over sampled inputs
# ---------------------------------------------------------------------------

SAMPLE_FILTERS = [
    [FilterSpec("country", "DE")],
    [FilterSpec("name", "acme", FilterOperator.CONTAINS)],
    [FilterSpec("employees", "10", FilterOperator.GREATER_THAN)],
    [FilterSpec("country", ["DE", "US"], FilterOperator.NOT_IN)],
    [FilterSpec("is_agency", "true"), FilterSpec("country", "DE")],
    [FilterSpec("country", None)],
]


@pytest.mark.parametrize("filters", SAMPLE_FILTERS)
def test_filter_result_is_a_subset_of_the_input(filters):
    result = apply_filters(RECORDS, filters)
    assert all(row in RECORDS for row in result)
    assert len(result) <= len(RECORDS)


@pytest.mark.parametrize("filters", SAMPLE_FILTERS)
def test_filters_are_idempotent(filters):
    once = apply_filters(RECORDS, filters)
    assert apply_filters(once, filters) == once


@pytest.mark.parametrize("key", ["name", "country", "employees", "is_agency", "founded"])
@pytest.mark.parametrize("order", ["asc", "desc"])
def test_sort_is_idempotent(key, order):
    once = sort_records(RECORDS, key, order)
    assert sort_records(once, key, order) == once
    assert sorted(ids(once)) == ["1", "2", "3", "4"]


@pytest.mark.parametrize("query", ["a", "ac", "acm", "acme", "acme l", "e", "de", "zzz"])
def test_longer_query_never_matches_more(query):
    fields = ("name", "country")
    shorter = search_records(RECORDS, query, fields)
    longer = search_records(RECORDS, query + "x", fields)
    assert len(longer) <= len(shorter)
    assert all(row in shorter for row in longer)
