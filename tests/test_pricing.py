from decimal import Decimal
from types import SimpleNamespace

import pytest

from bizops.services.pricing import (
    DISCOUNT_GLOBAL,
    DISCOUNT_PER_LINE,
    PricedLine,
    compute_offer_totals,
    resolve_line_pricing,
    round_currency,
)


def line(price, quantity=1, discount="0"):
    return PricedLine(price=Decimal(str(price)), quantity=quantity, discount_percentage=Decimal(discount))


def test_global_discount_then_tax():
    totals = compute_offer_totals([line(1000, 2), line(500)], global_discount_percentage=10, tax_percentage=20)

    assert totals.subtotal == Decimal("2500")
    assert totals.discounted_total == Decimal("2250")
    assert totals.discount_amount == Decimal("250")
    assert totals.tax_amount == Decimal("450")
    assert totals.grand_total == Decimal("2700")


def test_global_mode_ignores_line_discounts():
    totals = compute_offer_totals([line(1000, discount="50")], global_discount_percentage=0)
    assert totals.grand_total == Decimal("1000")


def test_per_line_mode_ignores_global_discount():
    totals = compute_offer_totals(
        [line(1000, discount="10"), line(200, 2)],
        global_discount_percentage=50,
        discount_mode=DISCOUNT_PER_LINE,
    )
    assert totals.subtotal == Decimal("1400")
    assert totals.discounted_total == Decimal("1300")
    assert totals.grand_total == Decimal("1300")


def test_only_the_grand_total_is_rounded():
    # Rounding each line first would give 0 + 0
    totals = compute_offer_totals([line("0.4"), line("0.4")])
    assert totals.subtotal == Decimal("0.8")
    assert totals.grand_total == Decimal("1")


@pytest.mark.parametrize(
    "amount, expected",
    [("2.5", "3"), ("2.49", "2"), ("0.5", "1"), ("-3", "0"), ("1999.999", "2000")],
)
def test_round_currency_half_up_and_clamped(amount, expected):
    assert round_currency(Decimal(amount)) == Decimal(expected)


def test_grand_total_is_whole_and_never_negative():
    samples = [
        ([line("333.33", 3)], 15, "7.7"),
        ([line("0.01")], 100, "0"),
        ([line("99.99", 7, "12.5"), line("10.05")], 0, "19"),
    ]
    for lines, global_pct, tax in samples:
        for mode in (DISCOUNT_GLOBAL, DISCOUNT_PER_LINE):
            totals = compute_offer_totals(lines, global_pct, tax, mode)
            assert totals.grand_total >= 0
            assert totals.grand_total == totals.grand_total.to_integral_value()


def test_full_discount_gives_zero():
    totals = compute_offer_totals([line(1234)], global_discount_percentage=100, tax_percentage=19)
    assert totals.grand_total == Decimal("0")
    assert totals.tax_amount == Decimal("0")


def test_empty_offer_totals_zero():
    totals = compute_offer_totals([])
    assert totals.subtotal == Decimal("0")
    assert totals.grand_total == Decimal("0")


def test_missing_mode_means_global():
    totals = compute_offer_totals([line(100, discount="50")], 10, None, None)
    assert totals.discount_type == DISCOUNT_GLOBAL
    assert totals.grand_total == Decimal("90")


def test_invalid_inputs_raise():
    with pytest.raises(ValueError):
        compute_offer_totals([line(100)], discount_mode="bulk")
    with pytest.raises(ValueError):
        compute_offer_totals([line(100)], global_discount_percentage=101)
    with pytest.raises(ValueError):
        compute_offer_totals([line(100, discount="-1")], discount_mode=DISCOUNT_PER_LINE)


def test_line_totals_follow_mode():
    totals = compute_offer_totals([line(100, 2, "25")], discount_mode=DISCOUNT_PER_LINE)
    (row,) = totals.line_totals()
    assert row["line_total"] == Decimal("150")


# ---------------------------------------------------------------------------
# Line resolution
# ---------------------------------------------------------------------------

def catalog(name="Workshop", price="800", allow_multiple=True):
    return SimpleNamespace(id="svc-1", name=name, price=Decimal(price), allow_multiple=allow_multiple)


def submitted(**kwargs):
    values = {
        "service_id": "svc-1",
        "quantity": 1,
        "price": None,
        "discount_percentage": Decimal("0"),
        "is_custom": False,
        "custom_title": None,
    }
    values.update(kwargs)
    return SimpleNamespace(**values)


def test_catalog_price_used_when_no_price_submitted():
    priced = resolve_line_pricing(submitted(quantity=3), catalog())
    assert priced.price == Decimal("800")
    assert priced.quantity == 3
    assert priced.title == "Workshop"
    assert priced.is_custom is False


def test_submitted_price_overrides_catalog():
    priced = resolve_line_pricing(submitted(price=Decimal("650")), catalog())
    assert priced.price == Decimal("650")


def test_custom_development_defaults_to_configured_price():
    priced = resolve_line_pricing(submitted(), catalog(name="Custom Development", price="0"), Decimal("12000"))
    assert priced.price == Decimal("12000")


def test_single_selection_services_count_once():
    priced = resolve_line_pricing(submitted(quantity=5), catalog(allow_multiple=False))
    assert priced.quantity == 1


def test_custom_lines_keep_their_own_price():
    priced = resolve_line_pricing(
        submitted(service_id=None, is_custom=True, custom_title="Extra support", price=Decimal("99"), quantity=2)
    )
    assert priced.is_custom is True
    assert priced.title == "Extra support"
    assert priced.price * priced.quantity == Decimal("198")


def test_catalog_line_without_service_is_rejected():
    with pytest.raises(ValueError):
        resolve_line_pricing(submitted(), None)


# ---------------------------------------------------------------------------
# Properties over sampled inputs
# ---------------------------------------------------------------------------

SAMPLE_LINES = [
    [line(1000)],
    [line(1000, 2), line(500), line(250, 3)],
    [line("99.6"), line("0.4", 5)],
    [line(1, 7), line(3333, 3, discount="15")],
    [],
]
PERCENTAGES = [0, "0.5", 5, 10, "19.5", 33, 50, 99, 100]


@pytest.mark.parametrize("lines", SAMPLE_LINES)
@pytest.mark.parametrize("mode", [DISCOUNT_GLOBAL, DISCOUNT_PER_LINE])
def test_total_never_decreases_with_tax(lines, mode):
    totals = [
        compute_offer_totals(lines, 10, tax, mode).grand_total
        for tax in PERCENTAGES
    ]
    assert totals == sorted(totals)


@pytest.mark.parametrize("lines", SAMPLE_LINES)
@pytest.mark.parametrize("tax", [0, 19])
def test_total_never_increases_with_global_discount(lines, tax):
    totals = [
        compute_offer_totals(lines, discount, tax, DISCOUNT_GLOBAL).grand_total
        for discount in PERCENTAGES
    ]
    assert totals == sorted(totals, reverse=True)


@pytest.mark.parametrize(
    "prices",
    [[1000], [1, 2, 3], [250, 250, 999], [12345, 1, 0], [7] * 10],
)
def test_total_equals_subtotal_without_discount_or_tax(prices):
    lines = [line(price, quantity) for quantity, price in enumerate(prices, start=1)]
    totals = compute_offer_totals(lines, 0, 0, DISCOUNT_GLOBAL)
    assert totals.grand_total == totals.subtotal == sum(p * q for q, p in enumerate(prices, start=1))
