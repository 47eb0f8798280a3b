"""Offer pricing: subtotal -> discount -> tax -> grand total.

Every place that stores or shows an offer total (offer writes, the dashboard
detail view, the public offer page, the quote preview) goes through
:func:`compute_offer_totals`, so there is exactly one rounding policy:
intermediate amounts stay exact ``Decimal`` values, and only the grand total
is rounded half-up to a whole currency unit and clamped at zero.

Rule: No SQLAlchemy / no FastAPI here. Pure functions over plain values.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from bizops.domain.catalog import CUSTOM_DEVELOPMENT

DISCOUNT_GLOBAL = "global"
DISCOUNT_PER_LINE = "per_line"
DISCOUNT_MODES = (DISCOUNT_GLOBAL, DISCOUNT_PER_LINE)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
_WHOLE_UNIT = Decimal("1")


@dataclass(frozen=True)
class PricedLine:
    """A line with its effective unit price and quantity already resolved."""

    price: Decimal
    quantity: int
    discount_percentage: Decimal = _ZERO
    service_id: Optional[str] = None
    title: Optional[str] = None
    is_custom: bool = False

    @property
    def gross(self) -> Decimal:
        return self.price * self.quantity

    def total(self, discount_mode: str) -> Decimal:
        if discount_mode == DISCOUNT_PER_LINE:
            return self.gross * (1 - self.discount_percentage / _HUNDRED)
        return self.gross


@dataclass(frozen=True)
class OfferTotals:
    discount_type: str
    subtotal: Decimal
    discount_amount: Decimal
    discounted_total: Decimal
    tax_amount: Decimal
    grand_total: Decimal
    lines: tuple[PricedLine, ...] = ()

    def line_totals(self) -> list[dict[str, Any]]:
        return [
            {
                "service_id": line.service_id,
                "title": line.title,
                "is_custom": line.is_custom,
                "quantity": line.quantity,
                "price": line.price,
                "discount_percentage": line.discount_percentage,
                "line_total": line.total(self.discount_type),
            }
            for line in self.lines
        ]

    def as_dict(self) -> dict[str, Any]:
        return {
            "discount_type": self.discount_type,
            "subtotal": self.subtotal,
            "discount_amount": self.discount_amount,
            "discounted_total": self.discounted_total,
            "tax_amount": self.tax_amount,
            "grand_total": self.grand_total,
        }


def to_decimal(value: Any) -> Decimal:
    """None counts as zero; floats go through str() to avoid binary noise."""
    if value is None or value == "":
        return _ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Not a number: {value!r}") from exc


def _percentage(value: Any, name: str) -> Decimal:
    pct = to_decimal(value)
    if pct < 0 or pct > _HUNDRED:
        raise ValueError(f"{name} must be between 0 and 100")
    return pct


def round_currency(amount: Decimal) -> Decimal:
    """Half-up to a whole currency unit, never negative."""
    return max(_ZERO, amount.quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP))


def compute_offer_totals(
    lines: Iterable[PricedLine],
    global_discount_percentage: Any = 0,
    tax_percentage: Any = 0,
    discount_mode: Optional[str] = DISCOUNT_GLOBAL,
) -> OfferTotals:
    """Price an offer.

    ``global`` mode applies ``global_discount_percentage`` to the subtotal and
    ignores per-line discounts; ``per_line`` mode discounts each line by its
    own percentage and ignores the global one. Tax is applied to the
    discounted total when its percentage is positive.
    """
    mode = discount_mode or DISCOUNT_GLOBAL
    if mode not in DISCOUNT_MODES:
        raise ValueError(f"Unknown discount mode: {mode}")
    global_pct = _percentage(global_discount_percentage, "global_discount_percentage")
    tax_pct = _percentage(tax_percentage, "tax_percentage")

    priced = tuple(lines)
    for line in priced:
        _percentage(line.discount_percentage, "discount_percentage")
        if line.quantity < 0 or line.price < 0:
            raise ValueError("Line price and quantity must not be negative")

    subtotal = sum((line.gross for line in priced), _ZERO)
    if mode == DISCOUNT_PER_LINE:
        discounted = sum((line.total(mode) for line in priced), _ZERO)
    else:
        discounted = subtotal * (1 - global_pct / _HUNDRED)

    tax_amount = discounted * tax_pct / _HUNDRED if tax_pct > 0 else _ZERO

    return OfferTotals(
        discount_type=mode,
        subtotal=subtotal,
        discount_amount=subtotal - discounted,
        discounted_total=discounted,
        tax_amount=tax_amount,
        grand_total=round_currency(discounted + tax_amount),
        lines=priced,
    )


def resolve_line_pricing(
    line: Any,
    service: Any = None,
    custom_development_default: Decimal = Decimal("10000"),
) -> PricedLine:
    """Turn a submitted line (and its catalog service, if any) into a PricedLine.

    - custom lines keep their own price and quantity;
    - "Custom Development"/"Custom License" catalog lines are priced per line,
      falling back to ``custom_development_default`` or the catalog price;
    - other catalog lines use the submitted price when given, else the
      catalog price;
    - catalog services that do not allow multiples always count once.
    """
    discount = to_decimal(getattr(line, "discount_percentage", None))
    quantity = int(getattr(line, "quantity", None) or 1)
    submitted_price = getattr(line, "price", None)

    if getattr(line, "is_custom", False):
        return PricedLine(
            price=to_decimal(submitted_price),
            quantity=quantity,
            discount_percentage=discount,
            service_id=getattr(line, "service_id", None),
            title=getattr(line, "custom_title", None),
            is_custom=True,
        )

    if service is None:
        raise ValueError("Catalog lines need their service to be priced")

    if submitted_price is not None:
        price = to_decimal(submitted_price)
    elif service.name == CUSTOM_DEVELOPMENT:
        price = to_decimal(custom_development_default)
    else:
        price = to_decimal(service.price)

    if not service.allow_multiple:
        quantity = 1

    return PricedLine(
        price=price,
        quantity=quantity,
        discount_percentage=discount,
        service_id=service.id,
        title=service.name,
        is_custom=False,
    )
