"""
Bill totals calculator.

Pure arithmetic over line items and a discount specification:

    subtotal                = sum(quantity * rate)
    discount                = subtotal * pct / 100   (percentage)
                            = value                  (amount)
    subtotal_after_discount = subtotal - discount    (not clamped at zero)
    vat                     = subtotal_after_discount * 13%
    total                   = subtotal_after_discount + vat

Everything is Decimal and nothing is rounded here; rounding to paisa
happens only when a value is displayed (see format_money).
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Iterable, Literal

VAT_RATE = Decimal("0.13")

DISCOUNT_LABEL = "Discount"

DiscountKind = Literal["percentage", "amount"]


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() keeps 0.1 as 0.1 instead of its binary expansion
        return Decimal(str(value))
    return Decimal(value)


def format_money(value: Any) -> str:
    return f"{to_decimal(value):,.2f}"


def _format_percentage(value: Decimal) -> str:
    # 10 -> "10", 12.50 -> "12.5"
    return format(value.normalize(), "f")


@dataclass(frozen=True)
class DiscountSpec:
    kind: DiscountKind
    value: Decimal

    def __post_init__(self):
        if self.kind not in ("percentage", "amount"):
            raise ValueError(f"Unknown discount kind: {self.kind!r}")
        object.__setattr__(self, "value", to_decimal(self.value))

    @classmethod
    def percentage(cls, value: Any) -> "DiscountSpec":
        return cls("percentage", to_decimal(value))

    @classmethod
    def amount(cls, value: Any) -> "DiscountSpec":
        return cls("amount", to_decimal(value))


@dataclass(frozen=True)
class BillTotals:
    subtotal: Decimal
    discount: Decimal
    subtotal_after_discount: Decimal
    vat: Decimal
    total: Decimal
    applied_discount_label: str


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name)


def compute_subtotal(items: Iterable[Any]) -> Decimal:
    subtotal = Decimal("0")
    for item in items:
        subtotal += to_decimal(_field(item, "quantity")) * to_decimal(_field(item, "rate"))
    return subtotal


def resolve_discount(subtotal: Decimal, spec: DiscountSpec) -> tuple[Decimal, str]:
    """
    Turn a discount spec into (absolute amount, label).
    The amount is what gets stored on the bill.
    """
    if spec.kind == "percentage":
        discount = subtotal * (spec.value / Decimal("100"))
        if spec.value == 0:
            return discount, DISCOUNT_LABEL
        return discount, f"{DISCOUNT_LABEL} ({_format_percentage(spec.value)}%)"

    return spec.value, DISCOUNT_LABEL


def compute_totals(items: Iterable[Any], discount: DiscountSpec) -> BillTotals:
    subtotal = compute_subtotal(items)
    discount_value, label = resolve_discount(subtotal, discount)

    subtotal_after_discount = subtotal - discount_value
    vat = subtotal_after_discount * VAT_RATE
    total = subtotal_after_discount + vat

    return BillTotals(
        subtotal=subtotal,
        discount=discount_value,
        subtotal_after_discount=subtotal_after_discount,
        vat=vat,
        total=total,
        applied_discount_label=label,
    )


def totals_for_stored_bill(bill: Any) -> BillTotals:
    """
    Totals for a persisted bill. Only the resolved discount amount is
    stored, so the original percentage label cannot be recovered.
    """
    return compute_totals(bill.items, DiscountSpec.amount(bill.discount))


def totals_for_saved_bill(bill: Any, entered: DiscountSpec) -> BillTotals:
    """
    Totals for a bill just written from `entered`: amounts come from the
    stored (rounded) discount, the label from how the discount was entered.
    """
    totals = totals_for_stored_bill(bill)
    _, label = resolve_discount(totals.subtotal, entered)
    return replace(totals, applied_discount_label=label)
