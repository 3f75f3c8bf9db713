"""Line item helpers: money coercion, cent rounding and summation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from payroll_admin.calculators.types import LineItem, Numeric, to_decimal

__all__ = ["LineItemBuilder", "Numeric", "to_decimal"]


class LineItemBuilder:
    """Builds and totals earning/deduction line items.

    Rounding:
    - Cents (2 decimals), half away from zero
    - Applied only where the calculation says so; sums stay exact
    """

    OUTPUT_PRECISION = Decimal("0.01")

    @staticmethod
    def round_to_cents(amount: Numeric) -> Decimal:
        """Round amount to 2 decimal places (cents).

        Non-finite values are returned unchanged.
        """
        value = to_decimal(amount)
        if not value.is_finite():
            return value
        with localcontext() as ctx:
            # quantize needs room for every integer digit plus the cents
            ctx.prec = max(ctx.prec, value.adjusted() + 3)
            return value.quantize(LineItemBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def create_line(label: str, amount: Numeric) -> LineItem:
        """Create a line item. Amounts are kept as given, sign included."""
        return LineItem(type=label, amount=to_decimal(amount))

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> LineItem:
        """Build a line item from its {"type", "amount"} form."""
        return LineItemBuilder.create_line(
            str(data.get("type", "")), data.get("amount", 0)
        )

    @staticmethod
    def from_dicts(items: Iterable[Mapping[str, Any]] | None) -> list[LineItem]:
        return [LineItemBuilder.from_dict(item) for item in items or []]

    @staticmethod
    def sum_amounts(lines: Iterable[LineItem]) -> Decimal:
        """Sum line amounts without rounding."""
        total = Decimal("0")
        for line in lines:
            total += line.amount
        return total

    @staticmethod
    def sum_by_type(lines: Iterable[LineItem]) -> dict[str, Decimal]:
        """Sum line amounts by label, in first-seen order."""
        totals: dict[str, Decimal] = {}
        for line in lines:
            totals[line.type] = totals.get(line.type, Decimal("0")) + line.amount
        return totals
