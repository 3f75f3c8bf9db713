"""Type definitions for the calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

Numeric = Union[Decimal, int, float, str]


def to_decimal(value: Numeric) -> Decimal:
    """Coerce a numeric input to Decimal.

    Floats go through their shortest repr so 0.1 becomes Decimal("0.1")
    rather than the binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a money amount")
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


@dataclass(frozen=True)
class LineItem:
    """An ad-hoc earning or deduction: free-text label plus amount.

    The amount accepts any Numeric and is stored as Decimal.
    """

    type: str
    amount: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "amount": self.amount}


# Earnings and deductions share one shape; the aliases keep signatures readable.
Earning = LineItem
Deduction = LineItem


@dataclass(frozen=True)
class PayTotals:
    """The three computed totals of a payslip."""

    gross_pay: Decimal
    total_deductions: Decimal
    net_pay: Decimal

    @property
    def is_negative_net(self) -> bool:
        """Deductions exceed gross; callers may flag this as an anomaly."""
        return self.net_pay < 0
