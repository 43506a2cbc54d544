"""
Tip and split arithmetic.

All amounts are ``Decimal`` and rounded half-up to cents, so that
33.33 at 18% gives a tip of 6.00 (5.9994 rounded) rather than a float
artefact.
"""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float, str, Decimal]

CENT = Decimal("0.01")
TENTH = Decimal("0.1")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without going through binary float digits"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    """Round half-up to 2 decimal places"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round1(value: Number) -> Decimal:
    """Round half-up to 1 decimal place"""
    return to_decimal(value).quantize(TENTH, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class SplitResult:
    """Derived amounts for one bill"""
    tip_amount: Decimal
    total_amount: Decimal
    per_person_amount: Decimal


def calculate_split(bill_amount: Number, tip_percentage: Number, people_count: int) -> SplitResult:
    """Compute tip, total and per-person share.

    Inputs are expected to be valid already (positive bill, tip in
    [0, 100], at least one person); no checks are made here.

    Args:
        bill_amount: Bill before tip
        tip_percentage: Tip as a percentage of the bill
        people_count: Number of people sharing the total

    Returns:
        SplitResult with every amount rounded to cents
    """
    bill = to_decimal(bill_amount)
    tip_amount = round2(bill * to_decimal(tip_percentage) / HUNDRED)
    total_amount = round2(bill + tip_amount)
    per_person_amount = round2(total_amount / Decimal(people_count))
    return SplitResult(
        tip_amount=tip_amount,
        total_amount=total_amount,
        per_person_amount=per_person_amount,
    )
