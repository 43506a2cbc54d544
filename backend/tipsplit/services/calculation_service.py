"""
Calculation store: validated creation, sorted listing and aggregate statistics
"""
from dataclasses import dataclass, fields
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Union

from sqlalchemy import func
from sqlalchemy.orm import Session

from tipsplit.core.logging_config import LoggingConfig
from tipsplit.core.metrics import (calculation_validation_failures_total,
                                   calculations_created_total)
from tipsplit.models.calculation import Calculation
from tipsplit.services.calculator import round1, round2, to_decimal

logger = LoggingConfig.get_logger(__name__)

# Largest value a Numeric(10, 2) column holds
MAX_AMOUNT = Decimal("99999999.99")

FIELD_LABELS = {
    "bill_amount": "Bill amount",
    "tip_percentage": "Tip percentage",
    "tip_amount": "Tip amount",
    "total_amount": "Total amount",
    "people_count": "People count",
    "per_person_amount": "Per person amount",
}

BLANK = "can't be blank"
NOT_A_NUMBER = "is not a number"
NOT_AN_INTEGER = "must be an integer"


class SortKey(str, Enum):
    """Columns the history listing can be ordered by"""
    DATE = "date"
    BILL_AMOUNT = "bill_amount"
    TIP_PERCENTAGE = "tip_percentage"

    @classmethod
    def parse(cls, value: Union["SortKey", str, None]) -> "SortKey":
        """Return the matching key, falling back to DATE for anything unrecognized"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.DATE


class SortDirection(str, Enum):
    """Listing order"""
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Union["SortDirection", str, None]) -> "SortDirection":
        """Return the matching direction, falling back to DESC"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.DESC

    @property
    def label(self) -> str:
        return "Ascending" if self is SortDirection.ASC else "Descending"


_SORT_COLUMNS = {
    SortKey.DATE: Calculation.created_at,
    SortKey.BILL_AMOUNT: Calculation.bill_amount,
    SortKey.TIP_PERCENTAGE: Calculation.tip_percentage,
}


@dataclass
class CalculationCandidate:
    """Unsaved calculation; any field may still be missing"""
    bill_amount: Optional[Decimal] = None
    tip_percentage: Optional[Decimal] = None
    people_count: Optional[Decimal] = None
    tip_amount: Optional[Decimal] = None
    total_amount: Optional[Decimal] = None
    per_person_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class CalculationStatistics:
    """Aggregates over every stored calculation"""
    total_calculations: int
    average_tip_percentage: Decimal
    average_bill_amount: Decimal
    total_tips_collected: Decimal
    average_party_size: Decimal

    @classmethod
    def empty(cls) -> "CalculationStatistics":
        zero = Decimal("0")
        return cls(
            total_calculations=0,
            average_tip_percentage=zero,
            average_bill_amount=zero,
            total_tips_collected=zero,
            average_party_size=zero,
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "total_calculations": self.total_calculations,
            "average_tip_percentage": float(self.average_tip_percentage),
            "average_bill_amount": float(self.average_bill_amount),
            "total_tips_collected": float(self.total_tips_collected),
            "average_party_size": float(self.average_party_size),
        }


class CalculationValidationError(ValueError):
    """Raised when a candidate fails validation; nothing was written"""

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        super().__init__("; ".join(self.full_messages))

    @property
    def full_messages(self) -> List[str]:
        return full_messages(self.errors)


def full_messages(errors: Dict[str, List[str]]) -> List[str]:
    """Turn field errors into sentences such as 'Bill amount must be greater than 0'"""
    return [
        f"{FIELD_LABELS.get(field, field)} {message}"
        for field, messages in errors.items()
        for message in messages
    ]


def _check_amount(errors, field, value, allow_zero=False, maximum=MAX_AMOUNT):
    if value is None:
        errors.setdefault(field, []).append(BLANK)
        return
    if allow_zero and value < 0:
        errors.setdefault(field, []).append("must be greater than or equal to 0")
    elif not allow_zero and value <= 0:
        errors.setdefault(field, []).append("must be greater than 0")
    elif value > maximum:
        errors.setdefault(field, []).append(f"must be less than or equal to {maximum}")


def validate_candidate(candidate: CalculationCandidate) -> Dict[str, List[str]]:
    """Check presence, sign, range and integrality of every numeric field.

    Returns:
        Mapping of field name to error messages; empty when the candidate is valid
    """
    errors: Dict[str, List[str]] = {}

    _check_amount(errors, "bill_amount", candidate.bill_amount)
    _check_amount(errors, "tip_percentage", candidate.tip_percentage,
                  allow_zero=True, maximum=Decimal("100"))
    _check_amount(errors, "tip_amount", candidate.tip_amount, allow_zero=True)
    _check_amount(errors, "total_amount", candidate.total_amount)

    people = candidate.people_count
    if people is None:
        errors.setdefault("people_count", []).append(BLANK)
    elif to_decimal(people) != to_decimal(people).to_integral_value():
        errors.setdefault("people_count", []).append(NOT_AN_INTEGER)
    elif people <= 0:
        errors.setdefault("people_count", []).append("must be greater than 0")

    _check_amount(errors, "per_person_amount", candidate.per_person_amount)

    return errors


def record_rejection(errors: Dict[str, List[str]]) -> None:
    """Count and log a rejected submission"""
    for name in errors:
        calculation_validation_failures_total.labels(field=name).inc()
    logger.warning(
        "Rejected calculation",
        extra={"invalid_fields": sorted(errors)}
    )


class CalculationService:
    """Persistence and queries for calculation records"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, candidate: CalculationCandidate) -> Calculation:
        """
        Validate and store a new calculation

        Args:
            candidate: Inputs plus derived amounts

        Returns:
            The stored Calculation

        Raises:
            CalculationValidationError: If any field is missing or out of range
        """
        errors = validate_candidate(candidate)
        if errors:
            record_rejection(errors)
            raise CalculationValidationError(errors)

        values = {f.name: getattr(candidate, f.name) for f in fields(candidate)}
        values["people_count"] = int(values["people_count"])
        calculation = Calculation(**values)

        self.db.add(calculation)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(calculation)

        calculations_created_total.inc()
        logger.info(
            f"Stored calculation {calculation.id}",
            extra={"calculation_id": calculation.id, "people_count": calculation.people_count}
        )
        return calculation

    def get(self, calculation_id: int) -> Optional[Calculation]:
        return self.db.query(Calculation).filter(Calculation.id == calculation_id).first()

    def list(
        self,
        sort_key: Union[SortKey, str, None] = SortKey.DATE,
        direction: Union[SortDirection, str, None] = SortDirection.DESC,
        offset: int = 0,
        limit: Optional[int] = None
    ) -> List[Calculation]:
        """
        List calculations in the requested order

        Rows that tie on the sort column are ordered by id in the same
        direction, so the result is deterministic.

        Args:
            sort_key: date, bill_amount or tip_percentage (anything else means date)
            direction: asc or desc (anything else means desc)
            offset: Number of rows to skip
            limit: Maximum number of rows, or None for all

        Returns:
            List of Calculation rows
        """
        sort_key = SortKey.parse(sort_key)
        direction = SortDirection.parse(direction)
        column = _SORT_COLUMNS[sort_key]

        if direction is SortDirection.ASC:
            ordering = [column.asc(), Calculation.id.asc()]
        else:
            ordering = [column.desc(), Calculation.id.desc()]

        query = self.db.query(Calculation).order_by(*ordering).offset(max(offset, 0))
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count(self) -> int:
        return self.db.query(func.count(Calculation.id)).scalar() or 0

    def aggregate(self) -> CalculationStatistics:
        """
        Compute dashboard statistics over all calculations

        Averages are exact sums divided by the row count, rounded half-up
        (2 places, party size 1 place). An empty table gives zeros.
        """
        row = self.db.query(
            func.count(Calculation.id),
            func.sum(Calculation.tip_percentage),
            func.sum(Calculation.bill_amount),
            func.sum(Calculation.tip_amount),
            func.sum(Calculation.people_count),
        ).one()

        total, tip_pct_sum, bill_sum, tips_sum, people_sum = row
        if not total:
            return CalculationStatistics.empty()

        count = Decimal(total)
        return CalculationStatistics(
            total_calculations=total,
            average_tip_percentage=round2(to_decimal(tip_pct_sum) / count),
            average_bill_amount=round2(to_decimal(bill_sum) / count),
            total_tips_collected=round2(to_decimal(tips_sum)),
            average_party_size=round1(to_decimal(people_sum) / count),
        )

    def clear(self) -> int:
        """Delete every calculation (administrative maintenance only)

        Returns:
            Number of rows removed
        """
        deleted = self.db.query(Calculation).delete(synchronize_session=False)
        self.db.commit()
        logger.info(f"Cleared {deleted} calculations", extra={"deleted": deleted})
        return deleted
