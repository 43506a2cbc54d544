"""
Public submission flow: raw form input -> computed, stored calculation
"""
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from tipsplit.models.calculation import Calculation
from tipsplit.services.calculation_service import (BLANK, MAX_AMOUNT,
                                                   NOT_A_NUMBER,
                                                   NOT_AN_INTEGER,
                                                   CalculationCandidate,
                                                   CalculationService,
                                                   CalculationValidationError,
                                                   full_messages,
                                                   record_rejection,
                                                   validate_candidate)
from tipsplit.services.calculator import calculate_split, round2

INPUT_FIELDS = ("bill_amount", "tip_percentage", "people_count")

# Same literal form as an integer column accepts: no decimal point, no exponent
_INTEGER_LITERAL = re.compile(r"[+-]?\d+")


@dataclass
class SubmissionResult:
    """Outcome of one submission; either record or errors is populated"""
    record: Optional[Calculation] = None
    errors: Dict[str, List[str]] = field(default_factory=dict)
    values: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.record is not None and not self.errors

    @property
    def full_messages(self) -> List[str]:
        return full_messages(self.errors)


def _parse_number(raw: Any) -> Tuple[Optional[Decimal], Optional[str]]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None, BLANK
    if isinstance(raw, bool):
        return None, NOT_A_NUMBER
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None, NOT_A_NUMBER
    if not value.is_finite():
        return None, NOT_A_NUMBER
    return value, None


def _to_cents(value: Optional[Decimal]) -> Optional[Decimal]:
    # Past the column range the value is only compared, never quantized
    if value is None or abs(value) > MAX_AMOUNT:
        return value
    return round2(value)


def parse_submission(raw: Mapping[str, Any]) -> Tuple[CalculationCandidate, Dict[str, List[str]]]:
    """
    Coerce the three raw inputs into a candidate

    Bill and tip percentage are rounded to cents, matching the stored
    column scale, so the arithmetic runs on the values that get saved.
    Values too large for the column are left as is for validation to
    reject. People count must be written as a plain integer ("2", not
    "2.0").

    Returns:
        (candidate, parse errors by field)
    """
    errors: Dict[str, List[str]] = {}
    parsed: Dict[str, Optional[Decimal]] = {}
    for name in INPUT_FIELDS:
        value, error = _parse_number(raw.get(name))
        if error:
            errors[name] = [error]
        parsed[name] = value

    people_raw = raw.get("people_count")
    if parsed["people_count"] is not None and not _INTEGER_LITERAL.fullmatch(str(people_raw).strip()):
        errors["people_count"] = [NOT_AN_INTEGER]
        parsed["people_count"] = None

    candidate = CalculationCandidate(
        bill_amount=_to_cents(parsed["bill_amount"]),
        tip_percentage=_to_cents(parsed["tip_percentage"]),
        people_count=parsed["people_count"],
    )
    return candidate, errors


def _display_values(raw: Mapping[str, Any]) -> Dict[str, str]:
    return {
        name: "" if raw.get(name) is None else str(raw.get(name)).strip()
        for name in INPUT_FIELDS
    }


def submit_calculation(db: Session, raw: Mapping[str, Any]) -> SubmissionResult:
    """
    Validate, compute and store a calculation from raw input

    Args:
        db: Database session
        raw: Mapping with bill_amount, tip_percentage and people_count

    Returns:
        SubmissionResult holding the stored record, or the field errors
        together with the submitted values for re-display
    """
    values = _display_values(raw)
    candidate, parse_errors = parse_submission(raw)

    errors = {
        name: parse_errors.get(name, messages)
        for name, messages in validate_candidate(candidate).items()
        if name in INPUT_FIELDS
    }
    if errors:
        record_rejection(errors)
        return SubmissionResult(errors=errors, values=values)

    split = calculate_split(candidate.bill_amount, candidate.tip_percentage, int(candidate.people_count))
    candidate.tip_amount = split.tip_amount
    candidate.total_amount = split.total_amount
    candidate.per_person_amount = split.per_person_amount

    try:
        record = CalculationService(db).create(candidate)
    except CalculationValidationError as e:
        return SubmissionResult(errors=e.errors, values=values)

    return SubmissionResult(record=record, values=values)
