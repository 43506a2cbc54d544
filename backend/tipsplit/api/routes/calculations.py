"""
Public calculator pages and the create endpoint
"""
import json
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, JSONResponse
from sqlalchemy.orm import Session

from tipsplit.core.database import get_db
from tipsplit.core.logging_config import LoggingConfig
from tipsplit.core.templates import render_template
from tipsplit.services.calculation_service import CalculationService
from tipsplit.services.submission_service import (INPUT_FIELDS,
                                                  submit_calculation)

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(tags=["calculations"])

TIP_PRESETS = (5, 10, 15, 25, 50)
DEFAULT_VALUES = {"bill_amount": "", "tip_percentage": "15", "people_count": "1"}


def _wants_json(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    content_type = request.headers.get("content-type", "")
    return "application/json" in accept or content_type.startswith("application/json")


async def _read_submission(request: Request) -> Dict[str, Any]:
    """Read the three inputs from a JSON or form body"""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except json.JSONDecodeError:
            logger.warning("Malformed JSON body on calculation submit")
            return {}
        if not isinstance(payload, dict):
            return {}
        # Accept both {"bill_amount": ...} and {"calculation": {"bill_amount": ...}}
        if isinstance(payload.get("calculation"), dict):
            payload = payload["calculation"]
        return {name: payload.get(name) for name in INPUT_FIELDS}

    form = await request.form()
    return {name: form.get(name) for name in INPUT_FIELDS}


def _form_context(values: Dict[str, str], errors: Dict[str, Any] = None, messages=None) -> Dict[str, Any]:
    return {
        "values": values,
        "errors": errors or {},
        "error_messages": messages or [],
        "tip_presets": TIP_PRESETS,
    }


@router.get("/", response_class=HTMLResponse)
@router.get("/calculations/new", response_class=HTMLResponse)
async def new_calculation(request: Request):
    """Calculator form"""
    return render_template(request, "calculations/new.html", _form_context(dict(DEFAULT_VALUES)))


@router.post("/calculations")
async def create_calculation(request: Request, db: Session = Depends(get_db)):
    """Compute and store a calculation; responds with HTML or JSON depending on the request"""
    raw = await _read_submission(request)
    result = submit_calculation(db, raw)
    wants_json = _wants_json(request)

    if result.ok:
        if wants_json:
            return JSONResponse(result.record.to_dict(), status_code=status.HTTP_201_CREATED)
        return render_template(request, "calculations/result.html", {"calculation": result.record})

    if wants_json:
        return JSONResponse(
            {"errors": result.full_messages},
            status_code=422
        )
    return render_template(
        request,
        "calculations/new.html",
        _form_context(result.values, result.errors, result.full_messages),
        status_code=422
    )


@router.get("/api/calculations/{calculation_id}")
async def get_calculation(calculation_id: int, db: Session = Depends(get_db)):
    """Structured read of one stored calculation"""
    calculation = CalculationService(db).get(calculation_id)
    if calculation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Calculation {calculation_id} not found"
        )
    return calculation.to_dict()
