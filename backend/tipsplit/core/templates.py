"""
Template rendering utilities
"""
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Union

from fastapi import Request
from fastapi.templating import Jinja2Templates

from tipsplit.core.config import get_settings

# Get templates directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
TEMPLATES_DIR = BASE_DIR / "frontend" / "templates"

# Create FastAPI templates instance
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def format_money(value: Union[Decimal, float, int, None]) -> str:
    """Render an amount as '<currency> 1,234.56'"""
    amount = Decimal("0") if value is None else Decimal(str(value))
    return f"{get_settings().currency_code} {amount:,.2f}"


def format_percent(value: Union[Decimal, float, int, None]) -> str:
    amount = Decimal("0") if value is None else Decimal(str(value))
    return f"{amount:.2f}%"


templates.env.filters["money"] = format_money
templates.env.filters["percent"] = format_percent


def flash(request: Request, message: str, kind: str = "notice") -> None:
    """Store a one-shot message shown on the next rendered page"""
    request.session["flash"] = {"message": message, "kind": kind}


def pop_flash(request: Request) -> Optional[Dict[str, str]]:
    return request.session.pop("flash", None)


def render_template(
    request: Request,
    template_name: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200
):
    """Render template with context, pending flash message and app name"""
    settings = get_settings()
    full_context = {
        "app_name": settings.app_name,
        "flash": pop_flash(request),
        **(context or {}),
    }
    return templates.TemplateResponse(
        request,
        template_name,
        full_context,
        status_code=status_code
    )
