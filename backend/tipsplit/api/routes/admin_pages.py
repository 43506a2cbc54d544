"""
Admin login/logout and dashboard pages
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from tipsplit.core.auth import get_admin_gate, require_admin
from tipsplit.core.database import get_db
from tipsplit.core.templates import flash, render_template
from tipsplit.services.auth_service import AdminSessionGate, AdminState
from tipsplit.services.calculation_service import SortDirection, SortKey
from tipsplit.services.dashboard_service import build_dashboard

router = APIRouter(prefix="/admin", tags=["admin"])

SORT_OPTIONS = (
    (SortKey.DATE, "Date"),
    (SortKey.BILL_AMOUNT, "Bill Amount"),
    (SortKey.TIP_PERCENTAGE, "Tip %"),
)


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, gate: AdminSessionGate = Depends(get_admin_gate)):
    """Login form; already authenticated admins go straight to the dashboard"""
    if gate.is_authenticated(request.session):
        return RedirectResponse("/admin/dashboard", status_code=status.HTTP_302_FOUND)
    return render_template(request, "admin/login.html", {"username": ""})


@router.post("/login")
async def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    gate: AdminSessionGate = Depends(get_admin_gate)
):
    """Check credentials and open the admin session"""
    if gate.login(request.session, username, password) is AdminState.AUTHENTICATED:
        flash(request, "Welcome to the admin dashboard!")
        return RedirectResponse("/admin/dashboard", status_code=status.HTTP_303_SEE_OTHER)

    return render_template(
        request,
        "admin/login.html",
        {"username": username, "error": "Invalid username or password"},
        status_code=422
    )


@router.api_route("/logout", methods=["POST", "DELETE"])
async def logout(request: Request, gate: AdminSessionGate = Depends(get_admin_gate)):
    """Close the admin session"""
    gate.logout(request.session)
    flash(request, "You have been logged out.")
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/dashboard", response_class=HTMLResponse, dependencies=[Depends(require_admin)])
async def dashboard(
    request: Request,
    page: Optional[str] = None,
    sort: Optional[str] = None,
    direction: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Paginated, sortable calculation history with summary statistics"""
    view = build_dashboard(db, page=page, sort=sort, direction=direction)
    return render_template(
        request,
        "admin/dashboard.html",
        {
            "view": view,
            "sort_options": SORT_OPTIONS,
            "directions": list(SortDirection),
        }
    )
