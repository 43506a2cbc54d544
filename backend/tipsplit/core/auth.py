"""
Admin authentication dependencies
"""
from fastapi import Depends, Request

from tipsplit.core.config import get_settings
from tipsplit.services.auth_service import AdminSessionGate


class AdminLoginRequired(Exception):
    """Raised when an anonymous request reaches an admin-only page"""

    def __init__(self, path: str = ""):
        self.path = path
        super().__init__(f"Admin login required for {path or 'this page'}")


def get_admin_gate() -> AdminSessionGate:
    """Gate built from the configured credential pair"""
    settings = get_settings()
    return AdminSessionGate(settings.admin_username, settings.admin_password)


async def require_admin(
    request: Request,
    gate: AdminSessionGate = Depends(get_admin_gate)
) -> None:
    """
    Dependency for admin-only pages

    Raises:
        AdminLoginRequired: If the session is not authenticated
    """
    if not gate.is_authenticated(request.session):
        raise AdminLoginRequired(request.url.path)
