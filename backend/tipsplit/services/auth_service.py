"""
Admin session gate: credential check and session flag transitions
"""
import secrets
from datetime import datetime
from enum import Enum
from typing import Mapping, MutableMapping, Optional

from tipsplit.core.logging_config import LoggingConfig
from tipsplit.core.metrics import admin_logins_total

logger = LoggingConfig.get_logger(__name__)

SESSION_FLAG = "admin_logged_in"
SESSION_LOGGED_IN_AT = "admin_logged_in_at"


class AdminState(str, Enum):
    """Admin session state"""
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class AdminSessionGate:
    """Checks the configured credential pair and flips the session flag.

    The session is whatever mutable mapping the caller hands in (the
    request session in the web app, a plain dict in tests); the gate
    keeps no state of its own.
    """

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password

    def credentials_match(self, username: Optional[str], password: Optional[str]) -> bool:
        """Exact match against the configured pair, compared in constant time"""
        if username is None or password is None:
            return False
        username_ok = secrets.compare_digest(username.encode("utf-8"), self.username.encode("utf-8"))
        password_ok = secrets.compare_digest(password.encode("utf-8"), self.password.encode("utf-8"))
        return username_ok and password_ok

    def state(self, session: Mapping) -> AdminState:
        if session.get(SESSION_FLAG) is True:
            return AdminState.AUTHENTICATED
        return AdminState.ANONYMOUS

    def is_authenticated(self, session: Mapping) -> bool:
        return self.state(session) is AdminState.AUTHENTICATED

    def login(
        self,
        session: MutableMapping,
        username: Optional[str],
        password: Optional[str],
        now: Optional[datetime] = None
    ) -> AdminState:
        """
        Attempt anonymous -> authenticated

        On a mismatch the session is left untouched.

        Returns:
            The resulting state
        """
        if not self.credentials_match(username, password):
            admin_logins_total.labels(result="failure").inc()
            logger.warning("Admin login failed")
            return self.state(session)

        session[SESSION_FLAG] = True
        session[SESSION_LOGGED_IN_AT] = (now or datetime.utcnow()).isoformat()
        admin_logins_total.labels(result="success").inc()
        logger.info("Admin logged in")
        return AdminState.AUTHENTICATED

    def logout(self, session: MutableMapping) -> AdminState:
        """authenticated -> anonymous; a no-op for anonymous sessions"""
        was_authenticated = self.is_authenticated(session)
        session.pop(SESSION_FLAG, None)
        session.pop(SESSION_LOGGED_IN_AT, None)
        if was_authenticated:
            logger.info("Admin logged out")
        return AdminState.ANONYMOUS
