"""
Tests for the admin session gate
"""
from datetime import datetime

from tipsplit.services.auth_service import (SESSION_FLAG,
                                            SESSION_LOGGED_IN_AT,
                                            AdminSessionGate, AdminState)


def make_gate():
    return AdminSessionGate("admin", "tipcalculator2026")


def test_new_session_is_anonymous():
    assert make_gate().state({}) is AdminState.ANONYMOUS


def test_login_with_correct_credentials():
    gate = make_gate()
    session = {}

    state = gate.login(session, "admin", "tipcalculator2026", now=datetime(2026, 1, 2, 3, 4, 5))

    assert state is AdminState.AUTHENTICATED
    assert gate.is_authenticated(session)
    assert session[SESSION_FLAG] is True
    assert session[SESSION_LOGGED_IN_AT] == "2026-01-02T03:04:05"


def test_wrong_password_leaves_session_untouched():
    gate = make_gate()
    session = {"flash": {"message": "hi", "kind": "notice"}}

    state = gate.login(session, "admin", "wrong")

    assert state is AdminState.ANONYMOUS
    assert session == {"flash": {"message": "hi", "kind": "notice"}}


def test_credentials_are_case_sensitive():
    gate = make_gate()

    assert not gate.credentials_match("Admin", "tipcalculator2026")
    assert not gate.credentials_match("admin", "TIPCALCULATOR2026")
    assert not gate.credentials_match(None, "tipcalculator2026")
    assert gate.credentials_match("admin", "tipcalculator2026")


def test_failed_login_keeps_existing_authentication():
    gate = make_gate()
    session = {}
    gate.login(session, "admin", "tipcalculator2026")

    assert gate.login(session, "admin", "nope") is AdminState.AUTHENTICATED


def test_logout_clears_flag():
    gate = make_gate()
    session = {}
    gate.login(session, "admin", "tipcalculator2026")

    assert gate.logout(session) is AdminState.ANONYMOUS
    assert SESSION_FLAG not in session
    assert SESSION_LOGGED_IN_AT not in session


def test_logout_when_anonymous_is_noop():
    session = {}

    assert make_gate().logout(session) is AdminState.ANONYMOUS
    assert session == {}


def test_only_true_flag_counts_as_authenticated():
    assert not make_gate().is_authenticated({SESSION_FLAG: "yes"})
