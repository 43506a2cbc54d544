"""
Tests for admin login/logout and the dashboard
"""
import re
from datetime import datetime, timedelta

ADMIN_CREDENTIALS = {"username": "admin", "password": "tipcalculator2026"}


def test_dashboard_redirects_anonymous_to_login(client, make_calculation):
    make_calculation(bill_amount="4321.00")

    response = client.get("/admin/dashboard", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/admin/login"
    assert "4,321.00" not in response.text


def test_anonymous_redirect_lands_on_login_form(client):
    response = client.get("/admin/dashboard")

    assert response.status_code == 200
    assert "Admin Login" in response.text
    assert "Please log in" in response.text


def test_login_page_renders(client):
    response = client.get("/admin/login")

    assert response.status_code == 200
    assert "Admin Login" in response.text
    assert 'class="login-alert"' not in response.text


def test_login_success_redirects_to_dashboard(client):
    response = client.post("/admin/login", data=ADMIN_CREDENTIALS, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/admin/dashboard"

    dashboard = client.get("/admin/dashboard")
    assert dashboard.status_code == 200
    assert "Welcome to the admin dashboard!" in dashboard.text


def test_login_failure_shows_alert(client):
    response = client.post("/admin/login", data={"username": "admin", "password": "wrong"})

    assert response.status_code == 422
    assert 'class="login-alert"' in response.text
    assert "Invalid username or password" in response.text
    assert client.get("/admin/dashboard", follow_redirects=False).status_code == 302


def test_login_page_redirects_when_already_authenticated(admin_client):
    response = admin_client.get("/admin/login", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/admin/dashboard"


def test_logout(admin_client):
    response = admin_client.post("/admin/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert admin_client.get("/admin/dashboard", follow_redirects=False).status_code == 302


def test_logout_with_delete(admin_client):
    response = admin_client.delete("/admin/logout", follow_redirects=False)

    assert response.status_code == 303
    assert admin_client.get("/admin/dashboard", follow_redirects=False).status_code == 302


def test_empty_dashboard(admin_client):
    response = admin_client.get("/admin/dashboard")

    assert response.status_code == 200
    assert 'class="empty-state"' in response.text
    assert 'class="data-table"' not in response.text
    assert 'class="pagination"' not in response.text


def test_dashboard_lists_calculations_and_stats(admin_client, make_calculation):
    make_calculation(bill_amount="100.00", tip_percentage="10")
    make_calculation(bill_amount="100.00", tip_percentage="20")

    response = admin_client.get("/admin/dashboard")

    assert response.status_code == 200
    assert 'class="data-table"' in response.text
    assert 'class="stat-card"' in response.text
    assert "15.00%" in response.text
    assert "UGX 100.00" in response.text


def test_dashboard_pagination(admin_client, make_calculation):
    for i in range(25):
        make_calculation(bill_amount=f"{i + 1}.00")

    first = admin_client.get("/admin/dashboard")
    second = admin_client.get("/admin/dashboard?page=2")

    assert "Page 1 of 2" in first.text
    assert "Page 2 of 2" in second.text
    assert second.text.count("<tr>") == 5 + 1  # rows plus header


def test_dashboard_negative_page_shows_first_page(admin_client, make_calculation):
    for i in range(25):
        make_calculation(bill_amount=f"{i + 1}.00")

    response = admin_client.get("/admin/dashboard?page=-1")

    assert response.status_code == 200
    assert "Page 1 of 2" in response.text


def test_active_sort_button(admin_client, make_calculation):
    make_calculation()

    response = admin_client.get("/admin/dashboard?sort=tip_percentage&direction=asc")

    assert re.search(r'class="sort-btn active"\s+href="\?sort=tip_percentage', response.text)
    assert re.search(r'class="sort-btn active"\s+href="[^"]*direction=asc">Ascending', response.text)
    assert not re.search(r'class="sort-btn active"\s+href="\?sort=bill_amount', response.text)


def test_dashboard_bill_amount_descending(admin_client, make_calculation):
    make_calculation(bill_amount="111.00")
    make_calculation(bill_amount="333.00")
    make_calculation(bill_amount="222.00")

    response = admin_client.get("/admin/dashboard?sort=bill_amount&direction=desc")
    text = response.text.split('class="data-table"', 1)[1]

    assert text.index("UGX 333.00") < text.index("UGX 222.00") < text.index("UGX 111.00")


def test_dashboard_date_ascending(admin_client, make_calculation):
    now = datetime.utcnow()
    make_calculation(bill_amount="777.00", created_at=now)
    make_calculation(bill_amount="555.00", created_at=now - timedelta(days=1))

    response = admin_client.get("/admin/dashboard?sort=date&direction=asc")
    text = response.text.split('class="data-table"', 1)[1]

    assert text.index("UGX 555.00") < text.index("UGX 777.00")


def test_dashboard_huge_page_renders(admin_client, make_calculation):
    make_calculation(bill_amount="12.00")

    response = admin_client.get("/admin/dashboard?page=99999999999999999999")

    assert response.status_code == 200
    assert 'class="empty-state"' in response.text
