"""
Pytest configuration and fixtures
"""
import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Settings are read on first import, so the test database must be chosen first
_test_db_dir = Path(tempfile.mkdtemp(prefix="tipsplit-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_dir / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "tipcalculator2026"
os.environ["CURRENCY_CODE"] = "UGX"
os.environ["LOG_FORMAT"] = "text"
os.environ["LOG_FILE_ENABLED"] = "false"

from sqlalchemy.orm import Session  # noqa: E402

import tipsplit.models  # noqa: E402,F401
from tipsplit.core.database import Base, get_engine, get_session_local  # noqa: E402
from tipsplit.models.calculation import Calculation  # noqa: E402
from tipsplit.services.calculator import calculate_split, to_decimal  # noqa: E402

ADMIN_CREDENTIALS = {"username": "admin", "password": "tipcalculator2026"}


@pytest.fixture(scope="function")
def db() -> Session:
    """Create a database session on a freshly created schema"""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = get_session_local()()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db: Session):
    """Create test client with database dependency override"""
    from fastapi.testclient import TestClient

    from tipsplit.core.database import get_db
    from tipsplit.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def admin_client(client):
    """Test client with an authenticated admin session"""
    response = client.post("/admin/login", data=ADMIN_CREDENTIALS, follow_redirects=False)
    assert response.status_code == 303
    return client


@pytest.fixture
def make_calculation(db: Session):
    """Factory for stored calculations with consistent derived amounts"""

    def _make(bill_amount="100.00", tip_percentage="15.00", people_count=1, created_at=None):
        split = calculate_split(bill_amount, tip_percentage, people_count)
        calculation = Calculation(
            bill_amount=to_decimal(bill_amount),
            tip_percentage=to_decimal(tip_percentage),
            tip_amount=split.tip_amount,
            total_amount=split.total_amount,
            people_count=people_count,
            per_person_amount=split.per_person_amount,
            created_at=created_at or datetime.utcnow(),
        )
        db.add(calculation)
        db.commit()
        db.refresh(calculation)
        return calculation

    return _make
