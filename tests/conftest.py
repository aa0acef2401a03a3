import os
import sys
from datetime import date

import pytest
from mongomock_motor import AsyncMongoMockClient

# Ensure project root is on sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from challanbook.database import db  # noqa: E402
from challanbook.models.challan import Challan  # noqa: E402
from challanbook.models.user import User  # noqa: E402


@pytest.fixture(autouse=True)
def mongo():
    """Point the app at a fresh in-memory database for every test."""
    client = AsyncMongoMockClient()
    db.client = client
    db.database = client["challan_book_test"]
    yield db.database
    db.client = None
    db.database = None


@pytest.fixture
def challan_factory():
    def create_challan(**kwargs):
        defaults = {
            "challan_number": 1,
            "date": date(2024, 1, 10),
            "total_amount": 100.0,
            "customer_name": "A",
            "customer_phone": "9876543210",
        }
        defaults.update(kwargs)
        if isinstance(defaults["date"], str):
            defaults["date"] = date.fromisoformat(defaults["date"])
        return Challan(**defaults)

    return create_challan


@pytest.fixture
def challan_form():
    def build(**kwargs):
        data = {
            "date": "2024-01-10",
            "customer_name": "Acme Traders",
            "customer_phone": "9876543210",
            "products": [
                {"name": "Cotton roll", "quantity": "2", "price": "150"},
                {"name": "Thread", "quantity": 3, "price": 10.5},
            ],
        }
        data.update(kwargs)
        return data

    return build


@pytest.fixture
def user():
    return User(uid="google-uid-1", email="owner@acme.in", display_name="Owner")


@pytest.fixture
def client(user, mongo):
    """Signed-in test client. The app lifespan (real MongoDB) is not started."""
    from fastapi.testclient import TestClient

    from challanbook.dependencies import get_current_user
    from main import app

    app.dependency_overrides[get_current_user] = lambda: user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(mongo):
    from fastapi.testclient import TestClient

    from main import app

    return TestClient(app)
