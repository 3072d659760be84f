import os
import tempfile
import uuid
from datetime import date

# Settings are read at import time, so the environment goes first
_DB_DIR = tempfile.mkdtemp(prefix="finance-tracker-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from finance_tracker.core.security import get_current_user
from finance_tracker.database import engine, seed_default_categories
from finance_tracker.main import app
from finance_tracker.models import account, budget, category, goal, transaction  # noqa: F401
from finance_tracker.models.account import Account
from finance_tracker.models.user import User


def _make_user(session: Session, email: str) -> User:
    user = User(id=uuid.uuid4(), email=email)
    session.add(user)
    session.commit()
    session.refresh(user)
    session.expunge(user)
    return user


@pytest.fixture
def session():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        seed_default_categories(s)
        yield s


@pytest.fixture
def user(session):
    return _make_user(session, "ana@example.com")


@pytest.fixture
def other_user(session):
    return _make_user(session, "mihai@example.com")


@pytest.fixture
def anonymous_client(session):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def client(session, user):
    app.dependency_overrides[get_current_user] = lambda: user
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def categories(client):
    """Default category name -> id."""
    resp = client.get("/categories")
    assert resp.status_code == 200
    return {c["name"]: c["id"] for c in resp.json()}


@pytest.fixture
def make_account(client):
    def _make(name="Main", currency="RON", type="CHECKING"):
        resp = client.post("/accounts", json={"name": name, "currency": currency, "type": type})
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_transaction(client, categories):
    def _make(account, amount, category="Food", type="EXPENSE", when=None, description=None):
        resp = client.post(
            "/transactions",
            json={
                "account_id": account["id"],
                "category_id": categories[category],
                "amount": amount,
                "type": type,
                "date": (when or date.today()).isoformat(),
                "description": description,
            },
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def foreign_account(session, other_user):
    acc = Account(id=uuid.uuid4(), user_id=other_user.id, name="Not mine", currency="RON")
    session.add(acc)
    session.commit()
    session.refresh(acc)
    return acc

