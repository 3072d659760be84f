"""Accounts, transactions and authentication through the HTTP API."""

import uuid
from datetime import date, timedelta

from jose import jwt
from sqlmodel import select

from finance_tracker.config import settings
from finance_tracker.models.transaction import Transaction, TransactionType


class TestAuth:
    def test_health_is_public(self, anonymous_client):
        assert anonymous_client.get("/health").json() == {"status": "ok"}

    def test_missing_token(self, anonymous_client):
        resp = anonymous_client.get("/accounts")

        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    def test_garbage_token(self, anonymous_client):
        resp = anonymous_client.get("/accounts", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_token_for_unknown_user(self, anonymous_client):
        token = jwt.encode({"sub": str(uuid.uuid4())}, settings.jwt_secret, algorithm="HS256")
        resp = anonymous_client.get("/accounts", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_valid_bearer_token(self, anonymous_client, user):
        token = jwt.encode({"sub": str(user.id)}, settings.jwt_secret, algorithm="HS256")
        resp = anonymous_client.get("/accounts", headers={"Authorization": f"Bearer {token}"})

        assert resp.status_code == 200
        assert resp.json() == []

    def test_token_from_cookie(self, anonymous_client, user):
        token = jwt.encode({"sub": str(user.id)}, settings.jwt_secret, algorithm="HS256")
        anonymous_client.cookies.set("access_token", token)
        assert anonymous_client.get("/accounts").status_code == 200


class TestAccounts:
    def test_create_and_list(self, client, make_account):
        make_account("Main", "ron")
        make_account("Travel", "EUR", "SAVINGS")

        accounts = client.get("/accounts").json()
        assert [(a["name"], a["currency"], a["type"]) for a in accounts] == [
            ("Travel", "EUR", "SAVINGS"),
            ("Main", "RON", "CHECKING"),
        ]

    def test_unsupported_currency(self, client):
        resp = client.post("/accounts", json={"name": "Yen", "currency": "JPY"})
        assert resp.status_code == 400

    def test_update(self, client, make_account):
        acc = make_account()
        resp = client.put(f"/accounts/{acc['id']}", json={"name": "Renamed", "currency": "USD", "type": "CASH"})

        assert resp.status_code == 200
        assert resp.json()["name"] == "Renamed"
        assert resp.json()["currency"] == "USD"

    def test_other_users_account_is_not_found(self, client, foreign_account):
        resp = client.put(f"/accounts/{foreign_account.id}", json={"name": "Mine now"})
        assert resp.status_code == 404
        assert client.delete(f"/accounts/{foreign_account.id}").status_code == 404

    def test_delete_removes_transactions(self, client, session, make_account, make_transaction):
        acc = make_account()
        make_transaction(acc, 10)
        make_transaction(acc, 20)

        assert client.delete(f"/accounts/{acc['id']}").status_code == 204
        assert client.get("/accounts").json() == []
        remaining = session.exec(select(Transaction).where(Transaction.account_id == uuid.UUID(acc["id"]))).all()
        assert remaining == []


class TestTransactions:
    def test_create_carries_currency_and_category(self, make_account, make_transaction):
        acc = make_account(currency="EUR")
        tx = make_transaction(acc, 42.5, "Transport", description="Bolt ride")

        assert tx["currency"] == "EUR"
        assert tx["category_name"] == "Transport"
        assert tx["category_icon"] == "🚗"
        assert tx["amount"] == 42.5

    def test_amount_must_be_positive(self, client, make_account, categories):
        acc = make_account()
        resp = client.post(
            "/transactions",
            json={"account_id": acc["id"], "category_id": categories["Food"], "amount": -5, "type": "EXPENSE"},
        )
        assert resp.status_code == 422

    def test_cannot_book_into_foreign_account(self, client, foreign_account, categories):
        resp = client.post(
            "/transactions",
            json={
                "account_id": str(foreign_account.id),
                "category_id": categories["Food"],
                "amount": 5,
                "type": "EXPENSE",
            },
        )
        assert resp.status_code == 404

    def test_unknown_category(self, client, make_account):
        acc = make_account()
        resp = client.post(
            "/transactions",
            json={"account_id": acc["id"], "category_id": str(uuid.uuid4()), "amount": 5, "type": "EXPENSE"},
        )
        assert resp.status_code == 404

    def test_list_filters_and_pagination(self, client, make_account, make_transaction):
        acc = make_account()
        today = date.today()
        for i in range(5):
            make_transaction(acc, 10 + i, when=today - timedelta(days=i), description=f"Lidl #{i}")
        make_transaction(acc, 3000, "Salary", "INCOME", today, "Payroll")

        page = client.get("/transactions", params={"page": 1, "page_size": 4}).json()
        assert page["total"] == 6
        assert page["total_pages"] == 2
        assert len(page["transactions"]) == 4

        incomes = client.get("/transactions", params={"type": "INCOME"}).json()
        assert [t["description"] for t in incomes["transactions"]] == ["Payroll"]

        found = client.get("/transactions", params={"search": "lidl #3"}).json()
        assert [t["amount"] for t in found["transactions"]] == [13]

        ranged = client.get(
            "/transactions",
            params={"date_from": (today - timedelta(days=1)).isoformat(), "date_to": today.isoformat()},
        ).json()
        assert ranged["total"] == 3

    def test_patch(self, client, make_account, make_transaction):
        tx = make_transaction(make_account(), 10)

        resp = client.patch(f"/transactions/{tx['id']}", json={"amount": 12.75, "description": "Fixed"})
        assert resp.status_code == 200
        assert resp.json()["amount"] == 12.75
        assert resp.json()["description"] == "Fixed"

        assert client.patch(f"/transactions/{tx['id']}", json={}).status_code == 400

    def test_patch_null_clears_description_only(self, client, make_account, make_transaction):
        tx = make_transaction(make_account(), 10, description="Lidl")

        resp = client.patch(f"/transactions/{tx['id']}", json={"description": None, "amount": None})
        assert resp.status_code == 200
        assert resp.json()["description"] is None
        assert resp.json()["amount"] == 10

        assert client.patch(f"/transactions/{tx['id']}", json={"amount": None}).status_code == 400

    def test_get_and_delete(self, client, make_account, make_transaction):
        tx = make_transaction(make_account(), 10)

        assert client.get(f"/transactions/{tx['id']}").status_code == 200
        assert client.delete(f"/transactions/{tx['id']}").status_code == 204
        assert client.get(f"/transactions/{tx['id']}").status_code == 404

    def test_listing_is_scoped_to_user(self, client, session, foreign_account, categories):
        session.add(
            Transaction(
                account_id=foreign_account.id,
                category_id=uuid.UUID(categories["Food"]),
                amount=99,
                type=TransactionType.EXPENSE,
            )
        )
        session.commit()

        assert client.get("/transactions").json()["total"] == 0
