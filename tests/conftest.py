from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.core.jwt_config import create_access_token
from app.main import app

USER = "U"
F1 = "F1"
F2 = "F2"


def expense_doc(id, amount, payer, shares, date="2024-05-10", **extra):
    doc = {
        "id": id,
        "amount": str(amount),
        "date": date,
        "category": extra.pop("category", "Food"),
        "payerId": payer,
        "splitMethod": "exact",
        "shares": [{"participantId": pid, "amount": str(amt)} for pid, amt in shares.items()],
        "isPayment": False,
    }
    doc.update(extra)
    return doc


def payment_doc(id, amount, payer, receiver, date="2024-05-12", **extra):
    doc = {
        "id": id,
        "amount": str(amount),
        "date": date,
        "payerId": payer,
        "receiverId": receiver,
        "isPayment": True,
    }
    doc.update(extra)
    return doc


@pytest.fixture
def dinner():
    # U pays 60 split equally among U, F1, F2
    return expense_doc("e1", Decimal("60"), USER, {USER: 20, F1: 20, F2: 20})


@pytest.fixture
def taxi():
    # F1 pays 30, U's share is 10
    return expense_doc("e2", Decimal("30"), F1, {USER: 10, F1: 10, F2: 10}, date="2024-04-28")


@pytest.fixture
def settle():
    return payment_doc("p1", Decimal("10"), USER, F1)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth_headers():
    token = create_access_token({"sub": USER})
    return {"Authorization": f"Bearer {token}"}
