from __future__ import annotations

import hashlib
import hmac
import json
import time
from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, delete

from nfj_gateway.api.deps import get_db, get_payment_service, get_reconciler
from nfj_gateway.core.config import Settings
from nfj_gateway.main import app
from nfj_gateway.models import Purchase, User
from nfj_gateway.services.payment_service import PaymentService
from nfj_gateway.services.reconciler import Reconciler

WEBHOOK_SECRET = "whsec_test_secret"


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(scope="function")
def db(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
        # Clean tables after each test (children first).
        session.exec(delete(Purchase))
        session.exec(delete(User))
        session.commit()


@pytest.fixture(scope="function")
def test_settings() -> Settings:
    return Settings(
        STRIPE_SECRET_KEY="sk_test_123",
        STRIPE_WEBHOOK_SECRET=WEBHOOK_SECRET,
        PUBLIC_URL="https://nfj.example.com",
        DEEPL_API_KEY=None,
        LIBRETRANSLATE_URL=None,
    )


@pytest.fixture(scope="function")
def client(engine, test_settings) -> Generator[TestClient, None, None]:
    def _override_get_db() -> Generator[Session, None, None]:
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_payment_service] = lambda: PaymentService(test_settings)
    app.dependency_overrides[get_reconciler] = lambda: Reconciler(test_settings)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header value using Stripe's v1 signing scheme."""
    ts = timestamp if timestamp is not None else int(time.time())
    mac = hmac.new(secret.encode(), f"{ts}.".encode() + payload, hashlib.sha256).hexdigest()
    return f"t={ts},v1={mac}"


def checkout_completed_event(
    session_id: str = "cs_test_1",
    user_id: str | None = None,
    amount_total: int | str | None = 499,
    currency: str | None = "eur",
) -> dict[str, Any]:
    obj: dict[str, Any] = {
        "id": session_id,
        "object": "checkout.session",
        "amount_total": amount_total,
        "currency": currency,
        "metadata": {"userId": user_id or ""},
    }
    return {
        "id": f"evt_{session_id}",
        "object": "event",
        "type": "checkout.session.completed",
        "data": {"object": obj},
    }


@pytest.fixture
def deliver(client) -> Callable[..., Any]:
    """POST an event to /webhook with a valid signature (unless one is given)."""

    def _deliver(event: dict[str, Any], signature: str | None = None):
        payload = json.dumps(event).encode()
        headers = {
            "Content-Type": "application/json",
            "Stripe-Signature": signature if signature is not None else sign_payload(payload),
        }
        return client.post("/webhook", content=payload, headers=headers)

    return _deliver
