from __future__ import annotations

import time
from types import SimpleNamespace

import stripe

from nfj_gateway.api.deps import get_payment_service
from nfj_gateway.core.config import Settings
from nfj_gateway.main import app
from nfj_gateway.services.payment_service import PaymentService


def _ok_create(**kwargs):  # type: ignore[no-untyped-def]
    return SimpleNamespace(id="cs_test_abc", url="https://checkout.stripe.com/c/pay/cs_test_abc")


def _fake_client(monkeypatch, create):  # type: ignore[no-untyped-def]
    """Replace stripe.StripeClient with a stand-in exposing checkout.sessions.create."""
    clients: list = []

    class FakeStripeClient:
        def __init__(self, api_key, **kwargs):  # type: ignore[no-untyped-def]
            self.api_key = api_key
            self.kwargs = kwargs
            self.calls: list = []

            def _create(params):  # type: ignore[no-untyped-def]
                self.calls.append(params)
                return create(**params)

            self.checkout = SimpleNamespace(sessions=SimpleNamespace(create=_create))
            clients.append(self)

    monkeypatch.setattr(stripe, "StripeClient", FakeStripeClient)
    return clients


def test_create_checkout_session(client, monkeypatch):
    clients = _fake_client(monkeypatch, _ok_create)

    r = client.post("/api/create-checkout-session", json={"userId": "u-123"})
    assert r.status_code == 200
    assert r.json() == {"id": "cs_test_abc", "url": "https://checkout.stripe.com/c/pay/cs_test_abc"}

    stripe_client = clients[0]
    assert stripe_client.api_key == "sk_test_123"
    assert isinstance(stripe_client.kwargs["http_client"], stripe.RequestsClient)
    assert stripe_client.kwargs["max_network_retries"] == 0
    params = stripe_client.calls[0]
    assert params["mode"] == "payment"
    assert params["metadata"] == {"userId": "u-123"}
    assert params["success_url"] == "https://nfj.example.com/payment-success?session_id={CHECKOUT_SESSION_ID}"
    assert params["cancel_url"] == "https://nfj.example.com/payment-cancel"
    line_item = params["line_items"][0]
    assert line_item["quantity"] == 1
    assert line_item["price_data"]["currency"] == "eur"
    assert line_item["price_data"]["unit_amount"] == 499
    assert line_item["price_data"]["product_data"]["name"] == "NFJ Premium"


def test_create_checkout_session_anonymous(client, monkeypatch):
    clients = _fake_client(monkeypatch, _ok_create)

    r = client.post("/api/create-checkout-session", json={})
    assert r.status_code == 200
    assert clients[0].calls[0]["metadata"] == {"userId": ""}

    r = client.post("/api/create-checkout-session")
    assert r.status_code == 200
    assert clients[1].calls[0]["metadata"] == {"userId": ""}


def test_create_checkout_session_not_configured(client, monkeypatch):
    clients = _fake_client(monkeypatch, _ok_create)
    app.dependency_overrides[get_payment_service] = lambda: PaymentService(Settings(STRIPE_SECRET_KEY=None))

    r = client.post("/api/create-checkout-session", json={"userId": "u-1"})
    assert r.status_code == 500
    assert r.json()["code"] == 500201
    assert clients == []


def test_create_checkout_session_provider_error(client, monkeypatch):
    def create(**kwargs):  # type: ignore[no-untyped-def]
        raise stripe.APIConnectionError("network down")

    _fake_client(monkeypatch, create)

    r = client.post("/api/create-checkout-session", json={"userId": "u-1"})
    assert r.status_code == 500
    body = r.json()
    assert body["code"] == 500202
    assert "network down" not in body["message"]


def test_create_checkout_session_timeout(client, monkeypatch):
    def create(**kwargs):  # type: ignore[no-untyped-def]
        time.sleep(0.5)
        return SimpleNamespace(id="cs_late", url=None)

    _fake_client(monkeypatch, create)
    app.dependency_overrides[get_payment_service] = lambda: PaymentService(
        Settings(STRIPE_SECRET_KEY="sk_test_123", PAYMENT_TIMEOUT_SECONDS=0.05)
    )

    r = client.post("/api/create-checkout-session", json={"userId": "u-1"})
    assert r.status_code == 500
    assert r.json()["code"] == 500202


def test_stripe_client_http_timeout_matches_payment_timeout(monkeypatch):
    seen: dict = {}
    real_requests_client = stripe.RequestsClient

    def requests_client(**kwargs):  # type: ignore[no-untyped-def]
        seen.update(kwargs)
        return real_requests_client(**kwargs)

    monkeypatch.setattr(stripe, "RequestsClient", requests_client)
    service = PaymentService(Settings(STRIPE_SECRET_KEY="sk_test_123", PAYMENT_TIMEOUT_SECONDS=7.5))

    assert isinstance(service._stripe_client(), stripe.StripeClient)
    assert seen["timeout"] == 7.5
