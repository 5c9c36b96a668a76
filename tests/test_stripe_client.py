from __future__ import annotations

import json

import pytest
import stripe

from shopgo.domain.exceptions import PaymentGatewayError
from shopgo.infrastructure.clients.stripe_client import StripeClient


def _payload(event_type: str, *, user_id: str | None = "user-1") -> bytes:
    metadata = {"user_id": user_id} if user_id else {}
    return json.dumps(
        {
            "id": "evt_1",
            "type": event_type,
            "data": {"object": {"id": "pi_123", "object": "payment_intent", "metadata": metadata}},
        }
    ).encode("utf-8")


@pytest.fixture
def client() -> StripeClient:
    return StripeClient(secret_key="sk_test_x", webhook_secret="whsec_x")


@pytest.fixture
def accept_signature(monkeypatch: pytest.MonkeyPatch):
    calls = []

    def fake_construct_event(payload, sig_header, secret, **kwargs):
        calls.append({"payload": payload, "sig_header": sig_header, "secret": secret})
        return stripe.Event.construct_from(json.loads(payload), "sk_test_x")

    monkeypatch.setattr(stripe.Webhook, "construct_event", fake_construct_event)
    return calls


def test_succeeded_event_maps_reference_and_user(client, accept_signature):
    event = client.verify_webhook(signature="t=1,v1=abc", payload=_payload("payment_intent.succeeded"))

    assert event.kind == "succeeded"
    assert event.payment_reference == "pi_123"
    assert event.user_id == "user-1"
    assert accept_signature[0]["secret"] == "whsec_x"


def test_failed_event_kind(client, accept_signature):
    event = client.verify_webhook(
        signature="t=1,v1=abc",
        payload=_payload("payment_intent.payment_failed", user_id=None),
    )

    assert event.kind == "failed"
    assert event.user_id is None


def test_other_events_are_ignored(client, accept_signature):
    event = client.verify_webhook(signature="t=1,v1=abc", payload=_payload("charge.succeeded"))

    assert event.kind == "ignored"
    assert event.event_type == "charge.succeeded"


def test_mapping_reads_the_verified_event(client, monkeypatch: pytest.MonkeyPatch):
    verified = json.loads(_payload("payment_intent.succeeded", user_id="user-9"))

    def construct_event(payload, sig_header, secret, **kwargs):
        return stripe.Event.construct_from(verified, "sk_test_x")

    monkeypatch.setattr(stripe.Webhook, "construct_event", construct_event)

    event = client.verify_webhook(signature="t=1,v1=abc", payload=b"not json")

    assert event.kind == "succeeded"
    assert event.payment_reference == "pi_123"
    assert event.user_id == "user-9"


def test_invalid_signature_raises_gateway_error(client, monkeypatch: pytest.MonkeyPatch):
    def reject(payload, sig_header, secret, **kwargs):
        raise stripe.SignatureVerificationError("bad signature", sig_header)

    monkeypatch.setattr(stripe.Webhook, "construct_event", reject)

    with pytest.raises(PaymentGatewayError):
        client.verify_webhook(signature="t=1,v1=forged", payload=_payload("payment_intent.succeeded"))


def test_missing_signature_raises_gateway_error(client, accept_signature):
    with pytest.raises(PaymentGatewayError):
        client.verify_webhook(signature="", payload=_payload("payment_intent.succeeded"))
    assert accept_signature == []


def test_create_payment_intent_passes_user_metadata(client, monkeypatch: pytest.MonkeyPatch):
    captured = {}

    class _Intent:
        id = "pi_new"
        client_secret = "pi_new_secret"

    def fake_create(**kwargs):
        captured.update(kwargs)
        return _Intent()

    monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)

    result = client.create_payment_intent(user_id="user-1", amount_minor=4498, currency="usd")

    assert result.id == "pi_new"
    assert captured["amount"] == 4498
    assert captured["metadata"] == {"user_id": "user-1"}


def test_create_payment_intent_failure(client, monkeypatch: pytest.MonkeyPatch):
    def fail(**kwargs):
        raise stripe.APIConnectionError("network down")

    monkeypatch.setattr(stripe.PaymentIntent, "create", fail)

    with pytest.raises(PaymentGatewayError):
        client.create_payment_intent(user_id="user-1", amount_minor=100, currency="usd")
