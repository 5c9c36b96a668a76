from __future__ import annotations

import logging

import stripe

from shopgo.application.dto.payments import PaymentIntentResult, PaymentWebhookEvent
from shopgo.application.ports.stripe_port import StripePort
from shopgo.domain.exceptions import PaymentGatewayError


logger = logging.getLogger(__name__)

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"


class StripeClient(StripePort):
    def __init__(self, *, secret_key: str, webhook_secret: str):
        stripe.api_key = secret_key
        self._webhook_secret = webhook_secret

    def create_payment_intent(
        self,
        *,
        user_id: str,
        amount_minor: int,
        currency: str,
    ) -> PaymentIntentResult:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_minor,
                currency=currency,
                metadata={"user_id": user_id},
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as exc:
            logger.warning("stripe: create_payment_intent failed user_id=%s error=%s", user_id, exc)
            raise PaymentGatewayError("Failed to create payment intent.") from exc

        intent_id = getattr(intent, "id", None)
        client_secret = getattr(intent, "client_secret", None)
        if not intent_id or not client_secret:
            raise PaymentGatewayError("Payment intent response is incomplete.")
        return PaymentIntentResult(id=str(intent_id), client_secret=str(client_secret))

    def verify_webhook(self, *, signature: str, payload: bytes) -> PaymentWebhookEvent:
        if not signature:
            raise PaymentGatewayError("Missing Stripe signature.")
        try:
            event = stripe.Webhook.construct_event(payload=payload, sig_header=signature, secret=self._webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            raise PaymentGatewayError("Invalid Stripe webhook signature.") from exc

        return map_stripe_event(event.to_dict())


def map_stripe_event(event: dict) -> PaymentWebhookEvent:
    event_type = str(event.get("type") or "")
    data_object = (event.get("data") or {}).get("object") or {}
    metadata = data_object.get("metadata") or {}

    if event_type == PAYMENT_SUCCEEDED:
        kind = "succeeded"
    elif event_type == PAYMENT_FAILED:
        kind = "failed"
    else:
        kind = "ignored"

    return PaymentWebhookEvent(
        event_type=event_type,
        kind=kind,
        payment_reference=data_object.get("id"),
        user_id=metadata.get("user_id"),
    )
