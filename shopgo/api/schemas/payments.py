from __future__ import annotations

from pydantic import BaseModel


class PaymentIntentResponse(BaseModel):
    client_secret: str
    payment_reference: str
    amount_minor: int
    currency: str


class StripeWebhookResponse(BaseModel):
    event_type: str
    handled: bool
    outcome: str | None = None
