from __future__ import annotations

from typing import Protocol

from shopgo.application.dto.payments import PaymentIntentResult, PaymentWebhookEvent


class StripePort(Protocol):
    def create_payment_intent(
        self,
        *,
        user_id: str,
        amount_minor: int,
        currency: str,
    ) -> PaymentIntentResult:
        ...

    def verify_webhook(self, *, signature: str, payload: bytes) -> PaymentWebhookEvent:
        ...
