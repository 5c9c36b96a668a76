from __future__ import annotations

import logging

from shopgo.application.dto.payments import CreatePaymentIntentInput, CreatePaymentIntentOutput
from shopgo.application.ports.cart_port import CartPort
from shopgo.application.ports.stripe_port import StripePort
from shopgo.domain.exceptions import EmptyCartError
from shopgo.domain.services.order_snapshot import cart_total_minor


logger = logging.getLogger(__name__)


class CreatePaymentIntentUseCase:
    def __init__(self, *, cart_port: CartPort, stripe_port: StripePort, currency: str = "usd"):
        self._cart_port = cart_port
        self._stripe_port = stripe_port
        self._currency = currency

    def execute(self, command: CreatePaymentIntentInput) -> CreatePaymentIntentOutput:
        cart_lines = self._cart_port.list_cart_lines(user_id=command.user_id)
        amount_minor = cart_total_minor(cart_lines)
        if not cart_lines or amount_minor <= 0:
            raise EmptyCartError("Cart is empty.")

        result = self._stripe_port.create_payment_intent(
            user_id=command.user_id,
            amount_minor=amount_minor,
            currency=self._currency,
        )
        logger.info(
            "create_payment_intent: user_id=%s reference=%s amount_minor=%s",
            command.user_id,
            result.id,
            amount_minor,
        )
        return CreatePaymentIntentOutput(
            client_secret=result.client_secret,
            payment_reference=result.id,
            amount_minor=amount_minor,
            currency=self._currency,
        )
