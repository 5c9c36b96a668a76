from __future__ import annotations

import logging

from shopgo.application.dto.payments import (
    MarkOrderFailedInput,
    MaterializeOrderInput,
    StripeWebhookInput,
    StripeWebhookOutput,
)
from shopgo.application.ports.stripe_port import StripePort

from .mark_order_failed import MarkOrderFailedUseCase
from .materialize_order_on_success import MaterializeOrderOnSuccessUseCase


logger = logging.getLogger(__name__)


class ProcessStripeWebhookUseCase:
    def __init__(
        self,
        *,
        stripe_port: StripePort,
        materialize_use_case: MaterializeOrderOnSuccessUseCase,
        mark_failed_use_case: MarkOrderFailedUseCase,
    ):
        self._stripe_port = stripe_port
        self._materialize_use_case = materialize_use_case
        self._mark_failed_use_case = mark_failed_use_case

    def execute(self, command: StripeWebhookInput) -> StripeWebhookOutput:
        event = self._stripe_port.verify_webhook(signature=command.signature, payload=command.payload)

        if event.kind == "succeeded":
            result = self._materialize_use_case.execute(
                MaterializeOrderInput(
                    payment_reference=event.payment_reference or "",
                    user_id=event.user_id or "",
                )
            )
            return StripeWebhookOutput(event_type=event.event_type, handled=True, outcome=result.outcome)

        if event.kind == "failed":
            result = self._mark_failed_use_case.execute(
                MarkOrderFailedInput(payment_reference=event.payment_reference or "")
            )
            return StripeWebhookOutput(event_type=event.event_type, handled=True, outcome=result.outcome)

        logger.debug("stripe_webhook: ignored event_type=%s", event.event_type)
        return StripeWebhookOutput(event_type=event.event_type, handled=False, outcome=None)
