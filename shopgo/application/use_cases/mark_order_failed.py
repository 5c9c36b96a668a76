from __future__ import annotations

import logging
from dataclasses import replace

from shopgo.application.dto.payments import MarkOrderFailedInput, MarkOrderFailedOutput
from shopgo.application.ports.order_port import OrderPort
from shopgo.domain.entities.order import ORDER_STATUS_FAILED

from .auth_common import utcnow


logger = logging.getLogger(__name__)


class MarkOrderFailedUseCase:
    def __init__(self, *, order_port: OrderPort):
        self._order_port = order_port

    def execute(self, command: MarkOrderFailedInput) -> MarkOrderFailedOutput:
        payment_reference = (command.payment_reference or "").strip()
        if not payment_reference:
            return MarkOrderFailedOutput(outcome="ignored", order_id=None)

        order = self._order_port.get_order_by_payment_reference(payment_reference=payment_reference)
        if order is None:
            logger.info("mark_order_failed: no_order reference=%s", payment_reference)
            return MarkOrderFailedOutput(outcome="no_order", order_id=None)
        if order.is_failed:
            return MarkOrderFailedOutput(outcome="already_failed", order_id=order.id)
        if order.is_paid:
            # A paid order is never reversed by a late failure event.
            logger.warning("mark_order_failed: already_paid reference=%s", payment_reference)
            return MarkOrderFailedOutput(outcome="already_paid", order_id=order.id)

        self._order_port.update_order(replace(order, status=ORDER_STATUS_FAILED, updated_at=utcnow()))
        logger.info("mark_order_failed: marked_failed reference=%s order_id=%s", payment_reference, order.id)
        return MarkOrderFailedOutput(outcome="marked_failed", order_id=order.id)
