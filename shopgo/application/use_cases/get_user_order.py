from __future__ import annotations

from uuid import UUID

from shopgo.application.dto.orders import GetUserOrderInput, OrderOutput
from shopgo.application.ports.order_port import OrderPort
from shopgo.domain.exceptions import NotFoundError

from .order_common import build_order_output


class GetUserOrderUseCase:
    def __init__(self, *, order_port: OrderPort):
        self._order_port = order_port

    def execute(self, command: GetUserOrderInput) -> OrderOutput:
        try:
            order_id = str(UUID(command.order_id))
        except ValueError as exc:
            raise NotFoundError("Order not found.") from exc

        order = self._order_port.get_order_by_id(order_id=order_id)
        # Another user's order is indistinguishable from a missing one.
        if order is None or order.user_id != command.user_id:
            raise NotFoundError("Order not found.")
        return build_order_output(order)
