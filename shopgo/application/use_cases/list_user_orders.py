from __future__ import annotations

from shopgo.application.dto.orders import ListUserOrdersInput, OrderOutput
from shopgo.application.ports.order_port import OrderPort

from .order_common import build_order_output


class ListUserOrdersUseCase:
    def __init__(self, *, order_port: OrderPort):
        self._order_port = order_port

    def execute(self, command: ListUserOrdersInput) -> list[OrderOutput]:
        orders = self._order_port.list_orders_by_user(user_id=command.user_id)
        orders = sorted(orders, key=lambda order: order.created_at, reverse=True)
        return [build_order_output(order) for order in orders]
