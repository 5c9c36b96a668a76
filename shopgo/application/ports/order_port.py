from __future__ import annotations

from datetime import datetime
from typing import Protocol

from shopgo.domain.entities.order import Order, OrderLine, OrderStatus


class OrderPort(Protocol):
    def create_order(
        self,
        *,
        order_id: str,
        user_id: str,
        payment_reference: str,
        status: OrderStatus,
        total_minor: int,
        currency: str,
        lines: tuple[OrderLine, ...],
        created_at: datetime,
    ) -> Order:
        """Insert the order and its lines atomically.

        Raises OrderAlreadyExistsError when the payment reference is taken.
        """
        ...

    def get_order_by_id(self, *, order_id: str) -> Order | None:
        ...

    def get_order_by_payment_reference(self, *, payment_reference: str) -> Order | None:
        ...

    def update_order(self, order: Order) -> Order:
        ...

    def list_orders_by_user(self, *, user_id: str) -> list[Order]:
        ...
