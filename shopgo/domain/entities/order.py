from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal


OrderStatus = Literal["pending", "paid", "failed"]

ORDER_STATUS_PENDING: OrderStatus = "pending"
ORDER_STATUS_PAID: OrderStatus = "paid"
ORDER_STATUS_FAILED: OrderStatus = "failed"


@dataclass(frozen=True)
class OrderLine:
    product_id: int
    title: str
    unit_price_minor: int
    quantity: int
    image_url: str

    @property
    def line_total_minor(self) -> int:
        return max(self.unit_price_minor * self.quantity, 0)


@dataclass(frozen=True)
class Order:
    id: str
    user_id: str
    payment_reference: str
    status: OrderStatus
    total_minor: int
    currency: str
    created_at: datetime
    updated_at: datetime
    lines: tuple[OrderLine, ...] = field(default_factory=tuple)

    @property
    def is_paid(self) -> bool:
        return self.status == ORDER_STATUS_PAID

    @property
    def is_failed(self) -> bool:
        return self.status == ORDER_STATUS_FAILED
