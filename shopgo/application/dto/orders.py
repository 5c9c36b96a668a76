from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ListUserOrdersInput:
    user_id: str


@dataclass(frozen=True)
class GetUserOrderInput:
    user_id: str
    order_id: str


@dataclass(frozen=True)
class OrderLineOutput:
    product_id: int
    title: str
    unit_price_minor: int
    quantity: int
    line_total_minor: int
    image_url: str | None


@dataclass(frozen=True)
class OrderOutput:
    id: str
    payment_reference: str
    status: str
    total_minor: int
    currency: str
    created_at: datetime
    updated_at: datetime
    lines: list[OrderLineOutput]
