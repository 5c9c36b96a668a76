from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class OrderLineResponse(BaseModel):
    product_id: int
    title: str
    unit_price_minor: int
    quantity: int
    line_total_minor: int
    image_url: str | None = None


class OrderResponse(BaseModel):
    id: str
    payment_reference: str
    status: str
    total_minor: int
    currency: str
    created_at: datetime
    updated_at: datetime
    lines: list[OrderLineResponse]


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
