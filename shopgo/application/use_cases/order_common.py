from __future__ import annotations

from shopgo.application.dto.orders import OrderLineOutput, OrderOutput
from shopgo.domain.entities.order import Order


def build_order_output(order: Order) -> OrderOutput:
    return OrderOutput(
        id=order.id,
        payment_reference=order.payment_reference,
        status=order.status,
        total_minor=order.total_minor,
        currency=order.currency,
        created_at=order.created_at,
        updated_at=order.updated_at,
        lines=[
            OrderLineOutput(
                product_id=line.product_id,
                title=line.title,
                unit_price_minor=line.unit_price_minor,
                quantity=line.quantity,
                line_total_minor=line.line_total_minor,
                image_url=line.image_url,
            )
            for line in order.lines
        ],
    )
