from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from shopgo.domain.entities.cart import CartLine, Product
from shopgo.domain.entities.order import ORDER_STATUS_PAID, Order, OrderLine
from shopgo.domain.services.money import to_minor_units


@dataclass(frozen=True)
class OrderSnapshot:
    lines: tuple[OrderLine, ...]
    total_minor: int


def build_order_snapshot(
    *,
    cart_lines: list[CartLine],
    products: dict[int, Product],
) -> OrderSnapshot:
    lines: list[OrderLine] = []
    total_minor = 0
    for cart_line in cart_lines:
        product = products[cart_line.product_id]
        line = OrderLine(
            product_id=product.id,
            title=product.title,
            unit_price_minor=to_minor_units(product.price),
            quantity=cart_line.quantity,
            image_url=product.image_url,
        )
        total_minor += line.line_total_minor
        lines.append(line)
    return OrderSnapshot(lines=tuple(lines), total_minor=total_minor)


def complete_order(
    *,
    order: Order,
    snapshot: OrderSnapshot,
    currency: str,
    now: datetime,
) -> Order:
    # Only fields left unset by an interrupted run are filled in.
    return replace(
        order,
        status=ORDER_STATUS_PAID,
        total_minor=order.total_minor if order.total_minor else snapshot.total_minor,
        currency=order.currency or currency,
        lines=order.lines if order.lines else snapshot.lines,
        updated_at=now,
    )


def cart_total_minor(cart_lines: list[CartLine]) -> int:
    total = 0
    for line in cart_lines:
        total += max(to_minor_units(line.unit_price) * line.quantity, 0)
    return total
