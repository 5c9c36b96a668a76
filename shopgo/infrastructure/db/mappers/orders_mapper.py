from __future__ import annotations

from typing import Any, Iterable, Mapping

from shopgo.domain.entities.order import Order, OrderLine


def map_row_to_order_line(row: Mapping[str, Any]) -> OrderLine:
    return OrderLine(
        product_id=int(row["product_id"]),
        title=row["title"],
        unit_price_minor=int(row["unit_price_minor"]),
        quantity=int(row["quantity"]),
        image_url=row.get("image_url") or "",
    )


def map_row_to_order(row: Mapping[str, Any], line_rows: Iterable[Mapping[str, Any]] = ()) -> Order:
    return Order(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        payment_reference=row["payment_reference"],
        status=row["status"],
        total_minor=int(row["total_minor"] or 0),
        currency=row.get("currency") or "",
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        lines=tuple(map_row_to_order_line(line) for line in line_rows),
    )


def order_line_params(order_id: str, lines: Iterable[OrderLine]) -> list[dict[str, Any]]:
    return [
        {
            "order_id": order_id,
            "position": position,
            "product_id": line.product_id,
            "title": line.title,
            "unit_price_minor": line.unit_price_minor,
            "quantity": line.quantity,
            "image_url": line.image_url or "",
        }
        for position, line in enumerate(lines)
    ]
