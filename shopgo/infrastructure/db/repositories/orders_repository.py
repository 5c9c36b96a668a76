from __future__ import annotations

from datetime import datetime

from sqlalchemy import text

from shopgo.application.ports.order_port import OrderPort
from shopgo.domain.entities.order import Order, OrderLine, OrderStatus
from shopgo.domain.exceptions import NotFoundError, OrderAlreadyExistsError
from shopgo.infrastructure.db.engine import translate_db_errors
from shopgo.infrastructure.db.mappers.orders_mapper import map_row_to_order, order_line_params


_ORDER_COLUMNS = "id, user_id, payment_reference, status, total_minor, currency, created_at, updated_at"

_SELECT_LINES_SQL = """
    SELECT product_id, title, unit_price_minor, quantity, image_url
    FROM public.order_lines
    WHERE order_id = :order_id
    ORDER BY position ASC
"""

_INSERT_LINE_SQL = """
    INSERT INTO public.order_lines (
        order_id, position, product_id, title, unit_price_minor, quantity, image_url
    ) VALUES (
        :order_id, :position, :product_id, :title, :unit_price_minor, :quantity, :image_url
    )
"""


class SqlOrdersRepository(OrderPort):
    def __init__(self, engine):
        self._engine = engine

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
        sql = f"""
            INSERT INTO public.orders (
                id, user_id, payment_reference, status, total_minor, currency, created_at, updated_at
            ) VALUES (
                :id, :user_id, :payment_reference, :status, :total_minor, :currency, :created_at, :created_at
            )
            ON CONFLICT (payment_reference) DO NOTHING
            RETURNING {_ORDER_COLUMNS}
        """
        params = {
            "id": order_id,
            "user_id": user_id,
            "payment_reference": payment_reference,
            "status": status,
            "total_minor": total_minor,
            "currency": currency,
            "created_at": created_at,
        }
        with translate_db_errors("create_order"):
            with self._engine.begin() as conn:
                row = conn.execute(text(sql), params).mappings().first()
                if row is None:
                    raise OrderAlreadyExistsError(f"Order for payment reference {payment_reference} exists.")
                line_params = order_line_params(order_id, lines)
                if line_params:
                    conn.execute(text(_INSERT_LINE_SQL), line_params)
        return map_row_to_order(row, line_params)

    def get_order_by_id(self, *, order_id: str) -> Order | None:
        sql = f"""
            SELECT {_ORDER_COLUMNS}
            FROM public.orders
            WHERE id = :order_id
            LIMIT 1
        """
        return self._get_one(sql, {"order_id": order_id}, operation="get_order_by_id")

    def get_order_by_payment_reference(self, *, payment_reference: str) -> Order | None:
        sql = f"""
            SELECT {_ORDER_COLUMNS}
            FROM public.orders
            WHERE payment_reference = :payment_reference
            LIMIT 1
        """
        return self._get_one(
            sql,
            {"payment_reference": payment_reference},
            operation="get_order_by_payment_reference",
        )

    def update_order(self, order: Order) -> Order:
        sql = f"""
            UPDATE public.orders
            SET status = :status,
                total_minor = :total_minor,
                currency = :currency,
                updated_at = :updated_at
            WHERE id = :id
            RETURNING {_ORDER_COLUMNS}
        """
        params = {
            "id": order.id,
            "status": order.status,
            "total_minor": order.total_minor,
            "currency": order.currency,
            "updated_at": order.updated_at,
        }
        with translate_db_errors("update_order"):
            with self._engine.begin() as conn:
                row = conn.execute(text(sql), params).mappings().first()
                if row is None:
                    raise NotFoundError("Order not found.")
                conn.execute(
                    text("DELETE FROM public.order_lines WHERE order_id = :order_id"),
                    {"order_id": order.id},
                )
                line_params = order_line_params(order.id, order.lines)
                if line_params:
                    conn.execute(text(_INSERT_LINE_SQL), line_params)
        return map_row_to_order(row, line_params)

    def list_orders_by_user(self, *, user_id: str) -> list[Order]:
        sql = f"""
            SELECT {_ORDER_COLUMNS}
            FROM public.orders
            WHERE user_id = :user_id
            ORDER BY created_at DESC
        """
        with translate_db_errors("list_orders_by_user"):
            with self._engine.connect() as conn:
                rows = conn.execute(text(sql), {"user_id": user_id}).mappings().all()
                orders = []
                for row in rows:
                    line_rows = conn.execute(text(_SELECT_LINES_SQL), {"order_id": row["id"]}).mappings().all()
                    orders.append(map_row_to_order(row, line_rows))
        return orders

    def _get_one(self, sql: str, params: dict, *, operation: str) -> Order | None:
        with translate_db_errors(operation):
            with self._engine.connect() as conn:
                row = conn.execute(text(sql), params).mappings().first()
                if row is None:
                    return None
                line_rows = conn.execute(text(_SELECT_LINES_SQL), {"order_id": row["id"]}).mappings().all()
        return map_row_to_order(row, line_rows)
