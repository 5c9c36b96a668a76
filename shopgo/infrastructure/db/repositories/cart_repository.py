from __future__ import annotations

import logging

from sqlalchemy import text

from shopgo.application.ports.cart_port import CartPort
from shopgo.application.ports.catalog_port import CatalogPort
from shopgo.domain.entities.cart import CartLine
from shopgo.infrastructure.db.engine import translate_db_errors


logger = logging.getLogger(__name__)


class SqlCartRepository(CartPort):
    def __init__(self, engine, *, catalog_port: CatalogPort):
        self._engine = engine
        self._catalog_port = catalog_port

    def list_cart_lines(self, *, user_id: str) -> list[CartLine]:
        sql = """
            SELECT product_id, quantity
            FROM public.cart_items
            WHERE user_id = :user_id
            ORDER BY id ASC
        """
        with translate_db_errors("list_cart_lines"):
            with self._engine.connect() as conn:
                rows = conn.execute(text(sql), {"user_id": user_id}).mappings().all()

        lines: list[CartLine] = []
        for row in rows:
            product_id = int(row["product_id"])
            product = self._catalog_port.get_product(product_id=product_id)
            if product is None:
                logger.warning("cart: product_missing user_id=%s product_id=%s", user_id, product_id)
                continue
            lines.append(
                CartLine(
                    product_id=product_id,
                    quantity=int(row["quantity"]),
                    unit_price=product.price,
                    title=product.title,
                    image_url=product.image_url,
                )
            )
        return lines

    def clear_cart(self, *, user_id: str) -> None:
        sql = """
            DELETE FROM public.cart_items
            WHERE user_id = :user_id
        """
        with translate_db_errors("clear_cart"):
            with self._engine.begin() as conn:
                conn.execute(text(sql), {"user_id": user_id})
