from __future__ import annotations

from typing import Protocol

from shopgo.domain.entities.cart import Product


class CatalogPort(Protocol):
    def get_product(self, *, product_id: int) -> Product | None:
        ...
