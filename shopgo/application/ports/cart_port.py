from __future__ import annotations

from typing import Protocol

from shopgo.domain.entities.cart import CartLine


class CartPort(Protocol):
    def list_cart_lines(self, *, user_id: str) -> list[CartLine]:
        ...

    def clear_cart(self, *, user_id: str) -> None:
        ...
