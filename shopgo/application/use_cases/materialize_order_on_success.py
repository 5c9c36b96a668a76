from __future__ import annotations

import logging
from uuid import uuid4

from shopgo.application.dto.payments import MaterializeOrderInput, MaterializeOrderOutput
from shopgo.application.ports.cart_port import CartPort
from shopgo.application.ports.catalog_port import CatalogPort
from shopgo.application.ports.order_port import OrderPort
from shopgo.domain.entities.cart import CartLine, Product
from shopgo.domain.entities.order import ORDER_STATUS_PAID, Order
from shopgo.domain.exceptions import (
    MissingReferenceError,
    MissingUserError,
    NotFoundError,
    OrderAlreadyExistsError,
)
from shopgo.domain.services.order_snapshot import OrderSnapshot, build_order_snapshot, complete_order
from shopgo.shared.keyed_lock import KeyedLocks

from .auth_common import utcnow


logger = logging.getLogger(__name__)


class MaterializeOrderOnSuccessUseCase:
    """Turn a confirmed payment into exactly one paid order.

    Safe under duplicate, concurrent and retried delivery for the same
    payment reference: the repository's unique constraint decides the race and
    the loser re-reads the winner's row.
    """

    def __init__(
        self,
        *,
        order_port: OrderPort,
        cart_port: CartPort,
        catalog_port: CatalogPort,
        currency: str = "usd",
        reference_locks: KeyedLocks | None = None,
    ):
        self._order_port = order_port
        self._cart_port = cart_port
        self._catalog_port = catalog_port
        self._currency = currency
        self._reference_locks = reference_locks if reference_locks is not None else KeyedLocks()

    def execute(self, command: MaterializeOrderInput) -> MaterializeOrderOutput:
        payment_reference = (command.payment_reference or "").strip()
        user_id = (command.user_id or "").strip()
        if not payment_reference:
            raise MissingReferenceError("Payment reference is required.")
        if not user_id:
            raise MissingUserError("User id is required.")

        with self._reference_locks.hold(payment_reference):
            return self._materialize(payment_reference=payment_reference, user_id=user_id)

    def _materialize(self, *, payment_reference: str, user_id: str) -> MaterializeOrderOutput:
        existing = self._order_port.get_order_by_payment_reference(payment_reference=payment_reference)
        terminal = _terminal_output(existing)
        if terminal is not None:
            return terminal

        cart_lines = self._cart_port.list_cart_lines(user_id=user_id)
        if not cart_lines:
            # A redelivered event after the cart was already consumed lands here.
            logger.info("materialize_order: empty_cart reference=%s user_id=%s", payment_reference, user_id)
            return MaterializeOrderOutput(outcome="empty_cart", order_id=existing.id if existing else None)

        snapshot = build_order_snapshot(
            cart_lines=cart_lines,
            products=self._load_products(cart_lines),
        )
        now = utcnow()

        if existing is None:
            try:
                order = self._order_port.create_order(
                    order_id=str(uuid4()),
                    user_id=user_id,
                    payment_reference=payment_reference,
                    status=ORDER_STATUS_PAID,
                    total_minor=snapshot.total_minor,
                    currency=self._currency,
                    lines=snapshot.lines,
                    created_at=now,
                )
            except OrderAlreadyExistsError:
                logger.info("materialize_order: insert_conflict reference=%s", payment_reference)
                existing = self._order_port.get_order_by_payment_reference(
                    payment_reference=payment_reference,
                )
                if existing is None:
                    raise
                terminal = _terminal_output(existing)
                if terminal is not None:
                    return terminal
                return self._complete(existing=existing, snapshot=snapshot, user_id=user_id)

            self._cart_port.clear_cart(user_id=user_id)
            logger.info(
                "materialize_order: created reference=%s order_id=%s total_minor=%s lines=%s",
                payment_reference,
                order.id,
                order.total_minor,
                len(order.lines),
            )
            return MaterializeOrderOutput(outcome="created", order_id=order.id)

        return self._complete(existing=existing, snapshot=snapshot, user_id=user_id)

    def _complete(self, *, existing: Order, snapshot: OrderSnapshot, user_id: str) -> MaterializeOrderOutput:
        order = self._order_port.update_order(
            complete_order(order=existing, snapshot=snapshot, currency=self._currency, now=utcnow())
        )
        self._cart_port.clear_cart(user_id=user_id)
        logger.info(
            "materialize_order: completed reference=%s order_id=%s total_minor=%s",
            order.payment_reference,
            order.id,
            order.total_minor,
        )
        return MaterializeOrderOutput(outcome="completed", order_id=order.id)

    def _load_products(self, cart_lines: list[CartLine]) -> dict[int, Product]:
        products: dict[int, Product] = {}
        for line in cart_lines:
            if line.product_id in products:
                continue
            product = self._catalog_port.get_product(product_id=line.product_id)
            if product is None:
                raise NotFoundError(f"Product {line.product_id} not found.")
            products[line.product_id] = product
        return products


def _terminal_output(order: Order | None) -> MaterializeOrderOutput | None:
    if order is None:
        return None
    if order.is_paid:
        logger.info("materialize_order: already_paid reference=%s", order.payment_reference)
        return MaterializeOrderOutput(outcome="already_paid", order_id=order.id)
    if order.is_failed:
        # First transition wins: a failed order is never flipped to paid here.
        logger.warning("materialize_order: already_failed reference=%s", order.payment_reference)
        return MaterializeOrderOutput(outcome="already_failed", order_id=order.id)
    return None
