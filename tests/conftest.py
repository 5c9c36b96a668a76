from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from threading import Lock

import pytest

from shopgo.application.dto.auth import AccessTokenPayload
from shopgo.domain.entities.cart import CartLine, Product
from shopgo.domain.entities.order import Order, OrderLine
from shopgo.domain.entities.user import AuthSession, User
from shopgo.domain.exceptions import DuplicateIdentityError, InvalidTokenError, OrderAlreadyExistsError


class FakeAuthPort:
    def __init__(self):
        self.users: dict[str, User] = {}
        self.sessions: dict[str, AuthSession] = {}

    def get_user_by_id(self, *, user_id: str) -> User | None:
        return self.users.get(user_id)

    def get_user_by_email(self, *, email: str) -> User | None:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    def create_user(
        self,
        *,
        user_id: str,
        email: str,
        password_hash: str,
        display_name: str,
        created_at: datetime,
        updated_at: datetime,
    ) -> User:
        if self.get_user_by_email(email=email) is not None:
            raise DuplicateIdentityError("Email already registered.")
        user = User(
            id=user_id,
            email=email,
            password_hash=password_hash,
            display_name=display_name,
            created_at=created_at,
            updated_at=updated_at,
        )
        self.users[user.id] = user
        return user

    def create_session(
        self,
        *,
        session_id: str,
        user_id: str,
        secret_hash: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> AuthSession:
        session = AuthSession(
            id=session_id,
            user_id=user_id,
            secret_hash=secret_hash,
            expires_at=expires_at,
            created_at=created_at,
        )
        self.sessions[session.id] = session
        return session

    def get_session_by_id(self, *, session_id: str) -> AuthSession | None:
        return self.sessions.get(session_id)

    def delete_session(self, *, session_id: str) -> None:
        self.sessions.pop(session_id, None)

    def delete_expired_sessions(self, *, now: datetime) -> int:
        expired = [session_id for session_id, session in self.sessions.items() if session.expires_at <= now]
        for session_id in expired:
            del self.sessions[session_id]
        return len(expired)


class FakePasswordHasher:
    def hash(self, plain_password: str) -> str:
        return f"hashed::{plain_password}"

    def verify(self, plain_password: str, password_hash: str) -> bool:
        return password_hash == f"hashed::{plain_password}"


class FakeTokenPort:
    def __init__(self):
        self._counter = 0

    def create_access_token(self, *, user_id: str, now: datetime, email: str | None = None):
        self._counter += 1
        return f"access::{user_id}::{self._counter}", now + timedelta(minutes=15)

    def decode_access_token(self, *, token: str):
        parts = token.split("::")
        if len(parts) != 3 or parts[0] != "access":
            raise InvalidTokenError("Invalid access token.")
        return AccessTokenPayload(user_id=parts[1])

    def generate_refresh_secret(self) -> str:
        self._counter += 1
        return f"{self._counter:064x}"

    def refresh_expires_at(self, *, now: datetime) -> datetime:
        return now + timedelta(days=7)


class FakeOrderPort:
    """In-memory order store enforcing one order per payment reference."""

    def __init__(self):
        self.orders: dict[str, Order] = {}
        self.create_calls = 0
        self._lock = Lock()

    def create_order(
        self,
        *,
        order_id: str,
        user_id: str,
        payment_reference: str,
        status: str,
        total_minor: int,
        currency: str,
        lines: tuple[OrderLine, ...],
        created_at: datetime,
    ) -> Order:
        with self._lock:
            self.create_calls += 1
            if any(order.payment_reference == payment_reference for order in self.orders.values()):
                raise OrderAlreadyExistsError(payment_reference)
            order = Order(
                id=order_id,
                user_id=user_id,
                payment_reference=payment_reference,
                status=status,
                total_minor=total_minor,
                currency=currency,
                created_at=created_at,
                updated_at=created_at,
                lines=tuple(lines),
            )
            self.orders[order.id] = order
            return order

    def get_order_by_id(self, *, order_id: str) -> Order | None:
        with self._lock:
            return self.orders.get(order_id)

    def get_order_by_payment_reference(self, *, payment_reference: str) -> Order | None:
        with self._lock:
            for order in self.orders.values():
                if order.payment_reference == payment_reference:
                    return order
            return None

    def update_order(self, order: Order) -> Order:
        with self._lock:
            self.orders[order.id] = order
            return order

    def list_orders_by_user(self, *, user_id: str) -> list[Order]:
        with self._lock:
            return [order for order in self.orders.values() if order.user_id == user_id]

    def seed(self, **overrides) -> Order:
        now = datetime.now(timezone.utc)
        values = {
            "id": "order-1",
            "user_id": "user-1",
            "payment_reference": "pi_1",
            "status": "pending",
            "total_minor": 0,
            "currency": "",
            "created_at": now,
            "updated_at": now,
            "lines": (),
        }
        values.update(overrides)
        order = Order(**values)
        self.orders[order.id] = order
        return order


class FakeCatalogPort:
    def __init__(self, products: list[Product] | None = None):
        self.products = {product.id: product for product in products or []}
        self.calls = 0

    def get_product(self, *, product_id: int) -> Product | None:
        self.calls += 1
        return self.products.get(product_id)


class FakeCartPort:
    def __init__(self, catalog: FakeCatalogPort):
        self._catalog = catalog
        self.items: dict[str, list[tuple[int, int]]] = {}
        self.clear_calls: list[str] = []
        self._lock = Lock()

    def add(self, user_id: str, product_id: int, quantity: int) -> None:
        self.items.setdefault(user_id, []).append((product_id, quantity))

    def list_cart_lines(self, *, user_id: str) -> list[CartLine]:
        with self._lock:
            items = list(self.items.get(user_id, []))
        lines = []
        for product_id, quantity in items:
            product = self._catalog.get_product(product_id=product_id)
            if product is None:
                continue
            lines.append(
                CartLine(
                    product_id=product_id,
                    quantity=quantity,
                    unit_price=product.price,
                    title=product.title,
                    image_url=product.image_url,
                )
            )
        return lines

    def clear_cart(self, *, user_id: str) -> None:
        with self._lock:
            self.clear_calls.append(user_id)
            self.items.pop(user_id, None)


def make_product(product_id: int, price: str, title: str | None = None) -> Product:
    return Product(
        id=product_id,
        title=title or f"Product {product_id}",
        price=Decimal(price),
        image_url=f"https://img.example/{product_id}.jpg",
    )


def expire(session: AuthSession) -> AuthSession:
    return replace(session, expires_at=datetime.now(timezone.utc) - timedelta(seconds=1))


@pytest.fixture
def auth_port() -> FakeAuthPort:
    return FakeAuthPort()


@pytest.fixture
def password_hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


@pytest.fixture
def token_port() -> FakeTokenPort:
    return FakeTokenPort()


@pytest.fixture
def order_port() -> FakeOrderPort:
    return FakeOrderPort()


@pytest.fixture
def catalog_port() -> FakeCatalogPort:
    return FakeCatalogPort(
        [
            make_product(1, "19.99", title="Backpack"),
            make_product(2, "5.00", title="T-shirt"),
        ]
    )


@pytest.fixture
def cart_port(catalog_port: FakeCatalogPort) -> FakeCartPort:
    return FakeCartPort(catalog_port)
