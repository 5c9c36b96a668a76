from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from conftest import FakeCatalogPort, make_product
from shopgo.domain.entities.order import OrderLine
from shopgo.domain.exceptions import DuplicateIdentityError, OrderAlreadyExistsError, StorageFailureError
from shopgo.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from shopgo.infrastructure.db.repositories.cart_repository import SqlCartRepository
from shopgo.infrastructure.db.repositories.orders_repository import SqlOrdersRepository


NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


class _FakeResult:
    def __init__(self, rows: list[dict] | None = None, rowcount: int = 0):
        self._rows = rows or []
        self.rowcount = rowcount

    def mappings(self) -> "_FakeResult":
        return self

    def first(self):
        return self._rows[0] if self._rows else None

    def one(self):
        assert len(self._rows) == 1
        return self._rows[0]

    def all(self):
        return list(self._rows)


class _FakeConnection:
    def __init__(self, engine: "_FakeEngine"):
        self._engine = engine

    def __enter__(self) -> "_FakeConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        _ = (exc_type, exc, tb)
        return None

    def execute(self, sql, params=None):
        self._engine.statements.append((" ".join(str(sql).split()), params))
        if self._engine.error is not None:
            raise self._engine.error
        if self._engine.results:
            return self._engine.results.pop(0)
        return _FakeResult()


class _FakeEngine:
    def __init__(self, results: list[_FakeResult] | None = None, error: Exception | None = None):
        self.results = list(results or [])
        self.error = error
        self.statements: list[tuple[str, object]] = []

    def connect(self) -> _FakeConnection:
        return _FakeConnection(self)

    def begin(self) -> _FakeConnection:
        return _FakeConnection(self)


def _order_row(**overrides) -> dict:
    row = {
        "id": "order-1",
        "user_id": "user-1",
        "payment_reference": "pi_1",
        "status": "paid",
        "total_minor": 4498,
        "currency": "usd",
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


def test_get_user_by_email_is_exact_match():
    engine = _FakeEngine([_FakeResult([])])

    assert SqlAccountsRepository(engine).get_user_by_email(email="Alice@Example.com") is None

    sql, params = engine.statements[0]
    assert "WHERE email = :email" in sql
    assert "lower(" not in sql
    assert params == {"email": "Alice@Example.com"}


def test_create_user_unique_violation_is_duplicate_identity():
    engine = _FakeEngine(error=IntegrityError("INSERT", {}, Exception("duplicate key")))

    with pytest.raises(DuplicateIdentityError):
        SqlAccountsRepository(engine).create_user(
            user_id="user-1",
            email="alice@example.com",
            password_hash="hash",
            display_name="Alice",
            created_at=NOW,
            updated_at=NOW,
        )


def test_database_errors_become_storage_failures():
    engine = _FakeEngine(error=OperationalError("SELECT", {}, Exception("connection refused")))

    with pytest.raises(StorageFailureError):
        SqlAccountsRepository(engine).get_session_by_id(session_id="3f2b8c1e-0a4d-4c55-9b7e-2d1f00000000")


def test_delete_expired_sessions_returns_rowcount():
    engine = _FakeEngine([_FakeResult(rowcount=3)])

    deleted = SqlAccountsRepository(engine).delete_expired_sessions(now=NOW)

    assert deleted == 3
    assert "WHERE expires_at <= :now" in engine.statements[0][0]


def test_create_order_inserts_lines_with_positions():
    engine = _FakeEngine([_FakeResult([_order_row()])])
    lines = (
        OrderLine(product_id=1, title="Backpack", unit_price_minor=1999, quantity=2, image_url="a"),
        OrderLine(product_id=2, title="T-shirt", unit_price_minor=500, quantity=1, image_url="b"),
    )

    order = SqlOrdersRepository(engine).create_order(
        order_id="order-1",
        user_id="user-1",
        payment_reference="pi_1",
        status="paid",
        total_minor=4498,
        currency="usd",
        lines=lines,
        created_at=NOW,
    )

    insert_sql, _ = engine.statements[0]
    assert "ON CONFLICT (payment_reference) DO NOTHING" in insert_sql
    assert "RETURNING" in insert_sql
    _, line_params = engine.statements[1]
    assert [params["position"] for params in line_params] == [0, 1]
    assert order.lines == lines


def test_create_order_conflict_raises_already_exists():
    engine = _FakeEngine([_FakeResult([])])

    with pytest.raises(OrderAlreadyExistsError):
        SqlOrdersRepository(engine).create_order(
            order_id="order-2",
            user_id="user-1",
            payment_reference="pi_1",
            status="paid",
            total_minor=100,
            currency="usd",
            lines=(),
            created_at=NOW,
        )
    assert len(engine.statements) == 1


def test_get_order_by_reference_loads_lines_in_order():
    line_rows = [
        {"product_id": 1, "title": "Backpack", "unit_price_minor": 1999, "quantity": 2, "image_url": "a"},
        {"product_id": 2, "title": "T-shirt", "unit_price_minor": 500, "quantity": 1, "image_url": None},
    ]
    engine = _FakeEngine([_FakeResult([_order_row()]), _FakeResult(line_rows)])

    order = SqlOrdersRepository(engine).get_order_by_payment_reference(payment_reference="pi_1")

    assert order.status == "paid"
    assert [line.product_id for line in order.lines] == [1, 2]
    assert order.lines[1].image_url == ""
    assert "ORDER BY position ASC" in engine.statements[1][0]


def test_cart_skips_products_missing_from_catalog():
    engine = _FakeEngine([_FakeResult([{"product_id": 1, "quantity": 2}, {"product_id": 99, "quantity": 1}])])
    repo = SqlCartRepository(engine, catalog_port=FakeCatalogPort([make_product(1, "19.99")]))

    lines = repo.list_cart_lines(user_id="user-1")

    assert [(line.product_id, line.quantity) for line in lines] == [(1, 2)]
    assert str(lines[0].unit_price) == "19.99"


def test_schema_enforces_one_order_per_payment_reference():
    from shopgo.infrastructure.db.engine import Base
    from shopgo.infrastructure.db.models import accounts, cart, orders  # noqa: F401

    tables = Base.metadata.tables
    assert {"public.users", "public.auth_sessions", "public.orders", "public.order_lines", "public.cart_items"} <= set(tables)
    constraint_names = {constraint.name for constraint in tables["public.orders"].constraints}
    assert "uq_orders_payment_reference" in constraint_names
    assert "password_hash" in tables["public.users"].columns
    assert "secret_hash" in tables["public.auth_sessions"].columns
