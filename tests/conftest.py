"""Общие фикстуры тестов."""

from datetime import datetime, timedelta
from decimal import Decimal
from itertools import count
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from infrastructure.database.base import Base
from infrastructure.database import models  # noqa: F401
from infrastructure.database.models import OrderStatus
from isready.errors import StoreError
from isready.schemas import OrderSnapshot, ShopIdentity

SHOP = ShopIdentity(id=1, shop_name="Stitch Perfect")


def make_order(order_id: int = 1, **overrides) -> OrderSnapshot:
    fields = {
        "id": order_id,
        "shop_id": SHOP.id,
        "customer_name": "John Doe",
        "customer_phone": "+91 98765-43210",
        "items": "2 shirts",
        "price": Decimal("1500"),
        "advance_payment": Decimal("500"),
        "status": OrderStatus.IN_PROGRESS,
        "created_at": datetime(2026, 10, 1, 12, 0) - timedelta(minutes=order_id),
    }
    fields.update(overrides)
    return OrderSnapshot(**fields)


class FakeOrderStore:
    """OrderRepository в памяти, записывает все вызовы."""

    def __init__(self, rows=None):
        self.rows = {row.id: dict(row.model_dump()) for row in rows or []}
        self.calls = []
        self.fail_on = set()
        self._ids = count(start=max(self.rows, default=0) + 1)

    async def insert(self, shop_id, **fields):
        self.calls.append(("insert", shop_id, fields))
        if "insert" in self.fail_on:
            raise StoreError("Error creating order")

        row = {
            "id": next(self._ids),
            "shop_id": shop_id,
            "created_at": datetime(2026, 10, 18, 9, 0),
            **fields,
        }
        self.rows[row["id"]] = row
        return SimpleNamespace(**row)

    async def update_fields(self, shop_id, order_id, **fields):
        self.calls.append(("update", shop_id, order_id, fields))
        if "update" in self.fail_on:
            raise StoreError("Error updating order")

        self.rows[order_id].update(fields)

    async def select_all(self, shop_id):
        self.calls.append(("select", shop_id))
        if "select" in self.fail_on:
            raise StoreError("Error loading orders")

        rows = [r for r in self.rows.values() if r["shop_id"] == shop_id]
        rows.sort(key=lambda r: (r["created_at"], r["id"]), reverse=True)
        return [SimpleNamespace(**r) for r in rows]

    def calls_of(self, kind):
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def shop():
    return SHOP


@pytest.fixture
async def session_maker():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session
