from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import text

from infrastructure.database.models import Order, OrderStatus
from infrastructure.database.repositories import OrderRepository, ShopRepository
from isready.errors import NotSignedInError, StoreError, ValidationError
from isready.services.session_gate import SessionGate


async def make_shop(session, name="Stitch Perfect", telegram_id=None):
    return await ShopRepository(session).create(name, telegram_id=telegram_id)


async def test_insert_assigns_id_and_created_at(db_session):
    shop = await make_shop(db_session)
    repo = OrderRepository(db_session)

    order = await repo.insert(
        shop.id,
        customer_name="John Doe",
        customer_phone="+91 98765-43210",
        price=Decimal("1500"),
        delivery_date=date(2026, 10, 25),
        status=OrderStatus.IN_PROGRESS,
    )

    assert order.id is not None
    assert order.created_at is not None
    assert order.items == ""
    assert order.advance_payment == Decimal("0")


async def test_select_all_is_scoped_and_newest_first(db_session):
    shop = await make_shop(db_session)
    other = await make_shop(db_session, name="Other")

    db_session.add_all([
        Order(shop_id=shop.id, customer_name="Old", customer_phone="1", created_at=datetime(2026, 1, 1)),
        Order(shop_id=shop.id, customer_name="New", customer_phone="2", created_at=datetime(2026, 3, 1)),
        Order(shop_id=other.id, customer_name="Theirs", customer_phone="3", created_at=datetime(2026, 2, 1)),
    ])
    await db_session.commit()

    orders = await OrderRepository(db_session).select_all(shop.id)

    assert [o.customer_name for o in orders] == ["New", "Old"]
    assert orders[0].status == OrderStatus.IN_PROGRESS


async def test_update_fields_changes_status_and_date(db_session):
    shop = await make_shop(db_session)
    repo = OrderRepository(db_session)
    order = await repo.insert(shop.id, customer_name="Amy", customer_phone="555", status=OrderStatus.IN_PROGRESS)

    await repo.update_fields(shop.id, order.id, status=OrderStatus.READY, delivery_date=date(2026, 11, 2))

    (fresh,) = await repo.select_all(shop.id)
    await db_session.refresh(fresh)
    assert fresh.status == OrderStatus.READY
    assert fresh.delivery_date == date(2026, 11, 2)


async def test_update_fields_rejects_other_columns(db_session):
    repo = OrderRepository(db_session)

    with pytest.raises(ValueError):
        await repo.update_fields(1, 1, price=Decimal("1"))

    with pytest.raises(ValueError):
        await repo.update_fields(1, 1)


async def test_update_of_another_shops_order_fails(db_session):
    shop = await make_shop(db_session)
    other = await make_shop(db_session, name="Other")
    repo = OrderRepository(db_session)
    order = await repo.insert(shop.id, customer_name="Amy", customer_phone="555", status=OrderStatus.IN_PROGRESS)

    with pytest.raises(StoreError):
        await repo.update_fields(other.id, order.id, status=OrderStatus.READY)


async def test_driver_errors_reach_callers_without_sql(db_session):
    shop = await make_shop(db_session)
    await db_session.execute(text("DROP TABLE orders"))
    await db_session.commit()

    with pytest.raises(StoreError) as exc:
        await OrderRepository(db_session).select_all(shop.id)

    assert exc.value.message == "Error loading orders"
    assert exc.value.__cause__ is not None


# ==========================================
# SessionGate
# ==========================================

async def test_sign_up_opens_session(db_session):
    gate = SessionGate(db_session)
    events = []
    gate.on_session_change(lambda shop_id, identity: events.append((shop_id, identity)))

    shop = await gate.sign_up("Stitch Perfect", telegram_id=42)

    identity = await gate.get_session(telegram_id=42)
    assert identity.id == shop.id
    assert identity.shop_name == "Stitch Perfect"
    assert await gate.get_session(token=shop.api_token) == identity
    assert events == [(shop.id, identity)]


async def test_sign_up_requires_shop_name(db_session):
    with pytest.raises(ValidationError):
        await SessionGate(db_session).sign_up("  ", telegram_id=42)


async def test_sign_up_twice_for_same_account_fails(db_session):
    gate = SessionGate(db_session)
    await gate.sign_up("Stitch Perfect", telegram_id=42)

    with pytest.raises(ValidationError):
        await gate.sign_up("Again", telegram_id=42)


async def test_sign_out_and_back_in(db_session):
    gate = SessionGate(db_session)
    shop = await gate.sign_up("Stitch Perfect", telegram_id=42)
    events = []
    unsubscribe = gate.on_session_change(lambda shop_id, identity: events.append(identity))

    await gate.sign_out(shop.id)
    db_session.expire_all()
    assert await gate.get_session(telegram_id=42) is None

    await gate.sign_in(42)
    db_session.expire_all()
    assert (await gate.get_session(telegram_id=42)).id == shop.id

    unsubscribe()
    await gate.sign_out(shop.id)

    assert events[0] is None
    assert events[1].id == shop.id
    assert len(events) == 2


async def test_sign_in_unknown_account(db_session):
    with pytest.raises(NotSignedInError):
        await SessionGate(db_session).sign_in(404)


async def test_get_session_without_credentials(db_session):
    assert await SessionGate(db_session).get_session() is None
