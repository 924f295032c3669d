# infrastructure/database/repositories.py
"""
Repository паттерн.

Вместо того чтобы писать:
    session.execute(select(...))
    session.commit()
везде в коде, мы создаем методы:
    repo.select_all(shop_id)
    repo.insert(shop_id, ...)

Любая ошибка SQLAlchemy откатывается и превращается в StoreError,
выше по стеку никто не знает про SQLAlchemy.
"""

import secrets
from typing import List, Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from isready.errors import StoreError
from .models import Order, Shop

logger = structlog.get_logger()


# Поля, которые можно менять после создания заказа
UPDATABLE_ORDER_FIELDS = frozenset({"status", "delivery_date"})


# ==========================================
# REPOSITORY: Order (работа с заказами)
# ==========================================

class OrderRepository:
    """
    Репозиторий заказов.
    Каждый метод принимает shop_id: чужие заказы не видны и не меняются.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, shop_id: int, **fields) -> Order:
        """
        Создать заказ. id и created_at назначает БД.

        Пример:
            order = await repo.insert(
                1,
                customer_name="John Doe",
                customer_phone="+91 98765-43210",
                status=OrderStatus.IN_PROGRESS,
            )
        """
        order = Order(shop_id=shop_id, **fields)
        self.session.add(order)

        try:
            await self.session.commit()
            await self.session.refresh(order)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("order_insert_failed", shop_id=shop_id, error=str(e))
            raise StoreError("Error creating order") from e

        logger.info("order_inserted", shop_id=shop_id, order_id=order.id)

        return order

    async def update_fields(self, shop_id: int, order_id: int, **fields) -> None:
        """
        Обновить status и/или delivery_date.

        Пример:
            await repo.update_fields(1, 42, status=OrderStatus.READY)
        """
        unknown = set(fields) - UPDATABLE_ORDER_FIELDS
        if unknown or not fields:
            raise ValueError(f"Order fields cannot be updated: {sorted(unknown) or 'nothing given'}")

        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.shop_id == shop_id)
            .values(**fields)
        )

        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("order_update_failed", shop_id=shop_id, order_id=order_id, error=str(e))
            raise StoreError("Error updating order") from e

        if result.rowcount == 0:
            raise StoreError(f"Order {order_id} was not updated")

        logger.info("order_updated", shop_id=shop_id, order_id=order_id, fields=sorted(fields))

    async def select_all(self, shop_id: int) -> List[Order]:
        """Все заказы мастерской, новые сверху."""

        stmt = (
            select(Order)
            .where(Order.shop_id == shop_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )

        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("orders_fetch_failed", shop_id=shop_id, error=str(e))
            raise StoreError("Error loading orders") from e

        return list(result.scalars().all())


# ==========================================
# REPOSITORY: Shop (учётные записи мастерских)
# ==========================================

class ShopRepository:
    """Репозиторий мастерских."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        shop_name: Optional[str],
        telegram_id: Optional[int] = None,
        email: Optional[str] = None
    ) -> Shop:
        """Создать мастерскую со свежим API токеном. Сразу signed_in."""

        shop = Shop(
            shop_name=shop_name,
            telegram_id=telegram_id,
            email=email,
            api_token=secrets.token_urlsafe(32),
            signed_in=True,
        )
        self.session.add(shop)

        try:
            await self.session.commit()
            await self.session.refresh(shop)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("shop_create_failed", telegram_id=telegram_id, error=str(e))
            raise StoreError("Error creating shop") from e

        logger.info("shop_created", shop_id=shop.id, telegram_id=telegram_id)

        return shop

    async def get_by_id(self, shop_id: int) -> Optional[Shop]:
        return await self._first(select(Shop).where(Shop.id == shop_id))

    async def get_by_telegram_id(self, telegram_id: int) -> Optional[Shop]:
        return await self._first(select(Shop).where(Shop.telegram_id == telegram_id))

    async def get_by_token(self, api_token: str) -> Optional[Shop]:
        return await self._first(select(Shop).where(Shop.api_token == api_token))

    async def set_signed_in(self, shop_id: int, signed_in: bool) -> None:
        stmt = update(Shop).where(Shop.id == shop_id).values(signed_in=signed_in)

        try:
            await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("shop_session_update_failed", shop_id=shop_id, error=str(e))
            raise StoreError("Error updating session") from e

    async def _first(self, stmt) -> Optional[Shop]:
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("shop_fetch_failed", error=str(e))
            raise StoreError("Error loading shop") from e

        return result.scalars().first()
