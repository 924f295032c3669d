# infrastructure/database/models.py
"""
Здесь мы описываем структуру таблиц в базе данных.
SQLAlchemy автоматически создаст эти таблицы при первом запуске.

Каждый класс = одна таблица в БД
Каждое поле класса = один столбец в таблице
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import (
    BigInteger,    # Большие целые числа (для Telegram ID)
    Boolean,
    Column,
    Date,
    DateTime,
    DECIMAL,       # Деньги
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from infrastructure.database.base import Base


# ==========================================
# ENUMS (Перечисления)
# ==========================================

class OrderStatus(str, PyEnum):
    """
    Статусы заказа.

    IN_PROGRESS → READY → COMPLETED, обратного пути нет.
    """
    IN_PROGRESS = "In Progress"
    # Мастер шьёт
    READY = "Ready"
    # Можно забирать
    COMPLETED = "Completed"
    # Клиент забрал


# ==========================================
# МОДЕЛЬ: Shop (Таблица shops)
# ==========================================

class Shop(Base):
    """
    Таблица мастерских.
    Одна мастерская = одна учётная запись владельца.
    """
    __tablename__ = "shops"

    id = Column(Integer, primary_key=True, autoincrement=True)

    shop_name = Column(String, nullable=True)
    # Название, подставляется в сообщения клиентам

    email = Column(String, nullable=True, unique=True)

    telegram_id = Column(
        BigInteger,
        nullable=True,
        unique=True,
        index=True
    )
    # Владелец заходит через бота

    api_token = Column(
        String(64),
        nullable=False,
        unique=True,
        index=True
    )
    # Ключ для JSON API (заголовок X-Shop-Token)

    signed_in = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    orders = relationship("Order", back_populates="shop")


# ==========================================
# МОДЕЛЬ: Order (Таблица orders)
# ==========================================

class Order(Base):
    """
    Таблица заказов.

    id | shop_id | customer_name | customer_phone  | price  | advance | status      | created_at
    1  | 1       | John Doe      | +91 98765-43210 | 1500   | 500     | In Progress | 2026-10-18
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)

    shop_id = Column(
        Integer,
        ForeignKey("shops.id"),
        nullable=False,
        index=True
    )
    # Чей заказ. Все запросы фильтруются по этому полю

    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    # С кодом страны, используется как есть для ссылки wa.me

    items = Column(Text, nullable=False, default="")
    measurements = Column(Text, nullable=False, default="")
    notes = Column(Text, nullable=False, default="")

    price = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0"))
    advance_payment = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0"))

    delivery_date = Column(Date, nullable=True)
    # None = "Not set"

    status = Column(
        Enum(OrderStatus, values_callable=lambda statuses: [s.value for s in statuses]),
        default=OrderStatus.IN_PROGRESS,
        nullable=False,
        index=True
    )

    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True  # Сортируем по дате
    )

    shop = relationship("Shop", back_populates="orders")
