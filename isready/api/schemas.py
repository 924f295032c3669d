# isready/api/schemas.py
"""Тела запросов и ответов JSON API."""

from typing import Optional

from pydantic import BaseModel

from infrastructure.database.models import OrderStatus
from isready.schemas import OrderSnapshot, ShopIdentity


class RegisterRequest(BaseModel):
    shop_name: str
    email: Optional[str] = None


class RegisterResponse(BaseModel):
    shop: ShopIdentity
    api_token: str


class StatusUpdateRequest(BaseModel):
    status: OrderStatus


class DeliveryDateRequest(BaseModel):
    delivery_date: str = ""


class OrderActionResponse(BaseModel):
    """
    Результат действия. handoff_uri открывает клиентское приложение
    (window.open), сервер ничего не отправляет.
    """
    order: OrderSnapshot
    handoff_uri: Optional[str] = None
