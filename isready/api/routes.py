# isready/api/routes.py
"""
🌐 API ROUTES

Тот же дашборд, что и в боте, но JSON для браузера.
Каждое действие возвращает заказ и ссылку wa.me (если есть).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.base import get_db_session
from isready.api.dependencies import get_current_shop, get_session_gate
from isready.api.schemas import (
    DeliveryDateRequest,
    OrderActionResponse,
    RegisterRequest,
    RegisterResponse,
    StatusUpdateRequest,
)
from isready.schemas import DashboardView, OrderForm, ShopIdentity
from isready.services import view_model
from isready.services.lifecycle import open_dashboard
from isready.services.notifications import HandoffCollector
from isready.services.session_gate import SessionGate

router = APIRouter(prefix="/api")


# ==========================================
# ВХОД / ВЫХОД
# ==========================================

@router.post("/auth/register", response_model=RegisterResponse, status_code=201)
async def register(payload: RegisterRequest, gate: SessionGate = Depends(get_session_gate)):
    shop = await gate.sign_up(payload.shop_name, email=payload.email)

    return RegisterResponse(shop=ShopIdentity.model_validate(shop), api_token=shop.api_token)


@router.post("/auth/logout", status_code=204)
async def logout(
    shop: ShopIdentity = Depends(get_current_shop),
    gate: SessionGate = Depends(get_session_gate),
):
    await gate.sign_out(shop.id)


# ==========================================
# ЗАКАЗЫ
# ==========================================

@router.get("/orders", response_model=DashboardView)
async def list_orders(
    q: str = "",
    shop: ShopIdentity = Depends(get_current_shop),
    session: AsyncSession = Depends(get_db_session),
):
    """Статистика, последние, активные (с поиском) и выполненные."""

    engine = await open_dashboard(session, shop, HandoffCollector())
    return view_model.build_view(engine.state.orders, q)


@router.post("/orders", response_model=OrderActionResponse, status_code=201)
async def create_order(
    form: OrderForm,
    shop: ShopIdentity = Depends(get_current_shop),
    session: AsyncSession = Depends(get_db_session),
):
    collector = HandoffCollector()
    engine = await open_dashboard(session, shop, collector)

    order = await engine.create_order(form)

    return OrderActionResponse(order=order, handoff_uri=collector.last)


@router.post("/orders/{order_id}/status", response_model=OrderActionResponse)
async def update_status(
    order_id: int,
    payload: StatusUpdateRequest,
    shop: ShopIdentity = Depends(get_current_shop),
    session: AsyncSession = Depends(get_db_session),
):
    collector = HandoffCollector()
    engine = await open_dashboard(session, shop, collector)

    order = await engine.advance_status(order_id, payload.status)

    return OrderActionResponse(order=order, handoff_uri=collector.last)


@router.post("/orders/{order_id}/delivery-date", response_model=OrderActionResponse)
async def extend_delivery_date(
    order_id: int,
    payload: DeliveryDateRequest,
    shop: ShopIdentity = Depends(get_current_shop),
    session: AsyncSession = Depends(get_db_session),
):
    collector = HandoffCollector()
    engine = await open_dashboard(session, shop, collector)

    order = await engine.extend_delivery_date(order_id, payload.delivery_date)

    return OrderActionResponse(order=order, handoff_uri=collector.last)
