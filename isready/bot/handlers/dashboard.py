# isready/bot/handlers/dashboard.py
"""
Экраны владельца мастерской и действия с заказами.

/dashboard, /orders, /history, /search <запрос>
Кнопки: карточка заказа, "Ready", "Completed", "Extend".
"""

from html import escape

from aiogram import F, Router, types
from aiogram.filters import Command, CommandObject, StateFilter
from aiogram.fsm.context import FSMContext
from sqlalchemy.ext.asyncio import AsyncSession

import structlog

from isready.bot.handlers.common import (
    Event,
    callback_order_id,
    load_engine,
    show,
    show_error,
)
from isready.bot.keyboards import (
    dashboard_keyboard,
    handoff_keyboard,
    order_detail_keyboard,
    orders_keyboard,
)
from isready.bot.states import ExtendDateStates
from isready.bot.utils import dashboard_text, order_card_text, orders_list_text
from isready.errors import InvalidTransitionError, IsReadyError, NotFoundError
from isready.services import view_model
from isready.services.lifecycle import OrderLifecycleEngine
from isready.services.notifications import HandoffCollector

logger = structlog.get_logger()

router = Router()


# ==========================================
# ЭКРАНЫ
# ==========================================

async def render_dashboard(event: Event, engine: OrderLifecycleEngine) -> None:
    state = engine.state
    recent = view_model.recent_orders(state.orders)

    await show(
        event,
        dashboard_text(state.shop, state.stats, recent),
        dashboard_keyboard(recent),
    )


async def render_orders(event: Event, engine: OrderLifecycleEngine, query: str = "") -> None:
    """Активные заказы (всё кроме Completed), с поиском."""

    orders = view_model.filter_active(view_model.search(engine.state.orders, query))
    title = f"Active Orders · “{escape(query)}”" if query else "Active Orders"

    await show(
        event,
        orders_list_text(title, orders, "No active orders"),
        orders_keyboard(orders),
    )


async def render_history(event: Event, engine: OrderLifecycleEngine) -> None:
    orders = view_model.filter_completed(engine.state.orders)

    await show(
        event,
        orders_list_text("Completed Orders", orders, "No completed orders yet"),
        orders_keyboard(orders),
    )


@router.message(Command("dashboard"))
@router.callback_query(F.data == "view:dashboard")
async def show_dashboard(event: Event, session: AsyncSession, state: FSMContext):
    await state.clear()
    engine = await load_engine(event, session, HandoffCollector())
    if engine:
        await render_dashboard(event, engine)


@router.message(Command("orders"))
@router.callback_query(F.data == "view:orders")
async def show_orders(event: Event, session: AsyncSession, state: FSMContext):
    await state.clear()
    engine = await load_engine(event, session, HandoffCollector())
    if engine:
        await render_orders(event, engine)


@router.message(Command("history"))
@router.callback_query(F.data == "view:history")
async def show_history(event: Event, session: AsyncSession, state: FSMContext):
    await state.clear()
    engine = await load_engine(event, session, HandoffCollector())
    if engine:
        await render_history(event, engine)


@router.message(Command("search"))
async def cmd_search(
    message: types.Message,
    command: CommandObject,
    session: AsyncSession,
    state: FSMContext
):
    """Поиск по имени или телефону среди активных заказов."""

    await state.clear()
    query = (command.args or "").strip()
    logger.info("orders_searched", user_id=message.from_user.id, query=query)

    engine = await load_engine(message, session, HandoffCollector())
    if engine:
        await render_orders(message, engine, query)


@router.callback_query(F.data.startswith("order:view:"))
async def show_order(query: types.CallbackQuery, session: AsyncSession):
    engine = await load_engine(query, session, HandoffCollector())
    if not engine:
        return

    try:
        order = engine.get_order(callback_order_id(query))
    except NotFoundError as e:
        await show_error(query, e.message)
        return

    await show(query, order_card_text(order), order_detail_keyboard(order))


# ==========================================
# СМЕНА СТАТУСА
# ==========================================

@router.callback_query(F.data.startswith("order:ready:"))
async def mark_ready(query: types.CallbackQuery, session: AsyncSession):
    """In Progress → Ready + кнопка с сообщением клиенту."""

    collector = HandoffCollector()
    engine = await load_engine(query, session, collector)
    if not engine:
        return

    try:
        order = await engine.mark_ready(callback_order_id(query))
    except IsReadyError as e:
        await show_error(query, e.message)
        return

    await show(
        query,
        f"{order_card_text(order)}\n\n📲 Let the customer know it's ready:",
        handoff_keyboard(collector.last),
    )


@router.callback_query(F.data.startswith("order:done:"))
async def mark_completed(query: types.CallbackQuery, session: AsyncSession):
    """Ready → Completed. Клиенту ничего не пишем."""

    engine = await load_engine(query, session, HandoffCollector())
    if not engine:
        return

    try:
        await engine.mark_completed(callback_order_id(query))
    except IsReadyError as e:
        await show_error(query, e.message)
        return

    await render_orders(query, engine)


# ==========================================
# ПЕРЕНОС ДАТЫ ВЫДАЧИ
# ==========================================

@router.callback_query(F.data.startswith("order:extend:"))
async def ask_new_date(query: types.CallbackQuery, session: AsyncSession, state: FSMContext):
    engine = await load_engine(query, session, HandoffCollector())
    if not engine:
        return

    try:
        order = engine.get_order(callback_order_id(query))
    except NotFoundError as e:
        await show_error(query, e.message)
        return

    await state.set_state(ExtendDateStates.waiting_date)
    await state.update_data(order_id=order.id)

    current = order.delivery_date.isoformat() if order.delivery_date else "not set"
    await query.message.answer(
        f"📅 New delivery date for <b>{escape(order.customer_name)}</b>\n"
        f"Current: {current}\n\n"
        f"Send it as YYYY-MM-DD (or /cancel)."
    )
    await query.answer()


@router.message(StateFilter(ExtendDateStates.waiting_date), Command("cancel"))
async def cancel_extend(message: types.Message, state: FSMContext):
    await state.clear()
    await message.answer("Cancelled. /orders")


@router.message(StateFilter(ExtendDateStates.waiting_date), F.text, ~F.text.startswith("/"))
async def receive_new_date(message: types.Message, session: AsyncSession, state: FSMContext):
    data = await state.get_data()

    collector = HandoffCollector()
    engine = await load_engine(message, session, collector)
    if not engine:
        await state.clear()
        return

    try:
        order = await engine.extend_delivery_date(data["order_id"], message.text)
    except (NotFoundError, InvalidTransitionError) as e:
        await state.clear()
        await show_error(message, e.message)
        return
    except IsReadyError as e:
        # Неправильная дата - остаёмся в этом же шаге
        await show_error(message, e.message)
        return

    await state.clear()
    await message.answer(
        f"{order_card_text(order)}\n\n📲 Let the customer know about the new date:",
        reply_markup=handoff_keyboard(collector.last),
    )
