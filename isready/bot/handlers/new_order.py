# isready/bot/handlers/new_order.py
"""
Мастер "Новый заказ".

Одно поле = один шаг FSM. Ответы копятся в FSM data (Redis или память),
в конце собираем OrderForm и отдаём движку. Обязательны только
имя и телефон клиента, остальное можно пропустить.
"""

from dataclasses import dataclass
from typing import Optional

from aiogram import F, Router, types
from aiogram.filters import Command, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State
from sqlalchemy.ext.asyncio import AsyncSession

import structlog

from isready.bot.handlers.common import load_engine, show_error
from isready.bot.keyboards import handoff_keyboard, wizard_keyboard
from isready.bot.states import NewOrderStates
from isready.bot.utils import order_card_text
from isready.errors import IsReadyError, ValidationError
from isready.schemas import OrderForm, parse_amount, parse_delivery_date
from isready.services.notifications import HandoffCollector

logger = structlog.get_logger()

router = Router()


@dataclass(frozen=True)
class WizardStep:
    field: str
    state: State
    prompt: str
    optional: bool = True


STEPS = [
    # 1/3 - клиент
    WizardStep("customer_name", NewOrderStates.customer_name, "👤 Step 1/3 · Customer name?", optional=False),
    WizardStep("customer_phone", NewOrderStates.customer_phone, "📞 Step 1/3 · Phone number with country code?", optional=False),
    WizardStep("items", NewOrderStates.items, "📦 Step 1/3 · Items (e.g. 2 shirts, 1 blouse)?"),
    # 2/3 - мерки и деньги
    WizardStep("measurements", NewOrderStates.measurements, "📏 Step 2/3 · Measurements?"),
    WizardStep("price", NewOrderStates.price, "💰 Step 2/3 · Total price?"),
    WizardStep("advance_payment", NewOrderStates.advance_payment, "✅ Step 2/3 · Advance paid?"),
    # 3/3 - выдача
    WizardStep("delivery_date", NewOrderStates.delivery_date, "📅 Step 3/3 · Delivery date (YYYY-MM-DD)?"),
    WizardStep("notes", NewOrderStates.notes, "📝 Step 3/3 · Any notes?"),
]

STEPS_BY_STATE = {step.state.state: step for step in STEPS}


def next_step(step: WizardStep) -> Optional[WizardStep]:
    index = STEPS.index(step)
    return STEPS[index + 1] if index + 1 < len(STEPS) else None


def check_field(step: WizardStep, value: str) -> None:
    """Числа и дату проверяем сразу, чтобы не начинать мастер заново."""
    if step.field in ("price", "advance_payment"):
        parse_amount(value, step.field)
    elif step.field == "delivery_date":
        parse_delivery_date(value)


async def ask(message: types.Message, state: FSMContext, step: WizardStep) -> None:
    await state.set_state(step.state)
    await message.answer(step.prompt, reply_markup=wizard_keyboard(step.optional))


# ==========================================
# СТАРТ / ОТМЕНА
# ==========================================

@router.message(Command("new"))
@router.callback_query(F.data == "new_order")
async def start_wizard(event: types.Message | types.CallbackQuery, state: FSMContext):
    await state.clear()

    message = event.message if isinstance(event, types.CallbackQuery) else event
    await message.answer("🧵 <b>New Order</b>")
    await ask(message, state, STEPS[0])

    if isinstance(event, types.CallbackQuery):
        await event.answer()


@router.message(StateFilter(NewOrderStates), Command("cancel"))
async def cancel_by_command(message: types.Message, state: FSMContext):
    await state.clear()
    await message.answer("✖️ New order cancelled. /dashboard")


@router.callback_query(StateFilter(NewOrderStates), F.data == "wizard:cancel")
async def cancel_by_button(query: types.CallbackQuery, state: FSMContext):
    await state.clear()
    await query.message.answer("✖️ New order cancelled. /dashboard")
    await query.answer()


# ==========================================
# ОТВЕТЫ
# ==========================================

@router.callback_query(StateFilter(NewOrderStates), F.data == "wizard:skip")
async def skip_field(query: types.CallbackQuery, session: AsyncSession, state: FSMContext):
    step = STEPS_BY_STATE[await state.get_state()]

    if not step.optional:
        await query.answer("This field is required", show_alert=True)
        return

    await query.answer()
    await advance(query.message, session, state, step, "", query.from_user)


@router.message(StateFilter(NewOrderStates), F.text)
async def receive_field(message: types.Message, session: AsyncSession, state: FSMContext):
    step = STEPS_BY_STATE[await state.get_state()]
    value = message.text.strip()

    if value == "-" and step.optional:
        value = ""

    if not value and not step.optional:
        await message.answer("This field is required", reply_markup=wizard_keyboard(False))
        return

    try:
        check_field(step, value)
    except ValidationError as e:
        await message.answer(f"❌ {e.message}", reply_markup=wizard_keyboard(step.optional))
        return

    await advance(message, session, state, step, value, message.from_user)


async def advance(
    message: types.Message,
    session: AsyncSession,
    state: FSMContext,
    step: WizardStep,
    value: str,
    user: types.User
) -> None:
    """Сохранить ответ и задать следующий вопрос, или создать заказ."""

    await state.update_data(**{step.field: value})

    following = next_step(step)
    if following is not None:
        await ask(message, state, following)
        return

    await submit(message, session, state, user)


async def submit(
    message: types.Message,
    session: AsyncSession,
    state: FSMContext,
    user: types.User
) -> None:
    form = OrderForm(**await state.get_data())

    collector = HandoffCollector()
    engine = await load_engine(message, session, collector, user=user)
    if not engine:
        await state.clear()
        return

    try:
        order = await engine.create_order(form)
    except ValidationError as e:
        # Например отрицательная цена или кривая дата: начинаем заново
        await state.clear()
        await show_error(message, f"{e.message}. Start again: /new")
        return
    except IsReadyError as e:
        await state.clear()
        await show_error(message, e.message)
        return

    logger.info("order_wizard_completed", order_id=order.id, user_id=user.id)

    await state.clear()
    await message.answer(
        f"✅ Order created!\n\n{order_card_text(order)}\n\n📲 Send the confirmation:",
        reply_markup=handoff_keyboard(collector.last),
    )
