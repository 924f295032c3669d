# isready/bot/handlers/auth.py
"""
Вход и регистрация мастерской.

/start             - войти (или подсказка как зарегистрироваться)
/register <name>   - создать мастерскую
/logout            - выйти
"""

from html import escape

from aiogram import Router, types
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.fsm.context import FSMContext
from sqlalchemy.ext.asyncio import AsyncSession

import structlog

from isready.errors import IsReadyError, NotSignedInError
from isready.bot.handlers.dashboard import render_dashboard
from isready.bot.handlers.common import load_engine, show_error
from isready.services.notifications import HandoffCollector
from isready.services.session_gate import SessionGate

logger = structlog.get_logger()

router = Router()


@router.message(CommandStart())
async def cmd_start(message: types.Message, session: AsyncSession, state: FSMContext):
    """Войти. Если мастерской ещё нет - объясняем как зарегистрироваться."""

    await state.clear()
    gate = SessionGate(session)

    try:
        shop = await gate.sign_in(message.from_user.id)
    except NotSignedInError:
        await message.answer(
            "👋 <b>Is It Ready?</b>\n\n"
            "Track tailoring orders and let customers know on WhatsApp "
            "when their clothes are ready.\n\n"
            "Create your shop: /register &lt;shop name&gt;"
        )
        return

    logger.info("shop_signed_in", shop_id=shop.id)

    engine = await load_engine(message, session, HandoffCollector())
    if engine:
        await render_dashboard(message, engine)


@router.message(Command("register"))
async def cmd_register(message: types.Message, command: CommandObject, session: AsyncSession):
    gate = SessionGate(session)

    try:
        shop = await gate.sign_up(command.args or "", telegram_id=message.from_user.id)
    except IsReadyError as e:
        await show_error(message, e.message)
        return

    await message.answer(
        f"✅ Shop <b>{escape(shop.shop_name)}</b> created!\n\n"
        f"API token (keep it secret):\n<code>{shop.api_token}</code>\n\n"
        f"Open the dashboard: /dashboard"
    )


@router.message(Command("logout"))
async def cmd_logout(message: types.Message, session: AsyncSession, state: FSMContext):
    """Выйти. Движок этого апдейта подписан на gate и сбрасывает заказы."""

    await state.clear()

    gate = SessionGate(session)
    engine = await load_engine(message, session, HandoffCollector(), gate=gate)
    if not engine:
        return

    shop_id = engine.state.shop.id
    await gate.sign_out(shop_id)

    logger.info("shop_signed_out", shop_id=shop_id, orders_cleared=not engine.state.orders)
    await message.answer("👋 Signed out. /start to sign in again.")
