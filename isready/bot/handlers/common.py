# isready/bot/handlers/common.py
"""
Общие помощники обработчиков:
- загрузка движка заказов для текущего пользователя Telegram
- ответ одинаковый для команды и для нажатия кнопки
"""

from typing import Optional, Union

from aiogram import types
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import InlineKeyboardMarkup
from sqlalchemy.ext.asyncio import AsyncSession

from isready.errors import StoreError
from isready.services.lifecycle import OrderLifecycleEngine, open_dashboard
from isready.services.notifications import Opener
from isready.services.session_gate import SessionGate

Event = Union[types.Message, types.CallbackQuery]

NOT_SIGNED_IN_TEXT = (
    "🔒 You are not signed in.\n\n"
    "Send /start to sign in or /register &lt;shop name&gt; to create your shop."
)


async def load_engine(
    event: Event,
    session: AsyncSession,
    opener: Opener,
    user: Optional[types.User] = None,
    gate: Optional[SessionGate] = None
) -> Optional[OrderLifecycleEngine]:
    """
    Движок с загруженными заказами, или None если сессии нет
    (тогда пользователю уже ответили).

    user - кто нажал, если event.from_user это сам бот
    (сообщение бота, на котором была кнопка).
    gate - если дальше в этом апдейте будет вход/выход, движок его услышит.
    """
    user = user or event.from_user
    gate = gate or SessionGate(session)
    shop = await gate.get_session(telegram_id=user.id)

    if shop is None:
        await show(event, NOT_SIGNED_IN_TEXT)
        return None

    try:
        return await open_dashboard(session, shop, opener, gate)
    except StoreError as e:
        await show_error(event, e.message)
        return None


async def show(
    event: Event,
    text: str,
    reply_markup: Optional[InlineKeyboardMarkup] = None
) -> None:
    """Команда → новое сообщение, кнопка → редактируем то же сообщение."""

    if isinstance(event, types.CallbackQuery):
        try:
            await event.message.edit_text(text, reply_markup=reply_markup)
        except TelegramBadRequest as e:
            if "message is not modified" not in str(e):
                raise
        await event.answer()
        return

    await event.answer(text, reply_markup=reply_markup)


async def show_error(event: Event, message: str) -> None:
    """Ошибку показываем всплывашкой на кнопке или сообщением."""

    if isinstance(event, types.CallbackQuery):
        await event.answer(f"❌ {message}", show_alert=True)
        return

    await event.answer(f"❌ {message}")


def callback_order_id(query: types.CallbackQuery) -> int:
    """"order:ready:42" → 42"""
    return int(query.data.rsplit(":", 1)[1])
