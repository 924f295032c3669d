# isready/errors.py
"""
Ошибки приложения.

Ни одна из них не фатальна: обработчик бота или API ловит её,
показывает сообщение и возвращает управление пользователю.
"""


class IsReadyError(Exception):
    """Базовая ошибка. `message` можно показывать пользователю."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(IsReadyError):
    """Не хватает обязательных данных. До хранилища дело не доходит."""


class InvalidTransitionError(ValidationError):
    """Недопустимая смена статуса (например Completed → Ready)."""


class NotFoundError(IsReadyError):
    """Заказа нет в текущем загруженном списке."""


class StoreError(IsReadyError):
    """Ошибка сети или БД при чтении/записи."""


class NotSignedInError(IsReadyError):
    """Операция без активной сессии мастерской."""
