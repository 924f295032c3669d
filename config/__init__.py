"""Конфигурация приложения."""

from .settings import config, Settings

__all__ = ["config", "Settings"]
