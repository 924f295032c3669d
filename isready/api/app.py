# isready/api/app.py
"""
FastAPI приложение: JSON API дашборда.

Ошибки приложения превращаются в HTTP коды здесь, в одном месте:
    ValidationError  → 422
    NotFoundError    → 404
    NotSignedInError → 401
    StoreError       → 503
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

import structlog

from infrastructure.database.base import close_db, init_db
from isready.api.routes import router as orders_router
from isready.errors import (
    IsReadyError,
    NotFoundError,
    NotSignedInError,
    StoreError,
    ValidationError,
)

logger = structlog.get_logger()

ERROR_STATUS_CODES = {
    ValidationError: 422,
    NotFoundError: 404,
    NotSignedInError: 401,
    StoreError: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Создаём таблицы на старте, закрываем пул на выходе."""

    await init_db()
    yield
    await close_db()


async def handle_app_error(request: Request, exc: IsReadyError) -> JSONResponse:
    status_code = 400
    for error_type, code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            status_code = code
            break

    logger.warning(
        "api_request_failed",
        path=request.url.path,
        status_code=status_code,
        error=exc.message,
        error_type=type(exc).__name__
    )

    return JSONResponse(status_code=status_code, content={"detail": exc.message})


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="Is It Ready? API",
        description="Order tracker for tailoring shops",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_exception_handler(IsReadyError, handle_app_error)
    app.include_router(orders_router)

    @app.get("/health")
    async def health_check():
        """
        Простой endpoint для проверки что приложение живо.

        Пример:
            GET /health
            → {"status": "ok", "service": "isready"}
        """
        return {"status": "ok", "service": "isready"}

    return app


app = create_app()
