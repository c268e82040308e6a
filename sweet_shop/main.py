"""Главный файл приложения. Точка входа."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sweet_shop.core.config import Settings, settings
from sweet_shop.core.logging_config import setup_logging
from sweet_shop.db.session import create_engine, create_session_factory, create_tables
from sweet_shop.handlers import health, sweets
from sweet_shop.handlers.errors import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Контекстный менеджер для управления жизненным циклом приложения.

    Движок БД и фабрика сессий принадлежат приложению и хранятся
    в app.state; хендлеры получают сессию через зависимость.
    """
    app_settings: Settings = app.state.settings
    logging.info("--- LIFESPAN START ---")

    logging.info("1. Creating database engine and session factory...")
    engine = create_engine(app_settings.database_url, echo=app_settings.DB_ECHO)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    if app_settings.CREATE_TABLES_ON_STARTUP:
        logging.info("2. Creating missing tables...")
        await create_tables(engine)

    logging.info("--- LIFESPAN STARTUP COMPLETE. APP IS READY. ---")

    yield

    logging.info("--- LIFESPAN SHUTDOWN ---")
    await app.state.engine.dispose()
    logging.info("--- LIFESPAN SHUTDOWN COMPLETE ---")


def create_app(app_settings: Settings = settings) -> FastAPI:
    """
    Создает и настраивает приложение FastAPI.

    Args:
        app_settings: Настройки приложения.

    Returns:
        Настроенное приложение.
    """
    setup_logging(app_settings.LOG_LEVEL)

    app = FastAPI(title="Sweet Shop API", lifespan=lifespan)
    app.state.settings = app_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(
        sweets.router, prefix=f"{app_settings.API_PREFIX}/sweets", tags=["sweets"]
    )
    app.include_router(health.router, tags=["health"])
    return app


# --- Приложение FastAPI ---
app = create_app()


# --- Точка входа для локального запуска ---
if __name__ == "__main__":
    uvicorn.run(
        "sweet_shop.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
