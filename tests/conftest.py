"""Конфигурация и фикстуры для тестов Pytest."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from sweet_shop.core.config import Settings
from sweet_shop.db.session import get_db_session
from sweet_shop.main import create_app


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Фикстура для создания асинхронного движка БД для тестов.

    Каждый тест получает собственный файл SQLite, поэтому данные
    тестов не пересекаются.
    """
    async_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'sweets.db'}", echo=False
    )
    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield async_engine

    await async_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Фикстура, создающая фабрику сессий для тестов.
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
        class_=AsyncSession,
    )


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Фикстура, предоставляющая изолированную сессию БД для каждого теста.
    """
    async with session_factory() as db_session:
        yield db_session


@pytest.fixture
def app(session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    """
    Приложение, в котором сессия БД подменена на тестовую.
    """
    test_app = create_app(Settings(DATABASE_URL="sqlite+aiosqlite://"))

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as db_session:
            yield db_session

    test_app.dependency_overrides[get_db_session] = override_get_db_session
    return test_app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP-клиент, работающий с приложением напрямую через ASGI."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
