"""Настройка сессии базы данных."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Создает асинхронный "движок" SQLAlchemy.

    Args:
        database_url: Строка подключения к базе данных.
        echo: Логировать ли все SQL-запросы.

    Returns:
        Асинхронный движок.
    """
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,  # Проверяет "живо" ли соединение перед использованием
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Создает фабрику асинхронных сессий для указанного движка.
    """
    return async_sessionmaker(
        engine,
        autoflush=False,
        expire_on_commit=False,
        class_=AsyncSession,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Создает недостающие таблицы по метаданным SQLModel."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Зависимость (dependency) для получения сессии базы данных.

    Фабрика сессий создается в lifespan приложения и хранится в app.state.

    Yields:
        Объект асинхронной сессии SQLAlchemy.
    """
    session_factory: async_sessionmaker[AsyncSession] = (
        request.app.state.session_factory
    )
    async with session_factory() as session:
        yield session
