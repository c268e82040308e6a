"""Сервисный слой для управления сладостями."""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError
from sqlalchemy import Update, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from sweet_shop.db.models import MAX_STOCK, Sweet, utcnow
from sweet_shop.schemas.sweet import SweetCreate
from sweet_shop.services.exceptions import (
    InsufficientStock,
    InvalidQuantity,
    InvalidSweetId,
    SweetNotFound,
    SweetValidationError,
)
from sweet_shop.services.query_builder import SearchFilters, build_search_statement

SWEET_COLUMNS = tuple(Sweet.__table__.columns)  # type: ignore[attr-defined]


@dataclass(frozen=True)
class PurchaseResult:
    """Результат покупки: обновленная сладость и сводка."""

    sweet: Sweet
    purchased_quantity: int
    total_cost: float
    remaining_stock: int


@dataclass(frozen=True)
class RestockResult:
    """Результат пополнения: обновленная сладость и сводка."""

    sweet: Sweet
    restocked_quantity: int
    previous_stock: int
    new_stock: int


def parse_sweet_id(raw_id: str) -> uuid.UUID:
    """
    Преобразует строку из URL в идентификатор сладости.

    Raises:
        InvalidSweetId: Если строка не является UUID.
    """
    try:
        return uuid.UUID(raw_id)
    except (TypeError, ValueError, AttributeError) as e:
        raise InvalidSweetId() from e


def validate_sweet_payload(payload: Any) -> SweetCreate:
    """
    Проверяет данные новой сладости до сохранения в базу.

    Args:
        payload: Тело запроса в виде словаря.

    Returns:
        Проверенная схема SweetCreate.

    Raises:
        SweetValidationError: Если обязательные поля отсутствуют или
                              цена/количество отрицательные.
    """
    try:
        return SweetCreate.model_validate(payload if payload is not None else {})
    except ValidationError as e:
        errors = []
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "body"
            errors.append(f"{field}: {error['msg']}")
        raise SweetValidationError(errors) from e


def validate_quantity(value: Any) -> int:
    """
    Проверяет количество для покупки или пополнения.

    Допускаются целые числа и целочисленные float (5.0) больше нуля
    и не больше MAX_STOCK.

    Raises:
        InvalidQuantity: Для bool, строк, None, нуля, отрицательных,
                         дробных и слишком больших значений.
    """
    if isinstance(value, bool):
        raise InvalidQuantity()
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value <= 0 or value > MAX_STOCK:
        raise InvalidQuantity()
    return value


async def create_sweet(session: AsyncSession, payload: Any) -> Sweet:
    """
    Создает новую сладость в базе данных.

    Args:
        session: Сессия базы данных.
        payload: Непроверенные данные из тела запроса.

    Returns:
        Созданный объект сладости.
    """
    data = validate_sweet_payload(payload)
    db_sweet = Sweet(**data.model_dump())
    session.add(db_sweet)
    await session.commit()
    await session.refresh(db_sweet)
    logging.info("Created sweet %s (%s)", db_sweet.id, db_sweet.name)
    return db_sweet


async def get_all_sweets(session: AsyncSession) -> Sequence[Sweet]:
    """
    Возвращает все сладости, новые первыми.
    """
    statement = select(Sweet).order_by(col(Sweet.created_at).desc())
    result = await session.execute(statement)
    return result.scalars().all()


async def search_sweets(session: AsyncSession, filters: SearchFilters) -> Sequence[Sweet]:
    """
    Ищет сладости по фильтрам.

    Args:
        session: Сессия базы данных.
        filters: Необязательные фильтры имени, категории и цены.

    Returns:
        Подходящие сладости, новые первыми.
    """
    result = await session.execute(build_search_statement(filters))
    return result.scalars().all()


async def get_sweet(session: AsyncSession, sweet_id: uuid.UUID) -> Sweet:
    """
    Находит сладость по ID.

    Raises:
        SweetNotFound: Если сладость не найдена.
    """
    db_sweet = await session.get(Sweet, sweet_id)
    if db_sweet is None:
        raise SweetNotFound()
    return db_sweet


async def delete_sweet(session: AsyncSession, sweet_id: uuid.UUID) -> Sweet:
    """
    Удаляет сладость и возвращает удаленную запись.

    Raises:
        SweetNotFound: Если сладость не найдена.
    """
    db_sweet = await get_sweet(session, sweet_id)
    await session.delete(db_sweet)
    await session.commit()
    logging.info("Deleted sweet %s (%s)", sweet_id, db_sweet.name)
    return db_sweet


async def purchase_sweet(
    session: AsyncSession, sweet_id: uuid.UUID, quantity: Any
) -> PurchaseResult:
    """
    Списывает товар при покупке, обеспечивая атомарность.

    Уменьшение выполняется одним условным UPDATE
    (quantity >= запрошенного), поэтому параллельные покупки не уводят
    остаток в минус и не теряют обновления. Сводка строится по строке
    из RETURNING того же UPDATE, а не по повторному чтению.

    Args:
        session: Сессия базы данных.
        sweet_id: ID сладости.
        quantity: Количество из тела запроса.

    Returns:
        Обновленная сладость и сводка покупки.

    Raises:
        InvalidQuantity: Если количество не положительное целое.
        SweetNotFound: Если сладость не найдена.
        InsufficientStock: Если на складе меньше запрошенного.
    """
    amount = validate_quantity(quantity)

    statement = (
        update(Sweet)
        .where(col(Sweet.id) == sweet_id, col(Sweet.quantity) >= amount)
        .values(quantity=col(Sweet.quantity) - amount, updated_at=utcnow())
    )
    db_sweet = await _apply_stock_update(session, statement)

    if db_sweet is None:
        await session.rollback()
        current = await _reload_sweet(session, sweet_id)
        logging.info(
            "Purchase rejected for sweet %s: available %s, requested %s",
            sweet_id,
            current.quantity,
            amount,
        )
        raise InsufficientStock(available=current.quantity, requested=amount)

    await session.commit()
    logging.info(
        "Purchased %s of sweet %s, remaining %s", amount, sweet_id, db_sweet.quantity
    )
    return PurchaseResult(
        sweet=db_sweet,
        purchased_quantity=amount,
        total_cost=db_sweet.price * amount,
        remaining_stock=db_sweet.quantity,
    )


async def restock_sweet(
    session: AsyncSession, sweet_id: uuid.UUID, quantity: Any
) -> RestockResult:
    """
    Пополняет остаток сладости.

    Остаток ограничен только диапазоном столбца (MAX_STOCK); пополнение,
    которое вывело бы его за этот предел, отклоняется до записи.

    Raises:
        InvalidQuantity: Если количество не положительное целое или
                         итоговый остаток превысит MAX_STOCK.
        SweetNotFound: Если сладость не найдена.
    """
    amount = validate_quantity(quantity)

    statement = (
        update(Sweet)
        .where(col(Sweet.id) == sweet_id, col(Sweet.quantity) <= MAX_STOCK - amount)
        .values(quantity=col(Sweet.quantity) + amount, updated_at=utcnow())
    )
    db_sweet = await _apply_stock_update(session, statement)

    if db_sweet is None:
        await session.rollback()
        current = await _reload_sweet(session, sweet_id)
        logging.info(
            "Restock rejected for sweet %s: stock %s, requested %s",
            sweet_id,
            current.quantity,
            amount,
        )
        raise InvalidQuantity(
            f"Restock would exceed the maximum stock of {MAX_STOCK}"
        )

    await session.commit()
    logging.info(
        "Restocked sweet %s by %s, new stock %s", sweet_id, amount, db_sweet.quantity
    )
    return RestockResult(
        sweet=db_sweet,
        restocked_quantity=amount,
        previous_stock=db_sweet.quantity - amount,
        new_stock=db_sweet.quantity,
    )


async def _apply_stock_update(session: AsyncSession, statement: Update) -> Sweet | None:
    """
    Выполняет UPDATE с RETURNING всех столбцов.

    Returns:
        Снимок строки сразу после изменения или None, если условие
        UPDATE не выполнилось.
    """
    result = await session.execute(
        statement.returning(*SWEET_COLUMNS).execution_options(
            synchronize_session=False
        )
    )
    row = result.one_or_none()
    if row is None:
        return None
    return Sweet(**row._mapping)


async def _reload_sweet(session: AsyncSession, sweet_id: uuid.UUID) -> Sweet:
    # После UPDATE в обход ORM объект в identity map может быть устаревшим
    db_sweet = await session.get(Sweet, sweet_id, populate_existing=True)
    if db_sweet is None:
        raise SweetNotFound()
    return db_sweet
