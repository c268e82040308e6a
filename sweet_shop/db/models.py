"""Модели базы данных проекта."""

import datetime
import uuid

from sqlalchemy import BigInteger, CheckConstraint, DateTime
from sqlmodel import Field, SQLModel

# Верхняя граница остатка: диапазон BIGINT
MAX_STOCK = 2**63 - 1


def utcnow() -> datetime.datetime:
    """Текущее время в UTC."""
    return datetime.datetime.now(datetime.UTC)


class Sweet(SQLModel, table=True):
    """Модель сладости в ассортименте магазина."""

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_sweet_price_non_negative"),
        CheckConstraint("quantity >= 0", name="ck_sweet_quantity_non_negative"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True, max_length=100)
    category: str = Field(index=True, max_length=100)
    price: float = Field(ge=0)
    quantity: int = Field(default=0, ge=0, le=MAX_STOCK, sa_type=BigInteger)
    created_at: datetime.datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True), index=True
    )
    updated_at: datetime.datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True)
    )
