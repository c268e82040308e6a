"""Pydantic-схемы запросов и ответов API сладостей.

Поля в JSON именуются в camelCase (createdAt, purchaseDetails и т.д.),
поэтому все схемы используют генератор алиасов to_camel.
"""

import datetime
import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sweet_shop.db.models import MAX_STOCK


class CamelModel(BaseModel):
    """Базовая схема с camelCase-алиасами."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SweetCreate(CamelModel):
    """Схема для создания новой сладости."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    quantity: int = Field(..., ge=0, le=MAX_STOCK)


class SweetRead(CamelModel):
    """Схема сладости в ответах API."""

    id: uuid.UUID
    name: str
    category: str
    price: float
    quantity: int
    created_at: datetime.datetime
    updated_at: datetime.datetime


class StockChangeRequest(CamelModel):
    """
    Тело запроса покупки или пополнения.

    Количество проверяется сервисным слоем, поэтому здесь принимается
    любое значение.
    """

    quantity: Any = None


class PurchaseDetails(CamelModel):
    """Сводка покупки."""

    purchased_quantity: int
    total_cost: float
    remaining_stock: int


class RestockDetails(CamelModel):
    """Сводка пополнения."""

    restocked_quantity: int
    previous_stock: int
    new_stock: int


class SweetDeleteResponse(CamelModel):
    """Ответ на удаление сладости."""

    message: str
    sweet: SweetRead


class PurchaseResponse(CamelModel):
    """Ответ на покупку."""

    message: str
    sweet: SweetRead
    purchase_details: PurchaseDetails


class RestockResponse(CamelModel):
    """Ответ на пополнение."""

    message: str
    sweet: SweetRead
    restock_details: RestockDetails


class HealthResponse(BaseModel):
    """Ответ проверки работоспособности."""

    status: str
    message: str


class ErrorResponse(BaseModel):
    """Тело ответа с ошибкой."""

    error: str
