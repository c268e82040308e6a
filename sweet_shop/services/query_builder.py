"""Построение запроса поиска сладостей по необязательным фильтрам."""

import math
import re
from dataclasses import dataclass

from sqlalchemy import false
from sqlmodel import col, select
from sqlmodel.sql.expression import SelectOfScalar

from sweet_shop.db.models import Sweet

LIKE_ESCAPE_CHAR = "\\"

# Числовой префикс строки: "12.5abc" -> "12.5", "Infinity" -> "Infinity"
_NUMBER_PREFIX = re.compile(
    r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)


@dataclass(frozen=True)
class SearchFilters:
    """
    Набор необязательных фильтров поиска.

    Пустые строки и None в name/category не накладывают ограничений.
    Граница цены NaN (непарсируемое значение) не совпадает ни с чем.
    """

    name: str | None = None
    category: str | None = None
    min_price: float | None = None
    max_price: float | None = None


def parse_price_bound(raw: str | None) -> float | None:
    """
    Разбирает границу цены из строки запроса.

    Берется числовой префикс строки; если его нет (включая пустую
    строку), возвращается NaN.

    Args:
        raw: Значение параметра или None, если параметр не передан.

    Returns:
        None для отсутствующего параметра, иначе число или NaN.
    """
    if raw is None:
        return None
    match = _NUMBER_PREFIX.match(raw)
    if match is None:
        return math.nan
    return float(match.group(1).replace("Infinity", "inf"))


def escape_like(value: str) -> str:
    """
    Экранирует спецсимволы LIKE, чтобы они совпадали буквально.

    Args:
        value: Пользовательская подстрока.

    Returns:
        Строка, безопасная для подстановки в шаблон LIKE.
    """
    return (
        value.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )


def build_search_statement(filters: SearchFilters) -> SelectOfScalar[Sweet]:
    """
    Собирает SELECT по фильтрам, объединенным через AND.

    - name: подстрока без учета регистра;
    - category: точное совпадение;
    - min_price / max_price: включительные границы цены.

    Результат всегда отсортирован по дате создания, новые первыми.

    Args:
        filters: Фильтры поиска.

    Returns:
        Запрос SQLAlchemy, готовый к выполнению.
    """
    statement = select(Sweet)

    if filters.name:
        pattern = f"%{escape_like(filters.name)}%"
        statement = statement.where(
            col(Sweet.name).ilike(pattern, escape=LIKE_ESCAPE_CHAR)
        )

    if filters.category:
        statement = statement.where(col(Sweet.category) == filters.category)

    for bound in (filters.min_price, filters.max_price):
        if bound is not None and math.isnan(bound):
            # Сравнение с NaN ложно для любой цены
            statement = statement.where(false())

    if filters.min_price is not None and not math.isnan(filters.min_price):
        statement = statement.where(col(Sweet.price) >= filters.min_price)

    if filters.max_price is not None and not math.isnan(filters.max_price):
        statement = statement.where(col(Sweet.price) <= filters.max_price)

    return statement.order_by(col(Sweet.created_at).desc())
