"""HTTP-обработчики для управления ассортиментом сладостей."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from sweet_shop.db.session import get_db_session
from sweet_shop.handlers.errors import error_response, server_error_response
from sweet_shop.schemas.sweet import (
    ErrorResponse,
    PurchaseDetails,
    PurchaseResponse,
    RestockDetails,
    RestockResponse,
    StockChangeRequest,
    SweetDeleteResponse,
    SweetRead,
)
from sweet_shop.services import sweet_service
from sweet_shop.services.exceptions import SweetShopError
from sweet_shop.services.query_builder import SearchFilters, parse_price_bound

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=SweetRead,
    responses=ERROR_RESPONSES,
)
async def create_sweet(
    payload: Any = Body(default=None),
    session: AsyncSession = Depends(get_db_session),
) -> SweetRead | JSONResponse:
    """
    Добавляет новую сладость.
    """
    try:
        sweet = await sweet_service.create_sweet(session, payload)
        return SweetRead.model_validate(sweet)
    except SweetShopError as e:
        logging.info("Sweet creation rejected: %s", e.message)
        return error_response(e)
    except Exception:
        logging.exception("Error in create_sweet")
        return server_error_response()


@router.get("", response_model=list[SweetRead], responses=ERROR_RESPONSES)
async def list_sweets(
    session: AsyncSession = Depends(get_db_session),
) -> list[SweetRead] | JSONResponse:
    """
    Показывает все сладости, новые первыми.
    """
    try:
        sweets = await sweet_service.get_all_sweets(session)
        return [SweetRead.model_validate(sweet) for sweet in sweets]
    except Exception:
        logging.exception("Error in list_sweets")
        return server_error_response()


# Должен быть зарегистрирован раньше маршрутов /{sweet_id}
@router.get("/search", response_model=list[SweetRead], responses=ERROR_RESPONSES)
async def search_sweets(
    name: str | None = Query(default=None),
    category: str | None = Query(default=None),
    min_price: str | None = Query(default=None, alias="minPrice"),
    max_price: str | None = Query(default=None, alias="maxPrice"),
    session: AsyncSession = Depends(get_db_session),
) -> list[SweetRead] | JSONResponse:
    """
    Ищет сладости по имени, категории и диапазону цены.

    Все переданные фильтры объединяются через AND. Граница цены, которую
    нельзя разобрать как число, дает пустой результат.
    """
    try:
        filters = SearchFilters(
            name=name,
            category=category,
            min_price=parse_price_bound(min_price),
            max_price=parse_price_bound(max_price),
        )
        sweets = await sweet_service.search_sweets(session, filters)
        return [SweetRead.model_validate(sweet) for sweet in sweets]
    except Exception:
        logging.exception("Error in search_sweets")
        return server_error_response()


@router.get("/{sweet_id}", response_model=SweetRead, responses=ERROR_RESPONSES)
async def get_sweet(
    sweet_id: str, session: AsyncSession = Depends(get_db_session)
) -> SweetRead | JSONResponse:
    """
    Возвращает одну сладость по ID.
    """
    try:
        sweet = await sweet_service.get_sweet(
            session, sweet_service.parse_sweet_id(sweet_id)
        )
        return SweetRead.model_validate(sweet)
    except SweetShopError as e:
        return error_response(e)
    except Exception:
        logging.exception("Error in get_sweet")
        return server_error_response()


@router.delete(
    "/{sweet_id}", response_model=SweetDeleteResponse, responses=ERROR_RESPONSES
)
async def delete_sweet(
    sweet_id: str, session: AsyncSession = Depends(get_db_session)
) -> SweetDeleteResponse | JSONResponse:
    """
    Удаляет сладость.
    """
    try:
        sweet = await sweet_service.delete_sweet(
            session, sweet_service.parse_sweet_id(sweet_id)
        )
        return SweetDeleteResponse(
            message="Sweet deleted successfully", sweet=SweetRead.model_validate(sweet)
        )
    except SweetShopError as e:
        return error_response(e)
    except Exception:
        logging.exception("Error in delete_sweet")
        return server_error_response()


@router.post(
    "/{sweet_id}/purchase", response_model=PurchaseResponse, responses=ERROR_RESPONSES
)
async def purchase_sweet(
    sweet_id: str,
    payload: StockChangeRequest | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> PurchaseResponse | JSONResponse:
    """
    Покупка сладости: списывает количество и считает стоимость.
    """
    quantity = payload.quantity if payload else None
    try:
        result = await sweet_service.purchase_sweet(
            session, sweet_service.parse_sweet_id(sweet_id), quantity
        )
        return PurchaseResponse(
            message="Purchase successful",
            sweet=SweetRead.model_validate(result.sweet),
            purchase_details=PurchaseDetails(
                purchased_quantity=result.purchased_quantity,
                total_cost=result.total_cost,
                remaining_stock=result.remaining_stock,
            ),
        )
    except SweetShopError as e:
        return error_response(e)
    except Exception:
        logging.exception("Error in purchase_sweet")
        return server_error_response()


@router.post(
    "/{sweet_id}/restock", response_model=RestockResponse, responses=ERROR_RESPONSES
)
async def restock_sweet(
    sweet_id: str,
    payload: StockChangeRequest | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> RestockResponse | JSONResponse:
    """
    Пополнение остатка сладости.
    """
    quantity = payload.quantity if payload else None
    try:
        result = await sweet_service.restock_sweet(
            session, sweet_service.parse_sweet_id(sweet_id), quantity
        )
        return RestockResponse(
            message="Restock successful",
            sweet=SweetRead.model_validate(result.sweet),
            restock_details=RestockDetails(
                restocked_quantity=result.restocked_quantity,
                previous_stock=result.previous_stock,
                new_stock=result.new_stock,
            ),
        )
    except SweetShopError as e:
        return error_response(e)
    except Exception:
        logging.exception("Error in restock_sweet")
        return server_error_response()
