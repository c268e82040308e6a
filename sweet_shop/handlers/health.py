"""Проверка работоспособности сервиса."""

from fastapi import APIRouter

from sweet_shop.schemas.sweet import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Обработчик проверки работоспособности.
    """
    return HealthResponse(status="OK", message="Sweet Shop API is running")
