"""Преобразование ошибок в HTTP-ответы."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sweet_shop.services.exceptions import SweetShopError

SERVER_ERROR_MESSAGE = "Server error"


def error_response(error: SweetShopError) -> JSONResponse:
    """Ответ {"error": ...} со статусом, заданным исключением."""
    return JSONResponse(content={"error": error.message}, status_code=error.status_code)


def server_error_response() -> JSONResponse:
    """Ответ 500 без внутренних подробностей."""
    return JSONResponse(
        content={"error": SERVER_ERROR_MESSAGE},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Отвечает 400 вместо стандартного 422 FastAPI.

    Срабатывает на некорректный JSON в теле и нечисловые границы цены.
    """
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
        field = ".".join(loc) or "body"
        errors.append(f"{field}: {error.get('msg', 'invalid value')}")
    logging.info("Rejected request to %s: %s", request.url.path, errors)
    return JSONResponse(
        content={"error": "Invalid request: " + "; ".join(errors)},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Регистрирует обработчики ошибок на уровне приложения."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
