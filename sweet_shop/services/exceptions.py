"""Исключения сервисного слоя.

Каждое исключение несет HTTP-статус и сообщение, которое можно безопасно
показать клиенту. Хендлеры перехватывают SweetShopError и превращают его
в ответ {"error": message}.
"""


class SweetShopError(Exception):
    """Базовое исключение для ошибок бизнес-логики магазина."""

    status_code: int = 400
    message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class SweetValidationError(SweetShopError):
    """Данные сладости не прошли валидацию."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("Sweet validation failed: " + "; ".join(errors))


class InvalidSweetId(SweetShopError):
    """Идентификатор сладости имеет неверный формат."""

    message = "Invalid sweet ID"


class InvalidQuantity(SweetShopError):
    """Количество не является положительным целым числом."""

    message = "Quantity must be a positive number"


class InsufficientStock(SweetShopError):
    """На складе недостаточно товара для покупки."""

    def __init__(self, available: int, requested: int) -> None:
        self.available = available
        self.requested = requested
        super().__init__(
            "Not enough stock available. "
            f"Available: {available}, Requested: {requested}"
        )


class SweetNotFound(SweetShopError):
    """Сладость с указанным ID не найдена."""

    status_code = 404
    message = "Sweet not found"
