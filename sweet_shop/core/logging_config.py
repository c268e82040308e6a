"""Базовая настройка логирования приложения."""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """
    Настраивает корневой логгер.

    Если у корневого логгера уже есть обработчики (повторный вызов
    create_app, запуск тестов), настройка пропускается.

    Args:
        level: Имя уровня логирования (например, "DEBUG", "INFO").
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)
