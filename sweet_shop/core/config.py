"""Настройки конфигурации приложения."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Загружает настройки из переменных окружения и файла .env.

    Атрибуты:
        model_config: Конфигурация для Pydantic моделей.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # База данных
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "sweet_shop"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    # Полная строка подключения, перекрывает POSTGRES_* (например, для SQLite)
    DATABASE_URL: str | None = None
    DB_ECHO: bool = False
    CREATE_TABLES_ON_STARTUP: bool = True

    # HTTP
    HOST: str = "0.0.0.0"  # noqa: B104
    PORT: int = 3000
    API_PREFIX: str = "/api"
    CORS_ORIGINS: list[str] = ["*"]

    # Логирование
    LOG_LEVEL: str = "INFO"

    @property
    def database_url(self) -> str:
        """
        Собирает строку подключения к базе данных.

        Returns:
            Строка подключения для SQLAlchemy.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()
