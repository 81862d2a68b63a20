"""
Application configuration using Pydantic Settings.
"""

from pathlib import Path
from typing import List

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "User Connection Service"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENABLE_SWAGGER: bool = True
    DOCS_URL: str = "/docs"
    REDOC_URL: str = "/redoc"

    # Paths
    DATA_DIR: Path = Path(__file__).parent.parent.parent / "data"

    # Database (empty: SQLite file app.db inside DATA_DIR)
    DB_CONNECTION: str = ""

    # CORS
    CORS_ORIGINS: List[str] = ["*"]  # Restrict in production!
    FORCE_HTTPS: bool = False

    # Request logging
    API_REQUEST_LOGGING_ENABLED: bool = True

    # Migrations
    RUN_MIGRATIONS_ON_STARTUP: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("DB_CONNECTION")
    @classmethod
    def use_async_driver(cls, value: str) -> str:
        """Point plain PostgreSQL URLs at the asyncpg driver."""
        for scheme in ("postgres://", "postgresql://"):
            if value.startswith(scheme):
                return "postgresql+asyncpg://" + value[len(scheme):]
        return value

    @model_validator(mode="after")
    def default_sqlite_in_data_dir(self) -> "Settings":
        if not self.DB_CONNECTION:
            db_path = self.DATA_DIR.resolve() / "app.db"
            self.DB_CONNECTION = f"sqlite+aiosqlite:///{db_path.as_posix()}"
        return self


settings = Settings()
