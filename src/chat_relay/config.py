from __future__ import annotations

import logging

from pydantic import ConfigDict, ValidationError
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    DATABASE_URL: str

    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "info"

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300

    CORS_ORIGINS: list[str] = ["*"]

    WS_HEARTBEAT_SECONDS: int = 30

    @property
    def database_url(self) -> str:
        """DATABASE_URL with the async driver filled in for bare postgres schemes."""
        url = self.DATABASE_URL
        for scheme in ("postgres://", "postgresql://"):
            if url.startswith(scheme):
                return "postgresql+asyncpg://" + url[len(scheme):]
        return url

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


def load_settings() -> Settings:
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        logger.critical("Invalid configuration (is DATABASE_URL set?): %s", exc)
        raise SystemExit(1) from exc


settings = load_settings()
