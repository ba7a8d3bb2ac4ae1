"""
Storage configuration using pydantic-settings.
"""
import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    """Storage settings loaded from environment variables."""

    # Database connection
    db_driver: str = "postgresql+psycopg2"
    db_username: str = "flightlog"
    db_password: str = "flightlog_dev"
    db_name: str = "flightlog"
    db_host: str = "localhost"
    db_port: int = 5432

    # Full URL, takes precedence over the parts above
    database_url: Optional[str] = None

    # Runtime
    debug: bool = False
    log_level: str = "INFO"

    # Default per-operation deadline in seconds (None = unbounded)
    statement_timeout: Optional[float] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        case_sensitive = False

    @property
    def sqlalchemy_url(self) -> URL:
        """Connection URL for the engine."""
        if self.database_url:
            return make_url(self.database_url)
        return URL.create(
            self.db_driver,
            username=self.db_username,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
