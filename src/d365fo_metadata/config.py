"""
Configuration management for D365FO metadata queries

Process-wide defaults for the connection parameters. Explicit parameters
passed to a query always take precedence over these values.
"""

import os
from pathlib import Path
from typing import Optional
import structlog
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

logger = structlog.get_logger(__name__)


class Settings(BaseSettings):
    """Default connection settings loaded from environment variables"""

    # D365 connection defaults (all optional, explicit parameters win)
    tenant: str = ""
    url: str = ""
    system_url: str = ""
    client_id: str = ""
    client_secret: str = ""

    # Transport
    request_timeout: float = 30.0

    model_config = SettingsConfigDict(
        env_prefix="D365FO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_configured(self) -> bool:
        """True when a default environment URL is available"""
        return bool(self.url or self.system_url)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get application settings singleton"""
    global _settings
    if _settings is None:
        load_dotenv_if_exists()

        try:
            _settings = Settings()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid D365FO_* environment configuration: {e}") from e

        logger.debug("Settings loaded",
                     url=_settings.url,
                     system_url=_settings.system_url,
                     tenant=_settings.tenant,
                     cwd=os.getcwd())
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment"""
    global _settings
    _settings = None


def load_dotenv_if_exists() -> None:
    """Load .env file if it exists"""
    from dotenv import load_dotenv

    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)
    else:
        # Try to load from parent directories
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            env_path = parent / ".env"
            if env_path.exists():
                load_dotenv(env_path)
                break
