# cinema_api/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List
import logging
from pathlib import Path

# Configure logging for settings module
logger = logging.getLogger(__name__)
if not logging.getLogger().hasHandlers():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s SETTINGS.PY - [%(levelname)s] - %(message)s'
    )

# This settings.py file is at cinema-api/cinema_api/settings.py
# Two .parent calls will get to the project root directory
PROJECT_ROOT = Path(__file__).parent.parent.resolve()
DOTENV_PATH = PROJECT_ROOT / ".env"

if DOTENV_PATH.exists():
    logger.info(f"SETTINGS.PY: .env file FOUND at explicit path: {DOTENV_PATH}")
else:
    logger.debug(
        f"SETTINGS.PY: .env file NOT FOUND at explicit path: {DOTENV_PATH}. "
        "Will rely on OS env vars or defaults."
    )


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    app_name: str = "Cinema API"
    app_version: str = "1.0.0"
    environment: str = Field(
        default="development",
        description="Operating environment (development, staging, production)."
    )
    debug_mode: bool = False

    # SQLite configuration
    sqlite_db_path: str = "./cinema_api_data.sqlite3"
    db_query_timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Deadline applied to every storage call unless the caller passes its own."
    )

    # Token lifetimes
    activation_token_ttl_hours: int = 72
    authentication_token_ttl_hours: int = 24

    # Accounts
    default_user_permissions: List[str] = Field(default_factory=lambda: ["movies:read"])
    password_hash_rounds: int = Field(default=12, ge=4, le=31)

    cors_trusted_origins: List[str] = Field(default_factory=list)

    model_config = SettingsConfigDict(
        env_file=DOTENV_PATH if DOTENV_PATH.exists() else None,
        extra="ignore",
        env_file_encoding='utf-8'
    )


# Initialize settings instance
settings = Settings()

logger.info(
    f"SETTINGS.PY: Post-Settings() settings.environment: "
    f"'{settings.environment}' (debug_mode={settings.debug_mode})"
)
logger.info(
    f"SETTINGS.PY: Post-Settings() settings.sqlite_db_path: "
    f"'{settings.sqlite_db_path}' (query timeout {settings.db_query_timeout_seconds}s)"
)
