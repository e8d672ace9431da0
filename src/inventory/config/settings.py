from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..validators.config_validators import to_uppercase, to_lowercase

class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Built once at startup and handed to the components that need it:
      - the error classifier reads `expose_error_details`
      - the persistence layer reads `DATABASE_URL`
      - the logging builder reads the LOG_* knobs
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "production"

    # HTTP server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Database connection string, e.g. postgresql+asyncpg://user:pw@host:5432/inventory
    # Left optional so settings can load without it; startup fails when it is missing.
    DATABASE_URL: str | None = None

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/inventory")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False

    # --- Derived settings ---
    @property
    def expose_error_details(self) -> bool:
        """
        Whether error responses may carry the raw failure (name, message, stack).

        Only true in development; every other environment gets the generic
        classifier message alone.
        """
        return self.ENV == "development"

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize the LOG_LEVEL environment variable value to uppercase.

        Runs before type validation so `LOG_LEVEL=debug` is accepted.
        """
        return to_uppercase(v)

    @field_validator("LOG_FORMAT", mode="before")
    def normalize_log_format(cls, v: str | None) -> str | None:
        """
        Normalize the LOG_FORMAT environment variable value to lowercase.
        """
        return to_lowercase(v)

    @field_validator("DATABASE_URL", mode="before")
    def blank_database_url_is_missing(cls, v: str | None) -> str | None:
        # An empty DATABASE_URL= line in .env counts as "not configured".
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # --- ConfigDict settings ---
    model_config = ConfigDict(
        # Load environment variables from the .env file at the package root.
        env_file=str(Path(__file__).parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

# get_settings() takes no arguments and always returns the same settings from the environment,
# so caching it with @lru_cache() avoids re-reading the environment on every call.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
