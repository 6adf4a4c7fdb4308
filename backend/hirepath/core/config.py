"""Application configuration loaded from environment variables.

Settings for database, API, email delivery and onboarding links.
Uses pydantic-settings for validation and .env file support.
"""

from typing import Literal

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known insecure default password that must not be used in production
_INSECURE_DEFAULT_PASSWORD = "hirepath_dev_password"  # nosec B105


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "hirepath"
    database_user: str = "hirepath_user"
    database_password: str = _INSECURE_DEFAULT_PASSWORD
    # Full URL override (e.g. "sqlite+aiosqlite:///./hirepath.db" for local runs)
    database_url_override: str = ""

    # API
    api_host: str = "0.0.0.0"  # nosec B104
    api_port: int = 8000
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Application
    environment: Literal["development", "test", "production"] = "development"
    log_level: str = "INFO"

    # Email (Resend)
    email_from: str = "noreply@hirepath.local"
    resend_api_key: SecretStr = SecretStr("")
    frontend_url: str = "http://localhost:3000"

    @property
    def database_url(self) -> str:
        """Async database URL for SQLAlchemy."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def database_url_sync(self) -> str:
        """Sync database URL for Alembic."""
        return (
            f"postgresql://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def email_enabled(self) -> bool:
        """Whether outbound email is configured."""
        return bool(self.resend_api_key.get_secret_value())

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Reject insecure or contradictory configuration.

        Checks:
        - CORS must not use wildcard origin (incompatible with credentials)
        - Database password must not be the default in production
        """
        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "This application uses credentials which are incompatible "
                "with wildcard CORS origins."
            )
            raise ValueError(msg)

        if (
            self.environment == "production"
            and not self.database_url_override
            and self.database_password == _INSECURE_DEFAULT_PASSWORD
        ):
            msg = (
                "Cannot use default database password in production. "
                "Set DATABASE_PASSWORD environment variable to a secure value."
            )
            raise ValueError(msg)

        return self


settings = Settings()
