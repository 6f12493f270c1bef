"""Application configuration and settings."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, PostgresDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "CoachGG Waitlist API"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3001

    # Database
    postgres_user: Optional[str] = None
    postgres_password: Optional[str] = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "coachgg"
    database_url: str = Field(default="", validate_default=True)

    @field_validator("database_url", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info) -> str:
        """Build database URL from components if not provided."""
        if isinstance(v, str) and v:
            return v

        data = info.data
        if data.get("postgres_user"):
            return str(
                PostgresDsn.build(
                    scheme="postgresql",
                    username=data.get("postgres_user"),
                    password=data.get("postgres_password"),
                    host=data.get("postgres_host", "localhost"),
                    port=data.get("postgres_port", 5432),
                    path=data.get("postgres_db", "coachgg"),
                )
            )

        return "sqlite:///./waitlist.db"

    # Admin shared secret for export/stats (unset = admin endpoints disabled)
    admin_password: Optional[str] = None

    # CORS
    cors_origins: list[str] = ["*"]

    # Rate limiting on the join endpoint
    rate_limit_max: int = 5
    rate_limit_window_seconds: int = 15 * 60
    rate_limit_cleanup_interval_seconds: int = 60
    trust_forwarded_for: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
