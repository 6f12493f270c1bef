"""Configuration management for the signup client."""

from pathlib import Path

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class APIConfig(BaseSettings):
    """Waitlist service connection."""

    url: str = Field(default="http://localhost:3001/api", description="Waitlist API base URL")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")

    model_config = SettingsConfigDict(env_prefix="COACHGG_API_", extra="ignore")

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class LocalStoreConfig(BaseSettings):
    """Local fallback store used when the service is unreachable."""

    path: str = Field(
        default=str(Path.home() / ".config/coachgg/waitlist.json"),
        description="JSON file holding local signups",
    )
    simulated_latency_seconds: float = Field(
        default=1.0, description="Delay applied to local signups so they feel like a network call"
    )

    model_config = SettingsConfigDict(env_prefix="COACHGG_LOCAL_", extra="ignore")

    @field_validator("path")
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand ~ and environment variables in path."""
        return str(Path(v).expanduser().resolve())


class ClientConfig(BaseSettings):
    """Main configuration."""

    api: APIConfig = Field(default_factory=APIConfig)
    local: LocalStoreConfig = Field(default_factory=LocalStoreConfig)
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_prefix="COACHGG_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def from_yaml(cls, config_path: Path) -> "ClientConfig":
        """Load configuration from YAML file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r") as f:
            data = yaml.safe_load(f)

        return cls(**data if data else {})
