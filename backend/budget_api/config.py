"""
Application configuration using Pydantic settings.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from budget_api.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Actual Budget Read-Only API"

    # Actual server (url and sync id are required, checked by the initializer)
    actual_server_url: Optional[str] = None
    actual_server_password: Optional[str] = None
    actual_budget_sync_id: Optional[str] = None
    actual_budget_password: Optional[str] = None

    # Local budget cache
    data_dir: str = "./data"

    # Server
    wrapper_host: str = "0.0.0.0"
    wrapper_port: int = 3000
    cors_origins: List[str] = []

    # Seconds to wait on a single budget query, 0 disables the limit
    request_timeout_seconds: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # text, json

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "actual_server_url",
        "actual_server_password",
        "actual_budget_sync_id",
        "actual_budget_password",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty and whitespace-only values as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("request_timeout_seconds")
    @classmethod
    def non_negative_timeout(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be zero or positive")
        return v

    @property
    def timeout(self) -> Optional[float]:
        """Per-query timeout, or None when disabled."""
        return self.request_timeout_seconds or None

    def missing_required(self) -> List[str]:
        """Names of required environment variables that are not set."""
        missing = []
        if not self.actual_server_url:
            missing.append("ACTUAL_SERVER_URL")
        if not self.actual_budget_sync_id:
            missing.append("ACTUAL_BUDGET_SYNC_ID")
        return missing


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    try:
        return Settings()
    except ValidationError as e:
        fields = ", ".join(".".join(str(loc) for loc in err["loc"]).upper() for err in e.errors())
        raise ConfigurationError(f"Invalid configuration value(s): {fields}") from e
