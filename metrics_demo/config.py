"""Application configuration loading via Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    metrics_origin: str = Field(default="metrics-demo", min_length=1, alias="METRICS_ORIGIN")
    error_rate: float = Field(default=0.1, ge=0.0, le=1.0, alias="ERROR_RATE")
    latency_min_ms: int = Field(default=0, ge=0, alias="LATENCY_MIN_MS")
    latency_max_ms: int = Field(default=200, ge=0, alias="LATENCY_MAX_MS")
    metrics_path: str = Field(default="/metrics", alias="METRICS_PATH")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8080, gt=0, lt=65536, alias="APP_PORT")
    metrics_port: int = Field(default=8081, gt=0, lt=65536, alias="METRICS_PORT")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @field_validator("metrics_path")
    @classmethod
    def validate_metrics_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("METRICS_PATH must start with '/'")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def check_latency_bounds(self) -> "Settings":
        if self.latency_max_ms < self.latency_min_ms:
            raise ValueError("LATENCY_MAX_MS must be greater than or equal to LATENCY_MIN_MS")
        return self

    @property
    def dedicated_metrics_listener(self) -> bool:
        """Whether the scrape endpoint gets its own port."""

        return self.metrics_port != self.app_port


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()  # type: ignore[call-arg]
