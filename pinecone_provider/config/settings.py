"""Environment-based application settings. Read-only; no business logic."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="pinecone-provider", description="Service name")
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Runtime environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Log level name")

    # Server
    host: str = Field(default="127.0.0.1", description="Listen host")
    port: int = Field(default=8000, ge=1, le=65535, description="Listen port")

    # Pinecone control plane (fallback when the provider block leaves them unset)
    pinecone_api_key: str = Field(default="", description="Pinecone API key")
    pinecone_environment: str = Field(default="", description="Pinecone environment, e.g. us-west1-gcp")
    controlplane_backend: Literal["http", "memory"] = Field(
        default="http", description="Control-plane client implementation"
    )
    controlplane_timeout_seconds: float = Field(default=30.0, gt=0, description="Per-request timeout (seconds)")

    # Reconciliation
    poll_interval_seconds: float = Field(default=5.0, ge=0, description="Wait between describe polls (seconds)")
    convergence_timeout_seconds: float | None = Field(
        default=None, gt=0, description="Give up waiting for convergence after this many seconds; unset waits forever"
    )
    memory_settle_polls: int = Field(
        default=0, ge=0, description="Describes an in-memory index stays unsettled after a mutation"
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance. Use for app lifetime."""
    return Settings()
