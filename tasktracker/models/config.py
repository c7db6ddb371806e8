"""Application configuration models with Pydantic validation."""

from pydantic import BaseModel, Field


class HistoryConfig(BaseModel):
    """Bounds for the recent-history endpoint."""

    default_limit: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Entries returned when no limit is requested",
    )
    max_limit: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum entries a single request may ask for",
    )


class AppConfig(BaseModel):
    """Root application configuration.

    Loaded from config.yaml and validated with Pydantic.
    """

    data_dir: str = Field(
        default="data",
        description="Directory holding persisted users and task blobs",
    )
    storage_backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Persistence gateway to use (memory loses data on restart)",
    )
    history: HistoryConfig = Field(
        default_factory=HistoryConfig,
        description="Recent-history limits",
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root logging level",
    )
    port: int = Field(
        default=5050,
        ge=1024,
        le=65535,
        description="Port for the Flask server",
    )
    debug: bool = Field(
        default=False,
        description="Enable Flask debug mode",
    )
