"""Application configuration using Pydantic v2 settings."""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SOLARSIGHT_",
        extra="ignore",
        protected_namespaces=(),
    )

    # Application
    log_level: str = Field(default="INFO", description="Logging level")

    # Observability
    observability_service_name: str = Field(
        default="solarsight",
        validation_alias=AliasChoices("OTEL_SERVICE_NAME", "SOLARSIGHT_SERVICE_NAME"),
        description="Service name reported in OpenTelemetry exports",
    )
    observability_environment: str = Field(
        default="production",
        validation_alias=AliasChoices("OTEL_ENVIRONMENT", "SOLARSIGHT_ENVIRONMENT"),
        description="Environment label attached to telemetry exports",
    )
    otlp_endpoint: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OTEL_EXPORTER_OTLP_ENDPOINT", "SOLARSIGHT_OTLP_ENDPOINT"),
        description="OTLP/HTTP collector base URL; export is disabled when unset",
    )

    # ML Model
    prediction_mode: Literal["regressor", "formula"] = Field(
        default="regressor",
        description="'regressor' trains a small network per model, 'formula' uses the closed form",
    )
    training_epochs: int = Field(default=20, ge=1, description="Epochs per training invocation")
    model_dir: Path = Field(default=Path("data/models"), description="Regressor snapshot directory")
    persist_models: bool = Field(default=True, description="Snapshot trained regressors to disk")
    random_seed: int | None = Field(
        default=None, description="Seed for jitter and placeholder metrics (None = random)"
    )

    # Simulation
    simulation_hours: int = Field(default=24, ge=1, le=168, description="Simulated history length")

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, description="Upload size limit")


settings = Settings()
