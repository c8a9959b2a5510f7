"""Application settings and configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from clearinghouse.core.exceptions import ConfigError


class PipelineSettings(BaseModel):
    """Coordinator, parser and reporter tunables."""

    admission_capacity: int = Field(default=1000, ge=1)
    max_in_flight: int = Field(default=1000, ge=1)
    poll_interval_seconds: float = Field(default=0.01, gt=0)
    report_interval_seconds: float = Field(default=5.0, gt=0)
    parse_progress_every: int = Field(default=5, ge=1)
    result_progress_every: int = Field(default=50, ge=1)


class PayerSettings(BaseModel):
    """Simulated payer latency, applied to every payer."""

    min_response_seconds: float = Field(default=10.0, ge=0)
    max_response_seconds: float = Field(default=30.0, ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> PayerSettings:
        if self.min_response_seconds > self.max_response_seconds:
            raise ValueError("min_response_seconds must not exceed max_response_seconds")
        return self


class Settings(BaseSettings):
    """Application configuration.

    Settings are loaded from environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    # Pipeline Configuration
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)

    # Payer Simulation
    payers: PayerSettings = Field(default_factory=PayerSettings)

    # Logging
    log_level: str = "INFO"

    def __init__(self, **data: Any) -> None:
        """Initialize settings with environment variable overrides."""
        super().__init__(**data)
        self._load_env_overrides()

    def _load_env_overrides(self) -> None:
        """Load flat environment variable overrides for nested settings."""
        # Payer overrides
        if min_secs := os.getenv("PAYER_MIN_RESPONSE_SECONDS"):
            self.payers.min_response_seconds = float(min_secs)
        if max_secs := os.getenv("PAYER_MAX_RESPONSE_SECONDS"):
            self.payers.max_response_seconds = float(max_secs)

        # Pipeline overrides
        if interval := os.getenv("REPORT_INTERVAL_SECONDS"):
            self.pipeline.report_interval_seconds = float(interval)
        if capacity := os.getenv("ADMISSION_CAPACITY"):
            self.pipeline.admission_capacity = int(capacity)


class PipelineConfig(BaseModel):
    """Run configuration taken from the command line."""

    file_path: Path
    refill_rate: int = Field(ge=1, description="Tokens added per second")
    rate_per_second: int = Field(ge=1, description="Token bucket capacity")
    num_threads: int = Field(default=1, ge=1)

    @classmethod
    def build(cls, args: list[str]) -> PipelineConfig:
        """Build a config from positional arguments.

        Args:
            args: ``[file_path, refill_rate, rate_per_second, num_threads?]``
                without the program name.

        Raises:
            ConfigError: If an argument is missing or invalid.
        """
        names = ("file path", "refill rate", "rate per second")
        if len(args) < len(names):
            raise ConfigError(f"Didn't get a {names[len(args)]}")
        if len(args) > len(names) + 1:
            raise ConfigError(f"Unexpected arguments: {' '.join(args[len(names) + 1:])}")

        file_path, *numbers = args
        parsed: list[int] = []
        for label, raw in zip(("refill rate", "rate per second", "thread count"), numbers):
            try:
                parsed.append(int(raw))
            except ValueError:
                raise ConfigError(f"Invalid {label}: {raw!r}") from None

        fields = dict(zip(("refill_rate", "rate_per_second", "num_threads"), parsed))
        try:
            return cls(file_path=Path(file_path), **fields)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigError(problems) from e
