"""Configuration for the sandbox task service.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Service-specific variables use the `SANDBOX_` prefix so they do not collide
with other tools sharing the environment.
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sandbox_tasks.tasks.models import PLACEHOLDER_RESULT


class ServiceSettings(BaseSettings):
    """Settings for the HTTP service and the simulated task lifecycle.

    Environment variables:
    - SANDBOX_HOST / SANDBOX_PORT
    - LOG_LEVEL
    - SANDBOX_MIN_DELAY_SECONDS / SANDBOX_MAX_DELAY_SECONDS
    - SANDBOX_RESULT_TEXT
    - SANDBOX_TASK_TTL_SECONDS / SANDBOX_SWEEP_INTERVAL_SECONDS

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `ServiceSettings(_env_file=path_to_env)`.
    """

    host: str = Field(default="0.0.0.0", validation_alias="SANDBOX_HOST")
    port: int = Field(default=8000, validation_alias="SANDBOX_PORT", ge=1, le=65535)

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    min_delay_seconds: int = Field(
        default=2,
        validation_alias="SANDBOX_MIN_DELAY_SECONDS",
        ge=0,
        description="Lower bound (inclusive) of the simulated processing delay.",
    )
    max_delay_seconds: int = Field(
        default=4,
        validation_alias="SANDBOX_MAX_DELAY_SECONDS",
        ge=0,
        description="Upper bound (inclusive) of the simulated processing delay.",
    )
    result_text: str = Field(
        default=PLACEHOLDER_RESULT,
        validation_alias="SANDBOX_RESULT_TEXT",
        min_length=1,
        description="Result string every task reports once it is ready.",
    )

    task_ttl_seconds: float = Field(
        default=0.0,
        validation_alias="SANDBOX_TASK_TTL_SECONDS",
        ge=0,
        description=(
            "How long a completed task is retained before the sweeper evicts it. "
            "0 disables eviction and keeps every task for the process lifetime."
        ),
    )
    sweep_interval_seconds: float = Field(
        default=60.0,
        validation_alias="SANDBOX_SWEEP_INTERVAL_SECONDS",
        gt=0,
        description="Polling interval (seconds) of the retention sweeper when enabled.",
    )

    model_config = SettingsConfigDict(
        env_prefix="", env_file=".env", extra="ignore", populate_by_name=True
    )

    @model_validator(mode="after")
    def _check_delay_range(self) -> ServiceSettings:
        if self.max_delay_seconds < self.min_delay_seconds:
            raise ValueError(
                "SANDBOX_MAX_DELAY_SECONDS must be >= SANDBOX_MIN_DELAY_SECONDS"
            )
        return self

    @property
    def retention_enabled(self) -> bool:
        return self.task_ttl_seconds > 0
