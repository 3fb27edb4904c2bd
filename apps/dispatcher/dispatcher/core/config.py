from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DispatchConfig(BaseSettings):
    """Dispatcher settings, loaded from CICD_DISPATCH_* environment variables.

    Built once at the CLI edge and passed explicitly into `dispatch()`;
    nothing below the CLI reads the environment.

    Fields
    ──────
    • fail_fast      stop a multi-step chain at the first failing step
                     (default False: run all steps, aggregate failures)
    • dry_run        resolve the command chain without executing it
    • bindings_file  optional YAML file overriding the default bindings
    • json_logs      render logs as JSON instead of the console renderer
    • log_level      stdlib level name for log output
    """

    model_config = SettingsConfigDict(
        env_prefix="CICD_DISPATCH_",
        case_sensitive=False,
    )

    fail_fast: bool = False
    dry_run: bool = False
    bindings_file: Optional[Path] = None
    json_logs: bool = False
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


def get_config(**overrides) -> DispatchConfig:
    """Build a DispatchConfig; keyword overrides win over the environment.

    Overrides whose value is None are ignored so unset CLI flags fall back
    to the environment.
    """
    return DispatchConfig(**{k: v for k, v in overrides.items() if v is not None})
