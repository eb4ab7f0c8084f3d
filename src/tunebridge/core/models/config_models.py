"""Pydantic models for configuration validation."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

# Headless, non-interactive PowerShell that reads the script from stdin
DEFAULT_HOST_EXECUTABLE = "powershell"
DEFAULT_HOST_ARGUMENTS: tuple[str, ...] = (
    "-NoProfile",
    "-NonInteractive",
    "-NoLogo",
    "-WindowStyle",
    "Hidden",
    "-Command",
    "-",
)


class LogLevel(StrEnum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class HostConfig(BaseModel):
    """Scripting host process configuration."""

    executable: str = DEFAULT_HOST_EXECUTABLE
    arguments: list[str] = Field(default_factory=lambda: list(DEFAULT_HOST_ARGUMENTS))
    timeout_seconds: float | None = Field(default=None, gt=0)
    output_encoding: str = "utf-8"

    @field_validator("executable")
    @classmethod
    def _executable_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "host executable must not be empty"
            raise ValueError(msg)
        return value


class LogLevelsConfig(BaseModel):
    """Log levels configuration."""

    console: LogLevel = LogLevel.INFO
    main_file: LogLevel = LogLevel.DEBUG


class LoggingConfig(BaseModel):
    """Logging configuration."""

    max_runs: int = Field(default=3, ge=0)
    main_log_file: str = "main/main.log"
    levels: LogLevelsConfig = Field(default_factory=LogLevelsConfig)


class AppConfig(BaseModel):
    """Main application configuration model."""

    logs_base_dir: str = "logs"
    templates_dir: str | None = None
    dry_run: bool = False

    host: HostConfig = Field(default_factory=HostConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
