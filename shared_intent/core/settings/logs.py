"""Logging settings for intent service processes."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_logging_yaml_source

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Where service logs go and in which format.

    Environment variables use LOG_ prefix, e.g. LOG_LEVEL=DEBUG, LOG_JSON=false,
    LOG_FILE_ENABLED=true.
    """

    service_name: str = Field(
        default="shared-intent",
        description="Static 'service' field on JSON records.",
    )
    level: LogLevel = Field(default="INFO", description="Root logger level.")
    json_logs: bool = Field(
        default=True,
        validation_alias=AliasChoices("LOG_JSON", "LOG_JSON_LOGS"),
        description="Emit JSON Lines instead of plain text.",
    )
    console_enabled: bool = Field(default=True, description="Log to stderr.")

    file_enabled: bool = Field(default=False, description="Also log to a rotating file.")
    file_path: Path = Field(
        default=Path("logs/shared-intent.log.jsonl"),
        description="Log file used when file_enabled is set.",
    )
    file_max_bytes: int = Field(default=10_485_760, ge=1024, description="Rotate after this many bytes.")
    file_backup_count: int = Field(default=5, ge=0, le=100, description="Rotated files to keep.")

    include_context: bool = Field(
        default=True,
        description="Add the delivery's conversation_id and user_id to every record.",
    )
    capture_warnings: bool = Field(default=True, description="Route `warnings` through logging.")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_logging_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Return kwargs suitable for configure_logging(...)."""
        return {
            "service_name": self.service_name,
            "log_level": self.level,
            "json_logs": self.json_logs,
            "console_enabled": self.console_enabled,
            "file_path": str(self.file_path) if self.file_enabled else None,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
            "include_context": self.include_context,
            "capture_warnings": self.capture_warnings,
        }
