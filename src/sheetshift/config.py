from __future__ import annotations

import codecs
from collections.abc import Mapping
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

ENV_TABLE_ENCODINGS = "SHEETSHIFT_TABLE_ENCODINGS"
ENV_LOG_LEVEL = "SHEETSHIFT_LOG_LEVEL"
ENV_LOG_FILE = "SHEETSHIFT_LOG_FILE"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class AdjustConfig(BaseModel):
    """Configuration for structural reference adjustment."""

    table_encodings: list[str] = Field(
        default_factory=lambda: ["utf-8", "cp1252"],
        min_length=1,
        description="Encodings tried for table parts without a BOM or declaration.",
    )
    log_level: str = Field(default="WARNING", description="Logging level.")
    log_file: Path | None = Field(default=None, description="Optional log file path.")

    @field_validator("table_encodings")
    @classmethod
    def _validate_encodings(cls, value: list[str]) -> list[str]:
        normalized: list[str] = []
        for label in value:
            candidate = label.strip()
            try:
                codecs.lookup(candidate)
            except LookupError as exc:
                raise ValueError(f"Unknown encoding: {label}") from exc
            normalized.append(candidate)
        return normalized

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


def load_config(environ: Mapping[str, str] | None = None) -> AdjustConfig:
    """Build a config from ``SHEETSHIFT_*`` environment variables.

    Args:
        environ: Optional mapping used instead of ``os.environ``.

    Returns:
        Parsed configuration; unset variables keep their defaults.
    """
    env = os.environ if environ is None else environ
    values: dict[str, object] = {}
    encodings = env.get(ENV_TABLE_ENCODINGS)
    if encodings:
        values["table_encodings"] = [
            item for item in (part.strip() for part in encodings.split(",")) if item
        ]
    if env.get(ENV_LOG_LEVEL):
        values["log_level"] = env[ENV_LOG_LEVEL]
    if env.get(ENV_LOG_FILE):
        values["log_file"] = Path(env[ENV_LOG_FILE])
    return AdjustConfig.model_validate(values)


def configure_logging(config: AdjustConfig) -> None:
    """Configure process logging from config.

    Args:
        config: Adjustment configuration.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file is not None:
        handlers.append(logging.FileHandler(config.log_file))
    logging.basicConfig(
        level=config.log_level,
        handlers=handlers,
        format=_LOG_FORMAT,
    )
