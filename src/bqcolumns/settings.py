"""Configuration loading and validation for bqcolumns.

Settings come from, in increasing priority: defaults, ``BQCOLUMNS_*``
environment variables, and an optional YAML file (read with OmegaConf, so
``${oc.env:...}`` interpolation works).

Example bqcolumns.yaml:
    quiet: false
    log_level: INFO
    compression: zstd
    preview_rows: 20
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import omegaconf as oc
import pydantic as pdt
import pydantic_settings as pdts

import bqcolumns.errors as errors

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class Settings(pdts.BaseSettings, strict=True, frozen=True, extra="forbid"):
    """Base settings class with strict validation."""

    pass


class DecodeSettings(Settings):
    """Runtime settings for the command line."""

    model_config = pdts.SettingsConfigDict(env_prefix="BQCOLUMNS_")

    quiet: bool = False
    log_level: str = "WARNING"
    compression: Literal["snappy", "gzip", "zstd", "none"] = "snappy"
    preview_rows: int = pdt.Field(default=10, ge=0)

    @pdt.field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got '{value}'")
        return level

    @property
    def parquet_compression(self) -> str | None:
        return None if self.compression == "none" else self.compression


def load_settings(path: Path | str | None = None) -> DecodeSettings:
    """Load settings, optionally from a YAML file.

    Args:
        path: YAML file to read. None means defaults plus environment.

    Returns:
        Validated DecodeSettings instance.

    Raises:
        ConfigNotFoundError: If path is given and doesn't exist.
        ConfigValidationError: If the file or environment fails validation.
    """
    if path is None:
        try:
            return DecodeSettings()
        except pdt.ValidationError as e:
            raise errors.ConfigValidationError(
                path="<environment>",
                details=_format_validation_errors(e),
            ) from e

    path = Path(path)
    if not path.exists():
        raise errors.ConfigNotFoundError(str(path))

    try:
        config = oc.OmegaConf.load(path)
        config_dict = oc.OmegaConf.to_container(config, resolve=True) or {}
        if not isinstance(config_dict, dict):
            raise errors.ConfigValidationError(
                path=str(path),
                details="Top level of the settings file must be a mapping",
            )
        return DecodeSettings(**config_dict)
    except pdt.ValidationError as e:
        raise errors.ConfigValidationError(
            path=str(path),
            details=_format_validation_errors(e),
        ) from e
    except oc.errors.OmegaConfBaseException as e:
        raise errors.ConfigValidationError(
            path=str(path),
            details=str(e),
        ) from e


def _format_validation_errors(error: pdt.ValidationError) -> str:
    """Format Pydantic validation errors into readable messages."""
    messages = []
    for err in error.errors():
        loc = ".".join(str(x) for x in err["loc"])
        msg = err["msg"]
        messages.append(f"  - {loc}: {msg}")
    return "\n".join(messages)
