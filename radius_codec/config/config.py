"""Codec configuration manager."""

from __future__ import annotations

import configparser
import os
from typing import Any

from pydantic import ValidationError

from radius_codec.exceptions import ConfigValidationError
from radius_codec.utils.logger import get_logger

from .constants import (
    ENV_CODEC_CONFIG,
    ENV_SECRET,
    SECTION_CODEC,
    SECTION_DICTIONARY,
    SECTION_LOGGING,
)
from .loader import load_config
from .schema import CodecConfigSchema

logger = get_logger(__name__)


def _format_errors(exc: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    ]


class CodecConfig:
    """Codec configuration manager.

    Thin orchestration layer over :func:`load_config` and the pydantic
    schema. Values are validated once at construction; invalid values raise
    :class:`ConfigValidationError`.
    """

    def __init__(self, config_file: str | None = None):
        """Initialize configuration manager.

        Args:
            config_file: Path to an INI configuration file. Falls back to the
                RADIUS_CODEC_CONFIG environment variable.
        """
        self.config_source = config_file or os.environ.get(ENV_CODEC_CONFIG)
        self.config: configparser.ConfigParser = load_config(self.config_source)
        self._validated = self._validate()
        logger.debug(
            "Configuration loaded successfully",
            event="radius.config.loaded",
            source=self.config_source,
        )

    def _as_dict(self) -> dict[str, dict[str, str]]:
        return {
            section: dict(self.config[section])
            for section in (SECTION_CODEC, SECTION_DICTIONARY, SECTION_LOGGING)
        }

    def _validate(self) -> CodecConfigSchema:
        try:
            return CodecConfigSchema.model_validate(self._as_dict())
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(p) for p in first.get("loc", ()))
            raise ConfigValidationError(
                f"Invalid configuration: {field}: {first.get('msg')}",
                field=field,
                value=first.get("input"),
                issues=_format_errors(exc),
            ) from exc

    def validate_config(self) -> list[str]:
        """Re-validate the current values and return a list of issues."""
        issues: list[str] = []
        try:
            validated = CodecConfigSchema.model_validate(self._as_dict())
        except ValidationError as exc:
            return _format_errors(exc)

        path = validated.dictionary.path
        if path and not os.path.isfile(path):
            issues.append(f"Dictionary file does not exist: {path}")
        return issues

    def get_codec_config(self) -> dict[str, Any]:
        return self._validated.codec.model_dump()

    def get_dictionary_path(self) -> str | None:
        return self._validated.dictionary.path

    def get_logging_config(self) -> dict[str, Any]:
        return self._validated.logging.model_dump()

    @staticmethod
    def get_secret() -> str | None:
        """Shared secret from the environment (never from the config file)."""
        return os.environ.get(ENV_SECRET)
