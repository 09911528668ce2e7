"""Unified configuration loading mechanism.

Load order: config file → environment variables → defaults
Exception: the shared secret is only taken from the environment (or the
command line), never from the config file.
"""

import configparser
import os

from radius_codec.exceptions import ConfigError
from radius_codec.utils.logger import get_logger

from .constants import DEFAULTS, ENV_PREFIX

logger = get_logger(__name__)


def populate_defaults(config: configparser.ConfigParser) -> None:
    """Fill missing sections/keys with default values."""
    for section, values in DEFAULTS.items():
        if not config.has_section(section):
            config.add_section(section)
        for key, value in values.items():
            if not config.has_option(section, key):
                config.set(section, key, value)


def apply_env_overrides(
    config: configparser.ConfigParser,
    section: str,
    key: str,
    env_var: str | None = None,
) -> None:
    """Apply environment variable override to config value.

    Args:
        config: ConfigParser instance
        section: Section name
        key: Key name
        env_var: Optional custom environment variable name.
                If None, derives from RADIUS_CODEC_SECTION_KEY pattern.
    """
    if env_var is None:
        env_var = f"{ENV_PREFIX}{section.upper()}_{key.upper()}"

    value = os.environ.get(env_var)
    if value is None:
        return
    if not config.has_section(section):
        config.add_section(section)
    # only overwrite if the key is not already set in the config file
    if not config.has_option(section, key):
        config.set(section, key, value)
        logger.debug(
            "Applied environment override for config key",
            event="radius.config.loader.env_override_applied",
            section=section,
            key=key,
            env_var=env_var,
        )
    else:
        logger.debug(
            "Skipping environment override because config already defines the value",
            event="radius.config.loader.env_override_skipped",
            section=section,
            key=key,
        )


def apply_all_env_overrides(config: configparser.ConfigParser) -> None:
    """Apply environment overrides for every known key.

    Environment variables follow the pattern RADIUS_CODEC_SECTION_KEY, e.g.
    RADIUS_CODEC_CODEC_STRICT_LENGTH or RADIUS_CODEC_LOGGING_LEVEL.
    """
    for section, values in DEFAULTS.items():
        for key in values:
            apply_env_overrides(config, section, key)


def load_config(source: str | None) -> configparser.ConfigParser:
    """Load configuration with precedence file → environment → defaults.

    A missing file is not an error; defaults and environment still apply.
    """
    config = configparser.ConfigParser(interpolation=None)

    if source:
        if os.path.exists(source):
            try:
                config.read(source, encoding="utf-8")
            except configparser.Error as exc:
                raise ConfigError(
                    f"Cannot parse configuration file: {source}",
                    {"source": source, "error": str(exc)},
                ) from exc
            logger.debug(
                "Loaded configuration file",
                event="radius.config.loader.file_loaded",
                source=source,
            )
        else:
            logger.debug(
                "Configuration file not found; using environment and defaults",
                event="radius.config.loader.file_missing",
                source=source,
            )

    apply_all_env_overrides(config)
    populate_defaults(config)
    return config
