"""Configuration constants and defaults.

This module contains all default configuration values and constants used
throughout the configuration system.
"""

# Section names
SECTION_CODEC = "codec"
SECTION_DICTIONARY = "dictionary"
SECTION_LOGGING = "logging"

# Environment variable prefixes
ENV_PREFIX = "RADIUS_CODEC_"

# Secrets (environment only)
ENV_SECRET = "RADIUS_CODEC_SECRET"

# Meta-configuration
ENV_CODEC_CONFIG = "RADIUS_CODEC_CONFIG"

# Allowed values
PASSWORD_CHAINING_MODES = ("single", "rfc2865")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Default values
DEFAULTS = {
    SECTION_CODEC: {
        "strict_length": "true",
        "reject_zero_type": "false",
        "password_chaining": "single",
        "max_packet_length": "4096",
    },
    SECTION_DICTIONARY: {
        "path": "",
    },
    SECTION_LOGGING: {
        "level": "INFO",
    },
}
