"""
pbxgraph config package public API.

Purpose
- Export settings types, the loader entrypoint and public error types.

Functional requirements
- Support loading from ``pbxgraph.toml`` + ``PBXGRAPH_`` env overrides.
- Fail fast with clear load/validation errors.
"""

from pbxgraph.config.loader import (
    DEFAULT_CONFIG_FILE,
    ENV_PREFIX,
    ConfigLoadError,
    load_config,
)
from pbxgraph.config.schema import (
    DEFAULT_SETTINGS,
    ConfigValidationError,
    LoggingSettings,
    SerializerSettings,
    Settings,
    default_config,
    merge_config,
    settings_from_config,
)

__all__ = [
    "ConfigLoadError",
    "ConfigValidationError",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_SETTINGS",
    "ENV_PREFIX",
    "LoggingSettings",
    "SerializerSettings",
    "Settings",
    "default_config",
    "load_config",
    "merge_config",
    "settings_from_config",
]
