"""Typed settings, defaults and validation for ``pbxgraph.toml``."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, Final

from pbxgraph.graph.serializer import DEFAULT_INLINE_TYPES
from pbxgraph.graph.store import TieBreak

_LOG_LEVELS: Final[frozenset[str]] = frozenset(
    {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
)


class ConfigValidationError(ValueError):
    """Raised when a merged config payload violates the settings schema."""


@dataclass(frozen=True, slots=True)
class SerializerSettings:
    tie_break: TieBreak = TieBreak.DISCOVERY
    inline_types: tuple[str, ...] = DEFAULT_INLINE_TYPES


@dataclass(frozen=True, slots=True)
class LoggingSettings:
    level: str = "WARNING"
    json: bool = False


@dataclass(frozen=True, slots=True)
class Settings:
    """Effective runtime settings."""

    serializer: SerializerSettings = field(default_factory=SerializerSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["serializer"]["tie_break"] = self.serializer.tie_break.value
        payload["serializer"]["inline_types"] = list(self.serializer.inline_types)
        return payload


DEFAULT_SETTINGS: Final[Settings] = Settings()


def default_config() -> dict[str, Any]:
    """Return the defaults as a fresh nested mapping."""
    return DEFAULT_SETTINGS.to_dict()


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deep-merge ``overlay`` onto ``base`` without mutating either."""
    merged: dict[str, Any] = {}
    for key, value in base.items():
        merged[key] = merge_config(value, {}) if isinstance(value, Mapping) else value
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = merge_config(current, value)
        elif isinstance(value, Mapping):
            merged[key] = merge_config({}, value)
        else:
            merged[key] = value
    return merged


def settings_from_config(config: Mapping[str, object]) -> Settings:
    """Validate a merged payload and build :class:`Settings` from it."""
    unknown = sorted(set(config) - {"serializer", "logging"})
    if unknown:
        raise ConfigValidationError(f"unknown config section(s): {', '.join(unknown)}")

    serializer = _section(config, "serializer", {"tie_break", "inline_types"})
    logging_section = _section(config, "logging", {"level", "json"})

    raw_tie_break = serializer.get("tie_break", DEFAULT_SETTINGS.serializer.tie_break.value)
    try:
        tie_break = TieBreak(raw_tie_break)
    except ValueError as exc:
        choices = ", ".join(item.value for item in TieBreak)
        raise ConfigValidationError(
            f"serializer.tie_break must be one of {choices} (got {raw_tie_break!r})"
        ) from exc

    raw_inline = serializer.get("inline_types", list(DEFAULT_SETTINGS.serializer.inline_types))
    if not isinstance(raw_inline, (list, tuple)) or not all(
        isinstance(item, str) and item for item in raw_inline
    ):
        raise ConfigValidationError("serializer.inline_types must be a list of non-empty strings")

    raw_level = logging_section.get("level", DEFAULT_SETTINGS.logging.level)
    if not isinstance(raw_level, str) or raw_level.strip().upper() not in _LOG_LEVELS:
        raise ConfigValidationError(
            f"logging.level must be one of {', '.join(sorted(_LOG_LEVELS))} (got {raw_level!r})"
        )

    raw_json = logging_section.get("json", DEFAULT_SETTINGS.logging.json)
    if not isinstance(raw_json, bool):
        raise ConfigValidationError("logging.json must be a boolean")

    return Settings(
        serializer=SerializerSettings(tie_break=tie_break, inline_types=tuple(raw_inline)),
        logging=LoggingSettings(level=raw_level.strip().upper(), json=raw_json),
    )


def _section(
    config: Mapping[str, object], name: str, allowed: set[str]
) -> Mapping[str, object]:
    value = config.get(name, {})
    if not isinstance(value, Mapping):
        raise ConfigValidationError(f"[{name}] must be a table")
    unknown = sorted(set(value) - allowed)
    if unknown:
        raise ConfigValidationError(f"unknown key(s) in [{name}]: {', '.join(unknown)}")
    return value


__all__ = [
    "DEFAULT_SETTINGS",
    "ConfigValidationError",
    "LoggingSettings",
    "SerializerSettings",
    "Settings",
    "default_config",
    "merge_config",
    "settings_from_config",
]
