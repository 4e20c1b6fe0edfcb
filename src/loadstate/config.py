"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_ENV_VAR = "LOADSTATE_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/loadstate/config.yaml")
DEFAULT_ROOT_DIR = Path("~/.local/lib/loadstate")
DEFAULT_LOG_LEVEL = "info"


class ConfigError(ValueError):
    """Raised when configuration is invalid or missing."""


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str = DEFAULT_LOG_LEVEL
    debug_file: bool = False


@dataclass(frozen=True)
class Config:
    """Fully parsed configuration."""

    root_dir: Path
    output_dir: Path
    logging: LoggingConfig
    preloaded: list[str] = field(default_factory=list)
    boot: list[str] = field(default_factory=list)


def load_config(path: Path | str | None = None) -> Config:
    """Load and validate configuration from YAML."""

    config_path = resolve_config_path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return _parse_config(raw)


def resolve_config_path(explicit: Path | str | None) -> Path:
    if explicit:
        return Path(explicit).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def _parse_config(raw: dict[str, Any]) -> Config:
    root_dir = Path(raw.get("rootdir") or raw.get("root_dir") or DEFAULT_ROOT_DIR).expanduser()
    output_dir = _parse_output_dir(raw.get("output_dir"))
    preloaded = _parse_names(raw.get("preloaded"), "preloaded")
    boot = _parse_names(raw.get("boot"), "boot")
    return Config(
        root_dir=root_dir,
        output_dir=output_dir,
        logging=_parse_logging(raw.get("logging")),
        preloaded=preloaded,
        boot=boot,
    )


def _parse_output_dir(value: Any) -> Path:
    if value is None:
        raise ConfigError("output_dir must be configured.")
    if not isinstance(value, (str, Path)) or not str(value).strip():
        raise ConfigError("output_dir must be a non-empty string path.")
    return Path(value).expanduser()


def _parse_names(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{field_name} must be a list.")

    names: list[str] = []
    for idx, entry in enumerate(value, start=1):
        if not isinstance(entry, str):
            raise ConfigError(f"{field_name}[{idx}] must be a string.")
        names.append(entry)
    return names


def _parse_logging(value: Any) -> LoggingConfig:
    if value is None:
        return LoggingConfig()
    if not isinstance(value, dict):
        raise ConfigError("logging must be a mapping.")
    level = str(value.get("level", DEFAULT_LOG_LEVEL)).lower()
    debug_file = bool(value.get("debug_file", False))
    return LoggingConfig(level=level, debug_file=debug_file)


__all__ = [
    "CONFIG_ENV_VAR",
    "Config",
    "LoggingConfig",
    "ConfigError",
    "load_config",
    "resolve_config_path",
]
