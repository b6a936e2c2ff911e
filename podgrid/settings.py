"""Configuration for the pod observation grid."""
from __future__ import annotations

from dataclasses import dataclass, fields
import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from dateutil import tz

from . import CONFIG_DIR

LOGGER = logging.getLogger(__name__)

ENV_VAR = "PODGRID_CONFIG"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "podgrid.yaml"


class ConfigurationError(RuntimeError):
    """Raised when a configuration file is missing keys or malformed."""


@dataclass(slots=True, frozen=True)
class GridSettings:
    time_column_width: float = 160.0
    grid_margin: float = 32.0
    default_width: float = 1000.0
    min_column_width: float = 1.0
    timezone: Optional[str] = None
    time_format: str = "%x %X"
    tag_separator: str = " "
    viewport_rows: int = 20


DEFAULT_SETTINGS = GridSettings()

_POSITIVE_KEYS = ("time_column_width", "default_width", "min_column_width", "viewport_rows")
_TEXT_KEYS = ("time_format", "tag_separator")


def _load_file(path: Path) -> Dict[str, object]:
    if not path.exists():
        raise ConfigurationError(f"Configuration file {path} does not exist")
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text) or {}
        elif suffix == ".json":
            data = json.loads(text)
        else:
            raise ConfigurationError("Unsupported configuration format; use YAML or JSON")
    except ConfigurationError:
        raise
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Invalid configuration format in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration in {path} must be a mapping")
    return data


def settings_from_mapping(raw: Dict[str, object]) -> GridSettings:
    """Build :class:`GridSettings` from a parsed mapping, validating it."""
    section = raw.get("grid", raw)
    if not isinstance(section, dict):
        raise ConfigurationError("`grid` section must be a mapping")

    known = {f.name for f in fields(GridSettings)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigurationError(f"Unknown grid settings: {', '.join(unknown)}")

    settings = GridSettings(**section)
    for key in _POSITIVE_KEYS:
        value = getattr(settings, key)
        if not isinstance(value, (int, float)) or value <= 0:
            raise ConfigurationError(f"`{key}` must be a positive number")
    if not isinstance(settings.grid_margin, (int, float)) or settings.grid_margin < 0:
        raise ConfigurationError("`grid_margin` must not be negative")
    for key in _TEXT_KEYS:
        if not isinstance(getattr(settings, key), str):
            raise ConfigurationError(f"`{key}` must be a string")
    if settings.timezone is not None and not isinstance(settings.timezone, str):
        raise ConfigurationError("`timezone` must be a string or null")
    if settings.timezone and tz.gettz(settings.timezone) is None:
        raise ConfigurationError(f"Unknown timezone `{settings.timezone}`")
    return settings


def load_settings(path: Optional[Path | str] = None) -> GridSettings:
    candidate_paths: List[Path] = []
    if path:
        explicit = Path(path)
        if not explicit.exists():
            raise ConfigurationError(f"Configuration file {explicit} does not exist")
        candidate_paths.append(explicit)
    env_path = os.getenv(ENV_VAR)
    if env_path:
        candidate_paths.append(Path(env_path))
    candidate_paths.append(DEFAULT_CONFIG_FILE)

    for candidate in candidate_paths:
        if candidate.exists():
            LOGGER.info("Loading grid settings from %s", candidate)
            return settings_from_mapping(_load_file(candidate))

    LOGGER.debug("No grid configuration found, using defaults")
    return DEFAULT_SETTINGS
