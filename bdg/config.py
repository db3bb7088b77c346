"""Configuration loading for bdg (.bdg.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .logging import get_logger
from .version import VersionOptions

CONFIG_FILENAME = ".bdg.yml"

DEFAULT_YEAR_MIN = 2000
DEFAULT_YEAR_MAX = 2199

logger = get_logger("config")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class VersionConfig:
    """Version classification settings from the ``version`` section."""

    allow_yy_calver: bool = False
    year_min: int = DEFAULT_YEAR_MIN
    year_max: int = DEFAULT_YEAR_MAX

    def to_options(self, *, allow_yy_calver: Optional[bool] = None) -> VersionOptions:
        """Build classifier options, letting a caller flag override the file value."""
        return VersionOptions(
            allow_yy_calver=self.allow_yy_calver if allow_yy_calver is None else allow_yy_calver,
            year_min=self.year_min,
            year_max=self.year_max,
        )


@dataclass
class BdgConfig:
    """Represents the settings defined in .bdg.yml."""

    root: Path
    path: Optional[Path] = None
    version: VersionConfig = field(default_factory=VersionConfig)


def find_project_root(start: Path) -> Path:
    """Return the nearest ancestor holding a ``.git`` entry, else ``start`` itself."""
    start = start.expanduser().resolve()
    for directory in (start, *start.parents):
        if (directory / ".git").exists():
            return directory
    return start


def load_config(current_dir: Path, root: Optional[Path] = None) -> BdgConfig:
    """Load the nearest .bdg.yml between ``current_dir`` and the project root.

    The search walks upward from ``current_dir`` and never leaves ``root``;
    when no file is found the defaults are returned.
    """
    current = current_dir.expanduser().resolve()
    stop = (root or find_project_root(current)).expanduser().resolve()

    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            logger.debug("Using configuration from %s", candidate)
            return _build_config(stop, candidate, _read_config(candidate))
        if directory == stop:
            break

    logger.debug("No %s found under %s, using defaults", CONFIG_FILENAME, stop)
    return BdgConfig(root=stop)


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _build_config(root: Path, path: Path, data: Dict[str, Any]) -> BdgConfig:
    version_data = _as_dict(data.get("version"))
    version = VersionConfig()
    if version_data:
        allow_yy = _as_bool(version_data.get("allow_yy_calver"))
        year_min = _as_int(version_data.get("year_min"))
        year_max = _as_int(version_data.get("year_max"))
        if allow_yy is not None:
            version.allow_yy_calver = allow_yy
        if year_min is not None:
            version.year_min = year_min
        if year_max is not None:
            version.year_max = year_max
    if version.year_min > version.year_max:
        raise ConfigError(
            f"{path.name}: version.year_min ({version.year_min}) is greater than "
            f"version.year_max ({version.year_max})"
        )
    return BdgConfig(root=root, path=path, version=version)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "BdgConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "VersionConfig",
    "find_project_root",
    "load_config",
]
