"""Display configuration: built-in defaults with an optional YAML override file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

INFO_FIELDS = (
    "hostname",
    "os",
    "kernel",
    "uptime",
    "shell",
    "terminal",
    "cpu",
    "gpu",
    "memory",
    "swap",
    "disk",
    "resolution",
    "battery",
    "packages",
    "display",
    "de",
    "wm",
    "theme",
    "locale",
    "network",
    "device",
    "android_version",
    "wifi_info",
    "storage",
)


@dataclass(frozen=True)
class ColorScheme:
    """Rich style strings for each part of the output."""

    title: str = "cyan"
    labels: str = "cyan"
    ascii: str = "green"
    info: str = "white"
    bar: str = "yellow"
    error: str = "red"


@dataclass(frozen=True)
class DisplayOptions:
    show_ascii_art: bool = True
    show_color_blocks: bool = True
    compact_mode: bool = False
    separator: str = "─"
    separator_length: int = 50
    margin: int = 8


def _default_art_colors() -> Dict[str, str]:
    return {"$1": "cyan", "$2": "magenta", "$3": "green", "$4": "yellow"}


def _default_show_info() -> Dict[str, bool]:
    return {name: True for name in INFO_FIELDS}


@dataclass(frozen=True)
class Config:
    colors: ColorScheme = field(default_factory=ColorScheme)
    display: DisplayOptions = field(default_factory=DisplayOptions)
    art_colors: Dict[str, str] = field(default_factory=_default_art_colors)
    show_info: Dict[str, bool] = field(default_factory=_default_show_info)

    def shows(self, name: str) -> bool:
        return self.show_info.get(name, True)


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    base = env.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return Path(base) / "sysfetch" / "config.yaml"


def load_config(path: Optional[os.PathLike | str] = None) -> Config:
    """Load the config file at ``path`` (or the default location) over the defaults.

    A missing default file is normal; an explicit path that cannot be read, or
    any file that is not a YAML mapping, is logged and the defaults are used.
    """
    explicit = path is not None
    config_path = Path(path) if explicit else default_config_path()
    if not config_path.is_file():
        if explicit:
            logger.warning("Config file %s not found; using defaults", config_path)
        return Config()

    try:
        with open(config_path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Could not read config file %s: %s", config_path, exc)
        return Config()

    if not isinstance(data, dict):
        logger.warning("Config file %s must contain a mapping; using defaults", config_path)
        return Config()
    return config_from_mapping(data)


def config_from_mapping(data: Mapping[str, Any]) -> Config:
    config = Config()
    for key in data:
        if key not in ("colors", "display", "art_colors", "show_info"):
            logger.warning("Ignoring unknown config section %r", key)

    colors = _overlay(config.colors, data.get("colors"), "colors")
    display = _overlay(config.display, data.get("display"), "display")

    art_colors = dict(config.art_colors)
    for marker, style in _section(data, "art_colors").items():
        marker = str(marker) if str(marker).startswith("$") else f"${marker}"
        if marker not in art_colors:
            logger.warning("Ignoring unknown art color marker %r", marker)
            continue
        art_colors[marker] = str(style)

    show_info = dict(config.show_info)
    for name, visible in _section(data, "show_info").items():
        if name not in show_info:
            logger.warning("Ignoring unknown show_info field %r", name)
            continue
        if not isinstance(visible, bool):
            logger.warning("Invalid value %r for show_info.%s", visible, name)
            continue
        show_info[name] = visible

    return Config(colors=colors, display=display, art_colors=art_colors, show_info=show_info)


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    values = data.get(name)
    if not values:
        return {}
    if not isinstance(values, Mapping):
        logger.warning("Config section %r must be a mapping", name)
        return {}
    return values


def _overlay(section: Any, values: Optional[Mapping[str, Any]], name: str) -> Any:
    if not values:
        return section
    if not isinstance(values, Mapping):
        logger.warning("Config section %r must be a mapping", name)
        return section
    known = {f.name for f in fields(section)}
    updates: Dict[str, Any] = {}
    for key, value in values.items():
        if key not in known:
            logger.warning("Ignoring unknown %s option %r", name, key)
            continue
        current = getattr(section, key)
        if isinstance(current, bool) and not isinstance(value, bool):
            logger.warning("Invalid value %r for %s.%s", value, name, key)
            continue
        try:
            updates[key] = type(current)(value)
        except (TypeError, ValueError):
            logger.warning("Invalid value %r for %s.%s", value, name, key)
    return replace(section, **updates)
