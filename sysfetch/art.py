"""ASCII art lookup, caching and color-marker handling."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from rich.cells import cell_len
from rich.text import Text

from .records import InfoRecord, PlatformContext, is_unknown

logger = logging.getLogger(__name__)

DEFAULT_ART_DIR = Path(__file__).resolve().parent / "ascii"
UNKNOWN_FILENAME = "unknown.txt"
MARKERS = ("$1", "$2", "$3", "$4")

# Used when even unknown.txt cannot be read.
FALLBACK_ART = [
    "   ______   ",
    "  /  __  \\  ",
    " |  |  |  | ",
    " |__|  |  | ",
    "     /  /   ",
    "    |__|    ",
    "     __     ",
    "    |__|    ",
]

_MARKER_RE = re.compile(r"(\$[1-4])")
_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def strip_markers(line: str) -> str:
    """Remove color markers and ANSI escape sequences from a line of art."""
    return _ANSI_RE.sub("", _MARKER_RE.sub("", line))


def visible_length(line: str) -> int:
    return cell_len(strip_markers(line))


def process_art(lines: List[str], color_map: Mapping[str, str], base_style: Optional[str] = None) -> List[Text]:
    """Colorize art lines.

    Each ``$1``..``$4`` marker switches the style applied to the text that
    follows it, up to the next marker or the end of the line. Markers do not
    appear in the output. Text before the first marker gets ``base_style``.
    """
    processed: List[Text] = []
    for line in lines:
        text = Text(no_wrap=True)
        style = base_style
        for part in _MARKER_RE.split(_ANSI_RE.sub("", line)):
            if part in MARKERS:
                style = color_map.get(part, base_style)
            elif part:
                text.append(part, style=style)
        processed.append(text)
    return processed


class ArtRepository:
    """ASCII art files in a directory, keyed by lowercase system name.

    Lookups fall back to ``unknown.txt`` and then to :data:`FALLBACK_ART`, so
    :meth:`get_art` always returns some art. File contents are cached for the
    lifetime of the repository.
    """

    def __init__(self, art_dir: Optional[os.PathLike | str] = None) -> None:
        self.art_dir = Path(art_dir) if art_dir is not None else DEFAULT_ART_DIR
        self.system_mappings: Dict[str, str] = {}
        self._cache: Dict[str, List[str]] = {}
        self.load_system_mappings()

    def load_system_mappings(self) -> None:
        # Directory listing order is kept on purpose: fuzzy lookup uses the first match.
        self.system_mappings = {}
        try:
            names = os.listdir(self.art_dir)
        except OSError as exc:
            logger.error("Could not list ASCII art directory %s: %s", self.art_dir, exc)
            return
        for name in names:
            if name.endswith(".txt"):
                self.system_mappings[name[: -len(".txt")].lower()] = name

    def resolve_filename(self, system: str) -> str:
        system_lower = system.lower()
        if system_lower in self.system_mappings:
            return self.system_mappings[system_lower]
        for key, filename in self.system_mappings.items():
            if key and key in system_lower:
                return filename
        return UNKNOWN_FILENAME

    def has_art(self, system: str) -> bool:
        return system.lower() in self.system_mappings

    def list_available_systems(self) -> List[str]:
        return list(self.system_mappings)

    def get_art(self, system: str) -> List[str]:
        filename = self.resolve_filename(system)
        lines = self._load(filename)
        if not lines and filename != UNKNOWN_FILENAME:
            lines = self._load(UNKNOWN_FILENAME)
        if not lines:
            logger.error("No usable unknown art in %s; using built-in art", self.art_dir)
            return list(FALLBACK_ART)
        return list(lines)

    def _load(self, filename: str) -> Optional[List[str]]:
        if filename in self._cache:
            return self._cache[filename]
        path = self.art_dir / filename
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Could not load ASCII art from %s: %s", path, exc)
            return None
        lines = content.splitlines()
        while lines and not lines[-1].strip():
            lines.pop()
        if not lines:
            logger.warning("ASCII art file %s is empty", path)
            return None
        self._cache[filename] = lines
        return lines

    def system_for(self, info: InfoRecord, context: PlatformContext, forced: Optional[str] = None) -> str:
        """The art key to show for this host, unless ``forced`` overrides it."""
        if forced:
            return forced
        if context.is_android:
            return "android"
        if context.is_linux:
            if not is_unknown(info.distro) and self.resolve_filename(info.distro) != UNKNOWN_FILENAME:
                return info.distro
            return "linux"
        if context.is_windows:
            return "windows"
        if context.is_macos:
            return "macos"
        return "unknown"
