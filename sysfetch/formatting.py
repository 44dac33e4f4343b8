"""Console-friendly formatting and the two-column art + info layout."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from rich.text import Text

from .art import process_art, strip_markers, visible_length
from .config import Config
from .records import UNKNOWN, BatteryEntry, DisplayEntry, InfoRecord, UsageInfo, is_unknown

logger = logging.getLogger(__name__)

THEME_LABELS = {
    "theme": "Theme",
    "icons": "Icons",
    "font": "Font",
    "cursor": "Cursor",
    "wm_theme": "WM Theme",
}
LOCALE_LABELS = {
    "locale": "Locale",
    "timezone": "Timezone",
}
_LABEL_SPACING = re.compile(r"\s+:")
_PERCENT = r"\d+(?:\.\d+)?%"


def format_gib(num: float) -> str:
    return f"{num / 1024**3:.2f} GB"


def usage_percentage(total: float, available: float) -> str:
    """Share of ``total`` that is not ``available``, e.g. ``"50.0%"``."""
    if total <= 0:
        return "0.0%"
    return f"{(total - available) / total * 100:.1f}%"


def format_uptime(seconds: float) -> str:
    """``{d}d {h}h {m}m`` with zero-valued leading components left out."""
    seconds = int(seconds)
    days = seconds // 86400
    hours = seconds % 86400 // 3600
    minutes = seconds % 3600 // 60
    parts = []
    if days:
        parts.append(f"{days}d")
    if days or hours:
        parts.append(f"{hours}h")
    parts.append(f"{minutes}m")
    return " ".join(parts)


def collapse_label(line: str) -> str:
    return _LABEL_SPACING.sub(":", line, count=1)


def format_info_line(label: str, value: str, config: Config) -> Text:
    plain = collapse_label(f"{label}: {value}")
    text = Text(plain, style=config.colors.info, no_wrap=True)
    colon = plain.find(":")
    text.stylize(f"bold {config.colors.labels}", 0, colon)
    if value == UNKNOWN:
        text.stylize(config.colors.error, colon + 2)
    else:
        text.highlight_regex(_PERCENT, config.colors.bar)
    return text


def build_info_lines(info: InfoRecord, config: Config, name: Optional[str] = None) -> List[Text]:
    """Info lines in display order, honouring the visibility flags."""
    compact = config.display.compact_mode
    rows: List[tuple] = []

    def add(flag: str, label: str, value: Optional[str], skip_unknown: bool = False) -> None:
        if not config.shows(flag) or value is None or value == "":
            return
        if skip_unknown and value == UNKNOWN:
            return
        rows.append((label, value))

    add("hostname", "Hostname", name or info.hostname)
    add("os", "OS", _os_name(info))
    add("kernel", "Kernel", info.kernel)
    add("uptime", "Uptime", info.uptime)
    add("shell", "Shell", info.shell)
    add("terminal", "Terminal", _terminal(info))
    add("cpu", "CPU", _cpu(info))
    add("gpu", "GPU", info.gpu, skip_unknown=True)
    add("memory", "Memory", _usage(info.memory))
    if info.swap is not None:
        add("swap", "Swap", _usage(info.swap))
    add("disk", "Disk", _usage(info.disk))
    add("resolution", "Resolution", info.resolution)

    batteries = info.battery[:1] if compact else info.battery
    for battery in batteries:
        label = "Battery" if len(info.battery) == 1 or compact else f"Battery ({battery.name})"
        add("battery", label, _battery(battery, compact))

    add("packages", "Packages", info.packages)
    if info.display:
        add("display", "Display", ", ".join(_display(d) for d in info.display))
    add("de", "DE", info.de, skip_unknown=True)
    add("wm", "WM", info.wm, skip_unknown=True)

    if not compact:
        for key, value in info.theme.items():
            add("theme", THEME_LABELS.get(key, key.replace("_", " ").title()), value, skip_unknown=True)
    for key, value in info.locale.items():
        add("locale", LOCALE_LABELS.get(key, key.title()), value, skip_unknown=True)

    if info.network:
        interfaces = info.network[:1] if compact else info.network
        add("network", "Network", ", ".join(f"{iface.ip} ({iface.name})" for iface in interfaces))

    android = info.android_info
    if android is not None:
        device = " ".join(v for v in (android.manufacturer, android.device) if not is_unknown(v))
        add("device", "Device", device or UNKNOWN)
        version = android.version if is_unknown(android.sdk) else f"{android.version} (SDK {android.sdk})"
        add("android_version", "Android", version)
        add("wifi_info", "WiFi", android.wifi, skip_unknown=True)
        if not is_unknown(android.storage_total):
            add("storage", "Storage", f"{android.storage_used} / {android.storage_total}")

    return [format_info_line(label, value, config) for label, value in rows]


def color_blocks(indent: int) -> List[Text]:
    """Two rows of the 16 standard terminal colors."""
    rows = []
    for row in range(2):
        text = Text(" " * indent)
        for column in range(8):
            text.append("   ", style=f"on color({row * 8 + column})")
        rows.append(text)
    return rows


def render(info: InfoRecord, art: Sequence[str], config: Config, name: Optional[str] = None) -> List[Text]:
    """Lay out ``art`` and the info lines side by side, shorter block vertically centered."""
    try:
        return _render(info, list(art), config, name)
    except Exception:
        logger.exception("Rendering failed; printing plain art")
        return [Text(strip_markers(line)) for line in art]


def _render(info: InfoRecord, art: List[str], config: Config, name: Optional[str]) -> List[Text]:
    display = config.display
    margin = display.margin
    lines: List[Text] = []

    if not display.compact_mode:
        lines.append(Text(display.separator * display.separator_length, style=config.colors.title))
        lines.append(Text())

    info_lines = build_info_lines(info, config, name)
    art_lines = process_art(art, config.art_colors, base_style=config.colors.ascii) if display.show_ascii_art else []
    art_width = max((visible_length(line) for line in art), default=0) if display.show_ascii_art else 0

    total_rows = max(len(art_lines), len(info_lines))
    art_top = (total_rows - len(art_lines)) // 2
    info_top = (total_rows - len(info_lines)) // 2

    for row in range(total_rows):
        line = Text(no_wrap=True)
        if display.show_ascii_art:
            index = row - art_top
            line.append(" " * margin)
            if 0 <= index < len(art_lines):
                piece = art_lines[index]
                line.append_text(piece)
                line.append(" " * (art_width - piece.cell_len + margin))
            else:
                line.append(" " * (art_width + margin))
        index = row - info_top
        if 0 <= index < len(info_lines):
            line.append_text(info_lines[index])
        line.rstrip()
        lines.append(line)

    if display.show_color_blocks:
        lines.append(Text())
        lines.extend(color_blocks(margin if display.show_ascii_art else 0))
    return lines


def _os_name(info: InfoRecord) -> str:
    if info.android_info is not None:
        parts = ["Android", info.android_info.version, info.arch]
    else:
        name = info.distro if not is_unknown(info.distro) else info.platform
        release = info.release if info.release not in name else None
        parts = [name, release, info.arch]
    known = [part for part in parts if not is_unknown(part)]
    return " ".join(known) or UNKNOWN


def _terminal(info: InfoRecord) -> str:
    if is_unknown(info.terminal_path):
        return info.terminal
    if is_unknown(info.terminal):
        return info.terminal_path
    return f"{info.terminal_path} ({info.terminal})"


def _cpu(info: InfoRecord) -> str:
    cpu = info.cpu
    details = []
    if not is_unknown(cpu.cores):
        details.append(f"{cpu.cores} cores")
    if not is_unknown(cpu.speed):
        details.append(f"@ {cpu.speed}")
    if is_unknown(cpu.model):
        return UNKNOWN if not details else f"{UNKNOWN} ({' '.join(details)})"
    return f"{cpu.model} ({' '.join(details)})" if details else cpu.model


def _usage(usage: UsageInfo) -> str:
    if is_unknown(usage.total):
        return UNKNOWN
    return f"{usage.used} / {usage.total} ({usage.percentage})"


def _battery(battery: BatteryEntry, compact: bool) -> str:
    value = f"{battery.capacity} ({battery.status})"
    if compact:
        return value
    details = [
        f"{battery.time_remaining} left" if battery.time_remaining else None,
        battery.power,
        battery.voltage,
        battery.temperature,
    ]
    details = [detail for detail in details if detail and detail != UNKNOWN]
    return f"{value}, {', '.join(details)}" if details else value


def _display(display: DisplayEntry) -> str:
    parts = [display.resolution, display.refresh, display.size, f"({display.name})" if display.name else None]
    return " ".join(part for part in parts if part)
