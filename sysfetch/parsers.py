"""Parsing helpers for the text emitted by platform utilities and pseudo-files."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Tuple

from .records import UNKNOWN, BatteryEntry, DisplayEntry, UsageInfo

DRM_VENDORS = {
    "0x10de": "NVIDIA GPU",
    "0x1002": "AMD GPU",
    "0x8086": "Intel GPU",
}

_RADEON_RX = re.compile(r"(AMD Radeon RX \d+ / \d+ Series)")
_LSPCI_GPU = re.compile(
    r"^\S+\s+(?:VGA compatible controller|3D controller|Display controller)[^:]*:\s*(.+)$",
    re.IGNORECASE,
)
_VERSION = re.compile(r"\d+\.\d+\.\d+")
_DOUBLED_GPU_VENDOR = re.compile(r"(Adreno|Mali|PowerVR)\s+\1", re.IGNORECASE)
# Win32_Battery reports this runtime while plugged in.
WMIC_ON_AC_RUNTIME = "71582788"
_BYTE_UNITS = {
    "B": 1,
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
    "P": 1024**5,
}


def parse_key_values(text: str, separator: str = "=") -> Dict[str, str]:
    """Parse ``KEY=value`` style text (os-release, ``wmic /format:list``)."""
    values: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or separator not in line:
            continue
        key, _, value = line.partition(separator)
        values[key.strip()] = value.strip().strip('"').strip("'")
    return values


def parse_cpuinfo(text: str) -> Dict[str, str]:
    """First value of every key in ``/proc/cpuinfo``."""
    fields: Dict[str, str] = {}
    for line in text.splitlines():
        if ":" not in line:
            continue
        key, _, value = line.partition(":")
        key = key.strip()
        value = value.strip()
        if key and value and key not in fields:
            fields[key] = value
    return fields


def count_processors(text: str) -> int:
    return sum(1 for line in text.splitlines() if line.startswith("processor"))


def parse_version(output: str) -> Optional[str]:
    match = _VERSION.search(output)
    return match.group(0) if match else None


def convert_to_bytes(value: str) -> float:
    """Convert ``free -h`` sizes such as ``2.0Gi`` or ``512M`` to bytes."""
    match = re.match(r"^([\d.]+)([BKMGTP])?i?$", value.strip())
    if not match:
        return 0.0
    number, unit = match.groups()
    return float(number) * _BYTE_UNITS.get(unit or "B", 1)


def capped_percentage(used: float, total: float) -> str:
    if total <= 0:
        return "0.0%"
    return f"{min(used / total * 100, 100.0):.1f}%"


def parse_free_swap(output: str) -> Optional[UsageInfo]:
    for line in output.splitlines():
        if not line.startswith("Swap:"):
            continue
        parts = line.split()
        if len(parts) < 3:
            return None
        total, used = parts[1], parts[2]
        return UsageInfo(
            total=total,
            used=used,
            percentage=capped_percentage(convert_to_bytes(used), convert_to_bytes(total)),
        )
    return None


def parse_wmic_pagefile(output: str) -> Optional[UsageInfo]:
    for line in output.splitlines()[1:]:
        parts = line.split()
        if len(parts) < 2 or not parts[0].isdigit() or not parts[1].isdigit():
            continue
        total_mb, used_mb = float(parts[0]), float(parts[1])
        return UsageInfo(
            total=f"{total_mb / 1024:.2f} GB",
            used=f"{used_mb / 1024:.2f} GB",
            percentage=capped_percentage(used_mb, total_mb),
        )
    return None


def parse_xrandr(output: str) -> List[DisplayEntry]:
    displays: List[DisplayEntry] = []
    for line in output.splitlines():
        if " connected" not in line:
            continue
        name, _, rest = line.partition(" ")
        resolution = re.search(r"(\d+)x(\d+)", rest)
        if not resolution:
            continue
        refresh = re.search(r"(\d+\.?\d*)Hz", rest)
        size = re.search(r"(\d+)mm x (\d+)mm", rest)
        displays.append(
            DisplayEntry(
                name=name,
                resolution=f"{resolution.group(1)}x{resolution.group(2)}",
                refresh=f"{refresh.group(1)} Hz" if refresh else None,
                size=f"{size.group(1)}mm x {size.group(2)}mm" if size else None,
            )
        )
    return displays


def parse_xrandr_refresh(output: str) -> Optional[str]:
    """Refresh rate of the active mode, marked with ``*`` in xrandr's mode list."""
    match = re.search(r"(\d+\.\d+)\*", output)
    return f"{match.group(1)} Hz" if match else None


def parse_system_profiler_displays(output: str) -> List[DisplayEntry]:
    displays: List[DisplayEntry] = []
    for line in output.splitlines():
        if "Resolution:" not in line:
            continue
        resolution = re.search(r"(\d+) x (\d+)", line)
        if not resolution:
            continue
        refresh = re.search(r"(\d+(?:\.\d+)?) ?Hz", line)
        size = re.search(r"(\d+) inch", line)
        displays.append(
            DisplayEntry(
                name="Display",
                resolution=f"{resolution.group(1)}x{resolution.group(2)}",
                refresh=f"{refresh.group(1)} Hz" if refresh else None,
                size=f'{size.group(1)}"' if size else None,
            )
        )
    return displays


def parse_wmic_displays(output: str) -> List[DisplayEntry]:
    """Rows of ``wmic path Win32_VideoController get ...``.

    wmic prints its columns in alphabetical order whatever order they were
    requested in, so positions come from the header row. ``Name`` is last and
    may contain spaces.
    """
    lines = [line for line in output.splitlines() if line.strip()]
    if not lines:
        return []
    header = lines[0].split()
    try:
        width = header.index("CurrentHorizontalResolution")
        height = header.index("CurrentVerticalResolution")
        refresh = header.index("CurrentRefreshRate")
    except ValueError:
        return []
    displays: List[DisplayEntry] = []
    for line in lines[1:]:
        parts = line.split()
        if len(parts) < len(header) or not parts[width].isdigit() or not parts[height].isdigit():
            continue
        displays.append(
            DisplayEntry(
                name=" ".join(parts[len(header) - 1 :]),
                resolution=f"{parts[width]}x{parts[height]}",
                refresh=f"{parts[refresh]} Hz" if parts[refresh] != "0" else None,
            )
        )
    return displays


def main_gpu_model(name: str) -> str:
    match = _RADEON_RX.search(name)
    return match.group(1) if match else name.strip()


def parse_glxinfo_renderer(output: str) -> Optional[str]:
    match = re.search(r"OpenGL renderer string: (.*)", output)
    return main_gpu_model(match.group(1)) if match else None


def parse_lspci_gpus(output: str) -> List[str]:
    gpus: List[str] = []
    for line in output.splitlines():
        match = _LSPCI_GPU.match(line.strip())
        if match:
            gpus.append(main_gpu_model(match.group(1)))
    return gpus


def pick_gpu(candidates: Iterable[str]) -> Optional[str]:
    """Prefer a named Radeon RX part, otherwise the first distinct candidate."""
    unique = list(dict.fromkeys(c for c in candidates if c))
    if not unique:
        return None
    for entry in unique:
        if "AMD Radeon RX" in entry:
            return entry
    return unique[0]


def collapse_gpu_vendor(name: str) -> str:
    return _DOUBLED_GPU_VENDOR.sub(r"\1", name.strip())


def parse_proc_gpuinfo(text: str) -> List[str]:
    gpus: List[str] = []
    mali = re.search(r"Mali-(\w+)", text)
    adreno = re.search(r"Adreno\s*(\d+)", text)
    powervr = re.search(r"PowerVR\s*(\w+)", text)
    if mali:
        gpus.append(f"Mali-{mali.group(1)}")
    if adreno:
        gpus.append(f"Adreno {adreno.group(1)}")
    if powervr:
        gpus.append(f"PowerVR {powervr.group(1)}")
    return gpus


def pick_mobile_gpu(candidates: Iterable[str]) -> Optional[str]:
    """Several sources usually report the same GPU; keep the most specific one."""
    unique = list(dict.fromkeys(c for c in candidates if c))
    if len(unique) > 1:
        for entry in unique:
            if re.search(r"\d", entry):
                return entry
    return ", ".join(unique) or None


def micro_to_unit(raw: str, unit: str, digits: int = 2) -> str:
    return f"{int(raw.strip()) / 1_000_000:.{digits}f}{unit}"


def deci_celsius(raw: str) -> str:
    return f"{int(raw.strip()) / 10:.1f}°C"


def micro_amps(raw: str) -> str:
    return f"{int(raw.strip()) / 1000:.0f}mA"


def battery_time_remaining(energy_now: int, power_now: int) -> Optional[str]:
    """Remaining runtime from ``energy_now`` (µWh) and ``power_now`` (µW)."""
    if power_now <= 0:
        return None
    hours = energy_now // power_now
    minutes = int((energy_now % power_now) / (power_now / 60))
    return f"{hours}h {minutes}m"


def parse_pmset(output: str) -> Optional[BatteryEntry]:
    lines = output.splitlines()
    if len(lines) < 2:
        return None
    line = lines[1]
    capacity = re.search(r"(\d+)%", line)
    if not capacity:
        return None
    status = re.search(r"(discharging|charging|charged|AC attached)", line, re.IGNORECASE)
    remaining = re.search(r"(\d+):(\d+)", line)
    return BatteryEntry(
        name="BAT0",
        capacity=f"{capacity.group(1)}%",
        status=_normalize_status(status.group(1)) if status else UNKNOWN,
        time_remaining=f"{remaining.group(1)}h {remaining.group(2)}m" if remaining else None,
    )


def parse_ioreg_battery(output: str) -> Tuple[Optional[str], Optional[str]]:
    temperature = re.search(r'"Temperature"\s*=\s*(\d+)', output)
    voltage = re.search(r'"Voltage"\s*=\s*(\d+)', output)
    return (
        f"{int(temperature.group(1)) / 100:.1f}°C" if temperature else None,
        f"{int(voltage.group(1)) / 1000:.2f}V" if voltage else None,
    )


def parse_wmic_batteries(output: str) -> List[BatteryEntry]:
    """Blocks of ``wmic path Win32_Battery get ... /format:list`` output."""
    batteries: List[BatteryEntry] = []
    for block in re.split(r"\n\s*\n", output.replace("\r", "")):
        fields = parse_key_values(block)
        if "EstimatedChargeRemaining" not in fields:
            continue
        runtime = fields.get("EstimatedRunTime", "")
        if runtime == WMIC_ON_AC_RUNTIME:
            runtime = ""
        voltage = fields.get("DesignVoltage") or fields.get("Voltage") or ""
        batteries.append(
            BatteryEntry(
                name=f"BAT{len(batteries)}",
                capacity=f"{fields['EstimatedChargeRemaining']}%",
                status=fields.get("Status") or UNKNOWN,
                time_remaining=f"{int(runtime) // 60}h {int(runtime) % 60}m" if runtime.isdigit() else None,
                voltage=f"{int(voltage) / 1000:.2f}V" if voltage.isdigit() else None,
            )
        )
    return batteries


def parse_df(output: str) -> Tuple[str, str]:
    """Size and used columns of the first data row of ``df -h``."""
    lines = output.splitlines()
    if len(lines) > 1:
        parts = lines[1].split()
        if len(parts) >= 6:
            return parts[1], parts[2]
    return UNKNOWN, UNKNOWN


def parse_dumpsys_wifi_ssid(output: str) -> Optional[str]:
    for line in output.splitlines():
        if "SSID" not in line:
            continue
        ssid = line.split(",")[0].strip()
        ssid = re.sub(r"^.*SSID:\s*", "", ssid).strip().strip('"')
        return ssid or None
    return None


def android_cpu_name(
    board_platform: str,
    chipname: str,
    hardware: str,
    model_name: str,
    manufacturer: str,
    revision: str,
) -> str:
    """Best-effort marketing name for an Android SoC."""
    if board_platform != UNKNOWN:
        if "snapdragon" in board_platform.lower() or chipname == UNKNOWN:
            name = board_platform
        else:
            name = chipname
    elif chipname != UNKNOWN:
        name = chipname
    elif hardware != UNKNOWN:
        name = hardware
    else:
        name = model_name

    if manufacturer != UNKNOWN and manufacturer.lower() not in name.lower():
        name = f"{manufacturer} {name}"
    if revision != UNKNOWN:
        name += f" (rev {revision})"
    return name.strip()


def parse_windows_theme(output: str) -> str:
    return "Dark" if re.search(r"AppsUseLightTheme\s+REG_DWORD\s+0x0\b", output) else "Light"


def count_lines(output: str) -> int:
    return sum(1 for line in output.splitlines() if line.strip())


def _normalize_status(raw: str) -> str:
    lowered = raw.lower()
    if lowered == "discharging":
        return "Discharging"
    if lowered == "charging":
        return "Charging"
    if lowered in ("charged", "ac attached"):
        return "Full"
    return UNKNOWN
