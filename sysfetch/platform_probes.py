"""Per-platform probes that collect one category of host information each.

Every probe method is best effort: it tries its sources in a fixed order and
returns the first well-formed answer, or a sentinel (``"Unknown"``, ``None`` or
an empty container) when nothing worked. Probes do not catch unexpected
exceptions themselves; the aggregator isolates each call.
"""

from __future__ import annotations

import json
import logging
import os
import platform
import re
import shutil
import socket
import subprocess
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import psutil

from . import parsers
from .formatting import format_gib
from .records import (
    UNKNOWN,
    AndroidInfo,
    BatteryEntry,
    CpuInfo,
    DisplayEntry,
    NetworkInterface,
    OsRelease,
    PlatformContext,
    UsageInfo,
)

logger = logging.getLogger(__name__)

COMMAND_TIMEOUT = 5.0
POWER_SUPPLY = Path("/sys/class/power_supply")
DRM = Path("/sys/class/drm")


def run_command(args: Sequence[str], timeout: float = COMMAND_TIMEOUT) -> Optional[str]:
    """Run a command and return its stdout, or ``None`` if it could not produce any."""
    try:
        result = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            timeout=timeout,
            errors="replace",
        )
    except FileNotFoundError:
        logger.debug("Command not found: %s", args[0])
        return None
    except PermissionError:
        logger.debug("Permission denied: %s", args[0])
        return None
    except subprocess.TimeoutExpired:
        logger.debug("Command timed out after %.0fs: %s", timeout, " ".join(args))
        return None
    except OSError as exc:
        logger.debug("Could not run %s: %s", args[0], exc)
        return None
    if result.returncode != 0:
        logger.debug("%s exited with status %d", " ".join(args), result.returncode)
        return None
    return result.stdout.strip()


def read_file(path: os.PathLike | str) -> Optional[str]:
    """Read a (pseudo-)file, returning ``None`` when it is missing or unreadable."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as handle:
            return handle.read().strip()
    except FileNotFoundError:
        return None
    except PermissionError:
        logger.debug("Permission denied reading: %s", path)
    except OSError as exc:
        logger.debug("Error reading %s: %s", path, exc)
    return None


class PlatformProbe:
    """Probes that work anywhere ``psutil`` does; platforms override what they know better."""

    def __init__(self, context: PlatformContext) -> None:
        self.context = context
        self.env = context.environ

    def hostname(self) -> str:
        return socket.gethostname() or platform.node() or UNKNOWN

    def arch(self) -> str:
        return platform.machine() or UNKNOWN

    def kernel(self) -> str:
        return platform.release() or UNKNOWN

    def os_release(self) -> OsRelease:
        system = platform.system() or UNKNOWN
        return OsRelease(platform=self.context.system, distro=system, release=platform.version() or UNKNOWN)

    def cpu(self) -> CpuInfo:
        return CpuInfo(model=self.cpu_model(), cores=self.cpu_cores(), speed=self.cpu_speed())

    def cpu_model(self) -> str:
        return platform.processor() or UNKNOWN

    def cpu_cores(self) -> str:
        count = psutil.cpu_count(logical=True)
        return str(count) if count else UNKNOWN

    def cpu_speed(self) -> str:
        try:
            freq = psutil.cpu_freq()
        except (NotImplementedError, OSError):
            freq = None
        mhz = (freq.max or freq.current) if freq else 0
        return f"{mhz / 1000:.2f} GHz" if mhz else UNKNOWN

    def memory_bytes(self) -> Tuple[int, int]:
        """Total and available physical memory."""
        memory = psutil.virtual_memory()
        return memory.total, memory.available

    def disk_bytes(self) -> Tuple[int, int]:
        """Total and used bytes summed over mounted, distinct block devices."""
        total = used = 0
        seen = set()
        for partition in psutil.disk_partitions(all=False):
            if partition.device in seen:
                continue
            try:
                usage = psutil.disk_usage(partition.mountpoint)
            except (PermissionError, OSError):
                continue
            seen.add(partition.device)
            total += usage.total
            used += usage.used
        return total, used

    def swap(self) -> Optional[UsageInfo]:
        swap = psutil.swap_memory()
        if not swap.total:
            return None
        return UsageInfo(
            total=format_gib(swap.total),
            used=format_gib(swap.used),
            percentage=parsers.capped_percentage(swap.used, swap.total),
        )

    def uptime_seconds(self) -> float:
        return max(time.time() - psutil.boot_time(), 0.0)

    def gpu(self) -> Optional[str]:
        return None

    def battery(self) -> List[BatteryEntry]:
        return self._psutil_battery()

    def displays(self) -> List[DisplayEntry]:
        return []

    def resolution(self) -> str:
        displays = self.displays()
        return displays[0].resolution if displays else UNKNOWN

    def de(self) -> str:
        return self.env.get("DESKTOP_SESSION") or self.env.get("XDG_CURRENT_DESKTOP") or UNKNOWN

    def wm(self) -> str:
        if self.env.get("XDG_SESSION_TYPE"):
            return self.env["XDG_SESSION_TYPE"].upper()
        return self.env.get("WINDOWMANAGER") or UNKNOWN

    def theme(self) -> Dict[str, str]:
        return {}

    def packages(self) -> Optional[str]:
        return None

    def locale(self) -> Dict[str, str]:
        timezone = self.env.get("TZ") or datetime.now().astimezone().tzname() or UNKNOWN
        return {
            "locale": self.env.get("LANG") or self.env.get("LC_ALL") or UNKNOWN,
            "timezone": timezone,
        }

    def network(self) -> List[NetworkInterface]:
        interfaces: List[NetworkInterface] = []
        for name, addresses in psutil.net_if_addrs().items():
            for address in addresses:
                if address.family == socket.AF_INET and not address.address.startswith("127."):
                    interfaces.append(NetworkInterface(name=name, ip=address.address))
        return interfaces

    def shell(self) -> str:
        shell_path = self.env.get("SHELL")
        if not shell_path:
            return UNKNOWN
        name = os.path.basename(shell_path)
        output = run_command([shell_path, "--version"])
        version = parsers.parse_version(output) if output else None
        return f"{name} {version}" if version else name

    def terminal(self) -> str:
        return self.env.get("TERM") or self.env.get("TERMINAL") or UNKNOWN

    def terminal_path(self) -> str:
        for key in ("TTY", "TERMINAL_EMULATOR", "TERM_PROGRAM"):
            if self.env.get(key):
                return self.env[key]
        return UNKNOWN

    def android_info(self) -> Optional[AndroidInfo]:
        return None

    def _psutil_battery(self) -> List[BatteryEntry]:
        try:
            battery = psutil.sensors_battery()
        except (NotImplementedError, OSError):
            return []
        if battery is None:
            return []
        if battery.power_plugged:
            status = "Full" if battery.percent >= 100 else "Charging"
        else:
            status = "Discharging"
        remaining = None
        if battery.secsleft not in (psutil.POWER_TIME_UNLIMITED, psutil.POWER_TIME_UNKNOWN):
            remaining = f"{battery.secsleft // 3600}h {battery.secsleft % 3600 // 60}m"
        return [
            BatteryEntry(
                name="BAT0",
                capacity=f"{battery.percent:.0f}%",
                status=status,
                time_remaining=remaining,
            )
        ]


class LinuxProbe(PlatformProbe):
    DESKTOP_COMMANDS: Dict[str, Dict[str, List[str]]] = {
        "KDE": {
            "theme": ["kreadconfig5", "--group", "Theme", "--key", "name"],
            "icons": ["kreadconfig5", "--group", "Icons", "--key", "Theme"],
            "font": ["kreadconfig5", "--group", "General", "--key", "font"],
            "cursor": ["kreadconfig5", "--group", "Mouse", "--key", "cursorTheme"],
            "wm_theme": ["kreadconfig5", "--group", "WM", "--key", "theme"],
        },
        "GNOME": {
            "theme": ["gsettings", "get", "org.gnome.desktop.interface", "gtk-theme"],
            "icons": ["gsettings", "get", "org.gnome.desktop.interface", "icon-theme"],
            "font": ["gsettings", "get", "org.gnome.desktop.interface", "font-name"],
            "cursor": ["gsettings", "get", "org.gnome.desktop.interface", "cursor-theme"],
        },
        "XFCE": {
            "theme": ["xfconf-query", "-c", "xsettings", "-p", "/Net/ThemeName"],
            "icons": ["xfconf-query", "-c", "xsettings", "-p", "/Net/IconThemeName"],
            "font": ["xfconf-query", "-c", "xsettings", "-p", "/Gtk/FontName"],
            "cursor": ["xfconf-query", "-c", "xsettings", "-p", "/Gtk/CursorThemeName"],
        },
        "CINNAMON": {
            "theme": ["gsettings", "get", "org.cinnamon.desktop.interface", "gtk-theme"],
            "icons": ["gsettings", "get", "org.cinnamon.desktop.interface", "icon-theme"],
            "font": ["gsettings", "get", "org.cinnamon.desktop.interface", "font-name"],
            "cursor": ["gsettings", "get", "org.cinnamon.desktop.interface", "cursor-theme"],
        },
        "MATE": {
            "theme": ["gsettings", "get", "org.mate.interface", "gtk-theme"],
            "icons": ["gsettings", "get", "org.mate.interface", "icon-theme"],
            "font": ["gsettings", "get", "org.mate.interface", "font-name"],
            "cursor": ["gsettings", "get", "org.mate.peripherals-mouse", "cursor-theme"],
        },
        "BUDGIE": {
            "theme": ["gsettings", "get", "org.gnome.desktop.interface", "gtk-theme"],
            "icons": ["gsettings", "get", "org.gnome.desktop.interface", "icon-theme"],
            "font": ["gsettings", "get", "org.gnome.desktop.interface", "font-name"],
            "cursor": ["gsettings", "get", "org.gnome.desktop.interface", "cursor-theme"],
        },
        "LXQT": {
            "theme": ["lxqt-config-appearance", "--print-theme"],
            "icons": ["lxqt-config-appearance", "--print-icon-theme"],
            "font": ["lxqt-config-appearance", "--print-font"],
            "cursor": ["lxqt-config-appearance", "--print-cursor-theme"],
        },
        "LXDE": {
            "theme": ["lxappearance", "--print-theme"],
            "icons": ["lxappearance", "--print-icon-theme"],
            "font": ["lxappearance", "--print-font"],
            "cursor": ["lxappearance", "--print-cursor-theme"],
        },
    }
    THEME_ENV_FALLBACKS = {
        "theme": "GTK_THEME",
        "icons": "ICON_THEME",
        "font": "GTK_FONT",
        "cursor": "XCURSOR_THEME",
    }
    PACKAGE_MANAGERS: List[Tuple[str, List[str]]] = [
        ("pacman", ["pacman", "-Qq"]),
        ("dpkg", ["dpkg-query", "-f", "${Status}\n", "-W"]),
        ("rpm", ["rpm", "-qa"]),
        ("flatpak", ["flatpak", "list"]),
        ("snap", ["snap", "list"]),
    ]

    def os_release(self) -> OsRelease:
        for path in ("/etc/os-release", "/usr/lib/os-release"):
            text = read_file(path)
            if not text:
                continue
            fields = parsers.parse_key_values(text)
            return OsRelease(
                platform=self.context.system,
                distro=fields.get("PRETTY_NAME") or fields.get("NAME") or UNKNOWN,
                release=fields.get("VERSION_ID") or fields.get("BUILD_ID") or UNKNOWN,
            )
        return OsRelease(platform=self.context.system)

    def cpu_model(self) -> str:
        text = read_file("/proc/cpuinfo")
        if text:
            fields = parsers.parse_cpuinfo(text)
            for key in ("model name", "Hardware", "Processor", "cpu model"):
                if fields.get(key):
                    return fields[key]
        return super().cpu_model()

    def gpu(self) -> Optional[str]:
        candidates: List[str] = []
        output = run_command(["glxinfo", "-B"])
        renderer = parsers.parse_glxinfo_renderer(output) if output else None
        if renderer:
            candidates.append(renderer)
        output = run_command(["lspci"])
        if output:
            candidates.extend(parsers.parse_lspci_gpus(output))
        if not candidates:
            candidates.extend(self._drm_vendors())
        return parsers.pick_gpu(candidates)

    def _drm_vendors(self) -> List[str]:
        vendors: List[str] = []
        try:
            cards = sorted(p for p in DRM.iterdir() if p.name.startswith("card") and "-" not in p.name)
        except OSError:
            return vendors
        for card in cards:
            vendor = read_file(card / "device" / "vendor")
            if vendor in parsers.DRM_VENDORS:
                vendors.append(parsers.DRM_VENDORS[vendor])
        return vendors

    def battery(self) -> List[BatteryEntry]:
        try:
            supplies = sorted(p for p in POWER_SUPPLY.iterdir() if p.name.startswith("BAT"))
        except OSError:
            supplies = []
        batteries = [entry for entry in (self._sysfs_battery(path) for path in supplies) if entry]
        return batteries or self._psutil_battery()

    def _sysfs_battery(self, base: Path, name: Optional[str] = None) -> Optional[BatteryEntry]:
        capacity = read_file(base / "capacity")
        if capacity is None:
            return None
        status = read_file(base / "status") or UNKNOWN
        voltage = read_file(base / "voltage_now")
        temperature = read_file(base / "temp")
        current = read_file(base / "current_now")
        power = read_file(base / "power_now")
        energy = read_file(base / "energy_now")

        remaining = None
        if status == "Discharging" and power and energy and power.isdigit() and energy.isdigit():
            remaining = parsers.battery_time_remaining(int(energy), int(power))

        return BatteryEntry(
            name=name or base.name,
            capacity=f"{capacity}%",
            status=status,
            time_remaining=remaining,
            voltage=parsers.micro_to_unit(voltage, "V") if _is_int(voltage) else None,
            temperature=parsers.deci_celsius(temperature) if _is_int(temperature) else None,
            current=parsers.micro_amps(current) if _is_int(current) else None,
            power=parsers.micro_to_unit(power, "W") if _is_int(power) else None,
        )

    def displays(self) -> List[DisplayEntry]:
        output = run_command(["xrandr", "--current"])
        if not output:
            return []
        displays = parsers.parse_xrandr(output)
        refresh = parsers.parse_xrandr_refresh(output)
        if displays and refresh and displays[0].refresh is None:
            first = displays[0]
            displays[0] = DisplayEntry(first.name, first.resolution, refresh, first.size)
        return displays

    def theme(self) -> Dict[str, str]:
        theme: Dict[str, str] = {}
        desktop = self.de().lower()
        for key, commands in self.DESKTOP_COMMANDS.items():
            if key.lower() not in desktop:
                continue
            for field, command in commands.items():
                output = run_command(command)
                if output:
                    theme[field] = output.strip().strip("'")
            break
        for field, variable in self.THEME_ENV_FALLBACKS.items():
            if field not in theme and self.env.get(variable):
                theme[field] = self.env[variable]
        return theme

    def packages(self) -> Optional[str]:
        counts = []
        for manager, command in self.PACKAGE_MANAGERS:
            if not shutil.which(command[0]):
                continue
            output = run_command(command, timeout=15)
            if output is None:
                continue
            if manager == "dpkg":
                count = sum(1 for line in output.splitlines() if line.endswith(" installed"))
            elif manager == "snap":
                count = max(parsers.count_lines(output) - 1, 0)
            else:
                count = parsers.count_lines(output)
            counts.append(f"{count} ({manager})")
        return ", ".join(counts) or None

    def swap(self) -> Optional[UsageInfo]:
        swap = super().swap()
        if swap is not None:
            return swap
        output = run_command(["free", "-h"])
        return parsers.parse_free_swap(output) if output else None

    def terminal_path(self) -> str:
        output = run_command(["tty"])
        if output and output != "not a tty":
            return output
        output = run_command(["ps", "-p", str(os.getpid()), "-o", "tty="])
        if output and output != "?":
            return f"/dev/{output}"
        for command in (["who", "am", "i"], ["w"]):
            output = run_command(command)
            match = re.search(r"pts/\d+", output or "")
            if match:
                return f"/dev/{match.group(0)}"
        return super().terminal_path()


class AndroidProbe(LinuxProbe):
    BATTERY = POWER_SUPPLY / "battery"
    MOBILE_GPU_FILES = [
        ("Mali", Path("/sys/class/misc/mali0/device/gpuinfo"), Path("/sys/class/misc/mali0/device/clock"), 1),
        ("Adreno", Path("/sys/class/kgsl/kgsl-3d0/gpu_model"), Path("/sys/class/kgsl/kgsl-3d0/gpuclk"), 1_000_000),
        ("PowerVR", Path("/sys/class/pvr_sync/gpuinfo"), Path("/sys/class/pvr_sync/gpuclk"), 1_000_000),
    ]

    def getprop(self, name: str) -> str:
        return run_command(["getprop", name]) or UNKNOWN

    def os_release(self) -> OsRelease:
        return OsRelease(
            platform="Android",
            distro=self.getprop("ro.product.model"),
            release=self.getprop("ro.build.id"),
        )

    def cpu_model(self) -> str:
        text = read_file("/proc/cpuinfo") or ""
        fields = parsers.parse_cpuinfo(text)
        hardware = fields.get("Hardware") or self.getprop("ro.hardware")
        return parsers.android_cpu_name(
            board_platform=self.getprop("ro.board.platform"),
            chipname=self.getprop("ro.chipname"),
            hardware=hardware,
            model_name=fields.get("model name") or fields.get("Processor") or UNKNOWN,
            manufacturer=self.getprop("ro.product.manufacturer"),
            revision=fields.get("CPU revision") or UNKNOWN,
        )

    def cpu_cores(self) -> str:
        count = parsers.count_processors(read_file("/proc/cpuinfo") or "")
        return str(count) if count else super().cpu_cores()

    def gpu(self) -> Optional[str]:
        candidates: List[str] = []
        for vendor, info_path, clock_path, clock_divisor in self.MOBILE_GPU_FILES:
            model = read_file(info_path)
            if not model:
                continue
            model = re.sub(rf"^{vendor}\s*", "", model, flags=re.IGNORECASE)
            clock = read_file(clock_path)
            suffix = f" @ {round(int(clock) / clock_divisor)} MHz" if _is_int(clock) else ""
            candidates.append(f"{vendor} {model}{suffix}")
        gpuinfo = read_file("/proc/gpuinfo")
        if gpuinfo:
            candidates.extend(parsers.parse_proc_gpuinfo(gpuinfo))
        try:
            cards = sorted(p for p in DRM.iterdir() if p.name.startswith("card") and "-" not in p.name)
        except OSError:
            cards = []
        for card in cards:
            name = read_file(card / "device" / "name")
            if name:
                candidates.append(parsers.collapse_gpu_vendor(name))
        return parsers.pick_mobile_gpu(candidates)

    def battery(self) -> List[BatteryEntry]:
        entry = self._sysfs_battery(self.BATTERY, name="BAT0")
        return [entry] if entry else []

    def displays(self) -> List[DisplayEntry]:
        output = run_command(["wm", "size"])
        match = re.search(r"(\d+)x(\d+)", output or "")
        if not match:
            return []
        return [DisplayEntry(name="Built-in", resolution=match.group(0))]

    def de(self) -> str:
        return UNKNOWN

    def wm(self) -> str:
        return UNKNOWN

    def terminal_path(self) -> str:
        output = run_command(["tty"])
        if output and output != "not a tty":
            return output
        return PlatformProbe.terminal_path(self)

    def android_info(self) -> Optional[AndroidInfo]:
        storage = run_command(["df", "-h", "/storage/emulated/0"]) or run_command(["df", "-h", "/sdcard"])
        storage_total, storage_used = parsers.parse_df(storage) if storage else (UNKNOWN, UNKNOWN)
        wifi = run_command(["dumpsys", "wifi"])
        return AndroidInfo(
            device=self.getprop("ro.product.model"),
            manufacturer=self.getprop("ro.product.manufacturer"),
            version=self.getprop("ro.build.version.release"),
            sdk=self.getprop("ro.build.version.sdk"),
            wifi=(parsers.parse_dumpsys_wifi_ssid(wifi) if wifi else None) or UNKNOWN,
            storage_total=storage_total,
            storage_used=storage_used,
        )


class MacProbe(PlatformProbe):
    def os_release(self) -> OsRelease:
        output = run_command(["sw_vers"])
        if not output:
            return OsRelease(platform=self.context.system, distro="macOS", release=platform.mac_ver()[0] or UNKNOWN)
        fields = parsers.parse_key_values(output, separator=":")
        return OsRelease(
            platform=self.context.system,
            distro=fields.get("ProductName") or "macOS",
            release=fields.get("ProductVersion") or UNKNOWN,
        )

    def cpu_model(self) -> str:
        return run_command(["sysctl", "-n", "machdep.cpu.brand_string"]) or super().cpu_model()

    def _profiler_displays(self) -> str:
        return run_command(["system_profiler", "SPDisplaysDataType"], timeout=15) or ""

    def gpu(self) -> Optional[str]:
        output = self._profiler_displays()
        chipset = re.search(r"Chipset Model: (.*)", output)
        if not chipset:
            return None
        clock = re.search(r"Core Clock: (.*)", output)
        name = chipset.group(1).strip()
        return f"{name} @ {clock.group(1).strip()}" if clock else name

    def displays(self) -> List[DisplayEntry]:
        return parsers.parse_system_profiler_displays(self._profiler_displays())

    def battery(self) -> List[BatteryEntry]:
        output = run_command(["pmset", "-g", "batt"])
        entry = parsers.parse_pmset(output) if output else None
        if entry is None:
            return self._psutil_battery()
        ioreg = run_command(["ioreg", "-rn", "AppleSmartBattery"])
        if ioreg:
            temperature, voltage = parsers.parse_ioreg_battery(ioreg)
            entry = BatteryEntry(
                name=entry.name,
                capacity=entry.capacity,
                status=entry.status,
                time_remaining=entry.time_remaining,
                voltage=voltage,
                temperature=temperature,
            )
        return [entry]

    def de(self) -> str:
        return "Aqua"

    def wm(self) -> str:
        return "Quartz Compositor"

    def theme(self) -> Dict[str, str]:
        # The key is absent (non-zero exit) in light mode.
        style = run_command(["defaults", "read", "-g", "AppleInterfaceStyle"])
        theme = {"theme": "Dark" if style == "Dark" else "Light"}
        font = run_command(["defaults", "read", "-g", "AppleSystemUIFont"])
        if font:
            theme["font"] = font
        return theme

    def packages(self) -> Optional[str]:
        counts = []
        if shutil.which("brew"):
            output = run_command(["brew", "list", "-1"], timeout=15)
            if output is not None:
                counts.append(f"{parsers.count_lines(output)} (brew)")
        if shutil.which("port"):
            output = run_command(["port", "installed"], timeout=15)
            if output is not None:
                counts.append(f"{max(parsers.count_lines(output) - 1, 0)} (port)")
        return ", ".join(counts) or None

    def terminal_path(self) -> str:
        output = run_command(["tty"])
        if output and output != "not a tty":
            return output
        return super().terminal_path()


class WindowsProbe(PlatformProbe):
    def os_release(self) -> OsRelease:
        return OsRelease(
            platform=self.context.system,
            distro=f"Windows {platform.release()}".strip(),
            release=platform.version() or UNKNOWN,
        )

    def gpu(self) -> Optional[str]:
        output = run_command(
            [
                "powershell",
                "-NoProfile",
                "-Command",
                "Get-CimInstance Win32_VideoController | Select-Object Name | ConvertTo-Json",
            ],
            timeout=15,
        )
        if not output:
            return None
        try:
            payload = json.loads(output)
        except ValueError:
            logger.debug("Unexpected Win32_VideoController output: %r", output[:200])
            return None
        controllers = payload if isinstance(payload, list) else [payload]
        names = list(dict.fromkeys(c.get("Name") for c in controllers if isinstance(c, dict) and c.get("Name")))
        return ", ".join(names) or None

    def displays(self) -> List[DisplayEntry]:
        output = run_command(
            [
                "wmic",
                "path",
                "Win32_VideoController",
                "get",
                "CurrentHorizontalResolution,CurrentVerticalResolution,CurrentRefreshRate,Name",
            ]
        )
        return parsers.parse_wmic_displays(output) if output else []

    def battery(self) -> List[BatteryEntry]:
        output = run_command(
            [
                "wmic",
                "path",
                "Win32_Battery",
                "get",
                "EstimatedChargeRemaining,Status,EstimatedRunTime,DesignVoltage",
                "/format:list",
            ]
        )
        batteries = parsers.parse_wmic_batteries(output) if output else []
        return batteries or self._psutil_battery()

    def de(self) -> str:
        return "Windows"

    def wm(self) -> str:
        return "DWM"

    def theme(self) -> Dict[str, str]:
        output = run_command(
            [
                "reg",
                "query",
                r"HKCU\Software\Microsoft\Windows\CurrentVersion\Themes\Personalize",
                "/v",
                "AppsUseLightTheme",
            ]
        )
        return {"theme": parsers.parse_windows_theme(output)} if output else {}

    def packages(self) -> Optional[str]:
        counts = []
        if shutil.which("choco"):
            output = run_command(["choco", "list", "--limit-output"], timeout=15)
            if output is not None:
                counts.append(f"{parsers.count_lines(output)} (choco)")
        if shutil.which("scoop"):
            output = run_command(["scoop", "list"], timeout=15)
            if output is not None:
                counts.append(f"{max(parsers.count_lines(output) - 3, 0)} (scoop)")
        return ", ".join(counts) or None

    def swap(self) -> Optional[UsageInfo]:
        swap = super().swap()
        if swap is not None:
            return swap
        output = run_command(["wmic", "pagefile", "get", "AllocatedBaseSize,CurrentUsage"])
        return parsers.parse_wmic_pagefile(output) if output else None

    def shell(self) -> str:
        if self.env.get("SHELL"):
            return super().shell()
        if self.env.get("PSModulePath") and self.env.get("PROMPT") is None:
            return "PowerShell"
        comspec = self.env.get("COMSPEC")
        return os.path.basename(comspec) if comspec else UNKNOWN

    def terminal(self) -> str:
        if self.env.get("WT_SESSION"):
            return "Windows Terminal"
        return super().terminal()


def probe_for(context: PlatformContext) -> PlatformProbe:
    """Pick the probe implementation for a detected platform."""
    if context.is_android:
        return AndroidProbe(context)
    if context.is_linux:
        return LinuxProbe(context)
    if context.is_macos:
        return MacProbe(context)
    if context.is_windows:
        return WindowsProbe(context)
    logger.warning("No dedicated probes for platform %r; using generic ones", context.system)
    return PlatformProbe(context)


def _is_int(value: Optional[str]) -> bool:
    return bool(value) and value.lstrip("-").isdigit()
