"""Value types shared by the probes, the aggregator and the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class PlatformContext:
    system: str
    is_android: bool = False
    environ: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_linux(self) -> bool:
        return self.system == "linux" and not self.is_android

    @property
    def is_macos(self) -> bool:
        return self.system == "darwin"

    @property
    def is_windows(self) -> bool:
        return self.system == "windows"


@dataclass(frozen=True)
class CpuInfo:
    model: str = UNKNOWN
    cores: str = UNKNOWN
    speed: str = UNKNOWN


@dataclass(frozen=True)
class UsageInfo:
    total: str = UNKNOWN
    used: str = UNKNOWN
    percentage: str = UNKNOWN


@dataclass(frozen=True)
class BatteryEntry:
    name: str
    capacity: str = UNKNOWN
    status: str = UNKNOWN
    time_remaining: Optional[str] = None
    voltage: Optional[str] = None
    temperature: Optional[str] = None
    current: Optional[str] = None
    power: Optional[str] = None


@dataclass(frozen=True)
class DisplayEntry:
    name: str
    resolution: str
    refresh: Optional[str] = None
    size: Optional[str] = None


@dataclass(frozen=True)
class NetworkInterface:
    name: str
    ip: str


@dataclass(frozen=True)
class AndroidInfo:
    device: str = UNKNOWN
    manufacturer: str = UNKNOWN
    version: str = UNKNOWN
    sdk: str = UNKNOWN
    wifi: str = UNKNOWN
    storage_total: str = UNKNOWN
    storage_used: str = UNKNOWN


@dataclass(frozen=True)
class OsRelease:
    platform: str = UNKNOWN
    distro: str = UNKNOWN
    release: str = UNKNOWN


@dataclass(frozen=True)
class ProbeError:
    category: str
    message: str


@dataclass(frozen=True)
class InfoRecord:
    """One fetch worth of host information; every field is always present."""

    hostname: str = UNKNOWN
    platform: str = UNKNOWN
    distro: str = UNKNOWN
    release: str = UNKNOWN
    kernel: str = UNKNOWN
    arch: str = UNKNOWN
    cpu: CpuInfo = field(default_factory=CpuInfo)
    gpu: str = UNKNOWN
    memory: UsageInfo = field(default_factory=UsageInfo)
    disk: UsageInfo = field(default_factory=UsageInfo)
    uptime: str = UNKNOWN
    shell: str = UNKNOWN
    terminal: str = UNKNOWN
    terminal_path: str = UNKNOWN
    resolution: str = UNKNOWN
    de: str = UNKNOWN
    wm: str = UNKNOWN
    battery: List[BatteryEntry] = field(default_factory=list)
    packages: Optional[str] = None
    display: List[DisplayEntry] = field(default_factory=list)
    theme: Dict[str, str] = field(default_factory=dict)
    locale: Dict[str, str] = field(default_factory=dict)
    network: List[NetworkInterface] = field(default_factory=list)
    swap: Optional[UsageInfo] = None
    android_info: Optional[AndroidInfo] = None
    failures: List[ProbeError] = field(default_factory=list)


def is_unknown(value: object) -> bool:
    """True for the sentinel values a probe returns when it found nothing."""
    return value is None or value == UNKNOWN or value == "" or value == [] or value == {}
