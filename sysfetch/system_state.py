"""Collect host information into a single :class:`InfoRecord`."""

from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar

from .formatting import format_gib, format_uptime, usage_percentage
from .platform_probes import PlatformProbe, probe_for
from .records import UNKNOWN, CpuInfo, InfoRecord, OsRelease, PlatformContext, ProbeError, UsageInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Names the art repository uses for a platform, mapped to platform.system() names.
PLATFORM_ALIASES = {"macos": "darwin", "mac": "darwin", "osx": "darwin", "win32": "windows"}


@dataclass(frozen=True)
class ProbeResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[ProbeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def value_or(self, default: T) -> T:
        if self.error is not None or self.value is None:
            return default
        return self.value


def collect(category: str, probe: Callable[[], T]) -> ProbeResult[T]:
    """Run one probe, turning any exception into a failed :class:`ProbeResult`."""
    try:
        return ProbeResult(value=probe())
    except Exception as exc:
        logger.warning("Could not determine %s: %s", category, exc)
        logger.debug("%s probe traceback", category, exc_info=True)
        return ProbeResult(error=ProbeError(category=category, message=str(exc) or type(exc).__name__))


def detect_platform(environ: Optional[Mapping[str, str]] = None, system: Optional[str] = None) -> PlatformContext:
    """Android is recognised from its environment before the generic OS name is consulted."""
    env = dict(os.environ if environ is None else environ)
    if env.get("ANDROID_ROOT") or env.get("ANDROID_DATA"):
        return PlatformContext(system="android", is_android=True, environ=env)
    name = (system or platform.system() or "unknown").lower()
    return PlatformContext(system=name, is_android=False, environ=env)


def gather_info(context: Optional[PlatformContext] = None, forced_platform: Optional[str] = None) -> InfoRecord:
    """Run every probe for the host platform and merge the results.

    ``forced_platform`` swaps the probe implementation (``"linux"``, ``"android"``,
    ``"darwin"`` or ``"macos"``, ``"windows"``). A failure before probing can
    start yields the all-Unknown record; later failures only blank their own field.
    """
    try:
        if context is None:
            context = detect_platform()
        if forced_platform:
            forced = forced_platform.lower()
            forced = PLATFORM_ALIASES.get(forced, forced)
            context = replace(context, system=forced, is_android=forced == "android")
        probe = probe_for(context)
        return _build_record(probe, context)
    except Exception:
        logger.exception("System information gathering failed")
        return InfoRecord()


def _build_record(probe: PlatformProbe, context: PlatformContext) -> InfoRecord:
    failures = []

    def get(category: str, fn: Callable[[], Any], default: Any) -> Any:
        result = collect(category, fn)
        if result.error is not None:
            failures.append(result.error)
        return result.value_or(default)

    release: OsRelease = get("os", probe.os_release, OsRelease(platform=context.system))
    fields = dict(
        hostname=get("hostname", probe.hostname, UNKNOWN),
        platform=release.platform,
        distro=release.distro,
        release=release.release,
        kernel=get("kernel", probe.kernel, UNKNOWN),
        arch=get("arch", probe.arch, UNKNOWN),
        cpu=get("cpu", probe.cpu, CpuInfo()),
        gpu=get("gpu", probe.gpu, UNKNOWN),
        memory=get("memory", lambda: _memory(probe), UsageInfo()),
        disk=get("disk", lambda: _disk(probe), UsageInfo()),
        uptime=get("uptime", lambda: format_uptime(probe.uptime_seconds()), UNKNOWN),
        shell=get("shell", probe.shell, UNKNOWN),
        terminal=get("terminal", probe.terminal, UNKNOWN),
        terminal_path=get("terminal path", probe.terminal_path, UNKNOWN),
        resolution=get("resolution", probe.resolution, UNKNOWN),
        de=get("desktop environment", probe.de, UNKNOWN),
        wm=get("window manager", probe.wm, UNKNOWN),
        battery=get("battery", probe.battery, []),
        packages=get("packages", probe.packages, None),
        display=get("display", probe.displays, []),
        theme=get("theme", probe.theme, {}),
        locale=get("locale", probe.locale, {}),
        network=get("network", probe.network, []),
        swap=get("swap", probe.swap, None),
        android_info=get("android", probe.android_info, None) if context.is_android else None,
    )
    return InfoRecord(failures=failures, **fields)


def _memory(probe: PlatformProbe) -> UsageInfo:
    total, available = probe.memory_bytes()
    return UsageInfo(
        total=format_gib(total),
        used=format_gib(total - available),
        percentage=usage_percentage(total, available),
    )


def _disk(probe: PlatformProbe) -> UsageInfo:
    total, used = probe.disk_bytes()
    return UsageInfo(
        total=format_gib(total),
        used=format_gib(used),
        percentage=usage_percentage(total, total - used),
    )
