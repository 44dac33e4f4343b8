from sysfetch import platform_probes
from sysfetch.platform_probes import (
    AndroidProbe,
    LinuxProbe,
    MacProbe,
    PlatformProbe,
    WindowsProbe,
    probe_for,
    read_file,
    run_command,
)
from sysfetch.records import BatteryEntry, DisplayEntry, OsRelease, PlatformContext


def make_probe(cls, system="linux", is_android=False, **environ):
    return cls(PlatformContext(system=system, is_android=is_android, environ=environ))


def fake_commands(monkeypatch, outputs):
    """Serve canned stdout keyed by the joined command line; anything else fails."""

    def run(args, timeout=platform_probes.COMMAND_TIMEOUT):
        return outputs.get(" ".join(args))

    monkeypatch.setattr(platform_probes, "run_command", run)


def fake_files(monkeypatch, files):
    monkeypatch.setattr(platform_probes, "read_file", lambda path: files.get(str(path)))


def write_supply(directory, **values):
    directory.mkdir(parents=True)
    for name, value in values.items():
        (directory / name).write_text(f"{value}\n")


def test_probe_for_picks_platform_class():
    assert type(probe_for(PlatformContext(system="linux"))) is LinuxProbe
    assert type(probe_for(PlatformContext(system="android", is_android=True))) is AndroidProbe
    assert type(probe_for(PlatformContext(system="darwin"))) is MacProbe
    assert type(probe_for(PlatformContext(system="windows"))) is WindowsProbe
    assert type(probe_for(PlatformContext(system="sunos"))) is PlatformProbe


def test_run_command_missing_binary_returns_none():
    assert run_command(["sysfetch-definitely-not-installed", "--version"]) is None


def test_read_file_strips_and_tolerates_missing(tmp_path):
    path = tmp_path / "capacity"
    path.write_text("87\n")
    assert read_file(path) == "87"
    assert read_file(tmp_path / "missing") is None


def test_linux_sysfs_battery(monkeypatch, tmp_path):
    monkeypatch.setattr(platform_probes, "POWER_SUPPLY", tmp_path)
    write_supply(tmp_path / "AC", online=1)
    write_supply(
        tmp_path / "BAT0",
        capacity=87,
        status="Discharging",
        voltage_now=12100000,
        temp=315,
        current_now=1250000,
        power_now=6000000,
        energy_now=15000000,
    )
    write_supply(tmp_path / "BAT1", capacity=100, status="Full")

    assert make_probe(LinuxProbe).battery() == [
        BatteryEntry(
            name="BAT0",
            capacity="87%",
            status="Discharging",
            time_remaining="2h 30m",
            voltage="12.10V",
            temperature="31.5°C",
            current="1250mA",
            power="6.00W",
        ),
        BatteryEntry(name="BAT1", capacity="100%", status="Full"),
    ]


def test_linux_battery_falls_back_to_psutil(monkeypatch, tmp_path):
    monkeypatch.setattr(platform_probes, "POWER_SUPPLY", tmp_path / "absent")
    fallback = [BatteryEntry(name="BAT0", capacity="50%", status="Charging")]
    monkeypatch.setattr(PlatformProbe, "_psutil_battery", lambda self: fallback)
    assert make_probe(LinuxProbe).battery() == fallback


def test_android_battery_uses_battery_supply(monkeypatch, tmp_path):
    monkeypatch.setattr(AndroidProbe, "BATTERY", tmp_path / "battery")
    write_supply(tmp_path / "battery", capacity=64, status="Charging", temp=298)
    probe = make_probe(AndroidProbe, system="android", is_android=True)
    assert probe.battery() == [BatteryEntry(name="BAT0", capacity="64%", status="Charging", temperature="29.8°C")]


def test_android_without_battery_reports_none(monkeypatch, tmp_path):
    monkeypatch.setattr(AndroidProbe, "BATTERY", tmp_path / "battery")
    assert make_probe(AndroidProbe, system="android", is_android=True).battery() == []


def test_linux_os_release(monkeypatch):
    fake_files(
        monkeypatch,
        {"/etc/os-release": 'NAME="Fedora Linux"\nVERSION_ID=39\nPRETTY_NAME="Fedora Linux 39 (Workstation Edition)"'},
    )
    assert make_probe(LinuxProbe).os_release() == OsRelease(
        platform="linux", distro="Fedora Linux 39 (Workstation Edition)", release="39"
    )


def test_linux_os_release_missing(monkeypatch):
    fake_files(monkeypatch, {})
    assert make_probe(LinuxProbe).os_release() == OsRelease(platform="linux")


def test_linux_gpu_prefers_lspci_when_glxinfo_missing(monkeypatch):
    fake_commands(
        monkeypatch,
        {
            "lspci": "00:02.0 VGA compatible controller: Intel Corporation UHD Graphics 620 (rev 07)\n"
            "00:1f.3 Audio device: Intel Corporation Sunrise Point-LP HD Audio (rev 21)"
        },
    )
    assert make_probe(LinuxProbe).gpu() == "Intel Corporation UHD Graphics 620 (rev 07)"


def test_linux_gpu_falls_back_to_drm_vendor(monkeypatch, tmp_path):
    fake_commands(monkeypatch, {})
    monkeypatch.setattr(platform_probes, "DRM", tmp_path)
    write_supply(tmp_path / "card0" / "device", vendor="0x10de")
    (tmp_path / "card0-HDMI-A-1").mkdir()
    assert make_probe(LinuxProbe).gpu() == "NVIDIA GPU"


def test_linux_displays_take_refresh_from_mode_list(monkeypatch):
    fake_commands(
        monkeypatch,
        {
            "xrandr --current": "eDP-1 connected primary 2560x1600+0+0 (normal) 302mm x 189mm\n"
            "   2560x1600     165.00*+  60.00"
        },
    )
    probe = make_probe(LinuxProbe)
    assert probe.displays() == [
        DisplayEntry(name="eDP-1", resolution="2560x1600", refresh="165.00 Hz", size="302mm x 189mm")
    ]
    assert probe.resolution() == "2560x1600"


def test_linux_theme_reads_desktop_settings_then_environment(monkeypatch):
    fake_commands(monkeypatch, {"gsettings get org.gnome.desktop.interface gtk-theme": "'Adwaita-dark'"})
    probe = make_probe(LinuxProbe, XDG_CURRENT_DESKTOP="ubuntu:GNOME", XCURSOR_THEME="Yaru")
    assert probe.theme() == {"theme": "Adwaita-dark", "cursor": "Yaru"}


def test_linux_packages_count_per_manager(monkeypatch):
    monkeypatch.setattr(platform_probes.shutil, "which", lambda name: f"/usr/bin/{name}")
    fake_commands(
        monkeypatch,
        {
            "dpkg-query -f ${Status}\n -W": "install ok installed\ninstall ok installed\ndeinstall ok config-files",
            "snap list": "Name Version Rev\ncore22 20240111 1122\nfirefox 122.0 3600",
        },
    )
    assert make_probe(LinuxProbe).packages() == "2 (dpkg), 2 (snap)"


def test_shell_name_and_version(monkeypatch):
    fake_commands(monkeypatch, {"/bin/zsh --version": "zsh 5.9.0 (x86_64-pc-linux-gnu)"})
    assert make_probe(LinuxProbe, SHELL="/bin/zsh").shell() == "zsh 5.9.0"
    assert make_probe(LinuxProbe, SHELL="/usr/bin/fish").shell() == "fish"
    assert make_probe(LinuxProbe).shell() == "Unknown"


def test_android_cpu_name_and_cores(monkeypatch):
    fake_files(
        monkeypatch,
        {"/proc/cpuinfo": "processor\t: 0\nCPU revision\t: 4\n\nprocessor\t: 1\nCPU revision\t: 4\n"},
    )
    fake_commands(
        monkeypatch,
        {
            "getprop ro.board.platform": "kalama",
            "getprop ro.product.manufacturer": "samsung",
        },
    )
    probe = make_probe(AndroidProbe, system="android", is_android=True)
    assert probe.cpu_model() == "samsung kalama (rev 4)"
    assert probe.cpu_cores() == "2"


def test_android_gpu_from_kgsl(monkeypatch, tmp_path):
    monkeypatch.setattr(platform_probes, "DRM", tmp_path)
    fake_files(
        monkeypatch,
        {
            "/sys/class/kgsl/kgsl-3d0/gpu_model": "Adreno740v2",
            "/sys/class/kgsl/kgsl-3d0/gpuclk": "680000000",
        },
    )
    assert make_probe(AndroidProbe, system="android", is_android=True).gpu() == "Adreno 740v2 @ 680 MHz"


def test_android_info(monkeypatch):
    fake_files(monkeypatch, {})
    fake_commands(
        monkeypatch,
        {
            "getprop ro.product.model": "Pixel 8",
            "getprop ro.product.manufacturer": "Google",
            "getprop ro.build.version.release": "14",
            "getprop ro.build.version.sdk": "34",
            "getprop ro.build.id": "UQ1A.240205.004",
            "df -h /sdcard": "Filesystem Size Used Avail Use% Mounted on\n/dev/fuse 111G 40G 71G 37% /storage/emulated",
            "dumpsys wifi": 'mWifiInfo SSID: "Cafe", BSSID: 02:00:00:00:00:00',
        },
    )
    info = make_probe(AndroidProbe, system="android", is_android=True).android_info()
    assert (info.device, info.manufacturer, info.version, info.sdk) == ("Pixel 8", "Google", "14", "34")
    assert (info.storage_total, info.storage_used) == ("111G", "40G")
    assert info.wifi == "Cafe"


def test_mac_theme_defaults_to_light(monkeypatch):
    fake_commands(monkeypatch, {})
    assert make_probe(MacProbe, system="darwin").theme() == {"theme": "Light"}
    fake_commands(monkeypatch, {"defaults read -g AppleInterfaceStyle": "Dark"})
    assert make_probe(MacProbe, system="darwin").theme() == {"theme": "Dark"}


def test_mac_battery_merges_ioreg_details(monkeypatch):
    fake_commands(
        monkeypatch,
        {
            "pmset -g batt": "Now drawing from 'AC Power'\n -InternalBattery-0 (id=1)\t100%; charged; 0:00 remaining",
            "ioreg -rn AppleSmartBattery": '"Temperature" = 2950\n"Voltage" = 13100',
        },
    )
    assert make_probe(MacProbe, system="darwin").battery() == [
        BatteryEntry(
            name="BAT0",
            capacity="100%",
            status="Full",
            time_remaining="0h 00m",
            voltage="13.10V",
            temperature="29.5°C",
        )
    ]


def test_windows_shell_and_terminal():
    probe = make_probe(WindowsProbe, system="windows", PSModulePath="C:\\ps", WT_SESSION="abc")
    assert probe.shell() == "PowerShell"
    assert probe.terminal() == "Windows Terminal"
    cmd = make_probe(WindowsProbe, system="windows", PSModulePath="C:\\ps", PROMPT="$P$G", COMSPEC="C:\\cmd.exe")
    assert cmd.shell().endswith("cmd.exe")


def test_windows_gpu_from_cim_json(monkeypatch):
    fake_commands(
        monkeypatch,
        {
            "powershell -NoProfile -Command Get-CimInstance Win32_VideoController | Select-Object Name | ConvertTo-Json": '[{"Name": "NVIDIA GeForce RTX 3070"}, {"Name": "Intel(R) UHD Graphics"}]'
        },
    )
    assert make_probe(WindowsProbe, system="windows").gpu() == "NVIDIA GeForce RTX 3070, Intel(R) UHD Graphics"


def test_android_info_does_not_repeat_cpu_lookups(monkeypatch):
    fake_files(monkeypatch, {})
    calls = []

    def run(args, timeout=platform_probes.COMMAND_TIMEOUT):
        calls.append(" ".join(args))
        return None

    monkeypatch.setattr(platform_probes, "run_command", run)
    info = make_probe(AndroidProbe, system="android", is_android=True).android_info()

    assert info.device == "Unknown"
    assert "getprop ro.board.platform" not in calls
    assert "getprop ro.chipname" not in calls
