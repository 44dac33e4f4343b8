from sysfetch.config import INFO_FIELDS, Config, DisplayOptions
from sysfetch.formatting import (
    build_info_lines,
    color_blocks,
    format_info_line,
    format_uptime,
    render,
    usage_percentage,
)
from sysfetch.records import (
    AndroidInfo,
    BatteryEntry,
    CpuInfo,
    DisplayEntry,
    InfoRecord,
    NetworkInterface,
    UsageInfo,
)

GIB = 1024**3


def make_config(*, visible=INFO_FIELDS, show_ascii_art=True, show_color_blocks=False, compact_mode=True) -> Config:
    return Config(
        display=DisplayOptions(
            show_ascii_art=show_ascii_art,
            show_color_blocks=show_color_blocks,
            compact_mode=compact_mode,
        ),
        show_info={name: name in visible for name in INFO_FIELDS},
    )


def make_info(**overrides) -> InfoRecord:
    values = dict(
        hostname="box",
        platform="linux",
        distro="Ubuntu 22.04.3 LTS",
        release="22.04",
        kernel="6.5.0-14-generic",
        arch="x86_64",
        cpu=CpuInfo(model="AMD Ryzen 7 5800X", cores="16", speed="4.85 GHz"),
        gpu="AMD Radeon RX 6700 XT",
        memory=UsageInfo(total="16.00 GB", used="8.00 GB", percentage="50.0%"),
        disk=UsageInfo(total="512.00 GB", used="128.00 GB", percentage="25.0%"),
        uptime="1h 1m",
        shell="bash 5.1.16",
        terminal="xterm-256color",
        terminal_path="/dev/pts/1",
        resolution="1920x1080",
    )
    values.update(overrides)
    return InfoRecord(**values)


def test_format_uptime_omits_leading_zero_components():
    assert format_uptime(0) == "0m"
    assert format_uptime(45 * 60) == "45m"
    assert format_uptime(3661) == "1h 1m"
    assert format_uptime(90000) == "1d 1h 0m"


def test_usage_percentage():
    assert usage_percentage(16 * GIB, 8 * GIB) == "50.0%"
    assert usage_percentage(3, 2) == "33.3%"
    assert usage_percentage(0, 0) == "0.0%"


def test_label_spacing_is_collapsed():
    line = format_info_line("Label   ", "value", Config())
    assert line.plain == "Label: value"


def test_info_lines_follow_declaration_order():
    lines = [line.plain for line in build_info_lines(make_info(), make_config())]
    assert lines[:7] == [
        "Hostname: box",
        "OS: Ubuntu 22.04.3 LTS x86_64",
        "Kernel: 6.5.0-14-generic",
        "Uptime: 1h 1m",
        "Shell: bash 5.1.16",
        "Terminal: /dev/pts/1 (xterm-256color)",
        "CPU: AMD Ryzen 7 5800X (16 cores @ 4.85 GHz)",
    ]
    assert "Memory: 8.00 GB / 16.00 GB (50.0%)" in lines
    assert "Disk: 128.00 GB / 512.00 GB (25.0%)" in lines


def test_hidden_and_empty_fields_are_skipped():
    info = make_info(gpu="Unknown", packages=None)
    lines = [line.plain for line in build_info_lines(info, make_config(visible=("hostname", "gpu", "packages", "kernel")))]
    assert lines == ["Hostname: box", "Kernel: 6.5.0-14-generic"]


def test_unknown_scalar_values_are_still_shown():
    lines = [line.plain for line in build_info_lines(InfoRecord(), make_config(visible=("hostname", "memory", "cpu")))]
    assert lines == ["Hostname: Unknown", "CPU: Unknown", "Memory: Unknown"]


def test_name_overrides_hostname():
    lines = build_info_lines(make_info(), make_config(visible=("hostname",)), name="workstation")
    assert [line.plain for line in lines] == ["Hostname: workstation"]


def test_optional_groups():
    info = make_info(
        swap=UsageInfo(total="2.00 GB", used="0.50 GB", percentage="25.0%"),
        battery=[BatteryEntry(name="BAT0", capacity="87%", status="Discharging", time_remaining="2h 10m", voltage="12.10V")],
        display=[DisplayEntry(name="eDP-1", resolution="1920x1080", refresh="60.01 Hz")],
        theme={"theme": "Adwaita", "icons": "Unknown"},
        locale={"locale": "en_US.UTF-8", "timezone": "UTC"},
        network=[NetworkInterface(name="wlan0", ip="192.168.1.20"), NetworkInterface(name="eth0", ip="10.0.0.2")],
        packages="1843 (dpkg), 12 (flatpak)",
    )
    lines = [line.plain for line in build_info_lines(info, make_config(compact_mode=False))]
    assert "Swap: 0.50 GB / 2.00 GB (25.0%)" in lines
    assert "Battery: 87% (Discharging), 2h 10m left, 12.10V" in lines
    assert "Display: 1920x1080 60.01 Hz (eDP-1)" in lines
    assert "Theme: Adwaita" in lines
    assert not any(line.startswith("Icons") for line in lines)
    assert "Locale: en_US.UTF-8" in lines
    assert "Timezone: UTC" in lines
    assert "Network: 192.168.1.20 (wlan0), 10.0.0.2 (eth0)" in lines
    assert "Packages: 1843 (dpkg), 12 (flatpak)" in lines


def test_android_lines():
    info = make_info(
        android_info=AndroidInfo(device="Pixel 7", manufacturer="Google", version="14", sdk="34", wifi="home"),
    )
    lines = [line.plain for line in build_info_lines(info, make_config())]
    assert "OS: Android 14 x86_64" in lines
    assert "Device: Google Pixel 7" in lines
    assert "Android: 14 (SDK 34)" in lines
    assert "WiFi: home" in lines


def test_render_centers_shorter_info_block():
    art = ["#####"] * 5
    lines = render(make_info(), art, make_config(visible=("hostname",)))
    assert len(lines) == 5
    assert lines[2].plain == " " * 8 + "#####" + " " * 8 + "Hostname: box"
    assert lines[0].plain == " " * 8 + "#####"


def test_render_centers_shorter_art_block():
    lines = render(make_info(), ["$1/\\"], make_config(visible=("hostname", "kernel", "uptime")))
    assert [line.plain for line in lines] == [
        " " * 18 + "Hostname: box",
        " " * 8 + "/\\" + " " * 8 + "Kernel: 6.5.0-14-generic",
        " " * 18 + "Uptime: 1h 1m",
    ]


def test_render_pads_to_visible_art_width():
    art = ["$1ab$2cd", "$3x"]
    lines = render(make_info(), art, make_config(visible=("hostname", "kernel")))
    assert lines[1].plain == " " * 8 + "x" + " " * 11 + "Kernel: 6.5.0-14-generic"


def test_render_with_no_info_lines_prints_art():
    lines = render(make_info(), ["/\\", "\\/"], make_config(visible=()))
    assert [line.plain for line in lines] == [" " * 8 + "/\\", " " * 8 + "\\/"]


def test_render_single_blank_art_line():
    lines = render(make_info(), [""], make_config(visible=()))
    assert [line.plain for line in lines] == [""]
    lines = render(make_info(), [""], make_config(visible=("hostname",)))
    assert lines[0].plain == " " * 16 + "Hostname: box"


def test_render_without_art_column():
    lines = render(make_info(), ["ignored"], make_config(visible=("hostname",), show_ascii_art=False))
    assert [line.plain for line in lines] == ["Hostname: box"]


def test_render_header_and_color_blocks():
    config = make_config(visible=("hostname",), show_color_blocks=True, compact_mode=False)
    lines = render(make_info(), ["#"], config)
    assert lines[0].plain == "─" * 50
    assert lines[1].plain == ""
    assert lines[-3].plain == ""
    assert lines[-2].plain == " " * 8 + "   " * 8
    assert [span.style for span in lines[-1].spans] == [f"on color({code})" for code in range(8, 16)]


def test_color_blocks_cover_sixteen_colors():
    rows = color_blocks(0)
    styles = [span.style for row in rows for span in row.spans]
    assert styles == [f"on color({code})" for code in range(16)]
