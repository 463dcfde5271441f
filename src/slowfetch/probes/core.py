"""Core probes: OS name, kernel, uptime."""

from pathlib import Path

from .. import config
from ..cache import ProbeCache
from .base import read_first_line, read_text

OS_RELEASE = Path("/etc/os-release")
KERNEL_RELEASE = Path("/proc/sys/kernel/osrelease")
UPTIME = Path("/proc/uptime")


def os_name_fresh(path: Path = OS_RELEASE) -> str:
    """PRETTY_NAME from os-release, "Linux" when missing."""
    content = read_text(path)
    if content:
        for line in content.splitlines():
            if line.startswith("PRETTY_NAME="):
                return line[len("PRETTY_NAME="):].strip("\"'")
    return "Linux"


def os_name(cache: ProbeCache | None = None) -> str:
    if cache is None:
        return os_name_fresh()
    return cache.fetch("os", os_name_fresh)


def kernel(path: Path = KERNEL_RELEASE) -> str:
    return read_first_line(path) or config.UNKNOWN


def format_uptime(seconds: float) -> str:
    """``"3h 12m"``, or ``"12m"`` under an hour."""
    total = int(seconds)
    hours, minutes = total // 3600, (total % 3600) // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def uptime(path: Path = UPTIME) -> str:
    content = read_text(path)
    if not content or not content.split():
        return config.UNKNOWN
    try:
        seconds = float(content.split()[0])
    except ValueError:
        return config.UNKNOWN
    return format_uptime(seconds)
