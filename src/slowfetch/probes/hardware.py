"""Hardware probes: CPU, GPU, memory, storage."""

import os
import re
from functools import lru_cache
from pathlib import Path

from .. import config
from ..cache import ProbeCache
from ..telemetry import get_logger
from .base import create_bar, read_first_line, read_text, run_command

logger = get_logger(__name__)

CPUINFO = Path("/proc/cpuinfo")
CPU_MAX_FREQ = Path("/sys/devices/system/cpu/cpu0/cpufreq/cpuinfo_max_freq")
MEMINFO = Path("/proc/meminfo")
MOUNTS = Path("/proc/mounts")
DRM = Path("/sys/class/drm")
PCI_IDS = (Path("/usr/share/hwdata/pci.ids"), Path("/usr/share/misc/pci.ids"))

_CARD_NAME = re.compile(r"^card\d+$")
_BRACKETED = re.compile(r"\[(.+)\]")


# === CPU ===


def clean_cpu_model(name: str) -> str:
    """Drop the integrated-GPU suffix, "N-Core" and "Processor" words."""
    words = name.split()
    for index, word in enumerate(words):
        if word.lower() in ("with", "w/"):
            words = words[:index]
            break
    return " ".join(w for w in words if not w.endswith("-Core") and w != "Processor")


def cpu_fresh(cpuinfo: Path = CPUINFO, max_freq: Path = CPU_MAX_FREQ) -> str:
    model = None
    try:
        with open(cpuinfo, encoding="utf-8", errors="replace") as f:
            for line in f:
                if line.startswith("model name"):
                    _, _, name = line.partition(":")
                    model = clean_cpu_model(name)
                    break
    except OSError:
        pass

    if not model:
        return config.UNKNOWN

    khz = read_first_line(max_freq)
    if khz and khz.strip().isdigit():
        return f"{model} @ {int(khz) / 1_000_000:.2f}GHz"
    return model


def cpu(cache: ProbeCache | None = None) -> str:
    if cache is None:
        return cpu_fresh()
    return cache.fetch("cpu", cpu_fresh)


# === Memory ===


def memory(meminfo: Path = MEMINFO, pretty: bool = False) -> str:
    """Usage bar plus ``used/total`` in decimal GB."""
    total = available = 0
    content = read_text(meminfo) or ""
    for line in content.splitlines():
        fields = line.split()
        if len(fields) < 2 or not fields[1].isdigit():
            continue
        if fields[0] == "MemTotal:":
            total = int(fields[1])
        elif fields[0] == "MemAvailable:":
            available = int(fields[1])
        if total and available:
            break

    if total <= 0:
        return config.UNKNOWN

    used = total - available
    bar = create_bar(used / total * 100.0, pretty)
    # meminfo 单位是 kB
    return f"{bar} {used / 1_000_000:.0f}GB/{total / 1_000_000:.0f}GB"


# === Storage ===


def format_capacity(used_bytes: int, total_bytes: int) -> str:
    used_gb = used_bytes / 1_000_000_000
    total_gb = total_bytes / 1_000_000_000
    if total_gb >= 1000:
        total_tb = total_gb / 1000
        if abs(total_tb - round(total_tb)) < 0.005:
            return f"{used_gb:.0f}GB/{round(total_tb)}TB"
        return f"{used_gb:.0f}GB/{total_tb:.2f}TB"
    return f"{used_gb:.0f}GB/{total_gb:.0f}GB"


def physical_mounts(mounts: Path = MOUNTS) -> list[str]:
    """Mount points of unique /dev/ devices, loop devices excluded."""
    seen: set[str] = set()
    points = []
    for line in (read_text(mounts) or "").splitlines():
        fields = line.split()
        if len(fields) < 2:
            continue
        device, mount_point = fields[0], fields[1]
        if not device.startswith("/dev/") or "/loop" in device:
            continue
        if device in seen:
            continue
        seen.add(device)
        points.append(mount_point)
    return points


def _fs_usage(mount_point: str) -> tuple[int, int] | None:
    try:
        st = os.statvfs(mount_point)
    except OSError:
        return None
    total = st.f_blocks * st.f_frsize
    free = st.f_bfree * st.f_frsize
    return total, total - free


def storage(mounts: Path = MOUNTS, pretty: bool = False) -> str:
    total_bytes = used_bytes = 0
    for mount_point in physical_mounts(mounts):
        usage = _fs_usage(mount_point)
        if usage is None:
            continue
        total_bytes += usage[0]
        used_bytes += usage[1]

    if total_bytes <= 0:
        return config.UNKNOWN

    bar = create_bar(used_bytes / total_bytes * 100.0, pretty)
    return f"{bar} {format_capacity(used_bytes, total_bytes)}"


# === GPU ===


def _strip_driver_info(name: str) -> str:
    return name.split("(", 1)[0].strip()


def gpu_from_vulkaninfo() -> str | None:
    output = run_command("vulkaninfo", "--summary")
    if not output:
        return None
    for line in output.splitlines():
        if "deviceName" not in line or "=" not in line:
            continue
        name = _strip_driver_info(line.split("=", 1)[1])
        # CPU 软渲染设备也会出现在列表里
        if name and "Processor" not in name and "llvmpipe" not in name:
            return name
    return None


def gpu_from_glxinfo() -> str | None:
    output = run_command("glxinfo")
    if not output:
        return None
    for line in output.splitlines():
        if "OpenGL renderer" in line and ":" in line:
            name = _strip_driver_info(line.split(":", 1)[1])
            if name and name != "llvmpipe":
                return name
            return None
    return None


@lru_cache(maxsize=1)
def load_pci_database(paths: tuple[Path, ...] = PCI_IDS) -> dict[str, tuple[str, dict[str, str]]]:
    """Parse pci.ids into ``{vendor_id: (vendor_name, {device_id: device_name})}``."""
    for path in paths:
        content = read_text(path)
        if content is not None:
            return parse_pci_ids(content)
    return {}


def parse_pci_ids(content: str) -> dict[str, tuple[str, dict[str, str]]]:
    db: dict[str, tuple[str, dict[str, str]]] = {}
    vendor_id = None
    for line in content.splitlines():
        if not line or line.startswith("#"):
            continue
        if not line.startswith("\t"):
            head = line[:4]
            if len(line) >= 4 and all(c in "0123456789abcdefABCDEF" for c in head):
                vendor_id = head.lower()
                db[vendor_id] = (line[4:].strip(), {})
            else:
                # 设备类等其他段落
                vendor_id = None
        elif not line.startswith("\t\t") and vendor_id is not None:
            entry = line[1:]
            head = entry[:4]
            if len(entry) >= 4 and all(c in "0123456789abcdefABCDEF" for c in head):
                db[vendor_id][1][head.lower()] = entry[4:].strip()
    return db


def _short_name(name: str, default: str) -> str:
    match = _BRACKETED.search(name)
    return match.group(1) if match else default


def gpu_from_sysfs(drm: Path = DRM, pci_db: dict | None = None) -> str | None:
    try:
        cards = sorted(p for p in drm.iterdir() if _CARD_NAME.match(p.name))
    except OSError:
        return None

    db = pci_db if pci_db is not None else load_pci_database()
    if not db:
        return None

    for card in cards:
        uevent = read_text(card / "device" / "uevent") or ""
        pci_id = next((l[len("PCI_ID="):] for l in uevent.splitlines() if l.startswith("PCI_ID=")), None)
        if not pci_id or ":" not in pci_id:
            continue
        vendor_id, device_id = (part.lower() for part in pci_id.split(":", 1))
        vendor = db.get(vendor_id)
        if vendor is None or device_id not in vendor[1]:
            continue
        vendor_name, devices = vendor
        device_name = _short_name(devices[device_id], devices[device_id])
        vendor_short = _short_name(vendor_name, "GPU").split("/")[0]
        return f"{vendor_short} {device_name}"
    return None


def _short_vendor(vendor: str) -> str:
    if "Advanced Micro Devices" in vendor or "AMD" in vendor:
        return "AMD"
    if "NVIDIA" in vendor:
        return "NVIDIA"
    if "Intel" in vendor:
        return "Intel"
    return vendor


def gpu_from_lspci() -> str | None:
    output = run_command("lspci", "-mm")
    if not output:
        return None
    for line in output.splitlines():
        if "VGA compatible controller" not in line and "3D controller" not in line:
            continue
        # lspci -mm: 引号内为字段
        fields = line.split('"')[1::2]
        if len(fields) < 3:
            continue
        vendor, device = fields[1], fields[2]
        if "Processor" in device or "Integrated" in device:
            continue
        return f"{_short_vendor(vendor)} {device}"
    return None


def gpu_fresh() -> str:
    """Try each source from fastest to slowest."""
    for source in (gpu_from_vulkaninfo, gpu_from_glxinfo, gpu_from_sysfs, gpu_from_lspci):
        name = source()
        if name:
            logger.debug(f"GPU from {source.__name__}: {name}")
            return name
    return config.UNKNOWN


def gpu(cache: ProbeCache | None = None) -> str:
    if cache is None:
        return gpu_fresh()
    return cache.fetch("gpu", gpu_fresh)
