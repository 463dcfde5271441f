"""Tests for probes/hardware.py"""

import os
from unittest.mock import patch

import pytest

from slowfetch.cache import ProbeCache
from slowfetch.probes import hardware

PCI_IDS = """\
# comment
1002  Advanced Micro Devices, Inc. [AMD/ATI]
\t7550  Navi 48 [Radeon RX 9070 XT]
\t\t1002 0001  Some subsystem
10de  NVIDIA Corporation
\t2684  AD102 [GeForce RTX 4090]
C 03  Display controller
\t00  VGA compatible controller
"""


def _card(drm, name, pci_id):
    device = drm / name / "device"
    device.mkdir(parents=True)
    (device / "uevent").write_text(f"DRIVER=amdgpu\nPCI_ID={pci_id}\n")


class TestCpu:
    """Tests for the CPU probe."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("AMD Ryzen 7 7800X3D 8-Core Processor", "AMD Ryzen 7 7800X3D"),
            ("AMD Ryzen 7 7840U w/ Radeon 780M Graphics", "AMD Ryzen 7 7840U"),
            ("AMD Ryzen 5 5600G with Radeon Graphics", "AMD Ryzen 5 5600G"),
            ("Intel(R) Core(TM) i7-9700K CPU @ 3.60GHz", "Intel(R) Core(TM) i7-9700K CPU @ 3.60GHz"),
        ],
    )
    def test_clean_model(self, raw, expected):
        assert hardware.clean_cpu_model(raw) == expected

    def test_with_frequency(self, tmp_path):
        cpuinfo = tmp_path / "cpuinfo"
        cpuinfo.write_text("processor\t: 0\nmodel name\t: AMD Ryzen 7 7800X3D 8-Core Processor\n")
        freq = tmp_path / "max_freq"
        freq.write_text("5050000\n")
        assert hardware.cpu_fresh(cpuinfo, freq) == "AMD Ryzen 7 7800X3D @ 5.05GHz"

    def test_without_frequency(self, tmp_path):
        cpuinfo = tmp_path / "cpuinfo"
        cpuinfo.write_text("model name\t: Cortex-A76\n")
        assert hardware.cpu_fresh(cpuinfo, tmp_path / "missing") == "Cortex-A76"

    def test_unknown(self, tmp_path):
        assert hardware.cpu_fresh(tmp_path / "missing", tmp_path / "missing") == "unknown"

    def test_cache_hit_skips_probe(self, tmp_path):
        cache = ProbeCache(directory=tmp_path)
        cache.set("cpu", "cached cpu")
        with patch.object(hardware, "cpu_fresh") as fresh:
            assert hardware.cpu(cache) == "cached cpu"
        fresh.assert_not_called()


class TestMemory:
    """Tests for the memory probe."""

    def test_usage(self, tmp_path):
        meminfo = tmp_path / "meminfo"
        meminfo.write_text("MemTotal:       32000000 kB\nMemFree:  1 kB\nMemAvailable:   20000000 kB\n")
        assert hardware.memory(meminfo) == "[====      ] 12GB/32GB"

    def test_pretty(self, tmp_path):
        meminfo = tmp_path / "meminfo"
        meminfo.write_text("MemTotal: 16000000 kB\nMemAvailable: 8000000 kB\n")
        assert hardware.memory(meminfo, pretty=True) == "█████░░░░░ 8GB/16GB"

    def test_missing(self, tmp_path):
        assert hardware.memory(tmp_path / "missing") == "unknown"


class TestStorage:
    """Tests for the storage probe."""

    @pytest.mark.parametrize(
        "used,total,expected",
        [
            (120_000_000_000, 500_000_000_000, "120GB/500GB"),
            (300_000_000_000, 2_000_000_000_000, "300GB/2TB"),
            (300_000_000_000, 1_500_000_000_000, "300GB/1.50TB"),
        ],
    )
    def test_format_capacity(self, used, total, expected):
        assert hardware.format_capacity(used, total) == expected

    def test_physical_mounts(self, tmp_path):
        mounts = tmp_path / "mounts"
        mounts.write_text(
            "proc /proc proc rw 0 0\n"
            "/dev/nvme0n1p2 / ext4 rw 0 0\n"
            "/dev/nvme0n1p1 /boot vfat rw 0 0\n"
            "/dev/nvme0n1p2 /home ext4 rw 0 0\n"
            "/dev/loop0 /snap/core squashfs ro 0 0\n"
            "tmpfs /tmp tmpfs rw 0 0\n"
        )
        assert hardware.physical_mounts(mounts) == ["/", "/boot"]

    def test_storage_sums_mounts(self, tmp_path):
        mounts = tmp_path / "mounts"
        mounts.write_text("/dev/sda1 /a ext4 rw 0 0\n/dev/sdb1 /b ext4 rw 0 0\n")
        usage = {"/a": (400_000_000_000, 100_000_000_000), "/b": (600_000_000_000, 300_000_000_000)}
        with patch.object(hardware, "_fs_usage", side_effect=usage.get):
            assert hardware.storage(mounts) == "[====      ] 400GB/1TB"

    def test_storage_unknown(self, tmp_path):
        mounts = tmp_path / "mounts"
        mounts.write_text("tmpfs /tmp tmpfs rw 0 0\n")
        assert hardware.storage(mounts) == "unknown"


class TestGpu:
    """Tests for the GPU probe sources."""

    def test_vulkaninfo(self):
        output = (
            "GPU0:\n\tdeviceName         = AMD Radeon RX 9070 XT (RADV GFX1201)\n"
            "GPU1:\n\tdeviceName         = llvmpipe (LLVM 17.0.6, 256 bits)\n"
        )
        with patch.object(hardware, "run_command", return_value=output):
            assert hardware.gpu_from_vulkaninfo() == "AMD Radeon RX 9070 XT"

    def test_vulkaninfo_software_only(self):
        output = "\tdeviceName = llvmpipe (LLVM 17.0.6, 256 bits)\n"
        with patch.object(hardware, "run_command", return_value=output):
            assert hardware.gpu_from_vulkaninfo() is None

    def test_glxinfo(self):
        output = "OpenGL vendor string: AMD\nOpenGL renderer string: AMD Radeon RX 6800 (radeonsi, navi21)\n"
        with patch.object(hardware, "run_command", return_value=output):
            assert hardware.gpu_from_glxinfo() == "AMD Radeon RX 6800"

    def test_glxinfo_llvmpipe(self):
        output = "OpenGL renderer string: llvmpipe (LLVM 17.0.6, 256 bits)\n"
        with patch.object(hardware, "run_command", return_value=output):
            assert hardware.gpu_from_glxinfo() is None

    def test_parse_pci_ids(self):
        db = hardware.parse_pci_ids(PCI_IDS)
        assert db["1002"] == ("Advanced Micro Devices, Inc. [AMD/ATI]", {"7550": "Navi 48 [Radeon RX 9070 XT]"})
        assert db["10de"][1]["2684"] == "AD102 [GeForce RTX 4090]"
        assert "c 03" not in db

    def test_sysfs(self, tmp_path):
        _card(tmp_path, "card1", "1002:7550")
        (tmp_path / "card1-DP-1").mkdir()
        assert hardware.gpu_from_sysfs(tmp_path, hardware.parse_pci_ids(PCI_IDS)) == "AMD Radeon RX 9070 XT"

    def test_sysfs_unknown_device(self, tmp_path):
        _card(tmp_path, "card0", "1234:5678")
        assert hardware.gpu_from_sysfs(tmp_path, hardware.parse_pci_ids(PCI_IDS)) is None

    def test_sysfs_no_drm(self, tmp_path):
        assert hardware.gpu_from_sysfs(tmp_path / "missing", {}) is None

    def test_lspci(self):
        output = (
            '00:00.0 "Host bridge" "Advanced Micro Devices, Inc. [AMD]" "Root Complex"\n'
            '03:00.0 "VGA compatible controller" "NVIDIA Corporation" "AD102 [GeForce RTX 4090]"\n'
        )
        with patch.object(hardware, "run_command", return_value=output):
            assert hardware.gpu_from_lspci() == "NVIDIA AD102 [GeForce RTX 4090]"

    def test_fallback_order(self):
        """Test first source with a name wins."""
        with patch.object(hardware, "gpu_from_vulkaninfo", return_value=None), \
                patch.object(hardware, "gpu_from_glxinfo", new=lambda: "Intel Arc A770"), \
                patch.object(hardware, "gpu_from_sysfs") as sysfs:
            assert hardware.gpu_fresh() == "Intel Arc A770"
        sysfs.assert_not_called()

    def test_all_sources_fail(self):
        with patch.object(hardware, "run_command", return_value=None), \
                patch.object(hardware, "gpu_from_sysfs", return_value=None):
            assert hardware.gpu_fresh() == "unknown"

    def test_unknown_not_cached(self, tmp_path):
        cache = ProbeCache(directory=tmp_path)
        with patch.object(hardware, "gpu_fresh", return_value="unknown"):
            assert hardware.gpu(cache) == "unknown"
        assert not os.path.exists(tmp_path / "gpu")
