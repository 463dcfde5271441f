"""Pytest 配置"""

import pytest

from slowfetch.render.sections import Section
from slowfetch.telemetry import metrics


@pytest.fixture(autouse=True)
def reset_metrics():
    """每个测试前清空全局指标"""
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def core_section():
    return Section.of("Core", [("OS", "Linux")])


@pytest.fixture
def sample_sections():
    return [
        Section.of("Core", [("OS", "Arch Linux"), ("Kernel", "6.9.1-arch1-1"), ("Uptime", "3h 12m")]),
        Section.of("Hardware", [("CPU", "AMD Ryzen 7 7800X3D @ 5.05GHz"), ("GPU", "AMD Radeon RX 9070 XT")]),
    ]
