"""Collector: runs every probe concurrently and builds the info sections.

Each blocking probe runs in a worker thread; results are awaited together
via asyncio.gather so total time is bounded by the slowest probe.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

from . import config
from .cache import ProbeCache
from .probes import core, hardware, userspace
from .render.sections import Section
from .telemetry import get_logger, metrics

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProbeSpec:
    """一行 section 的数据来源"""

    section: str
    key: str
    probe: Callable[[], str]


def default_probes(cache: ProbeCache | None = None, pretty_bars: bool = False) -> list[ProbeSpec]:
    """Probes in display order."""
    return [
        ProbeSpec("Core", "OS", lambda: core.os_name(cache)),
        ProbeSpec("Core", "Kernel", core.kernel),
        ProbeSpec("Core", "Uptime", core.uptime),
        ProbeSpec("Hardware", "CPU", lambda: hardware.cpu(cache)),
        ProbeSpec("Hardware", "GPU", lambda: hardware.gpu(cache)),
        ProbeSpec("Hardware", "Memory", lambda: hardware.memory(pretty=pretty_bars)),
        ProbeSpec("Hardware", "Storage", lambda: hardware.storage(pretty=pretty_bars)),
        ProbeSpec("Userspace", "Packages", userspace.packages),
        ProbeSpec("Userspace", "Terminal", userspace.terminal),
        ProbeSpec("Userspace", "Shell", userspace.shell),
        ProbeSpec("Userspace", "WM", userspace.wm),
        ProbeSpec("Userspace", "UI", userspace.ui),
        ProbeSpec("Userspace", "Editor", userspace.editor),
    ]


async def run_probe(spec: ProbeSpec) -> str:
    """Run one probe in a thread; unexpected errors become ``"error"``."""
    started = time.monotonic()
    try:
        value = await asyncio.to_thread(spec.probe)
    except Exception as e:
        logger.warning(f"Probe {spec.key} failed: {e}")
        metrics.inc("probe.error", {"probe": spec.key})
        return config.ERROR
    finally:
        metrics.gauge("probe.duration_ms", (time.monotonic() - started) * 1000, {"probe": spec.key})
    return value


async def collect(specs: list[ProbeSpec]) -> list[Section]:
    """Run ``specs`` concurrently and group results into sections.

    Section order follows the first appearance of each section title. Rows
    with an empty value are dropped (the editor probe returns "" when unset).
    """
    values = await asyncio.gather(*(run_probe(spec) for spec in specs))

    grouped: dict[str, list[tuple[str, str]]] = {}
    for spec, value in zip(specs, values):
        rows = grouped.setdefault(spec.section, [])
        if value:
            rows.append((spec.key, value))

    return [Section.of(title, rows) for title, rows in grouped.items()]


def collect_sections(cache: ProbeCache | None = None, pretty_bars: bool = False) -> list[Section]:
    """Blocking entry point for the CLI."""
    return asyncio.run(collect(default_probes(cache, pretty_bars)))


def find_value(sections: list[Section], key: str) -> str | None:
    """First value stored under ``key`` in any section."""
    for section in sections:
        for row_key, value in section.lines:
            if row_key == key:
                return value
    return None
