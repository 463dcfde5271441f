"""Shared helpers for probes: file reads, subprocesses, formatting."""

import subprocess
from collections.abc import Iterator
from pathlib import Path

from .. import config
from ..telemetry import get_logger

logger = get_logger(__name__)

PROC = Path("/proc")


def read_text(path: str | Path) -> str | None:
    """Whole file as text, None if it cannot be read."""
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


def read_first_line(path: str | Path) -> str | None:
    """First line without the trailing newline, None if unreadable."""
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.readline().rstrip("\r\n")
    except OSError:
        return None


def run_command(*args: str, timeout: float = config.COMMAND_TIMEOUT_SECONDS) -> str | None:
    """Run a command and return its stdout.

    Returns:
        stdout on exit code 0, None when the binary is missing, times out or fails.
    """
    try:
        result = subprocess.run(
            list(args),
            capture_output=True,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Command {args[0]} unavailable: {e}")
        return None

    if result.returncode != 0:
        logger.debug(f"Command {' '.join(args)} exited with {result.returncode}")
        return None
    return result.stdout.decode("utf-8", errors="replace")


def capitalize(text: str) -> str:
    """Upper-case the first character only."""
    return text[:1].upper() + text[1:]


def create_bar(usage_percent: float, pretty: bool = False) -> str:
    """Ten-cell usage bar; one cell per 10%.

    ``pretty`` uses block glyphs (``████░░░░░░``) instead of ``[====      ]``.
    """
    filled = min(max(round(usage_percent / 10.0), 0), 10)
    empty = 10 - filled
    if pretty:
        return "█" * filled + "░" * empty
    return f"[{'=' * filled}{' ' * empty}]"


def iter_cmdlines(proc: Path = PROC) -> Iterator[str]:
    """Yield the command line of every running process."""
    try:
        entries = list(proc.iterdir())
    except OSError:
        return
    for entry in entries:
        if not entry.name[:1].isdigit():
            continue
        try:
            raw = (entry / "cmdline").read_bytes()
        except OSError:
            continue
        if raw:
            yield raw.replace(b"\0", b" ").decode("utf-8", errors="replace")
