"""Terminal geometry probe.

Three tiers, tried in order on every call:

1. window size of the stdout device
2. ``COLUMNS`` / ``LINES`` environment variables
3. fixed 80x24
"""

import os
import sys
from dataclasses import dataclass

from .. import config
from ..telemetry import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TerminalGeometry:
    """终端尺寸（字符单元），每次渲染重新读取"""

    columns: int
    rows: int


def _query_stdout() -> TerminalGeometry | None:
    try:
        size = os.get_terminal_size(sys.stdout.fileno())
    except (AttributeError, OSError, ValueError):
        # stdout 被替换/关闭或不是 tty
        return None
    if size.columns > 0 and size.lines > 0:
        return TerminalGeometry(columns=size.columns, rows=size.lines)
    return None


def _from_env() -> TerminalGeometry | None:
    try:
        columns = int(os.environ[config.COLUMNS_ENV])
        rows = int(os.environ[config.ROWS_ENV])
    except (KeyError, ValueError):
        return None
    if columns > 0 and rows > 0:
        return TerminalGeometry(columns=columns, rows=rows)
    return None


def probe() -> TerminalGeometry:
    """Current terminal size; never fails."""
    geometry = _query_stdout()
    if geometry is not None:
        return geometry

    geometry = _from_env()
    if geometry is not None:
        logger.debug(f"Terminal size from environment: {geometry.columns}x{geometry.rows}")
        return geometry

    logger.debug("Terminal size unavailable, using default")
    return TerminalGeometry(columns=config.DEFAULT_COLUMNS, rows=config.DEFAULT_ROWS)
