"""ANSI-aware width measurement."""

import re

_ESC = 0x1B
_SGR_END = ord("m")

# 与 visible_width 的扫描规则一致：ESC 开始，到下一个 m 结束
_ANSI_PATTERN = re.compile(r"\x1b[^m]*m")


def visible_width(text: str) -> int:
    """Return the on-screen column count of ``text``.

    Escape sequences run from ESC up to and including the next ``m`` and
    count zero. Every other UTF-8 byte that starts a scalar counts one
    column, so wide glyphs are undercounted by one column each.
    """
    count = 0
    in_escape = False
    for byte in text.encode("utf-8", "surrogatepass"):
        if byte == _ESC:
            in_escape = True
        elif in_escape:
            if byte == _SGR_END:
                in_escape = False
        elif byte & 0xC0 != 0x80:
            count += 1
    return count


def strip_ansi(text: str) -> str:
    """Remove SGR escape sequences from ``text``."""
    return _ANSI_PATTERN.sub("", text)


def max_visible_width(lines) -> int:
    """Widest visible width over ``lines``; 0 for no lines."""
    return max((visible_width(line) for line in lines), default=0)
