"""Section formatter: labeled key/value groups rendered as a stack of boxes."""

from collections.abc import Sequence
from dataclasses import dataclass

from ..colors import Palette
from .box import build_box
from .width import visible_width

_PLAIN = Palette.plain()


@dataclass(frozen=True)
class Section:
    """一组带标题的 key/value 行，顺序即显示顺序"""

    title: str
    lines: tuple[tuple[str, str], ...] = ()

    @classmethod
    def of(cls, title: str, lines) -> "Section":
        return cls(title=title, lines=tuple((key, value) for key, value in lines))


def format_line(key: str, value: str, palette: Palette | None = None) -> str:
    """``"<key>: <value>"`` with key and value colored independently."""
    palette = palette or _PLAIN
    return f"{palette.key(key)}: {palette.value(value)}"


def sections_content_width(sections: Sequence[Section]) -> int:
    """Widest title or ``key: value`` row over all sections."""
    widths = [len(section.title) for section in sections]
    for section in sections:
        widths.extend(visible_width(key) + 2 + visible_width(value) for key, value in section.lines)
    return max(widths, default=0)


def sections_height(sections: Sequence[Section]) -> int:
    """Total rows of the stacked section boxes."""
    return sum(len(section.lines) + 2 for section in sections)


def format_sections(
    sections: Sequence[Section],
    shared_width: int | None = None,
    palette: Palette | None = None,
) -> list[str]:
    """Render every section as a box, all boxes at one common width.

    Args:
        sections: Sections in display order
        shared_width: Forced minimum inner width (used by stacked layouts)
        palette: Colors; plain when None

    Returns:
        Flattened rows of all boxes, in input order
    """
    formatted = [[format_line(key, value, palette) for key, value in section.lines] for section in sections]

    width = max(
        (
            max(len(section.title), max((visible_width(line) for line in lines), default=0))
            for section, lines in zip(sections, formatted)
        ),
        default=0,
    )
    if shared_width is not None:
        width = max(width, shared_width)

    rows: list[str] = []
    for section, lines in zip(sections, formatted):
        rows.extend(
            build_box(lines, title=section.title, min_width=width, center_content=False, palette=palette)
        )
    return rows
