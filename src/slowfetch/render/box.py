"""Bordered box builder.

Box layout::

    ╭──── Title ────╮
    │               │   <- vertical padding rows (min_height)
    │ content       │
    ╰───────────────╯

Every emitted row has the same visible width: ``inner_width + 4``.
"""

from collections.abc import Sequence

from ..colors import Palette
from .width import visible_width

# Box drawing characters
TOP_LEFT = "╭"
TOP_RIGHT = "╮"
BOTTOM_LEFT = "╰"
BOTTOM_RIGHT = "╯"
HORIZONTAL = "─"
VERTICAL = "│"

_PLAIN = Palette.plain()


def build_box(
    lines: Sequence[str],
    title: str | None = None,
    min_width: int | None = None,
    min_height: int | None = None,
    center_content: bool = False,
    palette: Palette | None = None,
) -> list[str]:
    """Render ``lines`` inside a rounded border.

    Args:
        lines: Content rows, may contain SGR escapes
        title: Optional title centered in the top border
        min_width: Minimum inner width; the box grows to fit content anyway
        min_height: Minimum total height including borders
        center_content: Center rows horizontally instead of left-aligning
        palette: Colors for border and title; plain when None

    Returns:
        Rendered rows, top border first
    """
    palette = palette or _PLAIN

    widths = [visible_width(line) for line in lines]
    content_width = max(widths, default=0)
    title_width = len(title) if title is not None else 0
    inner_width = max(content_width, title_width, min_width or 0)

    natural_height = len(lines) + 2
    total_height = max(natural_height, min_height or 0)
    slack = total_height - natural_height
    top_padding = slack // 2
    bottom_padding = slack - top_padding

    vertical = palette.border(VERTICAL)
    rule = palette.border(HORIZONTAL * (inner_width + 2))
    blank_row = f"{vertical}{' ' * (inner_width + 2)}{vertical}"

    rows: list[str] = []

    if title is not None:
        dashes = inner_width - title_width
        left = dashes // 2
        right = dashes - left
        rows.append(
            palette.border(TOP_LEFT + HORIZONTAL * left)
            + f" {palette.title(title)} "
            + palette.border(HORIZONTAL * right + TOP_RIGHT)
        )
    else:
        rows.append(f"{palette.border(TOP_LEFT)}{rule}{palette.border(TOP_RIGHT)}")

    rows.extend(blank_row for _ in range(top_padding))

    for line, width in zip(lines, widths):
        pad = inner_width - width
        if center_content:
            left = pad // 2
            right = pad - left
        else:
            left, right = 0, pad
        rows.append(f"{vertical} {' ' * left}{line}{' ' * right} {vertical}")

    rows.extend(blank_row for _ in range(bottom_padding))

    rows.append(f"{palette.border(BOTTOM_LEFT)}{rule}{palette.border(BOTTOM_RIGHT)}")
    return rows


def box_width(box: Sequence[str]) -> int:
    """Visible width of a rendered box (0 for an empty sequence)."""
    return visible_width(box[0]) if box else 0
