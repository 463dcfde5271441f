"""Layout selector: picks how art and sections share the terminal.

Priority (first match wins):

1. wide art beside sections
2. compact art beside sections (if compact art exists)
3. medium art beside sections
4. compact art above sections (if compact art exists)
5. narrow art above sections
6. sections only
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from ..colors import Palette
from ..telemetry import get_logger, metrics
from .box import build_box, box_width
from .sections import Section, format_sections, sections_content_width, sections_height
from .terminal import TerminalGeometry, probe
from .width import max_visible_width

logger = get_logger(__name__)

# 2 border columns + 2 interior margin columns
BOX_CHROME = 4
# 列间空格
GAP = 1


class LayoutChoice(Enum):
    WIDE_SIDE_BY_SIDE = "wide_side_by_side"
    COMPACT_SIDE_BY_SIDE = "compact_side_by_side"
    MEDIUM_SIDE_BY_SIDE = "medium_side_by_side"
    COMPACT_STACKED = "compact_stacked"
    NARROW_STACKED = "narrow_stacked"
    SECTIONS_ONLY = "sections_only"

    @property
    def is_side_by_side(self) -> bool:
        return self in _SIDE_BY_SIDE

    @property
    def is_stacked(self) -> bool:
        return self in _STACKED


_SIDE_BY_SIDE = {
    LayoutChoice.WIDE_SIDE_BY_SIDE,
    LayoutChoice.COMPACT_SIDE_BY_SIDE,
    LayoutChoice.MEDIUM_SIDE_BY_SIDE,
}
_STACKED = {LayoutChoice.COMPACT_STACKED, LayoutChoice.NARROW_STACKED}


@dataclass(frozen=True)
class ArtVariants:
    """Size variants of one logo; ``compact`` is optional."""

    wide: tuple[str, ...]
    medium: tuple[str, ...]
    narrow: tuple[str, ...]
    compact: tuple[str, ...] | None = None

    @classmethod
    def of(cls, wide, medium, narrow, compact=None) -> "ArtVariants":
        return cls(
            wide=tuple(wide),
            medium=tuple(medium),
            narrow=tuple(narrow),
            compact=tuple(compact) if compact is not None else None,
        )

    @classmethod
    def single(cls, lines, compact=None) -> "ArtVariants":
        """Same art for every size."""
        lines = tuple(lines)
        return cls.of(lines, lines, lines, compact)

    def lines_for(self, choice: LayoutChoice) -> tuple[str, ...]:
        if choice in (LayoutChoice.COMPACT_SIDE_BY_SIDE, LayoutChoice.COMPACT_STACKED):
            return self.compact or ()
        if choice is LayoutChoice.WIDE_SIDE_BY_SIDE:
            return self.wide
        if choice is LayoutChoice.MEDIUM_SIDE_BY_SIDE:
            return self.medium
        if choice is LayoutChoice.NARROW_STACKED:
            return self.narrow
        return ()


def side_by_side_width(art: Sequence[str], sections: Sequence[Section]) -> int:
    """Columns needed to place ``art`` beside the sections."""
    return max_visible_width(art) + BOX_CHROME + GAP + sections_content_width(sections) + BOX_CHROME


def stacked_height(art: Sequence[str], sections: Sequence[Section]) -> int:
    """Rows needed to place ``art`` above the sections."""
    return len(art) + 2 + sections_height(sections)


def select_layout(
    art: ArtVariants, sections: Sequence[Section], geometry: TerminalGeometry
) -> LayoutChoice:
    """Pick the first layout that fits ``geometry``."""
    columns, rows = geometry.columns, geometry.rows
    compact = art.compact

    if columns >= side_by_side_width(art.wide, sections):
        return LayoutChoice.WIDE_SIDE_BY_SIDE
    if compact is not None and columns >= side_by_side_width(compact, sections):
        return LayoutChoice.COMPACT_SIDE_BY_SIDE
    if columns >= side_by_side_width(art.medium, sections):
        return LayoutChoice.MEDIUM_SIDE_BY_SIDE
    if compact is not None and rows >= stacked_height(compact, sections):
        return LayoutChoice.COMPACT_STACKED
    if rows >= stacked_height(art.narrow, sections):
        return LayoutChoice.NARROW_STACKED
    return LayoutChoice.SECTIONS_ONLY


def render_side_by_side(art_box: Sequence[str], sections_box: Sequence[str]) -> str:
    """Interleave two boxes row by row, art on the left."""
    art_padding = " " * box_width(art_box)
    rows = []
    for index in range(max(len(art_box), len(sections_box))):
        left = art_box[index] if index < len(art_box) else art_padding
        right = sections_box[index] if index < len(sections_box) else ""
        rows.append(f"{left}{' ' * GAP}{right}\n")
    return "".join(rows)


def render_stacked(art_box: Sequence[str], sections_box: Sequence[str]) -> str:
    """Art box on top, sections below."""
    return "".join(f"{line}\n" for line in [*art_box, *sections_box])


def compose(
    choice: LayoutChoice,
    art: ArtVariants,
    sections: Sequence[Section],
    palette: Palette | None = None,
) -> str:
    """Render ``choice`` into the final text block."""
    art_lines = art.lines_for(choice)

    if choice.is_side_by_side:
        sections_box = format_sections(sections, palette=palette)
        art_box = build_box(
            art_lines, min_height=len(sections_box), center_content=True, palette=palette
        )
        return render_side_by_side(art_box, sections_box)

    if choice.is_stacked:
        shared_width = max(max_visible_width(art_lines), sections_content_width(sections))
        art_box = build_box(art_lines, min_width=shared_width, center_content=True, palette=palette)
        sections_box = format_sections(sections, shared_width=shared_width, palette=palette)
        return render_stacked(art_box, sections_box)

    # 没有 section 时输出一个空框，保证结果非空
    rows = format_sections(sections, palette=palette) or build_box([], palette=palette)
    return "".join(f"{line}\n" for line in rows)


def draw_layout(
    art: ArtVariants,
    sections: Sequence[Section],
    geometry: TerminalGeometry | None = None,
    palette: Palette | None = None,
) -> str:
    """Draw art and sections with the layout that fits the terminal.

    Args:
        art: Logo size variants
        sections: Sections in display order
        geometry: Terminal size; probed when None
        palette: Colors; plain when None

    Returns:
        Newline-terminated rows ready for stdout
    """
    geometry = geometry or probe()
    choice = select_layout(art, sections, geometry)
    logger.debug(f"Layout {choice.value} for {geometry.columns}x{geometry.rows}")
    metrics.inc("layout.choice", {"layout": choice.value})
    return compose(choice, art, sections, palette)
