"""Layout and rendering engine."""

from .box import build_box
from .layout import ArtVariants, LayoutChoice, draw_layout, select_layout
from .sections import Section, format_sections
from .terminal import TerminalGeometry, probe
from .width import strip_ansi, visible_width

__all__ = [
    "ArtVariants",
    "LayoutChoice",
    "Section",
    "TerminalGeometry",
    "build_box",
    "draw_layout",
    "format_sections",
    "probe",
    "select_layout",
    "strip_ansi",
    "visible_width",
]
