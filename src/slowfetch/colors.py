"""Color palette: applies the configured colors as truecolor SGR escapes.

A palette is resolved once per run from the config and passed to the
renderer and art loader explicitly. ``Palette.plain()`` returns text
unchanged and is used for ``--no-color``, ``NO_COLOR`` and tests.
"""

from dataclasses import dataclass, field

from rich.color import Color, ColorSystem
from rich.style import Style

from .config import RGB, ColorConfig


def _style(rgb: RGB) -> Style:
    return Style(color=Color.from_rgb(*rgb))


@dataclass(frozen=True)
class Palette:
    """Resolved colors. ``None`` styles mean "no escapes"."""

    border_style: Style | None = None
    title_style: Style | None = None
    key_style: Style | None = None
    value_style: Style | None = None
    art_styles: tuple[Style, ...] = field(default_factory=tuple)

    @classmethod
    def plain(cls) -> "Palette":
        return cls()

    @classmethod
    def from_config(cls, colors: ColorConfig) -> "Palette":
        return cls(
            border_style=_style(colors.border),
            title_style=_style(colors.title),
            key_style=_style(colors.key),
            value_style=_style(colors.value),
            art_styles=tuple(_style(rgb) for rgb in colors.art_colors()),
        )

    @staticmethod
    def _apply(style: Style | None, text: str) -> str:
        if style is None or not text:
            return text
        return style.render(text, color_system=ColorSystem.TRUECOLOR)

    def border(self, text: str) -> str:
        return self._apply(self.border_style, text)

    def title(self, text: str) -> str:
        return self._apply(self.title_style, text)

    def key(self, text: str) -> str:
        return self._apply(self.key_style, text)

    def value(self, text: str) -> str:
        return self._apply(self.value_style, text)

    def art(self, index: int, text: str) -> str:
        """Color ``text`` with art color ``index`` (1-based).

        Out-of-range indexes leave the text uncolored.
        """
        if 1 <= index <= len(self.art_styles):
            return self._apply(self.art_styles[index - 1], text)
        return text
