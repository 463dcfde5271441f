"""ASCII art variants.

Logos are plain text files with ``{1}``..``{9}`` markers that switch the
art color; the active color carries over to the following lines. Files
live in the package ``assets`` directory.
"""

import re
from pathlib import Path

from .colors import Palette
from .render.layout import ArtVariants
from .telemetry import get_logger

logger = get_logger(__name__)

ASSETS_DIR = Path(__file__).parent / "assets"

_MARKER = re.compile(r"\{([1-9])\}")

# 子串匹配（小写），按顺序
OS_LOGOS = [
    (("arch",), "arch"),
    (("cachyos", "cachy"), "cachy"),
    (("fedora",), "fedora"),
    (("ubuntu",), "ubuntu"),
    (("nixos", "nix"), "nix"),
    (("debian",), "debian"),
]


def render_art(text: str, palette: Palette | None = None) -> list[str]:
    """Turn marker text into colored lines.

    Args:
        text: Art with ``{N}`` color markers
        palette: Colors; markers are just removed when None or plain

    Returns:
        One string per art line
    """
    palette = palette or Palette.plain()
    color = 0
    lines = []
    for raw in text.rstrip("\n").split("\n"):
        parts = _MARKER.split(raw)
        # split 结果: [text, index, text, index, text, ...]
        rendered = [palette.art(color, parts[0]) if color else parts[0]]
        for index, segment in zip(parts[1::2], parts[2::2]):
            color = int(index)
            rendered.append(palette.art(color, segment))
        lines.append("".join(rendered))
    return lines


def load_asset(name: str, palette: Palette | None = None) -> list[str]:
    return render_art((ASSETS_DIR / name).read_text(encoding="utf-8"), palette)


def default_variants(palette: Palette | None = None) -> ArtVariants:
    """Built-in wide / medium / narrow logo."""
    return ArtVariants.of(
        wide=load_asset("default/wide.txt", palette),
        medium=load_asset("default/medium.txt", palette),
        narrow=load_asset("default/narrow.txt", palette),
    )


def match_os_logo(os_name: str) -> str | None:
    """Asset base name for ``os_name``, None if there is no logo for it."""
    lowered = os_name.lower()
    for needles, logo in OS_LOGOS:
        if any(needle in lowered for needle in needles):
            return logo
    return None


def os_variants(os_name: str, palette: Palette | None = None) -> ArtVariants | None:
    """OS logo for every size plus its compact version."""
    logo = match_os_logo(os_name)
    if logo is None:
        logger.debug(f"No OS art for {os_name!r}")
        return None
    full = load_asset(f"{logo}.txt", palette)
    compact = load_asset(f"{logo}smol.txt", palette)
    return ArtVariants.single(full, compact=compact)


def custom_variants(path: str | Path, palette: Palette | None = None) -> ArtVariants | None:
    """User art file used at every size; None if it cannot be read."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Cannot read custom art {path}: {e}")
        return None
    if not text.strip():
        logger.warning(f"Custom art {path} is empty")
        return None
    return ArtVariants.single(render_art(text, palette))
