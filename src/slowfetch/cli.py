"""slowfetch command line entry."""

import argparse
import os
import sys
from pathlib import Path

from . import config
from .art import custom_variants, default_variants, os_variants
from .cache import ProbeCache
from .collector import collect_sections, find_value
from .colors import Palette
from .render.layout import ArtVariants, draw_layout
from .telemetry import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="slowfetch", description="A slow system info fetcher")
    parser.add_argument(
        "--os",
        dest="os_art",
        nargs="?",
        const="",
        default=None,
        metavar="NAME",
        help="Display OS-specific art; detect the OS when NAME is omitted (e.g. --os arch)",
    )
    parser.add_argument("--refresh", action="store_true", help="Ignore cached OS/CPU/GPU values")
    parser.add_argument("--no-color", action="store_true", help="Disable colors")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.toml")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Log level (stderr)")
    return parser


def resolve_palette(settings: config.Settings, no_color: bool) -> Palette:
    if no_color or not settings.color or os.environ.get("NO_COLOR"):
        return Palette.plain()
    return Palette.from_config(settings.colors)


def choose_art(
    os_request: str | None,
    settings: config.Settings,
    detected_os: str,
    palette: Palette,
) -> ArtVariants:
    """CLI ``--os`` > config ``os_art`` > config ``custom_art`` > built-in logo.

    Args:
        os_request: ``--os`` value; "" means detect, None means not given
        settings: Loaded config
        detected_os: Value of the OS probe
        palette: Art colors
    """
    if os_request is None and settings.os_art is not False:
        os_request = "" if settings.os_art is True else settings.os_art

    if os_request is not None:
        variants = os_variants(os_request or detected_os, palette)
        if variants is not None:
            return variants

    if settings.custom_art:
        variants = custom_variants(settings.custom_art, palette)
        if variants is not None:
            return variants

    return default_variants(palette)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    settings = config.load_config(args.config)
    palette = resolve_palette(settings, args.no_color)
    cache = ProbeCache(refresh=args.refresh)

    sections = collect_sections(cache, pretty_bars=settings.pretty_bars)
    detected_os = find_value(sections, "OS") or ""
    art = choose_art(args.os_art, settings, detected_os, palette)

    sys.stdout.write(draw_layout(art, sections, palette=palette))
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
