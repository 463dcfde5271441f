"""Userspace probes: packages, terminal, shell, WM, desktop UI, editor."""

import json
import os
from pathlib import Path

from .. import config
from .base import capitalize, iter_cmdlines, read_text, run_command

PACMAN_DB = Path("/var/lib/pacman/local")
DPKG_STATUS = Path("/var/lib/dpkg/status")
RPM_DBS = (Path("/var/lib/rpm/rpmdb.sqlite"), Path("/var/lib/rpm/Packages"))
FLATPAK_APPS = Path("/var/lib/flatpak/app")
XBPS_DB = Path("/var/db/xbps")

_DPKG_INSTALLED = "\nStatus: install ok installed\n"

# XDG_CURRENT_DESKTOP → WM
DESKTOP_WMS = {
    "hyprland": "Hyprland",
    "sway": "Sway",
    "kde": "KWin",
    "plasma": "KWin",
    "gnome": "Mutter",
    "xfce": "Xfwm4",
    "i3": "i3",
    "bspwm": "bspwm",
    "awesome": "Awesome",
    "qtile": "Qtile",
    "niri": "Niri",
}

# 进程名 → 显示名，按顺序匹配
PROCESS_WMS = [
    ("mutter", "Mutter"),
    ("kwin", "KWin"),
    ("sway", "Sway"),
    ("hyprland", "Hyprland"),
    ("Hyprland", "Hyprland"),
    ("river", "River"),
    ("wayfire", "Wayfire"),
    ("labwc", "LabWC"),
    ("dwl", "dwl"),
    ("niri", "Niri"),
    ("openbox", "Openbox"),
    ("i3", "i3"),
    ("bspwm", "bspwm"),
    ("dwm", "dwm"),
    ("awesome", "Awesome"),
    ("xfwm4", "Xfwm4"),
    ("marco", "Marco"),
    ("metacity", "Metacity"),
    ("compiz", "Compiz"),
    ("enlightenment", "Enlightenment"),
    ("fluxbox", "Fluxbox"),
    ("icewm", "IceWM"),
    ("xmonad", "XMonad"),
    ("qtile", "Qtile"),
    ("herbstluftwm", "herbstluftwm"),
    ("weston", "Weston"),
    ("cage", "Cage"),
    ("gamescope", "Gamescope"),
]

PROCESS_SHELLS = [
    ("noctalia-shell", "Noctalia Shell"),
    ("dms", "DMS"),
    ("plasmashell", "Plasma Shell"),
    ("gnome-shell", "Gnome Shell"),
    ("waybar", "Custom Waybar setup"),
]


def _count_entries(path: Path, dirs_only: bool = False) -> int:
    try:
        return sum(1 for entry in path.iterdir() if not dirs_only or entry.is_dir())
    except OSError:
        return 0


def package_counts(home: str | None = None) -> list[tuple[str, int]]:
    """Installed package counts per package manager that has any."""
    counts: list[tuple[str, int]] = []

    pacman = _count_entries(PACMAN_DB)
    if pacman:
        counts.append(("pacman", pacman))

    status = read_text(DPKG_STATUS)
    if status:
        dpkg = status.count(_DPKG_INSTALLED)
        if dpkg:
            counts.append(("dpkg", dpkg))

    if any(path.exists() for path in RPM_DBS):
        output = run_command("rpm", "-qa")
        if output and output.count("\n"):
            counts.append(("rpm", output.count("\n")))

    flatpak = _count_entries(FLATPAK_APPS)
    if flatpak:
        counts.append(("flatpak", flatpak))

    home = home if home is not None else os.environ.get("HOME")
    if home and (Path(home) / ".nix-profile" / "manifest.nix").exists():
        output = run_command("nix-env", "-q")
        if output:
            nix = sum(1 for line in output.splitlines() if line)
            if nix:
                counts.append(("nix", nix))

    xbps = _count_entries(XBPS_DB, dirs_only=True)
    if xbps:
        counts.append(("xbps", xbps))

    return counts


def packages() -> str:
    counts = package_counts()
    if not counts:
        return config.UNKNOWN
    return " | ".join(f"{count} ({manager})" for manager, count in counts)


def terminal(env: dict[str, str] | None = None) -> str:
    env = os.environ if env is None else env
    if "KITTY_PID" in env:
        return "Kitty"
    if "KONSOLE_VERSION" in env:
        return "Konsole"
    if "GNOME_TERMINAL_SCREEN" in env:
        return "Gnome Terminal"

    name = env.get("TERM_PROGRAM") or env.get("TERM")
    if not name:
        return config.UNKNOWN
    name = name.split("-256color")[0].split("-color")[0]
    return capitalize(name)


def parse_shell_version(first_line: str) -> str | None:
    """``"bash 5.2.26(1)-release"`` → ``"5.2.26"``."""
    for word in first_line.split():
        if word[:1].isdigit():
            for sep in ("(", "-"):
                word = word.split(sep, 1)[0]
            return word
    return None


def shell(env: dict[str, str] | None = None) -> str:
    env = os.environ if env is None else env
    shell_path = env.get("SHELL", "")
    name = shell_path.rsplit("/", 1)[-1]
    if not name:
        return config.UNKNOWN

    output = run_command(shell_path, "--version")
    version = parse_shell_version(output.splitlines()[0]) if output and output.strip() else None
    if version:
        return f"{capitalize(name)} {version}"
    return capitalize(name)


def wm(env: dict[str, str] | None = None) -> str:
    env = os.environ if env is None else env
    desktop = env.get("XDG_CURRENT_DESKTOP")
    if desktop:
        return DESKTOP_WMS.get(desktop.lower(), desktop)

    session = env.get("DESKTOP_SESSION")
    if session:
        return capitalize(session)

    for cmdline in iter_cmdlines():
        for needle, display in PROCESS_WMS:
            if needle in cmdline:
                return display
    return config.UNKNOWN


def _load_json(path: Path):
    content = read_text(path)
    if not content:
        return None
    try:
        return json.loads(content)
    except ValueError:
        return None


def noctalia_scheme(home: str) -> str | None:
    """Color scheme name from Noctalia settings, None for the default one."""
    scheme = _find_key(_load_json(Path(home) / ".config" / "noctalia" / "settings.json"), "predefinedScheme")
    if not isinstance(scheme, str) or "default" in scheme.lower():
        return None
    return scheme


def dms_theme(home: str) -> str | None:
    """DankMaterialShell theme name, None for the default one.

    A "custom" theme is resolved to the ``name`` in its theme file;
    Catppuccin flavours (``cat-mocha``) are spelled out.
    """
    settings = _load_json(Path(home) / ".config" / "DankMaterialShell" / "settings.json")
    theme = _find_key(settings, "currentThemeName")
    if not isinstance(theme, str) or "default" in theme.lower():
        return None

    if theme.lower() == "custom":
        theme_file = _find_key(settings, "customThemeFile")
        if isinstance(theme_file, str):
            name = _find_key(_load_json(Path(os.path.expanduser(theme_file))), "name")
            if isinstance(name, str) and name:
                return name

    if theme.startswith("cat-"):
        return f"Catppuccin ({theme[len('cat-'):]})"
    return theme


def _find_key(data, key: str):
    if isinstance(data, dict):
        if key in data:
            return data[key]
        for value in data.values():
            found = _find_key(value, key)
            if found is not None:
                return found
    elif isinstance(data, list):
        for item in data:
            found = _find_key(item, key)
            if found is not None:
                return found
    return None


# 带主题名的 shell
SHELL_THEMES = {
    "noctalia-shell": noctalia_scheme,
    "dms": dms_theme,
}


def ui(env: dict[str, str] | None = None) -> str:
    env = os.environ if env is None else env
    desktop = (env.get("XDG_CURRENT_DESKTOP") or "").lower()
    if desktop in ("kde", "plasma"):
        return "Plasma Shell"
    if desktop == "gnome":
        return "Gnome Shell"

    for cmdline in iter_cmdlines():
        for needle, display in PROCESS_SHELLS:
            if needle not in cmdline:
                continue
            theme_lookup = SHELL_THEMES.get(needle)
            if theme_lookup and env.get("HOME"):
                theme = theme_lookup(env["HOME"])
                if theme:
                    return f"{display} | {capitalize(theme)}"
            return display
    return config.UNKNOWN


def editor(env: dict[str, str] | None = None) -> str:
    """$VISUAL / $EDITOR; empty when unset or nano."""
    env = os.environ if env is None else env

    def _name(path: str | None) -> str | None:
        if not path:
            return None
        name = path.rsplit("/", 1)[-1]
        return None if name == "nano" else capitalize(name)

    visual, plain = _name(env.get("VISUAL")), _name(env.get("EDITOR"))
    if visual and plain and visual != plain:
        return f"{visual} | {plain}"
    return visual or plain or ""
