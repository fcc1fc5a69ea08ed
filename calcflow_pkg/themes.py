"""Theme table and cycling."""

from __future__ import annotations

from enum import Enum

RESET = "\033[0m"


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"
    NEON = "neon"
    OCEAN = "ocean"


THEME_ORDER = (Theme.DARK, Theme.LIGHT, Theme.NEON, Theme.OCEAN)

# Style tokens per theme: ANSI sequences for the terminal plus a glyph for the
# theme toggle.
THEMES: dict[Theme, dict[str, str]] = {
    Theme.DARK: {
        "text": "\033[97m",
        "accent": "\033[95m",
        "error": "\033[91m",
        "glyph": "☀",
    },
    Theme.LIGHT: {
        "text": "\033[30m",
        "accent": "\033[34m",
        "error": "\033[31m",
        "glyph": "☾",
    },
    Theme.NEON: {
        "text": "\033[96m",
        "accent": "\033[95;1m",
        "error": "\033[93m",
        "glyph": "⚡",
    },
    Theme.OCEAN: {
        "text": "\033[36m",
        "accent": "\033[94m",
        "error": "\033[91m",
        "glyph": "💧",
    },
}


def resolve_theme(name: str | Theme | None) -> Theme:
    """Theme for ``name``; unknown names fall back to dark."""
    try:
        return Theme(name)
    except ValueError:
        return Theme.DARK


def next_theme(theme: Theme) -> Theme:
    return THEME_ORDER[(THEME_ORDER.index(theme) + 1) % len(THEME_ORDER)]


def style(theme: Theme, token: str, text: str, enabled: bool = True) -> str:
    """Wrap ``text`` in the theme's ANSI sequence for ``token``."""
    if not enabled:
        return text
    return f"{THEMES[theme][token]}{text}{RESET}"
