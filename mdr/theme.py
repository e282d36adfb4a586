"""Color themes for document rendering and viewer chrome.

Themes are RGB palettes. Code-block colors come from the selected Pygments
style instead and are configured separately.
"""

from __future__ import annotations

from dataclasses import dataclass

from .text.styled import Color


@dataclass(frozen=True)
class Theme:
    """Semantic palette used by the converter, overlays, and painter."""

    name: str
    border: Color | None
    title: Color | None
    footer: Color | None
    heading: Color | None
    list_bullet: Color | None
    code: Color | None
    quote: Color | None
    rule: Color | None
    link: Color | None
    scrollbar_thumb: Color | None
    scrollbar_track: Color | None
    beeline_start: Color | None
    beeline_end: Color | None
    search_bg: Color | None
    search_fg: Color | None
    search_bg_active: Color | None
    search_fg_active: Color | None
    colored: bool = True


PASTEL_THEME = Theme(
    name="pastel",
    border=(184, 193, 236),
    title=(132, 140, 200),
    footer=(160, 168, 210),
    heading=(140, 180, 220),
    list_bullet=(152, 210, 190),
    code=(240, 200, 170),
    quote=(190, 170, 220),
    rule=(190, 190, 200),
    link=(120, 170, 240),
    scrollbar_thumb=(150, 190, 220),
    scrollbar_track=(210, 220, 230),
    beeline_start=(170, 200, 230),
    beeline_end=(230, 170, 200),
    search_bg=(255, 230, 170),
    search_fg=(60, 60, 60),
    search_bg_active=(255, 200, 120),
    search_fg_active=(40, 40, 40),
)

OCEAN_THEME = Theme(
    name="ocean",
    border=(58, 110, 165),
    title=(95, 175, 255),
    footer=(135, 175, 215),
    heading=(95, 215, 255),
    list_bullet=(95, 215, 175),
    code=(175, 215, 255),
    quote=(135, 175, 175),
    rule=(88, 120, 150),
    link=(135, 215, 255),
    scrollbar_thumb=(95, 175, 255),
    scrollbar_track=(38, 60, 90),
    beeline_start=(120, 200, 255),
    beeline_end=(120, 255, 200),
    search_bg=(0, 95, 135),
    search_fg=(230, 240, 250),
    search_bg_active=(255, 175, 95),
    search_fg_active=(20, 20, 30),
)

PLAIN_THEME = Theme(
    name="plain",
    border=None,
    title=None,
    footer=None,
    heading=None,
    list_bullet=None,
    code=None,
    quote=None,
    rule=None,
    link=None,
    scrollbar_thumb=None,
    scrollbar_track=None,
    beeline_start=None,
    beeline_end=None,
    search_bg=None,
    search_fg=None,
    search_bg_active=None,
    search_fg_active=None,
    colored=False,
)

_THEMES: dict[str, Theme] = {
    PASTEL_THEME.name: PASTEL_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}

DEFAULT_THEME = PASTEL_THEME


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> Theme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "Theme",
    "DEFAULT_THEME",
    "PASTEL_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
