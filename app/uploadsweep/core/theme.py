"""Theme management for the uploadsweep CLI.

Provides color theming with defaults and optional user overrides
from ~/.config/uploadsweep/theme.toml.
"""

import logging
import re
import tomllib
from pathlib import Path
from typing import cast

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from rich.theme import Theme

from uploadsweep.core.paths import get_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class ThemeColors(BaseModel):
    """Color configuration for the uploadsweep CLI.

    All colors must be hex codes (#RRGGBB or #RGB).
    """

    model_config = ConfigDict(extra="forbid")

    # Base colors
    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    # Semantic colors
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # File classification in scan listings
    orphan: str = "#f5b332"
    known: str = "#226666"

    @field_validator("*")
    @classmethod
    def validate_hex_color(cls, v: str, info: ValidationInfo) -> str:
        color = v.strip()
        if not _HEX_COLOR.match(color):
            msg = f"{info.field_name}: expected #RGB or #RRGGBB, got {color!r}"
            raise ValueError(msg)
        return color


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the [colors] table of a theme file.

    Returns:
        Color name to value mapping, or None if the file is missing or
        unreadable. Non-string values are dropped.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to load theme file %s: %s", path, e)
        return None

    colors_raw: object = data.get("colors", {})
    if not isinstance(colors_raw, dict):
        logger.warning("Invalid 'colors' section in %s", path)
        return None
    return {
        key: value
        for key, value in cast(dict[str, object], colors_raw).items()
        if isinstance(value, str)
    }


def load_theme(path: Path | None = None) -> ThemeColors:
    """Load theme colors with user override support.

    Args:
        path: Theme file to read. If None, uses the default theme path.

    Returns:
        ThemeColors with user overrides applied, or defaults if the
        user theme is missing or invalid.
    """
    user_path = path or get_theme_path()
    user_colors = _load_toml_colors(user_path)
    if user_colors is None:
        return ThemeColors()

    logger.debug("Loaded user theme overrides from %s", user_path)
    try:
        return ThemeColors(**user_colors)
    except ValueError as e:
        logger.warning("Theme validation failed, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme: one style per color plus a few derived ones."""
    colors = colors or load_theme()
    styles: dict[str, str] = colors.model_dump()
    styles["error"] = f"bold {colors.error}"
    styles["bold_header"] = f"bold {colors.header}"
    styles["dim"] = colors.muted
    return Theme(styles)


# Module-level cached theme instance
_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Get the Rich theme, loading and caching it if necessary.

    Returns:
        Cached Rich Theme instance.
    """
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
