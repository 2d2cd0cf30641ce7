"""Console colors for profsweep.

Colors come from built-in defaults, overridden key by key from the
``[colors]`` table of ``theme.toml`` in the profsweep config directory.
"""

import logging
import re
import sys
import tomllib
from functools import cache
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from rich.theme import Theme

from profsweep.core.paths import get_theme_path

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")

# Roles rendered in bold on top of their color
_BOLD_ROLES = frozenset({"error", "dry_run"})


def _hex_color(value: str) -> str:
    color = value.strip()
    if not color.startswith("#"):
        msg = "color must start with '#'"
        raise ValueError(msg)
    if not _HEX_RE.fullmatch(color):
        msg = f"invalid hex color '{color}', expected #RGB or #RRGGBB"
        raise ValueError(msg)
    return color


HexColor = Annotated[str, AfterValidator(_hex_color)]


class ThemeColors(BaseModel):
    """Report colors, keyed by the role they play in the output."""

    model_config = ConfigDict(extra="forbid")

    text: HexColor = "#e8eaed"
    muted: HexColor = "#9aa5ab"
    header: HexColor = "#5fa8d3"
    border: HexColor = "#2f4858"

    success: HexColor = "#2bb673"
    warning: HexColor = "#f0a202"
    error: HexColor = "#e63946"
    info: HexColor = "#48cae4"

    dry_run: HexColor = "#ffe66d"
    eligible: HexColor = "#f0a202"
    deleted: HexColor = "#80ed99"
    skipped: HexColor = "#577590"


def _read_overrides() -> dict[str, object]:
    """Return the ``[colors]`` table of the user theme file, or an empty dict."""
    path = get_theme_path()
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        print(f"Warning: Ignoring theme file {path}: {e}", file=sys.stderr)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring non-table 'colors' entry in %s", path)
        return {}
    logger.debug("Loaded %d theme override(s) from %s", len(colors), path)
    return colors


def load_theme() -> ThemeColors:
    """Build theme colors from defaults plus user overrides.

    An override file that fails validation is ignored as a whole.
    """
    try:
        return ThemeColors.model_validate(_read_overrides())
    except ValidationError as e:
        logger.warning("Theme validation failed, using defaults: %s", e)
        print(f"Warning: Invalid theme configuration: {e}", file=sys.stderr)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Map theme colors to Rich styles of the same name.

    Args:
        colors: Colors to convert. Loaded from disk when omitted.
    """
    if colors is None:
        colors = load_theme()

    styles = {
        role: f"bold {color}" if role in _BOLD_ROLES else color
        for role, color in colors.model_dump().items()
    }
    styles["bold_header"] = f"bold {colors.header}"
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """Return the process-wide Rich theme, loading it on first use."""
    return get_rich_theme()


def reload_theme() -> Theme:
    """Drop the cached theme and load it again."""
    get_theme.cache_clear()
    return get_theme()
