"""Read-only JSON configuration.

Supplies defaults for theme, code style, and the beeline gradient. Missing or
malformed config falls back to built-in defaults; command-line flags win.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .markdown.highlight import DEFAULT_STYLE
from .theme import DEFAULT_THEME

logger = logging.getLogger(__name__)

APP_NAME = "mdr"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class ViewerConfig:
    theme: str = DEFAULT_THEME.name
    style: str = DEFAULT_STYLE
    beeline: bool = True


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring config %s: %s", config_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def load_viewer_config(path: Path | None = None) -> ViewerConfig:
    """Return typed settings, ignoring keys with the wrong type."""
    data = load_config(path)
    defaults = ViewerConfig()
    theme = data.get("theme")
    style = data.get("style")
    beeline = data.get("beeline")
    return ViewerConfig(
        theme=theme if isinstance(theme, str) and theme else defaults.theme,
        style=style if isinstance(style, str) and style else defaults.style,
        beeline=beeline if isinstance(beeline, bool) else defaults.beeline,
    )
