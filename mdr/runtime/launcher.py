"""Hand URLs to the platform opener without blocking the viewer."""

from __future__ import annotations

import logging
import subprocess
import sys

logger = logging.getLogger(__name__)


def opener_command(url: str, platform: str | None = None) -> list[str]:
    """Return the argv that opens ``url`` on ``platform``."""
    platform = sys.platform if platform is None else platform
    if platform == "darwin":
        return ["open", url]
    if platform.startswith("win"):
        return ["cmd", "/C", "start", "", url]
    return ["xdg-open", url]


def open_url(url: str) -> None:
    """Spawn the opener detached from the terminal; failures are only logged."""
    try:
        subprocess.Popen(
            opener_command(url),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        logger.debug("failed to open %s: %s", url, exc)
