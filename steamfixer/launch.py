# steamfixer/launch.py
from __future__ import annotations

import logging
import subprocess
from typing import List

from .errors import LaunchError
from .utils import is_macos, is_windows

logger = logging.getLogger(__name__)

STEAM_ACTIONS = ("install", "uninstall", "run")

def steam_url(action: str, app_id: str) -> str:
    if action not in STEAM_ACTIONS:
        raise ValueError(f"Unsupported Steam action: {action}")
    if not str(app_id).isdigit():
        raise ValueError(f"Invalid app id: {app_id!r}")
    return f"steam://{action}/{app_id}"

def _opener_argv(url: str) -> List[str]:
    if is_windows():
        # the empty string is the window title `start` expects first
        return ["cmd", "/C", "start", "", url]
    if is_macos():
        return ["open", url]
    return ["xdg-open", url]

def open_steam_url(url: str) -> None:
    """Hand a URL to the desktop shell; returns once the opener is spawned."""
    argv = _opener_argv(url)
    try:
        subprocess.Popen(argv, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as e:
        raise LaunchError(f"Failed to open Steam: {e}") from e
    logger.info("Opened %s", url)
