"""
Shortcut repair.

Steam writes desktop/Start-menu `.url` shortcuts whose `IconFile=` points at
`<steam>/steam/games/<hash>.ico`. When that cache entry disappears the
shortcut shows a blank icon. The icon filename is the client icon hash, so
the file can be fetched back from the Steam CDN and dropped into the shared
cache; one download serves every shortcut that references the same icon.
"""
import logging
import ntpath
import os
import re
from pathlib import Path
from typing import Iterable, List, Optional, Union

import requests

from .errors import CacheDirError
from .models import ShortcutFixResult

logger = logging.getLogger(__name__)

ICON_URL_TEMPLATE = "https://cdn.cloudflare.steamstatic.com/steamcommunity/public/images/apps/{game_id}/{icon_hash}.ico"
DOWNLOAD_TIMEOUT = 10

GAME_ID_RE = re.compile(r"URL=steam://rungameid/(\d+)")
ICON_FILE_RE = re.compile(r"IconFile=(.+\.ico)")
ICON_HASH_RE = re.compile(r"([a-f0-9]+)\.ico")

class ShortcutFailed(Exception):
    pass

def icon_url_for(game_id: str, icon_hash: str) -> str:
    return ICON_URL_TEMPLATE.format(game_id=game_id, icon_hash=icon_hash)

def ensure_icon_cache(icons_cache: Path) -> Path:
    if not icons_cache.exists():
        try:
            icons_cache.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheDirError(f"Failed to create icons cache directory: {e}") from e
    if not icons_cache.is_dir():
        raise CacheDirError(f"Icons cache is not a directory: {icons_cache}")
    return icons_cache

def _icon_filename(icon_file_path: str) -> str:
    # shortcuts carry Windows paths; ntpath splits on both separators
    return ntpath.basename(icon_file_path)

def _download_icon(session, url: str, target: Path, timeout: float) -> None:
    try:
        response = session.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise ShortcutFailed(f"Download failed: {e}") from e

    if not 200 <= response.status_code < 300:
        raise ShortcutFailed(f"HTTP error: {response.status_code} {response.reason or ''}".rstrip())

    # the cache trusts any file that exists, so only a complete body may land on `target`
    partial = target.with_name(target.name + ".part")
    try:
        partial.write_bytes(response.content)
        os.replace(partial, target)
    except OSError as e:
        try:
            partial.unlink(missing_ok=True)
        except OSError:
            pass
        raise ShortcutFailed(f"Failed to write icon: {e}") from e


def process_shortcut(file_path: Path, icons_cache: Path, location: str, *,
                     session=None, timeout: float = DOWNLOAD_TIMEOUT,
                     log: Optional[logging.Logger] = None) -> ShortcutFixResult:
    """Resolve and cache the icon of one shortcut. Raises ShortcutFailed."""
    log = log or logger
    try:
        content = file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ShortcutFailed(f"Failed to read file: {e}") from e

    m = GAME_ID_RE.search(content)
    if not m:
        raise ShortcutFailed("Not a Steam game shortcut")
    game_id = m.group(1)

    m = ICON_FILE_RE.search(content)
    if not m:
        raise ShortcutFailed("No icon path found")
    icon_filename = _icon_filename(m.group(1).strip())
    if not icon_filename:
        raise ShortcutFailed("Could not extract icon filename")

    m = ICON_HASH_RE.search(icon_filename)
    if not m:
        raise ShortcutFailed("Could not extract icon hash")
    icon_url = icon_url_for(game_id, m.group(1))

    cached = icons_cache / icon_filename
    if cached.exists():
        log.debug("Icon already cached: %s", icon_filename)
    else:
        _download_icon(session or requests, icon_url, cached, timeout)
        log.info("Downloaded %s", icon_url)

    return ShortcutFixResult(name=file_path.stem, game_id=game_id, icon_url=icon_url,
                             location=location, success=True, error=None)

def _list_shortcuts(location: Path) -> List[Path]:
    try:
        entries = sorted(location.iterdir())
    except OSError:
        return []
    return [p for p in entries if p.suffix.lower() == ".url" and p.is_file()]

def repair_shortcuts(icons_cache: Union[str, Path], locations: Iterable[Union[str, Path]], *,
                     session=None, timeout: float = DOWNLOAD_TIMEOUT,
                     log: Optional[logging.Logger] = None) -> List[ShortcutFixResult]:
    """One result per `.url` file found directly inside each location."""
    log = log or logger
    icons_cache = ensure_icon_cache(Path(icons_cache))
    fixes: List[ShortcutFixResult] = []

    for location in map(Path, locations):
        log.info("Scanning: %s", location)
        location_name = location.name or "Unknown"
        for path in _list_shortcuts(location):
            try:
                fix = process_shortcut(path, icons_cache, location_name,
                                       session=session, timeout=timeout, log=log)
                log.info("Fixed: %s", fix.name)
            except ShortcutFailed as e:
                log.warning("Failed %s: %s", path, e)
                fix = ShortcutFixResult(name=path.name, game_id="", icon_url="",
                                        location=location_name, success=False, error=str(e))
            fixes.append(fix)
    return fixes

def quick_fix_shortcuts(log: Optional[logging.Logger] = None, **kwargs) -> List[ShortcutFixResult]:
    """Repair shortcuts in the user's desktop and Start menu against the local Steam install."""
    from .utils import find_steam_install_directory, get_shortcut_locations, icons_cache_for

    log = log or logger
    steam_path = find_steam_install_directory()
    icons_cache = icons_cache_for(steam_path)
    log.info("Steam path: %s", steam_path)
    log.info("Icons cache: %s", icons_cache)

    locations = get_shortcut_locations()
    log.info("Scanning %d locations", len(locations))
    return repair_shortcuts(icons_cache, locations, log=log, **kwargs)
