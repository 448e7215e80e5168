import os
import sys
from pathlib import Path
from typing import List

from .errors import SteamNotFound

DEFAULT_STEAM_DIR = r"C:\Program Files (x86)\Steam"

def is_windows() -> bool:
    return os.name == "nt"

def is_macos() -> bool:
    return sys.platform == "darwin"

def _steam_from_registry() -> Path | None:
    try:
        import winreg
    except ImportError:
        return None
    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, r"SOFTWARE\Valve\Steam") as key:
            value, _ = winreg.QueryValueEx(key, "SteamPath")
    except OSError:
        return None
    return Path(value) if value else None

def find_steam_install_directory() -> Path:
    if not is_windows():
        raise SteamNotFound("Quick fix only supported on Windows")

    default = Path(DEFAULT_STEAM_DIR)
    if (default / "steam.exe").exists():
        return default

    p = _steam_from_registry()
    if p and (p / "steam.exe").exists():
        return p

    raise SteamNotFound("Could not find Steam installation directory")

def icons_cache_for(steam_path: Path) -> Path:
    return steam_path / "steam" / "games"

def get_shortcut_locations() -> List[Path]:
    """Desktop, OneDrive desktop and Start menu, whichever exist."""
    locations: List[Path] = []
    profile = os.environ.get("USERPROFILE")
    if profile:
        locations.append(Path(profile) / "Desktop")
        locations.append(Path(profile) / "OneDrive" / "Desktop")
        appdata = os.environ.get("APPDATA")
        if appdata:
            locations.append(Path(appdata) / "Microsoft" / "Windows" / "Start Menu" / "Programs")
    return [p for p in locations if p.exists()]
