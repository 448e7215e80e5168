"""
Folder staging for the reinstall flow.

A game folder is renamed to `<installdir>_temp_rename` so Steam's uninstall
leaves the files alone; renaming it back before the install lets Steam pick
the existing files up again. The suffix is the only record of a staging.
"""
import logging
from pathlib import Path, PurePath, PureWindowsPath
from typing import List, Optional, Union

from .errors import InvalidPath, NotFound, RenameError
from .scanning import COMMON_DIR, get_library_folders

logger = logging.getLogger(__name__)

TEMP_SUFFIX = "_temp_rename"

def strip_suffix(name: str) -> str:
    while name.endswith(TEMP_SUFFIX):
        name = name[: -len(TEMP_SUFFIX)]
    return name

def _check_name(name: str) -> None:
    """Folder names are relative to `common/` and may not climb out of it."""
    for p in (PurePath(name), PureWindowsPath(name)):
        if not p.parts or p.anchor or ".." in p.parts:
            raise InvalidPath(f"Invalid folder name: {name!r}")

def _rename(src: Path, dst: Path, what: str) -> None:
    if dst.exists():
        raise RenameError(f"Failed to {what} folder: {dst.name} already exists")
    try:
        src.rename(dst)
    except OSError as e:
        raise RenameError(f"Failed to {what} folder: {e}") from e

def rename_game_folder(steamapps_path: Union[str, Path], game_path: str,
                       log: Optional[logging.Logger] = None) -> str:
    """Stage `game_path` in the first library that has it; returns the staged name."""
    log = log or logger
    _check_name(game_path)
    for library in get_library_folders(steamapps_path, log=log):
        common_path = library / COMMON_DIR
        original = common_path / game_path
        if original.exists():
            temp_name = f"{game_path}{TEMP_SUFFIX}"
            _rename(original, common_path / temp_name, "rename")
            log.info("Staged %s -> %s", original, temp_name)
            return temp_name
    raise NotFound("Game folder not found in any library")

def revert_game_folder(steamapps_path: Union[str, Path], temp_name: str,
                       log: Optional[logging.Logger] = None) -> None:
    log = log or logger
    if not temp_name.endswith(TEMP_SUFFIX):
        raise NotFound(f"Not a staged folder name: {temp_name}")
    _check_name(temp_name)

    for library in get_library_folders(steamapps_path, log=log):
        common_path = library / COMMON_DIR
        temp = common_path / temp_name
        if temp.exists():
            original_name = strip_suffix(temp_name)
            _rename(temp, common_path / original_name, "revert")
            log.info("Reverted %s -> %s", temp, original_name)
            return
    raise NotFound("Temp folder not found in any library")

def cleanup_temp_folders(steamapps_path: Union[str, Path],
                         log: Optional[logging.Logger] = None) -> List[str]:
    """Restore every staged folder in every library; returns the restored names."""
    log = log or logger
    cleaned: List[str] = []

    for library in get_library_folders(steamapps_path, log=log):
        common_path = library / COMMON_DIR
        try:
            entries = sorted(common_path.iterdir())
        except OSError:
            continue
        for path in entries:
            if not path.name.endswith(TEMP_SUFFIX):
                continue
            original_name = strip_suffix(path.name)
            try:
                _rename(path, common_path / original_name, "revert")
            except RenameError as e:
                log.warning("Left %s staged: %s", path, e)
                continue
            cleaned.append(original_name)
    return cleaned
