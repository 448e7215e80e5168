import logging
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .errors import InvalidManifest, ReadError
from .models import Err, GameRecord, GameStatus, Ok

logger = logging.getLogger(__name__)

LIBRARY_FILE = "libraryfolders.vdf"
STEAMAPPS_DIR = "steamapps"
COMMON_DIR = "common"
MANIFEST_PREFIX = "appmanifest_"
MANIFEST_SUFFIX = ".acf"

def extract_value(line: str) -> Optional[str]:
    """Value of a `"key" "value"` line, with escaped backslashes collapsed."""
    parts = line.split('"')
    if len(parts) >= 4:
        return parts[3].replace("\\\\", "\\")
    return None

def _same_path(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except OSError:
        return a == b

def get_library_folders(steamapps_path: Union[str, Path],
                        log: Optional[logging.Logger] = None) -> List[Path]:
    """The given steamapps root followed by every extra library it references."""
    log = log or logger
    root = Path(steamapps_path)
    libraries: List[Path] = [root]

    try:
        content = (root / LIBRARY_FILE).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return libraries

    for line in content.splitlines():
        if '"path"' not in line:
            continue
        value = extract_value(line)
        if not value:
            continue
        library = Path(value) / STEAMAPPS_DIR
        if library.exists() and not _same_path(library, root):
            log.debug("Found Steam library: %s", library)
            libraries.append(library)
    return libraries

def parse_manifest(manifest_path: Path, common_path: Path) -> GameRecord:
    try:
        content = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(f"Failed to read manifest: {e}") from e

    fields = {"appid": "", "name": "", "installdir": ""}
    # flat scan; nested blocks are not tracked, later matches overwrite
    for line in content.splitlines():
        key = next((k for k in fields if f'"{k}"' in line), None)
        if key is None:
            continue
        value = extract_value(line)
        if value is not None:
            fields[key] = value

    app_id, name, install_dir = fields["appid"], fields["name"], fields["installdir"]
    if not (name and app_id and install_dir):
        raise InvalidManifest(f"Invalid manifest data: {manifest_path.name}")
    if not (common_path / install_dir).exists():
        raise InvalidManifest(f"Install folder missing: {install_dir}")
    return GameRecord(name=name, app_id=app_id, path=install_dir, status=GameStatus.READY)

def _is_manifest_name(filename: str) -> bool:
    return filename.startswith(MANIFEST_PREFIX) and filename.endswith(MANIFEST_SUFFIX)

def _list_manifests(library: Path) -> List[Path]:
    try:
        entries = sorted(library.iterdir())
    except OSError:
        return []
    return [p for p in entries if _is_manifest_name(p.name)]

def iter_manifests(steamapps_path: Union[str, Path],
                   log: Optional[logging.Logger] = None) -> Iterator[Union[Ok, Err]]:
    """Every manifest of every library, as Ok(GameRecord) or Err(path, reason)."""
    log = log or logger
    libraries = get_library_folders(steamapps_path, log=log)
    log.info("Found %d Steam library folders", len(libraries))

    for library in libraries:
        common_path = library / COMMON_DIR
        if not common_path.exists():
            continue
        log.info("Scanning: %s", library)
        for manifest in _list_manifests(library):
            try:
                yield Ok(parse_manifest(manifest, common_path))
            except (ReadError, InvalidManifest) as e:
                yield Err(manifest, e)

def scan_games(steamapps_path: Union[str, Path],
               log: Optional[logging.Logger] = None) -> List[GameRecord]:
    log = log or logger
    games: List[GameRecord] = []
    seen = set()

    for outcome in iter_manifests(steamapps_path, log=log):
        if isinstance(outcome, Err):
            log.debug("Skipped %s: %s", outcome.source.name, outcome.reason)
            continue
        game = outcome.value
        if game.app_id in seen:
            continue
        seen.add(game.app_id)
        games.append(game)

    log.info("Found %d total games", len(games))
    return games

def filter_tools(games: List[GameRecord], excluded: List[str]) -> List[GameRecord]:
    """Drop runtime/redistributable entries whose name contains an excluded token."""
    return [g for g in games if not any(token in g.name for token in excluded)]
