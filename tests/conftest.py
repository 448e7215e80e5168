from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

MANIFEST_TEMPLATE = '''"AppState"
{{
\t"appid"\t\t"{appid}"
\t"Universe"\t\t"1"
\t"name"\t\t"{name}"
\t"StateFlags"\t\t"4"
\t"installdir"\t\t"{installdir}"
}}
'''


def make_library(base: Path) -> Path:
    steamapps = base / "steamapps"
    (steamapps / "common").mkdir(parents=True, exist_ok=True)
    return steamapps


def write_manifest(steamapps: Path, appid: str, name: str, installdir: str,
                   *, install: bool = True) -> Path:
    manifest = steamapps / f"appmanifest_{appid}.acf"
    manifest.write_text(MANIFEST_TEMPLATE.format(appid=appid, name=name, installdir=installdir),
                        encoding="utf-8")
    if install:
        (steamapps / "common" / installdir).mkdir(parents=True, exist_ok=True)
    return manifest


def write_library_folders(steamapps: Path, *paths: Path) -> None:
    lines = ['"libraryfolders"', "{"]
    for i, p in enumerate(paths):
        escaped = str(p).replace("\\", "\\\\")
        lines += [f'\t"{i}"', "\t{", f'\t\t"path"\t\t"{escaped}"', '\t\t"label"\t\t""', "\t}"]
    lines.append("}")
    (steamapps / "libraryfolders.vdf").write_text("\n".join(lines) + "\n", encoding="utf-8")


@pytest.fixture
def primary(tmp_path: Path) -> Path:
    return make_library(tmp_path / "Steam")


@pytest.fixture
def secondary(tmp_path: Path) -> Path:
    return make_library(tmp_path / "SteamLibrary")
