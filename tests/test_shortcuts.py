from __future__ import annotations

import errno
from pathlib import Path
from types import SimpleNamespace

import pytest
import requests

import steamfixer.utils as utils
from steamfixer.errors import CacheDirError
from steamfixer.shortcuts import icon_url_for, process_shortcut, quick_fix_shortcuts, repair_shortcuts

CDN = "https://cdn.cloudflare.steamstatic.com/steamcommunity/public/images/apps"


class FakeSession:
    def __init__(self, status_code=200, content=b"\x00\x00\x01\x00icon", exc=None):
        self.status_code = status_code
        self.content = content
        self.exc = exc
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.exc is not None:
            raise self.exc
        reason = "OK" if self.status_code == 200 else "Not Found"
        return SimpleNamespace(status_code=self.status_code, reason=reason, content=self.content)


def shortcut(folder: Path, name: str, game_id: str | None = "440",
             icon: str | None = r"C:\Program Files (x86)\Steam\steam\games\deadbeef01.ico") -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    lines = ["[{000214A0-0000-0000-C000-000000000046}]", "Prop3=19,0", "[InternetShortcut]",
             "IDList=", "IconIndex=0"]
    if game_id is not None:
        lines.append(f"URL=steam://rungameid/{game_id}")
    if icon is not None:
        lines.append(f"IconFile={icon}")
    p = folder / name
    p.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return p


def test_icon_url_example(tmp_path: Path):
    desktop = tmp_path / "Desktop"
    desktop.mkdir()
    sc = desktop / "Team Fortress 2.url"
    sc.write_text("URL=steam://rungameid/440\nIconFile=C:\\icons\\deadbeef01.ico\n", encoding="utf-8")
    cache = tmp_path / "cache"
    cache.mkdir()

    fix = process_shortcut(sc, cache, "Desktop", session=FakeSession())

    assert fix.icon_url == f"{CDN}/440/deadbeef01.ico"
    assert fix.icon_url == icon_url_for("440", "deadbeef01")
    assert fix.name == "Team Fortress 2"
    assert fix.game_id == "440"
    assert fix.success and fix.error is None


def test_cold_cache_downloads_once(tmp_path: Path):
    desktop = tmp_path / "Desktop"
    shortcut(desktop, "Team Fortress 2.url")
    shortcut(desktop, "TF2 again.url")
    cache = tmp_path / "steam" / "games"
    session = FakeSession(content=b"ICONBYTES")

    results = repair_shortcuts(cache, [desktop], session=session)

    assert [r.success for r in results] == [True, True]
    assert session.calls == [(f"{CDN}/440/deadbeef01.ico", 10)]
    assert (cache / "deadbeef01.ico").read_bytes() == b"ICONBYTES"
    assert all(r.location == "Desktop" for r in results)


def test_warm_cache_skips_network(tmp_path: Path):
    desktop = tmp_path / "Desktop"
    shortcut(desktop, "Game.url", game_id="730", icon=r"C:\Steam\steam\games\abc123.ico")
    cache = tmp_path / "cache"
    cache.mkdir()
    (cache / "abc123.ico").write_bytes(b"cached")
    session = FakeSession(exc=AssertionError("network used"))

    [fix] = repair_shortcuts(cache, [desktop], session=session)

    assert session.calls == []
    assert fix.success is True
    assert fix.icon_url == f"{CDN}/730/abc123.ico"
    assert (cache / "abc123.ico").read_bytes() == b"cached"


def test_non_steam_shortcut_does_not_stop_scan(tmp_path: Path):
    desktop = tmp_path / "Desktop"
    start_menu = tmp_path / "Programs"
    shortcut(desktop, "a_browser.url", game_id=None)
    shortcut(desktop, "b_game.url")
    shortcut(start_menu, "c_game.URL", game_id="620", icon=r"C:\x\ff00.ico")
    (desktop / "notes.txt").write_text("URL=steam://rungameid/1", encoding="utf-8")
    (desktop / "folder.url").mkdir()

    results = repair_shortcuts(tmp_path / "cache", [desktop, start_menu], session=FakeSession())

    assert [r.name for r in results] == ["a_browser.url", "b_game", "c_game"]
    failed = results[0]
    assert failed.success is False
    assert failed.game_id == ""
    assert failed.icon_url == ""
    assert failed.error == "Not a Steam game shortcut"
    assert failed.location == "Desktop"
    assert results[1].success and results[2].success
    assert results[2].location == "Programs"


@pytest.mark.parametrize("icon, message", [
    (None, "No icon path found"),
    (r"C:\icons\NOTHEX.ico", "Could not extract icon hash"),
])
def test_icon_extraction_failures(tmp_path: Path, icon, message):
    shortcut(tmp_path / "Desktop", "Game.url", icon=icon)
    [fix] = repair_shortcuts(tmp_path / "cache", [tmp_path / "Desktop"], session=FakeSession())
    assert fix.success is False
    assert fix.error == message


def test_http_error_is_per_file(tmp_path: Path):
    desktop = tmp_path / "Desktop"
    shortcut(desktop, "Game.url")
    cache = tmp_path / "cache"

    [fix] = repair_shortcuts(cache, [desktop], session=FakeSession(status_code=404))

    assert fix.success is False
    assert fix.error.startswith("HTTP error: 404")
    assert not (cache / "deadbeef01.ico").exists()


def test_transport_error_is_per_file(tmp_path: Path):
    desktop = tmp_path / "Desktop"
    shortcut(desktop, "A.url")
    shortcut(desktop, "B.url", icon=r"C:\games\0a0b.ico")
    (tmp_path / "cache").mkdir()
    (tmp_path / "cache" / "0a0b.ico").write_bytes(b"x")
    session = FakeSession(exc=requests.Timeout("timed out"))

    a, b = repair_shortcuts(tmp_path / "cache", [desktop], session=session)

    assert a.success is False and a.error.startswith("Download failed:")
    assert b.success is True


def test_missing_location_is_tolerated(tmp_path: Path):
    assert repair_shortcuts(tmp_path / "cache", [tmp_path / "gone"], session=FakeSession()) == []
    assert (tmp_path / "cache").is_dir()


def test_cache_dir_failure_is_fatal(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(CacheDirError):
        repair_shortcuts(blocker / "games", [tmp_path], session=FakeSession())


def test_quick_fix_uses_steam_cache(tmp_path: Path, monkeypatch):
    steam = tmp_path / "Steam"
    desktop = tmp_path / "Desktop"
    shortcut(desktop, "Game.url")
    monkeypatch.setattr(utils, "find_steam_install_directory", lambda: steam)
    monkeypatch.setattr(utils, "get_shortcut_locations", lambda: [desktop])

    [fix] = quick_fix_shortcuts(session=FakeSession(content=b"ico"))

    assert fix.success
    assert (steam / "steam" / "games" / "deadbeef01.ico").read_bytes() == b"ico"


def test_failed_write_leaves_no_cache_entry(tmp_path: Path, monkeypatch):
    desktop = tmp_path / "Desktop"
    shortcut(desktop, "Game.url")
    cache = tmp_path / "cache"
    session = FakeSession(content=b"FULLICON")

    def _disk_full(self, data):
        with open(self, "wb") as f:
            f.write(data[:2])
        raise OSError(errno.ENOSPC, "No space left on device")

    with monkeypatch.context() as m:
        m.setattr(Path, "write_bytes", _disk_full)
        [first] = repair_shortcuts(cache, [desktop], session=session)

    assert first.success is False
    assert first.error.startswith("Failed to write icon:")
    assert list(cache.iterdir()) == []

    [second] = repair_shortcuts(cache, [desktop], session=session)

    assert second.success is True
    assert len(session.calls) == 2
    assert (cache / "deadbeef01.ico").read_bytes() == b"FULLICON"


def test_cache_path_that_is_a_file_is_fatal(tmp_path: Path):
    shortcut(tmp_path / "Desktop", "Game.url")
    cache = tmp_path / "games"
    cache.write_text("", encoding="utf-8")
    with pytest.raises(CacheDirError):
        repair_shortcuts(cache, [tmp_path / "Desktop"], session=FakeSession())
