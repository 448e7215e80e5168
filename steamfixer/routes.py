from __future__ import annotations
import logging
from pathlib import Path
from flask import Blueprint, current_app, render_template_string, redirect, url_for, flash, request, jsonify

from .errors import InvalidPath, NotFound, SteamFixerError
from .launch import open_steam_url, steam_url
from .scanning import scan_games, filter_tools
from .settings import load_settings, save_settings
from .shortcuts import quick_fix_shortcuts
from .staging import rename_game_folder, revert_game_folder, cleanup_temp_folders

from .templates import INDEX_HTML

logger = logging.getLogger(__name__)

bp = Blueprint("steamfixer", __name__)

class BadRequest(SteamFixerError):
    pass

def _settings_file() -> Path:
    return Path(current_app.config["SETTINGS_FILE"])

def _steamapps(payload: dict | None = None) -> str:
    """Explicit path, else the saved one, else the configured default."""
    if payload and payload.get("path"):
        return str(payload["path"])
    if request.args.get("path"):
        return request.args["path"]
    saved = load_settings(_settings_file()).get("steamapps_path")
    return saved or current_app.config["STEAMAPPS_PATH"]

def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

def _require(payload: dict, key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise BadRequest(f"Missing '{key}'")
    return value

def _catalog(path: str, include_all: bool):
    games = scan_games(path)
    if include_all:
        return games
    return filter_tools(games, current_app.config["FILTERED_GAMES"])

@bp.errorhandler(SteamFixerError)
def _steamfixer_error(e: SteamFixerError):
    if isinstance(e, (BadRequest, InvalidPath)):
        status = 400
    elif isinstance(e, NotFound):
        status = 404
    else:
        status = 500
    logger.warning("%s failed: %s", request.path, e)
    return jsonify({"ok": False, "error": str(e)}), status

@bp.get("/")
def index():
    settings = load_settings(_settings_file())
    path = _steamapps()
    games = _catalog(path, include_all=not settings["hide_tools"])
    return render_template_string(
        INDEX_HTML,
        app_title=current_app.config["APP_TITLE"],
        steamapps_path=path,
        games=games,
    )

@bp.post("/cleanup")
def cleanup_page():
    cleaned = cleanup_temp_folders(_steamapps())
    flash(f"Cleaned up {len(cleaned)} folder(s)." if cleaned else "No temporary folders found.")
    return redirect(url_for("steamfixer.index"))

@bp.post("/quickfix")
def quickfix_page():
    try:
        results = quick_fix_shortcuts(timeout=current_app.config["ICON_TIMEOUT"])
    except SteamFixerError as e:
        flash(f"Quick fix failed: {e}")
        return redirect(url_for("steamfixer.index"))
    fixed = sum(1 for r in results if r.success)
    failed = len(results) - fixed
    if not results:
        flash("No Steam shortcuts found on desktop.")
    else:
        flash(f"Fixed {fixed} shortcut(s), {failed} failed.")
    return redirect(url_for("steamfixer.index"))

# ── JSON API ─────────────────────────────────────────────────────────────────

@bp.get("/api/games")
def api_games():
    include_all = request.args.get("all") in ("1", "true", "yes")
    games = _catalog(_steamapps(), include_all)
    return jsonify([g.to_dict() for g in games])

@bp.post("/api/shortcuts/fix")
def api_fix_shortcuts():
    results = quick_fix_shortcuts(timeout=current_app.config["ICON_TIMEOUT"])
    return jsonify([r.to_dict() for r in results])

@bp.post("/api/folders/rename")
def api_rename():
    payload = _json_body()
    temp_name = rename_game_folder(_steamapps(payload), _require(payload, "game_path"))
    return jsonify({"ok": True, "temp_name": temp_name})

@bp.post("/api/folders/revert")
def api_revert():
    payload = _json_body()
    revert_game_folder(_steamapps(payload), _require(payload, "temp_name"))
    return jsonify({"ok": True})

@bp.post("/api/folders/cleanup")
def api_cleanup():
    cleaned = cleanup_temp_folders(_steamapps(_json_body()))
    return jsonify({"ok": True, "cleaned": cleaned})

@bp.post("/api/open")
def api_open():
    payload = _json_body()
    if payload.get("app_id"):
        try:
            url = steam_url(str(payload.get("action", "run")), str(payload["app_id"]))
        except ValueError as e:
            raise BadRequest(str(e)) from e
    else:
        url = _require(payload, "url")
        if not url.startswith("steam://"):
            raise BadRequest("Only steam:// URLs can be opened")
    open_steam_url(url)
    return jsonify({"ok": True, "url": url})

@bp.get("/api/settings")
def api_settings():
    return jsonify(load_settings(_settings_file()))

@bp.post("/api/settings")
def api_settings_post():
    payload = _json_body()
    settings = load_settings(_settings_file())
    if "steamapps_path" in payload:
        settings["steamapps_path"] = str(payload["steamapps_path"] or "")
    if "hide_tools" in payload:
        settings["hide_tools"] = bool(payload["hide_tools"])
    try:
        save_settings(_settings_file(), settings)
    except OSError as e:
        return jsonify({"ok": False, "error": f"Failed to save settings: {e}"}), 500
    return jsonify({"ok": True, **settings})

@bp.get("/favicon.ico")
def favicon():
    return ("", 204)
