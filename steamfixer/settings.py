import json
from typing import Dict
from pathlib import Path

DEFAULTS = {"steamapps_path": "", "hide_tools": True}

def load_settings(settings_file: Path) -> Dict:
    settings = dict(DEFAULTS)
    try:
        if settings_file.exists():
            data = json.loads(settings_file.read_text("utf-8"))
            if isinstance(data, dict):
                settings.update({k: data.get(k, settings[k]) for k in settings})
    except (OSError, ValueError):
        pass
    path = settings["steamapps_path"]
    settings["steamapps_path"] = path if isinstance(path, str) else ""
    settings["hide_tools"] = bool(settings["hide_tools"])
    return settings

def save_settings(settings_file: Path, settings: dict) -> None:
    data = {k: settings.get(k, v) for k, v in DEFAULTS.items()}
    settings_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
