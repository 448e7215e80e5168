import os
from flask import Flask
from .routes import bp as routes_bp

# Bind only localhost unless overridden
BIND = os.environ.get("BIND", "127.0.0.1")
PORT = int(os.environ.get("PORT", "5000"))
DEFAULT_STEAMAPPS = "C:/Program Files (x86)/Steam/steamapps"

FILTERED_GAMES = [
    "Steamworks Common Redistributables",
    "Steam Linux Runtime",
    "Proton",
]

def default_settings_file() -> str:
    return os.environ.get("STEAMFIXER_SETTINGS",
                          os.path.join(os.path.expanduser("~"), ".steamfixer.json"))

def create_app(steamapps_path: str = DEFAULT_STEAMAPPS, settings_file: str | None = None) -> Flask:
    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET", "dev-" + os.urandom(8).hex())
    app.config["APP_TITLE"] = "Steam Shortcut Fixer"
    app.config["STEAMAPPS_PATH"] = steamapps_path
    app.config["SETTINGS_FILE"] = settings_file or default_settings_file()
    app.config["ICON_TIMEOUT"] = 10
    app.config["FILTERED_GAMES"] = list(FILTERED_GAMES)

    app.register_blueprint(routes_bp)
    return app
