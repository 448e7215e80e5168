#!/usr/bin/env python3
import logging
import os
import sys
from steamfixer import create_app, BIND, PORT, DEFAULT_STEAMAPPS

def _resolve_steamapps() -> str:
    if len(sys.argv) >= 2:
        return os.path.abspath(sys.argv[1])
    return os.environ.get("STEAMAPPS_PATH", DEFAULT_STEAMAPPS)

if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(_resolve_steamapps())
    app.run(host=BIND, port=PORT, debug=False)
