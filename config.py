"""Server-wide configuration constants for Tower Crawler Server."""

import os

TILES_IN_ROW = int(os.environ.get("TILES_IN_ROW", "15"))  # Rooms are TILES_IN_ROW x TILES_IN_ROW
DATA_DIR = os.environ.get("DATA_DIR", ".")  # Persistent data directory
SAVE_FILE = os.path.join(DATA_DIR, "game_state.json")
TOWER_FILE = os.environ.get("TOWER_FILE")  # Optional tower record loaded at startup
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
SERVER_NAME = "Tower Crawler Server"
SERVER_VERSION = "0.1.0"
