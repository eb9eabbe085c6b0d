import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"
CONFIG_FILE = Path(os.getenv("SMART_DISPLAY_CONFIG_FILE", str(DATA_DIR / "smart-display.json")))

DEFAULT_DURATION_SECS = float(os.getenv("SMART_DISPLAY_DEFAULT_DURATION_SECS", "30"))
POLL_INTERVAL_MS = int(os.getenv("SMART_DISPLAY_POLL_INTERVAL_MS", "1000"))

HOST = os.getenv("SMART_DISPLAY_HOST", "0.0.0.0")
PORT = int(os.getenv("SMART_DISPLAY_PORT", "3000"))
LOG_LEVEL = os.getenv("SMART_DISPLAY_LOG_LEVEL", "INFO").upper()
