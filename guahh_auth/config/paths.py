"""Path-related configuration and environment detection."""

from __future__ import annotations

import os
from pathlib import Path


# Environment detection
IS_DOCKER = os.getenv("DOCKER_ENV") == "1" or os.path.exists("/.dockerenv")

# Base Paths - environment-specific resolution
if os.getenv("GUAHH_DATA_DIR"):
    WORKING_DIR = Path.cwd()
    DATA_DIR = Path(os.environ["GUAHH_DATA_DIR"])
elif IS_DOCKER:
    # Docker environment: use fixed paths
    WORKING_DIR = Path("/app")
    DATA_DIR = Path("/app/data")
else:
    WORKING_DIR = Path.cwd()
    DATA_DIR = Path(WORKING_DIR, "data")

# Ensure data directory exists
if not DATA_DIR.exists():
    DATA_DIR.mkdir(parents=True, exist_ok=True)

# Persistent storage paths - use DATA_DIR for Docker compatibility
LOGS_DIR = Path(WORKING_DIR, "logs")
SETTINGS_PATH = Path(DATA_DIR, "settings.json")
STORAGE_PATH = Path(DATA_DIR, "storage.json")
