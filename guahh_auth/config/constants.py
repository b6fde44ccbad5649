"""Core constants, enums, and type definitions for Guahh Auth."""

from __future__ import annotations

import logging
from datetime import timedelta
from enum import Enum
from typing import Any


# Logging special levels
CALL: int = logging.INFO - 1
logging.addLevelName(CALL, "CALL")

# Logging configuration
LOGGING_LEVELS = {
    0: logging.ERROR,
    1: logging.WARNING,
    2: logging.INFO,
    3: CALL,
    4: logging.DEBUG,
}
FILE_FORMATTER = logging.Formatter(
    "{asctime}.{msecs:03.0f}:\t{levelname:>7}:\t{filename}:{lineno}:\t{message}",
    style="{",
    datefmt="%Y-%m-%d %H:%M:%S",
)
OUTPUT_FORMATTER = logging.Formatter("{levelname}: {message}", style="{", datefmt="%H:%M:%S")

# Type aliases
JsonType = dict[str, Any]

# Auth page and storage
AUTH_PAGE_URL = "guahh-auth-page.html"
STORAGE_KEY = "guahh_user"
HANDSHAKE_TYPE = "GUAHH_AUTH_SUCCESS"
CACHED_SESSION_NAME = "Cached Session"
DEFAULT_SERVICE_NAME = "this service"
DEFAULT_AVATAR_URL = "https://api.dicebear.com/8.x/thumbs/svg?seed={username}"

# Popup window
POPUP_NAME = "GuahhAuth"
POPUP_WIDTH = 500
POPUP_HEIGHT = 650
POPUP_FEATURES = "resizable=yes,scrollbars=yes,status=yes"
POPUP_BLOCKED_ALERT = "Please allow popups to sign in with Guahh Account."

# Intervals and Delays
POPUP_POLL_INTERVAL = timedelta(milliseconds=500)
POPUP_CLOSE_TIMEOUT = timedelta(seconds=5)

# Browsers able to open a bare app window, tried in order
APP_BROWSERS = (
    "chromium",
    "chromium-browser",
    "google-chrome",
    "google-chrome-stable",
    "microsoft-edge",
    "brave-browser",
)


class AuthEvent(Enum):
    """Events subscribers can register for."""

    LOGIN = "login"
    LOGOUT = "logout"
