"""Configuration package for Guahh Auth."""

from __future__ import annotations

# Re-export all public symbols for convenience
from .constants import (
    APP_BROWSERS,
    AUTH_PAGE_URL,
    CACHED_SESSION_NAME,
    CALL,
    DEFAULT_AVATAR_URL,
    DEFAULT_SERVICE_NAME,
    FILE_FORMATTER,
    HANDSHAKE_TYPE,
    LOGGING_LEVELS,
    OUTPUT_FORMATTER,
    POPUP_BLOCKED_ALERT,
    POPUP_CLOSE_TIMEOUT,
    POPUP_FEATURES,
    POPUP_HEIGHT,
    POPUP_NAME,
    POPUP_POLL_INTERVAL,
    POPUP_WIDTH,
    STORAGE_KEY,
    AuthEvent,
    JsonType,
)
from .paths import DATA_DIR, LOGS_DIR, SETTINGS_PATH, STORAGE_PATH


__all__ = [
    # constants.py
    "CALL",
    "FILE_FORMATTER",
    "OUTPUT_FORMATTER",
    "LOGGING_LEVELS",
    "JsonType",
    "AuthEvent",
    "AUTH_PAGE_URL",
    "STORAGE_KEY",
    "HANDSHAKE_TYPE",
    "CACHED_SESSION_NAME",
    "DEFAULT_SERVICE_NAME",
    "DEFAULT_AVATAR_URL",
    "POPUP_NAME",
    "POPUP_WIDTH",
    "POPUP_HEIGHT",
    "POPUP_FEATURES",
    "POPUP_BLOCKED_ALERT",
    "POPUP_POLL_INTERVAL",
    "POPUP_CLOSE_TIMEOUT",
    "APP_BROWSERS",
    # paths.py
    "DATA_DIR",
    "LOGS_DIR",
    "SETTINGS_PATH",
    "STORAGE_PATH",
]
