from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, TypedDict

from guahh_auth.config import AUTH_PAGE_URL, SETTINGS_PATH
from guahh_auth.utils import json_load, json_save


if TYPE_CHECKING:
    from typing import Any as ParsedArgs  # Avoid circular import


class SettingsFile(TypedDict):
    auth_page_url: str
    page_title: str
    page_origin: str
    trusted_origins: list[str]
    screen_width: int
    screen_height: int
    browser: str
    host: str
    port: int


default_settings: SettingsFile = {
    "auth_page_url": AUTH_PAGE_URL,
    "page_title": "",
    "page_origin": "http://127.0.0.1:8080",
    "trusted_origins": [],
    "screen_width": 1920,
    "screen_height": 1080,
    "browser": "",
    "host": "127.0.0.1",
    "port": 8080,
}


class Settings:
    # from args
    debug_handshake: int
    logging_level: int
    # from settings file
    auth_page_url: str
    page_title: str
    page_origin: str
    trusted_origins: list[str]
    screen_width: int
    screen_height: int
    browser: str
    host: str
    port: int

    PASSTHROUGH = ("_settings", "_args", "_altered", "_path")

    def __init__(self, args: ParsedArgs, *, path: Path = SETTINGS_PATH):
        self._path: Path = path
        self._settings: SettingsFile = json_load(path, default_settings)
        self._args: ParsedArgs = args
        self._altered: bool = False

    # default logic of reading settings is to check args first, then the settings file
    def __getattr__(self, name: str, /) -> Any:
        if name in self.PASSTHROUGH:
            # passthrough
            return getattr(super(), name)
        elif getattr(self._args, name, None) is not None:
            return getattr(self._args, name)
        elif name in self._settings:
            return self._settings[name]  # type: ignore[literal-required]
        return getattr(super(), name)

    def __setattr__(self, name: str, value: Any, /) -> None:
        if name in self.PASSTHROUGH:
            # passthrough
            return super().__setattr__(name, value)
        elif name in self._settings:
            self._settings[name] = value  # type: ignore[literal-required]
            self._altered = True
            return
        raise TypeError(f"{name} is missing a custom setter")

    def __delattr__(self, name: str, /) -> None:
        raise RuntimeError("settings can't be deleted")

    def save(self, *, force: bool = False) -> None:
        if self._altered or force:
            json_save(self._path, self._settings, sort=True)
