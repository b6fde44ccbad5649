"""Key/value string storage persisted to a single JSON file."""

from __future__ import annotations

import logging
from pathlib import Path

from guahh_auth.utils import json_load, json_save


logger = logging.getLogger("GuahhAuth")


class LocalStorage:
    """
    A string-to-string store kept in one JSON document on disk.

    Every call re-reads the file, so separate processes pointed at the same
    path see each other's writes. There is no locking: the last write wins.
    """

    def __init__(self, path: Path):
        self._path: Path = path

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        # a damaged file reads as empty and is replaced by the next write
        try:
            contents = json_load(self._path, {}, merge=False)
        except ValueError:
            logger.warning(f"Storage file {str(self._path)!r} is not valid JSON, ignoring it")
            return {}
        if not isinstance(contents, dict):
            logger.warning(
                f"Storage file {str(self._path)!r} does not hold an object, ignoring it"
            )
            return {}
        return contents

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        contents = self._load()
        contents[key] = value
        json_save(self._path, contents, sort=True)

    def remove_item(self, key: str) -> str | None:
        contents = self._load()
        previous = contents.pop(key, None)
        if previous is not None:
            json_save(self._path, contents, sort=True)
        return previous
