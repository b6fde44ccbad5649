"""Persistence of the single logged-in user record."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, cast

from guahh_auth.config import STORAGE_KEY
from guahh_auth.exceptions import MalformedSession
from guahh_auth.utils import json_minify


if TYPE_CHECKING:
    from guahh_auth.core.storage import LocalStorage
    from guahh_auth.models import UserRecord


logger = logging.getLogger("GuahhAuth")


class SessionStore:
    """
    Reads and writes the persisted user record.

    This is the only place that knows who is logged in; nothing caches the
    user in memory.
    """

    def __init__(self, storage: LocalStorage, key: str = STORAGE_KEY):
        self._storage = storage
        self._key = key

    @staticmethod
    def _parse(raw: str) -> UserRecord:
        try:
            return cast("UserRecord", json.loads(raw))
        except ValueError as exc:
            raise MalformedSession(raw) from exc

    def get_user(self) -> UserRecord | None:
        """
        Return the stored user, or None when nobody is logged in.

        Raises MalformedSession if the stored value can't be parsed.
        """
        raw = self._storage.get_item(self._key)
        if not raw:
            return None
        return self._parse(raw)

    def set_user(self, record: UserRecord) -> None:
        self._storage.set_item(self._key, json_minify(dict(record)))
        logger.debug(f"Session stored for user {record.get('userId')!r}")

    def clear_user(self) -> UserRecord | None:
        """
        Remove the stored user and return what was there.

        The record is removed even when it turns out to be malformed,
        in which case MalformedSession is raised afterwards.
        """
        raw = self._storage.remove_item(self._key)
        if not raw:
            return None
        logger.debug("Session cleared")
        return self._parse(raw)
