"""Receiving the popup's authentication result."""

from __future__ import annotations

import logging
from collections import abc
from typing import TYPE_CHECKING, Any

from yarl import URL

from guahh_auth.config import AuthEvent
from guahh_auth.exceptions import UntrustedMessage
from guahh_auth.models import HandshakeMessage


if TYPE_CHECKING:
    from guahh_auth.core.callbacks import CallbackRegistry
    from guahh_auth.core.popup import PopupController
    from guahh_auth.core.session_store import SessionStore


logger = logging.getLogger("GuahhAuth")
message_logger = logging.getLogger("GuahhAuth.handshake")


def normalize_origin(origin: str | None) -> str | None:
    """Reduce an origin or URL to ``scheme://host[:port]``, None if it has none."""
    if not origin:
        return None
    try:
        url = URL(origin.strip())
        if not url.is_absolute():
            return None
        return str(url.origin())
    except ValueError:
        return None


class HandshakeListener:
    """
    Consumes success messages posted by the authentication popup.

    Anything not tagged as a success message is ignored without a trace.
    Tagged messages must come from a trusted origin before their payload
    is believed.
    """

    def __init__(
        self,
        store: SessionStore,
        callbacks: CallbackRegistry,
        popup: PopupController,
        *,
        trusted_origins: abc.Iterable[str] = (),
    ):
        self._store = store
        self._callbacks = callbacks
        self._popup = popup
        self._trusted: set[str] = set()
        self._listening: bool = False
        self.trust(*trusted_origins)

    @property
    def listening(self) -> bool:
        return self._listening

    @property
    def trusted_origins(self) -> frozenset[str]:
        return frozenset(self._trusted)

    def trust(self, *origins: str) -> None:
        for origin in origins:
            normalized = normalize_origin(origin)
            if normalized is None:
                logger.warning(f"Ignoring invalid trusted origin: {origin!r}")
                continue
            self._trusted.add(normalized)

    def start(self) -> None:
        self._listening = True

    def check_origin(self, origin: str | None) -> None:
        if normalize_origin(origin) not in self._trusted:
            raise UntrustedMessage(origin)

    def receive(self, data: Any, origin: str | None) -> bool:
        """
        Handle one inbound message. Returns whether it logged a user in.
        """
        if not self._listening or not HandshakeMessage.is_tagged(data):
            return False
        message_logger.debug(f"Handshake message from {origin!r}: {data!r}")
        try:
            self.check_origin(origin)
            message = HandshakeMessage.from_payload(data)
        except UntrustedMessage as exc:
            logger.warning(f"Rejected handshake message: {exc}")
            return False
        except ValueError as exc:
            logger.warning(f"Rejected handshake message from {origin!r}: {exc}")
            return False

        self._store.set_user(message.user)
        logger.info(f"Logged in as {message.user.get('username')!r}")
        self._callbacks.dispatch(AuthEvent.LOGIN, message.user, message.service)
        self._popup.close_if_open()
        return True
