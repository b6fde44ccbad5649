"""The session manager: one object owning the whole login lifecycle."""

from __future__ import annotations

import logging
from collections import abc
from contextlib import suppress
from typing import TYPE_CHECKING, Any

from guahh_auth.config import STORAGE_PATH, AuthEvent
from guahh_auth.core.callbacks import CallbackRegistry
from guahh_auth.core.handshake import HandshakeListener
from guahh_auth.core.openers import create_opener
from guahh_auth.core.popup import PopupController
from guahh_auth.core.session_store import SessionStore
from guahh_auth.core.storage import LocalStorage
from guahh_auth.exceptions import MalformedSession
from guahh_auth.models import cached_session_service


if TYPE_CHECKING:
    from guahh_auth.config.settings import Settings
    from guahh_auth.core.popup import PopupWindow, WindowOpener
    from guahh_auth.models import ServiceDescriptor, UserRecord


logger = logging.getLogger("GuahhAuth")


class SessionManager:
    """
    Owns the popup, the stored session and the login/logout subscribers.

    Construct one per host process and hand it to whatever needs it.

    Login callbacks registered before `init()` are told about a session that
    already exists at startup; callbacks registered afterwards are not.
    """

    def __init__(
        self,
        store: SessionStore,
        popup: PopupController,
        *,
        callbacks: CallbackRegistry | None = None,
        trusted_origins: abc.Iterable[str] = (),
    ):
        self.store = store
        self.popup = popup
        self.callbacks = callbacks if callbacks is not None else CallbackRegistry()
        self.handshake = HandshakeListener(
            store, self.callbacks, popup, trusted_origins=trusted_origins
        )
        self._initialized: bool = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        opener: WindowOpener | None = None,
        alert: abc.Callable[[str], Any] | None = None,
    ) -> SessionManager:
        popup = PopupController(
            opener if opener is not None else create_opener(settings),
            auth_page_url=settings.auth_page_url,
            page_title=settings.page_title,
            page_origin=settings.page_origin,
            screen_size=(settings.screen_width, settings.screen_height),
            alert=alert,
        )
        return cls(
            SessionStore(LocalStorage(STORAGE_PATH)),
            popup,
            trusted_origins=settings.trusted_origins,
        )

    @property
    def initialized(self) -> bool:
        return self._initialized

    def init(self, auth_page_url: str | None = None) -> None:
        """
        Start listening for handshake messages and replay a stored session.
        """
        if self._initialized:
            logger.warning("Session manager is already initialized")
            return
        self._initialized = True
        if auth_page_url:
            self.popup.auth_page_url = auth_page_url
        auth_url = self.popup.auth_page_url
        if auth_url.is_absolute():
            self.handshake.trust(str(auth_url.origin()))
        else:
            logger.warning(
                f"Auth page URL {str(auth_url)!r} has no origin, "
                "only explicitly trusted origins can log users in"
            )
        self.handshake.start()
        logger.debug(f"Trusted handshake origins: {sorted(self.handshake.trusted_origins)}")

        try:
            user = self.store.get_user()
        except MalformedSession:
            logger.warning("Discarding malformed stored session")
            # the record is removed before the parse error is raised again
            with suppress(MalformedSession):
                self.store.clear_user()
            return
        if user:
            logger.info(f"Found cached session for {user.get('username')!r}")
            self.callbacks.dispatch(AuthEvent.LOGIN, user, cached_session_service())

    async def show(self, service: ServiceDescriptor | None = None) -> PopupWindow | None:
        return await self.popup.show(service)

    def get_user(self) -> UserRecord | None:
        return self.store.get_user()

    def is_logged_in(self) -> bool:
        try:
            return self.store.get_user() is not None
        except MalformedSession:
            return False

    def logout(self) -> UserRecord | None:
        """Clear the session and tell logout subscribers who was logged out."""
        try:
            user = self.store.get_user()
        except MalformedSession:
            logger.warning("Stored session is malformed, logging out without a user")
            user = None
        # a malformed record is still removed, and was reported above
        with suppress(MalformedSession):
            self.store.clear_user()
        logger.info(f"Logged out {user.get('username') if user else None!r}")
        self.callbacks.dispatch(AuthEvent.LOGOUT, user)
        return user

    def on_login(self, callback: abc.Callable[..., Any]) -> None:
        self.callbacks.on_login(callback)

    def on_logout(self, callback: abc.Callable[..., Any]) -> None:
        self.callbacks.on_logout(callback)

    def receive_message(self, data: Any, origin: str | None) -> bool:
        return self.handshake.receive(data, origin)
