"""Simple API: an easy-to-use wrapper around the session manager.

Usage::

    api = GuahhAuthAPI(gui.elements)
    api.on_ready(lambda: print(api.get_current_user()))
    api.attach(manager)
"""

from __future__ import annotations

import logging
from collections import abc
from typing import TYPE_CHECKING, Any

from guahh_auth.config import DEFAULT_AVATAR_URL
from guahh_auth.exceptions import MalformedSession
from guahh_auth.utils import AwaitableValue


if TYPE_CHECKING:
    from guahh_auth.core import SessionManager
    from guahh_auth.models import ServiceDescriptor, UserRecord
    from guahh_auth.web.managers.elements import ElementRegistry


logger = logging.getLogger("GuahhAuth")


class GuahhAuthAPI:
    """Convenience layer over the six session manager operations.

    Everything here goes through `init`, `show`, `get_user`, `logout`,
    `on_login` and `on_logout`; nothing touches the session directly.
    """

    def __init__(self, elements: ElementRegistry):
        self._elements = elements
        self._ready: AwaitableValue[SessionManager] = AwaitableValue()
        self._ready_callbacks: list[abc.Callable[[], Any]] = []

    @property
    def manager(self) -> SessionManager:
        manager = self._ready.get_with_default(None)
        if manager is None:
            raise RuntimeError("Guahh Auth is not ready yet")
        return manager

    def attach(self, manager: SessionManager, auth_page_url: str | None = None):
        """Initialize the manager and release everyone waiting for it."""
        manager.init(auth_page_url)
        self._ready.set(manager)
        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for callback in callbacks:
            callback()

    def is_ready(self) -> bool:
        return self._ready.has_value()

    def on_ready(self, callback: abc.Callable[[], Any]):
        """Run the callback once the manager is initialized, right away if it already is."""
        if self._ready.has_value():
            callback()
        else:
            self._ready_callbacks.append(callback)

    async def wait_ready(self) -> SessionManager:
        return await self._ready.get()

    async def show_login(
        self,
        service_name: str | None = None,
        service_url: str | None = None,
        on_success: abc.Callable[[UserRecord, ServiceDescriptor], Any] | None = None,
    ) -> bool:
        """Show the login popup. Returns False if it was blocked.

        NOTE: `on_success` is registered as a regular login callback, so it
        stays registered and fires on every later login as well.
        """
        if on_success is not None:
            self.manager.on_login(on_success)
        service: ServiceDescriptor = {}
        if service_name:
            service["name"] = service_name
        if service_url:
            service["url"] = service_url
        return await self.manager.show(service) is not None

    def get_current_user(self) -> UserRecord | None:
        return self.manager.get_user()

    def is_logged_in(self) -> bool:
        return self.manager.is_logged_in()

    def logout(self, callback: abc.Callable[[UserRecord | None], Any] | None = None):
        """Log out, registering `callback` as a logout callback first."""
        if callback is not None:
            self.manager.on_logout(callback)
        self.manager.logout()

    def on_login(self, handler: abc.Callable[[UserRecord, ServiceDescriptor], Any]):
        self.manager.on_login(handler)

    def on_logout(self, handler: abc.Callable[[UserRecord | None], Any]):
        self.manager.on_logout(handler)

    def update_element(self, element_id: str, property: str = "displayName"):
        """Show a property of the current user in an element.

        Args:
            element_id: ID of element to update
            property: User property to display (displayName, username, profilePictureUrl)
        """
        element = self._elements.get(element_id)
        if element is None:
            logger.error(f'Element with ID "{element_id}" not found')
            return
        try:
            user = self.get_current_user()
        except MalformedSession:
            logger.warning("Stored session is malformed, clearing the element")
            user = None
        if not user:
            element.text = ""
        elif property == "profilePictureUrl":
            picture = user.get("profilePictureUrl") or DEFAULT_AVATAR_URL.format(
                username=user.get("username", "")
            )
            if element.tag == "IMG":
                element.src = picture
            else:
                element.background_image = f"url({picture})"
        else:
            element.text = str(user.get(property) or "")
        self._elements.update(element)

    def bind_login_button(self, button_id: str, **options: Any):
        """Show the login popup whenever the button is clicked.

        Args:
            button_id: ID of button element
            options: Passed on to `show_login`
        """
        if not self._elements.add_click_handler(button_id, lambda: self.show_login(**options)):
            logger.error(f'Button with ID "{button_id}" not found')

    def bind_logout_button(self, button_id: str):
        if not self._elements.add_click_handler(button_id, self.logout):
            logger.error(f'Button with ID "{button_id}" not found')

    def toggle_on_auth(self, element_id: str, show_when_logged_in: bool = True):
        """Show or hide an element depending on the login state, now and on every change.

        Args:
            element_id: ID of element
            show_when_logged_in: If True, show when logged in; if False, hide when logged in
        """
        element = self._elements.get(element_id)
        if element is None:
            logger.error(f'Element with ID "{element_id}" not found')
            return

        def update_visibility(*_: Any):
            element.display = "" if self.is_logged_in() == show_when_logged_in else "none"
            self._elements.update(element)

        update_visibility()
        self.on_login(update_visibility)
        self.on_logout(update_visibility)
