"""Login status shown in the web interface."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from guahh_auth.core import SessionManager
    from guahh_auth.models import ServiceDescriptor, UserRecord
    from guahh_auth.web.managers.broadcaster import WebSocketBroadcaster


class AuthStatusManager:
    """Mirrors login/logout events to the browser clients.

    Subscribes to the session manager like any other consumer and broadcasts
    a ``login_status`` event whenever the logged-in user changes.
    """

    def __init__(self, broadcaster: WebSocketBroadcaster):
        self._broadcaster = broadcaster
        self._status = "Logged out"
        self._user: UserRecord | None = None
        self._service: ServiceDescriptor | None = None

    def bind(self, manager: SessionManager):
        """Subscribe to the manager's events.

        Call this before the manager is initialized to also receive the
        cached session replay.
        """
        manager.on_login(self.on_login)
        manager.on_logout(self.on_logout)

    def on_login(self, user: UserRecord, service: ServiceDescriptor):
        name = user.get("displayName") or user.get("username") or user.get("userId")
        self.update(f"Logged in as {name}", user, service)

    def on_logout(self, user: UserRecord | None):
        self.update("Logged out", None, None)

    def update(self, status: str, user: UserRecord | None, service: ServiceDescriptor | None):
        """Update login status display.

        Args:
            status: Status message to display (e.g., "Logged in as Ada")
            user: The logged-in user record, None when logged out
            service: The service the login happened for, if any
        """
        self._status = status
        self._user = user
        self._service = service
        asyncio.create_task(self._broadcaster.emit("login_status", self.get_status()))

    def get_status(self) -> dict[str, Any]:
        """Get current login status for client synchronization."""
        return {
            "status": self._status,
            "logged_in": self._user is not None,
            "user": self._user,
            "service": self._service,
        }
