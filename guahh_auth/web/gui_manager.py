"""Main web GUI manager coordinating all UI components."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from guahh_auth.web.managers.auth_status import AuthStatusManager
from guahh_auth.web.managers.broadcaster import WebSocketBroadcaster
from guahh_auth.web.managers.elements import ElementRegistry
from guahh_auth.web.managers.notifications import NotificationManager


if TYPE_CHECKING:
    from socketio import AsyncServer

    from guahh_auth.core import SessionManager


logger = logging.getLogger("GuahhAuth")


class WebGUIManager:
    """Web-based GUI manager coordinating all UI components.

    Owns the Socket.IO broadcaster and the component managers that push
    login state, alerts and element updates to the browser clients.
    """

    def __init__(self):
        self._broadcaster = WebSocketBroadcaster()

        # Create component managers
        self.status = AuthStatusManager(self._broadcaster)
        self.notifications = NotificationManager(self._broadcaster)
        self.elements = ElementRegistry(self._broadcaster)

        logger.info("Web GUI Manager initialized")

    def set_socketio(self, sio: AsyncServer):
        """Set the Socket.IO instance for real-time communication.

        Called by webapp during initialization to connect the broadcaster
        to the Socket.IO server.

        Args:
            sio: The Socket.IO AsyncServer instance
        """
        self._broadcaster.set_socketio(sio)

    def bind(self, manager: SessionManager):
        """Subscribe the status display to the session manager's events."""
        self.status.bind(manager)

    def alert(self, message: str):
        """Show a blocking alert on every connected client."""
        self.notifications.alert(message)

    def get_initial_state(self) -> dict:
        return {
            "login": self.status.get_status(),
            "elements": self.elements.snapshot(),
        }
