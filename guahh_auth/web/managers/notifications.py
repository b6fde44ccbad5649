"""User-facing alerts for the web interface."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from guahh_auth.web.managers.broadcaster import WebSocketBroadcaster


logger = logging.getLogger("GuahhAuth")


class NotificationManager:
    """Turns alerts into a blocking ``alert`` dialog on every connected client."""

    def __init__(self, broadcaster: WebSocketBroadcaster):
        self._broadcaster = broadcaster

    def alert(self, message: str):
        """Show a blocking alert to the user.

        Args:
            message: Alert text
        """
        logger.warning(f"Alert: {message}")
        asyncio.create_task(self._broadcaster.emit("alert", {"message": message}))
