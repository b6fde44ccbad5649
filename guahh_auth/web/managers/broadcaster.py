"""WebSocket broadcaster for real-time updates to web clients."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from socketio import AsyncServer


logger = logging.getLogger("GuahhAuth")


class WebSocketBroadcaster:
    """Sends events to the browser clients connected over Socket.IO.

    Until the Socket.IO server is attached, events are dropped; clients that
    connect later get the current state through ``initial_state`` instead.
    """

    def __init__(self):
        self._sio: AsyncServer | None = None  # Will be set by webapp

    def set_socketio(self, sio: AsyncServer):
        """Set the Socket.IO server instance for broadcasting."""
        self._sio = sio

    async def emit(self, event: str, data: Any, *, to: str | None = None):
        """Emit an event to every connected client, or a single one.

        Args:
            event: The event name to emit
            data: The data payload to send with the event
            to: Optional Socket.IO session ID to restrict delivery to
        """
        if self._sio is None:
            logger.debug(f"No Socket.IO server attached, dropping {event!r}")
            return
        await self._sio.emit(event, data, to=to)
