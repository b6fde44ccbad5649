"""Web GUI manager modules for the Guahh Auth web interface.

This package contains all component managers for the web-based GUI:
- WebSocketBroadcaster: Real-time message broadcasting to clients
- AuthStatusManager: Login status mirrored from the session manager
- NotificationManager: Blocking alerts such as the popup-blocked notice
- ElementRegistry: Page elements bound to the login state
"""

from guahh_auth.web.managers.auth_status import AuthStatusManager
from guahh_auth.web.managers.broadcaster import WebSocketBroadcaster
from guahh_auth.web.managers.elements import Element, ElementRegistry
from guahh_auth.web.managers.notifications import NotificationManager


__all__ = [
    "WebSocketBroadcaster",
    "AuthStatusManager",
    "NotificationManager",
    "Element",
    "ElementRegistry",
]
