"""The session and handshake core."""

from guahh_auth.core.callbacks import CallbackRegistry
from guahh_auth.core.handshake import HandshakeListener
from guahh_auth.core.manager import SessionManager
from guahh_auth.core.popup import PopupController, PopupGeometry, PopupWindow, WindowOpener
from guahh_auth.core.session_store import SessionStore
from guahh_auth.core.storage import LocalStorage


__all__ = [
    "CallbackRegistry",
    "HandshakeListener",
    "LocalStorage",
    "PopupController",
    "PopupGeometry",
    "PopupWindow",
    "SessionManager",
    "SessionStore",
    "WindowOpener",
]
