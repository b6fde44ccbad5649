"""Data records exchanged with the authentication popup."""

from guahh_auth.models.handshake import HandshakeMessage
from guahh_auth.models.service import ServiceDescriptor, cached_session_service
from guahh_auth.models.user import UserRecord


__all__ = [
    "HandshakeMessage",
    "ServiceDescriptor",
    "UserRecord",
    "cached_session_service",
]
