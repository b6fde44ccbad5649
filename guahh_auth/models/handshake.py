from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, cast

from guahh_auth.config import HANDSHAKE_TYPE


if TYPE_CHECKING:
    from guahh_auth.models.service import ServiceDescriptor
    from guahh_auth.models.user import UserRecord


@dataclass(frozen=True)
class HandshakeMessage:
    """A successful authentication result posted by the popup."""

    user: UserRecord
    service: ServiceDescriptor

    @staticmethod
    def is_tagged(data: Any) -> bool:
        """Whether the payload carries the success discriminant at all."""
        return isinstance(data, Mapping) and data.get("type") == HANDSHAKE_TYPE

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> HandshakeMessage:
        """
        Build the message from a tagged payload.

        Raises ValueError when the user part is not an object. A missing or
        malformed service part is replaced by an empty descriptor.
        """
        user = data.get("user")
        if not isinstance(user, Mapping):
            raise ValueError("handshake message carries no user record")
        service = data.get("service")
        if not isinstance(service, Mapping):
            service = {}
        return cls(
            user=cast("UserRecord", dict(user)),
            service=cast("ServiceDescriptor", dict(service)),
        )
