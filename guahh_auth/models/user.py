from __future__ import annotations

from typing import Any, NotRequired, TypedDict


class UserRecord(TypedDict):
    """The identity the popup hands back. Stored and passed around verbatim."""

    userId: str
    username: str
    displayName: str
    profilePictureUrl: NotRequired[str]
    isVerified: NotRequired[bool]
    connectedServices: NotRequired[list[Any]]
