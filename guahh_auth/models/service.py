from __future__ import annotations

from typing import TypedDict

from guahh_auth.config import CACHED_SESSION_NAME


class ServiceDescriptor(TypedDict, total=False):
    """Describes the application asking the user to sign in."""

    name: str
    url: str
    serviceName: str


def cached_session_service() -> ServiceDescriptor:
    """Service passed to login callbacks when replaying a stored session."""
    return {"serviceName": CACHED_SESSION_NAME}
