"""Exception hierarchy for Guahh Auth."""

from __future__ import annotations


class GuahhAuthException(Exception):
    """
    Base exception class for this library.
    """


class PopupBlocked(GuahhAuthException):
    """
    The authentication popup could not be opened.
    """

    def __init__(self, url: str = "", reason: str = ""):
        message = "Popup blocked"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.url = url
        self.reason = reason


class MalformedSession(GuahhAuthException):
    """
    The persisted session record is not valid serialized data.
    """

    def __init__(self, raw: str):
        super().__init__("Stored session is not valid JSON")
        self.raw = raw


class UntrustedMessage(GuahhAuthException):
    """
    A handshake message came from an origin that isn't allowed to log users in.
    """

    def __init__(self, origin: str | None):
        super().__init__(f"Untrusted message origin: {origin!r}")
        self.origin = origin
