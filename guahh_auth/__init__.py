"""Guahh Auth: popup-based sign-in with Guahh Account."""

from guahh_auth.version import __version__


__all__ = ["__version__"]
