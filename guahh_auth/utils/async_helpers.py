"""Async programming utilities and helpers."""

from __future__ import annotations

import asyncio
import logging
from collections import abc
from functools import wraps
from typing import Any, Generic, ParamSpec, TypeVar


_T = TypeVar("_T")  # type
_D = TypeVar("_D")  # default
_P = ParamSpec("_P")  # params

logger = logging.getLogger("GuahhAuth")


def task_wrapper(afunc: abc.Callable[_P, abc.Coroutine[Any, Any, _T]] | None = None):
    """
    Decorator for async tasks that handles exceptions gracefully.

    Cancellation is passed through untouched, other exceptions are logged
    and then re-raised into the wrapping task.
    """

    def decorator(
        afunc: abc.Callable[_P, abc.Coroutine[Any, Any, _T]],
    ) -> abc.Callable[_P, abc.Coroutine[Any, Any, _T]]:
        @wraps(afunc)
        async def wrapper(*args: _P.args, **kwargs: _P.kwargs):
            try:
                return await afunc(*args, **kwargs)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception(f"Exception in {afunc.__name__} task")
                raise  # raise up to the wrapping task

        return wrapper

    if afunc is None:
        return decorator
    return decorator(afunc)


class AwaitableValue(Generic[_T]):
    """
    A value that is set once and can be awaited by any number of consumers.

    Used as the "ready" signal: whoever needs the session manager awaits it
    instead of polling.
    """

    def __init__(self):
        self._value: _T
        self._event = asyncio.Event()

    def has_value(self) -> bool:
        """Check if the value has been set."""
        return self._event.is_set()

    def get_with_default(self, default: _D) -> _T | _D:
        """Get the value if set, otherwise return the default."""
        if self._event.is_set():
            return self._value
        return default

    async def get(self) -> _T:
        """Wait for and return the value."""
        await self._event.wait()
        return self._value

    def set(self, value: _T) -> None:
        """Set the value and notify all waiters."""
        self._value = value
        self._event.set()
