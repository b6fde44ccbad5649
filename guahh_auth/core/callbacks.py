"""Ordered login/logout subscriber lists."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import abc
from typing import Any

from guahh_auth.config import AuthEvent


logger = logging.getLogger("GuahhAuth")


class CallbackRegistry:
    """
    Keeps subscribers for each auth event in registration order.

    Subscribers are never removed. Registering the same callable twice means
    it is called twice.
    """

    def __init__(self):
        self._callbacks: dict[AuthEvent, list[abc.Callable[..., Any]]] = {
            event: [] for event in AuthEvent
        }
        self._pending: set[asyncio.Task[Any]] = set()

    def add(self, event: AuthEvent, callback: abc.Callable[..., Any]) -> None:
        if not callable(callback):
            logger.warning(f"Ignoring non-callable {event.value} callback: {callback!r}")
            return
        self._callbacks[event].append(callback)

    def on_login(self, callback: abc.Callable[..., Any]) -> None:
        self.add(AuthEvent.LOGIN, callback)

    def on_logout(self, callback: abc.Callable[..., Any]) -> None:
        self.add(AuthEvent.LOGOUT, callback)

    def count(self, event: AuthEvent) -> int:
        return len(self._callbacks[event])

    def dispatch(self, event: AuthEvent, *args: Any) -> None:
        """
        Call every subscriber of the event, in registration order.

        A coroutine returned by a subscriber is scheduled on the running loop.
        A subscriber raising is logged and does not stop the ones after it.
        """
        # copy, so callbacks registering callbacks don't extend this dispatch
        for callback in list(self._callbacks[event]):
            try:
                result = callback(*args)
            except Exception:
                logger.exception(f"Exception in {event.value} callback {callback!r}")
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._pending.add(task)
                task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Exception in async auth callback", exc_info=task.exception())
