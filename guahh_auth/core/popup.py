"""Opening and tracking the authentication popup window."""

from __future__ import annotations

import asyncio
import logging
import math
from collections import abc
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from yarl import URL

from guahh_auth.config import (
    AUTH_PAGE_URL,
    DEFAULT_SERVICE_NAME,
    POPUP_BLOCKED_ALERT,
    POPUP_FEATURES,
    POPUP_HEIGHT,
    POPUP_NAME,
    POPUP_POLL_INTERVAL,
    POPUP_WIDTH,
)
from guahh_auth.exceptions import PopupBlocked
from guahh_auth.utils import task_wrapper


if TYPE_CHECKING:
    from guahh_auth.models import ServiceDescriptor


logger = logging.getLogger("GuahhAuth")


class PopupWindow(Protocol):
    """
    A live reference to an opened window.

    Implementations may additionally provide an async ``wait_closed()``,
    which is then preferred over polling ``closed``.
    """

    @property
    def closed(self) -> bool: ...

    def focus(self) -> None: ...

    def close(self) -> None: ...


class WindowOpener(Protocol):
    async def open(self, url: str, name: str, geometry: PopupGeometry) -> PopupWindow | None:
        """Open a window, returning None when it couldn't be opened."""
        ...


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class PopupGeometry:
    width: int
    height: int
    left: int
    top: int

    @classmethod
    def centered(
        cls,
        screen_width: int,
        screen_height: int,
        width: int = POPUP_WIDTH,
        height: int = POPUP_HEIGHT,
    ) -> PopupGeometry:
        return cls(
            width=width,
            height=height,
            left=_round_half_up(screen_width / 2 - width / 2),
            top=_round_half_up(screen_height / 2 - height / 2),
        )

    @property
    def features(self) -> str:
        return (
            f"width={self.width},height={self.height},left={self.left},top={self.top},"
            f"{POPUP_FEATURES}"
        )


class PopupController:
    """Opens the authentication popup and keeps track of the latest one."""

    def __init__(
        self,
        opener: WindowOpener,
        *,
        auth_page_url: str = AUTH_PAGE_URL,
        page_title: str = "",
        page_origin: str = "",
        screen_size: tuple[int, int] = (1920, 1080),
        alert: abc.Callable[[str], Any] | None = None,
        poll_interval: float = POPUP_POLL_INTERVAL.total_seconds(),
    ):
        self._opener = opener
        self._auth_page_url: str = auth_page_url
        self._page_title: str = page_title
        self._page_origin: str = page_origin
        self._screen_size: tuple[int, int] = screen_size
        self._alert = alert
        self._poll_interval: float = poll_interval
        self._popup: PopupWindow | None = None
        self._watch_task: asyncio.Task[None] | None = None

    @property
    def popup(self) -> PopupWindow | None:
        return self._popup

    @property
    def page_origin(self) -> str:
        return self._page_origin

    @property
    def auth_page_url(self) -> URL:
        """The auth page, resolved against the page origin when given relative."""
        url = URL(self._auth_page_url)
        if not url.is_absolute() and self._page_origin:
            url = URL(self._page_origin).join(url)
        return url

    @auth_page_url.setter
    def auth_page_url(self, value: str) -> None:
        self._auth_page_url = value

    def build_url(self, service_name: str, service_url: str) -> URL:
        return self.auth_page_url.update_query(service=service_name, url=service_url)

    async def show(self, service: ServiceDescriptor | None = None) -> PopupWindow | None:
        """
        Open the popup for the given service and start watching it.

        Returns the window, or None if it was blocked. Either way this returns
        as soon as the open request has been issued.
        """
        service = service or {}
        service_name = service.get("name") or self._page_title or DEFAULT_SERVICE_NAME
        service_url = service.get("url") or self._page_origin
        url = self.build_url(service_name, service_url)
        geometry = PopupGeometry.centered(*self._screen_size)

        logger.info(f"Opening authentication popup for {service_name!r}")
        logger.debug(f"Popup URL: {url}, features: {geometry.features}")
        popup: PopupWindow | None
        try:
            popup = await self._opener.open(str(url), POPUP_NAME, geometry)
        except PopupBlocked as exc:
            logger.error(f"Opening the popup failed: {exc}")
            popup = None

        if not popup:
            logger.error("Popup blocked. Please allow popups for this site.")
            if self._alert is not None:
                self._alert(POPUP_BLOCKED_ALERT)
            return None

        # only the most recent popup is tracked
        self._stop_watch()
        self._popup = popup
        popup.focus()
        self._watch_task = asyncio.create_task(self._watch(popup))
        return popup

    def close_if_open(self) -> bool:
        """Close the tracked popup. Returns whether there was one."""
        popup = self._popup
        if popup is None:
            return False
        self._stop_watch()
        self._popup = None
        if not popup.closed:
            popup.close()
        logger.debug("Authentication popup closed")
        return True

    def _stop_watch(self) -> None:
        if self._watch_task is not None and not self._watch_task.done():
            self._watch_task.cancel()
        self._watch_task = None

    @task_wrapper
    async def _watch(self, popup: PopupWindow) -> None:
        wait_closed = getattr(popup, "wait_closed", None)
        if wait_closed is not None:
            await wait_closed()
        else:
            while not popup.closed:
                await asyncio.sleep(self._poll_interval)
        if self._popup is popup:
            # closed by the user, without finishing the flow
            logger.info("Authentication popup was closed")
            self._popup = None
            self._watch_task = None
