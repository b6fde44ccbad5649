"""Window openers: how the popup actually reaches the user's screen."""

from __future__ import annotations

import asyncio
import logging
import shutil
import webbrowser
from contextlib import suppress
from pathlib import Path
from typing import TYPE_CHECKING

from guahh_auth.config import APP_BROWSERS, DATA_DIR, POPUP_CLOSE_TIMEOUT
from guahh_auth.exceptions import PopupBlocked


if TYPE_CHECKING:
    from guahh_auth.config.settings import Settings
    from guahh_auth.core.popup import PopupGeometry, WindowOpener


logger = logging.getLogger("GuahhAuth")


class AppWindow:
    """A browser process running a single app-mode window."""

    def __init__(self, process: asyncio.subprocess.Process, url: str):
        self._process = process
        self.url = url

    def __repr__(self) -> str:
        return f"AppWindow(pid={self._process.pid}, url={self.url!r})"

    @property
    def closed(self) -> bool:
        return self._process.returncode is not None

    def focus(self) -> None:
        # app windows are raised by the window manager when they're created
        pass

    def close(self) -> None:
        if not self.closed:
            with suppress(ProcessLookupError):
                self._process.terminate()

    def kill(self) -> None:
        if not self.closed:
            with suppress(ProcessLookupError):
                self._process.kill()

    async def wait_closed(self) -> None:
        await self._process.wait()


class AppWindowOpener:
    """
    Opens the popup as a Chromium-family app window.

    Each window name gets its own profile directory, so the browser runs a
    separate instance whose lifetime is that of the window. Opening a name
    that is already open replaces the old window.
    """

    def __init__(
        self,
        browser: str,
        profile_dir: Path,
        *,
        close_timeout: float = POPUP_CLOSE_TIMEOUT.total_seconds(),
    ):
        self._browser: str = browser
        self._profile_dir: Path = profile_dir
        self._close_timeout: float = close_timeout
        self._windows: dict[str, AppWindow] = {}

    async def open(self, url: str, name: str, geometry: PopupGeometry) -> AppWindow:
        existing = self._windows.pop(name, None)
        if existing is not None and not existing.closed:
            await self._close(existing)
        try:
            process = await asyncio.create_subprocess_exec(
                self._browser,
                f"--app={url}",
                f"--window-size={geometry.width},{geometry.height}",
                f"--window-position={geometry.left},{geometry.top}",
                f"--user-data-dir={self._profile_dir / name}",
                "--no-first-run",
                "--no-default-browser-check",
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            raise PopupBlocked(url, str(exc)) from exc
        window = AppWindow(process, url)
        self._windows[name] = window
        logger.debug(f"Launched {self._browser} for popup {name!r}: {window!r}")
        return window

    async def _close(self, window: AppWindow) -> None:
        window.close()
        try:
            await asyncio.wait_for(window.wait_closed(), self._close_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{window!r} did not exit in time, killing it")
            window.kill()
            await window.wait_closed()


class BrowserTab:
    """
    A page handed over to the system browser.

    The browser doesn't report back, so the tab only counts as closed once
    we've been asked to close it.
    """

    def __init__(self, url: str):
        self.url = url
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def focus(self) -> None:
        pass

    def close(self) -> None:
        self._closed = True


class WebbrowserOpener:
    """Falls back to whatever the ``webbrowser`` module can launch."""

    async def open(self, url: str, name: str, geometry: PopupGeometry) -> BrowserTab | None:
        loop = asyncio.get_running_loop()
        # new=1 asks for a new window
        opened = await loop.run_in_executor(None, webbrowser.open, url, 1)
        if not opened:
            return None
        return BrowserTab(url)


def find_app_browser(preferred: str = "") -> str | None:
    candidates = (preferred,) if preferred else APP_BROWSERS
    for candidate in candidates:
        path = shutil.which(candidate)
        if path is not None:
            return path
    return None


def create_opener(settings: Settings) -> WindowOpener:
    browser = find_app_browser(settings.browser)
    if browser is not None:
        logger.info(f"Popups will open as app windows of {browser}")
        return AppWindowOpener(browser, Path(DATA_DIR, "popup-profiles"))
    if settings.browser:
        logger.warning(f"Browser {settings.browser!r} not found, using the system browser")
    logger.info("Popups will open in the system browser")
    return WebbrowserOpener()
