import argparse
import asyncio
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from guahh_auth.config.settings import Settings
from guahh_auth.core.openers import (
    AppWindow,
    AppWindowOpener,
    BrowserTab,
    WebbrowserOpener,
    create_opener,
    find_app_browser,
)
from guahh_auth.core.popup import PopupGeometry
from guahh_auth.exceptions import PopupBlocked


GEOMETRY = PopupGeometry.centered(1920, 1080)


def fake_process(pid=1234):
    process = MagicMock()
    process.pid = pid
    process.returncode = None

    async def wait():
        process.returncode = 0
        return 0

    process.wait = AsyncMock(side_effect=wait)
    return process


class TestAppWindowOpener(unittest.IsolatedAsyncioTestCase):
    async def test_launch_arguments(self):
        process = fake_process()
        opener = AppWindowOpener("/usr/bin/chromium", Path("/tmp/profiles"))
        with patch(
            "asyncio.create_subprocess_exec", AsyncMock(return_value=process)
        ) as create:
            window = await opener.open("https://id.guahh.test/p.html", "GuahhAuth", GEOMETRY)

        args = create.call_args.args
        self.assertEqual(args[0], "/usr/bin/chromium")
        self.assertIn("--app=https://id.guahh.test/p.html", args)
        self.assertIn("--window-size=500,650", args)
        self.assertIn("--window-position=710,215", args)
        self.assertIn(f"--user-data-dir={Path('/tmp/profiles', 'GuahhAuth')}", args)
        self.assertIsInstance(window, AppWindow)
        self.assertFalse(window.closed)

    async def test_same_name_replaces_window(self):
        first, second = fake_process(1), fake_process(2)
        opener = AppWindowOpener("chromium", Path("/tmp/profiles"))
        with patch(
            "asyncio.create_subprocess_exec", AsyncMock(side_effect=[first, second])
        ):
            old = await opener.open("https://a.test", "GuahhAuth", GEOMETRY)
            new = await opener.open("https://b.test", "GuahhAuth", GEOMETRY)

        first.terminate.assert_called_once()
        self.assertTrue(old.closed)
        self.assertFalse(new.closed)
        second.terminate.assert_not_called()

    async def test_stuck_window_is_killed(self):
        stuck, second = fake_process(1), fake_process(2)
        killed = asyncio.Event()

        async def wait():
            await killed.wait()
            stuck.returncode = -9
            return -9

        stuck.wait = AsyncMock(side_effect=wait)
        stuck.kill.side_effect = killed.set
        opener = AppWindowOpener("chromium", Path("/tmp/profiles"), close_timeout=0.01)
        with patch(
            "asyncio.create_subprocess_exec", AsyncMock(side_effect=[stuck, second])
        ):
            old = await opener.open("https://a.test", "GuahhAuth", GEOMETRY)
            with self.assertLogs("GuahhAuth", level="WARNING"):
                new = await asyncio.wait_for(
                    opener.open("https://b.test", "GuahhAuth", GEOMETRY), 1
                )

        stuck.terminate.assert_called_once()
        stuck.kill.assert_called_once()
        self.assertTrue(old.closed)
        self.assertFalse(new.closed)

    async def test_launch_failure_is_blocked(self):
        opener = AppWindowOpener("chromium", Path("/tmp/profiles"))
        with patch(
            "asyncio.create_subprocess_exec",
            AsyncMock(side_effect=FileNotFoundError("chromium")),
        ):
            with self.assertRaises(PopupBlocked):
                await opener.open("https://a.test", "GuahhAuth", GEOMETRY)

    async def test_window_lifecycle(self):
        process = fake_process()
        window = AppWindow(process, "https://a.test")
        window.focus()
        window.close()
        process.terminate.assert_called_once()
        await asyncio.wait_for(window.wait_closed(), 1)
        self.assertTrue(window.closed)
        # already gone, nothing to terminate
        window.close()
        process.terminate.assert_called_once()

    async def test_close_of_vanished_process(self):
        process = fake_process()
        process.terminate.side_effect = ProcessLookupError
        AppWindow(process, "https://a.test").close()


class TestWebbrowserOpener(unittest.IsolatedAsyncioTestCase):
    async def test_opens_new_window(self):
        with patch("webbrowser.open", return_value=True) as browser_open:
            tab = await WebbrowserOpener().open("https://a.test", "GuahhAuth", GEOMETRY)
        browser_open.assert_called_once_with("https://a.test", 1)
        self.assertIsInstance(tab, BrowserTab)
        self.assertFalse(tab.closed)
        tab.close()
        self.assertTrue(tab.closed)

    async def test_no_browser(self):
        with patch("webbrowser.open", return_value=False):
            tab = await WebbrowserOpener().open("https://a.test", "GuahhAuth", GEOMETRY)
        self.assertIsNone(tab)


class TestOpenerSelection(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.settings = Settings(argparse.Namespace(), path=Path(self.tmp.name, "s.json"))

    def tearDown(self):
        self.tmp.cleanup()

    def test_first_available_browser(self):
        available = {"chromium": "/usr/bin/chromium"}
        with patch("shutil.which", side_effect=available.get):
            self.assertEqual(find_app_browser(), "/usr/bin/chromium")

    def test_preferred_browser_only(self):
        with patch("shutil.which", return_value=None) as which:
            self.assertIsNone(find_app_browser("brave"))
        which.assert_called_once_with("brave")

    def test_app_window_opener_when_browser_found(self):
        with patch("shutil.which", return_value="/usr/bin/chromium"):
            self.assertIsInstance(create_opener(self.settings), AppWindowOpener)

    def test_system_browser_fallback(self):
        self.settings.browser = "nonexistent"
        with patch("shutil.which", return_value=None):
            with self.assertLogs("GuahhAuth", level="WARNING"):
                opener = create_opener(self.settings)
        self.assertIsInstance(opener, WebbrowserOpener)


if __name__ == "__main__":
    unittest.main()
