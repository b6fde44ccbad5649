import argparse
import asyncio
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from guahh_auth.config import STORAGE_KEY
from guahh_auth.config.settings import Settings
from guahh_auth.core.manager import SessionManager
from guahh_auth.core.popup import PopupController
from guahh_auth.core.session_store import SessionStore
from guahh_auth.core.storage import LocalStorage


ADA = {"userId": "42", "username": "ada", "displayName": "Ada L."}
AUTH_PAGE = "https://id.guahh.test/guahh-auth-page.html"
AUTH_ORIGIN = "https://id.guahh.test"


class FakeWindow:
    def __init__(self):
        self.closed = False

    def focus(self):
        pass

    def close(self):
        self.closed = True


class FakeOpener:
    def __init__(self):
        self.windows = []

    async def open(self, url, name, geometry):
        window = FakeWindow()
        self.windows.append((url, window))
        return window


class SessionManagerTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.storage = LocalStorage(Path(self.tmp.name, "storage.json"))
        self.store = SessionStore(self.storage)
        self.opener = FakeOpener()
        self.popup = PopupController(
            self.opener,
            auth_page_url=AUTH_PAGE,
            page_origin="https://acme.test",
            poll_interval=0.01,
        )
        self.manager = SessionManager(self.store, self.popup)

    def tearDown(self):
        self.popup.close_if_open()
        self.tmp.cleanup()


class TestLoginFlow(SessionManagerTestCase):
    async def test_popup_login_example(self):
        on_login = MagicMock()
        self.manager.init()
        self.manager.on_login(on_login)

        await self.manager.show({"name": "Acme", "url": "https://acme.test"})
        window = self.opener.windows[0][1]
        accepted = self.manager.receive_message(
            {"type": "GUAHH_AUTH_SUCCESS", "user": ADA, "service": {"name": "Acme"}},
            AUTH_ORIGIN,
        )

        self.assertTrue(accepted)
        self.assertEqual(self.manager.get_user()["userId"], "42")
        on_login.assert_called_once_with(ADA, {"name": "Acme"})
        self.assertIsNone(self.popup.popup)
        self.assertTrue(window.closed)

    async def test_poll_after_handshake_does_nothing(self):
        self.manager.init()
        await self.manager.show()
        self.manager.receive_message(
            {"type": "GUAHH_AUTH_SUCCESS", "user": ADA, "service": {}}, AUTH_ORIGIN
        )

        await asyncio.sleep(0.05)

        self.assertIsNone(self.popup.popup)
        self.assertEqual(self.manager.get_user(), ADA)

    async def test_unrecognized_message_changes_nothing(self):
        on_login = MagicMock()
        self.manager.on_login(on_login)
        self.manager.init()
        await self.manager.show()

        self.assertFalse(self.manager.receive_message({"type": "OTHER"}, AUTH_ORIGIN))

        self.assertIsNone(self.manager.get_user())
        on_login.assert_not_called()
        self.assertIsNotNone(self.popup.popup)

    async def test_messages_before_init_are_ignored(self):
        accepted = self.manager.receive_message(
            {"type": "GUAHH_AUTH_SUCCESS", "user": ADA, "service": {}}, AUTH_ORIGIN
        )
        self.assertFalse(accepted)
        self.assertIsNone(self.manager.get_user())


class TestInit(SessionManagerTestCase):
    def test_auth_page_origin_is_trusted(self):
        self.manager.init()
        self.assertEqual(self.manager.handshake.trusted_origins, frozenset({AUTH_ORIGIN}))

    def test_init_overrides_auth_page_url(self):
        self.manager.init("https://login.other.test/page.html")
        self.assertEqual(str(self.popup.auth_page_url), "https://login.other.test/page.html")
        self.assertIn("https://login.other.test", self.manager.handshake.trusted_origins)

    def test_relative_auth_page_resolves_against_page_origin(self):
        self.manager.init("guahh-auth-page.html")
        self.assertEqual(
            self.manager.handshake.trusted_origins, frozenset({"https://acme.test"})
        )

    def test_cached_session_is_replayed_to_earlier_callbacks_only(self):
        self.store.set_user(ADA)
        before = MagicMock()
        after = MagicMock()

        self.manager.on_login(before)
        self.manager.init()
        self.manager.on_login(after)

        before.assert_called_once_with(ADA, {"serviceName": "Cached Session"})
        after.assert_not_called()

    def test_no_replay_without_session(self):
        on_login = MagicMock()
        self.manager.on_login(on_login)
        self.manager.init()
        on_login.assert_not_called()

    def test_second_init_is_ignored(self):
        self.store.set_user(ADA)
        on_login = MagicMock()
        self.manager.on_login(on_login)
        self.manager.init()

        with self.assertLogs("GuahhAuth", level="WARNING"):
            self.manager.init()

        on_login.assert_called_once()
        self.assertTrue(self.manager.initialized)

    def test_malformed_session_is_discarded(self):
        self.storage.set_item(STORAGE_KEY, "{oops")
        on_login = MagicMock()
        self.manager.on_login(on_login)

        with self.assertLogs("GuahhAuth", level="WARNING"):
            self.manager.init()

        on_login.assert_not_called()
        self.assertIsNone(self.storage.get_item(STORAGE_KEY))

    def test_truncated_storage_file_reads_as_no_session(self):
        self.storage.path.write_text("{truncated", encoding="utf8")
        on_login = MagicMock()
        self.manager.on_login(on_login)

        with self.assertLogs("GuahhAuth", level="WARNING"):
            self.manager.init()

        on_login.assert_not_called()
        self.assertIsNone(self.manager.get_user())

    def test_storage_file_without_object_reads_as_no_session(self):
        self.storage.path.write_text("[]", encoding="utf8")
        on_logout = MagicMock()
        self.manager.on_logout(on_logout)

        self.manager.init()
        self.manager.logout()

        on_logout.assert_called_once_with(None)


class TestLogout(SessionManagerTestCase):
    def test_logout_clears_and_notifies_with_previous_user(self):
        self.store.set_user(ADA)
        on_logout = MagicMock()
        self.manager.on_logout(on_logout)

        self.assertEqual(self.manager.logout(), ADA)

        self.assertIsNone(self.manager.get_user())
        self.assertFalse(self.manager.is_logged_in())
        on_logout.assert_called_once_with(ADA)

    def test_logout_without_session(self):
        on_logout = MagicMock()
        self.manager.on_logout(on_logout)
        self.manager.logout()
        on_logout.assert_called_once_with(None)

    def test_logout_with_malformed_session(self):
        self.storage.set_item(STORAGE_KEY, "{oops")
        on_logout = MagicMock()
        self.manager.on_logout(on_logout)

        with self.assertLogs("GuahhAuth", level="WARNING"):
            self.manager.logout()

        on_logout.assert_called_once_with(None)
        self.assertIsNone(self.storage.get_item(STORAGE_KEY))

    def test_logout_callbacks_run_in_order(self):
        calls = []
        self.manager.on_logout(lambda user: calls.append("first"))
        self.manager.on_logout(lambda user: calls.append("second"))
        self.manager.logout()
        self.assertEqual(calls, ["first", "second"])


class TestFromSettings(unittest.TestCase):
    def test_builds_manager_from_settings_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            settings = Settings(argparse.Namespace(), path=Path(tmp, "settings.json"))
            settings.auth_page_url = AUTH_PAGE
            settings.trusted_origins = ["https://extra.test"]
            opener = FakeOpener()
            alert = MagicMock()

            with patch("guahh_auth.core.manager.STORAGE_PATH", Path(tmp, "storage.json")):
                manager = SessionManager.from_settings(settings, opener=opener, alert=alert)
            manager.init()

            self.assertEqual(str(manager.popup.auth_page_url), AUTH_PAGE)
            self.assertEqual(
                manager.handshake.trusted_origins,
                frozenset({AUTH_ORIGIN, "https://extra.test"}),
            )
            manager.store.set_user(ADA)
            self.assertTrue(Path(tmp, "storage.json").exists())


if __name__ == "__main__":
    unittest.main()
