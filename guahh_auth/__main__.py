from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
import traceback
from logging.handlers import TimedRotatingFileHandler


if __name__ == "__main__":

    from guahh_auth.config import FILE_FORMATTER, LOGGING_LEVELS, LOGS_DIR, OUTPUT_FORMATTER
    from guahh_auth.config.settings import Settings
    from guahh_auth.version import __version__

    logger = logging.getLogger("GuahhAuth")
    logger.setLevel(logging.INFO)
    # Always add console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(OUTPUT_FORMATTER)
    logger.addHandler(console_handler)

    class ParsedArgs(argparse.Namespace):
        _verbose: int
        _debug_handshake: bool
        auth_page_url: str | None
        host: str | None
        port: int | None
        browser: str | None

        @property
        def logging_level(self) -> int:
            return LOGGING_LEVELS[min(self._verbose + 2, 4)]

        @property
        def debug_handshake(self) -> int:
            """
            If the debug flag is True, return DEBUG.
            If the main logging level is DEBUG, return INFO to avoid seeing raw messages.
            Otherwise, return NOTSET to inherit the global logging level.
            """
            if self._debug_handshake:
                return logging.DEBUG
            elif self._verbose >= 2:
                return logging.INFO
            return logging.NOTSET

    # handle input parameters
    parser = argparse.ArgumentParser(
        description="Host page for signing in with Guahh Account through a popup window.",
    )
    parser.add_argument("--version", action="version", version=f"v{__version__}")
    parser.add_argument("-v", dest="_verbose", action="count", default=0)
    parser.add_argument("--auth-page-url", dest="auth_page_url", default=None)
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--browser", default=None, help="Browser executable for the popup")
    # undocumented debug args
    parser.add_argument(
        "--debug-handshake", dest="_debug_handshake", action="store_true", help=argparse.SUPPRESS
    )
    args = parser.parse_args(namespace=ParsedArgs())
    # load settings
    logger.debug("Loading settings")
    try:
        settings = Settings(args)
    except Exception:
        logger.exception("Error while loading settings")
        print(f"Settings error: {traceback.format_exc()}", file=sys.stderr)
        sys.exit(4)

    async def main():
        LOGS_DIR.mkdir(exist_ok=True)
        log_file = LOGS_DIR / "guahh-auth.log"
        file_handler = TimedRotatingFileHandler(log_file, when="midnight", backupCount=5)
        file_handler.setFormatter(FILE_FORMATTER)
        logger.addHandler(file_handler)
        logger.setLevel(settings.logging_level)
        logging.getLogger("GuahhAuth.handshake").setLevel(settings.debug_handshake)

        logger.info("=== Guahh Auth Starting ===")
        logger.info(f"Version: {__version__}")
        logger.info(f"Logging to file: {log_file}")

        from guahh_auth.core import SessionManager
        from guahh_auth.web import app as webapp
        from guahh_auth.web.gui_manager import WebGUIManager
        from guahh_auth.web.simple_api import GuahhAuthAPI

        gui = WebGUIManager()
        manager = SessionManager.from_settings(settings, alert=gui.alert)
        api = GuahhAuthAPI(gui.elements)
        webapp.set_managers(gui, manager, api)
        # subscribe before init, so a cached session shows up as logged in
        gui.bind(manager)
        api.attach(manager, settings.auth_page_url)

        closing = asyncio.Event()
        loop = asyncio.get_running_loop()
        if sys.platform == "linux":
            loop.add_signal_handler(signal.SIGINT, closing.set)
            loop.add_signal_handler(signal.SIGTERM, closing.set)

        logger.info(f"Starting web server on http://{settings.host}:{settings.port}")
        web_server_task = asyncio.create_task(
            webapp.run_server(host=settings.host, port=settings.port)
        )
        exit_status = 0
        try:
            closing_task = asyncio.create_task(closing.wait())
            done, _ = await asyncio.wait(
                (web_server_task, closing_task), return_when=asyncio.FIRST_COMPLETED
            )
            closing_task.cancel()
            if web_server_task in done and web_server_task.exception() is not None:
                raise web_server_task.exception()
        except Exception:
            logger.exception("Fatal error encountered")
            exit_status = 1
        finally:
            logger.info("=== Starting shutdown sequence ===")
            if sys.platform == "linux":
                loop.remove_signal_handler(signal.SIGINT)
                loop.remove_signal_handler(signal.SIGTERM)
            manager.popup.close_if_open()
            if not web_server_task.done():
                await webapp.shutdown_server()
                try:
                    await asyncio.wait_for(web_server_task, timeout=5.0)
                except asyncio.TimeoutError:
                    logger.warning("Web server didn't exit in time, forcing cancellation")
                    web_server_task.cancel()
            settings.save()
        logger.info(f"=== Exiting with status code: {exit_status} ===")
        sys.exit(exit_status)

    asyncio.run(main())
