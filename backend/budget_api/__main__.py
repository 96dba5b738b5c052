"""
Process entry point: initialize, serve until signalled, release.
"""

import asyncio
import contextlib
import logging
import signal
import sys
from typing import Optional

import uvicorn

from budget_api.config import Settings, get_settings
from budget_api.errors import ConfigurationError, ShutdownError
from budget_api.logging_config import setup_logging
from budget_api.main import create_app
from budget_api.services.initializer import initialize

logger = logging.getLogger("budget_api")


SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class Server(uvicorn.Server):
    """uvicorn server that leaves signal handling to serve_until_signalled()."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self):
        yield


async def serve_until_signalled(server: uvicorn.Server) -> None:
    """
    Serve until SIGINT or SIGTERM, then shut down gracefully: stop accepting
    connections, let in-flight requests finish, close the listener.

    Repeated signals are ignored, so a second Ctrl+C never cuts requests off.
    """
    loop = asyncio.get_running_loop()

    def request_exit(sig: signal.Signals) -> None:
        if server.should_exit:
            logger.info(f"{sig.name} received again, already shutting down")
            return
        logger.info(f"{sig.name} received. Shutting down gracefully...")
        server.should_exit = True

    for sig in SHUTDOWN_SIGNALS:
        loop.add_signal_handler(sig, request_exit, sig)
    try:
        await server.serve()
    finally:
        for sig in SHUTDOWN_SIGNALS:
            loop.remove_signal_handler(sig)


def serve(app, settings: Settings) -> None:
    """Run the HTTP server until a shutdown signal has been handled."""
    config = uvicorn.Config(
        app,
        host=settings.wrapper_host,
        port=settings.wrapper_port,
        log_config=None,
    )
    asyncio.run(serve_until_signalled(Server(config)))


def main(settings: Optional[Settings] = None) -> int:
    """Return the process exit status."""
    if settings is None:
        try:
            settings = get_settings()
        except ConfigurationError as e:
            setup_logging()
            logger.error(f"FATAL: {e.message}")
            return 1
    setup_logging(settings.log_level, settings.log_format)

    logger.info("--- Starting Actual Budget Read-Only API Wrapper ---")
    result = initialize(settings)
    if not result.ok:
        logger.error(f"--- Unrecoverable error during startup ({result.failed_at.value}) ---")
        return 1

    app = create_app(result.service, settings)
    logger.info(f"Serving on http://{settings.wrapper_host}:{settings.wrapper_port}")
    try:
        serve(app, settings)
    finally:
        logger.info("HTTP server closed")
        released = release(result.service)
    return 0 if released else 1


def release(service) -> bool:
    """Release the budget connection once. False if releasing failed."""
    try:
        service.release()
    except ShutdownError as e:
        logger.error(f"Error during shutdown: {e.message}")
        return False
    return True


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
