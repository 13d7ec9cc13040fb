'''
    Description:
        - Entry point for the ShareWith signaling server.
          Loads settings, configures logging, starts the listener and stops it
          cleanly on SIGINT / SIGTERM.
'''

# ==== Imports ====
from __future__ import annotations

import asyncio
import logging
import signal

from sharewith.config import Settings
from sharewith.transport import SignalingServer

log = logging.getLogger("sharewith.run_server")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")


# ==== Functions ====

async def main(settings: Settings | None = None) -> None:
    settings = settings or Settings()
    server = SignalingServer(settings)
    stop = asyncio.Event()

    def _on_signal(sig: signal.Signals) -> None:
        log.info("%s Received, exiting...", sig.name)
        stop.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _on_signal, sig)
        except NotImplementedError:
            pass  # not available on Windows event loops; Ctrl+C still raises KeyboardInterrupt

    await server.start()
    try:
        await stop.wait()
    finally:
        await server.stop()


def run() -> None:
    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        log.info("Server stopped")


if __name__ == "__main__":
    run()
