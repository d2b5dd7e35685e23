import asyncio
import logging
import os

import tornado.web

from relay.handlers import CalibrateHandler, DocsHandler, HealthHandler, PidHandler, RelayWebSocketHandler
from relay.services import (
    DEFAULT_HEARTBEAT_INTERVAL,
    Broadcaster,
    ConnectionRegistry,
    HeartbeatMonitor,
    RelayControllerSink,
)


def make_app(heartbeat_interval: float | None = None) -> tornado.web.Application:
    if heartbeat_interval is None:
        heartbeat_interval = float(os.environ.get("HEARTBEAT_INTERVAL", DEFAULT_HEARTBEAT_INTERVAL))
    registry = ConnectionRegistry()
    broadcaster = Broadcaster(registry)
    controller_sink = RelayControllerSink(broadcaster)
    heartbeat_monitor = HeartbeatMonitor(registry, interval=heartbeat_interval)
    relay_args = dict(registry=registry, broadcaster=broadcaster)

    return tornado.web.Application(
        [
            (r"/", RelayWebSocketHandler, relay_args),
            (r"/ws", RelayWebSocketHandler, relay_args),
            (r"/health", HealthHandler, dict(registry=registry)),
            (r"/docs", DocsHandler),
            (r"/api/calibrate", CalibrateHandler, dict(controller_sink=controller_sink)),
            (r"/api/pid", PidHandler, dict(controller_sink=controller_sink)),
        ],
        registry=registry,
        broadcaster=broadcaster,
        heartbeat_monitor=heartbeat_monitor,
    )


def setup_logger(name, level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(level)
    return logger


async def serve(address: str, port: int) -> None:
    logger = logging.getLogger("relay")
    app = make_app()
    logger.info("Waiting for application startup...")
    app.listen(port=port, address=address)
    monitor = app.settings["heartbeat_monitor"]
    monitor.start()
    logger.info("Application startup complete.")
    logger.info(f"Relay listening on ws://{address}:{port} (Press Ctrl+C to quit)")
    try:
        await asyncio.Event().wait()
    finally:
        monitor.stop()


def main() -> None:
    logger = setup_logger("relay", os.environ.get("LOG_LEVEL", "INFO").upper())
    logger.info(f"Started server process {os.getpid()}")
    port = int(os.environ.get("PORT", "8080"))
    address = os.environ.get("ADDRESS", "0.0.0.0")
    try:
        asyncio.run(serve(address, port))
    except KeyboardInterrupt:
        logger.info("Shutting down")


if __name__ == "__main__":
    main()
