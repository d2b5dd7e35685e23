import logging
from typing import Union

import tornado.websocket

from relay.services import Broadcaster, ConnectionRegistry, normalize_frame

PREVIEW_CHARS = 200

logger = logging.getLogger(__name__)


class RelayWebSocketHandler(tornado.websocket.WebSocketHandler):
    def initialize(self, registry: ConnectionRegistry, broadcaster: Broadcaster):
        self.registry = registry
        self.broadcaster = broadcaster
        self.remote_ip: str | None = None

    def check_origin(self, origin: str) -> bool:
        # Sensor boards and dashboards connect from anywhere on the LAN.
        return True

    def open(self):
        self.remote_ip = self.request.remote_ip
        self.registry.register(self)
        logger.info(f"Client connected: {self.remote_ip}")

    def on_message(self, message: Union[str, bytes]):
        binary = isinstance(message, bytes)
        if not binary:
            logger.debug(f"RX: {message[:PREVIEW_CHARS]}")
        self.broadcaster.broadcast(normalize_frame(message, binary=binary))

    def on_pong(self, data: bytes):
        self.registry.mark_alive(self)

    def on_close(self):
        self.registry.unregister(self)
        logger.info(f"Client disconnected: {self.remote_ip}")

    def is_open(self) -> bool:
        return self.ws_connection is not None and not self.ws_connection.is_closing()
