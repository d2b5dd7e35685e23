import logging
from functools import partial

from tornado.websocket import WebSocketClosedError

from relay.services.normalizer import Frame
from relay.services.registry import ConnectionRegistry, RelayConnection, describe

logger = logging.getLogger(__name__)


class Broadcaster:
    """Best-effort fan-out of one frame to every registered connection, sender included."""

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    def broadcast(self, frame: Frame) -> int:
        """
        Issue a write to every open connection and return how many were issued.

        Writes are not awaited, so a slow peer never holds up the others. A
        peer whose write fails is dropped from the registry.
        """
        sent = 0
        for connection in self.registry.snapshot():
            if not connection.is_open():
                continue
            try:
                result = connection.write_message(frame.payload, binary=frame.binary)
            except WebSocketClosedError:
                self._drop(connection, "socket already closed")
                continue
            except Exception as exc:
                logger.exception(f"Write to client {describe(connection)} raised")
                self._drop(connection, str(exc) or type(exc).__name__)
                self._close(connection)
                continue
            sent += 1
            if result is not None:
                result.add_done_callback(partial(self._on_write_done, connection))
        return sent

    def _on_write_done(self, connection: RelayConnection, future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            self._drop(connection, str(exc) or type(exc).__name__)

    def _drop(self, connection: RelayConnection, reason: str) -> None:
        if self.registry.unregister(connection):
            logger.warning(f"Dropping client {describe(connection)} after failed write: {reason}")

    def _close(self, connection: RelayConnection) -> None:
        # Unregistered peers would otherwise linger without heartbeats.
        try:
            connection.close(code=1011, reason="write failed")
        except Exception:
            logger.warning(f"Failed to close client {describe(connection)}", exc_info=True)
