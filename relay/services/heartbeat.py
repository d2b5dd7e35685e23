import logging
from typing import List, Optional

from tornado.ioloop import PeriodicCallback
from tornado.websocket import WebSocketClosedError

from relay.services.registry import ConnectionRegistry, RelayConnection, describe

DEFAULT_HEARTBEAT_INTERVAL = 15.0

logger = logging.getLogger(__name__)


class HeartbeatMonitor:
    """
    Pings every registered connection on a fixed period and evicts the ones
    that did not answer the previous ping.

    A peer that goes silent is therefore dropped between one and two periods
    after its last pong.
    """

    def __init__(self, registry: ConnectionRegistry, interval: float = DEFAULT_HEARTBEAT_INTERVAL):
        if interval <= 0:
            raise ValueError("heartbeat interval must be positive")
        self.registry = registry
        self.interval = interval
        self._callback: Optional[PeriodicCallback] = None

    @property
    def is_running(self) -> bool:
        return self._callback is not None and self._callback.is_running()

    def start(self) -> None:
        if self.is_running:
            return
        self._callback = PeriodicCallback(self.tick, self.interval * 1000)
        self._callback.start()
        logger.info(f"Heartbeat monitor running every {self.interval:g}s")

    def stop(self) -> None:
        if self._callback is not None:
            self._callback.stop()
            self._callback = None

    def tick(self) -> List[RelayConnection]:
        evicted: List[RelayConnection] = []
        for connection in self.registry.snapshot():
            if not self.registry.begin_probe(connection):
                logger.warning(f"Terminating stale client {describe(connection)}")
                self._evict(connection)
                evicted.append(connection)
                continue
            try:
                connection.ping()
            except WebSocketClosedError:
                logger.warning(f"Dropping client {describe(connection)}: ping on closed socket")
                self.registry.unregister(connection)
                evicted.append(connection)
        return evicted

    def _evict(self, connection: RelayConnection) -> None:
        try:
            connection.close(code=1001, reason="heartbeat timeout")
        except Exception:
            logger.warning(f"Failed to close stale client {describe(connection)}", exc_info=True)
        self.registry.unregister(connection)
