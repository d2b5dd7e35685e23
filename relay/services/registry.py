from typing import Any, Callable, Dict, List, Optional, Protocol


class RelayConnection(Protocol):
    """The slice of a WebSocket handler the relay services rely on."""

    def is_open(self) -> bool: ...

    def write_message(self, message: Any, binary: bool = False) -> Any: ...

    def ping(self, data: bytes = b"") -> None: ...

    def close(self, code: Optional[int] = None, reason: Optional[str] = None) -> None: ...


def describe(connection: RelayConnection) -> str:
    return getattr(connection, "remote_ip", None) or repr(connection)


class ConnectionRegistry:
    """
    Live relay connections and their liveness flags.

    Every operation runs on the IOLoop, which serializes mutations. Iteration
    always walks a snapshot, so connections may register or drop while a
    broadcast or heartbeat sweep is in progress.
    """

    def __init__(self):
        self._alive: Dict[RelayConnection, bool] = {}

    def register(self, connection: RelayConnection) -> bool:
        if connection in self._alive:
            return False
        self._alive[connection] = True
        return True

    def unregister(self, connection: RelayConnection) -> bool:
        return self._alive.pop(connection, None) is not None

    def snapshot(self) -> List[RelayConnection]:
        return list(self._alive)

    def for_each(self, visitor: Callable[[RelayConnection], None]) -> None:
        for connection in self.snapshot():
            visitor(connection)

    def mark_alive(self, connection: RelayConnection) -> None:
        if connection in self._alive:
            self._alive[connection] = True

    def is_alive(self, connection: RelayConnection) -> bool:
        return self._alive.get(connection, False)

    def begin_probe(self, connection: RelayConnection) -> bool:
        """Clear the liveness flag ahead of a ping and return its previous value."""
        previous = self._alive.get(connection, False)
        if connection in self._alive:
            self._alive[connection] = False
        return previous

    def __len__(self) -> int:
        return len(self._alive)

    def __contains__(self, connection: object) -> bool:
        return connection in self._alive
