import asyncio

import pytest
from tornado.websocket import WebSocketClosedError

from relay.services import Broadcaster, ConnectionRegistry, Frame


class FakeConnection:
    def __init__(self, name, is_open=True, fail_write=False):
        self.remote_ip = name
        self.open = is_open
        self.fail_write = fail_write
        self.sent = []
        self.pending = None

    def is_open(self):
        return self.open

    def write_message(self, message, binary=False):
        if self.fail_write:
            raise WebSocketClosedError()
        self.sent.append((message, binary))
        return self.pending

    def ping(self, data=b""):
        pass

    def close(self, code=None, reason=None):
        self.open = False


def test_register_is_idempotent_per_handle():
    registry = ConnectionRegistry()
    conn = FakeConnection("a")

    assert registry.register(conn) is True
    assert registry.register(conn) is False
    assert len(registry) == 1
    assert registry.is_alive(conn)


def test_unregister_unknown_connection_is_ignored():
    registry = ConnectionRegistry()
    conn = FakeConnection("a")
    registry.register(conn)

    assert registry.unregister(conn) is True
    assert registry.unregister(conn) is False
    assert conn not in registry


def test_for_each_tolerates_mutation_during_iteration():
    registry = ConnectionRegistry()
    conns = [FakeConnection(str(n)) for n in range(5)]
    for conn in conns:
        registry.register(conn)
    visited = []

    def visitor(conn):
        visited.append(conn)
        registry.unregister(conn)
        registry.register(FakeConnection(f"late-{conn.remote_ip}"))

    registry.for_each(visitor)

    assert visited == conns
    assert len(registry) == 5
    assert not any(conn in registry for conn in conns)


def test_liveness_flag_round_trip():
    registry = ConnectionRegistry()
    conn = FakeConnection("a")
    registry.register(conn)

    assert registry.begin_probe(conn) is True
    assert registry.is_alive(conn) is False
    assert registry.begin_probe(conn) is False
    registry.mark_alive(conn)
    assert registry.is_alive(conn) is True


def test_mark_alive_does_not_resurrect_evicted_connection():
    registry = ConnectionRegistry()
    conn = FakeConnection("a")
    registry.register(conn)
    registry.unregister(conn)

    registry.mark_alive(conn)

    assert conn not in registry


@pytest.mark.parametrize("count", [1, 2, 25])
def test_broadcast_reaches_every_connection(count):
    registry = ConnectionRegistry()
    conns = [FakeConnection(str(n)) for n in range(count)]
    for conn in conns:
        registry.register(conn)

    sent = Broadcaster(registry).broadcast(Frame("hello"))

    assert sent == count
    assert all(conn.sent == [("hello", False)] for conn in conns)


def test_broadcast_preserves_binary_flag():
    registry = ConnectionRegistry()
    conn = FakeConnection("a")
    registry.register(conn)

    Broadcaster(registry).broadcast(Frame(b"\x01\x02", True))

    assert conn.sent == [(b"\x01\x02", True)]


def test_broadcast_skips_closed_and_drops_failing_connections():
    registry = ConnectionRegistry()
    healthy = FakeConnection("healthy")
    closing = FakeConnection("closing", is_open=False)
    broken = FakeConnection("broken", fail_write=True)
    for conn in (broken, closing, healthy):
        registry.register(conn)

    sent = Broadcaster(registry).broadcast(Frame("x"))

    assert sent == 1
    assert healthy.sent == [("x", False)]
    assert closing.sent == []
    assert closing in registry
    assert broken not in registry


@pytest.mark.asyncio
async def test_async_write_failure_evicts_only_that_connection():
    loop = asyncio.get_running_loop()
    registry = ConnectionRegistry()
    slow = FakeConnection("slow")
    fine = FakeConnection("fine")
    slow.pending = loop.create_future()
    fine.pending = loop.create_future()
    registry.register(slow)
    registry.register(fine)

    assert Broadcaster(registry).broadcast(Frame("x")) == 2
    slow.pending.set_exception(WebSocketClosedError())
    fine.pending.set_result(None)
    await asyncio.sleep(0)

    assert slow not in registry
    assert fine in registry


class ExplodingConnection(FakeConnection):
    def __init__(self, name):
        super().__init__(name)
        self.close_args = None

    def write_message(self, message, binary=False):
        raise UnicodeEncodeError("utf-8", "\ud800", 0, 1, "surrogates not allowed")

    def close(self, code=None, reason=None):
        self.close_args = (code, reason)
        self.open = False


def test_unexpected_write_error_is_isolated_to_one_connection():
    registry = ConnectionRegistry()
    before = FakeConnection("before")
    exploding = ExplodingConnection("exploding")
    after = FakeConnection("after")
    for conn in (before, exploding, after):
        registry.register(conn)

    sent = Broadcaster(registry).broadcast(Frame("x"))

    assert sent == 2
    assert before.sent == [("x", False)]
    assert after.sent == [("x", False)]
    assert exploding not in registry
    assert exploding.close_args == (1011, "write failed")
