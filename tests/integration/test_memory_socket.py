from __future__ import annotations

import asyncio

import pytest

from flow_tester.domain.packet import Packet
from flow_tester.integration.memory_socket import InMemorySocket
from flow_tester.ports.contracts import PortListener


class _EventLog(PortListener):
    def __init__(self) -> None:
        self.events: list[tuple[object, ...]] = []

    def on_packet(self, packet: Packet) -> None:
        self.events.append(("packet", packet.kind.value))

    def on_connect(self) -> None:
        self.events.append(("connect",))

    def on_data(self, value: object) -> None:
        self.events.append(("data", value))

    def on_begin_group(self, group: object) -> None:
        self.events.append(("begin", group))

    def on_end_group(self, group: object) -> None:
        self.events.append(("end", group))

    def on_disconnect(self) -> None:
        self.events.append(("disconnect",))


async def _drain() -> None:
    for _ in range(3):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_post_is_delivered_asynchronously_in_order() -> None:
    socket = InMemorySocket("out", emit_legacy=False)
    log = _EventLog()
    socket.subscribe(log)
    socket.send(1)
    socket.post(Packet.open_bracket("g"))
    assert log.events == []
    await _drain()
    assert log.events == [("packet", "data"), ("packet", "openBracket")]
    assert socket.posted_count() == 2
    assert socket.delivered_count() == 2


@pytest.mark.asyncio
async def test_lone_data_translates_to_connect_data_disconnect() -> None:
    socket = InMemorySocket("out", emit_packets=False)
    log = _EventLog()
    socket.subscribe(log)
    socket.send("v")
    await _drain()
    assert log.events == [("connect",), ("data", "v"), ("disconnect",)]


@pytest.mark.asyncio
async def test_bracketed_stream_disconnects_after_outermost_close() -> None:
    socket = InMemorySocket("out", emit_packets=False)
    log = _EventLog()
    socket.subscribe(log)
    for packet in [
        Packet.open_bracket("a"),
        Packet.open_bracket("b"),
        Packet.data(1),
        Packet.close_bracket(),
        Packet.close_bracket(),
    ]:
        socket.post(packet)
    await _drain()
    assert log.events == [
        ("connect",),
        ("begin", "a"),
        ("begin", "b"),
        ("data", 1),
        ("end", "b"),
        ("end", "a"),
        ("disconnect",),
    ]


@pytest.mark.asyncio
async def test_explicit_disconnect_only_when_connected() -> None:
    socket = InMemorySocket("out", emit_packets=False)
    log = _EventLog()
    socket.subscribe(log)
    socket.post(Packet.disconnect())
    socket.post(Packet.open_bracket())
    socket.post(Packet.disconnect())
    await _drain()
    assert log.events == [("connect",), ("begin", None), ("disconnect",)]


@pytest.mark.asyncio
async def test_unified_packet_precedes_legacy_echo() -> None:
    socket = InMemorySocket("out")
    log = _EventLog()
    socket.subscribe(log)
    socket.send(7)
    await _drain()
    assert log.events == [("packet", "data"), ("connect",), ("data", 7), ("disconnect",)]


@pytest.mark.asyncio
async def test_cancelled_subscription_receives_nothing_further() -> None:
    # A listener that cancels while handling the packet event misses the legacy echo.
    socket = InMemorySocket("out")
    received: list[str] = []

    class _OneShot(PortListener):
        def on_packet(self, packet: Packet) -> None:
            received.append("packet")
            subscription.cancel()

        def on_data(self, value: object) -> None:
            received.append("data")

    subscription = socket.subscribe(_OneShot())
    socket.send(1)
    socket.send(2)
    await _drain()
    assert received == ["packet"]
    assert socket.listener_count() == 0


@pytest.mark.asyncio
async def test_listener_added_during_delivery_sees_later_packets_only() -> None:
    socket = InMemorySocket("out", emit_legacy=False)
    late = _EventLog()

    class _Spawner(PortListener):
        def on_packet(self, packet: Packet) -> None:
            if not late.events and socket.listener_count() == 1:
                socket.subscribe(late)

    socket.subscribe(_Spawner())
    socket.send(1)
    socket.send(2)
    await _drain()
    assert late.events == [("packet", "data")]


@pytest.mark.asyncio
async def test_unsubscribe_all_drops_every_listener() -> None:
    socket = InMemorySocket("out")
    first = socket.subscribe(_EventLog())
    second = socket.subscribe(_EventLog())
    socket.unsubscribe_all()
    assert socket.listener_count() == 0
    assert not first.active and not second.active


@pytest.mark.asyncio
async def test_post_rejects_raw_values() -> None:
    socket = InMemorySocket("in")
    with pytest.raises(TypeError):
        socket.post("raw")  # type: ignore[arg-type]


def test_socket_requires_name() -> None:
    with pytest.raises(ValueError):
        InMemorySocket("")
