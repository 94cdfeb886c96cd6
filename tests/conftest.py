from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable, Mapping

import pytest

from flow_tester.domain.packet import Packet, PacketKind
from flow_tester.integration.memory_socket import InMemorySocket
from flow_tester.ports.contracts import PortListener


class _PacketHandler(PortListener):
    # Component-side listener: forwards unified packets to a handler.
    def __init__(self, handler: Callable[[Packet], None]) -> None:
        self._handler = handler

    def on_packet(self, packet: Packet) -> None:
        self._handler(packet)


class SampleNetwork:
    # Hand-wired network: one component between exported inbound and outbound sockets.
    def __init__(self, inports: list[str], outports: list[str], **socket_options: bool) -> None:
        self.ins = {name: InMemorySocket(name) for name in inports}
        self.outs = {name: InMemorySocket(name, **socket_options) for name in outports}
        self.started = False

    def inports(self) -> Mapping[str, InMemorySocket]:
        return self.ins

    def outports(self) -> Mapping[str, InMemorySocket]:
        return self.outs

    async def start(self) -> None:
        self.started = True

    def on(self, port: str, handler: Callable[[Packet], None]) -> None:
        self.ins[port].subscribe(_PacketHandler(handler))


class EchoNetwork(SampleNetwork):
    # Passes every packet from `in` to `out` unchanged.
    def __init__(self, **socket_options: bool) -> None:
        super().__init__(["in"], ["out"], **socket_options)
        self.on("in", self.outs["out"].post)


class MultiplyNetwork(SampleNetwork):
    # Multiplies x/y data pairs; brackets from x are forwarded to xy, brackets on y are consumed.
    def __init__(self) -> None:
        super().__init__(["x", "y"], ["xy"])
        self._x: deque[object] = deque()
        self._y: deque[object] = deque()
        self.on("x", self._on_x)
        self.on("y", self._on_y)

    def _on_x(self, packet: Packet) -> None:
        if packet.is_bracket:
            self.outs["xy"].post(packet)
            return
        if packet.kind is PacketKind.DATA:
            self._x.append(packet.payload)
            self._fire()

    def _on_y(self, packet: Packet) -> None:
        if packet.kind is PacketKind.DATA:
            self._y.append(packet.payload)
            self._fire()

    def _fire(self) -> None:
        while self._x and self._y:
            self.outs["xy"].send(self._x.popleft() * self._y.popleft())


class DividerNetwork(SampleNetwork):
    # Integer division with results posted on a later loop iteration.
    def __init__(self) -> None:
        super().__init__(["dividend", "divisor"], ["quotient", "remainder", "error"])
        self._dividend: deque[int] = deque()
        self._divisor: deque[int] = deque()
        self.on("dividend", lambda packet: self._collect(self._dividend, packet))
        self.on("divisor", lambda packet: self._collect(self._divisor, packet))

    def _collect(self, queue: deque[int], packet: Packet) -> None:
        if packet.kind is not PacketKind.DATA:
            return
        queue.append(packet.payload)  # type: ignore[arg-type]
        if self._dividend and self._divisor:
            dividend = self._dividend.popleft()
            divisor = self._divisor.popleft()
            asyncio.get_running_loop().call_soon(self._divide, dividend, divisor)

    def _divide(self, dividend: int, divisor: int) -> None:
        if divisor == 0:
            self.outs["error"].send("Division by 0")
            return
        self.outs["quotient"].send(dividend // divisor)
        self.outs["remainder"].send(dividend % divisor)


class BurstNetwork(SampleNetwork):
    # Emits each item of an incoming sequence as its own unbracketed data packet.
    def __init__(self) -> None:
        super().__init__(["in"], ["out"])
        self.on("in", self._burst)

    def _burst(self, packet: Packet) -> None:
        if packet.kind is PacketKind.DATA:
            for item in packet.payload:  # type: ignore[attr-defined]
                self.outs["out"].send(item)


@pytest.fixture
def echo_network() -> EchoNetwork:
    return EchoNetwork()


@pytest.fixture
def legacy_echo_network() -> EchoNetwork:
    # Outport speaks only the legacy connect/data/group/disconnect events.
    return EchoNetwork(emit_packets=False)


@pytest.fixture
def multiply_network() -> MultiplyNetwork:
    return MultiplyNetwork()


@pytest.fixture
def divider_network() -> DividerNetwork:
    return DividerNetwork()


@pytest.fixture
def burst_network() -> BurstNetwork:
    return BurstNetwork()
