from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Protocol, runtime_checkable

from flow_tester.domain.packet import Packet


@runtime_checkable
class PortListener(Protocol):
    # Receiver of port events. Legacy events and the unified packet stream are
    # delivered side by side; listeners override only what they consume.
    def on_packet(self, packet: Packet) -> None:
        return None

    def on_connect(self) -> None:
        return None

    def on_data(self, value: object) -> None:
        return None

    def on_begin_group(self, group: object) -> None:
        return None

    def on_end_group(self, group: object) -> None:
        return None

    def on_disconnect(self) -> None:
        return None


class Subscription:
    """Handle for one listener attached to an output port.

    ``cancel`` is the single detach capability; it is idempotent so the
    aggregator and an explicit teardown may both call it.
    """

    __slots__ = ("_listener", "_on_cancel", "_active")

    def __init__(self, listener: PortListener, on_cancel: Callable[[Subscription], None] | None = None) -> None:
        self._listener = listener
        self._on_cancel = on_cancel
        self._active = True

    @property
    def listener(self) -> PortListener:
        return self._listener

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        if self._on_cancel is not None:
            self._on_cancel(self)


@runtime_checkable
class OutboundPort(Protocol):
    # Output side of the network as seen by the harness: a packet-event stream.
    def subscribe(self, listener: PortListener) -> Subscription:
        # Port contract has no implementation; calling it directly is a wiring error.
        raise NotImplementedError("OutboundPort is a port; use a concrete adapter.")

    def unsubscribe_all(self) -> None:
        raise NotImplementedError("OutboundPort is a port; use a concrete adapter.")


@runtime_checkable
class InboundPort(Protocol):
    # Input side of the network: delivers one packet asynchronously.
    def post(self, packet: Packet) -> None:
        raise NotImplementedError("InboundPort is a port; use a concrete adapter.")


@runtime_checkable
class Network(Protocol):
    # Externally built network whose exported ports the harness attaches to.
    def inports(self) -> Mapping[str, InboundPort]:
        raise NotImplementedError("Network is a port; use a concrete adapter.")

    def outports(self) -> Mapping[str, OutboundPort]:
        raise NotImplementedError("Network is a port; use a concrete adapter.")

    async def start(self) -> None:
        raise NotImplementedError("Network is a port; use a concrete adapter.")
