from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from flow_tester.domain.packet import Packet, PacketKind, is_packet
from flow_tester.ports.contracts import PortListener, Subscription


@dataclass(slots=True)
class _LegacyState:
    # Socket-side view of the current transmission for legacy event translation.
    connected: bool = False
    depth: int = 0
    groups: list[object] = field(default_factory=list)


class InMemorySocket:
    """In-process channel implementing both the inbound and outbound port.

    ``post`` schedules delivery on the running loop, one callback per packet,
    so delivery order per socket is FIFO. Each delivery hands the packet to
    every active subscription, first through ``on_packet`` and then through
    the legacy events derived from it: connect at the start of a
    transmission, begin/end group for brackets, data, and a disconnect once
    the socket's bracket depth is back to 0. Either family can be switched
    off to model ports that speak only one of them.
    """

    def __init__(self, name: str, *, emit_packets: bool = True, emit_legacy: bool = True) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("InMemorySocket name must be a non-empty string")
        self._name = name
        self._emit_packets = emit_packets
        self._emit_legacy = emit_legacy
        self._subscriptions: list[Subscription] = []
        self._legacy = _LegacyState()
        self._posted = 0
        self._delivered = 0

    @property
    def name(self) -> str:
        return self._name

    def post(self, packet: Packet) -> None:
        if not is_packet(packet):
            raise TypeError(f"InMemorySocket '{self._name}' accepts packets only")
        self._posted += 1
        asyncio.get_running_loop().call_soon(self._deliver, packet)

    def send(self, value: object) -> None:
        self.post(Packet.data(value))

    def subscribe(self, listener: PortListener) -> Subscription:
        subscription = Subscription(listener, self._remove)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe_all(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.cancel()
        self._subscriptions.clear()

    def listener_count(self) -> int:
        return len(self._subscriptions)

    def posted_count(self) -> int:
        return self._posted

    def delivered_count(self) -> int:
        return self._delivered

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def _deliver(self, packet: Packet) -> None:
        self._delivered += 1
        legacy = self._legacy_events(packet) if self._emit_legacy else []
        # Snapshot: listeners subscribed during this delivery see only later packets.
        for subscription in list(self._subscriptions):
            listener = subscription.listener
            if self._emit_packets and subscription.active:
                listener.on_packet(packet)
            for event, args in legacy:
                # A listener that finished on the packet event must not see its legacy echo.
                if not subscription.active:
                    break
                getattr(listener, event)(*args)

    def _legacy_events(self, packet: Packet) -> list[tuple[str, tuple[object, ...]]]:
        state = self._legacy
        events: list[tuple[str, tuple[object, ...]]] = []
        if packet.kind is PacketKind.DISCONNECT:
            if state.connected:
                events.append(("on_disconnect", ()))
            state.connected = False
            state.depth = 0
            state.groups.clear()
            return events
        if not state.connected:
            state.connected = True
            events.append(("on_connect", ()))
        if packet.kind is PacketKind.OPEN_BRACKET:
            state.depth += 1
            state.groups.append(packet.label)
            events.append(("on_begin_group", (packet.label,)))
            return events
        if packet.kind is PacketKind.CLOSE_BRACKET:
            label = state.groups.pop() if state.groups else None
            state.depth -= 1
            events.append(("on_end_group", (label,)))
        else:
            events.append(("on_data", (packet.payload,)))
        if state.depth <= 0:
            state.connected = False
            state.depth = 0
            events.append(("on_disconnect", ()))
        return events
