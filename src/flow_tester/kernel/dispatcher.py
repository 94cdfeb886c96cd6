from __future__ import annotations

from collections.abc import Mapping

from flow_tester.domain.packet import Packet, is_packet
from flow_tester.observability.observers.harness import HarnessObserver, NoOpHarnessObserver
from flow_tester.ports.registry import PortRegistry

MISSING = object()


class Dispatcher:
    # Posts caller values into input ports; validation is synchronous, delivery is not.
    def __init__(self, registry: PortRegistry, *, observer: HarnessObserver | None = None) -> None:
        self._registry = registry
        self._observer = observer or NoOpHarnessObserver()

    def send(self, port_or_map: str | Mapping[str, object], value: object = MISSING) -> None:
        portmap = _normalize(port_or_map, value)
        # Nothing is posted unless every named port exists.
        self._registry.require_inports(portmap)
        for name, item in portmap.items():
            packet = to_packet(item)
            self._registry.inport(name).post(packet)
            self._observer.on_send(port=name, packet=packet)


def to_packet(value: object) -> Packet:
    # Packets pass through untouched; anything else is one self-terminating data packet.
    if is_packet(value):
        return value  # type: ignore[return-value]
    return Packet.data(value)


def _normalize(port_or_map: str | Mapping[str, object], value: object) -> dict[str, object]:
    if isinstance(port_or_map, str):
        if value is MISSING:
            raise TypeError(f"send('{port_or_map}') requires a value")
        return {port_or_map: value}
    if isinstance(port_or_map, Mapping):
        if value is not MISSING:
            raise TypeError("send() takes no separate value when given a port mapping")
        return dict(port_or_map)
    raise TypeError("send expects a port name or a mapping of port name to value")
