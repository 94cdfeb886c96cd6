from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from flow_tester.domain.packet import Packet, PacketKind
from flow_tester.ports.contracts import OutboundPort, PortListener, Subscription

# Per-port receive callback: (value, groups, data_count, group_count).
ReceiveCallback = Callable[[object, list[object], int, int], object]


class AggregationMode(str, Enum):
    # Legacy windows end at a disconnect; structured windows end at bracket depth 0.
    LEGACY = "legacy"
    STRUCTURED = "structured"


@dataclass(frozen=True, slots=True)
class AggregationResult:
    # Consolidated outcome of one aggregation window.
    value: object
    groups: tuple[object, ...]
    data_count: int
    group_count: int
    mode: AggregationMode | None = None


@dataclass(slots=True)
class AggregationState:
    """Packet collection state for one (port, receive-call) pair.

    Every transition returns True when the window has just completed. The
    mode is chosen by the first event: a legacy event selects LEGACY, and any
    unified packet switches the window to STRUCTURED for good, after which
    legacy events are ignored. Nothing here validates bracket nesting.
    """

    data: list[object] = field(default_factory=list)
    groups: list[object] = field(default_factory=list)
    depth: int = 0
    completed: bool = False
    mode: AggregationMode | None = None

    def legacy_data(self, value: object) -> bool:
        if not self._accept_legacy():
            return False
        self.data.append(value)
        return False

    def legacy_begin_group(self, group: object) -> bool:
        if not self._accept_legacy():
            return False
        self._add_group(group)
        return False

    def legacy_disconnect(self) -> bool:
        if not self._accept_legacy():
            return False
        self.completed = True
        return True

    def packet(self, packet: Packet) -> bool:
        if self.completed:
            return False
        self.mode = AggregationMode.STRUCTURED
        if packet.kind is PacketKind.OPEN_BRACKET:
            self.depth += 1
            self._add_group(packet.label)
        elif packet.kind is PacketKind.CLOSE_BRACKET:
            self.depth -= 1
        elif packet.kind is PacketKind.DATA:
            self.data.append(packet.payload)
        # Checked after every packet: a lone data packet at depth 0 is a whole transmission.
        if self.depth == 0:
            self.completed = True
            return True
        return False

    def result(self) -> AggregationResult:
        value: object = self.data[0] if len(self.data) == 1 else list(self.data)
        return AggregationResult(
            value=value,
            groups=tuple(self.groups),
            data_count=len(self.data),
            group_count=len(self.groups),
            mode=self.mode,
        )

    def _accept_legacy(self) -> bool:
        if self.completed or self.mode is AggregationMode.STRUCTURED:
            return False
        self.mode = AggregationMode.LEGACY
        return True

    def _add_group(self, group: object) -> None:
        # Groups are unique in order of first appearance.
        if group is not None and group not in self.groups:
            self.groups.append(group)


class PortAggregator(PortListener):
    """Listens on one output port until its aggregation window completes.

    ``observe`` subscribes and returns a future that resolves to the shaped
    value. On completion the subscription is cancelled first, then the
    optional callback runs, then the future is resolved. An exception raised
    by the callback is set on the future instead.
    """

    def __init__(
        self,
        port_name: str,
        port: OutboundPort,
        *,
        on_complete: ReceiveCallback | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._port_name = port_name
        self._port = port
        self._on_complete = on_complete
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future[object] = self._loop.create_future()
        self._state = AggregationState()
        self._subscription: Subscription | None = None
        self._result: AggregationResult | None = None

    @property
    def port_name(self) -> str:
        return self._port_name

    @property
    def result(self) -> AggregationResult | None:
        return self._result

    @property
    def pending(self) -> bool:
        return not self._state.completed

    @property
    def future(self) -> asyncio.Future[object]:
        return self._future

    def observe(self) -> asyncio.Future[object]:
        if self._subscription is None:
            self._subscription = self._port.subscribe(self)
        return self._future

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()

    def on_packet(self, packet: Packet) -> None:
        if self._state.packet(packet):
            self._finish()

    def on_data(self, value: object) -> None:
        self._state.legacy_data(value)

    def on_begin_group(self, group: object) -> None:
        self._state.legacy_begin_group(group)

    def on_disconnect(self) -> None:
        if self._state.legacy_disconnect():
            self._finish()

    def _finish(self) -> None:
        self.detach()
        result = self._state.result()
        self._result = result
        if self._on_complete is not None:
            try:
                self._on_complete(result.value, list(result.groups), result.data_count, result.group_count)
            except Exception as exc:
                if not self._future.done():
                    self._future.set_exception(exc)
                return
        # The caller may have cancelled the future (e.g. a wait_for timeout).
        if not self._future.done():
            self._future.set_result(result.value)
