from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from flow_tester.domain.packet import Packet
from flow_tester.observability.adapters.logging import LogSink
from flow_tester.observability.domain.logging import LogMessage, level_rank

if TYPE_CHECKING:
    from flow_tester.kernel.aggregator import AggregationResult


@runtime_checkable
class HarnessObserver(Protocol):
    # Lifecycle hooks for send/receive activity; every hook defaults to a no-op.
    def on_send(self, *, port: str, packet: Packet) -> None:
        return None

    def on_window_opened(self, *, port: str) -> None:
        return None

    def on_window_completed(self, *, port: str, result: AggregationResult) -> None:
        return None

    def on_window_orphaned(self, *, port: str) -> None:
        return None

    def on_teardown(self, *, port: str) -> None:
        return None

    def close(self) -> None:
        return None


class NoOpHarnessObserver(HarnessObserver):
    # Default observer when no log sink is configured.
    pass


class LoggingObserver(HarnessObserver):
    # Translates harness events into structured LogMessage records.
    def __init__(self, sink: LogSink, *, level: str = "info", harness: str | None = None) -> None:
        self._sink = sink
        self._threshold = level_rank(level)
        self._harness = harness

    @property
    def sink(self) -> LogSink:
        return self._sink

    def on_send(self, *, port: str, packet: Packet) -> None:
        self._emit("debug", "packet_sent", port=port, kind=packet.kind.value)

    def on_window_opened(self, *, port: str) -> None:
        self._emit("debug", "window_opened", port=port)

    def on_window_completed(self, *, port: str, result: AggregationResult) -> None:
        self._emit(
            "info",
            "window_completed",
            port=port,
            mode=result.mode.value if result.mode is not None else None,
            data_count=result.data_count,
            group_count=result.group_count,
            groups=list(result.groups),
        )

    def on_window_orphaned(self, *, port: str) -> None:
        # A pending receive was replaced before it completed; its future never resolves.
        self._emit("warning", "window_orphaned", port=port)

    def on_teardown(self, *, port: str) -> None:
        self._emit("warning", "port_detached", port=port)

    def close(self) -> None:
        self._sink.close()

    def _emit(self, level: str, message: str, **fields: object) -> None:
        if level_rank(level) < self._threshold:
            return
        if self._harness is not None:
            fields["harness"] = self._harness
        self._sink.emit(LogMessage(level=level, message=message, fields=fields))
