from __future__ import annotations

import asyncio
from collections.abc import Mapping
from functools import partial

from flow_tester.kernel.aggregator import PortAggregator, ReceiveCallback
from flow_tester.observability.observers.harness import HarnessObserver, NoOpHarnessObserver
from flow_tester.ports.registry import PortRegistry

PortSpecs = str | Mapping[str, ReceiveCallback | None]


class Synchronizer:
    """Fan-in join over per-port aggregation windows.

    A single port name yields that port's future. A mapping of port name to
    callback yields one future resolving to the list of values in listing
    order once every port has completed. There is no timeout: a join whose
    ports never complete stays pending until ``detach`` is called.
    """

    def __init__(self, registry: PortRegistry, *, observer: HarnessObserver | None = None) -> None:
        self._registry = registry
        self._observer = observer or NoOpHarnessObserver()
        self._active: dict[str, PortAggregator] = {}

    def await_all(self, port_specs: PortSpecs, callback: ReceiveCallback | None = None) -> asyncio.Future:
        if isinstance(port_specs, str):
            self._registry.require_outports([port_specs])
            return self._start(port_specs, callback)
        if isinstance(port_specs, Mapping):
            if callback is not None:
                raise TypeError("callbacks must be given per port when receiving from a port mapping")
            names = list(port_specs)
            # Validate every name before the first subscription is created.
            self._registry.require_outports(names)
            futures = [self._start(name, port_specs[name]) for name in names]
            return asyncio.gather(*futures)
        raise TypeError("receive expects a port name or a mapping of port name to callback")

    def active(self, port: str) -> PortAggregator | None:
        return self._active.get(port)

    def detach(self, port: str | None = None) -> None:
        # Explicit teardown: drop every listener on the port(s) and forget pending windows.
        names = [port] if port is not None else list(self._registry.outports())
        for name in names:
            self._registry.outport(name).unsubscribe_all()
            self._active.pop(name, None)
            self._observer.on_teardown(port=name)

    def _start(self, name: str, callback: ReceiveCallback | None) -> asyncio.Future:
        previous = self._active.get(name)
        if previous is not None and previous.pending:
            # One active window per port: the older one is orphaned and never resolves.
            previous.detach()
            self._observer.on_window_orphaned(port=name)
        aggregator = PortAggregator(name, self._registry.outport(name), on_complete=callback)
        self._active[name] = aggregator
        self._observer.on_window_opened(port=name)
        future = aggregator.observe()
        future.add_done_callback(partial(self._on_window_done, aggregator))
        return future

    def _on_window_done(self, aggregator: PortAggregator, future: asyncio.Future) -> None:
        if self._active.get(aggregator.port_name) is aggregator:
            del self._active[aggregator.port_name]
        if future.cancelled():
            # A caller-side cancellation leaves no listener behind on the port.
            aggregator.detach()
            return
        if aggregator.result is not None:
            self._observer.on_window_completed(port=aggregator.port_name, result=aggregator.result)
