from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from pathlib import Path

from flow_tester.config.loader import load_config
from flow_tester.config.settings import HarnessSettings, build_observer
from flow_tester.kernel.aggregator import ReceiveCallback
from flow_tester.kernel.dispatcher import MISSING, Dispatcher
from flow_tester.kernel.synchronizer import PortSpecs, Synchronizer
from flow_tester.observability.observers.harness import HarnessObserver
from flow_tester.ports.contracts import InboundPort, Network, OutboundPort
from flow_tester.ports.registry import PortRegistry, UnknownPortError


class HarnessNotStartedError(UnknownPortError):
    # Any port named before start() or attach() exposed a single one.
    def __str__(self) -> str:
        return f"No such {self.direction}: {self.port} (no ports yet; call start() or attach() first)"


class Tester:
    """Send values into a component's inports and await its outport results.

    The network under test is built elsewhere. ``start`` registers the
    network's exported ports and starts it; ``attach`` registers ports wired
    by hand. After that, ``send`` posts values and ``receive`` returns a
    future per port or for a whole mapping of ports::

        tester.send({"dividend": 11, "divisor": 3})
        quotient, remainder = await tester.receive({"quotient": None, "remainder": None})
    """

    __test__ = False

    def __init__(
        self,
        network: Network | None = None,
        *,
        settings: HarnessSettings | None = None,
        observer: HarnessObserver | None = None,
        on_ready: Callable[[Network], None] | None = None,
    ) -> None:
        self._network = network
        self._settings = settings or HarnessSettings()
        self._observer = observer if observer is not None else build_observer(self._settings)
        self._on_ready = on_ready
        self._registry = PortRegistry()
        self._dispatcher = Dispatcher(self._registry, observer=self._observer)
        self._synchronizer = Synchronizer(self._registry, observer=self._observer)

    @classmethod
    def from_config(
        cls,
        path: Path,
        network: Network | None = None,
        *,
        on_ready: Callable[[Network], None] | None = None,
    ) -> Tester:
        settings = HarnessSettings.from_config(load_config(path))
        return cls(network, settings=settings, on_ready=on_ready)

    @property
    def name(self) -> str:
        return self._settings.name

    @property
    def settings(self) -> HarnessSettings:
        return self._settings

    @property
    def network(self) -> Network | None:
        return self._network

    @property
    def observer(self) -> HarnessObserver:
        return self._observer

    @property
    def ins(self) -> Mapping[str, InboundPort]:
        # Direct access to exposed inports for hand-written packet sequences.
        return self._registry.inports()

    @property
    def outs(self) -> Mapping[str, OutboundPort]:
        return self._registry.outports()

    async def start(self) -> None:
        if self._network is None:
            raise RuntimeError("Tester.start() requires a network; use attach() for hand-wired ports")
        self.attach(inports=self._network.inports(), outports=self._network.outports())
        await self._network.start()
        if self._on_ready is not None:
            self._on_ready(self._network)

    def attach(
        self,
        *,
        inports: Mapping[str, InboundPort] | None = None,
        outports: Mapping[str, OutboundPort] | None = None,
    ) -> None:
        for name, port in (inports or {}).items():
            self._registry.register_inport(name, port)
        for name, port in (outports or {}).items():
            self._registry.register_outport(name, port)

    def send(self, port_or_map: str | Mapping[str, object], value: object = MISSING) -> None:
        self._require_started(port_or_map, "inport")
        self._dispatcher.send(port_or_map, value)

    def receive(self, port_specs: PortSpecs, callback: ReceiveCallback | None = None) -> asyncio.Future:
        self._require_started(port_specs, "outport")
        return self._synchronizer.await_all(port_specs, callback)

    def teardown(self, port: str | None = None) -> None:
        # Explicit release of outport listeners, e.g. after a receive timed out.
        self._synchronizer.detach(port)

    def close(self) -> None:
        # Full teardown: release every outport listener, then the observer's log sink.
        self._synchronizer.detach()
        self._observer.close()

    def _require_started(self, target: object, direction: str) -> None:
        if not self._registry.is_empty():
            return
        if isinstance(target, Mapping):
            target = next(iter(target), "")
        raise HarnessNotStartedError(str(target), direction)
