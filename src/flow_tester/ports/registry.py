from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from flow_tester.ports.contracts import InboundPort, OutboundPort


# Unknown ports fail fast at the call site that names them.
class UnknownPortError(KeyError):
    def __init__(self, port: str, direction: str) -> None:
        super().__init__(port)
        self.port = port
        self.direction = direction

    def __str__(self) -> str:
        return f"No such {self.direction}: {self.port}"


@dataclass
class PortRegistry:
    # Exposed port set of one harness; built once at setup and shared by reference.
    _inports: dict[str, InboundPort] = field(default_factory=dict)
    _outports: dict[str, OutboundPort] = field(default_factory=dict)

    def register_inport(self, name: str, port: InboundPort) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("inport name must be a non-empty string")
        if not callable(getattr(port, "post", None)):
            raise TypeError(f"inport '{name}' does not provide post()")
        self._inports[name] = port

    def register_outport(self, name: str, port: OutboundPort) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("outport name must be a non-empty string")
        if not callable(getattr(port, "subscribe", None)) or not callable(getattr(port, "unsubscribe_all", None)):
            raise TypeError(f"outport '{name}' does not provide subscribe()/unsubscribe_all()")
        self._outports[name] = port

    def inport(self, name: str) -> InboundPort:
        if name not in self._inports:
            raise UnknownPortError(name, "inport")
        return self._inports[name]

    def outport(self, name: str) -> OutboundPort:
        if name not in self._outports:
            raise UnknownPortError(name, "outport")
        return self._outports[name]

    def require_inports(self, names: Iterable[str]) -> None:
        # Validate a whole batch before any side effect happens.
        for name in names:
            self.inport(name)

    def require_outports(self, names: Iterable[str]) -> None:
        for name in names:
            self.outport(name)

    def inports(self) -> Mapping[str, InboundPort]:
        return MappingProxyType(self._inports)

    def outports(self) -> Mapping[str, OutboundPort]:
        return MappingProxyType(self._outports)

    def is_empty(self) -> bool:
        return not self._inports and not self._outports
