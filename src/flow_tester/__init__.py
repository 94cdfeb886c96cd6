from flow_tester.config import ConfigError, HarnessSettings
from flow_tester.domain import Packet, PacketKind, is_packet
from flow_tester.integration import InMemorySocket
from flow_tester.kernel import (
    AggregationMode,
    AggregationResult,
    Dispatcher,
    HarnessNotStartedError,
    PortAggregator,
    Synchronizer,
    Tester,
)
from flow_tester.ports import InboundPort, Network, OutboundPort, PortListener, PortRegistry, Subscription, UnknownPortError

__all__ = [
    "AggregationMode",
    "AggregationResult",
    "ConfigError",
    "Dispatcher",
    "HarnessNotStartedError",
    "HarnessSettings",
    "InMemorySocket",
    "InboundPort",
    "Network",
    "OutboundPort",
    "Packet",
    "PacketKind",
    "PortAggregator",
    "PortListener",
    "PortRegistry",
    "Subscription",
    "Synchronizer",
    "Tester",
    "UnknownPortError",
    "is_packet",
]
