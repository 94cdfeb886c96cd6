from .contracts import InboundPort, Network, OutboundPort, PortListener, Subscription
from .registry import PortRegistry, UnknownPortError

# Public port exports keep wiring explicit at composition time.
__all__ = [
    "InboundPort",
    "Network",
    "OutboundPort",
    "PortListener",
    "PortRegistry",
    "Subscription",
    "UnknownPortError",
]
