from .aggregator import AggregationMode, AggregationResult, AggregationState, PortAggregator, ReceiveCallback
from .dispatcher import Dispatcher, to_packet
from .synchronizer import PortSpecs, Synchronizer
from .tester import HarnessNotStartedError, Tester

# Kernel exports are minimal and harness-focused.
__all__ = [
    "AggregationMode",
    "AggregationResult",
    "AggregationState",
    "Dispatcher",
    "HarnessNotStartedError",
    "PortAggregator",
    "PortSpecs",
    "ReceiveCallback",
    "Synchronizer",
    "Tester",
    "to_packet",
]
