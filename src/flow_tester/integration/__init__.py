# Integration package: in-process channels that satisfy the port contracts.

from flow_tester.integration.memory_socket import InMemorySocket

__all__ = ["InMemorySocket"]
