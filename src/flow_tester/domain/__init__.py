from .packet import Packet, PacketKind, is_packet

# Public domain exports keep imports explicit across layers.
__all__ = [
    "Packet",
    "PacketKind",
    "is_packet",
]
