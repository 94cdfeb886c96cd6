from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PacketKind(str, Enum):
    # Packet kinds flowing over a port; values match the wire-level type names.
    DATA = "data"
    OPEN_BRACKET = "openBracket"
    CLOSE_BRACKET = "closeBracket"
    DISCONNECT = "disconnect"


_BRACKETS = frozenset({PacketKind.OPEN_BRACKET, PacketKind.CLOSE_BRACKET})


@dataclass(frozen=True, slots=True)
class Packet:
    # One atomic unit of data or control flowing through a port.
    kind: PacketKind
    payload: object = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, PacketKind):
            raise ValueError("Packet.kind must be a PacketKind")
        # Close brackets and disconnects are pure control packets.
        if self.kind in (PacketKind.CLOSE_BRACKET, PacketKind.DISCONNECT) and self.payload is not None:
            raise ValueError(f"Packet of kind '{self.kind.value}' must not carry a payload")

    @classmethod
    def data(cls, value: object) -> Packet:
        return cls(PacketKind.DATA, value)

    @classmethod
    def open_bracket(cls, label: object = None) -> Packet:
        return cls(PacketKind.OPEN_BRACKET, label)

    @classmethod
    def close_bracket(cls) -> Packet:
        return cls(PacketKind.CLOSE_BRACKET)

    @classmethod
    def disconnect(cls) -> Packet:
        return cls(PacketKind.DISCONNECT)

    @property
    def label(self) -> object:
        # Group label of an open bracket; None for every other kind.
        if self.kind is PacketKind.OPEN_BRACKET:
            return self.payload
        return None

    @property
    def is_bracket(self) -> bool:
        return self.kind in _BRACKETS


def is_packet(value: object) -> bool:
    return isinstance(value, Packet)
