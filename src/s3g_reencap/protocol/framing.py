"""Packet builder for the encapsulated S3G wire format.

Packet layout::

    +-------+--------+---------+------------------+-------+
    | Start | Length | Command |       Body       |  CRC  |
    | 0xD5  | 1 byte | 1 byte  | 0-32 bytes       | 1 byte|
    +-------+--------+---------+------------------+-------+

- Length: number of payload bytes (command + body); the CRC is not counted
- CRC: Maxim CRC-8 over (command + body)
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import OversizedPayloadError
from ..utils.crc import crc8

START_BYTE = 0xD5
MAX_PAYLOAD = 32  # body bytes after the command byte
FRAMING_OVERHEAD = 4  # start + length + command + crc
MAX_PACKET_SIZE = MAX_PAYLOAD + FRAMING_OVERHEAD


@dataclass
class Packet:
    """One reframed command."""

    command: int
    payload: bytes

    @property
    def length_byte(self) -> int:
        return len(self.payload) + 1

    def to_bytes(self) -> bytes:
        return build_packet(self.command, self.payload)

    def __repr__(self) -> str:
        return (
            f"Packet(command=0x{self.command:02X}, "
            f"payload={self.payload.hex(' ') if self.payload else '(empty)'})"
        )


class PacketBuffer:
    """Reusable scratch space for assembling one packet at a time.

    The start byte is written once here and never touched again; every
    :meth:`pack` overwrites the rest in place.
    """

    def __init__(self) -> None:
        self._buf = bytearray(MAX_PACKET_SIZE)
        self._buf[0] = START_BYTE

    def pack(self, command: int, body: bytes = b"") -> bytes:
        """Fill the buffer with a packet for *command* and return it.

        Args:
            command: Single-byte opcode.
            body: Bytes following the opcode.

        Returns:
            Exactly ``len(body) + 4`` bytes.

        Raises:
            ValueError: If *command* isn't a single byte.
            OversizedPayloadError: If *body* exceeds :data:`MAX_PAYLOAD`.
        """
        if not 0 <= command <= 0xFF:
            raise ValueError(f"Command must be 0-255, got {command}")
        size = len(body)
        if size > MAX_PAYLOAD:
            raise OversizedPayloadError(
                f"payload of {size} bytes exceeds the {MAX_PAYLOAD}-byte maximum"
            )
        end = 3 + size
        self._buf[1] = size + 1
        self._buf[2] = command
        self._buf[3:end] = body
        self._buf[end] = crc8(self._buf[2:end])
        return bytes(self._buf[: end + 1])


def build_packet(command: int, body: bytes = b"") -> bytes:
    """Build a single encapsulated packet.

    Args:
        command: Single-byte opcode.
        body: Command-specific bytes following the opcode.

    Returns:
        A ``bytes`` object ready to send to the bot.
    """
    return PacketBuffer().pack(command, body)
