"""Tests for packet building."""

import pytest

from s3g_reencap.errors import OversizedPayloadError, TableInconsistencyError
from s3g_reencap.protocol.framing import (
    MAX_PACKET_SIZE,
    MAX_PAYLOAD,
    START_BYTE,
    Packet,
    PacketBuffer,
    build_packet,
)
from s3g_reencap.utils.crc import crc8


def test_build_packet_change_tool():
    """Verify every byte of a CHANGE_TOOL packet.

    Structure: D5 [len] [cmd] [body...] [crc]
    """
    packet = build_packet(0x86, b"\x00")
    assert packet[0] == 0xD5  # start byte
    assert packet[1] == 0x02  # command + 1 body byte
    assert packet[2] == 0x86  # command
    assert packet[3] == 0x00  # body
    assert packet[4] == crc8(bytes([0x86, 0x00]))
    assert len(packet) == 5


def test_build_packet_empty_body():
    """A bare command still gets length 1 and a CRC over the opcode."""
    packet = build_packet(0x90)
    assert packet == bytes([START_BYTE, 0x01, 0x90, crc8(b"\x90")])


def test_packet_size_is_payload_plus_three():
    """Total size is (command + body) + start + length + crc."""
    for size in (0, 1, 7, 16, MAX_PAYLOAD):
        packet = build_packet(0x81, bytes(size))
        assert packet[0] == START_BYTE
        assert packet[1] == size + 1
        assert len(packet) == (size + 1) + 3


def test_crc_excluded_from_length():
    """The length byte covers command + body only."""
    packet = build_packet(0x85, b"\x01\x02\x03\x04")
    payload = packet[2 : 2 + packet[1]]
    assert payload == b"\x85\x01\x02\x03\x04"
    assert packet[-1] == crc8(payload)


def test_max_payload_fits():
    """A 32-byte body produces the largest possible packet."""
    packet = build_packet(0x88, bytes(range(MAX_PAYLOAD)))
    assert len(packet) == MAX_PACKET_SIZE


def test_oversized_payload_rejected():
    """Bodies past the ceiling are an internal-consistency failure."""
    with pytest.raises(OversizedPayloadError):
        build_packet(0x88, bytes(MAX_PAYLOAD + 1))
    assert issubclass(OversizedPayloadError, TableInconsistencyError)


def test_command_must_be_a_byte():
    """Opcodes outside 0-255 are rejected."""
    with pytest.raises(ValueError):
        build_packet(0x100)


def test_packet_buffer_reuse():
    """A short packet after a long one carries nothing stale."""
    buf = PacketBuffer()
    long_packet = buf.pack(0x8B, b"\xee" * 24)
    short_packet = buf.pack(0x86, b"\x01")
    assert len(long_packet) == 28
    assert short_packet == build_packet(0x86, b"\x01")
    # Returned packets are snapshots, not views into the buffer
    assert long_packet == build_packet(0x8B, b"\xee" * 24)


def test_packet_buffer_keeps_start_byte():
    """The start byte survives repeated packing."""
    buf = PacketBuffer()
    for cmd in (0x81, 0x82, 0x86):
        assert buf.pack(cmd, b"\x00")[0] == START_BYTE


def test_packet_dataclass():
    """Packet.to_bytes matches build_packet."""
    packet = Packet(command=0x86, payload=b"\x00")
    assert packet.length_byte == 2
    assert packet.to_bytes() == build_packet(0x86, b"\x00")


def test_packet_repr():
    """Packet repr should be readable."""
    r = repr(Packet(command=0x86, payload=b"\x00"))
    assert "0x86" in r
    assert "(empty)" in repr(Packet(command=0x8F, payload=b""))
