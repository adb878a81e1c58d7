"""Maxim/iButton 1-Wire CRC-8, as prescribed for S3G packets.

Reflected polynomial 0x8C (x^8 + x^5 + x^4 + 1), processed lsb-first with a
zero seed. The bot rejects packets whose trailing byte doesn't match, so this
must stay bit-exact.
"""

from __future__ import annotations

from collections.abc import Iterable

CRC8_POLY = 0x8C
CRC8_INITIAL = 0x00


def crc8(data: Iterable[int]) -> int:
    """Compute the Maxim CRC-8 of *data*.

    Args:
        data: Bytes (or any iterable of 0-255 ints).

    Returns:
        The checksum as an int in 0-255. Empty input yields 0.
    """
    crc = CRC8_INITIAL
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ CRC8_POLY
            else:
                crc >>= 1
    return crc
