"""CRC-32 with the reflected polynomial 0xEDB88320."""

from __future__ import annotations

_POLYNOMIAL = 0xEDB88320


def _table_entry(byte: int) -> int:
    value = byte
    for _ in range(8):
        value = (value >> 1) ^ _POLYNOMIAL if value & 1 else value >> 1
    return value


_TABLE = tuple(_table_entry(byte) for byte in range(256))


def crc32(data: bytes | bytearray | memoryview) -> int:
    """Return the 32-bit CRC of ``data``."""
    result = 0xFFFFFFFF
    for byte in bytes(data):
        result = _TABLE[(result ^ byte) & 0xFF] ^ (result >> 8)
    return result ^ 0xFFFFFFFF