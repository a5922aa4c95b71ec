"""Bounds-checked byte decoding and fixed-width little-endian encoding."""

from __future__ import annotations

import struct
from typing import Any

from shpdat.common.errors import ContractError, FormatError


def read_struct(buf: bytes, offset: int, fmt: str, what: str) -> tuple[Any, ...]:
    """Unpack ``fmt`` at ``offset``, refusing to read outside ``buf``."""
    size = struct.calcsize(fmt)
    if offset < 0 or offset + size > len(buf):
        raise FormatError(f"{what}: {size} bytes at offset {offset} exceed buffer of {len(buf)} bytes")
    return struct.unpack_from(fmt, buf, offset)


def read_exact(stream, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise FormatError(f"{what}: expected {size} bytes, got {len(data)}")
    return data


def pack_uint(value: int, width: int, what: str) -> bytes:
    if value < 0 or value >= 1 << (8 * width):
        raise ContractError(f"{what} {value} does not fit in {width} unsigned byte(s)")
    return value.to_bytes(width, "little")


def pack_int(value: int, width: int, what: str, overflow: str = "error") -> bytes:
    """Encode a signed integer in ``width`` bytes.

    With ``overflow="wrap"`` out-of-range values keep their low ``width``
    bytes in two's complement; otherwise they raise ``ContractError``.
    """
    bits = 8 * width
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    if low <= value <= high:
        return value.to_bytes(width, "little", signed=True)
    if overflow == "wrap":
        return (value & ((1 << bits) - 1)).to_bytes(width, "little")
    raise ContractError(f"{what} {value} does not fit in {width} signed byte(s)")


class BinaryCursor:
    """Sequential little-endian reader over an immutable buffer."""

    def __init__(self, data: bytes, what: str = "buffer") -> None:
        self.data = data
        self.offset = 0
        self.what = what

    def _take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise FormatError(f"{self.what}: unexpected end of data at offset {self.offset}")
        chunk = self.data[self.offset : end]
        self.offset = end
        return chunk

    def read_uint(self, width: int) -> int:
        return int.from_bytes(self._take(width), "little")

    def read_int(self, width: int) -> int:
        return int.from_bytes(self._take(width), "little", signed=True)

    def read_bytes(self, size: int) -> bytes:
        return self._take(size)

    def at_end(self) -> bool:
        return self.offset == len(self.data)
