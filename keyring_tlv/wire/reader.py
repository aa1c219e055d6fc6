# keyring_tlv/wire/reader.py
"""
Bounds-checked cursor over an immutable byte buffer.

All decoders read through a TLVReader so that a truncated or oversized
length field surfaces as a structured format error, never an IndexError.
"""

from __future__ import annotations

import struct
from typing import Type

from ..discriminator import DISCRIMINATOR_SIZE
from ..errors import InvalidFormatError


class TLVReader:
    """
    Forward-only reader.

    Args:
        data: Buffer to decode (not copied)
        error: Exception class raised on out-of-range reads
    """

    def __init__(self, data: bytes, error: Type[InvalidFormatError] = InvalidFormatError):
        self._data = memoryview(bytes(data))
        self._pos = 0
        self._error = error

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def fail(self, detail: str) -> InvalidFormatError:
        """Build the reader's error (caller raises it)."""
        return self._error(detail)

    def read(self, size: int) -> bytes:
        """Read exactly `size` bytes."""
        if size < 0:
            raise self.fail(f"negative read size {size}")
        if size > self.remaining:
            raise self.fail(
                f"need {size}B at offset {self._pos}, only {self.remaining}B left"
            )
        chunk = self._data[self._pos:self._pos + size].tobytes()
        self._pos += size
        return chunk

    def read_u32(self) -> int:
        """Read a little-endian u32."""
        (value,) = struct.unpack("<I", self.read(4))
        return value

    def read_discriminator(self) -> bytes:
        return self.read(DISCRIMINATOR_SIZE)

    def peek_byte(self) -> int:
        """Next byte without advancing."""
        if self.at_end:
            raise self.fail(f"unexpected end of buffer at offset {self._pos}")
        return self._data[self._pos]
