# keyring_tlv/wire/tlv.py
"""
Keyring TLV Wire Format: Primitive TLV

The atomic unit every keystore structure is built from:

    ┌──────────────┬──────────────────┬──────────────────┐
    │ tag (8B)     │ length (4B, LE)  │ payload (length) │
    └──────────────┴──────────────────┴──────────────────┘

unpack_tlv() peels exactly one triple off the front of a buffer and reports
how many bytes it consumed, so sequences can be decoded without an outer
count field.
"""

from __future__ import annotations

import struct
from typing import Optional, Tuple, Type

from ..discriminator import DISCRIMINATOR_SIZE, check_discriminator
from ..errors import InvalidFormatError
from .reader import TLVReader


# =============================================================================
# Constants
# =============================================================================

LENGTH_SIZE = 4
HEADER_SIZE = DISCRIMINATOR_SIZE + LENGTH_SIZE  # 12 bytes
MAX_PAYLOAD_SIZE = 0xFFFFFFFF


# =============================================================================
# Encode / Decode
# =============================================================================

def pack_header(tag: bytes, length: int) -> bytes:
    """Pack `tag ++ u32_le(length)`."""
    check_discriminator(tag, "tag")
    if not (0 <= length <= MAX_PAYLOAD_SIZE):
        raise ValueError(f"TLV length must be uint32, got {length}")
    return bytes(tag) + struct.pack("<I", length)


def pack_tlv(tag: bytes, payload: bytes) -> bytes:
    """
    Encode one TLV triple.

    Args:
        tag: 8-byte discriminator
        payload: Value bytes

    Returns:
        tag ++ u32_le(len(payload)) ++ payload
    """
    return pack_header(tag, len(payload)) + bytes(payload)


def unpack_tlv(
    data: bytes,
    expected_tag: Optional[bytes] = None,
    error: Type[InvalidFormatError] = InvalidFormatError,
) -> Tuple[bytes, bytes, int]:
    """
    Peel one TLV triple off the front of `data`.

    Args:
        data: Buffer starting with a TLV header
        expected_tag: If given, the leading 8 bytes must equal it
        error: Format error class to raise for this structural level

    Returns:
        (tag, payload, consumed) where consumed = 12 + len(payload)

    Raises:
        error: Buffer shorter than 12 bytes, tag mismatch, or declared
               length larger than the bytes that follow
    """
    if len(data) < HEADER_SIZE:
        raise error(f"need {HEADER_SIZE}B header, got {len(data)}B")

    reader = TLVReader(data, error)
    tag = reader.read_discriminator()
    if expected_tag is not None and tag != bytes(expected_tag):
        raise error(f"discriminator mismatch: {tag.hex()} != {bytes(expected_tag).hex()}")

    length = reader.read_u32()
    if length > reader.remaining:
        raise error(f"declared length {length}B exceeds remaining {reader.remaining}B")
    payload = reader.read(length)

    return tag, payload, reader.position
