# keyring_tlv/wire/__init__.py
"""
Keyring TLV Wire Format

Nested Type-Length-Value codec for keystore records.

Modules:
    reader: Bounds-checked cursor
    tlv:    Primitive tag/length/payload triple
    config: Configuration entries and sections (with 0x00 absence sentinel)
    record: Record key and record

Usage:
    from keyring_tlv.wire import Record, ConfigSection, ConfigEntry
    from keyring_tlv.discriminator import CURVE25519_DISCRIMINATOR

    record = Record.new(CURVE25519_DISCRIMINATOR, bytes([6] * 32))
    wire = record.pack()              # 57 bytes
    record2 = Record.unpack_exact(wire)
"""

from .reader import TLVReader

from .tlv import (
    HEADER_SIZE,
    LENGTH_SIZE,
    MAX_PAYLOAD_SIZE,
    pack_header,
    pack_tlv,
    unpack_tlv,
)

from .config import (
    ConfigEntry,
    ConfigSection,
    NO_CONFIGURATION,
)

from .record import (
    RecordKey,
    Record,
)

__all__ = [
    # Reader
    "TLVReader",

    # Primitive TLV
    "HEADER_SIZE",
    "LENGTH_SIZE",
    "MAX_PAYLOAD_SIZE",
    "pack_header",
    "pack_tlv",
    "unpack_tlv",

    # Configuration
    "ConfigEntry",
    "ConfigSection",
    "NO_CONFIGURATION",

    # Records
    "RecordKey",
    "Record",
]
