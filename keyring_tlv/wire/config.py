# keyring_tlv/wire/config.py
"""
Keyring TLV Wire Format: Configuration Entries and Sections

Algorithm-specific auxiliary data (nonce, associated data, ...) rides in a
configuration section attached to a record.

Config entry:
    key_discriminator (8B) │ value_len (4B, LE) │ value

Config section:
    CONFIGURATION_DISCRIMINATOR (8B) │ total_len (4B, LE) │ entries...

Absent section:
    0x00   ← single sentinel byte, NOT a 12-byte header

A present-but-empty section still carries the full header with total_len=0.
The decoder branches on the first byte: 0x00 means "no configuration,
1 byte consumed"; anything else must be the section discriminator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, List, Optional, Tuple

from ..discriminator import CONFIGURATION_DISCRIMINATOR, check_discriminator
from ..errors import InvalidConfigEntryFormatError, InvalidConfigFormatError
from .reader import TLVReader
from .tlv import HEADER_SIZE, pack_header, pack_tlv, unpack_tlv


NO_CONFIGURATION = b"\x00"


# =============================================================================
# ConfigEntry
# =============================================================================

@dataclass(frozen=True)
class ConfigEntry:
    """
    Key-value configuration entry.

    The key is itself the TLV discriminator and names the field
    (e.g. NONCE_DISCRIMINATOR); the value is opaque.
    """
    key: bytes
    value: bytes

    def __post_init__(self):
        check_discriminator(self.key, "config entry key")
        if not isinstance(self.value, (bytes, bytearray)):
            raise ValueError("config entry value must be bytes")
        object.__setattr__(self, "key", bytes(self.key))
        object.__setattr__(self, "value", bytes(self.value))

    def data_len(self) -> int:
        return HEADER_SIZE + len(self.value)

    def pack(self) -> bytes:
        return pack_tlv(self.key, self.value)

    @classmethod
    def unpack(cls, data: bytes) -> Tuple[ConfigEntry, int]:
        """Peel one entry; returns (entry, consumed)."""
        key, value, consumed = unpack_tlv(data, error=InvalidConfigEntryFormatError)
        return cls(key=key, value=value), consumed

    @classmethod
    def unpack_list(cls, data: bytes) -> List[ConfigEntry]:
        """Decode entries back to back until the buffer is exhausted."""
        entries = []
        offset = 0
        while offset < len(data):
            entry, consumed = cls.unpack(data[offset:])
            entries.append(entry)
            offset += consumed
        return entries


# =============================================================================
# ConfigSection
# =============================================================================

@dataclass(frozen=True)
class ConfigSection:
    """Ordered configuration entries attached to a record."""
    entries: Tuple[ConfigEntry, ...] = ()

    DISCRIMINATOR: ClassVar[bytes] = CONFIGURATION_DISCRIMINATOR

    def __post_init__(self):
        if not isinstance(self.entries, tuple):
            object.__setattr__(self, "entries", tuple(self.entries))

    @classmethod
    def of(cls, entries: Iterable[ConfigEntry]) -> ConfigSection:
        return cls(entries=tuple(entries))

    def get(self, key: bytes) -> Optional[bytes]:
        """Value of the first entry with this key."""
        for entry in self.entries:
            if entry.key == key:
                return entry.value
        return None

    def payload_len(self) -> int:
        return sum(entry.data_len() for entry in self.entries)

    def data_len(self) -> int:
        return HEADER_SIZE + self.payload_len()

    def pack(self) -> bytes:
        body = b"".join(entry.pack() for entry in self.entries)
        return pack_header(self.DISCRIMINATOR, len(body)) + body

    @classmethod
    def unpack(cls, data: bytes) -> ConfigSection:
        """
        Decode a section that must occupy the whole buffer.

        Raises:
            InvalidConfigFormatError: Wrong tag, short buffer, or trailing
                bytes after the declared length
            InvalidConfigEntryFormatError: An inner entry is malformed
        """
        _, body, consumed = unpack_tlv(
            data, expected_tag=cls.DISCRIMINATOR, error=InvalidConfigFormatError,
        )
        if consumed != len(data):
            raise InvalidConfigFormatError(
                f"declared {consumed}B but section slice is {len(data)}B"
            )
        return cls(entries=tuple(ConfigEntry.unpack_list(body)))

    # =========================================================================
    # Optional section (sentinel aware)
    # =========================================================================

    @staticmethod
    def pack_optional(section: Optional[ConfigSection]) -> bytes:
        if section is None:
            return NO_CONFIGURATION
        return section.pack()

    @staticmethod
    def optional_len(section: Optional[ConfigSection]) -> int:
        if section is None:
            return len(NO_CONFIGURATION)
        return section.data_len()

    @classmethod
    def unpack_optional(cls, data: bytes) -> Tuple[Optional[ConfigSection], int]:
        """
        Decode either the absence sentinel or a full section.

        Returns:
            (None, 1) if the first byte is 0x00, otherwise
            (section, len(data)) for a section spanning the whole slice
        """
        reader = TLVReader(data, InvalidConfigFormatError)
        # Section discriminator never starts with 0x00
        if reader.peek_byte() == NO_CONFIGURATION[0]:
            return None, len(NO_CONFIGURATION)
        return cls.unpack(data), len(data)
