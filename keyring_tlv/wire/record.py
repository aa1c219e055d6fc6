# keyring_tlv/wire/record.py
"""
Keyring TLV Wire Format: Records

A record (keystore entry) wraps one algorithm key and its optional
configuration:

    ┌─────────────────────────────────────────────────────────────────┐
    │ ENTRY_DISCRIMINATOR (8B)        │ entry_len (4B, LE)            │
    ├─────────────────────────────────────────────────────────────────┤
    │ key TLV:  algorithm tag (8B) │ key_len (4B) │ key (key_len)     │
    │ config:   config section  OR  0x00                              │
    └─────────────────────────────────────────────────────────────────┘

entry_len covers everything after itself, so a reader knows where the
record ends before parsing its body.

Example (Curve25519, 32-byte key, no configuration):
    8 + 4 + (8 + 4 + 32) + 1 = 57 bytes
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple

from ..discriminator import ENTRY_DISCRIMINATOR, check_discriminator, lookup_name
from ..errors import InvalidEntryFormatError, InvalidKeyFormatError
from .config import ConfigSection
from .tlv import HEADER_SIZE, pack_header, pack_tlv, unpack_tlv


# =============================================================================
# RecordKey
# =============================================================================

@dataclass(frozen=True)
class RecordKey:
    """
    Key section of a record.

    Attributes:
        discriminator: Algorithm tag (e.g. CURVE25519_DISCRIMINATOR)
        key: Opaque key bytes
    """
    discriminator: bytes
    key: bytes

    def __post_init__(self):
        check_discriminator(self.discriminator, "key discriminator")
        if not isinstance(self.key, (bytes, bytearray)):
            raise ValueError("key must be bytes")
        object.__setattr__(self, "discriminator", bytes(self.discriminator))
        object.__setattr__(self, "key", bytes(self.key))

    def data_len(self) -> int:
        return HEADER_SIZE + len(self.key)

    def pack(self) -> bytes:
        return pack_tlv(self.discriminator, self.key)

    @classmethod
    def unpack(cls, data: bytes) -> Tuple[RecordKey, int]:
        """Peel the key TLV; returns (key, consumed)."""
        tag, key, consumed = unpack_tlv(data, error=InvalidKeyFormatError)
        return cls(discriminator=tag, key=key), consumed


# =============================================================================
# Record
# =============================================================================

@dataclass(frozen=True)
class Record:
    """
    One keystore entry.

    Two records are equal iff algorithm tag, key bytes and configuration
    (including its absence) are all equal.
    """
    key: RecordKey
    config: Optional[ConfigSection] = None

    DISCRIMINATOR: ClassVar[bytes] = ENTRY_DISCRIMINATOR

    @classmethod
    def new(
        cls,
        discriminator: bytes,
        key: bytes,
        config: Optional[ConfigSection] = None,
    ) -> Record:
        return cls(key=RecordKey(discriminator=discriminator, key=key), config=config)

    @property
    def algorithm_name(self) -> Optional[str]:
        return lookup_name(self.key.discriminator)

    def entry_len(self) -> int:
        """Value of the record's length field."""
        return self.key.data_len() + ConfigSection.optional_len(self.config)

    def data_len(self) -> int:
        return HEADER_SIZE + self.entry_len()

    def pack(self) -> bytes:
        return b"".join([
            pack_header(self.DISCRIMINATOR, self.entry_len()),
            self.key.pack(),
            ConfigSection.pack_optional(self.config),
        ])

    @classmethod
    def unpack(cls, data: bytes) -> Tuple[Record, int]:
        """
        Peel one record off the front of `data`.

        Returns:
            (record, consumed) where consumed = 12 + entry_len

        Raises:
            InvalidEntryFormatError: Short buffer, wrong discriminator, or a
                body that key + config do not fill exactly
            InvalidKeyFormatError / InvalidConfigFormatError /
            InvalidConfigEntryFormatError: Malformed inner section
        """
        _, body, entry_end = unpack_tlv(
            data, expected_tag=cls.DISCRIMINATOR, error=InvalidEntryFormatError,
        )

        key, key_end = RecordKey.unpack(body)
        config, config_len = ConfigSection.unpack_optional(body[key_end:])

        if key_end + config_len != len(body):
            raise InvalidEntryFormatError(
                f"entry_len {len(body)}B but key+config span {key_end + config_len}B"
            )

        return cls(key=key, config=config), entry_end

    @classmethod
    def unpack_exact(cls, data: bytes) -> Record:
        """Decode a record that must consume the entire input."""
        record, consumed = cls.unpack(data)
        if consumed != len(data):
            raise InvalidEntryFormatError(
                f"{len(data) - consumed} trailing bytes after record"
            )
        return record

    def __repr__(self) -> str:
        name = self.algorithm_name or self.key.discriminator.hex()
        if self.config is None:
            cfg = "config=None"
        else:
            cfg = f"config={len(self.config.entries)} entries"
        return f"Record({name}, key={self.key.key.hex()[:16]}..., {cfg})"
