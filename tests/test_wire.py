# tests/test_wire.py
"""
Keyring TLV Wire Format Tests

Discriminators, primitive TLV, configuration sections and records.
"""

import struct

import pytest

from keyring_tlv.discriminator import (
    AAD_DISCRIMINATOR,
    CONFIGURATION_DISCRIMINATOR,
    CURVE25519_DISCRIMINATOR,
    ENTRY_DISCRIMINATOR,
    KNOWN_DISCRIMINATORS,
    NONCE_DISCRIMINATOR,
    RSA_DISCRIMINATOR,
    derive,
    lookup_name,
)
from keyring_tlv.errors import (
    InvalidConfigEntryFormatError,
    InvalidConfigFormatError,
    InvalidEntryFormatError,
    InvalidFormatError,
    InvalidKeyFormatError,
)
from keyring_tlv.wire import (
    HEADER_SIZE,
    NO_CONFIGURATION,
    ConfigEntry,
    ConfigSection,
    Record,
    RecordKey,
    TLVReader,
    pack_header,
    pack_tlv,
    unpack_tlv,
)


def u32(n):
    return struct.pack("<I", n)


def curve_record():
    return Record.new(CURVE25519_DISCRIMINATOR, bytes([6] * 32))


def chacha_config():
    return ConfigSection.of([
        ConfigEntry(NONCE_DISCRIMINATOR, bytes([1] * 12)),
        ConfigEntry(AAD_DISCRIMINATOR, bytes([2] * 12)),
    ])


# =============================================================================
# Discriminators
# =============================================================================

def test_discriminator_vectors():
    assert ENTRY_DISCRIMINATOR == bytes([22, 52, 242, 31, 193, 53, 26, 243])
    assert CONFIGURATION_DISCRIMINATOR == bytes([152, 237, 14, 242, 40, 241, 192, 210])
    assert CURVE25519_DISCRIMINATOR == bytes([91, 118, 136, 53, 132, 35, 78, 142])
    assert RSA_DISCRIMINATOR.hex() == "c90c6ace56c91359"
    assert NONCE_DISCRIMINATOR.hex() == "011e779bf71517fc"


def test_derive_is_deterministic_and_8_bytes():
    tag = derive("spl_keyring_program:keystore_entry")
    assert tag == ENTRY_DISCRIMINATOR
    assert len(derive("anything")) == 8
    assert derive("a") != derive("b")


def test_known_discriminators_are_distinct():
    tags = list(KNOWN_DISCRIMINATORS.values())
    assert len(set(tags)) == len(tags)
    # Sentinel byte must never open a configuration section
    assert CONFIGURATION_DISCRIMINATOR[0] != NO_CONFIGURATION[0]


def test_lookup_name():
    assert lookup_name(ENTRY_DISCRIMINATOR) == "entry"
    assert lookup_name(CURVE25519_DISCRIMINATOR) == "key:curve25519"
    assert lookup_name(bytes(8)) is None


# =============================================================================
# Primitive TLV
# =============================================================================

def test_pack_tlv_layout():
    tag = derive("test")
    assert pack_tlv(tag, b"abc") == tag + b"\x03\x00\x00\x00abc"
    assert pack_tlv(tag, b"") == tag + u32(0)


def test_unpack_tlv_reports_consumed():
    tag = derive("test")
    data = pack_tlv(tag, b"abc") + b"trailing"
    assert unpack_tlv(data) == (tag, b"abc", 15)


def test_unpack_tlv_short_header():
    with pytest.raises(InvalidFormatError):
        unpack_tlv(bytes(11))


def test_unpack_tlv_length_exceeds_buffer():
    data = derive("test") + u32(50) + bytes(10)
    with pytest.raises(InvalidKeyFormatError):
        unpack_tlv(data, error=InvalidKeyFormatError)


def test_unpack_tlv_tag_mismatch():
    data = pack_tlv(derive("a"), b"x")
    with pytest.raises(InvalidEntryFormatError):
        unpack_tlv(data, expected_tag=derive("b"), error=InvalidEntryFormatError)


def test_pack_header_validation():
    with pytest.raises(ValueError):
        pack_header(bytes(7), 0)
    with pytest.raises(ValueError):
        pack_header(bytes(8), 2 ** 32)


def test_reader_bounds():
    reader = TLVReader(b"\x01\x00\x00\x00xy")
    assert reader.read_u32() == 1
    assert reader.remaining == 2
    assert reader.read(2) == b"xy"
    assert reader.at_end
    with pytest.raises(InvalidFormatError):
        reader.read(1)


def test_reader_peek_byte():
    reader = TLVReader(b"\x98\x01", InvalidConfigFormatError)
    assert reader.peek_byte() == 0x98
    assert reader.position == 0
    reader.read(2)
    with pytest.raises(InvalidConfigFormatError):
        reader.peek_byte()


# =============================================================================
# Configuration
# =============================================================================

def test_config_entry_round_trip():
    entry = ConfigEntry(NONCE_DISCRIMINATOR, b"\x09" * 12)
    packed = entry.pack()
    assert len(packed) == entry.data_len() == 24
    assert ConfigEntry.unpack(packed + b"more") == (entry, 24)


def test_config_entry_key_must_be_8_bytes():
    with pytest.raises(ValueError):
        ConfigEntry(b"short", b"")


def test_empty_section_is_header_not_sentinel():
    packed = ConfigSection().pack()
    assert packed == CONFIGURATION_DISCRIMINATOR + u32(0)
    assert len(packed) == HEADER_SIZE
    assert ConfigSection.unpack_optional(packed) == (ConfigSection(), HEADER_SIZE)


def test_sentinel_decodes_as_absent():
    assert ConfigSection.pack_optional(None) == NO_CONFIGURATION
    assert ConfigSection.unpack_optional(b"\x00") == (None, 1)
    assert ConfigSection.unpack_optional(b"\x00\xff") == (None, 1)


def test_missing_section_and_sentinel():
    with pytest.raises(InvalidConfigFormatError):
        ConfigSection.unpack_optional(b"")


def test_section_must_fill_slice():
    packed = chacha_config().pack()
    assert ConfigSection.unpack(packed) == chacha_config()
    with pytest.raises(InvalidConfigFormatError):
        ConfigSection.unpack(packed + b"\x00")


def test_section_wrong_tag():
    with pytest.raises(InvalidConfigFormatError):
        ConfigSection.unpack(pack_tlv(derive("not-config"), b""))


def test_section_bad_inner_entry():
    data = CONFIGURATION_DISCRIMINATOR + u32(5) + bytes(5)
    with pytest.raises(InvalidConfigEntryFormatError):
        ConfigSection.unpack(data)


def test_section_get():
    section = chacha_config()
    assert section.get(AAD_DISCRIMINATOR) == bytes([2] * 12)
    assert section.get(bytes(8)) is None


# =============================================================================
# Records
# =============================================================================

def test_curve_record_layout():
    packed = curve_record().pack()
    assert len(packed) == 57
    assert packed[:8] == ENTRY_DISCRIMINATOR
    assert struct.unpack("<I", packed[8:12])[0] == 45
    assert packed[12:20] == CURVE25519_DISCRIMINATOR
    assert struct.unpack("<I", packed[20:24])[0] == 32
    assert packed[24:56] == bytes([6] * 32)
    assert packed[56:] == NO_CONFIGURATION


def test_record_round_trip_with_config():
    record = Record.new(CURVE25519_DISCRIMINATOR, bytes(32), chacha_config())
    packed = record.pack()
    assert len(packed) == record.data_len() == 12 + 44 + 12 + 48
    assert Record.unpack_exact(packed) == record


def test_empty_config_differs_from_absent():
    absent = Record.new(CURVE25519_DISCRIMINATOR, bytes(32))
    empty = Record.new(CURVE25519_DISCRIMINATOR, bytes(32), ConfigSection())
    assert absent != empty
    assert len(empty.pack()) == len(absent.pack()) + 11
    assert Record.unpack_exact(empty.pack()) == empty


def test_record_unpack_peels_one():
    a = curve_record()
    b = Record.new(RSA_DISCRIMINATOR, bytes(32))
    record, consumed = Record.unpack(a.pack() + b.pack())
    assert record == a
    assert consumed == 57


def test_record_key_round_trip():
    key = RecordKey(RSA_DISCRIMINATOR, bytes(range(64)))
    assert RecordKey.unpack(key.pack()) == (key, 76)


# =============================================================================
# Error localization
# =============================================================================

def test_wrong_entry_discriminator():
    data = CURVE25519_DISCRIMINATOR + curve_record().pack()[8:]
    with pytest.raises(InvalidEntryFormatError):
        Record.unpack(data)


def test_truncated_entry():
    data = ENTRY_DISCRIMINATOR + u32(50) + bytes(10)
    with pytest.raises(InvalidEntryFormatError):
        Record.unpack(data)


def test_malformed_key():
    data = ENTRY_DISCRIMINATOR + u32(5) + bytes(5)
    with pytest.raises(InvalidKeyFormatError):
        Record.unpack(data)


def test_missing_configuration_sentinel():
    body = pack_tlv(CURVE25519_DISCRIMINATOR, bytes(32))
    with pytest.raises(InvalidConfigFormatError):
        Record.unpack(ENTRY_DISCRIMINATOR + u32(len(body)) + body)


def test_malformed_config_entry():
    body = (
        pack_tlv(CURVE25519_DISCRIMINATOR, bytes(32))
        + CONFIGURATION_DISCRIMINATOR + u32(3) + bytes(3)
    )
    with pytest.raises(InvalidConfigEntryFormatError):
        Record.unpack(ENTRY_DISCRIMINATOR + u32(len(body)) + body)


def test_entry_len_not_filled():
    body = pack_tlv(CURVE25519_DISCRIMINATOR, bytes(32)) + b"\x00\x07"
    with pytest.raises(InvalidEntryFormatError):
        Record.unpack(ENTRY_DISCRIMINATOR + u32(len(body)) + body)


def test_unpack_exact_rejects_trailing_bytes():
    with pytest.raises(InvalidEntryFormatError):
        Record.unpack_exact(curve_record().pack() + b"\x00")


def test_error_messages_name_section():
    with pytest.raises(InvalidFormatError) as exc:
        Record.unpack(b"")
    assert str(exc.value).startswith("Invalid format for keystore entry: Entry")
    assert str(InvalidConfigEntryFormatError()) == "Invalid format for keystore entry: Config Entry"
