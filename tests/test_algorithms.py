# tests/test_algorithms.py
"""
Recognized Algorithm Tests

Variant ↔ record conversion and cryptography key interop.
"""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519, x25519

from keyring_tlv.algorithms import (
    ALGORITHMS,
    ChaCha20Poly1305,
    Curve25519,
    Ed25519,
    Rsa,
    X25519,
    create_key,
    from_record,
    get_algorithm,
    get_key_length,
)
from keyring_tlv.discriminator import (
    AAD_DISCRIMINATOR,
    CHACHA20_POLY1305_DISCRIMINATOR,
    CURVE25519_DISCRIMINATOR,
    NONCE_DISCRIMINATOR,
    RSA_DISCRIMINATOR,
    derive,
)
from keyring_tlv.errors import (
    InvalidConfigFormatError,
    InvalidKeyFormatError,
    UnknownAlgorithmError,
)
from keyring_tlv.wire import ConfigEntry, ConfigSection, Record


NONCE = bytes([1] * 12)
AAD = bytes([2] * 12)


def raw(public_key):
    return public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


# =============================================================================
# Definitions
# =============================================================================

def test_algorithm_table():
    assert set(ALGORITHMS) == {"curve25519", "x25519", "ed25519", "rsa", "chacha20-poly1305"}
    assert get_key_length("rsa") == 32
    assert get_key_length("curve25519") == 32
    assert get_algorithm("curve25519").discriminator == CURVE25519_DISCRIMINATOR


def test_unknown_algorithm_name():
    with pytest.raises(UnknownAlgorithmError):
        get_algorithm("aes")


# =============================================================================
# Variant → Record
# =============================================================================

def test_curve25519_record():
    key = Curve25519(bytes([6] * 32))
    assert key.to_record() == Record.new(CURVE25519_DISCRIMINATOR, bytes([6] * 32))
    assert len(key.pack()) == 57


def test_chacha_record_carries_nonce_and_aad():
    key = ChaCha20Poly1305(key=bytes(32), nonce=NONCE, aad=AAD)
    record = key.to_record()
    assert record.key.discriminator == CHACHA20_POLY1305_DISCRIMINATOR
    assert [entry.key for entry in record.config.entries] == [NONCE_DISCRIMINATOR, AAD_DISCRIMINATOR]
    assert record.config.get(NONCE_DISCRIMINATOR) == NONCE
    assert record.config.get(AAD_DISCRIMINATOR) == AAD


def test_key_length_enforced():
    with pytest.raises(ValueError):
        Curve25519(bytes(31))
    with pytest.raises(ValueError):
        Rsa(bytes(64))
    with pytest.raises(ValueError):
        ChaCha20Poly1305(key=bytes(32), nonce=bytes(11), aad=AAD)


# =============================================================================
# Record → Variant
# =============================================================================

@pytest.mark.parametrize("key", [
    Curve25519(bytes([3] * 32)),
    X25519(bytes([4] * 32)),
    Ed25519(bytes([5] * 32)),
    Rsa(bytes(range(32))),
    ChaCha20Poly1305(key=bytes([9] * 32), nonce=NONCE, aad=AAD),
])
def test_from_record(key):
    converted = from_record(Record.unpack_exact(key.pack()))
    assert converted == key
    assert type(converted) is type(key)


def test_from_record_unknown_tag():
    record = Record.new(derive("spl_keyring_program:key:AES"), bytes(32))
    with pytest.raises(UnknownAlgorithmError):
        from_record(record)


def test_from_record_wrong_key_length():
    record = Record.new(CURVE25519_DISCRIMINATOR, bytes(16))
    with pytest.raises(InvalidKeyFormatError):
        from_record(record)


def test_from_record_rsa_32_byte_key():
    record = Record.new(RSA_DISCRIMINATOR, bytes([7] * 32))
    assert from_record(record) == Rsa(bytes([7] * 32))
    with pytest.raises(InvalidKeyFormatError):
        from_record(Record.new(RSA_DISCRIMINATOR, bytes(64)))


def test_from_record_missing_config():
    record = Record.new(CHACHA20_POLY1305_DISCRIMINATOR, bytes(32))
    with pytest.raises(InvalidConfigFormatError):
        from_record(record)


def test_from_record_unexpected_config():
    record = Record.new(CURVE25519_DISCRIMINATOR, bytes(32), ConfigSection())
    with pytest.raises(InvalidConfigFormatError):
        from_record(record)


def test_from_record_wrong_config_field():
    config = ConfigSection.of([
        ConfigEntry(AAD_DISCRIMINATOR, AAD),
        ConfigEntry(NONCE_DISCRIMINATOR, NONCE),
    ])
    record = Record.new(CHACHA20_POLY1305_DISCRIMINATOR, bytes(32), config)
    with pytest.raises(InvalidConfigFormatError):
        from_record(record)


# =============================================================================
# create_key
# =============================================================================

def test_create_key():
    assert create_key("rsa", bytes(32)) == Rsa(bytes(32))
    key = create_key("chacha20-poly1305", bytes(32), nonce=NONCE, aad=AAD)
    assert key == ChaCha20Poly1305(key=bytes(32), nonce=NONCE, aad=AAD)


def test_create_key_config_mismatch():
    with pytest.raises(ValueError):
        create_key("chacha20-poly1305", bytes(32), nonce=NONCE)
    with pytest.raises(ValueError):
        create_key("curve25519", bytes(32), nonce=NONCE)


# =============================================================================
# cryptography interop
# =============================================================================

def test_x25519_public_key_round_trip():
    private = x25519.X25519PrivateKey.from_private_bytes(bytes(range(32)))
    key = X25519.from_public_key(private.public_key())
    assert key.key == raw(private.public_key())
    assert raw(key.public_key()) == key.key


def test_curve25519_uses_x25519_keys():
    private = x25519.X25519PrivateKey.from_private_bytes(bytes(range(1, 33)))
    key = Curve25519.from_public_key(private.public_key())
    assert isinstance(key, Curve25519)
    assert raw(key.public_key()) == raw(private.public_key())


def test_ed25519_public_key_round_trip():
    private = ed25519.Ed25519PrivateKey.from_private_bytes(bytes(range(32)))
    key = Ed25519.from_public_key(private.public_key())
    assert raw(key.public_key()) == raw(private.public_key())

    signature = private.sign(b"message")
    key.public_key().verify(signature, b"message")
