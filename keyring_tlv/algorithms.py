# keyring_tlv/algorithms.py
"""
Keyring TLV Recognized Algorithms

Defines the encryption algorithms a keystore record can carry. Each
algorithm has a fixed key length, a key discriminator and (optionally) a
fixed list of configuration fields.

Algorithm Selection:
    - curve25519:        32-byte key, no configuration
    - x25519:            32-byte key, no configuration
    - ed25519:           32-byte key, no configuration
    - rsa:               32-byte key, no configuration
    - chacha20-poly1305: 32-byte key, configuration: nonce (12B), aad (12B)

The set is closed: EncryptionKey has one subclass per algorithm and
from_record() dispatches on the key discriminator through a table that
covers every entry in ALGORITHMS.

Usage:
    from keyring_tlv.algorithms import Curve25519, ChaCha20Poly1305, from_record

    record = Curve25519(bytes(32)).to_record()
    key = from_record(record)         # Curve25519(...)

    record = ChaCha20Poly1305(key=k, nonce=n, aad=a).to_record()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Dict, Optional, Tuple, Type

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519, x25519

from .discriminator import config_field_domain, derive, key_domain
from .errors import InvalidConfigFormatError, InvalidKeyFormatError, UnknownAlgorithmError
from .wire import ConfigEntry, ConfigSection, Record


# =============================================================================
# Algorithm Definitions
# =============================================================================

@dataclass(frozen=True)
class ConfigField:
    """Fixed-size configuration field of an algorithm."""
    name: str
    length: int

    @property
    def discriminator(self) -> bytes:
        return derive(config_field_domain(self.name))


@dataclass(frozen=True)
class AlgorithmSpec:
    """Recognized encryption algorithm."""
    name: str
    label: str                    # Used in the key domain string
    key_length: int
    config_fields: Tuple[ConfigField, ...]
    description: str

    @property
    def discriminator(self) -> bytes:
        return derive(key_domain(self.label))

    @property
    def has_config(self) -> bool:
        return bool(self.config_fields)


NONCE_SIZE = 12
AAD_SIZE = 12

ALGORITHMS: Dict[str, AlgorithmSpec] = {
    "curve25519": AlgorithmSpec(
        name="curve25519",
        label="Curve25519",
        key_length=32,
        config_fields=(),
        description="Curve25519 public key",
    ),
    "x25519": AlgorithmSpec(
        name="x25519",
        label="X25519",
        key_length=32,
        config_fields=(),
        description="X25519 key-agreement public key",
    ),
    "ed25519": AlgorithmSpec(
        name="ed25519",
        label="Ed25519",
        key_length=32,
        config_fields=(),
        description="Ed25519 public key",
    ),
    "rsa": AlgorithmSpec(
        name="rsa",
        label="RSA",
        key_length=32,
        config_fields=(),
        description="RSA public key material (32 bytes)",
    ),
    "chacha20-poly1305": AlgorithmSpec(
        name="chacha20-poly1305",
        label="ChaCha20Poly1305",
        key_length=32,
        config_fields=(
            ConfigField("nonce", NONCE_SIZE),
            ConfigField("aad", AAD_SIZE),
        ),
        description="ChaCha20-Poly1305 key with nonce and associated data",
    ),
}

_ALGORITHMS_BY_TAG: Dict[bytes, AlgorithmSpec] = {
    spec.discriminator: spec for spec in ALGORITHMS.values()
}


def get_algorithm(name: str) -> AlgorithmSpec:
    """
    Get algorithm by name.

    Raises:
        UnknownAlgorithmError: If name is not recognized
    """
    if name not in ALGORITHMS:
        raise UnknownAlgorithmError(f"{name!r}. Valid: {list(ALGORITHMS.keys())}")
    return ALGORITHMS[name]


def get_algorithm_by_discriminator(tag: bytes) -> AlgorithmSpec:
    """Get algorithm by key discriminator."""
    spec = _ALGORITHMS_BY_TAG.get(bytes(tag))
    if spec is None:
        raise UnknownAlgorithmError(f"key discriminator {bytes(tag).hex()}")
    return spec


def get_key_length(name: str) -> int:
    """Get key length for algorithm."""
    return get_algorithm(name).key_length


# =============================================================================
# Encryption Keys (tagged variant)
# =============================================================================

@dataclass(frozen=True)
class EncryptionKey:
    """Base of the recognized-algorithm variants."""
    key: bytes

    ALGORITHM: ClassVar[str] = ""

    @classmethod
    def spec(cls) -> AlgorithmSpec:
        return get_algorithm(cls.ALGORITHM)

    def __post_init__(self):
        spec = self.spec()
        if len(self.key) != spec.key_length:
            raise ValueError(f"{spec.name} key must be {spec.key_length}B, got {len(self.key)}")
        object.__setattr__(self, "key", bytes(self.key))
        for field_def, value in zip(spec.config_fields, self.config_values()):
            if len(value) != field_def.length:
                raise ValueError(
                    f"{spec.name} {field_def.name} must be {field_def.length}B, got {len(value)}"
                )

    def config_values(self) -> Tuple[bytes, ...]:
        """Configuration values in config_fields order."""
        return ()

    def to_config(self) -> Optional[ConfigSection]:
        spec = self.spec()
        if not spec.has_config:
            return None
        return ConfigSection.of(
            ConfigEntry(key=field_def.discriminator, value=value)
            for field_def, value in zip(spec.config_fields, self.config_values())
        )

    def to_record(self) -> Record:
        return Record.new(self.spec().discriminator, self.key, self.to_config())

    def pack(self) -> bytes:
        """Encoded record."""
        return self.to_record().pack()


@dataclass(frozen=True)
class _X25519Key(EncryptionKey):
    """Keys that round-trip through cryptography's X25519PublicKey."""

    @classmethod
    def from_public_key(cls, public_key: x25519.X25519PublicKey):
        return cls(public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        ))

    def public_key(self) -> x25519.X25519PublicKey:
        return x25519.X25519PublicKey.from_public_bytes(self.key)


@dataclass(frozen=True)
class Curve25519(_X25519Key):
    """Curve25519 encryption algorithm."""
    ALGORITHM: ClassVar[str] = "curve25519"


@dataclass(frozen=True)
class X25519(_X25519Key):
    """X25519 encryption algorithm."""
    ALGORITHM: ClassVar[str] = "x25519"


@dataclass(frozen=True)
class Ed25519(EncryptionKey):
    """Ed25519 algorithm."""
    ALGORITHM: ClassVar[str] = "ed25519"

    @classmethod
    def from_public_key(cls, public_key: ed25519.Ed25519PublicKey) -> Ed25519:
        return cls(public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        ))

    def public_key(self) -> ed25519.Ed25519PublicKey:
        return ed25519.Ed25519PublicKey.from_public_bytes(self.key)


@dataclass(frozen=True)
class Rsa(EncryptionKey):
    """RSA encryption algorithm."""
    ALGORITHM: ClassVar[str] = "rsa"


@dataclass(frozen=True)
class ChaCha20Poly1305(EncryptionKey):
    """
    ChaCha20-Poly1305 encryption algorithm.

    Attributes:
        key: 32-byte key
        nonce: 12-byte nonce used for encryption
        aad: 12-byte associated data used for encryption
    """
    nonce: bytes
    aad: bytes

    ALGORITHM: ClassVar[str] = "chacha20-poly1305"

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "nonce", bytes(self.nonce))
        object.__setattr__(self, "aad", bytes(self.aad))

    def config_values(self) -> Tuple[bytes, ...]:
        return (self.nonce, self.aad)


_VARIANTS: Dict[str, Type[EncryptionKey]] = {
    "curve25519": Curve25519,
    "x25519": X25519,
    "ed25519": Ed25519,
    "rsa": Rsa,
    "chacha20-poly1305": ChaCha20Poly1305,
}


# =============================================================================
# Record Conversion
# =============================================================================

def _read_config(spec: AlgorithmSpec, config: Optional[ConfigSection]) -> Tuple[bytes, ...]:
    if not spec.has_config:
        if config is not None:
            raise InvalidConfigFormatError(f"{spec.name} takes no configuration")
        return ()

    if config is None:
        raise InvalidConfigFormatError(f"missing required configuration for {spec.name}")
    if len(config.entries) != len(spec.config_fields):
        raise InvalidConfigFormatError(
            f"{spec.name} expects {len(spec.config_fields)} entries, got {len(config.entries)}"
        )

    values = []
    for field_def, entry in zip(spec.config_fields, config.entries):
        if entry.key != field_def.discriminator:
            raise InvalidConfigFormatError(f"expected {field_def.name} entry for {spec.name}")
        if len(entry.value) != field_def.length:
            raise InvalidConfigFormatError(
                f"{field_def.name} must be {field_def.length}B, got {len(entry.value)}"
            )
        values.append(entry.value)
    return tuple(values)


def from_record(record: Record) -> EncryptionKey:
    """
    Convert a record to its recognized algorithm.

    Raises:
        UnknownAlgorithmError: Key discriminator not in ALGORITHMS
        InvalidKeyFormatError: Key length does not match the algorithm
        InvalidConfigFormatError: Configuration does not match the algorithm
    """
    spec = get_algorithm_by_discriminator(record.key.discriminator)
    if len(record.key.key) != spec.key_length:
        raise InvalidKeyFormatError(
            f"{spec.name} key must be {spec.key_length}B, got {len(record.key.key)}"
        )
    values = _read_config(spec, record.config)
    return _VARIANTS[spec.name](record.key.key, *values)


def create_key(name: str, key: bytes, **config) -> EncryptionKey:
    """
    Build an EncryptionKey by algorithm name.

    Args:
        name: Algorithm name (see ALGORITHMS)
        key: Key bytes
        **config: Configuration fields by name (e.g. nonce=..., aad=...)
    """
    spec = get_algorithm(name)
    expected = [field_def.name for field_def in spec.config_fields]
    if sorted(config) != sorted(expected):
        raise ValueError(f"{name} expects configuration {expected}, got {sorted(config)}")
    return _VARIANTS[name](key, *(config[field_name] for field_name in expected))
