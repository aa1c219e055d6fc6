# keyring_tlv/__init__.py
"""
Keyring TLV: Encryption Keystore Registry

Per-owner registry of encryption keys stored in a single byte slot,
encoded with a nested Type-Length-Value format.

- 8-byte sha256 discriminators derived from domain strings
- Record = entry header + key TLV + optional configuration (0x00 if absent)
- Registry = flat concatenation of records
- Add / remove as read-modify-write over a resizable storage slot
- Recognized algorithms (Curve25519, X25519, Ed25519, RSA, ChaCha20-Poly1305)
- In-memory ledger host with rent, signed instructions and rollback

Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │  keyring_tlv                                            │
    │  ├── discriminator.py  # Tag derivation, known tags     │
    │  ├── errors.py         # Error taxonomy                 │
    │  ├── config.py         # Ledger parameters              │
    │  ├── algorithms.py     # Recognized algorithms          │
    │  │                                                      │
    │  ├── wire/             # TLV codec                      │
    │  │   ├── tlv.py        # Primitive triple               │
    │  │   ├── config.py     # Config entries / section       │
    │  │   └── record.py     # Record                         │
    │  │                                                      │
    │  ├── registry/         # Sequence + mutation protocol   │
    │  │   ├── keystore.py   # Registry, add / remove         │
    │  │   └── mutation.py   # StorageSlot, apply_add/remove  │
    │  │                                                      │
    │  ├── ledger/           # In-memory host                 │
    │  │   ├── ledger.py     # Accounts, rent, rollback       │
    │  │   ├── instruction.py # Signed instructions           │
    │  │   ├── processor.py  # Keyring program               │
    │  │   └── client.py     # Owner client                   │
    │  │                                                      │
    │  └── cli.py            # keyring-tlv command            │
    └─────────────────────────────────────────────────────────┘
"""

__version__ = "0.1.0"

# =============================================================================
# Discriminators & Errors
# =============================================================================

from .discriminator import (
    derive,
    DISCRIMINATOR_SIZE,
    ENTRY_DISCRIMINATOR,
    CONFIGURATION_DISCRIMINATOR,
    KNOWN_DISCRIMINATORS,
)

from .errors import (
    KeyringError,
    InvalidFormatError,
    InvalidEntryFormatError,
    InvalidKeyFormatError,
    InvalidConfigFormatError,
    InvalidConfigEntryFormatError,
    EntryNotFoundError,
    UnknownAlgorithmError,
)

from .config import KeyringConfig, DEFAULT_CONFIG

# =============================================================================
# Codec & Registry
# =============================================================================

from .wire import (
    ConfigEntry,
    ConfigSection,
    Record,
    RecordKey,
    pack_tlv,
    unpack_tlv,
)

from .registry import (
    Registry,
    encode_registry,
    decode_registry,
    add_entry,
    remove_entry,
    StorageSlot,
    MemorySlot,
    apply_add,
    apply_remove,
)

# =============================================================================
# Algorithms
# =============================================================================

from .algorithms import (
    ALGORITHMS,
    EncryptionKey,
    Curve25519,
    X25519,
    Ed25519,
    Rsa,
    ChaCha20Poly1305,
    create_key,
    from_record,
    get_algorithm,
)

__all__ = [
    "__version__",
    # Discriminators
    "derive",
    "DISCRIMINATOR_SIZE",
    "ENTRY_DISCRIMINATOR",
    "CONFIGURATION_DISCRIMINATOR",
    "KNOWN_DISCRIMINATORS",
    # Errors
    "KeyringError",
    "InvalidFormatError",
    "InvalidEntryFormatError",
    "InvalidKeyFormatError",
    "InvalidConfigFormatError",
    "InvalidConfigEntryFormatError",
    "EntryNotFoundError",
    "UnknownAlgorithmError",
    # Config
    "KeyringConfig",
    "DEFAULT_CONFIG",
    # Wire
    "ConfigEntry",
    "ConfigSection",
    "Record",
    "RecordKey",
    "pack_tlv",
    "unpack_tlv",
    # Registry
    "Registry",
    "encode_registry",
    "decode_registry",
    "add_entry",
    "remove_entry",
    "StorageSlot",
    "MemorySlot",
    "apply_add",
    "apply_remove",
    # Algorithms
    "ALGORITHMS",
    "EncryptionKey",
    "Curve25519",
    "X25519",
    "Ed25519",
    "Rsa",
    "ChaCha20Poly1305",
    "create_key",
    "from_record",
    "get_algorithm",
]
