# keyring_tlv/discriminator.py
"""
Keyring TLV: Discriminator Scheme

Every TLV section is self-describing: its first 8 bytes are a type tag
derived from a human-readable domain string.

    discriminator = sha256(domain.encode())[:8]

The tags used by the keystore format are listed in KNOWN_DISCRIMINATORS so
the mapping can be audited and tested without any code generation.

Usage:
    from keyring_tlv.discriminator import derive, ENTRY_DISCRIMINATOR

    tag = derive("spl_keyring_program:keystore_entry")
    assert tag == ENTRY_DISCRIMINATOR
"""

from __future__ import annotations

import hashlib
from typing import Dict, Optional


# =============================================================================
# Constants
# =============================================================================

DISCRIMINATOR_SIZE = 8

# Shared by every deployed keystore; changing it changes every tag
NAMESPACE = "spl_keyring_program"


def derive(domain: str) -> bytes:
    """
    Derive an 8-byte discriminator from a domain string.

    Args:
        domain: Human-readable domain, e.g. "spl_keyring_program:keystore_entry"

    Returns:
        First 8 bytes of sha256(domain)
    """
    return hashlib.sha256(domain.encode("utf-8")).digest()[:DISCRIMINATOR_SIZE]


def check_discriminator(value: bytes, what: str = "discriminator") -> None:
    """Raise ValueError unless value is an 8-byte tag."""
    if not isinstance(value, (bytes, bytearray)):
        raise ValueError(f"{what} must be bytes, got {type(value).__name__}")
    if len(value) != DISCRIMINATOR_SIZE:
        raise ValueError(f"{what} must be {DISCRIMINATOR_SIZE}B, got {len(value)}")


# =============================================================================
# Domain Strings
# =============================================================================

ENTRY_DOMAIN = f"{NAMESPACE}:keystore_entry"
CONFIGURATION_DOMAIN = f"{NAMESPACE}:keystore_entry:configuration"


def key_domain(algorithm: str) -> str:
    """Domain string for an algorithm's key TLV."""
    return f"{NAMESPACE}:key:{algorithm}"


def config_field_domain(field: str) -> str:
    """Domain string for a configuration entry key."""
    return f"{NAMESPACE}:configuration:{field}"


# =============================================================================
# Known Discriminators
# =============================================================================

ENTRY_DISCRIMINATOR = derive(ENTRY_DOMAIN)
CONFIGURATION_DISCRIMINATOR = derive(CONFIGURATION_DOMAIN)

CURVE25519_DISCRIMINATOR = derive(key_domain("Curve25519"))
X25519_DISCRIMINATOR = derive(key_domain("X25519"))
ED25519_DISCRIMINATOR = derive(key_domain("Ed25519"))
RSA_DISCRIMINATOR = derive(key_domain("RSA"))
CHACHA20_POLY1305_DISCRIMINATOR = derive(key_domain("ChaCha20Poly1305"))

NONCE_DISCRIMINATOR = derive(config_field_domain("nonce"))
AAD_DISCRIMINATOR = derive(config_field_domain("aad"))

KNOWN_DISCRIMINATORS: Dict[str, bytes] = {
    # Sections
    "entry": ENTRY_DISCRIMINATOR,
    "configuration": CONFIGURATION_DISCRIMINATOR,

    # Algorithm keys
    "key:curve25519": CURVE25519_DISCRIMINATOR,
    "key:x25519": X25519_DISCRIMINATOR,
    "key:ed25519": ED25519_DISCRIMINATOR,
    "key:rsa": RSA_DISCRIMINATOR,
    "key:chacha20-poly1305": CHACHA20_POLY1305_DISCRIMINATOR,

    # Configuration fields
    "configuration:nonce": NONCE_DISCRIMINATOR,
    "configuration:aad": AAD_DISCRIMINATOR,
}

_NAMES_BY_TAG: Dict[bytes, str] = {tag: name for name, tag in KNOWN_DISCRIMINATORS.items()}


def lookup_name(tag: bytes) -> Optional[str]:
    """Reverse lookup of a known discriminator (None if unknown)."""
    return _NAMES_BY_TAG.get(bytes(tag))
