# keyring_tlv/errors.py
"""
Keyring TLV: Error Taxonomy

Every failure raised by the codec and the registry mutation protocol is a
subclass of KeyringError. Format errors are reported per structural level
so callers can tell which section of a buffer was malformed:

    InvalidEntryFormatError        record header / record framing
    InvalidKeyFormatError          key TLV inside a record
    InvalidConfigFormatError       configuration section (or sentinel)
    InvalidConfigEntryFormatError  single configuration entry

None of these are transient; nothing in the core retries.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Base
# =============================================================================

class KeyringError(Exception):
    """Base keyring error."""
    pass


# =============================================================================
# Format Errors
# =============================================================================

class InvalidFormatError(KeyringError):
    """Buffer does not match the expected TLV layout."""

    section = "TLV"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        message = f"Invalid format for keystore entry: {self.section}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class InvalidEntryFormatError(InvalidFormatError):
    """Record header, discriminator or framing is malformed."""
    section = "Entry"


class InvalidKeyFormatError(InvalidFormatError):
    """Key TLV inside a record is malformed."""
    section = "Key"


class InvalidConfigFormatError(InvalidFormatError):
    """Configuration section (or its absence sentinel) is malformed."""
    section = "Config"


class InvalidConfigEntryFormatError(InvalidFormatError):
    """Single configuration entry is malformed."""
    section = "Config Entry"


# =============================================================================
# Lookup Errors
# =============================================================================

class EntryNotFoundError(KeyringError):
    """Remove requested against an empty keystore."""
    def __init__(self):
        super().__init__("Keystore entry not found")


class UnknownAlgorithmError(KeyringError):
    """Algorithm name or key discriminator is not recognized."""
    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Unrecognized encryption algorithm: {identifier}")
