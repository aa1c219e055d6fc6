# keyring_tlv/config.py
"""
Keyring TLV Configuration

Parameters of the host ledger the keyring lives on: which program owns the
slots, how slot addresses are seeded, rent exemption, and how far a slot may
grow in a single resize.

Usage:
    from keyring_tlv.config import DEFAULT_CONFIG

    DEFAULT_CONFIG.minimum_balance(57)       # lamports to hold 57 bytes
    cfg = DEFAULT_CONFIG.with_overrides(max_data_increase=1024)
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace


# =============================================================================
# Constants
# =============================================================================

# "keyring-tlv-program1" as a 20-byte address
DEFAULT_PROGRAM_ID = "0x6b657972696e672d746c762d70726f6772616d31"

SEED_PREFIX = "keyring"

# Rent exemption: (overhead + space) * lamports_per_byte_year * threshold
ACCOUNT_STORAGE_OVERHEAD = 128
LAMPORTS_PER_BYTE_YEAR = 3480
EXEMPTION_THRESHOLD = 2.0

# Max bytes a slot may grow by in one resize
MAX_DATA_INCREASE = 10 * 1024


# =============================================================================
# KeyringConfig
# =============================================================================

@dataclass(frozen=True)
class KeyringConfig:
    """Ledger parameters for keyring slots."""
    program_id: str = DEFAULT_PROGRAM_ID
    seed_prefix: str = SEED_PREFIX
    account_storage_overhead: int = ACCOUNT_STORAGE_OVERHEAD
    lamports_per_byte_year: int = LAMPORTS_PER_BYTE_YEAR
    exemption_threshold: float = EXEMPTION_THRESHOLD
    max_data_increase: int = MAX_DATA_INCREASE

    def __post_init__(self):
        if not (self.program_id.startswith("0x") and len(self.program_id) == 42):
            raise ValueError(f"program_id must be a 20-byte 0x address, got {self.program_id!r}")
        if not self.seed_prefix:
            raise ValueError("seed_prefix must not be empty")
        if self.max_data_increase <= 0:
            raise ValueError(f"max_data_increase must be > 0, got {self.max_data_increase}")
        if self.lamports_per_byte_year < 0 or self.exemption_threshold < 0:
            raise ValueError("rent parameters must be non-negative")

    def minimum_balance(self, space: int) -> int:
        """Lamports an account needs to hold `space` bytes rent-free."""
        per_year = (self.account_storage_overhead + space) * self.lamports_per_byte_year
        return int(per_year * self.exemption_threshold)

    def with_overrides(self, **overrides) -> KeyringConfig:
        """Copy with some fields replaced (unknown names raise ValueError)."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown config fields: {sorted(unknown)}. Valid: {sorted(known)}")
        return replace(self, **overrides)


DEFAULT_CONFIG = KeyringConfig()
