# keyring_tlv/ledger/address.py
"""
Keyring Ledger: Slot Address Derivation

Each owner has exactly one keyring slot, at an address derived from the
program id, a fixed seed prefix and the owner's address:

    keyring = keccak256(program_id ++ "keyring" ++ owner)[-20:]

Uses keccak256 to match EVM address conventions.
"""

from __future__ import annotations

from typing import List

from web3 import Web3

from ..config import DEFAULT_CONFIG, KeyringConfig


def address_bytes(address: str) -> bytes:
    """20 raw bytes of a 0x-prefixed address."""
    raw = bytes.fromhex(address[2:] if address.startswith("0x") else address)
    if len(raw) != 20:
        raise ValueError(f"address must be 20 bytes, got {len(raw)}")
    return raw


def keyring_seeds(owner: str, config: KeyringConfig = DEFAULT_CONFIG) -> List[bytes]:
    """Seeds for an owner's keyring slot."""
    return [config.seed_prefix.encode("utf-8"), address_bytes(owner)]


def derive_keyring_address(owner: str, config: KeyringConfig = DEFAULT_CONFIG) -> str:
    """
    Derive the keyring slot address for an owner.

    Args:
        owner: Owner (authority) address
        config: Supplies program_id and seed_prefix

    Returns:
        Checksum address of the keyring slot
    """
    preimage = address_bytes(config.program_id) + b"".join(keyring_seeds(owner, config))
    digest = Web3.keccak(preimage)
    return Web3.to_checksum_address("0x" + bytes(digest[-20:]).hex())


def check_keyring_address(
    owner: str,
    keyring: str,
    config: KeyringConfig = DEFAULT_CONFIG,
) -> bool:
    """True if `keyring` is the slot address derived for `owner`."""
    return derive_keyring_address(owner, config).lower() == keyring.lower()
