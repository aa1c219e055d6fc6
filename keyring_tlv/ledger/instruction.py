# keyring_tlv/ledger/instruction.py
"""
Keyring Ledger: Instructions

Wire Format:
    ┌──────────────┬────────────────┬──────────────────┬─────────────────┐
    │ variant (1B) │ keyring (20B)  │ authority (20B)  │ data (variable) │
    └──────────────┴────────────────┴──────────────────┴─────────────────┘

Variants:
    0x00 CREATE_KEYRING   data empty
    0x01 ADD_ENTRY        data = one encoded record
    0x02 REMOVE_ENTRY     data = one encoded record

The authority signs keccak256(program_id ++ instruction) with its
Ethereum account (see signing_message()).
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

from eth_account import Account
from eth_account.messages import encode_defunct
from web3 import Web3

from ..config import DEFAULT_CONFIG, KeyringConfig
from .address import address_bytes, derive_keyring_address
from .ledger import LedgerError


ADDRESS_SIZE = 20
INSTRUCTION_HEADER_SIZE = 1 + ADDRESS_SIZE + ADDRESS_SIZE  # 41 bytes


# =============================================================================
# Exceptions
# =============================================================================

class InvalidInstructionError(LedgerError):
    """Instruction bytes cannot be decoded."""
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Invalid instruction data: {detail}")


# =============================================================================
# Instruction
# =============================================================================

class KeyringInstruction(IntEnum):
    """Keyring program instruction variants."""
    CREATE_KEYRING = 0x00
    ADD_ENTRY = 0x01
    REMOVE_ENTRY = 0x02


@dataclass(frozen=True)
class Instruction:
    """
    Decoded keyring instruction.

    Attributes:
        variant: Instruction variant
        keyring: Keyring slot address
        authority: Owner address that must sign
        data: Variant payload (encoded record for ADD/REMOVE)
    """
    variant: KeyringInstruction
    keyring: str
    authority: str
    data: bytes = b""

    def __post_init__(self):
        if self.variant == KeyringInstruction.CREATE_KEYRING and self.data:
            raise ValueError("CREATE_KEYRING takes no data")

    @property
    def name(self) -> str:
        return "".join(part.capitalize() for part in self.variant.name.split("_"))

    def pack(self) -> bytes:
        return b"".join([
            struct.pack(">B", self.variant),
            address_bytes(self.keyring),
            address_bytes(self.authority),
            bytes(self.data),
        ])

    @classmethod
    def unpack(cls, data: bytes) -> Instruction:
        if len(data) < INSTRUCTION_HEADER_SIZE:
            raise InvalidInstructionError(
                f"need {INSTRUCTION_HEADER_SIZE}B, got {len(data)}B"
            )
        try:
            variant = KeyringInstruction(data[0])
        except ValueError:
            raise InvalidInstructionError(f"unknown variant 0x{data[0]:02x}")

        keyring = Web3.to_checksum_address("0x" + data[1:21].hex())
        authority = Web3.to_checksum_address("0x" + data[21:41].hex())
        payload = bytes(data[INSTRUCTION_HEADER_SIZE:])

        if variant == KeyringInstruction.CREATE_KEYRING and payload:
            raise InvalidInstructionError("CREATE_KEYRING takes no data")
        if variant != KeyringInstruction.CREATE_KEYRING and not payload:
            raise InvalidInstructionError(f"{variant.name} requires a record")

        return cls(variant=variant, keyring=keyring, authority=authority, data=payload)


# =============================================================================
# Builders
# =============================================================================

def create_keyring(authority: str, config: KeyringConfig = DEFAULT_CONFIG) -> Instruction:
    """Build a CREATE_KEYRING instruction."""
    return Instruction(
        variant=KeyringInstruction.CREATE_KEYRING,
        keyring=derive_keyring_address(authority, config),
        authority=authority,
    )


def add_entry(
    authority: str,
    record_bytes: bytes,
    config: KeyringConfig = DEFAULT_CONFIG,
) -> Instruction:
    """Build an ADD_ENTRY instruction."""
    return Instruction(
        variant=KeyringInstruction.ADD_ENTRY,
        keyring=derive_keyring_address(authority, config),
        authority=authority,
        data=record_bytes,
    )


def remove_entry(
    authority: str,
    record_bytes: bytes,
    config: KeyringConfig = DEFAULT_CONFIG,
) -> Instruction:
    """Build a REMOVE_ENTRY instruction."""
    return Instruction(
        variant=KeyringInstruction.REMOVE_ENTRY,
        keyring=derive_keyring_address(authority, config),
        authority=authority,
        data=record_bytes,
    )


# =============================================================================
# Signing
# =============================================================================

def signing_message(instruction_bytes: bytes, config: KeyringConfig = DEFAULT_CONFIG) -> bytes:
    """Digest the authority signs: keccak256(program_id ++ instruction)."""
    return bytes(Web3.keccak(address_bytes(config.program_id) + instruction_bytes))


def sign_instruction(
    instruction_bytes: bytes,
    private_key,
    config: KeyringConfig = DEFAULT_CONFIG,
) -> bytes:
    """
    Sign packed instruction bytes.

    Args:
        instruction_bytes: Instruction.pack() output
        private_key: Hex key, bytes or LocalAccount

    Returns:
        65-byte signature (r || s || v)
    """
    message = encode_defunct(primitive=signing_message(instruction_bytes, config))
    if hasattr(private_key, "sign_message"):
        signed = private_key.sign_message(message)
    else:
        signed = Account.sign_message(message, private_key=private_key)
    return bytes(signed.signature)


def recover_signer(
    instruction_bytes: bytes,
    signature: bytes,
    config: KeyringConfig = DEFAULT_CONFIG,
) -> str:
    """Address that produced `signature` over the instruction."""
    message = encode_defunct(primitive=signing_message(instruction_bytes, config))
    return Account.recover_message(message, signature=signature)
