# keyring_tlv/ledger/__init__.py
"""
Keyring TLV Ledger Layer

In-memory host for keyring slots: program-owned accounts with rent,
signed instructions and an owner-side client.

Components:
    MemoryLedger / AccountSlot: Accounts, rent, resize limits, rollback
    Instruction: CreateKeyring / AddEntry / RemoveEntry codec + signing
    KeyringProcessor: Verifies and executes instructions
    KeyringClient: Owner API (create, add, remove, read back)

Usage:
    from eth_account import Account
    from keyring_tlv.ledger import KeyringClient, KeyringProcessor, MemoryLedger

    ledger = MemoryLedger()
    client = KeyringClient(KeyringProcessor(ledger), Account.create())
    client.fund(10_000_000)
    client.create_keyring()
    client.add_entry(record)
"""

from .address import (
    address_bytes,
    keyring_seeds,
    derive_keyring_address,
    check_keyring_address,
)

from .ledger import (
    MemoryLedger,
    LedgerAccount,
    AccountSlot,
    SYSTEM_PROGRAM_ID,
    LedgerError,
    AccountNotFoundError,
    AccountAlreadyExistsError,
    InsufficientFundsError,
    IllegalOwnerError,
    DataIncreaseTooLargeError,
    SlotSizeMismatchError,
)

from .instruction import (
    Instruction,
    KeyringInstruction,
    InvalidInstructionError,
    sign_instruction,
    recover_signer,
)

from .processor import (
    KeyringProcessor,
    InvalidSeedsError,
    MissingRequiredSignatureError,
)

from .client import KeyringClient

__all__ = [
    # Address
    "address_bytes",
    "keyring_seeds",
    "derive_keyring_address",
    "check_keyring_address",
    # Ledger
    "MemoryLedger",
    "LedgerAccount",
    "AccountSlot",
    "SYSTEM_PROGRAM_ID",
    "LedgerError",
    "AccountNotFoundError",
    "AccountAlreadyExistsError",
    "InsufficientFundsError",
    "IllegalOwnerError",
    "DataIncreaseTooLargeError",
    "SlotSizeMismatchError",
    # Instruction
    "Instruction",
    "KeyringInstruction",
    "InvalidInstructionError",
    "sign_instruction",
    "recover_signer",
    # Processor
    "KeyringProcessor",
    "InvalidSeedsError",
    "MissingRequiredSignatureError",
    # Client
    "KeyringClient",
]
