# keyring_tlv/ledger/client.py
"""
Keyring Ledger: Client

High-level API for an owner managing their keyring slot.
Builds, signs and submits instructions, and reads the slot back.

Usage:
    from eth_account import Account
    from keyring_tlv.ledger import KeyringClient, KeyringProcessor, MemoryLedger

    ledger = MemoryLedger()
    client = KeyringClient(KeyringProcessor(ledger), Account.create())
    client.fund(10_000_000)

    client.create_keyring()
    client.add_entry(Curve25519(public_key_bytes))
    keys = client.get_keys()            # [Curve25519(...)]
"""

from __future__ import annotations

import logging
from typing import List, Union

from eth_account.signers.local import LocalAccount

from ..algorithms import EncryptionKey, from_record
from ..registry import Registry, decode_registry
from ..wire import Record
from . import instruction as ix
from .address import derive_keyring_address
from .processor import KeyringProcessor


logger = logging.getLogger("keyring-tlv.client")

Entry = Union[Record, EncryptionKey]


def _as_record(entry: Entry) -> Record:
    if isinstance(entry, EncryptionKey):
        return entry.to_record()
    if isinstance(entry, Record):
        return entry
    raise TypeError(f"entry must be Record or EncryptionKey, got {type(entry).__name__}")


class KeyringClient:
    """
    Keyring owner client.

    Every mutating call signs its instruction with `account` and submits
    it to the processor.
    """

    def __init__(self, processor: KeyringProcessor, account: LocalAccount):
        """
        Initialize client.

        Args:
            processor: KeyringProcessor to submit to
            account: Owner (authority) account
        """
        self._processor = processor
        self._account = account
        self._config = processor.config
        self._keyring = derive_keyring_address(account.address, self._config)

    @property
    def account(self) -> LocalAccount:
        return self._account

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def keyring_address(self) -> str:
        return self._keyring

    @property
    def ledger(self):
        return self._processor.ledger

    # =========================================================================
    # Funding
    # =========================================================================

    def fund(self, lamports: int) -> None:
        """Credit the owner account (test faucet)."""
        self.ledger.fund(self.address, lamports)

    def fund_rent(self, new_space: int) -> int:
        """
        Transfer rent for `new_space` more bytes into the keyring slot.

        Returns:
            Lamports transferred
        """
        lamports = self.ledger.minimum_balance(new_space)
        self.ledger.transfer(self.address, self._keyring, lamports)
        logger.debug(f"Funded rent for {new_space}B: {lamports} lamports")
        return lamports

    # =========================================================================
    # Instructions
    # =========================================================================

    def _submit(self, instruction: ix.Instruction) -> None:
        data = instruction.pack()
        signature = ix.sign_instruction(data, self._account, self._config)
        self._processor.process(data, signature)

    def create_keyring(self) -> str:
        """
        Create the owner's keyring slot.

        Returns:
            Keyring slot address
        """
        self._submit(ix.create_keyring(self.address, self._config))
        logger.info(f"Created keyring {self._keyring} for {self.address}")
        return self._keyring

    def add_entry(self, entry: Entry, fund_rent: bool = True) -> None:
        """
        Append an entry to the keyring.

        Args:
            entry: Record or EncryptionKey
            fund_rent: Transfer rent for the entry's size first

        The rent transfer and the instruction commit together; if the add
        is rejected neither balance changes.
        """
        record = _as_record(entry)
        with self.ledger.transaction():
            if fund_rent:
                self.fund_rent(record.data_len())
            self._submit(ix.add_entry(self.address, record.pack(), self._config))
        logger.info(f"Added {record.algorithm_name} entry to {self._keyring}")

    def remove_entry(self, entry: Entry) -> None:
        """
        Remove every entry equal to `entry`.

        Raises:
            EntryNotFoundError: Keyring is empty
        """
        record = _as_record(entry)
        self._submit(ix.remove_entry(self.address, record.pack(), self._config))
        logger.info(f"Removed {record.algorithm_name} entry from {self._keyring}")

    # =========================================================================
    # Queries
    # =========================================================================

    def get_registry(self) -> Registry:
        """Decode the keyring slot."""
        return decode_registry(self.ledger.get_account(self._keyring).data)

    def get_keys(self) -> List[EncryptionKey]:
        """Keyring entries as recognized algorithms."""
        return [from_record(record) for record in self.get_registry()]
