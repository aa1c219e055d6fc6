# keyring_tlv/ledger/ledger.py
"""
Keyring Ledger: In-Memory Host

Stands in for the account storage the keyring lives on. Provides what the
registry mutation protocol consumes from its host:

    - byte-addressable accounts owned by a program
    - lamport balances and rent-exempt minimums
    - resize limits per call
    - transactional rollback of every account on failure

No blockchain required - accounts are kept in memory.

Usage:
    ledger = MemoryLedger()
    ledger.fund(owner, 10_000_000)
    with ledger.transaction():
        ledger.create_account(keyring, program_id, payer=owner)
        slot = ledger.slot(keyring, program_id)
        apply_add(slot, record.pack())
"""

from __future__ import annotations

import copy
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator

from ..config import DEFAULT_CONFIG, KeyringConfig
from ..errors import KeyringError
from ..registry import StorageSlot


logger = logging.getLogger("keyring-tlv.ledger")

SYSTEM_PROGRAM_ID = "0x" + "0" * 40


# =============================================================================
# Exceptions
# =============================================================================

class LedgerError(KeyringError):
    """Base ledger error."""
    pass


class AccountNotFoundError(LedgerError):
    """Account does not exist."""
    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Account not found: {address}")


class AccountAlreadyExistsError(LedgerError):
    """Account already allocated."""
    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Account already in use: {address}")


class InsufficientFundsError(LedgerError):
    """Balance below what the operation needs."""
    def __init__(self, address: str, required: int, available: int):
        self.address = address
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient funds for {address}: need {required} lamports, have {available}"
        )


class IllegalOwnerError(LedgerError):
    """Program tried to modify an account it does not own."""
    def __init__(self, address: str, owner: str, program_id: str):
        self.address = address
        super().__init__(f"Account {address} is owned by {owner}, not {program_id}")


class DataIncreaseTooLargeError(LedgerError):
    """Single resize grew the account by more than the limit."""
    def __init__(self, increase: int, limit: int):
        self.increase = increase
        self.limit = limit
        super().__init__(f"Data increase {increase}B exceeds limit {limit}B")


class SlotSizeMismatchError(LedgerError):
    """Write length differs from the account's data size."""
    def __init__(self, expected: int, actual: int):
        super().__init__(f"Write of {actual}B into {expected}B account data")


# =============================================================================
# Account
# =============================================================================

@dataclass
class LedgerAccount:
    """
    Ledger account.

    Attributes:
        address: Account address
        owner: Program allowed to modify data
        lamports: Balance
        data: Account data
    """
    address: str
    owner: str = SYSTEM_PROGRAM_ID
    lamports: int = 0
    data: bytes = b""

    @property
    def space(self) -> int:
        return len(self.data)


def _key(address: str) -> str:
    return address.lower()


# =============================================================================
# MemoryLedger
# =============================================================================

class MemoryLedger:
    """In-memory accounts with rent and rollback."""

    def __init__(self, config: KeyringConfig = DEFAULT_CONFIG):
        self.config = config
        self._accounts: Dict[str, LedgerAccount] = {}

    # =========================================================================
    # Accounts
    # =========================================================================

    def get_account(self, address: str) -> LedgerAccount:
        account = self._accounts.get(_key(address))
        if account is None:
            raise AccountNotFoundError(address)
        return account

    def balance(self, address: str) -> int:
        account = self._accounts.get(_key(address))
        return account.lamports if account else 0

    def minimum_balance(self, space: int) -> int:
        return self.config.minimum_balance(space)

    def fund(self, address: str, lamports: int) -> None:
        """Credit lamports (creates a system account if needed)."""
        if lamports < 0:
            raise ValueError(f"lamports must be >= 0, got {lamports}")
        account = self._accounts.setdefault(_key(address), LedgerAccount(address=address))
        account.lamports += lamports

    def transfer(self, source: str, destination: str, lamports: int) -> None:
        """Move lamports between accounts."""
        available = self.balance(source)
        if lamports > available:
            raise InsufficientFundsError(source, lamports, available)
        self.get_account(source).lamports -= lamports
        self.fund(destination, lamports)

    def create_account(self, address: str, program_id: str, payer: str, space: int = 0) -> LedgerAccount:
        """
        Allocate a program-owned account, funding it to rent exemption.

        Raises:
            AccountAlreadyExistsError: Account already owned by a program
            InsufficientFundsError: Payer cannot cover the shortfall
        """
        existing = self._accounts.get(_key(address))
        if existing is not None and (existing.owner != SYSTEM_PROGRAM_ID or existing.data):
            raise AccountAlreadyExistsError(address)

        required = self.minimum_balance(space)
        shortfall = max(0, required - self.balance(address))
        if shortfall:
            self.transfer(payer, address, shortfall)

        account = self._accounts.setdefault(_key(address), LedgerAccount(address=address))
        account.owner = program_id
        account.data = bytes(space)
        logger.info(f"Created account {address} ({space}B, {account.lamports} lamports)")
        return account

    def slot(self, address: str, program_id: str) -> AccountSlot:
        """Storage slot view of a program-owned account."""
        account = self.get_account(address)
        if _key(account.owner) != _key(program_id):
            raise IllegalOwnerError(address, account.owner, program_id)
        return AccountSlot(self, account)

    # =========================================================================
    # Transactions
    # =========================================================================

    @contextmanager
    def transaction(self) -> Iterator[MemoryLedger]:
        """Restore every account if the body raises."""
        snapshot = copy.deepcopy(self._accounts)
        try:
            yield self
        except Exception:
            self._accounts = snapshot
            logger.info("Transaction failed, account state rolled back")
            raise


# =============================================================================
# AccountSlot
# =============================================================================

class AccountSlot(StorageSlot):
    """StorageSlot backed by a ledger account."""

    def __init__(self, ledger: MemoryLedger, account: LedgerAccount):
        self._ledger = ledger
        self._account = account

    @property
    def address(self) -> str:
        return self._account.address

    def read(self) -> bytes:
        return self._account.data

    def resize(self, new_len: int) -> None:
        """
        Resize account data (zero-filled when growing).

        Raises:
            DataIncreaseTooLargeError: Growth above max_data_increase
            InsufficientFundsError: Balance below rent exemption for new_len
        """
        if new_len < 0:
            raise ValueError(f"new_len must be >= 0, got {new_len}")
        current = self._account.space
        increase = new_len - current
        limit = self._ledger.config.max_data_increase
        if increase > limit:
            raise DataIncreaseTooLargeError(increase, limit)

        required = self._ledger.minimum_balance(new_len)
        if self._account.lamports < required:
            raise InsufficientFundsError(self._account.address, required, self._account.lamports)

        if new_len < current:
            self._account.data = self._account.data[:new_len]
        else:
            self._account.data = self._account.data + bytes(increase)
        logger.debug(f"Resized {self._account.address}: {current}B -> {new_len}B")

    def write(self, data: bytes) -> None:
        if len(data) != self._account.space:
            raise SlotSizeMismatchError(self._account.space, len(data))
        self._account.data = bytes(data)
