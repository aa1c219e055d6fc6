# keyring_tlv/ledger/processor.py
"""
Keyring Ledger: Instruction Processor

Executes signed keyring instructions against a MemoryLedger.

Flow:
    1. Unpack instruction bytes
    2. Recover the signer and require it to be the authority
    3. Require the keyring address to be derived from the authority
    4. Dispatch inside ledger.transaction() (all-or-nothing)

CreateKeyring:
    Allocates an empty, program-owned slot funded to rent exemption by
    the authority.

AddEntry / RemoveEntry:
    Runs the registry mutation protocol on the slot. Rent for the grown
    slot must already be in the keyring account (KeyringClient.add_entry
    transfers it in the same ledger transaction).
"""

from __future__ import annotations

import logging

from eth_keys.exceptions import BadSignature, ValidationError

from ..config import DEFAULT_CONFIG, KeyringConfig
from ..registry import apply_add, apply_remove
from .address import check_keyring_address
from .instruction import Instruction, KeyringInstruction, recover_signer
from .ledger import LedgerError, MemoryLedger


logger = logging.getLogger("keyring-tlv.processor")


# =============================================================================
# Exceptions
# =============================================================================

class InvalidSeedsError(LedgerError):
    """Keyring address is not derived from the authority."""
    def __init__(self, keyring: str, authority: str):
        self.keyring = keyring
        self.authority = authority
        super().__init__(f"Keyring {keyring} is not the slot of authority {authority}")


class MissingRequiredSignatureError(LedgerError):
    """Instruction not signed by its authority."""
    def __init__(self, authority: str):
        self.authority = authority
        super().__init__(f"Missing required signature for {authority}")


# =============================================================================
# Processor
# =============================================================================

class KeyringProcessor:
    """
    Keyring program.

    Example:
        >>> processor = KeyringProcessor(MemoryLedger())
        >>> processor.process(instruction.pack(), signature)
    """

    def __init__(self, ledger: MemoryLedger, config: KeyringConfig = DEFAULT_CONFIG):
        self.ledger = ledger
        self.config = config

    def process(self, instruction_bytes: bytes, signature: bytes) -> Instruction:
        """
        Verify and execute one instruction.

        Raises:
            InvalidInstructionError: Undecodable instruction
            MissingRequiredSignatureError: Signature not from the authority
            InvalidSeedsError: Wrong keyring address
            KeyringError: Any codec, registry or ledger failure
                          (account state rolled back)
        """
        instruction = Instruction.unpack(instruction_bytes)
        self._check_signature(instruction, instruction_bytes, signature)

        if not check_keyring_address(instruction.authority, instruction.keyring, self.config):
            raise InvalidSeedsError(instruction.keyring, instruction.authority)

        logger.info(f"Instruction: {instruction.name}")
        with self.ledger.transaction():
            if instruction.variant == KeyringInstruction.CREATE_KEYRING:
                self._create_keyring(instruction)
            elif instruction.variant == KeyringInstruction.ADD_ENTRY:
                apply_add(self._slot(instruction), instruction.data)
            else:
                apply_remove(self._slot(instruction), instruction.data)
        return instruction

    # =========================================================================
    # Internal
    # =========================================================================

    def _check_signature(self, instruction: Instruction, instruction_bytes: bytes, signature: bytes):
        try:
            signer = recover_signer(instruction_bytes, signature, self.config)
        except (ValueError, BadSignature, ValidationError) as e:
            logger.warning(f"Signature recovery failed: {e}")
            raise MissingRequiredSignatureError(instruction.authority) from e
        if signer.lower() != instruction.authority.lower():
            raise MissingRequiredSignatureError(instruction.authority)

    def _create_keyring(self, instruction: Instruction):
        self.ledger.create_account(
            instruction.keyring,
            self.config.program_id,
            payer=instruction.authority,
            space=0,
        )

    def _slot(self, instruction: Instruction):
        return self.ledger.slot(instruction.keyring, self.config.program_id)
