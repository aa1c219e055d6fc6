# keyring_tlv/registry/mutation.py
"""
Keyring TLV Registry: Mutation Protocol

Read-modify-write over one storage slot:

    read() → decode → add / remove → encode → resize(len) → write(buf)

Every decode error is raised before resize() is called, so a malformed
request never touches the slot. Storage errors propagate unchanged; the
host environment is responsible for rolling back on failure.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

from .keystore import add_entry, remove_entry


logger = logging.getLogger("keyring-tlv.registry")


# =============================================================================
# Storage Slot Interface
# =============================================================================

class StorageSlot(ABC):
    """Byte-addressable storage location holding one registry buffer."""

    @abstractmethod
    def read(self) -> bytes:
        """Current contents (empty bytes = empty registry)."""
        pass

    @abstractmethod
    def resize(self, new_len: int) -> None:
        """Grow or shrink the slot to `new_len` bytes."""
        pass

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Overwrite the slot; len(data) must equal the current size."""
        pass


class MemorySlot(StorageSlot):
    """Plain in-memory slot with no funding or size limits."""

    def __init__(self, data: bytes = b""):
        self._data = bytearray(data)

    def read(self) -> bytes:
        return bytes(self._data)

    def resize(self, new_len: int) -> None:
        if new_len < 0:
            raise ValueError(f"new_len must be >= 0, got {new_len}")
        current = len(self._data)
        if new_len < current:
            del self._data[new_len:]
        else:
            self._data.extend(bytes(new_len - current))

    def write(self, data: bytes) -> None:
        if len(data) != len(self._data):
            raise ValueError(f"write of {len(data)}B into {len(self._data)}B slot")
        self._data[:] = data


# =============================================================================
# Protocol
# =============================================================================

def _apply(
    slot: StorageSlot,
    record_bytes: bytes,
    mutate: Callable[[bytes, bytes], bytes],
) -> bytes:
    current = slot.read()
    new_buffer = mutate(current, record_bytes)
    slot.resize(len(new_buffer))
    slot.write(new_buffer)
    return new_buffer


def apply_add(slot: StorageSlot, new_record_bytes: bytes) -> bytes:
    """
    Append one encoded record to the registry held in `slot`.

    Returns:
        The buffer written to the slot
    """
    new_buffer = _apply(slot, new_record_bytes, add_entry)
    logger.info(f"Added entry: slot now {len(new_buffer)}B")
    return new_buffer


def apply_remove(slot: StorageSlot, target_record_bytes: bytes) -> bytes:
    """
    Remove every record equal to the target from the registry in `slot`.

    Raises:
        EntryNotFoundError: Slot is empty
    """
    new_buffer = _apply(slot, target_record_bytes, remove_entry)
    logger.info(f"Removed entry: slot now {len(new_buffer)}B")
    return new_buffer
