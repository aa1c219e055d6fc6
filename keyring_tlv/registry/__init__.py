# keyring_tlv/registry/__init__.py
"""
Keyring TLV Registry Layer

Registry sequence codec and the add / remove mutation protocol.

Components:
    Registry: Ordered list of records (flat concatenated encoding)
    add_entry / remove_entry: Pure buffer → buffer mutations
    StorageSlot / apply_add / apply_remove: Read-modify-write over a slot

Usage:
    from keyring_tlv.registry import MemorySlot, apply_add, decode_registry

    slot = MemorySlot()
    apply_add(slot, record.pack())
    registry = decode_registry(slot.read())
"""

from .keystore import (
    Registry,
    encode_registry,
    decode_registry,
    add_entry,
    remove_entry,
)

from .mutation import (
    StorageSlot,
    MemorySlot,
    apply_add,
    apply_remove,
)

__all__ = [
    # Keystore
    "Registry",
    "encode_registry",
    "decode_registry",
    "add_entry",
    "remove_entry",
    # Mutation
    "StorageSlot",
    "MemorySlot",
    "apply_add",
    "apply_remove",
]
