# keyring_tlv/registry/keystore.py
"""
Keyring TLV Registry: Keystore

A registry is the ordered list of records held in one storage slot. Its
encoding is the plain concatenation of the record encodings, with no outer
discriminator, length or count:

    [record 0][record 1]...[record n-1]

Decoding peels one record at a time until the buffer is exhausted; any
failure aborts the whole decode.

Usage:
    from keyring_tlv.registry import Registry, add_entry, remove_entry

    buf = add_entry(b"", record_a.pack())
    buf = add_entry(buf, record_b.pack())
    buf = remove_entry(buf, record_a.pack())
    assert Registry.unpack(buf).entries == [record_b]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List

from ..errors import EntryNotFoundError
from ..wire import Record


logger = logging.getLogger("keyring-tlv.registry")


# =============================================================================
# Registry
# =============================================================================

@dataclass
class Registry:
    """Ordered sequence of records (order-sensitive equality)."""
    entries: List[Record] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.entries)

    def __contains__(self, record: object) -> bool:
        return record in self.entries

    def data_len(self) -> int:
        return sum(record.data_len() for record in self.entries)

    def add(self, record: Record) -> None:
        """Append a record."""
        self.entries.append(record)

    def remove(self, record: Record) -> int:
        """
        Drop every record structurally equal to `record`.

        Returns:
            Number of records removed (may be 0)
        """
        before = len(self.entries)
        self.entries = [entry for entry in self.entries if entry != record]
        return before - len(self.entries)

    def pack(self) -> bytes:
        return b"".join(record.pack() for record in self.entries)

    @classmethod
    def unpack(cls, data: bytes) -> Registry:
        entries = []
        offset = 0
        while offset < len(data):
            record, consumed = Record.unpack(data[offset:])
            entries.append(record)
            offset += consumed
        return cls(entries=entries)


def encode_registry(registry: Registry) -> bytes:
    """Flat encoding of a registry."""
    return registry.pack()


def decode_registry(data: bytes) -> Registry:
    """Decode a flat buffer; an empty buffer is an empty registry."""
    return Registry.unpack(data)


# =============================================================================
# Buffer Mutations
# =============================================================================

def add_entry(buffer: bytes, new_record_bytes: bytes) -> bytes:
    """
    Append a record to an encoded registry.

    Args:
        buffer: Current slot contents (may be empty)
        new_record_bytes: Exactly one encoded record

    Returns:
        New slot contents

    Raises:
        InvalidEntryFormatError: Trailing bytes after the new record
        InvalidFormatError: Existing buffer or new record is malformed
    """
    record = Record.unpack_exact(new_record_bytes)

    if not buffer:
        new_buffer = record.pack()
    else:
        registry = Registry.unpack(buffer)
        registry.add(record)
        new_buffer = registry.pack()

    logger.debug(f"add_entry: {len(buffer)}B -> {len(new_buffer)}B ({record!r})")
    return new_buffer


def remove_entry(buffer: bytes, target_record_bytes: bytes) -> bytes:
    """
    Remove every record equal to the target from an encoded registry.

    A target with no match leaves the buffer byte-identical.

    Raises:
        InvalidEntryFormatError: Trailing bytes after the target record
        EntryNotFoundError: Buffer is empty
        InvalidFormatError: Existing buffer or target is malformed
    """
    target = Record.unpack_exact(target_record_bytes)

    if not buffer:
        raise EntryNotFoundError()

    registry = Registry.unpack(buffer)
    removed = registry.remove(target)
    if removed == 0:
        logger.warning(f"remove_entry: no record matched {target!r}")
        return bytes(buffer)

    new_buffer = registry.pack()
    logger.debug(f"remove_entry: removed {removed}, {len(buffer)}B -> {len(new_buffer)}B")
    return new_buffer


# =============================================================================
# Test
# =============================================================================

def run_tests() -> bool:
    """Self-check of the registry codec."""
    from ..discriminator import CURVE25519_DISCRIMINATOR, RSA_DISCRIMINATOR

    print("=" * 70)
    print("Keyring TLV Registry: Keystore Test")
    print("=" * 70)

    results = {}

    a = Record.new(CURVE25519_DISCRIMINATOR, bytes([6] * 32))
    b = Record.new(RSA_DISCRIMINATOR, bytes([7] * 32))

    # Test 1: Single record size
    print("\n[Test 1] Add to Empty Registry")
    print("-" * 40)

    buf = add_entry(b"", a.pack())
    results["add_empty"] = len(buf) == 57 and decode_registry(buf) == Registry([a])
    print(f"  Buffer: {len(buf)}B")
    print(f"  Result: {'PASS ✓' if results['add_empty'] else 'FAIL ✗'}")

    # Test 2: Concatenation
    print("\n[Test 2] Concatenation Law")
    print("-" * 40)

    joined = encode_registry(Registry([a, b]))
    results["concat"] = joined == a.pack() + b.pack()
    print(f"  Result: {'PASS ✓' if results['concat'] else 'FAIL ✗'}")

    # Test 3: Remove
    print("\n[Test 3] Remove")
    print("-" * 40)

    buf = add_entry(buf, b.pack())
    after = remove_entry(buf, a.pack())
    results["remove"] = after == encode_registry(Registry([b]))
    print(f"  {len(buf)}B -> {len(after)}B")
    print(f"  Result: {'PASS ✓' if results['remove'] else 'FAIL ✗'}")

    # Summary
    print("\n" + "=" * 70)
    all_pass = all(results.values())
    passed = sum(results.values())
    total = len(results)

    print(f"Result: {passed}/{total} tests passed")
    print(f"{'ALL TESTS PASSED ✅' if all_pass else 'SOME TESTS FAILED ❌'}")
    print("=" * 70)

    return all_pass


if __name__ == "__main__":
    run_tests()
