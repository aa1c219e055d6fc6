# keyring_tlv/cli.py
"""
Keyring TLV command line.

Usage:
    keyring-tlv derive spl_keyring_program:keystore_entry
    keyring-tlv encode curve25519 <KEY_HEX>
    keyring-tlv encode chacha20-poly1305 <KEY_HEX> --nonce <HEX> --aad <HEX>
    keyring-tlv inspect <BUFFER_HEX>
    keyring-tlv add - <RECORD_HEX>
    keyring-tlv remove <BUFFER_HEX> <RECORD_HEX>

All byte arguments are hex; "-" stands for the empty buffer.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .algorithms import ALGORITHMS, create_key
from .discriminator import derive
from .errors import KeyringError
from .registry import add_entry, decode_registry, remove_entry


logger = logging.getLogger("keyring-tlv.cli")


def _hex(value: str) -> bytes:
    if value == "-":
        return b""
    value = value[2:] if value.startswith("0x") else value
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a hex string: {value!r}")


# =============================================================================
# Commands
# =============================================================================

def cmd_derive(args) -> int:
    print(derive(args.domain).hex())
    return 0


def cmd_encode(args) -> int:
    config = {}
    if args.nonce is not None:
        config["nonce"] = args.nonce
    if args.aad is not None:
        config["aad"] = args.aad
    key = create_key(args.algorithm, args.key, **config)
    print(key.pack().hex())
    return 0


def cmd_inspect(args) -> int:
    registry = decode_registry(args.buffer)
    print(f"{len(registry)} record(s), {registry.data_len()} bytes")
    for i, record in enumerate(registry):
        name = record.algorithm_name or "unknown"
        print(f"  [{i}] {name}  key={record.key.key.hex()}")
        if record.config is not None:
            for entry in record.config.entries:
                print(f"        config {entry.key.hex()} = {entry.value.hex()}")
    return 0


def cmd_add(args) -> int:
    print(add_entry(args.buffer, args.record).hex())
    return 0


def cmd_remove(args) -> int:
    print(remove_entry(args.buffer, args.record).hex())
    return 0


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keyring-tlv",
        description="Encode, inspect and edit keyring TLV registries",
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('derive', help='Print the discriminator of a domain string')
    p.add_argument('domain')
    p.set_defaults(func=cmd_derive)

    p = sub.add_parser('encode', help='Encode one record')
    p.add_argument('algorithm', choices=sorted(ALGORITHMS))
    p.add_argument('key', type=_hex, help='Key bytes (hex)')
    p.add_argument('--nonce', type=_hex, help='ChaCha20-Poly1305 nonce (hex)')
    p.add_argument('--aad', type=_hex, help='ChaCha20-Poly1305 associated data (hex)')
    p.set_defaults(func=cmd_encode)

    p = sub.add_parser('inspect', help='Decode a registry buffer')
    p.add_argument('buffer', type=_hex)
    p.set_defaults(func=cmd_inspect)

    for name, func, text in (
        ('add', cmd_add, 'Append a record to a registry buffer'),
        ('remove', cmd_remove, 'Remove a record from a registry buffer'),
    ):
        p = sub.add_parser(name, help=text)
        p.add_argument('buffer', type=_hex, help='Registry buffer (hex, "-" if empty)')
        p.add_argument('record', type=_hex, help='Encoded record (hex)')
        p.set_defaults(func=func)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    logger.debug(f"Command: {args.command}")
    try:
        return args.func(args)
    except (KeyringError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
