"""
Signer contract.

Schnorr signatures over the ECgFp5 curve are produced by an external
library. Keys are 40-byte little-endian scalars / points; signatures are
80 bytes. Both operations must be deterministic.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from eth_utils import decode_hex, encode_hex, is_hex

from lighter_signer.constants import PRIVATE_KEY_LENGTH, PUBLIC_KEY_LENGTH
from lighter_signer.errors import ValidationError


@runtime_checkable
class Signer(Protocol):
    def sign(self, digest: bytes, private_key: bytes) -> bytes:
        """Sign a 40-byte digest, returning an 80-byte signature."""
        ...

    def public_key_from(self, private_key: bytes) -> bytes:
        """Derive the 40-byte public key for ``private_key``."""
        ...


@runtime_checkable
class KeyGenerator(Protocol):
    def sample_private_key(self, seed: Optional[str] = None) -> bytes:
        """Sample a private scalar, deterministically when ``seed`` is given."""
        ...


def parse_key_hex(value: str, length: int, field: str) -> bytes:
    """
    Decode a hex key (with or without 0x prefix).

    Raises:
        ValidationError: If the string is not hex or has the wrong length
    """
    if not isinstance(value, str) or not is_hex(value):
        raise ValidationError(
            f"{field} is not a hex string",
            code=f"{field.upper()}_INVALID_FORMAT",
            field=field,
        )
    raw = decode_hex(value)
    if len(raw) != length:
        raise ValidationError(
            f"invalid {field.replace('_', ' ')} length. expected {length} but got {len(raw)}",
            code=f"{field.upper()}_INVALID_LENGTH",
            field=field,
            value=len(raw),
        )
    return raw


def parse_private_key(value: str) -> bytes:
    return parse_key_hex(value, PRIVATE_KEY_LENGTH, "private_key")


def parse_public_key(value: str) -> bytes:
    return parse_key_hex(value, PUBLIC_KEY_LENGTH, "public_key")


def key_to_hex(key: bytes, prefix: bool = True) -> str:
    encoded = encode_hex(bytes(key))
    return encoded if prefix else encoded[2:]


__all__ = [
    "Signer",
    "KeyGenerator",
    "parse_key_hex",
    "parse_private_key",
    "parse_public_key",
    "key_to_hex",
]
