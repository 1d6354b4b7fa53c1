"""
Hasher contract and digest glue.

The hash primitive itself (Poseidon2 over Goldilocks, squeezed into a
quintic extension element) is supplied by an external library. The signer
only depends on the ``Hasher`` protocol below.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from lighter_signer.constants import DIGEST_LENGTH
from lighter_signer.crypto.field import check_canonical
from lighter_signer.errors import EncodingInvariantError


@runtime_checkable
class Hasher(Protocol):
    """Hashes a sequence of canonical field elements to a 40-byte digest."""

    def hash(self, elements: Sequence[int]) -> bytes:
        """
        Args:
            elements: Canonical Goldilocks elements in protocol order

        Returns:
            Quintic extension digest, 5 little-endian 8-byte words
        """
        ...


def hash_elements(hasher: Hasher, elements: Sequence[int]) -> bytes:
    """
    Hash ``elements`` and check the digest shape.

    Raises:
        EncodingInvariantError: If an element is not canonical or the
            backend returns a digest of the wrong length
    """
    check_canonical(elements)
    digest = bytes(hasher.hash(list(elements)))
    if len(digest) != DIGEST_LENGTH:
        raise EncodingInvariantError(
            f"hasher returned {len(digest)} bytes, expected {DIGEST_LENGTH}",
            details={"length": len(digest)},
        )
    return digest


def digest_to_hex(digest: bytes) -> str:
    """Hex form used for ``SignedHash`` / tx hashes (no 0x prefix)."""
    return bytes(digest).hex()


__all__ = ["Hasher", "hash_elements", "digest_to_hex"]
