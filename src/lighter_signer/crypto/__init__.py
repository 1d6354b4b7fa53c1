"""
Field encoding plus the hashing/signing contracts.
"""

from lighter_signer.crypto.field import (
    P,
    FieldElement,
    decode_signed,
    encode,
    from_bytes_le,
    from_canonical_le_bytes,
    from_int,
    from_uint,
    to_le_bytes,
)
from lighter_signer.crypto.hasher import Hasher, digest_to_hex, hash_elements
from lighter_signer.crypto.native import NativeCryptoBackend
from lighter_signer.crypto.signer import KeyGenerator, Signer, key_to_hex

__all__ = [
    "P",
    "FieldElement",
    "encode",
    "from_uint",
    "from_int",
    "decode_signed",
    "from_bytes_le",
    "from_canonical_le_bytes",
    "to_le_bytes",
    "Hasher",
    "hash_elements",
    "digest_to_hex",
    "Signer",
    "KeyGenerator",
    "key_to_hex",
    "NativeCryptoBackend",
]
