"""
Native crypto backend.

Binds the Poseidon2/Schnorr primitives from a compiled shared library via
``ctypes``. The library is a c-shared build of the Goldilocks crypto
package exporting four functions, each returning a NUL-terminated error
string (NULL on success):

    char* HashToQuinticExtension(const uint64_t* elems, int n, uint8_t* out40);
    char* SchnorrSignHashedMessage(const uint8_t* sk40, const uint8_t* msg40, uint8_t* out80);
    char* SchnorrPkFromSk(const uint8_t* sk40, uint8_t* out40);
    char* SampleScalar(const char* seed, uint8_t* out40);

Library resolution order: explicit path, the ``LIGHTER_SIGNER_LIB``
environment variable, then the package's ``lib/`` directory.
"""

from __future__ import annotations

import ctypes
import os
import platform
from pathlib import Path
from typing import List, Optional, Sequence

from lighter_signer.constants import (
    DIGEST_LENGTH,
    PRIVATE_KEY_LENGTH,
    PUBLIC_KEY_LENGTH,
    SIGNATURE_LENGTH,
)
from lighter_signer.errors import CryptoBackendError
from lighter_signer.utils.logging import get_logger

_logger = get_logger(__name__)

LIBRARY_ENV_VAR = "LIGHTER_SIGNER_LIB"
BUNDLED_LIB_DIR = Path(__file__).resolve().parent.parent / "lib"

_LIBRARY_FILENAMES = {
    ("windows", "amd64"): "signer-amd64.dll",
    ("windows", "x86_64"): "signer-amd64.dll",
    ("linux", "x86_64"): "signer-amd64.so",
    ("linux", "amd64"): "signer-amd64.so",
    ("linux", "aarch64"): "signer-arm64.so",
    ("darwin", "arm64"): "signer-arm64.dylib",
    ("darwin", "x86_64"): "signer-amd64.dylib",
}


def default_library_filename() -> str:
    system = platform.system().lower()
    arch = platform.machine().lower()
    filename = _LIBRARY_FILENAMES.get((system, arch))
    if not filename:
        raise CryptoBackendError(f"unsupported platform/architecture: {system}/{arch}")
    return filename


def resolve_library_path(path: Optional[str] = None) -> Path:
    """
    Locate the shared library.

    Raises:
        CryptoBackendError: If no candidate exists on disk
    """
    candidates: List[Path] = []
    if path:
        candidates.append(Path(path))
    env_path = os.environ.get(LIBRARY_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path))

    for candidate in candidates:
        if candidate.is_file():
            return candidate

    bundled = BUNDLED_LIB_DIR / default_library_filename()
    if bundled.is_file():
        return bundled
    candidates.append(bundled)
    raise CryptoBackendError(
        "unable to locate signer library; set LIGHTER_SIGNER_LIB or pass library_path",
        details={"searched": [str(c) for c in candidates]},
    )


class NativeCryptoBackend:
    """
    Hasher, Signer and KeyGenerator backed by the native library.

    Example:
        >>> backend = NativeCryptoBackend.load()
        >>> digest = backend.hash([304, 14, 7])
        >>> sig = backend.sign(digest, private_key)
    """

    def __init__(self, library: ctypes.CDLL, path: str = "") -> None:
        self._lib = library
        self.path = path
        self._configure()

    @classmethod
    def load(cls, path: Optional[str] = None) -> "NativeCryptoBackend":
        resolved = resolve_library_path(path)
        try:
            library = ctypes.CDLL(str(resolved))
        except OSError as e:
            raise CryptoBackendError(f"failed to load signer library: {e}", library=str(resolved)) from e
        _logger.debug("Loaded signer library", extra={"library": str(resolved)})
        return cls(library, str(resolved))

    def _configure(self) -> None:
        u8p = ctypes.POINTER(ctypes.c_uint8)
        try:
            self._lib.HashToQuinticExtension.argtypes = [
                ctypes.POINTER(ctypes.c_uint64),
                ctypes.c_int,
                u8p,
            ]
            self._lib.HashToQuinticExtension.restype = ctypes.c_char_p

            self._lib.SchnorrSignHashedMessage.argtypes = [u8p, u8p, u8p]
            self._lib.SchnorrSignHashedMessage.restype = ctypes.c_char_p

            self._lib.SchnorrPkFromSk.argtypes = [u8p, u8p]
            self._lib.SchnorrPkFromSk.restype = ctypes.c_char_p

            self._lib.SampleScalar.argtypes = [ctypes.c_char_p, u8p]
            self._lib.SampleScalar.restype = ctypes.c_char_p
        except AttributeError as e:
            raise CryptoBackendError(f"signer library is missing a symbol: {e}", library=self.path) from e

    @staticmethod
    def _buffer(data: bytes) -> "ctypes.Array[ctypes.c_uint8]":
        return (ctypes.c_uint8 * len(data)).from_buffer_copy(data)

    def _check(self, err: Optional[bytes], operation: str) -> None:
        if err:
            raise CryptoBackendError(f"{operation} failed: {err.decode('utf-8', 'replace')}", library=self.path)

    def hash(self, elements: Sequence[int]) -> bytes:
        array = (ctypes.c_uint64 * len(elements))(*elements)
        out = (ctypes.c_uint8 * DIGEST_LENGTH)()
        self._check(self._lib.HashToQuinticExtension(array, len(elements), out), "hash")
        return bytes(out)

    def sign(self, digest: bytes, private_key: bytes) -> bytes:
        if len(private_key) != PRIVATE_KEY_LENGTH or len(digest) != DIGEST_LENGTH:
            raise CryptoBackendError("sign expects a 40-byte key and a 40-byte digest")
        out = (ctypes.c_uint8 * SIGNATURE_LENGTH)()
        err = self._lib.SchnorrSignHashedMessage(self._buffer(private_key), self._buffer(digest), out)
        self._check(err, "sign")
        return bytes(out)

    def public_key_from(self, private_key: bytes) -> bytes:
        if len(private_key) != PRIVATE_KEY_LENGTH:
            raise CryptoBackendError("public key derivation expects a 40-byte key")
        out = (ctypes.c_uint8 * PUBLIC_KEY_LENGTH)()
        self._check(self._lib.SchnorrPkFromSk(self._buffer(private_key), out), "public key derivation")
        return bytes(out)

    def sample_private_key(self, seed: Optional[str] = None) -> bytes:
        out = (ctypes.c_uint8 * PRIVATE_KEY_LENGTH)()
        seed_arg = seed.encode("utf-8") if seed else None
        self._check(self._lib.SampleScalar(seed_arg, out), "key generation")
        return bytes(out)


__all__ = [
    "LIBRARY_ENV_VAR",
    "NativeCryptoBackend",
    "default_library_filename",
    "resolve_library_path",
]
