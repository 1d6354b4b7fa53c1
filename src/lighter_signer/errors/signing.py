"""
Signing-side exceptions: encoding invariants, identities and the
cryptographic backend.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from lighter_signer.errors.base import LighterError


class EncodingInvariantError(LighterError):
    """
    Raised when a value that should have been validated cannot be encoded.

    This signals a bug (a missing or wrong validation bound), not a user
    error. The boundary adapter reports it as an internal error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="ENCODING_INVARIANT", details=details)


class IdentityError(LighterError):
    """
    Raised when an operation references a signing identity that is not
    registered, or whose key does not match the exchange's record.

    Example:
        >>> raise IdentityError.not_registered(3)
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "IDENTITY_ERROR",
        api_key_index: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if api_key_index is not None:
            details["api_key_index"] = api_key_index
        super().__init__(message, code=code, details=details)
        self.api_key_index = api_key_index

    @classmethod
    def not_registered(cls, api_key_index: int) -> "IdentityError":
        return cls(
            f"no client initialized for api key {api_key_index}",
            code="IDENTITY_NOT_REGISTERED",
            api_key_index=api_key_index,
        )

    @classmethod
    def no_active(cls) -> "IdentityError":
        return cls(
            "client is not created, call create_client() first",
            code="NO_ACTIVE_IDENTITY",
        )


class CryptoBackendError(LighterError):
    """Raised when the native hashing/signing library cannot be used."""

    def __init__(
        self,
        message: str,
        *,
        library: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if library:
            details["library"] = library
        super().__init__(message, code="CRYPTO_BACKEND_ERROR", details=details)
        self.library = library
