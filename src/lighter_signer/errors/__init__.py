"""
Signer exception hierarchy.

    LighterError
    ├── ValidationError
    ├── InvalidStateTransitionError
    ├── EncodingInvariantError
    ├── IdentityError
    ├── CryptoBackendError
    └── TransportError
        ├── TransportTimeoutError
        └── ApiResponseError
"""

from lighter_signer.errors.base import LighterError
from lighter_signer.errors.signing import (
    CryptoBackendError,
    EncodingInvariantError,
    IdentityError,
)
from lighter_signer.errors.transport import (
    ApiResponseError,
    TransportError,
    TransportTimeoutError,
)
from lighter_signer.errors.validation import InvalidStateTransitionError, ValidationError

__all__ = [
    "LighterError",
    "ValidationError",
    "InvalidStateTransitionError",
    "EncodingInvariantError",
    "IdentityError",
    "CryptoBackendError",
    "TransportError",
    "TransportTimeoutError",
    "ApiResponseError",
]
