"""
Signing identities.

A SignerClient can hold several API keys of one account at once, one per
``api_key_index``, with exactly one of them active. The map and the active
pointer are guarded by a single lock, so a reader never sees an active
index that is missing from the map.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from lighter_signer.errors import IdentityError
from lighter_signer.utils.logging import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class SigningIdentity:
    """
    One API key bound to an account.

    ``private_key`` is excluded from repr so identities can be logged.
    """

    private_key: bytes = field(repr=False)
    public_key: bytes
    api_key_index: int
    account_index: int

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex()


class IdentityRegistry:
    """
    Thread-safe map of ``api_key_index`` to SigningIdentity plus the active key.

    Example:
        >>> registry = IdentityRegistry()
        >>> registry.register(identity)        # becomes active
        >>> registry.switch(2)                 # IdentityError if 2 is unknown
        >>> registry.active.api_key_index
        2
    """

    def __init__(self) -> None:
        self._identities: Dict[int, SigningIdentity] = {}
        self._active: Optional[int] = None
        self._lock = threading.Lock()

    def register(self, identity: SigningIdentity, *, activate: bool = True) -> None:
        """Add or replace the identity for its key index."""
        with self._lock:
            self._identities[identity.api_key_index] = identity
            if activate or self._active is None:
                self._active = identity.api_key_index
        _logger.debug(
            "Registered signing identity",
            extra={
                "api_key_index": identity.api_key_index,
                "account_index": identity.account_index,
            },
        )

    def switch(self, api_key_index: int) -> SigningIdentity:
        """
        Make ``api_key_index`` the active identity.

        Raises:
            IdentityError: If no identity is registered for the index; the
                active identity is left unchanged.
        """
        with self._lock:
            identity = self._identities.get(api_key_index)
            if identity is None:
                raise IdentityError.not_registered(api_key_index)
            self._active = api_key_index
        _logger.debug("Switched active api key", extra={"api_key_index": api_key_index})
        return identity

    def get(self, api_key_index: Optional[int] = None) -> SigningIdentity:
        """
        Look up an identity; ``None`` means the active one.

        Raises:
            IdentityError: If the identity does not exist.
        """
        with self._lock:
            if api_key_index is None:
                if self._active is None:
                    raise IdentityError.no_active()
                return self._identities[self._active]
            identity = self._identities.get(api_key_index)
        if identity is None:
            raise IdentityError.not_registered(api_key_index)
        return identity

    @property
    def active(self) -> SigningIdentity:
        return self.get()

    @property
    def active_index(self) -> Optional[int]:
        with self._lock:
            return self._active

    def indices(self) -> List[int]:
        with self._lock:
            return sorted(self._identities)

    def __contains__(self, api_key_index: object) -> bool:
        with self._lock:
            return api_key_index in self._identities

    def __len__(self) -> int:
        with self._lock:
            return len(self._identities)
