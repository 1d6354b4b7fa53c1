"""Transport contract used by SignerClient."""

from __future__ import annotations

from typing import List, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """
    Exchange API calls the signer depends on.

    Implementations raise TransportError (or a subclass) on failure and
    never retry.
    """

    def get_next_nonce(self, account_index: int, api_key_index: int) -> int:
        ...

    def get_api_key(self, account_index: int, api_key_index: int) -> str:
        """Return the registered public key as hex."""
        ...

    def send_tx(self, tx_type: int, tx_info: str) -> str:
        """Submit one transaction and return its hash."""
        ...

    def send_tx_batch(self, tx_types: Sequence[int], tx_infos: Sequence[str]) -> List[str]:
        ...
