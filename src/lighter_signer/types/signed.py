"""Output record of a signed transaction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from lighter_signer.errors import InvalidStateTransitionError
from lighter_signer.types.base import TxInfo


@dataclass(frozen=True)
class SignedTransaction:
    """
    A signed transaction ready for submission.

    Attributes:
        tx: The signed transaction instance
        tx_type: Type tag posted as ``tx_type``
        tx_info: Compact JSON posted as ``tx_info``
        tx_hash: Hex digest that was signed
        message_to_sign: L1 message body for kinds that need an Ethereum
            signature, None otherwise
    """

    tx: TxInfo
    tx_type: int
    tx_info: str
    tx_hash: str
    message_to_sign: Optional[str] = None

    @classmethod
    def from_tx(cls, tx: TxInfo) -> "SignedTransaction":
        if not tx.is_signed:
            raise InvalidStateTransitionError("unsigned", "output")
        return cls(
            tx=tx,
            tx_type=int(tx.TX_TYPE),
            tx_info=tx.tx_info(),
            tx_hash=tx.signed_hash,
            message_to_sign=tx.message_to_sign(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire record plus ``MessageToSign`` when the kind has one."""
        record = self.tx.to_wire()
        if self.message_to_sign is not None:
            record["MessageToSign"] = self.message_to_sign
        return record


__all__ = ["SignedTransaction"]
