"""
Signing session: the per-transaction stage machine.

    CONSTRUCTED -> VALIDATED -> ENCODED -> HASHED -> SIGNED

Each step is only legal from the stage before it. Any error moves the
session to FAILED, which is terminal; the transaction passed in is never
modified, so a failed session leaves nothing behind.
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, List, Optional, TypeVar

from lighter_signer.constants import SIGNATURE_LENGTH
from lighter_signer.crypto.field import FieldElement
from lighter_signer.crypto.hasher import Hasher, digest_to_hex, hash_elements
from lighter_signer.crypto.signer import Signer
from lighter_signer.errors import EncodingInvariantError, InvalidStateTransitionError
from lighter_signer.types.base import TxInfo
from lighter_signer.utils.logging import get_logger

_logger = get_logger(__name__)

T = TypeVar("T", bound=TxInfo)


class TransactionStage(Enum):
    """Stages of a signing session."""

    CONSTRUCTED = "constructed"
    """Nonce and expiry are resolved; nothing has been checked yet."""

    VALIDATED = "validated"
    """Every field is within protocol bounds."""

    ENCODED = "encoded"
    """The canonical field sequence has been built."""

    HASHED = "hashed"
    """The field sequence has been hashed to a 40-byte digest."""

    SIGNED = "signed"
    """The digest is signed and the signed transaction is available."""

    FAILED = "failed"
    """A step raised; the session cannot continue."""


_NEXT = {
    TransactionStage.CONSTRUCTED: TransactionStage.VALIDATED,
    TransactionStage.VALIDATED: TransactionStage.ENCODED,
    TransactionStage.ENCODED: TransactionStage.HASHED,
    TransactionStage.HASHED: TransactionStage.SIGNED,
}


class SigningSession(Generic[T]):
    """
    Drive one transaction from construction to signature.

    Example:
        >>> session = SigningSession(tx, chain_id=304, hasher=h, signer=s)
        >>> signed = session.run(private_key)
    """

    def __init__(self, tx: T, *, chain_id: int, hasher: Hasher, signer: Signer) -> None:
        if tx.is_signed:
            raise InvalidStateTransitionError("signed", TransactionStage.VALIDATED.value)
        self._tx = tx
        self._chain_id = chain_id
        self._hasher = hasher
        self._signer = signer
        self._stage = TransactionStage.CONSTRUCTED
        self._elements: Optional[List[FieldElement]] = None
        self._digest: Optional[bytes] = None
        self._signed: Optional[T] = None

    @property
    def stage(self) -> TransactionStage:
        return self._stage

    @property
    def elements(self) -> Optional[List[FieldElement]]:
        return self._elements

    @property
    def digest(self) -> Optional[bytes]:
        return self._digest

    @property
    def signed(self) -> Optional[T]:
        return self._signed

    def _advance(self, requested: TransactionStage) -> None:
        if _NEXT.get(self._stage) is not requested:
            raise InvalidStateTransitionError(self._stage.value, requested.value)

    def _fail(self) -> None:
        self._stage = TransactionStage.FAILED

    def validate(self) -> "SigningSession[T]":
        self._advance(TransactionStage.VALIDATED)
        try:
            self._tx.validate()
        except Exception:
            self._fail()
            raise
        self._stage = TransactionStage.VALIDATED
        return self

    def encode(self) -> "SigningSession[T]":
        self._advance(TransactionStage.ENCODED)
        try:
            self._elements = self._tx.to_field_sequence(self._chain_id)
        except Exception:
            self._fail()
            raise
        self._stage = TransactionStage.ENCODED
        return self

    def hash(self) -> "SigningSession[T]":
        self._advance(TransactionStage.HASHED)
        try:
            self._digest = hash_elements(self._hasher, self._elements or [])
        except Exception:
            self._fail()
            raise
        self._stage = TransactionStage.HASHED
        return self

    def sign(self, private_key: bytes) -> T:
        self._advance(TransactionStage.SIGNED)
        try:
            sig = self._signer.sign(self._digest, private_key)
            if len(sig) != SIGNATURE_LENGTH:
                raise EncodingInvariantError(
                    f"signer returned {len(sig)} bytes, expected {SIGNATURE_LENGTH}",
                    details={"length": len(sig)},
                )
            signed = self._tx.with_signature(sig, digest_to_hex(self._digest))
        except Exception:
            self._fail()
            raise
        self._signed = signed
        self._stage = TransactionStage.SIGNED
        _logger.debug(
            "Signed transaction",
            extra={"tx_type": int(self._tx.TX_TYPE), "nonce": self._tx.nonce, "tx_hash": signed.signed_hash},
        )
        return signed

    def run(self, private_key: bytes) -> T:
        """Run every remaining stage and return the signed transaction."""
        return self.validate().encode().hash().sign(private_key)
