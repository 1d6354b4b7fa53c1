"""
Base type for every transaction kind.

A transaction is a frozen dataclass. Each kind declares its type tag,
its ordered validation checks and its ordered field encoding; the base
class contributes the protocol-common fields and the parts of both that
every kind shares:

    validate():           account, api key, <kind checks>, nonce, expiry
    to_field_sequence():  chain id, type tag, nonce, expiry, account,
                          api key, <kind fields>

Order matters in both: validation reports the first failing check, and
the field sequence must match the exchange's verifier element for element.
"""

from __future__ import annotations

import base64
import dataclasses
import json
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from lighter_signer.constants import (
    DEFAULT_ORDER_EXPIRY_MS,
    DEFAULT_TX_EXPIRY_MS,
    EXPIRY_DEFAULT,
    MAX_ACCOUNT_INDEX,
    MAX_API_KEY_INDEX,
    MAX_TIMESTAMP,
    MIN_ACCOUNT_INDEX,
    MIN_API_KEY_INDEX,
    MIN_NONCE,
    NONCE_AUTO,
    TxType,
)
from lighter_signer.crypto.field import FieldElement, from_int, from_uint
from lighter_signer.errors import InvalidStateTransitionError
from lighter_signer.utils.validation import fail, require_int, require_min, require_range

WireFields = List[Tuple[str, Any]]


@dataclass(frozen=True, kw_only=True)
class TxInfo:
    """
    Protocol-common transaction fields.

    Attributes:
        account_index: Account that signs (and usually pays for) the transaction
        api_key_index: API key slot of the signing key
        nonce: Per-key nonce, or NONCE_AUTO to fetch it before signing
        expired_at: Expiry in Unix milliseconds, or EXPIRY_DEFAULT
        sig: Signature bytes, empty until signed
        signed_hash: Hex digest that was signed, empty until signed
    """

    TX_TYPE: ClassVar[TxType]
    ACCOUNT_WIRE_KEY: ClassVar[str] = "AccountIndex"

    account_index: int = 0
    api_key_index: int = 0
    nonce: int = NONCE_AUTO
    expired_at: int = EXPIRY_DEFAULT
    sig: bytes = b""
    signed_hash: str = ""

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """
        Run every check in declared order.

        Raises:
            ValidationError: For the first field outside its bounds
        """
        require_range(
            self.account_index,
            MIN_ACCOUNT_INDEX,
            MAX_ACCOUNT_INDEX,
            "account_index",
            exclusive_min=True,
        )
        require_range(self.api_key_index, MIN_API_KEY_INDEX, MAX_API_KEY_INDEX, "api_key_index")
        self._validate_fields()
        require_min(self.nonce, MIN_NONCE, "nonce")
        require_int(self.expired_at, "expired_at")
        if self.expired_at < 0 or self.expired_at > MAX_TIMESTAMP:
            fail("expired at is invalid", "EXPIRED_AT_INVALID", "expired_at", self.expired_at)

    def _validate_fields(self) -> None:
        """Kind-specific checks, in protocol order."""

    # ------------------------------------------------------------------
    # Canonical encoding
    # ------------------------------------------------------------------

    def to_field_sequence(self, chain_id: int) -> List[FieldElement]:
        """
        Build the hash input for this transaction.

        Args:
            chain_id: Chain the transaction is bound to

        Returns:
            Field elements in protocol order
        """
        elements = [
            from_uint(chain_id, 32),
            from_uint(int(self.TX_TYPE), 32),
            from_int(self.nonce, 64),
            from_int(self.expired_at, 64),
            from_int(self.account_index, 64),
            from_uint(self.api_key_index, 8),
        ]
        elements.extend(self._field_elements())
        return elements

    def _field_elements(self) -> List[FieldElement]:
        return []

    # ------------------------------------------------------------------
    # Defaults and signing state
    # ------------------------------------------------------------------

    def with_defaults(
        self,
        now_ms: int,
        *,
        tx_expiry_ms: int = DEFAULT_TX_EXPIRY_MS,
        order_expiry_ms: int = DEFAULT_ORDER_EXPIRY_MS,
    ) -> "TxInfo":
        """
        Resolve expiry sentinels against ``now_ms``.

        ``order_expiry_ms`` is used by order kinds for their own expiry field.

        Returns a new instance; the receiver is never modified.
        """
        if self.expired_at == EXPIRY_DEFAULT:
            return dataclasses.replace(self, expired_at=now_ms + tx_expiry_ms)
        return self

    @property
    def is_signed(self) -> bool:
        return bool(self.sig)

    def with_signature(self, sig: bytes, signed_hash: str) -> "TxInfo":
        """Return the signed copy of this transaction."""
        if self.is_signed:
            raise InvalidStateTransitionError("signed", "signed")
        return dataclasses.replace(self, sig=bytes(sig), signed_hash=signed_hash)

    def message_to_sign(self) -> Optional[str]:
        """L1 message body, for kinds that need a second (Ethereum) signature."""
        return None

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------

    def _wire_fields(self) -> WireFields:
        return []

    def to_wire(self) -> Dict[str, Any]:
        """
        Serialize to the exchange's ``tx_info`` layout.

        Keys follow the exchange's field names and order; ``Sig`` is base64.
        ``signed_hash`` is not part of the record.
        """
        record: Dict[str, Any] = {
            self.ACCOUNT_WIRE_KEY: self.account_index,
            "ApiKeyIndex": self.api_key_index,
        }
        record.update(self._wire_fields())
        record["ExpiredAt"] = self.expired_at
        record["Nonce"] = self.nonce
        record["Sig"] = base64.b64encode(self.sig).decode("ascii") if self.sig else None
        return record

    def tx_info(self) -> str:
        """Compact JSON form posted as ``tx_info``."""
        return json.dumps(self.to_wire(), separators=(",", ":"))


def normalize_flag(instance: Any, *names: str) -> None:
    """Convert bool flags to 0/1 on a frozen dataclass during __post_init__."""
    for name in names:
        value = getattr(instance, name)
        if isinstance(value, bool):
            object.__setattr__(instance, name, int(value))


__all__ = ["TxInfo", "WireFields", "normalize_flag"]
