"""
Account transactions: key rotation, sub-accounts, collateral movement
and per-market margin settings.
"""

from __future__ import annotations

import base64
import dataclasses
from dataclasses import dataclass
from typing import ClassVar, List, Optional, TypeVar, Union

from eth_utils import remove_0x_prefix

from lighter_signer.constants import (
    MAX_ACCOUNT_INDEX,
    MAX_INITIAL_MARGIN_FRACTION,
    MAX_MARGIN_AMOUNT,
    MAX_MARKET_INDEX,
    MAX_TRANSFER_AMOUNT,
    MAX_TRANSFER_FEE,
    MAX_WITHDRAWAL_AMOUNT,
    MEMO_LENGTH,
    MIN_ACCOUNT_INDEX,
    MIN_INITIAL_MARGIN_FRACTION,
    MIN_MARKET_INDEX,
    MIN_TRANSFER_AMOUNT,
    MIN_TRANSFER_FEE,
    MIN_WITHDRAWAL_AMOUNT,
    PUBLIC_KEY_LENGTH,
    MarginDirection,
    MarginMode,
    TxType,
)
from lighter_signer.crypto.field import (
    FieldElement,
    from_bytes_le,
    from_canonical_le_bytes,
    from_int,
    from_uint,
    is_canonical_le_bytes,
)
from lighter_signer.types.base import TxInfo, WireFields
from lighter_signer.utils.validation import (
    fail,
    require_length,
    require_max,
    require_nonzero,
    require_one_of,
    require_range,
)

L1_MESSAGE_FOOTER = "Only sign this message for a trusted client!"

_L1Signed = TypeVar("_L1Signed", bound="L1SignedMixin")


def _decode_hex_memo(memo: str) -> Union[bytes, str]:
    """Decode a 64-character hex memo; anything else is returned unchanged for validate()."""
    digits = remove_0x_prefix(memo)
    if len(digits) != MEMO_LENGTH * 2:
        return memo
    try:
        return bytes.fromhex(digits)
    except ValueError:
        return memo


def _hex10(value: int) -> str:
    """Format a number the way L1 messages print it: 0x + 16 hex digits."""
    return "0x%016x" % (value & 0xFFFFFFFFFFFFFFFF)


class L1SignedMixin:
    """Kinds that also carry an Ethereum signature over a text message."""

    l1_sig: str

    def with_l1_signature(self: _L1Signed, l1_sig: str) -> _L1Signed:
        # L1Sig is not part of the L2 hash, so it can be attached after signing
        return dataclasses.replace(self, l1_sig=l1_sig)


@dataclass(frozen=True, kw_only=True)
class ChangePubKey(L1SignedMixin, TxInfo):
    """
    Register a new API public key for ``api_key_index``.

    The exchange also requires an Ethereum signature from the account owner
    over ``message_to_sign()``, attached as ``l1_sig``.
    """

    TX_TYPE: ClassVar[TxType] = TxType.CHANGE_PUB_KEY

    pub_key: bytes
    l1_sig: str = ""

    def _validate_fields(self) -> None:
        require_length(
            self.pub_key,
            PUBLIC_KEY_LENGTH,
            "pub_key",
            message=f"invalid pub key length. expected {PUBLIC_KEY_LENGTH} but got {len(self.pub_key)}",
        )
        if not is_canonical_le_bytes(bytes(self.pub_key)):
            fail("pub key is not a canonical field array", "PUB_KEY_NOT_CANONICAL", "pub_key")

    def _field_elements(self) -> List[FieldElement]:
        return from_canonical_le_bytes(bytes(self.pub_key))

    def _wire_fields(self) -> WireFields:
        return [
            ("PubKey", base64.b64encode(bytes(self.pub_key)).decode("ascii")),
            ("L1Sig", self.l1_sig),
        ]

    def message_to_sign(self) -> Optional[str]:
        return (
            "Register Lighter Account\n\n"
            f"pubkey: 0x{bytes(self.pub_key).hex()}\n"
            f"nonce: {_hex10(self.nonce)}\n"
            f"account index: {_hex10(self.account_index)}\n"
            f"api key index: {_hex10(self.api_key_index)}\n"
            f"{L1_MESSAGE_FOOTER}"
        )


@dataclass(frozen=True, kw_only=True)
class CreateSubAccount(TxInfo):
    """Create a sub-account owned by ``account_index``. No kind fields."""

    TX_TYPE: ClassVar[TxType] = TxType.CREATE_SUB_ACCOUNT


@dataclass(frozen=True, kw_only=True)
class Transfer(L1SignedMixin, TxInfo):
    """
    Move USDC (6 decimals) from the signing account to ``to_account_index``.

    ``memo`` is exactly 32 bytes. An empty memo is stored as 32 zero bytes.
    A str memo is 64 hex characters, with or without ``0x``.
    """

    TX_TYPE: ClassVar[TxType] = TxType.TRANSFER
    ACCOUNT_WIRE_KEY: ClassVar[str] = "FromAccountIndex"

    to_account_index: int
    usdc_amount: int
    fee: int = 0
    memo: bytes = bytes(MEMO_LENGTH)
    l1_sig: str = ""

    def __post_init__(self) -> None:
        memo = self.memo
        if memo is None or len(memo) == 0:
            memo = bytes(MEMO_LENGTH)
        elif isinstance(memo, str):
            memo = _decode_hex_memo(memo)
        object.__setattr__(self, "memo", memo)

    def _validate_fields(self) -> None:
        require_range(self.to_account_index, MIN_ACCOUNT_INDEX, MAX_ACCOUNT_INDEX, "to_account_index")
        require_range(self.usdc_amount, MIN_TRANSFER_AMOUNT, MAX_TRANSFER_AMOUNT, "usdc_amount")
        require_range(self.fee, MIN_TRANSFER_FEE, MAX_TRANSFER_FEE, "fee")
        if isinstance(self.memo, str):
            # only undecodable strings survive __post_init__
            if len(remove_0x_prefix(self.memo)) != MEMO_LENGTH * 2:
                fail(
                    f"memo expected to be {MEMO_LENGTH * 2} hex characters ({MEMO_LENGTH} bytes) or empty string",
                    "MEMO_INVALID_LENGTH",
                    "memo",
                )
            fail("invalid hex memo", "MEMO_INVALID_FORMAT", "memo")
        require_length(
            self.memo,
            MEMO_LENGTH,
            "memo",
            message=f"memo expected to be {MEMO_LENGTH} bytes long",
        )

    def _field_elements(self) -> List[FieldElement]:
        return [
            from_int(self.to_account_index, 64),
            from_int(self.usdc_amount, 64),
            from_int(self.fee, 64),
            *from_bytes_le(bytes(self.memo), 4),
        ]

    def _wire_fields(self) -> WireFields:
        return [
            ("ToAccountIndex", self.to_account_index),
            ("USDCAmount", self.usdc_amount),
            ("Fee", self.fee),
            ("Memo", list(bytes(self.memo))),
            ("L1Sig", self.l1_sig),
        ]

    def message_to_sign(self) -> Optional[str]:
        return (
            "Transfer\n\n"
            f"nonce: {_hex10(self.nonce)}\n"
            f"from: {_hex10(self.account_index)}\n"
            f"api key: {_hex10(self.api_key_index)}\n"
            f"to: {_hex10(self.to_account_index)}\n"
            f"amount: {_hex10(self.usdc_amount)}\n"
            f"fee: {_hex10(self.fee)}\n"
            f"memo: {bytes(self.memo).hex()}\n"
            f"{L1_MESSAGE_FOOTER}"
        )


@dataclass(frozen=True, kw_only=True)
class Withdraw(TxInfo):
    """Withdraw USDC from the exchange to the account's L1 address."""

    TX_TYPE: ClassVar[TxType] = TxType.WITHDRAW
    ACCOUNT_WIRE_KEY: ClassVar[str] = "FromAccountIndex"

    usdc_amount: int

    def _validate_fields(self) -> None:
        require_range(self.usdc_amount, MIN_WITHDRAWAL_AMOUNT, MAX_WITHDRAWAL_AMOUNT, "usdc_amount")

    def _field_elements(self) -> List[FieldElement]:
        return [from_int(self.usdc_amount, 64)]

    def _wire_fields(self) -> WireFields:
        return [("USDCAmount", self.usdc_amount)]


@dataclass(frozen=True, kw_only=True)
class UpdateLeverage(TxInfo):
    """
    Set the initial margin fraction of a market.

    ``initial_margin_fraction`` is in units of 1/10000, so leverage L maps
    to ``10000 // L``.
    """

    TX_TYPE: ClassVar[TxType] = TxType.UPDATE_LEVERAGE

    market_index: int
    initial_margin_fraction: int
    margin_mode: int = MarginMode.CROSS

    def _validate_fields(self) -> None:
        require_range(self.market_index, MIN_MARKET_INDEX, MAX_MARKET_INDEX, "market_index")
        require_range(
            self.initial_margin_fraction,
            MIN_INITIAL_MARGIN_FRACTION,
            MAX_INITIAL_MARGIN_FRACTION,
            "initial_margin_fraction",
        )
        require_one_of(self.margin_mode, set(MarginMode), "margin_mode")

    def _field_elements(self) -> List[FieldElement]:
        return [
            from_uint(self.market_index, 8),
            from_uint(self.initial_margin_fraction, 16),
            from_uint(self.margin_mode, 8),
        ]

    def _wire_fields(self) -> WireFields:
        return [
            ("MarketIndex", self.market_index),
            ("InitialMarginFraction", self.initial_margin_fraction),
            ("MarginMode", self.margin_mode),
        ]


@dataclass(frozen=True, kw_only=True)
class UpdateMargin(TxInfo):
    """Add collateral to, or remove it from, an isolated-margin position."""

    TX_TYPE: ClassVar[TxType] = TxType.UPDATE_MARGIN

    market_index: int
    usdc_amount: int
    direction: int

    def _validate_fields(self) -> None:
        require_range(self.market_index, MIN_MARKET_INDEX, MAX_MARKET_INDEX, "market_index")
        require_nonzero(self.usdc_amount, "usdc_amount")
        require_max(abs(self.usdc_amount), MAX_MARGIN_AMOUNT, "usdc_amount")
        require_one_of(self.direction, set(MarginDirection), "direction")

    def _field_elements(self) -> List[FieldElement]:
        return [
            from_uint(self.market_index, 8),
            from_uint(self.direction, 8),
            from_int(self.usdc_amount, 64),
        ]

    def _wire_fields(self) -> WireFields:
        return [
            ("MarketIndex", self.market_index),
            ("USDCAmount", self.usdc_amount),
            ("Direction", self.direction),
        ]


__all__ = [
    "ChangePubKey",
    "CreateSubAccount",
    "Transfer",
    "Withdraw",
    "UpdateLeverage",
    "UpdateMargin",
]
