"""
Public pool transactions.

A public pool is an account whose shares other accounts can mint and
burn. The operator takes ``operator_fee`` (units of 1/1_000_000) of pool
profits and must keep ``min_operator_share_rate`` (units of 1/10_000) of
the shares.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List

from lighter_signer.constants import (
    MAX_ACCOUNT_INDEX,
    MAX_OPERATOR_SHARE_RATE,
    MAX_POOL_OPERATOR_FEE,
    MAX_POOL_SHARES,
    MIN_ACCOUNT_INDEX,
    MIN_OPERATOR_SHARE_RATE,
    MIN_POOL_OPERATOR_FEE,
    MIN_POOL_SHARES,
    PoolStatus,
    TxType,
)
from lighter_signer.crypto.field import FieldElement, from_int, from_uint
from lighter_signer.types.base import TxInfo, WireFields
from lighter_signer.utils.validation import require_one_of, require_range


def _check_pool_terms(operator_fee: int, min_operator_share_rate: int) -> None:
    require_range(operator_fee, MIN_POOL_OPERATOR_FEE, MAX_POOL_OPERATOR_FEE, "operator_fee")
    require_range(
        min_operator_share_rate,
        MIN_OPERATOR_SHARE_RATE,
        MAX_OPERATOR_SHARE_RATE,
        "min_operator_share_rate",
    )


@dataclass(frozen=True, kw_only=True)
class CreatePublicPool(TxInfo):
    TX_TYPE: ClassVar[TxType] = TxType.CREATE_PUBLIC_POOL

    operator_fee: int
    initial_total_shares: int
    min_operator_share_rate: int

    def _validate_fields(self) -> None:
        require_range(self.operator_fee, MIN_POOL_OPERATOR_FEE, MAX_POOL_OPERATOR_FEE, "operator_fee")
        require_range(self.initial_total_shares, MIN_POOL_SHARES, MAX_POOL_SHARES, "initial_total_shares")
        require_range(
            self.min_operator_share_rate,
            MIN_OPERATOR_SHARE_RATE,
            MAX_OPERATOR_SHARE_RATE,
            "min_operator_share_rate",
        )

    def _field_elements(self) -> List[FieldElement]:
        return [
            from_int(self.operator_fee, 64),
            from_int(self.initial_total_shares, 64),
            from_int(self.min_operator_share_rate, 64),
        ]

    def _wire_fields(self) -> WireFields:
        return [
            ("OperatorFee", self.operator_fee),
            ("InitialTotalShares", self.initial_total_shares),
            ("MinOperatorShareRate", self.min_operator_share_rate),
        ]


@dataclass(frozen=True, kw_only=True)
class UpdatePublicPool(TxInfo):
    """Change a pool's status or terms. Only the pool operator can sign it."""

    TX_TYPE: ClassVar[TxType] = TxType.UPDATE_PUBLIC_POOL

    public_pool_index: int
    status: int
    operator_fee: int
    min_operator_share_rate: int

    def _validate_fields(self) -> None:
        require_range(self.public_pool_index, MIN_ACCOUNT_INDEX, MAX_ACCOUNT_INDEX, "public_pool_index")
        require_one_of(self.status, set(PoolStatus), "status")
        _check_pool_terms(self.operator_fee, self.min_operator_share_rate)

    def _field_elements(self) -> List[FieldElement]:
        return [
            from_int(self.public_pool_index, 64),
            from_uint(self.status, 8),
            from_int(self.operator_fee, 64),
            from_int(self.min_operator_share_rate, 64),
        ]

    def _wire_fields(self) -> WireFields:
        return [
            ("PublicPoolIndex", self.public_pool_index),
            ("Status", self.status),
            ("OperatorFee", self.operator_fee),
            ("MinOperatorShareRate", self.min_operator_share_rate),
        ]


@dataclass(frozen=True, kw_only=True)
class _ShareTx(TxInfo):
    public_pool_index: int
    share_amount: int

    def _validate_fields(self) -> None:
        require_range(self.public_pool_index, MIN_ACCOUNT_INDEX, MAX_ACCOUNT_INDEX, "public_pool_index")
        require_range(self.share_amount, MIN_POOL_SHARES, MAX_POOL_SHARES, "share_amount")

    def _field_elements(self) -> List[FieldElement]:
        return [from_int(self.public_pool_index, 64), from_int(self.share_amount, 64)]

    def _wire_fields(self) -> WireFields:
        return [("PublicPoolIndex", self.public_pool_index), ("ShareAmount", self.share_amount)]


@dataclass(frozen=True, kw_only=True)
class MintShares(_ShareTx):
    """Buy ``share_amount`` shares of a public pool."""

    TX_TYPE: ClassVar[TxType] = TxType.MINT_SHARES


@dataclass(frozen=True, kw_only=True)
class BurnShares(_ShareTx):
    """Redeem ``share_amount`` shares of a public pool."""

    TX_TYPE: ClassVar[TxType] = TxType.BURN_SHARES


__all__ = ["CreatePublicPool", "UpdatePublicPool", "MintShares", "BurnShares"]
