"""
Transaction kinds.

Every kind is a frozen dataclass derived from TxInfo. ``TX_TYPES`` maps a
type tag back to its class.
"""

from typing import Dict, Type, Union

from lighter_signer.constants import TxType
from lighter_signer.types.account import (
    ChangePubKey,
    CreateSubAccount,
    Transfer,
    UpdateLeverage,
    UpdateMargin,
    Withdraw,
)
from lighter_signer.types.auth import AuthToken
from lighter_signer.types.base import TxInfo
from lighter_signer.types.orders import (
    CancelAllOrders,
    CancelOrder,
    CreateGroupedOrders,
    CreateOrder,
    ModifyOrder,
    OrderLeg,
)
from lighter_signer.types.pools import BurnShares, CreatePublicPool, MintShares, UpdatePublicPool
from lighter_signer.types.signed import SignedTransaction

Transaction = Union[
    ChangePubKey,
    CreateSubAccount,
    CreatePublicPool,
    UpdatePublicPool,
    Transfer,
    Withdraw,
    CreateOrder,
    CancelOrder,
    CancelAllOrders,
    ModifyOrder,
    MintShares,
    BurnShares,
    UpdateLeverage,
    CreateGroupedOrders,
    UpdateMargin,
]

TX_TYPES: Dict[TxType, Type[TxInfo]] = {
    cls.TX_TYPE: cls
    for cls in (
        ChangePubKey,
        CreateSubAccount,
        CreatePublicPool,
        UpdatePublicPool,
        Transfer,
        Withdraw,
        CreateOrder,
        CancelOrder,
        CancelAllOrders,
        ModifyOrder,
        MintShares,
        BurnShares,
        UpdateLeverage,
        CreateGroupedOrders,
        UpdateMargin,
    )
}

__all__ = [
    "TxInfo",
    "Transaction",
    "TX_TYPES",
    "SignedTransaction",
    "AuthToken",
    "OrderLeg",
    "CreateOrder",
    "CreateGroupedOrders",
    "CancelOrder",
    "CancelAllOrders",
    "ModifyOrder",
    "ChangePubKey",
    "CreateSubAccount",
    "Transfer",
    "Withdraw",
    "UpdateLeverage",
    "UpdateMargin",
    "CreatePublicPool",
    "UpdatePublicPool",
    "MintShares",
    "BurnShares",
]
