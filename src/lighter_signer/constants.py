"""Constants for the Lighter signer.

This module defines the protocol constants shared by every transaction
kind: numeric bounds enforced during validation, sentinel values used by
callers to request defaults, transaction type tags mixed into the hash
domain, and the small enumerations used by order and pool transactions.
"""

from enum import IntEnum

# Chain IDs
MAINNET_CHAIN_ID = 304
TESTNET_CHAIN_ID = 300

# Sentinels
NONCE_AUTO = -1  # fetch the next nonce from the exchange before signing
EXPIRY_DEFAULT = -1  # apply the kind-specific default horizon at signing time

# Digest / key sizes (bytes)
DIGEST_LENGTH = 40
PRIVATE_KEY_LENGTH = 40
PUBLIC_KEY_LENGTH = 40
SIGNATURE_LENGTH = 80
MEMO_LENGTH = 32

# Account / key bounds
MIN_ACCOUNT_INDEX = 0  # exclusive: the treasury account cannot sign
MAX_ACCOUNT_INDEX = (1 << 48) - 2
MIN_API_KEY_INDEX = 0
MAX_API_KEY_INDEX = 254

# Market bounds
MIN_MARKET_INDEX = 0
MAX_MARKET_INDEX = 254

# Nonce / time bounds
MIN_NONCE = 0
MAX_TIMESTAMP = (1 << 48) - 1

# Order bounds
NIL_CLIENT_ORDER_INDEX = 0
MAX_CLIENT_ORDER_INDEX = (1 << 48) - 1
MIN_ORDER_INDEX = 1
MAX_ORDER_INDEX = (1 << 56) - 1
NIL_ORDER_BASE_AMOUNT = 0
MIN_ORDER_BASE_AMOUNT = 1
MAX_ORDER_BASE_AMOUNT = (1 << 48) - 1
MIN_ORDER_PRICE = 1
MAX_ORDER_PRICE = (1 << 32) - 1
NIL_TRIGGER_PRICE = 0
MIN_ORDER_TRIGGER_PRICE = 1
MAX_ORDER_TRIGGER_PRICE = (1 << 32) - 1
NIL_ORDER_EXPIRY = 0
MIN_ORDER_EXPIRY = 1
MAX_ORDER_EXPIRY = MAX_TIMESTAMP
MIN_GROUPED_ORDERS = 2
MAX_GROUPED_ORDERS = 3

# Collateral bounds (USDC, 6 decimals)
USDC_TICKER_SCALE = 1_000_000
MIN_TRANSFER_AMOUNT = 1
MAX_TRANSFER_AMOUNT = (1 << 60) - 1
MIN_TRANSFER_FEE = 0
MAX_TRANSFER_FEE = (1 << 60) - 1
MIN_WITHDRAWAL_AMOUNT = 1
MAX_WITHDRAWAL_AMOUNT = (1 << 60) - 1
MAX_MARGIN_AMOUNT = (1 << 60) - 1

# Leverage bounds
MARGIN_FRACTION_TICK = 10_000
MIN_INITIAL_MARGIN_FRACTION = 1
MAX_INITIAL_MARGIN_FRACTION = MARGIN_FRACTION_TICK

# Public pool bounds
FEE_TICK = 1_000_000
SHARE_TICK = 10_000
MIN_POOL_OPERATOR_FEE = 0
MAX_POOL_OPERATOR_FEE = FEE_TICK
MIN_OPERATOR_SHARE_RATE = 0
MAX_OPERATOR_SHARE_RATE = SHARE_TICK
MIN_POOL_SHARES = 1
MAX_POOL_SHARES = (1 << 60) - 1

# Default horizons
DEFAULT_TX_EXPIRY_MS = 10 * 60 * 1000  # 10 minutes
DEFAULT_ORDER_EXPIRY_MS = 28 * 24 * 60 * 60 * 1000  # 28 days
DEFAULT_AUTH_TOKEN_EXPIRY_SECONDS = 7 * 60 * 60  # 7 hours

# Network
DEFAULT_TIMEOUT_MS = 30_000
CODE_OK = 200


class TxType(IntEnum):
    """Transaction type tags, mixed into every hash as the second element."""

    CHANGE_PUB_KEY = 8
    CREATE_SUB_ACCOUNT = 9
    CREATE_PUBLIC_POOL = 10
    UPDATE_PUBLIC_POOL = 11
    TRANSFER = 12
    WITHDRAW = 13
    CREATE_ORDER = 14
    CANCEL_ORDER = 15
    CANCEL_ALL_ORDERS = 16
    MODIFY_ORDER = 17
    MINT_SHARES = 18
    BURN_SHARES = 19
    UPDATE_LEVERAGE = 20
    CREATE_GROUPED_ORDERS = 28
    UPDATE_MARGIN = 29


class OrderType(IntEnum):
    LIMIT = 0
    MARKET = 1
    STOP_LOSS = 2
    STOP_LOSS_LIMIT = 3
    TAKE_PROFIT = 4
    TAKE_PROFIT_LIMIT = 5
    TWAP = 6


class TimeInForce(IntEnum):
    IMMEDIATE_OR_CANCEL = 0
    GOOD_TILL_TIME = 1
    POST_ONLY = 2


class CancelAllTimeInForce(IntEnum):
    IMMEDIATE = 0
    SCHEDULED = 1
    ABORT = 2


class GroupingType(IntEnum):
    ONE_TRIGGERS_THE_OTHER = 1
    ONE_CANCELS_THE_OTHER = 2
    ONE_TRIGGERS_A_ONE_CANCELS_THE_OTHER = 3


class MarginMode(IntEnum):
    CROSS = 0
    ISOLATED = 1


class MarginDirection(IntEnum):
    REMOVE = 0
    ADD = 1


class PoolStatus(IntEnum):
    ACTIVE = 0
    FROZEN = 1


STOP_LOSS_TYPES = frozenset({OrderType.STOP_LOSS, OrderType.STOP_LOSS_LIMIT})
TAKE_PROFIT_TYPES = frozenset({OrderType.TAKE_PROFIT, OrderType.TAKE_PROFIT_LIMIT})
TRIGGER_ORDER_TYPES = STOP_LOSS_TYPES | TAKE_PROFIT_TYPES

__all__ = [
    "MAINNET_CHAIN_ID",
    "TESTNET_CHAIN_ID",
    "NONCE_AUTO",
    "EXPIRY_DEFAULT",
    "DIGEST_LENGTH",
    "PRIVATE_KEY_LENGTH",
    "PUBLIC_KEY_LENGTH",
    "SIGNATURE_LENGTH",
    "MEMO_LENGTH",
    "MIN_ACCOUNT_INDEX",
    "MAX_ACCOUNT_INDEX",
    "MIN_API_KEY_INDEX",
    "MAX_API_KEY_INDEX",
    "MIN_MARKET_INDEX",
    "MAX_MARKET_INDEX",
    "MIN_NONCE",
    "MAX_TIMESTAMP",
    "NIL_CLIENT_ORDER_INDEX",
    "MAX_CLIENT_ORDER_INDEX",
    "MIN_ORDER_INDEX",
    "MAX_ORDER_INDEX",
    "NIL_ORDER_BASE_AMOUNT",
    "MIN_ORDER_BASE_AMOUNT",
    "MAX_ORDER_BASE_AMOUNT",
    "MIN_ORDER_PRICE",
    "MAX_ORDER_PRICE",
    "NIL_TRIGGER_PRICE",
    "MIN_ORDER_TRIGGER_PRICE",
    "MAX_ORDER_TRIGGER_PRICE",
    "NIL_ORDER_EXPIRY",
    "MIN_ORDER_EXPIRY",
    "MAX_ORDER_EXPIRY",
    "MIN_GROUPED_ORDERS",
    "MAX_GROUPED_ORDERS",
    "USDC_TICKER_SCALE",
    "MIN_TRANSFER_AMOUNT",
    "MAX_TRANSFER_AMOUNT",
    "MIN_TRANSFER_FEE",
    "MAX_TRANSFER_FEE",
    "MIN_WITHDRAWAL_AMOUNT",
    "MAX_WITHDRAWAL_AMOUNT",
    "MAX_MARGIN_AMOUNT",
    "MARGIN_FRACTION_TICK",
    "MIN_INITIAL_MARGIN_FRACTION",
    "MAX_INITIAL_MARGIN_FRACTION",
    "FEE_TICK",
    "SHARE_TICK",
    "MIN_POOL_OPERATOR_FEE",
    "MAX_POOL_OPERATOR_FEE",
    "MIN_OPERATOR_SHARE_RATE",
    "MAX_OPERATOR_SHARE_RATE",
    "MIN_POOL_SHARES",
    "MAX_POOL_SHARES",
    "DEFAULT_TX_EXPIRY_MS",
    "DEFAULT_ORDER_EXPIRY_MS",
    "DEFAULT_AUTH_TOKEN_EXPIRY_SECONDS",
    "DEFAULT_TIMEOUT_MS",
    "CODE_OK",
    "TxType",
    "OrderType",
    "TimeInForce",
    "CancelAllTimeInForce",
    "GroupingType",
    "MarginMode",
    "MarginDirection",
    "PoolStatus",
    "STOP_LOSS_TYPES",
    "TAKE_PROFIT_TYPES",
    "TRIGGER_ORDER_TYPES",
]
