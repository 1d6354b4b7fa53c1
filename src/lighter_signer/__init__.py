"""
Lighter signer - transaction signing for the Lighter layer-2 exchange.

This package builds, validates, canonically encodes, hashes and signs
Lighter transactions, and submits them over the exchange's REST API.

Quick Start:
    >>> from lighter_signer import ClientConfig, SignerClient
    >>>
    >>> client = SignerClient.from_native(ClientConfig.from_network("testnet"))
    >>> client.create_client("0x...", api_key_index=3, account_index=12)
    >>> signed = client.sign_cancel_order(market_index=0, order_index=1234)
    >>> tx_hash = client.send(signed)

Modules:
- `client`: SignerClient builder and orchestrator
- `types`: transaction kinds (frozen dataclasses)
- `crypto`: field encoding, hasher/signer contracts and the native backend
- `protocol`: signing identities and the signing session
- `transport`: exchange API transport
- `bindings`: dict-shaped entry points for host bindings
- `errors`: exception hierarchy
"""

from lighter_signer.version import __version__, __version_info__

from lighter_signer.client import ApiKeyPair, SignerClient, sign_l1_message
from lighter_signer.config import NETWORKS, ClientConfig, Network, NetworkConfig, get_network_config
from lighter_signer.constants import (
    EXPIRY_DEFAULT,
    NONCE_AUTO,
    CancelAllTimeInForce,
    GroupingType,
    MarginDirection,
    MarginMode,
    OrderType,
    PoolStatus,
    TimeInForce,
    TxType,
)
from lighter_signer.crypto import Hasher, KeyGenerator, NativeCryptoBackend, Signer
from lighter_signer.errors import (
    ApiResponseError,
    CryptoBackendError,
    EncodingInvariantError,
    IdentityError,
    InvalidStateTransitionError,
    LighterError,
    TransportError,
    TransportTimeoutError,
    ValidationError,
)
from lighter_signer.protocol import IdentityRegistry, SigningIdentity, SigningSession, TransactionStage
from lighter_signer.transport import HTTPTransport, Transport
from lighter_signer.types import (
    TX_TYPES,
    AuthToken,
    BurnShares,
    CancelAllOrders,
    CancelOrder,
    ChangePubKey,
    CreateGroupedOrders,
    CreateOrder,
    CreatePublicPool,
    CreateSubAccount,
    MintShares,
    ModifyOrder,
    OrderLeg,
    SignedTransaction,
    Transaction,
    Transfer,
    TxInfo,
    UpdateLeverage,
    UpdateMargin,
    UpdatePublicPool,
    Withdraw,
)

__all__ = [
    "__version__",
    "__version_info__",
    # Client
    "SignerClient",
    "ApiKeyPair",
    "sign_l1_message",
    # Config
    "Network",
    "NetworkConfig",
    "NETWORKS",
    "get_network_config",
    "ClientConfig",
    # Constants
    "NONCE_AUTO",
    "EXPIRY_DEFAULT",
    "TxType",
    "OrderType",
    "TimeInForce",
    "CancelAllTimeInForce",
    "GroupingType",
    "MarginMode",
    "MarginDirection",
    "PoolStatus",
    # Crypto
    "Hasher",
    "Signer",
    "KeyGenerator",
    "NativeCryptoBackend",
    # Errors
    "LighterError",
    "ValidationError",
    "InvalidStateTransitionError",
    "EncodingInvariantError",
    "IdentityError",
    "CryptoBackendError",
    "TransportError",
    "TransportTimeoutError",
    "ApiResponseError",
    # Protocol
    "SigningIdentity",
    "IdentityRegistry",
    "SigningSession",
    "TransactionStage",
    # Transport
    "Transport",
    "HTTPTransport",
    # Types
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
