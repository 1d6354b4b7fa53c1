"""Signer client for the Lighter exchange.

This module provides the SignerClient class, which turns order and
account operations into signed layer-2 transactions and submits them.

The client handles:
- API key identities (several per account, one active)
- Nonce resolution through the exchange API
- Default expiry horizons, computed at signing time
- Validation, canonical encoding, hashing and signing
- Ethereum (L1) signatures for key registration and transfers
- Auth tokens for authenticated endpoints

Example:
    >>> from lighter_signer import SignerClient, ClientConfig
    >>> client = SignerClient.from_native(ClientConfig.from_network("testnet"))
    >>> client.create_client("0x...", api_key_index=3, account_index=12)
    >>> signed = client.sign_create_order(
    ...     market_index=0,
    ...     client_order_index=1,
    ...     base_amount=1000,
    ...     price=350000,
    ...     is_ask=False,
    ... )
    >>> tx_hash = client.send(signed)
"""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, TypeVar, Union

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import encode_hex, remove_0x_prefix

from lighter_signer.config import ClientConfig
from lighter_signer.constants import (
    EXPIRY_DEFAULT,
    MAX_ACCOUNT_INDEX,
    MAX_API_KEY_INDEX,
    MIN_ACCOUNT_INDEX,
    MIN_API_KEY_INDEX,
    NIL_TRIGGER_PRICE,
    NONCE_AUTO,
    PRIVATE_KEY_LENGTH,
    PUBLIC_KEY_LENGTH,
    SIGNATURE_LENGTH,
    MarginDirection,
    MarginMode,
    OrderType,
    TimeInForce,
)
from lighter_signer.crypto.hasher import Hasher, hash_elements
from lighter_signer.crypto.native import NativeCryptoBackend
from lighter_signer.crypto.signer import (
    KeyGenerator,
    Signer,
    key_to_hex,
    parse_private_key,
    parse_public_key,
)
from lighter_signer.errors import (
    CryptoBackendError,
    EncodingInvariantError,
    IdentityError,
    InvalidStateTransitionError,
    ValidationError,
)
from lighter_signer.protocol.identity import IdentityRegistry, SigningIdentity
from lighter_signer.protocol.pipeline import SigningSession
from lighter_signer.transport.base import Transport
from lighter_signer.transport.http import HTTPTransport
from lighter_signer.types import (
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
    Transfer,
    TxInfo,
    UpdateLeverage,
    UpdateMargin,
    UpdatePublicPool,
    Withdraw,
)
from lighter_signer.utils.logging import LogContext, get_logger
from lighter_signer.utils.validation import require_range

_logger = get_logger(__name__)

T = TypeVar("T", bound=TxInfo)

KeyInput = Union[str, bytes]


@dataclass(frozen=True)
class ApiKeyPair:
    """A freshly generated API key, both halves as 0x-prefixed hex."""

    private_key: str
    public_key: str


def sign_l1_message(message: str, eth_private_key: str) -> str:
    """
    Sign a text message with an Ethereum key (EIP-191 personal_sign).

    Returns:
        0x-prefixed 65-byte signature hex
    """
    signed = Account.sign_message(encode_defunct(text=message), private_key=eth_private_key)
    return encode_hex(signed.signature)


class SignerClient:
    """
    Build, sign and submit Lighter transactions.

    The client owns its identities; nothing is shared between instances.

    Args:
        config: Network and request settings
        hasher: Poseidon2 hasher implementation
        signer: Schnorr signer implementation
        transport: Exchange API transport (HTTPTransport on config.url if None)
        key_generator: Needed only for generate_api_key()
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        hasher: Hasher,
        signer: Signer,
        transport: Optional[Transport] = None,
        key_generator: Optional[KeyGenerator] = None,
    ) -> None:
        self.config = config
        self._hasher = hasher
        self._signer = signer
        self._key_generator = key_generator
        self._transport = transport or HTTPTransport(
            config.url,
            timeout_ms=config.timeout_ms,
            price_protection=config.price_protection,
            channel_name=config.channel_name,
        )
        self._identities = IdentityRegistry()
        self._log = LogContext(_logger, {"chain_id": config.chain_id})

    @classmethod
    def from_native(
        cls,
        config: ClientConfig,
        *,
        library_path: Optional[str] = None,
        transport: Optional[Transport] = None,
    ) -> "SignerClient":
        """Create a client backed by the compiled signer library."""
        backend = NativeCryptoBackend.load(library_path)
        return cls(
            config,
            hasher=backend,
            signer=backend,
            transport=transport,
            key_generator=backend,
        )

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def chain_id(self) -> int:
        return self.config.chain_id

    def now(self) -> int:
        """Wall-clock time in Unix milliseconds."""
        return int(time.time() * 1000)

    # ------------------------------------------------------------------
    # Identities
    # ------------------------------------------------------------------

    def create_client(
        self,
        private_key: KeyInput,
        api_key_index: int,
        account_index: int,
    ) -> SigningIdentity:
        """
        Register an API key and make it the active identity.

        Args:
            private_key: 40-byte key, as bytes or hex
            api_key_index: Key slot on the exchange (0-254)
            account_index: Account the key belongs to

        Returns:
            The registered identity
        """
        require_range(
            account_index,
            MIN_ACCOUNT_INDEX,
            MAX_ACCOUNT_INDEX,
            "account_index",
            exclusive_min=True,
        )
        require_range(api_key_index, MIN_API_KEY_INDEX, MAX_API_KEY_INDEX, "api_key_index")

        if isinstance(private_key, (bytes, bytearray)):
            if len(private_key) != PRIVATE_KEY_LENGTH:
                raise ValidationError(
                    f"invalid private key length. expected {PRIVATE_KEY_LENGTH} but got {len(private_key)}",
                    code="PRIVATE_KEY_INVALID_LENGTH",
                    field="private_key",
                )
            sk = bytes(private_key)
        else:
            sk = parse_private_key(private_key)

        pk = self._signer.public_key_from(sk)
        if len(pk) != PUBLIC_KEY_LENGTH:
            raise CryptoBackendError(f"signer derived a {len(pk)}-byte public key")

        identity = SigningIdentity(
            private_key=sk,
            public_key=bytes(pk),
            api_key_index=api_key_index,
            account_index=account_index,
        )
        self._identities.register(identity)
        self._log.info(
            "Created signing client",
            extra={"api_key_index": api_key_index, "account_index": account_index},
        )
        return identity

    def switch_api_key(self, api_key_index: int) -> SigningIdentity:
        """Make a registered key active. Raises IdentityError if unknown."""
        return self._identities.switch(api_key_index)

    @property
    def active_identity(self) -> SigningIdentity:
        return self._identities.active

    @property
    def identities(self) -> List[int]:
        """Registered api key indices, ascending."""
        return self._identities.indices()

    def check_client(
        self,
        api_key_index: Optional[int] = None,
        account_index: Optional[int] = None,
    ) -> None:
        """
        Verify a registered key against the exchange's record.

        Raises:
            IdentityError: If the key is not registered, the account does
                not match, or the exchange holds a different public key
            TransportError: If the lookup fails
        """
        identity = self._identities.get(api_key_index)
        if account_index is not None and account_index != identity.account_index:
            raise IdentityError(
                f"account index does not match. expected {identity.account_index} but got {account_index}",
                code="ACCOUNT_INDEX_MISMATCH",
                api_key_index=identity.api_key_index,
            )

        remote = self._transport.get_api_key(identity.account_index, identity.api_key_index)
        own = identity.public_key_hex
        if remove_0x_prefix(remote).lower() != own:
            raise IdentityError(
                f"private key does not match the one on Lighter. own public key: {own}, registered: {remote}",
                code="PUBLIC_KEY_MISMATCH",
                api_key_index=identity.api_key_index,
            )

    def generate_api_key(self, seed: Optional[str] = None) -> ApiKeyPair:
        """Sample a new API key pair; deterministic when ``seed`` is given."""
        if self._key_generator is None:
            raise CryptoBackendError("no key generator configured")
        sk = self._key_generator.sample_private_key(seed or None)
        pk = self._signer.public_key_from(sk)
        return ApiKeyPair(private_key=key_to_hex(sk), public_key=key_to_hex(pk))

    # ------------------------------------------------------------------
    # Signing
    # ------------------------------------------------------------------

    def _prepare(self, tx: T, identity: SigningIdentity) -> T:
        tx = dataclasses.replace(
            tx,
            account_index=identity.account_index,
            api_key_index=identity.api_key_index,
        )
        if tx.nonce == NONCE_AUTO:
            nonce = self._transport.get_next_nonce(identity.account_index, identity.api_key_index)
            tx = dataclasses.replace(tx, nonce=nonce)
        return tx.with_defaults(
            self.now(),
            tx_expiry_ms=self.config.default_tx_expiry_ms,
            order_expiry_ms=self.config.order_expiry_ms,
        )

    def sign(self, tx: TxInfo, *, api_key_index: Optional[int] = None) -> SignedTransaction:
        """
        Sign any transaction kind.

        ``account_index`` and ``api_key_index`` on ``tx`` are replaced by
        the identity's; NONCE_AUTO and EXPIRY_DEFAULT are resolved first.

        Args:
            tx: Unsigned transaction
            api_key_index: Identity to sign with (the active one if None)

        Raises:
            IdentityError: If the identity is not registered
            ValidationError: If a field is out of bounds
            TransportError: If the nonce lookup fails
        """
        if tx.is_signed:
            raise InvalidStateTransitionError("signed", "constructed")
        identity = self._identities.get(api_key_index)
        prepared = self._prepare(tx, identity)
        signed = SigningSession(
            prepared,
            chain_id=self.chain_id,
            hasher=self._hasher,
            signer=self._signer,
        ).run(identity.private_key)
        self._log.bind(
            account_index=identity.account_index,
            api_key_index=identity.api_key_index,
        ).info(
            "Signed transaction",
            extra={"tx_type": int(signed.TX_TYPE), "nonce": signed.nonce, "tx_hash": signed.signed_hash},
        )
        return SignedTransaction.from_tx(signed)

    def _sign_with_l1(
        self,
        tx: Union[ChangePubKey, Transfer],
        eth_private_key: Optional[str],
        api_key_index: Optional[int],
    ) -> SignedTransaction:
        signed = self.sign(tx, api_key_index=api_key_index)
        if eth_private_key is None:
            return signed
        l1_sig = sign_l1_message(signed.message_to_sign, eth_private_key)
        return SignedTransaction.from_tx(signed.tx.with_l1_signature(l1_sig))

    def sign_create_order(
        self,
        market_index: int,
        client_order_index: int,
        base_amount: int,
        price: int,
        is_ask: Union[bool, int],
        order_type: int = OrderType.LIMIT,
        time_in_force: int = TimeInForce.GOOD_TILL_TIME,
        reduce_only: Union[bool, int] = False,
        trigger_price: int = NIL_TRIGGER_PRICE,
        order_expiry: int = EXPIRY_DEFAULT,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        tx = CreateOrder(
            market_index=market_index,
            client_order_index=client_order_index,
            base_amount=base_amount,
            price=price,
            is_ask=is_ask,
            order_type=order_type,
            time_in_force=time_in_force,
            reduce_only=reduce_only,
            trigger_price=trigger_price,
            order_expiry=order_expiry,
            nonce=nonce,
        )
        return self.sign(tx, api_key_index=api_key_index)

    def sign_create_grouped_orders(
        self,
        grouping_type: int,
        orders: Sequence[Union[OrderLeg, Mapping[str, Any]]],
        expired_at: int = EXPIRY_DEFAULT,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        """
        Sign 2 or 3 linked orders.

        Args:
            grouping_type: GroupingType of the legs
            orders: OrderLeg instances, or mappings accepted by
                ``OrderLeg.from_dict``
            expired_at: Transaction expiry in Unix milliseconds
        """
        legs = tuple(leg if isinstance(leg, OrderLeg) else OrderLeg.from_dict(leg) for leg in orders)
        tx = CreateGroupedOrders(
            grouping_type=grouping_type,
            orders=legs,
            expired_at=expired_at,
            nonce=nonce,
        )
        return self.sign(tx, api_key_index=api_key_index)

    def sign_cancel_order(
        self,
        market_index: int,
        order_index: int,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        tx = CancelOrder(market_index=market_index, order_index=order_index, nonce=nonce)
        return self.sign(tx, api_key_index=api_key_index)

    def sign_cancel_all_orders(
        self,
        time_in_force: int,
        time: int = 0,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        tx = CancelAllOrders(time_in_force=time_in_force, time=time, nonce=nonce)
        return self.sign(tx, api_key_index=api_key_index)

    def sign_modify_order(
        self,
        market_index: int,
        order_index: int,
        base_amount: int,
        price: int,
        trigger_price: int = NIL_TRIGGER_PRICE,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        tx = ModifyOrder(
            market_index=market_index,
            order_index=order_index,
            base_amount=base_amount,
            price=price,
            trigger_price=trigger_price,
            nonce=nonce,
        )
        return self.sign(tx, api_key_index=api_key_index)

    def sign_change_pub_key(
        self,
        pub_key: Optional[KeyInput] = None,
        eth_private_key: Optional[str] = None,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        """
        Register a public key for the signing identity's key slot.

        Args:
            pub_key: Key to register (the identity's own key if None)
            eth_private_key: Account owner's Ethereum key; when given, the
                L1 message is signed and attached as ``L1Sig``
        """
        if pub_key is None:
            pub_key = self._identities.get(api_key_index).public_key
        elif isinstance(pub_key, str):
            pub_key = parse_public_key(pub_key)
        tx = ChangePubKey(pub_key=bytes(pub_key), nonce=nonce)
        return self._sign_with_l1(tx, eth_private_key, api_key_index)

    def sign_create_sub_account(
        self,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        return self.sign(CreateSubAccount(nonce=nonce), api_key_index=api_key_index)

    def sign_transfer(
        self,
        to_account_index: int,
        usdc_amount: int,
        fee: int = 0,
        memo: Union[bytes, str] = b"",
        eth_private_key: Optional[str] = None,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        tx = Transfer(
            to_account_index=to_account_index,
            usdc_amount=usdc_amount,
            fee=fee,
            memo=memo,
            nonce=nonce,
        )
        return self._sign_with_l1(tx, eth_private_key, api_key_index)

    def sign_withdraw(
        self,
        usdc_amount: int,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        return self.sign(Withdraw(usdc_amount=usdc_amount, nonce=nonce), api_key_index=api_key_index)

    def sign_update_leverage(
        self,
        market_index: int,
        initial_margin_fraction: int,
        margin_mode: int = MarginMode.CROSS,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        tx = UpdateLeverage(
            market_index=market_index,
            initial_margin_fraction=initial_margin_fraction,
            margin_mode=margin_mode,
            nonce=nonce,
        )
        return self.sign(tx, api_key_index=api_key_index)

    def sign_update_margin(
        self,
        market_index: int,
        usdc_amount: int,
        direction: int = MarginDirection.ADD,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        tx = UpdateMargin(
            market_index=market_index,
            usdc_amount=usdc_amount,
            direction=direction,
            nonce=nonce,
        )
        return self.sign(tx, api_key_index=api_key_index)

    def sign_create_public_pool(
        self,
        operator_fee: int,
        initial_total_shares: int,
        min_operator_share_rate: int,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        tx = CreatePublicPool(
            operator_fee=operator_fee,
            initial_total_shares=initial_total_shares,
            min_operator_share_rate=min_operator_share_rate,
            nonce=nonce,
        )
        return self.sign(tx, api_key_index=api_key_index)

    def sign_update_public_pool(
        self,
        public_pool_index: int,
        status: int,
        operator_fee: int,
        min_operator_share_rate: int,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        tx = UpdatePublicPool(
            public_pool_index=public_pool_index,
            status=status,
            operator_fee=operator_fee,
            min_operator_share_rate=min_operator_share_rate,
            nonce=nonce,
        )
        return self.sign(tx, api_key_index=api_key_index)

    def sign_mint_shares(
        self,
        public_pool_index: int,
        share_amount: int,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        tx = MintShares(public_pool_index=public_pool_index, share_amount=share_amount, nonce=nonce)
        return self.sign(tx, api_key_index=api_key_index)

    def sign_burn_shares(
        self,
        public_pool_index: int,
        share_amount: int,
        nonce: int = NONCE_AUTO,
        api_key_index: Optional[int] = None,
    ) -> SignedTransaction:
        tx = BurnShares(public_pool_index=public_pool_index, share_amount=share_amount, nonce=nonce)
        return self.sign(tx, api_key_index=api_key_index)

    # ------------------------------------------------------------------
    # Auth tokens
    # ------------------------------------------------------------------

    def create_auth_token(
        self,
        deadline: int = EXPIRY_DEFAULT,
        api_key_index: Optional[int] = None,
    ) -> str:
        """
        Create an auth token for authenticated endpoints.

        Args:
            deadline: Expiry in Unix seconds; EXPIRY_DEFAULT (or 0) means
                7 hours from now

        Returns:
            ``"{deadline}:{account}:{api_key}:{signature hex}"``
        """
        identity = self._identities.get(api_key_index)
        token = AuthToken(
            deadline=deadline,
            account_index=identity.account_index,
            api_key_index=identity.api_key_index,
        ).with_defaults(self.now())
        token.validate()

        digest = hash_elements(self._hasher, token.to_field_sequence())
        sig = self._signer.sign(digest, identity.private_key)
        if len(sig) != SIGNATURE_LENGTH:
            raise EncodingInvariantError(f"signer returned {len(sig)} bytes, expected {SIGNATURE_LENGTH}")
        return token.token(sig)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def send(self, signed: SignedTransaction) -> str:
        """Submit a signed transaction and return its hash."""
        return self._transport.send_tx(signed.tx_type, signed.tx_info)

    def send_batch(self, signed: Sequence[SignedTransaction]) -> List[str]:
        """Submit several signed transactions in one request."""
        return self._transport.send_tx_batch(
            [s.tx_type for s in signed],
            [s.tx_info for s in signed],
        )


__all__ = ["SignerClient", "ApiKeyPair", "sign_l1_message"]
