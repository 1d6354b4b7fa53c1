"""
Dictionary-shaped entry points for host bindings.

Hosts that cannot catch Python exceptions (FFI layers, JSON-RPC shims)
call these functions instead of SignerClient directly. Each returns
either ``{"result": ...}`` or ``{"error": "<message>"}`` and never raises.

Signer errors are reported with their own message. Encoding invariant
violations and unexpected exceptions are bugs: they are logged with a
traceback and reported as a generic internal error.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from lighter_signer.client import SignerClient
from lighter_signer.errors import EncodingInvariantError, LighterError
from lighter_signer.utils.logging import get_logger

_logger = get_logger(__name__)

Response = Dict[str, Any]

SIGN_OPERATIONS = frozenset(
    {
        "create_order",
        "create_grouped_orders",
        "cancel_order",
        "cancel_all_orders",
        "modify_order",
        "change_pub_key",
        "create_sub_account",
        "transfer",
        "withdraw",
        "update_leverage",
        "update_margin",
        "create_public_pool",
        "update_public_pool",
        "mint_shares",
        "burn_shares",
    }
)


def respond(operation: Callable[[], Any]) -> Response:
    """Run ``operation`` and wrap its outcome."""
    try:
        return {"result": operation()}
    except EncodingInvariantError:
        _logger.exception("Encoding invariant violated")
        return {"error": "internal error: transaction could not be encoded"}
    except LighterError as exc:
        _logger.debug("Operation failed", extra={"code": exc.code})
        return {"error": exc.message}
    except Exception as exc:
        _logger.exception("Unexpected error in signer binding")
        return {"error": f"internal error: {type(exc).__name__}"}


def generate_api_key(client: SignerClient, seed: Optional[str] = None) -> Response:
    def run() -> Dict[str, str]:
        pair = client.generate_api_key(seed)
        return {"private_key": pair.private_key, "public_key": pair.public_key}

    return respond(run)


def create_client(
    client: SignerClient,
    private_key: str,
    api_key_index: int,
    account_index: int,
) -> Response:
    def run() -> None:
        client.create_client(private_key, api_key_index, account_index)

    return respond(run)


def check_client(client: SignerClient, api_key_index: int, account_index: int) -> Response:
    return respond(lambda: client.check_client(api_key_index, account_index))


def switch_api_key(client: SignerClient, api_key_index: int) -> Response:
    def run() -> None:
        client.switch_api_key(api_key_index)

    return respond(run)


def sign(client: SignerClient, operation: str, **params: Any) -> Response:
    """
    Sign a transaction by operation name.

    The result is the ``tx_info`` record, with ``MessageToSign`` added for
    kinds that need an L1 signature. Parameters are plain data: grouped
    order legs are dicts and a transfer memo is a hex string.

    Example:
        >>> sign(client, "cancel_order", market_index=0, order_index=7)
        {'result': {'AccountIndex': 12, ...}}
    """
    if operation not in SIGN_OPERATIONS:
        return {"error": f"unknown operation: {operation}"}
    method = getattr(client, f"sign_{operation}")
    return respond(lambda: method(**params).to_dict())


def create_auth_token(
    client: SignerClient,
    deadline: int = 0,
    api_key_index: Optional[int] = None,
) -> Response:
    return respond(lambda: client.create_auth_token(deadline, api_key_index=api_key_index))


__all__ = [
    "Response",
    "SIGN_OPERATIONS",
    "respond",
    "generate_api_key",
    "create_client",
    "check_client",
    "switch_api_key",
    "sign",
    "create_auth_token",
]
