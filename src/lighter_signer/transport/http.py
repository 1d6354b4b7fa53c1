"""
HTTP transport for the exchange REST API.

Endpoints:
    GET  /api/v1/nextNonce    -> {"code": 200, "nonce": N}
    GET  /api/v1/apikeys      -> {"code": 200, "api_keys": [{"public_key": ...}]}
    POST /api/v1/sendTx       form: tx_type, tx_info[, price_protection]
    POST /api/v1/sendTxBatch  form: tx_types, tx_infos (JSON arrays)

Every response carries a result ``code``; anything but 200 is an error.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from lighter_signer.constants import CODE_OK, DEFAULT_TIMEOUT_MS
from lighter_signer.errors import ApiResponseError, TransportError, TransportTimeoutError
from lighter_signer.utils.logging import get_logger

_logger = get_logger(__name__)

NEXT_NONCE_PATH = "/api/v1/nextNonce"
API_KEYS_PATH = "/api/v1/apikeys"
SEND_TX_PATH = "/api/v1/sendTx"
SEND_TX_BATCH_PATH = "/api/v1/sendTxBatch"


class HTTPTransport:
    """
    Synchronous transport on ``httpx.Client``.

    Args:
        base_url: Exchange API root, e.g. ``https://mainnet.zklighter.elliot.ai``
        timeout_ms: Per-request timeout
        price_protection: When False, sendTx asks the exchange to skip its
            fat-finger price check
        channel_name: Value of the ``Channel-Name`` header on sendTx
        client: Preconfigured httpx.Client (tests pass one with a MockTransport)

    Example:
        >>> with HTTPTransport("https://testnet.zklighter.elliot.ai") as transport:
        ...     transport.get_next_nonce(account_index=12, api_key_index=3)
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        price_protection: bool = True,
        channel_name: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not base_url:
            raise TransportError("base url is required", code="TRANSPORT_CONFIG_ERROR")
        self._base_url = base_url.rstrip("/")
        self._timeout_ms = timeout_ms
        self.price_protection = price_protection
        self.channel_name = channel_name or ""
        self._client = client or httpx.Client(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout_ms / 1000),
        )
        self._owns_client = client is None

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Request helpers
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Any]:
        url = self._url(path)
        try:
            response = self._client.request(method, url, params=params, data=data, headers=headers)
        except httpx.TimeoutException as exc:
            raise TransportTimeoutError(self._timeout_ms, url=url) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"request failed: {exc}", url=url) from exc

        if response.status_code != 200:
            raise TransportError(
                f"HTTP {response.status_code}: {response.text}",
                code="HTTP_ERROR",
                url=url,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError("response is not valid JSON", code="INVALID_RESPONSE", url=url) from exc

        code = body.get("code")
        if code != CODE_OK:
            raise ApiResponseError(code, body.get("message", ""), url=url)
        return body

    @staticmethod
    def _field(body: Mapping[str, Any], name: str, url: str) -> Any:
        if name not in body:
            raise TransportError(
                f"response is missing '{name}'",
                code="INVALID_RESPONSE",
                url=url,
            )
        return body[name]

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def get_next_nonce(self, account_index: int, api_key_index: int) -> int:
        body = self._request(
            "GET",
            NEXT_NONCE_PATH,
            params={"account_index": account_index, "api_key_index": api_key_index},
        )
        nonce = int(self._field(body, "nonce", self._url(NEXT_NONCE_PATH)))
        _logger.debug(
            "Fetched next nonce",
            extra={"account_index": account_index, "api_key_index": api_key_index, "nonce": nonce},
        )
        return nonce

    def get_api_key(self, account_index: int, api_key_index: int) -> str:
        url = self._url(API_KEYS_PATH)
        body = self._request(
            "GET",
            API_KEYS_PATH,
            params={"account_index": account_index, "api_key_index": api_key_index},
        )
        keys = self._field(body, "api_keys", url)
        if not keys:
            raise TransportError(
                f"no api key registered for account {account_index} index {api_key_index}",
                code="API_KEY_NOT_FOUND",
                url=url,
            )
        return str(keys[0]["public_key"])

    def _send_headers(self) -> Dict[str, str]:
        return {"Channel-Name": self.channel_name}

    def send_tx(self, tx_type: int, tx_info: str) -> str:
        data = {"tx_type": str(int(tx_type)), "tx_info": tx_info}
        if not self.price_protection:
            data["price_protection"] = "false"
        body = self._request("POST", SEND_TX_PATH, data=data, headers=self._send_headers())
        tx_hash = str(self._field(body, "tx_hash", self._url(SEND_TX_PATH)))
        _logger.info("Submitted transaction", extra={"tx_type": int(tx_type), "tx_hash": tx_hash})
        return tx_hash

    def send_tx_batch(self, tx_types: Sequence[int], tx_infos: Sequence[str]) -> List[str]:
        if len(tx_types) != len(tx_infos):
            raise TransportError(
                "tx_types and tx_infos must have the same length",
                code="TRANSPORT_CONFIG_ERROR",
            )
        data = {
            "tx_types": json.dumps([int(t) for t in tx_types]),
            "tx_infos": json.dumps(list(tx_infos)),
        }
        body = self._request("POST", SEND_TX_BATCH_PATH, data=data, headers=self._send_headers())
        hashes = self._field(body, "tx_hash", self._url(SEND_TX_BATCH_PATH))
        _logger.info("Submitted transaction batch", extra={"count": len(tx_types)})
        return [str(h) for h in hashes]
