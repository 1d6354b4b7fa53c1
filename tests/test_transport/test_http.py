"""
Tests for HTTPTransport.

Uses httpx.MockTransport so no request leaves the process.

Tests cover:
- Query parameters and response parsing for nonce / api key lookups
- Form encoding, price protection and Channel-Name on sendTx
- Batch submission
- Error mapping (timeout, network, HTTP status, API code, bad JSON)
"""

import json
from typing import Callable, List
from urllib.parse import parse_qs

import httpx
import pytest

from lighter_signer.errors import ApiResponseError, TransportError, TransportTimeoutError
from lighter_signer.transport import HTTPTransport, Transport

BASE_URL = "https://testnet.example"

Handler = Callable[[httpx.Request], httpx.Response]


def make_transport(handler: Handler, requests: List[httpx.Request] = None, **kwargs) -> HTTPTransport:
    def recording(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return handler(request)

    client = httpx.Client(transport=httpx.MockTransport(recording))
    return HTTPTransport(BASE_URL, client=client, **kwargs)


def ok(**body) -> Handler:
    return lambda request: httpx.Response(200, json={"code": 200, **body})


def form(request: httpx.Request) -> dict:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


# =============================================================================
# Construction Tests
# =============================================================================


class TestConstruction:
    def test_empty_base_url(self) -> None:
        with pytest.raises(TransportError) as exc_info:
            HTTPTransport("")
        assert exc_info.value.code == "TRANSPORT_CONFIG_ERROR"

    def test_trailing_slash_stripped(self) -> None:
        transport = HTTPTransport(BASE_URL + "/", client=httpx.Client())
        assert transport.base_url == BASE_URL

    def test_satisfies_protocol(self) -> None:
        assert isinstance(make_transport(ok()), Transport)

    def test_context_manager_closes_owned_client(self) -> None:
        with HTTPTransport(BASE_URL) as transport:
            inner = transport._client
        assert inner.is_closed


# =============================================================================
# Endpoint Tests
# =============================================================================


class TestNextNonce:
    def test_returns_nonce(self) -> None:
        requests: List[httpx.Request] = []
        transport = make_transport(ok(nonce=41), requests)

        assert transport.get_next_nonce(12, 3) == 41

        request = requests[0]
        assert request.method == "GET"
        assert request.url.path == "/api/v1/nextNonce"
        assert request.url.params["account_index"] == "12"
        assert request.url.params["api_key_index"] == "3"

    def test_missing_nonce(self) -> None:
        transport = make_transport(ok())
        with pytest.raises(TransportError) as exc_info:
            transport.get_next_nonce(12, 3)
        assert exc_info.value.code == "INVALID_RESPONSE"


class TestApiKey:
    def test_returns_first_public_key(self) -> None:
        transport = make_transport(ok(api_keys=[{"public_key": "ab" * 40}, {"public_key": "cd"}]))
        assert transport.get_api_key(12, 3) == "ab" * 40

    def test_no_keys(self) -> None:
        transport = make_transport(ok(api_keys=[]))
        with pytest.raises(TransportError) as exc_info:
            transport.get_api_key(12, 3)
        assert exc_info.value.code == "API_KEY_NOT_FOUND"


class TestSendTx:
    def test_form_fields(self) -> None:
        requests: List[httpx.Request] = []
        transport = make_transport(ok(tx_hash="abc"), requests, channel_name="bot-1")

        assert transport.send_tx(14, '{"Nonce":1}') == "abc"

        request = requests[0]
        assert request.method == "POST"
        assert request.url.path == "/api/v1/sendTx"
        assert request.headers["Channel-Name"] == "bot-1"
        assert form(request) == {"tx_type": "14", "tx_info": '{"Nonce":1}'}

    def test_price_protection_disabled(self) -> None:
        """Test price_protection is only sent when turned off."""
        requests: List[httpx.Request] = []
        transport = make_transport(ok(tx_hash="abc"), requests, price_protection=False)
        transport.send_tx(14, "{}")
        assert form(requests[0])["price_protection"] == "false"

    def test_batch(self) -> None:
        requests: List[httpx.Request] = []
        transport = make_transport(ok(tx_hash=["h1", "h2"]), requests)

        assert transport.send_tx_batch([14, 15], ["{}", "{}"]) == ["h1", "h2"]

        fields = form(requests[0])
        assert requests[0].url.path == "/api/v1/sendTxBatch"
        assert json.loads(fields["tx_types"]) == [14, 15]
        assert json.loads(fields["tx_infos"]) == ["{}", "{}"]

    def test_batch_length_mismatch(self) -> None:
        requests: List[httpx.Request] = []
        transport = make_transport(ok(tx_hash=[]), requests)
        with pytest.raises(TransportError):
            transport.send_tx_batch([14], [])
        assert requests == []


# =============================================================================
# Error Mapping Tests
# =============================================================================


class TestErrors:
    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        transport = make_transport(handler, timeout_ms=5000)
        with pytest.raises(TransportTimeoutError) as exc_info:
            transport.get_next_nonce(12, 3)
        assert exc_info.value.timeout_ms == 5000

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError) as exc_info:
            make_transport(handler).get_next_nonce(12, 3)
        assert exc_info.value.code == "TRANSPORT_ERROR"

    def test_http_status(self) -> None:
        transport = make_transport(lambda request: httpx.Response(502, text="bad gateway"))
        with pytest.raises(TransportError) as exc_info:
            transport.get_next_nonce(12, 3)
        assert exc_info.value.code == "HTTP_ERROR"
        assert exc_info.value.status_code == 502

    def test_api_code(self) -> None:
        """Test a body code other than 200 surfaces the exchange's message."""
        transport = make_transport(
            lambda request: httpx.Response(200, json={"code": 21120, "message": "invalid nonce"})
        )
        with pytest.raises(ApiResponseError) as exc_info:
            transport.send_tx(14, "{}")
        assert exc_info.value.api_code == 21120
        assert exc_info.value.message == "invalid nonce"

    def test_invalid_json(self) -> None:
        transport = make_transport(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(TransportError) as exc_info:
            transport.get_next_nonce(12, 3)
        assert exc_info.value.code == "INVALID_RESPONSE"
