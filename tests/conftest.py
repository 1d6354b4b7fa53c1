"""
Shared fixtures for signer tests.

The real hasher and signer live in a native library, so tests use
deterministic stand-ins built on blake2b. They honour the same contracts:
40-byte digests, 40-byte canonical public keys and 80-byte signatures.
"""

import hashlib
from typing import Optional, Sequence
from unittest.mock import MagicMock

import pytest

from lighter_signer.config import ClientConfig
from lighter_signer.client import SignerClient
from lighter_signer.transport.http import HTTPTransport


# =============================================================================
# Test Constants
# =============================================================================

CHAIN_ID = 304
ACCOUNT_INDEX = 12
API_KEY_INDEX = 3
NOW_MS = 1_700_000_000_000
NEXT_NONCE = 7

PRIVATE_KEY = bytes(range(1, 41))
PRIVATE_KEY_HEX = "0x" + PRIVATE_KEY.hex()
OTHER_PRIVATE_KEY = bytes(range(41, 81))

TX_HASH = "0a1b2c3d"


# =============================================================================
# Crypto test doubles
# =============================================================================


def _canonical_words(data: bytes) -> bytes:
    """Clear the top bit of every 8-byte word so each word is below P."""
    out = bytearray(data)
    for offset in range(7, len(out), 8):
        out[offset] &= 0x7F
    return bytes(out)


class FakeHasher:
    """blake2b over the 8-byte little-endian words of the input."""

    def __init__(self) -> None:
        self.calls = []

    def hash(self, elements: Sequence[int]) -> bytes:
        self.calls.append(list(elements))
        data = b"".join(int(e).to_bytes(8, "little") for e in elements)
        return hashlib.blake2b(data, digest_size=40).digest()


class FakeSigner:
    """Deterministic keyed signatures; not secure, only shape-compatible."""

    def sign(self, digest: bytes, private_key: bytes) -> bytes:
        head = hashlib.blake2b(digest, key=private_key[:32], digest_size=64).digest()
        tail = hashlib.blake2b(private_key + digest, digest_size=16).digest()
        return head + tail

    def public_key_from(self, private_key: bytes) -> bytes:
        return _canonical_words(hashlib.blake2b(private_key, digest_size=40).digest())

    def sample_private_key(self, seed: Optional[str] = None) -> bytes:
        material = seed.encode("utf-8") if seed else b"random-test-seed"
        return hashlib.blake2b(material, digest_size=40).digest()


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def hasher() -> FakeHasher:
    return FakeHasher()


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig.from_network("mainnet")


@pytest.fixture
def transport() -> MagicMock:
    """Transport mock answering with a fixed nonce and tx hash."""
    mock = MagicMock(spec=HTTPTransport)
    mock.get_next_nonce.return_value = NEXT_NONCE
    mock.send_tx.return_value = TX_HASH
    mock.send_tx_batch.return_value = [TX_HASH, TX_HASH]
    return mock


@pytest.fixture
def client(config, hasher, signer, transport, monkeypatch) -> SignerClient:
    """Client with no identity registered and a frozen clock."""
    instance = SignerClient(
        config,
        hasher=hasher,
        signer=signer,
        transport=transport,
        key_generator=signer,
    )
    monkeypatch.setattr(instance, "now", lambda: NOW_MS)
    return instance


@pytest.fixture
def ready_client(client) -> SignerClient:
    """Client with PRIVATE_KEY registered as the active identity."""
    client.create_client(PRIVATE_KEY_HEX, API_KEY_INDEX, ACCOUNT_INDEX)
    return client
