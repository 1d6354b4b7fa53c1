"""
Tests for SigningSession.

Tests cover:
- Stage order and out-of-order calls
- FAILED as a terminal stage
- Determinism and sensitivity of the digest
- Signature shape checks
"""

import dataclasses

import pytest

from lighter_signer.errors import (
    EncodingInvariantError,
    InvalidStateTransitionError,
    ValidationError,
)
from lighter_signer.protocol import SigningSession, TransactionStage
from lighter_signer.types import CancelOrder, Transfer

from ..conftest import ACCOUNT_INDEX, API_KEY_INDEX, CHAIN_ID, NOW_MS, PRIVATE_KEY


@pytest.fixture
def tx() -> CancelOrder:
    return CancelOrder(
        account_index=ACCOUNT_INDEX,
        api_key_index=API_KEY_INDEX,
        nonce=4,
        expired_at=NOW_MS,
        market_index=0,
        order_index=11,
    )


def new_session(tx, hasher, signer, chain_id: int = CHAIN_ID) -> SigningSession:
    return SigningSession(tx, chain_id=chain_id, hasher=hasher, signer=signer)


# =============================================================================
# Stage Order Tests
# =============================================================================


class TestStages:
    """Tests for stage transitions."""

    def test_starts_constructed(self, tx, hasher, signer) -> None:
        session = new_session(tx, hasher, signer)
        assert session.stage is TransactionStage.CONSTRUCTED
        assert session.elements is None
        assert session.digest is None

    def test_full_run(self, tx, hasher, signer) -> None:
        """Test run() walks every stage and returns a signed copy."""
        session = new_session(tx, hasher, signer)
        signed = session.run(PRIVATE_KEY)
        assert session.stage is TransactionStage.SIGNED
        assert signed.is_signed
        assert len(signed.sig) == 80
        assert signed.signed_hash == session.digest.hex()
        assert session.signed is signed
        assert not tx.is_signed

    def test_step_by_step(self, tx, hasher, signer) -> None:
        session = new_session(tx, hasher, signer)
        assert session.validate().stage is TransactionStage.VALIDATED
        assert session.encode().stage is TransactionStage.ENCODED
        assert session.elements == tx.to_field_sequence(CHAIN_ID)
        assert session.hash().stage is TransactionStage.HASHED
        assert len(session.digest) == 40

    def test_encode_before_validate(self, tx, hasher, signer) -> None:
        """Test a skipped stage is rejected without moving the session."""
        session = new_session(tx, hasher, signer)
        with pytest.raises(InvalidStateTransitionError):
            session.encode()
        assert session.stage is TransactionStage.CONSTRUCTED

    def test_sign_before_hash(self, tx, hasher, signer) -> None:
        session = new_session(tx, hasher, signer).validate().encode()
        with pytest.raises(InvalidStateTransitionError):
            session.sign(PRIVATE_KEY)

    def test_no_repeat_after_signed(self, tx, hasher, signer) -> None:
        session = new_session(tx, hasher, signer)
        session.run(PRIVATE_KEY)
        with pytest.raises(InvalidStateTransitionError):
            session.validate()

    def test_signed_tx_rejected(self, tx, hasher, signer) -> None:
        """Test an already signed transaction cannot open a session."""
        signed = new_session(tx, hasher, signer).run(PRIVATE_KEY)
        with pytest.raises(InvalidStateTransitionError):
            new_session(signed, hasher, signer)


class TestFailure:
    """Tests for FAILED."""

    def test_validation_failure_is_terminal(self, tx, hasher, signer) -> None:
        session = new_session(dataclasses.replace(tx, order_index=0), hasher, signer)
        with pytest.raises(ValidationError):
            session.validate()
        assert session.stage is TransactionStage.FAILED
        with pytest.raises(InvalidStateTransitionError):
            session.validate()
        assert hasher.calls == []

    def test_bad_signature_length(self, tx, hasher, signer, monkeypatch) -> None:
        """Test a signer returning the wrong size fails the session."""
        monkeypatch.setattr(signer, "sign", lambda digest, key: b"\x00" * 64)
        session = new_session(tx, hasher, signer)
        with pytest.raises(EncodingInvariantError):
            session.run(PRIVATE_KEY)
        assert session.stage is TransactionStage.FAILED
        assert session.signed is None

    def test_hasher_error_fails_session(self, tx, hasher, signer, monkeypatch) -> None:
        def broken(elements):
            raise RuntimeError("backend crashed")

        monkeypatch.setattr(hasher, "hash", broken)
        session = new_session(tx, hasher, signer).validate().encode()
        with pytest.raises(RuntimeError):
            session.hash()
        assert session.stage is TransactionStage.FAILED


# =============================================================================
# Digest Tests
# =============================================================================


class TestDigest:
    """Tests for digest determinism."""

    def test_deterministic(self, tx, hasher, signer) -> None:
        first = new_session(tx, hasher, signer).run(PRIVATE_KEY)
        second = new_session(tx, hasher, signer).run(PRIVATE_KEY)
        assert first.signed_hash == second.signed_hash
        assert first.sig == second.sig

    def test_any_field_changes_digest(self, tx, hasher, signer) -> None:
        base = new_session(tx, hasher, signer).run(PRIVATE_KEY).signed_hash
        for change in ({"nonce": 5}, {"order_index": 12}, {"api_key_index": 4}):
            other = new_session(dataclasses.replace(tx, **change), hasher, signer).run(PRIVATE_KEY)
            assert other.signed_hash != base

    def test_chain_id_changes_digest(self, tx, hasher, signer) -> None:
        mainnet = new_session(tx, hasher, signer, 304).run(PRIVATE_KEY)
        testnet = new_session(tx, hasher, signer, 300).run(PRIVATE_KEY)
        assert mainnet.signed_hash != testnet.signed_hash

    def test_kinds_with_equal_fields_differ(self, hasher, signer) -> None:
        """Test the type tag separates kinds."""
        transfer = Transfer(
            account_index=ACCOUNT_INDEX,
            nonce=1,
            expired_at=NOW_MS,
            to_account_index=0,
            usdc_amount=1,
        )
        signed = new_session(transfer, hasher, signer).run(PRIVATE_KEY)
        assert hasher.calls[-1][1] == 12
        assert signed.signed_hash
