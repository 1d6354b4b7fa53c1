"""
Tests for account transactions.

Tests cover:
- ChangePubKey key checks and L1 message
- Transfer amount, fee and memo rules, L1 message
- Withdraw, UpdateLeverage and UpdateMargin bounds and encoding
"""

import pytest

from lighter_signer.constants import (
    MAX_MARGIN_AMOUNT,
    MAX_TRANSFER_AMOUNT,
    MarginDirection,
    MarginMode,
)
from lighter_signer.crypto.field import P
from lighter_signer.errors import ValidationError
from lighter_signer.types import (
    ChangePubKey,
    Transfer,
    UpdateLeverage,
    UpdateMargin,
    Withdraw,
)

from ..conftest import ACCOUNT_INDEX, API_KEY_INDEX, CHAIN_ID, NOW_MS

COMMON = dict(account_index=ACCOUNT_INDEX, api_key_index=API_KEY_INDEX, nonce=5, expired_at=NOW_MS)
PUB_KEY = bytes(range(40))


def error_of(tx) -> ValidationError:
    with pytest.raises(ValidationError) as exc_info:
        tx.validate()
    return exc_info.value


def make_transfer(**overrides) -> Transfer:
    params = dict(COMMON, to_account_index=77, usdc_amount=1_000_000)
    params.update(overrides)
    return Transfer(**params)


# =============================================================================
# ChangePubKey Tests
# =============================================================================


class TestChangePubKey:
    """Tests for API key registration."""

    def test_valid(self) -> None:
        ChangePubKey(**COMMON, pub_key=PUB_KEY).validate()

    def test_wrong_length(self) -> None:
        """Test the length error names both lengths."""
        error = error_of(ChangePubKey(**COMMON, pub_key=PUB_KEY[:39]))
        assert error.code == "PUB_KEY_INVALID_LENGTH"
        assert error.message == "invalid pub key length. expected 40 but got 39"

    def test_non_canonical_key(self) -> None:
        """Test a word at or above the modulus is rejected."""
        error = error_of(ChangePubKey(**COMMON, pub_key=b"\xff" * 40))
        assert error.code == "PUB_KEY_NOT_CANONICAL"

    def test_field_sequence_uses_eight_byte_words(self) -> None:
        """Test the key is encoded as five 8-byte words."""
        elements = ChangePubKey(**COMMON, pub_key=PUB_KEY).to_field_sequence(CHAIN_ID)
        assert len(elements) == 6 + 5
        assert elements[6] == int.from_bytes(PUB_KEY[:8], "little")

    def test_message_to_sign(self) -> None:
        """Test the L1 message layout."""
        message = ChangePubKey(**COMMON, pub_key=PUB_KEY).message_to_sign()
        assert message.startswith("Register Lighter Account\n\n")
        assert f"pubkey: 0x{PUB_KEY.hex()}\n" in message
        assert "nonce: 0x0000000000000005\n" in message
        assert "account index: 0x000000000000000c\n" in message
        assert "api key index: 0x0000000000000003\n" in message
        assert message.endswith("Only sign this message for a trusted client!")

    def test_with_l1_signature(self) -> None:
        """Test the L1 signature is attached without touching the L2 fields."""
        tx = ChangePubKey(**COMMON, pub_key=PUB_KEY)
        signed = tx.with_l1_signature("0xabc")
        assert type(signed) is ChangePubKey
        assert signed.l1_sig == "0xabc"
        assert signed.to_field_sequence(CHAIN_ID) == tx.to_field_sequence(CHAIN_ID)
        assert signed.to_wire()["L1Sig"] == "0xabc"


# =============================================================================
# Transfer Tests
# =============================================================================


class TestTransfer:
    """Tests for USDC transfers."""

    def test_valid_with_zero_fee(self) -> None:
        """Test a zero fee is accepted."""
        make_transfer(fee=0).validate()

    def test_zero_amount_rejected(self) -> None:
        assert error_of(make_transfer(usdc_amount=0)).code == "USDC_AMOUNT_TOO_LOW"

    def test_amount_upper_bound(self) -> None:
        make_transfer(usdc_amount=MAX_TRANSFER_AMOUNT).validate()
        assert error_of(make_transfer(usdc_amount=MAX_TRANSFER_AMOUNT + 1)).code == "USDC_AMOUNT_TOO_HIGH"

    def test_to_treasury_allowed(self) -> None:
        """Test account 0 is a valid destination."""
        make_transfer(to_account_index=0).validate()

    def test_empty_memo_is_zero_padded(self) -> None:
        """Test an empty memo becomes 32 zero bytes and 8 zero limbs."""
        tx = make_transfer(memo=b"")
        assert tx.memo == bytes(32)
        tx.validate()
        assert tx.to_field_sequence(CHAIN_ID)[9:] == [0] * 8

    def test_short_memo_rejected(self) -> None:
        error = error_of(make_transfer(memo=b"x" * 31))
        assert error.code == "MEMO_INVALID_LENGTH"
        assert error.message == "memo expected to be 32 bytes long"

    def test_hex_memo_decoded(self) -> None:
        """Test a 64-character hex memo becomes the 32 bytes it spells."""
        memo = "0123456789abcdef" * 4
        tx = make_transfer(memo=memo)
        tx.validate()
        assert tx.memo == bytes.fromhex(memo)
        assert bytes(tx.to_wire()["Memo"]).hex() == memo

    def test_hex_memo_with_prefix(self) -> None:
        tx = make_transfer(memo="0x" + "ff" * 32)
        tx.validate()
        assert tx.memo == b"\xff" * 32

    def test_empty_str_memo_is_zero(self) -> None:
        assert make_transfer(memo="").memo == bytes(32)

    @pytest.mark.parametrize("memo", ["ab" * 31, "ab" * 33, "a" * 32])
    def test_hex_memo_wrong_length_rejected(self, memo: str) -> None:
        assert error_of(make_transfer(memo=memo)).code == "MEMO_INVALID_LENGTH"

    def test_non_hex_memo_rejected(self) -> None:
        error = error_of(make_transfer(memo="zz" * 32))
        assert error.code == "MEMO_INVALID_FORMAT"

    def test_memo_limbs(self) -> None:
        """Test the memo is packed into 4-byte little-endian limbs."""
        memo = bytes(range(32))
        elements = make_transfer(memo=memo).to_field_sequence(CHAIN_ID)
        assert elements[6:9] == [77, 1_000_000, 0]
        assert elements[9] == 0x03020100
        assert len(elements) == 6 + 3 + 8

    def test_wire(self) -> None:
        wire = make_transfer(fee=10).to_wire()
        assert list(wire)[0] == "FromAccountIndex"
        assert wire["ToAccountIndex"] == 77
        assert wire["USDCAmount"] == 1_000_000
        assert wire["Memo"] == [0] * 32

    def test_message_to_sign(self) -> None:
        message = make_transfer(fee=10).message_to_sign()
        assert message.startswith("Transfer\n\n")
        assert "to: 0x000000000000004d\n" in message
        assert "amount: 0x00000000000f4240\n" in message
        assert "fee: 0x000000000000000a\n" in message
        assert f"memo: {'00' * 32}\n" in message


# =============================================================================
# Withdraw / Leverage / Margin Tests
# =============================================================================


class TestWithdraw:
    def test_valid(self) -> None:
        tx = Withdraw(**COMMON, usdc_amount=5)
        tx.validate()
        assert tx.to_field_sequence(CHAIN_ID)[6:] == [5]

    def test_zero_rejected(self) -> None:
        assert error_of(Withdraw(**COMMON, usdc_amount=0)).code == "USDC_AMOUNT_TOO_LOW"


class TestUpdateLeverage:
    def test_valid(self) -> None:
        tx = UpdateLeverage(**COMMON, market_index=1, initial_margin_fraction=500, margin_mode=MarginMode.ISOLATED)
        tx.validate()
        assert tx.to_field_sequence(CHAIN_ID)[6:] == [1, 500, 1]

    def test_fraction_bounds(self) -> None:
        assert error_of(UpdateLeverage(**COMMON, market_index=1, initial_margin_fraction=0)).code == (
            "INITIAL_MARGIN_FRACTION_TOO_LOW"
        )
        assert error_of(UpdateLeverage(**COMMON, market_index=1, initial_margin_fraction=10_001)).code == (
            "INITIAL_MARGIN_FRACTION_TOO_HIGH"
        )

    def test_unknown_margin_mode(self) -> None:
        tx = UpdateLeverage(**COMMON, market_index=1, initial_margin_fraction=500, margin_mode=2)
        assert error_of(tx).code == "MARGIN_MODE_INVALID"


class TestUpdateMargin:
    """Tests for isolated margin changes."""

    def test_zero_amount_rejected(self) -> None:
        """Test zero is rejected here even though zero fees are fine elsewhere."""
        tx = UpdateMargin(**COMMON, market_index=0, usdc_amount=0, direction=MarginDirection.ADD)
        assert error_of(tx).code == "USDC_AMOUNT_IS_ZERO"

    def test_amount_bound(self) -> None:
        tx = UpdateMargin(**COMMON, market_index=0, usdc_amount=MAX_MARGIN_AMOUNT + 1, direction=1)
        assert error_of(tx).code == "USDC_AMOUNT_TOO_HIGH"

    def test_unknown_direction(self) -> None:
        tx = UpdateMargin(**COMMON, market_index=0, usdc_amount=10, direction=2)
        assert error_of(tx).code == "DIRECTION_INVALID"

    def test_field_order(self) -> None:
        """Test market, then direction, then amount."""
        tx = UpdateMargin(**COMMON, market_index=3, usdc_amount=10, direction=MarginDirection.REMOVE)
        assert tx.to_field_sequence(CHAIN_ID)[6:] == [3, 0, 10]

    def test_negative_amount_encoding(self) -> None:
        tx = UpdateMargin(**COMMON, market_index=3, usdc_amount=-10, direction=MarginDirection.ADD)
        tx.validate()
        assert tx.to_field_sequence(CHAIN_ID)[-1] == P - 10
