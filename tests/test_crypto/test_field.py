"""
Tests for the Goldilocks field encoder.

Tests cover:
- Unsigned encoding and width limits
- Signed encoding and injectivity across the sign boundary
- Byte packing into 4-byte limbs
- Canonical 8-byte little-endian arrays
"""

import pytest

from lighter_signer.crypto.field import (
    HALF_P,
    P,
    check_canonical,
    decode_signed,
    encode,
    from_bytes_le,
    from_canonical_le_bytes,
    from_int,
    from_uint,
    is_canonical_le_bytes,
    to_le_bytes,
)
from lighter_signer.errors import EncodingInvariantError


# =============================================================================
# Unsigned Encoding Tests
# =============================================================================


class TestFromUint:
    """Tests for from_uint()."""

    def test_small_values_map_to_themselves(self) -> None:
        """Test unsigned values below P are unchanged."""
        assert from_uint(0, 8) == 0
        assert from_uint(255, 8) == 255
        assert from_uint(304, 32) == 304

    def test_value_too_wide_rejected(self) -> None:
        """Test a value that does not fit the width raises."""
        with pytest.raises(EncodingInvariantError):
            from_uint(256, 8)

    def test_negative_rejected(self) -> None:
        """Test negative values are not unsigned."""
        with pytest.raises(EncodingInvariantError):
            from_uint(-1, 32)

    def test_uint64_at_or_above_modulus_rejected(self) -> None:
        """Test uint64 values >= P are not silently reduced."""
        assert from_uint(P - 1, 64) == P - 1
        with pytest.raises(EncodingInvariantError):
            from_uint(P, 64)

    def test_bool_rejected(self) -> None:
        """Test bool is not accepted as an integer."""
        with pytest.raises(EncodingInvariantError):
            from_uint(True, 8)

    def test_unsupported_width(self) -> None:
        """Test widths outside the supported set raise."""
        with pytest.raises(EncodingInvariantError):
            from_uint(1, 12)

    def test_int_enum_becomes_plain_int(self) -> None:
        """Test IntEnum members are encoded as plain ints."""
        from lighter_signer.constants import TxType

        element = from_uint(TxType.CREATE_ORDER, 32)
        assert element == 14
        assert type(element) is int


# =============================================================================
# Signed Encoding Tests
# =============================================================================


class TestFromInt:
    """Tests for from_int()."""

    def test_non_negative_unchanged(self) -> None:
        """Test non-negative signed values map to themselves."""
        assert from_int(0) == 0
        assert from_int(1_000_000) == 1_000_000

    def test_negative_wraps_to_upper_half(self) -> None:
        """Test -1 maps to P - 1."""
        assert from_int(-1) == P - 1

    def test_sign_boundary_is_injective(self) -> None:
        """Test values on both sides of zero never collide."""
        values = [-HALF_P, -2, -1, 0, 1, 2, HALF_P]
        encoded = [from_int(v) for v in values]
        assert len(set(encoded)) == len(values)

    def test_decode_round_trip(self) -> None:
        """Test decode_signed inverts from_int."""
        for value in (-HALF_P, -123456789, -1, 0, 1, HALF_P):
            assert decode_signed(from_int(value)) == value

    def test_magnitude_above_half_p_rejected(self) -> None:
        """Test values that would wrap the modulus raise."""
        with pytest.raises(EncodingInvariantError):
            from_int(HALF_P + 1)
        with pytest.raises(EncodingInvariantError):
            from_int(-HALF_P - 1)

    def test_width_limit(self) -> None:
        """Test int8 range is enforced."""
        assert from_int(-128, 8) == P - 128
        with pytest.raises(EncodingInvariantError):
            from_int(128, 8)

    def test_encode_dispatches(self) -> None:
        """Test encode() picks signed or unsigned rules."""
        assert encode(5, 8) == 5
        assert encode(-5, 64, signed=True) == P - 5
        with pytest.raises(EncodingInvariantError):
            encode(-5, 64)


# =============================================================================
# Byte Packing Tests
# =============================================================================


class TestFromBytesLe:
    """Tests for from_bytes_le()."""

    def test_four_byte_limbs(self) -> None:
        """Test bytes are packed little-endian into 4-byte limbs."""
        assert from_bytes_le(b"\x01\x00\x00\x00\x02\x00\x00\x00") == [1, 2]

    def test_last_limb_zero_padded(self) -> None:
        """Test a short final chunk is zero-padded."""
        assert from_bytes_le(b"\xff\x01") == [0x01FF]

    def test_empty_input(self) -> None:
        """Test empty input yields no limbs."""
        assert from_bytes_le(b"") == []

    def test_all_ones_limb_below_modulus(self) -> None:
        """Test every 4-byte limb is canonical."""
        elements = from_bytes_le(b"\xff" * 32)
        assert len(elements) == 8
        assert all(e == 0xFFFFFFFF for e in elements)

    def test_limb_size_limit(self) -> None:
        """Test limb sizes that could exceed P are refused."""
        with pytest.raises(EncodingInvariantError):
            from_bytes_le(b"\x00" * 8, limb_size=8)


# =============================================================================
# Canonical Array Tests
# =============================================================================


class TestCanonicalBytes:
    """Tests for canonical 8-byte little-endian arrays."""

    def test_round_trip_with_to_le_bytes(self) -> None:
        """Test to_le_bytes and from_canonical_le_bytes are inverse."""
        elements = [1, 2, P - 1, 0, 42]
        data = to_le_bytes(elements)
        assert len(data) == 40
        assert from_canonical_le_bytes(data) == elements

    def test_word_equal_to_modulus_not_canonical(self) -> None:
        """Test a word equal to P is rejected."""
        data = P.to_bytes(8, "little") + bytes(32)
        assert not is_canonical_le_bytes(data)
        with pytest.raises(EncodingInvariantError):
            from_canonical_le_bytes(data)

    def test_length_must_be_word_multiple(self) -> None:
        """Test a length that is not a multiple of 8 is not canonical."""
        assert not is_canonical_le_bytes(bytes(39))

    def test_check_canonical(self) -> None:
        """Test check_canonical reports the offending position."""
        check_canonical([0, 1, P - 1])
        with pytest.raises(EncodingInvariantError) as exc_info:
            check_canonical([0, P])
        assert exc_info.value.details["index"] == 1
