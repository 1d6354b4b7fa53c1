"""
Field encoding over the Goldilocks prime.

Every transaction is hashed as a sequence of Goldilocks field elements.
A field element is represented as a plain ``int`` in ``[0, P)``.

Encoding rules:
    - unsigned integers below ``P`` map to themselves;
    - signed integers map to ``value mod P``. Only values with
      ``|value| <= (P - 1) // 2`` are accepted, so non-negative values land
      in the lower half of the field and negative ones in the upper half and
      the map stays injective.

A value outside these rules means a validation bound is missing upstream,
so failures raise EncodingInvariantError rather than ValidationError.
"""

from __future__ import annotations

from typing import Iterable, List, NewType, Sequence

from lighter_signer.errors import EncodingInvariantError

FieldElement = NewType("FieldElement", int)

P = (1 << 64) - (1 << 32) + 1
HALF_P = (P - 1) // 2

SUPPORTED_WIDTHS = (8, 16, 32, 48, 64)


def _check_width(width: int) -> None:
    if width not in SUPPORTED_WIDTHS:
        raise EncodingInvariantError(
            f"unsupported integer width {width}",
            details={"width": width},
        )


def from_uint(value: int, width: int = 64) -> FieldElement:
    """Encode an unsigned integer of the given bit width."""
    _check_width(width)
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingInvariantError(f"cannot encode {type(value).__name__} as uint{width}")
    if value < 0 or value >= (1 << width):
        raise EncodingInvariantError(
            f"value {value} does not fit in uint{width}",
            details={"value": value, "width": width},
        )
    if value >= P:
        raise EncodingInvariantError(
            f"value {value} is not below the field modulus",
            details={"value": value, "width": width},
        )
    return FieldElement(int(value))


def from_int(value: int, width: int = 64) -> FieldElement:
    """Encode a signed integer of the given bit width."""
    _check_width(width)
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingInvariantError(f"cannot encode {type(value).__name__} as int{width}")
    bound = 1 << (width - 1)
    if value < -bound or value >= bound:
        raise EncodingInvariantError(
            f"value {value} does not fit in int{width}",
            details={"value": value, "width": width},
        )
    if abs(value) > HALF_P:
        raise EncodingInvariantError(
            f"value {value} would wrap around the field modulus",
            details={"value": value, "width": width},
        )
    return FieldElement(int(value) % P)


def encode(value: int, width: int, signed: bool = False) -> FieldElement:
    """Encode a native integer as a field element."""
    if signed:
        return from_int(value, width)
    return from_uint(value, width)


def decode_signed(element: int) -> int:
    """Inverse of ``from_int`` for elements it produced."""
    if element > HALF_P:
        return element - P
    return element


def from_bytes_le(data: bytes, limb_size: int = 4) -> List[FieldElement]:
    """
    Pack arbitrary bytes into little-endian limbs.

    The final limb is zero-padded. With ``limb_size <= 7`` every limb is
    below ``P`` so any byte string is representable.
    """
    if limb_size < 1 or limb_size > 7:
        raise EncodingInvariantError(f"unsupported limb size {limb_size}")
    elements: List[FieldElement] = []
    for offset in range(0, len(data), limb_size):
        chunk = bytes(data[offset:offset + limb_size]).ljust(limb_size, b"\x00")
        elements.append(FieldElement(int.from_bytes(chunk, "little")))
    return elements


def is_canonical_le_bytes(data: bytes) -> bool:
    """True if ``data`` splits into 8-byte little-endian words all below ``P``."""
    if len(data) % 8 != 0:
        return False
    return all(
        int.from_bytes(data[offset:offset + 8], "little") < P
        for offset in range(0, len(data), 8)
    )


def from_canonical_le_bytes(data: bytes) -> List[FieldElement]:
    """Split ``data`` into 8-byte little-endian words, each already canonical."""
    if not is_canonical_le_bytes(data):
        raise EncodingInvariantError(
            "bytes are not a canonical little-endian field array",
            details={"length": len(data)},
        )
    return [
        FieldElement(int.from_bytes(data[offset:offset + 8], "little"))
        for offset in range(0, len(data), 8)
    ]


def to_le_bytes(elements: Iterable[int]) -> bytes:
    """Serialize canonical elements as consecutive 8-byte little-endian words."""
    out = bytearray()
    for element in elements:
        if element < 0 or element >= P:
            raise EncodingInvariantError(
                f"element {element} is not canonical",
                details={"element": element},
            )
        out += int(element).to_bytes(8, "little")
    return bytes(out)


def check_canonical(elements: Sequence[int]) -> None:
    for index, element in enumerate(elements):
        if isinstance(element, bool) or not isinstance(element, int) or not 0 <= element < P:
            raise EncodingInvariantError(
                f"element at position {index} is not a canonical field element",
                details={"index": index},
            )


__all__ = [
    "FieldElement",
    "P",
    "HALF_P",
    "SUPPORTED_WIDTHS",
    "from_uint",
    "from_int",
    "encode",
    "decode_signed",
    "from_bytes_le",
    "is_canonical_le_bytes",
    "from_canonical_le_bytes",
    "to_le_bytes",
    "check_canonical",
]
