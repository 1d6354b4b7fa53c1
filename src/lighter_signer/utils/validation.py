"""
Validation helpers shared by the transaction variants.

Each helper performs one check and raises ValidationError with a stable
error code on failure. Variants call them in a fixed order so the first
failing check is always the one reported.
"""

from __future__ import annotations

from typing import Any, Container, Optional

from lighter_signer.errors import ValidationError


def _label(field: str) -> str:
    return field.replace("_", " ")


def require_int(value: Any, field: str) -> int:
    """Reject non-integers (bool is rejected too; it is never a valid amount)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{field} must be an integer",
            code=f"{field.upper()}_NOT_INTEGER",
            field=field,
            value=repr(value),
        )
    return value


def require_min(value: int, minimum: int, field: str, *, exclusive: bool = False) -> None:
    """
    Check the lower bound of a field.

    Args:
        value: Value to check
        minimum: Lower bound
        field: Field name used for the error code and message
        exclusive: If True, ``value == minimum`` is rejected as well
    """
    require_int(value, field)
    if value < minimum or (exclusive and value == minimum):
        raise ValidationError(
            f"{_label(field)} too low",
            code=f"{field.upper()}_TOO_LOW",
            field=field,
            value=value,
        )


def require_max(value: int, maximum: int, field: str) -> None:
    """Check the upper bound of a field."""
    require_int(value, field)
    if value > maximum:
        raise ValidationError(
            f"{_label(field)} too high",
            code=f"{field.upper()}_TOO_HIGH",
            field=field,
            value=value,
        )


def require_range(
    value: int,
    minimum: int,
    maximum: int,
    field: str,
    *,
    exclusive_min: bool = False,
) -> None:
    """Check a closed range; the low bound is checked before the high bound."""
    require_min(value, minimum, field, exclusive=exclusive_min)
    require_max(value, maximum, field)


def require_optional_range(
    value: int,
    nil: int,
    minimum: int,
    maximum: int,
    field: str,
) -> None:
    """Like ``require_range`` but the nil sentinel is also accepted."""
    require_int(value, field)
    if value == nil:
        return
    require_range(value, minimum, maximum, field)


def require_nonzero(value: int, field: str) -> None:
    require_int(value, field)
    if value == 0:
        raise ValidationError(
            f"{_label(field)} is zero",
            code=f"{field.upper()}_IS_ZERO",
            field=field,
            value=value,
        )


def require_one_of(value: int, allowed: Container[int], field: str) -> None:
    require_int(value, field)
    if value not in allowed:
        raise ValidationError(
            f"{_label(field)} is invalid",
            code=f"{field.upper()}_INVALID",
            field=field,
            value=value,
        )


def require_flag(value: int, field: str) -> None:
    """Flags are encoded as 0 or 1."""
    require_one_of(value, (0, 1), field)


def require_length(data: bytes, length: int, field: str, *, message: Optional[str] = None) -> None:
    if not isinstance(data, (bytes, bytearray)):
        raise ValidationError(
            f"{field} must be bytes",
            code=f"{field.upper()}_NOT_BYTES",
            field=field,
        )
    if len(data) != length:
        raise ValidationError(
            message or f"{_label(field)} must be exactly {length} bytes, got {len(data)}",
            code=f"{field.upper()}_INVALID_LENGTH",
            field=field,
            value=len(data),
        )


def fail(message: str, code: str, field: Optional[str] = None, value: Any = None) -> None:
    """Raise a ValidationError for checks that do not fit a helper."""
    raise ValidationError(message, code=code, field=field, value=value)


__all__ = [
    "require_int",
    "require_min",
    "require_max",
    "require_range",
    "require_optional_range",
    "require_nonzero",
    "require_one_of",
    "require_flag",
    "require_length",
    "fail",
]
