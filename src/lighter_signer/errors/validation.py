"""
Validation exceptions.

Raised when a transaction field falls outside its protocol bounds. These
are always caller-correctable and are never retried.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from lighter_signer.errors.base import LighterError


class ValidationError(LighterError):
    """
    Raised when input validation fails.

    Attributes:
        field: Name of the offending field, when there is one.

    Example:
        >>> raise ValidationError(
        ...     "account_index too low",
        ...     code="ACCOUNT_INDEX_TOO_LOW",
        ...     field="account_index",
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "VALIDATION_ERROR",
        field: Optional[str] = None,
        value: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value

        super().__init__(message, code=code, details=details)
        self.field = field
        self.value = value


class InvalidStateTransitionError(LighterError):
    """
    Raised when a signing session is driven out of order.

    A session moves Constructed -> Validated -> Encoded -> Hashed -> Signed
    and never backwards; a failed session cannot be resumed.
    """

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            f"cannot move signing session from {current} to {requested}",
            code="INVALID_STATE_TRANSITION",
            details={"current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested
