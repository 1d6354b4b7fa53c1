"""
Base exception class for the Lighter signer.

All signer exceptions inherit from LighterError, which carries a
machine-readable error code and a details dictionary next to the
human-readable message. The boundary adapter in ``lighter_signer.bindings``
relies on ``str(error)`` being a complete, single-line description.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class LighterError(Exception):
    """
    Base exception for all signer errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "NONCE_TOO_LOW").
        details: Optional dictionary with additional error context.

    Example:
        >>> raise LighterError(
        ...     "Transaction failed",
        ...     code="TX_FAILED",
        ...     details={"tx_type": 14}
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "LIGHTER_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }
