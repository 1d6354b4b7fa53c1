"""
Transport exceptions.

Raised for network failures, timeouts and non-success responses from the
exchange API. They are surfaced verbatim and never retried by the signer.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from lighter_signer.errors.base import LighterError


class TransportError(LighterError):
    """
    Base exception for API calls.

    Example:
        >>> raise TransportError("nonce request failed", status_code=502)
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "TRANSPORT_ERROR",
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if url:
            details["url"] = url
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, code=code, details=details)
        self.url = url
        self.status_code = status_code


class TransportTimeoutError(TransportError):
    """
    Raised when an API call exceeds the configured timeout.

    Example:
        >>> raise TransportTimeoutError(30000, url="https://.../api/v1/nextNonce")
    """

    def __init__(
        self,
        timeout_ms: int,
        *,
        url: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["timeout_ms"] = timeout_ms
        super().__init__(
            f"request timed out after {timeout_ms}ms",
            code="TRANSPORT_TIMEOUT",
            url=url,
            details=details,
        )
        self.timeout_ms = timeout_ms


class ApiResponseError(TransportError):
    """
    Raised when the API answers with a result code other than 200.

    Attributes:
        api_code: The ``code`` field of the response body.
    """

    def __init__(
        self,
        api_code: int,
        message: str,
        *,
        url: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["api_code"] = api_code
        super().__init__(
            message or f"api returned code {api_code}",
            code="API_ERROR",
            url=url,
            details=details,
        )
        self.api_code = api_code
