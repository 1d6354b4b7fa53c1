"""Exchange API transports."""

from lighter_signer.transport.base import Transport
from lighter_signer.transport.http import HTTPTransport

__all__ = ["Transport", "HTTPTransport"]
