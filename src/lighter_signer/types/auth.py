"""
Auth tokens for authenticated read endpoints and websocket channels.

A token is not a transaction: its hash input is the UTF-8 message
``"{deadline}:{account_index}:{api_key_index}"`` packed into 4-byte
little-endian limbs, with no chain id or type tag in front.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import List

from lighter_signer.constants import (
    DEFAULT_AUTH_TOKEN_EXPIRY_SECONDS,
    EXPIRY_DEFAULT,
    MAX_ACCOUNT_INDEX,
    MAX_API_KEY_INDEX,
    MAX_TIMESTAMP,
    MIN_ACCOUNT_INDEX,
    MIN_API_KEY_INDEX,
)
from lighter_signer.crypto.field import FieldElement, from_bytes_le
from lighter_signer.utils.validation import require_range


@dataclass(frozen=True)
class AuthToken:
    """
    Unsigned auth token.

    Attributes:
        deadline: Expiry in Unix seconds, or EXPIRY_DEFAULT for now + 7 hours
        account_index: Account the token authenticates
        api_key_index: Key that signs the token
    """

    deadline: int
    account_index: int
    api_key_index: int

    def with_defaults(self, now_ms: int) -> "AuthToken":
        if self.deadline in (EXPIRY_DEFAULT, 0):
            return dataclasses.replace(
                self,
                deadline=now_ms // 1000 + DEFAULT_AUTH_TOKEN_EXPIRY_SECONDS,
            )
        return self

    def validate(self) -> None:
        require_range(
            self.account_index,
            MIN_ACCOUNT_INDEX,
            MAX_ACCOUNT_INDEX,
            "account_index",
            exclusive_min=True,
        )
        require_range(self.api_key_index, MIN_API_KEY_INDEX, MAX_API_KEY_INDEX, "api_key_index")
        require_range(self.deadline, 1, MAX_TIMESTAMP, "deadline")

    def message(self) -> str:
        return f"{self.deadline}:{self.account_index}:{self.api_key_index}"

    def to_field_sequence(self) -> List[FieldElement]:
        return from_bytes_le(self.message().encode("utf-8"), 4)

    def token(self, sig: bytes) -> str:
        return f"{self.message()}:{sig.hex()}"


__all__ = ["AuthToken"]
