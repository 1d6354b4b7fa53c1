"""Signing identities and the per-transaction signing session."""

from lighter_signer.protocol.identity import IdentityRegistry, SigningIdentity
from lighter_signer.protocol.pipeline import SigningSession, TransactionStage

__all__ = ["SigningIdentity", "IdentityRegistry", "SigningSession", "TransactionStage"]
