"""Signing capabilities for imported keys."""

from vaultlink.signing.base import SignedEvmTransaction, Signer, SigningError
from vaultlink.signing.local import EvmSigner, SolanaSigner

__all__ = [
    "EvmSigner",
    "SignedEvmTransaction",
    "Signer",
    "SigningError",
    "SolanaSigner",
]
