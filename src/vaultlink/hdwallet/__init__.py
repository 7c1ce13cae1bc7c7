"""Key derivation for imported wallets."""

from vaultlink.hdwallet.base import IdentityKind, ImportedIdentity, ImportMode
from vaultlink.hdwallet.factory import derive_identity

__all__ = [
    "IdentityKind",
    "ImportMode",
    "ImportedIdentity",
    "derive_identity",
]
