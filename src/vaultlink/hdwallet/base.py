"""Imported identity model.

An identity is created once per import and holds signing capabilities for
one or both chain families:

    EVM     raw secp256k1 private key import
    SOLANA  raw Solana secret key import
    DUAL    recovery phrase import (both families derived)

Consumers branch on ``identity.kind`` rather than probing for attributes.
Nothing in this module is ever persisted.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from vaultlink.chains import ChainFamily, Network, get_chain
from vaultlink.signing import EvmSigner, SolanaSigner


class ImportMode(str, Enum):
    """How the secret string should be interpreted."""
    PHRASE = "phrase"
    RAW_KEY = "rawKey"

    @classmethod
    def parse(cls, value) -> "ImportMode":
        if isinstance(value, ImportMode):
            return value
        aliases = {
            "phrase": cls.PHRASE,
            "seed": cls.PHRASE,
            "mnemonic": cls.PHRASE,
            "rawkey": cls.RAW_KEY,
            "raw_key": cls.RAW_KEY,
            "private": cls.RAW_KEY,
        }
        try:
            return aliases[str(value).strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown import mode: {value}") from None


class IdentityKind(str, Enum):
    """Which key halves an identity carries."""
    EVM = "evm"
    SOLANA = "solana"
    DUAL = "dual"


@dataclass(frozen=True)
class ImportedIdentity:
    """Key material derived from one imported secret.

    Build through :meth:`evm_only`, :meth:`solana_only` or :meth:`dual` so the
    kind always matches the populated halves.
    """

    kind: IdentityKind
    evm: Optional[EvmSigner] = field(default=None, repr=False)
    solana: Optional[SolanaSigner] = field(default=None, repr=False)

    def __post_init__(self):
        expected = {
            IdentityKind.EVM: (True, False),
            IdentityKind.SOLANA: (False, True),
            IdentityKind.DUAL: (True, True),
        }[self.kind]
        if (self.evm is not None, self.solana is not None) != expected:
            raise ValueError(f"Key halves do not match identity kind {self.kind.value}")

    @classmethod
    def evm_only(cls, signer: EvmSigner) -> "ImportedIdentity":
        return cls(IdentityKind.EVM, evm=signer)

    @classmethod
    def solana_only(cls, signer: SolanaSigner) -> "ImportedIdentity":
        return cls(IdentityKind.SOLANA, solana=signer)

    @classmethod
    def dual(cls, evm: EvmSigner, solana: SolanaSigner) -> "ImportedIdentity":
        return cls(IdentityKind.DUAL, evm=evm, solana=solana)

    @property
    def has_evm(self) -> bool:
        return self.kind in (IdentityKind.EVM, IdentityKind.DUAL)

    @property
    def has_solana(self) -> bool:
        return self.kind in (IdentityKind.SOLANA, IdentityKind.DUAL)

    @property
    def evm_address(self) -> Optional[str]:
        return self.evm.address if self.evm is not None else None

    @property
    def solana_address(self) -> Optional[str]:
        return self.solana.address if self.solana is not None else None

    def supports(self, network) -> bool:
        """Check whether this identity can sign on a network."""
        family = get_chain(network).family
        if family == ChainFamily.EVM:
            return self.has_evm
        if family == ChainFamily.SOLANA:
            return self.has_solana
        raise ValueError(f"Unhandled chain family: {family}")

    def address_for(self, network) -> Optional[str]:
        """Address on a network, or None if that half is absent."""
        family = get_chain(network).family
        if family == ChainFamily.EVM:
            return self.evm_address
        if family == ChainFamily.SOLANA:
            return self.solana_address
        raise ValueError(f"Unhandled chain family: {family}")

    def to_dict(self) -> dict:
        """Public view of the identity (addresses only)."""
        return {
            "kind": self.kind.value,
            "evm": {"address": self.evm_address} if self.has_evm else None,
            "sol": {"address": self.solana_address} if self.has_solana else None,
            "networks": [n.value for n in Network if self.supports(n)],
        }

    def __repr__(self) -> str:
        return (
            f"ImportedIdentity(kind={self.kind.value}, "
            f"evm={self.evm_address}, solana={self.solana_address})"
        )
