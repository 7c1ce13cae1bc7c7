"""Base interfaces for transaction signing.

Signing flow:
1. Build unsigned transaction (withdrawal handler)
2. Hand it to the signer held by the imported identity
3. Signer returns the signed payload (never the key itself)
4. Broadcast signed payload

Signers are the only objects that hold key material. They expose the public
address and a signing operation; nothing else crosses the module boundary.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from vaultlink.chains import ChainFamily

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedEvmTransaction:
    """Signed EVM transaction ready for eth_sendRawTransaction.

    Attributes:
        raw_transaction: RLP-encoded signed transaction, 0x-prefixed hex
        tx_hash: Transaction hash, 0x-prefixed hex
    """
    raw_transaction: str
    tx_hash: str


class Signer(ABC):
    """Abstract signing capability bound to one key."""

    def __init__(self, family: ChainFamily, derivation_path: str = ""):
        self.family = family
        self.derivation_path = derivation_path

    @property
    @abstractmethod
    def address(self) -> str:
        """Public address in the network's canonical text form."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(address={self.address})"

    def __str__(self) -> str:
        return self.address


class SigningError(Exception):
    """Exception raised when signing fails."""
    pass
