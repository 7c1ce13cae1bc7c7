"""Base interfaces for outgoing transfers.

Transfer flow:
1. Validate amount, network, asset, key availability and destination
2. Resolve a live connection for the network
3. Build the transaction for the chain family and asset class
4. Sign with the identity's signer
5. Broadcast and return the transaction id

There is no retry and no partial state: a failure at any step surfaces to the
caller and nothing has been broadcast, so the request can simply be resent.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Union

from solders.pubkey import Pubkey

from vaultlink.chains import Asset, ChainConfig, ChainFamily, Network
from vaultlink.hdwallet.base import ImportedIdentity
from vaultlink.rpc.client import RpcConnection

logger = logging.getLogger(__name__)


class TransferStage(str, Enum):
    """Post-validation stages of a transfer, in order."""
    RESOLVE_CONNECTION = "resolve-connection"
    BUILD = "build"
    SIGN = "sign"
    BROADCAST = "broadcast"


@dataclass
class TransferRequest:
    """Request to send one asset from an imported identity.

    ``network`` and ``asset`` accept enum members or their string forms
    (``"eth"``, ``"usdt"``, ``"BNB"``...). ``amount`` is in whole units.
    """
    identity: ImportedIdentity
    network: Union[Network, str]
    asset: Union[Asset, str]
    destination: str
    amount: Union[Decimal, int, float, str]


@dataclass(frozen=True)
class ValidatedTransfer:
    """A transfer request after validation, with parsed fields."""
    identity: ImportedIdentity
    chain: ChainConfig
    asset: Asset
    destination: Union[str, Pubkey]  # checksum address (EVM) or Pubkey (Solana)
    amount: Decimal

    @property
    def network(self) -> Network:
        return self.chain.network

    @property
    def symbol(self) -> str:
        return self.chain.symbol if self.asset == Asset.NATIVE else self.asset.value.upper()


@dataclass(frozen=True)
class TransferReceipt:
    """Result of a successful broadcast."""
    txid: str
    network: Network
    asset: Asset
    amount: Decimal
    destination: str

    def to_dict(self) -> dict:
        return {
            "txid": self.txid,
            "network": self.network.value,
            "asset": self.asset.value,
            "amount": str(self.amount),
            "destination": self.destination,
        }


class TransferHandler(ABC):
    """Builds, signs and broadcasts transfers for one chain family.

    The dispatcher drives the three steps in order; each step only sees the
    output of the previous one.
    """

    family: ChainFamily

    @abstractmethod
    async def build(self, transfer: ValidatedTransfer, connection: RpcConnection) -> Any:
        """Build the unsigned transaction (may read chain state)."""
        pass

    @abstractmethod
    def sign(self, transfer: ValidatedTransfer, unsigned: Any) -> Any:
        """Sign the built transaction with the identity's signer."""
        pass

    @abstractmethod
    async def broadcast(self, signed: Any, connection: RpcConnection) -> str:
        """Broadcast the signed transaction and return its id."""
        pass
