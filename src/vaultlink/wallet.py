"""Wallet engine facade.

One ``WalletEngine`` owns the endpoint racer (and its connection cache), the
balance aggregator and the transfer dispatcher. The module-level functions
are the entry points used by UI form handlers:

    identity = derive_imported_wallet("phrase", words)
    balances = await get_imported_balances(identity)
    receipt = await send_imported_transaction(
        identity=identity, network="sol", asset="usdc",
        destination="...", amount="10",
    )
"""

import logging
from decimal import Decimal
from typing import Optional, Union

from vaultlink.chains import Asset, Network
from vaultlink.config import Settings, get_settings
from vaultlink.hdwallet.base import ImportedIdentity, ImportMode
from vaultlink.hdwallet.factory import derive_identity
from vaultlink.rpc.cache import ConnectionCache
from vaultlink.rpc.racer import EndpointRacer
from vaultlink.services.balance_sync import BalanceAggregator, ImportedBalances
from vaultlink.withdrawal.base import TransferReceipt, TransferRequest
from vaultlink.withdrawal.factory import TransferDispatcher

logger = logging.getLogger(__name__)


class WalletEngine:
    """Derive, read and send for imported wallets."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        racer: Optional[EndpointRacer] = None,
    ):
        self.settings = settings or get_settings()
        if racer is None:
            racer = EndpointRacer(self.settings, ConnectionCache(ttl=self.settings.connection_ttl))
        self.racer = racer
        self.aggregator = BalanceAggregator(self.racer, self.settings)
        self.dispatcher = TransferDispatcher(self.racer, self.settings)

    def derive(self, mode: Union[ImportMode, str], secret: str) -> ImportedIdentity:
        """Turn a phrase or raw key into an identity.

        Raises:
            InvalidSecret: If the input cannot be parsed
        """
        return derive_identity(mode, secret)

    async def balances(self, identity: ImportedIdentity) -> ImportedBalances:
        """Native, USDT and USDC balances on every network. Never raises."""
        return await self.aggregator.aggregate(identity)

    async def send(
        self,
        identity: ImportedIdentity,
        network: Union[Network, str],
        asset: Union[Asset, str],
        destination: str,
        amount: Union[Decimal, int, float, str],
    ) -> TransferReceipt:
        """Send one transfer and return its receipt."""
        request = TransferRequest(
            identity=identity,
            network=network,
            asset=asset,
            destination=destination,
            amount=amount,
        )
        return await self.dispatcher.send(request)

    def reset_connections(self) -> None:
        """Drop every cached connection; the next call re-probes."""
        self.racer.cache.clear()


# Default engine
_engine: Optional[WalletEngine] = None


def get_engine() -> WalletEngine:
    """Get or create the process-wide engine."""
    global _engine
    if _engine is None:
        _engine = WalletEngine()
    return _engine


def reset_engine() -> None:
    """Discard the process-wide engine (and its connection cache)."""
    global _engine
    _engine = None


def derive_imported_wallet(mode: Union[ImportMode, str], secret: str) -> ImportedIdentity:
    return get_engine().derive(mode, secret)


async def get_imported_balances(identity: ImportedIdentity) -> ImportedBalances:
    return await get_engine().balances(identity)


async def send_imported_transaction(
    identity: ImportedIdentity,
    network: Union[Network, str],
    asset: Union[Asset, str],
    destination: str,
    amount: Union[Decimal, int, float, str],
) -> TransferReceipt:
    """Send one transfer.

    Returns:
        TransferReceipt carrying the transaction id (hash or signature)
    """
    return await get_engine().send(identity, network, asset, destination, amount)
