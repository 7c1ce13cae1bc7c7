"""On-chain balance aggregation for imported identities.

Fetches native coin, USDT and USDC balances on Ethereum, BNB Smart Chain and
Solana. All three networks run concurrently, and within a network the three
figures are fetched concurrently.

Nothing here raises: any figure that cannot be fetched (missing key half,
bad address, dead endpoint, missing token account) is reported as zero.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Awaitable, Optional

from eth_utils import to_checksum_address
from solders.pubkey import Pubkey

from vaultlink.chains import Asset, ChainConfig, Network, get_chain
from vaultlink.config import Settings
from vaultlink.errors import AddressNormalizationFailure
from vaultlink.hdwallet.base import IdentityKind, ImportedIdentity
from vaultlink.rpc.evm import EvmConnection
from vaultlink.rpc.racer import EndpointRacer
from vaultlink.rpc.solana import SolanaConnection, associated_token_address
from vaultlink.utils.addresses import normalize_evm_address, normalize_solana_address
from vaultlink.utils.units import from_base_units, quantize_places

logger = logging.getLogger(__name__)

ZERO = Decimal(0)


@dataclass
class BalanceSnapshot:
    """Balances on one network. Unavailable figures are zero."""
    native: Decimal = ZERO
    usdt: Decimal = ZERO
    usdc: Decimal = ZERO

    def get(self, asset: Asset) -> Decimal:
        return {
            Asset.NATIVE: self.native,
            Asset.USDT: self.usdt,
            Asset.USDC: self.usdc,
        }[asset]

    def to_dict(self) -> dict[str, float]:
        return {
            "native": float(self.native),
            "usdt": float(self.usdt),
            "usdc": float(self.usdc),
        }


@dataclass
class ImportedBalances:
    """Aggregate balances across all supported networks."""
    eth: BalanceSnapshot = field(default_factory=BalanceSnapshot)
    bsc: BalanceSnapshot = field(default_factory=BalanceSnapshot)
    sol: BalanceSnapshot = field(default_factory=BalanceSnapshot)

    def for_network(self, network) -> BalanceSnapshot:
        return getattr(self, Network.parse(network).value)

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {
            "eth": self.eth.to_dict(),
            "bsc": self.bsc.to_dict(),
            "sol": self.sol.to_dict(),
        }


class BalanceAggregator:
    """Reads balances for an identity through the endpoint racer."""

    def __init__(self, racer: EndpointRacer, settings: Optional[Settings] = None):
        self.racer = racer
        self.settings = settings or racer.settings

    async def aggregate(self, identity: ImportedIdentity) -> ImportedBalances:
        """Fetch all balances for an identity.

        Returns once every network block has settled, successfully or not.
        """
        evm_address: Optional[str] = None
        sol_address: Optional[str] = None

        if identity.kind == IdentityKind.EVM:
            evm_address = identity.evm.address
        elif identity.kind == IdentityKind.SOLANA:
            sol_address = identity.solana.address
        elif identity.kind == IdentityKind.DUAL:
            evm_address = identity.evm.address
            sol_address = identity.solana.address
        else:
            raise ValueError(f"Unhandled identity kind: {identity.kind}")

        blocks: dict[Network, Awaitable[BalanceSnapshot]] = {}
        if evm_address is not None:
            blocks[Network.ETH] = self.fetch_evm_balances(Network.ETH, evm_address)
            blocks[Network.BSC] = self.fetch_evm_balances(Network.BSC, evm_address)
        if sol_address is not None:
            blocks[Network.SOL] = self.fetch_solana_balances(sol_address)

        balances = ImportedBalances()
        results = await asyncio.gather(*blocks.values(), return_exceptions=True)

        for network, result in zip(blocks.keys(), results):
            if isinstance(result, BaseException):
                logger.error(f"[{network.value}] balance block failed: {result}")
                continue
            setattr(balances, network.value, result)

        return balances

    async def _figure(self, network: Network, label: str, fetch: Awaitable[Decimal]) -> Decimal:
        """Await one figure, degrading any failure to zero."""
        try:
            return await fetch
        except Exception as e:
            logger.warning(f"[{network.value}] {label} balance unavailable: {e}")
            return ZERO

    # ======================
    # EVM
    # ======================

    async def fetch_evm_balances(self, network: Network, address: str) -> BalanceSnapshot:
        """Native + USDT + USDC on one EVM network."""
        chain = get_chain(network)
        try:
            owner = normalize_evm_address(address, network)
        except AddressNormalizationFailure as e:
            logger.warning(str(e))
            return BalanceSnapshot()

        connection = await self.racer.acquire(network)

        native, usdt, usdc = await asyncio.gather(
            self._figure(network, chain.symbol, self._evm_native(connection, chain, owner)),
            self._figure(network, "USDT", self._evm_token(connection, chain.usdt_address, owner)),
            self._figure(network, "USDC", self._evm_token(connection, chain.usdc_address, owner)),
        )
        return BalanceSnapshot(native=native, usdt=usdt, usdc=usdc)

    async def _evm_native(self, connection: EvmConnection, chain: ChainConfig, owner: str) -> Decimal:
        wei = await connection.get_balance(owner)
        return from_base_units(wei, chain.decimals)

    async def _evm_token(self, connection: EvmConnection, token: str, owner: str) -> Decimal:
        contract = to_checksum_address(token)
        raw, decimals = await asyncio.gather(
            connection.token_balance_of(contract, owner),
            connection.token_decimals(contract),
        )
        return from_base_units(raw, decimals)

    # ======================
    # Solana
    # ======================

    async def fetch_solana_balances(self, address: str) -> BalanceSnapshot:
        """SOL + USDT + USDC held by a Solana address."""
        network = Network.SOL
        chain = get_chain(network)
        try:
            owner = normalize_solana_address(address)
        except AddressNormalizationFailure as e:
            logger.warning(str(e))
            return BalanceSnapshot()

        connection = await self.racer.acquire(network)

        native, usdt, usdc = await asyncio.gather(
            self._figure(network, chain.symbol, self._sol_native(connection, chain, owner)),
            self._figure(network, "USDT", self._spl_token(connection, chain.usdt_address, owner)),
            self._figure(network, "USDC", self._spl_token(connection, chain.usdc_address, owner)),
        )
        return BalanceSnapshot(native=native, usdt=usdt, usdc=usdc)

    async def _sol_native(self, connection: SolanaConnection, chain: ChainConfig, owner: Pubkey) -> Decimal:
        lamports = await connection.get_balance(owner)
        return quantize_places(
            from_base_units(lamports, chain.decimals), self.settings.sol_native_precision
        )

    async def _spl_token(self, connection: SolanaConnection, mint: str, owner: Pubkey) -> Decimal:
        # getTokenAccountBalance errors when the account was never created
        token_account = associated_token_address(owner, Pubkey.from_string(mint))
        amount = await connection.get_token_account_balance(token_account)
        return from_base_units(amount, self.settings.spl_token_decimals)
