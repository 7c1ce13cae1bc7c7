"""Static configuration for the three supported networks.

- ETH and BSC share one secp256k1 account (m/44'/60'/0'/0/0)
- SOL uses an ed25519 keypair (m/44'/501'/0'/0')

Each network tracks its native coin plus USDT and USDC.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ChainFamily(str, Enum):
    """Signature/account scheme of a network."""
    EVM = "evm"
    SOLANA = "solana"


class Network(str, Enum):
    """Logical network key."""
    ETH = "eth"
    BSC = "bsc"
    SOL = "sol"

    @classmethod
    def parse(cls, value: Union[str, "Network"]) -> "Network":
        if isinstance(value, Network):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unsupported network: {value}") from None


class Asset(str, Enum):
    """Transferable asset class on any network."""
    NATIVE = "native"
    USDT = "usdt"
    USDC = "usdc"


@dataclass(frozen=True)
class ChainConfig:
    """Configuration for a network."""

    name: str
    network: Network
    family: ChainFamily
    symbol: str
    decimals: int
    usdt_address: str
    usdc_address: str
    chain_id: Optional[int] = None  # EVM chains only
    explorer_url: str = ""

    def token_address(self, asset: Asset) -> str:
        """Contract (EVM) or mint (Solana) address for a stablecoin."""
        if asset == Asset.USDT:
            return self.usdt_address
        if asset == Asset.USDC:
            return self.usdc_address
        raise ValueError(f"{asset.value} is not a token on {self.name}")


# ======================
# Network Configurations
# ======================

CHAINS: dict[Network, ChainConfig] = {
    Network.ETH: ChainConfig(
        name="Ethereum",
        network=Network.ETH,
        family=ChainFamily.EVM,
        symbol="ETH",
        decimals=18,
        chain_id=1,
        usdt_address="0xdAC17F958D2ee523a2206206994597C13D831ec7",
        usdc_address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
        explorer_url="https://etherscan.io",
    ),
    Network.BSC: ChainConfig(
        name="BNB Smart Chain",
        network=Network.BSC,
        family=ChainFamily.EVM,
        symbol="BNB",
        decimals=18,
        chain_id=56,
        usdt_address="0x55d398326f99059fF775485246999027B3197955",
        usdc_address="0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d",
        explorer_url="https://bscscan.com",
    ),
    Network.SOL: ChainConfig(
        name="Solana",
        network=Network.SOL,
        family=ChainFamily.SOLANA,
        symbol="SOL",
        decimals=9,
        usdt_address="Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",
        usdc_address="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
        explorer_url="https://solscan.io",
    ),
}

EVM_DERIVATION_PATH = "m/44'/60'/0'/0/0"
SOLANA_DERIVATION_PATH = "m/44'/501'/0'/0'"


def get_chain(network: Union[str, Network]) -> ChainConfig:
    """Get configuration for a network key."""
    return CHAINS[Network.parse(network)]


def parse_asset(value: Union[str, Asset], network: Union[str, Network]) -> Asset:
    """Resolve an asset identifier for a network.

    Accepts ``native``/``usdt``/``usdc`` or the network's native symbol
    (ETH, BNB, SOL), case-insensitive.
    """
    if isinstance(value, Asset):
        return value
    chain = get_chain(network)
    cleaned = str(value).strip().lower()
    if cleaned == chain.symbol.lower():
        return Asset.NATIVE
    try:
        return Asset(cleaned)
    except ValueError:
        raise ValueError(f"Unsupported asset on {chain.name}: {value}") from None
