"""RPC access layer: connection handles, endpoint racing and caching."""

from vaultlink.rpc.cache import CachedConnection, ConnectionCache
from vaultlink.rpc.client import RpcConnection
from vaultlink.rpc.evm import EvmConnection
from vaultlink.rpc.racer import EndpointRacer, first_success
from vaultlink.rpc.solana import SolanaConnection

__all__ = [
    "CachedConnection",
    "ConnectionCache",
    "EndpointRacer",
    "EvmConnection",
    "RpcConnection",
    "SolanaConnection",
    "first_success",
]
