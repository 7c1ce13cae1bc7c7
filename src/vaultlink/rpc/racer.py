"""Endpoint racer: pick a responsive RPC endpoint per network.

Acquisition flow:
1. Return the cached connection if it is younger than the TTL
2. Probe every configured endpoint in parallel, each bounded by a timeout
3. The first probe to succeed wins; the others are left to finish on their own
4. If every probe fails, fall back to the first endpoint without verifying it

Step 4 means ``acquire`` never raises for a reachable-or-not network. Calls made
on a fallback connection may still fail; callers already handle that.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional, TypeVar, Union

from vaultlink.chains import ChainFamily, Network, get_chain
from vaultlink.config import Settings, get_settings
from vaultlink.errors import EndpointUnreachable
from vaultlink.rpc.cache import ConnectionCache
from vaultlink.rpc.client import RpcConnection
from vaultlink.rpc.evm import EvmConnection
from vaultlink.rpc.solana import SolanaConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")

ConnectionFactory = Callable[[str, str], RpcConnection]


def _discard_outcome(task: asyncio.Task) -> None:
    """Consume a losing task's outcome so it is never reported as unhandled."""
    if not task.cancelled():
        task.exception()


async def first_success(attempts: Iterable[Awaitable[T]]) -> T:
    """Return the result of whichever attempt succeeds first.

    Losing attempts are not cancelled; their outcomes are discarded when they
    complete. Ties within one loop iteration go to the earlier attempt.

    Raises:
        EndpointUnreachable: If every attempt fails (chained to the last error)
    """
    tasks = [asyncio.ensure_future(attempt) for attempt in attempts]
    if not tasks:
        raise EndpointUnreachable("No attempts to race")

    pending = set(tasks)
    last_error: Optional[BaseException] = None
    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            winner: Optional[asyncio.Future] = None
            for task in (t for t in tasks if t in done):
                if task.cancelled():
                    continue
                error = task.exception()
                if error is None:
                    if winner is None:
                        winner = task
                else:
                    last_error = error
            if winner is not None:
                return winner.result()
    finally:
        for task in pending:
            task.add_done_callback(_discard_outcome)

    raise EndpointUnreachable(f"All {len(tasks)} attempts failed") from last_error


class EndpointRacer:
    """Hands out live connection handles per logical network."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[ConnectionCache] = None,
        connection_factory: Optional[ConnectionFactory] = None,
    ):
        """Initialize the racer.

        Args:
            settings: Endpoint lists and timeouts (defaults to get_settings())
            cache: Connection cache (defaults to one using settings' TTL)
            connection_factory: ``(network, url) -> RpcConnection`` override
        """
        self.settings = settings or get_settings()
        if cache is None:
            cache = ConnectionCache(ttl=self.settings.connection_ttl)
        self.cache = cache
        self._connection_factory = connection_factory or self._default_connection

    @property
    def probe_timeout(self) -> float:
        return self.settings.rpc_probe_timeout

    def _default_connection(self, network: str, url: str) -> RpcConnection:
        family = get_chain(network).family
        if family == ChainFamily.EVM:
            return EvmConnection(network, url, timeout=self.settings.rpc_call_timeout)
        if family == ChainFamily.SOLANA:
            return SolanaConnection(
                network,
                url,
                timeout=self.settings.rpc_call_timeout,
                commitment=self.settings.sol_commitment,
            )
        raise ValueError(f"Unhandled chain family: {family}")

    async def _probe(self, connection: RpcConnection) -> RpcConnection:
        try:
            await asyncio.wait_for(connection.probe(), timeout=self.probe_timeout)
        except asyncio.TimeoutError:
            logger.debug(f"Probe timed out after {self.probe_timeout}s: {connection.url}")
            raise
        except Exception as e:
            logger.debug(f"Probe failed for {connection.url}: {e}")
            raise
        return connection

    async def acquire(self, network: Union[str, Network]) -> RpcConnection:
        """Get a connection handle for a network.

        Never raises for a known network: on total probe failure the first
        configured endpoint is returned unverified.
        """
        key = Network.parse(network).value

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        urls = self.settings.get_rpc_urls(key)
        connections = [self._connection_factory(key, url) for url in urls]

        try:
            connection = await first_success(self._probe(c) for c in connections)
            logger.debug(f"[{key}] using {connection.url}")
        except EndpointUnreachable as e:
            connection = connections[0]
            logger.warning(
                f"[{key}] no endpoint passed the liveness probe ({e.__cause__ or e}); "
                f"falling back to {connection.url}"
            )

        self.cache.put(key, connection)
        return connection

    def invalidate(self, network: Union[str, Network]) -> None:
        """Forget the cached connection for a network."""
        self.cache.invalidate(Network.parse(network).value)
