"""TTL cache of raced connections, keyed by network.

Writes are last-write-wins per network. A lock guards the map so the cache is
safe to share across threads as well as tasks.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from vaultlink.rpc.client import RpcConnection


@dataclass(frozen=True)
class CachedConnection:
    """A connection and the clock reading when it was acquired."""
    connection: RpcConnection
    acquired_at: float


class ConnectionCache:
    """At most one live connection per network, expiring after ``ttl`` seconds."""

    def __init__(self, ttl: float = 30.0, clock: Callable[[], float] = time.monotonic):
        """Initialize the cache.

        Args:
            ttl: Seconds an entry stays valid
            clock: Monotonic time source (injectable for tests)
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CachedConnection] = {}
        self._lock = threading.Lock()

    def get(self, network: str) -> Optional[RpcConnection]:
        """Return the cached connection if it is younger than the TTL."""
        with self._lock:
            entry = self._entries.get(network)
            if entry is None:
                return None
            if self._clock() - entry.acquired_at >= self.ttl:
                del self._entries[network]
                return None
            return entry.connection

    def put(self, network: str, connection: RpcConnection) -> None:
        """Store a connection, replacing any previous entry."""
        with self._lock:
            self._entries[network] = CachedConnection(connection, self._clock())

    def invalidate(self, network: str) -> None:
        """Drop the entry for one network."""
        with self._lock:
            self._entries.pop(network, None)

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
