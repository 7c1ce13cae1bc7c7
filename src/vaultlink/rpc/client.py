"""JSON-RPC 2.0 connection handle over HTTPS.

A connection is a lightweight handle bound to one endpoint URL. Every request
opens a short-lived httpx client, so handles can be cached, shared between
tasks and dropped without cleanup.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from vaultlink.errors import NetworkError

logger = logging.getLogger(__name__)

_request_ids = itertools.count(1)


class RpcConnection(ABC):
    """Base JSON-RPC connection for one network endpoint."""

    def __init__(
        self,
        network: str,
        url: str,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize connection handle.

        Args:
            network: Logical network key (eth, bsc, sol)
            url: HTTPS JSON-RPC endpoint
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.network = network
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        """Send one JSON-RPC request and return its ``result``.

        Raises:
            NetworkError: On transport failure, timeout, HTTP error status or
                a JSON-RPC error object
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(_request_ids),
            "method": method,
            "params": params if params is not None else [],
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise NetworkError(
                f"{method} timed out after {self.timeout}s ({self.url})",
                network=self.network,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(
                f"{method} failed ({self.url}): {e}", network=self.network, cause=e
            ) from e
        except ValueError as e:
            raise NetworkError(
                f"{method} returned invalid JSON ({self.url})",
                network=self.network,
                cause=e,
            ) from e

        if not isinstance(data, dict):
            raise NetworkError(f"{method} returned unexpected payload", network=self.network)

        if data.get("error") is not None:
            error = data["error"]
            if isinstance(error, dict):
                error = error.get("message", str(error))
            raise NetworkError(f"{method} error: {error}", network=self.network)

        if "result" not in data:
            raise NetworkError(f"{method} returned no result", network=self.network)

        return data["result"]

    @abstractmethod
    async def probe(self) -> None:
        """Lightweight read call used to check the endpoint is live."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(network={self.network}, url={self.url})"
