"""Pytest configuration and fixtures.

Network access is replaced by ``FakeRpcNode``: an httpx MockTransport that
answers JSON-RPC methods from per-test handlers and records every call.
"""

import asyncio
import json
import os
from typing import Any, Callable

import httpx
import pytest
from eth_abi import encode

# Set test environment
os.environ["DEBUG"] = "true"

from vaultlink.chains import ChainFamily, get_chain
from vaultlink.config import Settings
from vaultlink.rpc.cache import ConnectionCache
from vaultlink.rpc.evm import EvmConnection
from vaultlink.rpc.racer import EndpointRacer
from vaultlink.rpc.solana import SolanaConnection

TEST_PHRASE = "test test test test test test test test test test test junk"
TEST_PHRASE_EVM_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
TEST_PHRASE_EVM_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"

DEFAULT_BLOCKHASH = "11111111111111111111111111111111"


class RpcFailure(Exception):
    """Raised by a handler to answer with a JSON-RPC error object."""
    pass


class FakeRpcNode:
    """In-memory JSON-RPC node for one network."""

    def __init__(self):
        self.handlers: dict[str, Callable[[list], Any]] = {}
        self.calls: list[tuple[str, str, list]] = []
        self.down: set[str] = set()
        self.delays: dict[str, float] = {}
        self.method_delays: dict[str, float] = {}

    def on(self, method: str, result: Any = None, handler: Callable[[list], Any] = None):
        """Answer ``method`` with a fixed result or a ``handler(params)``."""
        self.handlers[method] = handler if handler is not None else (lambda params: result)

    def fail(self, method: str, message: str = "internal error"):
        """Answer ``method`` with a JSON-RPC error."""

        def _raise(params):
            raise RpcFailure(message)

        self.handlers[method] = _raise

    def calls_to(self, method: str) -> list[tuple[str, str, list]]:
        return [call for call in self.calls if call[1] == method]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        payload = json.loads(request.content)
        method, params = payload["method"], payload.get("params", [])
        self.calls.append((url, method, params))

        delay = self.delays.get(url, 0) + self.method_delays.get(method, 0)
        if delay:
            await asyncio.sleep(delay)
        if url in self.down:
            raise httpx.ConnectError("connection refused", request=request)

        body = {"jsonrpc": "2.0", "id": payload["id"]}
        handler = self.handlers.get(method)
        if handler is None:
            body["error"] = {"code": -32601, "message": f"Method not found: {method}"}
        else:
            try:
                body["result"] = handler(params)
            except RpcFailure as e:
                body["error"] = {"code": -32000, "message": str(e)}
        return httpx.Response(200, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


def abi_uint(value: int) -> str:
    """eth_call result for a uint return value."""
    return "0x" + encode(["uint256"], [value]).hex()


def sol_envelope(value: Any) -> dict:
    return {"context": {"slot": 1}, "value": value}


def sol_token_balance(amount: int, decimals: int = 6) -> dict:
    return sol_envelope(
        {
            "amount": str(amount),
            "decimals": decimals,
            "uiAmount": amount / 10**decimals,
            "uiAmountString": str(amount / 10**decimals),
        }
    )


def make_connection_factory(settings: Settings, nodes: dict[str, FakeRpcNode]):
    """Connection factory that routes every handle through the fake nodes."""

    def factory(network: str, url: str):
        transport = nodes[network].transport
        if get_chain(network).family == ChainFamily.EVM:
            return EvmConnection(network, url, timeout=settings.rpc_call_timeout, transport=transport)
        return SolanaConnection(
            network,
            url,
            timeout=settings.rpc_call_timeout,
            transport=transport,
            commitment=settings.sol_commitment,
        )

    return factory


@pytest.fixture
def settings() -> Settings:
    """Settings with fake endpoints and short timeouts."""
    return Settings(
        eth_rpc_urls=["https://eth-a.test/", "https://eth-b.test/", "https://eth-c.test/"],
        bsc_rpc_urls=["https://bsc-a.test/", "https://bsc-b.test/", "https://bsc-c.test/"],
        sol_rpc_urls=["https://sol-a.test/", "https://sol-b.test/"],
        rpc_probe_timeout=0.2,
        rpc_call_timeout=1.0,
        connection_ttl=30.0,
    )


@pytest.fixture
def nodes() -> dict[str, FakeRpcNode]:
    """One fake node per network, answering liveness probes by default."""
    fakes = {"eth": FakeRpcNode(), "bsc": FakeRpcNode(), "sol": FakeRpcNode()}
    fakes["eth"].on("eth_blockNumber", "0x10")
    fakes["bsc"].on("eth_blockNumber", "0x20")
    fakes["sol"].on(
        "getLatestBlockhash",
        sol_envelope({"blockhash": DEFAULT_BLOCKHASH, "lastValidBlockHeight": 100}),
    )
    return fakes


@pytest.fixture
def clock() -> list[float]:
    """Mutable clock reading for the connection cache."""
    return [1000.0]


@pytest.fixture
def racer(settings, nodes, clock) -> EndpointRacer:
    """Endpoint racer wired to the fake nodes with a controllable clock."""
    cache = ConnectionCache(ttl=settings.connection_ttl, clock=lambda: clock[0])
    return EndpointRacer(
        settings,
        cache=cache,
        connection_factory=make_connection_factory(settings, nodes),
    )
