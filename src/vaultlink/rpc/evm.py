"""EVM JSON-RPC connection (Ethereum, BNB Smart Chain).

Supports native balance queries, ERC-20 reads and raw transaction broadcast.
"""

import logging
from typing import Optional

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector

from vaultlink.errors import NetworkError
from vaultlink.rpc.client import RpcConnection

logger = logging.getLogger(__name__)

# ERC-20 method selectors
BALANCE_OF_SELECTOR = function_signature_to_4byte_selector("balanceOf(address)")
DECIMALS_SELECTOR = function_signature_to_4byte_selector("decimals()")
TRANSFER_SELECTOR = function_signature_to_4byte_selector("transfer(address,uint256)")


def encode_balance_of(owner: str) -> str:
    """Calldata for ``balanceOf(owner)``."""
    return "0x" + (BALANCE_OF_SELECTOR + encode(["address"], [owner])).hex()


def encode_decimals() -> str:
    """Calldata for ``decimals()``."""
    return "0x" + DECIMALS_SELECTOR.hex()


def encode_transfer(to: str, amount: int) -> str:
    """Calldata for ``transfer(to, amount)``."""
    return "0x" + (TRANSFER_SELECTOR + encode(["address", "uint256"], [to, amount])).hex()


def _hex_to_int(value) -> int:
    if isinstance(value, int):
        return value
    return int(value, 16)


class EvmConnection(RpcConnection):
    """JSON-RPC handle for an EVM network."""

    async def probe(self) -> None:
        """Liveness probe: current block number."""
        await self.block_number()

    async def block_number(self) -> int:
        return _hex_to_int(await self.request("eth_blockNumber"))

    async def get_balance(self, address: str) -> int:
        """Native balance in wei."""
        return _hex_to_int(await self.request("eth_getBalance", [address, "latest"]))

    async def call(self, to: str, data: str) -> bytes:
        """Execute a read-only contract call and return the raw bytes."""
        result = await self.request("eth_call", [{"to": to, "data": data}, "latest"])
        if not result or result == "0x":
            raise NetworkError(f"eth_call to {to} returned no data", network=self.network)
        return bytes.fromhex(result[2:] if result.startswith("0x") else result)

    async def token_balance_of(self, token: str, owner: str) -> int:
        """ERC-20 balance in the token's base units."""
        raw = await self.call(token, encode_balance_of(owner))
        return decode(["uint256"], raw)[0]

    async def token_decimals(self, token: str) -> int:
        """ERC-20 ``decimals()``."""
        raw = await self.call(token, encode_decimals())
        return decode(["uint8"], raw)[0]

    async def get_transaction_count(self, address: str) -> int:
        """Next nonce including pending transactions."""
        return _hex_to_int(
            await self.request("eth_getTransactionCount", [address, "pending"])
        )

    async def gas_price(self) -> int:
        """Current gas price in wei."""
        return _hex_to_int(await self.request("eth_gasPrice"))

    async def estimate_gas(
        self,
        from_address: str,
        to: str,
        value: int = 0,
        data: Optional[str] = None,
    ) -> int:
        """Estimate gas for a call."""
        tx = {"from": from_address, "to": to, "value": hex(value)}
        if data:
            tx["data"] = data
        return _hex_to_int(await self.request("eth_estimateGas", [tx]))

    async def send_raw_transaction(self, raw_tx: str) -> str:
        """Broadcast a signed transaction and return its hash."""
        if not raw_tx.startswith("0x"):
            raw_tx = f"0x{raw_tx}"
        txid = await self.request("eth_sendRawTransaction", [raw_tx])
        logger.info(f"[{self.network}] transaction broadcast: {txid}")
        return txid
