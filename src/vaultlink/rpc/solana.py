"""Solana JSON-RPC connection.

Transactions are built and signed with solders; this module only moves
bytes and JSON over the wire.
"""

import base64
import logging
from typing import Any, Optional

import httpx
from solders.hash import Hash
from solders.pubkey import Pubkey
from solders.transaction import Transaction
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import get_associated_token_address

from vaultlink.errors import NetworkError
from vaultlink.rpc.client import RpcConnection

logger = logging.getLogger(__name__)


class SolanaConnection(RpcConnection):
    """JSON-RPC handle for Solana."""

    def __init__(
        self,
        network: str,
        url: str,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        commitment: str = "confirmed",
    ):
        super().__init__(network, url, timeout=timeout, transport=transport)
        self.commitment = commitment

    def _config(self, **extra) -> dict:
        config = {"commitment": self.commitment}
        config.update(extra)
        return config

    async def probe(self) -> None:
        """Liveness probe: latest blockhash."""
        await self.get_latest_blockhash()

    async def get_latest_blockhash(self) -> Hash:
        result = await self.request("getLatestBlockhash", [self._config()])
        try:
            return Hash.from_string(result["value"]["blockhash"])
        except (KeyError, TypeError, ValueError) as e:
            raise NetworkError("Malformed getLatestBlockhash response", network=self.network, cause=e) from e

    async def get_balance(self, pubkey: Pubkey) -> int:
        """Native balance in lamports."""
        result = await self.request("getBalance", [str(pubkey), self._config()])
        return int(_value(result, "getBalance", self.network))

    async def get_token_account_balance(self, token_account: Pubkey) -> int:
        """Raw token amount held by an SPL token account.

        Raises:
            NetworkError: If the account does not exist or is not a token account
        """
        result = await self.request(
            "getTokenAccountBalance", [str(token_account), self._config()]
        )
        value = _value(result, "getTokenAccountBalance", self.network)
        try:
            return int(value["amount"])
        except (KeyError, TypeError, ValueError) as e:
            raise NetworkError(
                "Malformed getTokenAccountBalance response", network=self.network, cause=e
            ) from e

    async def get_account_info(self, pubkey: Pubkey) -> Optional[dict]:
        """Account info, or None if the account does not exist."""
        result = await self.request(
            "getAccountInfo", [str(pubkey), self._config(encoding="base64")]
        )
        return _value(result, "getAccountInfo", self.network)

    async def send_transaction(self, transaction: Transaction) -> str:
        """Broadcast a signed transaction and return its signature."""
        encoded = base64.b64encode(bytes(transaction)).decode()
        signature = await self.request(
            "sendTransaction",
            [
                encoded,
                {
                    "encoding": "base64",
                    "skipPreflight": False,
                    "preflightCommitment": self.commitment,
                },
            ],
        )
        logger.info(f"[{self.network}] transaction broadcast: {signature}")
        return signature


def _value(result: Any, method: str, network: str) -> Any:
    """Unwrap the ``{"context": ..., "value": ...}`` envelope."""
    if not isinstance(result, dict) or "value" not in result:
        raise NetworkError(f"Malformed {method} response", network=network)
    return result["value"]


def associated_token_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """Canonical (associated) token account of ``owner`` for ``mint``.

    The address is derivable offline; the account may not exist on-chain
    until it is first funded.
    """
    return get_associated_token_address(owner, mint, TOKEN_PROGRAM_ID)
