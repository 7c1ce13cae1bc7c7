"""EVM transfer handler (Ethereum, BNB Smart Chain).

Native transfers send value directly to the destination. Stablecoin
transfers call the token's ``transfer(address,uint256)`` with the amount
scaled by the decimals read from the contract.
"""

import asyncio
import logging
from typing import Optional

from eth_utils import to_checksum_address

from vaultlink.chains import Asset, ChainFamily
from vaultlink.rpc.evm import EvmConnection, encode_transfer
from vaultlink.signing.base import SignedEvmTransaction
from vaultlink.utils.units import to_base_units
from vaultlink.withdrawal.base import TransferHandler, ValidatedTransfer

logger = logging.getLogger(__name__)


class EvmTransferHandler(TransferHandler):
    """Sends native coin and ERC-20/BEP-20 stablecoins."""

    family = ChainFamily.EVM

    async def build(self, transfer: ValidatedTransfer, connection: EvmConnection) -> dict:
        """Unsigned legacy transaction dict ready for ``sign_transaction``."""
        signer = transfer.identity.evm
        chain = transfer.chain

        if transfer.asset == Asset.NATIVE:
            to = transfer.destination
            value = to_base_units(transfer.amount, chain.decimals, strict=True)
            data: Optional[str] = None
        else:
            to = to_checksum_address(chain.token_address(transfer.asset))
            decimals = await connection.token_decimals(to)
            units = to_base_units(transfer.amount, decimals, strict=True)
            value = 0
            data = encode_transfer(transfer.destination, units)

        nonce, gas_price, gas = await asyncio.gather(
            connection.get_transaction_count(signer.address),
            connection.gas_price(),
            connection.estimate_gas(signer.address, to, value=value, data=data),
        )

        tx = {
            "nonce": nonce,
            "gasPrice": gas_price,
            "gas": gas,
            "to": to,
            "value": value,
            "chainId": chain.chain_id,
        }
        if data:
            tx["data"] = data
        return tx

    def sign(self, transfer: ValidatedTransfer, unsigned: dict) -> SignedEvmTransaction:
        signed = transfer.identity.evm.sign_transaction(unsigned)
        logger.debug(
            f"[{transfer.network.value}] signed {transfer.symbol} transfer {signed.tx_hash}"
        )
        return signed

    async def broadcast(self, signed: SignedEvmTransaction, connection: EvmConnection) -> str:
        return await connection.send_raw_transaction(signed.raw_transaction)
