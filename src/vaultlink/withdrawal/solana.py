"""Solana transfer handler.

SOL transfers use one System Program transfer instruction. Stablecoin
transfers move tokens between the sender's and recipient's associated token
accounts; if the recipient's account does not exist yet, an account-creation
instruction (paid by the sender) is prepended and both instructions go out in
one transaction.
"""

import logging
from typing import Optional

from solders.instruction import Instruction
from solders.pubkey import Pubkey
from solders.system_program import TransferParams as SystemTransferParams
from solders.system_program import transfer as system_transfer
from solders.transaction import Transaction
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.models import TransferParams as TokenTransferParams
from spl.token.instructions import create_associated_token_account
from spl.token.instructions import transfer as token_transfer

from vaultlink.chains import Asset, ChainFamily
from vaultlink.config import Settings, get_settings
from vaultlink.rpc.solana import SolanaConnection, associated_token_address
from vaultlink.utils.units import to_base_units
from vaultlink.withdrawal.base import TransferHandler, ValidatedTransfer

logger = logging.getLogger(__name__)


class SolanaTransferHandler(TransferHandler):
    """Sends SOL and SPL stablecoins."""

    family = ChainFamily.SOLANA

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    async def build_instructions(
        self, transfer: ValidatedTransfer, connection: SolanaConnection
    ) -> list[Instruction]:
        """Instructions for a transfer, in execution order."""
        sender: Pubkey = transfer.identity.solana.pubkey
        recipient: Pubkey = transfer.destination

        if transfer.asset == Asset.NATIVE:
            lamports = to_base_units(transfer.amount, transfer.chain.decimals)
            return [
                system_transfer(
                    SystemTransferParams(
                        from_pubkey=sender, to_pubkey=recipient, lamports=lamports
                    )
                )
            ]

        mint = Pubkey.from_string(transfer.chain.token_address(transfer.asset))
        units = to_base_units(transfer.amount, self.settings.spl_token_decimals)
        sender_account = associated_token_address(sender, mint)
        recipient_account = associated_token_address(recipient, mint)

        instructions: list[Instruction] = []
        if await connection.get_account_info(recipient_account) is None:
            logger.info(
                f"Recipient {recipient} has no {transfer.symbol} account; "
                f"creating {recipient_account}"
            )
            instructions.append(
                create_associated_token_account(
                    payer=sender, owner=recipient, mint=mint, token_program_id=TOKEN_PROGRAM_ID
                )
            )

        instructions.append(
            token_transfer(
                TokenTransferParams(
                    program_id=TOKEN_PROGRAM_ID,
                    source=sender_account,
                    dest=recipient_account,
                    owner=sender,
                    amount=units,
                )
            )
        )
        return instructions

    async def build(self, transfer: ValidatedTransfer, connection: SolanaConnection) -> tuple:
        """Instructions plus the blockhash they will be signed against."""
        instructions = await self.build_instructions(transfer, connection)
        blockhash = await connection.get_latest_blockhash()
        return instructions, blockhash

    def sign(self, transfer: ValidatedTransfer, unsigned: tuple) -> Transaction:
        instructions, blockhash = unsigned
        return transfer.identity.solana.sign_instructions(instructions, blockhash)

    async def broadcast(self, signed: Transaction, connection: SolanaConnection) -> str:
        return await connection.send_transaction(signed)
