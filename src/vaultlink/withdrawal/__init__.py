"""Transfer module for sending native coins and stablecoins.

This module validates, builds, signs and broadcasts single-asset transfers.
"""

from vaultlink.withdrawal.base import TransferReceipt, TransferRequest
from vaultlink.withdrawal.eth import EvmTransferHandler
from vaultlink.withdrawal.factory import TransferDispatcher, validate_transfer
from vaultlink.withdrawal.solana import SolanaTransferHandler

__all__ = [
    "EvmTransferHandler",
    "SolanaTransferHandler",
    "TransferDispatcher",
    "TransferReceipt",
    "TransferRequest",
    "validate_transfer",
]
