"""Imported-wallet engine for Ethereum, BNB Smart Chain and Solana."""

from vaultlink.logging_config import setup_logging
from vaultlink.wallet import (
    WalletEngine,
    derive_imported_wallet,
    get_engine,
    get_imported_balances,
    reset_engine,
    send_imported_transaction,
)

__version__ = "0.1.0"

__all__ = [
    "WalletEngine",
    "derive_imported_wallet",
    "get_engine",
    "get_imported_balances",
    "reset_engine",
    "send_imported_transaction",
    "setup_logging",
]
