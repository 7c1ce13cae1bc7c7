"""Services for blockchain interaction."""

from vaultlink.services.balance_sync import (
    BalanceAggregator,
    BalanceSnapshot,
    ImportedBalances,
)

__all__ = [
    "BalanceAggregator",
    "BalanceSnapshot",
    "ImportedBalances",
]
