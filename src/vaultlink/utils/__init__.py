"""Shared helpers."""

from vaultlink.utils.addresses import normalize_evm_address, normalize_solana_address
from vaultlink.utils.units import (
    from_base_units,
    quantize_places,
    to_base_units,
    to_decimal,
)

__all__ = [
    "from_base_units",
    "normalize_evm_address",
    "normalize_solana_address",
    "quantize_places",
    "to_base_units",
    "to_decimal",
]
