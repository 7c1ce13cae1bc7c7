"""Address normalization for EVM and Solana destinations."""

from eth_utils import to_checksum_address
from solders.pubkey import Pubkey

from vaultlink.chains import Network
from vaultlink.errors import AddressNormalizationFailure


def normalize_evm_address(address: str, network=Network.ETH) -> str:
    """Return the EIP-55 checksum form of an EVM address.

    Raises:
        AddressNormalizationFailure: If the address is malformed
    """
    try:
        return to_checksum_address(address)
    except (TypeError, ValueError) as e:
        raise AddressNormalizationFailure(str(address), Network.parse(network).value, str(e)) from None


def normalize_solana_address(address: str) -> Pubkey:
    """Parse a base58 Solana address.

    Raises:
        AddressNormalizationFailure: If the address is malformed
    """
    try:
        return Pubkey.from_string(str(address).strip())
    except (TypeError, ValueError) as e:
        raise AddressNormalizationFailure(str(address), Network.SOL.value, str(e)) from None
