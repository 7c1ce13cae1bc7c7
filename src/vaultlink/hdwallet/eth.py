"""EVM key derivation.

Derivation path: m/44'/60'/0'/0/0
Address format: 0x... (EIP-55 checksum)

One key serves Ethereum and BNB Smart Chain.
"""

import logging
import re

from bip_utils import Bip32Secp256k1

from vaultlink.chains import EVM_DERIVATION_PATH
from vaultlink.errors import InvalidSecret
from vaultlink.signing import EvmSigner

logger = logging.getLogger(__name__)

HEX_PRIVATE_KEY_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


def is_hex_private_key(value: str) -> bool:
    """Check for a 32-byte hex key, optionally 0x-prefixed."""
    return bool(HEX_PRIVATE_KEY_RE.match(value.strip()))


def signer_from_seed(seed: bytes, path: str = EVM_DERIVATION_PATH) -> EvmSigner:
    """Derive the EVM signer from a BIP39 seed."""
    bip32_ctx = Bip32Secp256k1.FromSeed(seed)
    child = bip32_ctx.DerivePath(path)
    private_key = child.PrivateKey().Raw().ToBytes()
    return EvmSigner(private_key, derivation_path=path)


def signer_from_private_key(value: str) -> EvmSigner:
    """Build the EVM signer from a hex private key.

    Raises:
        InvalidSecret: If the value is not a usable secp256k1 key
    """
    cleaned = value.strip()
    if not is_hex_private_key(cleaned):
        raise InvalidSecret("Not a 32-byte hex private key")

    hex_key = cleaned[2:] if cleaned.lower().startswith("0x") else cleaned
    try:
        return EvmSigner(bytes.fromhex(hex_key))
    except Exception as e:
        # zero key or key >= curve order
        raise InvalidSecret(f"Invalid secp256k1 private key: {e}") from None
