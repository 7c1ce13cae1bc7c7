"""Solana key derivation.

Derivation path: m/44'/501'/0'/0' (SLIP-10 ed25519, all hardened)
Address format: base58 public key

Raw secret keys are accepted as a JSON byte array (Solana CLI keypair file
contents) or a base58 string (Phantom/Solflare export), both 64 bytes.
"""

import json
import logging

import base58
from bip_utils import Bip32Slip10Ed25519

from vaultlink.chains import SOLANA_DERIVATION_PATH
from vaultlink.errors import InvalidSecret
from vaultlink.signing import SolanaSigner

logger = logging.getLogger(__name__)

SECRET_KEY_LENGTH = 64


def signer_from_seed(seed: bytes, path: str = SOLANA_DERIVATION_PATH) -> SolanaSigner:
    """Derive the Solana signer from a BIP39 seed."""
    bip32_ctx = Bip32Slip10Ed25519.FromSeed(seed)
    child = bip32_ctx.DerivePath(path)
    private_seed = child.PrivateKey().Raw().ToBytes()
    return SolanaSigner.from_seed(private_seed, derivation_path=path)


def _decode_json_array(value: str):
    """Return the bytes of a JSON integer array, or None if not one."""
    try:
        parsed = json.loads(value)
    except ValueError:
        return None
    if not isinstance(parsed, list):
        return None
    try:
        return bytes(parsed)
    except (TypeError, ValueError):
        raise InvalidSecret("JSON key must be an array of byte values") from None


def signer_from_secret_key(value: str) -> SolanaSigner:
    """Build the Solana signer from a JSON array or base58 secret key.

    Raises:
        InvalidSecret: If neither encoding yields a valid 64-byte keypair
    """
    cleaned = value.strip()

    key_bytes = _decode_json_array(cleaned)
    if key_bytes is None:
        try:
            key_bytes = base58.b58decode(cleaned)
        except ValueError:
            raise InvalidSecret("Key is neither a JSON byte array nor base58") from None

    if len(key_bytes) != SECRET_KEY_LENGTH:
        raise InvalidSecret(
            f"Solana secret key must be {SECRET_KEY_LENGTH} bytes, got {len(key_bytes)}"
        )

    try:
        return SolanaSigner.from_secret_key(key_bytes)
    except Exception as e:
        raise InvalidSecret(f"Invalid Solana secret key: {e}") from None
