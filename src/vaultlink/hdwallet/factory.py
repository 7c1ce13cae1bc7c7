"""Entry point for turning an imported secret into an identity.

Phrase mode derives both halves from one BIP39 seed. Raw-key mode yields
exactly one half: a 32-byte hex string is always treated as an EVM key, even
if it would also decode as something else; anything else is tried as a
Solana secret key.
"""

import logging

from bip_utils import Bip39MnemonicValidator, Bip39SeedGenerator

from vaultlink.errors import InvalidSecret
from vaultlink.hdwallet import eth, solana
from vaultlink.hdwallet.base import ImportedIdentity, ImportMode

logger = logging.getLogger(__name__)


def normalize_phrase(phrase: str) -> str:
    """Collapse whitespace and lowercase a recovery phrase."""
    return " ".join(phrase.split()).lower()


def seed_from_phrase(phrase: str) -> bytes:
    """Validate a BIP39 phrase and return its 64-byte seed (empty passphrase).

    Raises:
        InvalidSecret: If the word list or checksum is wrong
    """
    mnemonic = normalize_phrase(phrase)
    try:
        valid = Bip39MnemonicValidator().IsValid(mnemonic)
    except Exception:
        valid = False
    if not valid:
        raise InvalidSecret("Invalid recovery phrase")
    return Bip39SeedGenerator(mnemonic).Generate()


def derive_identity(mode, secret: str) -> ImportedIdentity:
    """Derive an imported identity from a phrase or raw private key.

    Args:
        mode: ``phrase`` or ``rawKey`` (``seed``/``private`` also accepted)
        secret: The recovery phrase or private key text

    Returns:
        ImportedIdentity (DUAL for phrases, EVM or SOLANA for raw keys)

    Raises:
        InvalidSecret: On empty or unparseable input
    """
    try:
        import_mode = ImportMode.parse(mode)
    except ValueError as e:
        raise InvalidSecret(str(e)) from None

    cleaned = (secret or "").strip()
    if not cleaned:
        raise InvalidSecret("Missing key")

    if import_mode == ImportMode.PHRASE:
        seed = seed_from_phrase(cleaned)
        identity = ImportedIdentity.dual(
            evm=eth.signer_from_seed(seed),
            solana=solana.signer_from_seed(seed),
        )
    elif import_mode == ImportMode.RAW_KEY:
        if eth.is_hex_private_key(cleaned):
            identity = ImportedIdentity.evm_only(eth.signer_from_private_key(cleaned))
        else:
            identity = ImportedIdentity.solana_only(solana.signer_from_secret_key(cleaned))
    else:
        raise InvalidSecret(f"Unhandled import mode: {import_mode}")

    logger.info(f"Imported {identity.kind.value} identity: {identity!r}")
    return identity
