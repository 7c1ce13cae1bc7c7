"""Local signing backends.

Key material lives in memory for the lifetime of the imported identity and is
never written anywhere. Callers only see addresses and signed payloads.
"""

import logging
from typing import Optional, Sequence

from eth_account import Account
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from vaultlink.chains import ChainFamily
from vaultlink.signing.base import SignedEvmTransaction, Signer, SigningError

logger = logging.getLogger(__name__)


class EvmSigner(Signer):
    """secp256k1 signer shared by every EVM network.

    The same account signs for Ethereum and BNB Smart Chain; the chain id in
    the transaction dict selects the network (EIP-155).
    """

    def __init__(self, private_key: bytes, derivation_path: str = ""):
        super().__init__(ChainFamily.EVM, derivation_path)
        self._account = Account.from_key(private_key)

    @property
    def address(self) -> str:
        """EIP-55 checksum address."""
        return self._account.address

    def sign_transaction(self, tx: dict) -> SignedEvmTransaction:
        """Sign an EVM transaction dict.

        Args:
            tx: Transaction fields (nonce, gas, gasPrice, to, value, data, chainId)

        Returns:
            SignedEvmTransaction with raw bytes and hash as hex
        """
        try:
            signed = self._account.sign_transaction(tx)
        except Exception as e:
            raise SigningError(f"EVM signing failed: {e}") from e

        return SignedEvmTransaction(
            raw_transaction="0x" + bytes(signed.raw_transaction).hex(),
            tx_hash="0x" + bytes(signed.hash).hex(),
        )


class SolanaSigner(Signer):
    """ed25519 signer for Solana."""

    def __init__(self, keypair: Keypair, derivation_path: str = ""):
        super().__init__(ChainFamily.SOLANA, derivation_path)
        self._keypair = keypair

    @classmethod
    def from_seed(cls, seed: bytes, derivation_path: str = "") -> "SolanaSigner":
        """Build from a 32-byte ed25519 seed."""
        return cls(Keypair.from_seed(seed), derivation_path)

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> "SolanaSigner":
        """Build from a 64-byte secret key (seed + public key)."""
        return cls(Keypair.from_bytes(secret_key))

    @property
    def pubkey(self) -> Pubkey:
        return self._keypair.pubkey()

    @property
    def address(self) -> str:
        """Base58 public key."""
        return str(self._keypair.pubkey())

    def sign_instructions(
        self,
        instructions: Sequence[Instruction],
        recent_blockhash: Hash,
        payer: Optional[Pubkey] = None,
    ) -> Transaction:
        """Compile instructions into one transaction and sign it.

        All instructions land in a single message, so they execute atomically.

        Args:
            instructions: Instructions in execution order
            recent_blockhash: Blockhash from getLatestBlockhash
            payer: Fee payer, defaults to this signer

        Returns:
            Signed legacy transaction
        """
        if not instructions:
            raise SigningError("Cannot sign an empty instruction list")

        message = Message.new_with_blockhash(
            list(instructions), payer or self.pubkey, recent_blockhash
        )
        try:
            return Transaction([self._keypair], message, recent_blockhash)
        except Exception as e:
            raise SigningError(f"Solana signing failed: {e}") from e
