"""Tests for key derivation and the imported identity model."""

import hashlib
import hmac
import json

import base58
import pytest
from solders.keypair import Keypair

from conftest import TEST_PHRASE, TEST_PHRASE_EVM_ADDRESS, TEST_PHRASE_EVM_KEY
from vaultlink.chains import Network
from vaultlink.errors import InvalidSecret
from vaultlink.hdwallet import IdentityKind, ImportedIdentity, ImportMode, derive_identity
from vaultlink.hdwallet.eth import is_hex_private_key
from vaultlink.hdwallet.factory import normalize_phrase
from vaultlink.signing import EvmSigner


HARDENED = 0x80000000


def _slip10_ed25519(seed: bytes, path: list[int]) -> tuple[bytes, bytes]:
    """(private key, chain code) for a hardened SLIP-10 ed25519 path, from hmac alone."""
    digest = hmac.new(b"ed25519 seed", seed, hashlib.sha512).digest()
    key, chain_code = digest[:32], digest[32:]
    for index in path:
        data = b"\x00" + key + (index | HARDENED).to_bytes(4, "big")
        digest = hmac.new(chain_code, data, hashlib.sha512).digest()
        key, chain_code = digest[:32], digest[32:]
    return key, chain_code


def _reference_solana_address(phrase: str) -> str:
    """m/44'/501'/0'/0' address computed without bip_utils."""
    seed = hashlib.pbkdf2_hmac("sha512", phrase.encode(), b"mnemonic", 2048)
    key, _ = _slip10_ed25519(seed, [44, 501, 0, 0])
    return str(Keypair.from_seed(key).pubkey())


class TestPhraseImport:
    """Tests for recovery phrase import."""

    def test_phrase_yields_dual_identity(self):
        """A phrase populates both key halves."""
        identity = derive_identity("phrase", TEST_PHRASE)

        assert identity.kind == IdentityKind.DUAL
        assert identity.has_evm
        assert identity.has_solana

    def test_known_vector_evm_address(self):
        """The well-known test phrase derives the standard first account."""
        identity = derive_identity(ImportMode.PHRASE, TEST_PHRASE)

        assert identity.evm_address == TEST_PHRASE_EVM_ADDRESS
        assert identity.evm.derivation_path == "m/44'/60'/0'/0/0"

    def test_known_vector_solana_address(self):
        """Solana address matches the m/44'/501'/0'/0' derivation."""
        identity = derive_identity(ImportMode.PHRASE, TEST_PHRASE)

        assert identity.solana_address == _reference_solana_address(TEST_PHRASE)
        assert identity.solana.derivation_path == "m/44'/501'/0'/0'"

    def test_slip10_reference_matches_published_vector(self):
        """The reference derivation reproduces SLIP-0010 ed25519 test vector 1 (chain m)."""
        key, chain_code = _slip10_ed25519(bytes.fromhex("000102030405060708090a0b0c0d0e0f"), [])

        assert key.hex() == "2b4be7f19ee27bbf30c667b642d5f4aa69fd169872f8fc3059c08ebae2eb19e7"
        assert chain_code.hex() == "90046a93de5380a72b5e45010748567d5ea02bbf6522f979e05c0d8d8ca9fffb"

    def test_derivation_is_deterministic(self):
        """Same phrase always gives the same addresses."""
        first = derive_identity("phrase", TEST_PHRASE)
        second = derive_identity("phrase", TEST_PHRASE)

        assert first.evm_address == second.evm_address
        assert first.solana_address == second.solana_address

    def test_phrase_whitespace_and_case_ignored(self):
        """Extra whitespace and capitals do not change the result."""
        messy = "  Test test TEST test\ttest test test test\n test test test junk "
        identity = derive_identity("seed", messy)

        assert identity.evm_address == TEST_PHRASE_EVM_ADDRESS
        assert normalize_phrase(messy) == TEST_PHRASE

    def test_bad_checksum_phrase_rejected(self):
        """A phrase with a wrong checksum word is rejected."""
        with pytest.raises(InvalidSecret):
            derive_identity("phrase", "test " * 11 + "test")

    def test_non_bip39_words_rejected(self):
        """Words outside the BIP39 list are rejected."""
        with pytest.raises(InvalidSecret):
            derive_identity("phrase", "hello world this is not a recovery phrase at all ok")


class TestRawKeyImport:
    """Tests for raw private key import."""

    def test_hex_key_yields_evm_only(self):
        """A 32-byte hex key populates only the EVM half."""
        identity = derive_identity("rawKey", TEST_PHRASE_EVM_KEY)

        assert identity.kind == IdentityKind.EVM
        assert identity.evm_address == TEST_PHRASE_EVM_ADDRESS
        assert identity.solana is None
        assert identity.solana_address is None

    def test_hex_key_without_prefix(self):
        """The 0x prefix is optional."""
        identity = derive_identity("private", TEST_PHRASE_EVM_KEY[2:])

        assert identity.evm_address == TEST_PHRASE_EVM_ADDRESS

    def test_base58_solana_key(self):
        """A base58 64-byte secret key populates only the Solana half."""
        keypair = Keypair()
        secret = base58.b58encode(bytes(keypair)).decode()

        identity = derive_identity("rawKey", secret)

        assert identity.kind == IdentityKind.SOLANA
        assert identity.solana_address == str(keypair.pubkey())
        assert identity.evm is None

    def test_json_array_solana_key(self):
        """A Solana CLI keypair file (JSON byte array) is accepted."""
        keypair = Keypair()
        secret = json.dumps(list(bytes(keypair)))

        identity = derive_identity("rawKey", secret)

        assert identity.solana_address == str(keypair.pubkey())

    def test_short_solana_key_rejected(self):
        """A base58 string that is not 64 bytes is rejected."""
        with pytest.raises(InvalidSecret):
            derive_identity("rawKey", base58.b58encode(b"\x01" * 32).decode())

    def test_garbage_rejected(self):
        """Text that is neither hex nor base58 is rejected."""
        with pytest.raises(InvalidSecret):
            derive_identity("rawKey", "not-a-key-0OIl")

    def test_zero_evm_key_rejected(self):
        """The all-zero key is not a valid secp256k1 key."""
        with pytest.raises(InvalidSecret):
            derive_identity("rawKey", "0x" + "00" * 32)

    @pytest.mark.parametrize("secret", ["", "   ", None])
    def test_missing_key(self, secret):
        """Empty input is rejected before any parsing."""
        with pytest.raises(InvalidSecret, match="Missing key"):
            derive_identity("rawKey", secret)

    def test_unknown_mode(self):
        """Unknown import modes are rejected."""
        with pytest.raises(InvalidSecret):
            derive_identity("xpub", TEST_PHRASE)

    def test_hex_detection(self):
        assert is_hex_private_key(TEST_PHRASE_EVM_KEY)
        assert is_hex_private_key(TEST_PHRASE_EVM_KEY[2:])
        assert not is_hex_private_key("0x" + "ab" * 31)
        assert not is_hex_private_key("xx" + TEST_PHRASE_EVM_KEY[2:])


class TestImportedIdentity:
    """Tests for the identity model."""

    def test_kind_must_match_halves(self):
        """An EVM identity cannot be built without an EVM signer."""
        with pytest.raises(ValueError):
            ImportedIdentity(IdentityKind.EVM)

    def test_supports_by_family(self):
        identity = derive_identity("rawKey", TEST_PHRASE_EVM_KEY)

        assert identity.supports(Network.ETH)
        assert identity.supports("bsc")
        assert not identity.supports(Network.SOL)

    def test_to_dict_exposes_addresses_only(self):
        identity = derive_identity("phrase", TEST_PHRASE)
        data = identity.to_dict()

        assert data["kind"] == "dual"
        assert data["evm"] == {"address": TEST_PHRASE_EVM_ADDRESS}
        assert data["sol"]["address"] == identity.solana_address
        assert data["networks"] == ["eth", "bsc", "sol"]
        assert TEST_PHRASE_EVM_KEY[2:] not in json.dumps(data)

    def test_repr_hides_keys(self):
        identity = derive_identity("rawKey", TEST_PHRASE_EVM_KEY)

        assert TEST_PHRASE_EVM_KEY[2:] not in repr(identity)
        assert TEST_PHRASE_EVM_ADDRESS in repr(identity)

    def test_evm_signer_from_bytes(self):
        signer = EvmSigner(bytes.fromhex(TEST_PHRASE_EVM_KEY[2:]))

        assert signer.address == TEST_PHRASE_EVM_ADDRESS
        assert str(signer) == TEST_PHRASE_EVM_ADDRESS
