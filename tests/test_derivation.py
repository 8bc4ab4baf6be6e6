"""
Tests for the Key Derivation Service, the chain/curve table and account providers.
"""
from unittest.mock import patch

import pytest

from chainsigner_sdk import coin_info
from chainsigner_sdk.config import SignerConfig
from chainsigner_sdk.curves import get_backend
from chainsigner_sdk.exceptions import DerivationError, UnsupportedChain
from chainsigner_sdk.keys import AccountProvider, KeyDerivationService, SeedAccountProvider
from chainsigner_sdk.types import CurveType
from conftest import TEST_SEED

ABANDON_MNEMONIC = "abandon " * 11 + "about"
ABANDON_SEED = (
    "5eb00bbddcf069084889a8ab9155568165f5c453ccb85e70811aaed6f6da5fc1"
    "9a5ac40b389cd370d086206dec8aa6c43daea6690f20ad3d8d48b2d2ce9e38e4"
)


# --- chain/curve table ---

@pytest.mark.parametrize("chain,curve,expected", [
    ("SUI", None, CurveType.ED25519),
    ("sui", "secp256k1", CurveType.SECP256K1),
    ("SUI", "secp256r1", CurveType.NIST256P1),
    ("SUI", CurveType.NIST256P1, CurveType.NIST256P1),
    ("STARKNET", None, CurveType.STARK),
    ("Starknet", "stark", CurveType.STARK),
])
def test_curve_for(chain, curve, expected):
    assert coin_info.curve_for(chain, curve) == expected


def test_curve_for_rejects_curve_the_chain_does_not_accept():
    with pytest.raises(DerivationError):
        coin_info.curve_for("STARKNET", "ed25519")
    with pytest.raises(DerivationError):
        coin_info.curve_for("SUI", "stark")
    with pytest.raises(DerivationError):
        coin_info.curve_for("SUI", "not-a-curve")


@pytest.mark.parametrize("chain", ["", None, "BITCOIN"])
def test_curve_for_unknown_chain(chain):
    with pytest.raises(UnsupportedChain):
        coin_info.curve_for(chain)


def test_default_paths():
    assert coin_info.default_path("SUI") == "m/44'/784'/0'/0'/0'"
    assert coin_info.default_path("SUI", "secp256k1") == "m/54'/784'/0'/0/0"
    assert coin_info.default_path("SUI", "secp256r1") == "m/74'/784'/0'/0/0"
    assert coin_info.default_path("STARKNET") == "m/44'/9004'/0'/0/0"


def test_fully_hardened_sui_secp256k1_path_is_a_separate_account(keys, seed):
    """Wallets that harden every level reach their key through an explicit path"""
    hardened = "m/54'/784'/0'/0'/0'"
    default_key = keys.public_key(seed, "SUI", curve="secp256k1")
    hardened_key = keys.public_key(seed, "SUI", path=hardened, curve="secp256k1")
    assert hardened_key != default_key
    with get_backend(CurveType.SECP256K1).derive_key(seed, hardened) as key:
        assert get_backend(CurveType.SECP256K1).public_key(key) == hardened_key


def test_register_coin_info_requires_default_paths():
    info = coin_info.CoinInfo(chain="TESTCHAIN", curves=(CurveType.ED25519,), default_paths={})
    with pytest.raises(ValueError):
        coin_info.register_coin_info(info)


# --- key derivation service ---

def test_derive_uses_chain_curve_and_default_path(keys, seed):
    with keys.derive(seed, "SUI") as key:
        assert key.curve == CurveType.ED25519
        assert key.path == "m/44'/784'/0'/0'/0'"
    assert key.released

    with keys.derive(seed, "STARKNET") as key:
        assert key.curve == CurveType.STARK


def test_derive_with_requested_curve_and_path(keys, seed):
    with keys.derive(seed, "SUI", "m/54'/784'/1'/0/0", curve="secp256k1") as key:
        assert key.curve == CurveType.SECP256K1
        assert key.path == "m/54'/784'/1'/0/0"


def test_derive_matches_backend(keys, seed):
    backend = get_backend(CurveType.ED25519)
    with keys.derive(seed, "SUI") as a, backend.derive_key(seed, "m/44'/784'/0'/0'/0'") as b:
        assert a._material() == b._material()


def test_derive_errors(keys, seed):
    with pytest.raises(UnsupportedChain):
        keys.derive(seed, "DOGE")
    with pytest.raises(DerivationError):
        keys.derive(b"", "SUI")
    with pytest.raises(DerivationError):
        keys.derive(seed, "SUI", "not/a/path")
    with pytest.raises(DerivationError):
        keys.derive(seed, "SUI", "m/44'/784'/0'/0/0")  # non-hardened ed25519


def test_public_key_is_cached(keys, seed):
    backend = get_backend(CurveType.ED25519)
    with patch.object(backend, "derive_key", wraps=backend.derive_key) as derive:
        first = keys.public_key(seed, "SUI")
        second = keys.public_key(seed, "SUI")
    assert first == second
    assert derive.call_count == 1

    with keys.derive(seed, "SUI") as key:
        assert backend.public_key(key) == first


def test_public_key_cache_separates_seeds_and_paths(keys, seed):
    a = keys.public_key(seed, "SUI")
    b = keys.public_key(bytes(reversed(seed)), "SUI")
    c = keys.public_key(seed, "SUI", "m/44'/784'/1'/0'/0'")
    assert len({a, b, c}) == 3


def test_public_key_cache_disabled(seed):
    keys = KeyDerivationService(SignerConfig(pubkey_cache_ttl=0))
    backend = get_backend(CurveType.STARK)
    with patch.object(backend, "derive_key", wraps=backend.derive_key) as derive:
        keys.public_key(seed, "STARKNET")
        keys.public_key(seed, "STARKNET")
    assert derive.call_count == 2


def test_clear_cache(keys, seed):
    backend = get_backend(CurveType.ED25519)
    keys.public_key(seed, "SUI")
    keys.clear_cache()
    with patch.object(backend, "derive_key", wraps=backend.derive_key) as derive:
        keys.public_key(seed, "SUI")
    assert derive.call_count == 1


# --- account providers ---

def test_seed_account_provider_is_an_account_provider():
    assert isinstance(SeedAccountProvider(TEST_SEED), AccountProvider)


def test_registered_sender_resolves_to_its_path():
    provider = SeedAccountProvider(
        TEST_SEED,
        accounts={("sui", "0x00AB"): "m/44'/784'/3'/0'/0'"},
    )
    # chain tags are case insensitive, hex senders ignore case and leading zeros
    assert provider.account_path("SUI", CurveType.ED25519, "0xab") == "m/44'/784'/3'/0'/0'"
    assert provider.account_path("SUI", CurveType.ED25519, "0x" + "0" * 62 + "ab") == "m/44'/784'/3'/0'/0'"


def test_unregistered_sender_falls_back_to_default_path():
    provider = SeedAccountProvider(TEST_SEED)
    assert provider.account_path("SUI", CurveType.SECP256K1, "0x1") == "m/54'/784'/0'/0/0"
    assert provider.account_path("STARKNET", CurveType.STARK, None) == "m/44'/9004'/0'/0/0"


def test_strict_provider_rejects_unregistered_sender():
    provider = SeedAccountProvider(TEST_SEED, strict=True)
    provider.register("STARKNET", "0x1", "m/44'/9004'/0'/0/7")
    assert provider.account_path("STARKNET", CurveType.STARK, "0x01") == "m/44'/9004'/0'/0/7"
    with pytest.raises(DerivationError):
        provider.account_path("STARKNET", CurveType.STARK, "0x2")
    with pytest.raises(DerivationError):
        provider.account_path("STARKNET", CurveType.STARK, None)


def test_register_rejects_invalid_path():
    provider = SeedAccountProvider(TEST_SEED)
    with pytest.raises(DerivationError):
        provider.register("SUI", "0x1", "44'/784'")


def test_empty_seed_is_rejected():
    with pytest.raises(DerivationError):
        SeedAccountProvider(b"")


def test_from_mnemonic():
    provider = SeedAccountProvider.from_mnemonic(ABANDON_MNEMONIC)
    assert provider.seed().hex() == ABANDON_SEED

    strict = SeedAccountProvider.from_mnemonic(ABANDON_MNEMONIC, strict=True)
    assert strict.strict is True


def test_from_invalid_mnemonic():
    with pytest.raises(DerivationError):
        SeedAccountProvider.from_mnemonic(" ".join(["abandon"] * 12))
    with pytest.raises(DerivationError):
        SeedAccountProvider.from_mnemonic("not a mnemonic at all")


def test_repr_hides_seed():
    provider = SeedAccountProvider(TEST_SEED)
    assert TEST_SEED.hex() not in repr(provider)
