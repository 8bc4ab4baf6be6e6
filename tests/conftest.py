"""
Pytest fixtures for the chainsigner SDK tests.
"""
import pytest

from chainsigner_sdk.config import SignerConfig
from chainsigner_sdk.keys import KeyDerivationService, SeedAccountProvider
from chainsigner_sdk.signer import TransactionSigner

# Constants for testing
TEST_SEED = bytes(range(64))

# Sui signing vectors (raw private keys, not seed-derived)
SUI_ED25519_KEY = "5bf718a81770f55ad59766eb5ebf792df379b1da81b40a47530ce32ea059f2cc"
SUI_ED25519_PUBKEY = "d2328ef9f0ca3e165912ee0cfea3f3cd7b99d56e038eb1144426741371ff10e2"
SUI_ED25519_ADDRESS = "0xb0447f7b8ab617d39560a67481f013d8b37f32d25e675b03dae587881c6798ff"
SUI_ED25519_TX = (
    "AAACACDcuwu46vFiu6uRqbhDa0O608vjolaFH0xH2XMreJluiAAIAIeTAwAAAAACAgABAQEAAQECAAABAACwRH97irYX05VgpnSB"
    "8BPYs38y0l5nWwPa5YeIHGeY/wEHm6Y05TyCQsujP5F94Q6hJ5pwpXszRteML2MRXG2gHNQUFQAAAAAAIJXoZBHHdSW8FSdK+4HU"
    "4sqJ76kNNuqPjZtr4gzLaUNjsER/e4q2F9OVYKZ0gfAT2LN/MtJeZ1sD2uWHiBxnmP/oAwAAAAAAAICWmAAAAAAAAA=="
)
SUI_ED25519_SIGNATURE = (
    "AIErPmPdP+MASjNrJOyuoWXTSqLjbaxcwz4+8y7gQNugnC0xq8EAlm0n8ariLSJs9ZiyLRyNnJc4KsIf0d3sJwvSMo758Mo+FlkS"
    "7gz+o/PNe5nVbgOOsRREJnQTcf8Q4g=="
)

SUI_SECP256K1_KEY = "d22d0f6cf72a51d304a1ada52b04eaa03cf8130a3a3a6a153495219b502dc119"
SUI_SECP256K1_PUBKEY = "02f6e28c1c019a99ed89bb3d0337eb818016c38ff64643053facfb390a89620c76"
SUI_SECP256K1_ADDRESS = "0x693d4bf80d67a3b9d7d98f287045bdf4afddf0e9e8d1c165a1aa5c46f70ed3c4"
SUI_SECP256K1_TX = (
    "AAACACDcuwu46vFiu6uRqbhDa0O608vjolaFH0xH2XMreJluiAAIAIeTAwAAAAACAgABAQEAAQECAAABAABpPUv4DWejudfZjyhw"
    "Rb30r93w6ejRwWWhqlxG9w7TxAHcuogjoTmy/mKCvhYfF5V/vKfRTW4Ko0fFgZgvRUFekU5NKAAAAAAAIHf09gz7lrd9KKelJ79D"
    "2KPkvMJ3jF8WLWvMTCuXdD0EaT1L+A1no7nX2Y8ocEW99K/d8Ono0cFloapcRvcO08ToAwAAAAAAAICWmAAAAAAAAA=="
)
SUI_SECP256K1_SIGNATURE = (
    "AU3Leyt5EKAYVGWhHQQD3gnyrvTiunynu0VU/wky7vYvE1LWI8dnvt0IwRu8dh5UKizUejU89JXoCKI/z/2oRNMC9uKMHAGame2J"
    "uz0DN+uBgBbDj/ZGQwU/rPs5ColiDHY="
)

# Sui transfer vectors
SUI_RECIPIENT = "0xdcbb0bb8eaf162bbab91a9b8436b43bad3cbe3a256851f4c47d9732b78996e88"
SUI_OBJECT_ID = "0x079ba634e53c8242cba33f917de10ea1279a70a57b3346d78c2f63115c6da01c"
SUI_OBJECT_SEQ = 2641230
SUI_OBJECT_DIGEST = "HBLfbA1EqRUAWWMeVZa5bgKyXv3VS1GnCZcKCZYLtGLu"
SUI_AMOUNT_TX = (
    "AAACACDcuwu46vFiu6uRqbhDa0O608vjolaFH0xH2XMreJluiAAIAIeTAwAAAAACAgABAQEAAQECAAABAACwRH97irYX05VgpnSB"
    "8BPYs38y0l5nWwPa5YeIHGeY/wEHm6Y05TyCQsujP5F94Q6hJ5pwpXszRteML2MRXG2gHE5NKAAAAAAAIPBhCNlgeWQXkO2bJZJL"
    "JYPgkB4q8//5R9UHFiLTiPmmsER/e4q2F9OVYKZ0gfAT2LN/MtJeZ1sD2uWHiBxnmP/nAwAAAAAAAICWmAAAAAAAAA=="
)
SUI_OBJECT_TX = (
    "AAACACDcuwu46vFiu6uRqbhDa0O608vjolaFH0xH2XMreJluiAEAB5umNOU8gkLLoz+RfeEOoSeacKV7M0bXjC9jEVxtoBxOTSgA"
    "AAAAACDwYQjZYHlkF5DtmyWSSyWD4JAeKvP/+UfVBxYi04j5pgEBAQEBAAEAALBEf3uKthfTlWCmdIHwE9izfzLSXmdbA9rlh4gc"
    "Z5j/AQebpjTlPIJCy6M/kX3hDqEnmnClezNG14wvYxFcbaAcTk0oAAAAAAAg8GEI2WB5ZBeQ7Zslkkslg+CQHirz//lH1QcWItOI"
    "+aawRH97irYX05VgpnSB8BPYs38y0l5nWwPa5YeIHGeY/+YDAAAAAAAAgJaYAAAAAAAA"
)

# Starknet key vectors
STARK_PRIVATE_KEY = 1680276612603002181718147419160781730358142667709908871467878829425628458003
STARK_PUBLIC_KEY = "032d5d80285b9a8079c136f2e98676699f339f65eb04fa79112a313580cf2e54"
STARK_ADDRESS = "0x0133f10fa30f0b6a98a82d514db2b970db0b43e2bd120a76a17911d58bcd01ff"


def gas_object(**overrides):
    """Gas payment object reference used by the Sui transfer vectors"""
    ref = {
        "object_id": SUI_OBJECT_ID,
        "seq_num": SUI_OBJECT_SEQ,
        "object_digest": SUI_OBJECT_DIGEST,
    }
    ref.update(overrides)
    return ref


def sui_amount_transfer(**overrides):
    """Native amount transfer matching SUI_AMOUNT_TX"""
    transfer = {
        "sui": {"amount": 60000000},
        "recipient": SUI_RECIPIENT,
        "sender": SUI_ED25519_ADDRESS,
        "gas_payment": gas_object(),
        "gas_budget": 10000000,
        "gas_price": 999,
    }
    transfer.update(overrides)
    return transfer


def sui_object_transfer(**overrides):
    """Object transfer matching SUI_OBJECT_TX"""
    transfer = {
        "object": gas_object(),
        "recipient": SUI_RECIPIENT,
        "sender": SUI_ED25519_ADDRESS,
        "gas_payment": gas_object(),
        "gas_budget": 10000000,
        "gas_price": 998,
    }
    transfer.update(overrides)
    return transfer


def starknet_transfer(**overrides):
    transfer = {
        "sender": "0x1",
        "nonce": 1,
        "to": "0x2",
        "amount": "1000",
        "max_fee": "10",
        "chain_id": "1",
    }
    transfer.update(overrides)
    return transfer


@pytest.fixture
def config():
    """Configuration independent of the CHAINSIGNER_* environment"""
    return SignerConfig(pubkey_cache_ttl=300, pubkey_cache_size=16, max_workers=4, strict_accounts=False)


@pytest.fixture
def seed():
    return TEST_SEED


@pytest.fixture
def accounts():
    """Account provider over the test seed, default paths for every sender"""
    return SeedAccountProvider(TEST_SEED)


@pytest.fixture
def keys(config):
    return KeyDerivationService(config)


@pytest.fixture
def signer(config, keys):
    return TransactionSigner(config=config, keys=keys)
