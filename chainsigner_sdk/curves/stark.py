"""
STARK curve ECDSA backend.

Keys are derived on secp256k1 (BIP-32) and ground into the STARK group
following EIP-2645. Messages must already be field elements: 32 big-endian
bytes below 2**251. Nonces are generated per RFC 6979, so signing is
deterministic.
"""
import hashlib

from bip_utils import Bip32Secp256k1
from starknet_py.hash.utils import message_signature, private_to_stark_key, verify_message_signature

from ..exceptions import DerivationError, SigningFailure
from ..types import CurveType
from .base import CurveBackend
from .secp256k1 import split_signature

EC_ORDER = 0x800000000000010FFFFFFFFFFFFFFFFB781126DCAE7B2321E66A241ADC64D2F
MAX_MESSAGE = 2**251


def grind_key(key_seed: bytes, key_value_limit: int = EC_ORDER) -> int:
    """
    Map 32 bytes of secp256k1 key material onto ``[0, key_value_limit)``.

    Hashes ``key_seed || index`` with SHA-256 for increasing indices until the
    digest falls below the largest multiple of ``key_value_limit``, which keeps
    the reduction unbiased.

    Args:
        key_seed: Private key bytes derived on secp256k1
        key_value_limit: Group order to reduce into

    Returns:
        Ground private key scalar
    """
    max_allowed_value = 2**256 - (2**256 % key_value_limit)
    index = 0
    while True:
        index_bytes = index.to_bytes(max(1, (index.bit_length() + 7) // 8), "big")
        key = int.from_bytes(hashlib.sha256(key_seed + index_bytes).digest(), "big")
        if key < max_allowed_value:
            return key % key_value_limit
        index += 1


def message_to_int(message: bytes) -> int:
    """Interpret a 32-byte big-endian message as a field element below 2**251."""
    if len(message) != 32:
        raise SigningFailure(f"STARK messages must be 32 bytes, got {len(message)}")
    value = int.from_bytes(message, "big")
    if value >= MAX_MESSAGE:
        raise SigningFailure("STARK message is not below 2**251")
    return value


class StarkBackend(CurveBackend):
    """ECDSA over the Starknet curve with 32-byte x-coordinate public keys."""

    curve = CurveType.STARK
    deterministic = True

    def _derive_secret(self, seed: bytes, path: str) -> bytes:
        ctx = Bip32Secp256k1.FromSeedAndPath(seed, path)
        scalar = grind_key(ctx.PrivateKey().Raw().ToBytes())
        if scalar == 0:
            raise DerivationError(f"Degenerate STARK key at {path}")
        return scalar.to_bytes(32, "big")

    def _scalar(self, secret: bytes) -> int:
        scalar = int.from_bytes(secret, "big")
        if not 0 < scalar < EC_ORDER:
            raise SigningFailure("STARK private key is out of range")
        return scalar

    def _public_key(self, secret: bytes) -> bytes:
        return private_to_stark_key(self._scalar(secret)).to_bytes(32, "big")

    def _sign(self, message: bytes, secret: bytes) -> bytes:
        r, s = message_signature(msg_hash=message_to_int(message), priv_key=self._scalar(secret))
        return r.to_bytes(32, "big") + s.to_bytes(32, "big")

    def _verify(self, message: bytes, signature: bytes, public_key: bytes) -> bool:
        r, s = split_signature(signature)
        return verify_message_signature(
            msg_hash=message_to_int(message),
            signature=[r, s],
            public_key=int.from_bytes(public_key, "big"),
        )
