"""
secp256k1 ECDSA backend.

Messages are prehashed with SHA-256 and signed with an RFC 6979 nonce, so
signatures are deterministic. ``eth_keys`` always emits low-s signatures.
"""
import hashlib

from bip_utils import Bip32Secp256k1
from eth_keys import keys

from ..exceptions import SigningFailure
from ..types import CurveType
from .base import CurveBackend

SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def split_signature(signature: bytes):
    """Split a 64-byte ``r || s`` signature into integers."""
    if len(signature) != 64:
        raise ValueError(f"Expected a 64-byte signature, got {len(signature)} bytes")
    return int.from_bytes(signature[:32], "big"), int.from_bytes(signature[32:], "big")


class Secp256k1Backend(CurveBackend):
    """ECDSA over secp256k1 with compressed public keys."""

    curve = CurveType.SECP256K1
    deterministic = True

    def _derive_secret(self, seed: bytes, path: str) -> bytes:
        ctx = Bip32Secp256k1.FromSeedAndPath(seed, path)
        return ctx.PrivateKey().Raw().ToBytes()

    def _private_key(self, secret: bytes) -> keys.PrivateKey:
        if not 0 < int.from_bytes(secret, "big") < SECP256K1_N:
            raise SigningFailure("secp256k1 private key is out of range")
        return keys.PrivateKey(secret)

    def _public_key(self, secret: bytes) -> bytes:
        return self._private_key(secret).public_key.to_compressed_bytes()

    def _sign(self, message: bytes, secret: bytes) -> bytes:
        digest = hashlib.sha256(message).digest()
        signature = self._private_key(secret).sign_msg_hash(digest)
        return signature.r.to_bytes(32, "big") + signature.s.to_bytes(32, "big")

    def _verify(self, message: bytes, signature: bytes, public_key: bytes) -> bool:
        r, s = split_signature(signature)
        if not (0 < r < SECP256K1_N and 0 < s <= SECP256K1_N // 2):
            return False
        digest = hashlib.sha256(message).digest()
        public = keys.PublicKey.from_compressed_bytes(public_key)
        # the recovery id plays no part in verification
        return public.verify_msg_hash(digest, keys.Signature(vrs=(0, r, s)))
