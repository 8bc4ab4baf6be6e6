"""
Ed25519 backend (SLIP-10 derivation, RFC 8032 signatures).
"""

from bip_utils import Bip32Slip10Ed25519
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

from ..types import CurveType
from .base import CurveBackend


class Ed25519Backend(CurveBackend):
    """EdDSA over Curve25519. Signatures are deterministic."""

    curve = CurveType.ED25519
    deterministic = True

    def _derive_secret(self, seed: bytes, path: str) -> bytes:
        # SLIP-10 only defines hardened steps for ed25519; bip_utils rejects the rest
        ctx = Bip32Slip10Ed25519.FromSeedAndPath(seed, path)
        return ctx.PrivateKey().Raw().ToBytes()

    def _public_key(self, secret: bytes) -> bytes:
        private_key = Ed25519PrivateKey.from_private_bytes(secret)
        return private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def _sign(self, message: bytes, secret: bytes) -> bytes:
        return Ed25519PrivateKey.from_private_bytes(secret).sign(message)

    def _verify(self, message: bytes, signature: bytes, public_key: bytes) -> bool:
        try:
            Ed25519PublicKey.from_public_bytes(public_key).verify(signature, message)
        except InvalidSignature:
            return False
        return True
