"""
NIST P-256 (secp256r1) ECDSA backend.

OpenSSL draws a fresh random nonce for every signature, so signing the same
payload twice gives two different (equally valid) signatures. ``s`` is
normalized to the lower half of the group order.
"""

from bip_utils import Bip32Slip10Nist256p1
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature, encode_dss_signature

from ..types import CurveType
from .base import CurveBackend
from .secp256k1 import split_signature

SECP256R1_N = 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551


class Nist256p1Backend(CurveBackend):
    """ECDSA over P-256 with compressed public keys. Not deterministic."""

    curve = CurveType.NIST256P1
    deterministic = False

    def _derive_secret(self, seed: bytes, path: str) -> bytes:
        ctx = Bip32Slip10Nist256p1.FromSeedAndPath(seed, path)
        return ctx.PrivateKey().Raw().ToBytes()

    def _private_key(self, secret: bytes) -> ec.EllipticCurvePrivateKey:
        return ec.derive_private_key(int.from_bytes(secret, "big"), ec.SECP256R1())

    def _public_key(self, secret: bytes) -> bytes:
        return self._private_key(secret).public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint,
        )

    def _sign(self, message: bytes, secret: bytes) -> bytes:
        der = self._private_key(secret).sign(message, ec.ECDSA(hashes.SHA256()))
        r, s = decode_dss_signature(der)
        if s > SECP256R1_N // 2:
            s = SECP256R1_N - s
        return r.to_bytes(32, "big") + s.to_bytes(32, "big")

    def _verify(self, message: bytes, signature: bytes, public_key: bytes) -> bool:
        r, s = split_signature(signature)
        if s > SECP256R1_N // 2:
            return False
        public = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256R1(), public_key)
        try:
            public.verify(encode_dss_signature(r, s), message, ec.ECDSA(hashes.SHA256()))
        except InvalidSignature:
            return False
        return True
