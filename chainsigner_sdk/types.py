"""
Core data types shared by codecs, curve backends and the signer.
"""
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .exceptions import SigningFailure


class CurveType(str, Enum):
    """Signature schemes supported by the curve backends."""
    ED25519 = "ed25519"
    SECP256K1 = "secp256k1"
    NIST256P1 = "secp256r1"
    STARK = "stark"

    @classmethod
    def parse(cls, value: str) -> "CurveType":
        """
        Resolve a curve name, accepting common aliases.

        Args:
            value: Curve name such as "ed25519", "secp256k1", "p256" or "stark"

        Returns:
            Matching CurveType

        Raises:
            ValueError: If the name is not a known curve
        """
        key = value.strip().lower().replace("-", "").replace("_", "")
        aliases = {
            "ed25519": cls.ED25519,
            "secp256k1": cls.SECP256K1,
            "secp256r1": cls.NIST256P1,
            "nist256p1": cls.NIST256P1,
            "p256": cls.NIST256P1,
            "stark": cls.STARK,
            "starknetcurve": cls.STARK,
        }
        if key not in aliases:
            raise ValueError(f"Unknown curve: {value}")
        return aliases[key]


class SignablePayload:
    """
    Canonical message produced by a chain codec.

    ``message`` is what the curve backend signs; ``preimage`` is the canonical
    byte sequence it was derived from (identical for chains that sign the
    encoding directly). A payload can be consumed by a backend exactly once.

    Attributes:
        message: Bytes handed to the curve backend
        preimage: Canonical encoding the message was computed from
    """

    __slots__ = ("_message", "_preimage", "_consumed", "_lock")

    def __init__(self, message: bytes, preimage: Optional[bytes] = None):
        self._message = bytes(message)
        self._preimage = bytes(preimage) if preimage is not None else self._message
        self._consumed = False
        self._lock = threading.Lock()

    @property
    def message(self) -> bytes:
        return self._message

    @property
    def preimage(self) -> bytes:
        return self._preimage

    @property
    def consumed(self) -> bool:
        return self._consumed

    def consume(self) -> bytes:
        """
        Hand the message to a backend.

        Returns:
            The message bytes

        Raises:
            SigningFailure: If the payload was already consumed
        """
        with self._lock:
            if self._consumed:
                raise SigningFailure("Signable payload has already been consumed")
            self._consumed = True
        return self._message

    def __repr__(self) -> str:
        return f"SignablePayload(message={self._message.hex()}, consumed={self._consumed})"


@dataclass(frozen=True)
class Signature:
    """
    Curve-tagged signature bytes.

    Attributes:
        curve: Scheme that produced the signature
        value: ``r || s`` for ECDSA and STARK, ``R || S`` for Ed25519
    """
    curve: CurveType
    value: bytes

    def hex(self) -> str:
        return self.value.hex()
