"""
Curve backends, one per signature scheme.
"""
from typing import Dict

from ..types import CurveType
from .base import CurveBackend
from .ed25519 import Ed25519Backend
from .nist256p1 import Nist256p1Backend
from .secp256k1 import Secp256k1Backend
from .stark import StarkBackend

_BACKENDS: Dict[CurveType, CurveBackend] = {
    CurveType.ED25519: Ed25519Backend(),
    CurveType.SECP256K1: Secp256k1Backend(),
    CurveType.NIST256P1: Nist256p1Backend(),
    CurveType.STARK: StarkBackend(),
}


def get_backend(curve: CurveType) -> CurveBackend:
    """
    Look up the backend for a curve.

    Args:
        curve: Curve type (or its name)

    Returns:
        Shared, stateless backend instance
    """
    if not isinstance(curve, CurveType):
        curve = CurveType.parse(curve)
    return _BACKENDS[curve]


__all__ = [
    "CurveBackend",
    "Ed25519Backend",
    "Secp256k1Backend",
    "Nist256p1Backend",
    "StarkBackend",
    "get_backend",
]
