"""
Chain to curve table.

Each chain mandates one signature scheme (some accept several), and each
(chain, curve) pair has a default account path.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .exceptions import DerivationError, UnsupportedChain
from .types import CurveType


@dataclass(frozen=True)
class CoinInfo:
    """
    Static description of a chain.

    Attributes:
        chain: Chain tag, e.g. "SUI"
        curves: Accepted curves, the first being the default
        default_paths: Default account path per accepted curve
    """
    chain: str
    curves: Tuple[CurveType, ...]
    default_paths: Dict[CurveType, str]

    @property
    def default_curve(self) -> CurveType:
        return self.curves[0]


SUI = "SUI"
STARKNET = "STARKNET"

_COIN_INFOS: Dict[str, CoinInfo] = {
    SUI: CoinInfo(
        chain=SUI,
        curves=(CurveType.ED25519, CurveType.SECP256K1, CurveType.NIST256P1),
        default_paths={
            CurveType.ED25519: "m/44'/784'/0'/0'/0'",
            CurveType.SECP256K1: "m/54'/784'/0'/0/0",
            CurveType.NIST256P1: "m/74'/784'/0'/0/0",
        },
    ),
    STARKNET: CoinInfo(
        chain=STARKNET,
        curves=(CurveType.STARK,),
        default_paths={CurveType.STARK: "m/44'/9004'/0'/0/0"},
    ),
}


def normalize_chain(chain: Optional[str]) -> str:
    """Canonical (upper-case) chain tag; empty string for a missing tag."""
    return str(chain).strip().upper() if chain else ""


def coin_info(chain: str) -> CoinInfo:
    """
    Look up a chain.

    Raises:
        UnsupportedChain: If the chain is not in the table
    """
    info = _COIN_INFOS.get(normalize_chain(chain))
    if info is None:
        raise UnsupportedChain(f"Unsupported chain: {chain!r}", field="chain")
    return info


def curve_for(chain: str, curve=None) -> CurveType:
    """
    Resolve the curve to sign with.

    Args:
        chain: Chain tag
        curve: Requested curve (or its name); None selects the chain default

    Returns:
        Curve mandated for the chain

    Raises:
        UnsupportedChain: If the chain is unknown
        DerivationError: If the chain does not accept the requested curve
    """
    info = coin_info(chain)
    if curve is None or curve == "":
        return info.default_curve
    try:
        requested = curve if isinstance(curve, CurveType) else CurveType.parse(curve)
    except ValueError as e:
        raise DerivationError(str(e), field="curve") from e
    if requested not in info.curves:
        raise DerivationError(
            f"{info.chain} does not support the {requested.value} curve", field="curve"
        )
    return requested


def default_path(chain: str, curve=None) -> str:
    """Default account path for a chain and curve."""
    info = coin_info(chain)
    return info.default_paths[curve_for(chain, curve)]


def register_coin_info(info: CoinInfo) -> None:
    """Add or replace a chain in the table."""
    if not info.curves or set(info.default_paths) != set(info.curves):
        raise ValueError(f"{info.chain}: every accepted curve needs a default path")
    _COIN_INFOS[normalize_chain(info.chain)] = info


def supported_chains() -> Tuple[str, ...]:
    return tuple(_COIN_INFOS)
