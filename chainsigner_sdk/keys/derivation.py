"""
Key Derivation Service.

Maps a chain to its mandated curve and derives scoped key handles from a
master seed. Derived public keys are cached; private material never is.
"""
import hashlib
import logging
import threading
from typing import Optional, Tuple

from cachetools import TTLCache

from .. import coin_info
from ..config import SignerConfig
from ..curves import get_backend
from ..curves.base import CurveBackend
from ..exceptions import DerivationError
from ..types import CurveType
from .handle import SigningKeyHandle

logger = logging.getLogger(__name__)


def _seed_fingerprint(seed: bytes) -> bytes:
    # cache keys identify the seed without holding it
    return hashlib.blake2b(bytes(seed), digest_size=16, person=b"chainsigner-pk").digest()


class KeyDerivationService:
    """
    Derives curve-tagged key handles for chains.

    Args:
        config: Signer configuration; read from the environment when omitted
    """

    def __init__(self, config: Optional[SignerConfig] = None):
        self.config = config or SignerConfig.from_env()
        self._cache: Optional[TTLCache] = None
        if self.config.pubkey_cache_ttl > 0:
            self._cache = TTLCache(
                maxsize=self.config.pubkey_cache_size,
                ttl=self.config.pubkey_cache_ttl,
            )
        self._cache_lock = threading.RLock()

    @staticmethod
    def curve_for(chain: str, curve=None) -> CurveType:
        """Curve mandated for ``chain`` (see ``coin_info.curve_for``)."""
        return coin_info.curve_for(chain, curve)

    def backend_for(self, chain: str, curve=None) -> CurveBackend:
        return get_backend(self.curve_for(chain, curve))

    def derive(self, seed: bytes, chain: str, path: Optional[str] = None, curve=None) -> SigningKeyHandle:
        """
        Derive a key handle for a chain.

        Args:
            seed: Master seed bytes
            chain: Chain tag, e.g. "SUI"
            path: Account path; the chain/curve default when omitted
            curve: Requested curve for chains that accept several

        Returns:
            Key handle on the chain's curve. Use it as a context manager.

        Raises:
            UnsupportedChain: If the chain is unknown
            DerivationError: If the curve, seed or path is invalid
        """
        resolved = self.curve_for(chain, curve)
        if not path:
            path = coin_info.default_path(chain, resolved)
        logger.debug(f"Deriving {resolved.value} key for {coin_info.normalize_chain(chain)} at {path}")
        return get_backend(resolved).derive_key(seed, path)

    def public_key(self, seed: bytes, chain: str, path: Optional[str] = None, curve=None) -> bytes:
        """
        Public key of the account at ``path``, served from cache when possible.

        Args:
            seed: Master seed bytes
            chain: Chain tag
            path: Account path; the chain/curve default when omitted
            curve: Requested curve for chains that accept several

        Returns:
            Public key bytes in the curve backend's encoding
        """
        resolved = self.curve_for(chain, curve)
        if not path:
            path = coin_info.default_path(chain, resolved)
        if not seed:
            raise DerivationError("Master seed is empty")
        key = (_seed_fingerprint(seed), coin_info.normalize_chain(chain), resolved.value, path)

        cached = self._cache_get(key)
        if cached is not None:
            return cached

        backend = get_backend(resolved)
        with backend.derive_key(seed, path) as handle:
            public = backend.public_key(handle)
        self._cache_put(key, public)
        return public

    def clear_cache(self) -> None:
        if self._cache is not None:
            with self._cache_lock:
                self._cache.clear()

    def _cache_get(self, key: Tuple) -> Optional[bytes]:
        if self._cache is None:
            return None
        with self._cache_lock:
            return self._cache.get(key)

    def _cache_put(self, key: Tuple, value: bytes) -> None:
        if self._cache is None:
            return
        with self._cache_lock:
            self._cache[key] = value
