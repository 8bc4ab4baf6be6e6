"""
Runtime configuration for the chainsigner SDK.

Settings are read from ``CHAINSIGNER_*`` environment variables so that the
signer can be tuned without code changes.
"""
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_PUBKEY_CACHE_TTL = 300
DEFAULT_PUBKEY_CACHE_SIZE = 256
DEFAULT_MAX_WORKERS = 4


def _int_from_env(name: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default
    if value < minimum:
        logger.warning(f"Ignoring out-of-range {name}={value}, using {default}")
        return default
    return value


@dataclass(frozen=True)
class SignerConfig:
    """
    Signer settings.

    Attributes:
        pubkey_cache_ttl: Seconds a derived public key stays cached (0 disables caching)
        pubkey_cache_size: Maximum number of cached public keys
        max_workers: Thread pool size used by ``TransactionSigner.sign_many``
        strict_accounts: Reject senders that have no registered account path
    """
    pubkey_cache_ttl: int = DEFAULT_PUBKEY_CACHE_TTL
    pubkey_cache_size: int = DEFAULT_PUBKEY_CACHE_SIZE
    max_workers: int = DEFAULT_MAX_WORKERS
    strict_accounts: bool = False

    @classmethod
    def from_env(cls) -> "SignerConfig":
        """
        Build a configuration from the environment.

        Returns:
            SignerConfig populated from ``CHAINSIGNER_*`` variables
        """
        return cls(
            pubkey_cache_ttl=_int_from_env("CHAINSIGNER_PUBKEY_CACHE_TTL", DEFAULT_PUBKEY_CACHE_TTL),
            pubkey_cache_size=_int_from_env("CHAINSIGNER_PUBKEY_CACHE_SIZE", DEFAULT_PUBKEY_CACHE_SIZE, minimum=1),
            max_workers=_int_from_env("CHAINSIGNER_MAX_WORKERS", DEFAULT_MAX_WORKERS, minimum=1),
            strict_accounts=os.environ.get("CHAINSIGNER_STRICT_ACCOUNTS") == "1",
        )
