"""
Account providers: where the signer gets its seed and account paths from.
"""
import logging
import threading
from typing import Dict, Mapping, Optional, Protocol, Tuple, runtime_checkable

from bip_utils import Bip39SeedGenerator, MnemonicChecksumError

from .. import coin_info
from ..config import SignerConfig
from ..exceptions import DerivationError
from ..types import CurveType

logger = logging.getLogger(__name__)


def normalize_sender(sender: str) -> str:
    """Canonical form of a hex account address: lower case, no leading zeros."""
    value = sender.strip().lower()
    if value.startswith("0x"):
        try:
            return hex(int(value, 16))
        except ValueError:
            return value
    return value


@runtime_checkable
class AccountProvider(Protocol):
    """Supplies the master seed and maps senders to account paths."""

    def seed(self) -> bytes:
        ...

    def account_path(self, chain: str, curve: CurveType, sender: Optional[str]) -> Optional[str]:
        ...


class SeedAccountProvider:
    """
    Account provider backed by an in-memory master seed.

    Args:
        seed: Master seed bytes
        accounts: Optional mapping of ``(chain, sender)`` to account path
        strict: Reject senders without a registered path instead of falling
            back to the chain's default path (``CHAINSIGNER_STRICT_ACCOUNTS``
            when omitted)
    """

    def __init__(
        self,
        seed: bytes,
        accounts: Optional[Mapping[Tuple[str, str], str]] = None,
        strict: Optional[bool] = None,
    ):
        if not seed:
            raise DerivationError("Master seed is empty")
        self._seed = bytes(seed)
        self.strict = SignerConfig.from_env().strict_accounts if strict is None else strict
        self._accounts: Dict[Tuple[str, str], str] = {}
        self._lock = threading.RLock()
        for (chain, sender), path in (accounts or {}).items():
            self.register(chain, sender, path)

    @classmethod
    def from_mnemonic(cls, words: str, passphrase: str = "", **kwargs) -> "SeedAccountProvider":
        """
        Build a provider from a BIP-39 mnemonic.

        Args:
            words: Space separated mnemonic
            passphrase: Optional BIP-39 passphrase
            **kwargs: Passed through to the constructor

        Returns:
            SeedAccountProvider holding the 64-byte BIP-39 seed

        Raises:
            DerivationError: If the mnemonic is invalid
        """
        try:
            seed = Bip39SeedGenerator(words).Generate(passphrase)
        except (ValueError, MnemonicChecksumError) as e:
            raise DerivationError(f"Invalid mnemonic: {e}") from e
        return cls(seed, **kwargs)

    def seed(self) -> bytes:
        return self._seed

    def register(self, chain: str, sender: str, path: str) -> None:
        """Bind a sender address on a chain to an account path."""
        if not path or not path.startswith("m"):
            raise DerivationError(f"Invalid derivation path: {path!r}", field="account_path")
        key = (coin_info.normalize_chain(chain), normalize_sender(sender))
        with self._lock:
            self._accounts[key] = path
        logger.debug(f"Registered {key[0]} account {key[1][:10]}...")

    def account_path(self, chain: str, curve: CurveType, sender: Optional[str]) -> Optional[str]:
        """
        Resolve the account path for a sender.

        Args:
            chain: Chain tag
            curve: Curve the request signs with
            sender: Sender address, if known

        Returns:
            Registered path, or the chain/curve default path

        Raises:
            DerivationError: In strict mode, if the sender is not registered
        """
        chain = coin_info.normalize_chain(chain)
        if sender:
            with self._lock:
                path = self._accounts.get((chain, normalize_sender(sender)))
            if path is not None:
                return path
        if self.strict:
            raise DerivationError(
                f"No account registered for {chain} sender {sender or '<unknown>'}", field="sender"
            )
        return coin_info.default_path(chain, curve)

    def __repr__(self) -> str:
        return f"SeedAccountProvider(accounts={len(self._accounts)}, strict={self.strict})"
