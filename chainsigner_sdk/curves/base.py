"""
Curve backend abstraction.

Every signature scheme implements the same capability contract so that the
signer never depends on a concrete curve: derive a key handle from a seed and
a path, expose its public key, sign a payload and verify a signature.
"""
import logging
from abc import ABC, abstractmethod
from typing import Union

from ..exceptions import DerivationError, SigningError, SigningFailure
from ..keys.handle import SigningKeyHandle
from ..types import CurveType, SignablePayload, Signature

logger = logging.getLogger(__name__)


class CurveBackend(ABC):
    """
    Base class for curve backends.

    Subclasses implement the ``_derive_secret``, ``_public_key``, ``_sign`` and
    ``_verify`` primitives on raw bytes; this class owns the handle checks and
    maps library failures onto the SDK's error kinds.

    Attributes:
        curve: Scheme implemented by the backend
        deterministic: Whether identical (payload, key) pairs always produce
            identical signatures
    """

    curve: CurveType
    deterministic: bool = True

    def derive_key(self, seed: bytes, path: str) -> SigningKeyHandle:
        """
        Derive a key handle from a master seed.

        Args:
            seed: Master seed bytes
            path: Hierarchical derivation path, e.g. "m/44'/784'/0'/0'/0'"

        Returns:
            Key handle tagged with this backend's curve

        Raises:
            DerivationError: If the seed or path is invalid or the key is degenerate
        """
        if not seed:
            raise DerivationError("Master seed is empty")
        if not path or not path.startswith("m"):
            raise DerivationError(f"Invalid derivation path: {path!r}", field="account_path")
        try:
            secret = self._derive_secret(bytes(seed), path)
        except SigningError:
            raise
        except Exception as e:
            raise DerivationError(f"Cannot derive {self.curve.value} key at {path}: {e}") from e
        return SigningKeyHandle(self.curve, secret, path)

    def key_from_secret(self, secret: bytes) -> SigningKeyHandle:
        """
        Wrap existing secret bytes in a handle (for imported private keys).

        Args:
            secret: Raw private key bytes

        Returns:
            Key handle tagged with this backend's curve

        Raises:
            DerivationError: If the secret is not a valid key for this curve
        """
        handle = SigningKeyHandle(self.curve, secret)
        try:
            self.public_key(handle)
        except SigningFailure as e:
            handle.release()
            raise DerivationError(f"Invalid {self.curve.value} private key: {e}") from e
        return handle

    def public_key(self, key: SigningKeyHandle) -> bytes:
        """
        Public key for a handle, in the encoding the chains expect.

        Args:
            key: Key handle produced by this backend

        Returns:
            Public key bytes

        Raises:
            SigningFailure: If the handle belongs to another curve or is invalid
        """
        self._check_handle(key)
        try:
            return self._public_key(key._material())
        except SigningError:
            raise
        except Exception as e:
            raise SigningFailure(f"Invalid {self.curve.value} key: {e}") from e

    def sign(self, payload: SignablePayload, key: SigningKeyHandle) -> Signature:
        """
        Sign a payload.

        Args:
            payload: Payload produced by a chain codec; consumed by this call
            key: Key handle produced by this backend

        Returns:
            Curve-tagged signature

        Raises:
            SigningFailure: On curve mismatch, reused payload or backend failure
        """
        self._check_handle(key)
        message = payload.consume()
        try:
            value = self._sign(message, key._material())
        except SigningError:
            raise
        except Exception as e:
            raise SigningFailure(f"{self.curve.value} signing failed: {e}") from e
        logger.debug(f"Signed {len(message)}-byte message with {self.curve.value}")
        return Signature(self.curve, value)

    def verify(self, message: bytes, signature: Union[Signature, bytes], public_key: bytes) -> bool:
        """
        Verify a signature.

        Args:
            message: Message bytes that were signed (``SignablePayload.message``)
            signature: Signature object or raw signature bytes
            public_key: Public key bytes as returned by ``public_key``

        Returns:
            True if the signature is valid, False otherwise
        """
        if isinstance(signature, Signature):
            if signature.curve != self.curve:
                return False
            signature = signature.value
        try:
            return self._verify(bytes(message), bytes(signature), bytes(public_key))
        except Exception as e:
            logger.debug(f"{self.curve.value} verification rejected signature: {e}")
            return False

    def _check_handle(self, key: SigningKeyHandle) -> None:
        if not isinstance(key, SigningKeyHandle):
            raise SigningFailure("Expected a SigningKeyHandle")
        if key.curve != self.curve:
            raise SigningFailure(
                f"Key handle for {key.curve.value} cannot be used with the {self.curve.value} backend"
            )

    @abstractmethod
    def _derive_secret(self, seed: bytes, path: str) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def _public_key(self, secret: bytes) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def _sign(self, message: bytes, secret: bytes) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def _verify(self, message: bytes, signature: bytes, public_key: bytes) -> bool:
        raise NotImplementedError
