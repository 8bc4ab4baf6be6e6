"""
Scoped private key handles.
"""
import logging

from ..exceptions import SigningFailure
from ..types import CurveType

logger = logging.getLogger(__name__)


class SigningKeyHandle:
    """
    Opaque, curve-tagged reference to private key material.

    The secret lives in a mutable buffer that is overwritten with zeros on
    release. Use the handle as a context manager so the release happens on
    every exit path:

        with keys.derive(seed, "SUI", path) as key:
            signature = backend.sign(payload, key)

    Handles cannot be pickled or copied, and their repr never shows the secret.
    """

    __slots__ = ("_curve", "_path", "_secret", "_released")

    def __init__(self, curve: CurveType, secret: bytes, path: str = ""):
        self._curve = curve
        self._path = path
        self._secret = bytearray(secret)
        self._released = False

    @property
    def curve(self) -> CurveType:
        return self._curve

    @property
    def path(self) -> str:
        return self._path

    @property
    def released(self) -> bool:
        return self._released

    def _material(self) -> bytes:
        """Secret bytes, for curve backends only."""
        if self._released:
            raise SigningFailure("Signing key handle has already been released")
        return bytes(self._secret)

    def _zeroize(self) -> bool:
        if self._released:
            return False
        for i in range(len(self._secret)):
            self._secret[i] = 0
        self._released = True
        return True

    def release(self) -> None:
        """Zeroize the secret. Safe to call more than once."""
        if self._zeroize():
            logger.debug(f"Released {self._curve.value} key handle for {self._path or '<raw>'}")

    def __enter__(self) -> "SigningKeyHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __del__(self):
        # __init__ may have failed before the slots were set
        if getattr(self, "_secret", None) is not None:
            self._zeroize()

    def __repr__(self) -> str:
        state = "released" if self._released else "active"
        return f"SigningKeyHandle(curve={self._curve.value}, path={self._path!r}, {state})"

    def __reduce__(self):
        raise TypeError("Signing key handles cannot be serialized")

    def __copy__(self):
        raise TypeError("Signing key handles cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("Signing key handles cannot be copied")
