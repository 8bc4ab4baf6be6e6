"""
Exceptions for the chainsigner SDK.
"""
from enum import Enum
from typing import Optional


class SigningErrorCode(str, Enum):
    """
    Error codes for failed signing requests.

    Every failure surfaced by the signer carries exactly one of these codes so
    callers can tell the five kinds apart without matching on messages.
    """
    UNSUPPORTED_CHAIN = "UNSUPPORTED_CHAIN"
    MALFORMED_INTENT = "MALFORMED_INTENT"
    NUMERIC_OVERFLOW = "NUMERIC_OVERFLOW"
    DERIVATION_ERROR = "DERIVATION_ERROR"
    SIGNING_FAILURE = "SIGNING_FAILURE"


class SigningError(Exception):
    """Base exception for signing-related errors."""

    code: SigningErrorCode = SigningErrorCode.SIGNING_FAILURE

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class UnsupportedChain(SigningError):
    """Raised when the request's chain tag is missing or unknown."""
    code = SigningErrorCode.UNSUPPORTED_CHAIN


class MalformedIntent(SigningError):
    """Raised when a required field or oneof branch is missing or inconsistent."""
    code = SigningErrorCode.MALFORMED_INTENT


class NumericOverflow(SigningError):
    """Raised when a numeric field does not fit its target field or width."""
    code = SigningErrorCode.NUMERIC_OVERFLOW


class DerivationError(SigningError):
    """Raised on invalid derivation paths, bad seeds or degenerate keys."""
    code = SigningErrorCode.DERIVATION_ERROR


class SigningFailure(SigningError):
    """Raised when a curve backend cannot produce a signature."""
    code = SigningErrorCode.SIGNING_FAILURE
