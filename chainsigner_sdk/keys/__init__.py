"""
Key handles, derivation and account resolution.
"""
from .handle import SigningKeyHandle
from .derivation import KeyDerivationService
from .accounts import AccountProvider, SeedAccountProvider

__all__ = ["SigningKeyHandle", "KeyDerivationService", "AccountProvider", "SeedAccountProvider"]
