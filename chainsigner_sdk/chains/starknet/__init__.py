"""
Starknet (account-model chain) codec.
"""
from .codec import StarknetCodec, account_address
from .transaction import FIELD_PRIME, Call, InvokeTransaction, build_raw, build_transfer, execute_calldata, parse_felt

__all__ = [
    "FIELD_PRIME",
    "Call",
    "InvokeTransaction",
    "StarknetCodec",
    "account_address",
    "build_raw",
    "build_transfer",
    "execute_calldata",
    "parse_felt",
]
