"""
Sui (object-model chain) codec.
"""
from .codec import SuiCodec, parse_signature, serialize_signature
from .transaction import TransactionData, build_transfer, decode_transaction, decode_transfer, encode_transaction

__all__ = [
    "SuiCodec",
    "TransactionData",
    "build_transfer",
    "decode_transaction",
    "decode_transfer",
    "encode_transaction",
    "parse_signature",
    "serialize_signature",
]
