"""
Sui codec.

Sui signs ``blake2b-256(intent || tx_bytes)``. The signed output carries
the transaction bytes and a serialized signature
``base64(flag || signature || public_key)``.
"""
import base64
import binascii
import hashlib
import logging
from typing import Dict, Tuple

from ...exceptions import MalformedIntent, SigningFailure
from ...models import SuiNewTransfer, SuiRawTx, SuiTxInput, SuiTxOutput
from ...types import CurveType, SignablePayload, Signature
from ..base import ChainCodec, UnsignedTransaction
from .transaction import build_transfer, decode_transaction, encode_transaction

logger = logging.getLogger(__name__)

# IntentScope::TransactionData, IntentVersion::V0, AppId::Sui
TRANSACTION_INTENT = bytes([0, 0, 0])

SIGNATURE_FLAGS: Dict[CurveType, int] = {
    CurveType.ED25519: 0x00,
    CurveType.SECP256K1: 0x01,
    CurveType.NIST256P1: 0x02,
}


def blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def decode_text(value: str, field_name: str) -> bytes:
    """
    Decode a raw transaction field: hex with a ``0x`` prefix, base64 otherwise.

    Raises:
        MalformedIntent: If the text is neither
    """
    text = (value or "").strip()
    try:
        if text.lower().startswith("0x"):
            return bytes.fromhex(text[2:])
        return base64.b64decode(text, validate=True)
    except (ValueError, binascii.Error) as e:
        raise MalformedIntent(f"Invalid {field_name}: {e}", field=field_name) from e


def signing_message(intent: bytes, tx_bytes: bytes) -> SignablePayload:
    preimage = intent + tx_bytes
    return SignablePayload(blake2b_256(preimage), preimage=preimage)


def signature_flag(curve: CurveType) -> int:
    if curve not in SIGNATURE_FLAGS:
        raise SigningFailure(f"Sui does not accept {curve.value} signatures")
    return SIGNATURE_FLAGS[curve]


def serialize_signature(signature: Signature, public_key: bytes) -> str:
    """``base64(flag || signature || public_key)``"""
    return base64.b64encode(bytes([signature_flag(signature.curve)]) + signature.value + public_key).decode("ascii")


def parse_signature(serialized: str) -> Tuple[CurveType, bytes, bytes]:
    """
    Split a serialized Sui signature into curve, signature and public key.

    Raises:
        MalformedIntent: If the value is not a valid serialized signature
    """
    data = decode_text(serialized, "signature")
    if len(data) < 1 + 64:
        raise MalformedIntent("Serialized signature is too short", field="signature")
    flags = {flag: curve for curve, flag in SIGNATURE_FLAGS.items()}
    if data[0] not in flags:
        raise MalformedIntent(f"Unknown signature flag {data[0]}", field="signature")
    return flags[data[0]], data[1:65], data[65:]


class SuiCodec(ChainCodec):
    """Codec for Sui programmable transactions."""

    chain = "SUI"
    field = "sui"
    input_model = SuiTxInput

    def encode(self, transfer: SuiNewTransfer) -> UnsignedTransaction:
        tx_bytes = encode_transaction(build_transfer(transfer))
        logger.debug(f"Built {len(tx_bytes)}-byte Sui transfer from {transfer.sender[:10]}...")
        return UnsignedTransaction(
            payload=signing_message(TRANSACTION_INTENT, tx_bytes),
            body=base64.b64encode(tx_bytes).decode("ascii"),
            sender=transfer.sender,
        )

    def raw_payload(self, raw: SuiRawTx) -> UnsignedTransaction:
        """
        Sign ``intent || tx_data`` as given.

        Raises:
            MalformedIntent: If either field is missing, empty or not decodable
        """
        intent = decode_text(raw.intent, "intent")
        if not intent:
            raise MalformedIntent("Raw Sui transaction has no intent", field="intent")
        tx_bytes = decode_text(raw.tx_data, "tx_data")
        if not tx_bytes:
            raise MalformedIntent("Raw Sui transaction has no tx_data", field="tx_data")
        sender = None
        if intent[:1] == TRANSACTION_INTENT[:1]:
            try:
                sender = decode_transaction(tx_bytes).sender_address
            except MalformedIntent as e:
                logger.debug(f"Raw Sui transaction does not decode, sender unknown: {e}")
        return UnsignedTransaction(
            payload=signing_message(intent, tx_bytes),
            body=raw.tx_data,
            sender=sender,
        )

    def assemble(self, unsigned: UnsignedTransaction, signature: Signature, public_key: bytes) -> SuiTxOutput:
        return SuiTxOutput(tx_data=unsigned.body, signature=serialize_signature(signature, public_key))

    def address(self, public_key: bytes, curve: CurveType) -> str:
        """``0x`` + hex(blake2b-256(flag || public_key))"""
        return "0x" + blake2b_256(bytes([signature_flag(curve)]) + public_key).hex()
