"""
Starknet codec.

The signable payload is the invoke transaction hash as a 32-byte big-endian
field element.
"""
import logging
import re

from pydantic import ValidationError
from starknet_py.hash.address import compute_address
from starknet_py.hash.selector import get_selector_from_name

from ...exceptions import MalformedIntent
from ...models import StarknetNewTransfer, StarknetRawTx, StarknetTxInput, StarknetTxOutput
from ...types import CurveType, SignablePayload, Signature
from ..base import ChainCodec, UnsignedTransaction
from .transaction import InvokeTransaction, build_raw, build_transfer, felt_hex, parse_felt

logger = logging.getLogger(__name__)

# Argent account proxy and implementation classes used for counterfactual addresses
ACCOUNT_PROXY_CLASS_HASH = 0x025EC026985A3BF9D0CC1FE17326B245DFDC3FF89B8FDE106542A3EA56C5A918
ACCOUNT_IMPLEMENTATION_CLASS_HASH = 0x033434AD846CDD5F23EB73FF09FE6FDDD568284A0FB7D1BE20EE482F044DABE2

_HEX_BODY = re.compile(r"[0-9a-fA-F]+")


def account_address(public_key: int) -> int:
    """Counterfactual address of the account controlled by ``public_key``."""
    return compute_address(
        salt=public_key,
        class_hash=ACCOUNT_PROXY_CLASS_HASH,
        constructor_calldata=[
            ACCOUNT_IMPLEMENTATION_CLASS_HASH,
            get_selector_from_name("initialize"),
            2,
            public_key,
            0,
        ],
        deployer_address=0,
    )


class StarknetCodec(ChainCodec):
    """Codec for Starknet version 1 invoke transactions."""

    chain = "STARKNET"
    field = "starknet"
    input_model = StarknetTxInput

    def encode(self, transfer: StarknetNewTransfer) -> UnsignedTransaction:
        return self._invoke(build_transfer(transfer), transfer.max_fee, transfer.nonce, transfer.sender)

    def raw_payload(self, raw: str) -> UnsignedTransaction:
        """
        Prepare a raw transaction.

        A JSON object is a prebuilt multicall (see ``StarknetRawTx``) and is
        hashed like a transfer. Anything else is a precomputed transaction
        hash in hex, signed as given.

        Raises:
            MalformedIntent: If the value is neither form
            NumericOverflow: If a multicall field does not fit in a field element
        """
        text = (raw or "").strip()
        if text.startswith("{"):
            try:
                prebuilt = StarknetRawTx.model_validate_json(text)
            except ValidationError as e:
                raise MalformedIntent(f"Invalid raw_tx: {e}", field="raw_tx") from e
            return self._invoke(build_raw(prebuilt), prebuilt.max_fee, prebuilt.nonce, prebuilt.sender)
        return self._raw_hash(text)

    def _invoke(self, tx: InvokeTransaction, max_fee: str, nonce: int, sender: str) -> UnsignedTransaction:
        calldata = tx.calldata
        logger.debug(f"Built Starknet invoke with {len(tx.calls)} calls, {len(calldata)} calldata elements")
        return UnsignedTransaction(
            payload=SignablePayload(tx.transaction_hash().to_bytes(32, "big")),
            body=StarknetTxOutput(
                contract_address=felt_hex(tx.sender),
                call_data=[felt_hex(x) for x in calldata],
                max_fee=max_fee,
                nonce=str(nonce),
            ),
            sender=sender,
        )

    def _raw_hash(self, text: str) -> UnsignedTransaction:
        body = text[2:] if text.lower().startswith("0x") else text
        if not body or not _HEX_BODY.fullmatch(body):
            raise MalformedIntent(f"Invalid raw_tx: {text!r}", field="raw_tx")
        if len(body) % 2:
            body = "0" + body
        message = bytes.fromhex(body)
        if len(message) > 32:
            raise MalformedIntent("raw_tx is longer than 32 bytes", field="raw_tx")
        return UnsignedTransaction(
            payload=SignablePayload(message.rjust(32, b"\x00")),
            body=StarknetTxOutput(),
        )

    def assemble(self, unsigned: UnsignedTransaction, signature: Signature, public_key: bytes) -> StarknetTxOutput:
        body: StarknetTxOutput = unsigned.body
        contract_address = body.contract_address
        if not contract_address and unsigned.sender:
            contract_address = felt_hex(parse_felt(unsigned.sender, "sender"))
        return body.model_copy(update={"signature": signature.hex(), "contract_address": contract_address})

    def address(self, public_key: bytes, curve: CurveType) -> str:
        return felt_hex(account_address(int.from_bytes(public_key, "big")))
