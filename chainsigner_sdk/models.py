"""
Data models for the chainsigner SDK.

These mirror the wire messages exchanged with the caller. Oneof groups are
modelled as optional fields; the codecs enforce that exactly one branch is
set.
"""
from typing import List, Optional, Union

import base58
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _decode_identifier(value: Union[str, bytes, bytearray, List[int]], allow_base58: bool) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, list):
        try:
            return bytes(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid byte list: {e}") from e
    if not isinstance(value, str):
        raise ValueError(f"Expected bytes or text, got {type(value).__name__}")
    text = value.strip()
    if text.lower().startswith("0x"):
        digits = text[2:]
        if len(digits) % 2:
            digits = "0" + digits
        try:
            return bytes.fromhex(digits)
        except ValueError as e:
            raise ValueError(f"Invalid hex identifier: {value!r}") from e
    if allow_base58:
        try:
            return base58.b58decode(text)
        except ValueError as e:
            raise ValueError(f"Invalid base58 identifier: {value!r}") from e
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise ValueError(f"Invalid hex identifier: {value!r}") from e


class SuiObjectRef(BaseModel):
    """Object reference: id, version and digest of an owned object"""
    model_config = ConfigDict(frozen=True)

    object_id: bytes = b""
    seq_num: int = Field(0, ge=0)
    object_digest: bytes = b""

    @field_validator("object_id", mode="before")
    @classmethod
    def _parse_object_id(cls, value):
        return _decode_identifier(value, allow_base58=False)

    @field_validator("object_digest", mode="before")
    @classmethod
    def _parse_object_digest(cls, value):
        return _decode_identifier(value, allow_base58=True)


class SuiTransfer(BaseModel):
    """Native SUI amount transfer"""
    model_config = ConfigDict(frozen=True)

    amount: int = Field(0, ge=0)


class SuiRawTx(BaseModel):
    """Prebuilt Sui transaction: intent and BCS body (base64, or hex with 0x)"""
    model_config = ConfigDict(frozen=True)

    intent: str = ""
    tx_data: str = ""


class SuiNewTransfer(BaseModel):
    """Structured Sui transfer; exactly one of ``sui`` and ``object`` is set"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sui: Optional[SuiTransfer] = None
    object_ref: Optional[SuiObjectRef] = Field(None, alias="object")
    recipient: str = ""
    sender: str = ""
    gas_payment: Optional[SuiObjectRef] = None
    gas_budget: int = Field(0, ge=0)
    gas_price: int = Field(0, ge=0)


class SuiTxInput(BaseModel):
    """Sui request: exactly one of ``raw_tx`` and ``transfer`` is set"""
    model_config = ConfigDict(frozen=True)

    raw_tx: Optional[SuiRawTx] = None
    transfer: Optional[SuiNewTransfer] = None


class SuiTxOutput(BaseModel):
    """Signed Sui transaction"""
    model_config = ConfigDict(frozen=True)

    tx_data: str
    signature: str


class StarknetNewTransfer(BaseModel):
    """ETH transfer from a Starknet account; numeric fields are decimal or 0x hex"""
    model_config = ConfigDict(frozen=True)

    sender: str = ""
    nonce: int = Field(0, ge=0)
    to: str = ""
    amount: str = ""
    max_fee: str = ""
    chain_id: str = ""


class StarknetCall(BaseModel):
    """One call of a prebuilt Starknet multicall"""
    model_config = ConfigDict(frozen=True)

    to: str
    selector: str
    call_data: List[str] = Field(default_factory=list)


class StarknetRawTx(BaseModel):
    """
    Prebuilt Starknet multicall, carried as JSON text in ``raw_tx``.

    Felts are decimal or ``0x`` hex strings; ``chain_id`` also accepts a
    network name.
    """
    model_config = ConfigDict(frozen=True)

    sender: str
    calls: List[StarknetCall]
    nonce: int
    chain_id: str
    max_fee: str


class StarknetTxInput(BaseModel):
    """Starknet request: a raw transaction (JSON multicall or hash) or a transfer"""
    model_config = ConfigDict(frozen=True)

    raw_tx: Optional[str] = None
    transfer: Optional[StarknetNewTransfer] = None


class StarknetTxOutput(BaseModel):
    """Signed Starknet invoke transaction"""
    model_config = ConfigDict(frozen=True)

    contract_address: str = ""
    call_data: List[str] = Field(default_factory=list)
    signature: str = ""
    max_fee: str = ""
    nonce: str = ""


class TransactionRequest(BaseModel):
    """
    Chain-tagged signing request.

    ``chain`` selects the codec and exactly the matching chain payload must be
    set. Codecs registered at runtime read their payload from an extra field
    named after the codec.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    chain: str = ""
    sui: Optional[SuiTxInput] = None
    starknet: Optional[StarknetTxInput] = None
    sender: Optional[str] = None
    curve: Optional[str] = None
    account_path: Optional[str] = None


class SignedTransactionOutput(BaseModel):
    """Signed transaction, tagged with the same chain as the request"""
    model_config = ConfigDict(frozen=True, extra="allow")

    chain: str
    sui: Optional[SuiTxOutput] = None
    starknet: Optional[StarknetTxOutput] = None
