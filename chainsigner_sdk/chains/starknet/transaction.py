"""
Starknet invoke transactions: field element parsing, account calldata and
the version 1 transaction hash.
"""
import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from starknet_py.hash.selector import get_selector_from_name
from starknet_py.hash.utils import compute_hash_on_elements

from ...exceptions import MalformedIntent, NumericOverflow
from ...models import StarknetNewTransfer, StarknetRawTx

FIELD_PRIME = 2**251 + 17 * 2**192 + 1

ETH_TOKEN_ADDRESS = 0x049D36570D4E46F48E99674BD3FCC84644DDD6B96F7C741B1562B82F9E004DC7
TRANSFER_SELECTOR = get_selector_from_name("transfer")

INVOKE_PREFIX = int.from_bytes(b"invoke", "big")
INVOKE_VERSION = 1


def _short_string(text: str) -> int:
    return int.from_bytes(text.encode("ascii"), "big")


# Network names accepted for chain_id besides numeric values
CHAIN_IDS = {
    "SN_MAIN": _short_string("SN_MAIN"),
    "SN_SEPOLIA": _short_string("SN_SEPOLIA"),
    "SN_GOERLI": _short_string("SN_GOERLI"),
}

_DECIMAL = re.compile(r"[0-9]+")
_HEX = re.compile(r"0[xX][0-9a-fA-F]+")


def parse_felt(value: str, field_name: str) -> int:
    """
    Parse a decimal or ``0x`` hex string into a field element.

    Args:
        value: Text to parse
        field_name: Request field, for error reporting

    Returns:
        Integer in ``[0, FIELD_PRIME)``

    Raises:
        MalformedIntent: If the value is empty, negative or not a number
        NumericOverflow: If the value is not below the field prime
    """
    if not isinstance(value, str) or not value.strip():
        raise MalformedIntent(f"Missing {field_name}", field=field_name)
    text = value.strip()
    if _HEX.fullmatch(text):
        number = int(text, 16)
    elif _DECIMAL.fullmatch(text):
        number = int(text, 10)
    else:
        raise MalformedIntent(f"{field_name} is not a non-negative number: {value!r}", field=field_name)
    if number >= FIELD_PRIME:
        raise NumericOverflow(f"{field_name} does not fit in a field element", field=field_name)
    return number


def parse_chain_id(value: str) -> int:
    """Chain id as a network name (e.g. ``SN_MAIN``) or a number."""
    name = (value or "").strip().upper()
    if name in CHAIN_IDS:
        return CHAIN_IDS[name]
    return parse_felt(value, "chain_id")


def felt_hex(value: int) -> str:
    """``0x`` + 64 hex digits."""
    return "0x" + value.to_bytes(32, "big").hex()


def check_nonce(nonce: int) -> int:
    if nonce < 0:
        raise MalformedIntent("nonce cannot be negative", field="nonce")
    if nonce >= 2**64:
        raise NumericOverflow("nonce does not fit in u64", field="nonce")
    return nonce


@dataclass(frozen=True)
class Call:
    to: int
    selector: int
    calldata: Tuple[int, ...] = ()


def execute_calldata(calls: Sequence[Call]) -> List[int]:
    """
    Account ``__execute__`` calldata for a multicall.

    Layout: ``[n_calls, (to, selector, data_offset, data_len)*, total_len, data*]``.
    """
    header: List[int] = [len(calls)]
    data: List[int] = []
    for call in calls:
        header.extend([call.to, call.selector, len(data), len(call.calldata)])
        data.extend(call.calldata)
    return header + [len(data)] + data


@dataclass(frozen=True)
class InvokeTransaction:
    """
    Version 1 invoke transaction.

    Attributes:
        sender: Account contract address
        calls: Calls executed by the account
        max_fee: Maximum fee in wei
        nonce: Account nonce
        chain_id: Network identifier
    """
    sender: int
    calls: Tuple[Call, ...]
    max_fee: int
    nonce: int
    chain_id: int

    @property
    def calldata(self) -> List[int]:
        return execute_calldata(self.calls)

    def transaction_hash(self) -> int:
        """``H("invoke", 1, sender, 0, H(calldata), max_fee, chain_id, nonce)``"""
        return compute_hash_on_elements(
            [
                INVOKE_PREFIX,
                INVOKE_VERSION,
                self.sender,
                0,
                compute_hash_on_elements(self.calldata),
                self.max_fee,
                self.chain_id,
                self.nonce,
            ]
        )


def build_transfer(transfer: StarknetNewTransfer) -> InvokeTransaction:
    """
    ETH ``transfer(to, amount)`` invoked from the sender's account.

    Raises:
        MalformedIntent: If a field is missing, negative or not a number
        NumericOverflow: If a field does not fit in a field element
    """
    sender = parse_felt(transfer.sender, "sender")
    to = parse_felt(transfer.to, "to")
    amount = parse_felt(transfer.amount, "amount")
    max_fee = parse_felt(transfer.max_fee, "max_fee")
    chain_id = parse_chain_id(transfer.chain_id)
    nonce = check_nonce(transfer.nonce)

    call = Call(to=ETH_TOKEN_ADDRESS, selector=TRANSFER_SELECTOR, calldata=(to, amount))
    return InvokeTransaction(sender=sender, calls=(call,), max_fee=max_fee, nonce=nonce, chain_id=chain_id)


def build_raw(raw: StarknetRawTx) -> InvokeTransaction:
    """
    Multicall of a prebuilt raw transaction.

    Raises:
        MalformedIntent: If there are no calls or a field is not a number
        NumericOverflow: If a field does not fit in a field element
    """
    if not raw.calls:
        raise MalformedIntent("raw_tx has no calls", field="calls")
    sender = parse_felt(raw.sender, "sender")
    calls = tuple(
        Call(
            to=parse_felt(call.to, "to"),
            selector=parse_felt(call.selector, "selector"),
            calldata=tuple(parse_felt(value, "call_data") for value in call.call_data),
        )
        for call in raw.calls
    )
    return InvokeTransaction(
        sender=sender,
        calls=calls,
        max_fee=parse_felt(raw.max_fee, "max_fee"),
        nonce=check_nonce(raw.nonce),
        chain_id=parse_chain_id(raw.chain_id),
    )
