"""
Sui transaction data: programmable transaction structures, their BCS
encoding and decoding, and the two transfer shapes the signer builds.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from ...exceptions import MalformedIntent
from ...models import SuiNewTransfer, SuiObjectRef, SuiTransfer
from .bcs import BcsReader, BcsWriter

ADDRESS_LENGTH = 32
DIGEST_LENGTH = 32


def parse_address(value: str, field_name: str = "address") -> bytes:
    """
    Parse a Sui address (``0x`` optional, up to 64 hex digits, left padded).

    Raises:
        MalformedIntent: If the value is empty or not a valid address
    """
    if not isinstance(value, str) or not value.strip():
        raise MalformedIntent(f"Missing {field_name}", field=field_name)
    text = value.strip()
    if text.lower().startswith("0x"):
        text = text[2:]
    if not text or len(text) > 2 * ADDRESS_LENGTH or not re.fullmatch(r"[0-9a-fA-F]+", text):
        raise MalformedIntent(f"Invalid {field_name}: {value!r}", field=field_name)
    return bytes.fromhex(text.rjust(2 * ADDRESS_LENGTH, "0"))


def format_address(value: bytes) -> str:
    return "0x" + value.hex()


# --- structures ---------------------------------------------------------------

@dataclass(frozen=True)
class ObjectRef:
    object_id: bytes
    version: int
    digest: bytes


@dataclass(frozen=True)
class PureArg:
    value: bytes


@dataclass(frozen=True)
class ImmOrOwnedArg:
    ref: ObjectRef


@dataclass(frozen=True)
class SharedArg:
    object_id: bytes
    initial_shared_version: int
    mutable: bool


@dataclass(frozen=True)
class ReceivingArg:
    ref: ObjectRef


CallArg = Union[PureArg, ImmOrOwnedArg, SharedArg, ReceivingArg]


@dataclass(frozen=True)
class GasCoin:
    pass


@dataclass(frozen=True)
class Input:
    index: int


@dataclass(frozen=True)
class Result:
    index: int


@dataclass(frozen=True)
class NestedResult:
    index: int
    result_index: int


Argument = Union[GasCoin, Input, Result, NestedResult]


@dataclass(frozen=True)
class MoveCall:
    package: bytes
    module: str
    function: str
    type_arguments: Tuple[str, ...] = ()
    arguments: Tuple[Argument, ...] = ()


@dataclass(frozen=True)
class TransferObjects:
    objects: Tuple[Argument, ...]
    address: Argument


@dataclass(frozen=True)
class SplitCoins:
    coin: Argument
    amounts: Tuple[Argument, ...]


@dataclass(frozen=True)
class MergeCoins:
    destination: Argument
    sources: Tuple[Argument, ...]


@dataclass(frozen=True)
class Publish:
    modules: Tuple[bytes, ...]
    dependencies: Tuple[bytes, ...]


@dataclass(frozen=True)
class MakeMoveVec:
    type_argument: Optional[str]
    elements: Tuple[Argument, ...]


@dataclass(frozen=True)
class Upgrade:
    modules: Tuple[bytes, ...]
    dependencies: Tuple[bytes, ...]
    package: bytes
    ticket: Argument


Command = Union[MoveCall, TransferObjects, SplitCoins, MergeCoins, Publish, MakeMoveVec, Upgrade]


@dataclass(frozen=True)
class GasData:
    payment: Tuple[ObjectRef, ...]
    owner: bytes
    price: int
    budget: int


@dataclass(frozen=True)
class TransactionData:
    """
    ``TransactionData::V1`` carrying a programmable transaction.

    Attributes:
        inputs: Call arguments referenced by ``Input(i)``
        commands: Commands executed in order
        sender: 32-byte sender address
        gas_data: Gas payment, owner, price and budget
        expiration: Epoch after which the transaction expires, if any
    """
    inputs: Tuple[CallArg, ...]
    commands: Tuple[Command, ...]
    sender: bytes
    gas_data: GasData
    expiration: Optional[int] = None

    @property
    def sender_address(self) -> str:
        return format_address(self.sender)


# --- type tags ----------------------------------------------------------------

_PRIMITIVE_TAGS = {
    "bool": 0, "u8": 1, "u64": 2, "u128": 3, "address": 4, "signer": 5,
    "u16": 8, "u32": 9, "u256": 10,
}
_PRIMITIVE_NAMES = {tag: name for name, tag in _PRIMITIVE_TAGS.items()}
_VECTOR_TAG = 6
_STRUCT_TAG = 7


def _split_type_params(text: str) -> List[str]:
    params, depth, start = [], 0, 0
    for i, ch in enumerate(text):
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        elif ch == "," and depth == 0:
            params.append(text[start:i].strip())
            start = i + 1
    params.append(text[start:].strip())
    return params


def _write_type_tag(w: BcsWriter, tag: str) -> None:
    tag = tag.strip()
    if tag in _PRIMITIVE_TAGS:
        w.variant(_PRIMITIVE_TAGS[tag])
        return
    if tag.startswith("vector<") and tag.endswith(">"):
        w.variant(_VECTOR_TAG)
        _write_type_tag(w, tag[len("vector<"):-1])
        return
    match = re.fullmatch(r"(0x[0-9a-fA-F]+)::(\w+)::(\w+)(?:<(.*)>)?", tag)
    if not match:
        raise MalformedIntent(f"Invalid Move type tag: {tag!r}", field="type_arguments")
    address, module, name, params = match.groups()
    w.variant(_STRUCT_TAG)
    w.fixed_bytes(parse_address(address, "type_arguments"))
    w.string(module)
    w.string(name)
    w.seq(_split_type_params(params) if params else [], _write_type_tag)


def _read_type_tag(r: BcsReader) -> str:
    tag = r.variant()
    if tag in _PRIMITIVE_NAMES:
        return _PRIMITIVE_NAMES[tag]
    if tag == _VECTOR_TAG:
        return f"vector<{_read_type_tag(r)}>"
    if tag == _STRUCT_TAG:
        address = format_address(r.fixed_bytes(ADDRESS_LENGTH))
        module = r.string()
        name = r.string()
        params = r.seq(_read_type_tag)
        suffix = f"<{', '.join(params)}>" if params else ""
        return f"{address}::{module}::{name}{suffix}"
    raise MalformedIntent(f"Unknown TypeTag variant {tag}", field="tx_data")


# --- encoding -----------------------------------------------------------------

def _write_object_ref(w: BcsWriter, ref: ObjectRef) -> None:
    w.fixed_bytes(ref.object_id).u64(ref.version).byte_vec(ref.digest)


def _write_call_arg(w: BcsWriter, arg: CallArg) -> None:
    if isinstance(arg, PureArg):
        w.variant(0).byte_vec(arg.value)
    elif isinstance(arg, ImmOrOwnedArg):
        w.variant(1).variant(0)
        _write_object_ref(w, arg.ref)
    elif isinstance(arg, SharedArg):
        w.variant(1).variant(1)
        w.fixed_bytes(arg.object_id).u64(arg.initial_shared_version).boolean(arg.mutable)
    elif isinstance(arg, ReceivingArg):
        w.variant(1).variant(2)
        _write_object_ref(w, arg.ref)
    else:
        raise MalformedIntent(f"Unknown call argument: {arg!r}")


def _write_argument(w: BcsWriter, arg: Argument) -> None:
    if isinstance(arg, GasCoin):
        w.variant(0)
    elif isinstance(arg, Input):
        w.variant(1).u16(arg.index)
    elif isinstance(arg, Result):
        w.variant(2).u16(arg.index)
    elif isinstance(arg, NestedResult):
        w.variant(3).u16(arg.index).u16(arg.result_index)
    else:
        raise MalformedIntent(f"Unknown argument: {arg!r}")


def _write_command(w: BcsWriter, cmd: Command) -> None:
    if isinstance(cmd, MoveCall):
        w.variant(0).fixed_bytes(cmd.package).string(cmd.module).string(cmd.function)
        w.seq(cmd.type_arguments, _write_type_tag)
        w.seq(cmd.arguments, _write_argument)
    elif isinstance(cmd, TransferObjects):
        w.variant(1).seq(cmd.objects, _write_argument)
        _write_argument(w, cmd.address)
    elif isinstance(cmd, SplitCoins):
        w.variant(2)
        _write_argument(w, cmd.coin)
        w.seq(cmd.amounts, _write_argument)
    elif isinstance(cmd, MergeCoins):
        w.variant(3)
        _write_argument(w, cmd.destination)
        w.seq(cmd.sources, _write_argument)
    elif isinstance(cmd, Publish):
        w.variant(4).seq(cmd.modules, BcsWriter.byte_vec)
        w.seq(cmd.dependencies, BcsWriter.fixed_bytes)
    elif isinstance(cmd, MakeMoveVec):
        w.variant(5)
        if cmd.type_argument is None:
            w.variant(0)
        else:
            w.variant(1)
            _write_type_tag(w, cmd.type_argument)
        w.seq(cmd.elements, _write_argument)
    elif isinstance(cmd, Upgrade):
        w.variant(6).seq(cmd.modules, BcsWriter.byte_vec)
        w.seq(cmd.dependencies, BcsWriter.fixed_bytes)
        w.fixed_bytes(cmd.package)
        _write_argument(w, cmd.ticket)
    else:
        raise MalformedIntent(f"Unknown command: {cmd!r}")


def encode_transaction(tx: TransactionData) -> bytes:
    """
    Serialize transaction data to its canonical BCS bytes.

    Raises:
        NumericOverflow: If an integer does not fit its BCS width
        MalformedIntent: On unknown structures
    """
    w = BcsWriter()
    w.variant(0)  # TransactionData::V1
    w.variant(0)  # TransactionKind::ProgrammableTransaction
    w.seq(tx.inputs, _write_call_arg)
    w.seq(tx.commands, _write_command)
    w.fixed_bytes(tx.sender)
    w.seq(tx.gas_data.payment, _write_object_ref)
    w.fixed_bytes(tx.gas_data.owner)
    w.u64(tx.gas_data.price)
    w.u64(tx.gas_data.budget)
    if tx.expiration is None:
        w.variant(0)
    else:
        w.variant(1).u64(tx.expiration)
    return w.getvalue()


# --- decoding -----------------------------------------------------------------

def _read_object_ref(r: BcsReader) -> ObjectRef:
    return ObjectRef(r.fixed_bytes(ADDRESS_LENGTH), r.u64(), r.byte_vec())


def _read_call_arg(r: BcsReader) -> CallArg:
    tag = r.variant()
    if tag == 0:
        return PureArg(r.byte_vec())
    if tag == 1:
        kind = r.variant()
        if kind == 0:
            return ImmOrOwnedArg(_read_object_ref(r))
        if kind == 1:
            return SharedArg(r.fixed_bytes(ADDRESS_LENGTH), r.u64(), r.boolean())
        if kind == 2:
            return ReceivingArg(_read_object_ref(r))
        raise MalformedIntent(f"Unknown ObjectArg variant {kind}", field="tx_data")
    raise MalformedIntent(f"Unknown CallArg variant {tag}", field="tx_data")


def _read_argument(r: BcsReader) -> Argument:
    tag = r.variant()
    if tag == 0:
        return GasCoin()
    if tag == 1:
        return Input(r.u16())
    if tag == 2:
        return Result(r.u16())
    if tag == 3:
        return NestedResult(r.u16(), r.u16())
    raise MalformedIntent(f"Unknown Argument variant {tag}", field="tx_data")


def _read_arguments(r: BcsReader) -> Tuple[Argument, ...]:
    return tuple(r.seq(_read_argument))


def _read_command(r: BcsReader) -> Command:
    tag = r.variant()
    if tag == 0:
        package = r.fixed_bytes(ADDRESS_LENGTH)
        module = r.string()
        function = r.string()
        type_arguments = tuple(r.seq(_read_type_tag))
        return MoveCall(package, module, function, type_arguments, _read_arguments(r))
    if tag == 1:
        objects = _read_arguments(r)
        return TransferObjects(objects, _read_argument(r))
    if tag == 2:
        coin = _read_argument(r)
        return SplitCoins(coin, _read_arguments(r))
    if tag == 3:
        destination = _read_argument(r)
        return MergeCoins(destination, _read_arguments(r))
    if tag == 4:
        modules = tuple(r.seq(BcsReader.byte_vec))
        return Publish(modules, tuple(r.seq(lambda rd: rd.fixed_bytes(ADDRESS_LENGTH))))
    if tag == 5:
        type_argument = _read_type_tag(r) if r.boolean() else None
        return MakeMoveVec(type_argument, _read_arguments(r))
    if tag == 6:
        modules = tuple(r.seq(BcsReader.byte_vec))
        dependencies = tuple(r.seq(lambda rd: rd.fixed_bytes(ADDRESS_LENGTH)))
        package = r.fixed_bytes(ADDRESS_LENGTH)
        return Upgrade(modules, dependencies, package, _read_argument(r))
    raise MalformedIntent(f"Unknown Command variant {tag}", field="tx_data")


def decode_transaction(data: bytes) -> TransactionData:
    """
    Parse canonical BCS bytes back into transaction data.

    Only ``TransactionData::V1`` with a programmable transaction is
    understood; system transactions are rejected.

    Raises:
        MalformedIntent: On truncated input, unknown variants or trailing bytes
    """
    r = BcsReader(data)
    version = r.variant()
    if version != 0:
        raise MalformedIntent(f"Unsupported TransactionData version {version}", field="tx_data")
    kind = r.variant()
    if kind != 0:
        raise MalformedIntent(f"Unsupported TransactionKind variant {kind}", field="tx_data")
    inputs = tuple(r.seq(_read_call_arg))
    commands = tuple(r.seq(_read_command))
    sender = r.fixed_bytes(ADDRESS_LENGTH)
    payment = tuple(r.seq(_read_object_ref))
    owner = r.fixed_bytes(ADDRESS_LENGTH)
    price = r.u64()
    budget = r.u64()
    expiration_tag = r.variant()
    if expiration_tag == 0:
        expiration = None
    elif expiration_tag == 1:
        expiration = r.u64()
    else:
        raise MalformedIntent(f"Unknown TransactionExpiration variant {expiration_tag}", field="tx_data")
    r.finish()
    return TransactionData(inputs, commands, sender, GasData(payment, owner, price, budget), expiration)


# --- transfers ----------------------------------------------------------------

def _object_ref(ref: Optional[SuiObjectRef], field_name: str) -> ObjectRef:
    if ref is None:
        raise MalformedIntent(f"Missing {field_name}", field=field_name)
    if len(ref.object_id) != ADDRESS_LENGTH:
        raise MalformedIntent(
            f"{field_name}.object_id must be {ADDRESS_LENGTH} bytes, got {len(ref.object_id)}", field=field_name
        )
    if len(ref.object_digest) != DIGEST_LENGTH:
        raise MalformedIntent(
            f"{field_name}.object_digest must be {DIGEST_LENGTH} bytes, got {len(ref.object_digest)}",
            field=field_name,
        )
    return ObjectRef(ref.object_id, ref.seq_num, ref.object_digest)


def build_transfer(transfer: SuiNewTransfer) -> TransactionData:
    """
    Build the programmable transaction for a structured transfer.

    A native amount splits the gas coin and transfers the new coin; an object
    transfer moves the referenced object. Either way the recipient is the
    first (pure) input.

    Args:
        transfer: Transfer with exactly one of ``sui`` and ``object`` set

    Returns:
        Transaction data ready for ``encode_transaction``

    Raises:
        MalformedIntent: If the transfer type is missing or ambiguous, or a
            field is missing or malformed
        NumericOverflow: If the amount does not fit in u64
    """
    if (transfer.sui is None) == (transfer.object_ref is None):
        raise MalformedIntent("Exactly one of 'sui' and 'object' must be set", field="transfer")

    recipient = parse_address(transfer.recipient, "recipient")
    sender = parse_address(transfer.sender, "sender")
    gas_payment = _object_ref(transfer.gas_payment, "gas_payment")

    if transfer.sui is not None:
        amount = BcsWriter().u64(transfer.sui.amount).getvalue()
        inputs = (PureArg(recipient), PureArg(amount))
        commands = (
            SplitCoins(GasCoin(), (Input(1),)),
            TransferObjects((Result(0),), Input(0)),
        )
    else:
        inputs = (PureArg(recipient), ImmOrOwnedArg(_object_ref(transfer.object_ref, "object")))
        commands = (TransferObjects((Input(1),), Input(0)),)

    return TransactionData(
        inputs=inputs,
        commands=commands,
        sender=sender,
        gas_data=GasData(payment=(gas_payment,), owner=sender, price=transfer.gas_price, budget=transfer.gas_budget),
    )


def decode_transfer(data: bytes) -> SuiNewTransfer:
    """
    Recover the structured transfer a transaction body was built from.

    Raises:
        MalformedIntent: If the body is not one of the two transfer shapes
    """
    tx = decode_transaction(data)
    if len(tx.gas_data.payment) != 1 or tx.gas_data.owner != tx.sender:
        raise MalformedIntent("Not a simple transfer: unexpected gas data", field="tx_data")
    if len(tx.inputs) != 2 or not isinstance(tx.inputs[0], PureArg) or len(tx.inputs[0].value) != ADDRESS_LENGTH:
        raise MalformedIntent("Not a simple transfer: unexpected inputs", field="tx_data")

    gas = tx.gas_data.payment[0]
    common = dict(
        recipient=format_address(tx.inputs[0].value),
        sender=tx.sender_address,
        gas_payment=SuiObjectRef(object_id=gas.object_id, seq_num=gas.version, object_digest=gas.digest),
        gas_budget=tx.gas_data.budget,
        gas_price=tx.gas_data.price,
    )

    amount_arg = tx.inputs[1]
    if (
        isinstance(amount_arg, PureArg)
        and len(amount_arg.value) == 8
        and tx.commands == (SplitCoins(GasCoin(), (Input(1),)), TransferObjects((Result(0),), Input(0)))
    ):
        amount = int.from_bytes(amount_arg.value, "little")
        return SuiNewTransfer(sui=SuiTransfer(amount=amount), **common)

    if isinstance(amount_arg, ImmOrOwnedArg) and tx.commands == (TransferObjects((Input(1),), Input(0)),):
        ref = amount_arg.ref
        obj = SuiObjectRef(object_id=ref.object_id, seq_num=ref.version, object_digest=ref.digest)
        return SuiNewTransfer(object=obj, **common)

    raise MalformedIntent("Not a simple transfer: unexpected commands", field="tx_data")
