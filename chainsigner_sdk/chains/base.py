"""
Chain codec abstraction and registry.
"""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError

from ..coin_info import normalize_chain
from ..exceptions import MalformedIntent, UnsupportedChain
from ..types import CurveType, SignablePayload, Signature

logger = logging.getLogger(__name__)


@dataclass
class UnsignedTransaction:
    """
    Output of a codec's encode step.

    Attributes:
        payload: Message for the curve backend
        body: Codec-specific data ``assemble`` needs besides the signature
        sender: Sender address, when the codec can tell
    """
    payload: SignablePayload
    body: Any = None
    sender: Optional[str] = None


class ChainCodec(ABC):
    """
    Base class for chain codecs.

    A codec owns one chain's request shape: it turns a raw transaction or a
    structured transfer into a signable payload and assembles the signed
    output. It never sees key material.

    Attributes:
        chain: Chain tag handled by the codec
        field: Name of the request/response field carrying this chain's payload
        input_model: Pydantic model of the chain's request payload
    """

    chain: str
    field: str
    input_model: Type[BaseModel]

    def input_of(self, request) -> BaseModel:
        """
        Extract and validate this chain's payload from a request.

        Raises:
            MalformedIntent: If the payload is missing or invalid
        """
        value = getattr(request, self.field, None)
        if value is None:
            raise MalformedIntent(f"Request for {self.chain} carries no '{self.field}' payload", field=self.field)
        if not isinstance(value, self.input_model):
            try:
                value = self.input_model.model_validate(value)
            except ValidationError as e:
                raise MalformedIntent(f"Invalid {self.chain} payload: {e}", field=self.field) from e
        return value

    def prepare(self, chain_input: BaseModel) -> UnsignedTransaction:
        """
        Produce the signable payload for either oneof branch.

        Raises:
            MalformedIntent: If neither or both of ``raw_tx`` and ``transfer`` are set
        """
        raw = getattr(chain_input, "raw_tx", None)
        transfer = getattr(chain_input, "transfer", None)
        if (raw is None) == (transfer is None):
            raise MalformedIntent(
                f"Exactly one of 'raw_tx' and 'transfer' must be set for {self.chain}", field=self.field
            )
        if raw is not None:
            logger.debug(f"Using raw {self.chain} transaction")
            return self.raw_payload(raw)
        return self.encode(transfer)

    @abstractmethod
    def encode(self, transfer: BaseModel) -> UnsignedTransaction:
        """Build the canonical payload of a structured transfer."""

    @abstractmethod
    def raw_payload(self, raw: Any) -> UnsignedTransaction:
        """Wrap an already built transaction without re-encoding it."""

    @abstractmethod
    def assemble(self, unsigned: UnsignedTransaction, signature: Signature, public_key: bytes) -> BaseModel:
        """Build the chain-native signed output."""

    @abstractmethod
    def address(self, public_key: bytes, curve: CurveType) -> str:
        """Chain address of a public key."""


_registry: Dict[str, ChainCodec] = {}
_registry_lock = threading.RLock()


def register_codec(codec: ChainCodec) -> None:
    """Make a codec available to the signer under its chain tag."""
    with _registry_lock:
        _registry[normalize_chain(codec.chain)] = codec
    logger.debug(f"Registered codec for {codec.chain}")


def get_codec(chain: Optional[str]) -> ChainCodec:
    """
    Look up the codec for a chain tag.

    Raises:
        UnsupportedChain: If no codec is registered for the tag
    """
    with _registry_lock:
        codec = _registry.get(normalize_chain(chain))
    if codec is None:
        raise UnsupportedChain(f"Unsupported chain: {chain!r}", field="chain")
    return codec
