"""
Transaction signer: the single entry point that dispatches a chain-tagged
request to its codec and curve backend.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from . import coin_info
from .chains import get_codec, register_codec
from .chains.base import ChainCodec
from .config import SignerConfig
from .curves import get_backend
from .exceptions import MalformedIntent
from .keys.accounts import AccountProvider
from .keys.derivation import KeyDerivationService
from .models import SignedTransactionOutput, TransactionRequest

RequestLike = Union[TransactionRequest, Dict[str, Any]]


class TransactionSigner:
    """
    Signs chain-tagged transaction requests.

    The pipeline is request -> codec encode -> key derivation -> curve
    backend sign -> codec assemble. Each call derives a fresh key handle and
    releases it before returning, whether or not signing succeeded. Calls
    share no mutable state except the public key cache.
    """

    def __init__(
        self,
        config: Optional[SignerConfig] = None,
        keys: Optional[KeyDerivationService] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the TransactionSigner

        Args:
            config: Signer configuration (read from CHAINSIGNER_* environment variables if omitted)
            keys: Key derivation service (built from ``config`` if omitted)
            logger: Optional logger instance to use for debug/info logging
        """
        self.config = config or SignerConfig.from_env()
        self.keys = keys or KeyDerivationService(self.config)
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def register_codec(codec: ChainCodec) -> None:
        """Register a codec for an additional chain."""
        register_codec(codec)

    def sign(self, request: RequestLike, accounts: AccountProvider) -> SignedTransactionOutput:
        """
        Sign one request.

        Args:
            request: Chain-tagged request (model or plain dict)
            accounts: Supplies the master seed and the sender's account path

        Returns:
            Signed output tagged with the request's chain

        Raises:
            UnsupportedChain: If the chain tag is missing or unknown
            MalformedIntent: If the request is structurally invalid
            NumericOverflow: If a numeric field does not fit its target
            DerivationError: If no key can be derived for the sender
            SigningFailure: If the curve backend fails
        """
        # 1. Validate the envelope and select the codec
        request = self._validate(request)
        codec = get_codec(request.chain)
        curve = coin_info.curve_for(codec.chain, request.curve)
        backend = get_backend(curve)

        # 2. Encode (or take the raw transaction verbatim)
        chain_input = codec.input_of(request)
        unsigned = codec.prepare(chain_input)
        if request.sender:
            unsigned.sender = request.sender

        # 3. Resolve the account path
        path = request.account_path or accounts.account_path(codec.chain, curve, unsigned.sender)

        # 4. Derive, sign and release the key
        with self.keys.derive(accounts.seed(), codec.chain, path, curve) as key:
            public_key = backend.public_key(key)
            signature = backend.sign(unsigned.payload, key)

        # 5. Assemble the chain-native output
        output = codec.assemble(unsigned, signature, public_key)
        self.logger.debug(
            f"Signed {codec.chain} transaction with {curve.value} key at {path} "
            f"({len(unsigned.payload.message)}-byte message)"
        )
        return SignedTransactionOutput(chain=codec.chain, **{codec.field: output})

    def sign_many(
        self,
        requests: Sequence[RequestLike],
        accounts: AccountProvider,
        max_workers: Optional[int] = None,
    ) -> List[SignedTransactionOutput]:
        """
        Sign independent requests concurrently.

        Args:
            requests: Requests to sign
            accounts: Account provider shared by all requests (read-only)
            max_workers: Thread pool size (``config.max_workers`` if omitted)

        Returns:
            Signed outputs in request order

        Raises:
            SigningError: The first failure, in request order
        """
        if not requests:
            return []
        workers = max_workers or self.config.max_workers
        with ThreadPoolExecutor(max_workers=min(workers, len(requests))) as pool:
            futures = [pool.submit(self.sign, request, accounts) for request in requests]
            return [future.result() for future in futures]

    def address(
        self,
        chain: str,
        accounts: AccountProvider,
        path: Optional[str] = None,
        curve: Optional[str] = None,
    ) -> str:
        """
        Chain address of an account.

        Args:
            chain: Chain tag
            accounts: Supplies the master seed
            path: Account path (the chain/curve default if omitted)
            curve: Curve for chains that accept several

        Returns:
            Address in the chain's native text form
        """
        codec = get_codec(chain)
        resolved = coin_info.curve_for(codec.chain, curve)
        public_key = self.keys.public_key(accounts.seed(), codec.chain, path, resolved)
        return codec.address(public_key, resolved)

    def _validate(self, request: RequestLike) -> TransactionRequest:
        if isinstance(request, TransactionRequest):
            return request
        if isinstance(request, dict):
            # an unknown tag is reported as such, however broken the payload
            get_codec(request.get("chain"))
        try:
            return TransactionRequest.model_validate(request)
        except ValidationError as e:
            self.logger.error(f"Invalid signing request: {e}")
            raise MalformedIntent(f"Invalid signing request: {e}") from e
