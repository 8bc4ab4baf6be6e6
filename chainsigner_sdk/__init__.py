"""
chainsigner SDK - multi-chain transaction signing core.
"""
from .version import __version__
from .exceptions import (
    SigningError, SigningErrorCode, UnsupportedChain, MalformedIntent,
    NumericOverflow, DerivationError, SigningFailure
)
from .types import CurveType, SignablePayload, Signature
from .keys import SigningKeyHandle, KeyDerivationService, AccountProvider, SeedAccountProvider
from .curves import CurveBackend, get_backend
from .chains import ChainCodec, SuiCodec, StarknetCodec, register_codec
from .models import (
    TransactionRequest, SignedTransactionOutput,
    SuiTxInput, SuiRawTx, SuiNewTransfer, SuiTransfer, SuiObjectRef, SuiTxOutput,
    StarknetTxInput, StarknetNewTransfer, StarknetRawTx, StarknetCall, StarknetTxOutput
)
from .config import SignerConfig
from .signer import TransactionSigner

__all__ = [
    "TransactionSigner",
    "SignerConfig",
    "SigningError",
    "SigningErrorCode",
    "UnsupportedChain",
    "MalformedIntent",
    "NumericOverflow",
    "DerivationError",
    "SigningFailure",
    "CurveType",
    "SignablePayload",
    "Signature",
    "SigningKeyHandle",
    "KeyDerivationService",
    "AccountProvider",
    "SeedAccountProvider",
    "CurveBackend",
    "get_backend",
    "ChainCodec",
    "SuiCodec",
    "StarknetCodec",
    "register_codec",
    "TransactionRequest",
    "SignedTransactionOutput",
    "SuiTxInput",
    "SuiRawTx",
    "SuiNewTransfer",
    "SuiTransfer",
    "SuiObjectRef",
    "SuiTxOutput",
    "StarknetTxInput",
    "StarknetNewTransfer",
    "StarknetRawTx",
    "StarknetCall",
    "StarknetTxOutput",
    "__version__",
]
