"""
Chain codecs.
"""
from .base import ChainCodec, UnsignedTransaction, get_codec, register_codec
from .starknet import StarknetCodec
from .sui import SuiCodec

register_codec(SuiCodec())
register_codec(StarknetCodec())

__all__ = ["ChainCodec", "UnsignedTransaction", "get_codec", "register_codec", "SuiCodec", "StarknetCodec"]
