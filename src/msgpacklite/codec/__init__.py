"""MessagePack codec for msgpacklite.

This module provides the encoder and decoder, the byte sink and source
abstractions they work through, and the fixed-width byte conversions they
share.
"""

from __future__ import annotations

from .decoder import Unpacker, decode, iter_decode, unpack
from .encoder import Packer, encode, pack
from .streams import (
    BufferSink,
    BufferSource,
    ByteSink,
    ByteSource,
    CountingSink,
    StreamSink,
    StreamSource,
    as_sink,
    as_source,
)

__all__ = [
    "encode",
    "decode",
    "pack",
    "unpack",
    "iter_decode",
    "Packer",
    "Unpacker",
    "ByteSink",
    "ByteSource",
    "BufferSink",
    "BufferSource",
    "CountingSink",
    "StreamSink",
    "StreamSource",
    "as_sink",
    "as_source",
]
