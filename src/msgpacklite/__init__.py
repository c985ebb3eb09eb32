"""msgpacklite: MessagePack serialization

A Python library for the MessagePack binary serialization format: a compact,
self-describing encoding for nil, booleans, integers, floats, strings, binary
blobs, arrays, maps and typed extensions.

Key Features:
- Narrowest-fit encoding, bit-exact with every MessagePack implementation
- Decoding to an explicit Value model (IntValue, StrValue, MapValue, ...)
- Distinct, inspectable errors for truncated input, unknown tags and
  unsupported values
- Pluggable byte sinks and sources (buffers, files, sockets)
- Pydantic-based message modeling via PackedModel

Quick Start:
    >>> from msgpacklite import decode, encode
    >>>
    >>> data = encode({"compact": True, "schema": 0})
    >>> data.hex()
    '82a7636f6d70616374c3a6736368656d6100'
    >>> decode(data).to_python()
    {'compact': True, 'schema': 0}
"""

from __future__ import annotations

from .codec import (
    BufferSink,
    BufferSource,
    ByteSink,
    ByteSource,
    CountingSink,
    Packer,
    StreamSink,
    StreamSource,
    Unpacker,
    decode,
    encode,
    iter_decode,
    pack,
    unpack,
)
from .config import PackerOptions, UnpackerOptions
from .exceptions import (
    DecodeError,
    EncodeError,
    ExtraDataError,
    InvalidPayloadError,
    LimitExceededError,
    MsgpackliteError,
    OutOfRangeError,
    TruncatedInputError,
    UnknownTagError,
    UnsupportedValueError,
)
from .models import (
    END_OF_INPUT,
    NIL,
    ArrayValue,
    BinValue,
    BoolValue,
    EndOfInput,
    ExtensionValue,
    FloatValue,
    IntValue,
    MapValue,
    NilValue,
    StrValue,
    Value,
    from_python,
)
from .models.message import PackedModel
from .utils import encoded_size, to_hex

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode",
    "decode",
    "pack",
    "unpack",
    "iter_decode",
    "Packer",
    "Unpacker",
    # Options
    "PackerOptions",
    "UnpackerOptions",
    # Value model
    "Value",
    "NilValue",
    "BoolValue",
    "IntValue",
    "FloatValue",
    "StrValue",
    "BinValue",
    "ArrayValue",
    "MapValue",
    "ExtensionValue",
    "EndOfInput",
    "END_OF_INPUT",
    "NIL",
    "from_python",
    "PackedModel",
    # Sinks and sources
    "ByteSink",
    "ByteSource",
    "BufferSink",
    "BufferSource",
    "CountingSink",
    "StreamSink",
    "StreamSource",
    # Exceptions
    "MsgpackliteError",
    "EncodeError",
    "UnsupportedValueError",
    "OutOfRangeError",
    "DecodeError",
    "UnknownTagError",
    "TruncatedInputError",
    "InvalidPayloadError",
    "LimitExceededError",
    "ExtraDataError",
    # Utilities
    "encoded_size",
    "to_hex",
    # Version
    "__version__",
]
