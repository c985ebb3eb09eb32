"""MessagePack encoder.

This module provides the Packer class, which writes values to a ByteSink
using the narrowest wire form that can hold each value, and the encode() and
pack() convenience functions.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

from ..config import DEFAULT_PACKER_OPTIONS, PackerOptions
from ..exceptions import EncodeError, OutOfRangeError, UnsupportedValueError
from ..models.values import (
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
)
from . import constants as c
from .byteconv import (
    fits_float32,
    pack_float32,
    pack_float64,
    pack_int16,
    pack_int32,
    pack_int64,
    pack_uint16,
    pack_uint32,
    pack_uint64,
)
from .streams import BufferSink, ByteSink, as_sink

logger = logging.getLogger(__name__)


class Packer:
    """Writes MessagePack values to a byte sink.

    A Packer holds no state besides its sink and options, so one instance may
    write any number of consecutive values.

    Example:
        >>> sink = BufferSink()
        >>> packer = Packer(sink)
        >>> packer.write_array_header(2)
        >>> packer.write_int(5)
        >>> packer.write_string("hi")
        >>> sink.getvalue()
        b'\\x92\\x05\\xa2hi'
    """

    def __init__(self, sink: Any, options: PackerOptions | None = None) -> None:
        """Create a packer.

        Args:
            sink: ByteSink, or any object with a ``write`` method
            options: Encoding options (defaults to PackerOptions())
        """
        self._sink: ByteSink = as_sink(sink)
        self._options = options or DEFAULT_PACKER_OPTIONS

    @property
    def sink(self) -> ByteSink:
        return self._sink

    def _write_tagged(self, tag: int, payload: bytes) -> None:
        self._sink.write(bytes((tag,)) + payload)

    def write_nil(self) -> None:
        """Write nil (0xc0)."""
        self._sink.write_byte(c.NIL)

    def write_bool(self, value: bool) -> None:
        """Write true (0xc3) or false (0xc2)."""
        self._sink.write_byte(c.TRUE if value else c.FALSE)

    def write_int(self, value: int) -> None:
        """Write an integer in the narrowest int format family form.

        Args:
            value: Integer in [-2^63, 2^64-1]

        Raises:
            OutOfRangeError: If the value needs more than 64 bits
        """
        if -32 <= value <= -1:
            # negative fixint: 111YYYYY
            self._sink.write_byte(c.NEGATIVE_FIXINT_PREFIX | (value & c.NEGATIVE_FIXINT_MASK))
        elif 0 <= value <= c.POSITIVE_FIXINT_MAX:
            # positive fixint: 0XXXXXXX
            self._sink.write_byte(value)
        elif -128 <= value <= -33:
            self._write_tagged(c.INT8, bytes((value & 0xFF,)))
        elif 128 <= value <= c.UINT8_MAX:
            self._write_tagged(c.UINT8, bytes((value,)))
        elif -32768 <= value <= -129:
            self._write_tagged(c.INT16, pack_int16(value))
        elif 256 <= value <= c.UINT16_MAX:
            self._write_tagged(c.UINT16, pack_uint16(value))
        elif -(1 << 31) <= value <= -32769:
            self._write_tagged(c.INT32, pack_int32(value))
        elif 65536 <= value <= c.UINT32_MAX:
            self._write_tagged(c.UINT32, pack_uint32(value))
        elif c.INT64_MIN <= value < -(1 << 31):
            self._write_tagged(c.INT64, pack_int64(value))
        elif c.UINT32_MAX < value <= c.UINT64_MAX:
            self._write_tagged(c.UINT64, pack_uint64(value))
        else:
            raise OutOfRangeError(f"Integer {value} is outside [-2^63, 2^64-1]")

    def write_float32(self, value: float) -> None:
        """Write an IEEE-754 single precision float (0xca).

        Raises:
            OutOfRangeError: If the value is finite but too large for 32 bits
        """
        try:
            payload = pack_float32(value)
        except OverflowError as err:
            raise OutOfRangeError(f"Float {value!r} does not fit in 32 bits") from err
        self._write_tagged(c.FLOAT32, payload)

    def write_float64(self, value: float) -> None:
        """Write an IEEE-754 double precision float (0xcb)."""
        self._write_tagged(c.FLOAT64, pack_float64(value))

    def write_float(self, value: float) -> None:
        """Write a float at the precision chosen by ``options.float_precision``."""
        precision = self._options.float_precision
        if precision == "double":
            self.write_float64(value)
        elif precision == "single" or fits_float32(value):
            self.write_float32(value)
        else:
            self.write_float64(value)

    def _write_length_header(self, size: int, kind: str, tags: tuple[int, int, int]) -> None:
        # tags are the 8/16/32-bit header forms, 0 when the form does not exist
        tag8, tag16, tag32 = tags
        if size < 0 or size > c.UINT32_MAX:
            raise OutOfRangeError(f"{kind} length {size} is outside [0, 2^32-1]")
        if tag8 and size <= c.UINT8_MAX:
            self._write_tagged(tag8, bytes((size,)))
        elif size <= c.UINT16_MAX:
            self._write_tagged(tag16, pack_uint16(size))
        else:
            self._write_tagged(tag32, pack_uint32(size))

    def write_string_header(self, size: int) -> None:
        """Write a str format family header for ``size`` UTF-8 bytes.

        Raises:
            OutOfRangeError: If size exceeds 2^32-1
        """
        if 0 <= size <= c.FIXSTR_MAX_LEN:
            self._sink.write_byte(c.FIXSTR_PREFIX | size)
        else:
            self._write_length_header(size, "String", (c.STR8, c.STR16, c.STR32))

    def write_string(self, value: str) -> None:
        """Write a string as its UTF-8 bytes behind the narrowest header.

        Raises:
            EncodeError: If the string cannot be encoded as UTF-8 (lone surrogates)
        """
        try:
            data = value.encode("utf-8")
        except UnicodeEncodeError as err:
            raise EncodeError(f"String is not encodable as UTF-8: {err}") from err
        self.write_string_header(len(data))
        if data:
            self._sink.write(data)

    def write_binary_header(self, size: int) -> None:
        """Write a bin format family header. There is no fixed-size small form."""
        self._write_length_header(size, "Binary", (c.BIN8, c.BIN16, c.BIN32))

    def write_binary(self, data: bytes | bytearray | memoryview) -> None:
        """Write a byte sequence behind the narrowest bin header."""
        data = bytes(data)
        self.write_binary_header(len(data))
        if data:
            self._sink.write(data)

    def write_array_header(self, size: int) -> None:
        """Write an array format family header for ``size`` elements."""
        if 0 <= size <= c.FIXCONTAINER_MAX_LEN:
            self._sink.write_byte(c.FIXARRAY_PREFIX | size)
        else:
            self._write_length_header(size, "Array", (0, c.ARRAY16, c.ARRAY32))

    def write_map_header(self, size: int) -> None:
        """Write a map format family header for ``size`` key/value pairs."""
        if 0 <= size <= c.FIXCONTAINER_MAX_LEN:
            self._sink.write_byte(c.FIXMAP_PREFIX | size)
        else:
            self._write_length_header(size, "Map", (0, c.MAP16, c.MAP32))

    def write_array(self, items: Iterable[Any]) -> None:
        """Write a header followed by every element, in order."""
        items = list(items)
        self.write_array_header(len(items))
        for item in items:
            self.write_value(item)

    def write_map(self, pairs: Iterable[tuple[Any, Any]]) -> None:
        """Write a header followed by each key immediately followed by its value."""
        pairs = list(pairs)
        self.write_map_header(len(pairs))
        for key, value in pairs:
            self.write_value(key)
            self.write_value(value)

    def write_extension_header(self, type_code: int, size: int) -> None:
        """Write an ext format family header.

        Payloads of exactly 1, 2, 4, 8 or 16 bytes use the fixext forms;
        anything else uses ext8/16/32. The signed type byte follows the length.

        Raises:
            OutOfRangeError: If type_code is outside -128..127 or size exceeds 2^32-1
        """
        if not c.EXT_TYPE_MIN <= type_code <= c.EXT_TYPE_MAX:
            raise OutOfRangeError(f"Extension type code must be -128..127, got {type_code}")
        fixext_tag = c.FIXEXT_TAGS.get(size)
        if fixext_tag is not None:
            self._sink.write_byte(fixext_tag)
        else:
            self._write_length_header(size, "Extension", (c.EXT8, c.EXT16, c.EXT32))
        self._sink.write_byte(type_code & 0xFF)

    def write_extension(self, value: ExtensionValue) -> None:
        """Write an extension header followed by its payload."""
        self.write_extension_header(value.type_code, len(value.data))
        if value.data:
            self._sink.write(value.data)

    def write_value(self, value: Any) -> None:
        """Write any supported value, recursing depth-first into containers.

        Recognized kinds are the Value variants, None, bool, int, float, str,
        bytes-like objects, list, tuple, dict and pydantic models (written as
        a map of field name to field value). Any other object is handed to
        ``options.default`` when set; otherwise it is rejected.

        Raises:
            UnsupportedValueError: If the value (or a nested value) has an
                unrecognized kind
            OutOfRangeError: If an integer or length does not fit the format
        """
        if not self._write_known(value):
            hook = self._options.default
            if hook is None or not self._write_known(hook(value)):
                logger.debug("Rejecting value of type %s", type(value).__name__)
                raise UnsupportedValueError(value)

    def _write_known(self, value: Any) -> bool:
        if isinstance(value, Value):
            self._write_model_value(value)
        elif value is None:
            self.write_nil()
        elif isinstance(value, bool):
            self.write_bool(value)
        elif isinstance(value, int):
            self.write_int(value)
        elif isinstance(value, float):
            self.write_float(value)
        elif isinstance(value, str):
            self.write_string(value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            self.write_binary(value)
        elif isinstance(value, (list, tuple)):
            self.write_array(value)
        elif isinstance(value, dict):
            self.write_map(value.items())
        elif isinstance(value, BaseModel):
            self.write_map(value.model_dump(mode="python").items())
        else:
            return False
        return True

    def _write_model_value(self, value: Value) -> None:
        if isinstance(value, NilValue):
            self.write_nil()
        elif isinstance(value, BoolValue):
            self.write_bool(value.value)
        elif isinstance(value, IntValue):
            self.write_int(value.value)
        elif isinstance(value, FloatValue):
            self.write_float(value.value)
        elif isinstance(value, StrValue):
            self.write_string(value.value)
        elif isinstance(value, BinValue):
            self.write_binary(value.value)
        elif isinstance(value, ArrayValue):
            self.write_array(value)
        elif isinstance(value, MapValue):
            self.write_map(value.items())
        elif isinstance(value, ExtensionValue):
            self.write_extension(value)
        else:
            # END_OF_INPUT, or a Value subclass from outside this package
            raise UnsupportedValueError(value)


def pack(value: Any, sink: Any, options: PackerOptions | None = None) -> None:
    """Encode ``value`` and write it to ``sink``.

    The whole encoding is built first and written in one call, so nothing
    reaches ``sink`` when a nested value is rejected. A Packer writing to the
    sink directly does not give that guarantee.

    Args:
        value: Value to encode (see Packer.write_value)
        sink: ByteSink, or any object with a ``write`` method
        options: Encoding options

    Raises:
        EncodeError: If the value cannot be encoded
    """
    target = as_sink(sink)
    target.write(encode(value, options))


def encode(value: Any, options: PackerOptions | None = None) -> bytes:
    """Encode a value to MessagePack bytes.

    Args:
        value: Value to encode (see Packer.write_value)
        options: Encoding options

    Returns:
        The encoded bytes

    Raises:
        UnsupportedValueError: If the value has an unrecognized kind
        OutOfRangeError: If an integer or length does not fit the format

    Examples:
        ```python
        from msgpacklite import encode

        encode(5)                # b"\\x05"
        encode(200)              # b"\\xcc\\xc8"
        encode([5, 10, 20, 200]) # b"\\x94\\x05\\x0a\\x14\\xcc\\xc8"
        encode({"schema": 0})    # b"\\x81\\xa6schema\\x00"
        ```
    """
    sink = BufferSink()
    Packer(sink, options).write_value(value)
    return sink.getvalue()
