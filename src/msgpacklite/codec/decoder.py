"""MessagePack decoder.

This module provides the Unpacker class, which reads one value at a time from
a ByteSource by recursive descent, and the decode(), unpack() and
iter_decode() convenience functions.

A source that is exhausted before the tag byte of a new value yields
END_OF_INPUT. Running out of bytes anywhere after a tag byte is an error
(TruncatedInputError) and never produces a partial value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from ..config import DEFAULT_UNPACKER_OPTIONS, UnpackerOptions
from ..exceptions import (
    ExtraDataError,
    InvalidPayloadError,
    LimitExceededError,
    TruncatedInputError,
    UnknownTagError,
)
from ..models.values import (
    END_OF_INPUT,
    NIL,
    ArrayValue,
    BinValue,
    BoolValue,
    ExtensionValue,
    FloatValue,
    IntValue,
    MapValue,
    StrValue,
    Value,
)
from . import constants as c
from .byteconv import (
    unpack_float32,
    unpack_float64,
    unpack_int16,
    unpack_int32,
    unpack_int64,
    unpack_uint16,
    unpack_uint32,
    unpack_uint64,
)
from .streams import BufferSource, ByteSource, as_source

logger = logging.getLogger(__name__)

# Fixed-width numeric forms: tag -> (payload width, converter)
_NUMBERS = {
    c.UINT8: (1, lambda data: data[0]),
    c.UINT16: (2, unpack_uint16),
    c.UINT32: (4, unpack_uint32),
    c.UINT64: (8, unpack_uint64),
    c.INT8: (1, lambda data: data[0] - 256 if data[0] & 0x80 else data[0]),
    c.INT16: (2, unpack_int16),
    c.INT32: (4, unpack_int32),
    c.INT64: (8, unpack_int64),
}


class Unpacker:
    """Reads MessagePack values from a byte source.

    Iterating over an Unpacker yields consecutive values until the source is
    cleanly exhausted.

    Example:
        >>> unpacker = Unpacker(b"\\x05\\xa2hi")
        >>> unpacker.read_value()
        IntValue(value=5)
        >>> list(unpacker)
        [StrValue(value='hi')]
    """

    def __init__(self, source: Any, options: UnpackerOptions | None = None) -> None:
        """Create an unpacker.

        Args:
            source: ByteSource, bytes-like object, or any object with ``read``
            options: Decoding limits (defaults to UnpackerOptions())
        """
        self._source: ByteSource = as_source(source)
        self._options = options or DEFAULT_UNPACKER_OPTIONS

    @property
    def source(self) -> ByteSource:
        return self._source

    def read_value(self) -> Value:
        """Decode the next value.

        Returns:
            The decoded value, or END_OF_INPUT if the source was exhausted
            before the first byte

        Raises:
            UnknownTagError: If a tag byte matches no wire form
            TruncatedInputError: If the source ends in the middle of a value
            InvalidPayloadError: If a string payload is not valid UTF-8
            LimitExceededError: If a configured limit is exceeded, or nesting
                is deeper than the interpreter stack allows
        """
        tag = self._source.read_byte()
        if tag is None:
            return END_OF_INPUT
        try:
            return self._read_body(tag, 0)
        except RecursionError as err:
            logger.debug("Nesting exceeded the interpreter recursion limit")
            raise LimitExceededError("Nesting depth exceeds the interpreter recursion limit") from err

    def __iter__(self) -> Iterator[Value]:
        while True:
            value = self.read_value()
            if value is END_OF_INPUT:
                return
            yield value

    def _read_nested(self, depth: int) -> Value:
        tag = self._source.read_byte()
        if tag is None:
            logger.debug("Source exhausted inside a container at depth %d", depth)
            raise TruncatedInputError(1, 0)
        return self._read_body(tag, depth)

    def _read_body(self, tag: int, depth: int) -> Value:
        if tag <= c.POSITIVE_FIXINT_MAX:
            return IntValue(tag)
        if tag >= c.NEGATIVE_FIXINT_PREFIX:
            return IntValue(tag - 256)
        if tag < c.FIXARRAY_PREFIX:
            return self._read_map(tag & c.FIXMAP_MASK, depth)
        if tag < c.FIXSTR_PREFIX:
            return self._read_array(tag & c.FIXARRAY_MASK, depth)
        if tag < c.NIL:
            return self._read_str(tag & c.FIXSTR_MASK)

        if tag == c.NIL:
            return NIL
        if tag == c.FALSE:
            return BoolValue(False)
        if tag == c.TRUE:
            return BoolValue(True)

        number = _NUMBERS.get(tag)
        if number is not None:
            width, convert = number
            return IntValue(convert(self._source.read_exact(width)))
        if tag == c.FLOAT32:
            return FloatValue(unpack_float32(self._source.read_exact(4)))
        if tag == c.FLOAT64:
            return FloatValue(unpack_float64(self._source.read_exact(8)))

        if tag in (c.STR8, c.STR16, c.STR32):
            return self._read_str(self._read_length(tag))
        if tag in (c.BIN8, c.BIN16, c.BIN32):
            size = self._read_length(tag)
            self._check_limit("Binary length", size, self._options.max_bin_len)
            return BinValue(self._source.read_exact(size))
        if tag in (c.ARRAY16, c.ARRAY32):
            return self._read_array(self._read_length(tag), depth)
        if tag in (c.MAP16, c.MAP32):
            return self._read_map(self._read_length(tag), depth)
        if tag in c.FIXEXT_SIZES:
            return self._read_ext(c.FIXEXT_SIZES[tag])
        if tag in (c.EXT8, c.EXT16, c.EXT32):
            return self._read_ext(self._read_length(tag))

        logger.debug("Unknown tag byte 0x%02x", tag)
        raise UnknownTagError(tag)

    def _read_length(self, tag: int) -> int:
        width = c.LENGTH_FIELD_WIDTH[tag]
        data = self._source.read_exact(width)
        if width == 1:
            return data[0]
        if width == 2:
            return unpack_uint16(data)
        return unpack_uint32(data)

    def _check_limit(self, what: str, size: int, limit: int | None) -> None:
        if limit is not None and size > limit:
            logger.debug("%s %d exceeds limit %d", what, size, limit)
            raise LimitExceededError(f"{what} {size} exceeds limit {limit}")

    def _enter_container(self, depth: int) -> int:
        depth += 1
        self._check_limit("Nesting depth", depth, self._options.max_depth)
        return depth

    def _read_str(self, size: int) -> StrValue:
        self._check_limit("String length", size, self._options.max_str_len)
        data = self._source.read_exact(size)
        try:
            return StrValue(data.decode("utf-8"))
        except UnicodeDecodeError as err:
            raise InvalidPayloadError(f"String payload is not valid UTF-8: {err}") from err

    def _read_array(self, size: int, depth: int) -> ArrayValue:
        self._check_limit("Array length", size, self._options.max_array_len)
        depth = self._enter_container(depth)
        result = ArrayValue()
        for _ in range(size):
            result.append(self._read_nested(depth))
        return result

    def _read_map(self, size: int, depth: int) -> MapValue:
        self._check_limit("Map length", size, self._options.max_map_len)
        depth = self._enter_container(depth)
        result = MapValue()
        for _ in range(size):
            key = self._read_nested(depth)
            result.put(key, self._read_nested(depth))
        return result

    def _read_ext(self, size: int) -> ExtensionValue:
        self._check_limit("Extension length", size, self._options.max_ext_len)
        type_byte = self._source.read_exact(1)[0]
        type_code = type_byte - 256 if type_byte & 0x80 else type_byte
        return ExtensionValue(type_code, self._source.read_exact(size))


def unpack(source: Any, options: UnpackerOptions | None = None) -> Value:
    """Decode the next value from ``source``.

    Args:
        source: ByteSource, bytes-like object, or any object with ``read``
        options: Decoding limits

    Returns:
        The decoded value, or END_OF_INPUT if the source was already exhausted
    """
    return Unpacker(source, options).read_value()


def decode(data: bytes | bytearray | memoryview, options: UnpackerOptions | None = None) -> Value:
    """Decode exactly one value from a complete buffer.

    Args:
        data: Encoded bytes
        options: Decoding limits

    Returns:
        The decoded value, or END_OF_INPUT if ``data`` is empty

    Raises:
        TruncatedInputError: If ``data`` ends in the middle of the value
        ExtraDataError: If bytes remain after the value
        DecodeError: On any other malformed input

    Examples:
        ```python
        from msgpacklite import decode, IntValue, END_OF_INPUT

        decode(b"\\xce\\xff\\xff\\xff\\xff") == IntValue(4294967295)  # True
        decode(b"") is END_OF_INPUT                                   # True
        decode(b"\\xda\\x00")                       # raises TruncatedInputError
        ```
    """
    source = BufferSource(data)
    value = Unpacker(source, options).read_value()
    if source.remaining():
        logger.debug("%d trailing bytes after decoded value", source.remaining())
        raise ExtraDataError(value, source.rest())
    return value


def iter_decode(source: Any, options: UnpackerOptions | None = None) -> Iterator[Value]:
    """Yield consecutive values from ``source`` until it is cleanly exhausted.

    Args:
        source: ByteSource, bytes-like object, or any object with ``read``
        options: Decoding limits

    Yields:
        Decoded values, in stream order

    Raises:
        DecodeError: If the stream is malformed or ends mid-value
    """
    return iter(Unpacker(source, options))
