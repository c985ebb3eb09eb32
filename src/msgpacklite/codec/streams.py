"""Byte sink and byte source abstractions.

The codec never talks to a transport directly. The encoder writes through a
ByteSink and the decoder reads through a ByteSource; this module defines both
interfaces and the in-memory, file-like and counting implementations.

Design Pattern: Adapter Pattern
- ByteSink / ByteSource: abstract interfaces consumed by Packer / Unpacker
- BufferSink / BufferSource: in-memory buffers
- StreamSink / StreamSource: wrap any object with ``write`` / ``read``
- CountingSink: measures encoded size without keeping the bytes
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from ..exceptions import TruncatedInputError

logger = logging.getLogger(__name__)

# Upper bound on a single read() against a stream, so that a hostile length
# field cannot make us allocate the whole claimed payload up front
STREAM_CHUNK_SIZE = 64 * 1024


class ByteSink(ABC):
    """Abstract destination for encoded bytes.

    Implementations must write every byte they are given, in order. Buffering
    and flushing are the implementation's concern, not the encoder's.
    """

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Write all of ``data``.

        Raises:
            OSError: Propagated unchanged from the underlying transport
        """

    def write_byte(self, value: int) -> None:
        """Write a single byte (0-255)."""
        self.write(bytes((value,)))


class ByteSource(ABC):
    """Abstract origin of bytes to decode."""

    @abstractmethod
    def read_byte(self) -> int | None:
        """Read one byte.

        Returns:
            The byte value (0-255), or None if the source is exhausted
        """

    @abstractmethod
    def read_exact(self, size: int) -> bytes:
        """Read exactly ``size`` bytes.

        Raises:
            TruncatedInputError: If fewer than ``size`` bytes are available
        """


class BufferSink(ByteSink):
    """Collects written bytes in memory.

    Example:
        >>> sink = BufferSink()
        >>> sink.write_byte(0xC0)
        >>> sink.getvalue()
        b'\\xc0'
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write(self, data: bytes) -> None:
        self._buffer += data

    def write_byte(self, value: int) -> None:
        self._buffer.append(value)

    def getvalue(self) -> bytes:
        """Return everything written so far."""
        return bytes(self._buffer)

    def reset(self) -> None:
        """Discard everything written so far."""
        self._buffer.clear()

    def __len__(self) -> int:
        return len(self._buffer)


class CountingSink(ByteSink):
    """Discards bytes and counts how many were written."""

    def __init__(self) -> None:
        self.count = 0

    def write(self, data: bytes) -> None:
        self.count += len(data)

    def write_byte(self, value: int) -> None:
        self.count += 1


class StreamSink(ByteSink):
    """Writes to any object exposing ``write(bytes)``, e.g. a binary file."""

    def __init__(self, stream: Any) -> None:
        self._stream = stream

    def write(self, data: bytes) -> None:
        self._stream.write(data)


class BufferSource(ByteSource):
    """Reads from an in-memory bytes-like object.

    Example:
        >>> source = BufferSource(b"\\x01\\x02")
        >>> source.read_byte()
        1
        >>> source.remaining()
        1
    """

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._position = 0

    def read_byte(self) -> int | None:
        if self._position >= len(self._data):
            return None
        value = self._data[self._position]
        self._position += 1
        return value

    def read_exact(self, size: int) -> bytes:
        available = len(self._data) - self._position
        if size > available:
            logger.debug("Buffer truncated: need %d bytes, have %d", size, available)
            raise TruncatedInputError(size, available)
        start = self._position
        self._position += size
        return self._data[start : self._position]

    def position(self) -> int:
        """Return the number of bytes consumed so far."""
        return self._position

    def remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._data) - self._position

    def rest(self) -> bytes:
        """Return the unread bytes without consuming them."""
        return self._data[self._position :]


class StreamSource(ByteSource):
    """Reads from any object exposing ``read(n)``, e.g. a binary file or socket file.

    Short reads are retried until the requested count is reached or the
    stream reports end of file (an empty read).
    """

    def __init__(self, stream: Any) -> None:
        self._stream = stream

    def read_byte(self) -> int | None:
        data = self._stream.read(1)
        if not data:
            return None
        return data[0]

    def read_exact(self, size: int) -> bytes:
        result = bytearray()
        while len(result) < size:
            chunk = self._stream.read(min(size - len(result), STREAM_CHUNK_SIZE))
            if not chunk:
                logger.debug("Stream truncated: need %d bytes, got %d", size, len(result))
                raise TruncatedInputError(size, len(result))
            result += chunk
        return bytes(result)


def as_sink(target: Any) -> ByteSink:
    """Adapt ``target`` to a ByteSink.

    Args:
        target: A ByteSink (returned as-is) or any object with ``write``

    Returns:
        A ByteSink writing to ``target``

    Raises:
        TypeError: If ``target`` cannot be written to
    """
    if isinstance(target, ByteSink):
        return target
    if callable(getattr(target, "write", None)):
        return StreamSink(target)
    raise TypeError(f"Cannot write to object of type {type(target).__name__}")


def as_source(origin: Any) -> ByteSource:
    """Adapt ``origin`` to a ByteSource.

    Args:
        origin: A ByteSource (returned as-is), a bytes-like object, or any
            object with ``read``

    Returns:
        A ByteSource reading from ``origin``

    Raises:
        TypeError: If ``origin`` cannot be read from
    """
    if isinstance(origin, ByteSource):
        return origin
    if isinstance(origin, (bytes, bytearray, memoryview)):
        return BufferSource(origin)
    if callable(getattr(origin, "read", None)):
        return StreamSource(origin)
    raise TypeError(f"Cannot read from object of type {type(origin).__name__}")
