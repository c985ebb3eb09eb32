"""Decoded value model.

Every decoded MessagePack object is one of a closed set of Value variants:
NilValue, BoolValue, IntValue, FloatValue, StrValue, BinValue, ArrayValue,
MapValue and ExtensionValue. The END_OF_INPUT sentinel marks a source that
was exhausted before any byte of a new value was read.

Scalar variants are frozen dataclasses. ArrayValue and MapValue are mutable
through their explicit append/put/remove operations only. Every variant is
hashable so that any Value, containers included, can be used as a map key;
a container must not be mutated while it is used as a key.

Example:
    >>> m = MapValue()
    >>> m.put(StrValue("schema"), IntValue(0))
    >>> m.get(StrValue("schema"))
    IntValue(value=0)
    >>> m.to_python()
    {'schema': 0}
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from ..codec.byteconv import pack_float64
from ..codec.constants import EXT_TYPE_MAX, EXT_TYPE_MIN, INT64_MIN, UINT64_MAX
from ..exceptions import OutOfRangeError, UnsupportedValueError


class Value(ABC):
    """Root of the value variants."""

    @abstractmethod
    def to_python(self) -> Any:
        """Convert to the closest native Python object."""


@dataclass(frozen=True)
class NilValue(Value):
    """The nil value."""

    def to_python(self) -> None:
        return None


@dataclass(frozen=True)
class BoolValue(Value):
    """A boolean."""

    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError(f"BoolValue requires bool, got {type(self.value).__name__}")

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class IntValue(Value):
    """An integer in [-2^63, 2^64-1].

    Values in [2^63, 2^64) come from the uint64 wire form and are held
    exactly, never aliased onto negative numbers.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"IntValue requires int, got {type(self.value).__name__}")
        if not INT64_MIN <= self.value <= UINT64_MAX:
            raise OutOfRangeError(f"Integer {self.value} is outside [-2^63, 2^64-1]")

    def to_python(self) -> int:
        return self.value


@dataclass(frozen=True, eq=False)
class FloatValue(Value):
    """A double precision float. Float32 wire values are widened on decode.

    Equality and hashing use the IEEE-754 bit pattern, so 0.0 and -0.0 are
    distinct map keys and a NaN equals an identical NaN.
    """

    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"FloatValue requires float, got {type(self.value).__name__}")
        object.__setattr__(self, "value", float(self.value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FloatValue):
            return NotImplemented
        return pack_float64(self.value) == pack_float64(other.value)

    def __hash__(self) -> int:
        return hash((FloatValue, pack_float64(self.value)))

    def to_python(self) -> float:
        return self.value


@dataclass(frozen=True)
class StrValue(Value):
    """A text string. The wire length is its UTF-8 byte length."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"StrValue requires str, got {type(self.value).__name__}")

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class BinValue(Value):
    """An opaque byte sequence."""

    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray, memoryview)):
            raise TypeError(f"BinValue requires bytes, got {type(self.value).__name__}")
        object.__setattr__(self, "value", bytes(self.value))

    def to_python(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class ExtensionValue(Value):
    """An application-defined type code with a binary payload.

    Attributes:
        type_code: Signed 8-bit type code (-128..127; negative codes are
            reserved for predefined types such as timestamps)
        data: Payload bytes
    """

    type_code: int
    data: bytes

    def __post_init__(self) -> None:
        if isinstance(self.type_code, bool) or not isinstance(self.type_code, int):
            raise TypeError(
                f"ExtensionValue type_code must be int, got {type(self.type_code).__name__}"
            )
        if not EXT_TYPE_MIN <= self.type_code <= EXT_TYPE_MAX:
            raise OutOfRangeError(f"Extension type code must be -128..127, got {self.type_code}")
        if not isinstance(self.data, (bytes, bytearray, memoryview)):
            raise TypeError(f"ExtensionValue data must be bytes, got {type(self.data).__name__}")
        object.__setattr__(self, "data", bytes(self.data))

    def to_python(self) -> ExtensionValue:
        return self


class ArrayValue(Value):
    """An ordered sequence of values. Order is wire order."""

    def __init__(self, items: Iterable[Value] = ()) -> None:
        self._items: list[Value] = []
        for item in items:
            self.append(item)

    def append(self, item: Value) -> None:
        """Append a value at the end."""
        if not isinstance(item, Value) or isinstance(item, EndOfInput):
            raise TypeError(f"ArrayValue elements must be Value, got {type(item).__name__}")
        self._items.append(item)

    def remove(self, index: int) -> Value:
        """Remove and return the value at ``index``."""
        return self._items.pop(index)

    def __getitem__(self, index: int) -> Value:
        return self._items[index]

    def __iter__(self) -> Iterator[Value]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArrayValue):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash((ArrayValue, tuple(self._items)))

    def __repr__(self) -> str:
        return f"ArrayValue({self._items!r})"

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self._items]


class MapValue(Value):
    """An insertion-ordered mapping from values to values.

    Putting an existing key replaces its value in place (last write wins,
    first position kept). Equality ignores order, like ``dict``.
    """

    def __init__(self, pairs: Mapping[Value, Value] | Iterable[tuple[Value, Value]] = ()) -> None:
        self._items: dict[Value, Value] = {}
        if isinstance(pairs, Mapping):
            pairs = pairs.items()
        for key, value in pairs:
            self.put(key, value)

    def put(self, key: Value, value: Value) -> None:
        """Insert or replace the value for ``key``."""
        for obj in (key, value):
            if not isinstance(obj, Value) or isinstance(obj, EndOfInput):
                raise TypeError(f"MapValue entries must be Value, got {type(obj).__name__}")
        self._items[key] = value

    def get(self, key: Value, default: Value | None = None) -> Value | None:
        """Return the value for ``key``, or ``default`` if absent."""
        return self._items.get(key, default)

    def remove(self, key: Value) -> Value:
        """Remove ``key`` and return its value.

        Raises:
            KeyError: If the key is absent
        """
        return self._items.pop(key)

    def items(self) -> Iterator[tuple[Value, Value]]:
        """Iterate over (key, value) pairs in insertion order."""
        return iter(self._items.items())

    def keys(self) -> Iterator[Value]:
        return iter(self._items.keys())

    def values(self) -> Iterator[Value]:
        return iter(self._items.values())

    def __getitem__(self, key: Value) -> Value:
        return self._items[key]

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[Value]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MapValue):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash((MapValue, frozenset(self._items.items())))

    def __repr__(self) -> str:
        return f"MapValue({self._items!r})"

    def to_python(self) -> dict[Any, Any]:
        """Convert to a dict.

        Array keys become tuples; map keys have no hashable native form and
        are kept as MapValue.

        Keys that are distinct Values can be equal as Python objects, e.g.
        IntValue(1), BoolValue(True) and FloatValue(1.0), or FloatValue(0.0)
        and FloatValue(-0.0). Such keys collapse into one dict entry: the
        first key object is kept with the value of the last pair in map
        order. Use the MapValue directly when this matters.
        """
        return {_to_python_key(key): value.to_python() for key, value in self._items.items()}


class EndOfInput(Value):
    """Sentinel for a source exhausted before the first byte of a value.

    There is exactly one instance, END_OF_INPUT. It is falsy and is never
    written to the wire.
    """

    _instance: EndOfInput | None = None

    def __new__(cls) -> EndOfInput:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "END_OF_INPUT"

    def __reduce__(self) -> str:
        return "END_OF_INPUT"

    def to_python(self) -> EndOfInput:
        return self


END_OF_INPUT = EndOfInput()

NIL = NilValue()


def _to_python_key(key: Value) -> Any:
    if isinstance(key, ArrayValue):
        return tuple(_to_python_key(item) for item in key)
    if isinstance(key, MapValue):
        return key
    return key.to_python()


def from_python(obj: Any) -> Value:
    """Convert a native Python object to a Value tree.

    Supported: None, bool, int, float, str, bytes-like, list, tuple, dict
    and existing Values (returned as-is).

    Args:
        obj: Object to convert

    Returns:
        The equivalent Value

    Raises:
        UnsupportedValueError: If ``obj`` (or anything nested in it) has an
            unsupported type
        OutOfRangeError: If an integer is outside [-2^63, 2^64-1]
    """
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return NIL
    if isinstance(obj, bool):
        return BoolValue(obj)
    if isinstance(obj, int):
        return IntValue(obj)
    if isinstance(obj, float):
        return FloatValue(obj)
    if isinstance(obj, str):
        return StrValue(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BinValue(obj)
    if isinstance(obj, (list, tuple)):
        return ArrayValue(from_python(item) for item in obj)
    if isinstance(obj, dict):
        return MapValue((from_python(key), from_python(value)) for key, value in obj.items())
    raise UnsupportedValueError(obj)
