"""Pydantic model base class with MessagePack serialization.

This module provides the PackedModel class. A PackedModel is written as a map
from field name to field value, and read back through pydantic validation.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from ..codec.decoder import decode
from ..codec.encoder import encode
from ..config import PackerOptions, UnpackerOptions
from ..exceptions import DecodeError
from .values import END_OF_INPUT, MapValue

T = TypeVar("T", bound="PackedModel")


class PackedModel(BaseModel):
    """Base class for messages serialized as MessagePack maps.

    Example:
        >>> class Status(PackedModel):
        ...     schema_version: int
        ...     compact: bool
        >>> data = Status(schema_version=0, compact=True).to_msgpack()
        >>> Status.from_msgpack(data)
        Status(schema_version=0, compact=True)
    """

    model_config = ConfigDict(
        # Forbid extra fields not defined in schema
        extra="forbid",
        # Validate on assignment
        validate_assignment=True,
    )

    def to_msgpack(self, options: PackerOptions | None = None) -> bytes:
        """Encode this model as a map of field name to value.

        Raises:
            EncodeError: If a field value has no wire representation
        """
        return encode(self, options)

    @classmethod
    def from_msgpack(
        cls: type[T], data: bytes | bytearray | memoryview, options: UnpackerOptions | None = None
    ) -> T:
        """Decode and validate a model from its map encoding.

        Args:
            data: Encoded bytes holding exactly one map
            options: Decoding limits

        Returns:
            Validated model instance

        Raises:
            DecodeError: If the data is malformed, is not a map, or fails
                model validation
        """
        value = decode(data, options)
        if value is END_OF_INPUT:
            raise DecodeError(f"No data to decode {cls.__name__} from")
        if not isinstance(value, MapValue):
            raise DecodeError(f"{cls.__name__} requires a map, got {type(value).__name__}")
        fields: dict[Any, Any] = value.to_python()
        try:
            return cls.model_validate(fields)
        except ValidationError as e:
            raise DecodeError(f"Failed to construct {cls.__name__}: {e}") from e
