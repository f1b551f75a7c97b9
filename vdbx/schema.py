#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Typed client for vector database services over ZeroMQ
#
# Copyright (C) 2025 Ran Aroussi
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
vdbx Schema Module

Field and collection schema definitions.

A FieldType describes the type contract of one column together with its
per-type parameters (primary key and auto id flags, VarChar max length,
vector dimension). FieldSchema binds a FieldType to a name, and
CollectionSchema assembles an ordered list of fields under a collection name.

All invariants are checked when the objects are built, so a schema that
exists is always a valid one. Nothing in this module talks to the server.
"""

from typing import Any, Dict, List, Optional

import msgpack

from .errors import (
    AutoIdWithoutPrimaryKey,
    DuplicateFieldName,
    DuplicatePrimaryKey,
    InvalidDimension,
    InvalidFieldName,
    InvalidMaxLength,
    MalformedResponse,
    NoPrimaryKey,
    SchemaError,
    UnsupportedPrimaryKeyType,
)
from .types import DataType, FieldState
from .utils import kv_dict, kv_pairs

# Keys used by the server to carry per-type parameters
DIM_PARAM = "dim"
MAX_LENGTH_PARAM = "max_length"


class FieldType:
    """
    Type contract of a single field.

    Use the named constructors rather than the initializer:

        FieldType.int64(primary_key=True, auto_id=True)
        FieldType.varchar(200)
        FieldType.float_vector(1536)

    Attributes:
        dtype (DataType): Wire data type
        primary_key (bool): Whether the field is the collection primary key
        auto_id (bool): Whether the server generates the primary key values
        max_length (int): Maximum length, VarChar only
        dim (int): Vector dimension, vector types only
    """

    def __init__(
        self,
        dtype: DataType,
        primary_key: bool = False,
        auto_id: bool = False,
        max_length: Optional[int] = None,
        dim: Optional[int] = None,
    ):
        self.dtype = DataType(dtype)
        self.primary_key = bool(primary_key)
        self.auto_id = bool(auto_id)
        self.max_length = max_length
        self.dim = dim

    @classmethod
    def none(cls) -> "FieldType":
        return cls(DataType.NONE)

    @classmethod
    def boolean(cls) -> "FieldType":
        return cls(DataType.BOOL)

    @classmethod
    def int8(cls) -> "FieldType":
        return cls(DataType.INT8)

    @classmethod
    def int16(cls) -> "FieldType":
        return cls(DataType.INT16)

    @classmethod
    def int32(cls) -> "FieldType":
        return cls(DataType.INT32)

    @classmethod
    def int64(cls, primary_key: bool = False, auto_id: bool = False) -> "FieldType":
        return cls(DataType.INT64, primary_key=primary_key, auto_id=auto_id)

    @classmethod
    def float32(cls) -> "FieldType":
        return cls(DataType.FLOAT)

    @classmethod
    def double(cls) -> "FieldType":
        return cls(DataType.DOUBLE)

    @classmethod
    def string(cls) -> "FieldType":
        return cls(DataType.STRING)

    @classmethod
    def varchar(
        cls, max_length: int, primary_key: bool = False, auto_id: bool = False
    ) -> "FieldType":
        return cls(
            DataType.VARCHAR,
            primary_key=primary_key,
            auto_id=auto_id,
            max_length=max_length,
        )

    @classmethod
    def binary_vector(cls, dim: int) -> "FieldType":
        return cls(DataType.BINARY_VECTOR, dim=dim)

    @classmethod
    def float_vector(cls, dim: int) -> "FieldType":
        return cls(DataType.FLOAT_VECTOR, dim=dim)

    def __eq__(self, other):
        if not isinstance(other, FieldType):
            return NotImplemented
        return (
            self.dtype == other.dtype
            and self.primary_key == other.primary_key
            and self.auto_id == other.auto_id
            and self.max_length == other.max_length
            and self.dim == other.dim
        )

    def __repr__(self):
        parts = [f"dtype: {self.dtype.name}"]
        if self.max_length is not None:
            parts.append(f"max_length: {self.max_length}")
        if self.dim is not None:
            parts.append(f"dimension: {self.dim}")
        if self.dtype.is_primary_key_eligible:
            parts.append(f"is_primary: {self.primary_key}")
            parts.append(f"auto_id: {self.auto_id}")
        return f"FieldType({', '.join(parts)})"


def _positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class FieldSchema:
    """
    Schema of one named field.

    The constructor validates the field eagerly:

    - the name must be a non-empty string
    - auto_id requires primary_key
    - a primary key must be Int64 or VarChar
    - vector types need a positive dimension
    - VarChar needs a positive max_length

    Instances are immutable once built.
    """

    __slots__ = (
        "_name",
        "_description",
        "_field_type",
        "_field_id",
        "_index_params",
        "_state",
    )

    def __init__(
        self,
        name: str,
        field_type: FieldType,
        description: str = "",
        index_params: Optional[Dict[str, str]] = None,
    ):
        if not isinstance(name, str) or not name:
            raise InvalidFieldName(name)

        if field_type.auto_id and not field_type.primary_key:
            raise AutoIdWithoutPrimaryKey(name)

        if field_type.primary_key and not field_type.dtype.is_primary_key_eligible:
            raise UnsupportedPrimaryKeyType(name, field_type.dtype.name)

        if field_type.dtype.is_vector:
            if not _positive_int(field_type.dim):
                raise InvalidDimension(name, field_type.dim)
        elif field_type.dim is not None:
            raise InvalidDimension(name, field_type.dim)

        if field_type.dtype == DataType.VARCHAR:
            if not _positive_int(field_type.max_length):
                raise InvalidMaxLength(name, field_type.max_length)
        elif field_type.max_length is not None:
            raise InvalidMaxLength(name, field_type.max_length)

        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_description", description or "")
        object.__setattr__(
            self,
            "_field_type",
            FieldType(
                field_type.dtype,
                primary_key=field_type.primary_key,
                auto_id=field_type.auto_id,
                max_length=field_type.max_length,
                dim=field_type.dim,
            ),
        )
        object.__setattr__(self, "_field_id", 0)
        object.__setattr__(self, "_index_params", dict(index_params or {}))
        object.__setattr__(self, "_state", FieldState.FIELD_CREATED)

    def __setattr__(self, key, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def field_type(self) -> FieldType:
        # Hand out a copy so the stored contract cannot be edited
        ft = self._field_type
        return FieldType(ft.dtype, ft.primary_key, ft.auto_id, ft.max_length, ft.dim)

    @property
    def dtype(self) -> DataType:
        return self._field_type.dtype

    @property
    def is_primary_key(self) -> bool:
        return self._field_type.primary_key

    @property
    def auto_id(self) -> bool:
        return self._field_type.auto_id

    @property
    def max_length(self) -> Optional[int]:
        return self._field_type.max_length

    @property
    def dim(self) -> Optional[int]:
        return self._field_type.dim

    @property
    def field_id(self) -> int:
        """Server-assigned identifier, 0 until the schema has been read back."""
        return self._field_id

    @property
    def state(self) -> FieldState:
        return self._state

    @property
    def type_params(self) -> Dict[str, str]:
        params = {}
        if self.dim is not None:
            params[DIM_PARAM] = str(self.dim)
        if self.max_length is not None:
            params[MAX_LENGTH_PARAM] = str(self.max_length)
        return params

    @property
    def index_params(self) -> Dict[str, str]:
        return dict(self._index_params)

    def to_wire(self) -> Dict[str, Any]:
        """
        Convert the field into its wire message.

        Returns:
            dict: FieldSchema message with the type code and string type params
        """
        return {
            "field_id": self.field_id,
            "name": self.name,
            "is_primary_key": self.is_primary_key,
            "description": self.description,
            "data_type": int(self.dtype),
            "type_params": kv_pairs(self.type_params),
            "index_params": kv_pairs(self._index_params),
            "auto_id": self.auto_id,
            "state": int(self.state),
        }

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "FieldSchema":
        """
        Build a field from a wire message.

        Args:
            message: FieldSchema message as decoded from the server

        Returns:
            FieldSchema: The validated field

        Raises:
            MalformedResponse: If the type code, type params or flags are invalid
        """
        if not isinstance(message, dict):
            raise MalformedResponse(f"field schema must be a mapping, got {type(message).__name__}")

        dtype = DataType.from_wire(message.get("data_type", 0))
        type_params = kv_dict(message.get("type_params"))

        dim = None
        max_length = None
        try:
            if DIM_PARAM in type_params:
                dim = int(type_params[DIM_PARAM])
            if MAX_LENGTH_PARAM in type_params:
                max_length = int(type_params[MAX_LENGTH_PARAM])
        except ValueError as e:
            raise MalformedResponse(f"invalid type param: {e}") from e

        field_type = FieldType(
            dtype,
            primary_key=message.get("is_primary_key", False),
            auto_id=message.get("auto_id", False),
            max_length=max_length if dtype == DataType.VARCHAR else None,
            dim=dim if dtype.is_vector else None,
        )

        try:
            field = cls(
                message.get("name", ""),
                field_type,
                message.get("description", ""),
                index_params=kv_dict(message.get("index_params")),
            )
        except SchemaError as e:
            raise MalformedResponse(f"invalid field schema from server: {e}") from e

        object.__setattr__(field, "_field_id", int(message.get("field_id", 0)))
        object.__setattr__(
            field, "_state", FieldState.from_wire(message.get("state", 0))
        )
        return field

    def __eq__(self, other):
        if not isinstance(other, FieldSchema):
            return NotImplemented
        return (
            self.name == other.name
            and self.description == other.description
            and self._field_type == other._field_type
        )

    def __hash__(self):
        return hash((self.name, self.dtype, self.is_primary_key))

    def __repr__(self):
        return (
            f"FieldSchema(name: {self.name}, description: {self.description}, "
            f"{self._field_type!r})"
        )


class CollectionSchema:
    """
    Ordered, validated set of fields under a collection name.

    Exactly one field must be the primary key and field names must be
    unique. Field order is significant: it is the positional order of
    columns in insert and query payloads.

    Raises:
        NoPrimaryKey: If no field is marked as primary key
        DuplicatePrimaryKey: If more than one field is, naming the first two
        DuplicateFieldName: If two fields share a name
    """

    __slots__ = ("_name", "_description", "_fields")

    def __init__(self, name: str, fields: List[FieldSchema], description: str = ""):
        fields = tuple(fields)

        seen = set()
        for field in fields:
            if field.name in seen:
                raise DuplicateFieldName(field.name)
            seen.add(field.name)

        primary = [field.name for field in fields if field.is_primary_key]
        if not primary:
            raise NoPrimaryKey(name)
        if len(primary) > 1:
            raise DuplicatePrimaryKey(primary[0], primary[1])

        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_description", description or "")
        object.__setattr__(self, "_fields", fields)

    def __setattr__(self, key, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def fields(self) -> List[FieldSchema]:
        return list(self._fields)

    @property
    def primary_field(self) -> FieldSchema:
        return next(field for field in self._fields if field.is_primary_key)

    @property
    def auto_id(self) -> bool:
        return self.primary_field.auto_id

    def get_field(self, name: str) -> Optional[FieldSchema]:
        for field in self._fields:
            if field.name == name:
                return field
        return None

    def to_wire(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "auto_id": self.auto_id,
            "fields": [field.to_wire() for field in self._fields],
        }

    def encode(self) -> bytes:
        """Serialize the schema message, as carried by CreateCollection."""
        return msgpack.packb(self.to_wire(), use_bin_type=True)

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "CollectionSchema":
        """
        Build a schema from a wire message.

        Raises:
            MalformedResponse: If a field is malformed or the schema breaks
                the primary key or field name invariants
        """
        if not isinstance(message, dict):
            raise MalformedResponse(
                f"collection schema must be a mapping, got {type(message).__name__}"
            )
        fields = [FieldSchema.from_wire(f) for f in message.get("fields") or []]
        try:
            return cls(message.get("name", ""), fields, message.get("description", ""))
        except SchemaError as e:
            raise MalformedResponse(f"invalid collection schema from server: {e}") from e

    @classmethod
    def decode(cls, data: bytes) -> "CollectionSchema":
        try:
            message = msgpack.unpackb(data, raw=False)
        except (TypeError, ValueError, msgpack.UnpackException) as e:
            raise MalformedResponse(f"cannot decode collection schema: {e}") from e
        return cls.from_wire(message)

    def __eq__(self, other):
        if not isinstance(other, CollectionSchema):
            return NotImplemented
        return (
            self.name == other.name
            and self.description == other.description
            and self._fields == other._fields
        )

    def __len__(self):
        return len(self._fields)

    def __iter__(self):
        return iter(self._fields)

    def __repr__(self):
        fields = ", ".join(repr(f) for f in self._fields)
        return f"CollectionSchema(name: {self.name}, description: {self.description}, fields: [{fields}])"
