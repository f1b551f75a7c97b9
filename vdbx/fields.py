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
vdbx Fields Module

Typed column containers and their wire conversion.

A column is either a ScalarField (one homogeneous array of a primitive type)
or a VectorField (a flat buffer of fixed-dimension vectors). FieldData pairs
a column with its field name and declared type, and is what insert requests
carry and query or search responses return. IDs holds the primary key list
returned by mutations and searches.

Numeric columns are held as numpy arrays of the exact wire width, strings
and byte strings as Python lists. Converting a column to its wire form and
back reproduces it exactly.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import msgpack
import numpy as np

from .errors import (
    DimensionMismatch,
    InvalidParameter,
    InvalidVectorBufferLength,
    MalformedResponse,
)
from .types import DataType, PlaceholderType

logger = logging.getLogger(__name__)

# Scalar oneof keys, in wire order
BOOL_DATA = "bool_data"
INT_DATA = "int_data"
LONG_DATA = "long_data"
FLOAT_DATA = "float_data"
DOUBLE_DATA = "double_data"
STRING_DATA = "string_data"
BYTES_DATA = "bytes_data"

SCALAR_KINDS = (
    BOOL_DATA,
    INT_DATA,
    LONG_DATA,
    FLOAT_DATA,
    DOUBLE_DATA,
    STRING_DATA,
    BYTES_DATA,
)

# Vector oneof keys
FLOAT_VECTOR = "float_vector"
BINARY_VECTOR = "binary_vector"

VECTOR_KINDS = (FLOAT_VECTOR, BINARY_VECTOR)

_NUMERIC_DTYPES = {
    BOOL_DATA: np.bool_,
    INT_DATA: np.int32,
    LONG_DATA: np.int64,
    FLOAT_DATA: np.float32,
    DOUBLE_DATA: np.float64,
}

_SCALAR_DATA_TYPES = {
    BOOL_DATA: DataType.BOOL,
    INT_DATA: DataType.INT32,
    LONG_DATA: DataType.INT64,
    FLOAT_DATA: DataType.FLOAT,
    DOUBLE_DATA: DataType.DOUBLE,
    STRING_DATA: DataType.STRING,
    # there is no scalar bytes type, the server reports these as binary
    BYTES_DATA: DataType.BINARY_VECTOR,
}

_VECTOR_DATA_TYPES = {
    FLOAT_VECTOR: DataType.FLOAT_VECTOR,
    BINARY_VECTOR: DataType.BINARY_VECTOR,
}

# Scalar kind used on the wire for each declared field type
_KIND_FOR_DATA_TYPE = {
    DataType.BOOL: BOOL_DATA,
    DataType.INT8: INT_DATA,
    DataType.INT16: INT_DATA,
    DataType.INT32: INT_DATA,
    DataType.INT64: LONG_DATA,
    DataType.FLOAT: FLOAT_DATA,
    DataType.DOUBLE: DOUBLE_DATA,
    DataType.STRING: STRING_DATA,
    DataType.VARCHAR: STRING_DATA,
}

# Declared widths narrower than the int32 column that carries them
_NARROW_INT_DTYPES = {
    DataType.INT8: np.int8,
    DataType.INT16: np.int16,
}


def _infer_scalar_kind(data: Any) -> str:
    """Pick the scalar kind for native data from its numpy dtype or first element."""
    if isinstance(data, np.ndarray):
        dt = data.dtype
        if dt.kind == "b":
            return BOOL_DATA
        if dt.kind in "iu":
            return INT_DATA if dt.itemsize < 4 or (dt.kind == "i" and dt.itemsize == 4) else LONG_DATA
        if dt.kind == "f":
            return DOUBLE_DATA if dt.itemsize > 4 else FLOAT_DATA
        if dt.kind == "U":
            return STRING_DATA
        if dt.kind == "S":
            return BYTES_DATA
        if dt.kind == "O" and data.size:
            return _infer_scalar_kind(data.tolist())
        raise InvalidParameter("data", str(dt), "unsupported array dtype")

    if not data:
        raise InvalidParameter("data", data, "cannot infer the kind of an empty column")

    first = data[0]
    if isinstance(first, (bool, np.bool_)):
        return BOOL_DATA
    if isinstance(first, (int, np.integer)):
        return LONG_DATA
    if isinstance(first, (float, np.floating)):
        return DOUBLE_DATA
    if isinstance(first, str):
        return STRING_DATA
    if isinstance(first, (bytes, bytearray)):
        return BYTES_DATA
    raise InvalidParameter("data", first, "unsupported element type")


def _numeric_mismatch(kind: str, data: Any) -> Optional[str]:
    """
    Check that numeric data can be stored as the given kind without changing value.

    Integers never become booleans, floats never become integers, and
    integers must fit the target width.

    Returns:
        A reason string when the data does not fit, else None
    """
    target = np.dtype(_NUMERIC_DTYPES[kind])

    if isinstance(data, np.ndarray) and data.dtype.kind != "O":
        source = data.dtype
        if kind == BOOL_DATA:
            fits = source.kind == "b"
        elif target.kind == "i":
            fits = source.kind in "iu"
        else:
            fits = source.kind in "iuf"
        if not fits:
            return f"cannot store {source} values as {target}"
        if target.kind == "i" and data.size:
            info = np.iinfo(target)
            if int(data.min()) < info.min or int(data.max()) > info.max:
                return f"values out of range for {target}"
        return None

    values = data.tolist() if isinstance(data, np.ndarray) else data
    info = np.iinfo(target) if target.kind == "i" else None
    for value in values:
        is_bool = isinstance(value, (bool, np.bool_))
        if kind == BOOL_DATA:
            fits = is_bool
        elif info is not None:
            fits = isinstance(value, (int, np.integer)) and not is_bool
            if fits and not info.min <= int(value) <= info.max:
                return f"{value!r} is out of range for {target}"
        else:
            fits = isinstance(value, (int, float, np.integer, np.floating)) and not is_bool
        if not fits:
            return f"{value!r} is not a valid {kind} value"
    return None


class ScalarField:
    """
    Homogeneous column of one primitive type.

    Args:
        data: Native values (list, tuple or numpy array), or None for an
            empty container
        kind: Scalar kind (e.g. LONG_DATA); inferred from data when omitted.
            Python ints infer to int64 and Python floats to float64.
    """

    def __init__(self, data: Optional[Iterable[Any]] = None, kind: Optional[str] = None):
        if kind is not None and kind not in SCALAR_KINDS:
            raise InvalidParameter("kind", kind, f"expected one of {SCALAR_KINDS}")

        if data is None:
            self.kind = kind
            self.data = None
            return

        if not isinstance(data, (np.ndarray, list)):
            data = list(data)

        self.kind = kind or _infer_scalar_kind(data)
        self.data = self._coerce(self.kind, data, InvalidParameter)

    @staticmethod
    def _coerce(kind: str, data: Any, error_cls):
        def fail(reason):
            if error_cls is InvalidParameter:
                return InvalidParameter("data", kind, reason)
            return error_cls(f"invalid {kind} column: {reason}")

        if kind in _NUMERIC_DTYPES:
            reason = _numeric_mismatch(kind, data)
            if reason:
                raise fail(reason)
            try:
                return np.asarray(data, dtype=_NUMERIC_DTYPES[kind]).reshape(-1)
            except (TypeError, ValueError, OverflowError) as e:
                raise fail(str(e)) from e

        values = data.tolist() if isinstance(data, np.ndarray) else list(data)
        if kind == STRING_DATA:
            if not all(isinstance(v, str) for v in values):
                raise fail("all values must be str")
            return values
        if not all(isinstance(v, (bytes, bytearray)) for v in values):
            raise fail("all values must be bytes")
        return [bytes(v) for v in values]

    def num_rows(self) -> int:
        if self.data is None:
            return 0
        return len(self.data)

    def dtype(self) -> DataType:
        if self.data is None:
            return DataType.NONE
        return _SCALAR_DATA_TYPES[self.kind]

    def to_list(self) -> List[Any]:
        if self.data is None:
            return []
        if isinstance(self.data, np.ndarray):
            return self.data.tolist()
        return list(self.data)

    def to_wire(self) -> Dict[str, Any]:
        if self.data is None:
            return {}
        return {self.kind: {"data": self.to_list()}}

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "ScalarField":
        """
        Build a column from a ScalarField wire message.

        Raises:
            MalformedResponse: On unknown or multiple oneof keys, or values
                that do not fit the announced kind
        """
        if not isinstance(message, dict):
            raise MalformedResponse(f"scalar field must be a mapping, got {type(message).__name__}")
        if not message:
            return cls()

        unknown = [key for key in message if key not in SCALAR_KINDS]
        if unknown:
            raise MalformedResponse(f"unknown scalar field kind {unknown[0]!r}")
        if len(message) > 1:
            raise MalformedResponse(f"scalar field sets several kinds: {sorted(message)}")

        kind, array = next(iter(message.items()))
        values = array.get("data") if isinstance(array, dict) else None
        if values is None:
            values = []
        if not isinstance(values, list):
            raise MalformedResponse(f"{kind} payload must be a list")

        field = cls()
        field.kind = kind
        field.data = cls._coerce(kind, values, MalformedResponse)
        return field

    def __len__(self):
        return self.num_rows()

    def __eq__(self, other):
        if not isinstance(other, ScalarField):
            return NotImplemented
        if self.kind != other.kind:
            return False
        if self.data is None or other.data is None:
            return self.data is None and other.data is None
        if isinstance(self.data, np.ndarray):
            return self.data.dtype == other.data.dtype and np.array_equal(self.data, other.data)
        return self.data == other.data

    def __repr__(self):
        return f"ScalarField(kind={self.kind}, rows={self.num_rows()})"


class VectorField:
    """
    Flat buffer of fixed-dimension vectors.

    Float vectors are held as a 1-D float32 array, binary vectors as a 1-D
    uint8 array; dim counts buffer elements per row in both cases. A 2-D
    input is flattened row by row.

    The constructor does not check that the buffer is a whole number of
    rows. num_rows() rounds a trailing partial row up; validate() rejects it.
    """

    def __init__(self, dim: int, data: Any = None, kind: Optional[str] = None):
        if kind is not None and kind not in VECTOR_KINDS:
            raise InvalidParameter("kind", kind, f"expected one of {VECTOR_KINDS}")

        self.dim = int(dim)

        if data is None:
            self.kind = kind
            self.data = None
            return

        if kind is None:
            if isinstance(data, (bytes, bytearray)):
                kind = BINARY_VECTOR
            elif isinstance(data, np.ndarray) and data.dtype == np.uint8:
                kind = BINARY_VECTOR
            else:
                kind = FLOAT_VECTOR
        self.kind = kind

        if isinstance(data, np.ndarray) and data.ndim == 2 and data.shape[1] != self.dim:
            raise InvalidParameter(
                "data", data.shape, f"rows have {data.shape[1]} elements, dim is {self.dim}"
            )

        try:
            if kind == BINARY_VECTOR:
                if isinstance(data, (bytes, bytearray)):
                    self.data = np.frombuffer(bytes(data), dtype=np.uint8).copy()
                else:
                    self.data = np.asarray(data, dtype=np.uint8).reshape(-1)
            else:
                self.data = np.asarray(data, dtype=np.float32).reshape(-1)
        except (TypeError, ValueError) as e:
            raise InvalidParameter("data", kind, str(e)) from e

    def num_rows(self) -> int:
        """Number of rows, counting a trailing partial row as a full one."""
        if self.data is None or len(self.data) == 0:
            return 0
        if self.dim <= 0:
            raise InvalidVectorBufferLength(len(self.data), self.dim)
        return -(-len(self.data) // self.dim)

    def validate(self) -> None:
        """
        Check that the buffer holds a whole number of rows.

        Raises:
            InvalidVectorBufferLength: If dim is not positive or the buffer
                length is not a multiple of dim
        """
        length = 0 if self.data is None else len(self.data)
        if self.dim <= 0 or length % self.dim:
            raise InvalidVectorBufferLength(length, self.dim)

    def dtype(self) -> DataType:
        if self.data is None:
            return DataType.NONE
        return _VECTOR_DATA_TYPES[self.kind]

    def rows(self) -> np.ndarray:
        """Return the buffer as a (num_rows, dim) array."""
        self.validate()
        if self.data is None:
            return np.empty((0, self.dim), dtype=np.float32)
        return self.data.reshape(-1, self.dim)

    def to_wire(self) -> Dict[str, Any]:
        message = {"dim": self.dim}
        if self.data is None:
            return message
        if self.kind == BINARY_VECTOR:
            message[BINARY_VECTOR] = self.data.tobytes()
        else:
            message[FLOAT_VECTOR] = {"data": self.data.tolist()}
        return message

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "VectorField":
        """
        Build a vector column from a VectorField wire message.

        Raises:
            MalformedResponse: On unknown or multiple oneof keys, bad payload
                types, or a buffer that is not a whole number of rows
        """
        if not isinstance(message, dict):
            raise MalformedResponse(f"vector field must be a mapping, got {type(message).__name__}")

        try:
            dim = int(message.get("dim", 0))
        except (TypeError, ValueError) as e:
            raise MalformedResponse(f"invalid vector dim {message.get('dim')!r}") from e

        kinds = [key for key in message if key != "dim"]
        unknown = [key for key in kinds if key not in VECTOR_KINDS]
        if unknown:
            raise MalformedResponse(f"unknown vector field kind {unknown[0]!r}")
        if len(kinds) > 1:
            raise MalformedResponse(f"vector field sets several kinds: {sorted(kinds)}")
        if not kinds:
            return cls(dim)

        kind = kinds[0]
        payload = message[kind]
        if kind == BINARY_VECTOR:
            if not isinstance(payload, (bytes, bytearray)):
                raise MalformedResponse("binary_vector payload must be bytes")
            field = cls(dim, bytes(payload), kind=BINARY_VECTOR)
        else:
            values = payload.get("data") if isinstance(payload, dict) else None
            if values is None:
                values = []
            if not isinstance(values, list):
                raise MalformedResponse("float_vector payload must be a list")
            try:
                field = cls(dim, values, kind=FLOAT_VECTOR)
            except InvalidParameter as e:
                raise MalformedResponse(f"invalid float_vector payload: {e}") from e

        try:
            field.validate()
        except InvalidVectorBufferLength as e:
            raise MalformedResponse(str(e)) from e
        return field

    def __len__(self):
        return self.num_rows()

    def __eq__(self, other):
        if not isinstance(other, VectorField):
            return NotImplemented
        if self.dim != other.dim or self.kind != other.kind:
            return False
        if self.data is None or other.data is None:
            return self.data is None and other.data is None
        return np.array_equal(self.data, other.data)

    def __repr__(self):
        return f"VectorField(kind={self.kind}, dim={self.dim}, elements={0 if self.data is None else len(self.data)})"


Field = Union[ScalarField, VectorField]


class FieldData:
    """
    One named column as carried by insert requests and query/search responses.

    Attributes:
        field_name (str): Name of the field the column belongs to
        field_id (int): Server-side field id, 0 when unknown
        declared_type (DataType): Type declared for the field
        field: The ScalarField or VectorField payload, or None
    """

    def __init__(
        self,
        field_name: str,
        declared_type: DataType,
        field: Optional[Field] = None,
        field_id: int = 0,
    ):
        self.field_name = field_name
        self.declared_type = DataType(declared_type)
        self.field = field
        self.field_id = field_id

    @classmethod
    def from_schema(cls, field_schema, values: Any) -> "FieldData":
        """
        Build a column for a schema field from native values.

        The scalar kind follows the declared type (Int8/Int16/Int32 travel as
        int32, VarChar as strings, ...). Vector data must match the declared
        dimension.

        Args:
            field_schema: The FieldSchema the values belong to
            values: Native values for the column

        Raises:
            DimensionMismatch: If 2-D vector data has the wrong row width
            InvalidParameter: If the values do not fit the declared type
        """
        dtype = field_schema.dtype
        if dtype.is_vector:
            kind = FLOAT_VECTOR if dtype == DataType.FLOAT_VECTOR else BINARY_VECTOR
            if isinstance(values, np.ndarray) and values.ndim == 2 and values.shape[1] != field_schema.dim:
                raise DimensionMismatch(field_schema.name, field_schema.dim, values.shape[1])
            if isinstance(values, list) and values and isinstance(values[0], (list, tuple, np.ndarray)):
                for row in values:
                    if len(row) != field_schema.dim:
                        raise DimensionMismatch(field_schema.name, field_schema.dim, len(row))
                if kind == BINARY_VECTOR:
                    values = np.asarray(values, dtype=np.uint8)
            if isinstance(values, list) and values and isinstance(values[0], (bytes, bytearray)):
                for row in values:
                    if len(row) != field_schema.dim:
                        raise DimensionMismatch(field_schema.name, field_schema.dim, len(row))
                values = b"".join(bytes(row) for row in values)
            field = VectorField(field_schema.dim, values, kind=kind)
        elif dtype in _KIND_FOR_DATA_TYPE:
            field = ScalarField(values, kind=_KIND_FOR_DATA_TYPE[dtype])
            if dtype in _NARROW_INT_DTYPES and field.data is not None and field.data.size:
                info = np.iinfo(_NARROW_INT_DTYPES[dtype])
                if int(field.data.min()) < info.min or int(field.data.max()) > info.max:
                    raise InvalidParameter(
                        field_schema.name, values, f"values out of range for {dtype.name}"
                    )
            if dtype == DataType.VARCHAR:
                for value in field.data or []:
                    if len(value) > field_schema.max_length:
                        raise InvalidParameter(
                            field_schema.name,
                            value,
                            f"longer than max_length {field_schema.max_length}",
                        )
        else:
            raise InvalidParameter(field_schema.name, dtype.name, "field type carries no data")

        return cls(field_schema.name, dtype, field, field_id=field_schema.field_id)

    def num_rows(self) -> int:
        if self.field is None:
            return 0
        return self.field.num_rows()

    def dtype(self) -> DataType:
        return self.declared_type

    def to_wire(self) -> Dict[str, Any]:
        message = {
            "type": int(self.declared_type),
            "field_name": self.field_name,
            "field_id": self.field_id,
        }
        if isinstance(self.field, ScalarField):
            message["scalars"] = self.field.to_wire()
        elif isinstance(self.field, VectorField):
            message["vectors"] = self.field.to_wire()
        return message

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "FieldData":
        """
        Build a column from a FieldData wire message.

        Raises:
            MalformedResponse: On an unknown type code or a bad payload
        """
        if not isinstance(message, dict):
            raise MalformedResponse(f"field data must be a mapping, got {type(message).__name__}")

        declared_type = DataType.from_wire(message.get("type", 0))
        scalars = message.get("scalars")
        vectors = message.get("vectors")
        if scalars is not None and vectors is not None:
            raise MalformedResponse(
                f"field data '{message.get('field_name', '')}' carries both scalars and vectors"
            )

        field = None
        if scalars is not None:
            field = ScalarField.from_wire(scalars)
        elif vectors is not None:
            field = VectorField.from_wire(vectors)

        return cls(
            message.get("field_name", ""),
            declared_type,
            field,
            field_id=int(message.get("field_id", 0)),
        )

    def to_list(self) -> List[Any]:
        if self.field is None:
            return []
        if isinstance(self.field, VectorField):
            return self.field.rows().tolist()
        return self.field.to_list()

    def __eq__(self, other):
        if not isinstance(other, FieldData):
            return NotImplemented
        return (
            self.field_name == other.field_name
            and self.field_id == other.field_id
            and self.declared_type == other.declared_type
            and self.field == other.field
        )

    def __repr__(self):
        return (
            f"FieldData(field_name={self.field_name!r}, type={self.declared_type.name}, "
            f"rows={self.num_rows()})"
        )


INT_ID = "int_id"
STR_ID = "str_id"


class IDs:
    """
    Primary key list returned by mutations and searches.

    Holds either int64 ids or string ids, or nothing at all.
    """

    def __init__(self, ids: Optional[Iterable[Any]] = None, kind: Optional[str] = None):
        if kind is not None and kind not in (INT_ID, STR_ID):
            raise InvalidParameter("kind", kind, f"expected {INT_ID} or {STR_ID}")

        if ids is None:
            self.kind = kind
            self.data = None
            return

        ids = list(ids.tolist() if isinstance(ids, np.ndarray) else ids)
        if kind is None:
            kind = STR_ID if ids and isinstance(ids[0], str) else INT_ID
        self.kind = kind

        if kind == STR_ID:
            if not all(isinstance(i, str) for i in ids):
                raise InvalidParameter("ids", ids, "string ids must all be str")
            self.data = ids
        else:
            if not all(isinstance(i, (int, np.integer)) and not isinstance(i, bool) for i in ids):
                raise InvalidParameter("ids", ids, "int ids must all be integers")
            self.data = [int(i) for i in ids]

    def to_wire(self) -> Dict[str, Any]:
        if self.data is None:
            return {}
        return {self.kind: {"data": list(self.data)}}

    @classmethod
    def from_wire(cls, message: Optional[Dict[str, Any]]) -> Optional["IDs"]:
        if message is None:
            return None
        if not isinstance(message, dict):
            raise MalformedResponse(f"ids must be a mapping, got {type(message).__name__}")
        if not message:
            return cls()

        unknown = [key for key in message if key not in (INT_ID, STR_ID)]
        if unknown:
            raise MalformedResponse(f"unknown id field {unknown[0]!r}")
        if len(message) > 1:
            raise MalformedResponse("ids set both int_id and str_id")

        kind, array = next(iter(message.items()))
        values = array.get("data") if isinstance(array, dict) else None
        if values is None:
            values = []
        if not isinstance(values, list):
            raise MalformedResponse(f"{kind} payload must be a list")
        try:
            return cls(values, kind=kind)
        except InvalidParameter as e:
            raise MalformedResponse(f"invalid {kind} payload: {e}") from e

    def __len__(self):
        return 0 if self.data is None else len(self.data)

    def __iter__(self):
        return iter(self.data or [])

    def __getitem__(self, item):
        return (self.data or [])[item]

    def __eq__(self, other):
        if not isinstance(other, IDs):
            return NotImplemented
        return self.kind == other.kind and (self.data or []) == (other.data or [])

    def __repr__(self):
        return f"IDs(kind={self.kind}, count={len(self)})"


def build_placeholder_group(data: Any, tag: str = "$0") -> Tuple[bytes, int]:
    """
    Pack query vectors into the placeholder group carried by search requests.

    Float queries are sent as little-endian float32 bytes, binary queries as
    raw bytes, one value per query.

    Args:
        data: 2-D array-like of float queries, a list of bytes for binary
            queries, or a VectorField
        tag: Placeholder tag referenced by the search expression

    Returns:
        Tuple of (packed placeholder group, number of queries)
    """
    if isinstance(data, VectorField):
        rows = data.rows()
        binary = data.kind == BINARY_VECTOR
    elif isinstance(data, (list, tuple)) and data and isinstance(data[0], (bytes, bytearray)):
        rows = [bytes(row) for row in data]
        binary = True
    else:
        rows = np.asarray(data, dtype=np.float32)
        if rows.size == 0:
            raise InvalidParameter("data", rows.shape, "at least one non-empty query vector is required")
        if rows.ndim == 1:
            rows = rows.reshape(1, -1)
        if rows.ndim != 2:
            raise InvalidParameter("data", rows.shape, "query vectors must be 1-D or 2-D")
        binary = False

    if binary:
        values = [row if isinstance(row, bytes) else np.asarray(row, dtype=np.uint8).tobytes() for row in rows]
        ptype = PlaceholderType.BINARY_VECTOR
    else:
        values = [np.asarray(row, dtype="<f4").tobytes() for row in rows]
        ptype = PlaceholderType.FLOAT_VECTOR

    if not values:
        raise InvalidParameter("data", data, "at least one query vector is required")

    group = {"placeholders": [{"tag": tag, "type": int(ptype), "values": values}]}
    logger.debug(f"Built placeholder group with {len(values)} {ptype.name} queries")
    return msgpack.packb(group, use_bin_type=True), len(values)
