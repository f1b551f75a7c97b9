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
vdbx Errors Module

Exception hierarchy for the client. Every error raised by the package
derives from VDBError so callers can catch the whole family at once.

Schema errors are raised locally while a schema is being built and never
reach the network. Conversion errors describe wire payloads that cannot be
mapped onto local types. Communication errors wrap transport failures and
server errors carry the status code and reason returned by the service.
"""

from typing import Any, Optional


class VDBError(Exception):
    """Base class for all vdbx errors."""

    pass


class SchemaError(VDBError):
    """Raised when a field or collection schema violates its invariants."""

    pass


class NoPrimaryKey(SchemaError):
    """Raised when a collection schema has no primary key field."""

    def __init__(self, collection: str = ""):
        self.collection = collection
        super().__init__(f"collection '{collection}' has no primary key field")


class DuplicatePrimaryKey(SchemaError):
    """Raised when more than one field is marked as primary key."""

    def __init__(self, first: str, second: str):
        self.first = first
        self.second = second
        super().__init__(
            f"duplicate primary keys: '{first}' and '{second}' are both marked as primary key"
        )


class UnsupportedPrimaryKeyType(SchemaError):
    """Raised when a primary key field is neither Int64 nor VarChar."""

    def __init__(self, field: str, dtype: Any):
        self.field = field
        self.dtype = dtype
        super().__init__(
            f"field '{field}' of type {dtype} cannot be a primary key "
            "(only Int64 and VarChar are allowed)"
        )


class AutoIdWithoutPrimaryKey(SchemaError):
    """Raised when auto_id is requested on a field that is not the primary key."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"field '{field}' sets auto_id but is not a primary key")


class DuplicateFieldName(SchemaError):
    """Raised when two fields in one collection share a name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"duplicate field name '{name}'")


class InvalidFieldName(SchemaError):
    """Raised when a field name is empty or not a string."""

    def __init__(self, name: Any):
        self.name = name
        super().__init__(f"invalid field name {name!r}")


class InvalidDimension(SchemaError):
    """Raised when a vector field dimension is missing or not positive."""

    def __init__(self, field: str, dim: Any):
        self.field = field
        self.dim = dim
        super().__init__(f"field '{field}' has invalid dimension {dim!r}")


class InvalidMaxLength(SchemaError):
    """Raised when a VarChar field max_length is missing or not positive."""

    def __init__(self, field: str, max_length: Any):
        self.field = field
        self.max_length = max_length
        super().__init__(f"field '{field}' has invalid max_length {max_length!r}")


class DimensionMismatch(SchemaError):
    """Raised when vector data does not match the dimension declared for its field."""

    def __init__(self, field: str, expected: int, actual: int):
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"field '{field}' expects dimension {expected}, got {actual}"
        )


class ConversionError(VDBError):
    """Raised when data cannot be converted between local and wire form."""

    pass


class MalformedResponse(ConversionError):
    """Raised when a response from the server cannot be interpreted."""

    pass


class InvalidVectorBufferLength(ConversionError):
    """Raised when a flat vector buffer is not a whole number of rows."""

    def __init__(self, length: int, dim: int):
        self.length = length
        self.dim = dim
        super().__init__(
            f"vector buffer of length {length} is not a multiple of dimension {dim}"
        )


class CommunicationError(VDBError):
    """Raised when the transport fails to deliver a request or its response."""

    pass


class TimeoutError(CommunicationError):
    """Raised when the server does not answer within the configured timeout."""

    pass


class ServerError(VDBError):
    """
    Raised when the server answers with a non-success status.

    The numeric code is kept exactly as received. The error_code property
    maps it onto ErrorCode when the value is a known one.
    """

    def __init__(self, code: int, reason: str = ""):
        self.code = code
        self.reason = reason
        super().__init__(f"server error {code}: {reason}")

    @property
    def error_code(self) -> Optional[Any]:
        from .types import ErrorCode

        try:
            return ErrorCode(self.code)
        except ValueError:
            return None


class InvalidParameter(VDBError):
    """Raised when a caller passes a value the client cannot send."""

    def __init__(self, name: str, value: Any, reason: str = ""):
        self.name = name
        self.value = value
        message = f"parameter '{name}' with invalid value {value!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
