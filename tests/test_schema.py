#!/usr/bin/env python3
#
# Tests for field and collection schemas
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
Tests for FieldType, FieldSchema and CollectionSchema
"""

import msgpack
import pytest

from vdbx import CollectionSchema, DataType, FieldSchema, FieldType
from vdbx.errors import (
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
from vdbx.types import FieldState


class TestFieldSchema:
    """Unit tests for FieldSchema construction and conversion"""

    def test_int64_primary_key(self):
        """Test a primary key field keeps its flags"""
        field = FieldSchema("id", FieldType.int64(primary_key=True, auto_id=True), "row id")

        assert field.name == "id"
        assert field.description == "row id"
        assert field.dtype == DataType.INT64
        assert field.is_primary_key
        assert field.auto_id
        assert field.dim is None
        assert field.max_length is None
        assert field.field_id == 0
        assert field.state == FieldState.FIELD_CREATED

    def test_float_vector(self):
        """Test vector fields carry their dimension as a string type param"""
        field = FieldSchema("vec", FieldType.float_vector(1536))

        assert field.dim == 1536
        assert field.type_params == {"dim": "1536"}
        assert not field.is_primary_key

    def test_varchar(self):
        """Test VarChar fields carry their max length as a string type param"""
        field = FieldSchema("name", FieldType.varchar(200))

        assert field.max_length == 200
        assert field.type_params == {"max_length": "200"}

    def test_empty_name(self):
        """Test an empty name is rejected"""
        with pytest.raises(InvalidFieldName):
            FieldSchema("", FieldType.int32())

    def test_auto_id_without_primary_key(self):
        """Test auto_id requires the primary key flag"""
        with pytest.raises(AutoIdWithoutPrimaryKey) as exc:
            FieldSchema("id", FieldType.int64(primary_key=False, auto_id=True))
        assert exc.value.field == "id"

    @pytest.mark.parametrize("field_type", [
        FieldType(DataType.INT32, primary_key=True),
        FieldType(DataType.DOUBLE, primary_key=True),
        FieldType(DataType.STRING, primary_key=True),
        FieldType(DataType.FLOAT_VECTOR, primary_key=True, dim=8),
    ])
    def test_unsupported_primary_key_types(self, field_type):
        """Test only Int64 and VarChar may be primary keys"""
        with pytest.raises(UnsupportedPrimaryKeyType):
            FieldSchema("pk", field_type)

    @pytest.mark.parametrize("dim", [0, -1, None])
    def test_invalid_dimension(self, dim):
        """Test vector dimensions must be positive"""
        with pytest.raises(InvalidDimension):
            FieldSchema("vec", FieldType(DataType.FLOAT_VECTOR, dim=dim))

    def test_dimension_on_scalar(self):
        """Test scalar types do not accept a dimension"""
        with pytest.raises(InvalidDimension):
            FieldSchema("x", FieldType(DataType.INT32, dim=4))

    @pytest.mark.parametrize("max_length", [0, -5, None])
    def test_invalid_max_length(self, max_length):
        """Test VarChar max length must be positive"""
        with pytest.raises(InvalidMaxLength):
            FieldSchema("name", FieldType(DataType.VARCHAR, max_length=max_length))

    def test_immutable(self):
        """Test fields cannot be modified after construction"""
        field = FieldSchema("name", FieldType.varchar(10))
        with pytest.raises(AttributeError):
            field.name = "other"
        with pytest.raises(AttributeError):
            field._name = "other"

        # the returned field type is a copy
        field.field_type.max_length = 99
        assert field.max_length == 10

    def test_to_wire(self):
        """Test the wire form of a field"""
        wire = FieldSchema("vec", FieldType.float_vector(128), "embedding").to_wire()

        assert wire["name"] == "vec"
        assert wire["description"] == "embedding"
        assert wire["data_type"] == 101
        assert wire["is_primary_key"] is False
        assert wire["auto_id"] is False
        assert wire["type_params"] == [{"key": "dim", "value": "128"}]
        assert wire["index_params"] == []

    def test_from_wire(self):
        """Test reading a field back from the server"""
        field = FieldSchema.from_wire({
            "field_id": 101,
            "name": "name",
            "data_type": 21,
            "type_params": [{"key": "max_length", "value": "64"}],
            "state": 0,
        })

        assert field.field_id == 101
        assert field.dtype == DataType.VARCHAR
        assert field.max_length == 64

    def test_from_wire_unknown_type(self):
        """Test unknown type codes become MalformedResponse"""
        with pytest.raises(MalformedResponse):
            FieldSchema.from_wire({"name": "x", "data_type": 7})

    def test_from_wire_bad_type_param(self):
        """Test non-numeric dimensions become MalformedResponse"""
        with pytest.raises(MalformedResponse):
            FieldSchema.from_wire({
                "name": "vec",
                "data_type": 101,
                "type_params": [{"key": "dim", "value": "wide"}],
            })

    def test_from_wire_missing_dimension(self):
        """Test schema violations from the server are reported as malformed"""
        with pytest.raises(MalformedResponse):
            FieldSchema.from_wire({"name": "vec", "data_type": 101})


class TestCollectionSchema:
    """Unit tests for CollectionSchema invariants"""

    def test_no_primary_key(self):
        """Test a schema without primary key is rejected"""
        with pytest.raises(NoPrimaryKey):
            CollectionSchema("c", [FieldSchema("a", FieldType.int32())])

    def test_empty_schema(self):
        """Test a schema without fields has no primary key either"""
        with pytest.raises(NoPrimaryKey):
            CollectionSchema("c", [])

    def test_one_primary_key(self):
        """Test a schema with exactly one primary key builds"""
        schema = CollectionSchema("c", [FieldSchema("id", FieldType.int64(primary_key=True))])
        assert schema.primary_field.name == "id"
        assert not schema.auto_id

    def test_two_primary_keys(self):
        """Test two primary keys are rejected naming both fields"""
        with pytest.raises(DuplicatePrimaryKey) as exc:
            CollectionSchema("c", [
                FieldSchema("a", FieldType.int64(primary_key=True)),
                FieldSchema("b", FieldType.varchar(10, primary_key=True)),
            ])
        assert exc.value.first == "a"
        assert exc.value.second == "b"

    def test_duplicate_field_name(self):
        """Test field names must be unique"""
        with pytest.raises(DuplicateFieldName):
            CollectionSchema("c", [
                FieldSchema("id", FieldType.int64(primary_key=True)),
                FieldSchema("id", FieldType.int32()),
            ])

    def test_book_schema(self, book_schema):
        """Test the id/name/vec schema builds and keeps field order"""
        assert book_schema.name == "books"
        assert [f.name for f in book_schema.fields] == ["id", "name", "vec"]
        assert book_schema.auto_id
        assert book_schema.primary_field.name == "id"
        assert book_schema.get_field("vec").dim == 1536
        assert book_schema.get_field("missing") is None
        assert len(book_schema) == 3

    def test_book_schema_with_second_primary_key(self):
        """Test marking name as primary too fails on id and name"""
        with pytest.raises(DuplicatePrimaryKey) as exc:
            CollectionSchema("books", [
                FieldSchema("id", FieldType.int64(primary_key=True, auto_id=True)),
                FieldSchema("name", FieldType.varchar(200, primary_key=True)),
                FieldSchema("vec", FieldType.float_vector(1536)),
            ])
        assert (exc.value.first, exc.value.second) == ("id", "name")

    def test_schema_errors_share_a_base(self):
        """Test all schema errors can be caught together"""
        with pytest.raises(SchemaError):
            CollectionSchema("c", [])

    def test_immutable(self, book_schema):
        """Test the schema cannot be modified"""
        with pytest.raises(AttributeError):
            book_schema.name = "other"
        book_schema.fields.append(FieldSchema("x", FieldType.int32()))
        assert len(book_schema) == 3

    def test_field_order_preserved_on_wire(self):
        """Test the wire form keeps the declared field order"""
        names = ["z", "a", "m", "b"]
        fields = [FieldSchema("z", FieldType.int64(primary_key=True))]
        fields += [FieldSchema(n, FieldType.double()) for n in names[1:]]
        schema = CollectionSchema("c", fields)

        assert [f["name"] for f in schema.to_wire()["fields"]] == names
        assert [f.name for f in CollectionSchema.from_wire(schema.to_wire())] == names

    def test_encode_decode(self, book_schema):
        """Test the encoded schema carried by CreateCollection"""
        data = book_schema.encode()
        assert isinstance(data, bytes)

        message = msgpack.unpackb(data, raw=False)
        assert message["name"] == "books"
        assert message["auto_id"] is True
        assert CollectionSchema.decode(data) == book_schema

    def test_decode_garbage(self):
        """Test undecodable schema bytes become MalformedResponse"""
        with pytest.raises(MalformedResponse):
            CollectionSchema.decode(b"\xc1")

    def test_from_wire_invariant_violation(self):
        """Test a server schema without primary key is malformed"""
        with pytest.raises(MalformedResponse):
            CollectionSchema.from_wire({
                "name": "c",
                "fields": [{"name": "a", "data_type": 4}],
            })
