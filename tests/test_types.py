#!/usr/bin/env python3
#
# Tests for wire enumerations
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
Tests for the wire enumerations in vdbx.types
"""

import pytest

from vdbx.errors import MalformedResponse
from vdbx.types import (
    CompactionState,
    ConsistencyLevel,
    DataType,
    ErrorCode,
    ImportState,
    MsgType,
    PlaceholderType,
    SegmentState,
)


class TestDataType:
    """Wire codes of the primitive types must never change"""

    @pytest.mark.parametrize("dtype, code", [
        (DataType.NONE, 0),
        (DataType.BOOL, 1),
        (DataType.INT8, 2),
        (DataType.INT16, 3),
        (DataType.INT32, 4),
        (DataType.INT64, 5),
        (DataType.FLOAT, 10),
        (DataType.DOUBLE, 11),
        (DataType.STRING, 20),
        (DataType.VARCHAR, 21),
        (DataType.BINARY_VECTOR, 100),
        (DataType.FLOAT_VECTOR, 101),
    ])
    def test_codes(self, dtype, code):
        """Test every data type keeps its wire code"""
        assert int(dtype) == code
        assert DataType.from_wire(code) is dtype

    def test_unknown_code(self):
        """Test unknown codes are rejected at the boundary"""
        with pytest.raises(MalformedResponse, match="42"):
            DataType.from_wire(42)

    def test_non_integer_code(self):
        """Test non-integer codes are rejected"""
        with pytest.raises(MalformedResponse):
            DataType.from_wire("5")

    def test_categories(self):
        """Test the vector, scalar and primary key helpers"""
        assert DataType.FLOAT_VECTOR.is_vector
        assert DataType.BINARY_VECTOR.is_vector
        assert not DataType.INT64.is_vector
        assert DataType.VARCHAR.is_scalar
        assert not DataType.NONE.is_scalar
        assert DataType.INT64.is_primary_key_eligible
        assert DataType.VARCHAR.is_primary_key_eligible
        assert not DataType.INT32.is_primary_key_eligible
        assert not DataType.STRING.is_primary_key_eligible


class TestOtherEnums:
    """Spot checks of the remaining enumerations"""

    def test_consistency_levels(self):
        """Test consistency level codes"""
        assert ConsistencyLevel.STRONG == 0
        assert ConsistencyLevel.SESSION == 1
        assert ConsistencyLevel.BOUNDED == 2
        assert ConsistencyLevel.EVENTUALLY == 3
        assert ConsistencyLevel.CUSTOMIZED == 4

    def test_placeholder_types_match_vector_types(self):
        """Test placeholder codes agree with the vector data types"""
        assert PlaceholderType.FLOAT_VECTOR == DataType.FLOAT_VECTOR
        assert PlaceholderType.BINARY_VECTOR == DataType.BINARY_VECTOR

    def test_error_codes(self):
        """Test a few error codes"""
        assert ErrorCode.SUCCESS == 0
        assert ErrorCode.COLLECTION_NOT_EXISTS == 4
        assert ErrorCode.RATE_LIMIT == 49

    def test_msg_types(self):
        """Test a few message types"""
        assert MsgType.CREATE_COLLECTION == 100
        assert MsgType.INSERT == 400
        assert MsgType.SEARCH == 500
        assert MsgType.RETRIEVE == 506

    def test_state_enums_reject_unknown_codes(self):
        """Test all state enumerations share the validated boundary"""
        assert SegmentState.from_wire(3) is SegmentState.SEALED
        assert CompactionState.from_wire(2) is CompactionState.COMPLETED
        assert ImportState.from_wire(6) is ImportState.IMPORT_COMPLETED
        with pytest.raises(MalformedResponse):
            ImportState.from_wire(3)
        with pytest.raises(MalformedResponse):
            SegmentState.from_wire(99)
