#!/usr/bin/env python3
#
# Tests for request and response helpers
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
Tests for status handling, consistency timestamps and response readers
"""

import pytest

from vdbx.errors import MalformedResponse, ServerError
from vdbx.types import ConsistencyLevel, ErrorCode, MsgType
from vdbx.utils import (
    BOUNDED_TIMESTAMP,
    EVENTUALLY_TIMESTAMP,
    STRONG_TIMESTAMP,
    get_gts,
    get_int,
    get_ints,
    get_str,
    kv_dict,
    kv_pairs,
    new_msg,
    status_to_result,
)


class TestStatus:
    """Unit tests for status_to_result"""

    def test_success(self):
        """Test a success status passes"""
        assert status_to_result({"error_code": 0, "reason": ""}) is None
        assert status_to_result({}) is None

    def test_server_error(self):
        """Test failures keep code and reason"""
        with pytest.raises(ServerError) as exc:
            status_to_result({"error_code": 4, "reason": "collection not found"})

        assert exc.value.code == 4
        assert exc.value.reason == "collection not found"
        assert exc.value.error_code == ErrorCode.COLLECTION_NOT_EXISTS

    def test_unknown_code(self):
        """Test codes outside the known set are still server errors"""
        with pytest.raises(ServerError) as exc:
            status_to_result({"error_code": 12345})

        assert exc.value.code == 12345
        assert exc.value.error_code is None

    def test_missing_status(self):
        """Test a missing status is malformed"""
        with pytest.raises(MalformedResponse):
            status_to_result(None)
        with pytest.raises(MalformedResponse):
            status_to_result("ok")
        with pytest.raises(MalformedResponse):
            status_to_result({"error_code": "0"})


class TestGuaranteeTimestamp:
    """Unit tests for get_gts"""

    @pytest.mark.parametrize("level, expected", [
        (ConsistencyLevel.STRONG, STRONG_TIMESTAMP),
        (ConsistencyLevel.BOUNDED, BOUNDED_TIMESTAMP),
        (ConsistencyLevel.EVENTUALLY, EVENTUALLY_TIMESTAMP),
        (ConsistencyLevel.CUSTOMIZED, STRONG_TIMESTAMP),
    ])
    def test_fixed_levels(self, level, expected):
        """Test levels that ignore the last write"""
        assert get_gts(level, 1234) == expected

    def test_session(self):
        """Test session reads wait for the last write"""
        assert get_gts(ConsistencyLevel.SESSION, 436541223) == 436541223
        assert get_gts(ConsistencyLevel.SESSION) == EVENTUALLY_TIMESTAMP

    def test_plain_int_level(self):
        """Test wire integers are accepted"""
        assert get_gts(0) == STRONG_TIMESTAMP


class TestHelpers:
    """Unit tests for small wire helpers"""

    def test_new_msg(self):
        """Test the request header"""
        assert new_msg(MsgType.CREATE_COLLECTION) == {
            "msg_type": int(MsgType.CREATE_COLLECTION),
            "timestamp": 0,
            "source_id": 0,
            "msg_id": 0,
            "target_id": 0,
        }

    def test_kv_round_trip(self):
        """Test key/value pairs keep order and stringify values"""
        pairs = kv_pairs({"dim": 8, "metric": "L2"})
        assert pairs == [{"key": "dim", "value": "8"}, {"key": "metric", "value": "L2"}]
        assert kv_dict(pairs) == {"dim": "8", "metric": "L2"}
        assert kv_pairs(None) == []
        assert kv_dict(None) == {}

    def test_kv_malformed(self):
        """Test malformed pair lists"""
        with pytest.raises(MalformedResponse):
            kv_dict({"key": "a"})
        with pytest.raises(MalformedResponse):
            kv_dict([{"key": "a"}])

    def test_readers(self):
        """Test typed readers and their defaults"""
        message = {"count": 3, "name": "x", "ids": [1, 2], "flag": True}

        assert get_int(message, "count") == 3
        assert get_int(message, "missing") == 0
        assert get_str(message, "name") == "x"
        assert get_ints(message, "ids") == [1, 2]

        with pytest.raises(MalformedResponse):
            get_int(message, "flag")
        with pytest.raises(MalformedResponse):
            get_str(message, "count")
        with pytest.raises(MalformedResponse):
            get_ints({"ids": ["a"]}, "ids")
