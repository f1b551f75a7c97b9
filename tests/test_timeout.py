#!/usr/bin/env python3
#
# Tests for call timeouts
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
Tests for the timeout helpers and the slow call decorator
"""

import logging
import os
import time
from unittest.mock import patch

import pytest

from vdbx import VDBClient
from vdbx.client import Transport
from vdbx.client.timeout import get_timeout, set_timeout, timeout, to_milliseconds


class TestTimeout:
    """Tests for the timeout helpers"""

    def test_set_timeout(self):
        """Test the module default can be changed"""
        original = get_timeout()
        try:
            set_timeout(3)
            assert get_timeout() == 3.0
        finally:
            set_timeout(original)

    def test_set_timeout_rejects_non_positive(self):
        """Test zero and negative timeouts are rejected"""
        with pytest.raises(ValueError):
            set_timeout(0)
        with pytest.raises(ValueError):
            set_timeout(-5)

    def test_to_milliseconds(self):
        """Test conversion for the socket layer"""
        assert to_milliseconds(2.5) == 2500
        assert to_milliseconds(0.0001) == 1

    def test_slow_call_warning(self, caplog):
        """Test calls close to their timeout are reported"""
        @timeout(0.01)
        def slow():
            time.sleep(0.02)
            return "done"

        with caplog.at_level(logging.WARNING, logger="vdbx.client.timeout"):
            assert slow() == "done"

        assert any("slow" in record.message for record in caplog.records)

    def test_fast_call_is_quiet(self, caplog):
        """Test fast calls are not reported"""
        @timeout(10)
        def fast():
            return 1

        with caplog.at_level(logging.WARNING, logger="vdbx.client.timeout"):
            assert fast() == 1

        assert caplog.records == []

    def test_instance_timeout(self, caplog):
        """Test the timeout is read from the instance when not given"""
        class Caller:
            def __init__(self):
                self.timeout = 0.01

            @timeout()
            def call(self):
                time.sleep(0.02)

        with caplog.at_level(logging.WARNING, logger="vdbx.client.timeout"):
            Caller().call()

        assert any("Caller.call" in record.message for record in caplog.records)

    def test_slow_failure_is_reported(self, caplog):
        """Test a call that fails late is still reported and the error propagates"""
        @timeout(0.01)
        def failing():
            time.sleep(0.02)
            raise RuntimeError("boom")

        with caplog.at_level(logging.WARNING, logger="vdbx.client.timeout"):
            with pytest.raises(RuntimeError):
                failing()

        assert len(caplog.records) == 1


class TestProcessDefault:
    """Tests that the process default reaches objects built after it changes"""

    @pytest.fixture
    def short_default(self):
        original = get_timeout()
        set_timeout(3.0)
        try:
            yield 3.0
        finally:
            set_timeout(original)

    def test_new_transport(self, short_default):
        """Test a transport built without a timeout uses the current default"""
        transport = Transport("tcp://localhost:1")
        assert transport.timeout == short_default

    def test_new_client(self, short_default):
        """Test a client built without a timeout uses the current default"""
        client = VDBClient()
        assert client.timeout == short_default
        assert client.transport.timeout == short_default

    def test_client_from_env(self, short_default):
        """Test from_env falls back to the current default without VDB_TIMEOUT"""
        with patch.dict(os.environ, {"VDB_HOST": "envhost"}):
            os.environ.pop("VDB_TIMEOUT", None)
            client = VDBClient.from_env()
        assert client.timeout == short_default

    def test_explicit_timeout_wins(self, short_default):
        """Test an explicit timeout overrides the default"""
        assert VDBClient(timeout=7).transport.timeout == 7.0
        assert Transport("tcp://localhost:1", timeout=1.5).timeout == 1.5
