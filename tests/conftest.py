#!/usr/bin/env python3
#
# Pytest configuration and fixtures for vdbx tests
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
Pytest configuration and fixtures for vdbx tests
"""

import logging

import pytest

from vdbx import CollectionSchema, FieldSchema, FieldType, VDBClient

# Configure logging for tests
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

OK_STATUS = {"error_code": 0, "reason": ""}


class FakeTransport:
    """
    In-memory transport that records requests and replays canned responses.

    responses maps a method name to a response dict, a callable taking the
    request, or an exception instance to raise. Methods without an entry
    answer with a bare success status.
    """

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.closed = False

    def call(self, method, request):
        self.calls.append((method, request))
        response = self.responses.get(method, {"status": dict(OK_STATUS)})
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(request)
        return response

    @property
    def last_method(self):
        return self.calls[-1][0]

    @property
    def last_request(self):
        return self.calls[-1][1]

    def close(self):
        self.closed = True


@pytest.fixture
def fake_transport():
    """Create a fresh FakeTransport."""
    return FakeTransport()


@pytest.fixture
def client(fake_transport):
    """Create a VDBClient talking to the fake transport."""
    return VDBClient(transport=fake_transport)


@pytest.fixture
def respond(fake_transport):
    """
    Register a successful response for a method.

    Usage:
        respond("HasCollection", value=True)
    """
    def _respond(method, **fields):
        fake_transport.responses[method] = {"status": dict(OK_STATUS), **fields}

    return _respond


@pytest.fixture
def book_schema():
    """The book collection used across the suite."""
    return CollectionSchema(
        "books",
        [
            FieldSchema("id", FieldType.int64(primary_key=True, auto_id=True)),
            FieldSchema("name", FieldType.varchar(200)),
            FieldSchema("vec", FieldType.float_vector(1536)),
        ],
        "A collection of books",
    )
