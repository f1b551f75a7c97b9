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
vdbx package - Typed client for vector database services.

This package turns local method calls into request messages for a remote
vector database, ships them over ZeroMQ and converts the responses back
into local types.

The package consists of:
- Schema: field and collection schema definitions with eager validation
- Fields: typed scalar and vector column containers
- Results: adapters from wire responses to result objects
- Client: the RPC facade, its ZeroMQ transport and credential handling
"""

import os


def get_version() -> str:
    """
    Read and return the package version from the .version file.

    Returns:
        str: The current version of the package
    """
    version_file = os.path.join(os.path.dirname(__file__), ".version")
    with open(version_file, "r", encoding="utf-8") as f:
        return f.read().strip()


__version__ = get_version()

__author__ = "Ran Aroussi"
__license__ = "Apache-2.0"

from .types import DataType, ConsistencyLevel, ErrorCode  # noqa: E402
from .schema import FieldType, FieldSchema, CollectionSchema  # noqa: E402
from .fields import ScalarField, VectorField, FieldData, IDs  # noqa: E402
from .results import MutationResult, SearchResult, QueryResult  # noqa: E402
from .errors import (  # noqa: E402
    VDBError,
    SchemaError,
    ConversionError,
    MalformedResponse,
    CommunicationError,
    ServerError,
    InvalidParameter,
)
from .client import VDBClient, configure, get_client  # noqa: E402

__all__ = [
    "DataType",
    "ConsistencyLevel",
    "ErrorCode",
    "FieldType",
    "FieldSchema",
    "CollectionSchema",
    "ScalarField",
    "VectorField",
    "FieldData",
    "IDs",
    "MutationResult",
    "SearchResult",
    "QueryResult",
    "VDBError",
    "SchemaError",
    "ConversionError",
    "MalformedResponse",
    "CommunicationError",
    "ServerError",
    "InvalidParameter",
    "VDBClient",
    "configure",
    "get_client",
]
