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
vdbx Types Module

Closed enumerations shared with the server. The numeric values are part of
the wire contract and must not change.

Every enumeration read from a response goes through from_wire(), which
rejects unknown codes with MalformedResponse.
"""

from enum import IntEnum

from .errors import MalformedResponse


class WireEnum(IntEnum):
    """IntEnum with a validating constructor for values read off the wire."""

    @classmethod
    def from_wire(cls, value):
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise MalformedResponse(f"unknown {cls.__name__} code {value!r}") from None


class DataType(WireEnum):
    NONE = 0
    BOOL = 1
    INT8 = 2
    INT16 = 3
    INT32 = 4
    INT64 = 5
    FLOAT = 10
    DOUBLE = 11
    STRING = 20
    # variable-length string with a declared maximum length
    VARCHAR = 21
    BINARY_VECTOR = 100
    FLOAT_VECTOR = 101

    @property
    def is_vector(self) -> bool:
        return self in (DataType.BINARY_VECTOR, DataType.FLOAT_VECTOR)

    @property
    def is_scalar(self) -> bool:
        return self is not DataType.NONE and not self.is_vector

    @property
    def is_primary_key_eligible(self) -> bool:
        return self in (DataType.INT64, DataType.VARCHAR)


class FieldState(WireEnum):
    FIELD_CREATED = 0
    FIELD_CREATING = 1
    FIELD_DROPPING = 2
    FIELD_DROPPED = 3


class ConsistencyLevel(WireEnum):
    STRONG = 0
    SESSION = 1
    BOUNDED = 2
    EVENTUALLY = 3
    # caller supplies its own guarantee timestamp
    CUSTOMIZED = 4


class ShowType(WireEnum):
    ALL = 0
    IN_MEMORY = 1


class DslType(WireEnum):
    DSL = 0
    BOOL_EXPR_V1 = 1


class PlaceholderType(WireEnum):
    NONE = 0
    BINARY_VECTOR = 100
    FLOAT_VECTOR = 101


class SegmentState(WireEnum):
    NONE = 0
    NOT_EXIST = 1
    GROWING = 2
    SEALED = 3
    FLUSHED = 4
    FLUSHING = 5
    DROPPED = 6
    IMPORTING = 7


class StateCode(WireEnum):
    INITIALIZING = 0
    HEALTHY = 1
    ABNORMAL = 2
    STANDBY = 3


class CompactionState(WireEnum):
    UNDEFINED = 0
    EXECUTING = 1
    COMPLETED = 2


class ImportState(WireEnum):
    IMPORT_PENDING = 0
    IMPORT_FAILED = 1
    IMPORT_STARTED = 2
    IMPORT_PERSISTED = 5
    IMPORT_COMPLETED = 6
    IMPORT_FAILED_AND_CLEANED = 7


class OperateUserRoleType(WireEnum):
    ADD_USER_TO_ROLE = 0
    REMOVE_USER_FROM_ROLE = 1


class OperatePrivilegeType(WireEnum):
    GRANT = 0
    REVOKE = 1


class ErrorCode(WireEnum):
    SUCCESS = 0
    UNEXPECTED_ERROR = 1
    CONNECT_FAILED = 2
    PERMISSION_DENIED = 3
    COLLECTION_NOT_EXISTS = 4
    ILLEGAL_ARGUMENT = 5
    ILLEGAL_DIMENSION = 7
    ILLEGAL_INDEX_TYPE = 8
    ILLEGAL_COLLECTION_NAME = 9
    ILLEGAL_TOPK = 10
    ILLEGAL_ROW_RECORD = 11
    ILLEGAL_VECTOR_ID = 12
    ILLEGAL_SEARCH_RESULT = 13
    FILE_NOT_FOUND = 14
    META_FAILED = 15
    CACHE_FAILED = 16
    CANNOT_CREATE_FOLDER = 17
    CANNOT_CREATE_FILE = 18
    CANNOT_DELETE_FOLDER = 19
    CANNOT_DELETE_FILE = 20
    BUILD_INDEX_ERROR = 21
    ILLEGAL_NLIST = 22
    ILLEGAL_METRIC_TYPE = 23
    OUT_OF_MEMORY = 24
    INDEX_NOT_EXIST = 25
    EMPTY_COLLECTION = 26
    UPDATE_IMPORT_TASK_FAILURE = 27
    COLLECTION_NAME_NOT_FOUND = 28
    CREATE_CREDENTIAL_FAILURE = 29
    UPDATE_CREDENTIAL_FAILURE = 30
    DELETE_CREDENTIAL_FAILURE = 31
    GET_CREDENTIAL_FAILURE = 32
    LIST_CRED_USERS_FAILURE = 33
    GET_USER_FAILURE = 34
    CREATE_ROLE_FAILURE = 35
    DROP_ROLE_FAILURE = 36
    OPERATE_USER_ROLE_FAILURE = 37
    SELECT_ROLE_FAILURE = 38
    SELECT_USER_FAILURE = 39
    SELECT_RESOURCE_FAILURE = 40
    OPERATE_PRIVILEGE_FAILURE = 41
    SELECT_GRANT_FAILURE = 42
    REFRESH_POLICY_INFO_CACHE_FAILURE = 43
    LIST_POLICY_FAILURE = 44
    NOT_SHARD_LEADER = 45
    NO_REPLICA_AVAILABLE = 46
    SEGMENT_NOT_FOUND = 47
    FORCE_DENY = 48
    RATE_LIMIT = 49
    NODE_ID_NOT_MATCH = 50
    DATA_COORD_NA = 100
    DD_REQUEST_RACE = 1000


class MsgType(WireEnum):
    UNDEFINED = 0
    # collections
    CREATE_COLLECTION = 100
    DROP_COLLECTION = 101
    HAS_COLLECTION = 102
    DESCRIBE_COLLECTION = 103
    SHOW_COLLECTIONS = 104
    LOAD_COLLECTION = 106
    RELEASE_COLLECTION = 107
    CREATE_ALIAS = 108
    DROP_ALIAS = 109
    ALTER_ALIAS = 110
    ALTER_COLLECTION = 111
    # partitions
    CREATE_PARTITION = 200
    DROP_PARTITION = 201
    HAS_PARTITION = 202
    SHOW_PARTITIONS = 204
    LOAD_PARTITIONS = 205
    RELEASE_PARTITIONS = 206
    # segments
    SHOW_SEGMENTS = 250
    LOAD_BALANCE_SEGMENTS = 255
    # indexes
    CREATE_INDEX = 300
    DESCRIBE_INDEX = 301
    DROP_INDEX = 302
    # data
    INSERT = 400
    DELETE = 401
    FLUSH = 402
    # queries
    SEARCH = 500
    GET_INDEX_STATE = 502
    GET_INDEX_BUILD_PROGRESS = 503
    GET_COLLECTION_STATISTICS = 504
    GET_PARTITION_STATISTICS = 505
    RETRIEVE = 506
    GET_REPLICAS = 515
    # system
    SEGMENT_INFO = 600
    # credentials
    CREATE_CREDENTIAL = 1500
    GET_CREDENTIAL = 1501
    DELETE_CREDENTIAL = 1502
    UPDATE_CREDENTIAL = 1503
    LIST_CRED_USERNAMES = 1504
    # rbac
    CREATE_ROLE = 1600
    DROP_ROLE = 1601
    OPERATE_USER_ROLE = 1602
    SELECT_ROLE = 1603
    SELECT_USER = 1604
    SELECT_RESOURCE = 1605
    OPERATE_PRIVILEGE = 1606
    SELECT_GRANT = 1607
