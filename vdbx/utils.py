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
Shared helpers for building requests and reading responses.
"""

from typing import Any, Dict, List, Optional

from .errors import MalformedResponse, ServerError
from .types import ConsistencyLevel, ErrorCode, MsgType

# Guarantee timestamps understood by the server
STRONG_TIMESTAMP = 0
EVENTUALLY_TIMESTAMP = 1
BOUNDED_TIMESTAMP = 2


def new_msg(msg_type: MsgType) -> Dict[str, int]:
    """Build the base header carried by most requests."""
    return {
        "msg_type": int(msg_type),
        "timestamp": 0,
        "source_id": 0,
        "msg_id": 0,
        "target_id": 0,
    }


def status_to_result(status: Optional[Dict[str, Any]]) -> None:
    """
    Unwrap a status message.

    Args:
        status: The status dict from a response, or None if it was missing

    Raises:
        MalformedResponse: If the status is missing or unreadable
        ServerError: If the status carries a non-success code
    """
    if status is None:
        raise MalformedResponse("response carries no status")
    if not isinstance(status, dict):
        raise MalformedResponse(f"status must be a mapping, got {type(status).__name__}")

    code = status.get("error_code", 0)
    if not isinstance(code, int) or isinstance(code, bool):
        raise MalformedResponse(f"invalid status code {code!r}")
    if code == ErrorCode.SUCCESS:
        return

    raise ServerError(code, status.get("reason", "") or "")


def get_gts(level: ConsistencyLevel, last_write_ts: Optional[int] = None) -> int:
    """
    Guarantee timestamp for a read at the given consistency level.

    Session reads wait for the caller's own last write; before any write
    they behave like Eventually.
    """
    level = ConsistencyLevel(level)
    if level == ConsistencyLevel.STRONG:
        return STRONG_TIMESTAMP
    if level == ConsistencyLevel.BOUNDED:
        return BOUNDED_TIMESTAMP
    if level == ConsistencyLevel.EVENTUALLY:
        return EVENTUALLY_TIMESTAMP
    if level == ConsistencyLevel.SESSION:
        return last_write_ts if last_write_ts else EVENTUALLY_TIMESTAMP
    # customized guarantees are not supported by the server yet
    return STRONG_TIMESTAMP


def kv_pairs(params: Optional[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Convert a dict to the key/value pair list used on the wire."""
    return [{"key": str(k), "value": str(v)} for k, v in (params or {}).items()]


def kv_dict(pairs: Optional[List[Dict[str, Any]]]) -> Dict[str, str]:
    """Convert a wire key/value pair list back to a dict."""
    if pairs is not None and not isinstance(pairs, list):
        raise MalformedResponse(f"key/value pairs must be a list, got {type(pairs).__name__}")
    result = {}
    for pair in pairs or []:
        try:
            result[pair["key"]] = pair["value"]
        except (KeyError, TypeError):
            raise MalformedResponse(f"invalid key/value pair {pair!r}") from None
    return result


def as_mapping(message: Any, what: str) -> Dict[str, Any]:
    if not isinstance(message, dict):
        raise MalformedResponse(f"{what} must be a mapping, got {type(message).__name__}")
    return message


def get_int(message: Dict[str, Any], key: str, default: int = 0) -> int:
    value = message.get(key)
    if value is None:
        return default
    if not isinstance(value, int) or isinstance(value, bool):
        raise MalformedResponse(f"'{key}' must be an integer, got {value!r}")
    return value


def get_str(message: Dict[str, Any], key: str) -> str:
    value = message.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedResponse(f"'{key}' must be a string, got {value!r}")
    return value


def get_bool(message: Dict[str, Any], key: str) -> bool:
    value = message.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise MalformedResponse(f"'{key}' must be a boolean, got {value!r}")
    return value


def get_list(message: Dict[str, Any], key: str) -> List[Any]:
    value = message.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedResponse(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def get_ints(message: Dict[str, Any], key: str) -> List[int]:
    values = get_list(message, key)
    for value in values:
        if not isinstance(value, int) or isinstance(value, bool):
            raise MalformedResponse(f"'{key}' must hold integers, got {value!r}")
    return list(values)


def get_strs(message: Dict[str, Any], key: str) -> List[str]:
    values = get_list(message, key)
    for value in values:
        if not isinstance(value, str):
            raise MalformedResponse(f"'{key}' must hold strings, got {value!r}")
    return list(values)
