#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Client package
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
vdbx client package: the RPC client, its transport and credentials.
"""

from .auth import AuthInterceptor
from .client import VDBClient, configure, get_client
from .timeout import get_timeout, set_timeout
from .transport import Transport

__all__ = [
    "AuthInterceptor",
    "configure",
    "get_client",
    "get_timeout",
    "set_timeout",
    "Transport",
    "VDBClient",
]
