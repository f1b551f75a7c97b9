#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Credential interceptor for outgoing calls
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
Authentication for outgoing calls.

The server accepts a base64 encoded "username:password" token in the
`authorization` metadata entry of each request.
"""

import base64
from typing import Dict, Optional

AUTHORIZATION_KEY = "authorization"


class AuthInterceptor:
    """
    Attaches the credential token to the metadata of every call.

    With no credentials (or only one of username and password) it leaves
    the metadata untouched.
    """

    def __init__(self, username: Optional[str] = None, password: Optional[str] = None):
        self.token = None
        if username is not None and password is not None:
            self.token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")

    @property
    def enabled(self) -> bool:
        return self.token is not None

    def __call__(self, metadata: Dict[str, str]) -> Dict[str, str]:
        if self.token is not None:
            metadata[AUTHORIZATION_KEY] = self.token
        return metadata

    def __repr__(self):
        # the token is a credential, never show it
        return f"AuthInterceptor(enabled={self.enabled})"
