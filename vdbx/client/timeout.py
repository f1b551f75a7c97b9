#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Timeout defaults and slow call reporting
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
Timeout module for the vdbx client.

The transport enforces its timeout through socket options; this module
holds the process default, converts it for the socket layer and reports
calls that come close to the limit.
"""

import functools
import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Default timeout in seconds
TIMEOUT = 10.0

# Fraction of the timeout after which a call is reported as slow
SLOW_CALL_RATIO = 0.8


def set_timeout(timeout: float):
    global TIMEOUT
    if timeout <= 0:
        raise ValueError(f"timeout must be positive, got {timeout}")
    TIMEOUT = float(timeout)


def get_timeout() -> float:
    return TIMEOUT


def to_milliseconds(seconds: float) -> int:
    """Convert a timeout in seconds to the integer milliseconds zmq expects."""
    return max(1, int(round(seconds * 1000)))


def timeout(seconds: Optional[float] = None):
    """
    Decorator that reports calls running close to their timeout.

    The timeout is taken from the argument, then from a `timeout`
    attribute on the instance the method is bound to, then from the
    module default. Calls taking more than 80% of it are logged as
    warnings.

    Usage:
        @timeout()
        def call(self, method, request):
            # Will use self.timeout
            ...
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            timeout_value = seconds

            if timeout_value is None and args and hasattr(args[0], "timeout"):
                timeout_value = args[0].timeout

            if timeout_value is None:
                timeout_value = TIMEOUT

            start_time = time.time()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed = time.time() - start_time
                if elapsed > timeout_value * SLOW_CALL_RATIO:
                    logger.warning(
                        f"{func.__qualname__} took {elapsed:.2f}s "
                        f"(timeout: {timeout_value:.2f}s)"
                    )

        return wrapper

    return decorator
