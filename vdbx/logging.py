#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Logging setup for applications using the client
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
vdbx Logging Module

Library modules only create loggers under the "vdbx" namespace. Applications
and the vdbx command line call configure_logging() once to get output.
"""

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("vdbx")


def configure_logging(log_level: str = "INFO",
                      log_file: Optional[str] = None,
                      log_format: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for a vdbx application.

    Existing root handlers are replaced by a stdout handler and, when
    log_file is given, a file handler.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            unknown names fall back to INFO
        log_file: Path to log file (None for console only)
        log_format: Custom log format string

    Returns:
        The root logger
    """
    numeric_level = getattr(logging, str(log_level).upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format or DEFAULT_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logger.debug(f"Logging configured with level: {logging.getLevelName(numeric_level)}")
    return root_logger
