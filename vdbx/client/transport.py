#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# ZeroMQ request/reply transport
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
ZeroMQ transport for the vdbx client.

Each call packs an envelope {"method", "request", "metadata"} with msgpack,
sends it over a REQ socket and unpacks the reply into a dict. REQ sockets
allow exactly one outstanding request, so calls are serialized with a lock.

A socket that failed or timed out is closed and a fresh one is created on
the next call. Nothing is retried.
"""

import logging
import threading
from typing import Any, Dict, Optional

import msgpack
import zmq

from ..errors import CommunicationError, ConversionError, MalformedResponse, TimeoutError
from .auth import AuthInterceptor
from .timeout import get_timeout, timeout as operation_timeout, to_milliseconds

logger = logging.getLogger(__name__)


class Transport:
    """
    Request/reply transport over a single ZeroMQ REQ socket.

    Args:
        address: ZeroMQ endpoint (e.g. "tcp://localhost:19530")
        timeout: Send and receive timeout in seconds
        interceptor: Callable that adds entries to the call metadata
        context: ZeroMQ context to use; a private one is created when omitted
    """

    def __init__(
        self,
        address: str,
        timeout: Optional[float] = None,
        interceptor: Optional[AuthInterceptor] = None,
        context: Optional[zmq.Context] = None,
    ):
        self.address = address
        self.timeout = float(timeout) if timeout is not None else get_timeout()
        self.interceptor = interceptor if interceptor is not None else AuthInterceptor()
        self._own_context = context is None
        self.context = context
        self.socket = None
        self._lock = threading.Lock()

    @classmethod
    def for_host(cls, host: str, port: int, **kwargs) -> "Transport":
        return cls(f"tcp://{host}:{port}", **kwargs)

    def connect(self):
        """Open the REQ socket. Called lazily by call()."""
        if self.context is None:
            self.context = zmq.Context()

        timeout_ms = to_milliseconds(self.timeout)
        try:
            socket = self.context.socket(zmq.REQ)
            socket.setsockopt(zmq.RCVTIMEO, timeout_ms)
            socket.setsockopt(zmq.SNDTIMEO, timeout_ms)
            socket.setsockopt(zmq.LINGER, 0)
            socket.connect(self.address)
        except zmq.ZMQError as e:
            logger.error(f"Failed to connect to {self.address}: {e}")
            raise CommunicationError(f"cannot connect to {self.address}: {e}") from e

        self.socket = socket
        logger.info(f"Connected to vector database at {self.address}")

    def disconnect(self):
        """Close the socket; the next call opens a new one."""
        if self.socket is not None:
            self.socket.close(linger=0)
            self.socket = None

    def close(self):
        """Close the socket and terminate the context if this transport created it."""
        with self._lock:
            self.disconnect()
            if self.context is not None and self._own_context:
                self.context.term()
                self.context = None

    @property
    def connected(self) -> bool:
        return self.socket is not None

    @operation_timeout()
    def call(self, method: str, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send one request and wait for its reply.

        Args:
            method: Remote method name (e.g. "CreateCollection")
            request: Request message

        Returns:
            The decoded response message

        Raises:
            ConversionError: If the request cannot be encoded
            TimeoutError: If no reply arrives within the timeout
            CommunicationError: On any other socket failure
            MalformedResponse: If the reply cannot be decoded into a mapping
        """
        envelope = {
            "method": method,
            "request": request,
            "metadata": self.interceptor({}),
        }
        try:
            payload = msgpack.packb(envelope, use_bin_type=True)
        except (TypeError, ValueError) as e:
            raise ConversionError(f"cannot encode {method} request: {e}") from e

        with self._lock:
            if self.socket is None:
                self.connect()

            logger.debug(f"Sending {method} ({len(payload)} bytes) to {self.address}")
            try:
                self.socket.send(payload)
                reply = self.socket.recv()
            except zmq.Again as e:
                self.disconnect()
                logger.error(f"{method} timed out after {self.timeout:.2f}s")
                raise TimeoutError(
                    f"{method} timed out after {self.timeout:.2f}s waiting for {self.address}"
                ) from e
            except zmq.ZMQError as e:
                self.disconnect()
                logger.error(f"ZMQ error during {method}: {e}")
                raise CommunicationError(f"ZMQ error during {method}: {e}") from e

        try:
            response = msgpack.unpackb(reply, raw=False)
        except (ValueError, msgpack.UnpackException) as e:
            raise MalformedResponse(f"cannot decode {method} response: {e}") from e

        if not isinstance(response, dict):
            raise MalformedResponse(
                f"{method} response must be a mapping, got {type(response).__name__}"
            )
        return response

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self):
        return f"Transport(address={self.address!r}, timeout={self.timeout})"
