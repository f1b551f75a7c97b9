#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Command line interface
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
vdbx command line interface.

Small inspection commands against a running server:

    vdbx health
    vdbx version
    vdbx collections
    vdbx describe <collection>

Connection settings default to the VDB_* environment variables.
"""

import argparse
import os
import sys

from . import __version__
from .client import VDBClient
from .errors import VDBError
from .logging import configure_logging


def version_command(_):
    """Show version information"""
    print(f"vdbx v{__version__}")
    return 0


def health_command(args, client):
    """Check server health"""
    health = client.check_health()
    if health.is_healthy:
        print("healthy")
        return 0
    print("unhealthy")
    for reason in health.reasons:
        print(f"  {reason}")
    return 1


def server_version_command(args, client):
    """Show the server version"""
    print(client.get_version())
    return 0


def collections_command(args, client):
    """List collections"""
    for info in client.show_collections():
        print(f"{info.name}\t{info.id}")
    return 0


def describe_command(args, client):
    """Describe one collection and its fields"""
    metadata = client.describe_collection(args.name)
    print(f"Collection: {metadata.name} (id {metadata.id})")
    print(f"Shards: {metadata.shards_num}")
    print(f"Consistency: {metadata.consistency_level.name}")
    if metadata.aliases:
        print(f"Aliases: {', '.join(metadata.aliases)}")
    if metadata.schema is not None:
        print("Fields:")
        for field in metadata.schema.fields:
            flags = []
            if field.is_primary_key:
                flags.append("primary key")
            if field.auto_id:
                flags.append("auto id")
            params = "".join(f" {k}={v}" for k, v in field.type_params.items())
            suffix = f" [{', '.join(flags)}]" if flags else ""
            print(f"  {field.name}: {field.dtype.name}{params}{suffix}")
    return 0


def setup_parsers(subparsers):
    """Set up the command parsers"""
    parser = subparsers.add_parser("health", help="Check server health")
    parser.set_defaults(func=health_command)

    parser = subparsers.add_parser("version", help="Show the server version")
    parser.set_defaults(func=server_version_command)

    parser = subparsers.add_parser("collections", help="List collections")
    parser.set_defaults(func=collections_command)

    parser = subparsers.add_parser("describe", help="Describe a collection")
    parser.add_argument("name", help="Collection name")
    parser.set_defaults(func=describe_command)


def build_parser():
    parser = argparse.ArgumentParser(
        description="vdbx - Typed client for vector database services"
    )
    parser.add_argument(
        "--version", action="store_true", help="Show version information"
    )
    parser.add_argument("--host", default=None, help="Server host (default: $VDB_HOST or localhost)")
    parser.add_argument("--port", type=int, default=None, help="Server port (default: $VDB_PORT or 19530)")
    parser.add_argument("--username", default=None, help="User name (default: $VDB_USERNAME)")
    parser.add_argument("--password", default=None, help="Password (default: $VDB_PASSWORD)")
    parser.add_argument(
        "--timeout", type=float, default=None, help="Timeout in seconds (default: $VDB_TIMEOUT or 10)"
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("VDB_LOG_LEVEL", "WARNING"),
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    setup_parsers(subparsers)
    return parser


def main(argv=None):
    """Main entry point for the CLI"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        return version_command(args)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    configure_logging(args.log_level)

    try:
        client = VDBClient.from_env(
            host=args.host,
            port=args.port,
            username=args.username,
            password=args.password,
            timeout=args.timeout,
        )
        with client:
            return args.func(args, client)
    except VDBError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
