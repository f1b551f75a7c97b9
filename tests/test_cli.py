#!/usr/bin/env python3
#
# Tests for the command line interface
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
Tests for the vdbx command line interface
"""

from unittest.mock import MagicMock, patch

import pytest

from vdbx import __version__, cli
from vdbx.errors import CommunicationError
from vdbx.results import CollectionInfo, CollectionMetadata, Health
from vdbx.types import ConsistencyLevel


@pytest.fixture
def mock_client():
    """Patch client creation and logging setup; yield the mocked client."""
    client = MagicMock()
    with patch("vdbx.cli.configure_logging"), \
            patch("vdbx.cli.VDBClient.from_env", return_value=client) as from_env:
        client.from_env = from_env
        yield client


class TestCLI:
    """Tests for cli.main"""

    def test_version_flag(self, capsys):
        """Test --version prints the package version"""
        assert cli.main(["--version"]) == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command(self, capsys):
        """Test running without a command prints help"""
        assert cli.main([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_health(self, mock_client, capsys):
        """Test a healthy server exits with 0"""
        mock_client.check_health.return_value = Health(True, [])

        assert cli.main(["health"]) == 0
        assert "healthy" in capsys.readouterr().out
        mock_client.__exit__.assert_called_once()

    def test_unhealthy(self, mock_client, capsys):
        """Test an unhealthy server exits with 1 and lists reasons"""
        mock_client.check_health.return_value = Health(False, ["query node down"])

        assert cli.main(["health"]) == 1
        assert "query node down" in capsys.readouterr().out

    def test_connection_flags(self, mock_client):
        """Test connection flags are passed to the client"""
        mock_client.get_version.return_value = "2.1.0"

        assert cli.main(["--host", "db.local", "--port", "19531", "version"]) == 0
        mock_client.from_env.assert_called_once_with(
            host="db.local", port=19531, username=None, password=None, timeout=None
        )

    def test_collections(self, mock_client, capsys):
        """Test collections are listed one per line"""
        mock_client.show_collections.return_value = [
            CollectionInfo("books", 7, 0, 0),
            CollectionInfo("films", 8, 0, 0),
        ]

        assert cli.main(["collections"]) == 0
        assert capsys.readouterr().out.splitlines() == ["books\t7", "films\t8"]

    def test_describe(self, mock_client, capsys, book_schema):
        """Test collection descriptions list the fields"""
        mock_client.describe_collection.return_value = CollectionMetadata(
            name="books",
            id=7,
            schema=book_schema,
            created_timestamp=0,
            created_utc_timestamp=0,
            shards_num=2,
            aliases=["library"],
            consistency_level=ConsistencyLevel.SESSION,
        )

        assert cli.main(["describe", "books"]) == 0
        out = capsys.readouterr().out
        mock_client.describe_collection.assert_called_once_with("books")
        assert "Aliases: library" in out
        assert "id: INT64 [primary key, auto id]" in out
        assert "name: VARCHAR max_length=200" in out
        assert "vec: FLOAT_VECTOR dim=1536" in out

    def test_errors_exit_with_1(self, mock_client, capsys):
        """Test client errors are printed and exit with 1"""
        mock_client.check_health.side_effect = CommunicationError("connection refused")

        assert cli.main(["health"]) == 1
        assert "connection refused" in capsys.readouterr().err
