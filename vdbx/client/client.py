#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# RPC client for the vector database service
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
vdbx Client Module

VDBClient turns method calls into request messages, sends them through a
transport and converts the responses into result types. One method maps to
one remote operation.

The client owns no socket itself. By default it builds a ZeroMQ Transport
with an AuthInterceptor for the given credentials; any object with a
call(method, request) method can be injected instead.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional, Sequence, Union

from ..errors import InvalidParameter, MalformedResponse
from ..fields import FieldData, VectorField, build_placeholder_group
from ..results import (
    Address,
    CollectionInfo,
    CollectionMetadata,
    CompactionPlan,
    CompactionStateResult,
    ComponentState,
    FlushResult,
    GrantEntity,
    Health,
    ImportStateResult,
    IndexInfo,
    IndexProgress,
    IndexState,
    Metrics,
    MutationResult,
    PartitionInfo,
    PersistentSegmentInfo,
    QueryResult,
    QuerySegmentInfo,
    ReplicaInfo,
    RoleEntity,
    RoleResult,
    SearchResult,
    User,
    UserEntity,
)
from ..schema import CollectionSchema
from ..types import (
    ConsistencyLevel,
    DslType,
    MsgType,
    OperatePrivilegeType,
    OperateUserRoleType,
    ShowType,
)
from ..utils import (
    get_bool,
    get_gts,
    get_int,
    get_ints,
    get_list,
    get_str,
    get_strs,
    kv_dict,
    kv_pairs,
    new_msg,
    status_to_result,
)
from .auth import AuthInterceptor
from .timeout import get_timeout
from .transport import Transport

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 19530
DEFAULT_SHARDS_NUM = 2
DEFAULT_REPLICA_NUMBER = 1


def _names(values: Optional[Sequence[str]]) -> List[str]:
    if values is None:
        return []
    if isinstance(values, str):
        return [values]
    return [str(v) for v in values]


def _role(role: Union[str, RoleEntity, None]) -> Optional[Dict[str, str]]:
    if role is None:
        return None
    if isinstance(role, str):
        role = RoleEntity(role)
    return role.to_wire()


class VDBClient:
    """
    Client for a vector database service.

    Args:
        host: Server host
        port: Server port
        username: User name for authentication (requires password)
        password: Password for authentication (requires username)
        timeout: Timeout of every call in seconds; the process default
            (see set_timeout) when omitted
        transport: Object with a call(method, request) method; a ZeroMQ
            Transport is created when omitted
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[Any] = None,
    ):
        if not host:
            raise InvalidParameter("host", host, "host must not be empty")
        if not isinstance(port, int) or isinstance(port, bool) or not 0 < port < 65536:
            raise InvalidParameter("port", port, "expected an integer between 1 and 65535")
        if timeout is None:
            timeout = get_timeout()
        if timeout <= 0:
            raise InvalidParameter("timeout", timeout, "timeout must be positive")

        self.host = host
        self.port = port
        self.timeout = float(timeout)

        if transport is None:
            transport = Transport.for_host(
                host,
                port,
                timeout=self.timeout,
                interceptor=AuthInterceptor(username, password),
            )
        self._transport = transport
        self._last_write_ts = 0

    @classmethod
    def from_env(cls, **overrides) -> "VDBClient":
        """
        Build a client from the VDB_* environment variables.

        Keyword arguments that are not None take precedence over the
        environment.
        """
        config = {
            "host": os.environ.get("VDB_HOST", DEFAULT_HOST),
            "port": os.environ.get("VDB_PORT", DEFAULT_PORT),
            "username": os.environ.get("VDB_USERNAME"),
            "password": os.environ.get("VDB_PASSWORD"),
            "timeout": os.environ.get("VDB_TIMEOUT"),
        }
        config.update({k: v for k, v in overrides.items() if v is not None})

        try:
            config["port"] = int(config["port"])
        except (TypeError, ValueError):
            raise InvalidParameter("port", config["port"], "expected an integer") from None
        if config["timeout"] is not None:
            try:
                config["timeout"] = float(config["timeout"])
            except (TypeError, ValueError):
                raise InvalidParameter("timeout", config["timeout"], "expected a number") from None

        return cls(**config)

    @property
    def transport(self):
        return self._transport

    @property
    def last_write_timestamp(self) -> int:
        """Timestamp of the last successful insert or delete made through this client."""
        return self._last_write_ts

    def close(self) -> None:
        """Release the transport."""
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self):
        return f"VDBClient(host={self.host!r}, port={self.port})"

    def _call(self, method: str, request: Dict[str, Any]) -> Dict[str, Any]:
        response = self._transport.call(method, request)
        if not isinstance(response, dict):
            raise MalformedResponse(
                f"{method} response must be a mapping, got {type(response).__name__}"
            )
        return response

    def _call_checked(self, method: str, request: Dict[str, Any]) -> Dict[str, Any]:
        response = self._call(method, request)
        status_to_result(response.get("status"))
        return response

    def _record_write(self, result: MutationResult) -> None:
        if result.timestamp > self._last_write_ts:
            self._last_write_ts = result.timestamp

    # Collections

    def create_collection(
        self,
        collection_name: str,
        schema: CollectionSchema,
        shards_num: int = DEFAULT_SHARDS_NUM,
        consistency_level: ConsistencyLevel = ConsistencyLevel.SESSION,
        properties: Optional[Dict[str, str]] = None,
        db_name: str = "",
    ) -> None:
        """
        Create a collection with the given schema.

        Args:
            collection_name: Unique name of the new collection
            schema: Collection schema
            shards_num: Number of shards, i.e. data nodes used for inserts
            consistency_level: Default consistency level of the collection
            properties: Extra collection properties
            db_name: Database name, empty for the default database
        """
        request = {
            "base": new_msg(MsgType.CREATE_COLLECTION),
            "db_name": db_name,
            "collection_name": collection_name,
            "schema": schema.encode(),
            "shards_num": shards_num,
            "consistency_level": int(ConsistencyLevel(consistency_level)),
            "properties": kv_pairs(properties),
        }
        self._call_checked("CreateCollection", request)
        logger.info(f"Created collection '{collection_name}' with {len(schema)} fields")

    def drop_collection(self, collection_name: str, db_name: str = "") -> None:
        request = {
            "base": new_msg(MsgType.DROP_COLLECTION),
            "db_name": db_name,
            "collection_name": collection_name,
        }
        self._call_checked("DropCollection", request)
        logger.info(f"Dropped collection '{collection_name}'")

    def has_collection(self, collection_name: str, time_stamp: int = 0, db_name: str = "") -> bool:
        request = {
            "base": new_msg(MsgType.HAS_COLLECTION),
            "db_name": db_name,
            "collection_name": collection_name,
            "time_stamp": time_stamp,
        }
        response = self._call_checked("HasCollection", request)
        return get_bool(response, "value")

    def load_collection(
        self,
        collection_name: str,
        replica_number: int = DEFAULT_REPLICA_NUMBER,
        db_name: str = "",
    ) -> None:
        """Load a collection into query nodes so it can be searched."""
        request = {
            "base": new_msg(MsgType.LOAD_COLLECTION),
            "db_name": db_name,
            "collection_name": collection_name,
            "replica_number": replica_number,
        }
        self._call_checked("LoadCollection", request)

    def release_collection(self, collection_name: str, db_name: str = "") -> None:
        request = {
            "base": new_msg(MsgType.RELEASE_COLLECTION),
            "db_name": db_name,
            "collection_name": collection_name,
        }
        self._call_checked("ReleaseCollection", request)

    def describe_collection(
        self, collection_name: str, time_stamp: int = 0, db_name: str = ""
    ) -> CollectionMetadata:
        request = {
            "base": new_msg(MsgType.DESCRIBE_COLLECTION),
            "db_name": db_name,
            "collection_name": collection_name,
            "time_stamp": time_stamp,
        }
        response = self._call_checked("DescribeCollection", request)
        return CollectionMetadata.from_wire(response)

    def get_collection_stats(self, collection_name: str, db_name: str = "") -> Dict[str, str]:
        request = {
            "base": new_msg(MsgType.GET_COLLECTION_STATISTICS),
            "db_name": db_name,
            "collection_name": collection_name,
        }
        response = self._call_checked("GetCollectionStatistics", request)
        return kv_dict(response.get("stats"))

    def show_collections(
        self,
        collection_names: Optional[Sequence[str]] = None,
        show_type: ShowType = ShowType.ALL,
        db_name: str = "",
    ) -> List[CollectionInfo]:
        """
        List collections.

        Args:
            collection_names: Restrict the listing to these collections
            show_type: ALL, or IN_MEMORY for loaded collections only
            db_name: Database name

        Returns:
            One CollectionInfo per collection
        """
        request = {
            "base": new_msg(MsgType.SHOW_COLLECTIONS),
            "db_name": db_name,
            "type": int(ShowType(show_type)),
            "collection_names": _names(collection_names),
        }
        response = self._call_checked("ShowCollections", request)
        return CollectionInfo.list_from_wire(response)

    def alter_collection(
        self,
        collection_name: str,
        properties: Dict[str, str],
        collection_id: int = 0,
        db_name: str = "",
    ) -> None:
        request = {
            "base": new_msg(MsgType.ALTER_COLLECTION),
            "db_name": db_name,
            "collection_name": collection_name,
            "collection_id": collection_id,
            "properties": kv_pairs(properties),
        }
        self._call_checked("AlterCollection", request)

    # Partitions

    def create_partition(self, collection_name: str, partition_name: str, db_name: str = "") -> None:
        request = {
            "base": new_msg(MsgType.CREATE_PARTITION),
            "db_name": db_name,
            "collection_name": collection_name,
            "partition_name": partition_name,
        }
        self._call_checked("CreatePartition", request)

    def drop_partition(self, collection_name: str, partition_name: str, db_name: str = "") -> None:
        request = {
            "base": new_msg(MsgType.DROP_PARTITION),
            "db_name": db_name,
            "collection_name": collection_name,
            "partition_name": partition_name,
        }
        self._call_checked("DropPartition", request)

    def has_partition(self, collection_name: str, partition_name: str, db_name: str = "") -> bool:
        request = {
            "base": new_msg(MsgType.HAS_PARTITION),
            "db_name": db_name,
            "collection_name": collection_name,
            "partition_name": partition_name,
        }
        response = self._call_checked("HasPartition", request)
        return get_bool(response, "value")

    def load_partitions(
        self,
        collection_name: str,
        partition_names: Sequence[str],
        replica_number: int = DEFAULT_REPLICA_NUMBER,
        db_name: str = "",
    ) -> None:
        request = {
            "base": new_msg(MsgType.LOAD_PARTITIONS),
            "db_name": db_name,
            "collection_name": collection_name,
            "partition_names": _names(partition_names),
            "replica_number": replica_number,
        }
        self._call_checked("LoadPartitions", request)

    def release_partitions(
        self, collection_name: str, partition_names: Sequence[str], db_name: str = ""
    ) -> None:
        request = {
            "base": new_msg(MsgType.RELEASE_PARTITIONS),
            "db_name": db_name,
            "collection_name": collection_name,
            "partition_names": _names(partition_names),
        }
        self._call_checked("ReleasePartitions", request)

    def get_partition_stats(
        self, collection_name: str, partition_name: str, db_name: str = ""
    ) -> Dict[str, str]:
        request = {
            "base": new_msg(MsgType.GET_PARTITION_STATISTICS),
            "db_name": db_name,
            "collection_name": collection_name,
            "partition_name": partition_name,
        }
        response = self._call_checked("GetPartitionStatistics", request)
        return kv_dict(response.get("stats"))

    def show_partitions(
        self,
        collection_name: str,
        partition_names: Optional[Sequence[str]] = None,
        show_type: ShowType = ShowType.ALL,
        collection_id: int = 0,
        db_name: str = "",
    ) -> List[PartitionInfo]:
        request = {
            "base": new_msg(MsgType.SHOW_PARTITIONS),
            "db_name": db_name,
            "collection_name": collection_name,
            "collection_id": collection_id,
            "partition_names": _names(partition_names),
            "type": int(ShowType(show_type)),
        }
        response = self._call_checked("ShowPartitions", request)
        return PartitionInfo.list_from_wire(response)

    def get_loading_progress(
        self, collection_name: str, partition_names: Optional[Sequence[str]] = None
    ) -> int:
        """Return the loading progress of a collection or some of its partitions, in percent."""
        request = {
            "base": new_msg(MsgType.LOAD_PARTITIONS),
            "collection_name": collection_name,
            "partition_names": _names(partition_names),
        }
        response = self._call_checked("GetLoadingProgress", request)
        return get_int(response, "progress")

    # Aliases

    def create_alias(self, collection_name: str, alias: str, db_name: str = "") -> None:
        request = {
            "base": new_msg(MsgType.CREATE_ALIAS),
            "db_name": db_name,
            "collection_name": collection_name,
            "alias": alias,
        }
        self._call_checked("CreateAlias", request)

    def drop_alias(self, alias: str, db_name: str = "") -> None:
        request = {
            "base": new_msg(MsgType.DROP_ALIAS),
            "db_name": db_name,
            "alias": alias,
        }
        self._call_checked("DropAlias", request)

    def alter_alias(self, collection_name: str, alias: str, db_name: str = "") -> None:
        """Point an existing alias at another collection."""
        request = {
            "base": new_msg(MsgType.ALTER_ALIAS),
            "db_name": db_name,
            "collection_name": collection_name,
            "alias": alias,
        }
        self._call_checked("AlterAlias", request)

    # Indexes

    def create_index(
        self,
        collection_name: str,
        field_name: str,
        extra_params: Optional[Dict[str, Any]] = None,
        index_name: str = "",
        db_name: str = "",
    ) -> None:
        """
        Build an index on a field.

        Args:
            collection_name: Collection holding the field
            field_name: Vector field to index
            extra_params: Index parameters (index_type, metric_type, params, ...).
                Dict values are sent as JSON.
            index_name: Optional index name
            db_name: Database name
        """
        params = {
            key: json.dumps(value) if isinstance(value, dict) else value
            for key, value in (extra_params or {}).items()
        }
        request = {
            "base": new_msg(MsgType.CREATE_INDEX),
            "db_name": db_name,
            "collection_name": collection_name,
            "field_name": field_name,
            "extra_params": kv_pairs(params),
            "index_name": index_name,
        }
        self._call_checked("CreateIndex", request)

    def describe_index(
        self,
        collection_name: str,
        field_name: str = "",
        index_name: str = "",
        db_name: str = "",
    ) -> List[IndexInfo]:
        request = {
            "base": new_msg(MsgType.DESCRIBE_INDEX),
            "db_name": db_name,
            "collection_name": collection_name,
            "field_name": field_name,
            "index_name": index_name,
        }
        response = self._call_checked("DescribeIndex", request)
        return [IndexInfo.from_wire(d) for d in get_list(response, "index_descriptions")]

    def get_index_state(
        self,
        collection_name: str,
        field_name: str = "",
        index_name: str = "",
        db_name: str = "",
    ) -> IndexState:
        request = {
            "base": new_msg(MsgType.GET_INDEX_STATE),
            "db_name": db_name,
            "collection_name": collection_name,
            "field_name": field_name,
            "index_name": index_name,
        }
        response = self._call_checked("GetIndexState", request)
        return IndexState.from_wire(response)

    def get_index_build_progress(
        self,
        collection_name: str,
        field_name: str = "",
        index_name: str = "",
        db_name: str = "",
    ) -> IndexProgress:
        request = {
            "base": new_msg(MsgType.GET_INDEX_BUILD_PROGRESS),
            "db_name": db_name,
            "collection_name": collection_name,
            "field_name": field_name,
            "index_name": index_name,
        }
        response = self._call_checked("GetIndexBuildProgress", request)
        return IndexProgress.from_wire(response)

    def drop_index(
        self,
        collection_name: str,
        field_name: str = "",
        index_name: str = "",
        db_name: str = "",
    ) -> None:
        request = {
            "base": new_msg(MsgType.DROP_INDEX),
            "db_name": db_name,
            "collection_name": collection_name,
            "field_name": field_name,
            "index_name": index_name,
        }
        self._call_checked("DropIndex", request)

    # Data

    def insert(
        self,
        collection_name: str,
        fields_data: Sequence[FieldData],
        partition_name: str = "",
        hash_keys: Optional[Sequence[int]] = None,
        db_name: str = "",
    ) -> MutationResult:
        """
        Insert rows given as columns.

        The row count sent to the server is taken from the columns, which
        must all hold the same number of rows. Vector columns must be a whole
        number of rows.

        Args:
            collection_name: Target collection
            fields_data: One FieldData per field being inserted
            partition_name: Target partition, empty for the default one
            hash_keys: Optional per-row hash keys
            db_name: Database name

        Returns:
            MutationResult with the primary keys of the inserted rows

        Raises:
            InvalidParameter: If no columns are given or they disagree on
                the row count
            InvalidVectorBufferLength: If a vector column has a partial row
        """
        fields_data = list(fields_data)
        if not fields_data:
            raise InvalidParameter("fields_data", fields_data, "at least one column is required")

        for field_data in fields_data:
            if isinstance(field_data.field, VectorField):
                field_data.field.validate()

        row_counts = {fd.field_name: fd.num_rows() for fd in fields_data}
        if len(set(row_counts.values())) > 1:
            raise InvalidParameter("fields_data", row_counts, "columns disagree on the row count")
        num_rows = next(iter(row_counts.values()))

        request = {
            "base": new_msg(MsgType.INSERT),
            "db_name": db_name,
            "collection_name": collection_name,
            "partition_name": partition_name,
            "fields_data": [fd.to_wire() for fd in fields_data],
            "hash_keys": list(hash_keys or []),
            "num_rows": num_rows,
        }
        response = self._call_checked("Insert", request)
        result = MutationResult.from_wire(response)
        self._record_write(result)
        logger.debug(f"Inserted {num_rows} rows into '{collection_name}'")
        return result

    def delete(
        self,
        collection_name: str,
        expr: str,
        partition_name: str = "",
        hash_keys: Optional[Sequence[int]] = None,
        db_name: str = "",
    ) -> MutationResult:
        """Delete the rows matching a boolean expression (e.g. "id in [1, 2]")."""
        request = {
            "base": new_msg(MsgType.DELETE),
            "db_name": db_name,
            "collection_name": collection_name,
            "partition_name": partition_name,
            "expr": expr,
            "hash_keys": list(hash_keys or []),
        }
        response = self._call_checked("Delete", request)
        result = MutationResult.from_wire(response)
        self._record_write(result)
        return result

    def search(
        self,
        collection_name: str,
        data: Any,
        anns_field: str,
        params: Optional[Dict[str, Any]] = None,
        limit: int = 10,
        expr: str = "",
        output_fields: Optional[Sequence[str]] = None,
        partition_names: Optional[Sequence[str]] = None,
        metric_type: str = "L2",
        round_decimal: int = -1,
        consistency_level: ConsistencyLevel = ConsistencyLevel.SESSION,
        travel_timestamp: int = 0,
        db_name: str = "",
    ) -> SearchResult:
        """
        Search a vector field for the nearest neighbours of the query vectors.

        Args:
            collection_name: Collection to search
            data: Query vectors: a 2-D array of floats, a list of bytes for
                binary vectors, or a VectorField
            anns_field: Vector field to search
            params: Index specific search parameters (e.g. {"nprobe": 10})
            limit: Number of hits per query
            expr: Boolean filter expression
            output_fields: Fields to return with each hit
            partition_names: Partitions to search, all when empty
            metric_type: Distance metric
            round_decimal: Number of decimals kept in scores, -1 for all
            consistency_level: Consistency level of the read
            travel_timestamp: Search the data as of this timestamp
            db_name: Database name

        Returns:
            SearchResult with the hits of every query
        """
        if limit <= 0:
            raise InvalidParameter("limit", limit, "limit must be positive")

        placeholder_group, nq = build_placeholder_group(data)
        search_params = {
            "anns_field": anns_field,
            "topk": limit,
            "metric_type": metric_type,
            "params": json.dumps(params or {}),
            "round_decimal": round_decimal,
        }
        request = {
            "base": new_msg(MsgType.SEARCH),
            "db_name": db_name,
            "collection_name": collection_name,
            "partition_names": _names(partition_names),
            "dsl": expr,
            "placeholder_group": placeholder_group,
            "dsl_type": int(DslType.BOOL_EXPR_V1),
            "output_fields": _names(output_fields),
            "search_params": kv_pairs(search_params),
            "travel_timestamp": travel_timestamp,
            "guarantee_timestamp": get_gts(consistency_level, self._last_write_ts),
            "nq": nq,
        }
        response = self._call_checked("Search", request)
        return SearchResult.from_wire(response)

    def query(
        self,
        collection_name: str,
        expr: str,
        output_fields: Optional[Sequence[str]] = None,
        partition_names: Optional[Sequence[str]] = None,
        consistency_level: ConsistencyLevel = ConsistencyLevel.SESSION,
        travel_timestamp: int = 0,
        query_params: Optional[Dict[str, Any]] = None,
        db_name: str = "",
    ) -> QueryResult:
        """
        Fetch the rows matching a boolean expression.

        Returns:
            QueryResult with one FieldData per output field
        """
        request = {
            "base": new_msg(MsgType.RETRIEVE),
            "db_name": db_name,
            "collection_name": collection_name,
            "expr": expr,
            "output_fields": _names(output_fields),
            "partition_names": _names(partition_names),
            "travel_timestamp": travel_timestamp,
            "guarantee_timestamp": get_gts(consistency_level, self._last_write_ts),
            "query_params": kv_pairs(query_params),
        }
        response = self._call_checked("Query", request)
        return QueryResult.from_wire(response)

    def flush(self, collection_names: Sequence[str], db_name: str = "") -> FlushResult:
        """Seal the growing segments of the given collections and persist them."""
        request = {
            "base": new_msg(MsgType.FLUSH),
            "db_name": db_name,
            "collection_names": _names(collection_names),
        }
        response = self._call_checked("Flush", request)
        return FlushResult.from_wire(response)

    def get_flush_state(self, segment_ids: Sequence[int]) -> bool:
        request = {"segment_ids": [int(i) for i in segment_ids]}
        response = self._call_checked("GetFlushState", request)
        return get_bool(response, "flushed")

    # Segments and replicas

    def get_persistent_segment_info(
        self, collection_name: str, db_name: str = ""
    ) -> List[PersistentSegmentInfo]:
        request = {
            "base": new_msg(MsgType.SHOW_SEGMENTS),
            "db_name": db_name,
            "collection_name": collection_name,
        }
        response = self._call_checked("GetPersistentSegmentInfo", request)
        return [PersistentSegmentInfo.from_wire(info) for info in get_list(response, "infos")]

    def get_query_segment_info(
        self, collection_name: str, db_name: str = ""
    ) -> List[QuerySegmentInfo]:
        request = {
            "base": new_msg(MsgType.SEGMENT_INFO),
            "db_name": db_name,
            "collection_name": collection_name,
        }
        response = self._call_checked("GetQuerySegmentInfo", request)
        return [QuerySegmentInfo.from_wire(info) for info in get_list(response, "infos")]

    def get_replicas(self, collection_id: int, with_shard_nodes: bool = False) -> List[ReplicaInfo]:
        request = {
            "base": new_msg(MsgType.GET_REPLICAS),
            "collection_id": collection_id,
            "with_shard_nodes": with_shard_nodes,
        }
        response = self._call_checked("GetReplicas", request)
        return [ReplicaInfo.from_wire(replica) for replica in get_list(response, "replicas")]

    def load_balance(
        self,
        src_node_id: int,
        dst_node_ids: Sequence[int],
        sealed_segment_ids: Sequence[int],
        collection_name: str = "",
    ) -> None:
        """Move sealed segments from one query node to others."""
        request = {
            "base": new_msg(MsgType.LOAD_BALANCE_SEGMENTS),
            "collection_name": collection_name,
            "src_node_id": src_node_id,
            "dst_node_ids": list(dst_node_ids),
            "sealed_segment_ids": list(sealed_segment_ids),
        }
        self._call_checked("LoadBalance", request)

    # Compaction and bulk import

    def manual_compaction(self, collection_id: int, time_travel: int = 0) -> int:
        """Start a compaction and return its id."""
        request = {"collection_id": collection_id, "timetravel": time_travel}
        response = self._call_checked("ManualCompaction", request)
        return get_int(response, "compaction_id")

    def get_compaction_state(self, compaction_id: int) -> CompactionStateResult:
        response = self._call_checked("GetCompactionState", {"compaction_id": compaction_id})
        return CompactionStateResult.from_wire(response)

    def get_compaction_state_with_plans(self, compaction_id: int) -> CompactionPlan:
        response = self._call_checked(
            "GetCompactionStateWithPlans", {"compaction_id": compaction_id}
        )
        return CompactionPlan.from_wire(response)

    def import_data(
        self,
        collection_name: str,
        files: Sequence[str],
        partition_name: str = "",
        channel_names: Optional[Sequence[str]] = None,
        row_based: bool = False,
        options: Optional[Dict[str, str]] = None,
    ) -> List[int]:
        """
        Start bulk import tasks for files already present in server storage.

        Returns:
            The ids of the created import tasks
        """
        request = {
            "collection_name": collection_name,
            "partition_name": partition_name,
            "channel_names": _names(channel_names),
            "row_based": row_based,
            "files": _names(files),
            "options": kv_pairs(options),
        }
        response = self._call_checked("Import", request)
        return get_ints(response, "tasks")

    def get_import_state(self, task_id: int) -> ImportStateResult:
        response = self._call_checked("GetImportState", {"task": task_id})
        return ImportStateResult.from_wire(response)

    def list_import_tasks(self, collection_name: str = "", limit: int = 0) -> List[ImportStateResult]:
        request = {"collection_name": collection_name, "limit": limit}
        response = self._call_checked("ListImportTasks", request)
        return [ImportStateResult.from_wire(task) for task in get_list(response, "tasks")]

    # Credentials

    def create_credential(
        self,
        username: str,
        password: str,
        created_utc_timestamps: int = 0,
        modified_utc_timestamps: int = 0,
    ) -> None:
        request = {
            "base": new_msg(MsgType.CREATE_CREDENTIAL),
            "username": username,
            "password": password,
            "created_utc_timestamps": created_utc_timestamps,
            "modified_utc_timestamps": modified_utc_timestamps,
        }
        self._call_checked("CreateCredential", request)
        logger.info(f"Created credential for user '{username}'")

    def update_credential(
        self,
        username: str,
        old_password: str,
        new_password: str,
        created_utc_timestamps: int = 0,
        modified_utc_timestamps: int = 0,
    ) -> None:
        request = {
            "base": new_msg(MsgType.UPDATE_CREDENTIAL),
            "username": username,
            "old_password": old_password,
            "new_password": new_password,
            "created_utc_timestamps": created_utc_timestamps,
            "modified_utc_timestamps": modified_utc_timestamps,
        }
        self._call_checked("UpdateCredential", request)

    def delete_credential(self, username: str) -> None:
        request = {"base": new_msg(MsgType.DELETE_CREDENTIAL), "username": username}
        self._call_checked("DeleteCredential", request)

    def list_credential_usernames(self) -> List[str]:
        request = {"base": new_msg(MsgType.LIST_CRED_USERNAMES)}
        response = self._call_checked("ListCredUsers", request)
        return get_strs(response, "usernames")

    # Roles and privileges

    def create_role(self, role: Union[str, RoleEntity]) -> None:
        request = {"base": new_msg(MsgType.CREATE_ROLE), "entity": _role(role)}
        self._call_checked("CreateRole", request)

    def drop_role(self, role_name: str) -> None:
        request = {"base": new_msg(MsgType.DROP_ROLE), "role_name": role_name}
        self._call_checked("DropRole", request)

    def operate_user_role(
        self,
        username: str,
        role_name: str,
        operate_type: OperateUserRoleType = OperateUserRoleType.ADD_USER_TO_ROLE,
    ) -> None:
        """Add a user to a role, or remove it."""
        request = {
            "base": new_msg(MsgType.OPERATE_USER_ROLE),
            "username": username,
            "role_name": role_name,
            "type": int(OperateUserRoleType(operate_type)),
        }
        self._call_checked("OperateUserRole", request)

    def select_role(
        self, role: Union[str, RoleEntity, None] = None, include_user_info: bool = False
    ) -> List[RoleResult]:
        request = {
            "base": new_msg(MsgType.SELECT_ROLE),
            "role": _role(role),
            "include_user_info": include_user_info,
        }
        response = self._call_checked("SelectRole", request)
        return [RoleResult.from_wire(r) for r in get_list(response, "results")]

    def select_user(
        self, user: Union[str, UserEntity, None] = None, include_role_info: bool = False
    ) -> List[User]:
        if isinstance(user, str):
            user = UserEntity(user)
        request = {
            "base": new_msg(MsgType.SELECT_USER),
            "user": user.to_wire() if user is not None else None,
            "include_role_info": include_role_info,
        }
        response = self._call_checked("SelectUser", request)
        return [User.from_wire(u) for u in get_list(response, "results")]

    def operate_privilege(
        self,
        entity: GrantEntity,
        operate_type: OperatePrivilegeType = OperatePrivilegeType.GRANT,
    ) -> None:
        """Grant or revoke the privilege described by entity."""
        request = {
            "base": new_msg(MsgType.OPERATE_PRIVILEGE),
            "entity": entity.to_wire(),
            "type": int(OperatePrivilegeType(operate_type)),
        }
        self._call_checked("OperatePrivilege", request)

    def select_grant(self, object_name: str) -> List[GrantEntity]:
        """List the grants on one object."""
        request = {
            "base": new_msg(MsgType.SELECT_GRANT),
            "entity": GrantEntity(object_name=object_name).to_wire(),
        }
        response = self._call_checked("SelectGrant", request)
        return [GrantEntity.from_wire(e) for e in get_list(response, "entities")]

    # Service

    def dummy(self, request_type: str) -> str:
        """Round trip a dummy request; the server answers without a status."""
        response = self._call("Dummy", {"request_type": request_type})
        return get_str(response, "response")

    def register_link(self) -> Address:
        response = self._call_checked("RegisterLink", {})
        return Address.from_wire(response.get("address"))

    def get_metrics(self, request: Union[str, Dict[str, Any]]) -> Metrics:
        """
        Fetch metrics from the server.

        Args:
            request: JSON request, e.g. {"metric_type": "system_info"}
        """
        if not isinstance(request, str):
            request = json.dumps(request)
        response = self._call_checked("GetMetrics", {"request": request})
        return Metrics.from_wire(response)

    def get_component_states(self) -> ComponentState:
        response = self._call_checked("GetComponentStates", {})
        return ComponentState.from_wire(response)

    def get_version(self) -> str:
        response = self._call_checked("GetVersion", {})
        return get_str(response, "version")

    def check_health(self) -> Health:
        response = self._call_checked("CheckHealth", {})
        return Health.from_wire(response)


# Process-wide default client
_client: Optional[VDBClient] = None


def get_client() -> VDBClient:
    """
    Return the default client, creating it from the environment if needed.

    Returns:
        VDBClient: The default client
    """
    global _client
    if _client is None:
        _client = VDBClient.from_env()
    return _client


def configure(
    host: Optional[str] = None,
    port: Optional[int] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    timeout: Optional[float] = None,
) -> VDBClient:
    """
    Replace the default client.

    Arguments left as None fall back to the VDB_* environment variables and
    then to the built-in defaults.

    Returns:
        VDBClient: The new default client
    """
    global _client
    if _client is not None:
        _client.close()
    _client = VDBClient.from_env(
        host=host, port=port, username=username, password=password, timeout=timeout
    )
    return _client
