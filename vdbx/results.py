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
vdbx Results Module

Result types returned by the client and the adapters that build them from
decoded response messages.

Each result is a frozen dataclass with a from_wire classmethod. Adapters
read only what they need from the response dict, fill in protocol defaults
for absent keys and raise MalformedResponse when a value has the wrong shape
or an enumerated code is unknown.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import MalformedResponse
from .fields import FieldData, IDs
from .schema import CollectionSchema
from .types import (
    CompactionState,
    ConsistencyLevel,
    ImportState,
    SegmentState,
    StateCode,
)
from .utils import (
    as_mapping,
    get_bool,
    get_int,
    get_ints,
    get_list,
    get_str,
    get_strs,
    kv_dict,
)


def _columns(message: Dict[str, Any], *keys: str) -> List[List[Any]]:
    """Read parallel arrays that must all have the length of the first one."""
    columns = [get_list(message, key) for key in keys]
    expected = len(columns[0])
    for key, column in zip(keys, columns):
        # optional trailing columns may be omitted entirely
        if column and len(column) != expected:
            raise MalformedResponse(
                f"'{key}' has {len(column)} entries, expected {expected}"
            )
    return columns


@dataclass(frozen=True)
class MutationResult:
    """
    Outcome of an insert or delete.

    Attributes:
        ids: Primary keys of the affected rows
        succ_index: Row offsets that were applied
        err_index: Row offsets that failed
        acknowledged: Whether the server acknowledged the request
        insert_cnt: Number of inserted rows
        delete_cnt: Number of deleted rows
        upsert_cnt: Number of upserted rows
        timestamp: Server timestamp of the mutation
    """

    ids: Optional[IDs]
    succ_index: List[int] = field(default_factory=list)
    err_index: List[int] = field(default_factory=list)
    acknowledged: bool = False
    insert_cnt: int = 0
    delete_cnt: int = 0
    upsert_cnt: int = 0
    timestamp: int = 0

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "MutationResult":
        message = as_mapping(message, "mutation result")
        return cls(
            ids=IDs.from_wire(message.get("ids")),
            succ_index=get_ints(message, "succ_index"),
            err_index=get_ints(message, "err_index"),
            acknowledged=get_bool(message, "acknowledged"),
            insert_cnt=get_int(message, "insert_cnt"),
            delete_cnt=get_int(message, "delete_cnt"),
            upsert_cnt=get_int(message, "upsert_cnt"),
            timestamp=get_int(message, "timestamp"),
        )


@dataclass(frozen=True)
class Hit:
    """One search hit: primary key and score."""

    id: Union[int, str]
    score: float


@dataclass(frozen=True)
class SearchResultData:
    """
    Flattened hits for a batch of queries.

    The hits of query i are the topks[i] entries that follow those of the
    previous queries in scores and ids.
    """

    num_queries: int
    top_k: int
    fields_data: List[FieldData]
    scores: List[float]
    ids: Optional[IDs]
    topks: List[int]

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "SearchResultData":
        message = as_mapping(message, "search result data")
        scores = get_list(message, "scores")
        for score in scores:
            if not isinstance(score, (int, float)) or isinstance(score, bool):
                raise MalformedResponse(f"'scores' must hold numbers, got {score!r}")
        topks = get_ints(message, "topks")
        if any(topk < 0 for topk in topks):
            raise MalformedResponse(f"'topks' must not be negative, got {topks}")
        if sum(topks) != len(scores):
            raise MalformedResponse(
                f"search result has {len(scores)} scores but topks add up to {sum(topks)}"
            )
        ids = IDs.from_wire(message.get("ids"))
        id_count = len(ids) if ids is not None else 0
        if id_count != len(scores):
            raise MalformedResponse(f"search result has {len(scores)} scores but {id_count} ids")

        return cls(
            num_queries=get_int(message, "num_queries"),
            top_k=get_int(message, "top_k"),
            fields_data=[FieldData.from_wire(fd) for fd in get_list(message, "fields_data")],
            scores=[float(score) for score in scores],
            ids=ids,
            topks=topks,
        )

    def _bounds(self, query: int) -> Tuple[int, int]:
        if query < 0 or query >= len(self.topks):
            raise IndexError(f"query index {query} out of range for {len(self.topks)} queries")
        start = sum(self.topks[:query])
        return start, start + self.topks[query]

    def hits(self, query: int) -> List[Hit]:
        """Return the hits of one query in rank order."""
        start, end = self._bounds(query)
        ids = list(self.ids) if self.ids is not None else []
        return [Hit(ids[i], self.scores[i]) for i in range(start, end)]


@dataclass(frozen=True)
class SearchResult:
    results: Optional[SearchResultData]
    collection_name: str = ""

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "SearchResult":
        message = as_mapping(message, "search response")
        results = message.get("results")
        return cls(
            results=SearchResultData.from_wire(results) if results is not None else None,
            collection_name=get_str(message, "collection_name"),
        )


@dataclass(frozen=True)
class QueryResult:
    """Columns returned by a query, one FieldData per output field in request order."""

    fields_data: List[FieldData]
    collection_name: str = ""

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "QueryResult":
        message = as_mapping(message, "query response")
        return cls(
            fields_data=[FieldData.from_wire(fd) for fd in get_list(message, "fields_data")],
            collection_name=get_str(message, "collection_name"),
        )

    def get_field(self, name: str) -> Optional[FieldData]:
        for field_data in self.fields_data:
            if field_data.field_name == name:
                return field_data
        return None


@dataclass(frozen=True)
class CollectionMetadata:
    """
    Description of one collection.

    Attributes:
        name: Collection name
        id: Collection id
        schema: Collection schema, if the server returned one
        created_timestamp: Hybrid creation timestamp
        created_utc_timestamp: Creation time as a UTC timestamp
        shards_num: Number of shards
        aliases: Aliases pointing at the collection
        consistency_level: Default consistency level of the collection
    """

    name: str
    id: int
    schema: Optional[CollectionSchema]
    created_timestamp: int
    created_utc_timestamp: int
    shards_num: int
    aliases: List[str]
    consistency_level: ConsistencyLevel

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "CollectionMetadata":
        message = as_mapping(message, "describe collection response")
        schema = message.get("schema")
        return cls(
            name=get_str(message, "collection_name"),
            id=get_int(message, "collection_id"),
            schema=CollectionSchema.from_wire(schema) if schema is not None else None,
            created_timestamp=get_int(message, "created_timestamp"),
            created_utc_timestamp=get_int(message, "created_utc_timestamp"),
            shards_num=get_int(message, "shards_num"),
            aliases=get_strs(message, "aliases"),
            consistency_level=ConsistencyLevel.from_wire(get_int(message, "consistency_level")),
        )


@dataclass(frozen=True)
class CollectionInfo:
    name: str
    id: int
    created_timestamp: int
    created_utc_timestamp: int
    in_memory_percentage: int = 0
    query_service_available: bool = False

    @classmethod
    def list_from_wire(cls, message: Dict[str, Any]) -> List["CollectionInfo"]:
        """Build one entry per collection from the parallel arrays of a show response."""
        message = as_mapping(message, "show collections response")
        names, ids, created, created_utc, in_memory, available = _columns(
            message,
            "collection_names",
            "collection_ids",
            "created_timestamps",
            "created_utc_timestamps",
            "in_memory_percentages",
            "query_service_available",
        )
        if len(ids) != len(names):
            raise MalformedResponse(f"'collection_ids' has {len(ids)} entries, expected {len(names)}")

        return [
            cls(
                name=names[i],
                id=ids[i],
                created_timestamp=created[i] if created else 0,
                created_utc_timestamp=created_utc[i] if created_utc else 0,
                in_memory_percentage=in_memory[i] if in_memory else 0,
                query_service_available=bool(available[i]) if available else False,
            )
            for i in range(len(names))
        ]


@dataclass(frozen=True)
class PartitionInfo:
    name: str
    id: int
    created_timestamp: int
    created_utc_timestamp: int
    in_memory_percentage: int = 0

    @classmethod
    def list_from_wire(cls, message: Dict[str, Any]) -> List["PartitionInfo"]:
        message = as_mapping(message, "show partitions response")
        names, ids, created, created_utc, in_memory = _columns(
            message,
            "partition_names",
            "partition_ids",
            "created_timestamps",
            "created_utc_timestamps",
            "in_memory_percentages",
        )
        if len(ids) != len(names):
            raise MalformedResponse(f"'partition_ids' has {len(ids)} entries, expected {len(names)}")

        return [
            cls(
                name=names[i],
                id=ids[i],
                created_timestamp=created[i] if created else 0,
                created_utc_timestamp=created_utc[i] if created_utc else 0,
                in_memory_percentage=in_memory[i] if in_memory else 0,
            )
            for i in range(len(names))
        ]


@dataclass(frozen=True)
class IndexInfo:
    index_name: str
    index_id: int
    params: Dict[str, str]
    field_name: str
    indexed_rows: int
    total_rows: int
    state: int
    index_state_fail_reason: str

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "IndexInfo":
        message = as_mapping(message, "index description")
        return cls(
            index_name=get_str(message, "index_name"),
            index_id=get_int(message, "index_id"),
            params=kv_dict(message.get("params")),
            field_name=get_str(message, "field_name"),
            indexed_rows=get_int(message, "indexed_rows"),
            total_rows=get_int(message, "total_rows"),
            state=get_int(message, "state"),
            index_state_fail_reason=get_str(message, "index_state_fail_reason"),
        )


@dataclass(frozen=True)
class IndexState:
    state: int
    fail_reason: str = ""

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "IndexState":
        message = as_mapping(message, "index state response")
        return cls(state=get_int(message, "state"), fail_reason=get_str(message, "fail_reason"))


@dataclass(frozen=True)
class IndexProgress:
    indexed_rows: int
    total_rows: int

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "IndexProgress":
        message = as_mapping(message, "index build progress response")
        return cls(indexed_rows=get_int(message, "indexed_rows"), total_rows=get_int(message, "total_rows"))


def _segment_map(message: Dict[str, Any], key: str) -> Dict[str, List[int]]:
    value = message.get(key) or {}
    result = {}
    for name, ids in as_mapping(value, key).items():
        result[name] = get_ints(as_mapping(ids, f"{key}[{name}]"), "data")
    return result


@dataclass(frozen=True)
class FlushResult:
    """
    Outcome of a flush.

    Attributes:
        db_name: Database the collections belong to
        collection_segment_ids: Sealed segment ids per collection
        flush_collection_segment_ids: Flushed segment ids per collection
        collection_seal_times: Seal time per collection
    """

    db_name: str
    collection_segment_ids: Dict[str, List[int]]
    flush_collection_segment_ids: Dict[str, List[int]]
    collection_seal_times: Dict[str, int]

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "FlushResult":
        message = as_mapping(message, "flush response")
        seal_times = as_mapping(message.get("coll_seal_times") or {}, "coll_seal_times")
        return cls(
            db_name=get_str(message, "db_name"),
            collection_segment_ids=_segment_map(message, "coll_seg_ids"),
            flush_collection_segment_ids=_segment_map(message, "flush_coll_seg_ids"),
            collection_seal_times={name: get_int(seal_times, name) for name in seal_times},
        )


@dataclass(frozen=True)
class PersistentSegmentInfo:
    segment_id: int
    collection_id: int
    partition_id: int
    num_rows: int
    state: SegmentState

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "PersistentSegmentInfo":
        message = as_mapping(message, "persistent segment info")
        return cls(
            segment_id=get_int(message, "segment_id"),
            collection_id=get_int(message, "collection_id"),
            partition_id=get_int(message, "partition_id"),
            num_rows=get_int(message, "num_rows"),
            state=SegmentState.from_wire(get_int(message, "state")),
        )


@dataclass(frozen=True)
class QuerySegmentInfo:
    segment_id: int
    collection_id: int
    partition_id: int
    mem_size: int
    num_rows: int
    index_name: str
    index_id: int
    node_id: int
    state: SegmentState
    node_ids: List[int]

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "QuerySegmentInfo":
        message = as_mapping(message, "query segment info")
        return cls(
            segment_id=get_int(message, "segment_id"),
            collection_id=get_int(message, "collection_id"),
            partition_id=get_int(message, "partition_id"),
            mem_size=get_int(message, "mem_size"),
            num_rows=get_int(message, "num_rows"),
            index_name=get_str(message, "index_name"),
            index_id=get_int(message, "index_id"),
            node_id=get_int(message, "node_id"),
            state=SegmentState.from_wire(get_int(message, "state")),
            node_ids=get_ints(message, "node_ids"),
        )


@dataclass(frozen=True)
class ShardReplica:
    leader_id: int
    leader_addr: str
    dm_channel_name: str
    node_ids: List[int]

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "ShardReplica":
        message = as_mapping(message, "shard replica")
        return cls(
            leader_id=get_int(message, "leader_id"),
            leader_addr=get_str(message, "leader_addr"),
            dm_channel_name=get_str(message, "dm_channel_name"),
            node_ids=get_ints(message, "node_ids"),
        )


@dataclass(frozen=True)
class ReplicaInfo:
    replica_id: int
    collection_id: int
    partition_ids: List[int]
    shard_replicas: List[ShardReplica]
    node_ids: List[int]

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "ReplicaInfo":
        message = as_mapping(message, "replica info")
        return cls(
            replica_id=get_int(message, "replica_id"),
            collection_id=get_int(message, "collection_id"),
            partition_ids=get_ints(message, "partition_ids"),
            shard_replicas=[ShardReplica.from_wire(s) for s in get_list(message, "shard_replicas")],
            node_ids=get_ints(message, "node_ids"),
        )


@dataclass(frozen=True)
class Address:
    ip: str = ""
    port: int = 0

    @classmethod
    def from_wire(cls, message: Optional[Dict[str, Any]]) -> "Address":
        if message is None:
            return cls()
        message = as_mapping(message, "address")
        return cls(ip=get_str(message, "ip"), port=get_int(message, "port"))


@dataclass(frozen=True)
class Metrics:
    """Metrics report; response is a JSON document produced by the named component."""

    response: str
    component_name: str

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "Metrics":
        message = as_mapping(message, "metrics response")
        return cls(response=get_str(message, "response"), component_name=get_str(message, "component_name"))


@dataclass(frozen=True)
class ComponentInfo:
    node_id: int
    role: str
    state_code: StateCode
    extra_info: Dict[str, str]

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "ComponentInfo":
        message = as_mapping(message, "component info")
        return cls(
            node_id=get_int(message, "node_id"),
            role=get_str(message, "role"),
            state_code=StateCode.from_wire(get_int(message, "state_code")),
            extra_info=kv_dict(message.get("extra_info")),
        )


@dataclass(frozen=True)
class ComponentState:
    state: Optional[ComponentInfo]
    subcomponent_states: List[ComponentInfo]

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "ComponentState":
        message = as_mapping(message, "component states response")
        state = message.get("state")
        return cls(
            state=ComponentInfo.from_wire(state) if state is not None else None,
            subcomponent_states=[
                ComponentInfo.from_wire(s) for s in get_list(message, "subcomponent_states")
            ],
        )


@dataclass(frozen=True)
class CompactionStateResult:
    state: CompactionState
    executing_plan_no: int
    timeout_plan_no: int
    completed_plan_no: int
    failed_plan_no: int

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "CompactionStateResult":
        message = as_mapping(message, "compaction state response")
        return cls(
            state=CompactionState.from_wire(get_int(message, "state")),
            executing_plan_no=get_int(message, "executing_plan_no"),
            timeout_plan_no=get_int(message, "timeout_plan_no"),
            completed_plan_no=get_int(message, "completed_plan_no"),
            failed_plan_no=get_int(message, "failed_plan_no"),
        )


@dataclass(frozen=True)
class CompactionMergeInfo:
    sources: List[int]
    target: int

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "CompactionMergeInfo":
        message = as_mapping(message, "compaction merge info")
        return cls(sources=get_ints(message, "sources"), target=get_int(message, "target"))


@dataclass(frozen=True)
class CompactionPlan:
    state: CompactionState
    merge_infos: List[CompactionMergeInfo]

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "CompactionPlan":
        message = as_mapping(message, "compaction plans response")
        return cls(
            state=CompactionState.from_wire(get_int(message, "state")),
            merge_infos=[CompactionMergeInfo.from_wire(m) for m in get_list(message, "merge_infos")],
        )


@dataclass(frozen=True)
class ImportStateResult:
    """
    Progress of one bulk import task.

    Attributes:
        state: Current task state
        row_count: Rows imported so far
        id_list: Auto-generated ids, if any
        infos: Extra information reported by the server
        id: Task id
        collection_id: Target collection id
        segment_ids: Segments created by the task
        create_ts: Task creation timestamp
    """

    state: ImportState
    row_count: int
    id_list: List[int]
    infos: Dict[str, str]
    id: int
    collection_id: int
    segment_ids: List[int]
    create_ts: int

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "ImportStateResult":
        message = as_mapping(message, "import state")
        return cls(
            state=ImportState.from_wire(get_int(message, "state")),
            row_count=get_int(message, "row_count"),
            id_list=get_ints(message, "id_list"),
            infos=kv_dict(message.get("infos")),
            id=get_int(message, "id"),
            collection_id=get_int(message, "collection_id"),
            segment_ids=get_ints(message, "segment_ids"),
            create_ts=get_int(message, "create_ts"),
        )


@dataclass(frozen=True)
class _NamedEntity:
    name: str = ""

    def to_wire(self) -> Dict[str, str]:
        return {"name": self.name}

    @classmethod
    def from_wire(cls, message: Optional[Dict[str, Any]]):
        if message is None:
            return None
        return cls(name=get_str(as_mapping(message, cls.__name__), "name"))


class RoleEntity(_NamedEntity):
    pass


class UserEntity(_NamedEntity):
    pass


class ObjectEntity(_NamedEntity):
    pass


class PrivilegeEntity(_NamedEntity):
    pass


@dataclass(frozen=True)
class GrantorEntity:
    user: Optional[UserEntity] = None
    privilege: Optional[PrivilegeEntity] = None

    def to_wire(self) -> Dict[str, Any]:
        return {
            "user": self.user.to_wire() if self.user else None,
            "privilege": self.privilege.to_wire() if self.privilege else None,
        }

    @classmethod
    def from_wire(cls, message: Optional[Dict[str, Any]]) -> Optional["GrantorEntity"]:
        if message is None:
            return None
        message = as_mapping(message, "grantor")
        return cls(
            user=UserEntity.from_wire(message.get("user")),
            privilege=PrivilegeEntity.from_wire(message.get("privilege")),
        )


@dataclass(frozen=True)
class GrantEntity:
    """A privilege granted to a role on an object."""

    role: Optional[RoleEntity] = None
    object: Optional[ObjectEntity] = None
    object_name: str = ""
    grantor: Optional[GrantorEntity] = None

    def to_wire(self) -> Dict[str, Any]:
        return {
            "role": self.role.to_wire() if self.role else None,
            "object": self.object.to_wire() if self.object else None,
            "object_name": self.object_name,
            "grantor": self.grantor.to_wire() if self.grantor else None,
        }

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "GrantEntity":
        message = as_mapping(message, "grant entity")
        return cls(
            role=RoleEntity.from_wire(message.get("role")),
            object=ObjectEntity.from_wire(message.get("object")),
            object_name=get_str(message, "object_name"),
            grantor=GrantorEntity.from_wire(message.get("grantor")),
        )


@dataclass(frozen=True)
class RoleResult:
    role: Optional[RoleEntity]
    users: List[UserEntity]

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "RoleResult":
        message = as_mapping(message, "role result")
        return cls(
            role=RoleEntity.from_wire(message.get("role")),
            users=[UserEntity.from_wire(u) for u in get_list(message, "users")],
        )


@dataclass(frozen=True)
class User:
    user: Optional[UserEntity]
    roles: List[RoleEntity]

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "User":
        message = as_mapping(message, "user result")
        return cls(
            user=UserEntity.from_wire(message.get("user")),
            roles=[RoleEntity.from_wire(r) for r in get_list(message, "roles")],
        )


@dataclass(frozen=True)
class Health:
    is_healthy: bool
    reasons: List[str]

    @classmethod
    def from_wire(cls, message: Dict[str, Any]) -> "Health":
        message = as_mapping(message, "health response")
        return cls(is_healthy=get_bool(message, "is_healthy"), reasons=get_strs(message, "reasons"))
