"""
Main client for interacting with a Milvus server.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

import grpc  # type: ignore
from google.protobuf.message import Message
from pymilvus.grpc_gen import common_pb2, milvus_pb2, milvus_pb2_grpc

# Pydantic models
from . import conversions
from .models import ConnectionState, R, RpcStatus
from .params import (
    AlterAliasParam,
    CalcDistanceParam,
    ConnectParam,
    CreateAliasParam,
    CreateCollectionParam,
    CreateIndexParam,
    CreatePartitionParam,
    DeleteParam,
    DescribeCollectionParam,
    DescribeIndexParam,
    DropAliasParam,
    DropCollectionParam,
    DropIndexParam,
    DropPartitionParam,
    FlushParam,
    GetCollectionStatisticsParam,
    GetIndexBuildProgressParam,
    GetIndexStateParam,
    GetMetricsParam,
    GetPartitionStatisticsParam,
    GetPersistentSegmentInfoParam,
    GetQuerySegmentInfoParam,
    HasCollectionParam,
    HasPartitionParam,
    InsertParam,
    LoadCollectionParam,
    LoadPartitionsParam,
    QueryParam,
    ReleaseCollectionParam,
    ReleasePartitionsParam,
    SearchParam,
    ShowCollectionsParam,
    ShowPartitionsParam,
)
from .polling import SyncPoller

# Custom exceptions
from .exceptions import MilvusConnectionError, describe_rpc_error

logger = logging.getLogger(__name__)

_FULLY_LOADED = 100


def _all_loaded(names: Iterable[str], reported: List[str], percentages: List[int]) -> bool:
    progress = dict(zip(reported, percentages))
    return all(progress.get(name, 0) >= _FULLY_LOADED for name in names)


def _rpc_status(status: common_pb2.Status) -> RpcStatus:
    return RpcStatus(msg=status.reason) if status.reason else RpcStatus()


def _index_failure(response: milvus_pb2.GetIndexStateResponse) -> Optional[str]:
    if response.state != common_pb2.IndexState.Failed:
        return None
    return response.fail_reason or "index build failed"


class MilvusServiceClient:
    """
    Synchronous client for the Milvus ``MilvusService`` API.

    Every operation takes one validated parameter object and returns an
    ``R`` envelope; expected failures (server errors, transport errors, a
    closed client, a sync wait running out of time) are reported through
    ``R.status`` and never raised.
    """
    def __init__(self, connect_param: Optional[ConnectParam] = None):
        self.connect_param = connect_param or ConnectParam()
        self.timeout = self.connect_param.timeout

        self._channel: Optional[grpc.Channel] = None
        self._stub: Optional[milvus_pb2_grpc.MilvusServiceStub] = None
        self._closed = threading.Event()
        self._close_lock = threading.Lock()

        self._connect()

    def _connect(self) -> None:
        """Establishes the gRPC connection."""
        param = self.connect_param
        target = param.target
        options = param.channel_options()
        try:
            if param.secure:
                credentials = grpc.ssl_channel_credentials(
                    root_certificates=param.root_certs,
                    private_key=param.private_key,
                    certificate_chain=param.certificate_chain
                )
                self._channel = grpc.secure_channel(target, credentials, options=options)
            else:
                self._channel = grpc.insecure_channel(target, options=options)

            self._stub = milvus_pb2_grpc.MilvusServiceStub(self._channel)
        except grpc.RpcError as e:
            raise MilvusConnectionError(f"Failed to connect to Milvus at {target}: {e}") from e
        except (TypeError, ValueError) as e:
            raise MilvusConnectionError(f"Invalid channel settings for {target}: {e}") from e

        ready = grpc.channel_ready_future(self._channel)
        try:
            ready.result(timeout=param.connect_timeout)
            logger.info("Connected to Milvus at %s", target)
        except grpc.FutureTimeoutError:
            # Calls made before the server comes up report TRANSPORT_ERROR.
            ready.cancel()
            logger.warning("Milvus at %s not reachable within %.1f seconds", target, param.connect_timeout)

    @property
    def state(self) -> ConnectionState:
        return ConnectionState.CLOSED if self._closed.is_set() else ConnectionState.OPEN

    def close(self) -> None:
        """Closes the gRPC connection. Further calls return CLIENT_NOT_CONNECTED."""
        with self._close_lock:
            if self._closed.is_set():
                return
            self._closed.set()
            if self._channel:
                self._channel.close()
        logger.info("Closed connection to Milvus at %s", self.connect_param.target)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # --- Invocation Helper ---
    def _invoke(
        self,
        operation_name: str,
        rpc_name: str,
        request: Message,
        to_payload: Optional[Callable[[Any], Any]] = None,
    ) -> R:
        """
        Issues one RPC and classifies its outcome.

        ``to_payload`` turns a successful response into the envelope payload;
        by default the response message itself is the payload.
        """
        if self._closed.is_set():
            logger.debug("Skipping %s: client is closed", operation_name)
            return R.client_not_connected()

        logger.debug("Calling %s for %s", rpc_name, operation_name)
        try:
            response = getattr(self._stub, rpc_name)(request, timeout=self.timeout)
        except grpc.RpcError as e:
            if self._closed.is_set():
                return R.client_not_connected()
            message = describe_rpc_error(e)
            logger.warning("Failed to %s: %s", operation_name, message)
            return R.transport_error(f"Failed to {operation_name}: {message}")
        except ValueError:
            # grpc refuses calls on a channel that was closed meanwhile.
            if self._closed.is_set():
                return R.client_not_connected()
            raise

        status = response if isinstance(response, common_pb2.Status) else response.status
        if status.error_code != common_pb2.ErrorCode.Success:
            logger.debug("Server rejected %s: %s (error code %d)", operation_name, status.reason, status.error_code)
            return R.server_error(status.error_code, status.reason)
        return R.success(to_payload(response) if to_payload else response)

    def _finish_sync(self, result: R, poller: SyncPoller) -> R:
        waited = poller.wait()
        return result if waited.ok else waited

    # --- Collection Methods ---
    def create_collection(self, param: CreateCollectionParam) -> R[RpcStatus]:
        """Creates a collection from the given field schemas."""
        return self._invoke(
            f"create collection '{param.collection_name}'",
            "CreateCollection",
            conversions.create_collection_request(param),
            _rpc_status,
        )

    def describe_collection(self, param: DescribeCollectionParam) -> R[milvus_pb2.DescribeCollectionResponse]:
        """Fetches the schema and metadata of a collection."""
        request = milvus_pb2.DescribeCollectionRequest(collection_name=param.collection_name)
        return self._invoke(f"describe collection '{param.collection_name}'", "DescribeCollection", request)

    def drop_collection(self, param: DropCollectionParam) -> R[RpcStatus]:
        """Drops a collection and all of its data."""
        request = milvus_pb2.DropCollectionRequest(collection_name=param.collection_name)
        return self._invoke(f"drop collection '{param.collection_name}'", "DropCollection", request, _rpc_status)

    def has_collection(self, param: HasCollectionParam) -> R[bool]:
        """Checks whether a collection exists."""
        request = milvus_pb2.HasCollectionRequest(collection_name=param.collection_name)
        return self._invoke(
            f"check collection '{param.collection_name}'", "HasCollection", request, lambda r: r.value)

    def load_collection(self, param: LoadCollectionParam) -> R[RpcStatus]:
        """Loads a collection into query node memory, optionally waiting until it is fully loaded."""
        name = param.collection_name
        request = milvus_pb2.LoadCollectionRequest(collection_name=name)
        result = self._invoke(f"load collection '{name}'", "LoadCollection", request, _rpc_status)
        if not result.ok or not param.sync_load:
            return result

        probe_request = milvus_pb2.ShowCollectionsRequest(
            type=milvus_pb2.ShowType.InMemory, collection_names=[name])
        poller = SyncPoller(
            probe=lambda: self._invoke(f"check loading of '{name}'", "ShowCollections", probe_request),
            is_complete=lambda r: _all_loaded([name], r.collection_names, r.inMemory_percentages),
            interval=param.sync_load_waiting_interval,
            timeout=param.sync_load_waiting_timeout,
            description=f"collection '{name}' to load",
        )
        return self._finish_sync(result, poller)

    def release_collection(self, param: ReleaseCollectionParam) -> R[RpcStatus]:
        """Releases a loaded collection from memory."""
        request = milvus_pb2.ReleaseCollectionRequest(collection_name=param.collection_name)
        return self._invoke(
            f"release collection '{param.collection_name}'", "ReleaseCollection", request, _rpc_status)

    def get_collection_statistics(
        self, param: GetCollectionStatisticsParam
    ) -> R[milvus_pb2.GetCollectionStatisticsResponse]:
        """Row count and other statistics; flushes the collection first unless told not to."""
        name = param.collection_name
        if param.flush_collection:
            flushed = self.flush(FlushParam(collection_names=(name,), sync_flush=True))
            if not flushed.ok:
                return flushed
        request = milvus_pb2.GetCollectionStatisticsRequest(collection_name=name)
        return self._invoke(f"get statistics of collection '{name}'", "GetCollectionStatistics", request)

    def show_collections(self, param: ShowCollectionsParam) -> R[milvus_pb2.ShowCollectionsResponse]:
        """Lists collections, or only the loaded ones with their load percentages."""
        request = milvus_pb2.ShowCollectionsRequest(
            type=conversions.pydantic_to_grpc_show_type(param.show_type),
            collection_names=list(param.collection_names),
        )
        return self._invoke("show collections", "ShowCollections", request)

    def flush(self, param: FlushParam) -> R[milvus_pb2.FlushResponse]:
        """Seals and persists the growing segments of the given collections, optionally waiting for them."""
        names = list(param.collection_names)
        request = milvus_pb2.FlushRequest(collection_names=names)
        result = self._invoke(f"flush collections {names}", "Flush", request)
        if not result.ok or not param.sync_flush:
            return result

        seg_ids = {name: set(ids.data) for name, ids in result.data.coll_segIDs.items()}
        poller = SyncPoller(
            probe=lambda: self._segment_states(seg_ids),
            is_complete=lambda states: all(s == common_pb2.SegmentState.Flushed for s in states.values()),
            interval=param.sync_flush_waiting_interval,
            timeout=param.sync_flush_waiting_timeout,
            description=f"collections {names} to flush",
        )
        return self._finish_sync(result, poller)

    def _segment_states(self, seg_ids: Dict[str, set]) -> R[Dict[int, int]]:
        """States of the given segments; a segment the server no longer reports counts as flushed."""
        states: Dict[int, int] = {}
        for name, ids in seg_ids.items():
            if not ids:
                continue
            request = milvus_pb2.GetPersistentSegmentInfoRequest(collectionName=name)
            result = self._invoke(f"check flushing of '{name}'", "GetPersistentSegmentInfo", request)
            if not result.ok:
                return result
            states.update({info.segmentID: info.state for info in result.data.infos if info.segmentID in ids})
        return R.success(states)

    # --- Partition Methods ---
    def create_partition(self, param: CreatePartitionParam) -> R[RpcStatus]:
        """Creates a partition in a collection."""
        request = milvus_pb2.CreatePartitionRequest(
            collection_name=param.collection_name, partition_name=param.partition_name)
        return self._invoke(
            f"create partition '{param.partition_name}'", "CreatePartition", request, _rpc_status)

    def drop_partition(self, param: DropPartitionParam) -> R[RpcStatus]:
        """Drops a partition and its data."""
        request = milvus_pb2.DropPartitionRequest(
            collection_name=param.collection_name, partition_name=param.partition_name)
        return self._invoke(f"drop partition '{param.partition_name}'", "DropPartition", request, _rpc_status)

    def has_partition(self, param: HasPartitionParam) -> R[bool]:
        """Checks whether a partition exists."""
        request = milvus_pb2.HasPartitionRequest(
            collection_name=param.collection_name, partition_name=param.partition_name)
        return self._invoke(
            f"check partition '{param.partition_name}'", "HasPartition", request, lambda r: r.value)

    def load_partitions(self, param: LoadPartitionsParam) -> R[RpcStatus]:
        """Loads partitions into memory, optionally waiting until every one is fully loaded."""
        collection = param.collection_name
        names = list(param.partition_names)
        request = milvus_pb2.LoadPartitionsRequest(collection_name=collection, partition_names=names)
        result = self._invoke(f"load partitions {names}", "LoadPartitions", request, _rpc_status)
        if not result.ok or not param.sync_load:
            return result

        probe_request = milvus_pb2.ShowPartitionsRequest(
            collection_name=collection, partition_names=names, type=milvus_pb2.ShowType.InMemory)
        poller = SyncPoller(
            probe=lambda: self._invoke(f"check loading of partitions {names}", "ShowPartitions", probe_request),
            is_complete=lambda r: _all_loaded(names, r.partition_names, r.inMemory_percentages),
            interval=param.sync_load_waiting_interval,
            timeout=param.sync_load_waiting_timeout,
            description=f"partitions {names} of '{collection}' to load",
        )
        return self._finish_sync(result, poller)

    def release_partitions(self, param: ReleasePartitionsParam) -> R[RpcStatus]:
        """Releases loaded partitions from memory."""
        names = list(param.partition_names)
        request = milvus_pb2.ReleasePartitionsRequest(collection_name=param.collection_name, partition_names=names)
        return self._invoke(f"release partitions {names}", "ReleasePartitions", request, _rpc_status)

    def get_partition_statistics(
        self, param: GetPartitionStatisticsParam
    ) -> R[milvus_pb2.GetPartitionStatisticsResponse]:
        """Row count and other statistics of a partition."""
        request = milvus_pb2.GetPartitionStatisticsRequest(
            collection_name=param.collection_name, partition_name=param.partition_name)
        return self._invoke(
            f"get statistics of partition '{param.partition_name}'", "GetPartitionStatistics", request)

    def show_partitions(self, param: ShowPartitionsParam) -> R[milvus_pb2.ShowPartitionsResponse]:
        """Lists the partitions of a collection."""
        request = milvus_pb2.ShowPartitionsRequest(
            collection_name=param.collection_name,
            partition_names=list(param.partition_names),
            type=conversions.pydantic_to_grpc_show_type(param.show_type),
        )
        return self._invoke(f"show partitions of '{param.collection_name}'", "ShowPartitions", request)

    # --- Alias Methods ---
    def create_alias(self, param: CreateAliasParam) -> R[RpcStatus]:
        """Creates an alias for a collection."""
        request = milvus_pb2.CreateAliasRequest(collection_name=param.collection_name, alias=param.alias)
        return self._invoke(f"create alias '{param.alias}'", "CreateAlias", request, _rpc_status)

    def drop_alias(self, param: DropAliasParam) -> R[RpcStatus]:
        """Drops an alias."""
        request = milvus_pb2.DropAliasRequest(alias=param.alias)
        return self._invoke(f"drop alias '{param.alias}'", "DropAlias", request, _rpc_status)

    def alter_alias(self, param: AlterAliasParam) -> R[RpcStatus]:
        """Points an existing alias at another collection."""
        request = milvus_pb2.AlterAliasRequest(collection_name=param.collection_name, alias=param.alias)
        return self._invoke(f"alter alias '{param.alias}'", "AlterAlias", request, _rpc_status)

    # --- Index Methods ---
    def create_index(self, param: CreateIndexParam) -> R[RpcStatus]:
        """Builds an index on a vector field, optionally waiting for the build to finish."""
        collection, field = param.collection_name, param.field_name
        result = self._invoke(
            f"create index on '{collection}.{field}'",
            "CreateIndex",
            conversions.create_index_request(param),
            _rpc_status,
        )
        if not result.ok or not param.sync_mode:
            return result

        probe_request = milvus_pb2.GetIndexStateRequest(collection_name=collection, field_name=field)
        poller = SyncPoller(
            probe=lambda: self._invoke(f"check index on '{collection}.{field}'", "GetIndexState", probe_request),
            is_complete=lambda r: r.state == common_pb2.IndexState.Finished,
            is_failed=_index_failure,
            failure_code=common_pb2.ErrorCode.BuildIndexError,
            interval=param.sync_waiting_interval,
            timeout=param.sync_waiting_timeout,
            description=f"index on '{collection}.{field}' to build",
        )
        return self._finish_sync(result, poller)

    def describe_index(self, param: DescribeIndexParam) -> R[milvus_pb2.DescribeIndexResponse]:
        """Fetches the index parameters of a field."""
        request = milvus_pb2.DescribeIndexRequest(collection_name=param.collection_name, field_name=param.field_name)
        return self._invoke(
            f"describe index on '{param.collection_name}.{param.field_name}'", "DescribeIndex", request)

    def get_index_state(self, param: GetIndexStateParam) -> R[milvus_pb2.GetIndexStateResponse]:
        """Fetches the build state of a field's index."""
        request = milvus_pb2.GetIndexStateRequest(collection_name=param.collection_name, field_name=param.field_name)
        return self._invoke(
            f"get index state of '{param.collection_name}.{param.field_name}'", "GetIndexState", request)

    def get_index_build_progress(
        self, param: GetIndexBuildProgressParam
    ) -> R[milvus_pb2.GetIndexBuildProgressResponse]:
        """Indexed and total row counts of an index build."""
        request = milvus_pb2.GetIndexBuildProgressRequest(collection_name=param.collection_name)
        return self._invoke(
            f"get index build progress of '{param.collection_name}'", "GetIndexBuildProgress", request)

    def drop_index(self, param: DropIndexParam) -> R[RpcStatus]:
        """Drops the index of a field."""
        request = milvus_pb2.DropIndexRequest(collection_name=param.collection_name, field_name=param.field_name)
        return self._invoke(
            f"drop index on '{param.collection_name}.{param.field_name}'", "DropIndex", request, _rpc_status)

    # --- Data Methods ---
    def insert(self, param: InsertParam) -> R[milvus_pb2.MutationResult]:
        """Inserts columns of rows into a collection."""
        return self._invoke(
            f"insert {param.row_count} rows into '{param.collection_name}'",
            "Insert",
            conversions.insert_request(param),
        )

    def delete(self, param: DeleteParam) -> R[milvus_pb2.MutationResult]:
        """Deletes the entities matching a boolean expression."""
        request = milvus_pb2.DeleteRequest(
            collection_name=param.collection_name,
            partition_name=param.partition_name,
            expr=param.expr,
        )
        return self._invoke(f"delete from '{param.collection_name}'", "Delete", request)

    def search(self, param: SearchParam) -> R[milvus_pb2.SearchResults]:
        """Approximate nearest neighbour search over a vector field."""
        return self._invoke(
            f"search collection '{param.collection_name}'", "Search", conversions.search_request(param))

    def query(self, param: QueryParam) -> R[milvus_pb2.QueryResults]:
        """Fetches the entities matching a boolean expression."""
        request = milvus_pb2.QueryRequest(
            collection_name=param.collection_name,
            expr=param.expr,
            output_fields=list(param.out_fields),
            partition_names=list(param.partition_names),
            travel_timestamp=param.travel_timestamp,
            guarantee_timestamp=param.guarantee_timestamp,
        )
        return self._invoke(f"query collection '{param.collection_name}'", "Query", request)

    def calc_distance(self, param: CalcDistanceParam) -> R[milvus_pb2.CalcDistanceResults]:
        """Pairwise distances between two vector batches."""
        return self._invoke("calculate distance", "CalcDistance", conversions.calc_distance_request(param))

    # --- Control Methods ---
    def get_metrics(self, param: GetMetricsParam) -> R[milvus_pb2.GetMetricsResponse]:
        """Runs a metrics request against the server."""
        request = milvus_pb2.GetMetricsRequest(request=param.request)
        return self._invoke("get metrics", "GetMetrics", request)

    def get_persistent_segment_info(
        self, param: GetPersistentSegmentInfoParam
    ) -> R[milvus_pb2.GetPersistentSegmentInfoResponse]:
        """Lists the persisted segments of a collection."""
        request = milvus_pb2.GetPersistentSegmentInfoRequest(collectionName=param.collection_name)
        return self._invoke(
            f"get persistent segments of '{param.collection_name}'", "GetPersistentSegmentInfo", request)

    def get_query_segment_info(self, param: GetQuerySegmentInfoParam) -> R[milvus_pb2.GetQuerySegmentInfoResponse]:
        """Lists the segments of a collection loaded on query nodes."""
        request = milvus_pb2.GetQuerySegmentInfoRequest(collectionName=param.collection_name)
        return self._invoke(
            f"get query segments of '{param.collection_name}'", "GetQuerySegmentInfo", request)
