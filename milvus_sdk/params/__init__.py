"""
Validated, immutable request parameters, one model per client operation.
"""
from .alias import AlterAliasParam, CreateAliasParam, DropAliasParam
from .collection import (
    CreateCollectionParam,
    DescribeCollectionParam,
    DropCollectionParam,
    FieldType,
    FlushParam,
    GetCollectionStatisticsParam,
    HasCollectionParam,
    LoadCollectionParam,
    ReleaseCollectionParam,
    ShowCollectionsParam,
)
from .connect import ConnectParam
from .control import GetMetricsParam, GetPersistentSegmentInfoParam, GetQuerySegmentInfoParam
from .dml import CalcDistanceParam, DeleteParam, InsertField, InsertParam, QueryParam, SearchParam
from .index import (
    CreateIndexParam,
    DescribeIndexParam,
    DropIndexParam,
    GetIndexBuildProgressParam,
    GetIndexStateParam,
)
from .partition import (
    CreatePartitionParam,
    DropPartitionParam,
    GetPartitionStatisticsParam,
    HasPartitionParam,
    LoadPartitionsParam,
    ReleasePartitionsParam,
    ShowPartitionsParam,
)

__all__ = [
    "ConnectParam",
    # Collections
    "FieldType",
    "CreateCollectionParam",
    "DescribeCollectionParam",
    "DropCollectionParam",
    "HasCollectionParam",
    "LoadCollectionParam",
    "ReleaseCollectionParam",
    "GetCollectionStatisticsParam",
    "ShowCollectionsParam",
    "FlushParam",
    # Partitions
    "CreatePartitionParam",
    "DropPartitionParam",
    "HasPartitionParam",
    "LoadPartitionsParam",
    "ReleasePartitionsParam",
    "GetPartitionStatisticsParam",
    "ShowPartitionsParam",
    # Aliases
    "CreateAliasParam",
    "AlterAliasParam",
    "DropAliasParam",
    # Indexes
    "CreateIndexParam",
    "DescribeIndexParam",
    "GetIndexStateParam",
    "GetIndexBuildProgressParam",
    "DropIndexParam",
    # Data
    "InsertField",
    "InsertParam",
    "DeleteParam",
    "SearchParam",
    "QueryParam",
    "CalcDistanceParam",
    # Control
    "GetMetricsParam",
    "GetPersistentSegmentInfoParam",
    "GetQuerySegmentInfoParam",
]
