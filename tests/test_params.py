"""
Unit tests for request parameter validation in milvus_sdk.params.
"""
import pytest
from pydantic import ValidationError

from milvus_sdk import constants
from milvus_sdk.exceptions import MilvusException, ParamException
from milvus_sdk.models import DataType, IndexType, MetricType, ShowType
from milvus_sdk.params import (
    AlterAliasParam,
    CalcDistanceParam,
    ConnectParam,
    CreateAliasParam,
    CreateCollectionParam,
    CreateIndexParam,
    CreatePartitionParam,
    DeleteParam,
    DescribeCollectionParam,
    DropAliasParam,
    FieldType,
    FlushParam,
    GetCollectionStatisticsParam,
    GetIndexBuildProgressParam,
    GetMetricsParam,
    GetPersistentSegmentInfoParam,
    GetQuerySegmentInfoParam,
    HasPartitionParam,
    InsertField,
    InsertParam,
    LoadCollectionParam,
    LoadPartitionsParam,
    QueryParam,
    ReleasePartitionsParam,
    SearchParam,
    ShowCollectionsParam,
    ShowPartitionsParam,
)


def vector_field(dim=2):
    return FieldType(name="vec", data_type=DataType.FLOAT_VECTOR, dimension=dim)


def id_field():
    return FieldType(name="id", data_type=DataType.INT64, primary_key=True, auto_id=False)

# --- Common behaviour ---

def test_param_exception_is_the_only_error_kind():
    """pydantic's ValidationError never escapes a param constructor."""
    with pytest.raises(ParamException) as excinfo:
        DescribeCollectionParam(collection_name="")
    assert isinstance(excinfo.value, MilvusException)
    assert isinstance(excinfo.value, ValueError)
    assert "DescribeCollectionParam" in str(excinfo.value)
    assert "collection_name" in str(excinfo.value)

def test_unknown_keyword_rejected():
    with pytest.raises(ParamException, match="collection_nmae"):
        DescribeCollectionParam(collection_name="c", collection_nmae="typo")

def test_params_are_frozen():
    param = DescribeCollectionParam(collection_name="c")
    with pytest.raises(ValidationError):
        param.collection_name = "other"

def test_params_are_hashable_values():
    assert DescribeCollectionParam(collection_name="c") == DescribeCollectionParam(collection_name="c")
    assert hash(ShowCollectionsParam(collection_names=["a"])) == hash(ShowCollectionsParam(collection_names=("a",)))

@pytest.mark.parametrize("build", [
    lambda: DescribeCollectionParam(collection_name=""),
    lambda: DescribeCollectionParam(collection_name="   "),
    lambda: DescribeCollectionParam(collection_name=None),
    lambda: CreatePartitionParam(collection_name="c", partition_name=""),
    lambda: HasPartitionParam(collection_name="", partition_name="p"),
    lambda: CreateAliasParam(collection_name="c", alias=""),
    lambda: AlterAliasParam(collection_name="", alias="a"),
    lambda: DropAliasParam(alias=""),
    lambda: DeleteParam(collection_name="c", expr=""),
    lambda: DeleteParam(collection_name="c", partition_name="", expr="id in [1]"),
    lambda: QueryParam(collection_name="c", expr=""),
    lambda: GetMetricsParam(request=""),
    lambda: GetPersistentSegmentInfoParam(collection_name=""),
    lambda: GetQuerySegmentInfoParam(collection_name=""),
    lambda: GetIndexBuildProgressParam(collection_name=""),
    lambda: GetCollectionStatisticsParam(collection_name=""),
])
def test_required_identifiers_must_not_be_empty(build):
    with pytest.raises(ParamException):
        build()

# --- Name lists and show type ---

@pytest.mark.parametrize("names", [[""], ["a", None], ["a", " "]])
def test_name_lists_reject_empty_elements(names):
    with pytest.raises(ParamException):
        ShowCollectionsParam(collection_names=names)
    with pytest.raises(ParamException):
        ShowPartitionsParam(collection_name="c", partition_names=names)
    with pytest.raises(ParamException):
        QueryParam(collection_name="c", expr="id > 0", out_fields=names)

def test_show_collections_show_type():
    assert ShowCollectionsParam().show_type == ShowType.ALL
    assert ShowCollectionsParam(collection_names=[]).show_type == ShowType.ALL
    assert ShowCollectionsParam(collection_names=["c1", "c2"]).show_type == ShowType.IN_MEMORY

def test_show_partitions_show_type():
    assert ShowPartitionsParam(collection_name="c").show_type == ShowType.ALL
    assert ShowPartitionsParam(collection_name="c", partition_names=["p"]).show_type == ShowType.IN_MEMORY

def test_show_type_is_read_only():
    param = ShowCollectionsParam(collection_names=["c"])
    with pytest.raises((AttributeError, ValidationError)):
        param.show_type = ShowType.ALL

@pytest.mark.parametrize("build", [
    lambda: FlushParam(collection_names=[]),
    lambda: LoadPartitionsParam(collection_name="c", partition_names=[]),
    lambda: ReleasePartitionsParam(collection_name="c", partition_names=[]),
])
def test_subject_name_lists_must_not_be_empty(build):
    with pytest.raises(ParamException):
        build()

# --- Poll settings ---

@pytest.mark.parametrize("build", [
    lambda **kw: LoadCollectionParam(collection_name="c", sync_load=True, **kw),
    lambda **kw: LoadPartitionsParam(collection_name="c", partition_names=["p"], sync_load=True, **kw),
], ids=["load_collection", "load_partitions"])
@pytest.mark.parametrize("settings", [
    {"sync_load_waiting_interval": 0},
    {"sync_load_waiting_interval": -1},
    {"sync_load_waiting_interval": constants.MAX_WAITING_LOADING_INTERVAL + 1},
    {"sync_load_waiting_timeout": 0},
    {"sync_load_waiting_timeout": -1},
    {"sync_load_waiting_timeout": constants.MAX_WAITING_LOADING_TIMEOUT + 1},
    {"sync_load_waiting_interval": True},
    {"sync_load_waiting_interval": "0.5"},
    {"sync_load_waiting_timeout": "60"},
])
def test_load_poll_settings_bounded(build, settings):
    with pytest.raises(ParamException):
        build(**settings)

@pytest.mark.parametrize("settings", [
    {"sync_flush_waiting_interval": 0},
    {"sync_flush_waiting_interval": constants.MAX_WAITING_FLUSHING_INTERVAL + 1},
    {"sync_flush_waiting_timeout": -1},
    {"sync_flush_waiting_timeout": constants.MAX_WAITING_FLUSHING_TIMEOUT + 1},
    {"sync_flush_waiting_interval": True},
    {"sync_flush_waiting_timeout": "10"},
])
def test_flush_poll_settings_bounded(settings):
    with pytest.raises(ParamException):
        FlushParam(collection_names=["c"], sync_flush=True, **settings)

@pytest.mark.parametrize("settings", [
    {"sync_waiting_interval": 0},
    {"sync_waiting_interval": constants.MAX_WAITING_INDEX_INTERVAL + 1},
    {"sync_waiting_timeout": 0},
    {"sync_waiting_timeout": constants.MAX_WAITING_INDEX_TIMEOUT + 1},
    {"sync_waiting_interval": True},
    {"sync_waiting_timeout": "600"},
])
def test_index_poll_settings_bounded(settings):
    with pytest.raises(ParamException):
        CreateIndexParam(
            collection_name="c", field_name="vec", index_type=IndexType.IVF_FLAT,
            metric_type=MetricType.L2, sync_mode=True, **settings)

def test_poll_settings_checked_without_sync_mode():
    with pytest.raises(ParamException):
        LoadCollectionParam(collection_name="c", sync_load=False, sync_load_waiting_interval=0)

def test_poll_settings_defaults_and_limits_accepted():
    param = LoadCollectionParam(
        collection_name="c", sync_load=True,
        sync_load_waiting_interval=constants.MAX_WAITING_LOADING_INTERVAL,
        sync_load_waiting_timeout=constants.MAX_WAITING_LOADING_TIMEOUT)
    assert param.sync_load_waiting_timeout == constants.MAX_WAITING_LOADING_TIMEOUT
    default = LoadCollectionParam(collection_name="c")
    assert default.sync_load is False
    assert default.sync_load_waiting_interval == constants.DEFAULT_WAITING_INTERVAL
    assert default.sync_load_waiting_timeout == constants.DEFAULT_WAITING_LOADING_TIMEOUT

def test_poll_settings_accept_int_seconds():
    param = FlushParam(collection_names=["c"], sync_flush_waiting_interval=1, sync_flush_waiting_timeout=30)
    assert param.sync_flush_waiting_interval == 1.0
    assert isinstance(param.sync_flush_waiting_timeout, float)

def test_sync_flag_must_be_bool():
    with pytest.raises(ParamException):
        FlushParam(collection_names=["c"], sync_flush="yes")

# --- Collections ---

def test_create_collection_valid():
    param = CreateCollectionParam(collection_name="c", field_types=[id_field(), vector_field(128)])
    assert param.shards_num == constants.DEFAULT_SHARDS_NUM
    assert isinstance(param.field_types, tuple)
    assert param.field_types[1].dimension == 128

@pytest.mark.parametrize("build", [
    lambda: CreateCollectionParam(collection_name="c", field_types=[]),
    lambda: CreateCollectionParam(collection_name="c", field_types=[None]),
    lambda: CreateCollectionParam(collection_name="c", shards_num=0, field_types=[id_field()]),
    lambda: CreateCollectionParam(collection_name="", field_types=[id_field()]),
])
def test_create_collection_invalid(build):
    with pytest.raises(ParamException):
        build()

@pytest.mark.parametrize("kwargs", [
    {"name": "", "data_type": DataType.INT64},
    {"name": "f", "data_type": DataType.NONE},
    {"name": "vec", "data_type": DataType.FLOAT_VECTOR},
    {"name": "vec", "data_type": DataType.FLOAT_VECTOR, "dimension": 0},
    {"name": "bin", "data_type": DataType.BINARY_VECTOR, "dimension": 12},
])
def test_field_type_invalid(kwargs):
    with pytest.raises(ParamException):
        FieldType(**kwargs)

def test_field_type_binary_dimension_in_bits():
    assert FieldType(name="bin", data_type=DataType.BINARY_VECTOR, dimension=16).dimension == 16

# --- Indexes ---

@pytest.mark.parametrize("kwargs", [
    {"index_type": IndexType.INVALID, "metric_type": MetricType.L2},
    {"index_type": IndexType.IVF_FLAT, "metric_type": MetricType.INVALID},
    {"index_type": IndexType.IVF_FLAT, "metric_type": MetricType.L2, "extra_param": ""},
    {"index_type": "NOT_AN_INDEX", "metric_type": MetricType.L2},
])
def test_create_index_invalid(kwargs):
    with pytest.raises(ParamException):
        CreateIndexParam(collection_name="c", field_name="vec", **kwargs)

def test_create_index_accepts_enum_names():
    param = CreateIndexParam(
        collection_name="c", field_name="vec", index_type="IVF_FLAT", metric_type="IP",
        extra_param='{"nlist": 1024}')
    assert param.index_type is IndexType.IVF_FLAT
    assert param.metric_type is MetricType.IP
    assert param.sync_mode is False

# --- Insert ---

def test_insert_valid():
    param = InsertParam(collection_name="c", fields=[
        InsertField(name="id", data_type=DataType.INT64, values=[1, 2, 3]),
        InsertField(name="vec", data_type=DataType.FLOAT_VECTOR, values=[[0.1, 0.2], [0.3, 0.4], [0.5, 0.6]]),
        InsertField(name="bin", data_type=DataType.BINARY_VECTOR, values=[b"\x01", b"\x02", b"\x03"]),
        InsertField(name="flag", data_type=DataType.BOOL, values=[True, False, True]),
        InsertField(name="score", data_type=DataType.DOUBLE, values=[1, 2.5, 3.0]),
        InsertField(name="tag", data_type=DataType.VARCHAR, values=["a", "b", "c"]),
    ])
    assert param.row_count == 3
    assert param.partition_name == constants.DEFAULT_PARTITION
    assert param.fields[1].dimension == 2
    assert param.fields[2].dimension == 8
    assert param.fields[0].dimension is None

@pytest.mark.parametrize("data_type, values", [
    (DataType.NONE, [1]),
    (DataType.INT64, []),
    (DataType.INT64, [1, "2"]),
    (DataType.INT64, [True]),
    (DataType.INT8, [128]),
    (DataType.INT32, [1.5]),
    (DataType.BOOL, [1]),
    (DataType.FLOAT, ["x"]),
    (DataType.VARCHAR, [1]),
    (DataType.FLOAT_VECTOR, [[0.1, 0.2], [0.3]]),
    (DataType.FLOAT_VECTOR, [[]]),
    (DataType.FLOAT_VECTOR, [["a", "b"]]),
    (DataType.FLOAT_VECTOR, [b"\x01"]),
    (DataType.BINARY_VECTOR, [[0.1, 0.2]]),
    (DataType.BINARY_VECTOR, [b"\x01", b"\x01\x02"]),
])
def test_insert_field_invalid(data_type, values):
    with pytest.raises(ParamException):
        InsertField(name="f", data_type=data_type, values=values)

def test_insert_row_counts_must_match():
    with pytest.raises(ParamException, match="row count"):
        InsertParam(collection_name="c", fields=[
            InsertField(name="id", data_type=DataType.INT64, values=[1, 2]),
            InsertField(name="vec", data_type=DataType.FLOAT_VECTOR, values=[[0.1]]),
        ])

def test_insert_field_names_unique():
    with pytest.raises(ParamException, match="duplicate"):
        InsertParam(collection_name="c", fields=[
            InsertField(name="id", data_type=DataType.INT64, values=[1]),
            InsertField(name="id", data_type=DataType.INT64, values=[2]),
        ])

def test_insert_needs_fields():
    with pytest.raises(ParamException):
        InsertParam(collection_name="c", fields=[])

# --- Search and distance ---

def search(**kwargs):
    defaults = dict(collection_name="c", vector_field_name="vec", top_k=10, vectors=[[0.1, 0.2]])
    defaults.update(kwargs)
    return SearchParam(**defaults)

def test_search_defaults():
    param = search()
    assert param.metric_type is MetricType.L2
    assert param.round_decimal == -1
    assert param.params == "{}"
    assert param.expr == ""
    assert param.vector_type is DataType.FLOAT_VECTOR

@pytest.mark.parametrize("kwargs", [
    {"top_k": 0},
    {"top_k": -1},
    {"vector_field_name": ""},
    {"vectors": []},
    {"vectors": [[0.1, 0.2], [0.3]]},
    {"vectors": [[0.1, 0.2], b"\x01"]},
    {"vectors": ["not a vector"]},
    {"metric_type": MetricType.INVALID},
    {"metric_type": MetricType.HAMMING},
    {"vectors": [b"\x01"], "metric_type": MetricType.L2},
    {"round_decimal": -2},
    {"round_decimal": constants.MAX_ROUND_DECIMAL + 1},
    {"params": ""},
    {"travel_timestamp": -1},
    {"partition_names": [""]},
])
def test_search_invalid(kwargs):
    with pytest.raises(ParamException):
        search(**kwargs)

def test_search_binary_vectors():
    param = search(vectors=[b"\x01\x02", b"\x03\x04"], metric_type=MetricType.JACCARD)
    assert param.vector_type is DataType.BINARY_VECTOR

@pytest.mark.parametrize("left, right", [
    ([], [[0.1]]),
    ([[0.1]], []),
    ([[0.1, 0.2]], [[0.1]]),
    ([[0.1]], [b"\x01"]),
    ([[0.1, 0.2], [0.3]], [[0.1, 0.2]]),
])
def test_calc_distance_invalid(left, right):
    with pytest.raises(ParamException):
        CalcDistanceParam(vectors_left=left, vectors_right=right)

def test_vectors_copied_on_construction():
    vector = [0.1, 0.2]
    code = bytearray(b"\x01")
    param = search(vectors=[vector])
    binary = search(vectors=[code], metric_type=MetricType.HAMMING)
    distance = CalcDistanceParam(vectors_left=[vector], vectors_right=[vector])

    vector.append(0.5)
    code[0] = 0xff

    assert param.vectors == ((0.1, 0.2),)
    assert distance.vectors_left == ((0.1, 0.2),)
    assert distance.vectors_right == ((0.1, 0.2),)
    assert binary.vectors == (b"\x01",)
    assert hash(param) == hash(search(vectors=[[0.1, 0.2]]))

def test_insert_values_copied_on_construction():
    rows = [[0.1, 0.2], [0.3, 0.4]]
    field = InsertField(name="vec", data_type=DataType.FLOAT_VECTOR, values=rows)

    rows[0].append(0.5)
    rows.append([0.7, 0.8])

    assert field.values == ((0.1, 0.2), (0.3, 0.4))
    assert field.row_count == 2
    assert field.dimension == 2

def test_calc_distance_valid():
    param = CalcDistanceParam(vectors_left=[[0.1, 0.2]], vectors_right=[[0.3, 0.4], [0.5, 0.6]], metric_type="IP")
    assert param.vector_type is DataType.FLOAT_VECTOR
    assert param.metric_type is MetricType.IP

# --- Connection ---

def test_connect_param_defaults():
    param = ConnectParam()
    assert param.target == f"{constants.DEFAULT_HOST}:{constants.DEFAULT_PORT}"
    assert param.timeout is None
    assert param.secure is False

@pytest.mark.parametrize("kwargs", [
    {"host": ""},
    {"port": -1},
    {"port": 65536},
    {"port": "19530"},
    {"connect_timeout": 0},
    {"keep_alive_time": 0},
    {"keep_alive_timeout": -1},
    {"idle_timeout": 0},
    {"timeout": 0},
    {"connect_timeout": True},
    {"connect_timeout": "5"},
    {"keep_alive_time": "30"},
    {"keep_alive_timeout": True},
    {"idle_timeout": "60"},
    {"timeout": False},
    {"timeout": "1.5"},
])
def test_connect_param_invalid(kwargs):
    with pytest.raises(ParamException):
        ConnectParam(**kwargs)

def test_connect_param_channel_options():
    param = ConnectParam(
        keep_alive_time=30, keep_alive_timeout=5, keep_alive_without_calls=True, idle_timeout=60,
        grpc_options=[("grpc.lb_policy_name", "pick_first")])
    options = dict(param.channel_options())
    assert options["grpc.max_receive_message_length"] == -1
    assert options["grpc.keepalive_time_ms"] == 30000
    assert options["grpc.keepalive_timeout_ms"] == 5000
    assert options["grpc.keepalive_permit_without_calls"] == 1
    assert options["grpc.client_idle_timeout_ms"] == 60000
    assert options["grpc.lb_policy_name"] == "pick_first"

def test_connect_param_keep_alive_disabled_by_default():
    options = dict(ConnectParam().channel_options())
    assert "grpc.keepalive_time_ms" not in options
