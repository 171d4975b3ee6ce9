"""
Conversion utilities between request parameters and Milvus protobuf messages.
"""
import struct
from typing import Any, Dict, List, Sequence

from pymilvus.grpc_gen import common_pb2, milvus_pb2, schema_pb2

from . import constants
from . import models
from .params import (
    CalcDistanceParam,
    CreateCollectionParam,
    CreateIndexParam,
    FieldType,
    InsertField,
    InsertParam,
    SearchParam,
)
from .params.base import check_vectors

# --- Enum Mappings ---

# DataType
_PYDANTIC_TO_GRPC_DATA_TYPE_MAP: Dict[models.DataType, int] = {
    models.DataType.NONE: schema_pb2.DataType.Value("None"),
    models.DataType.BOOL: schema_pb2.DataType.Value("Bool"),
    models.DataType.INT8: schema_pb2.DataType.Value("Int8"),
    models.DataType.INT16: schema_pb2.DataType.Value("Int16"),
    models.DataType.INT32: schema_pb2.DataType.Value("Int32"),
    models.DataType.INT64: schema_pb2.DataType.Value("Int64"),
    models.DataType.FLOAT: schema_pb2.DataType.Value("Float"),
    models.DataType.DOUBLE: schema_pb2.DataType.Value("Double"),
    models.DataType.STRING: schema_pb2.DataType.Value("String"),
    models.DataType.VARCHAR: schema_pb2.DataType.Value("VarChar"),
    models.DataType.BINARY_VECTOR: schema_pb2.DataType.Value("BinaryVector"),
    models.DataType.FLOAT_VECTOR: schema_pb2.DataType.Value("FloatVector"),
}

# ShowType
_PYDANTIC_TO_GRPC_SHOW_TYPE_MAP: Dict[models.ShowType, int] = {
    models.ShowType.ALL: milvus_pb2.ShowType.All,
    models.ShowType.IN_MEMORY: milvus_pb2.ShowType.InMemory,
}

# Vector kind of a search batch
_PLACEHOLDER_TYPE_MAP: Dict[models.DataType, int] = {
    models.DataType.FLOAT_VECTOR: common_pb2.PlaceholderType.FloatVector,
    models.DataType.BINARY_VECTOR: common_pb2.PlaceholderType.BinaryVector,
}

# ScalarField array holding each scalar type
_SCALAR_ARRAY_MAP: Dict[models.DataType, str] = {
    models.DataType.BOOL: "bool_data",
    models.DataType.INT8: "int_data",
    models.DataType.INT16: "int_data",
    models.DataType.INT32: "int_data",
    models.DataType.INT64: "long_data",
    models.DataType.FLOAT: "float_data",
    models.DataType.DOUBLE: "double_data",
    models.DataType.STRING: "string_data",
    models.DataType.VARCHAR: "string_data",
}

PLACEHOLDER_TAG = "$0"


def pydantic_to_grpc_data_type(data_type: models.DataType) -> int:
    return _PYDANTIC_TO_GRPC_DATA_TYPE_MAP[data_type]


def pydantic_to_grpc_show_type(show_type: models.ShowType) -> int:
    return _PYDANTIC_TO_GRPC_SHOW_TYPE_MAP[show_type]

# --- Helpers ---

def key_value_pairs(pairs: Dict[str, Any]) -> List[common_pb2.KeyValuePair]:
    return [common_pb2.KeyValuePair(key=k, value=str(v)) for k, v in pairs.items()]


def float_vector_bytes(vector: Sequence[float]) -> bytes:
    """Little-endian float32 encoding the server expects in placeholder values."""
    return struct.pack(f"<{len(vector)}f", *vector)


def _vector_field(vectors: Sequence[Any]) -> schema_pb2.VectorField:
    kind, dim = check_vectors(vectors)
    field = schema_pb2.VectorField(dim=dim)
    if kind is models.DataType.BINARY_VECTOR:
        field.binary_vector = b"".join(bytes(v) for v in vectors)
    else:
        field.float_vector.data.extend(x for v in vectors for x in v)
    return field

# --- Conversion Functions ---

def pydantic_to_grpc_field_schema(field: FieldType) -> schema_pb2.FieldSchema:
    type_params = dict(field.type_params)
    if field.data_type.is_vector:
        type_params[constants.VECTOR_DIM] = field.dimension
    return schema_pb2.FieldSchema(
        name=field.name,
        description=field.description,
        data_type=pydantic_to_grpc_data_type(field.data_type),
        is_primary_key=field.primary_key,
        autoID=field.auto_id,
        type_params=key_value_pairs(type_params),
    )


def create_collection_request(param: CreateCollectionParam) -> milvus_pb2.CreateCollectionRequest:
    schema = schema_pb2.CollectionSchema(
        name=param.collection_name,
        description=param.description,
        autoID=any(f.auto_id for f in param.field_types),
        fields=[pydantic_to_grpc_field_schema(f) for f in param.field_types],
    )
    return milvus_pb2.CreateCollectionRequest(
        collection_name=param.collection_name,
        schema=schema.SerializeToString(),
        shards_num=param.shards_num,
    )


def pydantic_to_grpc_field_data(field: InsertField) -> schema_pb2.FieldData:
    field_data = schema_pb2.FieldData(
        type=pydantic_to_grpc_data_type(field.data_type),
        field_name=field.name,
    )
    if field.data_type.is_vector:
        field_data.vectors.CopyFrom(_vector_field(field.values))
    else:
        array = getattr(field_data.scalars, _SCALAR_ARRAY_MAP[field.data_type])
        array.data.extend(field.values)
    return field_data


def insert_request(param: InsertParam) -> milvus_pb2.InsertRequest:
    return milvus_pb2.InsertRequest(
        collection_name=param.collection_name,
        partition_name=param.partition_name,
        fields_data=[pydantic_to_grpc_field_data(f) for f in param.fields],
        num_rows=param.row_count,
    )


def placeholder_group(vectors: Sequence[Any]) -> bytes:
    """Serialized ``PlaceholderGroup`` carrying the search targets under tag ``$0``."""
    kind, _ = check_vectors(vectors)
    if kind is models.DataType.BINARY_VECTOR:
        values = [bytes(v) for v in vectors]
    else:
        values = [float_vector_bytes(v) for v in vectors]
    group = common_pb2.PlaceholderGroup(placeholders=[
        common_pb2.PlaceholderValue(tag=PLACEHOLDER_TAG, type=_PLACEHOLDER_TYPE_MAP[kind], values=values),
    ])
    return group.SerializeToString()


def search_request(param: SearchParam) -> milvus_pb2.SearchRequest:
    search_params = {
        constants.VECTOR_FIELD: param.vector_field_name,
        constants.TOP_K: param.top_k,
        constants.METRIC_TYPE: param.metric_type.value,
        constants.ROUND_DECIMAL: param.round_decimal,
        constants.PARAMS: param.params,
    }
    return milvus_pb2.SearchRequest(
        collection_name=param.collection_name,
        partition_names=list(param.partition_names),
        dsl=param.expr,
        dsl_type=common_pb2.DslType.BoolExprV1,
        placeholder_group=placeholder_group(param.vectors),
        output_fields=list(param.out_fields),
        search_params=key_value_pairs(search_params),
        travel_timestamp=param.travel_timestamp,
        guarantee_timestamp=param.guarantee_timestamp,
    )


def calc_distance_request(param: CalcDistanceParam) -> milvus_pb2.CalcDistanceRequest:
    return milvus_pb2.CalcDistanceRequest(
        op_left=milvus_pb2.VectorsArray(data_array=_vector_field(param.vectors_left)),
        op_right=milvus_pb2.VectorsArray(data_array=_vector_field(param.vectors_right)),
        params=key_value_pairs({constants.METRIC_TYPE: param.metric_type.value}),
    )


def create_index_request(param: CreateIndexParam) -> milvus_pb2.CreateIndexRequest:
    extra_params = {
        constants.INDEX_TYPE: param.index_type.value,
        constants.METRIC_TYPE: param.metric_type.value,
        constants.PARAMS: param.extra_param,
    }
    return milvus_pb2.CreateIndexRequest(
        collection_name=param.collection_name,
        field_name=param.field_name,
        extra_params=key_value_pairs(extra_params),
    )
