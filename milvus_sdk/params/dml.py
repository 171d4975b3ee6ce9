"""
Parameters for inserting, deleting, searching and querying data.
"""
from typing import Optional, Tuple

from pydantic import Field, StrictInt, model_validator

from .. import constants
from ..models import DataType, MetricType
from .base import NameList, NonEmptyStr, ParamBase, Rows, ValidMetricType, _is_number, check_vectors

_INT_RANGES = {
    DataType.INT8: (-2 ** 7, 2 ** 7 - 1),
    DataType.INT16: (-2 ** 15, 2 ** 15 - 1),
    DataType.INT32: (-2 ** 31, 2 ** 31 - 1),
    DataType.INT64: (-2 ** 63, 2 ** 63 - 1),
}

_BINARY_METRICS = frozenset({
    MetricType.HAMMING,
    MetricType.JACCARD,
    MetricType.TANIMOTO,
    MetricType.SUBSTRUCTURE,
    MetricType.SUPERSTRUCTURE,
})


def _check_metric_fits(metric_type: MetricType, kind: DataType) -> None:
    if (metric_type in _BINARY_METRICS) != (kind is DataType.BINARY_VECTOR):
        raise ValueError(f"metric type {metric_type.value} cannot be used with {kind.value} data")


class InsertField(ParamBase):
    """
    One column of rows to insert.

    ``values`` must match ``data_type``: a list of float lists for
    FLOAT_VECTOR, ``bytes`` for BINARY_VECTOR, ints for the integer types,
    bools for BOOL, numbers for FLOAT/DOUBLE and strings for STRING/VARCHAR.
    """
    name: NonEmptyStr
    data_type: DataType
    values: Rows = Field(min_length=1)

    @model_validator(mode="after")
    def _check_values(self) -> "InsertField":
        data_type = self.data_type
        if data_type is DataType.NONE:
            raise ValueError(f"field '{self.name}' has no data type")
        if data_type.is_vector:
            try:
                kind, _ = check_vectors(self.values)
            except ValueError as e:
                raise ValueError(f"field '{self.name}': {e}") from None
            if kind is not data_type:
                raise ValueError(f"field '{self.name}' is {data_type.value} but holds {kind.value} data")
        elif data_type is DataType.BOOL:
            self._check_each(lambda v: isinstance(v, bool))
        elif data_type in _INT_RANGES:
            low, high = _INT_RANGES[data_type]
            self._check_each(lambda v: isinstance(v, int) and not isinstance(v, bool) and low <= v <= high)
        elif data_type in (DataType.FLOAT, DataType.DOUBLE):
            self._check_each(_is_number)
        elif data_type in (DataType.STRING, DataType.VARCHAR):
            self._check_each(lambda v: isinstance(v, str))
        return self

    def _check_each(self, accepts) -> None:
        for row, value in enumerate(self.values):
            if not accepts(value):
                raise ValueError(f"field '{self.name}' row {row}: {value!r} is not a valid {self.data_type.value} value")

    @property
    def row_count(self) -> int:
        return len(self.values)

    @property
    def dimension(self) -> Optional[int]:
        if not self.data_type.is_vector:
            return None
        return check_vectors(self.values)[1]


class InsertParam(ParamBase):
    collection_name: NonEmptyStr
    partition_name: NonEmptyStr = constants.DEFAULT_PARTITION
    fields: Tuple[InsertField, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_rows(self) -> "InsertParam":
        row_counts = {f.row_count for f in self.fields}
        if len(row_counts) > 1:
            raise ValueError(f"row count differs between fields: {sorted(row_counts)}")
        names = [f.name for f in self.fields]
        if len(set(names)) != len(names):
            raise ValueError("duplicate field names")
        return self

    @property
    def row_count(self) -> int:
        return self.fields[0].row_count


class DeleteParam(ParamBase):
    collection_name: NonEmptyStr
    partition_name: NonEmptyStr = constants.DEFAULT_PARTITION
    expr: NonEmptyStr


class SearchParam(ParamBase):
    """
    Approximate nearest neighbour search.

    ``vectors`` is a batch of target vectors, either all float lists or all
    ``bytes``, of one dimension. ``params`` is the index-specific search
    parameter JSON, e.g. ``'{"nprobe": 10}'``. ``round_decimal`` of -1
    leaves distances unrounded.
    """
    collection_name: NonEmptyStr
    partition_names: NameList = ()
    metric_type: ValidMetricType = MetricType.L2
    vector_field_name: NonEmptyStr
    top_k: StrictInt = Field(gt=0)
    expr: str = ""
    out_fields: NameList = ()
    vectors: Rows
    round_decimal: StrictInt = Field(constants.DEFAULT_ROUND_DECIMAL, ge=-1, le=constants.MAX_ROUND_DECIMAL)
    params: NonEmptyStr = constants.DEFAULT_SEARCH_PARAMS
    travel_timestamp: StrictInt = Field(0, ge=0)
    guarantee_timestamp: StrictInt = Field(0, ge=0)

    @model_validator(mode="after")
    def _check_vectors(self) -> "SearchParam":
        kind, _ = check_vectors(self.vectors)
        _check_metric_fits(self.metric_type, kind)
        return self

    @property
    def vector_type(self) -> DataType:
        return check_vectors(self.vectors)[0]


class QueryParam(ParamBase):
    collection_name: NonEmptyStr
    partition_names: NameList = ()
    out_fields: NameList = ()
    expr: NonEmptyStr
    travel_timestamp: StrictInt = Field(0, ge=0)
    guarantee_timestamp: StrictInt = Field(0, ge=0)


class CalcDistanceParam(ParamBase):
    """Pairwise distances between two vector batches of the same type and dimension."""
    vectors_left: Rows
    vectors_right: Rows
    metric_type: ValidMetricType = MetricType.L2

    @model_validator(mode="after")
    def _check_sides(self) -> "CalcDistanceParam":
        try:
            left_kind, left_dim = check_vectors(self.vectors_left)
        except ValueError as e:
            raise ValueError(f"left vectors: {e}") from None
        try:
            right_kind, right_dim = check_vectors(self.vectors_right)
        except ValueError as e:
            raise ValueError(f"right vectors: {e}") from None
        if left_kind is not right_kind:
            raise ValueError("left and right vectors must be of the same type")
        if left_dim != right_dim:
            raise ValueError(f"left and right vectors differ in dimension: {left_dim} vs {right_dim}")
        _check_metric_fits(self.metric_type, left_kind)
        return self

    @property
    def vector_type(self) -> DataType:
        return check_vectors(self.vectors_left)[0]
