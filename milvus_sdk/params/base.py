"""
Common machinery for request parameters.

Every parameter model validates itself on construction and is frozen
afterwards. A failed construction raises ``ParamException`` rather than
pydantic's ``ValidationError`` so callers only ever see one error kind.
"""
import numbers
from typing import Annotated, Any, Sequence, Tuple

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, ValidationError

from ..exceptions import ParamException
from ..models import DataType, IndexType, MetricType


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return value


NonEmptyStr = Annotated[str, AfterValidator(_not_blank)]
NameList = Tuple[NonEmptyStr, ...]


def _metric_set(value: MetricType) -> MetricType:
    if value is MetricType.INVALID:
        raise ValueError("metric type is invalid")
    return value


def _index_type_set(value: IndexType) -> IndexType:
    if value is IndexType.INVALID:
        raise ValueError("index type is invalid")
    return value


ValidMetricType = Annotated[MetricType, AfterValidator(_metric_set)]
ValidIndexType = Annotated[IndexType, AfterValidator(_index_type_set)]


def _seconds(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"expected a number of seconds, got {type(value).__name__}")
    return float(value)


# Rejects bools and numeric strings that a plain float field would coerce.
Seconds = Annotated[float, BeforeValidator(_seconds)]


def _describe(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(p) for p in err["loc"])
        message = err["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        parts.append(f"{location}: {message}" if location else message)
    return f"Invalid {error.title}: " + "; ".join(parts)


class ParamBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ParamException(_describe(e)) from e

# --- Vector batch checks ---

def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def vector_kind(vector: Any) -> DataType:
    """Classify one vector as FLOAT_VECTOR or BINARY_VECTOR, or raise ValueError."""
    if isinstance(vector, (bytes, bytearray)):
        if not vector:
            raise ValueError("binary vector must not be empty")
        return DataType.BINARY_VECTOR
    if isinstance(vector, (list, tuple)):
        if not vector:
            raise ValueError("float vector must not be empty")
        if not all(_is_number(x) for x in vector):
            raise ValueError("float vector must contain only numbers")
        return DataType.FLOAT_VECTOR
    raise ValueError(f"unsupported vector type {type(vector).__name__}, expected a list of floats or bytes")


def check_vectors(vectors: Sequence[Any]) -> Tuple[DataType, int]:
    """
    Check that a batch holds vectors of a single kind and a single dimension.

    Returns the kind and the dimension. For binary vectors the dimension is
    counted in bits.
    """
    if not vectors:
        raise ValueError("vector batch must not be empty")
    kind = vector_kind(vectors[0])
    length = len(vectors[0])
    for vector in vectors[1:]:
        if vector_kind(vector) is not kind:
            raise ValueError("all vectors in a batch must be of the same type")
        if len(vector) != length:
            raise ValueError(f"all vectors in a batch must have the same dimension, got {length} and {len(vector)}")
    return kind, length * 8 if kind is DataType.BINARY_VECTOR else length


def _freeze_row(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(value)
    if isinstance(value, bytearray):
        return bytes(value)
    return value


def _freeze_rows(rows: Any) -> Any:
    if isinstance(rows, (list, tuple)):
        return tuple(_freeze_row(row) for row in rows)
    return rows


# A batch of rows or vectors copied at construction, so later changes to the
# caller's lists do not reach the frozen model.
Rows = Annotated[Tuple[Any, ...], BeforeValidator(_freeze_rows)]
