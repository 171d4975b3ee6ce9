"""
Pydantic models for the Milvus SDK.

These models provide Pythonic, type-hinted representations of the
enumerations callers pass in request parameters and of the uniform
result envelope ``R`` every client operation returns.
"""
from typing import Generic, Optional, TypeVar
from enum import Enum
from pydantic import BaseModel, ConfigDict, model_validator

from .exceptions import MilvusApiError

# --- Enums ---

class DataType(str, Enum):
    """Data type of a collection field."""
    NONE = "NONE"
    BOOL = "BOOL"
    INT8 = "INT8"
    INT16 = "INT16"
    INT32 = "INT32"
    INT64 = "INT64"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    STRING = "STRING"
    VARCHAR = "VARCHAR"
    BINARY_VECTOR = "BINARY_VECTOR"
    FLOAT_VECTOR = "FLOAT_VECTOR"

    @property
    def is_vector(self) -> bool:
        return self in (DataType.BINARY_VECTOR, DataType.FLOAT_VECTOR)


class IndexType(str, Enum):
    """Index algorithm built on a vector field."""
    INVALID = "INVALID"
    FLAT = "FLAT"
    IVF_FLAT = "IVF_FLAT"
    IVF_SQ8 = "IVF_SQ8"
    IVF_PQ = "IVF_PQ"
    HNSW = "HNSW"
    RHNSW_FLAT = "RHNSW_FLAT"
    RHNSW_PQ = "RHNSW_PQ"
    RHNSW_SQ = "RHNSW_SQ"
    ANNOY = "ANNOY"
    BIN_FLAT = "BIN_FLAT"
    BIN_IVF_FLAT = "BIN_IVF_FLAT"


class MetricType(str, Enum):
    """Distance metric for comparing vectors."""
    INVALID = "INVALID"
    L2 = "L2"
    IP = "IP"
    # Binary vector metrics
    HAMMING = "HAMMING"
    JACCARD = "JACCARD"
    TANIMOTO = "TANIMOTO"
    SUBSTRUCTURE = "SUBSTRUCTURE"
    SUPERSTRUCTURE = "SUPERSTRUCTURE"


class ShowType(str, Enum):
    """Which collections or partitions a show request reports."""
    ALL = "ALL"
    IN_MEMORY = "IN_MEMORY"


class ConnectionState(str, Enum):
    """Lifecycle of a client. OPEN -> CLOSED only."""
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ResultStatus(str, Enum):
    """Outcome class of a client operation."""
    SUCCESS = "SUCCESS"
    SERVER_ERROR = "SERVER_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    CLIENT_NOT_CONNECTED = "CLIENT_NOT_CONNECTED"
    WAIT_TIMEOUT = "WAIT_TIMEOUT"

# --- Result envelope ---

T = TypeVar("T")


class RpcStatus(BaseModel):
    """Payload of operations whose remote call only reports a status."""
    model_config = ConfigDict(frozen=True)

    msg: str = "Success"


class R(BaseModel, Generic[T]):
    """
    Uniform wrapper around the outcome of every client operation.

    ``data`` is set if and only if ``status`` is ``SUCCESS``. ``error_code``
    is the server's own error code and is only meaningful for
    ``SERVER_ERROR``.
    """
    model_config = ConfigDict(frozen=True)

    status: ResultStatus
    data: Optional[T] = None
    error_code: Optional[int] = None
    message: str = ""

    @model_validator(mode="after")
    def _payload_matches_status(self) -> "R":
        if (self.status is ResultStatus.SUCCESS) != (self.data is not None):
            raise ValueError("payload must be present if and only if status is SUCCESS")
        return self

    @classmethod
    def success(cls, data: T) -> "R[T]":
        return cls(status=ResultStatus.SUCCESS, data=data, message="Success")

    @classmethod
    def server_error(cls, error_code: int, reason: str) -> "R[T]":
        return cls(status=ResultStatus.SERVER_ERROR, error_code=error_code, message=reason)

    @classmethod
    def transport_error(cls, message: str) -> "R[T]":
        return cls(status=ResultStatus.TRANSPORT_ERROR, message=message)

    @classmethod
    def client_not_connected(cls) -> "R[T]":
        return cls(status=ResultStatus.CLIENT_NOT_CONNECTED, message="Client is not connected")

    @classmethod
    def wait_timeout(cls, message: str) -> "R[T]":
        return cls(status=ResultStatus.WAIT_TIMEOUT, message=message)

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    def raise_for_status(self) -> "R[T]":
        """Raise ``MilvusApiError`` unless this result is a success."""
        if not self.ok:
            raise MilvusApiError(
                "Milvus operation failed",
                status=self.status.value,
                error_code=self.error_code,
                details=self.message or None,
            )
        return self


__all__ = [
    "DataType",
    "IndexType",
    "MetricType",
    "ShowType",
    "ConnectionState",
    "ResultStatus",
    "RpcStatus",
    "R",
]
