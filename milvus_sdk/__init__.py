"""
Milvus Python SDK
"""
__version__ = "2.0.0"

from .client import MilvusServiceClient
from .exceptions import (
    MilvusException,
    ParamException,
    MilvusConnectionError,
    MilvusApiError,
)
from .models import (
    DataType,
    IndexType,
    MetricType,
    ShowType,
    ConnectionState,
    ResultStatus,
    RpcStatus,
    R,
)
from .params import *  # noqa: F401,F403
from .params import __all__ as _params_all

__all__ = [
    "MilvusServiceClient",
    # Exceptions
    "MilvusException",
    "ParamException",
    "MilvusConnectionError",
    "MilvusApiError",
    # Models & Enums
    "DataType",
    "IndexType",
    "MetricType",
    "ShowType",
    "ConnectionState",
    "ResultStatus",
    "RpcStatus",
    "R",
] + _params_all
