"""
Custom exceptions for the Milvus SDK.
"""
from typing import Optional


class MilvusException(Exception):
    """Base exception for all Milvus SDK errors."""
    pass


class ParamException(MilvusException, ValueError):
    """Raised when a request parameter fails validation.

    This is the only error an operation's inputs can raise; it always means the
    caller passed something malformed and never reaches the network layer.
    """
    pass


class MilvusConnectionError(MilvusException):
    """Raised when the gRPC channel to the Milvus server cannot be created."""
    pass


class MilvusApiError(MilvusException):
    """Raised by ``R.raise_for_status()`` for a non-successful result."""
    def __init__(
        self,
        message: str,
        status: Optional[str] = None,
        error_code: Optional[int] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.error_code = error_code
        self.details = details

    def __str__(self):
        base_str = super().__str__()
        if self.status:
            base_str += f" (Status: {self.status})"
        if self.error_code is not None:
            base_str += f" (Error Code: {self.error_code})"
        if self.details:
            base_str += f" Details: {self.details}"
        return base_str


def describe_rpc_error(grpc_error: Exception) -> str:
    """Render a ``grpc.RpcError`` as ``"<STATUS CODE NAME>: <details>"``."""
    status_code = None
    details = None
    if hasattr(grpc_error, 'code') and callable(grpc_error.code):
        grpc_status_code = grpc_error.code()
        if hasattr(grpc_status_code, 'name'):
            status_code = grpc_status_code.name
        elif grpc_status_code is not None:
            status_code = str(grpc_status_code)
    if hasattr(grpc_error, 'details') and callable(grpc_error.details):
        details = grpc_error.details()
    if not details:
        details = str(grpc_error)
    if status_code:
        return f"{status_code}: {details}"
    return details
