"""
Connection settings for ``MilvusServiceClient``.
"""
from typing import Any, List, Optional, Tuple

from pydantic import Field, StrictBool, StrictInt

from .. import constants
from .base import NonEmptyStr, ParamBase, Seconds


def _ms(seconds: float) -> int:
    return int(seconds * 1000)


class ConnectParam(ParamBase):
    """
    Where the server lives and how the gRPC channel to it behaves.

    All durations are in seconds. ``keep_alive_time=None`` disables
    keep-alive pings. ``timeout`` is the deadline applied to every call;
    ``None`` means no deadline.
    """
    host: NonEmptyStr = constants.DEFAULT_HOST
    port: StrictInt = Field(constants.DEFAULT_PORT, ge=0, le=0xFFFF)
    connect_timeout: Seconds = Field(constants.DEFAULT_CONNECT_TIMEOUT, gt=0)
    keep_alive_time: Optional[Seconds] = Field(None, gt=0)
    keep_alive_timeout: Seconds = Field(constants.DEFAULT_KEEP_ALIVE_TIMEOUT, gt=0)
    keep_alive_without_calls: StrictBool = False
    idle_timeout: Seconds = Field(constants.DEFAULT_IDLE_TIMEOUT, gt=0)
    timeout: Optional[Seconds] = Field(None, gt=0)

    secure: StrictBool = False
    root_certs: Optional[bytes] = None
    private_key: Optional[bytes] = None
    certificate_chain: Optional[bytes] = None
    grpc_options: Tuple[Tuple[str, Any], ...] = ()

    @property
    def target(self) -> str:
        return f"{self.host}:{self.port}"

    def channel_options(self) -> List[Tuple[str, Any]]:
        """gRPC channel arguments for these settings, followed by ``grpc_options``."""
        options: List[Tuple[str, Any]] = [
            ("grpc.max_receive_message_length", -1),
            ("grpc.keepalive_timeout_ms", _ms(self.keep_alive_timeout)),
            ("grpc.keepalive_permit_without_calls", int(self.keep_alive_without_calls)),
            ("grpc.client_idle_timeout_ms", _ms(self.idle_timeout)),
        ]
        if self.keep_alive_time is not None:
            options.append(("grpc.keepalive_time_ms", _ms(self.keep_alive_time)))
        options.extend(self.grpc_options)
        return options
