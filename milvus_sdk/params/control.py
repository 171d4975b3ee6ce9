from .base import NonEmptyStr, ParamBase


class GetMetricsParam(ParamBase):
    """``request`` is a JSON string understood by the server, e.g. ``'{"metric_type": "system_info"}'``."""
    request: NonEmptyStr


class GetPersistentSegmentInfoParam(ParamBase):
    collection_name: NonEmptyStr


class GetQuerySegmentInfoParam(ParamBase):
    collection_name: NonEmptyStr
