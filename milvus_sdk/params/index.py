"""
Parameters for index operations.
"""
from pydantic import Field, StrictBool

from .. import constants
from .base import NonEmptyStr, ParamBase, Seconds, ValidIndexType, ValidMetricType


class CreateIndexParam(ParamBase):
    """
    Build an index on a vector field.

    ``extra_param`` is passed to the server verbatim (a JSON object such as
    ``'{"nlist": 1024}'``). With ``sync_mode`` the call waits until the
    server reports the index finished, and returns the server's failure
    reason as soon as the build is reported failed.
    """
    collection_name: NonEmptyStr
    field_name: NonEmptyStr
    index_type: ValidIndexType
    metric_type: ValidMetricType
    extra_param: NonEmptyStr = constants.DEFAULT_INDEX_PARAMS
    sync_mode: StrictBool = False
    sync_waiting_interval: Seconds = Field(
        constants.DEFAULT_WAITING_INTERVAL, gt=0, le=constants.MAX_WAITING_INDEX_INTERVAL)
    sync_waiting_timeout: Seconds = Field(
        constants.DEFAULT_WAITING_INDEX_TIMEOUT, gt=0, le=constants.MAX_WAITING_INDEX_TIMEOUT)


class DescribeIndexParam(ParamBase):
    collection_name: NonEmptyStr
    field_name: NonEmptyStr


class GetIndexStateParam(ParamBase):
    collection_name: NonEmptyStr
    field_name: NonEmptyStr


class GetIndexBuildProgressParam(ParamBase):
    collection_name: NonEmptyStr


class DropIndexParam(ParamBase):
    collection_name: NonEmptyStr
    field_name: NonEmptyStr
