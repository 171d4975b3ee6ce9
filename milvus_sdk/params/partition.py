"""
Parameters for partition-level operations.
"""
from pydantic import Field, StrictBool

from .. import constants
from ..models import ShowType
from .base import NameList, NonEmptyStr, ParamBase, Seconds


class CreatePartitionParam(ParamBase):
    collection_name: NonEmptyStr
    partition_name: NonEmptyStr


class DropPartitionParam(ParamBase):
    collection_name: NonEmptyStr
    partition_name: NonEmptyStr


class HasPartitionParam(ParamBase):
    collection_name: NonEmptyStr
    partition_name: NonEmptyStr


class LoadPartitionsParam(ParamBase):
    """Load partitions into memory; ``sync_load`` waits like ``LoadCollectionParam``."""
    collection_name: NonEmptyStr
    partition_names: NameList = Field(min_length=1)
    sync_load: StrictBool = False
    sync_load_waiting_interval: Seconds = Field(
        constants.DEFAULT_WAITING_INTERVAL, gt=0, le=constants.MAX_WAITING_LOADING_INTERVAL)
    sync_load_waiting_timeout: Seconds = Field(
        constants.DEFAULT_WAITING_LOADING_TIMEOUT, gt=0, le=constants.MAX_WAITING_LOADING_TIMEOUT)


class ReleasePartitionsParam(ParamBase):
    collection_name: NonEmptyStr
    partition_names: NameList = Field(min_length=1)


class GetPartitionStatisticsParam(ParamBase):
    collection_name: NonEmptyStr
    partition_name: NonEmptyStr


class ShowPartitionsParam(ParamBase):
    collection_name: NonEmptyStr
    partition_names: NameList = ()

    @property
    def show_type(self) -> ShowType:
        return ShowType.IN_MEMORY if self.partition_names else ShowType.ALL
