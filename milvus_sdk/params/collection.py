"""
Parameters for collection-level operations.
"""
from typing import Dict, Optional, Tuple

from pydantic import Field, StrictBool, StrictInt, model_validator

from .. import constants
from ..models import DataType, ShowType
from .base import NameList, NonEmptyStr, ParamBase, Seconds


class FieldType(ParamBase):
    """Schema of one collection field. Vector fields need a ``dimension``."""
    name: NonEmptyStr
    data_type: DataType
    description: str = ""
    primary_key: StrictBool = False
    auto_id: StrictBool = False
    dimension: Optional[StrictInt] = Field(None, gt=0)
    type_params: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_type(self) -> "FieldType":
        if self.data_type is DataType.NONE:
            raise ValueError("data_type must be set")
        if self.data_type.is_vector and self.dimension is None:
            raise ValueError(f"vector field '{self.name}' requires a dimension")
        if self.data_type is DataType.BINARY_VECTOR and self.dimension % 8:
            raise ValueError(f"binary vector field '{self.name}' needs a dimension divisible by 8")
        return self


class CreateCollectionParam(ParamBase):
    collection_name: NonEmptyStr
    shards_num: StrictInt = Field(constants.DEFAULT_SHARDS_NUM, gt=0)
    description: str = ""
    field_types: Tuple[FieldType, ...] = Field(min_length=1)


class DescribeCollectionParam(ParamBase):
    collection_name: NonEmptyStr


class DropCollectionParam(ParamBase):
    collection_name: NonEmptyStr


class HasCollectionParam(ParamBase):
    collection_name: NonEmptyStr


class LoadCollectionParam(ParamBase):
    """
    Load a collection into query-node memory.

    With ``sync_load`` the call returns only once the server reports the
    collection fully loaded, polling every ``sync_load_waiting_interval``
    seconds for at most ``sync_load_waiting_timeout`` seconds.
    """
    collection_name: NonEmptyStr
    sync_load: StrictBool = False
    sync_load_waiting_interval: Seconds = Field(
        constants.DEFAULT_WAITING_INTERVAL, gt=0, le=constants.MAX_WAITING_LOADING_INTERVAL)
    sync_load_waiting_timeout: Seconds = Field(
        constants.DEFAULT_WAITING_LOADING_TIMEOUT, gt=0, le=constants.MAX_WAITING_LOADING_TIMEOUT)


class ReleaseCollectionParam(ParamBase):
    collection_name: NonEmptyStr


class GetCollectionStatisticsParam(ParamBase):
    """``flush_collection`` flushes (and waits for the flush) before reading statistics."""
    collection_name: NonEmptyStr
    flush_collection: StrictBool = True


class ShowCollectionsParam(ParamBase):
    collection_names: NameList = ()

    @property
    def show_type(self) -> ShowType:
        return ShowType.IN_MEMORY if self.collection_names else ShowType.ALL


class FlushParam(ParamBase):
    """
    Flush inserted data of the given collections to sealed segments.

    With ``sync_flush`` the call waits until every segment the server chose
    to flush reports the flushed state.
    """
    collection_names: NameList = Field(min_length=1)
    sync_flush: StrictBool = False
    sync_flush_waiting_interval: Seconds = Field(
        constants.DEFAULT_WAITING_INTERVAL, gt=0, le=constants.MAX_WAITING_FLUSHING_INTERVAL)
    sync_flush_waiting_timeout: Seconds = Field(
        constants.DEFAULT_WAITING_FLUSHING_TIMEOUT, gt=0, le=constants.MAX_WAITING_FLUSHING_TIMEOUT)
