from .base import NonEmptyStr, ParamBase


class CreateAliasParam(ParamBase):
    collection_name: NonEmptyStr
    alias: NonEmptyStr


class AlterAliasParam(ParamBase):
    collection_name: NonEmptyStr
    alias: NonEmptyStr


class DropAliasParam(ParamBase):
    alias: NonEmptyStr
