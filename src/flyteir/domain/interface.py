"""Declared value types and the typed input/output contract of tasks and workflows."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

from flyteir.domain._validation import (
    _as_enum,
    _as_instance,
    _as_mapping_of,
    _as_optional_instance,
    _as_str,
    _exactly_one,
    _hash_key,
    _set,
)


class SimpleType(StrEnum):
    NONE = "NONE"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"
    DATETIME = "DATETIME"
    DURATION = "DURATION"
    BINARY = "BINARY"
    ERROR = "ERROR"
    STRUCT = "STRUCT"


class BlobDimensionality(StrEnum):
    SINGLE = "SINGLE"
    MULTIPART = "MULTIPART"


class LiteralTypeKind(StrEnum):
    SIMPLE = "simple"
    COLLECTION_TYPE = "collection_type"
    MAP_VALUE_TYPE = "map_value_type"
    BLOB = "blob"


@dataclass(frozen=True, slots=True)
class BlobType:
    format: str = ""
    dimensionality: BlobDimensionality = BlobDimensionality.SINGLE

    def __post_init__(self) -> None:
        _set(self, "format", _as_str(self.format, "BlobType.format", allow_empty=True))
        _set(
            self,
            "dimensionality",
            _as_enum(BlobDimensionality, self.dimensionality, "BlobType.dimensionality"),
        )


@dataclass(frozen=True, slots=True)
class LiteralType:
    """Type descriptor: a simple type, a blob, or a collection/map of another type."""

    simple: SimpleType | None = None
    collection_type: LiteralType | None = None
    map_value_type: LiteralType | None = None
    blob: BlobType | None = None

    def __post_init__(self) -> None:
        if self.simple is not None:
            _set(self, "simple", _as_enum(SimpleType, self.simple, "LiteralType.simple"))
        _as_optional_instance(self.collection_type, LiteralType, "LiteralType.collection_type")
        _as_optional_instance(self.map_value_type, LiteralType, "LiteralType.map_value_type")
        _as_optional_instance(self.blob, BlobType, "LiteralType.blob")
        _exactly_one(
            "LiteralType",
            simple=self.simple,
            collection_type=self.collection_type,
            map_value_type=self.map_value_type,
            blob=self.blob,
        )

    @property
    def kind(self) -> LiteralTypeKind:
        if self.simple is not None:
            return LiteralTypeKind.SIMPLE
        if self.collection_type is not None:
            return LiteralTypeKind.COLLECTION_TYPE
        if self.map_value_type is not None:
            return LiteralTypeKind.MAP_VALUE_TYPE
        return LiteralTypeKind.BLOB

    @classmethod
    def of_simple(cls, simple: SimpleType) -> LiteralType:
        return cls(simple=simple)

    @classmethod
    def of_collection(cls, element_type: LiteralType) -> LiteralType:
        return cls(collection_type=element_type)

    @classmethod
    def of_map(cls, value_type: LiteralType) -> LiteralType:
        return cls(map_value_type=value_type)

    @classmethod
    def of_blob(cls, blob: BlobType) -> LiteralType:
        return cls(blob=blob)


@dataclass(frozen=True, slots=True)
class Variable:
    literal_type: LiteralType
    description: str = ""

    def __post_init__(self) -> None:
        _as_instance(self.literal_type, LiteralType, "Variable.literal_type")
        _set(
            self,
            "description",
            _as_str(self.description, "Variable.description", allow_empty=True),
        )

    @classmethod
    def of_simple(cls, simple: SimpleType, description: str = "") -> Variable:
        return cls(literal_type=LiteralType.of_simple(simple), description=description)


def _empty_variables() -> Mapping[str, Variable]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class TypedInterface:
    """Named input and output variables. Key order carries no meaning."""

    inputs: Mapping[str, Variable] = field(default_factory=_empty_variables)
    outputs: Mapping[str, Variable] = field(default_factory=_empty_variables)

    def __post_init__(self) -> None:
        _set(self, "inputs", _as_mapping_of(self.inputs, Variable, "TypedInterface.inputs"))
        _set(self, "outputs", _as_mapping_of(self.outputs, Variable, "TypedInterface.outputs"))

    def __hash__(self) -> int:
        return hash((_hash_key(self.inputs), _hash_key(self.outputs)))


__all__ = [
    "BlobDimensionality",
    "BlobType",
    "LiteralType",
    "LiteralTypeKind",
    "SimpleType",
    "TypedInterface",
    "Variable",
]
