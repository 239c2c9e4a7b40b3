"""Typed runtime values: primitives, scalars, literals and binding data.

Timestamps and durations are kept as two integers (seconds and nanoseconds) end to end.
Converting through a float would silently lose nanosecond precision for any instant
further than a few months from the epoch.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import StrEnum
from types import MappingProxyType

from flyteir.constants import NANOS_PER_SECOND
from flyteir.domain._validation import (
    FrozenJSON,
    _as_bool,
    _as_enum,
    _as_float,
    _as_instance,
    _as_int64,
    _as_mapping_of,
    _as_optional_instance,
    _as_str,
    _as_tuple_of,
    _exactly_one,
    _fail,
    _freeze_json,
    _hash_key,
    _set,
)
from flyteir.domain.interface import BlobType

UTC = timezone.utc
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MICROS_PER_SECOND = 1_000_000
_NANOS_PER_MICRO = 1_000


@dataclass(frozen=True, slots=True)
class Timestamp:
    """Absolute UTC instant as epoch seconds plus a non-negative nanosecond offset."""

    seconds: int
    nanos: int = 0

    def __post_init__(self) -> None:
        _set(self, "seconds", _as_int64(self.seconds, "Timestamp.seconds"))
        nanos = _as_int64(self.nanos, "Timestamp.nanos")
        if not 0 <= nanos < NANOS_PER_SECOND:
            _fail("Timestamp.nanos", "must be within 0..999999999")
        _set(self, "nanos", nanos)

    @classmethod
    def from_datetime(cls, value: datetime) -> Timestamp:
        if value.tzinfo is None or value.utcoffset() is None:
            _fail("Timestamp", "datetime must be timezone-aware")
        delta = value - _EPOCH
        return cls(
            seconds=delta.days * 86_400 + delta.seconds,
            nanos=delta.microseconds * _NANOS_PER_MICRO,
        )

    def to_datetime(self) -> datetime:
        """Return an aware UTC datetime; sub-microsecond digits are truncated."""
        try:
            return _EPOCH + timedelta(
                seconds=self.seconds, microseconds=self.nanos // _NANOS_PER_MICRO
            )
        except OverflowError as exc:
            raise ValueError(f"Timestamp: {self.seconds}s is outside datetime range") from exc


@dataclass(frozen=True, slots=True)
class Duration:
    """Signed span of time; ``nanos`` carries the same sign as ``seconds``."""

    seconds: int
    nanos: int = 0

    def __post_init__(self) -> None:
        seconds = _as_int64(self.seconds, "Duration.seconds")
        nanos = _as_int64(self.nanos, "Duration.nanos")
        if not -NANOS_PER_SECOND < nanos < NANOS_PER_SECOND:
            _fail("Duration.nanos", "must be within -999999999..999999999")
        if (seconds > 0 and nanos < 0) or (seconds < 0 and nanos > 0):
            _fail("Duration", "seconds and nanos must have the same sign")
        _set(self, "seconds", seconds)
        _set(self, "nanos", nanos)

    @classmethod
    def from_timedelta(cls, value: timedelta) -> Duration:
        total_micros = (value.days * 86_400 + value.seconds) * _MICROS_PER_SECOND
        total_micros += value.microseconds
        sign = -1 if total_micros < 0 else 1
        whole, micros = divmod(abs(total_micros), _MICROS_PER_SECOND)
        return cls(seconds=sign * whole, nanos=sign * micros * _NANOS_PER_MICRO)

    def to_timedelta(self) -> timedelta:
        """Return a timedelta; sub-microsecond digits are truncated toward zero."""
        micros = abs(self.nanos) // _NANOS_PER_MICRO
        return timedelta(seconds=self.seconds, microseconds=-micros if self.nanos < 0 else micros)


class PrimitiveKind(StrEnum):
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    DURATION = "duration"


PrimitiveValue = int | float | str | bool | Timestamp | Duration


@dataclass(frozen=True, slots=True, eq=False)
class Primitive:
    """One typed primitive value.

    Equality treats NaN as equal to NaN so that a float primitive always compares equal to
    its own decoded wire form.
    """

    kind: PrimitiveKind
    value: PrimitiveValue

    def __post_init__(self) -> None:
        kind = _as_enum(PrimitiveKind, self.kind, "Primitive.kind")
        _set(self, "kind", kind)
        path = f"Primitive.{kind.value}"
        value = self.value
        if kind is PrimitiveKind.INTEGER:
            value = _as_int64(value, path)
        elif kind is PrimitiveKind.FLOAT:
            value = _as_float(value, path)
        elif kind is PrimitiveKind.STRING:
            value = _as_str(value, path, allow_empty=True)
        elif kind is PrimitiveKind.BOOLEAN:
            value = _as_bool(value, path)
        elif kind is PrimitiveKind.DATETIME:
            if isinstance(value, datetime):
                value = Timestamp.from_datetime(value)
            value = _as_instance(value, Timestamp, path)
        else:
            if isinstance(value, timedelta):
                value = Duration.from_timedelta(value)
            value = _as_instance(value, Duration, path)
        _set(self, "value", value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Primitive):
            return NotImplemented
        if self.kind is not other.kind:
            return False
        if self.kind is PrimitiveKind.FLOAT and _is_nan(self.value) and _is_nan(other.value):
            return True
        return self.value == other.value

    def __hash__(self) -> int:
        if _is_nan(self.value):
            return hash((self.kind, "nan"))
        return hash((self.kind, self.value))

    @classmethod
    def of_integer(cls, value: int) -> Primitive:
        return cls(PrimitiveKind.INTEGER, value)

    @classmethod
    def of_float(cls, value: float) -> Primitive:
        return cls(PrimitiveKind.FLOAT, value)

    @classmethod
    def of_string(cls, value: str) -> Primitive:
        return cls(PrimitiveKind.STRING, value)

    @classmethod
    def of_boolean(cls, value: bool) -> Primitive:
        return cls(PrimitiveKind.BOOLEAN, value)

    @classmethod
    def of_datetime(cls, value: Timestamp | datetime) -> Primitive:
        return cls(PrimitiveKind.DATETIME, value)  # type: ignore[arg-type]

    @classmethod
    def of_duration(cls, value: Duration | timedelta) -> Primitive:
        return cls(PrimitiveKind.DURATION, value)  # type: ignore[arg-type]


def _is_nan(value: object) -> bool:
    return isinstance(value, float) and math.isnan(value)


@dataclass(frozen=True, slots=True)
class BlobMetadata:
    type: BlobType

    def __post_init__(self) -> None:
        _as_instance(self.type, BlobType, "BlobMetadata.type")


@dataclass(frozen=True, slots=True)
class Blob:
    metadata: BlobMetadata
    uri: str

    def __post_init__(self) -> None:
        _as_instance(self.metadata, BlobMetadata, "Blob.metadata")
        _set(self, "uri", _as_str(self.uri, "Blob.uri"))


class ScalarKind(StrEnum):
    PRIMITIVE = "primitive"
    GENERIC = "generic"
    BLOB = "blob"


@dataclass(frozen=True, slots=True)
class Scalar:
    primitive: Primitive | None = None
    generic: Mapping[str, FrozenJSON] | None = None
    blob: Blob | None = None

    def __post_init__(self) -> None:
        _as_optional_instance(self.primitive, Primitive, "Scalar.primitive")
        _as_optional_instance(self.blob, Blob, "Scalar.blob")
        if self.generic is not None:
            if not isinstance(self.generic, Mapping):
                _fail("Scalar.generic", f"expected mapping, got {type(self.generic).__name__}")
            _set(self, "generic", _freeze_json(self.generic, "Scalar.generic"))
        _exactly_one("Scalar", primitive=self.primitive, generic=self.generic, blob=self.blob)

    def __hash__(self) -> int:
        return hash((self.primitive, _hash_key(self.generic), self.blob))

    @property
    def kind(self) -> ScalarKind:
        if self.primitive is not None:
            return ScalarKind.PRIMITIVE
        if self.generic is not None:
            return ScalarKind.GENERIC
        return ScalarKind.BLOB

    @classmethod
    def of_primitive(cls, primitive: Primitive) -> Scalar:
        return cls(primitive=primitive)

    @classmethod
    def of_generic(cls, struct: Mapping[str, object]) -> Scalar:
        return cls(generic=struct)  # type: ignore[arg-type]

    @classmethod
    def of_blob(cls, blob: Blob) -> Scalar:
        return cls(blob=blob)


class LiteralKind(StrEnum):
    SCALAR = "scalar"
    COLLECTION = "collection"
    MAP = "map"


@dataclass(frozen=True, slots=True)
class Literal:
    """A scalar, an ordered collection of literals, or a string-keyed map of literals."""

    scalar: Scalar | None = None
    collection: tuple[Literal, ...] | None = None
    map: Mapping[str, Literal] | None = None

    def __post_init__(self) -> None:
        _as_optional_instance(self.scalar, Scalar, "Literal.scalar")
        if self.collection is not None:
            _set(self, "collection", _as_tuple_of(self.collection, Literal, "Literal.collection"))
        if self.map is not None:
            _set(self, "map", _as_mapping_of(self.map, Literal, "Literal.map"))
        _exactly_one("Literal", scalar=self.scalar, collection=self.collection, map=self.map)

    def __hash__(self) -> int:
        return hash((self.scalar, self.collection, _hash_key(self.map)))

    @property
    def kind(self) -> LiteralKind:
        if self.scalar is not None:
            return LiteralKind.SCALAR
        if self.collection is not None:
            return LiteralKind.COLLECTION
        return LiteralKind.MAP

    @classmethod
    def of_scalar(cls, scalar: Scalar) -> Literal:
        return cls(scalar=scalar)

    @classmethod
    def of_collection(cls, items: Sequence[Literal]) -> Literal:
        return cls(collection=tuple(items))

    @classmethod
    def of_map(cls, items: Mapping[str, Literal]) -> Literal:
        return cls(map=MappingProxyType(dict(items)))


@dataclass(frozen=True, slots=True)
class OutputReference:
    """Points at output ``var`` of node ``node_id`` in the same workflow template."""

    node_id: str
    var: str

    def __post_init__(self) -> None:
        _set(self, "node_id", _as_str(self.node_id, "OutputReference.node_id"))
        _set(self, "var", _as_str(self.var, "OutputReference.var"))


class BindingDataKind(StrEnum):
    SCALAR = "scalar"
    COLLECTION = "collection"
    MAP = "map"
    PROMISE = "promise"


@dataclass(frozen=True, slots=True)
class BindingData:
    scalar: Scalar | None = None
    collection: tuple[BindingData, ...] | None = None
    map: Mapping[str, BindingData] | None = None
    promise: OutputReference | None = None

    def __post_init__(self) -> None:
        _as_optional_instance(self.scalar, Scalar, "BindingData.scalar")
        _as_optional_instance(self.promise, OutputReference, "BindingData.promise")
        if self.collection is not None:
            _set(
                self,
                "collection",
                _as_tuple_of(self.collection, BindingData, "BindingData.collection"),
            )
        if self.map is not None:
            _set(self, "map", _as_mapping_of(self.map, BindingData, "BindingData.map"))
        _exactly_one(
            "BindingData",
            scalar=self.scalar,
            collection=self.collection,
            map=self.map,
            promise=self.promise,
        )

    def __hash__(self) -> int:
        return hash((self.scalar, self.collection, _hash_key(self.map), self.promise))

    @property
    def kind(self) -> BindingDataKind:
        if self.scalar is not None:
            return BindingDataKind.SCALAR
        if self.collection is not None:
            return BindingDataKind.COLLECTION
        if self.map is not None:
            return BindingDataKind.MAP
        return BindingDataKind.PROMISE

    @classmethod
    def of_scalar(cls, scalar: Scalar) -> BindingData:
        return cls(scalar=scalar)

    @classmethod
    def of_collection(cls, items: Sequence[BindingData]) -> BindingData:
        return cls(collection=tuple(items))

    @classmethod
    def of_map(cls, items: Mapping[str, BindingData]) -> BindingData:
        return cls(map=MappingProxyType(dict(items)))

    @classmethod
    def of_output_reference(cls, reference: OutputReference) -> BindingData:
        return cls(promise=reference)


@dataclass(frozen=True, slots=True)
class Binding:
    var: str
    binding: BindingData

    def __post_init__(self) -> None:
        _set(self, "var", _as_str(self.var, "Binding.var"))
        _as_instance(self.binding, BindingData, "Binding.binding")


__all__ = [
    "Binding",
    "BindingData",
    "BindingDataKind",
    "Blob",
    "BlobMetadata",
    "Duration",
    "Literal",
    "LiteralKind",
    "OutputReference",
    "Primitive",
    "PrimitiveKind",
    "PrimitiveValue",
    "Scalar",
    "ScalarKind",
    "Timestamp",
]
