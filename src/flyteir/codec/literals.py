"""Primitive, scalar, literal and binding codec.

``serialize_*`` and ``deserialize_*`` are exact inverses for every constructible value.
Timestamps and durations travel as ``{seconds, nanos}`` integer pairs. Floats are kept as
Python floats, so NaN and the infinities stay in the wire tree until text rendering.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType
from typing import Final

from flyteir.codec._traversal import fold
from flyteir.codec._wire import (
    _construct,
    _Cursor,
    _expect_bool,
    _expect_double,
    _expect_int32,
    _expect_int64,
    _expect_list,
    _expect_map,
    _expect_object,
    _expect_oneof,
    _expect_str,
    _located,
)
from flyteir.codec.interface import deserialize_blob_type, serialize_blob_type
from flyteir.codec.wire import (
    WireBinding,
    WireBindingData,
    WireBlob,
    WireLiteral,
    WireOutputReference,
    WirePrimitive,
    WireScalar,
)
from flyteir.domain._validation import _thaw_json
from flyteir.domain.literals import (
    Binding,
    BindingData,
    Blob,
    BlobMetadata,
    Duration,
    Literal,
    OutputReference,
    Primitive,
    PrimitiveKind,
    Scalar,
    Timestamp,
)

_PRIMITIVE_FIELDS: Final[dict[PrimitiveKind, str]] = {
    PrimitiveKind.INTEGER: "integer",
    PrimitiveKind.FLOAT: "floatValue",
    PrimitiveKind.STRING: "stringValue",
    PrimitiveKind.BOOLEAN: "boolean",
    PrimitiveKind.DATETIME: "datetime",
    PrimitiveKind.DURATION: "duration",
}
_PRIMITIVE_VARIANTS: Final[tuple[str, ...]] = tuple(_PRIMITIVE_FIELDS.values())
_SCALAR_VARIANTS: Final[tuple[str, ...]] = ("primitive", "generic", "blob")
_LITERAL_VARIANTS: Final[tuple[str, ...]] = ("scalar", "collection", "map")
_BINDING_VARIANTS: Final[tuple[str, ...]] = ("scalar", "collection", "map", "outputReference")


# Primitive


def serialize_primitive(primitive: Primitive) -> WirePrimitive:
    value = primitive.value
    if isinstance(value, (Timestamp, Duration)):
        return {  # type: ignore[return-value]
            _PRIMITIVE_FIELDS[primitive.kind]: {"seconds": value.seconds, "nanos": value.nanos}
        }
    return {_PRIMITIVE_FIELDS[primitive.kind]: value}  # type: ignore[return-value]


def deserialize_primitive(raw: object, path: str = "WirePrimitive") -> Primitive:
    variant, payload = _expect_oneof(raw, path, _PRIMITIVE_VARIANTS)
    field_path = f"{path}.{variant}"
    if variant == "integer":
        return Primitive.of_integer(_expect_int64(payload, field_path))
    if variant == "floatValue":
        return Primitive.of_float(_expect_double(payload, field_path))
    if variant == "stringValue":
        return Primitive.of_string(_expect_str(payload, field_path))
    if variant == "boolean":
        return Primitive.of_boolean(_expect_bool(payload, field_path))
    seconds, nanos = _seconds_and_nanos(payload, field_path)
    if variant == "datetime":
        return Primitive.of_datetime(_construct(field_path, Timestamp, seconds, nanos))
    return Primitive.of_duration(_construct(field_path, Duration, seconds, nanos))


def _seconds_and_nanos(raw: object, path: str) -> tuple[int, int]:
    payload = _expect_object(raw, path, optional={"seconds", "nanos"})
    seconds = _expect_int64(payload.get("seconds", 0), f"{path}.seconds")
    nanos = _expect_int32(payload.get("nanos", 0), f"{path}.nanos")
    return seconds, nanos


# Scalar


def serialize_scalar(scalar: Scalar) -> WireScalar:
    if scalar.primitive is not None:
        return {"primitive": serialize_primitive(scalar.primitive)}
    if scalar.generic is not None:
        return {"generic": _thaw_json(scalar.generic)}  # type: ignore[typeddict-item]
    assert scalar.blob is not None
    return {"blob": serialize_blob(scalar.blob)}


def deserialize_scalar(raw: object, path: str = "WireScalar") -> Scalar:
    variant, payload = _expect_oneof(raw, path, _SCALAR_VARIANTS)
    field_path = f"{path}.{variant}"
    if variant == "primitive":
        return Scalar(primitive=deserialize_primitive(payload, field_path))
    if variant == "generic":
        return _construct(field_path, Scalar, generic=_expect_map(payload, field_path))
    return Scalar(blob=deserialize_blob(payload, field_path))


def serialize_blob(blob: Blob) -> WireBlob:
    return {"metadata": {"type": serialize_blob_type(blob.metadata.type)}, "uri": blob.uri}


def deserialize_blob(raw: object, path: str = "WireBlob") -> Blob:
    payload = _expect_object(raw, path, required={"metadata", "uri"})
    metadata = _expect_object(payload["metadata"], f"{path}.metadata", required={"type"})
    return _construct(
        path,
        Blob,
        metadata=BlobMetadata(deserialize_blob_type(metadata["type"], f"{path}.metadata.type")),
        uri=_expect_str(payload["uri"], f"{path}.uri"),
    )


# Literal


def _literal_children(literal: Literal) -> Sequence[Literal]:
    if literal.collection is not None:
        return literal.collection
    if literal.map is not None:
        return tuple(literal.map.values())
    return ()


def serialize_literal(literal: Literal) -> WireLiteral:
    def combine(node: Literal, nested: list[WireLiteral]) -> WireLiteral:
        if node.scalar is not None:
            return {"scalar": serialize_scalar(node.scalar)}
        if node.collection is not None:
            return {"collection": nested}
        assert node.map is not None
        return {"map": dict(zip(node.map, nested, strict=True))}

    return fold(literal, _literal_children, combine)


def deserialize_literal(raw: object, path: str = "WireLiteral") -> Literal:
    def combine(cursor: _Cursor, nested: list[Literal]) -> Literal:
        with _located(cursor):
            variant, payload = _expect_oneof(cursor.raw, "", _LITERAL_VARIANTS)
            if variant == "scalar":
                return Literal(scalar=deserialize_scalar(payload, ".scalar"))
        if variant == "collection":
            return Literal(collection=tuple(nested))
        return Literal(map=MappingProxyType(dict(zip(payload, nested, strict=True))))

    return fold(_Cursor(raw, path), _container_children(_LITERAL_VARIANTS), combine)


def serialize_literal_map(literals: Mapping[str, Literal]) -> dict[str, WireLiteral]:
    return {name: serialize_literal(literal) for name, literal in literals.items()}


def deserialize_literal_map(raw: object, path: str = "WireLiteralMap") -> dict[str, Literal]:
    return {
        name: deserialize_literal(value, f"{path}.{name}")
        for name, value in _expect_map(raw, path).items()
    }


def _container_children(
    variants: tuple[str, ...],
) -> Callable[[_Cursor], tuple[_Cursor, ...]]:
    """Child cursors for the ``collection``/``map`` variants shared by literals and bindings."""

    def children(cursor: _Cursor) -> tuple[_Cursor, ...]:
        with _located(cursor):
            variant, payload = _expect_oneof(cursor.raw, "", variants)
            if variant == "collection":
                items = _expect_list(payload, ".collection")
                return tuple(
                    cursor.child(item, f".collection[{index}]") for index, item in enumerate(items)
                )
            if variant == "map":
                entries = _expect_map(payload, ".map")
                return tuple(cursor.child(item, f".map.{key}") for key, item in entries.items())
        return ()

    return children


# Binding


def serialize_output_reference(reference: OutputReference) -> WireOutputReference:
    return {"nodeId": reference.node_id, "var": reference.var}


def deserialize_output_reference(
    raw: object, path: str = "WireOutputReference"
) -> OutputReference:
    payload = _expect_object(raw, path, required={"nodeId", "var"})
    return _construct(
        path,
        OutputReference,
        node_id=_expect_str(payload["nodeId"], f"{path}.nodeId"),
        var=_expect_str(payload["var"], f"{path}.var"),
    )


def _binding_children(data: BindingData) -> Sequence[BindingData]:
    if data.collection is not None:
        return data.collection
    if data.map is not None:
        return tuple(data.map.values())
    return ()


def serialize_binding_data(data: BindingData) -> WireBindingData:
    def combine(node: BindingData, nested: list[WireBindingData]) -> WireBindingData:
        if node.scalar is not None:
            return {"scalar": serialize_scalar(node.scalar)}
        if node.collection is not None:
            return {"collection": nested}
        if node.map is not None:
            return {"map": dict(zip(node.map, nested, strict=True))}
        assert node.promise is not None
        return {"outputReference": serialize_output_reference(node.promise)}

    return fold(data, _binding_children, combine)


def deserialize_binding_data(raw: object, path: str = "WireBindingData") -> BindingData:
    def combine(cursor: _Cursor, nested: list[BindingData]) -> BindingData:
        with _located(cursor):
            variant, payload = _expect_oneof(cursor.raw, "", _BINDING_VARIANTS)
            if variant == "scalar":
                return BindingData(scalar=deserialize_scalar(payload, ".scalar"))
            if variant == "outputReference":
                return BindingData(
                    promise=deserialize_output_reference(payload, ".outputReference")
                )
        if variant == "collection":
            return BindingData(collection=tuple(nested))
        return BindingData(map=MappingProxyType(dict(zip(payload, nested, strict=True))))

    return fold(_Cursor(raw, path), _container_children(_BINDING_VARIANTS), combine)


def serialize_binding(binding: Binding) -> WireBinding:
    return {"var": binding.var, "binding": serialize_binding_data(binding.binding)}


def deserialize_binding(raw: object, path: str = "WireBinding") -> Binding:
    payload = _expect_object(raw, path, required={"var", "binding"})
    return _construct(
        path,
        Binding,
        var=_expect_str(payload["var"], f"{path}.var"),
        binding=deserialize_binding_data(payload["binding"], f"{path}.binding"),
    )


def serialize_bindings(bindings: Sequence[Binding]) -> list[WireBinding]:
    return [serialize_binding(binding) for binding in bindings]


def deserialize_bindings(raw: object, path: str) -> tuple[Binding, ...]:
    return tuple(
        deserialize_binding(item, f"{path}[{index}]")
        for index, item in enumerate(_expect_list(raw, path))
    )


__all__ = [
    "deserialize_binding",
    "deserialize_binding_data",
    "deserialize_bindings",
    "deserialize_blob",
    "deserialize_literal",
    "deserialize_literal_map",
    "deserialize_output_reference",
    "deserialize_primitive",
    "deserialize_scalar",
    "serialize_binding",
    "serialize_binding_data",
    "serialize_bindings",
    "serialize_blob",
    "serialize_literal",
    "serialize_literal_map",
    "serialize_output_reference",
    "serialize_primitive",
    "serialize_scalar",
]
