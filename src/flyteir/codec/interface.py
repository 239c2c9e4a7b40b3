"""Literal type, variable and typed interface codec."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from flyteir.codec._traversal import fold
from flyteir.codec._wire import (
    _construct,
    _Cursor,
    _expect_map,
    _expect_object,
    _expect_oneof,
    _expect_str,
    _located,
)
from flyteir.codec.wire import WireBlobType, WireLiteralType, WireTypedInterface, WireVariable
from flyteir.domain.interface import BlobType, LiteralType, TypedInterface, Variable

_LITERAL_TYPE_VARIANTS: Final[tuple[str, ...]] = (
    "simple",
    "collectionType",
    "mapValueType",
    "blob",
)


def serialize_blob_type(blob_type: BlobType) -> WireBlobType:
    return {"format": blob_type.format, "dimensionality": blob_type.dimensionality.value}


def deserialize_blob_type(raw: object, path: str = "WireBlobType") -> BlobType:
    payload = _expect_object(raw, path, required={"format", "dimensionality"})
    return _construct(
        path,
        BlobType,
        format=_expect_str(payload["format"], f"{path}.format"),
        dimensionality=_expect_str(payload["dimensionality"], f"{path}.dimensionality"),
    )


def serialize_literal_type(literal_type: LiteralType) -> WireLiteralType:
    def children(node: LiteralType) -> tuple[LiteralType, ...]:
        if node.collection_type is not None:
            return (node.collection_type,)
        if node.map_value_type is not None:
            return (node.map_value_type,)
        return ()

    def combine(node: LiteralType, nested: list[WireLiteralType]) -> WireLiteralType:
        if node.simple is not None:
            return {"simple": node.simple.value}
        if node.collection_type is not None:
            return {"collectionType": nested[0]}
        if node.map_value_type is not None:
            return {"mapValueType": nested[0]}
        assert node.blob is not None
        return {"blob": serialize_blob_type(node.blob)}

    return fold(literal_type, children, combine)


def deserialize_literal_type(raw: object, path: str = "WireLiteralType") -> LiteralType:
    def children(cursor: _Cursor) -> tuple[_Cursor, ...]:
        with _located(cursor):
            variant, payload = _expect_oneof(cursor.raw, "", _LITERAL_TYPE_VARIANTS)
        if variant in ("collectionType", "mapValueType"):
            return (cursor.child(payload, f".{variant}"),)
        return ()

    def combine(cursor: _Cursor, nested: list[LiteralType]) -> LiteralType:
        with _located(cursor):
            variant, payload = _expect_oneof(cursor.raw, "", _LITERAL_TYPE_VARIANTS)
            if variant == "simple":
                return _construct("", LiteralType, simple=_expect_str(payload, ".simple"))
            if variant == "blob":
                return LiteralType(blob=deserialize_blob_type(payload, ".blob"))
        if variant == "collectionType":
            return LiteralType(collection_type=nested[0])
        return LiteralType(map_value_type=nested[0])

    return fold(_Cursor(raw, path), children, combine)


def serialize_variable(variable: Variable) -> WireVariable:
    wire: WireVariable = {"type": serialize_literal_type(variable.literal_type)}
    if variable.description:
        wire["description"] = variable.description
    return wire


def deserialize_variable(raw: object, path: str = "WireVariable") -> Variable:
    payload = _expect_object(raw, path, required={"type"}, optional={"description"})
    return Variable(
        literal_type=deserialize_literal_type(payload["type"], f"{path}.type"),
        description=_expect_str(payload.get("description", ""), f"{path}.description"),
    )


def serialize_typed_interface(interface: TypedInterface) -> WireTypedInterface:
    return {
        "inputs": _serialize_variables(interface.inputs),
        "outputs": _serialize_variables(interface.outputs),
    }


def deserialize_typed_interface(raw: object, path: str = "WireTypedInterface") -> TypedInterface:
    payload = _expect_object(raw, path, optional={"inputs", "outputs"})
    return TypedInterface(
        inputs=_deserialize_variables(payload.get("inputs", {}), f"{path}.inputs"),
        outputs=_deserialize_variables(payload.get("outputs", {}), f"{path}.outputs"),
    )


def _serialize_variables(variables: Mapping[str, Variable]) -> dict[str, WireVariable]:
    return {name: serialize_variable(variable) for name, variable in variables.items()}


def _deserialize_variables(raw: object, path: str) -> dict[str, Variable]:
    payload = _expect_map(raw, path)
    variables: dict[str, Variable] = {}
    for name, value in payload.items():
        variables[name] = deserialize_variable(value, f"{path}.{name}")
    return variables


__all__ = [
    "deserialize_blob_type",
    "deserialize_literal_type",
    "deserialize_typed_interface",
    "deserialize_variable",
    "serialize_blob_type",
    "serialize_literal_type",
    "serialize_typed_interface",
    "serialize_variable",
]
