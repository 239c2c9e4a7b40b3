"""Strict constructor-time coercion helpers shared by the IR value objects."""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import NoReturn, TypeVar

from flyteir.constants import INT64_MAX, INT64_MIN

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
FrozenJSON = JSONScalar | tuple["FrozenJSON", ...] | Mapping[str, "FrozenJSON"]

T = TypeVar("T")
TEnum = TypeVar("TEnum", bound=Enum)

_MAX_STRUCT_DEPTH = 64


def _fail(path: str, message: str) -> NoReturn:
    raise ValueError(f"{path}: {message}")


def _set(obj: object, name: str, value: object) -> None:
    object.__setattr__(obj, name, value)


def _as_str(value: object, path: str, *, allow_empty: bool = False) -> str:
    if not isinstance(value, str):
        _fail(path, f"expected string, got {type(value).__name__}")
    if not allow_empty and not value:
        _fail(path, "must not be empty")
    return value


def _as_optional_str(value: object, path: str) -> str | None:
    if value is None:
        return None
    return _as_str(value, path)


def _as_bool(value: object, path: str) -> bool:
    if isinstance(value, bool):
        return value
    _fail(path, f"expected boolean, got {type(value).__name__}")


def _as_int64(value: object, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        _fail(path, f"expected integer, got {type(value).__name__}")
    if not INT64_MIN <= value <= INT64_MAX:
        _fail(path, "out of signed 64-bit range")
    return value


def _as_float(value: object, path: str) -> float:
    # Non-finite values are legal IEEE-754 doubles and survive the wire untouched.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        _fail(path, f"expected number, got {type(value).__name__}")
    try:
        return float(value)
    except OverflowError:
        _fail(path, "out of double range")


def _as_enum(enum_type: type[TEnum], value: object, path: str) -> TEnum:
    if isinstance(value, enum_type):
        return value
    if not isinstance(value, str):
        _fail(path, f"expected string enum value, got {type(value).__name__}")
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(sorted(str(item.value) for item in enum_type))
        _fail(path, f"invalid value {value!r}; expected one of: {allowed}")


def _as_instance(value: object, expected: type[T], path: str) -> T:
    if not isinstance(value, expected):
        _fail(path, f"expected {expected.__name__}, got {type(value).__name__}")
    return value


def _as_optional_instance(value: object, expected: type[T], path: str) -> T | None:
    if value is None:
        return None
    return _as_instance(value, expected, path)


def _as_sequence(value: object, path: str) -> tuple[object, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(value)
    _fail(path, f"expected sequence, got {type(value).__name__}")


def _as_str_tuple(value: object, path: str, *, allow_empty_items: bool = False) -> tuple[str, ...]:
    items = _as_sequence(value, path)
    return tuple(
        _as_str(item, f"{path}[{index}]", allow_empty=allow_empty_items)
        for index, item in enumerate(items)
    )


def _as_tuple_of(value: object, expected: type[T], path: str) -> tuple[T, ...]:
    items = _as_sequence(value, path)
    return tuple(
        _as_instance(item, expected, f"{path}[{index}]") for index, item in enumerate(items)
    )


def _as_mapping_of(value: object, expected: type[T], path: str) -> Mapping[str, T]:
    if not isinstance(value, Mapping):
        _fail(path, f"expected mapping, got {type(value).__name__}")
    parsed: dict[str, T] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            _fail(path, f"keys must be strings, got {type(key).__name__}")
        parsed[key] = _as_instance(item, expected, f"{path}.{key}")
    return MappingProxyType(parsed)


def _exactly_one(path: str, **candidates: object) -> str:
    present = [name for name, candidate in candidates.items() if candidate is not None]
    if len(present) != 1:
        names = ", ".join(candidates)
        _fail(path, f"exactly one of {names} must be set, got {len(present)}")
    return present[0]


def _freeze_json(value: object, path: str, *, depth: int = 0) -> FrozenJSON:
    if depth > _MAX_STRUCT_DEPTH:
        _fail(path, f"nesting exceeds max depth {_MAX_STRUCT_DEPTH}")
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            _fail(path, "float values must be finite")
        return value
    if isinstance(value, (list, tuple)):
        return tuple(
            _freeze_json(item, f"{path}[{index}]", depth=depth + 1)
            for index, item in enumerate(value)
        )
    if isinstance(value, Mapping):
        frozen: dict[str, FrozenJSON] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                _fail(path, f"object key must be string, got {type(key).__name__}")
            frozen[key] = _freeze_json(item, f"{path}.{key}", depth=depth + 1)
        return MappingProxyType(frozen)
    _fail(path, f"value is not JSON-serializable ({type(value).__name__})")


def _thaw_json(value: FrozenJSON) -> JSONValue:
    if isinstance(value, tuple):
        return [_thaw_json(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _thaw_json(item) for key, item in value.items()}
    return value


def _hash_key(value: object) -> object:
    """Hashable stand-in for a read-only mapping or tuple; key order does not count."""
    if isinstance(value, Mapping):
        return frozenset((key, _hash_key(item)) for key, item in value.items())
    if isinstance(value, tuple):
        return tuple(_hash_key(item) for item in value)
    return value
