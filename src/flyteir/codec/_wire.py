"""Strict decode helpers for untyped wire values.

Every helper reports failures as :class:`~flyteir.errors.DecodeError` with a
``"<path>: <reason>"`` message, where the path names the offending wire field.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Final, NoReturn, TypeVar

from flyteir.constants import INT64_MAX, INT64_MIN
from flyteir.errors import DecodeError

T = TypeVar("T")

# Protobuf JSON mapping for non-finite doubles.
NON_FINITE_FLOATS: Final[dict[str, float]] = {
    "NaN": math.nan,
    "Infinity": math.inf,
    "-Infinity": -math.inf,
}
_INT64_TEXT: Final[re.Pattern[str]] = re.compile(r"-?[0-9]+")


def _decode_fail(path: str, message: str) -> NoReturn:
    raise DecodeError(f"{path}: {message}")


def _expect_object(
    value: object,
    path: str,
    *,
    required: set[str] | frozenset[str] = frozenset(),
    optional: set[str] | frozenset[str] = frozenset(),
) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        _decode_fail(path, f"expected object, got {type(value).__name__}")

    parsed: dict[str, Any] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            _decode_fail(path, f"object keys must be strings, got {type(key).__name__}")
        parsed[key] = item

    allowed = required | optional
    unknown = sorted(key for key in parsed if key not in allowed)
    if unknown:
        _decode_fail(path, f"unexpected fields: {unknown}")

    missing = sorted(key for key in required if key not in parsed)
    if missing:
        _decode_fail(path, f"missing required fields: {missing}")

    return parsed


def _expect_oneof(value: object, path: str, variants: tuple[str, ...]) -> tuple[str, Any]:
    """Return ``(field, payload)`` for an object that sets exactly one of ``variants``."""
    parsed = _expect_object(value, path, optional=frozenset(variants))
    present = [name for name in variants if name in parsed]
    if len(present) != 1:
        _decode_fail(path, f"exactly one of {list(variants)} must be set, got {present}")
    name = present[0]
    return name, parsed[name]


def _expect_map(value: object, path: str) -> dict[str, Any]:
    """Return a string-keyed object whose keys are data, not field names."""
    if not isinstance(value, Mapping):
        _decode_fail(path, f"expected object, got {type(value).__name__}")
    for key in value:
        if not isinstance(key, str):
            _decode_fail(path, f"object keys must be strings, got {type(key).__name__}")
    return dict(value)


def _expect_list(value: object, path: str) -> list[Any]:
    if not isinstance(value, (list, tuple)):
        _decode_fail(path, f"expected array, got {type(value).__name__}")
    return list(value)


def _expect_str(value: object, path: str) -> str:
    if not isinstance(value, str):
        _decode_fail(path, f"expected string, got {type(value).__name__}")
    return value


def _expect_str_list(value: object, path: str) -> list[str]:
    return [
        _expect_str(item, f"{path}[{index}]")
        for index, item in enumerate(_expect_list(value, path))
    ]


def _expect_bool(value: object, path: str) -> bool:
    if not isinstance(value, bool):
        _decode_fail(path, f"expected boolean, got {type(value).__name__}")
    return value


def _expect_int64(value: object, path: str) -> int:
    """Accept an integer or its decimal string form (how JSON gateways render int64)."""
    if isinstance(value, str):
        if _INT64_TEXT.fullmatch(value) is None:
            _decode_fail(path, f"expected int64, got non-numeric string {value!r}")
        if len(value.lstrip("-").lstrip("0")) > 19:
            _decode_fail(path, "out of signed 64-bit range")
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        _decode_fail(path, f"expected int64, got {type(value).__name__}")
    if not INT64_MIN <= value <= INT64_MAX:
        _decode_fail(path, "out of signed 64-bit range")
    return value


def _expect_int32(value: object, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        _decode_fail(path, f"expected int32, got {type(value).__name__}")
    if not -(1 << 31) <= value < (1 << 31):
        _decode_fail(path, "out of signed 32-bit range")
    return value


def _expect_double(value: object, path: str) -> float:
    if isinstance(value, str):
        if value in NON_FINITE_FLOATS:
            return NON_FINITE_FLOATS[value]
        _decode_fail(path, f"expected double, got string {value!r}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        _decode_fail(path, f"expected double, got {type(value).__name__}")
    try:
        return float(value)
    except OverflowError:
        _decode_fail(path, "out of double range")


@dataclass(frozen=True, slots=True)
class _Cursor:
    """Position of a value inside a deeply nested wire tree.

    Paths are rendered only when decoding fails, so a deep tree does not keep one
    full path string alive per pending node.
    """

    raw: object
    segment: str
    parent: _Cursor | None = None

    def child(self, raw: object, segment: str) -> _Cursor:
        return _Cursor(raw=raw, segment=segment, parent=self)

    def render(self) -> str:
        parts: list[str] = []
        cursor: _Cursor | None = self
        while cursor is not None:
            parts.append(cursor.segment)
            cursor = cursor.parent
        return "".join(reversed(parts))


@contextmanager
def _located(cursor: _Cursor) -> Iterator[None]:
    """Prefix decode errors raised with cursor-relative paths (``""``, ``".field"``)."""
    try:
        yield
    except DecodeError as exc:
        raise DecodeError(f"{cursor.render()}{exc}") from exc


def _construct(path: str, factory: Callable[..., T], *args: object, **kwargs: object) -> T:
    """Build a domain value, reporting constructor rejections as decode errors at ``path``."""
    try:
        return factory(*args, **kwargs)
    except DecodeError:
        raise
    except ValueError as exc:
        raise DecodeError(f"{path}: {exc}") from exc


__all__ = ["NON_FINITE_FLOATS"]
