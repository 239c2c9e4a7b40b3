"""Canonical text renderings of wire trees.

JSON output is canonical: sorted keys, compact separators, UTF-8 text. JSON has no token
for non-finite doubles, so NaN and the infinities are written as the strings ``"NaN"``,
``"Infinity"`` and ``"-Infinity"``, which the primitive decoder accepts for
``floatValue``. YAML keeps them as native ``.nan``/``.inf`` scalars.
"""

from __future__ import annotations

import json
import math
from typing import Any, Final, cast

import yaml

from flyteir.codec._traversal import fold
from flyteir.errors import DecodeError, ValidationError

_TOO_DEEP: Final[str] = "wire tree too deep to render as text"


def dumps_json(wire: object) -> str:
    """Render ``wire`` as canonical JSON.

    Raises:
        ValidationError: the tree nests deeper than the json encoder can render.
    """
    try:
        return json.dumps(
            _replace_non_finite(wire),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except RecursionError as exc:
        raise ValidationError(_TOO_DEEP) from exc


def loads_json(text: str | bytes) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"invalid JSON ({exc})") from exc
    except RecursionError as exc:
        raise DecodeError("invalid JSON (nesting too deep)") from exc


def dumps_yaml(wire: object) -> str:
    try:
        rendered = yaml.safe_dump(
            wire,
            sort_keys=True,
            default_flow_style=False,
            allow_unicode=True,
            width=120,
        )
    except RecursionError as exc:
        raise ValidationError(_TOO_DEEP) from exc
    if not rendered.endswith("\n"):
        rendered = rendered + "\n"
    return rendered


def loads_yaml(text: str | bytes) -> Any:
    try:
        return cast("object", yaml.safe_load(text))
    except yaml.YAMLError as exc:
        raise DecodeError(f"invalid YAML ({exc})") from exc
    except RecursionError as exc:
        raise DecodeError("invalid YAML (nesting too deep)") from exc


def _replace_non_finite(wire: object) -> object:
    def children(value: object) -> tuple[object, ...]:
        if isinstance(value, dict):
            return tuple(value.values())
        if isinstance(value, (list, tuple)):
            return tuple(value)
        return ()

    def combine(value: object, nested: list[object]) -> object:
        if isinstance(value, dict):
            return dict(zip(value, nested, strict=True))
        if isinstance(value, (list, tuple)):
            return nested
        if isinstance(value, float) and not math.isfinite(value):
            if math.isnan(value):
                return "NaN"
            return "Infinity" if value > 0 else "-Infinity"
        return value

    return fold(wire, children, combine)


__all__ = ["dumps_json", "dumps_yaml", "loads_json", "loads_yaml"]
