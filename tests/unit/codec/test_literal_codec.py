"""
flyteir — unit tests for primitive, literal and binding codecs

File: tests/unit/codec/test_literal_codec.py
Last updated: 2026-10-19

Purpose
- Validate lossless wire conversion of runtime values and binding data.

What this test file should cover
- Boundary primitives: int64 limits, non-finite floats, pre-epoch instants, negative spans.
- Nested literal maps and collections with the documented wire shape.
- Output references passing through unchanged.
- Nesting far beyond the interpreter recursion limit.
- Decode errors naming the offending wire path.
"""

from __future__ import annotations

import math
import re
import sys

import pytest

from flyteir.codec import (
    deserialize_binding,
    deserialize_binding_data,
    deserialize_literal,
    deserialize_literal_map,
    deserialize_primitive,
    deserialize_scalar,
    dumps_json,
    dumps_yaml,
    loads_json,
    serialize_binding,
    serialize_binding_data,
    serialize_literal,
    serialize_literal_map,
    serialize_primitive,
    serialize_scalar,
)
from flyteir.constants import INT64_MAX, INT64_MIN
from flyteir.domain import (
    Binding,
    BindingData,
    Blob,
    BlobDimensionality,
    BlobMetadata,
    BlobType,
    Duration,
    Literal,
    OutputReference,
    Primitive,
    Scalar,
    Timestamp,
)
from flyteir.errors import DecodeError, ValidationError

try:
    from hypothesis import given, settings
    from hypothesis import strategies as st
except ModuleNotFoundError:
    _HYPOTHESIS_AVAILABLE = False
else:
    _HYPOTHESIS_AVAILABLE = True

_DEEP = max(10_000, sys.getrecursionlimit() * 3)


def _int_literal(value: int) -> Literal:
    return Literal.of_scalar(Scalar.of_primitive(Primitive.of_integer(value)))


BOUNDARY_PRIMITIVES = [
    Primitive.of_integer(INT64_MIN),
    Primitive.of_integer(INT64_MAX),
    Primitive.of_integer(0),
    Primitive.of_float(-0.0),
    Primitive.of_float(1.5),
    Primitive.of_float(5e-324),
    Primitive.of_float(math.inf),
    Primitive.of_float(-math.inf),
    Primitive.of_float(math.nan),
    Primitive.of_string(""),
    Primitive.of_string("héllo wörld ✓"),
    Primitive.of_boolean(True),
    Primitive.of_boolean(False),
    Primitive.of_datetime(Timestamp(seconds=0)),
    Primitive.of_datetime(Timestamp(seconds=-1, nanos=500_000_000)),
    Primitive.of_datetime(Timestamp(seconds=1_700_000_000, nanos=123_456_789)),
    Primitive.of_duration(Duration(seconds=0)),
    Primitive.of_duration(Duration(seconds=-5, nanos=-1)),
    Primitive.of_duration(Duration(seconds=0, nanos=-999_999_999)),
    Primitive.of_duration(Duration(seconds=86_400 * 365, nanos=999_999_999)),
]


@pytest.mark.parametrize("primitive", BOUNDARY_PRIMITIVES, ids=repr)
def test_boundary_primitives_round_trip_through_wire_and_json(primitive: Primitive) -> None:
    wire = serialize_primitive(primitive)

    assert deserialize_primitive(wire) == primitive
    assert deserialize_primitive(loads_json(dumps_json(wire))) == primitive


def test_primitive_wire_shapes() -> None:
    assert serialize_primitive(Primitive.of_integer(1)) == {"integer": 1}
    assert serialize_primitive(Primitive.of_float(1.5)) == {"floatValue": 1.5}
    assert serialize_primitive(Primitive.of_string("a")) == {"stringValue": "a"}
    assert serialize_primitive(Primitive.of_boolean(False)) == {"boolean": False}
    assert serialize_primitive(Primitive.of_datetime(Timestamp(-1, 500_000_000))) == {
        "datetime": {"seconds": -1, "nanos": 500_000_000}
    }
    assert serialize_primitive(Primitive.of_duration(Duration(-5, -1))) == {
        "duration": {"seconds": -5, "nanos": -1}
    }


def test_non_finite_floats_render_as_json_strings() -> None:
    assert dumps_json(serialize_primitive(Primitive.of_float(math.nan))) == '{"floatValue":"NaN"}'
    assert dumps_json(serialize_primitive(Primitive.of_float(math.inf))) == (
        '{"floatValue":"Infinity"}'
    )
    assert deserialize_primitive({"floatValue": "-Infinity"}) == Primitive.of_float(-math.inf)


def test_int64_accepts_decimal_strings_and_rejects_bool() -> None:
    assert deserialize_primitive({"integer": "9223372036854775807"}) == Primitive.of_integer(
        INT64_MAX
    )
    assert deserialize_primitive({"integer": "-9223372036854775808"}) == Primitive.of_integer(
        INT64_MIN
    )

    with pytest.raises(DecodeError, match="WirePrimitive.integer: expected int64, got bool"):
        deserialize_primitive({"integer": True})
    with pytest.raises(DecodeError, match="WirePrimitive.integer: out of signed 64-bit range"):
        deserialize_primitive({"integer": INT64_MAX + 1})


@pytest.mark.parametrize(
    "text",
    ["1_000", " 7", "7 ", "+5", "", "\u0663", "0x10"],
    ids=[
        "underscore",
        "leading-space",
        "trailing-space",
        "plus-sign",
        "empty",
        "arabic-digit",
        "hex",
    ],
)
def test_int64_strings_must_be_plain_ascii_decimal(text: str) -> None:
    with pytest.raises(DecodeError, match="WirePrimitive.integer: expected int64, got non-numeric"):
        deserialize_primitive({"integer": text})


def test_int64_string_length_is_bounded_before_conversion() -> None:
    assert deserialize_primitive({"integer": "-0007"}) == Primitive.of_integer(-7)

    with pytest.raises(DecodeError, match="WirePrimitive.integer: out of signed 64-bit range"):
        deserialize_primitive({"integer": "9" * 5_000})


def test_float_values_beyond_double_range_are_rejected_with_a_path() -> None:
    huge_json = '{"floatValue":1' + "0" * 400 + "}"

    with pytest.raises(DecodeError, match="WirePrimitive.floatValue: out of double range"):
        deserialize_primitive({"floatValue": 10**400})
    with pytest.raises(DecodeError, match="WirePrimitive.floatValue: out of double range"):
        deserialize_primitive(loads_json(huge_json))
    with pytest.raises(ValueError, match="out of double range"):
        Primitive.of_float(10**400)


def test_time_pairs_default_missing_fields_to_zero() -> None:
    assert deserialize_primitive({"datetime": {}}) == Primitive.of_datetime(Timestamp(0))
    assert deserialize_primitive({"duration": {"nanos": -7}}) == Primitive.of_duration(
        Duration(0, -7)
    )


def test_primitive_decode_errors() -> None:
    with pytest.raises(DecodeError, match="exactly one of"):
        deserialize_primitive({"integer": 1, "boolean": True})
    with pytest.raises(DecodeError, match="exactly one of"):
        deserialize_primitive({})
    with pytest.raises(DecodeError, match="WirePrimitive.datetime: Timestamp.nanos"):
        deserialize_primitive({"datetime": {"seconds": 0, "nanos": 1_000_000_000}})
    with pytest.raises(DecodeError, match="WirePrimitive.duration: Duration: seconds and nanos"):
        deserialize_primitive({"duration": {"seconds": 1, "nanos": -1}})
    with pytest.raises(DecodeError, match="expected double, got string 'nan'"):
        deserialize_primitive({"floatValue": "nan"})


def test_literal_map_wire_shape() -> None:
    literals = {"a": _int_literal(1337)}

    assert serialize_literal_map(literals) == {"a": {"scalar": {"primitive": {"integer": 1337}}}}
    assert serialize_literal(Literal.of_map(literals)) == {
        "map": {"a": {"scalar": {"primitive": {"integer": 1337}}}}
    }
    assert deserialize_literal_map(serialize_literal_map(literals)) == literals


def test_collection_order_and_mixed_nesting_round_trip() -> None:
    literal = Literal.of_collection(
        [
            _int_literal(3),
            Literal.of_map({"z": _int_literal(2), "a": Literal.of_collection([])}),
            _int_literal(1),
        ]
    )

    wire = serialize_literal(literal)

    assert [item.get("scalar") for item in wire["collection"]] == [
        {"primitive": {"integer": 3}},
        None,
        {"primitive": {"integer": 1}},
    ]
    decoded = deserialize_literal(wire)
    assert decoded == literal
    assert decoded.collection is not None
    assert decoded.collection[1].map is not None
    assert list(decoded.collection[1].map) == ["z", "a"]


def test_generic_and_blob_scalars_round_trip() -> None:
    generic = Scalar.of_generic({"rows": [1, 2.5, "x", None], "options": {"strict": True}})
    blob = Scalar.of_blob(
        Blob(
            metadata=BlobMetadata(
                BlobType(format="csv", dimensionality=BlobDimensionality.MULTIPART)
            ),
            uri="s3://bucket/prefix/",
        )
    )

    assert serialize_scalar(generic) == {
        "generic": {"rows": [1, 2.5, "x", None], "options": {"strict": True}}
    }
    assert serialize_scalar(blob) == {
        "blob": {
            "metadata": {"type": {"format": "csv", "dimensionality": "MULTIPART"}},
            "uri": "s3://bucket/prefix/",
        }
    }
    assert deserialize_scalar(serialize_scalar(generic)) == generic
    assert deserialize_scalar(serialize_scalar(blob)) == blob


def test_output_reference_passes_through() -> None:
    data = BindingData.of_output_reference(OutputReference(node_id="node-id", var="var"))

    wire = serialize_binding_data(data)

    assert wire == {"outputReference": {"nodeId": "node-id", "var": "var"}}
    assert deserialize_binding_data(wire) == data


def test_binding_round_trip_with_nested_promises() -> None:
    binding = Binding(
        var="inputs",
        binding=BindingData.of_collection(
            [
                BindingData.of_output_reference(OutputReference("n0", "o0")),
                BindingData.of_map(
                    {
                        "threshold": BindingData.of_scalar(
                            Scalar.of_primitive(Primitive.of_float(0.5))
                        ),
                        "upstream": BindingData.of_output_reference(OutputReference("n1", "o1")),
                    }
                ),
            ]
        ),
    )

    wire = serialize_binding(binding)

    assert wire == {
        "var": "inputs",
        "binding": {
            "collection": [
                {"outputReference": {"nodeId": "n0", "var": "o0"}},
                {
                    "map": {
                        "threshold": {"scalar": {"primitive": {"floatValue": 0.5}}},
                        "upstream": {"outputReference": {"nodeId": "n1", "var": "o1"}},
                    }
                },
            ]
        },
    }
    assert deserialize_binding(wire) == binding


def _nested_collection_depth(wire: object) -> int:
    depth = 0
    cursor = wire
    while isinstance(cursor, dict) and "collection" in cursor:
        cursor = cursor["collection"][0]
        depth += 1
    assert cursor == {"scalar": {"primitive": {"integer": 7}}}
    return depth


def test_deeply_nested_literal_round_trips_without_recursion() -> None:
    literal = _int_literal(7)
    for _ in range(_DEEP):
        literal = Literal.of_collection([literal])

    wire = serialize_literal(literal)
    assert _nested_collection_depth(wire) == _DEEP

    decoded = deserialize_literal(wire)
    depth = 0
    cursor = decoded
    while cursor.collection is not None:
        cursor = cursor.collection[0]
        depth += 1
    assert depth == _DEEP
    assert cursor == _int_literal(7)


def test_deeply_nested_binding_data_round_trips_without_recursion() -> None:
    wire: dict[str, object] = {"scalar": {"primitive": {"integer": 7}}}
    for _ in range(_DEEP):
        wire = {"collection": [wire]}

    decoded = deserialize_binding_data(wire)
    reencoded = serialize_binding_data(decoded)

    assert _nested_collection_depth(reencoded) == _DEEP


def test_json_text_of_nested_non_finite_floats_is_canonical() -> None:
    wire: dict[str, object] = {"scalar": {"primitive": {"floatValue": math.nan}}}
    for _ in range(200):
        wire = {"collection": [wire]}

    leaf = '{"scalar":{"primitive":{"floatValue":"NaN"}}}'
    assert dumps_json(wire) == '{"collection":[' * 200 + leaf + "]}" * 200


def test_text_rendering_of_extremely_deep_trees_raises_validation_error() -> None:
    wire: dict[str, object] = {"scalar": {"primitive": {"integer": 7}}}
    for _ in range(100_000):
        wire = {"collection": [wire]}

    with pytest.raises(ValidationError, match="wire tree too deep to render as text"):
        dumps_json(wire)
    with pytest.raises(ValidationError, match="wire tree too deep to render as text"):
        dumps_yaml(wire)


def test_decode_error_names_nested_wire_path() -> None:
    wire = {
        "collection": [
            {"scalar": {"primitive": {"integer": 1}}},
            {"map": {"k": {"scalar": {"primitive": {"integer": "x"}}}}},
        ]
    }

    expected = "WireLiteral.collection[1].map.k.scalar.primitive.integer: expected int64"
    with pytest.raises(DecodeError, match=re.escape(expected)):
        deserialize_literal(wire)


def test_decode_error_for_bad_container_shapes() -> None:
    with pytest.raises(DecodeError, match=re.escape("WireLiteral.collection: expected array")):
        deserialize_literal({"collection": {"a": 1}})
    with pytest.raises(DecodeError, match=re.escape("WireLiteral.map: expected object")):
        deserialize_literal({"map": [1]})
    expected = "WireBindingData.collection[0]: unexpected fields: ['promise']"
    with pytest.raises(DecodeError, match=re.escape(expected)):
        deserialize_binding_data({"collection": [{"promise": {}}]})


def test_deep_decode_error_reports_full_path() -> None:
    wire: dict[str, object] = {"scalar": {"primitive": {"boolean": "yes"}}}
    for _ in range(3):
        wire = {"collection": [wire]}

    expected = "WireLiteral" + ".collection[0]" * 3 + ".scalar.primitive.boolean: expected boolean"
    with pytest.raises(DecodeError, match=re.escape(expected)):
        deserialize_literal(wire)


if _HYPOTHESIS_AVAILABLE:

    @st.composite
    def _durations(draw: st.DrawFn) -> Duration:
        seconds = draw(st.integers(min_value=INT64_MIN, max_value=INT64_MAX))
        if seconds > 0:
            nanos = draw(st.integers(min_value=0, max_value=999_999_999))
        elif seconds < 0:
            nanos = draw(st.integers(min_value=-999_999_999, max_value=0))
        else:
            nanos = draw(st.integers(min_value=-999_999_999, max_value=999_999_999))
        return Duration(seconds=seconds, nanos=nanos)

    _PRIMITIVES = st.one_of(
        st.integers(min_value=INT64_MIN, max_value=INT64_MAX).map(Primitive.of_integer),
        st.floats(allow_nan=True, allow_infinity=True).map(Primitive.of_float),
        st.text(max_size=20).map(Primitive.of_string),
        st.booleans().map(Primitive.of_boolean),
        st.builds(
            Timestamp,
            seconds=st.integers(min_value=INT64_MIN, max_value=INT64_MAX),
            nanos=st.integers(min_value=0, max_value=999_999_999),
        ).map(Primitive.of_datetime),
        _durations().map(Primitive.of_duration),
    )

    _LITERALS = st.recursive(
        _PRIMITIVES.map(Scalar.of_primitive).map(Literal.of_scalar),
        lambda children: st.one_of(
            st.lists(children, max_size=3).map(Literal.of_collection),
            st.dictionaries(st.text(max_size=5), children, max_size=3).map(Literal.of_map),
        ),
        max_leaves=12,
    )

    @settings(max_examples=25, derandomize=True, deadline=None)
    @given(primitive=_PRIMITIVES)
    def test_primitive_round_trip_property(primitive: Primitive) -> None:
        wire = serialize_primitive(primitive)

        assert deserialize_primitive(wire) == primitive
        assert deserialize_primitive(loads_json(dumps_json(wire))) == primitive

    @settings(max_examples=25, derandomize=True, deadline=None)
    @given(literal=_LITERALS)
    def test_literal_round_trip_property(literal: Literal) -> None:
        wire = serialize_literal(literal)

        assert deserialize_literal(wire) == literal
        assert deserialize_literal(loads_json(dumps_json(wire))) == literal

else:

    def test_primitive_round_trip_property() -> None:
        pytest.skip("hypothesis is not installed")

    def test_literal_round_trip_property() -> None:
        pytest.skip("hypothesis is not installed")
