"""
flyteir — wire codec package.

File: src/flyteir/codec/__init__.py
Last updated: 2026-10-19

Purpose
- Pure functions mapping every IR value to and from its untyped wire tree, plus the
  config-bound :class:`WireCodec` facade and canonical JSON/YAML text rendering.
"""

from flyteir.codec.encoding import dumps_json, dumps_yaml, loads_json, loads_yaml
from flyteir.codec.failures import (
    DEFAULT_ERROR_MESSAGE,
    ExecutionFailure,
    deserialize_error_document,
    error_document_to_wire,
    serialize_failure,
)
from flyteir.codec.identifiers import (
    deserialize_identifier,
    deserialize_partial_task_identifier,
    serialize_identifier,
    serialize_partial_task_identifier,
)
from flyteir.codec.interface import (
    deserialize_literal_type,
    deserialize_typed_interface,
    deserialize_variable,
    serialize_literal_type,
    serialize_typed_interface,
    serialize_variable,
)
from flyteir.codec.literals import (
    deserialize_binding,
    deserialize_binding_data,
    deserialize_literal,
    deserialize_literal_map,
    deserialize_output_reference,
    deserialize_primitive,
    deserialize_scalar,
    serialize_binding,
    serialize_binding_data,
    serialize_literal,
    serialize_literal_map,
    serialize_output_reference,
    serialize_primitive,
    serialize_scalar,
)
from flyteir.codec.tasks import (
    deserialize_container,
    deserialize_task_template,
    serialize_container,
    serialize_task_template,
)
from flyteir.codec.wire_codec import WireCodec
from flyteir.codec.workflow import (
    deserialize_node,
    deserialize_workflow_template,
    serialize_node,
    serialize_workflow_template,
)

__all__ = [
    "DEFAULT_ERROR_MESSAGE",
    "ExecutionFailure",
    "WireCodec",
    "deserialize_binding",
    "deserialize_binding_data",
    "deserialize_container",
    "deserialize_error_document",
    "deserialize_identifier",
    "deserialize_literal",
    "deserialize_literal_map",
    "deserialize_literal_type",
    "deserialize_node",
    "deserialize_output_reference",
    "deserialize_partial_task_identifier",
    "deserialize_primitive",
    "deserialize_scalar",
    "deserialize_task_template",
    "deserialize_typed_interface",
    "deserialize_variable",
    "deserialize_workflow_template",
    "dumps_json",
    "dumps_yaml",
    "error_document_to_wire",
    "loads_json",
    "loads_yaml",
    "serialize_binding",
    "serialize_binding_data",
    "serialize_container",
    "serialize_failure",
    "serialize_identifier",
    "serialize_literal",
    "serialize_literal_map",
    "serialize_literal_type",
    "serialize_node",
    "serialize_output_reference",
    "serialize_partial_task_identifier",
    "serialize_primitive",
    "serialize_scalar",
    "serialize_task_template",
    "serialize_typed_interface",
    "serialize_variable",
    "serialize_workflow_template",
]
