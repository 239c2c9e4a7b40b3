"""
flyteir — domain layer

File: src/flyteir/domain/__init__.py
Last updated: 2026-10-19

Purpose
- Immutable IR value objects: identifiers, literals, interfaces, tasks, workflow graphs.

Functional requirements
- Every value object validates on construction and is never mutated afterwards.
  ``dataclasses.replace`` produces modified copies and re-runs validation.

Non-functional requirements
- Domain layer stays free of IO side effects and third-party dependencies.
"""

from flyteir.domain.errors import ErrorDocument, ErrorKind
from flyteir.domain.identifiers import (
    Identifier,
    LaunchPlanIdentifier,
    PartialTaskIdentifier,
    ResourceType,
    TaskIdentifier,
    WorkflowIdentifier,
)
from flyteir.domain.interface import (
    BlobDimensionality,
    BlobType,
    LiteralType,
    LiteralTypeKind,
    SimpleType,
    TypedInterface,
    Variable,
)
from flyteir.domain.literals import (
    Binding,
    BindingData,
    BindingDataKind,
    Blob,
    BlobMetadata,
    Duration,
    Literal,
    LiteralKind,
    OutputReference,
    Primitive,
    PrimitiveKind,
    Scalar,
    ScalarKind,
    Timestamp,
)
from flyteir.domain.tasks import Container, KeyValuePair, TaskTemplate
from flyteir.domain.workflow import (
    BooleanExpression,
    BranchNode,
    ComparisonExpression,
    ComparisonOperator,
    ConjunctionExpression,
    ConjunctionOperator,
    IfBlock,
    IfElseBlock,
    Node,
    NodeKind,
    Operand,
    TaskNode,
    WorkflowMetadata,
    WorkflowNode,
    WorkflowOnFailurePolicy,
    WorkflowTemplate,
    check_workflow_template,
    iter_nodes,
    iter_output_references,
)

__all__ = [
    "Binding",
    "BindingData",
    "BindingDataKind",
    "Blob",
    "BlobDimensionality",
    "BlobMetadata",
    "BlobType",
    "BooleanExpression",
    "BranchNode",
    "ComparisonExpression",
    "ComparisonOperator",
    "ConjunctionExpression",
    "ConjunctionOperator",
    "Container",
    "Duration",
    "ErrorDocument",
    "ErrorKind",
    "Identifier",
    "IfBlock",
    "IfElseBlock",
    "KeyValuePair",
    "LaunchPlanIdentifier",
    "Literal",
    "LiteralKind",
    "LiteralType",
    "LiteralTypeKind",
    "Node",
    "NodeKind",
    "Operand",
    "OutputReference",
    "PartialTaskIdentifier",
    "Primitive",
    "PrimitiveKind",
    "ResourceType",
    "Scalar",
    "ScalarKind",
    "SimpleType",
    "TaskIdentifier",
    "TaskNode",
    "TaskTemplate",
    "Timestamp",
    "TypedInterface",
    "Variable",
    "WorkflowIdentifier",
    "WorkflowMetadata",
    "WorkflowNode",
    "WorkflowOnFailurePolicy",
    "WorkflowTemplate",
    "check_workflow_template",
    "iter_nodes",
    "iter_output_references",
]
