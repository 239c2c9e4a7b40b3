"""Workflow graph model: nodes, their variants, and the serializable workflow template.

A :class:`WorkflowTemplate` is a statically analyzable DAG. Execution order is driven by
``upstream_node_ids`` and output references, never by the position of a node in
``nodes``; the sequence order is kept only so that encodings and diagnostics are
deterministic.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from flyteir.constants import START_NODE_ID
from flyteir.domain._validation import (
    _as_enum,
    _as_instance,
    _as_optional_instance,
    _as_optional_str,
    _as_str,
    _as_str_tuple,
    _as_tuple_of,
    _exactly_one,
    _set,
)
from flyteir.domain.identifiers import (
    LaunchPlanIdentifier,
    PartialTaskIdentifier,
    WorkflowIdentifier,
)
from flyteir.domain.interface import TypedInterface
from flyteir.domain.literals import Binding, BindingData, OutputReference, Primitive


@dataclass(frozen=True, slots=True)
class TaskNode:
    reference_id: PartialTaskIdentifier

    def __post_init__(self) -> None:
        _as_instance(self.reference_id, PartialTaskIdentifier, "TaskNode.reference_id")


@dataclass(frozen=True, slots=True)
class WorkflowNode:
    """Runs a registered launch plan or an embedded sub-workflow."""

    launchplan_ref: LaunchPlanIdentifier | None = None
    sub_workflow_ref: WorkflowIdentifier | None = None

    def __post_init__(self) -> None:
        _as_optional_instance(
            self.launchplan_ref, LaunchPlanIdentifier, "WorkflowNode.launchplan_ref"
        )
        _as_optional_instance(
            self.sub_workflow_ref, WorkflowIdentifier, "WorkflowNode.sub_workflow_ref"
        )
        _exactly_one(
            "WorkflowNode",
            launchplan_ref=self.launchplan_ref,
            sub_workflow_ref=self.sub_workflow_ref,
        )


class ComparisonOperator(StrEnum):
    EQ = "EQ"
    NEQ = "NEQ"
    GT = "GT"
    GTE = "GTE"
    LT = "LT"
    LTE = "LTE"


class ConjunctionOperator(StrEnum):
    AND = "AND"
    OR = "OR"


@dataclass(frozen=True, slots=True)
class Operand:
    """Either a literal primitive or the name of one of the node's input variables."""

    primitive: Primitive | None = None
    var: str | None = None

    def __post_init__(self) -> None:
        _as_optional_instance(self.primitive, Primitive, "Operand.primitive")
        _set(self, "var", _as_optional_str(self.var, "Operand.var"))
        _exactly_one("Operand", primitive=self.primitive, var=self.var)


@dataclass(frozen=True, slots=True)
class ComparisonExpression:
    operator: ComparisonOperator
    left_value: Operand
    right_value: Operand

    def __post_init__(self) -> None:
        _set(
            self,
            "operator",
            _as_enum(ComparisonOperator, self.operator, "ComparisonExpression.operator"),
        )
        _as_instance(self.left_value, Operand, "ComparisonExpression.left_value")
        _as_instance(self.right_value, Operand, "ComparisonExpression.right_value")


@dataclass(frozen=True, slots=True)
class ConjunctionExpression:
    operator: ConjunctionOperator
    left_expression: BooleanExpression
    right_expression: BooleanExpression

    def __post_init__(self) -> None:
        _set(
            self,
            "operator",
            _as_enum(ConjunctionOperator, self.operator, "ConjunctionExpression.operator"),
        )
        _as_instance(
            self.left_expression, BooleanExpression, "ConjunctionExpression.left_expression"
        )
        _as_instance(
            self.right_expression, BooleanExpression, "ConjunctionExpression.right_expression"
        )


@dataclass(frozen=True, slots=True)
class BooleanExpression:
    conjunction: ConjunctionExpression | None = None
    comparison: ComparisonExpression | None = None

    def __post_init__(self) -> None:
        _as_optional_instance(
            self.conjunction, ConjunctionExpression, "BooleanExpression.conjunction"
        )
        _as_optional_instance(self.comparison, ComparisonExpression, "BooleanExpression.comparison")
        _exactly_one(
            "BooleanExpression", conjunction=self.conjunction, comparison=self.comparison
        )


@dataclass(frozen=True, slots=True)
class IfBlock:
    condition: BooleanExpression
    then_node: Node

    def __post_init__(self) -> None:
        _as_instance(self.condition, BooleanExpression, "IfBlock.condition")
        _as_instance(self.then_node, Node, "IfBlock.then_node")


@dataclass(frozen=True, slots=True)
class IfElseBlock:
    """First matching block wins; otherwise ``else_node`` runs or ``error`` is raised."""

    case: IfBlock
    other: tuple[IfBlock, ...] = ()
    else_node: Node | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        _as_instance(self.case, IfBlock, "IfElseBlock.case")
        _set(self, "other", _as_tuple_of(self.other, IfBlock, "IfElseBlock.other"))
        _as_optional_instance(self.else_node, Node, "IfElseBlock.else_node")
        _set(self, "error", _as_optional_str(self.error, "IfElseBlock.error"))
        _exactly_one("IfElseBlock", else_node=self.else_node, error=self.error)


@dataclass(frozen=True, slots=True)
class BranchNode:
    if_else: IfElseBlock

    def __post_init__(self) -> None:
        _as_instance(self.if_else, IfElseBlock, "BranchNode.if_else")


class NodeKind(StrEnum):
    TASK = "task"
    WORKFLOW = "workflow"
    BRANCH = "branch"


@dataclass(frozen=True, slots=True)
class Node:
    id: str
    upstream_node_ids: tuple[str, ...] = ()
    inputs: tuple[Binding, ...] = ()
    task_node: TaskNode | None = None
    workflow_node: WorkflowNode | None = None
    branch_node: BranchNode | None = None

    def __post_init__(self) -> None:
        _set(self, "id", _as_str(self.id, "Node.id"))
        _set(
            self,
            "upstream_node_ids",
            _as_str_tuple(self.upstream_node_ids, f"Node[{self.id}].upstream_node_ids"),
        )
        _set(self, "inputs", _as_tuple_of(self.inputs, Binding, f"Node[{self.id}].inputs"))
        _as_optional_instance(self.task_node, TaskNode, f"Node[{self.id}].task_node")
        _as_optional_instance(self.workflow_node, WorkflowNode, f"Node[{self.id}].workflow_node")
        _as_optional_instance(self.branch_node, BranchNode, f"Node[{self.id}].branch_node")
        _exactly_one(
            f"Node[{self.id}]",
            task_node=self.task_node,
            workflow_node=self.workflow_node,
            branch_node=self.branch_node,
        )

    @property
    def kind(self) -> NodeKind:
        if self.task_node is not None:
            return NodeKind.TASK
        if self.workflow_node is not None:
            return NodeKind.WORKFLOW
        return NodeKind.BRANCH


class WorkflowOnFailurePolicy(StrEnum):
    FAIL_IMMEDIATELY = "FAIL_IMMEDIATELY"
    FAIL_AFTER_EXECUTABLE_NODES_COMPLETE = "FAIL_AFTER_EXECUTABLE_NODES_COMPLETE"


@dataclass(frozen=True, slots=True)
class WorkflowMetadata:
    on_failure: WorkflowOnFailurePolicy = WorkflowOnFailurePolicy.FAIL_IMMEDIATELY

    def __post_init__(self) -> None:
        _set(
            self,
            "on_failure",
            _as_enum(WorkflowOnFailurePolicy, self.on_failure, "WorkflowMetadata.on_failure"),
        )


@dataclass(frozen=True, slots=True)
class WorkflowTemplate:
    """Serializable DAG of nodes plus the workflow's interface and output bindings.

    Node id uniqueness and output-reference resolution are preconditions owned by the
    graph builder; :func:`check_workflow_template` reports violations on request.
    """

    nodes: tuple[Node, ...]
    metadata: WorkflowMetadata = field(default_factory=WorkflowMetadata)
    interface: TypedInterface = field(default_factory=TypedInterface)
    outputs: tuple[Binding, ...] = ()

    def __post_init__(self) -> None:
        _set(self, "nodes", _as_tuple_of(self.nodes, Node, "WorkflowTemplate.nodes"))
        _as_instance(self.metadata, WorkflowMetadata, "WorkflowTemplate.metadata")
        _as_instance(self.interface, TypedInterface, "WorkflowTemplate.interface")
        _set(self, "outputs", _as_tuple_of(self.outputs, Binding, "WorkflowTemplate.outputs"))

    @property
    def node_ids(self) -> tuple[str, ...]:
        return tuple(node.id for node in self.nodes)


def check_workflow_template(template: WorkflowTemplate) -> tuple[str, ...]:
    """Return builder-precondition violations in deterministic order (empty when valid).

    Checks node id uniqueness, upstream ids, binding name uniqueness and output reference
    targets, including nodes nested in branches. Acyclicity is not checked.
    """
    issues: list[str] = []
    nodes = tuple(iter_nodes(template.nodes))
    counts = Counter(node.id for node in nodes)
    for node_id in sorted(node_id for node_id, count in counts.items() if count > 1):
        issues.append(f"duplicate node id {node_id!r}")

    known = set(counts)
    input_names = set(template.interface.inputs)

    def check_references(owner: str, bindings: tuple[Binding, ...]) -> None:
        var_counts = Counter(binding.var for binding in bindings)
        for var in sorted(name for name, count in var_counts.items() if count > 1):
            issues.append(f"{owner}: duplicate binding var {var!r}")
        for binding in bindings:
            for reference in iter_output_references(binding.binding):
                if reference.node_id == START_NODE_ID:
                    if reference.var not in input_names:
                        issues.append(
                            f"{owner}.{binding.var}: workflow has no input {reference.var!r}"
                        )
                elif reference.node_id not in known:
                    issues.append(
                        f"{owner}.{binding.var}: references unknown node {reference.node_id!r}"
                    )

    for node in nodes:
        for upstream in node.upstream_node_ids:
            if upstream != START_NODE_ID and upstream not in known:
                issues.append(f"Node[{node.id}]: unknown upstream node {upstream!r}")
        check_references(f"Node[{node.id}].inputs", node.inputs)

    check_references("WorkflowTemplate.outputs", template.outputs)
    return tuple(issues)


def iter_nodes(nodes: Sequence[Node]) -> Iterator[Node]:
    """Yield ``nodes`` in order, each followed by the nodes nested in its branch, depth first."""
    pending: list[Node] = list(reversed(nodes))
    while pending:
        current = pending.pop()
        yield current
        if current.branch_node is None:
            continue
        if_else = current.branch_node.if_else
        nested = [if_else.case.then_node, *(block.then_node for block in if_else.other)]
        if if_else.else_node is not None:
            nested.append(if_else.else_node)
        pending.extend(reversed(nested))


def iter_output_references(data: BindingData) -> Iterator[OutputReference]:
    """Yield every output reference nested in ``data`` in depth-first, left-to-right order."""
    pending: list[BindingData] = [data]
    while pending:
        current = pending.pop()
        if current.promise is not None:
            yield current.promise
        elif current.collection is not None:
            pending.extend(reversed(current.collection))
        elif current.map is not None:
            pending.extend(reversed(tuple(current.map.values())))


__all__ = [
    "BooleanExpression",
    "BranchNode",
    "ComparisonExpression",
    "ComparisonOperator",
    "ConjunctionExpression",
    "ConjunctionOperator",
    "IfBlock",
    "IfElseBlock",
    "Node",
    "NodeKind",
    "Operand",
    "TaskNode",
    "WorkflowMetadata",
    "WorkflowNode",
    "WorkflowOnFailurePolicy",
    "WorkflowTemplate",
    "check_workflow_template",
    "iter_nodes",
    "iter_output_references",
]
