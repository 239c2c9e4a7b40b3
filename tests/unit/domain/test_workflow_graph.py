"""
flyteir — unit tests for workflow graph models

File: tests/unit/domain/test_workflow_graph.py
Last updated: 2026-10-19

Purpose
- Validate node/branch construction rules and the opt-in reference checks.
"""

from __future__ import annotations

import pytest

from flyteir.constants import START_NODE_ID
from flyteir.domain import (
    Binding,
    BindingData,
    BooleanExpression,
    BranchNode,
    ComparisonExpression,
    ComparisonOperator,
    IfBlock,
    IfElseBlock,
    Node,
    NodeKind,
    Operand,
    OutputReference,
    PartialTaskIdentifier,
    Primitive,
    Scalar,
    SimpleType,
    TaskNode,
    TypedInterface,
    Variable,
    WorkflowMetadata,
    WorkflowOnFailurePolicy,
    WorkflowTemplate,
    check_workflow_template,
    iter_nodes,
    iter_output_references,
)

_TASK = TaskNode(reference_id=PartialTaskIdentifier(name="double"))


def _promise(node_id: str, var: str) -> BindingData:
    return BindingData.of_output_reference(OutputReference(node_id=node_id, var=var))


def _branch() -> BranchNode:
    condition = BooleanExpression(
        comparison=ComparisonExpression(
            operator=ComparisonOperator.GT,
            left_value=Operand(var="x"),
            right_value=Operand(primitive=Primitive.of_integer(10)),
        )
    )
    return BranchNode(
        if_else=IfElseBlock(
            case=IfBlock(condition=condition, then_node=Node(id="big", task_node=_TASK)),
            error="x out of range",
        )
    )


def test_node_requires_exactly_one_variant() -> None:
    assert Node(id="a", task_node=_TASK).kind is NodeKind.TASK
    assert Node(id="b", branch_node=_branch()).kind is NodeKind.BRANCH

    with pytest.raises(ValueError, match=r"Node\[a\]: exactly one of .* got 2"):
        Node(id="a", task_node=_TASK, branch_node=_branch())
    with pytest.raises(ValueError, match=r"Node\[a\]: exactly one of .* got 0"):
        Node(id="a")
    with pytest.raises(ValueError, match="Node.id: must not be empty"):
        Node(id="", task_node=_TASK)


def test_node_keeps_upstream_order() -> None:
    node = Node(id="a", upstream_node_ids=["c", "b"], task_node=_TASK)  # type: ignore[arg-type]

    assert node.upstream_node_ids == ("c", "b")


def test_if_else_requires_else_node_or_error() -> None:
    case = _branch().if_else.case

    with pytest.raises(ValueError, match="IfElseBlock: exactly one of else_node, error"):
        IfElseBlock(case=case)
    with pytest.raises(ValueError, match="got 2"):
        IfElseBlock(case=case, else_node=Node(id="small", task_node=_TASK), error="boom")


def test_operand_and_operator_validation() -> None:
    with pytest.raises(ValueError, match="Operand: exactly one of primitive, var"):
        Operand()
    with pytest.raises(ValueError, match="ComparisonExpression.operator: invalid value 'GREATER'"):
        ComparisonExpression(
            operator="GREATER",  # type: ignore[arg-type]
            left_value=Operand(var="x"),
            right_value=Operand(var="y"),
        )


def test_workflow_metadata_accepts_policy_names() -> None:
    policy = "FAIL_AFTER_EXECUTABLE_NODES_COMPLETE"
    metadata = WorkflowMetadata(on_failure=policy)  # type: ignore[arg-type]

    assert metadata.on_failure is WorkflowOnFailurePolicy.FAIL_AFTER_EXECUTABLE_NODES_COMPLETE
    assert WorkflowMetadata().on_failure is WorkflowOnFailurePolicy.FAIL_IMMEDIATELY


def test_template_construction_does_not_check_references() -> None:
    template = WorkflowTemplate(
        nodes=(Node(id="a", upstream_node_ids=("ghost",), task_node=_TASK),),
        outputs=(Binding("out", _promise("ghost", "o0")),),
    )

    assert template.node_ids == ("a",)
    assert check_workflow_template(template) == (
        "Node[a]: unknown upstream node 'ghost'",
        "WorkflowTemplate.outputs.out: references unknown node 'ghost'",
    )


def test_check_workflow_template_reports_every_issue_in_order() -> None:
    scalar = BindingData.of_scalar(Scalar.of_primitive(Primitive.of_integer(1)))
    template = WorkflowTemplate(
        nodes=(
            Node(id="a", upstream_node_ids=("z",), task_node=_TASK),
            Node(id="a", task_node=_TASK),
            Node(
                id="b",
                upstream_node_ids=(START_NODE_ID, "a"),
                inputs=(
                    Binding("x", _promise(START_NODE_ID, "missing_input")),
                    Binding("y", _promise("ghost", "o0")),
                    Binding("y", scalar),
                ),
                task_node=_TASK,
            ),
        ),
        interface=TypedInterface(inputs={"present": Variable.of_simple(SimpleType.INTEGER)}),
        outputs=(Binding("result", _promise("b", "o0")),),
    )

    assert check_workflow_template(template) == (
        "duplicate node id 'a'",
        "Node[a]: unknown upstream node 'z'",
        "Node[b].inputs: duplicate binding var 'y'",
        "Node[b].inputs.x: workflow has no input 'missing_input'",
        "Node[b].inputs.y: references unknown node 'ghost'",
    )


def test_valid_template_has_no_issues() -> None:
    template = WorkflowTemplate(
        nodes=(
            Node(
                id="n0",
                upstream_node_ids=(START_NODE_ID,),
                inputs=(Binding("x", _promise(START_NODE_ID, "x")),),
                task_node=_TASK,
            ),
            Node(id="n1", upstream_node_ids=("n0",), branch_node=_branch()),
        ),
        interface=TypedInterface(inputs={"x": Variable.of_simple(SimpleType.INTEGER)}),
        outputs=(Binding("result", _promise("n0", "o0")),),
    )

    assert check_workflow_template(template) == ()


def test_iter_output_references_is_depth_first_left_to_right() -> None:
    data = BindingData.of_collection(
        [
            _promise("a", "o"),
            BindingData.of_map(
                {"k": _promise("b", "o"), "j": BindingData.of_collection([_promise("c", "o")])}
            ),
            BindingData.of_scalar(Scalar.of_primitive(Primitive.of_boolean(True))),
        ]
    )

    assert [reference.node_id for reference in iter_output_references(data)] == ["a", "b", "c"]


def test_iter_output_references_handles_deep_nesting() -> None:
    data = _promise("leaf", "o")
    for _ in range(5_000):
        data = BindingData.of_collection([data])

    assert [reference.node_id for reference in iter_output_references(data)] == ["leaf"]


def test_check_workflow_template_visits_nodes_nested_in_branches() -> None:
    condition = _branch().if_else.case.condition
    nested_input = (Binding("x", _promise("phantom", "o0")),)
    branch = BranchNode(
        if_else=IfElseBlock(
            case=IfBlock(
                condition=condition,
                then_node=Node(id="big", upstream_node_ids=("nowhere",), task_node=_TASK),
            ),
            other=(
                IfBlock(
                    condition=condition,
                    then_node=Node(id="mid", inputs=nested_input, task_node=_TASK),
                ),
            ),
            else_node=Node(id="route", task_node=_TASK),
        )
    )
    template = WorkflowTemplate(
        nodes=(
            Node(id="route", branch_node=branch),
            Node(id="after", upstream_node_ids=("big",), task_node=_TASK),
        ),
        outputs=(Binding("out", _promise("mid", "o0")),),
    )

    assert [node.id for node in iter_nodes(template.nodes)] == [
        "route",
        "big",
        "mid",
        "route",
        "after",
    ]
    assert check_workflow_template(template) == (
        "duplicate node id 'route'",
        "Node[big]: unknown upstream node 'nowhere'",
        "Node[mid].inputs.x: references unknown node 'phantom'",
    )
