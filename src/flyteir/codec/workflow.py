"""Workflow template codec.

Nodes are encoded in domain order and each node keeps its ``upstreamNodeIds`` order, so
two encodings of the same template are identical. The codec is a structural transform:
it checks references only when the codec config asks for it, and never checks for cycles.
"""

from __future__ import annotations

from typing import Final

from flyteir.codec._wire import (
    _construct,
    _expect_list,
    _expect_object,
    _expect_oneof,
    _expect_str,
    _expect_str_list,
)
from flyteir.codec.identifiers import (
    deserialize_identifier,
    deserialize_partial_task_identifier,
    serialize_identifier,
    serialize_partial_task_identifier,
)
from flyteir.codec.interface import deserialize_typed_interface, serialize_typed_interface
from flyteir.codec.literals import (
    deserialize_bindings,
    deserialize_primitive,
    serialize_bindings,
    serialize_primitive,
)
from flyteir.codec.wire import (
    WireBooleanExpression,
    WireIfBlock,
    WireNode,
    WireOperand,
    WireWorkflowMetadata,
    WireWorkflowNode,
    WireWorkflowTemplate,
)
from flyteir.config.schema import DEFAULT_CODEC_CONFIG, CodecConfig
from flyteir.domain.identifiers import LaunchPlanIdentifier, WorkflowIdentifier
from flyteir.domain.workflow import (
    BooleanExpression,
    BranchNode,
    ComparisonExpression,
    ConjunctionExpression,
    IfBlock,
    IfElseBlock,
    Node,
    Operand,
    TaskNode,
    WorkflowMetadata,
    WorkflowNode,
    WorkflowTemplate,
    check_workflow_template,
)
from flyteir.errors import DecodeError, ValidationError

_NODE_VARIANTS: Final[tuple[str, ...]] = ("taskNode", "workflowNode", "branchNode")


# Boolean expressions


def serialize_operand(operand: Operand) -> WireOperand:
    if operand.primitive is not None:
        return {"primitive": serialize_primitive(operand.primitive)}
    assert operand.var is not None
    return {"var": operand.var}


def deserialize_operand(raw: object, path: str = "WireOperand") -> Operand:
    variant, payload = _expect_oneof(raw, path, ("primitive", "var"))
    if variant == "primitive":
        return Operand(primitive=deserialize_primitive(payload, f"{path}.primitive"))
    return _construct(path, Operand, var=_expect_str(payload, f"{path}.var"))


def serialize_boolean_expression(expression: BooleanExpression) -> WireBooleanExpression:
    if expression.comparison is not None:
        comparison = expression.comparison
        return {
            "comparison": {
                "operator": comparison.operator.value,
                "leftValue": serialize_operand(comparison.left_value),
                "rightValue": serialize_operand(comparison.right_value),
            }
        }
    conjunction = expression.conjunction
    assert conjunction is not None
    return {
        "conjunction": {
            "operator": conjunction.operator.value,
            "leftExpression": serialize_boolean_expression(conjunction.left_expression),
            "rightExpression": serialize_boolean_expression(conjunction.right_expression),
        }
    }


def deserialize_boolean_expression(
    raw: object, path: str = "WireBooleanExpression"
) -> BooleanExpression:
    variant, payload = _expect_oneof(raw, path, ("conjunction", "comparison"))
    field_path = f"{path}.{variant}"
    if variant == "comparison":
        fields = _expect_object(
            payload, field_path, required={"operator", "leftValue", "rightValue"}
        )
        comparison = _construct(
            field_path,
            ComparisonExpression,
            operator=_expect_str(fields["operator"], f"{field_path}.operator"),
            left_value=deserialize_operand(fields["leftValue"], f"{field_path}.leftValue"),
            right_value=deserialize_operand(fields["rightValue"], f"{field_path}.rightValue"),
        )
        return BooleanExpression(comparison=comparison)

    fields = _expect_object(
        payload, field_path, required={"operator", "leftExpression", "rightExpression"}
    )
    conjunction = _construct(
        field_path,
        ConjunctionExpression,
        operator=_expect_str(fields["operator"], f"{field_path}.operator"),
        left_expression=deserialize_boolean_expression(
            fields["leftExpression"], f"{field_path}.leftExpression"
        ),
        right_expression=deserialize_boolean_expression(
            fields["rightExpression"], f"{field_path}.rightExpression"
        ),
    )
    return BooleanExpression(conjunction=conjunction)


# Node variants


def _serialize_workflow_node(node: WorkflowNode) -> WireWorkflowNode:
    if node.launchplan_ref is not None:
        return {"launchplanRef": serialize_identifier(node.launchplan_ref)}
    assert node.sub_workflow_ref is not None
    return {"subWorkflowRef": serialize_identifier(node.sub_workflow_ref)}


def _deserialize_workflow_node(raw: object, path: str) -> WorkflowNode:
    variant, payload = _expect_oneof(raw, path, ("launchplanRef", "subWorkflowRef"))
    field_path = f"{path}.{variant}"
    identifier = deserialize_identifier(payload, field_path)
    if variant == "launchplanRef":
        if not isinstance(identifier, LaunchPlanIdentifier):
            raise DecodeError(f"{field_path}: expected resource type LAUNCH_PLAN")
        return WorkflowNode(launchplan_ref=identifier)
    if not isinstance(identifier, WorkflowIdentifier):
        raise DecodeError(f"{field_path}: expected resource type WORKFLOW")
    return WorkflowNode(sub_workflow_ref=identifier)


def _serialize_if_block(block: IfBlock) -> WireIfBlock:
    return {
        "condition": serialize_boolean_expression(block.condition),
        "thenNode": serialize_node(block.then_node),
    }


def _deserialize_if_block(raw: object, path: str) -> IfBlock:
    payload = _expect_object(raw, path, required={"condition", "thenNode"})
    return IfBlock(
        condition=deserialize_boolean_expression(payload["condition"], f"{path}.condition"),
        then_node=deserialize_node(payload["thenNode"], f"{path}.thenNode"),
    )


def _serialize_branch_node(node: BranchNode) -> dict[str, object]:
    if_else = node.if_else
    wire: dict[str, object] = {
        "case": _serialize_if_block(if_else.case),
        "other": [_serialize_if_block(block) for block in if_else.other],
    }
    if if_else.else_node is not None:
        wire["elseNode"] = serialize_node(if_else.else_node)
    else:
        wire["error"] = if_else.error
    return {"ifElse": wire}


def _deserialize_branch_node(raw: object, path: str) -> BranchNode:
    outer = _expect_object(raw, path, required={"ifElse"})
    if_else_path = f"{path}.ifElse"
    payload = _expect_object(
        outer["ifElse"], if_else_path, required={"case"}, optional={"other", "elseNode", "error"}
    )
    other_items = _expect_list(payload.get("other", []), f"{if_else_path}.other")
    other = tuple(
        _deserialize_if_block(item, f"{if_else_path}.other[{index}]")
        for index, item in enumerate(other_items)
    )
    else_node = None
    if "elseNode" in payload:
        else_node = deserialize_node(payload["elseNode"], f"{if_else_path}.elseNode")
    error = None
    if "error" in payload:
        error = _expect_str(payload["error"], f"{if_else_path}.error")
    if_else = _construct(
        if_else_path,
        IfElseBlock,
        case=_deserialize_if_block(payload["case"], f"{if_else_path}.case"),
        other=other,
        else_node=else_node,
        error=error,
    )
    return BranchNode(if_else=if_else)


# Node


def serialize_node(node: Node) -> WireNode:
    wire: WireNode = {
        "id": node.id,
        "upstreamNodeIds": list(node.upstream_node_ids),
        "inputs": serialize_bindings(node.inputs),
    }
    if node.task_node is not None:
        wire["taskNode"] = {
            "referenceId": serialize_partial_task_identifier(node.task_node.reference_id)
        }
    elif node.workflow_node is not None:
        wire["workflowNode"] = _serialize_workflow_node(node.workflow_node)
    else:
        assert node.branch_node is not None
        branch = _serialize_branch_node(node.branch_node)
        wire["branchNode"] = branch  # type: ignore[typeddict-item]
    return wire


def deserialize_node(raw: object, path: str = "WireNode") -> Node:
    payload = _expect_object(
        raw,
        path,
        required={"id"},
        optional={"upstreamNodeIds", "inputs", *_NODE_VARIANTS},
    )
    node_id = _expect_str(payload["id"], f"{path}.id")
    present = [name for name in _NODE_VARIANTS if name in payload]
    if len(present) != 1:
        raise DecodeError(
            f"{path}: exactly one of {list(_NODE_VARIANTS)} must be set, got {present}"
        )

    variant = present[0]
    variant_path = f"{path}.{variant}"
    variant_kwargs: dict[str, object] = {}
    if variant == "taskNode":
        task = _expect_object(payload[variant], variant_path, required={"referenceId"})
        variant_kwargs["task_node"] = TaskNode(
            reference_id=deserialize_partial_task_identifier(
                task["referenceId"], f"{variant_path}.referenceId"
            )
        )
    elif variant == "workflowNode":
        variant_kwargs["workflow_node"] = _deserialize_workflow_node(payload[variant], variant_path)
    else:
        variant_kwargs["branch_node"] = _deserialize_branch_node(payload[variant], variant_path)

    return _construct(
        path,
        Node,
        id=node_id,
        upstream_node_ids=tuple(
            _expect_str_list(payload.get("upstreamNodeIds", []), f"{path}.upstreamNodeIds")
        ),
        inputs=deserialize_bindings(payload.get("inputs", []), f"{path}.inputs"),
        **variant_kwargs,
    )


# Template


def serialize_workflow_metadata(metadata: WorkflowMetadata) -> WireWorkflowMetadata:
    return {"onFailure": metadata.on_failure.value}


def deserialize_workflow_metadata(
    raw: object, path: str = "WireWorkflowMetadata"
) -> WorkflowMetadata:
    payload = _expect_object(raw, path, optional={"onFailure"})
    if "onFailure" not in payload:
        return WorkflowMetadata()
    return _construct(
        path, WorkflowMetadata, on_failure=_expect_str(payload["onFailure"], f"{path}.onFailure")
    )


def serialize_workflow_template(
    template: WorkflowTemplate, *, config: CodecConfig = DEFAULT_CODEC_CONFIG
) -> WireWorkflowTemplate:
    """Encode ``template``.

    Raises:
        ValidationError: ``config.validate_references`` is set and the template has
            duplicate node ids or dangling upstream ids/output references.
    """
    if config.validate_references:
        _raise_on_reference_issues(template)
    return {
        "metadata": serialize_workflow_metadata(template.metadata),
        "interface": serialize_typed_interface(template.interface),
        "nodes": [serialize_node(node) for node in template.nodes],
        "outputs": serialize_bindings(template.outputs),
    }


def deserialize_workflow_template(
    raw: object,
    path: str = "WireWorkflowTemplate",
    *,
    config: CodecConfig = DEFAULT_CODEC_CONFIG,
) -> WorkflowTemplate:
    payload = _expect_object(
        raw, path, required={"nodes"}, optional={"metadata", "interface", "outputs"}
    )
    nodes = tuple(
        deserialize_node(item, f"{path}.nodes[{index}]")
        for index, item in enumerate(_expect_list(payload["nodes"], f"{path}.nodes"))
    )
    template = WorkflowTemplate(
        nodes=nodes,
        metadata=deserialize_workflow_metadata(payload.get("metadata", {}), f"{path}.metadata"),
        interface=deserialize_typed_interface(payload.get("interface", {}), f"{path}.interface"),
        outputs=deserialize_bindings(payload.get("outputs", []), f"{path}.outputs"),
    )
    if config.validate_references:
        _raise_on_reference_issues(template)
    return template


def _raise_on_reference_issues(template: WorkflowTemplate) -> None:
    issues = check_workflow_template(template)
    if issues:
        raise ValidationError("invalid workflow template: " + "; ".join(issues))


__all__ = [
    "deserialize_boolean_expression",
    "deserialize_node",
    "deserialize_operand",
    "deserialize_workflow_metadata",
    "deserialize_workflow_template",
    "serialize_boolean_expression",
    "serialize_node",
    "serialize_operand",
    "serialize_workflow_metadata",
    "serialize_workflow_template",
]
