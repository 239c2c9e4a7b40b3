"""Typed shapes of the untyped wire encoding.

These are annotations only. At runtime every wire value is a plain ``dict``/``list`` tree
that ``json.dumps`` and ``yaml.safe_dump`` accept unchanged. Keys are camelCase.
"""

from __future__ import annotations

from typing import Any, NotRequired, TypedDict

WireValue = Any


class WireIdentifier(TypedDict):
    resourceType: str
    project: str
    domain: str
    name: str
    version: str


class WirePartialIdentifier(TypedDict):
    resourceType: str
    name: str
    project: NotRequired[str]
    domain: NotRequired[str]
    version: NotRequired[str]


class WireTimestamp(TypedDict):
    seconds: int
    nanos: int


class WirePrimitive(TypedDict, total=False):
    integer: int
    floatValue: float
    stringValue: str
    boolean: bool
    datetime: WireTimestamp
    duration: WireTimestamp


class WireBlobType(TypedDict):
    format: str
    dimensionality: str


class WireBlobMetadata(TypedDict):
    type: WireBlobType


class WireBlob(TypedDict):
    metadata: WireBlobMetadata
    uri: str


class WireScalar(TypedDict, total=False):
    primitive: WirePrimitive
    generic: dict[str, Any]
    blob: WireBlob


class WireLiteral(TypedDict, total=False):
    scalar: WireScalar
    collection: list[WireLiteral]
    map: dict[str, WireLiteral]


class WireOutputReference(TypedDict):
    nodeId: str
    var: str


class WireBindingData(TypedDict, total=False):
    scalar: WireScalar
    collection: list[WireBindingData]
    map: dict[str, WireBindingData]
    outputReference: WireOutputReference


class WireBinding(TypedDict):
    var: str
    binding: WireBindingData


class WireLiteralType(TypedDict, total=False):
    simple: str
    collectionType: WireLiteralType
    mapValueType: WireLiteralType
    blob: WireBlobType


class WireVariable(TypedDict):
    type: WireLiteralType
    description: NotRequired[str]


class WireTypedInterface(TypedDict):
    inputs: dict[str, WireVariable]
    outputs: dict[str, WireVariable]


class WireKeyValuePair(TypedDict):
    key: str
    value: str


class WireContainer(TypedDict):
    image: str
    command: list[str]
    args: list[str]
    env: list[WireKeyValuePair]


class WireRuntimeMetadata(TypedDict):
    type: str
    flavor: str
    version: str


class WireTaskMetadata(TypedDict):
    runtime: WireRuntimeMetadata


class WireTaskTemplate(TypedDict):
    container: WireContainer
    interface: WireTypedInterface
    metadata: WireTaskMetadata
    type: str


class WireTaskNode(TypedDict):
    referenceId: WirePartialIdentifier


class WireWorkflowNode(TypedDict, total=False):
    launchplanRef: WireIdentifier
    subWorkflowRef: WireIdentifier


class WireOperand(TypedDict, total=False):
    primitive: WirePrimitive
    var: str


class WireComparisonExpression(TypedDict):
    operator: str
    leftValue: WireOperand
    rightValue: WireOperand


class WireConjunctionExpression(TypedDict):
    operator: str
    leftExpression: WireBooleanExpression
    rightExpression: WireBooleanExpression


class WireBooleanExpression(TypedDict, total=False):
    conjunction: WireConjunctionExpression
    comparison: WireComparisonExpression


class WireIfBlock(TypedDict):
    condition: WireBooleanExpression
    thenNode: WireNode


class WireIfElseBlock(TypedDict):
    case: WireIfBlock
    other: list[WireIfBlock]
    elseNode: NotRequired[WireNode]
    error: NotRequired[str]


class WireBranchNode(TypedDict):
    ifElse: WireIfElseBlock


class WireNode(TypedDict):
    id: str
    upstreamNodeIds: list[str]
    inputs: list[WireBinding]
    taskNode: NotRequired[WireTaskNode]
    workflowNode: NotRequired[WireWorkflowNode]
    branchNode: NotRequired[WireBranchNode]


class WireWorkflowMetadata(TypedDict):
    onFailure: str


class WireWorkflowTemplate(TypedDict):
    metadata: WireWorkflowMetadata
    interface: WireTypedInterface
    nodes: list[WireNode]
    outputs: list[WireBinding]


class WireErrorBody(TypedDict):
    kind: str
    code: str
    message: str


class WireErrorDocument(TypedDict):
    error: WireErrorBody


__all__ = [
    "WireBinding",
    "WireBindingData",
    "WireBlob",
    "WireBlobType",
    "WireBooleanExpression",
    "WireBranchNode",
    "WireContainer",
    "WireErrorDocument",
    "WireIdentifier",
    "WireIfBlock",
    "WireIfElseBlock",
    "WireLiteral",
    "WireLiteralType",
    "WireNode",
    "WireOperand",
    "WireOutputReference",
    "WirePartialIdentifier",
    "WirePrimitive",
    "WireScalar",
    "WireTaskTemplate",
    "WireTypedInterface",
    "WireValue",
    "WireVariable",
    "WireWorkflowMetadata",
    "WireWorkflowTemplate",
]
