"""Identifier codec.

The resource type tag is chosen by exact concrete class. Subclasses of the three known
identifier classes are rejected as well, because a subclass may carry meaning the wire
format cannot express.
"""

from __future__ import annotations

from typing import Final

from flyteir.codec._wire import _construct, _decode_fail, _expect_object, _expect_str
from flyteir.codec.wire import WireIdentifier, WirePartialIdentifier
from flyteir.domain.identifiers import (
    Identifier,
    LaunchPlanIdentifier,
    PartialTaskIdentifier,
    ResourceType,
    TaskIdentifier,
    WorkflowIdentifier,
)
from flyteir.errors import ValidationError

_RESOURCE_TYPES: Final[dict[type[Identifier], ResourceType]] = {
    TaskIdentifier: ResourceType.TASK,
    WorkflowIdentifier: ResourceType.WORKFLOW,
    LaunchPlanIdentifier: ResourceType.LAUNCH_PLAN,
}
_IDENTIFIER_TYPES: Final[dict[ResourceType, type[Identifier]]] = {
    resource_type: identifier_type for identifier_type, resource_type in _RESOURCE_TYPES.items()
}
_ID_FIELDS: Final[frozenset[str]] = frozenset(
    {"resourceType", "project", "domain", "name", "version"}
)
_OPTIONAL_PARTIAL_FIELDS: Final[tuple[str, ...]] = ("project", "domain", "version")


def serialize_identifier(identifier: Identifier) -> WireIdentifier:
    """Encode one of the known identifier variants.

    Raises:
        ValidationError: ``identifier`` is not exactly a task, workflow or launch plan
            identifier.
    """
    resource_type = _RESOURCE_TYPES.get(type(identifier))
    if resource_type is None:
        raise ValidationError(
            f"unsupported identifier type {type(identifier).__qualname__!r}; expected one of "
            f"{sorted(cls.__name__ for cls in _RESOURCE_TYPES)}"
        )
    return {
        "resourceType": resource_type.value,
        "project": identifier.project,
        "domain": identifier.domain,
        "name": identifier.name,
        "version": identifier.version,
    }


def deserialize_identifier(
    raw: object, path: str = "WireIdentifier"
) -> TaskIdentifier | WorkflowIdentifier | LaunchPlanIdentifier:
    payload = _expect_object(raw, path, required=_ID_FIELDS)
    identifier_type = _IDENTIFIER_TYPES[_resource_type(payload["resourceType"], path)]
    return _construct(  # type: ignore[return-value]
        path,
        identifier_type,
        project=_expect_str(payload["project"], f"{path}.project"),
        domain=_expect_str(payload["domain"], f"{path}.domain"),
        name=_expect_str(payload["name"], f"{path}.name"),
        version=_expect_str(payload["version"], f"{path}.version"),
    )


def serialize_partial_task_identifier(identifier: PartialTaskIdentifier) -> WirePartialIdentifier:
    """Encode a task reference, omitting unresolved fields.

    A fully resolved reference encodes exactly like the equivalent :class:`TaskIdentifier`.
    """
    wire: WirePartialIdentifier = {"resourceType": ResourceType.TASK.value, "name": identifier.name}
    for attr in _OPTIONAL_PARTIAL_FIELDS:
        value = getattr(identifier, attr)
        if value is not None:
            wire[attr] = value  # type: ignore[literal-required]
    return wire


def deserialize_partial_task_identifier(
    raw: object, path: str = "WirePartialIdentifier"
) -> PartialTaskIdentifier:
    payload = _expect_object(
        raw,
        path,
        required={"resourceType", "name"},
        optional=set(_OPTIONAL_PARTIAL_FIELDS),
    )
    if _resource_type(payload["resourceType"], path) is not ResourceType.TASK:
        _decode_fail(f"{path}.resourceType", "task reference must have resource type TASK")
    optional = {
        attr: _expect_str(payload[attr], f"{path}.{attr}")
        for attr in _OPTIONAL_PARTIAL_FIELDS
        if attr in payload
    }
    return _construct(
        path,
        PartialTaskIdentifier,
        name=_expect_str(payload["name"], f"{path}.name"),
        **optional,
    )


def _resource_type(raw: object, path: str) -> ResourceType:
    value = _expect_str(raw, f"{path}.resourceType")
    try:
        return ResourceType(value)
    except ValueError:
        allowed = ", ".join(item.value for item in ResourceType)
        _decode_fail(f"{path}.resourceType", f"invalid value {value!r}; expected one of: {allowed}")


__all__ = [
    "deserialize_identifier",
    "deserialize_partial_task_identifier",
    "serialize_identifier",
    "serialize_partial_task_identifier",
]
