"""Versioned resource identifiers.

The identifier family is closed: only :class:`TaskIdentifier`, :class:`WorkflowIdentifier`
and :class:`LaunchPlanIdentifier` name registrable resources. The codec rejects any other
:class:`Identifier` subclass rather than guessing a resource type for it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from flyteir.domain._validation import _as_optional_str, _as_str, _fail, _set


class ResourceType(StrEnum):
    TASK = "TASK"
    WORKFLOW = "WORKFLOW"
    LAUNCH_PLAN = "LAUNCH_PLAN"


@dataclass(frozen=True, slots=True)
class Identifier:
    """Common shape of every versioned resource identifier."""

    project: str
    domain: str
    name: str
    version: str

    def __post_init__(self) -> None:
        label = type(self).__name__
        for attr in ("project", "domain", "name", "version"):
            _set(self, attr, _as_str(getattr(self, attr), f"{label}.{attr}"))


@dataclass(frozen=True, slots=True)
class TaskIdentifier(Identifier):
    pass


@dataclass(frozen=True, slots=True)
class WorkflowIdentifier(Identifier):
    pass


@dataclass(frozen=True, slots=True)
class LaunchPlanIdentifier(Identifier):
    pass


@dataclass(frozen=True, slots=True)
class PartialTaskIdentifier:
    """Task reference whose project, domain or version may be filled in at registration."""

    name: str
    project: str | None = None
    domain: str | None = None
    version: str | None = None

    def __post_init__(self) -> None:
        _set(self, "name", _as_str(self.name, "PartialTaskIdentifier.name"))
        for attr in ("project", "domain", "version"):
            _set(
                self,
                attr,
                _as_optional_str(getattr(self, attr), f"PartialTaskIdentifier.{attr}"),
            )

    @property
    def is_resolved(self) -> bool:
        return None not in (self.project, self.domain, self.version)

    def to_task_identifier(self) -> TaskIdentifier:
        """Return the fully resolved identifier or raise ``ValueError`` naming missing parts."""
        if self.project is None or self.domain is None or self.version is None:
            missing = [
                attr for attr in ("project", "domain", "version") if getattr(self, attr) is None
            ]
            _fail("PartialTaskIdentifier", f"unresolved fields: {missing}")
        return TaskIdentifier(
            project=self.project,
            domain=self.domain,
            name=self.name,
            version=self.version,
        )

    @classmethod
    def from_task_identifier(cls, identifier: TaskIdentifier) -> PartialTaskIdentifier:
        return cls(
            name=identifier.name,
            project=identifier.project,
            domain=identifier.domain,
            version=identifier.version,
        )


__all__ = [
    "Identifier",
    "LaunchPlanIdentifier",
    "PartialTaskIdentifier",
    "ResourceType",
    "TaskIdentifier",
    "WorkflowIdentifier",
]
