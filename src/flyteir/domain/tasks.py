"""Container task definitions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from flyteir.domain._validation import _as_instance, _as_str, _as_str_tuple, _as_tuple_of, _set
from flyteir.domain.interface import TypedInterface


@dataclass(frozen=True, slots=True)
class KeyValuePair:
    key: str
    value: str

    def __post_init__(self) -> None:
        _set(self, "key", _as_str(self.key, "KeyValuePair.key"))
        _set(self, "value", _as_str(self.value, "KeyValuePair.value", allow_empty=True))


@dataclass(frozen=True, slots=True)
class Container:
    """Process to launch for a task. ``command`` and ``args`` keep argv order."""

    image: str
    command: tuple[str, ...] = ()
    args: tuple[str, ...] = ()
    env: tuple[KeyValuePair, ...] = ()

    def __post_init__(self) -> None:
        _set(self, "image", _as_str(self.image, "Container.image"))
        _set(
            self,
            "command",
            _as_str_tuple(self.command, "Container.command", allow_empty_items=True),
        )
        _set(self, "args", _as_str_tuple(self.args, "Container.args", allow_empty_items=True))
        _set(self, "env", _as_tuple_of(self.env, KeyValuePair, "Container.env"))

    @classmethod
    def with_env_mapping(
        cls,
        image: str,
        *,
        command: tuple[str, ...] = (),
        args: tuple[str, ...] = (),
        env: Mapping[str, str] | None = None,
    ) -> Container:
        pairs = tuple(KeyValuePair(key, value) for key, value in (env or {}).items())
        return cls(image=image, command=command, args=args, env=pairs)


@dataclass(frozen=True, slots=True)
class TaskTemplate:
    """Task definition submitted to the registry.

    Runtime metadata (flavor, SDK version, runtime type) is not stored here. The codec
    stamps it onto every serialized template from its configuration.
    """

    container: Container
    interface: TypedInterface

    def __post_init__(self) -> None:
        _as_instance(self.container, Container, "TaskTemplate.container")
        _as_instance(self.interface, TypedInterface, "TaskTemplate.interface")


__all__ = ["Container", "KeyValuePair", "TaskTemplate"]
