"""Container and task template codec."""

from __future__ import annotations

from flyteir.codec._wire import (
    _construct,
    _expect_list,
    _expect_object,
    _expect_str,
    _expect_str_list,
)
from flyteir.codec.interface import deserialize_typed_interface, serialize_typed_interface
from flyteir.codec.wire import WireContainer, WireKeyValuePair, WireTaskTemplate
from flyteir.config.schema import DEFAULT_CODEC_CONFIG, CodecConfig
from flyteir.constants import RUNTIME_TYPE_FLYTE_SDK
from flyteir.domain.tasks import Container, KeyValuePair, TaskTemplate


def serialize_container(container: Container) -> WireContainer:
    return {
        "image": container.image,
        "command": list(container.command),
        "args": list(container.args),
        "env": [_serialize_key_value_pair(pair) for pair in container.env],
    }


def deserialize_container(raw: object, path: str = "WireContainer") -> Container:
    payload = _expect_object(raw, path, required={"image"}, optional={"command", "args", "env"})
    env = tuple(
        _deserialize_key_value_pair(item, f"{path}.env[{index}]")
        for index, item in enumerate(_expect_list(payload.get("env", []), f"{path}.env"))
    )
    return _construct(
        path,
        Container,
        image=_expect_str(payload["image"], f"{path}.image"),
        command=tuple(_expect_str_list(payload.get("command", []), f"{path}.command")),
        args=tuple(_expect_str_list(payload.get("args", []), f"{path}.args")),
        env=env,
    )


def _serialize_key_value_pair(pair: KeyValuePair) -> WireKeyValuePair:
    return {"key": pair.key, "value": pair.value}


def _deserialize_key_value_pair(raw: object, path: str) -> KeyValuePair:
    payload = _expect_object(raw, path, required={"key", "value"})
    return _construct(
        path,
        KeyValuePair,
        key=_expect_str(payload["key"], f"{path}.key"),
        value=_expect_str(payload["value"], f"{path}.value"),
    )


def serialize_task_template(
    template: TaskTemplate, *, config: CodecConfig = DEFAULT_CODEC_CONFIG
) -> WireTaskTemplate:
    """Encode ``template`` and stamp the runtime metadata and task type from ``config``."""
    return {
        "container": serialize_container(template.container),
        "interface": serialize_typed_interface(template.interface),
        "metadata": {
            "runtime": {
                "type": RUNTIME_TYPE_FLYTE_SDK,
                "flavor": config.runtime_flavor,
                "version": config.runtime_version,
            }
        },
        "type": config.task_type,
    }


def deserialize_task_template(raw: object, path: str = "WireTaskTemplate") -> TaskTemplate:
    """Decode a task template.

    The runtime block and ``type`` tag describe the producing SDK, not the task, so they
    are checked for shape and then dropped.
    """
    payload = _expect_object(
        raw, path, required={"container", "interface"}, optional={"metadata", "type"}
    )
    if "metadata" in payload:
        metadata = _expect_object(payload["metadata"], f"{path}.metadata", optional={"runtime"})
        if "runtime" in metadata:
            runtime = _expect_object(
                metadata["runtime"],
                f"{path}.metadata.runtime",
                optional={"type", "flavor", "version"},
            )
            for key, value in runtime.items():
                _expect_str(value, f"{path}.metadata.runtime.{key}")
    if "type" in payload:
        _expect_str(payload["type"], f"{path}.type")
    return TaskTemplate(
        container=deserialize_container(payload["container"], f"{path}.container"),
        interface=deserialize_typed_interface(payload["interface"], f"{path}.interface"),
    )


__all__ = [
    "deserialize_container",
    "deserialize_task_template",
    "serialize_container",
    "serialize_task_template",
]
