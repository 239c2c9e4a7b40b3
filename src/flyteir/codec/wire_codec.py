"""
flyteir — wire codec facade.

File: src/flyteir/codec/wire_codec.py
Last updated: 2026-10-19

Purpose
- Bind a :class:`CodecConfig` to the pure codec functions for template submission and
  failure reporting, and log each conversion.

What should be included in this file
- Template serialization in both directions, failure conversion, JSON/YAML rendering.
- `structlog` decision logs with stable snake_case event names.

Non-functional requirements
- Holds no mutable state besides the immutable config, so one instance may be shared by
  concurrent callers.
"""

from __future__ import annotations

from typing import Any

import structlog

from flyteir.codec.encoding import dumps_json, dumps_yaml, loads_json, loads_yaml
from flyteir.codec.failures import error_document_to_wire, serialize_failure
from flyteir.codec.tasks import deserialize_task_template, serialize_task_template
from flyteir.codec.wire import WireErrorDocument, WireTaskTemplate, WireWorkflowTemplate
from flyteir.codec.workflow import deserialize_workflow_template, serialize_workflow_template
from flyteir.config.schema import DEFAULT_CODEC_CONFIG, CodecConfig
from flyteir.domain.errors import ErrorDocument
from flyteir.domain.tasks import TaskTemplate
from flyteir.domain.workflow import WorkflowTemplate


class WireCodec:
    """Config-bound entry point for turning IR values into wire trees and text."""

    def __init__(
        self,
        config: CodecConfig = DEFAULT_CODEC_CONFIG,
        *,
        logger: Any | None = None,
    ) -> None:
        if not isinstance(config, CodecConfig):
            raise TypeError(f"config must be CodecConfig, got {type(config).__name__}")
        self._config = config
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    @property
    def config(self) -> CodecConfig:
        return self._config

    def serialize_task_template(self, template: TaskTemplate) -> WireTaskTemplate:
        wire = serialize_task_template(template, config=self._config)
        self._logger.debug(
            "codec_task_template_serialized",
            image=template.container.image,
            task_type=self._config.task_type,
            runtime_flavor=self._config.runtime_flavor,
            runtime_version=self._config.runtime_version,
        )
        return wire

    def deserialize_task_template(self, raw: object) -> TaskTemplate:
        template = deserialize_task_template(raw)
        self._logger.debug("codec_task_template_deserialized", image=template.container.image)
        return template

    def serialize_workflow_template(self, template: WorkflowTemplate) -> WireWorkflowTemplate:
        wire = serialize_workflow_template(template, config=self._config)
        self._logger.debug(
            "codec_workflow_template_serialized",
            node_count=len(template.nodes),
            output_count=len(template.outputs),
            validate_references=self._config.validate_references,
        )
        return wire

    def deserialize_workflow_template(self, raw: object) -> WorkflowTemplate:
        template = deserialize_workflow_template(raw, config=self._config)
        self._logger.debug(
            "codec_workflow_template_deserialized", node_count=len(template.nodes)
        )
        return template

    def serialize_failure(self, failure: BaseException) -> ErrorDocument:
        document = serialize_failure(failure)
        self._logger.info(
            "codec_failure_serialized",
            failure_type=type(failure).__name__,
            code=document.code,
            kind=document.kind.value,
        )
        return document

    def failure_to_wire(self, failure: BaseException) -> WireErrorDocument:
        return error_document_to_wire(self.serialize_failure(failure))

    def to_json(self, wire: object) -> str:
        return dumps_json(wire)

    def from_json(self, text: str | bytes) -> Any:
        return loads_json(text)

    def to_yaml(self, wire: object) -> str:
        return dumps_yaml(wire)

    def from_yaml(self, text: str | bytes) -> Any:
        return loads_yaml(text)


__all__ = ["WireCodec"]
