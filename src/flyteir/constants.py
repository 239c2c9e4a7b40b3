"""Stable constants shared across the IR and codec layers."""

from __future__ import annotations

from typing import Final

from flyteir import __version__

# Runtime metadata injected into every serialized task template.
RUNTIME_TYPE_FLYTE_SDK: Final[str] = "FLYTE_SDK"
DEFAULT_RUNTIME_FLAVOR: Final[str] = "python"
DEFAULT_RUNTIME_VERSION: Final[str] = __version__
DEFAULT_TASK_TYPE: Final[str] = "python-task"

# Well-known upstream marker for nodes that consume workflow inputs.
START_NODE_ID: Final[str] = "start-node"

# Error document code prefix for failures raised by the executor.
SYSTEM_ERROR_CODE_PREFIX: Final[str] = "SYSTEM:"
UNKNOWN_ERROR_CLASSIFICATION: Final[str] = "Unknown"

# Wire integer widths.
INT64_MIN: Final[int] = -(1 << 63)
INT64_MAX: Final[int] = (1 << 63) - 1
NANOS_PER_SECOND: Final[int] = 1_000_000_000

__all__ = [
    "DEFAULT_RUNTIME_FLAVOR",
    "DEFAULT_RUNTIME_VERSION",
    "DEFAULT_TASK_TYPE",
    "INT64_MAX",
    "INT64_MIN",
    "NANOS_PER_SECOND",
    "RUNTIME_TYPE_FLYTE_SDK",
    "START_NODE_ID",
    "SYSTEM_ERROR_CODE_PREFIX",
    "UNKNOWN_ERROR_CLASSIFICATION",
]
