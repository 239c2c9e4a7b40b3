"""
flyteir — configuration package.

File: src/flyteir/config/__init__.py
Last updated: 2026-10-19

Purpose
- Public surface for codec/logging configuration: typed schema plus the TOML/env loader.
"""

from flyteir.config.loader import (
    DEFAULT_CONFIG_FILE,
    ENV_PREFIX,
    ConfigLoadError,
    dump_effective_config,
    load_codec_config,
    load_config,
)
from flyteir.config.schema import (
    DEFAULT_CODEC_CONFIG,
    CodecConfig,
    ConfigValidationError,
    FlyteIRConfig,
    ObservabilityConfig,
    build_config,
    default_config,
    merge_config,
)

__all__ = [
    "DEFAULT_CODEC_CONFIG",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "CodecConfig",
    "ConfigLoadError",
    "ConfigValidationError",
    "FlyteIRConfig",
    "ObservabilityConfig",
    "build_config",
    "default_config",
    "dump_effective_config",
    "load_codec_config",
    "load_config",
    "merge_config",
]
