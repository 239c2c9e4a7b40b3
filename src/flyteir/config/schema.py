"""
flyteir — configuration schema.

File: src/flyteir/config/schema.py
Last updated: 2026-10-19

Purpose
- Typed, immutable configuration values handed to the codec and the logging setup.
- Validation of raw mappings (TOML tables, env/CLI overlays) into those values.

Functional requirements
- Reject unknown sections/keys and wrongly typed values with a structured error.
- Defaults reproduce the codec's built-in runtime metadata constants.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, Final

from flyteir.constants import DEFAULT_RUNTIME_FLAVOR, DEFAULT_RUNTIME_VERSION, DEFAULT_TASK_TYPE

_LOG_LEVELS: Final[frozenset[str]] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class ConfigValidationError(ValueError):
    """Raised when a raw config mapping does not match the schema."""

    issues: tuple[str, ...]

    def __init__(self, issues: tuple[str, ...]) -> None:
        self.issues = issues
        super().__init__("invalid config: " + "; ".join(issues))


@dataclass(frozen=True, slots=True)
class CodecConfig:
    """Values the codec stamps onto serialized templates, plus opt-in checks."""

    runtime_flavor: str = DEFAULT_RUNTIME_FLAVOR
    runtime_version: str = DEFAULT_RUNTIME_VERSION
    task_type: str = DEFAULT_TASK_TYPE
    validate_references: bool = False

    def __post_init__(self) -> None:
        issues: list[str] = []
        for name in ("runtime_flavor", "runtime_version", "task_type"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                issues.append(f"codec.{name}: must be a non-empty string")
        if not isinstance(self.validate_references, bool):
            issues.append("codec.validate_references: must be a boolean")
        if issues:
            raise ConfigValidationError(tuple(issues))


@dataclass(frozen=True, slots=True)
class ObservabilityConfig:
    log_level: str = "INFO"
    redact_secrets: bool = True

    def __post_init__(self) -> None:
        issues: list[str] = []
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            allowed = ", ".join(sorted(_LOG_LEVELS))
            issues.append(f"observability.log_level: must be one of {allowed}")
        else:
            object.__setattr__(self, "log_level", self.log_level.upper())
        if not isinstance(self.redact_secrets, bool):
            issues.append("observability.redact_secrets: must be a boolean")
        if issues:
            raise ConfigValidationError(tuple(issues))


@dataclass(frozen=True, slots=True)
class FlyteIRConfig:
    codec: CodecConfig = field(default_factory=CodecConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_CODEC_CONFIG: Final[CodecConfig] = CodecConfig()

_SECTIONS: Final[dict[str, type[CodecConfig] | type[ObservabilityConfig]]] = {
    "codec": CodecConfig,
    "observability": ObservabilityConfig,
}


def default_config() -> dict[str, Any]:
    """Return the default config as a plain nested mapping."""
    return FlyteIRConfig().to_dict()


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deep-merge ``overlay`` onto a copy of ``base``; overlay scalars win."""
    merged: dict[str, Any] = {}
    for key, value in base.items():
        merged[key] = merge_config(value, {}) if isinstance(value, Mapping) else value
    for key, value in overlay.items():
        existing = merged.get(key)
        if isinstance(value, Mapping) and isinstance(existing, Mapping):
            merged[key] = merge_config(existing, value)
        elif isinstance(value, Mapping):
            merged[key] = merge_config({}, value)
        else:
            merged[key] = value
    return merged


def build_config(raw: Mapping[str, object]) -> FlyteIRConfig:
    """Validate a raw nested mapping and build the typed config."""
    issues: list[str] = []
    for key in sorted(str(name) for name in raw):
        if key not in _SECTIONS:
            issues.append(f"{key}: unknown section")

    sections: dict[str, Any] = {}
    for section_name, section_type in _SECTIONS.items():
        section = raw.get(section_name, {})
        if not isinstance(section, Mapping):
            issues.append(f"{section_name}: expected table, got {type(section).__name__}")
            continue
        allowed = set(section_type.__dataclass_fields__)
        unknown = sorted(str(name) for name in section if name not in allowed)
        issues.extend(f"{section_name}.{name}: unknown key" for name in unknown)
        known = {name: value for name, value in section.items() if name in allowed}
        try:
            sections[section_name] = section_type(**known)
        except ConfigValidationError as exc:
            issues.extend(exc.issues)

    if issues:
        raise ConfigValidationError(tuple(issues))
    return FlyteIRConfig(**sections)


__all__ = [
    "DEFAULT_CODEC_CONFIG",
    "CodecConfig",
    "ConfigValidationError",
    "FlyteIRConfig",
    "ObservabilityConfig",
    "build_config",
    "default_config",
    "merge_config",
]
