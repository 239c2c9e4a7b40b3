"""
flyteir — runtime config loader.

File: src/flyteir/config/loader.py
Last updated: 2026-10-19

Purpose
- Load effective config from defaults, a TOML file, env vars, and explicit overrides.

What should be included in this file
- Precedence logic: overrides > env (FLYTEIR_) > file > defaults.
- TOML loading via ``tomllib``.
- Deterministic environment variable mapping and coercion.

Non-functional requirements
- Keep loading deterministic and reproducible; no network, no writes.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Literal

from flyteir.config.schema import (
    CodecConfig,
    FlyteIRConfig,
    build_config,
    default_config,
    merge_config,
)

DEFAULT_CONFIG_FILE: Final[str] = "flyteir.toml"
ENV_PREFIX: Final[str] = "FLYTEIR_"

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})


@dataclass(frozen=True, slots=True)
class _EnvBinding:
    path: tuple[str, ...]
    value_type: Literal["str", "bool"]


class ConfigLoadError(ValueError):
    """Raised when config cannot be loaded or overrides cannot be coerced."""


def load_config(
    config_path: str | Path | None = None,
    *,
    overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> FlyteIRConfig:
    """Load effective config with deterministic precedence: overrides > env > file > defaults.

    ``overrides`` accepts dotted keys (``{"codec.task_type": "raw-container"}``) or nested
    tables. A missing default file is ignored; a missing explicit file is an error.
    """

    resolved_path = _resolve_config_path(config_path)
    env_map = dict(os.environ if environ is None else environ)
    file_payload = _load_toml_file(resolved_path, required=config_path is not None)

    merged = merge_config(default_config(), file_payload)
    merged = merge_config(merged, _collect_env_overrides(merged, env_map))
    merged = merge_config(merged, _materialize_overrides(overrides or {}))
    return build_config(merged)


def load_codec_config(
    config_path: str | Path | None = None,
    *,
    overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> CodecConfig:
    """Shortcut for the ``codec`` section of :func:`load_config`."""

    return load_config(config_path, overrides=overrides, environ=environ).codec


def dump_effective_config(config: FlyteIRConfig) -> str:
    """Return a deterministic JSON dump of the effective config."""

    return json.dumps(config.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _resolve_config_path(config_path: str | Path | None) -> Path:
    if config_path is None:
        return (Path.cwd() / DEFAULT_CONFIG_FILE).resolve()
    return Path(config_path).expanduser().resolve()


def _load_toml_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigLoadError(f"config file not found: {path}")
        return {}

    try:
        with path.open("rb") as handle:
            parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc

    return parsed


def _collect_env_overrides(
    config: Mapping[str, object], environ: Mapping[str, str]
) -> dict[str, Any]:
    bindings = _build_bindings(config)
    overrides: dict[str, Any] = {}
    for env_name in sorted(bindings):
        raw = environ.get(env_name)
        if raw is None:
            continue
        binding = bindings[env_name]
        _set_nested(overrides, binding.path, _coerce_env(raw, binding, env_name))
    return overrides


def _build_bindings(config: Mapping[str, object]) -> dict[str, _EnvBinding]:
    bindings: dict[str, _EnvBinding] = {}
    for section_name in sorted(config):
        section = config[section_name]
        if not isinstance(section, Mapping):
            continue
        for key in sorted(section):
            value = section[key]
            if isinstance(value, bool):
                kind: Literal["str", "bool"] = "bool"
            elif isinstance(value, str):
                kind = "str"
            else:
                continue
            path = (section_name, key)
            bindings[_env_name_for_path(path)] = _EnvBinding(path=path, value_type=kind)
    return bindings


def _coerce_env(raw: str, binding: _EnvBinding, env_name: str) -> object:
    value = raw.strip()
    if binding.value_type == "str":
        return value

    lowered = value.lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise ConfigLoadError(
        f"{env_name} -> {'.'.join(binding.path)} must be a boolean "
        "(true/false/1/0/yes/no/on/off)"
    )


def _materialize_overrides(overrides: Mapping[str, object]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key in sorted(overrides):
        value = overrides[key]
        if "." in key:
            path = tuple(part for part in key.split(".") if part)
            if not path:
                raise ConfigLoadError(f"invalid override key {key!r}")
            _set_nested(payload, path, value)
        elif isinstance(value, Mapping):
            payload[key] = merge_config(payload.get(key, {}), value)
        else:
            payload[key] = value
    return payload


def _set_nested(target: dict[str, Any], path: tuple[str, ...], value: object) -> None:
    cursor = target
    for part in path[:-1]:
        next_node = cursor.get(part)
        if not isinstance(next_node, dict):
            next_node = {}
            cursor[part] = next_node
        cursor = next_node
    cursor[path[-1]] = value


def _env_name_for_path(path: tuple[str, ...]) -> str:
    return ENV_PREFIX + "_".join(part.upper() for part in path)


__all__ = [
    "ConfigLoadError",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "dump_effective_config",
    "load_codec_config",
    "load_config",
]
