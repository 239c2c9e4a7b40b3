"""
flyteir — unit tests for config loader

File: tests/unit/config/test_loader.py
Last updated: 2026-10-19

Purpose
- Validate deterministic config loading from defaults, TOML, env overrides, and explicit
  overrides.

What this test file should cover
- Precedence: overrides > env > file > defaults.
- Deterministic env var mapping and boolean coercion.
- Missing/invalid files and unknown keys surface as errors with actionable paths.
- Deterministic effective config dumping.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from flyteir import __version__
from flyteir.config import (
    DEFAULT_CODEC_CONFIG,
    CodecConfig,
    ConfigLoadError,
    ConfigValidationError,
    dump_effective_config,
    load_codec_config,
    load_config,
)


def _write_config(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_loader_precedence_default_file_env_overrides(tmp_path: Path) -> None:
    config_path = tmp_path / "flyteir.toml"
    _write_config(
        config_path,
        """
[codec]
task_type = "file-task"
runtime_flavor = "python-slim"
""".strip(),
    )
    env = {"FLYTEIR_CODEC_TASK_TYPE": "env-task"}

    file_loaded = load_config(config_path, environ={})
    env_loaded = load_config(config_path, environ=env)
    override_loaded = load_config(
        config_path, environ=env, overrides={"codec.task_type": "override-task"}
    )

    assert file_loaded.codec.task_type == "file-task"
    assert env_loaded.codec.task_type == "env-task"
    assert override_loaded.codec.task_type == "override-task"
    assert override_loaded.codec.runtime_flavor == "python-slim"
    assert override_loaded.codec.runtime_version == __version__


def test_missing_default_file_yields_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    loaded = load_config(environ={})

    assert loaded.codec == DEFAULT_CODEC_CONFIG
    assert loaded.observability.log_level == "INFO"
    assert loaded.observability.redact_secrets is True


def test_default_file_in_working_directory_is_picked_up(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write_config(tmp_path / "flyteir.toml", '[codec]\ntask_type = "raw-container"\n')
    monkeypatch.chdir(tmp_path)

    assert load_codec_config(environ={}).task_type == "raw-container"


def test_env_values_are_stripped_and_booleans_coerced(tmp_path: Path) -> None:
    config_path = tmp_path / "flyteir.toml"
    _write_config(config_path, "")

    loaded = load_config(
        config_path,
        environ={
            "FLYTEIR_CODEC_RUNTIME_FLAVOR": "  python-gpu  ",
            "FLYTEIR_CODEC_VALIDATE_REFERENCES": "Yes",
            "FLYTEIR_OBSERVABILITY_LOG_LEVEL": "debug",
            "FLYTEIR_OBSERVABILITY_REDACT_SECRETS": "off",
            "FLYTEIR_UNRELATED": "ignored",
        },
    )

    assert loaded.codec.runtime_flavor == "python-gpu"
    assert loaded.codec.validate_references is True
    assert loaded.observability.log_level == "DEBUG"
    assert loaded.observability.redact_secrets is False


def test_invalid_env_boolean_raises_load_error(tmp_path: Path) -> None:
    config_path = tmp_path / "flyteir.toml"
    _write_config(config_path, "")

    with pytest.raises(ConfigLoadError, match="FLYTEIR_CODEC_VALIDATE_REFERENCES"):
        load_config(config_path, environ={"FLYTEIR_CODEC_VALIDATE_REFERENCES": "maybe"})


def test_blank_env_string_fails_validation(tmp_path: Path) -> None:
    config_path = tmp_path / "flyteir.toml"
    _write_config(config_path, "")

    with pytest.raises(ConfigValidationError, match="codec.task_type: must be a non-empty"):
        load_config(config_path, environ={"FLYTEIR_CODEC_TASK_TYPE": "   "})


def test_nested_overrides_merge_with_file_values(tmp_path: Path) -> None:
    config_path = tmp_path / "flyteir.toml"
    _write_config(config_path, '[codec]\nruntime_version = "2.0.0"\n')

    loaded = load_config(
        config_path,
        environ={},
        overrides={"codec": {"validate_references": True}, "observability.log_level": "ERROR"},
    )

    assert loaded.codec == CodecConfig(runtime_version="2.0.0", validate_references=True)
    assert loaded.observability.log_level == "ERROR"


def test_missing_explicit_file_and_invalid_toml(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="config file not found"):
        load_config(tmp_path / "absent.toml", environ={})

    broken = tmp_path / "broken.toml"
    _write_config(broken, "[codec\ntask_type = 1\n")
    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_config(broken, environ={})


def test_unknown_keys_and_wrong_types_are_reported_together(tmp_path: Path) -> None:
    config_path = tmp_path / "flyteir.toml"
    _write_config(
        config_path,
        """
[codec]
flavour = "python"
validate_references = "true"

[cluster]
name = "prod"
""".strip(),
    )

    with pytest.raises(ConfigValidationError) as excinfo:
        load_config(config_path, environ={})

    assert excinfo.value.issues == (
        "cluster: unknown section",
        "codec.flavour: unknown key",
        "codec.validate_references: must be a boolean",
    )


def test_effective_config_dump_is_deterministic(tmp_path: Path) -> None:
    config_path = tmp_path / "flyteir.toml"
    _write_config(config_path, '[observability]\nlog_level = "warning"\n')

    first = dump_effective_config(load_config(config_path, environ={}))
    second = dump_effective_config(load_config(config_path, environ={}))

    assert first == second
    payload = json.loads(first)
    assert list(payload) == ["codec", "observability"]
    assert payload["observability"] == {"log_level": "WARNING", "redact_secrets": True}
    assert payload["codec"]["task_type"] == "python-task"
