"""
flyteir — unit tests for failure serialization

File: tests/unit/codec/test_failure_codec.py
Last updated: 2026-10-19

Purpose
- Validate that any raised failure maps to a well-formed error document without raising.

What this test file should cover
- Default classification and kind for plain exceptions.
- Explicit codes and recoverability from :class:`ExecutionFailure`.
- Hostile failures whose ``__str__`` or attributes raise.
"""

from __future__ import annotations

import pytest

from flyteir.codec import (
    DEFAULT_ERROR_MESSAGE,
    ExecutionFailure,
    deserialize_error_document,
    error_document_to_wire,
    serialize_failure,
)
from flyteir.domain import ErrorDocument, ErrorKind
from flyteir.errors import DecodeError

try:
    from hypothesis import given, settings
    from hypothesis import strategies as st
except ModuleNotFoundError:
    _HYPOTHESIS_AVAILABLE = False
else:
    _HYPOTHESIS_AVAILABLE = True


class _BrokenMessage(Exception):
    def __str__(self) -> str:
        raise RuntimeError("boom")


class _BrokenAttributes(Exception):
    @property
    def error_code(self) -> str:
        raise KeyError("error_code")

    @property
    def recoverable(self) -> bool:
        raise RuntimeError("recoverable")


class _HostileStr(str):
    def strip(self, chars: str | None = None) -> str:
        raise RuntimeError("strip")

    def __str__(self) -> str:
        raise RuntimeError("str")

    def __len__(self) -> int:
        raise RuntimeError("len")


class _HostileCode(Exception):
    error_code = _HostileStr("OutOfMemory")

    def __str__(self) -> str:
        return _HostileStr("killed")


class _TruthyRecoverable(Exception):
    recoverable = 1
    error_code = "   "


def test_plain_runtime_error_is_unknown_and_non_recoverable() -> None:
    document = serialize_failure(RuntimeError("oops"))

    assert document == ErrorDocument(
        code="SYSTEM:Unknown", message="oops", kind=ErrorKind.NON_RECOVERABLE
    )
    assert error_document_to_wire(document) == {
        "error": {"kind": "NON_RECOVERABLE", "code": "SYSTEM:Unknown", "message": "oops"}
    }


def test_execution_failure_controls_code_and_kind() -> None:
    failure = ExecutionFailure("disk full", error_code="OutOfDisk", recoverable=True)

    document = serialize_failure(failure)

    assert document.code == "SYSTEM:OutOfDisk"
    assert document.kind is ErrorKind.RECOVERABLE
    assert document.message == "disk full"


def test_only_boolean_true_marks_a_failure_recoverable() -> None:
    document = serialize_failure(_TruthyRecoverable("flaky"))

    assert document.kind is ErrorKind.NON_RECOVERABLE
    assert document.code == "SYSTEM:Unknown"


@pytest.mark.parametrize(
    "failure",
    [Exception(), ValueError(""), _BrokenMessage("ignored")],
    ids=["no-args", "empty-message", "raising-str"],
)
def test_missing_or_unreadable_message_uses_default(failure: BaseException) -> None:
    assert serialize_failure(failure).message == DEFAULT_ERROR_MESSAGE


def test_raising_attributes_fall_back_to_defaults() -> None:
    document = serialize_failure(_BrokenAttributes("bad"))

    assert document == ErrorDocument(code="SYSTEM:Unknown", message="bad")


def test_str_subclass_code_and_message_are_copied_without_their_overrides() -> None:
    document = serialize_failure(_HostileCode())

    assert document == ErrorDocument(code="SYSTEM:OutOfMemory", message="killed")
    assert type(document.code) is str
    assert type(document.message) is str


def test_base_exceptions_are_serialized() -> None:
    document = serialize_failure(KeyboardInterrupt())

    assert document.message == DEFAULT_ERROR_MESSAGE
    assert document.kind is ErrorKind.NON_RECOVERABLE


def test_error_document_wire_round_trip_and_default_kind() -> None:
    document = ErrorDocument(code="SYSTEM:OutOfDisk", message="", kind=ErrorKind.RECOVERABLE)

    assert deserialize_error_document(error_document_to_wire(document)) == document
    assert deserialize_error_document(
        {"error": {"code": "SYSTEM:Unknown", "message": "oops"}}
    ) == ErrorDocument(code="SYSTEM:Unknown", message="oops")


def test_deserialize_error_document_reports_paths() -> None:
    with pytest.raises(DecodeError, match=r"WireErrorDocument.error: missing required fields"):
        deserialize_error_document({"error": {"code": "SYSTEM:Unknown"}})
    with pytest.raises(DecodeError, match=r"WireErrorDocument.error: ErrorDocument.kind"):
        deserialize_error_document({"error": {"code": "c", "message": "m", "kind": "FATAL"}})


if _HYPOTHESIS_AVAILABLE:

    @settings(max_examples=25, derandomize=True, deadline=None)
    @given(
        message=st.text(max_size=40),
        error_code=st.none() | st.text(max_size=12),
        recoverable=st.booleans(),
    )
    def test_serialize_failure_never_raises(
        message: str, error_code: str | None, recoverable: bool
    ) -> None:
        failure = ExecutionFailure(message, error_code=error_code, recoverable=recoverable)

        document = serialize_failure(failure)

        assert document.message == (message or DEFAULT_ERROR_MESSAGE)
        assert document.code.startswith("SYSTEM:")
        assert len(document.code) > len("SYSTEM:")
        expected_kind = ErrorKind.RECOVERABLE if recoverable else ErrorKind.NON_RECOVERABLE
        assert document.kind is expected_kind
        assert deserialize_error_document(error_document_to_wire(document)) == document

else:

    def test_serialize_failure_never_raises() -> None:
        pytest.skip("hypothesis is not installed")
