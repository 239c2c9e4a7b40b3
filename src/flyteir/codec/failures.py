"""Conversion of execution failures into wire error documents.

:func:`serialize_failure` is total: whatever the executor raised, it returns a document.
The classification comes from the failure's ``error_code`` attribute, not its class name,
so a plain ``RuntimeError("oops")`` is reported as ``SYSTEM:Unknown``.
"""

from __future__ import annotations

from typing import Final

from flyteir.codec._wire import _construct, _expect_object, _expect_str
from flyteir.codec.wire import WireErrorDocument
from flyteir.constants import SYSTEM_ERROR_CODE_PREFIX, UNKNOWN_ERROR_CLASSIFICATION
from flyteir.domain.errors import ErrorDocument, ErrorKind

DEFAULT_ERROR_MESSAGE: Final[str] = "no error message available"


class ExecutionFailure(Exception):
    """Failure raised by task code that wants control over its error document."""

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.recoverable = recoverable


def serialize_failure(failure: BaseException) -> ErrorDocument:
    """Return the error document for ``failure``. Never raises."""
    recoverable = _safe_attribute(failure, "recoverable")
    kind = ErrorKind.RECOVERABLE if recoverable is True else ErrorKind.NON_RECOVERABLE

    return ErrorDocument(
        code=SYSTEM_ERROR_CODE_PREFIX + _safe_classification(failure),
        message=_safe_message(failure),
        kind=kind,
    )


def _safe_attribute(failure: BaseException, name: str) -> object:
    try:
        return getattr(failure, name, None)
    except Exception:  # noqa: BLE001 - user-defined properties may raise anything
        return None


def _safe_classification(failure: BaseException) -> str:
    classification = _safe_attribute(failure, "error_code")
    if not isinstance(classification, str):
        return UNKNOWN_ERROR_CLASSIFICATION
    # Exact str copy; subclass overrides are never called.
    text = str.__str__(classification)
    return text if text.strip() else UNKNOWN_ERROR_CLASSIFICATION


def _safe_message(failure: BaseException) -> str:
    try:
        message = str.__str__(str(failure))
    except Exception:  # noqa: BLE001 - user-defined __str__ may raise anything
        return DEFAULT_ERROR_MESSAGE
    return message if message else DEFAULT_ERROR_MESSAGE


def error_document_to_wire(document: ErrorDocument) -> WireErrorDocument:
    return {
        "error": {
            "kind": document.kind.value,
            "code": document.code,
            "message": document.message,
        }
    }


def deserialize_error_document(raw: object, path: str = "WireErrorDocument") -> ErrorDocument:
    outer = _expect_object(raw, path, required={"error"})
    error_path = f"{path}.error"
    payload = _expect_object(
        outer["error"], error_path, required={"code", "message"}, optional={"kind"}
    )
    kind = _expect_str(payload.get("kind", ErrorKind.NON_RECOVERABLE.value), f"{error_path}.kind")
    return _construct(
        error_path,
        ErrorDocument,
        code=_expect_str(payload["code"], f"{error_path}.code"),
        message=_expect_str(payload["message"], f"{error_path}.message"),
        kind=kind,
    )


__all__ = [
    "DEFAULT_ERROR_MESSAGE",
    "ExecutionFailure",
    "deserialize_error_document",
    "error_document_to_wire",
    "serialize_failure",
]
