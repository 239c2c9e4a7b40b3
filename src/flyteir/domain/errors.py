"""Wire-facing record of an execution failure."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from flyteir.domain._validation import _as_enum, _as_str, _set


class ErrorKind(StrEnum):
    RECOVERABLE = "RECOVERABLE"
    NON_RECOVERABLE = "NON_RECOVERABLE"


@dataclass(frozen=True, slots=True)
class ErrorDocument:
    code: str
    message: str
    kind: ErrorKind = ErrorKind.NON_RECOVERABLE

    def __post_init__(self) -> None:
        _set(self, "code", _as_str(self.code, "ErrorDocument.code"))
        _set(self, "message", _as_str(self.message, "ErrorDocument.message", allow_empty=True))
        _set(self, "kind", _as_enum(ErrorKind, self.kind, "ErrorDocument.kind"))


__all__ = ["ErrorDocument", "ErrorKind"]
