"""Error types shared by the domain layer and the wire codec."""

from __future__ import annotations


class ValidationError(ValueError):
    """Raised for structural/programmer errors such as a closed variant set being violated.

    These are never retriable: the offending value must be fixed by the caller.
    """


class DecodeError(ValueError):
    """Raised when an untyped wire value cannot be decoded into the typed IR."""


__all__ = ["DecodeError", "ValidationError"]
