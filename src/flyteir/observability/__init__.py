"""
flyteir — observability package.

File: src/flyteir/observability/__init__.py
Last updated: 2026-10-19

Purpose
- Structured JSON-lines logging for codec events, with redaction and correlation fields.
"""

from flyteir.observability.logging import (
    LoggingConfig,
    StructuredLoggingHandle,
    correlation_scope,
    default_log_redactor,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)

__all__ = [
    "LoggingConfig",
    "StructuredLoggingHandle",
    "correlation_scope",
    "default_log_redactor",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
