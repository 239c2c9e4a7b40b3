"""JSON-lines logging for codec events.

Component loggers are ``structlog`` loggers backed by the standard library. One
``ProcessorFormatter`` renders both structlog events and plain ``logging`` records into
the same line shape::

    {"timestamp": ..., "level": ..., "logger": ..., "message": ...,
     <correlation keys>, "fields": {...}, "exception": ...}

Secret-looking keys, container env pairs (``{"key": NAME, "value": VALUE}``) and inline
credentials are redacted before rendering.
"""

from __future__ import annotations

import logging
import math
import re
import sys
import threading
from collections.abc import Callable, Iterator, Mapping, MutableMapping
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import IO, Any, Final

import structlog

from flyteir.config.schema import ObservabilityConfig

JSONValue = str | int | float | bool | None | list["JSONValue"] | dict[str, "JSONValue"]
LogRedactor = Callable[[JSONValue], JSONValue]

_REDACTED: Final[str] = "***REDACTED***"

_SENSITIVE_KEY_TERMS: Final[tuple[str, ...]] = (
    "secret",
    "token",
    "password",
    "passphrase",
    "api_key",
    "apikey",
    "access_key",
    "authorization",
    "credential",
    "private_key",
)
_INLINE_ASSIGNMENT: Final[re.Pattern[str]] = re.compile(
    r"(?i)\b(api[_-]?key|token|password|secret|authorization)\b\s*([:=])\s*([^\s,;]+)"
)
_BEARER_TOKEN: Final[re.Pattern[str]] = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/-]+=*")
_AWS_ACCESS_KEY: Final[re.Pattern[str]] = re.compile(r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: int | str = "INFO"
    logger_name: str = "flyteir"
    log_file: Path | str | None = None
    log_to_stream: bool = True
    stream: IO[str] | None = None
    redact_secrets: bool = True


class StructuredLoggingHandle:
    """Sinks installed by one :func:`setup_structured_logging` call."""

    def __init__(
        self,
        logger: logging.Logger,
        handlers: tuple[logging.Handler, ...],
        log_path: Path | None,
    ) -> None:
        self.logger = logger
        self.log_path = log_path
        self._handlers = handlers
        self._lock = threading.Lock()
        self._closed = False

    @property
    def is_shutdown(self) -> bool:
        return self._closed

    def flush(self) -> None:
        for handler in self._handlers:
            handler.flush()

    def shutdown(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        for handler in self._handlers:
            handler.flush()
            self.logger.removeHandler(handler)
            handler.close()


_active_lock = threading.Lock()
_active: StructuredLoggingHandle | None = None


def setup_logging(
    observability: ObservabilityConfig | None = None,
    *,
    log_file: Path | str | None = None,
    stream: IO[str] | None = None,
) -> StructuredLoggingHandle:
    """Configure logging from the ``[observability]`` config section."""
    settings = observability if observability is not None else ObservabilityConfig()
    return setup_structured_logging(
        LoggingConfig(
            level=settings.log_level,
            log_file=log_file,
            stream=stream,
            redact_secrets=settings.redact_secrets,
        )
    )


def setup_structured_logging(config: LoggingConfig) -> StructuredLoggingHandle:
    """Install JSON-lines sinks on ``config.logger_name`` and route structlog into them.

    Replaces the sinks of any previously active setup.
    """
    level = _parse_level(config.level)
    handlers: list[logging.Handler] = []
    log_path: Path | None = None
    if config.log_file is not None:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    if config.log_to_stream:
        handlers.append(logging.StreamHandler(config.stream or sys.stderr))
    if not handlers:
        raise ValueError("logging config must enable a stream or a log file")

    shutdown_logging()

    redactor = default_log_redactor if config.redact_secrets else _keep
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.ExtraAdder(),
        ],
        processors=[
            structlog.processors.format_exc_info,
            _JsonLineShaper(redactor),
            structlog.processors.JSONRenderer(
                sort_keys=True, separators=(",", ":"), ensure_ascii=False
            ),
        ],
    )

    logger = logging.getLogger(config.logger_name)
    logger.setLevel(level)
    logger.propagate = False
    for stale in list(logger.handlers):
        logger.removeHandler(stale)
        stale.close()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    global _active
    handle = StructuredLoggingHandle(logger, tuple(handlers), log_path)
    with _active_lock:
        _active = handle
    return handle


def shutdown_logging(handle: StructuredLoggingHandle | None = None) -> None:
    """Close the sinks of ``handle`` (default: the active setup). Safe to call twice."""
    global _active
    with _active_lock:
        target = handle if handle is not None else _active
        if target is not None and target is _active:
            _active = None
    if target is not None:
        target.shutdown()


def get_active_logging_handle() -> StructuredLoggingHandle | None:
    with _active_lock:
        return _active


@contextmanager
def correlation_scope(**fields: str) -> Iterator[None]:
    """Attach ``fields`` (e.g. ``workflow``, ``execution_id``) to every record in scope."""
    bound: dict[str, str] = {}
    for key, value in fields.items():
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"correlation value must not be empty (key {key!r})")
        bound[key] = value.strip()
    with structlog.contextvars.bound_contextvars(**bound):
        yield


def get_correlation_context() -> dict[str, str]:
    return {key: str(value) for key, value in structlog.contextvars.get_contextvars().items()}


def default_log_redactor(value: JSONValue) -> JSONValue:
    """Mask secret-looking keys, env pairs and inline credentials at any depth."""
    return _redact(value, key=None)


class _JsonLineShaper:
    """Turn a structlog event dict into the flat JSON-line layout."""

    def __init__(self, redactor: LogRedactor) -> None:
        self._redactor = redactor

    def __call__(
        self, _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
    ) -> dict[str, Any]:
        record: logging.LogRecord = event_dict.pop("_record")
        event_dict.pop("_from_structlog", None)
        message = event_dict.pop("event", "")
        exception = event_dict.pop("exception", None)

        line: dict[str, Any] = {
            "timestamp": _utc_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": self._redact_text(message),
        }
        for key in sorted(get_correlation_context()):
            if key in event_dict:
                line[key] = str(event_dict.pop(key))
        if event_dict:
            line["fields"] = self._redactor(_to_json(dict(event_dict)))
        if exception is not None:
            line["exception"] = self._redact_text(exception)
        return line

    def _redact_text(self, value: object) -> str:
        redacted = self._redactor(value if isinstance(value, str) else str(value))
        return redacted if isinstance(redacted, str) else str(redacted)


def _parse_level(value: int | str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        parsed = logging.getLevelName(value.strip().upper())
        if isinstance(parsed, int):
            return parsed
    raise ValueError(f"unsupported logging level {value!r}")


def _utc_timestamp(epoch_seconds: float) -> str:
    moment = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _to_json(value: object) -> JSONValue:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else repr(value)
    if isinstance(value, Mapping):
        return {str(key): _to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(item) for item in value]
    return repr(value)


def _keep(value: JSONValue) -> JSONValue:
    return value


def _redact(value: JSONValue, *, key: str | None) -> JSONValue:
    if key is not None and _is_sensitive(key):
        return _REDACTED
    if isinstance(value, str):
        return _redact_inline(value)
    if isinstance(value, list):
        return [_redact(item, key=None) for item in value]
    if isinstance(value, dict):
        env_name = value.get("key")
        if isinstance(env_name, str) and "value" in value and _is_sensitive(env_name):
            return {**value, "value": _REDACTED}
        return {name: _redact(item, key=name) for name, item in value.items()}
    return value


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(term in lowered for term in _SENSITIVE_KEY_TERMS)


def _redact_inline(text: str) -> str:
    text = _INLINE_ASSIGNMENT.sub(lambda match: f"{match[1]}{match[2]}{_REDACTED}", text)
    text = _BEARER_TOKEN.sub(f"Bearer {_REDACTED}", text)
    return _AWS_ACCESS_KEY.sub(_REDACTED, text)


__all__ = [
    "JSONValue",
    "LogRedactor",
    "LoggingConfig",
    "StructuredLoggingHandle",
    "correlation_scope",
    "default_log_redactor",
    "get_active_logging_handle",
    "get_correlation_context",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
