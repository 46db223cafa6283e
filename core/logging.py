# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Structured logging with request scope
# PURPOSE: Stamp job / task / attempt / caller onto every log record
# CREATED: 08 OCT 2026
# ============================================================================
"""
Structured Logging

Every request that names a job (and possibly a task and attempt) opens a
log scope. Records created inside the scope carry it as `record.scope`,
so a denied view or a failed rerun can be traced back to the identifiers
and caller that produced it, whichever module logged it.

Usage:
    import logging
    from core.logging import log_context

    logger = logging.getLogger(__name__)

    with log_context(job_id="job_1326232085508_0004", caller="alice"):
        logger.info("Dispatching event")

Administrative mutations additionally emit a named audit marker on the
"audit" logger via log_audit().
"""

import json
import logging
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class LogContext:
    """Identifiers of the resource a request is operating on."""
    job_id: Optional[str] = None
    task_id: Optional[str] = None
    attempt_id: Optional[str] = None
    caller: Optional[str] = None
    operation: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Set fields only."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def short(self) -> str:
        parts = []
        for key, label in (("job_id", "job"), ("task_id", "task"), ("attempt_id", "attempt"), ("caller", "caller")):
            value = getattr(self, key)
            if value:
                parts.append(f"{label}={value}")
        return ", ".join(parts)


_EMPTY = LogContext()

# Per-thread scope stack; sync handlers run on worker threads
_local = threading.local()


def _stack() -> list:
    if not hasattr(_local, "stack"):
        _local.stack = []
    return _local.stack


def get_current_context() -> LogContext:
    """Innermost open scope, or an empty one."""
    stack = _stack()
    return stack[-1] if stack else _EMPTY


@contextmanager
def log_context(**scope):
    """
    Open a log scope nested in the current one.

    Fields given here override the enclosing scope; None values are
    ignored so a handler can pass optional identifiers straight through.

    Example:
        with log_context(job_id=job_id, task_id=task_id, caller=caller):
            task = resolver.resolve_task_string(job, task_id)
    """
    overrides = {k: str(v) for k, v in scope.items() if v is not None}
    ctx = replace(get_current_context(), **overrides)
    stack = _stack()
    stack.append(ctx)
    try:
        yield ctx
    finally:
        stack.pop()


# ============================================================================
# RECORDS
# ============================================================================

_previous_factory = None


def _scoped_record_factory(*args, **kwargs) -> logging.LogRecord:
    record = _previous_factory(*args, **kwargs)
    record.scope = get_current_context()
    return record


def install_record_scope() -> None:
    """
    Make every new LogRecord carry the current scope.

    Installing twice is a no-op.
    """
    global _previous_factory
    if logging.getLogRecordFactory() is _scoped_record_factory:
        return
    _previous_factory = logging.getLogRecordFactory()
    logging.setLogRecordFactory(_scoped_record_factory)


def _scope_of(record: logging.LogRecord) -> LogContext:
    return getattr(record, "scope", None) or get_current_context()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": _now(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        scope = _scope_of(record).to_dict()
        if scope:
            log_data["context"] = scope

        # Audit payload
        if getattr(record, "extra", None):
            log_data["data"] = record.extra

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data["source"] = f"{record.filename}:{record.lineno}"
        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Single-line format for development, scope shown in brackets."""

    def format(self, record: logging.LogRecord) -> str:
        scope = _scope_of(record).short()
        line = f"{_now()[:19]} {record.levelname:<8} {record.name}"
        if scope:
            line += f" [{scope}]"
        line += f": {record.getMessage()}"
        if getattr(record, "extra", None):
            line += f" {record.extra}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: Union[str, int] = "INFO", json_output: bool = False) -> None:
    """
    Route the root logger to stdout and install record scoping.

    Args:
        level: Log level name or number
        json_output: StructuredFormatter instead of HumanFormatter
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    install_record_scope()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if json_output else HumanFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)


# ============================================================================
# AUDIT LOGGING
# ============================================================================

def log_audit(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a named audit marker for an administrative mutation.

    Every control command emits one, whatever its outcome, so the
    history of resize / rerun / port requests can be queried.

    Args:
        name: Marker name (e.g., "setnumreducers", "rerunmaptask")
        data: Optional marker data
        logger: Logger to use instead of "audit"
    """
    audit_data: Dict[str, Any] = {"audit": name, "timestamp": _now()}
    audit_data.update(get_current_context().to_dict())
    if data:
        audit_data["data"] = data

    (logger or logging.getLogger("audit")).info(f"AUDIT: {name}", extra={"extra": audit_data})


__all__ = [
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "configure_logging",
    "install_record_scope",
    "log_context",
    "get_current_context",
    "log_audit",
]
