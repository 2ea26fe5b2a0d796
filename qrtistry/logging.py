"""Structured logging for the render engine: audit events and call tracing."""

import functools
import json
import logging
import sys
import time
import traceback
from datetime import datetime, timezone

NAMESPACE = "qrtistry"

# Sits between WARNING (30) and ERROR (40)
AUDIT = 35
logging.addLevelName(AUDIT, "AUDIT")


def _truncate(value: object, max_len: int = 80) -> str:
    s = str(value)
    if len(s) > max_len:
        return s[:max_len] + "..."
    return s


def _summarize(value: object) -> str:
    """Short, log-safe description of an argument or return value."""
    kind = type(value).__name__
    if kind in ("Image", "ndarray") or "Image" in kind:
        size = getattr(value, "size", None) if kind != "ndarray" else getattr(value, "shape", None)
        return f"<{kind} {size}>"
    if isinstance(value, (list, tuple)) and len(value) > 8:
        return f"{kind}[{len(value)}]"
    if isinstance(value, dict):
        return f"dict[{len(value)} keys]"
    return _truncate(repr(value), 80)


def _timestamp(record: logging.LogRecord, fmt: str) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(fmt)[:-3]


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record):
        entry = {
            "ts": _timestamp(record, "%Y-%m-%dT%H:%M:%S.%f") + "Z",
            "level": record.levelname,
            "src": record.name,
        }
        event = getattr(record, "event", None)
        if event is not None:
            entry["event"] = event
        elif record.getMessage():
            entry["msg"] = record.getMessage()
        if hasattr(record, "duration_ms"):
            entry["duration_ms"] = round(record.duration_ms, 2)
        if getattr(record, "ctx", None):
            entry["ctx"] = record.ctx
        if record.exc_info and record.exc_info[1]:
            entry["traceback"] = traceback.format_exception(*record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored single-line console output."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "AUDIT": "\033[35m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelname, "")
        parts = [
            _timestamp(record, "%H:%M:%S.%f"),
            f"{color}{record.levelname:5s}{self.RESET}",
            f"[{record.name}]",
        ]
        event = getattr(record, "event", None)
        if event is not None:
            parts.append(event)
        if hasattr(record, "duration_ms"):
            parts.append(f"({record.duration_ms:.1f}ms)")

        ctx = getattr(record, "ctx", None)
        if ctx:
            parts.append(" ".join(f"{k}={_truncate(v)}" for k, v in ctx.items()))
        elif event is None and record.getMessage():
            parts.append(record.getMessage())

        if record.exc_info and record.exc_info[1]:
            parts.append("\n" + "".join(traceback.format_exception(*record.exc_info)))
        return " ".join(parts)


def setup_logging(level: str = "INFO", log_file: str | None = None, json_format: bool = False):
    """Configure the ``qrtistry`` logger tree.

    Args:
        level: DEBUG, INFO, AUDIT, WARNING or ERROR.
        log_file: Optional path; file output is always JSON lines.
        json_format: Emit JSON on the console as well.
    """
    root = logging.getLogger(NAMESPACE)
    wanted = logging.getLevelName(level.upper())
    root.setLevel(wanted if isinstance(wanted, int) else logging.INFO)
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(JsonFormatter() if json_format else ConsoleFormatter())
    root.addHandler(console)

    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setFormatter(JsonFormatter())
        root.addHandler(fh)
    return root


def get_logger(module_name: str) -> logging.Logger:
    """Logger scoped under the ``qrtistry`` namespace."""
    return logging.getLogger(f"{NAMESPACE}.{module_name}")


def _emit(log: logging.Logger, level: int, event: str, ctx: dict,
          duration_ms: float | None = None, exc_info=None) -> None:
    if not log.isEnabledFor(level):
        return
    record = log.makeRecord(log.name, level, fn="", lno=0, msg="", args=(), exc_info=exc_info)
    record.event = event
    record.ctx = ctx
    if duration_ms is not None:
        record.duration_ms = duration_ms
    log.handle(record)


def audit(event: str, logger: logging.Logger | None = None, **context):
    """Emit an AUDIT-level structured event, e.g. ``audit("symbol.rendered", size=512)``."""
    _emit(logger or logging.getLogger(NAMESPACE), AUDIT, event, context)


def trace(func=None, *, logger_name: str | None = None):
    """Decorator logging entry (DEBUG), exit with timing (INFO) and failures (ERROR).

    Exceptions are logged with their traceback and re-raised unchanged.
    """
    def decorator(fn):
        name = logger_name or fn.__module__.removeprefix(f"{NAMESPACE}.")
        log = get_logger(name)

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            if log.isEnabledFor(logging.DEBUG):
                _emit(log, logging.DEBUG, f"{fn.__name__}.enter", {
                    "args": [_summarize(a) for a in args],
                    "kwargs": {k: _summarize(v) for k, v in kwargs.items()},
                })

            start = time.perf_counter()
            try:
                result = fn(*args, **kwargs)
            except Exception:
                elapsed = (time.perf_counter() - start) * 1000
                _emit(log, logging.ERROR, f"{fn.__name__}.error", {"function": fn.__name__},
                      duration_ms=elapsed, exc_info=sys.exc_info())
                raise

            elapsed = (time.perf_counter() - start) * 1000
            _emit(log, logging.INFO, f"{fn.__name__}.done", {"result": _summarize(result)},
                  duration_ms=elapsed)
            return result

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
