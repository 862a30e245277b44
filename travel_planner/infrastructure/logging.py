"""Structured logging: one JSON object per line."""

from __future__ import annotations

import json
import sys
import time
import uuid
from typing import Any, Optional, TextIO


class StructuredLogger:
    """Writes JSON-line events tagged with a trace id."""

    def __init__(self, trace_id: Optional[str] = None, output: Optional[TextIO] = None):
        self.trace_id = trace_id or str(uuid.uuid4())[:8]
        self._output = output or sys.stderr
        self._timers: dict[str, float] = {}

    def _emit(self, data: dict[str, Any]) -> None:
        data["trace_id"] = self.trace_id
        data["timestamp"] = time.time()
        try:
            line = json.dumps(data, ensure_ascii=False, default=str)
            self._output.write(line + "\n")
            self._output.flush()
        except (OSError, TypeError, ValueError) as exc:
            # Last-resort fallback to avoid silent logger failures.
            fallback = {
                "event": "logger_internal_error",
                "trace_id": self.trace_id,
                "timestamp": time.time(),
                "error": str(exc),
            }
            sys.stderr.write(json.dumps(fallback, ensure_ascii=False, default=str) + "\n")
            sys.stderr.flush()

    def request_start(self, key: str, **extra: Any) -> None:
        self._timers[key] = time.time()
        self._emit({"event": "request_start", "request": key, **extra})

    def request_end(self, key: str, *, status_code: int | None = None, **extra: Any) -> None:
        start = self._timers.pop(key, time.time())
        duration_ms = round((time.time() - start) * 1000, 1)
        self._emit({
            "event": "request_end",
            "request": key,
            "status_code": status_code,
            "duration_ms": duration_ms,
            **extra,
        })

    def error(self, component: str, error: str, **extra: Any) -> None:
        self._emit({"event": "error", "component": component, "error": error, **extra})

    def warning(self, component: str, message: str, **extra: Any) -> None:
        self._emit({"event": "warning", "component": component, "message": message, **extra})


_logger: Optional[StructuredLogger] = None


def get_logger(trace_id: Optional[str] = None) -> StructuredLogger:
    global _logger
    if _logger is None or (trace_id and _logger.trace_id != trace_id):
        _logger = StructuredLogger(trace_id=trace_id)
    return _logger


__all__ = ["StructuredLogger", "get_logger"]
