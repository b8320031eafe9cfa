"""Structured logging: JSON lines with secret scrubbing."""

from __future__ import annotations

import json
import sys
import time
import uuid
from typing import Any, Optional

from mapcache.security.key_manager import get_key_manager


class StructuredLogger:
    """Emit one JSON object per line; every line passes through the key scrubber.

    Timing is per call: ``tool_start`` returns the start time and the caller
    hands it back to ``tool_call``, so concurrent lookups never share a timer.
    """

    def __init__(self, trace_id: Optional[str] = None, output=None):
        self.trace_id = trace_id or str(uuid.uuid4())[:8]
        self._output = output

    def _scrub(self, text: str) -> str:
        return get_key_manager().scrub_text(text)

    def _emit(self, data: dict[str, Any]) -> None:
        data["trace_id"] = self.trace_id
        data["timestamp"] = time.time()
        line = json.dumps(data, ensure_ascii=False, default=str)
        out = self._output or sys.stderr
        out.write(self._scrub(line) + "\n")
        out.flush()

    def tool_start(self) -> float:
        return time.perf_counter()

    def tool_call(self, tool_name: str, *, started: Optional[float] = None, **extra: Any) -> None:
        if started is not None:
            extra["duration_ms"] = round((time.perf_counter() - started) * 1000, 1)
        self._emit({"event": "tool_call", "tool": tool_name, **extra})

    def cache_lookup(self, cache_name: str, *, hit: bool, **extra: Any) -> None:
        self._emit({"event": "cache_lookup", "cache": cache_name, "outcome": "hit" if hit else "miss", **extra})

    def warning(self, component: str, message: str, **extra: Any) -> None:
        self._emit({"event": "warning", "component": component, "message": self._scrub(message), **extra})


_logger: Optional[StructuredLogger] = None


def get_logger(trace_id: Optional[str] = None) -> StructuredLogger:
    global _logger
    if _logger is None or (trace_id and _logger.trace_id != trace_id):
        _logger = StructuredLogger(trace_id=trace_id)
    return _logger
