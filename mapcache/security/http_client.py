"""Outbound HTTP client shared by every provider adapter.

Responsibilities:
  1. scrub API keys out of exception messages
  2. one timeout / retry policy, capped from the environment
  3. keep the httpx dependency in a single place
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Optional

import httpx

from mapcache.security.key_manager import get_key_manager
from mapcache.shared.exceptions import ToolError

_logger = logging.getLogger("map-cache.http")

_DEFAULT_TIMEOUT_CAP = 15.0
_DEFAULT_TIMEOUT_FLOOR = 0.5
_DEFAULT_RETRY_CAP = 2


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        _logger.warning("ignoring non-numeric %s=%r", name, raw)
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        _logger.warning("ignoring non-integer %s=%r", name, raw)
        return default


class SecureHttpClient:
    """httpx wrapper that never lets a key leak through an error."""

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        max_retries: int = 1,
        tool_name: str = "http",
    ):
        cap = _env_float("TOOL_HTTP_TIMEOUT_CAP_SECONDS", _DEFAULT_TIMEOUT_CAP)
        floor = _env_float("TOOL_HTTP_TIMEOUT_FLOOR_SECONDS", _DEFAULT_TIMEOUT_FLOOR)
        retry_cap = _env_int("TOOL_HTTP_RETRY_CAP", _DEFAULT_RETRY_CAP)
        self._timeout = float(min(cap, max(floor, float(timeout))))
        self._max_retries = max(0, min(retry_cap, int(max_retries)))
        self._tool_name = tool_name
        self._km = get_key_manager()

    def get(
        self,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        """GET ``url`` and return the decoded JSON body."""
        last_error: Optional[Exception] = None

        for attempt in range(1, self._max_retries + 2):
            try:
                resp = httpx.get(
                    url,
                    params=params,
                    headers=headers,
                    timeout=self._timeout,
                )
                resp.raise_for_status()
                return resp.json()
            except httpx.HTTPStatusError as e:
                safe_msg = self._km.scrub_text(str(e))
                last_error = ToolError(self._tool_name, f"HTTP {e.response.status_code}: {safe_msg}")
                if e.response.status_code < 500 and e.response.status_code != 429:
                    break
            except httpx.TimeoutException:
                last_error = ToolError(self._tool_name, f"request timed out ({self._timeout}s), attempt {attempt}")
            except httpx.HTTPError as e:
                safe_msg = self._km.scrub_text(str(e))
                last_error = ToolError(self._tool_name, f"request failed: {safe_msg}")
            except ValueError as e:
                safe_msg = self._km.scrub_text(str(e))
                last_error = ToolError(self._tool_name, f"invalid JSON response: {safe_msg}")
                break

            if attempt <= self._max_retries:
                time.sleep(0.5 * attempt)

        raise last_error  # type: ignore[misc]
