"""Concrete tool selection and wiring."""

from __future__ import annotations

import logging
import os
from typing import Optional

from mapcache.adapters.mapbox import mock as mock_mapbox
from mapcache.config.settings import Settings, load_settings
from mapcache.security.key_manager import MAPBOX_TOKEN_ENV, get_key_manager
from mapcache.security.redact import redact_sensitive
from mapcache.shared.exceptions import ToolError

_logger = logging.getLogger("map-cache.tools")
_DEFAULT_ALLOWLIST = {"geocoding", "directions"}


def _has_mapbox_token() -> bool:
    return get_key_manager().has_key(MAPBOX_TOKEN_ENV)


def _tool_allowlist() -> set[str]:
    raw = os.getenv("TOOL_ALLOWLIST", "")
    if not raw.strip():
        return set(_DEFAULT_ALLOWLIST)
    values = {item.strip().lower() for item in raw.split(",") if item.strip()}
    return values or set(_DEFAULT_ALLOWLIST)


def _ensure_tool_allowed(tool_name: str) -> None:
    if tool_name not in _tool_allowlist():
        raise ToolError(tool_name, f"Tool blocked by TOOL_ALLOWLIST: {tool_name}")


def _raise_if_strict_without_token(tool_name: str, settings: Settings) -> None:
    if settings.strict_external_data and not _has_mapbox_token():
        raise ToolError(tool_name, "STRICT_EXTERNAL_DATA=true requires MAPBOX_ACCESS_TOKEN")


def _wants_real(tool_name: str, settings: Settings) -> bool:
    mode = settings.maps_provider
    if mode == "mock":
        return False
    if mode == "real" and not _has_mapbox_token():
        raise ToolError(tool_name, "MAPS_PROVIDER=real requires MAPBOX_ACCESS_TOKEN")
    return _has_mapbox_token()


def _select(tool_name: str, settings: Optional[Settings]):
    settings = settings or load_settings()
    _ensure_tool_allowed(tool_name)
    _raise_if_strict_without_token(tool_name, settings)
    if _wants_real(tool_name, settings):
        try:
            from mapcache.adapters.mapbox import real as real_mapbox

            return real_mapbox
        except Exception as exc:
            if settings.strict_external_data or settings.maps_provider == "real":
                raise ToolError(tool_name, f"Failed to load mapbox adapter: {redact_sensitive(str(exc))}") from None
            _logger.warning(
                "Failed to load mapbox %s adapter, fallback to mock: %s",
                tool_name,
                redact_sensitive(str(exc)),
            )
    return mock_mapbox


def get_geocoding_tool(settings: Optional[Settings] = None):
    return _select("geocoding", settings)


def get_directions_tool(settings: Optional[Settings] = None):
    return _select("directions", settings)


def describe_active_tools(settings: Optional[Settings] = None) -> dict[str, str]:
    settings = settings or load_settings()
    mode = settings.maps_provider
    active = "mapbox" if mode != "mock" and _has_mapbox_token() else "mock"
    return {
        "geocoding": active,
        "directions": active,
        "maps_provider": mode,
        "strict_external_data": "true" if settings.strict_external_data else "false",
    }


__all__ = [
    "get_geocoding_tool",
    "get_directions_tool",
    "describe_active_tools",
]
