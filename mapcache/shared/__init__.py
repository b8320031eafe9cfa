"""Shared cross-layer types and exceptions."""

from mapcache.shared.exceptions import InvalidInput, KeyMissingError, ToolError

__all__ = ["ToolError", "KeyMissingError", "InvalidInput"]
