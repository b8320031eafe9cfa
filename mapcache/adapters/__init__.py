"""Concrete mapping-provider adapters."""
