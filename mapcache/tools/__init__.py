"""Mapping-provider tool protocols and I/O schemas."""
