"""Python client helpers for PrizmDoc Server with affinity session support."""

__version__ = "0.1.0"
