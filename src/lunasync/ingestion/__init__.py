"""Ingestion helpers.

Everything that arrives from the configuration form or the key-value store
passes through these helpers before it reaches a typed model.
"""

from lunasync.ingestion.normalize import coerce_int_or_default, parse_int, safe_float, safe_str, to_stored_int

__all__ = [
    "coerce_int_or_default",
    "parse_int",
    "safe_float",
    "safe_str",
    "to_stored_int",
]
