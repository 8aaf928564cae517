"""Normalization helpers.

Centralizes parsing of the loosely-typed values that arrive from
the configuration form and the key-value store.
"""

from __future__ import annotations

import math
import re
from typing import Any

# Leading-integer parse: optional whitespace, optional sign, ASCII digits.
# A 0x/0X prefix switches to hexadecimal and needs at least one hex digit.
_LEADING_INT = re.compile(r"\s*([+-]?)(?:0[xX]([0-9a-fA-F]+)|([0-9]+))", re.ASCII)
_HEX_PREFIX = re.compile(r"\s*[+-]?0[xX]", re.ASCII)

#: Marker written to the store for an integer field that failed to parse.
NAN_MARKER = "NaN"


def parse_int(value: Any) -> int | None:
    """Parse *value* as an integer, returning ``None`` when it is not one.

    Strings are parsed up to the first non-digit (``"12abc"`` -> ``12``,
    ``"5.7"`` -> ``5``, ``"0x1A"`` -> ``26``). Only ASCII digits count.
    Floats truncate toward zero. Booleans map to 1/0. Digit runs too long
    for ``int()`` are treated as unparsable.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return None
        sign, hex_digits, digits = match.groups()
        if hex_digits is None and _HEX_PREFIX.match(value):
            return None
        try:
            parsed = int(hex_digits, 16) if hex_digits is not None else int(digits)
        except ValueError:
            return None
        return -parsed if sign == "-" else parsed
    return None


def coerce_int_or_default(value: Any, default: int = 0) -> int:
    """Return ``parse_int(value)`` or *default* when it does not parse."""
    parsed = parse_int(value)
    if parsed is None:
        return default
    return parsed


def to_stored_int(value: Any) -> str:
    """Serialize an integer field for the store, ``NaN`` when unparsable."""
    parsed = parse_int(value)
    if parsed is None:
        return NAN_MARKER
    try:
        return str(parsed)
    except ValueError:
        # Hex input can exceed the decimal conversion limit.
        return NAN_MARKER


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)
