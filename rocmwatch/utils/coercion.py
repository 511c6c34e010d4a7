"""Tolerant decoders for loosely-typed rocm-smi values.

rocm-smi reports the same quantity as a JSON number on one release and as a
string on the next, sometimes with the unit glued on ("1350Mhz",
"(1350Mhz)"). These helpers return None instead of raising so a single odd
field never costs the rest of the device record.
"""

from __future__ import annotations

import math
import re
from typing import Any

# Unit decorations rocm-smi wraps around clock speeds
_UINT_STRIP_CHARS = "()MmHhZz"
_DIGITS = re.compile(r"[0-9]+")
# Plain decimal with optional exponent; no "_" separators or hex floats
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def coerce_float(value: Any) -> float | None:
    """Decode a float from a number or a numeric string.

    Args:
        value: Raw JSON value.

    Returns
    -------
        float, or None when the value is absent, non-numeric or non-finite.

    Examples:
        >>> coerce_float("123.0")
        123.0
        >>> coerce_float("N/A") is None
        True
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, int | float):
        result = float(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if not _DECIMAL.fullmatch(stripped):
            return None
        result = float(stripped)
    else:
        return None

    if not math.isfinite(result):
        return None
    return result


def coerce_uint(value: Any) -> int | None:
    """Decode an unsigned integer from a number or a decorated string.

    Surrounding parentheses and the letters M, h, z (either case) are
    stripped from both ends of a string before parsing, so "1350Mhz",
    "(1350MHz)" and 1350 all decode to 1350.

    Args:
        value: Raw JSON value.

    Returns
    -------
        Non-negative int, or None when nothing parseable remains.
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value if value >= 0 else None

    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and value >= 0:
            return int(value)
        return None

    if isinstance(value, str):
        stripped = value.strip().strip(_UINT_STRIP_CHARS)
        if _DIGITS.fullmatch(stripped):
            return int(stripped)
        return None

    return None


def coerce_str(value: Any) -> str | None:
    """Keep string values, absorb everything else as None."""
    if isinstance(value, str):
        return value
    return None
