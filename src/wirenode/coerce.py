"""Numeric coercion applied to every recomputed value before it is written.

Anything that cannot be read as a number becomes 0. Strings are parsed, so a
handler returning ``"42"`` writes ``42`` and one returning ``"abc"`` writes
``0``. Strings follow JavaScript's Number() grammar.
"""

from __future__ import annotations

import math
import numbers
import re


def coerce_numeric(value: object) -> int | float:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, str):
        return _parse(value)
    if value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    return value if isinstance(value, float) else number


# Number() string grammar: ASCII decimal literals, 0x/0o/0b integers, Infinity.
_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_RADIX = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")
_INFINITY = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


def _parse(text: str) -> int | float:
    text = text.strip()
    # Blank strings read as zero.
    if not text:
        return 0
    if text in _INFINITY:
        return _INFINITY[text]
    if _RADIX.fullmatch(text):
        return int(text, 0)
    if not _DECIMAL.fullmatch(text):
        return 0
    if text.lstrip("+-").isdigit():
        return int(text)
    return float(text)
