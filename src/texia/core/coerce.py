"""Tolerant readers for schemaless document fields.

Documents may omit any key or carry a value of the wrong type. These helpers
never raise: anything they cannot read yields the caller's default.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

_NON_DIGITS_RE = re.compile(r"[^0-9]")


def as_str(value: Any, default: str = "") -> str:
    if isinstance(value, str):
        return value
    return default


def as_float(value: Any, default: float = 0.0) -> float:
    # bool is an int subclass but never a quantity
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    f = float(value)
    if f != f:  # NaN
        return default
    return f


def as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    try:
        return int(value)
    except (ValueError, OverflowError):
        return default


def as_timestamp(value: Any) -> datetime | None:
    """Read a timestamp stored as datetime or ISO-8601 text; naive means UTC."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str) and value.strip():
        try:
            ts = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def parse_quantity(text: Any, default: int = 0) -> int:
    """Integer read of a quantity label such as ``"120 mts"``.

    Keeps the digits only, so ``"1.200 mts"`` reads as 1200. No digits at all
    gives ``default``.
    """
    digits = _NON_DIGITS_RE.sub("", str(text or ""))
    if not digits:
        return default
    return int(digits)
