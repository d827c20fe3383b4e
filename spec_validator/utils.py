"""
utils.py – low-level value helpers shared by the validator.

- Strict (type-sensitive) equality for enum literals
- Integer-likeness of attribute values
- Character length of attribute values
- Date-format matching
"""

from __future__ import annotations

import datetime as _dt
import re
from typing import Any

# --------------------------------------------------------------------------- #
# Type Checking & Validation Helpers                                          #
# --------------------------------------------------------------------------- #

_DIGITS_RE = re.compile(r"[0-9]+")


def strict_equals(a: Any, b: Any) -> bool:
    """Return True iff *a* and *b* are equal and of the very same type.

    ``1 == True`` and ``1 == 1.0`` hold in Python, but an enum literal ``1``
    must not accept ``True`` or ``1.0``.
    """
    return type(a) is type(b) and a == b


def is_integer_like(value: Any) -> bool:
    """An ``int`` (but not a ``bool``), or a string of ASCII decimal digits."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and _DIGITS_RE.fullmatch(value) is not None


def char_length(value: Any) -> int:
    """Number of characters (code points, not bytes) of *value* as text."""
    return len(value if isinstance(value, str) else str(value))


def matches_date_format(value: Any, fmt: str) -> bool:
    """Return True iff *value* is a string that parses with ``strptime(fmt)``."""
    if not isinstance(value, str):
        return False
    try:
        _dt.datetime.strptime(value, fmt)
        return True
    except ValueError:
        return False
