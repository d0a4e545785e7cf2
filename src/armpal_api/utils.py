"""Utility functions."""
import math
from typing import Any, Optional


def to_int(s: Any) -> Optional[int]:
    """Convert a string or number to int, returning None if conversion fails."""
    if s is None or isinstance(s, bool):
        return None
    try:
        return int(s)
    except (TypeError, ValueError):
        return None


def to_number(value: Any) -> Optional[float]:
    """Parse a JSON-ish scalar as a finite number.

    Accepts ints, floats and numeric strings ("12", " 7.5 "). Booleans, blank
    strings, NaN/inf and anything else return None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def scalar_to_text(value: Any) -> Optional[str]:
    """Render a model-emitted scalar as text without reinterpreting it.

    5 -> "5", 2.5 -> "2.5", "8-12" -> "8-12", "" -> None. Non-blank strings
    are returned exactly as given.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, str):
        return value if value.strip() else None
    return None
