"""
Field decoders shared by the API and snapshot readers.

Both sources deliver loosely typed values (J-Quants sends numbers as strings,
snapshots are text). Decoding fails closed: anything unparseable becomes None.
"""

import math
from typing import Any, Optional


def safe_float(value: Any) -> Optional[float]:
    """Safely convert value to float, None when empty or not a finite number."""
    if value is None or value == "" or value == "None":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (ValueError, TypeError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_bool(value: Any) -> bool:
    """Only a true boolean or the literal string 'true' decodes as True."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def safe_str(value: Any) -> str:
    """None becomes the empty string; everything else is stringified."""
    if value is None:
        return ""
    return str(value)
