"""
Lenient number parsing for data that comes from storage or the order backend
"""
import math
import re
from typing import Any

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_float(value: Any, default: float = 0.0) -> float:
    """Parse the leading number of value; anything unparseable yields default"""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _FLOAT_PREFIX.match(str(value))
        if not match:
            return default
        number = float(match.group(1))
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def parse_int(value: Any, default: int = 0) -> int:
    """Parse the leading integer of value ("2.7" -> 2, "abc" -> default)"""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return default
        return int(value)
    match = _INT_PREFIX.match(str(value))
    if not match:
        return default
    return int(match.group(1))
