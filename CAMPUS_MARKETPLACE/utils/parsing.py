import math
import re
from typing import Any, Optional

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

def parse_leading_int(value: Any) -> Optional[int]:
    """Read an integer the way a form field is read: "12", " 12 ", "12abc" and 12.9
    all give 12; anything without leading digits gives None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None
