from __future__ import annotations

import re
from typing import Optional

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


# PUBLIC_INTERFACE
def parse_int_param(raw: Optional[str], default: int) -> int:
    """
    Leniently parse an integer query parameter.

    Only an optional sign followed by ASCII digits is accepted; surrounding
    whitespace, underscores and non-ASCII digits are unparseable. Missing,
    unparseable, or out of 64-bit range values fall back to ``default``
    instead of failing the request.
    """
    if raw is None or not _INT_PATTERN.fullmatch(raw):
        return default
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        return default
    return value
