"""
Date helpers.

Dates are handled as YYYY-MM-DD strings throughout; the parser compares them
as plain strings and never validates calendar ranges.
"""

import re
from datetime import datetime
from typing import Any

_DATE_TOKEN_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def today_str() -> str:
    """Return today's date in local time as YYYY-MM-DD."""
    return datetime.now().date().isoformat()


def is_date_token(value: Any) -> bool:
    """True if value has the YYYY-MM-DD shape used by date-log lines."""
    return isinstance(value, str) and _DATE_TOKEN_RE.fullmatch(value) is not None
