"""Text-to-value conversion for scraped table cells and query dates."""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any

QUERY_DATE_FORMAT = "%Y%m%d"
DISPLAY_DATE_FORMAT = "%Y-%m-%d"

_STRIP_CHARS = re.compile(r"[\s$,%]")
_LEADING_NUMBER = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

_DATE_FORMATS = (
    "%Y%m%d",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%Y/%m/%d",
    "%d/%m/%Y",
)


def parse_amount(value: Any) -> float:
    """
    Best-effort float from a locale-formatted cell ("$97,152,900", "38.17%").

    Only the leading numeric part is read. Anything unreadable becomes 0.0 so a
    single bad cell never aborts the row it belongs to.
    """
    if value is None:
        return 0.0

    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    cleaned = _STRIP_CHARS.sub("", str(value))
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return 0.0

    number = float(match.group(0))
    return number if math.isfinite(number) else 0.0


def parse_int(value: Any) -> int:
    return int(parse_amount(value))


def parse_date(value: str | None, fmt: str | None = None) -> date | str | None:
    """
    Parse an ISO, compact or written-out date ("Jan 07, 2018").

    Returns None instead of raising. When ``fmt`` is given the parsed date is
    rendered with ``strftime(fmt)``.
    """
    if value is None:
        return None

    text = " ".join(str(value).split())
    if not text:
        return None

    parsed: date | None = None
    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        for candidate in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, candidate).date()
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if fmt is None:
        return parsed
    return parsed.strftime(fmt)
