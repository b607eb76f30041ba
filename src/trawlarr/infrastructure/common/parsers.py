"""Parsing utilities for data extraction."""

from __future__ import annotations

import re
from datetime import datetime, timezone

_SIZE_RE = re.compile(r"^\s*(\d+(?:[.,]\d+)*)\s*([KMGT]I?B|B)?", re.IGNORECASE)
_THOUSANDS_RE = re.compile(r",(?=\d{3}(?:\D|$))")

_UNIT_EXPONENT = {
    "B": 0,
    "KB": 1,
    "KIB": 1,
    "MB": 2,
    "MIB": 2,
    "GB": 3,
    "GIB": 3,
    "TB": 4,
    "TIB": 4,
}


def parse_size_to_bytes(size_str: str | int | None) -> int:
    """Parse size string to bytes.

    Every unit is binary (powers of 1024), with or without the ``i``.

    Supports formats:
        - "1234" (raw bytes)
        - "4.5 GB"
        - "500 MB"
        - "2 GiB"
        - "1,234.5 MB"

    Args:
        size_str: Size string.

    Returns:
        Size in bytes (int), 0 if absent or unparsable.
    """
    if size_str is None:
        return 0

    if isinstance(size_str, int):
        return max(size_str, 0)

    if not size_str:
        return 0

    match = _SIZE_RE.match(size_str)
    if not match:
        return 0

    number = _THOUSANDS_RE.sub("", match.group(1)).replace(",", ".")
    try:
        value = float(number)
    except ValueError:
        return 0

    unit = (match.group(2) or "B").upper()
    return int(value * 1024 ** _UNIT_EXPONENT[unit])


def parse_datetime(raw: str | int | None) -> datetime | None:
    """Parse an ISO-8601 timestamp (or unix epoch) into an aware datetime.

    Naive timestamps are assumed to be UTC.  Never raises; anything
    unparsable yields ``None``.
    """
    if raw is None or isinstance(raw, bool):
        return None

    txt = str(raw).strip()
    if not txt:
        return None

    try:
        if txt.isdigit():
            epoch = int(txt)
            # 13 digits = milliseconds
            if epoch > 10**11:
                epoch //= 1000
            return datetime.fromtimestamp(epoch, tz=timezone.utc)

        if txt.endswith(("Z", "z")):
            txt = txt[:-1] + "+00:00"
        parsed = datetime.fromisoformat(txt)
    except (ValueError, OverflowError, OSError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
