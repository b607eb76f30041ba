"""Type conversion utilities."""

from __future__ import annotations

import re

_NUMBER_RE = re.compile(r"^[+-]?\d+(?:\.\d+)?$")


def to_int(raw: str | int | float | None) -> int | None:
    """Convert string or number to int, return None if invalid.

    Handles various formats:
        - None → None
        - int → int (passthrough)
        - 12.0 → 12
        - "123" → 123
        - "1,234" → 1234
        - "1 234" → 1234
        - "12.0" → 12
        - "" → None
        - invalid → None

    Args:
        raw: Input value (str, int, float or None).

    Returns:
        Integer or None if conversion fails.
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, int):
        return raw

    if isinstance(raw, float):
        return int(raw)

    if isinstance(raw, str):
        compact = raw.strip().replace(",", "").replace(" ", "")
        if _NUMBER_RE.match(compact):
            return int(float(compact))
        # Fall back to digits only ("12 seeders" -> 12)
        txt = "".join(ch for ch in raw if ch.isdigit())
        if not txt:
            return None
        try:
            return int(txt)
        except ValueError:
            return None

    return None


def to_count(raw: str | int | float | None) -> int:
    """Like :func:`to_int` but defaults to 0 and never goes negative."""
    value = to_int(raw)
    if value is None or value < 0:
        return 0
    return value


def to_imdb_id(raw: str | int | None) -> str | None:
    """Normalize IMDb IDs to the ``tt0000000`` form."""
    if raw is None:
        return None
    txt = str(raw).strip().lower()
    if not txt:
        return None
    digits = txt[2:] if txt.startswith("tt") else txt
    if not digits.isdigit():
        return None
    return f"tt{digits.zfill(7)}"
