from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any


def parse_compact_date(value: Any) -> date | None:
    """
    Parse a Ubisoft compact date into a `date`.

    Supports:
      - int: 20221206
      - str: "20221206"

    Returns None for None / "". Raises ValueError on anything else.
    """
    if value is None or value == "":
        return None

    if isinstance(value, bool):
        raise ValueError(f"Invalid compact date: {value!r}")

    if isinstance(value, int):
        value = str(value)

    if not isinstance(value, str):
        raise ValueError(f"Invalid compact date: {value!r}")

    v = value.strip()
    if len(v) != 8 or not v.isdigit():
        raise ValueError(f"Invalid compact date (expected YYYYMMDD): {value!r}")

    return datetime.strptime(v, "%Y%m%d").date()


def parse_iso_z(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing "Z" and naive values mean UTC."""
    v = value.strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    dt = datetime.fromisoformat(v)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt
