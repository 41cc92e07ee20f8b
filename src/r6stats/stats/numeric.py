from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import MalformedValue

WRAPPED_NUMBER_KEY = "value"


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def unwrap_number(value: Any, *, field: str = "?", key: str = WRAPPED_NUMBER_KEY) -> float:
    """Read a float that is either bare (`0.5`) or wrapped (`{"value": 0.5}`).

    Missing values (None, or a wrapper without `key`) read as 0.0.
    """
    if value is None:
        return 0.0
    if isinstance(value, Mapping):
        value = value.get(key)
        if value is None:
            return 0.0
    if not _is_number(value):
        raise MalformedValue(f"Expected number for '{field}'", {"value": value})
    return float(value)


def read_int(value: Any, *, field: str = "?") -> int:
    """Read an integer counter; integral floats (`3.0`) are accepted."""
    if value is None:
        return 0
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise MalformedValue(f"Expected integer for '{field}'", {"value": value})


def reindex_points(value: Any, *, field: str = "?") -> tuple[float, ...]:
    """Turn a 1-indexed point series into a 0-indexed tuple.

    The wire format is `{"1": 0.1, "2": 0.2, ...}`; keys must cover 1..N
    exactly. A plain list is taken as already 0-indexed.
    """
    if value is None:
        return ()

    if isinstance(value, list):
        return tuple(unwrap_number(v, field=field) for v in value)

    if not isinstance(value, Mapping):
        raise MalformedValue(f"Expected point series object for '{field}'", {"value": value})

    indexed: dict[int, float] = {}
    for raw_key, raw_point in value.items():
        try:
            idx = int(raw_key)
        except (TypeError, ValueError) as e:
            raise MalformedValue(
                f"Invalid point index for '{field}'", {"index": raw_key}
            ) from e
        if idx in indexed:
            raise MalformedValue(f"Duplicate point index for '{field}'", {"index": raw_key})
        indexed[idx] = unwrap_number(raw_point, field=field)

    n = len(indexed)
    if sorted(indexed) != list(range(1, n + 1)):
        raise MalformedValue(
            f"Point series for '{field}' is not indexed 1..{n}",
            {"indices": sorted(indexed)},
        )

    return tuple(indexed[i] for i in range(1, n + 1))
