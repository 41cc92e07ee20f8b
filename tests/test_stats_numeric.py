from __future__ import annotations

import pytest

from r6stats.stats.errors import MalformedValue
from r6stats.stats.numeric import read_int, reindex_points, unwrap_number


def test_unwrap_number_accepts_bare_and_wrapped_values() -> None:
    assert unwrap_number(0.25) == 0.25
    assert unwrap_number(3) == 3.0
    assert unwrap_number({"value": 0.5}) == 0.5


def test_unwrap_number_reads_missing_as_zero() -> None:
    assert unwrap_number(None) == 0.0
    assert unwrap_number({}) == 0.0


def test_unwrap_number_rejects_non_numbers() -> None:
    with pytest.raises(MalformedValue):
        unwrap_number("0.5", field="killsPerRound")
    with pytest.raises(MalformedValue):
        unwrap_number({"value": "x"})
    with pytest.raises(MalformedValue):
        unwrap_number(True)


def test_read_int_accepts_integral_floats_only() -> None:
    assert read_int(None) == 0
    assert read_int(7) == 7
    assert read_int(7.0) == 7
    with pytest.raises(MalformedValue):
        read_int(7.5, field="kills")


def test_reindex_points_turns_one_based_keys_into_sequence() -> None:
    assert reindex_points({"1": 0.1, "2": 0.2, "3": 0.3}) == (0.1, 0.2, 0.3)


def test_reindex_points_orders_by_index_not_by_key_order() -> None:
    assert reindex_points({"3": 3.0, "1": 1.0, "2": 2.0}) == (1.0, 2.0, 3.0)


@pytest.mark.parametrize("n", [0, 1, 5, 20])
def test_reindex_points_keeps_length(n: int) -> None:
    series = {str(i): float(i) for i in range(1, n + 1)}
    points = reindex_points(series)
    assert len(points) == n
    assert list(points) == sorted(points)


def test_reindex_points_handles_missing_and_list_series() -> None:
    assert reindex_points(None) == ()
    assert reindex_points([0.5, 0.25]) == (0.5, 0.25)


def test_reindex_points_rejects_gaps_and_zero_index() -> None:
    with pytest.raises(MalformedValue):
        reindex_points({"1": 0.1, "3": 0.3})
    with pytest.raises(MalformedValue):
        reindex_points({"0": 0.1, "1": 0.2})
    with pytest.raises(MalformedValue):
        reindex_points({"a": 0.1})


def test_reindex_points_rejects_keys_for_the_same_index() -> None:
    with pytest.raises(MalformedValue) as exc:
        reindex_points({"1": 0.1, "01": 0.2, "2": 0.3})
    assert exc.value.context == {"index": "01"}
