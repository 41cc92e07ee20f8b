from __future__ import annotations

import json
from typing import Any

import pytest

from r6stats.stats.decoder import StatsDecoder
from r6stats.stats.errors import DiscriminatorMismatch
from r6stats.stats.models import MovingTrendEntry


def _response(game_modes: dict[str, Any]) -> bytes:
    return json.dumps(
        {
            "userId": "u-1",
            "profileData": {"u-1": {"platforms": {"PC": {"gameModes": game_modes}}}},
        }
    ).encode()


TREND_RECORD = {
    "type": "Moving Point Average Trend",
    "movingPoints": 3,
    "killDeathRatio": {
        "low": 0.1,
        "average": 0.2,
        "high": 0.3,
        "actuals": {"1": 0.1, "2": 0.2, "3": 0.3},
        "trend": {"2": 0.25, "1": 0.15},
    },
    "winLossRatio": {"low": 1, "average": 1.5, "high": 2},
}


def test_moving_trend_reindexes_point_series() -> None:
    data = _response(
        {"casual": {"type": "Team roles", "teamRoles": {"Attacker": [TREND_RECORD]}}}
    )

    result = StatsDecoder().moving_trend(data)

    assert result.casual is not None
    attack = result.casual.attack
    assert attack is not None
    assert attack.moving_points == 3
    assert attack.kill_death_ratio.actuals == (0.1, 0.2, 0.3)
    assert attack.kill_death_ratio.trend == (0.15, 0.25)
    assert attack.win_loss_ratio == MovingTrendEntry(low=1.0, average=1.5, high=2.0)
    assert attack.headshot_percentage == MovingTrendEntry()
    assert result.casual.defence is None


def test_moving_trend_reads_all_game_mode() -> None:
    data = _response({"all": {"type": "Team roles", "teamRoles": {"all": [TREND_RECORD]}}})

    result = StatsDecoder().moving_trend(data)

    assert result.all is not None and result.all.all is not None
    assert result.all.all.kill_death_ratio.average == 0.2


def test_moving_trend_rejects_seasonal_records() -> None:
    data = _response(
        {"casual": {"type": "Team roles", "teamRoles": {"Attacker": [{"type": "Seasonal"}]}}}
    )

    with pytest.raises(DiscriminatorMismatch):
        StatsDecoder().moving_trend(data)
