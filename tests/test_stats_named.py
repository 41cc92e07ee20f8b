from __future__ import annotations

import json
from typing import Any

import pytest

from r6stats.stats.assemblers import total_stats
from r6stats.stats.decoder import StatsDecoder
from r6stats.stats.errors import DiscriminatorMismatch, MissingRequiredData
from r6stats.stats.models import MapStats, OperatorStats
from r6stats.stats.types import TotalsMode
from r6stats.stats.wire import DetailedStatBlock


def _response(game_modes: dict[str, Any]) -> bytes:
    return json.dumps(
        {
            "userId": "u-1",
            "profileData": {"u-1": {"platforms": {"PC": {"gameModes": game_modes}}}},
        }
    ).encode()


ATTACKERS = [
    {
        "type": "Seasonal",
        "statsDetail": "Ash",
        "kills": 10,
        "death": 4,
        "headshotAccuracy": {"value": 0.5},
        "distanceTravelled": 100.0,
    },
    {
        "type": "Seasonal",
        "statsDetail": "Thermite",
        "kills": 20,
        "death": 8,
        "headshotAccuracy": {"value": 0.3},
        "distanceTravelled": 300.0,
    },
]


def test_operators_map_names_and_mean_totals_row() -> None:
    data = _response({"casual": {"type": "Team roles", "teamRoles": {"Attacker": ATTACKERS}}})

    result = StatsDecoder().operators(data)

    assert isinstance(result, OperatorStats)
    assert result.casual is not None
    attack = result.casual.attack
    assert attack is not None
    assert set(attack) == {"All", "Ash", "Thermite"}
    assert attack["Ash"].kills == 10
    assert attack["Thermite"].deaths == 8

    total = attack["All"]
    assert total.kills == 15
    assert total.deaths == 6
    assert total.headshot_percentage == pytest.approx(0.4)
    assert total.distance_total == pytest.approx(200.0)
    assert total.assists == 0


def test_operators_sum_totals_mode_adds_counters() -> None:
    data = _response({"casual": {"type": "Team roles", "teamRoles": {"Attacker": ATTACKERS}}})

    result = StatsDecoder().operators(data, totals_mode=TotalsMode.SUM)

    assert result.casual is not None and result.casual.attack is not None
    total = result.casual.attack["All"]
    assert total.kills == 30
    assert total.deaths == 12
    assert total.distance_total == pytest.approx(400.0)
    assert total.headshot_percentage == pytest.approx(0.4)


def test_named_roles_without_records_have_no_totals_row() -> None:
    data = _response(
        {
            "ranked": {
                "type": "Team roles",
                "teamRoles": {"Attacker": ATTACKERS, "Defender": []},
            }
        }
    )

    result = StatsDecoder().operators(data)

    assert result.ranked is not None
    assert result.ranked.defence is None
    assert result.ranked.all is None
    assert result.casual is None


def test_named_records_without_name_fall_back_to_placeholder() -> None:
    data = _response(
        {"unranked": {"type": "Team roles", "teamRoles": {"all": [{"type": "Seasonal", "kills": 2}]}}}
    )

    result = StatsDecoder().maps(data)

    assert isinstance(result, MapStats)
    assert result.unranked is not None and result.unranked.all is not None
    assert result.unranked.all["n/a"].kills == 2
    assert result.unranked.all["All"].kills == 2


def test_named_rejects_trend_records() -> None:
    data = _response(
        {
            "casual": {
                "type": "Team roles",
                "teamRoles": {"Attacker": [{"type": "Moving Point Average Trend"}]},
            }
        }
    )

    with pytest.raises(DiscriminatorMismatch):
        StatsDecoder().operators(data)


def test_total_stats_mean_matches_per_field_average() -> None:
    blocks = [
        DetailedStatBlock(kills=1, rounds_played=10, kills_per_round=0.1),
        DetailedStatBlock(kills=2, rounds_played=20, kills_per_round=0.2),
        DetailedStatBlock(kills=6, rounds_played=30, kills_per_round=0.6),
    ]

    total = total_stats(blocks)

    assert total.kills == pytest.approx(3.0)
    assert isinstance(total.kills, float)
    assert total.rounds_played == pytest.approx(20.0)
    assert total.kills_per_round == pytest.approx(0.3)


def test_total_stats_requires_records() -> None:
    with pytest.raises(ValueError):
        total_stats([])


def test_maps_require_the_all_role() -> None:
    data = _response({"casual": {"type": "Team roles", "teamRoles": {"all": [], "Attacker": ATTACKERS}}})

    with pytest.raises(MissingRequiredData) as exc:
        StatsDecoder().maps(data)
    assert exc.value.context == {"game_mode": "casual"}

    # operators carry no required roles
    result = StatsDecoder().operators(data)
    assert result.casual is not None and result.casual.all is None


def test_named_results_are_read_only() -> None:
    data = _response({"casual": {"type": "Team roles", "teamRoles": {"Attacker": ATTACKERS}}})

    result = StatsDecoder().operators(data)

    assert result.casual is not None and result.casual.attack is not None
    with pytest.raises(TypeError):
        result.casual.attack["Ash"] = None  # type: ignore[index]
    with pytest.raises(TypeError):
        del result.casual.attack["All"]  # type: ignore[attr-defined]
