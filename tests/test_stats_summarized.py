from __future__ import annotations

import json
from typing import Any

from r6stats.stats.decoder import StatsDecoder, decode_stats
from r6stats.stats.models import DetailedStats, MatchStats, SummarizedStats
from r6stats.stats.types import AggregationKind, GameMode


def _response(game_modes: dict[str, Any]) -> bytes:
    return json.dumps(
        {
            "userId": "u-1",
            "profileData": {"u-1": {"platforms": {"PC": {"gameModes": game_modes}}}},
        }
    ).encode()


def _section(**roles: list[dict[str, Any]]) -> dict[str, Any]:
    return {"type": "Team roles", "teamRoles": roles}


def test_summarized_casual_attacker_only() -> None:
    data = _response(
        {
            "casual": _section(
                Attacker=[{"type": "Seasonal", "kills": 10, "death": 5, "roundsPlayed": 20}],
                Defender=[],
            )
        }
    )

    result = decode_stats(data, AggregationKind.SUMMARY)

    assert isinstance(result, SummarizedStats)
    assert result.casual is not None
    assert result.casual.attack == DetailedStats(kills=10, deaths=5, rounds_played=20)
    assert result.casual.defence is None
    assert result.casual.all is None
    assert result.unranked is None
    assert result.ranked is None
    assert result.present_game_modes() == [GameMode.CASUAL]


def test_summarized_uses_first_record_and_unwraps_rates() -> None:
    data = _response(
        {
            "ranked": _section(
                Attacker=[
                    {
                        "type": "Seasonal",
                        "kills": 3,
                        "killsPerRound": {"value": 0.75},
                        "headshotAccuracy": {"value": 0.4},
                        "distanceTravelled": 1234.5,
                        "matchesPlayed": 2,
                        "matchesWon": 1,
                        "matchesLost": 1,
                    },
                    {"type": "Seasonal", "kills": 99},
                ],
                Defender=[{"type": "Seasonal", "kills": 7, "roundsWithAce": 0.1}],
            )
        }
    )

    result = StatsDecoder().summarized(data)

    assert result.ranked is not None
    attack = result.ranked.attack
    assert attack is not None
    assert attack.kills == 3
    assert attack.kills_per_round == 0.75
    assert attack.headshot_percentage == 0.4
    assert attack.distance_total == 1234.5
    assert result.ranked.defence is not None
    assert result.ranked.defence.rounds_with_ace == 0.1
    assert result.ranked.matches == MatchStats(matches_played=2, matches_won=1, matches_lost=1)


def test_summarized_season_slug_first_wins() -> None:
    data = _response(
        {
            "casual": _section(
                Attacker=[{"type": "Seasonal", "seasonYear": "Y8", "seasonNumber": "S2"}],
                Defender=[{"type": "Seasonal", "seasonYear": "Y7", "seasonNumber": "S1"}],
            ),
            "ranked": _section(
                Attacker=[{"type": "Seasonal", "seasonYear": "Y6", "seasonNumber": "S4"}],
            ),
        }
    )

    result = StatsDecoder().summarized(data)

    assert result.season_slug == "Y8S2"


def test_summarized_season_slug_placeholder_when_never_seen() -> None:
    data = _response({"casual": _section(Attacker=[{"type": "Seasonal"}])})

    result = StatsDecoder().summarized(data)

    assert result.season_slug == "????"


def test_summarized_season_slug_skips_records_without_season_info() -> None:
    data = _response(
        {
            "casual": _section(
                Attacker=[{"type": "Seasonal"}],
                Defender=[{"type": "Seasonal", "seasonYear": "Y9", "seasonNumber": "S1"}],
            )
        }
    )

    result = StatsDecoder().summarized(data)

    assert result.season_slug == "Y9S1"


def test_summarized_empty_response_has_no_game_modes() -> None:
    result = StatsDecoder().summarized(_response({}))

    assert result.present_game_modes() == []
