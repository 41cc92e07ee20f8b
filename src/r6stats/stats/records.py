from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .errors import MalformedValue
from .numeric import read_int, reindex_points, unwrap_number
from .registry import DiscriminatorTable, default_record_table
from .types import RecordShape, TeamRole
from .wire import (
    DetailedStatBlock,
    MovingTrendBlock,
    MovingTrendSeries,
    RecordPayload,
    TeamRoleBucket,
    TypedRecord,
)


# wire key -> DetailedStatBlock attribute
DETAILED_INT_FIELDS: dict[str, str] = {
    "headshots": "headshots",
    "kills": "kills",
    "roundsPlayed": "rounds_played",
    "roundsWon": "rounds_won",
    "roundsLost": "rounds_lost",
    "matchesPlayed": "matches_played",
    "matchesWon": "matches_won",
    "matchesLost": "matches_lost",
    "minutesPlayed": "minutes_played",
    "assists": "assists",
    "death": "deaths",
    "meleeKills": "melee_kills",
    "teamKills": "team_kills",
    "openingDeaths": "entry_deaths",
    "openingDeathTrades": "entry_death_trades",
    "openingKills": "entry_kills",
    "openingKillTrades": "entry_kill_trades",
    "trades": "trades",
    "revives": "revives",
}

# Rates; sent either bare or as {"value": x}.
DETAILED_FLOAT_FIELDS: dict[str, str] = {
    "killsPerRound": "kills_per_round",
    "headshotAccuracy": "headshot_percentage",
    "roundsSurvived": "rounds_survived",
    "roundsWithAKill": "rounds_with_kill",
    "roundsWithMultikill": "rounds_with_multikill",
    "roundsWithAce": "rounds_with_ace",
    "roundsWithClutch": "rounds_with_clutch",
    "roundsWithKOST": "rounds_with_kost",
    "roundsWithOpeningDeath": "rounds_with_entry_death",
    "roundsWithOpeningKill": "rounds_with_entry_kill",
    "distancePerRound": "distance_per_round",
    "distanceTravelled": "distance_total",
    "timeAlivePerMatch": "time_alive_per_match",
    "timeDeadPerMatch": "time_dead_per_match",
}

# wire key -> series name on MovingTrendBlock / MovingTrend
MOVING_TREND_SERIES: dict[str, str] = {
    "distancePerRound": "distance_per_round",
    "headshotAccuracy": "headshot_percentage",
    "killDeathRatio": "kill_death_ratio",
    "killsPerRound": "kills_per_round",
    "ratioTimeAlivePerMatch": "ratio_time_alive_per_match",
    "roundsSurvived": "rounds_survived",
    "roundsWithAKill": "rounds_with_kill",
    "roundsWithKOST": "rounds_with_kost",
    "roundsWithMultiKill": "rounds_with_multikill",
    "roundsWithOpeningDeath": "rounds_with_opening_death",
    "roundsWithOpeningKill": "rounds_with_opening_kill",
    "winLossRatio": "win_loss_ratio",
}

# wire key for each role, compared case-insensitively
ROLE_KEYS: dict[str, TeamRole] = {
    "all": TeamRole.ALL,
    "attacker": TeamRole.ATTACKER,
    "defender": TeamRole.DEFENDER,
}


def optional_str(item: Mapping[str, Any], key: str) -> str | None:
    value = item.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, str | int):
        raise MalformedValue(f"Expected string for '{key}'", {"value": value})
    return str(value)


def require_mapping(value: Any, *, field: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise MalformedValue(f"Expected object for '{field}'", {"type": type(value).__name__})
    return value


def optional_mapping(value: Any, *, field: str) -> Mapping[str, Any] | None:
    if value is None:
        return None
    return require_mapping(value, field=field)


def optional_list(value: Any, *, field: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedValue(f"Expected list for '{field}'", {"type": type(value).__name__})
    return value


def role_for_key(key: str) -> TeamRole | None:
    return ROLE_KEYS.get(key.strip().lower())


def parse_detailed_stats(item: Mapping[str, Any]) -> DetailedStatBlock:
    values: dict[str, Any] = {
        "stats_detail": optional_str(item, "statsDetail"),
        "season_year": optional_str(item, "seasonYear"),
        "season_number": optional_str(item, "seasonNumber"),
    }
    for key, attr in DETAILED_INT_FIELDS.items():
        values[attr] = read_int(item.get(key), field=key)
    for key, attr in DETAILED_FLOAT_FIELDS.items():
        values[attr] = unwrap_number(item.get(key), field=key)
    return DetailedStatBlock(**values)


def parse_moving_trend_series(value: Any, *, field: str) -> MovingTrendSeries:
    entry = optional_mapping(value, field=field)
    if entry is None:
        return MovingTrendSeries()
    return MovingTrendSeries(
        low=unwrap_number(entry.get("low"), field=f"{field}.low"),
        average=unwrap_number(entry.get("average"), field=f"{field}.average"),
        high=unwrap_number(entry.get("high"), field=f"{field}.high"),
        actuals=reindex_points(entry.get("actuals"), field=f"{field}.actuals"),
        trend=reindex_points(entry.get("trend"), field=f"{field}.trend"),
    )


def parse_moving_trend(item: Mapping[str, Any]) -> MovingTrendBlock:
    return MovingTrendBlock(
        moving_points=read_int(item.get("movingPoints"), field="movingPoints"),
        series={
            name: parse_moving_trend_series(item.get(key), field=key)
            for key, name in MOVING_TREND_SERIES.items()
        },
    )


RecordParser = Callable[[Mapping[str, Any]], RecordPayload]

RECORD_PARSERS: dict[RecordShape, RecordParser] = {
    RecordShape.DETAILED: parse_detailed_stats,
    RecordShape.MOVING_TREND: parse_moving_trend,
}


class TeamRoleRecordDecoder:
    """Decodes the per-role record lists of a "Team roles" section.

    Each record carries its own `type` tag; `accepted` limits which record
    shapes the caller can use. Anything else is a DiscriminatorMismatch.
    """

    def __init__(
        self,
        *,
        table: DiscriminatorTable[RecordShape] | None = None,
        accepted: Iterable[RecordShape] | None = None,
    ) -> None:
        self.table = table or default_record_table()
        self.accepted = tuple(accepted) if accepted is not None else None

    def decode_record(self, value: Any) -> TypedRecord:
        item = require_mapping(value, field="teamRoles[]")
        tag = optional_str(item, "type")
        shape = self.table.resolve(tag, accepted=self.accepted)
        return TypedRecord(tag=tag, shape=shape, payload=RECORD_PARSERS[shape](item))

    def decode_bucket(self, value: Any) -> TeamRoleBucket:
        team_roles = optional_mapping(value, field="teamRoles")
        if team_roles is None:
            return TeamRoleBucket()

        roles: dict[TeamRole, tuple[TypedRecord, ...]] = {}
        for key, records in team_roles.items():
            role = role_for_key(key)
            if role is None:
                continue
            roles[role] = tuple(
                self.decode_record(r) for r in optional_list(records, field=f"teamRoles.{key}")
            )
        return TeamRoleBucket(roles=roles)
