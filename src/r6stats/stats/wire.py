from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from .types import GameMode, RecordShape, SectionShape, TeamRole

# Intermediate, decoder-owned structures. Only the result types in
# `r6stats.stats.models` leave the decode call.


@dataclass(frozen=True)
class DetailedStatBlock:
    stats_detail: str | None = None
    season_year: str | None = None
    season_number: str | None = None

    headshots: int = 0
    kills: int = 0
    rounds_played: int = 0
    rounds_won: int = 0
    rounds_lost: int = 0
    matches_played: int = 0
    matches_won: int = 0
    matches_lost: int = 0
    minutes_played: int = 0
    assists: int = 0
    deaths: int = 0
    kills_per_round: float = 0.0
    melee_kills: int = 0
    team_kills: int = 0
    headshot_percentage: float = 0.0
    entry_deaths: int = 0
    entry_death_trades: int = 0
    entry_kills: int = 0
    entry_kill_trades: int = 0
    trades: int = 0
    revives: int = 0
    rounds_survived: float = 0.0
    rounds_with_kill: float = 0.0
    rounds_with_multikill: float = 0.0
    rounds_with_ace: float = 0.0
    rounds_with_clutch: float = 0.0
    rounds_with_kost: float = 0.0
    rounds_with_entry_death: float = 0.0
    rounds_with_entry_kill: float = 0.0
    distance_per_round: float = 0.0
    distance_total: float = 0.0
    time_alive_per_match: float = 0.0
    time_dead_per_match: float = 0.0


@dataclass(frozen=True)
class MovingTrendSeries:
    low: float = 0.0
    average: float = 0.0
    high: float = 0.0
    actuals: tuple[float, ...] = ()
    trend: tuple[float, ...] = ()


@dataclass(frozen=True)
class MovingTrendBlock:
    moving_points: int = 0
    series: dict[str, MovingTrendSeries] = field(default_factory=dict)


RecordPayload = DetailedStatBlock | MovingTrendBlock


@dataclass(frozen=True)
class TypedRecord:
    tag: str | None
    shape: RecordShape
    payload: RecordPayload


@dataclass(frozen=True)
class TeamRoleBucket:
    roles: dict[TeamRole, tuple[TypedRecord, ...]] = field(default_factory=dict)

    def records(self, role: TeamRole) -> tuple[TypedRecord, ...]:
        return self.roles.get(role, ())


@dataclass(frozen=True)
class WeaponBlock:
    weapon_name: str
    headshots: int = 0
    kills: int = 0
    rounds_played: int = 0
    rounds_won: int = 0
    rounds_lost: int = 0
    rounds_with_kill: float = 0.0
    rounds_with_multikill: float = 0.0
    headshot_percentage: float = 0.0


@dataclass(frozen=True)
class WeaponTypeBlock:
    weapon_type: str
    weapons: tuple[WeaponBlock, ...] = ()


@dataclass(frozen=True)
class WeaponSlotsBlock:
    primary: tuple[WeaponTypeBlock, ...] | None = None
    secondary: tuple[WeaponTypeBlock, ...] | None = None


@dataclass(frozen=True)
class WeaponRolesBlock:
    roles: dict[TeamRole, WeaponSlotsBlock] = field(default_factory=dict)


SectionPayload = TeamRoleBucket | WeaponRolesBlock


@dataclass(frozen=True)
class TypedSection:
    tag: str | None
    shape: SectionShape
    payload: SectionPayload


@dataclass(frozen=True)
class RawEnvelope:
    sections: dict[GameMode, TypedSection] = field(default_factory=dict)
    time_from: date | None = None
    time_to: date | None = None
