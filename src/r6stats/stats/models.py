from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Generic, TypeVar

from .types import GameMode, TeamRole
from .wire import DetailedStatBlock, MovingTrendSeries, WeaponBlock

T = TypeVar("T")

UNKNOWN_SEASON_PART = "??"

# result attribute per team role
ROLE_ATTRS: dict[TeamRole, str] = {
    TeamRole.ALL: "all",
    TeamRole.ATTACKER: "attack",
    TeamRole.DEFENDER: "defence",
}


@dataclass(frozen=True)
class DetailedStats:
    """Detailed stats for one record.

    The synthetic "All" row of operator/map results is also a DetailedStats.
    Under TotalsMode.MEAN its counter fields hold float means, not ints.
    """

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

    @classmethod
    def from_block(cls, block: DetailedStatBlock) -> DetailedStats:
        return cls(**{name: getattr(block, name) for name in STAT_FIELDS})


STAT_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(DetailedStats))

# Accumulating totals; everything else is a per-round / per-match rate.
COUNTER_FIELDS: frozenset[str] = frozenset(
    [f.name for f in fields(DetailedStats) if type(f.default) is int] + ["distance_total"]
)


@dataclass(frozen=True)
class MatchStats:
    matches_played: int = 0
    matches_won: int = 0
    matches_lost: int = 0

    @classmethod
    def from_block(cls, block: DetailedStatBlock) -> MatchStats:
        return cls(
            matches_played=block.matches_played,
            matches_won=block.matches_won,
            matches_lost=block.matches_lost,
        )


@dataclass(frozen=True)
class GameModeResult(Generic[T]):
    """Per-game-mode results; a mode with no data in the response stays None."""

    all: T | None = None
    casual: T | None = None
    unranked: T | None = None
    ranked: T | None = None
    time_from: date | None = None
    time_to: date | None = None

    def game_mode(self, mode: GameMode) -> T | None:
        return getattr(self, mode.value)

    def present_game_modes(self) -> list[GameMode]:
        return [m for m in GameMode if self.game_mode(m) is not None]


# -----------------------------
# Summarized
# -----------------------------


@dataclass(frozen=True)
class SummarizedGameModeStats:
    all: DetailedStats | None = None
    attack: DetailedStats | None = None
    defence: DetailedStats | None = None
    matches: MatchStats = MatchStats()


@dataclass(frozen=True)
class SummarizedStats(GameModeResult[SummarizedGameModeStats]):
    season_slug: str = UNKNOWN_SEASON_PART * 2


# -----------------------------
# Named (operators / maps)
# -----------------------------

# read-only name -> stats view
NamedTeamRoleStats = Mapping[str, DetailedStats]


@dataclass(frozen=True)
class NamedTeamRoles:
    all: NamedTeamRoleStats | None = None
    attack: NamedTeamRoleStats | None = None
    defence: NamedTeamRoleStats | None = None


@dataclass(frozen=True)
class NamedStats(GameModeResult[NamedTeamRoles]):
    season_slug: str = UNKNOWN_SEASON_PART * 2


@dataclass(frozen=True)
class OperatorStats(NamedStats):
    pass


@dataclass(frozen=True)
class MapStats(NamedStats):
    pass


# -----------------------------
# Bombsites
# -----------------------------


@dataclass(frozen=True)
class BombsiteEntry:
    name: str
    stats: DetailedStats


@dataclass(frozen=True)
class BombsiteTeamRoles:
    all: tuple[BombsiteEntry, ...] | None = None
    attack: tuple[BombsiteEntry, ...] | None = None
    defence: tuple[BombsiteEntry, ...] | None = None


@dataclass(frozen=True)
class BombsiteStats(GameModeResult[BombsiteTeamRoles]):
    pass


# -----------------------------
# Weapons
# -----------------------------


@dataclass(frozen=True)
class WeaponNamedStats:
    weapon_name: str
    headshots: int = 0
    kills: int = 0
    rounds_played: int = 0
    rounds_won: int = 0
    rounds_lost: int = 0
    rounds_with_kill: float = 0.0
    rounds_with_multikill: float = 0.0
    headshot_percentage: float = 0.0

    @classmethod
    def from_block(cls, block: WeaponBlock) -> WeaponNamedStats:
        return cls(**{f.name: getattr(block, f.name) for f in fields(cls)})


# name -> stats when weapon names are unique within their type, else the
# entries in response order
WeaponNames = Mapping[str, WeaponNamedStats] | tuple[WeaponNamedStats, ...]
WeaponTypesMap = Mapping[str, WeaponNames]


@dataclass(frozen=True)
class WeaponTypes:
    primary_weapons: WeaponTypesMap | None = None
    secondary_weapons: WeaponTypesMap | None = None


@dataclass(frozen=True)
class WeaponTeamRoles:
    all: WeaponTypes | None = None
    attack: WeaponTypes | None = None
    defence: WeaponTypes | None = None


@dataclass(frozen=True)
class WeaponStats(GameModeResult[WeaponTeamRoles]):
    pass


# -----------------------------
# Moving point average (trend)
# -----------------------------


@dataclass(frozen=True)
class MovingTrendEntry:
    low: float = 0.0
    average: float = 0.0
    high: float = 0.0
    actuals: tuple[float, ...] = ()
    trend: tuple[float, ...] = ()

    @classmethod
    def from_series(cls, series: MovingTrendSeries) -> MovingTrendEntry:
        return cls(
            low=series.low,
            average=series.average,
            high=series.high,
            actuals=series.actuals,
            trend=series.trend,
        )


@dataclass(frozen=True)
class MovingTrend:
    moving_points: int = 0
    distance_per_round: MovingTrendEntry = MovingTrendEntry()
    headshot_percentage: MovingTrendEntry = MovingTrendEntry()
    kill_death_ratio: MovingTrendEntry = MovingTrendEntry()
    kills_per_round: MovingTrendEntry = MovingTrendEntry()
    ratio_time_alive_per_match: MovingTrendEntry = MovingTrendEntry()
    rounds_survived: MovingTrendEntry = MovingTrendEntry()
    rounds_with_kill: MovingTrendEntry = MovingTrendEntry()
    rounds_with_kost: MovingTrendEntry = MovingTrendEntry()
    rounds_with_multikill: MovingTrendEntry = MovingTrendEntry()
    rounds_with_opening_death: MovingTrendEntry = MovingTrendEntry()
    rounds_with_opening_kill: MovingTrendEntry = MovingTrendEntry()
    win_loss_ratio: MovingTrendEntry = MovingTrendEntry()


@dataclass(frozen=True)
class MovingTrendTeamRoles:
    all: MovingTrend | None = None
    attack: MovingTrend | None = None
    defence: MovingTrend | None = None


@dataclass(frozen=True)
class MovingTrendStats(GameModeResult[MovingTrendTeamRoles]):
    pass


StatsResult = SummarizedStats | NamedStats | BombsiteStats | WeaponStats | MovingTrendStats


# -----------------------------
# Ranked skill history
# -----------------------------


@dataclass(frozen=True)
class SeasonStats:
    """One ranked season from the skill records endpoint. MMR values are truncated to ints."""

    season_id: int
    abandons: int = 0
    deaths: int = 0
    kills: int = 0
    last_mmr_change: int = 0
    last_result: int = 0
    last_skill_mean_change: float = 0.0
    last_skill_stdev_change: float = 0.0
    losses: int = 0
    max_rank: int = 0
    max_mmr: int = 0
    mmr: int = 0
    next_rank_mmr: int = 0
    previous_rank_mmr: int = 0
    rank: int = 0
    skill_mean: float = 0.0
    skill_stdev: float = 0.0
    top_rank_position: int = 0
    update_time: datetime | None = None
    wins: int = 0


# seasons in response order
SkillHistory = tuple[SeasonStats, ...]
