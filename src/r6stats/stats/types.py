from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum


class GameMode(StrEnum):
    ALL = "all"
    CASUAL = "casual"
    UNRANKED = "unranked"
    RANKED = "ranked"


class TeamRole(StrEnum):
    ALL = "all"
    ATTACKER = "attacker"
    DEFENDER = "defender"


class SectionShape(StrEnum):
    """Payload shapes a game-mode section can carry."""

    TEAM_ROLES = "team_roles"
    TEAM_ROLE_WEAPONS = "team_role_weapons"


class RecordShape(StrEnum):
    """Payload shapes a team-role record can carry."""

    DETAILED = "detailed"
    MOVING_TREND = "moving_trend"


class TotalsMode(StrEnum):
    """How the synthetic "All" entry of named aggregations is computed.

    MEAN divides every numeric field by the record count (compatible with the
    service's own tooling). SUM adds counters and averages rates.
    """

    MEAN = "mean"
    SUM = "sum"


SEASONAL_MODES = (GameMode.CASUAL, GameMode.UNRANKED, GameMode.RANKED)
ALL_MODES = (GameMode.ALL, GameMode.CASUAL, GameMode.UNRANKED, GameMode.RANKED)


@dataclass(frozen=True)
class KindSpec:
    aggregation: str
    view: str
    game_modes: tuple[GameMode, ...]
    section_shape: SectionShape
    record_shape: RecordShape | None
    required_roles: tuple[TeamRole, ...] = ()


class AggregationKind(Enum):
    """Aggregation views the stats endpoint can be asked for."""

    SUMMARY = KindSpec("summary", "seasonal", SEASONAL_MODES, SectionShape.TEAM_ROLES, RecordShape.DETAILED)
    OPERATORS = KindSpec("operators", "seasonal", SEASONAL_MODES, SectionShape.TEAM_ROLES, RecordShape.DETAILED)
    MAPS = KindSpec(
        "maps", "current", SEASONAL_MODES, SectionShape.TEAM_ROLES, RecordShape.DETAILED, (TeamRole.ALL,)
    )
    BOMBSITES = KindSpec("bombsites", "current", SEASONAL_MODES, SectionShape.TEAM_ROLES, RecordShape.DETAILED)
    WEAPONS = KindSpec("weapons", "current", ALL_MODES, SectionShape.TEAM_ROLE_WEAPONS, None)
    MOVING_POINT = KindSpec("movingpoint", "current", ALL_MODES, SectionShape.TEAM_ROLES, RecordShape.MOVING_TREND)

    @property
    def aggregation(self) -> str:
        return self.value.aggregation

    @property
    def view(self) -> str:
        return self.value.view

    @property
    def game_modes(self) -> tuple[GameMode, ...]:
        return self.value.game_modes

    @property
    def section_shape(self) -> SectionShape:
        return self.value.section_shape

    @property
    def record_shape(self) -> RecordShape | None:
        return self.value.record_shape

    @property
    def required_roles(self) -> tuple[TeamRole, ...]:
        """Roles every present game mode must have records for."""
        return self.value.required_roles

    @classmethod
    def from_name(cls, name: str) -> AggregationKind:
        """Look up a kind by member name or aggregation query value."""
        v = name.strip()
        for kind in cls:
            if v.upper() == kind.name or v.lower() == kind.aggregation:
                return kind
        raise ValueError(f"Unknown aggregation kind: {name!r}")
