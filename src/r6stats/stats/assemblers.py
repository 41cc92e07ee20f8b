from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from types import MappingProxyType
from typing import Any, TypeVar

from .errors import DiscriminatorMismatch, MissingRequiredData
from .models import (
    COUNTER_FIELDS,
    ROLE_ATTRS,
    STAT_FIELDS,
    UNKNOWN_SEASON_PART,
    BombsiteEntry,
    BombsiteStats,
    BombsiteTeamRoles,
    DetailedStats,
    MapStats,
    MatchStats,
    MovingTrend,
    MovingTrendEntry,
    MovingTrendStats,
    MovingTrendTeamRoles,
    NamedStats,
    NamedTeamRoleStats,
    NamedTeamRoles,
    OperatorStats,
    StatsResult,
    SummarizedGameModeStats,
    SummarizedStats,
    WeaponNamedStats,
    WeaponNames,
    WeaponStats,
    WeaponTeamRoles,
    WeaponTypes,
    WeaponTypesMap,
)
from .types import AggregationKind, GameMode, TeamRole, TotalsMode
from .wire import (
    DetailedStatBlock,
    MovingTrendBlock,
    RawEnvelope,
    TeamRoleBucket,
    TypedRecord,
    WeaponRolesBlock,
    WeaponTypeBlock,
)

NamedT = TypeVar("NamedT", bound=NamedStats)

TOTAL_ENTRY_NAME = "All"
UNNAMED_ENTRY_NAME = "n/a"


class SeasonSlugTracker:
    """First-wins scan for season year/number across decoded records.

    Parts never seen stay "??". Best effort: responses don't always carry them.
    """

    def __init__(self) -> None:
        self.year: str | None = None
        self.number: str | None = None

    def observe(self, block: DetailedStatBlock) -> None:
        if self.year is None and block.season_year:
            self.year = block.season_year
        if self.number is None and block.season_number:
            self.number = block.season_number

    @property
    def slug(self) -> str:
        return (self.year or UNKNOWN_SEASON_PART) + (self.number or UNKNOWN_SEASON_PART)


# -----------------------------
# Shared helpers
# -----------------------------


def _team_role_sections(envelope: RawEnvelope) -> Iterator[tuple[GameMode, TeamRoleBucket]]:
    for mode, section in envelope.sections.items():
        if not isinstance(section.payload, TeamRoleBucket):
            raise DiscriminatorMismatch(
                "Game mode section does not hold team role records",
                {"game_mode": mode.value, "tag": section.tag, "shape": str(section.shape)},
            )
        yield mode, section.payload


def _weapon_sections(envelope: RawEnvelope) -> Iterator[tuple[GameMode, WeaponRolesBlock]]:
    for mode, section in envelope.sections.items():
        if not isinstance(section.payload, WeaponRolesBlock):
            raise DiscriminatorMismatch(
                "Game mode section does not hold weapon slots",
                {"game_mode": mode.value, "tag": section.tag, "shape": str(section.shape)},
            )
        yield mode, section.payload


def _detailed(records: Sequence[TypedRecord]) -> list[DetailedStatBlock]:
    blocks: list[DetailedStatBlock] = []
    for record in records:
        if not isinstance(record.payload, DetailedStatBlock):
            raise DiscriminatorMismatch(
                "Team role record is not a detailed stat record",
                {"tag": record.tag, "shape": str(record.shape)},
            )
        blocks.append(record.payload)
    return blocks


def _moving_trend(record: TypedRecord) -> MovingTrendBlock:
    if not isinstance(record.payload, MovingTrendBlock):
        raise DiscriminatorMismatch(
            "Team role record is not a moving trend record",
            {"tag": record.tag, "shape": str(record.shape)},
        )
    return record.payload


def _role_kwargs(values: dict[TeamRole, Any]) -> dict[str, Any]:
    return {ROLE_ATTRS[role]: value for role, value in values.items()}


def _mode_kwargs(envelope: RawEnvelope, values: dict[GameMode, Any]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {mode.value: value for mode, value in values.items()}
    kwargs["time_from"] = envelope.time_from
    kwargs["time_to"] = envelope.time_to
    return kwargs


def check_required_roles(envelope: RawEnvelope, roles: Iterable[TeamRole]) -> None:
    """Raise MissingRequiredData when a present game mode lacks a required role."""

    required = tuple(roles)
    if not required:
        return

    for mode, section in envelope.sections.items():
        payload = section.payload
        for role in required:
            if isinstance(payload, TeamRoleBucket):
                missing = not payload.records(role)
            else:
                missing = role not in payload.roles
            if missing:
                raise MissingRequiredData(
                    f"No data for team role '{role.value}'",
                    {"game_mode": mode.value},
                )


# -----------------------------
# Summarized
# -----------------------------


def assemble_summarized(envelope: RawEnvelope) -> SummarizedStats:
    season = SeasonSlugTracker()
    modes: dict[GameMode, SummarizedGameModeStats] = {}

    for mode, bucket in _team_role_sections(envelope):
        roles: dict[TeamRole, DetailedStats] = {}
        matches: MatchStats | None = None
        for role in TeamRole:
            blocks = _detailed(bucket.records(role))
            for block in blocks:
                season.observe(block)
            if not blocks:
                continue
            roles[role] = DetailedStats.from_block(blocks[0])
            if matches is None and blocks[0].matches_played != 0:
                matches = MatchStats.from_block(blocks[0])

        modes[mode] = SummarizedGameModeStats(
            **_role_kwargs(roles), matches=matches or MatchStats()
        )

    return SummarizedStats(**_mode_kwargs(envelope, modes), season_slug=season.slug)


# -----------------------------
# Named (operators / maps)
# -----------------------------


def total_stats(blocks: Sequence[DetailedStatBlock], mode: TotalsMode = TotalsMode.MEAN) -> DetailedStats:
    """Synthetic totals row over `blocks` (must not be empty).

    MEAN divides every field, counters included, by the record count, so
    counters come back as floats.
    SUM adds counters and averages rates.
    """
    count = len(blocks)
    if count == 0:
        raise ValueError("total_stats() needs at least one record")

    values: dict[str, float] = {}
    for name in STAT_FIELDS:
        total = sum(getattr(b, name) for b in blocks)
        if mode is TotalsMode.SUM and name in COUNTER_FIELDS:
            values[name] = total
        else:
            values[name] = total / count
    return DetailedStats(**values)


def assemble_named(
    envelope: RawEnvelope,
    *,
    result_type: type[NamedT],
    totals_mode: TotalsMode = TotalsMode.MEAN,
) -> NamedT:
    season = SeasonSlugTracker()
    modes: dict[GameMode, NamedTeamRoles] = {}

    for mode, bucket in _team_role_sections(envelope):
        roles: dict[TeamRole, NamedTeamRoleStats] = {}
        for role in TeamRole:
            blocks = _detailed(bucket.records(role))
            if not blocks:
                continue
            named: dict[str, DetailedStats] = {TOTAL_ENTRY_NAME: total_stats(blocks, totals_mode)}
            for block in blocks:
                season.observe(block)
                named[block.stats_detail or UNNAMED_ENTRY_NAME] = DetailedStats.from_block(block)
            roles[role] = MappingProxyType(named)
        modes[mode] = NamedTeamRoles(**_role_kwargs(roles))

    return result_type(**_mode_kwargs(envelope, modes), season_slug=season.slug)


def assemble_operators(envelope: RawEnvelope, *, totals_mode: TotalsMode = TotalsMode.MEAN) -> OperatorStats:
    return assemble_named(envelope, result_type=OperatorStats, totals_mode=totals_mode)


def assemble_maps(envelope: RawEnvelope, *, totals_mode: TotalsMode = TotalsMode.MEAN) -> MapStats:
    return assemble_named(envelope, result_type=MapStats, totals_mode=totals_mode)


# -----------------------------
# Bombsites
# -----------------------------


def assemble_bombsites(envelope: RawEnvelope) -> BombsiteStats:
    modes: dict[GameMode, BombsiteTeamRoles] = {}

    for mode, bucket in _team_role_sections(envelope):
        roles: dict[TeamRole, tuple[BombsiteEntry, ...]] = {}
        for role in TeamRole:
            blocks = _detailed(bucket.records(role))
            if not blocks:
                continue
            roles[role] = tuple(
                BombsiteEntry(
                    name=b.stats_detail or UNNAMED_ENTRY_NAME,
                    stats=DetailedStats.from_block(b),
                )
                for b in blocks
            )
        modes[mode] = BombsiteTeamRoles(**_role_kwargs(roles))

    return BombsiteStats(**_mode_kwargs(envelope, modes))


# -----------------------------
# Weapons
# -----------------------------


def weapon_names(weapon_type: WeaponTypeBlock) -> WeaponNames:
    stats = [WeaponNamedStats.from_block(w) for w in weapon_type.weapons]
    names = [s.weapon_name for s in stats]
    if len(set(names)) != len(names):
        return tuple(stats)
    return MappingProxyType({s.weapon_name: s for s in stats})


def weapon_types_map(types: Sequence[WeaponTypeBlock] | None) -> WeaponTypesMap | None:
    if types is None:
        return None
    return MappingProxyType({t.weapon_type: weapon_names(t) for t in types})


def assemble_weapons(envelope: RawEnvelope) -> WeaponStats:
    modes: dict[GameMode, WeaponTeamRoles] = {}

    for mode, block in _weapon_sections(envelope):
        roles = {
            role: WeaponTypes(
                primary_weapons=weapon_types_map(slots.primary),
                secondary_weapons=weapon_types_map(slots.secondary),
            )
            for role, slots in block.roles.items()
        }
        modes[mode] = WeaponTeamRoles(**_role_kwargs(roles))

    return WeaponStats(**_mode_kwargs(envelope, modes))


# -----------------------------
# Moving point average (trend)
# -----------------------------


def moving_trend(block: MovingTrendBlock) -> MovingTrend:
    return MovingTrend(
        moving_points=block.moving_points,
        **{name: MovingTrendEntry.from_series(series) for name, series in block.series.items()},
    )


def assemble_moving_trend(envelope: RawEnvelope) -> MovingTrendStats:
    modes: dict[GameMode, MovingTrendTeamRoles] = {}

    for mode, bucket in _team_role_sections(envelope):
        roles: dict[TeamRole, MovingTrend] = {}
        for role in TeamRole:
            records = bucket.records(role)
            if not records:
                continue
            roles[role] = moving_trend(_moving_trend(records[0]))
        modes[mode] = MovingTrendTeamRoles(**_role_kwargs(roles))

    return MovingTrendStats(**_mode_kwargs(envelope, modes))


Assembler = Callable[..., StatsResult]

ASSEMBLERS: dict[AggregationKind, Assembler] = {
    AggregationKind.SUMMARY: assemble_summarized,
    AggregationKind.OPERATORS: assemble_operators,
    AggregationKind.MAPS: assemble_maps,
    AggregationKind.BOMBSITES: assemble_bombsites,
    AggregationKind.WEAPONS: assemble_weapons,
    AggregationKind.MOVING_POINT: assemble_moving_trend,
}
