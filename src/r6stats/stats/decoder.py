from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, TypeVar

from .assemblers import ASSEMBLERS, check_required_roles
from .envelope import PLATFORM_KEY, decode_envelope
from .models import (
    BombsiteStats,
    MapStats,
    MovingTrendStats,
    OperatorStats,
    StatsResult,
    SummarizedStats,
    WeaponStats,
)
from .records import TeamRoleRecordDecoder
from .registry import DiscriminatorTable, default_record_table, default_section_table
from .types import AggregationKind, RecordShape, SectionShape, TeamRole, TotalsMode

if TYPE_CHECKING:
    from r6stats.core.config import Settings

logger = logging.getLogger(__name__)

_NAMED_KINDS = (AggregationKind.OPERATORS, AggregationKind.MAPS)

ShapeT = TypeVar("ShapeT", SectionShape, RecordShape)


def _alias_shapes(aliases: Mapping[str, str], shape_type: type[ShapeT], setting: str) -> dict[str, ShapeT]:
    shapes: dict[str, ShapeT] = {}
    for tag, value in aliases.items():
        try:
            shapes[tag] = shape_type(value)
        except ValueError as e:
            choices = ", ".join(s.value for s in shape_type)
            raise ValueError(
                f"{setting}: {value!r} for tag {tag!r} is not a known shape ({choices})"
            ) from e
    return shapes


class StatsDecoder:
    """
    Raw playerstats bytes -> result type for the requested aggregation kind.

    Holds no per-call state; one instance can be shared across threads.
    """

    def __init__(
        self,
        *,
        sections: DiscriminatorTable[SectionShape] | None = None,
        records: DiscriminatorTable[RecordShape] | None = None,
        platform_key: str = PLATFORM_KEY,
    ) -> None:
        self.sections = sections or default_section_table()
        self.records = records or default_record_table()
        self.platform_key = platform_key

    @classmethod
    def from_settings(cls, s: Settings) -> StatsDecoder:
        """Build a decoder with the configured alias tags registered.

        Raises ValueError naming the setting when an alias is invalid.
        """
        sections = default_section_table()
        sections.register_all(
            _alias_shapes(s.section_type_aliases, SectionShape, "R6STATS_SECTION_TYPE_ALIASES")
        )
        records = default_record_table()
        records.register_all(
            _alias_shapes(s.record_type_aliases, RecordShape, "R6STATS_RECORD_TYPE_ALIASES")
        )
        return cls(sections=sections, records=records, platform_key=s.platform_group)

    def decode(
        self,
        data: bytes | str,
        kind: AggregationKind,
        *,
        required_roles: Iterable[TeamRole] = (),
        totals_mode: TotalsMode = TotalsMode.MEAN,
    ) -> StatsResult:
        accepted = (kind.record_shape,) if kind.record_shape is not None else None
        envelope = decode_envelope(
            data,
            game_modes=kind.game_modes,
            section_shape=kind.section_shape,
            records=TeamRoleRecordDecoder(table=self.records, accepted=accepted),
            sections=self.sections,
            platform_key=self.platform_key,
        )
        logger.debug(
            "Decoded %s envelope with game modes %s",
            kind.aggregation,
            [m.value for m in envelope.sections],
        )
        roles = dict.fromkeys((*kind.required_roles, *required_roles))
        check_required_roles(envelope, roles)

        assembler = ASSEMBLERS[kind]
        if kind in _NAMED_KINDS:
            return assembler(envelope, totals_mode=totals_mode)
        return assembler(envelope)

    # typed shortcuts

    def summarized(self, data: bytes | str, **kwargs) -> SummarizedStats:
        return self.decode(data, AggregationKind.SUMMARY, **kwargs)  # type: ignore[return-value]

    def operators(self, data: bytes | str, **kwargs) -> OperatorStats:
        return self.decode(data, AggregationKind.OPERATORS, **kwargs)  # type: ignore[return-value]

    def maps(self, data: bytes | str, **kwargs) -> MapStats:
        return self.decode(data, AggregationKind.MAPS, **kwargs)  # type: ignore[return-value]

    def bombsites(self, data: bytes | str, **kwargs) -> BombsiteStats:
        return self.decode(data, AggregationKind.BOMBSITES, **kwargs)  # type: ignore[return-value]

    def weapons(self, data: bytes | str, **kwargs) -> WeaponStats:
        return self.decode(data, AggregationKind.WEAPONS, **kwargs)  # type: ignore[return-value]

    def moving_trend(self, data: bytes | str, **kwargs) -> MovingTrendStats:
        return self.decode(data, AggregationKind.MOVING_POINT, **kwargs)  # type: ignore[return-value]


def decode_stats(
    data: bytes | str,
    kind: AggregationKind,
    *,
    required_roles: Iterable[TeamRole] = (),
    totals_mode: TotalsMode = TotalsMode.MEAN,
) -> StatsResult:
    """Decode with the default discriminator vocabulary."""
    return StatsDecoder().decode(
        data, kind, required_roles=required_roles, totals_mode=totals_mode
    )
