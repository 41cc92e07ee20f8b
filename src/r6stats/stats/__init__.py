from r6stats.stats.decoder import StatsDecoder, decode_stats
from r6stats.stats.errors import (
    DiscriminatorMismatch,
    MalformedValue,
    MissingRequiredData,
    StatsDecodeError,
)
from r6stats.stats.models import SeasonStats
from r6stats.stats.ranked import decode_skill_history
from r6stats.stats.types import AggregationKind, GameMode, TeamRole, TotalsMode

__all__ = [
    "AggregationKind",
    "DiscriminatorMismatch",
    "GameMode",
    "MalformedValue",
    "MissingRequiredData",
    "SeasonStats",
    "StatsDecodeError",
    "StatsDecoder",
    "TeamRole",
    "TotalsMode",
    "decode_skill_history",
    "decode_stats",
]
