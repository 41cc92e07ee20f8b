from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from r6stats.core.dates import parse_iso_z

from .envelope import load_json_object
from .errors import MalformedValue, MissingRequiredData
from .models import SeasonStats, SkillHistory
from .numeric import read_int, unwrap_number
from .records import optional_list, optional_str, require_mapping

logger = logging.getLogger(__name__)

RANKED_REGION_ID = "ncsa"
RANKED_BOARD_ID = "pvp_ranked"

# wire key -> SeasonStats attribute
SEASON_INT_FIELDS: dict[str, str] = {
    "abandons": "abandons",
    "deaths": "deaths",
    "kills": "kills",
    "last_match_result": "last_result",
    "losses": "losses",
    "max_rank": "max_rank",
    "rank": "rank",
    "top_rank_position": "top_rank_position",
    "wins": "wins",
}

# Sent as floats, kept as truncated ints.
SEASON_MMR_FIELDS: dict[str, str] = {
    "last_match_mmr_change": "last_mmr_change",
    "max_mmr": "max_mmr",
    "mmr": "mmr",
    "next_rank_mmr": "next_rank_mmr",
    "previous_rank_mmr": "previous_rank_mmr",
}

SEASON_FLOAT_FIELDS: dict[str, str] = {
    "last_match_skill_mean_change": "last_skill_mean_change",
    "last_match_skill_stdev_change": "last_skill_stdev_change",
    "skill_mean": "skill_mean",
    "skill_stdev": "skill_stdev",
}


def parse_season_stats(item: Mapping[str, Any]) -> SeasonStats:
    values: dict[str, Any] = {"season_id": read_int(item.get("season"), field="season")}
    for key, attr in SEASON_INT_FIELDS.items():
        values[attr] = read_int(item.get(key), field=key)
    for key, attr in SEASON_MMR_FIELDS.items():
        values[attr] = int(unwrap_number(item.get(key), field=key))
    for key, attr in SEASON_FLOAT_FIELDS.items():
        values[attr] = unwrap_number(item.get(key), field=key)

    update_time = optional_str(item, "update_time")
    if update_time:
        try:
            values["update_time"] = parse_iso_z(update_time)
        except ValueError as e:
            raise MalformedValue("Invalid 'update_time'", {"value": update_time}) from e
    return SeasonStats(**values)


def _first(items: list[Any], *, what: str, expected: str, index: int) -> Mapping[str, Any]:
    if not items:
        raise MissingRequiredData(
            f"No {what} records in skill history, expected '{expected}'", {"season_index": index}
        )
    return require_mapping(items[0], field=what)


def decode_skill_history(
    data: bytes | str,
    *,
    region_id: str = RANKED_REGION_ID,
    board_id: str = RANKED_BOARD_ID,
) -> SkillHistory:
    """
    Decode a `player_skill_records` response into one SeasonStats per season.

    Only the first region, board and player skill of each season are read; the
    region and board must be the ones that were requested.
    """
    root = load_json_object(data)
    seasons = optional_list(
        root.get("seasons_player_skill_records"), field="seasons_player_skill_records"
    )

    history: list[SeasonStats] = []
    for i, raw in enumerate(seasons):
        record = require_mapping(raw, field="seasons_player_skill_records[]")

        region = _first(
            optional_list(record.get("regions_player_skill_records"), field="regions_player_skill_records"),
            what="region",
            expected=region_id,
            index=i,
        )
        found_region = optional_str(region, "region_id")
        if found_region != region_id:
            raise MalformedValue(
                f"Expected region '{region_id}'", {"region_id": found_region, "season_index": i}
            )

        board = _first(
            optional_list(region.get("boards_player_skill_records"), field="boards_player_skill_records"),
            what="board",
            expected=board_id,
            index=i,
        )
        found_board = optional_str(board, "board_id")
        if found_board != board_id:
            raise MalformedValue(
                f"Expected board '{board_id}'", {"board_id": found_board, "season_index": i}
            )

        skills = optional_list(board.get("players_skill_records"), field="players_skill_records")
        if not skills:
            raise MissingRequiredData("No skill reports found", {"season_index": i})
        history.append(parse_season_stats(require_mapping(skills[0], field="players_skill_records[]")))

    logger.debug("Decoded skill history with %d seasons", len(history))
    return tuple(history)
