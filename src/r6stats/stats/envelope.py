from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from typing import Any

from r6stats.core.dates import parse_compact_date

from .errors import MalformedValue
from .numeric import read_int, unwrap_number
from .records import (
    TeamRoleRecordDecoder,
    optional_list,
    optional_mapping,
    optional_str,
    require_mapping,
    role_for_key,
)
from .registry import DiscriminatorTable, default_section_table
from .types import GameMode, SectionShape, TeamRole
from .wire import (
    RawEnvelope,
    SectionPayload,
    TeamRoleBucket,
    TypedSection,
    WeaponBlock,
    WeaponRolesBlock,
    WeaponSlotsBlock,
    WeaponTypeBlock,
)

logger = logging.getLogger(__name__)

PLATFORM_KEY = "PC"


def load_json_object(data: bytes | str) -> Mapping[str, Any]:
    try:
        value = json.loads(data)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedValue("Response was not valid JSON", {"error": str(e)}) from e
    return require_mapping(value, field="<root>")


def parse_weapon(item: Any) -> WeaponBlock:
    w = require_mapping(item, field="weapons[]")
    name = optional_str(w, "weaponName")
    if name is None:
        raise MalformedValue("Weapon entry is missing 'weaponName'", {"keys": sorted(w)})
    return WeaponBlock(
        weapon_name=name,
        headshots=read_int(w.get("headshots"), field="headshots"),
        kills=read_int(w.get("kills"), field="kills"),
        rounds_played=read_int(w.get("roundsPlayed"), field="roundsPlayed"),
        rounds_won=read_int(w.get("roundsWon"), field="roundsWon"),
        rounds_lost=read_int(w.get("roundsLost"), field="roundsLost"),
        rounds_with_kill=unwrap_number(w.get("roundsWithAKill"), field="roundsWithAKill"),
        rounds_with_multikill=unwrap_number(w.get("roundsWithMultikill"), field="roundsWithMultikill"),
        headshot_percentage=unwrap_number(w.get("headshotAccuracy"), field="headshotAccuracy"),
    )


def parse_weapon_types(value: Any, *, field: str) -> tuple[WeaponTypeBlock, ...] | None:
    slot = optional_mapping(value, field=field)
    if slot is None:
        return None

    types: list[WeaponTypeBlock] = []
    for raw_type in optional_list(slot.get("weaponTypes"), field=f"{field}.weaponTypes"):
        t = require_mapping(raw_type, field=f"{field}.weaponTypes[]")
        type_name = optional_str(t, "weaponType")
        if type_name is None:
            raise MalformedValue("Weapon type entry is missing 'weaponType'", {"slot": field})
        types.append(
            WeaponTypeBlock(
                weapon_type=type_name,
                weapons=tuple(parse_weapon(w) for w in optional_list(t.get("weapons"), field="weapons")),
            )
        )
    return tuple(types)


def parse_weapon_roles(item: Mapping[str, Any], _records: TeamRoleRecordDecoder) -> WeaponRolesBlock:
    team_roles = optional_mapping(item.get("teamRoles"), field="teamRoles")
    if team_roles is None:
        return WeaponRolesBlock()

    roles: dict[TeamRole, WeaponSlotsBlock] = {}
    for key, raw_role in team_roles.items():
        role = role_for_key(key)
        if role is None:
            continue
        role_obj = optional_mapping(raw_role, field=f"teamRoles.{key}")
        if role_obj is None:
            continue
        slots = optional_mapping(role_obj.get("weaponSlots"), field="weaponSlots") or {}
        roles[role] = WeaponSlotsBlock(
            primary=parse_weapon_types(slots.get("primaryWeapons"), field="primaryWeapons"),
            secondary=parse_weapon_types(slots.get("secondaryWeapons"), field="secondaryWeapons"),
        )
    return WeaponRolesBlock(roles=roles)


def parse_team_roles(item: Mapping[str, Any], records: TeamRoleRecordDecoder) -> TeamRoleBucket:
    return records.decode_bucket(item.get("teamRoles"))


SectionParser = Callable[[Mapping[str, Any], TeamRoleRecordDecoder], SectionPayload]

SECTION_PARSERS: dict[SectionShape, SectionParser] = {
    SectionShape.TEAM_ROLES: parse_team_roles,
    SectionShape.TEAM_ROLE_WEAPONS: parse_weapon_roles,
}


def _find_platforms(root: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """Locate the `platforms` object in either response generation."""

    profile_data = optional_mapping(root.get("profileData"), field="profileData")
    if profile_data is None:
        return optional_mapping(root.get("platforms"), field="platforms")

    user_id = optional_str(root, "userId")
    if user_id is None:
        if len(profile_data) != 1:
            raise MalformedValue(
                "Response has no 'userId' and more than one profile",
                {"profiles": sorted(profile_data)},
            )
        user_id = next(iter(profile_data))

    profile = optional_mapping(profile_data.get(user_id), field=f"profileData.{user_id}")
    if profile is None:
        return None
    return optional_mapping(profile.get("platforms"), field="platforms")


def _parse_date(root: Mapping[str, Any], key: str) -> date | None:
    try:
        return parse_compact_date(root.get(key))
    except ValueError as e:
        raise MalformedValue(f"Invalid date for '{key}'", {"value": root.get(key)}) from e


def decode_envelope(
    data: bytes | str,
    *,
    game_modes: Iterable[GameMode],
    section_shape: SectionShape,
    records: TeamRoleRecordDecoder,
    sections: DiscriminatorTable[SectionShape] | None = None,
    platform_key: str = PLATFORM_KEY,
) -> RawEnvelope:
    """
    Decode a playerstats response into per-game-mode typed sections.

    Only `game_modes` are read; absent game-mode keys are skipped. Each section's
    `type` tag must resolve to `section_shape`.
    """
    table = sections or default_section_table()
    root = load_json_object(data)

    time_from = _parse_date(root, "startDate")
    time_to = _parse_date(root, "endDate")

    platforms = _find_platforms(root)
    platform = optional_mapping(platforms.get(platform_key), field=platform_key) if platforms else None
    modes = optional_mapping(platform.get("gameModes"), field="gameModes") if platform else None
    if modes is None:
        logger.debug("No gameModes in response")
        return RawEnvelope(time_from=time_from, time_to=time_to)

    wanted = tuple(game_modes)
    for key in modes:
        if key not in {m.value for m in wanted}:
            logger.debug("Skipping game mode %r not read by this aggregation", key)

    decoded: dict[GameMode, TypedSection] = {}
    for mode in wanted:
        raw = modes.get(mode.value)
        if raw is None:
            continue
        item = require_mapping(raw, field=f"gameModes.{mode.value}")
        tag = optional_str(item, "type")
        shape = table.resolve(tag, accepted=(section_shape,))
        payload = SECTION_PARSERS[shape](item, records)
        decoded[mode] = TypedSection(tag=tag, shape=shape, payload=payload)

    return RawEnvelope(sections=decoded, time_from=time_from, time_to=time_to)
