from __future__ import annotations

import pytest

from r6stats.stats.errors import DiscriminatorMismatch
from r6stats.stats.registry import (
    DiscriminatorTable,
    default_record_table,
    default_section_table,
)
from r6stats.stats.types import RecordShape, SectionShape


def test_default_tables_resolve_known_tags() -> None:
    sections = default_section_table()
    records = default_record_table()

    assert sections.resolve("Team roles") is SectionShape.TEAM_ROLES
    assert sections.resolve("Team roles weapons") is SectionShape.TEAM_ROLE_WEAPONS
    assert records.resolve("Seasonal") is RecordShape.DETAILED
    assert records.resolve("Generalized") is RecordShape.DETAILED
    assert records.resolve("Moving Point Average Trend") is RecordShape.MOVING_TREND


def test_absent_tag_uses_table_default() -> None:
    assert default_section_table().resolve(None) is SectionShape.TEAM_ROLES
    assert default_section_table().resolve("") is SectionShape.TEAM_ROLES


def test_absent_tag_without_default_is_a_mismatch() -> None:
    table: DiscriminatorTable[RecordShape] = DiscriminatorTable(label="team role")
    table.register("Seasonal", RecordShape.DETAILED)

    with pytest.raises(DiscriminatorMismatch):
        table.resolve(None)


def test_default_record_table_requires_a_tag() -> None:
    with pytest.raises(DiscriminatorMismatch):
        default_record_table().resolve(None)
    with pytest.raises(DiscriminatorMismatch):
        default_record_table().resolve("")


def test_unknown_tag_is_a_mismatch() -> None:
    with pytest.raises(DiscriminatorMismatch) as exc:
        default_section_table().resolve("Team roles operators")
    assert exc.value.context is not None
    assert exc.value.context["tag"] == "Team roles operators"


def test_known_tag_outside_accepted_shapes_is_a_mismatch() -> None:
    with pytest.raises(DiscriminatorMismatch):
        default_record_table().resolve("Seasonal", accepted=(RecordShape.MOVING_TREND,))


def test_register_extends_vocabulary_and_rejects_duplicates() -> None:
    table = default_section_table()
    table.register("Team roles v2", SectionShape.TEAM_ROLES)
    assert table.resolve("Team roles v2") is SectionShape.TEAM_ROLES

    with pytest.raises(ValueError):
        table.register("Team roles", SectionShape.TEAM_ROLE_WEAPONS)


def test_copy_does_not_share_registrations() -> None:
    table = default_record_table()
    other = table.copy()
    other.register("Seasonal v2", RecordShape.DETAILED)

    assert "Seasonal v2" in other.tags()
    assert "Seasonal v2" not in table.tags()
