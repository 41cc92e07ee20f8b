from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Generic, TypeVar

from .errors import DiscriminatorMismatch
from .types import RecordShape, SectionShape

ShapeT = TypeVar("ShapeT", SectionShape, RecordShape)

# Wire vocabulary. Tags vary between service generations; extend the tables
# instead of branching on strings elsewhere.
TEAM_ROLES_TAG = "Team roles"
TEAM_ROLE_WEAPONS_TAG = "Team roles weapons"
SEASONAL_TAG = "Seasonal"
MOVING_POINT_TAG = "Moving Point Average Trend"
GENERALIZED_TAG = "Generalized"


class DiscriminatorTable(Generic[ShapeT]):
    """Lookup table from a wire `type` tag to the payload shape it announces."""

    def __init__(self, *, label: str, default: ShapeT | None = None) -> None:
        self.label = label
        self.default = default
        self._shapes: dict[str, ShapeT] = {}

    def register(self, tag: str, shape: ShapeT) -> None:
        if tag in self._shapes:
            raise ValueError(f"Duplicate {self.label} tag registration: {tag!r}")
        self._shapes[tag] = shape

    def register_all(self, entries: Mapping[str, ShapeT]) -> None:
        for tag, shape in entries.items():
            self.register(tag, shape)

    def tags(self) -> Iterable[str]:
        return tuple(self._shapes)

    def resolve(self, tag: str | None, *, accepted: Iterable[ShapeT] | None = None) -> ShapeT:
        """Resolve `tag` to a shape, optionally checking it is one of `accepted`.

        An absent tag resolves to the table default when there is one.
        """
        if tag is None or tag == "":
            if self.default is None:
                raise DiscriminatorMismatch(f"Missing {self.label} type tag")
            shape = self.default
        else:
            found = self._shapes.get(tag)
            if found is None:
                raise DiscriminatorMismatch(
                    f"Unknown {self.label} type tag",
                    {"tag": tag, "known": sorted(self._shapes)},
                )
            shape = found

        if accepted is not None:
            allowed = tuple(accepted)
            if shape not in allowed:
                raise DiscriminatorMismatch(
                    f"Unexpected {self.label} type for this aggregation",
                    {"tag": tag, "shape": str(shape), "expected": [str(a) for a in allowed]},
                )
        return shape

    def copy(self) -> DiscriminatorTable[ShapeT]:
        other: DiscriminatorTable[ShapeT] = DiscriminatorTable(label=self.label, default=self.default)
        other.register_all(self._shapes)
        return other


def default_section_table() -> DiscriminatorTable[SectionShape]:
    # Legacy responses omit the tag for the only shape they have.
    table: DiscriminatorTable[SectionShape] = DiscriminatorTable(
        label="game mode", default=SectionShape.TEAM_ROLES
    )
    table.register(TEAM_ROLES_TAG, SectionShape.TEAM_ROLES)
    table.register(TEAM_ROLE_WEAPONS_TAG, SectionShape.TEAM_ROLE_WEAPONS)
    return table


def default_record_table() -> DiscriminatorTable[RecordShape]:
    # Every record carries its own tag in both generations.
    table: DiscriminatorTable[RecordShape] = DiscriminatorTable(label="team role")
    table.register(SEASONAL_TAG, RecordShape.DETAILED)
    table.register(GENERALIZED_TAG, RecordShape.DETAILED)
    table.register(MOVING_POINT_TAG, RecordShape.MOVING_TREND)
    return table
