from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping
from typing import Any

import typer

from r6stats.stats.types import AggregationKind, TotalsMode

KIND_HELP = "Aggregation kind: " + ", ".join(k.aggregation for k in AggregationKind) + "."


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format="%(levelname)s %(name)s: %(message)s")


def parse_kind(value: str) -> AggregationKind:
    try:
        return AggregationKind.from_name(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def parse_totals_mode(value: str) -> TotalsMode:
    try:
        return TotalsMode(value.strip().lower())
    except ValueError as e:
        raise typer.BadParameter(f"Unknown totals mode: {value!r}") from e


def to_jsonable(value: Any) -> Any:
    # Results hold read-only mappings, which dataclasses.asdict cannot copy.
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [to_jsonable(v) for v in value]
    return value


def dump_result(result: Any) -> str:
    return json.dumps(to_jsonable(result), indent=2, default=str)
