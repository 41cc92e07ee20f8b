from __future__ import annotations

from pathlib import Path

import typer

from r6stats.cli.common import (
    KIND_HELP,
    configure_logging,
    dump_result,
    parse_kind,
    parse_totals_mode,
)
from r6stats.core.config import settings
from r6stats.stats.decoder import StatsDecoder
from r6stats.stats.errors import StatsDecodeError
from r6stats.ubi.client import UbiClient
from r6stats.ubi.errors import UbiError

app = typer.Typer(no_args_is_help=True, help="Rainbow Six Siege player statistics.")


def _config_error(e: Exception) -> typer.Exit:
    typer.echo(f"Invalid configuration: {e}", err=True)
    return typer.Exit(code=2)


def _decoder() -> StatsDecoder:
    try:
        return StatsDecoder.from_settings(settings)
    except ValueError as e:
        raise _config_error(e) from e


def _client() -> UbiClient:
    try:
        return UbiClient.from_settings(settings)
    except (RuntimeError, ValueError) as e:
        raise _config_error(e) from e


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (defaults to R6STATS_LOG_LEVEL)."
    ),
) -> None:
    configure_logging(log_level or settings.log_level)


@app.command("decode")
def decode_cmd(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved playerstats response."),
    kind: str = typer.Option("summary", "--kind", help=KIND_HELP),
    totals: str = typer.Option(
        "mean", "--totals", help="Synthetic 'All' row for operators/maps: mean or sum."
    ),
) -> None:
    """Decode a saved playerstats response and print it as JSON."""

    aggregation = parse_kind(kind)
    totals_mode = parse_totals_mode(totals)
    decoder = _decoder()
    try:
        result = decoder.decode(path.read_bytes(), aggregation, totals_mode=totals_mode)
    except StatsDecodeError as e:
        typer.echo(f"Decode failed: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(dump_result(result))


@app.command("stats")
def stats_cmd(
    username: str = typer.Argument(..., help="Uplay username."),
    season: str = typer.Option(..., "--season", help="Season id (e.g. Y8S2)."),
    kind: str = typer.Option("summary", "--kind", help=KIND_HELP),
    totals: str = typer.Option(
        "mean", "--totals", help="Synthetic 'All' row for operators/maps: mean or sum."
    ),
) -> None:
    """Fetch a player's stats and print them as JSON."""

    aggregation = parse_kind(kind)
    totals_mode = parse_totals_mode(totals)
    try:
        with _client() as client:
            profile = client.resolve_profile(username)
            result = client.get_stats(profile, season, aggregation, totals_mode=totals_mode)
    except (UbiError, StatsDecodeError) as e:
        typer.echo(f"Request failed: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(dump_result(result))


@app.command("ranked")
def ranked_cmd(
    username: str = typer.Argument(..., help="Uplay username."),
    seasons: int = typer.Option(1, "--seasons", min=1, help="Number of past ranked seasons."),
) -> None:
    """Fetch a player's ranked skill history and print it as JSON."""

    try:
        with _client() as client:
            profile = client.resolve_profile(username)
            history = client.get_ranked_history(profile, seasons)
    except (UbiError, StatsDecodeError) as e:
        typer.echo(f"Request failed: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(dump_result(history))
