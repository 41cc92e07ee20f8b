from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from r6stats.cli.app import app
from r6stats.core.config import Settings


def test_cli_help_smoke() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "decode" in result.stdout
    assert "stats" in result.stdout
    assert "ranked" in result.stdout


def test_cli_decode_prints_json(tmp_path: Path) -> None:
    path = tmp_path / "summary.json"
    path.write_text(
        json.dumps(
            {
                "userId": "u-1",
                "profileData": {
                    "u-1": {
                        "platforms": {
                            "PC": {
                                "gameModes": {
                                    "casual": {
                                        "type": "Team roles",
                                        "teamRoles": {"Attacker": [{"type": "Seasonal", "kills": 10}]},
                                    }
                                }
                            }
                        }
                    }
                },
            }
        )
    )

    runner = CliRunner()
    result = runner.invoke(app, ["decode", str(path), "--kind", "summary"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["casual"]["attack"]["kills"] == 10
    assert data["ranked"] is None


def test_cli_decode_reports_mismatch(tmp_path: Path) -> None:
    path = tmp_path / "weapons.json"
    path.write_text(
        json.dumps({"platforms": {"PC": {"gameModes": {"casual": {"type": "Team roles weapons"}}}}})
    )

    runner = CliRunner()
    result = runner.invoke(app, ["decode", str(path), "--kind", "summary"])

    assert result.exit_code == 1


def test_cli_decode_prints_named_results(tmp_path: Path) -> None:
    path = tmp_path / "operators.json"
    path.write_text(
        json.dumps(
            {
                "platforms": {
                    "PC": {
                        "gameModes": {
                            "ranked": {
                                "type": "Team roles",
                                "teamRoles": {
                                    "Defender": [{"type": "Seasonal", "statsDetail": "Jager", "kills": 7}]
                                },
                            }
                        }
                    }
                }
            }
        )
    )

    runner = CliRunner()
    result = runner.invoke(app, ["decode", str(path), "--kind", "operators", "--totals", "sum"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["ranked"]["defence"]["Jager"]["kills"] == 7
    assert data["ranked"]["defence"]["All"]["kills"] == 7


def test_cli_decode_reports_invalid_alias_configuration(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "summary.json"
    path.write_text("{}")
    monkeypatch.setattr(
        "r6stats.cli.app.settings", Settings(section_type_aliases={"Team roles v2": "bogus"})
    )

    runner = CliRunner()
    result = runner.invoke(app, ["decode", str(path)])

    assert result.exit_code == 2
    assert "R6STATS_SECTION_TYPE_ALIASES" in result.output


def test_cli_ranked_reports_missing_credentials(monkeypatch) -> None:
    monkeypatch.setattr("r6stats.cli.app.settings", Settings(ubi_email=None, ubi_password=None))

    runner = CliRunner()
    result = runner.invoke(app, ["ranked", "Player.One"])

    assert result.exit_code == 2
    assert "R6STATS_UBI_EMAIL" in result.output
