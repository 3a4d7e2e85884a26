"""CLI tests using click's CliRunner."""

import json

from click.testing import CliRunner

from nestegg.__main__ import cli


def test_run_prints_summary():
    result = CliRunner().invoke(cli, ["run", "-n", "25", "-y", "3", "--seed", "1"])
    assert result.exit_code == 0, result.output
    assert "25 paths over 3 years (36 months)" in result.output
    assert "Avg final:" in result.output
    assert "return %" in result.output


def test_run_json_is_deterministic():
    args = ["run", "-n", "10", "-y", "2", "--seed", "5", "--json"]
    first = CliRunner().invoke(cli, args)
    second = CliRunner().invoke(cli, args)
    assert first.exit_code == 0, first.output
    data = json.loads(first.output)
    assert len(data["monthly"]) == 24
    assert data["parameters"]["simulation_count"] == 10
    assert first.output == second.output


def test_run_with_overrides():
    args = [
        "run", "-n", "2", "-y", "1", "--initial", "1000", "--monthly", "0",
        "--annual-return", "0.12", "--volatility", "0", "--json",
    ]
    result = CliRunner().invoke(cli, args)
    data = json.loads(result.output)
    assert round(data["final_stats"]["p50"], 2) == 1120.0
    assert round(data["annual_returns"][0]["return_pct"], 6) == 12.0


def test_run_writes_csv(tmp_path):
    target = tmp_path / "paths.csv"
    result = CliRunner().invoke(
        cli, ["run", "-n", "3", "-y", "1", "--seed", "2", "--csv", str(target)]
    )
    assert result.exit_code == 0, result.output
    lines = target.read_text(encoding="utf-8").split("\n")
    assert len(lines) == 13
    assert lines[0] == "month,Sim_1,Sim_2,Sim_3"


def test_export_command(tmp_path):
    target = tmp_path / "montecarlo.csv"
    result = CliRunner().invoke(
        cli, ["export", "-n", "4", "-y", "2", "--seed", "3", "-o", str(target)]
    )
    assert result.exit_code == 0, result.output
    assert "Wrote 4 paths x 24 months" in result.output
    assert len(target.read_text(encoding="utf-8").split("\n")) == 25


def test_rejects_non_positive_years():
    result = CliRunner().invoke(cli, ["run", "-y", "0"])
    assert result.exit_code != 0
