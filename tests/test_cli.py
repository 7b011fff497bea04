"""Tests for CLI commands."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from pnplan.cli import app

runner = CliRunner()


class TestMainCommands:
    """Tests for main CLI commands."""

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "nutrition" in result.output.lower()

    def test_formulas(self):
        result = runner.invoke(app, ["formulas", "--route", "Peripheral"])
        assert result.exit_code == 0
        assert "PN001" in result.output

    def test_formulas_no_match(self):
        result = runner.invoke(app, ["formulas", "--emulsion", "Nothing"])
        assert result.exit_code == 1


class TestOptimizeCommand:
    """Tests for the optimize command."""

    def test_json_output(self, tmp_path):
        result = runner.invoke(
            app,
            [
                "optimize",
                "--config", str(tmp_path / "none.yaml"),
                "--kcal-min", "1000",
                "--kcal-max", "1500",
                "--protein-min", "25",
                "--protein-max", "40",
                "--volume-max", "2000",
                "--formula", "PN001",
                "--formula", "PN002",
                "--formula", "PN003",
                "--output", "json",
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["result"]["status"] == "Optimal"
        assert data["result"]["total_cost"] == 68.9

    def test_custom_cost(self, tmp_path):
        result = runner.invoke(
            app,
            [
                "optimize",
                "--config", str(tmp_path / "none.yaml"),
                "--kcal-min", "1000",
                "--kcal-max", "1500",
                "--protein-min", "25",
                "--protein-max", "40",
                "--volume-max", "2000",
                "--formula", "PN001",
                "--formula", "PN002",
                "--formula", "PN003",
                "--cost", "PN003=30",
                "--output", "json",
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["result"]["selected_bags"][0]["formula_id"] == "PN003"

    def test_unknown_cost_formula(self, tmp_path):
        result = runner.invoke(
            app, ["optimize", "--config", str(tmp_path / "none.yaml"), "--cost", "PN999=10"]
        )
        assert result.exit_code == 1
        assert "Unknown formula" in result.output

    def test_malformed_cost(self, tmp_path):
        result = runner.invoke(
            app, ["optimize", "--config", str(tmp_path / "none.yaml"), "--cost", "PN001"]
        )
        assert result.exit_code != 0

    def test_infeasible_exits_nonzero(self, tmp_path):
        result = runner.invoke(
            app,
            [
                "optimize",
                "--config", str(tmp_path / "none.yaml"),
                "--kcal-min", "10000",
                "--kcal-max", "11000",
                "--volume-max", "1000",
                "--no-bag-limit",
            ],
        )

        assert result.exit_code == 1
        assert "INFEASIBLE" in result.output

    def test_defaults_from_config(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("defaults:\n  output_format: json\n")

        result = runner.invoke(app, ["optimize", "--config", str(config_path)])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["constraints"]["kcal_min"] == 1800
        assert data["constraints"]["max_bags"] == 5
