"""Tests for the click command-line interface."""

import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from netinsight.cli import main

SAMPLE = Path(__file__).resolve().parent.parent / "data" / "network.json"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def graph_file(tmp_path):
    target = tmp_path / "network.json"
    shutil.copy(SAMPLE, target)
    return str(target)


class TestInfluence:
    def test_table(self, runner, graph_file):
        result = runner.invoke(main, ["influence", graph_file, "--top", "3"])
        assert result.exit_code == 0, result.output
        assert "Top 3 contacts by influence" in result.output
        assert "#1" in result.output
        assert "#4" not in result.output

    def test_json(self, runner, graph_file):
        result = runner.invoke(main, ["influence", graph_file, "--json", "-n", "2"])
        assert result.exit_code == 0, result.output
        assert '"rank": 1' in result.output
        assert '"factors"' in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["influence", str(tmp_path / "nope.json")])
        assert result.exit_code != 0


class TestCommunities:
    def test_summary(self, runner, graph_file):
        result = runner.invoke(main, ["communities", graph_file])
        assert result.exit_code == 0, result.output
        assert "[company] Acme: 3 members" in result.output
        assert "[tag] Finance: 3 members" in result.output
        assert "converged" in result.output

    def test_json(self, runner, graph_file):
        result = runner.invoke(main, ["communities", graph_file, "--json"])
        assert result.exit_code == 0, result.output
        assert '"memberships"' in result.output
        assert '"clusters_converged": true' in result.output


class TestMetrics:
    def test_summary(self, runner, graph_file):
        result = runner.invoke(main, ["metrics", graph_file])
        assert result.exit_code == 0, result.output
        assert "Contacts:          9" in result.output
        assert "Connections:       9" in result.output
        assert "Largest component: 8" in result.output

    def test_json(self, runner, graph_file):
        result = runner.invoke(main, ["metrics", graph_file, "--json"])
        assert result.exit_code == 0, result.output
        assert '"total_nodes": 9' in result.output


class TestInfo:
    def test_defaults(self, runner):
        result = runner.invoke(main, ["info"])
        assert result.exit_code == 0, result.output
        assert "max_passes: 10" in result.output

    def test_with_config(self, runner, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("clustering:\n  max_passes: 3\n")
        result = runner.invoke(main, ["--config", str(cfg), "info"])
        assert result.exit_code == 0, result.output
        assert "max_passes: 3" in result.output

    def test_bad_config(self, runner, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("clustering:\n  bogus: 1\n")
        result = runner.invoke(main, ["--config", str(cfg), "info"])
        assert result.exit_code != 0
        assert isinstance(result.exception, ValueError)

    def test_missing_config(self, runner, tmp_path):
        result = runner.invoke(main, ["--config", str(tmp_path / "absent.yaml"), "info"])
        assert result.exit_code != 0
        assert isinstance(result.exception, FileNotFoundError)
