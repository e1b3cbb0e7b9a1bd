"""Tests for the command-line driver."""

import json
import tempfile
from pathlib import Path

import yaml
from click.testing import CliRunner

from kubehygiene.cli.main import cli

from fakes import make_deployment, make_pod, make_pod_metrics

FULL = dict(rcpu="10m", rmem="10Mi", lcpu="10m", lmem="10Mi")


def write_snapshot(tmpdir, objects):
    path = Path(tmpdir) / "cluster.yaml"
    path.write_text(yaml.safe_dump_all(objects))
    return str(path)


class TestSanitizeCommand:
    """Tests for the sanitize command."""

    def test_json_output(self):
        """Test JSON output carries tallies and issues per kind."""
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            snapshot = write_snapshot(tmpdir, [
                make_deployment("d1", reps=0, **FULL),
                make_pod("p1", **FULL),
            ])

            result = runner.invoke(cli, ["sanitize", snapshot, "--format", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        deployments = data["sanitizers"]["deployment"]
        assert deployments["issues"]["default/d1"] == [
            {"group": "__root__", "level": "warn", "message": "Zero scale detected"},
        ]
        assert deployments["tally"]["grade"] == "F"
        assert data["sanitizers"]["pod"]["issues"]["default/p1"] == []
        assert data["errors"] == {}

    def test_kind_filter(self):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            snapshot = write_snapshot(tmpdir, [make_deployment("d1", **FULL), make_pod("p1")])

            result = runner.invoke(cli, ["sanitize", snapshot, "-k", "deployment", "-f", "json"])

        assert result.exit_code == 0, result.output
        assert list(json.loads(result.output)["sanitizers"]) == ["deployment"]

    def test_error_level_exit_code(self):
        """Test an ERROR-level resource fails the run."""
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            snapshot = write_snapshot(tmpdir, [make_deployment("d1", collisions=1, **FULL)])

            result = runner.invoke(cli, ["sanitize", snapshot, "-k", "deployment"])

        assert result.exit_code == 1
        assert "ReplicaSet collisions detected (1)" in result.output

    def test_over_allocs_with_config(self):
        """Test thresholds are read from the config file when opted in."""
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            snapshot = write_snapshot(tmpdir, [
                make_deployment("d1", **FULL),
                make_pod("p1", **FULL),
                make_pod_metrics("p1", "10m", "10Mi"),
            ])
            config = Path(tmpdir) / "hygiene.yaml"
            config.write_text("allocations:\n  cpu:\n    underPerc: 100\n")

            result = runner.invoke(cli, [
                "sanitize", snapshot, "-c", str(config), "-k", "deployment",
                "--over-allocs", "-f", "json",
            ])

        assert result.exit_code == 0, result.output
        issues = json.loads(result.output)["sanitizers"]["deployment"]["issues"]["default/d1"]
        assert [i["message"] for i in issues] == [
            "At current load, CPU under allocated. Current:20m vs Requested:10m (200.00%)",
        ]

    def test_sanitizer_failure_exit_code(self):
        """Test a sanitizer raising is reported and fails the run."""
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            snapshot = write_snapshot(tmpdir, [make_deployment("d1", rcpu="fred")])

            result = runner.invoke(
                cli, ["sanitize", snapshot, "-k", "deployment", "--over-allocs", "-f", "json"]
            )

        assert result.exit_code == 2
        assert "deployment" in json.loads(result.output)["errors"]

    def test_invalid_snapshot(self):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "bad.yaml"
            path.write_text("kind: [\n")

            result = runner.invoke(cli, ["sanitize", str(path)])

        assert result.exit_code == 2
        assert "Invalid snapshot file" in result.output


class TestConfigCommand:
    """Tests for the config command."""

    def test_shows_defaults(self):
        result = CliRunner().invoke(cli, ["config"])

        assert result.exit_code == 0
        assert "Sanitizer Thresholds" in result.output
        assert "Container restarts" in result.output
