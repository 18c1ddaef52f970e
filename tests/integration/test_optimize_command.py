"""Integration tests for the optimize CLI command.

These tests verify the optimize command end-to-end, including:
- JSON layout output to a file
- Summary output
- Exit codes for success, configuration errors and unplaced pieces
"""

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from stonecut.cli.main import app

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "jobs"


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


def _write_job(tmp_path: Path, data: dict[str, Any]) -> Path:
    path = tmp_path / "job.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestOptimizeCommand:
    """Tests for the optimize command."""

    def test_kitchen_layout_written(self, runner: CliRunner, tmp_path: Path) -> None:
        output = tmp_path / "layout.json"
        result = runner.invoke(
            app, ["optimize", str(FIXTURES_PATH / "valid_kitchen.json"), "-o", str(output)]
        )

        assert result.exit_code == 0
        assert f"Layout written to {output}" in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["unplaced_pieces"] == []
        assert [g["material_id"] for g in data["material_groups"]] == ["calacatta", "nero"]
        assert data["total_slabs"] == len(data["slabs"])
        assert data["edge_allowance_mm"] == 10

    def test_summary_lines(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            [
                "optimize",
                str(FIXTURES_PATH / "valid_kitchen.json"),
                "--output",
                str(tmp_path / "layout.json"),
            ],
        )

        assert "Calacatta Quartz:" in result.output
        assert "Nero Marquina: 1 slab(s) of 2800x1600mm" in result.output
        assert "0 unplaced" in result.output
        assert "Lamination: 3 strip(s)" in result.output
        assert "Warning: [Calacatta Quartz] 'Kitchen: Back run'" in result.output

    def test_compact_output(
        self, runner: CliRunner, tmp_path: Path, job_data: dict[str, Any]
    ) -> None:
        """--indent 0 writes the layout on a single line."""
        output = tmp_path / "layout.json"
        result = runner.invoke(
            app,
            ["optimize", str(_write_job(tmp_path, job_data)), "-o", str(output), "--indent", "0"],
        )

        assert result.exit_code == 0
        text = output.read_text(encoding="utf-8")
        assert text.count("\n") == 1
        assert json.loads(text)["total_slabs"] == 1

    def test_verbose_flag_accepted(
        self, runner: CliRunner, tmp_path: Path, job_data: dict[str, Any]
    ) -> None:
        result = runner.invoke(
            app,
            [
                "optimize",
                str(_write_job(tmp_path, job_data)),
                "-o",
                str(tmp_path / "layout.json"),
                "--verbose",
            ],
        )
        assert result.exit_code == 0

    def test_missing_file_exit_code(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["optimize", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Job file not found" in result.output

    def test_material_error_exit_code(
        self, runner: CliRunner, tmp_path: Path, job_data: dict[str, Any]
    ) -> None:
        job_data["pieces"][0]["material_id"] = "onyx"
        output = tmp_path / "layout.json"
        result = runner.invoke(app, ["optimize", str(_write_job(tmp_path, job_data)), "-o", str(output)])

        assert result.exit_code == 1
        assert "No slab configuration" in result.output
        assert not output.exists()

    def test_unplaced_exit_code(
        self, runner: CliRunner, tmp_path: Path, job_data: dict[str, Any]
    ) -> None:
        """Unplaced pieces still produce a layout but exit with code 2."""
        job_data["pieces"][0].update({"length_mm": 4000, "width_mm": 700})
        job_data["options"] = {"allow_oversize_splitting": False}
        output = tmp_path / "layout.json"
        result = runner.invoke(app, ["optimize", str(_write_job(tmp_path, job_data)), "-o", str(output)])

        assert result.exit_code == 2
        assert json.loads(output.read_text(encoding="utf-8"))["unplaced_pieces"] == ["bench"]
        assert "1 unplaced" in result.output
