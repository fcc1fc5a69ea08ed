"""Integration tests for CLI functionality."""

import io
import json
import subprocess
import sys
from pathlib import Path

import pytest

from calcflow_pkg.app import CalcFlowApp
from calcflow_pkg.cli import Repl, main_entry, parse_matrix_text, run_once

ROOT = Path(__file__).resolve().parents[1]


def run_cli(*args, timeout=60):
    return subprocess.run(
        [sys.executable, "-m", "calcflow_pkg", *args],
        capture_output=True,
        text=True,
        timeout=timeout,
        cwd=ROOT,
    )


def test_cli_version():
    """Test --version flag."""
    result = run_cli("--version")
    assert result.returncode == 0
    assert result.stdout.strip() != ""


def test_cli_health_check():
    """Test --health-check command."""
    result = run_cli("--health-check")
    assert result.returncode in [0, 1]
    assert "health check" in result.stdout.lower()


def test_cli_eval_human():
    result = run_cli("-e", "2+3*4")
    assert result.returncode == 0
    assert result.stdout.strip() == "14"


def test_cli_eval_json():
    """Test CLI evaluation with JSON output."""
    result = run_cli("-e", "7/2", "--format", "json")
    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert data["result"] == "3.5"
    assert data["history"] == ["7/2 = 3.5"]


def test_cli_invalid_expression():
    result = run_cli("-e", "2+")
    assert result.returncode == 1
    assert result.stdout.startswith("Error:")


def test_cli_matrix_inverse():
    result = run_cli("-m", "matrix", "--op", "inv", "-e", "1,0,0;0,1,0;0,0,1")
    assert result.returncode == 0
    assert json.loads(result.stdout) == [[1, 0, 0], [0, 1, 0], [0, 0, 1]]


def test_cli_power_tower_finishes():
    result = run_cli("-e", "9^9^9", timeout=30)
    assert result.returncode == 1
    assert "too complex" in result.stdout

    result = run_cli("-m", "calc", "-e", "x^(9^9^9)", timeout=30)
    assert result.returncode == 1


def test_cli_negative_division_by_zero():
    result = run_cli("--eval=-1/0")
    assert result.returncode == 0
    assert result.stdout.strip() == "-Infinity"


def test_cli_calc():
    result = run_cli("-m", "calc", "-e", "x^2 + 3x + 1")
    assert result.returncode == 0
    assert result.stdout.strip() == "d/dx = 2*x + 3"


class TestMainEntry:
    def test_empty_eval(self, capsys):
        assert main_entry(["-e", "   "]) == 1
        assert "Empty input" in capsys.readouterr().out

    def test_matrix_determinant(self, capsys):
        assert main_entry(["-m", "matrix", "-e", "1,2,3;4,5,6;7,8,10"]) == 0
        assert capsys.readouterr().out.strip() == "-3.0000"

    def test_singular_matrix(self, capsys):
        assert main_entry(["-m", "matrix", "--op", "inv", "-e", "0,0,0;0,0,0;0,0,0"]) == 1
        assert "determinant is zero" in capsys.readouterr().out

    def test_graph_json(self, capsys):
        assert main_entry(["-m", "graph", "-e", "x^2", "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert len(data["points"]) == 101
        assert data["points"][0] == [-10, 100]

    def test_graph_save(self, tmp_path, capsys):
        path = tmp_path / "plot.png"
        assert main_entry(["-m", "graph", "-e", "sin(x)", "--save-plot", str(path)]) == 0
        assert path.exists()

    def test_graph_save_to_missing_directory(self, tmp_path, capsys):
        path = tmp_path / "missing" / "plot.png"
        assert main_entry(["-m", "graph", "-e", "x^2", "--save-plot", str(path)]) == 1
        assert capsys.readouterr().out.startswith("Error: Cannot save plot")
        assert not path.exists()


class TestRunOnce:
    def test_parse_matrix_text(self):
        assert parse_matrix_text("1,2,3; 4 5 6;7,8,9") == [
            ["1", "2", "3"],
            ["4", "5", "6"],
            ["7", "8", "9"],
        ]

    def test_short_matrix_row(self):
        res = run_once("matrix", "1,2;3,4")
        assert not res.ok
        assert res.error.startswith("Invalid matrix")

    def test_graph_without_finite_samples(self):
        res = run_once("graph", "2+")
        assert not res.ok
        assert res.points == []

    def test_calc_other_variable(self):
        res = run_once("calc", "y^3", variable="y")
        assert res.ok
        assert res.result == "3*y**2"


@pytest.fixture
def repl():
    return Repl(CalcFlowApp(), color=False, out=io.StringIO())


def lines_after(repl, *inputs):
    start = len(repl.out.getvalue())
    for line in inputs:
        assert repl.handle(line)
    return repl.out.getvalue()[start:].splitlines()


class TestRepl:
    def test_home_menu(self, repl):
        repl.show_home()
        text = repl.out.getvalue()
        assert "1. Calculator (basic)" in text
        assert "4. Calculus (calc)" in text

    def test_basic_session(self, repl):
        lines_after(repl, "1")
        assert repl.app.mode == "basic"
        assert lines_after(repl, "12+3")[-1] == "12+3"
        assert lines_after(repl, "<")[-1] == "12+"
        assert lines_after(repl, "4=")[-1] == "16"
        assert lines_after(repl, ":history") == ["12+4 = 16"]

    def test_basic_error(self, repl):
        repl.handle("basic")
        assert lines_after(repl, "2+=")[-1] == "Error"
        assert lines_after(repl, "C")[-1] == "0"

    def test_graph_session(self, repl):
        repl.handle("graph")
        assert lines_after(repl, "x^2")[-1] == "101 points"
        assert repl.prompt() == "graph> "

    def test_graph_save_failure_keeps_session(self, repl, tmp_path):
        repl.handle("graph")
        bad_path = tmp_path / "missing" / "plot.png"
        lines = lines_after(repl, f":save {bad_path}")
        assert lines[0].startswith("Error:")
        assert repl.app.mode == "graph"
        assert lines_after(repl, "x^2")[-1] == "101 points"
        good_path = tmp_path / "plot.png"
        assert lines_after(repl, f":save {good_path}") == [f"Saved {good_path}"]

    def test_matrix_session(self, repl):
        repl.handle("matrix")
        lines_after(repl, "row 0 1 0 0", "row 1 0 1 0", "row 2 0 0 1")
        assert lines_after(repl, "det") == ["1.0000"]
        assert lines_after(repl, "set 5 5 1")[0].startswith("Error:")

    def test_calc_session(self, repl):
        repl.handle("calc")
        assert lines_after(repl, "sin(x)") == ["d/dx = cos(x)"]
        lines_after(repl, ":var t")
        assert lines_after(repl, "t^2") == ["d/dt = 2*t"]
        assert lines_after(repl, "2+") == ["Invalid expression"]

    def test_back_discards_state(self, repl):
        repl.handle("basic")
        repl.handle("42")
        repl.handle(":back")
        assert repl.app.active is None
        repl.handle("basic")
        assert repl.app.active.value == "0"

    def test_theme_and_quit(self, repl):
        assert lines_after(repl, ":theme") == ["Theme: light"]
        assert repl.handle("quit") is False

    def test_unknown_mode(self, repl):
        assert lines_after(repl, "scientific") == ["Unknown mode: scientific"]
