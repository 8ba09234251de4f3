# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the pyktlint command line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import FAILING_SOURCE, FakeEngine, write_source
from typer.testing import CliRunner

from pyktlint.cli.app import app
from pyktlint.project import Project

runner = CliRunner()


@pytest.fixture
def cli_engine(monkeypatch: pytest.MonkeyPatch) -> FakeEngine:
    engine = FakeEngine()
    monkeypatch.setattr(Project, "default_engine", lambda self: engine)
    return engine


def _task_lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if line.startswith("ktlint")]


def test_tasks_listing_shows_aggregates(tmp_path: Path) -> None:
    result = runner.invoke(app, ["tasks", "--root", str(tmp_path)])

    assert result.exit_code == 0
    lines = _task_lines(result.stdout)
    assert len(lines) == 4
    assert lines[2].startswith("ktlintCheck - ")


def test_tasks_all_lists_every_task(tmp_path: Path) -> None:
    result = runner.invoke(app, ["tasks", "--all", "--root", str(tmp_path)])

    assert result.exit_code == 0
    lines = _task_lines(result.stdout)
    assert len(lines) == 10
    assert any(line.startswith("ktlintKotlinScriptCheck - ") for line in lines)


def test_dependencies_show_coordinates(tmp_path: Path) -> None:
    (tmp_path / ".pyktlint.toml").write_text('version = "0.26.0"\n', encoding="utf-8")

    result = runner.invoke(app, ["dependencies", "--root", str(tmp_path)])

    assert result.exit_code == 0
    assert "ktlint - Main ktlint-gradle configuration" in result.stdout
    assert "\\--- com.github.shyiko:ktlint:0.26.0" in result.stdout


def test_run_reports_violations(tmp_path: Path, cli_engine: FakeEngine) -> None:
    write_source(tmp_path, "src/main/kotlin/Fail.kt", FAILING_SOURCE)
    write_source(tmp_path, "src/main/kotlin/Wrong.kt", "class Test\n")

    result = runner.invoke(app, ["run", "ktlintCheck", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 1
    assert "> Task :ktlintMainSourceSetCheck FAILED" in result.stdout
    assert "Unnecessary space(s)" in result.stdout
    assert "class Test should be declared in a file named Test.kt (cannot be auto-corrected)" in result.stdout
    assert "BUILD FAILED" in result.stdout


def test_run_clean_build_succeeds_then_is_up_to_date(tmp_path: Path, cli_engine: FakeEngine) -> None:
    write_source(tmp_path, "src/main/kotlin/Clean.kt")
    args = ["run", "ktlintCheck", "--root", str(tmp_path), "--no-emoji"]

    first = runner.invoke(app, args)
    second = runner.invoke(app, args)

    assert first.exit_code == 0
    assert "> Task :ktlintMainSourceSetCheck SUCCESS" in first.stdout
    assert "BUILD SUCCESSFUL" in first.stdout
    assert "> Task :ktlintMainSourceSetCheck UP-TO-DATE" in second.stdout


def test_run_honours_filter_property(tmp_path: Path, cli_engine: FakeEngine) -> None:
    write_source(tmp_path, "src/main/kotlin/Fail.kt", FAILING_SOURCE)
    write_source(tmp_path, "src/main/kotlin/Clean.kt")

    result = runner.invoke(
        app,
        [
            "run",
            "ktlintCheck",
            "--root",
            str(tmp_path),
            "--no-emoji",
            "-P",
            "internalKtlintGitFilter=src\\main\\kotlin\\Clean.kt",
        ],
    )

    assert result.exit_code == 0
    assert "> Task :ktlintMainSourceSetCheck SUCCESS" in result.stdout
    assert [path.name for _, files in cli_engine.calls for path in files] == ["Clean.kt"]


def test_run_fails_for_unsupported_version(tmp_path: Path, cli_engine: FakeEngine) -> None:
    write_source(tmp_path, "src/main/kotlin/Clean.kt")
    (tmp_path / ".pyktlint.toml").write_text('version = "0.21.0"\n', encoding="utf-8")

    result = runner.invoke(app, ["run", "ktlintCheck", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 1
    assert "Ktlint versions less than 0.22.0 are not supported. Detected Ktlint version: 0.21.0." in result.stdout


def test_run_unknown_task(tmp_path: Path, cli_engine: FakeEngine) -> None:
    result = runner.invoke(app, ["run", "ktlintNope", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 1
    assert "Task 'ktlintNope' not found in project." in result.stdout


def test_run_rejects_invalid_configuration(tmp_path: Path, cli_engine: FakeEngine) -> None:
    (tmp_path / ".pyktlint.toml").write_text("jobs = 0\n", encoding="utf-8")

    result = runner.invoke(app, ["run", "ktlintCheck", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 2


def test_run_rejects_malformed_property(tmp_path: Path, cli_engine: FakeEngine) -> None:
    result = runner.invoke(app, ["run", "ktlintCheck", "--root", str(tmp_path), "-P", "novalue"])

    assert result.exit_code == 2


def test_install_hook_command(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()

    result = runner.invoke(app, ["install-hook", "--root", str(tmp_path), "--format", "--no-emoji"])

    assert result.exit_code == 0
    assert "Installed pre-commit hook" in result.stdout
    assert "ktlintFormat" in (tmp_path / ".git" / "hooks" / "pre-commit").read_text(encoding="utf-8")
